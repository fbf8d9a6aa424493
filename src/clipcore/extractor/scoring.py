"""
Content scoring.

Scores live in a ``ScoreTable`` side-table keyed by node identity rather than
on the nodes themselves, so a fresh table per attempt guarantees that nothing
leaks between retries.
"""

from __future__ import annotations

import math
from typing import Dict, Iterator, List, Optional, Tuple

import structlog
from bs4 import Tag

from . import dom, patterns
from .models import Flag

logger = structlog.get_logger(__name__)

_BASE_SCORES = {
    "div": 5,
    "pre": 3,
    "td": 3,
    "blockquote": 3,
    "address": -3,
    "ol": -3,
    "ul": -3,
    "dl": -3,
    "dd": -3,
    "dt": -3,
    "li": -3,
    "form": -3,
    "h1": -5,
    "h2": -5,
    "h3": -5,
    "h4": -5,
    "h5": -5,
    "h6": -5,
    "th": -5,
}

MAX_ANCESTOR_LEVELS = 5
MIN_PARAGRAPH_LENGTH = 25


class ScoreTable:
    """Content scores by node identity; a missing entry means "not scored yet"."""

    def __init__(self) -> None:
        # The node is held alongside its score so its id cannot be recycled.
        self._entries: Dict[int, Tuple[Tag, float]] = {}

    def __contains__(self, node: object) -> bool:
        return id(node) in self._entries

    def __len__(self) -> int:
        return len(self._entries)

    def __iter__(self) -> Iterator[Tag]:
        return (node for node, _ in self._entries.values())

    def get(self, node: Tag, default: Optional[float] = None) -> Optional[float]:
        entry = self._entries.get(id(node))
        return entry[1] if entry is not None else default

    def __getitem__(self, node: Tag) -> float:
        return self._entries[id(node)][1]

    def __setitem__(self, node: Tag, score: float) -> None:
        self._entries[id(node)] = (node, score)

    def add(self, node: Tag, delta: float) -> None:
        self[node] = self[node] + delta


def class_weight(node: Tag, flags: Flag) -> int:
    """+/-25 per positive or negative match on class and on id; 0 unless WEIGHT_CLASSES is set."""
    if not flags & Flag.WEIGHT_CLASSES:
        return 0

    weight = 0
    for value in (dom.class_name(node), dom.node_id(node)):
        if not value:
            continue
        if any(pattern.search(value) for pattern in patterns.NEGATIVE):
            weight -= 25
        if patterns.POSITIVE.search(value):
            weight += 25
    return weight


class TopCandidates:
    """
    Bounded list of the best candidates, highest score first.

    A candidate is inserted before the first entry it strictly beats, so an
    equal score never displaces an earlier entry.
    """

    def __init__(self, capacity: int = patterns.DEFAULT_N_TOP_CANDIDATES) -> None:
        self.capacity = capacity
        self._items: List[Tuple[Tag, float]] = []

    def offer(self, node: Tag, score: float) -> None:
        for index in range(self.capacity):
            if index >= len(self._items) or score > self._items[index][1]:
                self._items.insert(index, (node, score))
                if len(self._items) > self.capacity:
                    self._items.pop()
                return

    @property
    def best(self) -> Optional[Tag]:
        return self._items[0][0] if self._items else None

    def nodes(self) -> List[Tag]:
        return [node for node, _ in self._items]

    def __len__(self) -> int:
        return len(self._items)


class ContentScorer:
    """Propagates paragraph scores to ancestors and ranks the resulting candidates."""

    def __init__(self, scores: ScoreTable, flags: Flag, candidate_count: int, debug: bool = False) -> None:
        self.scores = scores
        self.flags = flags
        self.candidate_count = candidate_count
        self._debug = debug

    def initialize_node(self, node: Tag) -> None:
        self.scores[node] = float(_BASE_SCORES.get(node.name, 0) + class_weight(node, self.flags))

    def score_elements(self, elements: List[Tag]) -> List[Tag]:
        """Score every queued element's ancestors; returns the candidates in first-scored order."""
        candidates: List[Tag] = []
        for element in elements:
            if not dom.is_element(element.parent):
                continue

            text = dom.inner_text(element)
            if len(text) < MIN_PARAGRAPH_LENGTH:
                continue

            ancestors = dom.node_ancestors(element, MAX_ANCESTOR_LEVELS)
            if not ancestors:
                continue

            content_score = 1 + len(text.split(",")) + min(math.floor(len(text) / 100), 3)

            for level, ancestor in enumerate(ancestors):
                if not dom.is_element(ancestor) or not dom.is_element(ancestor.parent):
                    continue

                if ancestor not in self.scores:
                    self.initialize_node(ancestor)
                    candidates.append(ancestor)

                if level == 0:
                    divider = 1
                elif level == 1:
                    divider = 2
                else:
                    divider = level * 3
                self.scores.add(ancestor, content_score / divider)

        return candidates

    def rank_candidates(self, candidates: List[Tag]) -> TopCandidates:
        """Apply the link-density penalty and keep the best ``candidate_count`` nodes."""
        top = TopCandidates(self.candidate_count)
        for candidate in candidates:
            score = self.scores[candidate] * (1 - dom.link_density(candidate))
            self.scores[candidate] = score
            if self._debug:
                logger.debug("Candidate scored", tag=candidate.name, match=dom.match_string(candidate), score=score)
            top.offer(candidate, score)
        return top
