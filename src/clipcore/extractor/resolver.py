"""
Top-candidate resolution.

Turns the ranked candidate list into the single node whose parent's children
become the article: synthesizes a container when nothing useful was scored,
otherwise climbs towards a common ancestor when the evidence supports it.
"""

from __future__ import annotations

from dataclasses import dataclass
from typing import List, Optional

import structlog
from bs4 import BeautifulSoup, Tag

from . import dom
from .scoring import ContentScorer, TopCandidates

logger = structlog.get_logger(__name__)

MINIMUM_TOP_CANDIDATES = 3


@dataclass
class Resolution:
    top_candidate: Tag
    synthesized: bool = False


def _below_body(node: Optional[Tag]) -> bool:
    return dom.is_element(node) and node.name != "body"


class CandidateResolver:
    def __init__(self, soup: BeautifulSoup, page: Tag, scorer: ContentScorer, debug: bool = False) -> None:
        self.soup = soup
        self.page = page
        self.scorer = scorer
        self.scores = scorer.scores
        self._debug = debug

    def resolve(self, top: TopCandidates) -> Resolution:
        best = top.best
        if best is None or best.name == "body":
            return Resolution(self._synthesize(), synthesized=True)

        candidate = self._consensus_climb(best, top.nodes()[1:])
        if candidate not in self.scores:
            self.scorer.initialize_node(candidate)

        candidate = self._parent_score_climb(candidate)
        candidate = self._collapse_single_child(candidate)
        if candidate not in self.scores:
            self.scorer.initialize_node(candidate)

        if self._debug:
            logger.debug("Resolved top candidate", tag=candidate.name, match=dom.match_string(candidate))
        return Resolution(candidate)

    def _synthesize(self) -> Tag:
        """Move the whole page into a new <div> and use that as the candidate."""
        container = self.soup.new_tag("div")
        for child in list(self.page.contents):
            container.append(child.extract())
        self.page.append(container)
        self.scorer.initialize_node(container)
        if self._debug:
            logger.debug("No usable candidate, wrapping the page body")
        return container

    def _consensus_climb(self, best: Tag, others: List[Tag]) -> Tag:
        """Promote the first ancestor shared by enough near-best alternates."""
        best_score = self.scores[best]
        alternative_ancestors: List[List[Tag]] = []
        for other in others:
            if best_score and self.scores[other] / best_score >= 0.75:
                alternative_ancestors.append(dom.node_ancestors(other))

        if len(alternative_ancestors) < MINIMUM_TOP_CANDIDATES:
            return best

        parent = best.parent
        while _below_body(parent):
            lists_containing = sum(1 for ancestors in alternative_ancestors if dom.contains_node(ancestors, parent))
            if lists_containing >= MINIMUM_TOP_CANDIDATES:
                return parent
            parent = parent.parent
        return best

    def _parent_score_climb(self, candidate: Tag) -> Tag:
        last_score = self.scores[candidate]
        threshold = last_score / 3
        parent = candidate.parent
        while _below_body(parent):
            parent_score = self.scores.get(parent)
            if parent_score is None:
                parent = parent.parent
                continue
            if parent_score < threshold:
                break
            if parent_score > last_score:
                return parent
            last_score = parent_score
            parent = parent.parent
        return candidate

    @staticmethod
    def _collapse_single_child(candidate: Tag) -> Tag:
        parent = candidate.parent
        while _below_body(parent) and len(dom.element_children(parent)) == 1:
            candidate = parent
            parent = candidate.parent
        return candidate
