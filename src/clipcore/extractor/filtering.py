"""
Visibility and unlikely-candidate filter.

A single destructive pre-order walk over the document that drops hidden and
boilerplate nodes, captures the byline, suppresses the first heading that
repeats the article title, turns phrasing-only <div> elements into
paragraphs, and queues the elements that the scoring pass should look at.
"""

from __future__ import annotations

from typing import List, Optional

import structlog
from bs4 import BeautifulSoup, Tag

from . import dom, patterns
from .models import Flag

logger = structlog.get_logger(__name__)


def is_valid_byline(text: str) -> bool:
    text = text.strip()
    return 0 < len(text) < 100


class CandidateFilter:
    """
    Walks the tree once per attempt and returns the elements to score.

    ``byline`` and ``language`` are read back by the caller after ``run``;
    a byline captured on an earlier attempt is passed in so that it is not
    captured (and removed) twice.
    """

    def __init__(
        self,
        soup: BeautifulSoup,
        flags: Flag,
        article_title: str = "",
        byline: Optional[str] = None,
        debug: bool = False,
    ) -> None:
        self.soup = soup
        self.flags = flags
        self.article_title = article_title or ""
        self.byline = byline
        self.language: Optional[str] = None
        self._debug = debug
        self._should_remove_title_header = True

    def run(self) -> List[Tag]:
        elements_to_score: List[Tag] = []
        strip_unlikely = bool(self.flags & Flag.STRIP_UNLIKELYS)
        node = dom.root_element(self.soup)

        while node is not None:
            if node.name == "html":
                self.language = node.get("lang")

            match_string = dom.match_string(node)

            if not dom.is_probably_visible(node):
                self._log("Removing hidden node", match=match_string)
                node = dom.remove_and_get_next(node)
                continue

            if self._check_byline(node, match_string):
                node = dom.remove_and_get_next(node)
                continue

            if self._should_remove_title_header and self._header_duplicates_title(node):
                self._log("Removing header that duplicates the title", heading=dom.inner_text(node, False))
                self._should_remove_title_header = False
                node = dom.remove_and_get_next(node)
                continue

            if strip_unlikely:
                if self._is_unlikely_candidate(node, match_string):
                    self._log("Removing unlikely candidate", match=match_string)
                    node = dom.remove_and_get_next(node)
                    continue

                role = dom.attr(node, "role")
                if role in patterns.UNLIKELY_ROLES:
                    self._log("Removing content with unlikely role", role=role, match=match_string)
                    node = dom.remove_and_get_next(node)
                    continue

            if node.name in patterns.EMPTY_CONTAINER_TAGS and dom.is_element_without_content(node):
                node = dom.remove_and_get_next(node)
                continue

            if node.name in patterns.TAGS_TO_SCORE:
                elements_to_score.append(node)

            if node.name == "div":
                node = self._normalize_div(node, elements_to_score)

            node = dom.get_next_node(node)

        return elements_to_score

    def _normalize_div(self, node: Tag, elements_to_score: List[Tag]) -> Tag:
        """Wrap phrasing runs into <p>, then collapse or retag the div when it holds no blocks."""
        paragraph: Optional[Tag] = None
        child = node.contents[0] if node.contents else None
        while child is not None:
            next_sibling = child.next_sibling
            if dom.is_phrasing_content(child):
                if paragraph is not None:
                    paragraph.append(child)
                elif not dom.is_whitespace(child):
                    paragraph = self.soup.new_tag("p")
                    child.replace_with(paragraph)
                    paragraph.append(child)
            elif paragraph is not None:
                while paragraph.contents and dom.is_whitespace(paragraph.contents[-1]):
                    paragraph.contents[-1].extract()
                paragraph = None
            child = next_sibling

        if dom.has_single_tag_inside_element(node, "p") and dom.link_density(node) < 0.25:
            new_node = dom.element_children(node)[0]
            node.replace_with(new_node)
            elements_to_score.append(new_node)
            return new_node

        if not dom.has_child_block_element(node):
            dom.set_node_tag(node, "p")
            elements_to_score.append(node)
        return node

    def _check_byline(self, node: Tag, match_string: str) -> bool:
        if self.byline:
            return False

        rel = dom.attr(node, "rel")
        itemprop = dom.attr(node, "itemprop")
        looks_like_byline = rel == "author" or "author" in itemprop or patterns.BYLINE.search(match_string)
        text = dom.text_content(node)
        if looks_like_byline and is_valid_byline(text):
            self.byline = text.strip()
            self._log("Captured byline", byline=self.byline)
            return True
        return False

    def _header_duplicates_title(self, node: Tag) -> bool:
        if node.name not in ("h1", "h2"):
            return False
        heading = dom.inner_text(node, False)
        return dom.text_similarity(self.article_title, heading) > 0.75

    @staticmethod
    def _is_unlikely_candidate(node: Tag, match_string: str) -> bool:
        return (
            all(pattern.search(match_string) for pattern in patterns.UNLIKELY_CANDIDATES)
            and not patterns.OK_MAYBE_CANDIDATE.search(match_string)
            and not dom.has_ancestor_tag(node, "table")
            and not dom.has_ancestor_tag(node, "code")
            and node.name not in ("body", "a")
        )

    def _log(self, event: str, **kw) -> None:
        if self._debug:
            logger.debug(event, **kw)
