"""
Sibling aggregation: pull related siblings of the top candidate into the article container.
"""

from __future__ import annotations

import structlog
from bs4 import BeautifulSoup, Tag

from . import dom, patterns
from .scoring import ScoreTable

logger = structlog.get_logger(__name__)


def is_content_paragraph(sibling: Tag) -> bool:
    """A <p> sibling that reads like article prose even without a score."""
    density = dom.link_density(sibling)
    text = dom.inner_text(sibling)
    length = len(text)
    if length > 80 and density < 0.25:
        return True
    return 0 < length <= 80 and density == 0 and bool(patterns.SENTENCE_END.search(text))


def gather_siblings(soup: BeautifulSoup, top_candidate: Tag, scores: ScoreTable, debug: bool = False) -> Tag:
    """Return a new <div> holding the top candidate and every sibling that qualifies."""
    article_content = soup.new_tag("div")
    top_score = scores.get(top_candidate, 0.0)
    threshold = max(10, top_score * 0.2)
    top_class = dom.class_name(top_candidate)

    parent = top_candidate.parent
    if parent is None:
        article_content.append(top_candidate)
        return article_content

    for sibling in dom.element_children(parent):
        append = sibling is top_candidate
        if not append:
            bonus = top_score * 0.2 if top_class and dom.class_name(sibling) == top_class else 0
            sibling_score = scores.get(sibling)
            if sibling_score is not None and sibling_score + bonus >= threshold:
                append = True
            elif sibling.name == "p":
                append = is_content_paragraph(sibling)

        if not append:
            continue

        if debug:
            logger.debug("Appending sibling", tag=sibling.name, score=scores.get(sibling))
        if sibling.name not in patterns.ALTER_TO_DIV_EXCEPTIONS:
            dom.set_node_tag(sibling, "div")
        article_content.append(sibling.extract())

    return article_content
