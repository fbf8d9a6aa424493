"""
Article metadata extraction.

Combines JSON-LD, ``<meta>`` tags and the document ``<title>`` into the
title, byline, excerpt and site name of an article. JSON-LD has to be read
before scripts are stripped from the document, so the two halves run
separately: ``read_json_ld`` first, ``extract`` once the document is prepared.
"""

from __future__ import annotations

import html
import logging
import re
from dataclasses import asdict, dataclass
from typing import Any, Dict, Optional

from bs4 import BeautifulSoup

from ..extractor import dom, patterns
from .structured_data_parser import JsonLdMetadata, SchemaOrgParser

logger = logging.getLogger(__name__)

PROPERTY_PATTERN = re.compile(
    r"\s*(dc|dcterm|og|twitter)\s*:\s*(author|creator|description|title|site_name)\s*",
    re.IGNORECASE,
)
NAME_PATTERN = re.compile(
    r"^\s*(?:(dc|dcterm|og|twitter|weibo:(article|webpage))\s*[.:]\s*)?"
    r"(author|creator|description|title|site_name)\s*\Z",
    re.IGNORECASE,
)

TITLE_KEYS = (
    "dc:title",
    "dcterm:title",
    "og:title",
    "weibo:article:title",
    "weibo:webpage:title",
    "title",
    "twitter:title",
)
BYLINE_KEYS = ("dc:creator", "dcterm:creator", "author")
EXCERPT_KEYS = (
    "dc:description",
    "dcterm:description",
    "og:description",
    "weibo:article:description",
    "weibo:webpage:description",
    "description",
    "twitter:description",
)
SITE_NAME_KEYS = ("og:site_name",)

_HIERARCHICAL_SEPARATOR = re.compile(r" [|/>»] ")
_BEFORE_LAST_SEPARATOR = re.compile(r"(.*)[|/>»] .*", re.IGNORECASE)
_AFTER_FIRST_SEPARATOR = re.compile(r"[^|/>»]*[|/>»](.*)", re.IGNORECASE)
_SEPARATOR_CHARS = re.compile(r"[|\-/>»]+")
_WHITESPACE = re.compile(r"\s+")


@dataclass
class ArticleMetadata:
    """Metadata collected for an article."""

    title: str = ""
    byline: Optional[str] = None
    excerpt: Optional[str] = None
    site_name: Optional[str] = None

    def to_dict(self) -> Dict[str, Any]:
        return asdict(self)


def _word_count(text: str) -> int:
    return len(_WHITESPACE.split(text))


def _unescape(value: Optional[str]) -> Optional[str]:
    if not value:
        return value
    return html.unescape(value)


def _first(values: Dict[str, str], keys) -> Optional[str]:
    for key in keys:
        if values.get(key):
            return values[key]
    return None


def document_title(soup: BeautifulSoup) -> str:
    """Text of the first <title> element, whitespace collapsed."""
    title = soup.find("title")
    if title is None:
        return ""
    return " ".join(dom.text_content(title).split())


def get_article_title(soup: BeautifulSoup) -> str:
    """
    Best guess at the article title from the document <title>.

    Site names are cut off at hierarchical separators (" | ", " / ", " > ",
    " » ") or a colon, and very short or very long titles are replaced by the
    only <h1> on the page. When the cleanup leaves four words or fewer the
    original title is used instead.
    """
    original = cur_title = document_title(soup)
    had_hierarchical_separators = False

    if _HIERARCHICAL_SEPARATOR.search(cur_title):
        had_hierarchical_separators = True
        cur_title = _BEFORE_LAST_SEPARATOR.sub(r"\1", original)
        if _word_count(cur_title) < 3:
            cur_title = _AFTER_FIRST_SEPARATOR.sub(r"\1", original)
    elif ": " in cur_title:
        headings = soup.find_all(["h1", "h2"])
        if not any(dom.text_content(heading).strip() == cur_title.strip() for heading in headings):
            cur_title = original[original.rfind(":") + 1 :]
            if _word_count(cur_title) < 3:
                cur_title = original[original.find(":") + 1 :]
            elif _word_count(original[: original.find(":")]) > 5:
                cur_title = original
    elif len(cur_title) > 150 or len(cur_title) < 15:
        h_ones = soup.find_all("h1")
        if len(h_ones) == 1:
            cur_title = dom.inner_text(h_ones[0])

    cur_title = patterns.NORMALIZE.sub(" ", cur_title.strip())
    word_count = _word_count(cur_title)
    if word_count <= 4 and (
        not had_hierarchical_separators or word_count != _word_count(_SEPARATOR_CHARS.sub("", original)) - 1
    ):
        cur_title = original

    return cur_title


class MetadataExtractor:
    """Collects article metadata from a parsed document."""

    def __init__(self, soup: BeautifulSoup, disable_json_ld: bool = False) -> None:
        self.soup = soup
        self.disable_json_ld = disable_json_ld

    def read_json_ld(self) -> JsonLdMetadata:
        if self.disable_json_ld:
            return JsonLdMetadata()
        parser = SchemaOrgParser(title_heuristic=lambda: get_article_title(self.soup))
        return parser.parse(self.soup)

    def meta_values(self) -> Dict[str, str]:
        """Normalized ``<meta>`` keys (e.g. ``og:title``) mapped to their trimmed content."""
        values: Dict[str, str] = {}
        for element in self.soup.find_all("meta"):
            content = dom.attr(element, "content")
            if not content:
                continue

            matched = False
            prop = dom.attr(element, "property")
            if prop:
                match = PROPERTY_PATTERN.search(prop)
                if match:
                    matched = True
                    values[_WHITESPACE.sub("", match.group(0).lower())] = content.strip()

            name = dom.attr(element, "name")
            if not matched and name and NAME_PATTERN.search(name):
                key = _WHITESPACE.sub("", name.lower()).replace(".", ":")
                values[key] = content.strip()
        return values

    def extract(self, json_ld: Optional[JsonLdMetadata] = None) -> ArticleMetadata:
        json_ld = json_ld or JsonLdMetadata()
        values = self.meta_values()

        title = json_ld.title or _first(values, TITLE_KEYS)
        if not title:
            title = get_article_title(self.soup)

        metadata = ArticleMetadata(
            title=_unescape(title) or "",
            byline=_unescape(json_ld.byline or _first(values, BYLINE_KEYS)),
            excerpt=_unescape(json_ld.excerpt or _first(values, EXCERPT_KEYS)),
            site_name=_unescape(json_ld.site_name or _first(values, SITE_NAME_KEYS)),
        )
        logger.debug(f"Article metadata: {metadata.to_dict()}")
        return metadata
