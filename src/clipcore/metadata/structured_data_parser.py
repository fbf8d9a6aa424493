"""
Structured Data Parser - Schema.org JSON-LD

Reads article metadata from the first ``<script type="application/ld+json">``
block that describes a schema.org article.
"""

from __future__ import annotations

import json
import logging
from dataclasses import dataclass
from typing import Any, Callable, Dict, Optional

from bs4 import BeautifulSoup

from ..extractor import dom, patterns

logger = logging.getLogger(__name__)


@dataclass
class JsonLdMetadata:
    """Article fields found in JSON-LD."""

    title: Optional[str] = None
    byline: Optional[str] = None
    excerpt: Optional[str] = None
    site_name: Optional[str] = None


def _is_article_type(value: Any) -> bool:
    return isinstance(value, str) and bool(patterns.JSON_LD_ARTICLE_TYPES.search(value))


def _has_name(value: Any) -> bool:
    return isinstance(value, dict) and isinstance(value.get("name"), str)


class SchemaOrgParser:
    """Parser for schema.org article data in JSON-LD."""

    def __init__(self, title_heuristic: Callable[[], str]) -> None:
        # Only consulted when ``name`` and ``headline`` disagree.
        self._title_heuristic = title_heuristic

    def parse(self, soup: BeautifulSoup) -> JsonLdMetadata:
        for script in soup.find_all("script"):
            if dom.attr(script, "type") != "application/ld+json":
                continue

            content = patterns.CDATA_MARKERS.sub("", dom.text_content(script))
            try:
                parsed = json.loads(content)
            except ValueError as e:
                logger.warning(f"Invalid JSON-LD: {e}")
                continue

            article = self.find_article(parsed)
            if article is not None:
                return self.extract_fields(article)

        return JsonLdMetadata()

    @staticmethod
    def find_article(parsed: Any) -> Optional[Dict[str, Any]]:
        """The schema.org article object in a parsed JSON-LD document, if any."""
        if not isinstance(parsed, dict):
            return None

        context = parsed.get("@context")
        if not isinstance(context, str) or not patterns.SCHEMA_ORG_CONTEXT.search(context):
            return None

        if not parsed.get("@type") and isinstance(parsed.get("@graph"), list):
            parsed = next(
                (item for item in parsed["@graph"] if isinstance(item, dict) and _is_article_type(item.get("@type"))),
                None,
            )
            if parsed is None:
                return None

        if not _is_article_type(parsed.get("@type")):
            return None
        return parsed

    def extract_fields(self, parsed: Dict[str, Any]) -> JsonLdMetadata:
        metadata = JsonLdMetadata()

        name = parsed.get("name")
        headline = parsed.get("headline")
        if isinstance(name, str) and isinstance(headline, str) and name != headline:
            # Prefer whichever one matches the document title.
            title = self._title_heuristic()
            name_matches = dom.text_similarity(name, title) > 0.75
            headline_matches = dom.text_similarity(headline, title) > 0.75
            metadata.title = headline if headline_matches and not name_matches else name
        elif isinstance(name, str):
            metadata.title = name.strip()
        elif isinstance(headline, str):
            metadata.title = headline.strip()

        author = parsed.get("author")
        if _has_name(author):
            metadata.byline = author["name"].strip()
        elif isinstance(author, list) and author and _has_name(author[0]):
            metadata.byline = ", ".join(entry["name"].strip() for entry in author if _has_name(entry))

        description = parsed.get("description")
        if isinstance(description, str):
            metadata.excerpt = description.strip()

        publisher = parsed.get("publisher")
        if isinstance(publisher, dict) and isinstance(publisher.get("name"), str):
            metadata.site_name = publisher["name"].strip()

        return metadata
