"""
Protocols for pluggable pieces of the extraction engine.
"""

from __future__ import annotations

from typing import Optional, Protocol, runtime_checkable

from bs4 import Tag

from .models import Article


@runtime_checkable
class Serializer(Protocol):
    """Turns the final article container into the ``content`` string."""

    def __call__(self, article_content: Tag) -> str: ...


@runtime_checkable
class Extractor(Protocol):
    """Pluggable HTML-to-Article strategy."""

    name: str

    async def extract(self, html: str, *, url: Optional[str] = None) -> Optional[Article]:
        """Extract an article from an HTML string.

        Args:
            html: HTML content to extract from
            url: Optional document URL, used to absolutize links

        Returns:
            The extracted Article, or None when nothing could be extracted
        """
        ...


def inner_html(article_content: Tag) -> str:
    """Default serializer: the container's inner HTML."""
    return article_content.decode_contents()
