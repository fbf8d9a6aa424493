"""
Async adapter around the Readability engine.
"""

from __future__ import annotations

import asyncio
from typing import Optional

import structlog

from ..config import Config
from .errors import ExtractionError
from .models import Article
from .protocols import Extractor
from .readability import Readability

logger = structlog.get_logger(__name__)


class ReadabilityExtractor(Extractor):
    """Extractor that runs the Readability engine off the event loop."""

    name = "readability"

    def __init__(self, config: Optional[Config] = None) -> None:
        self.config = config or Config()

    async def extract(self, html: str, *, url: Optional[str] = None) -> Optional[Article]:
        """Extract an article with the Readability engine.

        Args:
            html: HTML content to extract from
            url: Optional document URL for resolving relative links

        Returns:
            The Article, or None when the document is empty or yields no article
        """
        if not html.strip():
            logger.warning("Empty HTML, nothing to extract", url=url)
            return None

        try:
            # Parsing and scoring are CPU bound.
            loop = asyncio.get_running_loop()
            return await loop.run_in_executor(None, self._extract_sync, html, url)
        except ExtractionError as e:
            logger.warning("Readability extraction failed", url=url, error=str(e), error_type=type(e).__name__)
            return None

    def _extract_sync(self, html: str, url: Optional[str]) -> Article:
        engine = Readability(
            html,
            url=url,
            options=self.config.extraction,
            record_metrics=self.config.monitoring.metrics_enabled,
        )
        return engine.parse()
