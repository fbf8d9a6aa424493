"""
clipcore - Main article extraction for web clipping.
"""

from __future__ import annotations

__version__ = "0.1.0"

from .config import Config, ExtractionOptions
from .extractor import Article, Readability, ReadabilityExtractor, parse_article

__all__ = [
    "__version__",
    "Article",
    "Config",
    "ExtractionOptions",
    "Readability",
    "ReadabilityExtractor",
    "parse_article",
]
