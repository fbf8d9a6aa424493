"""
clipcore Article Extraction Module

Readability-style main-content extraction over BeautifulSoup trees:
1. Preprocessing: noscript images, scripts, styles, <br> runs, <font>
2. Candidate filtering: hidden and unlikely nodes, bylines, duplicate titles
3. Scoring: paragraph scores propagated to ancestors, top-N candidates
4. Resolution and sibling aggregation into an article container
5. Cleaning, retried with relaxed heuristics until the article is long enough
6. Post-processing: absolute URIs, nested wrappers, class stripping
"""

from .errors import AbortedTooLargeError, ExtractionError, NoArticleFoundError, NoBodyError
from .models import Article, Attempt, Flag
from .protocols import Extractor, Serializer, inner_html
from .readability import Readability, parse_article
from .readability_extractor import ReadabilityExtractor

__all__ = [
    "AbortedTooLargeError",
    "Article",
    "Attempt",
    "ExtractionError",
    "Extractor",
    "Flag",
    "NoArticleFoundError",
    "NoBodyError",
    "Readability",
    "ReadabilityExtractor",
    "Serializer",
    "inner_html",
    "parse_article",
]
