"""
Fatal extraction outcomes.
"""

from __future__ import annotations


class ExtractionError(Exception):
    """Base class for errors that leave no usable article."""


class AbortedTooLargeError(ExtractionError):
    """The document has more elements than the configured ceiling."""

    def __init__(self, element_count: int, limit: int) -> None:
        super().__init__(f"Aborting parsing document; {element_count} elements found (limit {limit})")
        self.element_count = element_count
        self.limit = limit


class NoBodyError(ExtractionError):
    """The document has no <body> element."""

    def __init__(self) -> None:
        super().__init__("No body found in document")


class NoArticleFoundError(ExtractionError):
    """Every relaxation attempt produced an empty article."""

    def __init__(self, attempts: int) -> None:
        super().__init__(f"No article content found after {attempts} attempts")
        self.attempts = attempts
