"""
Data models for extraction runs and results.
"""

from __future__ import annotations

import enum
from dataclasses import asdict, dataclass
from typing import Any, Dict, Optional

from bs4 import Tag


class Flag(enum.IntFlag):
    """Heuristic switches relaxed one at a time by the retry loop."""

    NONE = 0
    STRIP_UNLIKELYS = 0x1
    WEIGHT_CLASSES = 0x2
    CLEAN_CONDITIONALLY = 0x4

    ALL = STRIP_UNLIKELYS | WEIGHT_CLASSES | CLEAN_CONDITIONALLY


# Order in which flags are cleared on retry.
FLAG_RELAXATION_ORDER = (Flag.STRIP_UNLIKELYS, Flag.WEIGHT_CLASSES, Flag.CLEAN_CONDITIONALLY)


@dataclass
class Attempt:
    """One full pass of the extraction pipeline."""

    article_content: Tag
    text_length: int
    direction: Optional[str] = None


@dataclass(slots=True, frozen=True)
class Article:
    """Result of a successful article extraction."""

    title: str
    byline: Optional[str]
    direction: Optional[str]
    language: Optional[str]
    content: str
    text_content: str
    length: int
    excerpt: Optional[str]
    site_name: Optional[str]

    def __post_init__(self) -> None:
        """Validate the result."""
        if self.length != len(self.text_content):
            raise ValueError("length must match the text content")

    def to_dict(self) -> Dict[str, Any]:
        return asdict(self)
