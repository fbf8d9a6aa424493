"""
Shared fixtures for the clipcore test suite.

HTML documents used across unit and integration tests live here so that
the expectations in different test modules talk about the same pages.
"""

from typing import Callable

import pytest
from bs4 import BeautifulSoup

from tests.helpers.html import PARAGRAPH_ONE, PARAGRAPH_THREE, PARAGRAPH_TWO


def pytest_configure(config):
    """Register custom markers."""
    config.addinivalue_line("markers", "unit: Unit tests for individual components")
    config.addinivalue_line("markers", "integration: Integration tests across modules")


@pytest.fixture
def make_soup() -> Callable[[str], BeautifulSoup]:
    """Parse markup the same way the engine does."""

    def _make(html: str, parser: str = "lxml") -> BeautifulSoup:
        return BeautifulSoup(html, parser, multi_valued_attributes=None)

    return _make


@pytest.fixture
def paragraphs():
    return PARAGRAPH_ONE, PARAGRAPH_TWO, PARAGRAPH_THREE


@pytest.fixture
def article_html() -> str:
    """A typical article page: navigation, a byline, three paragraphs and a footer."""
    return f"""<!DOCTYPE html>
<html lang="en">
<head>
  <title>How Mountain Rivers Slowly Shape Deep Valleys | Earth Notes</title>
  <meta property="og:site_name" content="Earth Notes">
</head>
<body>
  <nav class="menu">
    <a href="/home">Home</a> <a href="/about">About</a> <a href="/contact">Contact us</a>
  </nav>
  <div id="main">
    <article class="post">
      <h1>How Mountain Rivers Slowly Shape Deep Valleys</h1>
      <p class="byline">By Jane Doe</p>
      <p>{PARAGRAPH_ONE}</p>
      <p>{PARAGRAPH_TWO}</p>
      <p>{PARAGRAPH_THREE}</p>
    </article>
  </div>
  <footer class="site-footer"><a href="/privacy">Privacy</a> <a href="/terms">Terms</a></footer>
</body>
</html>
"""


@pytest.fixture
def sidebar_html() -> str:
    """Prose in a <div> of paragraphs next to a link-only <nav> sidebar."""
    return f"""<html>
<head><title>Notes on valleys and the rivers that carve them</title></head>
<body>
  <nav><a href="/a">Home page</a> <a href="/b">Archive of posts</a> <a href="/c">Contact</a></nav>
  <div>
    <p>{PARAGRAPH_ONE} {PARAGRAPH_TWO}</p>
    <p>{PARAGRAPH_THREE}</p>
  </div>
</body>
</html>
"""


@pytest.fixture
def short_html() -> str:
    """A page whose only text is a single 80 character sentence."""
    sentence = "Short notes about rivers and valleys, written down before the field trips began."
    assert len(sentence) == 80
    return f"<html><head><title>Field notes</title></head><body><div><p>{sentence}</p></div></body></html>"


@pytest.fixture
def json_ld_html() -> str:
    """JSON-LD whose headline, not its name, matches the document title."""
    return """<html>
<head>
  <title>Rivers carve deep valleys over millennia</title>
  <script type="application/ld+json">
  {
    "@context": "https://schema.org",
    "@type": "NewsArticle",
    "name": "Earth Notes weekly digest",
    "headline": "Rivers carve deep valleys over millennia",
    "author": [{"name": "Jane Doe"}, {"name": "John Roe"}],
    "description": "How water and ice shape the land.",
    "publisher": {"name": "Earth Notes"}
  }
  </script>
</head>
<body><p>Body text.</p></body>
</html>
"""
