"""
Unit tests for the Readability engine.
"""

import pytest
from bs4 import BeautifulSoup
from clipcore.config import ExtractionOptions
from clipcore.extractor import (
    AbortedTooLargeError,
    Flag,
    NoArticleFoundError,
    NoBodyError,
    Readability,
    parse_article,
)

from tests.helpers.html import PARAGRAPH_ONE, PARAGRAPH_TWO
from tests.helpers.metric_delta import counts_extractions

PAGE_WRAPPER = '<div id="readability-page-1" class="page">'


@pytest.mark.unit
class TestReadability:
    """End-to-end runs of a single engine instance."""

    def test_parse_article(self, article_html):
        article = Readability(article_html).parse()

        assert article.title == "How Mountain Rivers Slowly Shape Deep Valleys"
        assert article.byline == "By Jane Doe"
        assert article.language == "en"
        assert article.site_name == "Earth Notes"
        assert article.direction is None
        assert article.excerpt == PARAGRAPH_ONE
        assert article.content.startswith(PAGE_WRAPPER)
        assert article.length == len(article.text_content)
        assert article.length >= 500

    def test_page_wrapper_attributes(self, article_html):
        containers = []

        def keep_container(content):
            containers.append(content)
            return content.decode_contents()

        Readability(article_html, serializer=keep_container).parse()
        wrapper = containers[0].find(id="readability-page-1")

        assert list(wrapper.attrs.items()) == [("id", "readability-page-1"), ("class", "page")]

    def test_boilerplate_excluded(self, article_html):
        article = Readability(article_html).parse()

        assert "/home" not in article.content
        assert "Privacy" not in article.text_content
        assert "By Jane Doe" not in article.text_content
        assert "<h1>" not in article.content
        assert 'class="post"' not in article.content
        assert PARAGRAPH_TWO in article.text_content

    def test_first_pass_succeeds(self, article_html):
        engine = Readability(article_html)
        engine.parse()

        assert engine.passes == 1
        assert engine.attempts == []
        assert engine.flags == Flag.ALL

    def test_direction_from_container(self, article_html):
        html = article_html.replace('<div id="main">', '<div id="main" dir="rtl">')
        assert Readability(html).parse().direction == "rtl"

    def test_relative_uris_resolved(self, article_html):
        html = article_html.replace('<p class="byline">', '<img src="images/valley.jpg"><p class="byline">')
        article = Readability(html, url="https://example.com/news/rivers.html").parse()
        assert 'src="https://example.com/news/images/valley.jpg"' in article.content

    def test_base_href_wins(self, article_html):
        html = article_html.replace("<head>", '<head><base href="https://cdn.example.com/assets/">').replace(
            '<p class="byline">', '<img src="images/valley.jpg"><p class="byline">'
        )
        article = Readability(html, url="https://example.com/news/rivers.html").parse()
        assert 'src="https://cdn.example.com/assets/images/valley.jpg"' in article.content

    def test_keep_classes(self, article_html):
        article = Readability(article_html, options=ExtractionOptions(keep_classes=True)).parse()
        assert 'class="post"' in article.content

    def test_custom_serializer(self, article_html):
        article = Readability(article_html, serializer=lambda content: content.get_text(" ", strip=True)).parse()

        assert "<" not in article.content
        assert PARAGRAPH_ONE in article.content

    def test_accepts_parsed_document(self, article_html):
        soup = BeautifulSoup(article_html, "lxml", multi_valued_attributes=None)
        assert Readability(soup).parse().title == "How Mountain Rivers Slowly Shape Deep Valleys"

    def test_html_parser_option(self, article_html):
        article = Readability(article_html, options=ExtractionOptions(parser="html.parser")).parse()
        assert article.excerpt == PARAGRAPH_ONE

    def test_parse_only_once(self, article_html):
        engine = Readability(article_html)
        engine.parse()
        with pytest.raises(RuntimeError):
            engine.parse()

    def test_parse_article_helper(self, sidebar_html):
        article = parse_article(sidebar_html)

        assert article.title == "Notes on valleys and the rivers that carve them"
        assert 'href="/a"' not in article.content
        assert article.excerpt == f"{PARAGRAPH_ONE} {PARAGRAPH_TWO}"


@pytest.mark.unit
class TestRetries:
    """Heuristics relaxed until the article is long enough."""

    def test_short_document_exhausts_flags(self, short_html):
        engine = Readability(short_html)
        article = engine.parse()

        assert engine.passes == 4
        assert len(engine.attempts) == 4
        assert engine.flags == Flag.NONE
        assert article.length == 80
        assert article.content.startswith(PAGE_WRAPPER)

    def test_lower_threshold_stops_early(self, short_html):
        engine = Readability(short_html, options=ExtractionOptions(char_threshold=50))
        engine.parse()
        assert engine.passes == 1

    def test_byline_survives_retries(self, short_html):
        html = short_html.replace("<body>", '<body><p class="byline">By Jane Doe</p>')
        article = Readability(html).parse()
        assert article.byline == "By Jane Doe"

    def test_empty_body(self):
        with pytest.raises(NoArticleFoundError) as exc_info:
            Readability("<html><head><title>Empty</title></head><body></body></html>").parse()
        assert exc_info.value.attempts == 4


@pytest.mark.unit
class TestFailures:
    """Fatal outcomes."""

    def test_too_many_elements(self, article_html):
        options = ExtractionOptions(max_elements_to_parse=5)
        with pytest.raises(AbortedTooLargeError) as exc_info:
            Readability(article_html, options=options).parse()

        assert exc_info.value.limit == 5
        assert exc_info.value.element_count > 5

    def test_no_body(self):
        soup = BeautifulSoup("<p>Loose paragraph</p>", "html.parser", multi_valued_attributes=None)
        with pytest.raises(NoBodyError):
            Readability(soup).parse()


@pytest.mark.unit
class TestMetrics:
    """Prometheus counters for each outcome."""

    def test_success_counted(self, article_html):
        with counts_extractions("success"):
            Readability(article_html).parse()

    def test_failure_counted(self):
        with counts_extractions("NoArticleFoundError"):
            with pytest.raises(NoArticleFoundError):
                Readability("<html><body></body></html>").parse()

    def test_recording_disabled(self, article_html):
        with counts_extractions("success", 0):
            Readability(article_html, record_metrics=False).parse()
