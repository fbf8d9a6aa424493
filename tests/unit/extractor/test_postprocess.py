"""
Unit tests for article post-processing.
"""

import pytest
from clipcore.extractor.postprocess import PostProcessor

BASE = "https://example.com/articles/rivers/"


@pytest.mark.unit
class TestUris:
    """Relative URIs resolved against the base."""

    def test_links_and_media_resolved(self, make_soup):
        soup = make_soup(
            '<div><a href="../valleys">Valleys</a><img src="img/river.jpg">'
            '<video poster="/poster.png"><source src="clip.mp4"></video></div>'
        )
        PostProcessor(soup, base_uri=BASE, document_uri=BASE).fix_relative_uris(soup.div)

        assert soup.a["href"] == "https://example.com/articles/valleys"
        assert soup.img["src"] == "https://example.com/articles/rivers/img/river.jpg"
        assert soup.video["poster"] == "https://example.com/poster.png"
        assert soup.source["src"] == "https://example.com/articles/rivers/clip.mp4"

    def test_srcset_resolved(self, make_soup):
        soup = make_soup('<div><img srcset="a.jpg 1x, b.jpg 2x"></div>')
        PostProcessor(soup, base_uri=BASE, document_uri=BASE).fix_relative_uris(soup.div)
        assert soup.img["srcset"] == f"{BASE}a.jpg 1x, {BASE}b.jpg 2x"

    def test_fragment_kept_when_base_is_document(self, make_soup):
        processor = PostProcessor(make_soup(""), base_uri=BASE, document_uri=BASE)
        assert processor.to_absolute_uri("#notes") == "#notes"

    def test_fragment_resolved_against_different_base(self):
        processor = PostProcessor(None, base_uri="https://cdn.example.com/", document_uri=BASE)
        assert processor.to_absolute_uri("#notes") == "https://cdn.example.com/#notes"

    def test_absolute_uri_unchanged(self):
        processor = PostProcessor(None, base_uri=BASE, document_uri=BASE)
        assert processor.to_absolute_uri("https://other.org/x") == "https://other.org/x"

    def test_no_base_leaves_uri(self):
        processor = PostProcessor(None)
        assert processor.to_absolute_uri("relative/path") == "relative/path"

    def test_javascript_links_replaced(self, make_soup):
        soup = make_soup(
            '<div><a id="plain" href="javascript:void(0)">Open</a>'
            '<a id="rich" href="javascript:go()"><b>Bold</b> text</a></div>'
        )
        PostProcessor(soup, base_uri=BASE, document_uri=BASE).fix_relative_uris(soup.div)

        assert soup.find("a") is None
        assert soup.div.contents[0] == "Open"
        span = soup.div.find("span")
        assert span.get_text() == "Bold text"


@pytest.mark.unit
class TestSimplify:
    """Wrapper elements folded away."""

    def test_single_child_wrappers_folded(self, make_soup):
        soup = make_soup(
            '<div id="container"><div id="readability-page-1" class="page">'
            '<div class="outer" data-x="1"><div class="inner"><p>text</p></div></div>'
            "<div></div></div></div>"
        )
        container = soup.find(id="container").extract()
        PostProcessor(soup).simplify_nested_elements(container)

        wrapper = container.find(id="readability-page-1")
        children = [child for child in wrapper.contents if getattr(child, "name", None)]
        assert len(children) == 1
        folded = children[0]
        assert folded.name == "div"
        assert folded["data-x"] == "1"
        assert folded["class"] == "outer"
        assert [child.name for child in folded.contents] == ["p"]

    def test_page_wrapper_kept(self, make_soup):
        soup = make_soup('<div id="container"><div id="readability-page-1"><div><p>a</p></div></div></div>')
        container = soup.find(id="container").extract()
        PostProcessor(soup).simplify_nested_elements(container)
        assert container.find(id="readability-page-1") is not None


@pytest.mark.unit
class TestClasses:
    """Class attribute stripping."""

    def markup(self):
        return '<div class="page"><p class="lead intro">a</p><span class="page highlight">b</span></div>'

    def test_only_preserved_classes_kept(self, make_soup):
        soup = make_soup(self.markup())
        PostProcessor(soup).clean_classes(soup.div)

        assert soup.div["class"] == "page"
        assert "class" not in soup.p.attrs
        assert soup.span["class"] == "page"

    def test_custom_preserved_classes(self, make_soup):
        soup = make_soup(self.markup())
        PostProcessor(soup, preserved_classes=["lead"]).clean_classes(soup.div)

        assert soup.p["class"] == "lead"
        assert soup.div["class"] == "page"

    def test_keep_classes(self, make_soup):
        soup = make_soup(f'<div id="c">{self.markup()}</div>')
        container = soup.find(id="c")
        PostProcessor(soup, keep_classes=True).process(container)
        assert soup.p["class"] == "lead intro"
