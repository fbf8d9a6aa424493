"""
Document preparation run once before candidate selection.

Normalizes legacy markup so the later passes see paragraphs where the page
used ``<br><br>`` runs and ``<font>`` wrappers, and recovers images that were
only present inside ``<noscript>`` fallbacks.
"""

from __future__ import annotations

from typing import Optional

import structlog
from bs4 import BeautifulSoup, PageElement, Tag

from . import dom, patterns

logger = structlog.get_logger(__name__)

_IMAGE_SOURCE_ATTRIBUTES = frozenset({"src", "srcset", "data-src", "data-srcset"})


def _is_br(node: Optional[PageElement]) -> bool:
    return dom.is_element(node) and node.name == "br"


def is_single_image(node: Tag) -> bool:
    """An <img>, or an element wrapping exactly one image and no text."""
    if node.name == "img":
        return True
    children = dom.element_children(node)
    if len(children) != 1 or dom.text_content(node).strip():
        return False
    return is_single_image(children[0])


class Preprocessor:
    """Destructive normalization passes over a parsed document."""

    def __init__(self, soup: BeautifulSoup) -> None:
        self.soup = soup

    def unwrap_noscript_images(self) -> None:
        """Replace lazy-load placeholders with the real image kept in a following <noscript>."""
        for img in list(self.soup.find_all("img")):
            if not self._has_image_source(img):
                img.extract()

        for noscript in list(self.soup.find_all("noscript")):
            if noscript.parent is None:
                continue
            fallback = self._parse_fragment(noscript)
            if not is_single_image(fallback):
                continue

            previous = dom.previous_element_sibling(noscript)
            if previous is None or not is_single_image(previous):
                continue

            previous_img = previous if previous.name == "img" else previous.find("img")
            new_img = fallback.find("img")
            if previous_img is not None and new_img is not None:
                self._merge_image_attributes(previous_img, new_img)

            replacement = dom.first_element_child(fallback)
            previous.replace_with(replacement)

    def remove_scripts(self) -> None:
        for node in list(self.soup.find_all(["script", "noscript"])):
            node.extract()

    def prep_document(self) -> None:
        """Drop styles, turn <br> runs into paragraphs, and retag <font> as <span>."""
        for style in list(self.soup.find_all("style")):
            style.extract()

        body = self.soup.body
        if body is not None:
            self.replace_brs(body)

        dom.replace_node_tags(self.soup.find_all("font"), "span")

    def replace_brs(self, root: Tag) -> None:
        """
        Convert runs of two or more <br> into paragraph boundaries.

        Phrasing content following a run is moved into a new <p> up to the
        next run; whitespace is ignored between the <br> elements.
        """
        for br in list(root.find_all("br")):
            if br.parent is None:
                continue

            next_node = dom.skip_whitespace_nodes(br.next_sibling)
            replaced = False
            while _is_br(next_node):
                replaced = True
                following = next_node.next_sibling
                next_node.extract()
                next_node = dom.skip_whitespace_nodes(following)

            if not replaced:
                continue

            paragraph = self.soup.new_tag("p")
            br.replace_with(paragraph)

            sibling = paragraph.next_sibling
            while sibling is not None:
                if self._is_end_of_paragraph(sibling) or not dom.is_phrasing_content(sibling):
                    break
                following = sibling.next_sibling
                paragraph.append(sibling)
                sibling = following

            while paragraph.contents and dom.is_whitespace(paragraph.contents[-1]):
                paragraph.contents[-1].extract()

            if dom.is_element(paragraph.parent) and paragraph.parent.name == "p":
                dom.set_node_tag(paragraph.parent, "div")

    @staticmethod
    def _is_end_of_paragraph(node: PageElement) -> bool:
        return _is_br(node) and _is_br(dom.skip_whitespace_nodes(node.next_sibling))

    @staticmethod
    def _has_image_source(img: Tag) -> bool:
        for name in img.attrs:
            if name in _IMAGE_SOURCE_ATTRIBUTES:
                return True
            if patterns.IMAGE_EXTENSION.search(dom.attr(img, name)):
                return True
        return False

    def _parse_fragment(self, noscript: Tag) -> Tag:
        """Re-parse a <noscript> body into a detached <div>."""
        # Depending on the tree builder the body is either raw text or already parsed.
        parts = []
        for child in noscript.contents:
            if dom.is_text(child):
                parts.append(str(child))
            elif dom.is_element(child):
                parts.append(child.decode())
        markup = "".join(parts)
        fragment = BeautifulSoup(markup, "html.parser", multi_valued_attributes=None)
        wrapper = self.soup.new_tag("div")
        for child in list(fragment.contents):
            wrapper.append(child.extract())
        return wrapper

    @staticmethod
    def _merge_image_attributes(previous_img: Tag, new_img: Tag) -> None:
        for name in list(previous_img.attrs):
            value = dom.attr(previous_img, name)
            if value == "":
                continue
            if name in ("src", "srcset") or patterns.IMAGE_EXTENSION.search(value):
                if dom.attr(new_img, name) == value:
                    continue
                target = f"data-old-{name}" if new_img.has_attr(name) else name
                new_img[target] = value
                logger.debug("Merged noscript image attribute", attribute=target)
