"""
Post-processing of the final article container.
"""

from __future__ import annotations

from typing import Iterable, Optional
from urllib.parse import urljoin

import structlog
from bs4 import BeautifulSoup, Tag

from . import dom, patterns

logger = structlog.get_logger(__name__)

MEDIA_TAGS = ["img", "picture", "figure", "video", "audio", "source"]


class PostProcessor:
    def __init__(
        self,
        soup: BeautifulSoup,
        base_uri: Optional[str] = None,
        document_uri: Optional[str] = None,
        keep_classes: bool = False,
        preserved_classes: Iterable[str] = patterns.CLASSES_TO_PRESERVE,
    ) -> None:
        self.soup = soup
        self.base_uri = base_uri
        self.document_uri = document_uri
        self.keep_classes = keep_classes
        self.preserved_classes = frozenset(preserved_classes) | frozenset(patterns.CLASSES_TO_PRESERVE)

    def process(self, article_content: Tag) -> None:
        self.fix_relative_uris(article_content)
        self.simplify_nested_elements(article_content)
        if not self.keep_classes:
            self.clean_classes(article_content)

    def to_absolute_uri(self, uri: str) -> str:
        if self.base_uri == self.document_uri and uri.startswith("#"):
            return uri
        if not self.base_uri:
            return uri
        try:
            return urljoin(self.base_uri, uri)
        except ValueError:
            logger.warning("Could not resolve URI", uri=uri, base_uri=self.base_uri)
            return uri

    def fix_relative_uris(self, article_content: Tag) -> None:
        for link in article_content.find_all("a"):
            href = dom.attr(link, "href")
            if not href:
                continue
            if href.startswith("javascript:"):
                self._replace_javascript_link(link)
            else:
                link["href"] = self.to_absolute_uri(href)

        for media in article_content.find_all(MEDIA_TAGS):
            src = dom.attr(media, "src")
            if src:
                media["src"] = self.to_absolute_uri(src)

            poster = dom.attr(media, "poster")
            if poster:
                media["poster"] = self.to_absolute_uri(poster)

            srcset = dom.attr(media, "srcset")
            if srcset:
                media["srcset"] = patterns.SRCSET_URL.sub(
                    lambda m: self.to_absolute_uri(m.group(1)) + (m.group(2) or "") + m.group(3),
                    srcset,
                )

    def _replace_javascript_link(self, link: Tag) -> None:
        """Keep the text of a ``javascript:`` link but drop the link itself."""
        if len(link.contents) == 1 and dom.is_text(link.contents[0]):
            link.replace_with(dom.text_content(link))
            return
        container = self.soup.new_tag("span")
        for child in list(link.contents):
            container.append(child.extract())
        link.replace_with(container)

    def simplify_nested_elements(self, article_content: Tag) -> None:
        """Drop empty div/section wrappers and fold single-child ones into their child."""
        node: Optional[Tag] = article_content
        while node is not None:
            if (
                node.parent is not None
                and node.name in ("div", "section")
                and not dom.node_id(node).startswith("readability")
            ):
                if dom.is_element_without_content(node):
                    node = dom.remove_and_get_next(node)
                    continue
                if dom.has_single_tag_inside_element(node, "div") or dom.has_single_tag_inside_element(
                    node, "section"
                ):
                    child = dom.element_children(node)[0]
                    for name, value in node.attrs.items():
                        child[name] = value
                    node.replace_with(child.extract())
                    node = child
                    continue

            node = dom.get_next_node(node)

    def clean_classes(self, node: Tag) -> None:
        kept = [cls for cls in dom.class_name(node).split() if cls in self.preserved_classes]
        if kept:
            node["class"] = " ".join(kept)
        else:
            node.attrs.pop("class", None)
        for child in dom.element_children(node):
            self.clean_classes(child)
