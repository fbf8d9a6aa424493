"""
Article content cleaning.

Runs over the aggregated article container once per attempt: strips
presentation, repairs lazily loaded images, and removes widgets, forms and
link-heavy blocks that survived candidate selection.
"""

from __future__ import annotations

import math
from typing import Dict, Tuple

import structlog
from bs4 import BeautifulSoup, Tag

from . import dom, patterns
from .models import Flag
from .scoring import class_weight

logger = structlog.get_logger(__name__)

MAX_BASE64_PLACEHOLDER_LENGTH = 133


def row_and_column_count(table: Tag) -> Tuple[int, int]:
    """Rows and the widest row of a table, honouring rowspan/colspan where they are numeric."""
    rows = 0
    columns = 0
    for tr in table.find_all("tr"):
        rows += _span(tr, "rowspan")
        columns_in_row = sum(_span(cell, "colspan") for cell in tr.find_all("td"))
        columns = max(columns, columns_in_row)
    return rows, columns


def _span(node: Tag, name: str) -> int:
    value = dom.attr(node, name).strip()
    if not value:
        return 1
    try:
        return int(value) or 1
    except ValueError:
        logger.debug("Ignoring non-numeric span", attribute=name, value=value)
        return 1


def is_data_table(table: Tag) -> bool:
    if dom.attr(table, "role") == "presentation":
        return False
    if dom.attr(table, "datatable") == "0":
        return False
    if dom.attr(table, "summary"):
        return True

    caption = table.find("caption")
    if caption is not None and caption.contents:
        return True

    if any(table.find(tag) is not None for tag in patterns.DATA_TABLE_DESCENDANTS):
        return True

    if table.find("table") is not None:
        return False

    rows, columns = row_and_column_count(table)
    if rows >= 10 or columns > 4:
        return True
    return rows * columns > 10


def is_video_embed(node: Tag) -> bool:
    """Whether an embed-like element points at a known video host."""
    if any(patterns.VIDEOS.search(dom.attr(node, name)) for name in node.attrs):
        return True
    return node.name == "object" and bool(patterns.VIDEOS.search(node.decode_contents()))


class ContentCleaner:
    """Cleans one article container; data-table marks are scoped to a single run."""

    def __init__(self, soup: BeautifulSoup, flags: Flag, debug: bool = False) -> None:
        self.soup = soup
        self.flags = flags
        self._debug = debug
        self._data_tables: Dict[int, Tag] = {}

    def prep_article(self, article_content: Tag) -> None:
        self.clean_styles(article_content)
        self.mark_data_tables(article_content)
        self.fix_lazy_images(article_content)

        self.clean_conditionally(article_content, "form")
        self.clean_conditionally(article_content, "fieldset")
        for tag in ("object", "embed", "footer", "link", "aside"):
            self.clean(article_content, tag)

        for child in dom.element_children(article_content):
            self.remove_share_elements(child)

        for tag in ("iframe", "input", "textarea", "select", "button"):
            self.clean(article_content, tag)
        self.clean_headers(article_content)
        self.collapse_single_cell_tables(article_content)

        for tag in ("table", "ul", "div"):
            self.clean_conditionally(article_content, tag)

        dom.replace_node_tags(article_content.find_all("h1"), "h2")

        dom.remove_nodes(article_content.find_all("p"), self._is_empty_paragraph)

        for br in article_content.find_all("br"):
            following = dom.skip_whitespace_nodes(br.next_sibling)
            if dom.is_element(following) and following.name == "p":
                br.extract()

    def clean_styles(self, node: Tag) -> None:
        """Strip presentational attributes from ``node`` and its descendants, leaving <svg> alone."""
        if node.name == "svg":
            return
        for name in patterns.PRESENTATIONAL_ATTRIBUTES:
            node.attrs.pop(name, None)
        if node.name in patterns.DEPRECATED_SIZE_ATTRIBUTE_ELEMS:
            node.attrs.pop("width", None)
            node.attrs.pop("height", None)
        for child in dom.element_children(node):
            self.clean_styles(child)

    def mark_data_tables(self, root: Tag) -> None:
        for table in root.find_all("table"):
            if is_data_table(table):
                self._data_tables[id(table)] = table

    def is_marked_data_table(self, table: Tag) -> bool:
        return self._data_tables.get(id(table)) is table

    def fix_lazy_images(self, root: Tag) -> None:
        for node in root.find_all(["img", "picture", "figure"]):
            self._drop_base64_placeholder(node)
            self._promote_lazy_sources(node)

    def _drop_base64_placeholder(self, node: Tag) -> None:
        if node.name != "img":
            return
        src = dom.attr(node, "src")
        parts = patterns.B64_DATA_URL.match(src)
        if not parts or parts.group(1) == "image/svg+xml":
            return

        names_image = any(
            name != "src" and patterns.IMAGE_EXTENSION.search(dom.attr(node, name)) for name in node.attrs
        )
        if not names_image:
            return

        marker = patterns.B64_MARKER.search(src)
        start = (marker.start() if marker else -1) + 7
        if len(src) - start < MAX_BASE64_PLACEHOLDER_LENGTH:
            del node["src"]

    def _promote_lazy_sources(self, node: Tag) -> None:
        if node.name == "img":
            srcset = dom.attr(node, "srcset")
            has_source = dom.attr(node, "src") or (srcset and srcset != "null")
            if has_source and "lazy" not in dom.class_name(node).lower():
                return

        for name in list(node.attrs):
            if name in ("src", "srcset", "alt"):
                continue
            value = dom.attr(node, name)
            if patterns.LAZY_SRCSET.search(value):
                copy_to = "srcset"
            elif patterns.LAZY_SRC.search(value):
                copy_to = "src"
            else:
                continue

            if node.name in ("img", "picture"):
                node[copy_to] = value
            elif node.name == "figure" and not node.find(["img", "picture"]):
                img = self.soup.new_tag("img")
                img[copy_to] = value
                node.append(img)

    def clean(self, root: Tag, tag: str) -> None:
        """Remove every ``tag`` element; video embeds survive when ``tag`` is embed-like."""
        is_embed = tag in patterns.EMBED_TAGS

        def should_remove(node: Tag) -> bool:
            return not (is_embed and is_video_embed(node))

        dom.remove_nodes(root.find_all(tag), should_remove)

    def remove_share_elements(self, root: Tag) -> None:
        end = dom.get_next_node(root, ignore_self_and_kids=True)
        node = dom.get_next_node(root)
        while node is not None and node is not end:
            if (
                patterns.SHARE_ELEMENTS.search(dom.match_string(node))
                and len(dom.text_content(node)) < patterns.DEFAULT_CHAR_THRESHOLD
            ):
                node = dom.remove_and_get_next(node)
            else:
                node = dom.get_next_node(node)

    def clean_headers(self, root: Tag) -> None:
        def has_negative_weight(node: Tag) -> bool:
            if class_weight(node, self.flags) < 0:
                self._log("Removing header with low class weight", match=dom.match_string(node))
                return True
            return False

        dom.remove_nodes(root.find_all(["h1", "h2"]), has_negative_weight)

    def clean_conditionally(self, root: Tag, tag: str) -> None:
        """Remove ``tag`` elements that look like boilerplate; only while CLEAN_CONDITIONALLY is set."""
        if not self.flags & Flag.CLEAN_CONDITIONALLY:
            return
        dom.remove_nodes(root.find_all(tag), lambda node: self._should_remove(node, tag))

    def _should_remove(self, node: Tag, tag: str) -> bool:
        if tag == "table" and self.is_marked_data_table(node):
            return False
        if dom.has_ancestor_tag(node, "table", -1, self.is_marked_data_table):
            return False

        weight = class_weight(node, self.flags)
        self._log("Cleaning conditionally", tag=tag, match=dom.match_string(node), weight=weight)
        if weight < 0:
            return True

        if dom.char_count(node, ",") >= 10:
            return False

        embeds = node.find_all(list(patterns.EMBED_TAGS))
        if any(is_video_embed(embed) for embed in embeds):
            return False

        p_count = len(node.find_all("p"))
        img_count = len(node.find_all("img"))
        li_count = len(node.find_all("li")) - 100
        input_count = len(node.find_all("input"))
        heading_density = dom.text_density(node, patterns.HEADING_TAGS)
        embed_count = len(embeds)
        link_density = dom.link_density(node)
        content_length = len(dom.inner_text(node))
        is_list = self._is_list(node, tag)
        in_figure = dom.has_ancestor_tag(node, "figure")

        return (
            (img_count > 1 and p_count / img_count < 0.5 and not in_figure)
            or (not is_list and li_count > p_count)
            or input_count > math.floor(p_count / 3)
            or (
                not is_list
                and heading_density < 0.9
                and content_length < 25
                and (img_count == 0 or img_count > 2)
                and not in_figure
            )
            or (not is_list and weight < 25 and link_density > 0.2)
            or (weight >= 25 and link_density > 0.5)
            or (embed_count == 1 and content_length < 75)
            or embed_count > 1
        )

    @staticmethod
    def _is_list(node: Tag, tag: str) -> bool:
        if tag in ("ul", "ol"):
            return True
        text_length = len(dom.inner_text(node))
        if text_length == 0:
            return False
        list_length = sum(len(dom.inner_text(lst)) for lst in node.find_all(["ul", "ol"]))
        return list_length / text_length > 0.9

    @staticmethod
    def _is_empty_paragraph(paragraph: Tag) -> bool:
        if paragraph.find(["img", "embed", "object", "iframe"]) is not None:
            return False
        return not dom.inner_text(paragraph, False)

    def collapse_single_cell_tables(self, root: Tag) -> None:
        """Replace single-row, single-cell tables by their cell."""
        for table in root.find_all("table"):
            if table.parent is None:
                continue
            tbody = dom.first_element_child(table) if dom.has_single_tag_inside_element(table, "tbody") else table
            if not dom.has_single_tag_inside_element(tbody, "tr"):
                continue
            row = dom.first_element_child(tbody)
            if not dom.has_single_tag_inside_element(row, "td"):
                continue
            cell = dom.first_element_child(row)
            new_tag = "p" if all(dom.is_phrasing_content(child) for child in cell.contents) else "div"
            dom.set_node_tag(cell, new_tag)
            table.replace_with(cell.extract())

    def _log(self, event: str, **kw) -> None:
        if self._debug:
            logger.debug(event, **kw)
