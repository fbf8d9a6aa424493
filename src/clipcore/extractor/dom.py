"""
Tree-walk helpers over BeautifulSoup nodes.

BeautifulSoup compares tags structurally (``Tag.__eq__``), so every helper
here compares nodes by identity. Traversal never relies on a live child list:
successors are computed before a node is removed.
"""

from __future__ import annotations

from typing import Callable, Iterable, List, Optional, Union

from bs4 import BeautifulSoup, NavigableString, PageElement, Tag
from bs4.element import PreformattedString

from . import patterns

Node = Union[Tag, NavigableString]


def is_element(node: Optional[PageElement]) -> bool:
    """True for element nodes; the document object itself is not an element."""
    return isinstance(node, Tag) and not isinstance(node, BeautifulSoup)


def is_text(node: Optional[PageElement]) -> bool:
    """True for character data (comments, doctypes and CDATA excluded)."""
    return isinstance(node, NavigableString) and not isinstance(node, PreformattedString)


def attr(node: Tag, name: str) -> str:
    """Attribute value as a plain string, whatever the tree builder produced."""
    value = node.get(name)
    if value is None:
        return ""
    if isinstance(value, (list, tuple)):
        return " ".join(value)
    return str(value)


def class_name(node: Tag) -> str:
    return attr(node, "class")


def node_id(node: Tag) -> str:
    return attr(node, "id")


def match_string(node: Tag) -> str:
    return f"{class_name(node)} {node_id(node)}"


def element_children(node: Tag) -> List[Tag]:
    return [child for child in node.contents if is_element(child)]


def first_element_child(node: Tag) -> Optional[Tag]:
    for child in node.contents:
        if is_element(child):
            return child
    return None


def next_element_sibling(node: PageElement) -> Optional[Tag]:
    sibling = node.next_sibling
    while sibling is not None and not is_element(sibling):
        sibling = sibling.next_sibling
    return sibling


def previous_element_sibling(node: PageElement) -> Optional[Tag]:
    sibling = node.previous_sibling
    while sibling is not None and not is_element(sibling):
        sibling = sibling.previous_sibling
    return sibling


def root_element(soup: BeautifulSoup) -> Optional[Tag]:
    return first_element_child(soup)


def text_content(node: PageElement) -> str:
    """Concatenated character data of a node and its descendants."""
    if isinstance(node, NavigableString):
        return str(node) if is_text(node) else ""
    return "".join(str(descendant) for descendant in node.descendants if is_text(descendant))


def inner_text(node: PageElement, normalize_spaces: bool = True) -> str:
    text = text_content(node).strip()
    if normalize_spaces:
        return patterns.NORMALIZE.sub(" ", text)
    return text


def char_count(node: Tag, separator: str = ",") -> int:
    return len(inner_text(node).split(separator)) - 1


def skip_whitespace_nodes(node: Optional[PageElement]) -> Optional[PageElement]:
    """First node from ``node`` onwards that is an element or carries non-blank text."""
    while node is not None and not is_element(node) and not str(node).strip():
        node = node.next_sibling
    return node


def get_next_node(node: Tag, ignore_self_and_kids: bool = False) -> Optional[Tag]:
    """Pre-order successor: first child, next sibling, then an ancestor's next sibling."""
    if not ignore_self_and_kids:
        child = first_element_child(node)
        if child is not None:
            return child

    sibling = next_element_sibling(node)
    if sibling is not None:
        return sibling

    parent = node.parent
    while parent is not None:
        sibling = next_element_sibling(parent)
        if sibling is not None:
            return sibling
        parent = parent.parent
    return None


def remove_and_get_next(node: Tag) -> Optional[Tag]:
    next_node = get_next_node(node, ignore_self_and_kids=True)
    node.extract()
    return next_node


def set_node_tag(node: Tag, tag: str) -> Tag:
    """Retag in place; identity, attributes and children are kept."""
    node.name = tag
    return node


def replace_node_tags(nodes: Iterable[Tag], tag: str) -> None:
    for node in nodes:
        set_node_tag(node, tag)


def remove_nodes(nodes: List[Tag], predicate: Optional[Callable[[Tag], bool]] = None) -> None:
    """Remove nodes in reverse document order, skipping already detached ones."""
    for node in reversed(nodes):
        if node.parent is None:
            continue
        if predicate is None or predicate(node):
            node.extract()


def node_ancestors(node: PageElement, max_depth: int = 0) -> List[Tag]:
    """Ancestors from the parent upward, including the document object."""
    ancestors: List[Tag] = []
    current = node
    while current.parent is not None:
        ancestors.append(current.parent)
        if max_depth and len(ancestors) == max_depth:
            break
        current = current.parent
    return ancestors


def has_ancestor_tag(
    node: PageElement,
    tag: str,
    max_depth: int = 3,
    predicate: Optional[Callable[[Tag], bool]] = None,
) -> bool:
    """Whether an ancestor named ``tag`` exists within ``max_depth`` levels (<= 0: unlimited)."""
    depth = 0
    current = node
    while current.parent is not None:
        if max_depth > 0 and depth > max_depth:
            return False
        parent = current.parent
        if is_element(parent) and parent.name == tag and (predicate is None or predicate(parent)):
            return True
        current = parent
        depth += 1
    return False


def contains_node(nodes: Iterable[PageElement], target: PageElement) -> bool:
    return any(node is target for node in nodes)


def is_whitespace(node: PageElement) -> bool:
    if is_text(node):
        return not str(node).strip()
    return is_element(node) and node.name == "br"


def is_phrasing_content(node: PageElement) -> bool:
    if is_text(node):
        return True
    if not is_element(node):
        return False
    if node.name in patterns.PHRASING_ELEMS:
        return True
    return node.name in ("a", "del", "ins") and all(is_phrasing_content(child) for child in node.contents)


def has_single_tag_inside_element(element: Tag, tag: str) -> bool:
    """Exactly one element child named ``tag`` and no text with content beside it."""
    children = element_children(element)
    if len(children) != 1 or children[0].name != tag:
        return False
    return not any(is_text(child) and patterns.HAS_CONTENT.search(str(child)) for child in element.contents)


def is_element_without_content(node: Tag) -> bool:
    if not is_element(node) or text_content(node).strip():
        return False
    children = element_children(node)
    if not children:
        return True
    return len(children) == len(node.find_all("br")) + len(node.find_all("hr"))


def has_child_block_element(element: Tag) -> bool:
    return any(
        is_element(child) and (child.name in patterns.DIV_TO_P_ELEMS or has_child_block_element(child))
        for child in element.contents
    )


def is_probably_visible(node: Tag) -> bool:
    if patterns.DISPLAY_NONE.search(attr(node, "style")):
        return False
    if node.has_attr("hidden"):
        return False
    aria_hidden = node.get("aria-hidden")
    return aria_hidden is None or aria_hidden != "true" or "fallback-image" in class_name(node)


def link_density(element: Tag) -> float:
    """Share of the normalized text that sits inside anchors; in-page fragments count 0.3."""
    text_length = len(inner_text(element))
    if text_length == 0:
        return 0.0

    link_length = 0.0
    for link in element.find_all("a"):
        href = attr(link, "href")
        coefficient = 0.3 if href and patterns.HASH_URL.match(href) else 1.0
        link_length += len(inner_text(link)) * coefficient
    return link_length / text_length


def text_density(element: Tag, tags: Iterable[str]) -> float:
    text_length = len(inner_text(element))
    if text_length == 0:
        return 0.0
    children_length = sum(len(inner_text(child)) for child in element.find_all(list(tags)))
    return children_length / text_length


def text_similarity(text_a: str, text_b: str) -> float:
    """
    One-directional token similarity of ``text_b`` against ``text_a``.

    Returns ``1 - len(tokens unique to b) / len(tokens of b)``, measured on the
    space-joined token strings. ``text_similarity(a, b)`` and
    ``text_similarity(b, a)`` can differ.
    """
    tokens_a = [token for token in patterns.TOKENIZE.split((text_a or "").lower()) if token]
    tokens_b = [token for token in patterns.TOKENIZE.split((text_b or "").lower()) if token]
    if not tokens_a or not tokens_b:
        return 0.0
    known = set(tokens_a)
    unique_b = [token for token in tokens_b if token not in known]
    distance_b = len(" ".join(unique_b)) / len(" ".join(tokens_b))
    return 1 - distance_b
