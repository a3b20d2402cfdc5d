"""Document tree primitives consumed by node filters.

Filters never build or walk BeautifulSoup trees by hand. They rely on the
small vocabulary defined here:

`is_text_node`
: decide whether a node carries plain document text. Comments, CDATA,
  doctypes and raw ``<script>``/``<style>`` payloads are not text for the
  purpose of filtering.

`create_text_node` / `create_image_node`
: build fresh replacement nodes. Image tags are created from the document
  owning the original node so that they share its tree builder.

`walk`
: depth-first traversal steered by a :class:`NodeVerdict` predicate, mirroring
  DOM tree walkers: ``ACCEPT`` yields the node, ``SKIP`` hides the node but
  keeps visiting its children, ``REJECT`` prunes the whole subtree.
"""

from __future__ import annotations

from collections.abc import Callable, Iterable, Iterator
from enum import Enum, auto
from typing import Any, cast

from bs4 import BeautifulSoup
from bs4.element import NavigableString, PageElement, PreformattedString, Script, Stylesheet, Tag


class NodeVerdict(Enum):
    """Outcome of a node-selection predicate."""

    ACCEPT = auto()
    """Hand the node to the filter."""

    SKIP = auto()
    """Ignore the node itself but keep traversing its children."""

    REJECT = auto()
    """Ignore the node and its entire subtree."""


NodePredicate = Callable[[PageElement], NodeVerdict]


def is_text_node(node: Any) -> bool:
    """Return True when *node* is a plain text leaf."""
    if not isinstance(node, NavigableString):
        return False
    return not isinstance(node, (PreformattedString, Script, Stylesheet))


def parent_name(node: PageElement) -> str | None:
    """Return the lower-cased tag name of the node's immediate parent."""
    parent = node.parent
    name = getattr(parent, "name", None)
    if not isinstance(name, str) or isinstance(parent, BeautifulSoup):
        return None
    return name.lower()


def document_of(node: PageElement) -> BeautifulSoup | None:
    """Return the BeautifulSoup document owning *node*, if it is attached to one."""
    current: PageElement | None = node
    while current is not None:
        if isinstance(current, BeautifulSoup):
            return current
        current = current.parent
    return None


def create_text_node(text: str) -> NavigableString:
    """Create a detached text node."""
    return NavigableString(text)


def create_image_node(
    src: str,
    *,
    document: BeautifulSoup | None = None,
    css_class: str | None = None,
    alt: str | None = None,
) -> Tag:
    """Create a detached ``<img>`` tag pointing at *src*."""
    owner = document if document is not None else BeautifulSoup("", "html.parser")
    attrs: dict[str, str] = {}
    if css_class:
        attrs["class"] = css_class
    attrs["src"] = src
    if alt is not None:
        attrs["alt"] = alt
    return owner.new_tag("img", attrs=attrs)


def gather_classes(value: Any) -> list[str]:
    """Return a list of classes extracted from a BeautifulSoup attribute."""
    if isinstance(value, str):
        return value.split()
    if isinstance(value, Iterable) and not isinstance(value, (bytes, bytearray)):
        return [cast(str, item) for item in value if isinstance(item, str)]
    return []


def _children(node: PageElement) -> list[PageElement]:
    if isinstance(node, Tag):
        return list(node.contents)
    return []


def walk(root: PageElement, accept: NodePredicate) -> Iterator[PageElement]:
    """Yield descendants of *root* in document order according to *accept*.

    The root itself is never offered to the predicate. Children are read when
    their parent is reached, so callers that mutate the tree should
    materialise the iterator first.
    """
    stack = list(reversed(_children(root)))
    while stack:
        node = stack.pop()
        verdict = accept(node)
        if verdict is NodeVerdict.REJECT:
            continue
        if verdict is NodeVerdict.ACCEPT:
            yield node
        stack.extend(reversed(_children(node)))


__all__ = [
    "NodePredicate",
    "NodeVerdict",
    "create_image_node",
    "create_text_node",
    "document_of",
    "gather_classes",
    "is_text_node",
    "parent_name",
    "walk",
]
