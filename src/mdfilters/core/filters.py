"""Contract between node filters and the pipeline driver."""

from __future__ import annotations

from collections.abc import Sequence
from typing import Protocol, runtime_checkable

from bs4.element import PageElement

from .nodes import NodeVerdict


@runtime_checkable
class NodeFilter(Protocol):
    """Protocol implemented by every filter stage of the pipeline.

    The driver first asks :meth:`accept_node` which nodes of the document the
    filter wants to see, then awaits :meth:`filter` for each accepted node.
    ``None`` means the node stays as it is; a sequence means the node must be
    replaced, in place and in order, by the returned nodes. Filters never
    splice the tree themselves.
    """

    def accept_node(self, node: PageElement) -> NodeVerdict:
        """Return the traversal verdict for *node*."""
        ...

    async def filter(self, node: PageElement) -> Sequence[PageElement] | None:
        """Return the replacement sequence for *node*, or ``None``."""
        ...


def filter_name(node_filter: object) -> str:
    """Return a readable label for a filter instance."""
    name = getattr(node_filter, "name", None)
    if isinstance(name, str) and name:
        return name
    return type(node_filter).__name__


__all__ = ["NodeFilter", "filter_name"]
