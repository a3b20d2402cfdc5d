"""Filter chain driver applying node filters to an HTML document.

Filters run one after the other, each over the tree left by its
predecessors. For a single filter the driver:

1. materialises the nodes its predicate accepts, in document order;
2. awaits every ``filter(node)`` call concurrently, so filters blocked on I/O
   for one node do not hold up the others;
3. splices each returned sequence in place of its node, in document order.

A node whose filter fails with :class:`AssetMissingError` keeps its original
content and the failure is reported through the diagnostic emitter. Any other
exception, including :class:`InvalidNodeError`, aborts the run.
"""

from __future__ import annotations

import asyncio
from collections.abc import Iterable, Sequence
import logging

from bs4 import BeautifulSoup
from bs4.element import PageElement
import markdown

from .diagnostics import DiagnosticEmitter, NullEmitter
from .exceptions import AssetMissingError
from .filters import NodeFilter, filter_name
from .nodes import walk


logger = logging.getLogger(__name__)

DEFAULT_MARKDOWN_EXTENSIONS: tuple[str, ...] = ("extra", "sane_lists")


async def apply_filter(
    root: PageElement,
    node_filter: NodeFilter,
    *,
    emitter: DiagnosticEmitter | None = None,
) -> int:
    """Apply one filter to *root* and return the number of rewritten nodes."""
    emitter = emitter or NullEmitter()
    label = filter_name(node_filter)
    candidates = list(walk(root, node_filter.accept_node))
    logger.debug("%s: %d candidate node(s)", label, len(candidates))

    results: list[Sequence[PageElement] | None | BaseException] = await asyncio.gather(
        *(node_filter.filter(node) for node in candidates),
        return_exceptions=True,
    )

    failure = next(
        (
            result
            for result in results
            if isinstance(result, BaseException) and not isinstance(result, AssetMissingError)
        ),
        None,
    )
    if failure is not None:
        raise failure

    replaced = 0
    for node, result in zip(candidates, results):
        if isinstance(result, AssetMissingError):
            emitter.warning(f"{label} filter left a node untouched: {result}", result)
            emitter.event("node_left_untouched", {"filter": label, "reason": str(result)})
            continue
        if result is None:
            continue
        if result:
            node.replace_with(*result)
        else:
            node.extract()
        replaced += 1

    emitter.event(
        "filter_applied",
        {"filter": label, "candidates": len(candidates), "replaced": replaced},
    )
    return replaced


async def apply_filters(
    root: PageElement,
    filters: Iterable[NodeFilter],
    *,
    emitter: DiagnosticEmitter | None = None,
) -> int:
    """Apply *filters* in sequence and return the total number of rewrites."""
    total = 0
    for node_filter in filters:
        total += await apply_filter(root, node_filter, emitter=emitter)
    return total


def parse_html(html: str) -> BeautifulSoup:
    """Parse an HTML fragment with the parser used across the pipeline."""
    return BeautifulSoup(html, "html.parser")


async def filter_html(
    html: str,
    filters: Iterable[NodeFilter],
    *,
    emitter: DiagnosticEmitter | None = None,
) -> str:
    """Parse *html*, run *filters* over it and serialise the result."""
    soup = parse_html(html)
    await apply_filters(soup, filters, emitter=emitter)
    return str(soup)


def render_html(
    html: str,
    filters: Iterable[NodeFilter],
    *,
    emitter: DiagnosticEmitter | None = None,
) -> str:
    """Synchronous wrapper around :func:`filter_html`."""
    return asyncio.run(filter_html(html, filters, emitter=emitter))


def render_markdown_html(
    text: str,
    *,
    extensions: Sequence[str] = DEFAULT_MARKDOWN_EXTENSIONS,
) -> str:
    """Convert Markdown into HTML ready to be filtered."""
    md = markdown.Markdown(extensions=list(extensions), output_format="html")
    return md.convert(text)


__all__ = [
    "DEFAULT_MARKDOWN_EXTENSIONS",
    "apply_filter",
    "apply_filters",
    "filter_html",
    "parse_html",
    "render_html",
    "render_markdown_html",
]
