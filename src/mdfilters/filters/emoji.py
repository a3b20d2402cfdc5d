"""Replace ``:emoji:`` shorthand in text nodes with inline images.

A text node such as ``"That is great! :+1: Good job!"`` becomes three nodes:
``"That is great! "``, ``<img class="emoji" src="data:image/png;base64,...">``
and ``" Good job!"``.

Images are embedded as base64 data URIs because the rewritten document is
rendered in a sandbox that cannot reach the local files the registry points
to. Each image is read and encoded once per filter instance.
"""

from __future__ import annotations

import asyncio
import base64
from collections.abc import Iterable, Mapping, Sequence
import logging
from pathlib import Path
import re
from types import MappingProxyType
from urllib.parse import urlparse
from urllib.request import url2pathname

from bs4.element import PageElement

from mdfilters.core.config import EmojiFilterConfig
from mdfilters.core.exceptions import AssetMissingError, InvalidNodeError
from mdfilters.core.nodes import (
    NodeVerdict,
    create_image_node,
    create_text_node,
    document_of,
    is_text_node,
    parent_name,
)


logger = logging.getLogger(__name__)

# One or more non-whitespace characters between two colons. The lazy
# quantifier makes ``:a:b:c:`` yield ``:a:`` and ``:b:``, not one token.
EMOJI_PATTERN = re.compile(r":\S+?:")

DEFAULT_MIME_TYPE = "image/png"
DEFAULT_CSS_CLASS = "emoji"
DEFAULT_SKIP_PARENTS = ("code", "pre")


def reference_to_path(reference: str) -> Path:
    """Convert a ``file://`` URI or plain path into a local filesystem path."""
    parsed = urlparse(reference)
    if len(parsed.scheme) <= 1:
        return Path(reference)
    if parsed.scheme != "file":
        msg = f"Unsupported emoji image reference '{reference}': only file URIs are allowed."
        raise AssetMissingError(msg)
    if parsed.netloc and parsed.netloc != "localhost":
        return Path(url2pathname(f"//{parsed.netloc}{parsed.path}"))
    return Path(url2pathname(parsed.path))


def encode_data_uri(payload: bytes, mime_type: str = DEFAULT_MIME_TYPE) -> str:
    """Return a base64 data URI embedding *payload*."""
    encoded = base64.b64encode(payload).decode("ascii")
    return f"data:{mime_type};base64,{encoded}"


class EmojiImageCache:
    """Memoise image references as data URIs.

    Entries are never evicted or overwritten. Concurrent misses on the same
    reference await a single shared read, so every file is read at most once
    per successful resolution. Failed reads are not cached and the next
    lookup tries again.
    """

    def __init__(
        self,
        *,
        mime_type: str = DEFAULT_MIME_TYPE,
        read_timeout: float | None = None,
    ) -> None:
        self.mime_type = mime_type
        self.read_timeout = read_timeout
        self.reads = 0
        self._entries: dict[str, str] = {}
        self._pending: dict[str, asyncio.Task[str]] = {}

    def __len__(self) -> int:
        return len(self._entries)

    def __contains__(self, reference: object) -> bool:
        return reference in self._entries

    async def get(self, reference: str) -> str:
        """Return the data URI for *reference*, reading the file on first use."""
        cached = self._entries.get(reference)
        if cached is not None:
            logger.debug("Emoji image cache hit: %s", reference)
            return cached

        task = self._pending.get(reference)
        if task is None:
            logger.debug("Emoji image cache miss: %s", reference)
            task = asyncio.ensure_future(self._load(reference))
            self._pending[reference] = task
            task.add_done_callback(lambda _: self._pending.pop(reference, None))
        # Shielded so that one cancelled caller does not abort the read shared
        # with the other waiters.
        return await asyncio.shield(task)

    async def _load(self, reference: str) -> str:
        path = reference_to_path(reference)
        self.reads += 1
        try:
            if self.read_timeout is None:
                payload = await asyncio.to_thread(path.read_bytes)
            else:
                payload = await asyncio.wait_for(
                    asyncio.to_thread(path.read_bytes), timeout=self.read_timeout
                )
        except asyncio.TimeoutError as exc:
            msg = f"Timed out after {self.read_timeout}s reading emoji image '{path}'."
            raise AssetMissingError(msg) from exc
        except OSError as exc:
            msg = f"Unable to read emoji image '{path}'."
            raise AssetMissingError(msg) from exc

        uri = encode_data_uri(payload, self.mime_type)
        self._entries.setdefault(reference, uri)
        return self._entries[reference]


class EmojiFilter:
    """Node filter inserting emoji images where emoji tokens appear in text."""

    name = "emoji"

    def __init__(
        self,
        registry: Mapping[str, str],
        *,
        mime_type: str = DEFAULT_MIME_TYPE,
        css_class: str = DEFAULT_CSS_CLASS,
        skip_parents: Iterable[str] = DEFAULT_SKIP_PARENTS,
        read_timeout: float | None = None,
    ) -> None:
        """Create a filter reading images referenced by *registry*.

        Args:
            registry: Mapping from emoji token (``:+1:``) to the image's
                ``file://`` URI or local path.
            mime_type: MIME type written into every data URI.
            css_class: Class attached to generated ``<img>`` tags.
            skip_parents: Tags whose direct text children are left alone.
            read_timeout: Optional bound, in seconds, for each image read.
        """
        self.registry: Mapping[str, str] = MappingProxyType(dict(registry))
        self.css_class = css_class
        self.skip_parents = frozenset(tag.lower() for tag in skip_parents)
        self.images = EmojiImageCache(mime_type=mime_type, read_timeout=read_timeout)

    @classmethod
    def from_config(cls, config: EmojiFilterConfig) -> EmojiFilter:
        """Build a filter from validated settings."""
        return cls(
            config.registry,
            mime_type=config.mime_type,
            css_class=config.css_class,
            skip_parents=config.skip_parents,
            read_timeout=config.read_timeout,
        )

    def accept_node(self, node: PageElement) -> NodeVerdict:
        """Accept text nodes unless their parent is a code container.

        Element nodes are skipped, not rejected, so text next to a
        ``<code>`` span is still visited.
        """
        if not is_text_node(node):
            return NodeVerdict.SKIP
        if parent_name(node) in self.skip_parents:
            return NodeVerdict.SKIP
        return NodeVerdict.ACCEPT

    async def filter(self, node: PageElement) -> Sequence[PageElement] | None:
        """Split a text node around emoji tokens.

        Returns ``None`` when the text holds no known token. Otherwise the
        returned nodes, read in order with each image standing for its token,
        reproduce the original text exactly.

        Raises:
            InvalidNodeError: *node* is not a text node.
            AssetMissingError: a registered image cannot be read. No partial
                sequence is returned in that case.
        """
        if not is_text_node(node):
            msg = (
                "Emoji filter requires text nodes; rewriting "
                f"{type(node).__name__} would replace non-text content."
            )
            raise InvalidNodeError(msg)

        text = str(node)
        if ":" not in text:
            return None

        document = document_of(node)
        nodes: list[PageElement] = []
        cursor = 0
        for match in EMOJI_PATTERN.finditer(text):
            token = match.group(0)
            reference = self.registry.get(token)
            if reference is None:
                continue

            uri = await self.images.get(reference)
            if match.start() > cursor:
                nodes.append(create_text_node(text[cursor : match.start()]))
            nodes.append(
                create_image_node(uri, document=document, css_class=self.css_class, alt=token)
            )
            cursor = match.end()

        if not nodes:
            return None
        if cursor < len(text):
            nodes.append(create_text_node(text[cursor:]))
        return nodes


__all__ = [
    "DEFAULT_CSS_CLASS",
    "DEFAULT_MIME_TYPE",
    "DEFAULT_SKIP_PARENTS",
    "EMOJI_PATTERN",
    "EmojiFilter",
    "EmojiImageCache",
    "encode_data_uri",
    "reference_to_path",
]
