"""Document filters rewriting rendered Markdown HTML."""

from __future__ import annotations

from importlib.metadata import PackageNotFoundError, version as _pkg_version

from mdfilters.core.config import EmojiFilterConfig, build_config, load_registry
from mdfilters.core.diagnostics import DiagnosticEmitter, LoggingEmitter, NullEmitter
from mdfilters.core.exceptions import (
    AssetMissingError,
    ConfigurationError,
    FilterError,
    InvalidNodeError,
)
from mdfilters.core.filters import NodeFilter
from mdfilters.core.nodes import NodeVerdict, walk
from mdfilters.core.pipeline import apply_filter, apply_filters, filter_html, render_html
from mdfilters.filters.emoji import EmojiFilter, EmojiImageCache


try:
    __version__ = _pkg_version("markdown-filters")
except PackageNotFoundError:
    __version__ = "0.0.0"


__all__ = [
    "AssetMissingError",
    "ConfigurationError",
    "DiagnosticEmitter",
    "EmojiFilter",
    "EmojiFilterConfig",
    "EmojiImageCache",
    "FilterError",
    "InvalidNodeError",
    "LoggingEmitter",
    "NodeFilter",
    "NodeVerdict",
    "NullEmitter",
    "__version__",
    "apply_filter",
    "apply_filters",
    "build_config",
    "filter_html",
    "load_registry",
    "render_html",
    "walk",
]
