"""Exception hierarchy shared by document filters and the pipeline driver."""

from __future__ import annotations


class FilterError(RuntimeError):
    """Base exception for document filter failures."""


class InvalidNodeError(FilterError):
    """Raised when a filter receives a node it is not allowed to rewrite."""


class AssetMissingError(FilterError):
    """Raised when a referenced asset cannot be located or read."""


class ConfigurationError(FilterError):
    """Raised when filter configuration or a registry file is malformed."""


__all__ = [
    "AssetMissingError",
    "ConfigurationError",
    "FilterError",
    "InvalidNodeError",
]
