"""CLI command implementations."""

from __future__ import annotations

from .emojify import emojify


__all__ = ["emojify"]
