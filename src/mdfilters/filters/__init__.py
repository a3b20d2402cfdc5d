"""Filter stages available to the pipeline."""

from __future__ import annotations

from .emoji import EmojiFilter, EmojiImageCache


__all__ = ["EmojiFilter", "EmojiImageCache"]
