"""Configuration models used by document filters.

EmojiFilterConfig

`registry` (`dict[str, str]`)
: Mapping from emoji token (``:+1:``) to the image reference rendered in its
  place. References are ``file://`` URIs or local filesystem paths. Keys
  given without their surrounding colons (``+1``) are wrapped automatically.

`mime_type` (`str`)
: MIME type announced in the generated data URIs. Every registered image is
  assumed to share it.

`css_class` (`str`)
: Class attached to each generated ``<img>`` element.

`skip_parents` (`tuple[str, ...]`)
: Tag names whose direct text children are never rewritten. Matching is
  case-insensitive.

`read_timeout` (`float | None`)
: Upper bound, in seconds, for reading one image from disk. ``None`` waits
  indefinitely.
"""

from __future__ import annotations

import json
from pathlib import Path
import re
from typing import Any
from urllib.parse import urlparse

from pydantic import BaseModel, ConfigDict, Field, ValidationError, field_validator
import yaml

from .exceptions import ConfigurationError


_TOKEN_PATTERN = re.compile(r":[^\s:]+:")
_YAML_SUFFIXES = {".yml", ".yaml"}


def normalise_token(token: str) -> str:
    """Return *token* wrapped in colons when they are missing."""
    stripped = token.strip()
    if not stripped.startswith(":"):
        stripped = f":{stripped}"
    if not stripped.endswith(":") or stripped == ":":
        stripped = f"{stripped}:"
    return stripped


class EmojiFilterConfig(BaseModel):
    """Settings accepted by :class:`mdfilters.filters.emoji.EmojiFilter`."""

    model_config = ConfigDict(extra="forbid")

    registry: dict[str, str] = Field(default_factory=dict, description="Token to image map")
    mime_type: str = Field(default="image/png", description="Data URI MIME type")
    css_class: str = Field(default="emoji", description="Class of generated images")
    skip_parents: tuple[str, ...] = ("code", "pre")
    read_timeout: float | None = None

    @field_validator("registry")
    @classmethod
    def check_tokens(cls, value: dict[str, str]) -> dict[str, str]:
        """Normalise registry keys and reject tokens that can never match."""
        normalised: dict[str, str] = {}
        for token, reference in value.items():
            candidate = normalise_token(token)
            if not _TOKEN_PATTERN.fullmatch(candidate):
                msg = f"Invalid emoji token {token!r}: tokens are ':name:' without spaces."
                raise ValueError(msg)
            if not reference.strip():
                msg = f"Emoji token {token!r} has an empty image reference."
                raise ValueError(msg)
            normalised[candidate] = reference
        return normalised

    @field_validator("mime_type")
    @classmethod
    def check_mime_type(cls, value: str) -> str:
        """Ensure the MIME type looks like ``type/subtype``."""
        candidate = value.strip().lower()
        if candidate.count("/") != 1 or " " in candidate:
            msg = f"Invalid MIME type {value!r}."
            raise ValueError(msg)
        return candidate

    @field_validator("skip_parents")
    @classmethod
    def lower_tags(cls, value: tuple[str, ...]) -> tuple[str, ...]:
        """Lower-case tag names so lookups ignore case."""
        return tuple(tag.strip().lower() for tag in value if tag.strip())

    @field_validator("read_timeout")
    @classmethod
    def check_timeout(cls, value: float | None) -> float | None:
        """Reject non-positive timeouts."""
        if value is not None and value <= 0:
            msg = "read_timeout must be a positive number of seconds."
            raise ValueError(msg)
        return value


def _is_uri(reference: str) -> bool:
    parsed = urlparse(reference)
    # Single letters are Windows drive letters, not schemes.
    return len(parsed.scheme) > 1


def _resolve_reference(reference: str, base_dir: Path) -> str:
    if _is_uri(reference):
        return reference
    path = Path(reference).expanduser()
    if not path.is_absolute():
        path = base_dir / path
    return path.resolve().as_uri()


def _read_mapping(path: Path) -> Any:
    try:
        raw = path.read_text(encoding="utf-8")
    except OSError as exc:
        msg = f"Unable to read emoji registry '{path}'."
        raise ConfigurationError(msg) from exc
    try:
        if path.suffix.lower() in _YAML_SUFFIXES:
            return yaml.safe_load(raw) or {}
        return json.loads(raw)
    except (json.JSONDecodeError, yaml.YAMLError) as exc:
        msg = f"Emoji registry '{path}' is not valid {path.suffix.lstrip('.') or 'JSON'}."
        raise ConfigurationError(msg) from exc


def load_registry(path: Path | str) -> dict[str, str]:
    """Load a token-to-image mapping from a JSON or YAML file.

    Relative image paths are resolved against the registry's directory and
    returned as ``file://`` URIs, ready for :class:`EmojiFilterConfig`.
    """
    registry_path = Path(path)
    data = _read_mapping(registry_path)
    if not isinstance(data, dict):
        msg = f"Emoji registry '{registry_path}' must contain a mapping of tokens to paths."
        raise ConfigurationError(msg)

    base_dir = registry_path.resolve().parent
    entries: dict[str, str] = {}
    for token, reference in data.items():
        if not isinstance(token, str) or not isinstance(reference, str):
            msg = f"Emoji registry '{registry_path}' has a non-string entry for {token!r}."
            raise ConfigurationError(msg)
        entries[normalise_token(token)] = _resolve_reference(reference, base_dir)
    return entries


def build_config(registry: dict[str, str], **options: Any) -> EmojiFilterConfig:
    """Validate *registry* and *options*, raising :class:`ConfigurationError`."""
    try:
        return EmojiFilterConfig(registry=registry, **options)
    except ValidationError as exc:
        msg = f"Invalid emoji filter configuration: {exc.error_count()} error(s)."
        raise ConfigurationError(msg) from exc


__all__ = ["EmojiFilterConfig", "build_config", "load_registry", "normalise_token"]
