from __future__ import annotations

import json
from pathlib import Path

from pydantic import ValidationError
import pytest

from mdfilters.core.config import (
    EmojiFilterConfig,
    build_config,
    load_registry,
    normalise_token,
)
from mdfilters.core.exceptions import ConfigurationError
from mdfilters.filters.emoji import EmojiFilter


def test_normalise_token() -> None:
    assert normalise_token("+1") == ":+1:"
    assert normalise_token(":smile:") == ":smile:"
    assert normalise_token(" tada ") == ":tada:"


def test_config_defaults() -> None:
    config = EmojiFilterConfig()

    assert config.registry == {}
    assert config.mime_type == "image/png"
    assert config.css_class == "emoji"
    assert config.skip_parents == ("code", "pre")
    assert config.read_timeout is None


def test_config_normalises_values() -> None:
    config = EmojiFilterConfig(
        registry={"+1": "file:///emoji/thumbsup.png"},
        mime_type="IMAGE/PNG",
        skip_parents=("CODE", " kbd ", ""),
    )

    assert config.registry == {":+1:": "file:///emoji/thumbsup.png"}
    assert config.mime_type == "image/png"
    assert config.skip_parents == ("code", "kbd")


@pytest.mark.parametrize(
    "options",
    [
        {"registry": {":two words:": "file:///a.png"}},
        {"registry": {":a:b:": "file:///a.png"}},
        {"registry": {":a:": "  "}},
        {"mime_type": "png"},
        {"read_timeout": 0},
        {"unknown": True},
    ],
)
def test_config_rejects_invalid_values(options: dict[str, object]) -> None:
    with pytest.raises(ValidationError):
        EmojiFilterConfig(**options)


def test_build_config_wraps_validation_errors() -> None:
    with pytest.raises(ConfigurationError) as excinfo:
        build_config({":bad token:": "file:///a.png"})
    assert isinstance(excinfo.value.__cause__, ValidationError)


def test_filter_from_config() -> None:
    config = build_config(
        {":+1:": "file:///emoji/thumbsup.png"}, css_class="gh", skip_parents=("KBD",)
    )
    node_filter = EmojiFilter.from_config(config)

    assert dict(node_filter.registry) == {":+1:": "file:///emoji/thumbsup.png"}
    assert node_filter.css_class == "gh"
    assert node_filter.skip_parents == frozenset({"kbd"})


def test_load_json_registry_resolves_relative_paths(tmp_path: Path) -> None:
    (tmp_path / "img").mkdir()
    registry_file = tmp_path / "emoji.json"
    registry_file.write_text(
        json.dumps(
            {
                "+1": "img/thumbsup.png",
                ":smile:": "/opt/emoji/smile.png",
                ":tada:": "file:///srv/emoji/tada.png",
            }
        ),
        encoding="utf-8",
    )

    registry = load_registry(registry_file)

    assert registry == {
        ":+1:": (tmp_path / "img" / "thumbsup.png").resolve().as_uri(),
        ":smile:": Path("/opt/emoji/smile.png").resolve().as_uri(),
        ":tada:": "file:///srv/emoji/tada.png",
    }


def test_load_yaml_registry(tmp_path: Path) -> None:
    registry_file = tmp_path / "emoji.yml"
    registry_file.write_text('"+1": thumbsup.png\n', encoding="utf-8")

    assert load_registry(registry_file) == {
        ":+1:": (tmp_path / "thumbsup.png").resolve().as_uri()
    }


@pytest.mark.parametrize(
    ("name", "content"),
    [
        ("emoji.json", "{not json"),
        ("emoji.json", "[1, 2]"),
        ("emoji.yaml", "key: [unclosed"),
        ("emoji.json", '{":a:": 3}'),
    ],
)
def test_load_registry_rejects_malformed_files(tmp_path: Path, name: str, content: str) -> None:
    registry_file = tmp_path / name
    registry_file.write_text(content, encoding="utf-8")

    with pytest.raises(ConfigurationError):
        load_registry(registry_file)


def test_load_registry_missing_file(tmp_path: Path) -> None:
    with pytest.raises(ConfigurationError) as excinfo:
        load_registry(tmp_path / "absent.json")
    assert isinstance(excinfo.value.__cause__, OSError)
