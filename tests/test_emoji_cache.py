from __future__ import annotations

import asyncio
from pathlib import Path
import time

import pytest

from mdfilters.core.exceptions import AssetMissingError
from mdfilters.filters import emoji
from mdfilters.filters.emoji import EmojiImageCache, encode_data_uri, reference_to_path


def test_encode_data_uri() -> None:
    assert encode_data_uri(b"abc") == "data:image/png;base64,YWJj"
    assert encode_data_uri(b"abc", "image/svg+xml") == "data:image/svg+xml;base64,YWJj"


def test_reference_to_path_accepts_uris_and_paths(tmp_path: Path) -> None:
    target = tmp_path / "with space.png"

    assert reference_to_path(target.as_uri()) == target
    assert reference_to_path(str(target)) == target
    assert reference_to_path("file://localhost/emoji/a.png") == Path("/emoji/a.png")


def test_reference_to_path_rejects_remote_schemes() -> None:
    with pytest.raises(AssetMissingError):
        reference_to_path("https://example.com/emoji.png")


def test_cache_serves_identical_uri(tmp_path: Path) -> None:
    image = tmp_path / "a.png"
    image.write_bytes(b"payload")
    cache = EmojiImageCache()

    async def _resolve_twice() -> tuple[str, str]:
        return await cache.get(image.as_uri()), await cache.get(image.as_uri())

    first, second = asyncio.run(_resolve_twice())

    assert first == second == encode_data_uri(b"payload")
    assert cache.reads == 1
    assert image.as_uri() in cache
    assert len(cache) == 1


def test_concurrent_misses_share_one_read(tmp_path: Path) -> None:
    image = tmp_path / "a.png"
    image.write_bytes(b"payload")
    cache = EmojiImageCache()

    async def _resolve_many() -> list[str]:
        return await asyncio.gather(*(cache.get(image.as_uri()) for _ in range(10)))

    results = asyncio.run(_resolve_many())

    assert set(results) == {encode_data_uri(b"payload")}
    assert cache.reads == 1


def test_cache_survives_event_loops(tmp_path: Path) -> None:
    image = tmp_path / "a.png"
    image.write_bytes(b"payload")
    cache = EmojiImageCache()

    first = asyncio.run(cache.get(str(image)))
    image.unlink()
    second = asyncio.run(cache.get(str(image)))

    assert first == second
    assert cache.reads == 1


def test_failed_reads_are_not_cached(tmp_path: Path) -> None:
    image = tmp_path / "late.png"
    cache = EmojiImageCache()

    with pytest.raises(AssetMissingError) as excinfo:
        asyncio.run(cache.get(image.as_uri()))
    assert isinstance(excinfo.value.__cause__, FileNotFoundError)
    assert len(cache) == 0

    image.write_bytes(b"now here")
    assert asyncio.run(cache.get(image.as_uri())) == encode_data_uri(b"now here")
    assert cache.reads == 2


def test_read_timeout_is_an_asset_error(tmp_path: Path, monkeypatch: pytest.MonkeyPatch) -> None:
    image = tmp_path / "slow.png"
    image.write_bytes(b"slow")

    def slow_read(self: Path) -> bytes:
        time.sleep(0.2)
        return b"slow"

    monkeypatch.setattr(emoji.Path, "read_bytes", slow_read)
    cache = EmojiImageCache(read_timeout=0.01)

    with pytest.raises(AssetMissingError, match="Timed out"):
        asyncio.run(cache.get(str(image)))
