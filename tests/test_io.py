"""Tests for shards.io."""

from __future__ import annotations

import asyncio
from pathlib import Path

import pytest

from shards.errors import OutputError
from shards.io import ensure_dir, read_text, write_text


def test_concurrent_creation_of_overlapping_trees(tmp_path: Path) -> None:
    base = tmp_path / "build"
    targets = [
        base / "a" / "b" / "c",
        base / "a" / "b",
        base / "a" / "b" / "c" / "d",
        base / "a",
        base / "a" / "e",
    ]
    files = {
        base / "a" / "b" / "c" / "one.html": "ONE",
        base / "a" / "b" / "two.html": "TWO",
        base / "a" / "e" / "f" / "three.html": "THREE",
    }

    async def scenario() -> None:
        await asyncio.gather(
            *(ensure_dir(path) for path in targets * 3),
            *(write_text(path, content) for path, content in files.items()),
        )

    asyncio.run(scenario())

    assert all(path.is_dir() for path in targets)
    for path, content in files.items():
        assert asyncio.run(read_text(path)) == content


def test_ensure_dir_is_idempotent(tmp_path: Path) -> None:
    target = tmp_path / "nested" / "dir"

    assert asyncio.run(ensure_dir(target)) == target
    assert asyncio.run(ensure_dir(target)) == target
    assert target.is_dir()


def test_write_text_wraps_os_errors(tmp_path: Path) -> None:
    blocker = tmp_path / "blocker"
    blocker.write_text("", encoding="utf-8")

    with pytest.raises(OutputError) as excinfo:
        asyncio.run(write_text(blocker / "child.html", "content"))

    assert excinfo.value.path == blocker / "child.html"
