"""Async filesystem helpers backed by the default executor."""

from __future__ import annotations

import asyncio
import functools
from pathlib import Path
from typing import Callable, TypeVar

from .errors import OutputError

T = TypeVar("T")


async def _run_blocking(func: Callable[..., T], *args: object) -> T:
    loop = asyncio.get_running_loop()
    return await loop.run_in_executor(None, functools.partial(func, *args))


def _mkdir(path: Path) -> None:
    # exist_ok keeps concurrent creation of overlapping trees race-free.
    path.mkdir(parents=True, exist_ok=True)


def _write(path: Path, content: str) -> None:
    path.parent.mkdir(parents=True, exist_ok=True)
    path.write_text(content, encoding="utf-8")


async def ensure_dir(path: Path) -> Path:
    """Create ``path`` and its parents if needed."""
    try:
        await _run_blocking(_mkdir, path)
    except OSError as exc:
        raise OutputError(path, exc) from exc
    return path


async def write_text(path: Path, content: str) -> Path:
    """Write ``content`` to ``path``, creating parent directories first."""
    try:
        await _run_blocking(_write, path, content)
    except OSError as exc:
        raise OutputError(path, exc) from exc
    return path


async def read_text(path: Path) -> str:
    """Read a UTF-8 document without blocking the event loop."""
    return await _run_blocking(functools.partial(path.read_text, encoding="utf-8"))


__all__ = ["ensure_dir", "read_text", "write_text"]
