"""Bundler implementations and plugin discovery."""

from __future__ import annotations

from importlib import metadata
from typing import Any, Callable, Dict, Iterable

from ..errors import ConfigError

from .base import Bundler
from .inliner import HtmlInliner

_ENTRY_POINT_GROUP = "shards.bundlers"

_BUILTIN_FACTORIES: Dict[str, Callable[..., Bundler]] = {
    "html-inliner": HtmlInliner,
}


def load_bundler(name: str, **options: Any) -> Bundler:
    """Instantiate the bundler registered under ``name`` with ``options``."""
    key = name.lower()
    factory = _BUILTIN_FACTORIES.get(key)
    if factory is not None:
        return factory(**options)

    for entry in _iter_entry_points():
        if entry.name.lower() != key:
            continue
        try:
            loaded = entry.load()
        except Exception as exc:  # pragma: no cover - depends on installed plugins
            raise RuntimeError(f"Failed to load bundler entry point '{name}': {exc}") from exc
        if isinstance(loaded, Bundler):
            return loaded
        if callable(loaded):
            instance = loaded(**options)
            if isinstance(instance, Bundler):
                return instance
        raise TypeError("Bundler entry point must be a Bundler subclass or factory")

    raise ConfigError(f"Unknown bundler requested: {name}")


def _iter_entry_points() -> Iterable[metadata.EntryPoint]:
    return metadata.entry_points().select(group=_ENTRY_POINT_GROUP)


__all__ = ["Bundler", "HtmlInliner", "load_bundler"]
