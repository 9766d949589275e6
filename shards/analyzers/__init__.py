"""Analyzer implementations and plugin discovery."""

from __future__ import annotations

from importlib import metadata
from typing import Callable, Dict, Iterable

from ..errors import ConfigError

from .base import Analyzer
from .html_imports import HtmlImportAnalyzer, extract_imports

_ENTRY_POINT_GROUP = "shards.analyzers"

_BUILTIN_FACTORIES: Dict[str, Callable[[], Analyzer]] = {
    "html-imports": HtmlImportAnalyzer,
}


def load_analyzer(name: str) -> Analyzer:
    """Instantiate the analyzer registered under ``name``.

    Built-in analyzers win over plugins registered in the ``shards.analyzers``
    entry-point group.
    """
    key = name.lower()
    factory = _BUILTIN_FACTORIES.get(key)
    if factory is not None:
        return factory()

    for entry in _iter_entry_points():
        if entry.name.lower() != key:
            continue
        try:
            loaded = entry.load()
        except Exception as exc:  # pragma: no cover - depends on installed plugins
            raise RuntimeError(f"Failed to load analyzer entry point '{name}': {exc}") from exc
        return _coerce_analyzer(loaded)

    raise ConfigError(f"Unknown analyzer requested: {name}")


def _coerce_analyzer(obj: object) -> Analyzer:
    if isinstance(obj, Analyzer):
        return obj
    if isinstance(obj, type) and issubclass(obj, Analyzer):
        return obj()
    if callable(obj):
        instance = obj()
        if isinstance(instance, Analyzer):
            return instance
    raise TypeError("Analyzer entry point must be an Analyzer subclass or factory")


def _iter_entry_points() -> Iterable[metadata.EntryPoint]:
    return metadata.entry_points().select(group=_ENTRY_POINT_GROUP)


__all__ = ["Analyzer", "HtmlImportAnalyzer", "extract_imports", "load_analyzer"]
