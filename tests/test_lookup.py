"""Tests for shards.lookup."""

from __future__ import annotations

import asyncio
from pathlib import Path

import pytest

from shards.errors import AnalysisError
from shards.lookup import DependencyLookup
from shards.resolvers import FSResolver
from tests._fixtures.doubles import StaticAnalyzer


def _lookup(analyzer: StaticAnalyzer, *, tolerate: bool = False) -> DependencyLookup:
    return DependencyLookup(analyzer, FSResolver(Path(".")), tolerate_failures=tolerate)


def test_resolve_deduplicates_preserving_order() -> None:
    lookup = _lookup(StaticAnalyzer({"a.html": ["x.html", "y.html", "x.html"]}))

    assert asyncio.run(lookup.resolve("a.html")) == ["x.html", "y.html"]


def test_resolve_wraps_analyzer_failures() -> None:
    lookup = _lookup(StaticAnalyzer({}, failing=["a.html"]))

    with pytest.raises(AnalysisError) as excinfo:
        asyncio.run(lookup.resolve("a.html"))

    assert excinfo.value.entry == "a.html"
    assert isinstance(excinfo.value.cause, FileNotFoundError)
    assert "a.html" in str(excinfo.value)


def test_resolve_many_fails_on_first_analysis_error() -> None:
    lookup = _lookup(StaticAnalyzer({"a.html": ["x.html"]}, failing=["b.html"]))

    with pytest.raises(AnalysisError) as excinfo:
        asyncio.run(lookup.resolve_many(["a.html", "b.html"]))

    assert excinfo.value.entry == "b.html"


def test_resolve_many_can_skip_failed_entries() -> None:
    analyzer = StaticAnalyzer({"a.html": ["x.html"], "c.html": ["y.html"]}, failing=["b.html"])
    lookup = _lookup(analyzer, tolerate=True)

    graph, skipped = asyncio.run(lookup.resolve_many(["a.html", "b.html", "c.html"]))

    assert graph == {"a.html": ["x.html"], "c.html": ["y.html"]}
    assert list(graph) == ["a.html", "c.html"]
    assert skipped == ["b.html"]
