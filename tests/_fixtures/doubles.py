"""Analyzer and bundler test doubles."""

from __future__ import annotations

import asyncio
from typing import AbstractSet, Dict, Iterable, List, Mapping, Sequence

from shards.analyzers import Analyzer
from shards.bundler import Bundler
from shards.resolvers import Resolver


class StaticAnalyzer(Analyzer):
    """Returns canned dependency lists and records which documents were analysed."""

    def __init__(
        self, graph: Mapping[str, Iterable[str]], *, failing: Iterable[str] = ()
    ) -> None:
        self.graph = {entry: list(deps) for entry, deps in graph.items()}
        self.failing = set(failing)
        self.calls: List[str] = []

    async def dependencies(self, url: str, resolver: Resolver) -> List[str]:
        self.calls.append(url)
        if url in self.failing:
            raise FileNotFoundError(f"{url} is missing")
        return list(self.graph.get(url, []))


class RecordingBundler(Bundler):
    """Records bundle calls and returns a marker document, optionally after a delay."""

    def __init__(
        self,
        *,
        failing: Iterable[str] = (),
        read: Iterable[str] = (),
        delays: Mapping[str, float] | None = None,
    ) -> None:
        self.failing = set(failing)
        self.read = set(read)
        self.delays = dict(delays or {})
        self.calls: Dict[str, dict] = {}
        self.order: List[str] = []
        self.finished: List[str] = []
        self.sources: Dict[str, str] = {}

    async def bundle(
        self,
        url: str,
        *,
        resolver: Resolver,
        strip_excludes: AbstractSet[str],
        added_imports: Sequence[str] = (),
    ) -> str:
        self.calls[url] = {
            "strip_excludes": set(strip_excludes),
            "added_imports": list(added_imports),
        }
        self.order.append(url)
        if url in self.delays:
            await asyncio.sleep(self.delays[url])
        if url in self.read:
            self.sources[url] = await resolver(url)
        if url in self.failing:
            raise ValueError(f"cannot bundle {url}")
        self.finished.append(url)
        return f"bundled:{url}"


__all__ = ["RecordingBundler", "StaticAnalyzer"]
