"""Exclusion set computation for strip-excluded documents."""

from __future__ import annotations

from typing import FrozenSet, Sequence

from .logging import get_logger
from .lookup import DependencyLookup
from .resolvers import normalize_url

logger = get_logger("exclusions")


class ExclusionResolver:
    """Collects documents that must never be shared or inlined.

    The set holds every stripped entry plus everything it imports; a single
    occurrence is enough for exclusion.
    """

    def __init__(self, lookup: DependencyLookup) -> None:
        self.lookup = lookup

    async def compute(self, stripped_entries: Sequence[str]) -> FrozenSet[str]:
        entries = [normalize_url(entry) for entry in stripped_entries]
        if not entries:
            return frozenset()
        graph, _ = await self.lookup.resolve_many(entries)
        excluded = set(entries)
        for dependencies in graph.values():
            excluded.update(dependencies)
        logger.debug("Excluding %d documents reached from %d strip entries", len(excluded), len(entries))
        return frozenset(excluded)


__all__ = ["ExclusionResolver"]
