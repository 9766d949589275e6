"""Dependency lookup for entry points."""

from __future__ import annotations

import asyncio
from typing import Dict, List, Sequence, Tuple

from .analyzers import Analyzer
from .errors import AnalysisError
from .logging import document_logger
from .resolvers import Resolver


class DependencyLookup:
    """Resolves entry points to their transitive dependencies via an analyzer.

    When ``tolerate_failures`` is set, entries whose analysis fails are logged
    and left out of :meth:`resolve_many` results instead of failing the run.
    """

    def __init__(
        self,
        analyzer: Analyzer,
        resolver: Resolver,
        *,
        tolerate_failures: bool = False,
    ) -> None:
        self.analyzer = analyzer
        self.resolver = resolver
        self.tolerate_failures = tolerate_failures

    async def resolve(self, entry: str) -> List[str]:
        """Return the deduplicated dependency list for ``entry``."""
        try:
            dependencies = await self.analyzer.dependencies(entry, self.resolver)
        except AnalysisError:
            raise
        except Exception as exc:
            raise AnalysisError(entry, exc) from exc
        return list(dict.fromkeys(dependencies))

    async def resolve_many(self, entries: Sequence[str]) -> Tuple[Dict[str, List[str]], List[str]]:
        """Resolve every entry concurrently.

        Returns the dependency graph in entry order together with the entries
        that were skipped because their analysis failed.
        """
        unique = list(dict.fromkeys(entries))
        results = await asyncio.gather(
            *(self.resolve(entry) for entry in unique),
            return_exceptions=self.tolerate_failures,
        )
        graph: Dict[str, List[str]] = {}
        skipped: List[str] = []
        for entry, result in zip(unique, results):
            if isinstance(result, BaseException):
                if not isinstance(result, AnalysisError):
                    raise result
                document_logger("lookup", entry).warning("Ignoring %s: %s", entry, result.cause)
                skipped.append(entry)
                continue
            graph[entry] = result
        return graph, skipped


__all__ = ["DependencyLookup"]
