"""Base classes for bundler plugins."""

from abc import ABC, abstractmethod
from typing import AbstractSet, Sequence

from ..resolvers import Resolver


class Bundler(ABC):
    """Contract for bundlers that flatten a document and its imports."""

    name: str = ""

    @abstractmethod
    async def bundle(
        self,
        url: str,
        *,
        resolver: Resolver,
        strip_excludes: AbstractSet[str],
        added_imports: Sequence[str] = (),
    ) -> str:
        """Return ``url`` with its dependencies inlined.

        Imports of identifiers in ``strip_excludes`` are removed rather than
        inlined. ``added_imports`` are injected as import references and are
        left for the browser to load.
        """
