"""Base classes for dependency analyzer plugins."""

from abc import ABC, abstractmethod
from typing import List

from ..resolvers import Resolver


class Analyzer(ABC):
    """Contract for analyzers that list the transitive imports of a document."""

    name: str = ""

    @abstractmethod
    async def dependencies(self, url: str, resolver: Resolver) -> List[str]:
        """Return every identifier ``url`` imports, directly or transitively.

        The list is deduplicated, excludes ``url`` itself and keeps the order
        in which dependencies were first encountered.
        """
