"""Analyzer that follows ``<link rel="import">`` references."""

from __future__ import annotations

from typing import Dict, List, Set

from bs4 import BeautifulSoup

from .base import Analyzer
from ..logging import get_logger
from ..resolvers import Resolver, is_remote, resolve_url

logger = get_logger("analyzers.html_imports")


def extract_imports(content: str) -> List[str]:
    """Return the raw ``href`` values of HTML imports in document order."""
    soup = BeautifulSoup(content, "html.parser")
    hrefs: List[str] = []
    for link in soup.find_all("link", rel="import"):
        href = link.get("href")
        if isinstance(href, str) and href.strip():
            hrefs.append(href.strip())
    return hrefs


class HtmlImportAnalyzer(Analyzer):
    """Crawls the HTML import graph depth-first from an entry document.

    Remote imports are left out since they are never read or inlined.
    Circular imports are visited once.
    """

    name = "html-imports"

    async def dependencies(self, url: str, resolver: Resolver) -> List[str]:
        found: Dict[str, None] = {}
        await self._crawl(url, resolver, found, visiting={url})
        return list(found)

    async def _crawl(
        self,
        url: str,
        resolver: Resolver,
        found: Dict[str, None],
        visiting: Set[str],
    ) -> None:
        content = await resolver(url)
        for href in extract_imports(content):
            dependency = resolve_url(url, href)
            if not dependency or is_remote(dependency):
                logger.debug("Skipping remote import %s in %s", href, url)
                continue
            if dependency in found or dependency in visiting:
                continue
            found[dependency] = None
            visiting.add(dependency)
            await self._crawl(dependency, resolver, found, visiting)
