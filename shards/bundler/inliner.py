"""HTML import inliner built on BeautifulSoup."""

from __future__ import annotations

from typing import AbstractSet, List, Sequence, Set

from bs4 import BeautifulSoup
from bs4.element import Doctype, PageElement, Tag

from .base import Bundler
from ..logging import get_logger
from ..resolvers import Resolver, is_remote, relative_url, resolve_url

logger = get_logger("bundler.inliner")

_URL_ATTRIBUTES = ("src", "href")


def _is_import(tag: Tag) -> bool:
    rel = tag.get("rel") or []
    if isinstance(rel, str):
        rel = rel.split()
    return tag.name == "link" and "import" in rel


def _is_stylesheet(tag: Tag) -> bool:
    rel = tag.get("rel") or []
    if isinstance(rel, str):
        rel = rel.split()
    return tag.name == "link" and "stylesheet" in rel


def _fragment_nodes(fragment: BeautifulSoup) -> List[PageElement]:
    html = fragment.find("html")
    if isinstance(html, Tag):
        nodes: List[PageElement] = []
        for section in (html.find("head"), html.find("body")):
            if isinstance(section, Tag):
                nodes.extend(section.contents)
        return nodes
    return [node for node in fragment.contents if not isinstance(node, Doctype)]


class HtmlInliner(Bundler):
    """Replaces HTML imports with the imported markup, one copy per document.

    Local ``<script src>`` and ``<link rel="stylesheet">`` references are
    inlined as well unless disabled. Relative URLs inside inlined fragments
    are rewritten against the bundled document's location.
    """

    name = "html-inliner"

    def __init__(self, *, inline_scripts: bool = True, inline_css: bool = True) -> None:
        self.inline_scripts = inline_scripts
        self.inline_css = inline_css

    async def bundle(
        self,
        url: str,
        *,
        resolver: Resolver,
        strip_excludes: AbstractSet[str],
        added_imports: Sequence[str] = (),
    ) -> str:
        soup = BeautifulSoup(await resolver(url), "html.parser")
        await self._inline_imports(soup, url, url, resolver, strip_excludes, {url})
        if self.inline_scripts:
            await self._inline_scripts(soup, url, resolver, strip_excludes)
        if self.inline_css:
            await self._inline_styles(soup, url, resolver, strip_excludes)
        self._inject_imports(soup, added_imports)
        return str(soup)

    async def _inline_imports(
        self,
        container: BeautifulSoup,
        doc_url: str,
        root_url: str,
        resolver: Resolver,
        strip_excludes: AbstractSet[str],
        inlined: Set[str],
    ) -> None:
        for link in container.find_all(_is_import):
            href = link.get("href")
            if not isinstance(href, str) or not href.strip():
                continue
            dependency = resolve_url(doc_url, href.strip())
            if is_remote(dependency):
                continue
            if dependency in strip_excludes or dependency in inlined:
                link.decompose()
                continue
            inlined.add(dependency)
            fragment = BeautifulSoup(await resolver(dependency), "html.parser")
            self._rebase(fragment, dependency, root_url)
            await self._inline_imports(
                fragment, dependency, root_url, resolver, strip_excludes, inlined
            )
            for node in _fragment_nodes(fragment):
                link.insert_before(node.extract())
            link.decompose()
            logger.debug("Inlined %s into %s", dependency, root_url)

    def _rebase(self, fragment: BeautifulSoup, doc_url: str, root_url: str) -> None:
        for tag in fragment.find_all(True):
            if _is_import(tag):
                continue
            for attribute in _URL_ATTRIBUTES:
                value = tag.get(attribute)
                if not isinstance(value, str) or not value or value.startswith(("#", "/")):
                    continue
                if is_remote(value):
                    continue
                tag[attribute] = relative_url(resolve_url(doc_url, value), root_url)

    async def _inline_scripts(
        self,
        soup: BeautifulSoup,
        url: str,
        resolver: Resolver,
        strip_excludes: AbstractSet[str],
    ) -> None:
        for script in soup.find_all("script", src=True):
            source = resolve_url(url, script["src"])
            if not source or is_remote(source):
                continue
            if source in strip_excludes:
                script.decompose()
                continue
            replacement = soup.new_tag("script")
            for key, value in script.attrs.items():
                if key != "src":
                    replacement[key] = value
            replacement.string = await resolver(source)
            script.replace_with(replacement)

    async def _inline_styles(
        self,
        soup: BeautifulSoup,
        url: str,
        resolver: Resolver,
        strip_excludes: AbstractSet[str],
    ) -> None:
        for link in soup.find_all(_is_stylesheet):
            href = link.get("href")
            if not isinstance(href, str):
                continue
            source = resolve_url(url, href)
            if not source or is_remote(source):
                continue
            if source in strip_excludes:
                link.decompose()
                continue
            style = soup.new_tag("style")
            style.string = await resolver(source)
            link.replace_with(style)

    def _inject_imports(self, soup: BeautifulSoup, added_imports: Sequence[str]) -> None:
        if not added_imports:
            return
        tags = [soup.new_tag("link", rel="import", href=href) for href in added_imports]
        head = soup.find("head")
        if isinstance(head, Tag):
            for index, tag in enumerate(tags):
                head.insert(index, tag)
            return
        offset = 0
        while offset < len(soup.contents) and isinstance(soup.contents[offset], Doctype):
            offset += 1
        for index, tag in enumerate(tags):
            soup.insert(offset + index, tag)
