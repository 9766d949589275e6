"""Document identifiers and the resolvers that turn them into content.

Identifiers are root-relative posix URLs such as ``elements/app.html`` or
``../polymer/polymer.html``. A resolver is any awaitable callable mapping an
identifier to the document text; :class:`FSResolver` reads from disk and
:func:`override_resolver` wraps another resolver to serve one identifier
from memory.
"""

from __future__ import annotations

import posixpath
import re
from pathlib import Path
from typing import Awaitable, Callable, Dict, Mapping, Optional

from .io import read_text

Resolver = Callable[[str], Awaitable[str]]

_REMOTE_PATTERN = re.compile(r"^([a-zA-Z][a-zA-Z0-9+.-]*:|//)")


def is_remote(url: str) -> bool:
    """True for URLs with a scheme (``https:``, ``data:``) or protocol-relative ones."""
    return bool(_REMOTE_PATTERN.match(url))


def normalize_url(url: str) -> str:
    """Canonical form of a local identifier; remote URLs pass through untouched."""
    if is_remote(url):
        return url
    path = url.split("#", 1)[0].split("?", 1)[0]
    path = path.replace("\\", "/").lstrip("/")
    if not path:
        return ""
    normalized = posixpath.normpath(path)
    return "" if normalized == "." else normalized


def resolve_url(base_url: str, href: str) -> str:
    """Resolve ``href`` as written inside the document identified by ``base_url``."""
    if is_remote(href):
        return href
    if href.startswith("/"):
        return normalize_url(href)
    return normalize_url(posixpath.join(posixpath.dirname(base_url), href))


def relative_url(target: str, from_url: str) -> str:
    """Express identifier ``target`` relative to the document ``from_url``."""
    start = posixpath.dirname(from_url) or "."
    return posixpath.relpath(target, start)


class FSResolver:
    """Reads documents below ``root``, honoring prefix redirects.

    A redirect maps an identifier prefix to another directory; the default
    third-party redirect sends ``../name/...`` lookups into a managed
    components directory instead of outside the root.
    """

    def __init__(self, root: Path, redirects: Optional[Mapping[str, Path]] = None) -> None:
        self.root = Path(root)
        self.redirects: Dict[str, Path] = dict(redirects or {})

    def path_for(self, url: str) -> Path:
        if is_remote(url):
            raise FileNotFoundError(f"Remote document {url} cannot be read from disk")
        for prefix in sorted(self.redirects, key=len, reverse=True):
            if url.startswith(prefix):
                return self.redirects[prefix] / url[len(prefix):]
        return self.root / url

    async def __call__(self, url: str) -> str:
        return await read_text(self.path_for(url))


def override_resolver(base: Resolver, url: str, content: str) -> Resolver:
    """Serve ``content`` for ``url`` and defer every other lookup to ``base``."""

    async def _resolve(requested: str) -> str:
        if requested == url:
            return content
        return await base(requested)

    return _resolve


__all__ = [
    "FSResolver",
    "Resolver",
    "is_remote",
    "normalize_url",
    "override_resolver",
    "relative_url",
    "resolve_url",
]
