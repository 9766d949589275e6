"""Rendering and persistence of the shared import manifest."""

from __future__ import annotations

import os
from pathlib import Path
from typing import List, Sequence

from jinja2 import Environment

from .io import write_text
from .logging import get_logger
from .models import SharedManifest

logger = get_logger("synthesizer")

_MANIFEST_TEMPLATE = """\
{% for href in imports %}
<link rel="import" href="{{ href }}">
{% endfor %}
"""


class SharedBundleSynthesizer:
    """Writes a document importing every shared dependency into the working directory."""

    def __init__(self, workdir: Path, shared_import: str) -> None:
        self.workdir = Path(workdir)
        self.shared_import = shared_import
        self._env = Environment(autoescape=False, trim_blocks=True, keep_trailing_newline=True)
        self._template = self._env.from_string(_MANIFEST_TEMPLATE)

    @property
    def output_path(self) -> Path:
        return self.workdir / self.shared_import

    def base_url(self) -> str:
        """Prefix that makes root-relative identifiers resolve from the manifest's directory."""
        relative = os.path.relpath(self.workdir, self.output_path.parent)
        if relative == os.curdir:
            return ""
        return Path(relative).as_posix() + "/"

    def render(self, common: Sequence[str]) -> str:
        base = self.base_url()
        imports = [f"{base}{dependency}" for dependency in common]
        return self._template.render(imports=imports)

    async def synthesize(self, common: Sequence[str]) -> SharedManifest:
        content = self.render(common)
        path = await write_text(self.output_path, content)
        logger.debug("Shared manifest with %d imports written to %s", len(common), path)
        imports: List[str] = list(common)
        return SharedManifest(url=self.shared_import, path=path, content=content, imports=imports)


__all__ = ["SharedBundleSynthesizer"]
