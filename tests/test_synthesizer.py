"""Tests for shards.synthesizer."""

from __future__ import annotations

import asyncio
from pathlib import Path

from shards.synthesizer import SharedBundleSynthesizer


def test_render_one_import_per_common_dependency(tmp_path: Path) -> None:
    synthesizer = SharedBundleSynthesizer(tmp_path, "shared.html")

    content = synthesizer.render(["x.html", "elements/card.html"])

    assert content == (
        '<link rel="import" href="x.html">\n'
        '<link rel="import" href="elements/card.html">\n'
    )


def test_render_empty_manifest(tmp_path: Path) -> None:
    synthesizer = SharedBundleSynthesizer(tmp_path, "shared.html")

    assert synthesizer.render([]) == ""


def test_nested_manifest_prefixes_base_url(tmp_path: Path) -> None:
    synthesizer = SharedBundleSynthesizer(tmp_path, "bundles/deep/shared.html")

    assert synthesizer.base_url() == "../../"
    assert synthesizer.render(["x.html"]) == '<link rel="import" href="../../x.html">\n'


def test_synthesize_persists_manifest(tmp_path: Path) -> None:
    workdir = tmp_path / "work"
    synthesizer = SharedBundleSynthesizer(workdir, "bundles/shared.html")

    manifest = asyncio.run(synthesizer.synthesize(["x.html"]))

    assert manifest.url == "bundles/shared.html"
    assert manifest.path == workdir / "bundles" / "shared.html"
    assert manifest.path.read_text(encoding="utf-8") == manifest.content
    assert manifest.imports == ["x.html"]
