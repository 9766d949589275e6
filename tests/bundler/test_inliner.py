"""Tests for the HTML inliner."""

from __future__ import annotations

import asyncio

import pytest

from shards.bundler import HtmlInliner, load_bundler
from shards.errors import ConfigError
from shards.resolvers import FSResolver
from tests._fixtures.site_builder import SiteBuilder


def _bundle(site: SiteBuilder, url: str, inliner: HtmlInliner | None = None, **kwargs) -> str:
    inliner = inliner or HtmlInliner()
    kwargs.setdefault("strip_excludes", frozenset())
    return asyncio.run(inliner.bundle(url, resolver=FSResolver(site.root), **kwargs))


def test_imports_are_inlined_once(site_builder: SiteBuilder) -> None:
    site_builder.write(
        {
            "index.html": """
                <link rel="import" href="a.html">
                <link rel="import" href="b.html">
                <main>INDEX</main>
            """,
            "a.html": '<link rel="import" href="b.html"><p>A-CONTENT</p>',
            "b.html": "<p>B-CONTENT</p>",
        }
    )

    output = _bundle(site_builder, "index.html")

    assert output.count("B-CONTENT") == 1
    assert output.index("B-CONTENT") < output.index("A-CONTENT") < output.index("INDEX")
    assert 'rel="import"' not in output


def test_strip_excludes_remove_imports_everywhere(site_builder: SiteBuilder) -> None:
    site_builder.write(
        {
            "index.html": '<link rel="import" href="a.html"><link rel="import" href="x.html">',
            "a.html": '<link rel="import" href="x.html"><p>A-CONTENT</p>',
            "x.html": "<p>X-CONTENT</p>",
        }
    )

    output = _bundle(site_builder, "index.html", strip_excludes=frozenset({"x.html"}))

    assert "A-CONTENT" in output
    assert "X-CONTENT" not in output
    assert "x.html" not in output


def test_added_imports_go_first_in_head_and_stay_links(site_builder: SiteBuilder) -> None:
    site_builder.write(
        {
            "admin/index.html": """
                <!DOCTYPE html>
                <html><head><title>Admin</title></head><body>ADMIN</body></html>
            """,
        }
    )

    output = _bundle(
        site_builder, "admin/index.html", added_imports=["../shared.html", "../extra.html"]
    )

    head = output[output.index("<head>"):output.index("</head>")]
    assert head.index('href="../shared.html"') < head.index('href="../extra.html"') < head.index("<title>")
    assert output.startswith("<!DOCTYPE html>")


def test_added_imports_without_head_are_prepended(site_builder: SiteBuilder) -> None:
    site_builder.write({"index.html": "<p>BODY</p>"})

    output = _bundle(site_builder, "index.html", added_imports=["shared.html"])

    assert output.index('href="shared.html"') < output.index("BODY")


def test_scripts_and_styles_are_inlined_with_rebased_paths(site_builder: SiteBuilder) -> None:
    site_builder.write(
        {
            "index.html": '<link rel="import" href="elements/card.html">',
            "elements/card.html": """
                <link rel="stylesheet" href="card.css">
                <script src="card.js" defer></script>
                <img src="icons/card.png">
            """,
            "elements/card.css": ".card { color: red; }",
            "elements/card.js": "console.log('card');",
        }
    )

    output = _bundle(site_builder, "index.html")

    assert ".card { color: red; }" in output
    assert "console.log('card');" in output
    assert 'src="elements/icons/card.png"' in output
    assert "card.js" not in output


def test_script_and_css_inlining_can_be_disabled(site_builder: SiteBuilder) -> None:
    site_builder.write(
        {
            "index.html": '<link rel="stylesheet" href="app.css"><script src="app.js"></script>',
            "app.css": "body {}",
            "app.js": "run();",
        }
    )

    output = _bundle(site_builder, "index.html", HtmlInliner(inline_scripts=False, inline_css=False))

    assert 'src="app.js"' in output
    assert 'href="app.css"' in output
    assert "run();" not in output


def test_remote_imports_are_kept(site_builder: SiteBuilder) -> None:
    site_builder.write({"index.html": '<link rel="import" href="https://cdn.example.com/x.html">'})

    output = _bundle(site_builder, "index.html")

    assert 'href="https://cdn.example.com/x.html"' in output


def test_load_bundler_passes_options() -> None:
    bundler = load_bundler("html-inliner", inline_scripts=False, inline_css=True)

    assert isinstance(bundler, HtmlInliner)
    assert bundler.inline_scripts is False
    with pytest.raises(ConfigError):
        load_bundler("vulcanize")
