"""Shared-dependency bundling for HTML-import entry points."""

__version__ = "0.1.0"
