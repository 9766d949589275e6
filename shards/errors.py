"""Error types raised while computing and writing bundles."""

from __future__ import annotations

from pathlib import Path


class ShardsError(RuntimeError):
    """Base class for every failure surfaced by a build."""


class ConfigError(ShardsError):
    """Raised when the configuration is missing, malformed or unusable."""


class AnalysisError(ShardsError):
    """The analyzer could not produce a dependency list for a document."""

    def __init__(self, entry: str, cause: BaseException) -> None:
        self.entry = entry
        self.cause = cause
        super().__init__(f"Dependency analysis failed for {entry}: {cause}")


class BundlingError(ShardsError):
    """The bundler failed for an entry point or for the shared manifest."""

    def __init__(self, target: str, cause: BaseException) -> None:
        self.target = target
        self.cause = cause
        super().__init__(f"Bundling failed for {target}: {cause}")


class OutputError(ShardsError):
    """A directory or file could not be written."""

    def __init__(self, path: Path, cause: BaseException) -> None:
        self.path = path
        self.cause = cause
        super().__init__(f"Unable to write {path}: {cause}")


class AlreadyBuiltError(ShardsError):
    """``Orchestrator.build`` was called more than once on the same instance."""

    def __init__(self) -> None:
        super().__init__("build may only be called once per orchestrator")


__all__ = [
    "AlreadyBuiltError",
    "AnalysisError",
    "BundlingError",
    "ConfigError",
    "OutputError",
    "ShardsError",
]
