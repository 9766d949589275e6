"""Core data models shared across shards components."""

from __future__ import annotations

from collections import Counter
from dataclasses import dataclass, field
from enum import Enum
from pathlib import Path
from typing import Dict, FrozenSet, List, Optional


@dataclass
class Selection:
    """Outcome of counting dependencies across the target entry points."""

    graph: Dict[str, List[str]]
    frequencies: Counter
    exclusions: FrozenSet[str]
    threshold: int
    common: List[str] = field(default_factory=list)
    skipped: List[str] = field(default_factory=list)

    def is_common(self, dependency: str) -> bool:
        return (
            self.frequencies[dependency] >= self.threshold
            and dependency not in self.exclusions
        )

    def locally_inlined(self, entry: str) -> List[str]:
        """Dependencies of ``entry`` that stay inlined in its own artifact."""
        return [
            dep
            for dep in self.graph.get(entry, [])
            if self.frequencies[dep] < self.threshold and dep not in self.exclusions
        ]


@dataclass
class SharedManifest:
    """Synthesized document importing every shared dependency."""

    url: str
    path: Path
    content: str
    imports: List[str]


@dataclass
class BuildResult:
    """Artifacts written by a completed build."""

    entries: Dict[str, Path]
    shared: Path
    common: List[str]
    exclusions: List[str]
    report: Optional[Path] = None

    def artifacts(self) -> List[Path]:
        return [*self.entries.values(), self.shared]


class BuildState(Enum):
    """Lifecycle of a single orchestrator instance."""

    READY = "ready"
    COMPLETED = "completed"


__all__ = ["BuildResult", "BuildState", "Selection", "SharedManifest"]
