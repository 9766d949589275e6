"""Selection of dependencies worth hoisting into the shared bundle."""

from __future__ import annotations

import json
from collections import Counter
from pathlib import Path
from typing import Dict, FrozenSet, List, Optional, Sequence

from .io import write_text
from .logging import get_logger
from .lookup import DependencyLookup
from .models import Selection

logger = get_logger("selector")


class CommonDependencySelector:
    """Counts dependencies across entry points and applies the sharing threshold."""

    def __init__(
        self,
        lookup: DependencyLookup,
        *,
        threshold: int,
        shared_import: str,
        report_path: Optional[Path] = None,
    ) -> None:
        self.lookup = lookup
        self.threshold = threshold
        self.shared_import = shared_import
        self.report_path = report_path

    async def select(self, entries: Sequence[str], exclusions: FrozenSet[str]) -> Selection:
        graph, skipped = await self.lookup.resolve_many(entries)

        # Counted here, after every lookup has finished; each entry counts once per dependency.
        frequencies: Counter = Counter()
        for dependencies in graph.values():
            for dependency in dict.fromkeys(dependencies):
                frequencies[dependency] += 1

        selection = Selection(
            graph=graph,
            frequencies=frequencies,
            exclusions=exclusions,
            threshold=self.threshold,
            skipped=skipped,
        )
        selection.common = [dep for dep in frequencies if selection.is_common(dep)]
        logger.info(
            "Sharing %d of %d dependencies seen across %d entries (threshold %d)",
            len(selection.common),
            len(frequencies),
            len(graph),
            self.threshold,
        )

        if self.report_path is not None:
            await self.write_report(selection, self.report_path)
        return selection

    def build_report(self, selection: Selection) -> Dict[str, List[str]]:
        """Map each entry to its locally inlined dependencies plus the shared list."""
        report = {entry: selection.locally_inlined(entry) for entry in selection.graph}
        report[self.shared_import] = list(selection.common)
        return report

    async def write_report(self, selection: Selection, path: Path) -> Path:
        target = Path.cwd() / path
        payload = json.dumps(self.build_report(selection), indent=2)
        await write_text(target, payload + "\n")
        logger.info("Dependency report written to %s", target)
        return target


__all__ = ["CommonDependencySelector"]
