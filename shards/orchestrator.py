"""Build orchestration: shared-dependency extraction and per-entry bundling."""

from __future__ import annotations

import asyncio
import os
from pathlib import Path
from typing import AbstractSet, Any, Awaitable, Coroutine, Dict, List, Optional, Sequence, TypeVar

from .analyzers import Analyzer, load_analyzer
from .bundler import Bundler, load_bundler
from .config import ShardsConfig
from .errors import AlreadyBuiltError, BundlingError, ConfigError
from .exclusions import ExclusionResolver
from .io import ensure_dir, write_text
from .logging import document_logger, get_logger
from .lookup import DependencyLookup
from .models import BuildResult, BuildState, SharedManifest
from .resolvers import FSResolver, Resolver, override_resolver
from .selector import CommonDependencySelector
from .synthesizer import SharedBundleSynthesizer

T = TypeVar("T")

logger = get_logger("orchestrator")


class Orchestrator:
    """Coordinates one bundling run for the configured entry points.

    An instance builds exactly once: exclusions are resolved, common
    dependencies selected, the shared manifest synthesized, and then every
    entry plus the manifest is bundled concurrently. The first failure fails
    the run once the remaining bundles settle; written artifacts stay in place.
    """

    def __init__(
        self,
        config: ShardsConfig,
        *,
        analyzer: Analyzer | None = None,
        bundler: Bundler | None = None,
        resolver: Resolver | None = None,
    ) -> None:
        self.config = config
        self.resolver = resolver or FSResolver(config.root, config.redirect_map())
        self.analyzer = analyzer or load_analyzer(config.analyzer)
        self.bundler = bundler or load_bundler(
            config.bundler,
            inline_scripts=config.inline_scripts,
            inline_css=config.inline_css,
        )
        self.lookup = DependencyLookup(
            self.analyzer,
            self.resolver,
            tolerate_failures=config.on_analysis_error == "warn",
        )
        # Exclusions never tolerate analysis failures, even under "warn".
        self.exclusion_resolver = ExclusionResolver(DependencyLookup(self.analyzer, self.resolver))
        self.selector = CommonDependencySelector(
            self.lookup,
            threshold=config.sharing_threshold,
            shared_import=config.shared_import,
            report_path=config.dep_report,
        )
        self.synthesizer = SharedBundleSynthesizer(config.workdir, config.shared_import)
        self.state = BuildState.READY
        self.logger = logger

    def build(self) -> Awaitable[BuildResult]:
        """Start the build; a second call raises :class:`AlreadyBuiltError` before any I/O."""
        if self.state is BuildState.COMPLETED:
            raise AlreadyBuiltError()
        self.state = BuildState.COMPLETED
        return self._build()

    def run(self) -> BuildResult:
        """Run :meth:`build` to completion on a fresh event loop."""
        return asyncio.run(self.build())

    async def _build(self) -> BuildResult:
        config = self.config
        self._check_config()
        self.logger.info(
            "Starting build of %d entry points into %s", len(config.entrypoints), config.dest_dir
        )
        await ensure_dir(config.dest_dir)

        exclusions = await self.exclusion_resolver.compute(config.strip_excludes)
        self.logger.debug("Resolved %d excluded documents", len(exclusions))

        selection = await self.selector.select(config.entrypoints, exclusions)
        manifest = await self.synthesizer.synthesize(selection.common)

        shared_output = config.dest_dir / config.shared_import
        strip_excludes = exclusions | frozenset(selection.common)
        entrypoints = list(dict.fromkeys(config.entrypoints))
        jobs = [
            self._bundle_entry(entry, strip_excludes, shared_output) for entry in entrypoints
        ]
        jobs.append(self._bundle_manifest(manifest, exclusions, shared_output))
        outputs = await _join(jobs)

        entries: Dict[str, Path] = dict(zip(entrypoints, outputs[:-1]))
        report: Optional[Path] = None
        if config.dep_report is not None:
            report = Path.cwd() / config.dep_report
        self.logger.info("Build finished: %d entry artifacts and %s", len(entries), outputs[-1])
        return BuildResult(
            entries=entries,
            shared=outputs[-1],
            common=list(selection.common),
            exclusions=sorted(exclusions),
            report=report,
        )

    def _check_config(self) -> None:
        if not self.config.entrypoints:
            raise ConfigError("No entry points configured")
        workdir = self.config.workdir
        if workdir.exists() and not workdir.is_dir():
            raise ConfigError(f"Working directory {workdir} is not a directory")

    async def _bundle_entry(
        self, entry: str, strip_excludes: AbstractSet[str], shared_output: Path
    ) -> Path:
        output = self.config.dest_dir / entry
        shared_href = Path(os.path.relpath(shared_output, output.parent)).as_posix()
        try:
            document = await self.bundler.bundle(
                entry,
                resolver=self.resolver,
                strip_excludes=strip_excludes,
                added_imports=[shared_href],
            )
        except BundlingError:
            raise
        except Exception as exc:
            raise BundlingError(entry, exc) from exc
        await write_text(output, document)
        document_logger("orchestrator", entry).info("Wrote %s", output)
        return output

    async def _bundle_manifest(
        self, manifest: SharedManifest, exclusions: AbstractSet[str], shared_output: Path
    ) -> Path:
        # The synthesized content is served from memory, not re-read from the workdir.
        resolver = override_resolver(self.resolver, manifest.url, manifest.content)
        try:
            document = await self.bundler.bundle(
                manifest.url,
                resolver=resolver,
                strip_excludes=exclusions,
            )
        except BundlingError:
            raise
        except Exception as exc:
            raise BundlingError(manifest.url, exc) from exc
        await write_text(shared_output, document)
        document_logger("orchestrator", manifest.url).info("Wrote shared bundle %s", shared_output)
        return shared_output


async def _join(jobs: Sequence[Coroutine[Any, Any, T]]) -> List[T]:
    """Run ``jobs`` concurrently and return their results in order.

    The first failure is re-raised once every sibling has settled; siblings are
    never cancelled, so artifacts they were writing still land on disk.
    """
    tasks = [asyncio.ensure_future(job) for job in jobs]
    done, pending = await asyncio.wait(tasks, return_when=asyncio.FIRST_EXCEPTION)
    failed = [task for task in tasks if task in done and task.exception() is not None]
    if failed:
        if pending:
            await asyncio.wait(pending)
        for task in pending:
            if task.exception() is not None:
                logger.warning("Also failed: %s", task.exception())
        raise failed[0].exception()
    return [task.result() for task in tasks]


__all__ = ["Orchestrator"]
