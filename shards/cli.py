"""CLI entrypoints for shards commands."""

from __future__ import annotations

import argparse
import sys
from pathlib import Path

from .config import load_config
from .errors import ShardsError
from .logging import configure_logging
from .orchestrator import Orchestrator


def _add_verbose_option(
    parser: argparse.ArgumentParser, *, suppress_default: bool = False
) -> None:
    kwargs: dict[str, object] = {
        "action": "store_true",
        "help": "Increase log verbosity for troubleshooting.",
    }
    if suppress_default:
        kwargs["default"] = argparse.SUPPRESS
    else:
        kwargs["default"] = False
    parser.add_argument(
        "-v",
        "--verbose",
        **kwargs,
    )


def _build_parser() -> argparse.ArgumentParser:
    parser = argparse.ArgumentParser(
        prog="shards",
        description="Bundle HTML-import entry points around one shared dependency bundle.",
    )
    _add_verbose_option(parser)
    parser.add_argument(
        "--log-file",
        type=Path,
        default=None,
        help="Also write logs to this file.",
    )
    subparsers = parser.add_subparsers(dest="command", required=True)

    build_parser = subparsers.add_parser(
        "build",
        help="Compute the shared bundle and write every artifact.",
    )
    _add_verbose_option(build_parser, suppress_default=True)
    build_parser.add_argument(
        "path",
        nargs="?",
        default=".",
        help="Directory containing .shards.yml, or the config file itself.",
    )
    build_parser.add_argument(
        "-e",
        "--entry",
        dest="entries",
        action="append",
        help="Entry point to bundle (repeatable, replaces configured entrypoints).",
    )
    build_parser.add_argument(
        "--strip-exclude",
        dest="strip_excludes",
        action="append",
        help="Document whose imports are never shared or inlined (repeatable).",
    )
    build_parser.add_argument(
        "--threshold",
        type=int,
        default=None,
        help="Minimum number of entry points importing a dependency before it is shared.",
    )
    build_parser.add_argument("--shared-import", default=None, help="Name of the shared bundle.")
    build_parser.add_argument("--dest-dir", default=None, help="Output directory.")
    build_parser.add_argument("--workdir", default=None, help="Scratch directory for the manifest.")
    build_parser.add_argument(
        "--report",
        default=None,
        help="Write a JSON report of locally inlined and shared dependencies.",
    )

    serve_parser = subparsers.add_parser(
        "serve",
        help="Run the HTTP build service.",
    )
    _add_verbose_option(serve_parser, suppress_default=True)
    serve_parser.add_argument("--host", default="127.0.0.1")
    serve_parser.add_argument("--port", type=int, default=8000)

    return parser


def main(argv: list[str] | None = None) -> None:
    """CLI entrypoint for shards commands."""
    parser = _build_parser()
    args = parser.parse_args(argv)

    configure_logging(verbose=bool(args.verbose), log_file=args.log_file)

    if args.command == "build":
        try:
            config = load_config(Path(args.path)).with_overrides(
                entrypoints=args.entries,
                strip_excludes=args.strip_excludes,
                sharing_threshold=args.threshold,
                shared_import=args.shared_import,
                dest_dir=args.dest_dir,
                workdir=args.workdir,
                dep_report=args.report,
            )
            result = Orchestrator(config).run()
        except ShardsError as exc:
            parser.exit(1, f"shards build failed: {exc}\nRun with --verbose for more details.\n")
        for artifact in result.artifacts():
            print(f"Wrote {_relativize(artifact)}")
        print(f"Shared {len(result.common)} dependencies across {len(result.entries)} entry points")
    elif args.command == "serve":
        from .service import run_service

        run_service(host=args.host, port=args.port)
    else:  # pragma: no cover - argparse enforces choices
        parser.exit(1, "Unknown command\n")


def _relativize(path: Path) -> str:
    try:
        return str(path.relative_to(Path.cwd()))
    except ValueError:
        return str(path)


if __name__ == "__main__":
    main(sys.argv[1:])
