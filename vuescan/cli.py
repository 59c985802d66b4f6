"""CLI entrypoints for vuescan commands."""

from __future__ import annotations

import argparse
import dataclasses
import logging
import sys
from pathlib import Path

from .config import AnalysisConfig, ConfigError, load_config
from .logging import DiagnosticCounter, configure_logging
from .orchestrator import Orchestrator
from .repo_scanner import RepoScanner


def _add_verbosity_options(
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
    quiet_kwargs = dict(kwargs, help="Only show warnings and per-file errors.")
    parser.add_argument(
        "-q",
        "--quiet",
        **quiet_kwargs,
    )


def _add_project_options(parser: argparse.ArgumentParser) -> None:
    parser.add_argument(
        "path",
        nargs="?",
        default=".",
        help="Path to the project root (defaults to current directory).",
    )
    parser.add_argument(
        "--config",
        default=None,
        help="Configuration file to use instead of <path>/.vuescan.yml.",
    )


def _positive_int(value: str) -> int:
    try:
        number = int(value)
    except ValueError as exc:
        raise argparse.ArgumentTypeError(f"expected a positive integer, got {value!r}") from exc
    if number < 1:
        raise argparse.ArgumentTypeError(f"expected a positive integer, got {value!r}")
    return number


def _build_parser() -> argparse.ArgumentParser:
    parser = argparse.ArgumentParser(
        prog="vuescan",
        description=(
            "Inventory imports, exports, props, template tags and style selectors "
            "of a Vue/TypeScript project."
        ),
    )
    _add_verbosity_options(parser)
    subparsers = parser.add_subparsers(dest="command", required=True)

    analyze_parser = subparsers.add_parser(
        "analyze",
        help="Analyze every component and module file and write a JSON report.",
    )
    _add_verbosity_options(analyze_parser, suppress_default=True)
    _add_project_options(analyze_parser)
    analyze_parser.add_argument(
        "-o",
        "--output",
        default=None,
        help="Report destination (defaults to files-analysis.json).",
    )
    analyze_parser.add_argument(
        "--debug",
        action="store_true",
        help="Attach stack traces to per-file error diagnostics.",
    )
    analyze_parser.add_argument(
        "--max-concurrency",
        type=_positive_int,
        default=None,
        help="Maximum number of files read at the same time.",
    )
    analyze_parser.add_argument(
        "--log-file",
        default=None,
        help="Also write a detailed log to this file.",
    )

    files_parser = subparsers.add_parser(
        "files",
        help="List the files that would be analyzed.",
    )
    _add_verbosity_options(files_parser, suppress_default=True)
    _add_project_options(files_parser)

    return parser


def main(argv: list[str] | None = None) -> None:
    """CLI entrypoint for vuescan commands."""
    parser = _build_parser()
    args = parser.parse_args(argv)

    log_file = Path(args.log_file) if getattr(args, "log_file", None) else None
    logger = configure_logging(
        verbose=bool(args.verbose), quiet=bool(args.quiet), log_file=log_file
    )

    try:
        config = _load_config(args)
    except ConfigError as exc:
        parser.exit(1, f"{exc}\n")

    if args.command == "analyze":
        _run_analyze(parser, args, config, logger)
    elif args.command == "files":
        try:
            files = RepoScanner().scan(args.path, config)
        except (FileNotFoundError, NotADirectoryError) as exc:
            parser.exit(1, f"{exc}\n")
        for discovered in files:
            print(f"{discovered.kind:<9} {discovered.relative}")
    else:  # pragma: no cover - argparse enforces choices
        parser.exit(1, "Unknown command\n")


def _run_analyze(
    parser: argparse.ArgumentParser,
    args: argparse.Namespace,
    config: AnalysisConfig,
    logger: logging.Logger,
) -> None:
    overrides: dict[str, object] = {}
    if args.debug:
        overrides["debug"] = True
    if args.max_concurrency is not None:
        overrides["max_concurrency"] = args.max_concurrency
    if overrides:
        config = dataclasses.replace(config, **overrides)

    output = Path(args.output) if args.output else Path(config.output)
    counter = DiagnosticCounter()
    logger.addHandler(counter)
    try:
        result = Orchestrator(config).run(args.path, output=output)
    except (FileNotFoundError, NotADirectoryError) as exc:
        parser.exit(1, f"{exc}\n")
    except OSError as exc:
        parser.exit(1, f"vuescan analyze failed: {exc}\nRun with --verbose for more details.\n")
    finally:
        logger.removeHandler(counter)

    print("Analysis complete!")
    print(f"Results saved to {_relativize(result.output)}")
    print(f"Analyzed {result.summary.files} file(s)")
    if counter.count:
        print(f"{counter.count} file(s) could not be analyzed; see the log above.")
    print("")
    for line in result.summary.lines():
        print(line)


def _load_config(args: argparse.Namespace) -> AnalysisConfig:
    if args.config:
        return load_config(Path(args.config))
    project = Path(args.path)
    if project.is_dir():
        return load_config(project)
    return AnalysisConfig(root=project.expanduser().resolve())


def _relativize(path: Path) -> str:
    try:
        return str(path.resolve().relative_to(Path.cwd()))
    except ValueError:
        return str(path)


if __name__ == "__main__":
    main(sys.argv[1:])
