"""CLI entrypoints for conformlint commands."""

from __future__ import annotations

import argparse
import sys
from pathlib import Path

from .errors import AccessError, ConfigError, EmptyProjectError
from .config import load_config, load_project_config
from .linter import Linter
from .logging import configure_logging
from .reporting.render import FORMATS, render, render_rules
from .rules.builtin import default_registry

EXIT_PASSING = 0
EXIT_FAILING = 1
EXIT_FATAL = 2


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


def _add_config_option(parser: argparse.ArgumentParser) -> None:
    parser.add_argument(
        "--config",
        default=None,
        help="Path to a .conformlint.yml file (defaults to the one in the project root).",
    )


def _add_format_option(parser: argparse.ArgumentParser) -> None:
    parser.add_argument(
        "--format",
        choices=FORMATS,
        default="text",
        help="Output format (default: text).",
    )


def _build_parser() -> argparse.ArgumentParser:
    parser = argparse.ArgumentParser(
        prog="conformlint",
        description="Check a project tree against the platform's coding conventions.",
    )
    _add_verbose_option(parser)
    parser.add_argument(
        "-q",
        "--quiet",
        action="store_true",
        help="Only log warnings and errors.",
    )
    parser.add_argument(
        "--log-file",
        default=None,
        help="Also write logs to this file.",
    )
    subparsers = parser.add_subparsers(dest="command", required=True)

    check_parser = subparsers.add_parser(
        "check",
        help="Scan a project and report rule violations.",
    )
    _add_verbose_option(check_parser, suppress_default=True)
    _add_config_option(check_parser)
    _add_format_option(check_parser)
    check_parser.add_argument(
        "path",
        nargs="?",
        default=".",
        help="Path to the project root (defaults to current directory).",
    )
    check_parser.add_argument(
        "--output",
        "-o",
        default=None,
        help="Write the report to this file instead of stdout.",
    )
    check_parser.add_argument(
        "--allow-empty",
        action="store_true",
        default=None,
        help="Treat a project with no files as an empty passing report.",
    )
    check_parser.add_argument(
        "--jobs",
        "-j",
        type=int,
        default=None,
        help="Evaluate files on this many worker threads.",
    )
    check_parser.add_argument(
        "--show-passed",
        action="store_true",
        help="List passing checks in the text report.",
    )

    rules_parser = subparsers.add_parser(
        "rules",
        help="List the effective rules in evaluation order.",
    )
    _add_verbose_option(rules_parser, suppress_default=True)
    _add_config_option(rules_parser)
    _add_format_option(rules_parser)
    rules_parser.add_argument(
        "path",
        nargs="?",
        default=".",
        help="Project root whose configuration should be applied.",
    )

    return parser


def main(argv: list[str] | None = None) -> int:
    """CLI entrypoint for conformlint commands."""
    parser = _build_parser()
    args = parser.parse_args(argv)

    log_file = Path(args.log_file) if args.log_file else None
    try:
        configure_logging(verbose=bool(args.verbose), quiet=args.quiet, log_file=log_file)
    except OSError as exc:
        parser.exit(EXIT_FATAL, f"conformlint: cannot open log file {log_file}: {exc}\n")

    if args.command == "check":
        if args.jobs is not None and args.jobs < 1:
            parser.error("--jobs must be at least 1")
        try:
            linter = Linter.from_path(
                args.path,
                config_path=args.config,
                allow_empty=args.allow_empty,
                jobs=args.jobs,
            )
            report = linter.run(args.path)
        except (AccessError, EmptyProjectError) as exc:
            parser.exit(EXIT_FATAL, f"conformlint: {exc}\n")
        except ConfigError as exc:
            parser.exit(EXIT_FATAL, f"conformlint: invalid configuration: {exc}\n")

        output = render(report, args.format, show_passed=bool(args.show_passed))
        if args.output:
            try:
                Path(args.output).write_text(output, encoding="utf-8")
            except OSError as exc:
                parser.exit(EXIT_FATAL, f"conformlint: cannot write report to {args.output}: {exc}\n")
        else:
            sys.stdout.write(output)
        return EXIT_PASSING if report.passing else EXIT_FAILING

    if args.command == "rules":
        try:
            if args.config:
                config = load_config(Path(args.config), required=True)
            else:
                config = load_project_config(Path(args.path))
            registry = default_registry(config)
        except ConfigError as exc:
            parser.exit(EXIT_FATAL, f"conformlint: invalid configuration: {exc}\n")
        sys.stdout.write(render_rules(registry.list_rules(), args.format))
        return EXIT_PASSING

    parser.exit(EXIT_FATAL, "Unknown command\n")  # pragma: no cover - argparse enforces choices
    return EXIT_FATAL


if __name__ == "__main__":
    raise SystemExit(main(sys.argv[1:]))
