"""CLI entrypoints for docmod commands."""

from __future__ import annotations

import argparse
import json
import sys
from pathlib import Path

from .config import ConfigError
from .extractors import ManifestError
from .logging import configure_logging
from .orchestrator import Orchestrator
from .render import TemplateError
from .source import SourceSpanError


def _add_verbose_option(
    parser: argparse.ArgumentParser, *, suppress_default: bool = False
) -> None:
    parser.add_argument(
        "-v",
        "--verbose",
        action="store_true",
        default=argparse.SUPPRESS if suppress_default else False,
        help="Increase log verbosity for troubleshooting.",
    )


def _add_source_argument(parser: argparse.ArgumentParser) -> None:
    parser.add_argument(
        "path",
        nargs="?",
        default=".",
        help="Path to the source tree root (defaults to current directory).",
    )


def _build_parser() -> argparse.ArgumentParser:
    parser = argparse.ArgumentParser(
        prog="docmod",
        description="Generate static HTML documentation for a Python source tree.",
    )
    _add_verbose_option(parser)
    subparsers = parser.add_subparsers(dest="command", required=True)

    build_parser = subparsers.add_parser(
        "build",
        help="Write one HTML page per package plus an index.html sitemap.",
    )
    _add_verbose_option(build_parser, suppress_default=True)
    _add_source_argument(build_parser)
    build_parser.add_argument(
        "-o",
        "--output",
        default=None,
        help="Output directory (defaults to .docmod.yml 'output' or the current directory).",
    )
    build_parser.add_argument(
        "--package-template",
        default=None,
        help="Jinja template file used for package pages.",
    )
    build_parser.add_argument(
        "--index-template",
        default=None,
        help="Jinja template file used for the index page.",
    )

    inspect_parser = subparsers.add_parser(
        "inspect",
        help="Print the module document as JSON instead of rendering it.",
    )
    _add_verbose_option(inspect_parser, suppress_default=True)
    _add_source_argument(inspect_parser)

    return parser


def main(argv: list[str] | None = None) -> None:
    """CLI entrypoint for docmod commands."""
    parser = _build_parser()
    args = parser.parse_args(argv)

    configure_logging(verbose=bool(args.verbose), quiet=args.command == "inspect")

    orchestrator = Orchestrator()

    try:
        if args.command == "build":
            result = orchestrator.run_build(
                args.path,
                args.output,
                package_template=args.package_template,
                index_template=args.index_template,
            )
            print(f"Wrote {len(result.written)} pages to {_relativize(result.output_dir)}")
        elif args.command == "inspect":
            document = orchestrator.run_inspect(args.path)
            print(json.dumps(document, indent=2))
        else:  # pragma: no cover - argparse enforces choices
            parser.exit(1, "Unknown command\n")
    except (ConfigError, ManifestError, TemplateError) as exc:
        parser.exit(1, f"docmod {args.command} failed: {exc}\n")
    except SourceSpanError as exc:
        parser.exit(1, f"docmod {args.command} failed: internal source span error: {exc}\n")


def _relativize(path: Path) -> str:
    try:
        return str(path.resolve().relative_to(Path.cwd()))
    except ValueError:
        return str(path)


if __name__ == "__main__":
    main(sys.argv[1:])
