"""devfile-parser CLI: parse and flatten devfiles."""

import argparse
import logging
import sys
from importlib.metadata import version as get_version, PackageNotFoundError
from pathlib import Path

from devfile_parser.settings import get_settings


def setup_logging(level: str, fmt: str) -> None:
    """Configure a stderr handler on the root logger."""
    root = logging.getLogger()
    root.setLevel(getattr(logging, level.upper(), logging.WARNING))
    root.handlers.clear()
    handler = logging.StreamHandler(sys.stderr)
    handler.setFormatter(logging.Formatter(fmt, datefmt="%Y-%m-%d %H:%M:%S"))
    root.addHandler(handler)


def build_parser() -> argparse.ArgumentParser:
    try:
        package_version = get_version("devfile-parser")
    except PackageNotFoundError:
        package_version = "dev"

    parser = argparse.ArgumentParser(
        prog="devfile-parser",
        description="devfile-parser: resolve devfile parents and plugins into one document"
    )
    parser.add_argument("--version", action="version", version=f"devfile-parser {package_version}")
    parser.add_argument(
        "-v", "--verbose",
        action="store_true",
        help="Log reference resolution at DEBUG level."
    )

    subparsers = parser.add_subparsers(dest="command", help="Available commands")

    flatten_parser = subparsers.add_parser(
        "flatten",
        help="Parse a devfile and resolve its parent and plugin references"
    )
    flatten_parser.add_argument(
        "source",
        help="Path or http(s) URL of the devfile"
    )
    flatten_parser.add_argument(
        "--raw",
        action="store_true",
        help="Decode only; do not resolve parent or plugins (paths only)"
    )
    flatten_parser.add_argument(
        "--format",
        choices=["yaml", "json"],
        default="yaml",
        help="Output format"
    )
    flatten_parser.add_argument(
        "--out",
        type=Path,
        default=None,
        help="Write the result to this file instead of stdout"
    )
    return parser


def main(argv=None):
    """Main CLI entry point."""
    parser = build_parser()
    args = parser.parse_args(argv)

    settings = get_settings()
    setup_logging("DEBUG" if args.verbose else settings.log_level, settings.log_format)

    if args.command == "flatten":
        from devfile_parser.api import parse, parse_from_url, parse_raw_devfile
        from devfile_parser.kernel.errors import DevfileError
        from devfile_parser._internal.context import is_url
        from devfile_parser._internal.decoder import dump_yaml
        from devfile_parser._internal.canonical_json import canonical_dumps

        try:
            if is_url(args.source):
                if args.raw:
                    print("Error: --raw is only supported for local paths", file=sys.stderr)
                    sys.exit(1)
                obj = parse_from_url(args.source, settings=settings)
            elif args.raw:
                obj = parse_raw_devfile(args.source, settings=settings)
            else:
                obj = parse(args.source, settings=settings)

            if args.format == "json":
                rendered = canonical_dumps(obj.data.to_wire(), indent=2) + "\n"
            else:
                rendered = dump_yaml(obj.data)

            if args.out is not None:
                args.out.write_text(rendered, encoding="utf-8")
            else:
                sys.stdout.write(rendered)
            sys.exit(0)
        except DevfileError as e:
            print(f"Error: {e}", file=sys.stderr)
            sys.exit(1)
        except OSError as e:
            print(f"Error: {e}", file=sys.stderr)
            sys.exit(1)
    else:
        parser.print_help()
        sys.exit(1)


if __name__ == "__main__":
    main()
