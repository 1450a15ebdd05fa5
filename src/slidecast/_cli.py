"""Slidecast CLI — slidecast [options] SLIDES [OUTPUT].

Entry point for the ``slidecast`` command-line interface.
"""

from __future__ import annotations

import argparse
import sys

from slidecast._errors import SlidecastError
from slidecast.theme import builtin_stylesheets


def _parse_bind(value: str) -> tuple[str, int]:
    """Parse ``HOST:PORT`` (``:PORT`` binds every interface)."""
    host, sep, port = value.rpartition(":")
    if not sep or not port.isdigit():
        msg = f"expected HOST:PORT, got {value!r}"
        raise argparse.ArgumentTypeError(msg)
    return host.strip("[]") or "0.0.0.0", int(port)


def _build_parser() -> argparse.ArgumentParser:
    """Build the argument parser for the slidecast CLI."""
    parser = argparse.ArgumentParser(
        prog="slidecast",
        description="Present markdown slides from the terminal; every browser follows along.",
    )
    parser.add_argument(
        "--version",
        action="version",
        version=f"%(prog)s {_get_version()}",
    )
    parser.add_argument(
        "--bind",
        type=_parse_bind,
        default=None,
        metavar="HOST:PORT",
        help="Address to serve on (default: localhost:8080)",
    )
    parser.add_argument(
        "--style",
        default=None,
        metavar="REF",
        help=(
            "Stylesheet: builtin:NAME or a CSS file path (default: builtin:none; "
            f"builtins: {', '.join(builtin_stylesheets())})"
        ),
    )
    parser.add_argument(
        "--asset-dir",
        default=None,
        metavar="DIR",
        help="Directory served under /assets (default: current directory)",
    )
    parser.add_argument("slides", help="Markdown presentation (.md)")
    parser.add_argument(
        "output", nargs="?", default=None, help="Write a standalone HTML file instead of serving",
    )
    return parser


def _get_version() -> str:
    """Get the package version."""
    from slidecast import __version__

    return __version__


def _overrides(args: argparse.Namespace) -> dict[str, object]:
    overrides: dict[str, object] = {
        "stylesheet": args.style,
        "asset_dir": args.asset_dir,
    }
    if args.bind is not None:
        overrides["host"], overrides["port"] = args.bind
    return overrides


def main(argv: list[str] | None = None) -> None:
    """CLI entry point."""
    parser = _build_parser()
    args = parser.parse_args(argv)

    from slidecast.app import export, present

    try:
        if args.output is not None:
            export(args.slides, args.output, **_overrides(args))
        else:
            present(args.slides, **_overrides(args))
    except SlidecastError as exc:
        print(f"  Error: {exc}", file=sys.stderr)
        sys.exit(1)


if __name__ == "__main__":
    main()
