"""Command line entry point: clamp an element of an HTML file.

Examples:
    textclamp card.html --selector ".summary" --lines 3 --columns 40
    textclamp card.html -s p --height 48px --layout pillow --width 280
"""

from __future__ import annotations

import argparse
import logging
import sys
from pathlib import Path

from bs4 import BeautifulSoup

from textclamp.adapters.grid_layout import GridLayout
from textclamp.adapters.pillow_layout import PillowLayout
from textclamp.config.settings import get_settings
from textclamp.core.clamp import clamp
from textclamp.core.errors import ClampError
from textclamp.core.ports import LayoutPort


def build_parser() -> argparse.ArgumentParser:
    parser = argparse.ArgumentParser(prog="textclamp", description="Clamp an HTML element's text")
    parser.add_argument("input", type=Path, help="HTML file to read ('-' for stdin)")
    parser.add_argument("-s", "--selector", default="body", help="CSS selector of the container")
    target = parser.add_mutually_exclusive_group()
    target.add_argument("--lines", type=int, help="Number of lines to keep")
    target.add_argument("--height", help="Height budget, e.g. 48px, 3em, 2rem")
    target.add_argument("--auto", action="store_true", help="Keep the currently visible lines")
    parser.add_argument("--layout", choices=["grid", "pillow"], default="grid")
    parser.add_argument("--columns", type=int, help="Grid width in character cells")
    parser.add_argument("--width", type=float, help="Container width in pixels")
    parser.add_argument("--font", help="Font file for the pillow layout")
    parser.add_argument("--marker", help="Truncation marker (default: …)")
    parser.add_argument("--markup", help="HTML inserted before the marker")
    parser.add_argument(
        "--boundary",
        action="append",
        dest="boundaries",
        help="Split token, highest priority first; repeat for more",
    )
    parser.add_argument(
        "--no-boundaries", action="store_true", help="Only remove whole text nodes"
    )
    parser.add_argument("--native", action="store_true", help="Allow native line-clamp styling")
    parser.add_argument("--fragment", action="store_true", help="Print only the container")
    parser.add_argument("-o", "--output", type=Path, help="Write the result here instead of stdout")
    parser.add_argument("--log-level", default=None, help="Logging level (default from settings)")
    return parser


def _layout(args: argparse.Namespace) -> LayoutPort:
    if args.layout == "pillow":
        return PillowLayout(font_path=args.font, width_px=args.width, supports_line_clamp=args.native)
    if args.width is not None:
        return GridLayout(columns=int(args.width // 8), supports_line_clamp=args.native)
    return GridLayout(columns=args.columns, supports_line_clamp=args.native)


def main(argv: list[str] | None = None) -> int:
    args = build_parser().parse_args(argv)
    settings = get_settings()
    logging.basicConfig(level=(args.log_level or settings.log_level).upper(), stream=sys.stderr)

    source = sys.stdin.read() if str(args.input) == "-" else args.input.read_text(encoding="utf-8")
    soup = BeautifulSoup(source, "html.parser")
    container = soup.select_one(args.selector)
    if container is None:
        print(f"textclamp: no element matches {args.selector!r}", file=sys.stderr)
        return 2

    options: dict[str, object] = {"prefer_native_clamp": args.native}
    if args.lines is not None:
        options["clamp"] = args.lines
    elif args.height:
        options["clamp"] = args.height
    elif args.auto:
        options["clamp"] = "auto"
    if args.marker is not None:
        options["truncation_marker"] = args.marker
    if args.markup:
        options["truncation_markup"] = args.markup
    if args.no_boundaries:
        options["boundary_priority"] = ()
    elif args.boundaries:
        options["boundary_priority"] = tuple(args.boundaries)

    try:
        run = clamp(container, options, layout=_layout(args))
    except ClampError as exc:
        print(f"textclamp: {exc}", file=sys.stderr)
        return 1

    report = run.report
    if report is not None:
        logging.getLogger(__name__).info(
            "clamped to %d lines (%s px), truncated=%s",
            report.applied_lines,
            report.applied_height_px,
            report.truncated,
        )

    rendered = str(container) if args.fragment else str(soup)
    if args.output:
        args.output.write_text(rendered, encoding="utf-8")
    else:
        sys.stdout.write(rendered + "\n")
    return 0


if __name__ == "__main__":
    sys.exit(main())
