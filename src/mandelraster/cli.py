"""Command line entry point for rendering Mandelbrot PNGs."""

from __future__ import annotations

import argparse
import re
import sys
from pathlib import Path
from typing import List, Optional, Sequence

from .computation import DEFAULT_LIMIT
from .config import default_render_config, load_named_render_configs
from .execution import run_batch, run_render
from .parsing import parse_bounds, parse_complex

_NEGATIVE_VALUE = re.compile(r"^-\.?\d")

_EPILOG = """\
Example: %(prog)s mandel.png 1000x750 -1.20,0.35 -1,0.20
"""


def build_parser() -> argparse.ArgumentParser:
    parser = argparse.ArgumentParser(
        prog="mandelraster",
        usage="%(prog)s FILE PIXELS UPPERLEFT LOWERRIGHT [options]\n"
        "       %(prog)s --config FILE [--render NAME] [--task-id I] [--list-renders]",
        description="Render the Mandelbrot set as a grayscale PNG.",
        epilog=_EPILOG,
        formatter_class=argparse.RawDescriptionHelpFormatter,
    )
    parser.add_argument("file", nargs="?", help="Output PNG path")
    parser.add_argument("pixels", nargs="?", help="Image size as WIDTHxHEIGHT")
    parser.add_argument("upper_left", nargs="?", help="Upper left corner as REAL,IMAG")
    parser.add_argument("lower_right", nargs="?", help="Lower right corner as REAL,IMAG")
    parser.add_argument("--limit", type=int, default=DEFAULT_LIMIT, help="Iteration limit per pixel")
    parser.add_argument("--chunk-size", type=int, help="Rows rendered per timed chunk")
    parser.add_argument("--track", action="store_true", help="Log the render to MLflow")

    parser.add_argument("--config", type=str, help="Path to render YAML file")
    parser.add_argument("--render", type=str, help="Name of a render within the YAML file")
    parser.add_argument("--list-renders", action="store_true", help="List renders in the YAML file")
    parser.add_argument("--task-id", type=int, help="Run specific config index (for job arrays)")
    return parser


def _is_negative_value(arg: str) -> bool:
    return bool(_NEGATIVE_VALUE.match(arg)) or (arg.startswith("-") and parse_complex(arg) is not None)


def _protect_negative_values(argv: Sequence[str]) -> List[str]:
    # argparse reads "-1.20,0.35" as an option; a leading space keeps it positional
    return [f" {arg}" if _is_negative_value(arg) else arg for arg in argv]


def _unprotect(value: str) -> str:
    return value[1:] if value.startswith(" -") else value


def main(argv: Optional[Sequence[str]] = None) -> int:
    parser = build_parser()
    args = parser.parse_args(_protect_negative_values(sys.argv[1:] if argv is None else argv))

    if args.config:
        return _main_batch(parser, args)

    if args.render or args.list_renders or args.task_id is not None:
        parser.error("--render, --list-renders and --task-id require --config")

    if None in (args.file, args.pixels, args.upper_left, args.lower_right):
        parser.error("FILE, PIXELS, UPPERLEFT and LOWERRIGHT are required")

    bounds = parse_bounds(_unprotect(args.pixels))
    if bounds is None:
        parser.error("error parsing image dimensions")
    upper_left = parse_complex(_unprotect(args.upper_left))
    if upper_left is None:
        parser.error("error parsing upper left corner point")
    lower_right = parse_complex(_unprotect(args.lower_right))
    if lower_right is None:
        parser.error("error parsing lower right corner point")
    if args.limit <= 0:
        parser.error("--limit must be positive")

    overrides = dict(
        output=_unprotect(args.file),
        width=bounds[0],
        height=bounds[1],
        upper_left=upper_left,
        lower_right=lower_right,
        limit=args.limit,
    )
    if args.chunk_size is not None:
        overrides["chunk_size"] = args.chunk_size

    try:
        config = default_render_config(**overrides)
        run_render(config, track=args.track)
    except (OSError, ValueError) as exc:
        print(f"ERROR: {exc}", file=sys.stderr)
        return 1
    return 0


def _main_batch(parser: argparse.ArgumentParser, args: argparse.Namespace) -> int:
    if any(value is not None for value in (args.file, args.pixels, args.upper_left, args.lower_right)):
        parser.error("positional render arguments cannot be combined with --config")
    if args.task_id is not None and args.render is None:
        parser.error("--task-id requires --render")

    config_path = Path(args.config)
    try:
        groups = load_named_render_configs(config_path, args.render)
    except (OSError, ValueError) as exc:
        print(f"ERROR: {exc}", file=sys.stderr)
        return 1

    if args.list_renders:
        for name, configs in groups:
            print(f"{name}: {len(configs)} configurations")
        return 0

    exit_code = 0
    for name, configs in groups:
        rc = run_batch(
            configs,
            f"{config_path}::{name}",
            name,
            task_id=args.task_id,
            track=args.track,
        )
        exit_code = exit_code or rc
    return exit_code
