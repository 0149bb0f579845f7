"""Command-line interface for bmp_dither.

Human-readable status goes to stderr; ``--json`` switches to structured
output for scripting.
"""

from __future__ import annotations

import argparse
import json
import sys
from pathlib import Path

from bmp_dither.config import ConfigError, DitherSettings, configure_logging
from bmp_dither.core.errors import (
    FormatError,
    InvalidPaletteError,
    UnsupportedFormatError,
)
from bmp_dither.core.palette import MAX_UNIFORM_BITS, NAMED_COLORS
from bmp_dither.core.quantize import DistanceMode


def _build_parser(settings: DitherSettings) -> argparse.ArgumentParser:
    parser = argparse.ArgumentParser(
        prog="bmp-dither",
        description="Reduce a 24-bit BMP to a fixed palette with Floyd-Steinberg dithering.",
    )
    subparsers = parser.add_subparsers(dest="command", required=True)

    # --- convert subcommand ---
    convert = subparsers.add_parser(
        "convert",
        help="Dither a bitmap against a palette.",
    )
    convert.add_argument("input", help="Input BMP file path.")
    convert.add_argument(
        "-o", "--output",
        help="Output file path. Defaults to <input>_dithered.bmp.",
    )
    palette_group = convert.add_mutually_exclusive_group()
    palette_group.add_argument(
        "--palette",
        default=settings.palette,
        help=(
            "Comma-separated colors, by name ("
            + ", ".join(NAMED_COLORS)
            + f") or #rrggbb (default: {settings.palette})."
        ),
    )
    palette_group.add_argument(
        "--bits",
        type=int,
        help=f"Use a uniform palette with 2**BITS levels per channel (1-{MAX_UNIFORM_BITS}).",
    )
    convert.add_argument(
        "--distance",
        choices=[d.value for d in DistanceMode],
        default=settings.distance.value,
        help=f"Color distance metric (default: {settings.distance.value}).",
    )
    convert.add_argument(
        "--serpentine",
        action="store_true",
        default=settings.serpentine,
        help="Alternate scan direction on every row.",
    )
    convert.add_argument(
        "--json",
        action="store_true",
        help="Output structured JSON (pipe-friendly).",
    )
    convert.add_argument(
        "--debug",
        action="store_true",
        help="Show stack traces on error.",
    )

    # --- info subcommand ---
    info = subparsers.add_parser(
        "info",
        help="Print the decoded bitmap header.",
    )
    info.add_argument("input", help="Input BMP file path.")
    info.add_argument(
        "--json",
        action="store_true",
        help="Output structured JSON.",
    )

    return parser


def _auto_output_path(input_path: Path) -> Path:
    """Generate default output path from input."""
    return input_path.parent / f"{input_path.stem}_dithered.bmp"


def _fail(message: str, code: str, is_json: bool) -> None:
    """Report an error on stderr (JSON or plain) and exit with code 1."""
    if is_json:
        err = {"status": "error", "error": message, "code": code}
        print(json.dumps(err), file=sys.stderr)
    else:
        print(f"Error: {message}", file=sys.stderr)
    sys.exit(1)


def _error_code(exc: Exception) -> str:
    if isinstance(exc, UnsupportedFormatError):
        return "UNSUPPORTED_FORMAT"
    if isinstance(exc, FormatError):
        return "INVALID_INPUT"
    if isinstance(exc, InvalidPaletteError):
        return "INVALID_PALETTE"
    return "PROCESSING_ERROR"


def _resolve_input(raw_input: str, is_json: bool) -> Path:
    input_path = Path(raw_input).resolve()
    if not input_path.is_file():
        _fail(f"File not found: {input_path}", "FILE_NOT_FOUND", is_json)
    return input_path


def _run_convert(args: argparse.Namespace) -> None:
    """Run the convert pipeline."""
    from bmp_dither.core.palette import parse_palette, uniform_palette
    from bmp_dither.core.pipeline import dither_file

    is_json = args.json
    input_path = _resolve_input(args.input, is_json)

    try:
        palette = uniform_palette(args.bits) if args.bits is not None else parse_palette(args.palette)
    except InvalidPaletteError as e:
        _fail(str(e), "INVALID_PALETTE", is_json)

    if args.output:
        output_path = Path(args.output).resolve()
    else:
        output_path = _auto_output_path(input_path)

    if not is_json:
        print(f"Dithering {input_path} with {len(palette)} colors...", file=sys.stderr)

    try:
        result = dither_file(
            input_path,
            output_path,
            palette,
            distance=DistanceMode(args.distance),
            serpentine=args.serpentine,
        )
    except (OSError, ValueError) as e:
        if args.debug:
            import traceback
            traceback.print_exc(file=sys.stderr)
        _fail(str(e), _error_code(e), is_json)

    if not is_json:
        print(f"Wrote {result.bytes_written} bytes to {result.output}", file=sys.stderr)
    else:
        doc = {
            "status": "success",
            "input": str(result.input),
            "output": str(result.output),
            "settings": {
                "palette": [list(color) for color in palette],
                "distance": result.distance.value,
                "serpentine": result.serpentine,
            },
            "metadata": {
                "width": result.width,
                "height": result.height,
                "bytes_written": result.bytes_written,
            },
        }
        print(json.dumps(doc, indent=2))


def _run_info(args: argparse.Namespace) -> None:
    """Print the header of a bitmap."""
    from bmp_dither.core.bitmap import read_bitmap

    is_json = args.json
    input_path = _resolve_input(args.input, is_json)
    try:
        header, _ = read_bitmap(input_path)
    except (OSError, ValueError) as e:
        _fail(str(e), _error_code(e), is_json)

    fields = header.as_dict()
    if is_json:
        print(json.dumps({"status": "success", "input": str(input_path), "header": fields}, indent=2))
    else:
        for name, value in fields.items():
            print(f"{name:>20}: {value}")


def main(argv: list[str] | None = None) -> None:
    """Main entry point.

    Routing:
      bmp-dither convert <file> [opts]  -> dither a bitmap
      bmp-dither info <file>            -> dump its header
    """
    try:
        settings = DitherSettings.from_env()
    except ConfigError as e:
        raw_args = sys.argv[1:] if argv is None else argv
        _fail(str(e), "INVALID_INPUT", "--json" in raw_args)
    configure_logging(settings.log_level)
    parser = _build_parser(settings)
    args = parser.parse_args(argv)
    if args.command == "convert":
        _run_convert(args)
    else:
        _run_info(args)
