"""
wavenib.__main__

CLI entry point.

This file is intentionally small:
- parse args
- load, slice, then print and export through the public API
It must not contain container parsing or slicing arithmetic.
"""

from __future__ import annotations

import argparse
import sys
from typing import Optional

from .errors import FormatError, ResourceError
from .fti import DEFAULT_NAME, write_fti
from .render import format_graph, format_levels, render_slices_png
from .slicer import SliceSpec, slice_stream
from .wav import load_wav


def _non_negative_int(value: str) -> int:
    text = value.strip()
    digits = text.lstrip("+-")
    if digits[:2].lower() == "0x":
        base = 16
    elif len(digits) > 1 and digits.startswith("0"):
        base = 8
    else:
        base = 10
    try:
        n = int(text, base)
    except ValueError:
        raise argparse.ArgumentTypeError(f"invalid integer: {value!r}")
    if n < 0:
        raise argparse.ArgumentTypeError(f"value must not be negative: {n}")
    return n


def _parse_args(argv: Optional[list[str]] = None) -> argparse.Namespace:
    p = argparse.ArgumentParser(
        prog="python -m wavenib",
        description="Chop a mono 16-bit WAV file into 4-bit wavetable slices.",
    )

    p.add_argument("-i", "--input", required=True, help="Input WAV file (mono, 16-bit PCM).")
    p.add_argument("-o", "--output", default=None, help="Write the slices as an N163 .fti instrument.")
    p.add_argument(
        "-s",
        "--size",
        type=_non_negative_int,
        default=16,
        help="Levels per generated waveform (resolution). Accepts 0x hex and leading-zero octal.",
    )
    p.add_argument("-c", "--count", type=_non_negative_int, default=16, help="Number of slices.")
    p.add_argument(
        "-l",
        "--length",
        type=_non_negative_int,
        default=0,
        help="Samples per slice (0 = file length / count).",
    )
    p.add_argument(
        "-e",
        "--extend",
        action="store_true",
        help="Extend the rightmost slice so it ends at the end of the audio.",
    )
    p.add_argument("--png", default=None, help="Also save the slices as a bar-graph image.")
    p.add_argument("--name", default=DEFAULT_NAME, help="Instrument name stored in the .fti file.")
    p.add_argument("--no-graph", action="store_true", help="Only print the level rows.")

    return p.parse_args(argv)


def main(argv: Optional[list[str]] = None) -> int:
    args = _parse_args(argv)

    try:
        samples = load_wav(args.input)
    except ResourceError as exc:
        print(exc, file=sys.stderr)
        return 1
    except FormatError as exc:
        print(f"Unsupported WAV file format: {args.input} ({exc})", file=sys.stderr)
        return 1

    try:
        spec = SliceSpec(
            slice_count=args.count,
            resolution=args.size,
            samples_per_slice=args.length or None,
            extend_edge=args.extend,
        )
        slices = slice_stream(samples, spec)
    except FormatError as exc:
        print(exc, file=sys.stderr)
        return 1

    for levels in slices:
        if not args.no_graph:
            print(format_graph(levels), end="")
        print(format_levels(levels), end="")
        print()

    try:
        if args.output:
            write_fti(args.output, slices, name=args.name)
        if args.png:
            render_slices_png(slices, args.png)
    except ValueError as exc:
        print(exc, file=sys.stderr)
        return 1
    except OSError as exc:
        print(f"{exc.filename or 'output'}: {exc.strerror or exc}", file=sys.stderr)
        return 1

    return 0


if __name__ == "__main__":
    raise SystemExit(main())
