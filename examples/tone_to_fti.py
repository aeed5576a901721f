"""
Synthesize a short sweep, slice it into N163 waves and export an .fti.

Writes the intermediate WAV next to the instrument so both can be inspected.

Usage:
    python3 examples/tone_to_fti.py --out-dir /tmp/sweep --count 8 --size 32
"""

import argparse
import math
import sys
from pathlib import Path

import numpy as np

REPO_ROOT = Path(__file__).resolve().parents[1]
if str(REPO_ROOT) not in sys.path:
    sys.path.insert(0, str(REPO_ROOT))

from wavenib import (  # noqa: E402
    SliceSpec,
    encode_wav_bytes,
    format_levels,
    load_wav,
    render_slices_png,
    slice_stream,
    write_fti,
)


def sweep(n_frames: int, sr: int, f0: float, f1: float) -> np.ndarray:
    t = np.arange(n_frames, dtype=np.float64) / sr
    duration = n_frames / float(sr)
    phase = 2.0 * math.pi * (f0 * t + (f1 - f0) * t * t / (2.0 * duration))
    return (np.sin(phase) * 30000).astype(np.int16)


def main() -> int:
    ap = argparse.ArgumentParser(description=__doc__)
    ap.add_argument("--out-dir", required=True)
    ap.add_argument("--sr", type=int, default=22050)
    ap.add_argument("--frames", type=int, default=4096)
    ap.add_argument("--count", type=int, default=8)
    ap.add_argument("--size", type=int, default=32)
    args = ap.parse_args()

    out_dir = Path(args.out_dir)
    out_dir.mkdir(parents=True, exist_ok=True)

    wav_path = out_dir / "sweep.wav"
    wav_path.write_bytes(encode_wav_bytes(sweep(args.frames, args.sr, 40.0, 400.0), args.sr))

    samples = load_wav(str(wav_path))
    slices = slice_stream(samples, SliceSpec(slice_count=args.count, resolution=args.size))

    for levels in slices:
        print(format_levels(levels), end="")

    write_fti(str(out_dir / "sweep.fti"), slices, name="Sweep")
    render_slices_png(slices, str(out_dir / "sweep.png"))
    print("Wrote", wav_path, "and", len(slices), "waves.")
    return 0


if __name__ == "__main__":
    raise SystemExit(main())
