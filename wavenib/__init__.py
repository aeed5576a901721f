"""
wavenib

Turn short mono recordings into 4-bit wavetables.

The package keeps a hard separation between:
- container parsing (wavenib.wav)
- amplitude conventions and quantization (wavenib.levels)
- slicing and nearest-sample resampling (wavenib.slicer)
- consumers of quantized slices (wavenib.render, wavenib.fti)
"""

from __future__ import annotations

__all__ = [
    "__version__",
    "DC_OFFSET",
    "FormatDescriptor",
    "FormatError",
    "ResourceError",
    "SliceSpec",
    "SliceSpecError",
    "Window",
    "build_fti",
    "decode_wav_bytes",
    "encode_wav_bytes",
    "format_graph",
    "format_levels",
    "iter_slices",
    "load_wav",
    "plan_windows",
    "read_wav_bytes",
    "render_slices_png",
    "slice_stream",
    "to_nibble",
    "to_unsigned",
    "write_fti",
]

__version__ = "0.1.0"


from .errors import FormatError, ResourceError, SliceSpecError  # noqa: E402
from .fti import build_fti, write_fti  # noqa: E402
from .levels import DC_OFFSET, to_nibble, to_unsigned  # noqa: E402
from .render import format_graph, format_levels, render_slices_png  # noqa: E402
from .slicer import SliceSpec, Window, iter_slices, plan_windows, slice_stream  # noqa: E402
from .wav import (  # noqa: E402
    FormatDescriptor,
    decode_wav_bytes,
    encode_wav_bytes,
    load_wav,
    read_wav_bytes,
)
