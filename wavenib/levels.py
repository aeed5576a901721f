"""
wavenib.levels

Amplitude conventions shared by every stage.

Raw container words are signed 16-bit PCM stored little-endian. The sample
stream holds them offset into unsigned range by DC_OFFSET, so silence sits
at 0x8000. Quantized levels are the top four bits of that unsigned value.

All conversions go through ``to_unsigned`` and ``to_nibble``; the graph,
the nibble row and the .fti export all consume ``to_nibble`` output and
therefore agree bit-for-bit.
"""

from __future__ import annotations

from typing import Union

import numpy as np

DC_OFFSET = 0x8000
SAMPLE_MASK = 0xFFFF
NIBBLE_SHIFT = 12
NIBBLE_MASK = 0xF000
NIBBLE_LEVELS = 16

IntOrArray = Union[int, np.ndarray]


def to_unsigned(raw: IntOrArray) -> IntOrArray:
    """
    Offset raw 16-bit words (two's complement) into unsigned amplitude.

    Parameters
    ----------
    raw : int or np.ndarray
        Little-endian words already read as unsigned 16-bit integers.

    Returns
    -------
    int or np.ndarray
        ``(raw + DC_OFFSET) mod 2**16``; arrays come back as uint16.
    """
    if isinstance(raw, np.ndarray):
        wide = raw.astype(np.uint32) + DC_OFFSET
        return (wide & SAMPLE_MASK).astype(np.uint16)
    return (int(raw) + DC_OFFSET) & SAMPLE_MASK


def to_nibble(amplitude: IntOrArray) -> IntOrArray:
    """
    Quantize an unsigned 16-bit amplitude to a 4-bit level in [0, 15].

    Equivalent to ``floor(amplitude / 4096) mod 16``. Arrays come back as uint8.
    """
    if isinstance(amplitude, np.ndarray):
        wide = amplitude.astype(np.uint32)
        return ((wide & NIBBLE_MASK) >> NIBBLE_SHIFT).astype(np.uint8)
    return (int(amplitude) & NIBBLE_MASK) >> NIBBLE_SHIFT


__all__ = [
    "DC_OFFSET",
    "NIBBLE_LEVELS",
    "to_nibble",
    "to_unsigned",
]
