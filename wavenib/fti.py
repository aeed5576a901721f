"""
wavenib.fti

FamiTracker instrument export for Namco 163 wavetables.

File layout (little-endian):

    "FTI2.4"            version string
    type[u8]            5 = N163
    name_len[u32] name  ASCII instrument name
    seq_count[u8]       5, followed by one enabled flag[u8] per sequence
    wave_size[u32]      levels per wave (resolution)
    wave_pos[u32]       position in N163 RAM
    wave_count[u32]     number of waves (slice_count)
    waves               wave_count * wave_size bytes, one level per byte
"""

from __future__ import annotations

import struct

import numpy as np

from .levels import NIBBLE_LEVELS

FTI_MAGIC = b"FTI2.4"
INST_N163 = 5
SEQUENCE_COUNT = 5
MAX_NAME_LEN = 127
DEFAULT_NAME = "New Instrument"

U32 = struct.Struct("<I")


def build_fti(slices: np.ndarray, *, name: str = DEFAULT_NAME, wave_pos: int = 0) -> bytes:
    """
    Serialize quantized slices as an N163 .fti instrument.

    Parameters
    ----------
    slices : np.ndarray
        Levels in [0, 15] with shape (wave_count, wave_size).
    name : str, optional
        Instrument name, ASCII, at most 127 bytes.
    wave_pos : int, optional
        Wave position in N163 RAM.
    """
    waves = np.asarray(slices)
    if waves.ndim != 2 or waves.size == 0:
        raise ValueError("build_fti expects a non-empty (wave_count, wave_size) array")
    if waves.min() < 0 or waves.max() >= NIBBLE_LEVELS:
        raise ValueError(f"Wave levels must lie in [0, {NIBBLE_LEVELS - 1}]")

    try:
        name_bytes = name.encode("ascii")
    except UnicodeEncodeError as exc:
        raise ValueError(f"Instrument name must be ASCII: {name!r}") from exc
    if len(name_bytes) > MAX_NAME_LEN:
        raise ValueError(f"Instrument name longer than {MAX_NAME_LEN} bytes")

    wave_count, wave_size = waves.shape

    out = bytearray()
    out += FTI_MAGIC
    out += struct.pack("B", INST_N163)
    out += U32.pack(len(name_bytes))
    out += name_bytes
    out += struct.pack("B", SEQUENCE_COUNT)
    out += bytes(SEQUENCE_COUNT)  # all sequences disabled
    out += U32.pack(int(wave_size))
    out += U32.pack(int(wave_pos))
    out += U32.pack(int(wave_count))
    out += waves.astype(np.uint8).tobytes()
    return bytes(out)


def write_fti(path: str, slices: np.ndarray, *, name: str = DEFAULT_NAME, wave_pos: int = 0) -> None:
    """Write ``build_fti`` output to ``path``."""
    data = build_fti(slices, name=name, wave_pos=wave_pos)
    with open(path, "wb") as f:
        f.write(data)
