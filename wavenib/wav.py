"""
wavenib.wav

Strict RIFF/WAVE reader for a single audio profile.

Only mono, 16-bit, uncompressed linear PCM is accepted. The reader walks the
container exactly once, in order:

    RIFF <size> WAVE
    fmt  <len >= 16> <format record>
    data <len > 0>   <little-endian 16-bit words>

and stops at the first violation. It never scans forward for another chunk
and never looks at anything past the data chunk. Structural problems raise
FormatError; running out of bytes raises ResourceError.

Typical usage:

    from wavenib.wav import load_wav

    samples = load_wav("voice.wav")   # read-only uint16 array, silence = 0x8000
"""

from __future__ import annotations

import struct
from dataclasses import dataclass
from typing import Tuple, Union

import numpy as np

from .errors import FormatError, ResourceError
from .levels import to_unsigned


# ===================== Layout constants =====================

RIFF_TAG = b"RIFF"
WAVE_ID = b"WAVE"
FMT_TAG = b"fmt "
DATA_TAG = b"data"

# tag[4], length[u32 LE]
CHUNK_HEADER = struct.Struct("<4sI")

# format_code[u16], channels[u16], sample_rate[u32],
# byte_rate[u32], block_align[u16], bits_per_sample[u16]
FMT_RECORD = struct.Struct("<HHIIHH")

# The RIFF size must at least cover "WAVE" plus one chunk header.
MIN_RIFF_SIZE = len(WAVE_ID) + CHUNK_HEADER.size

WAVE_FORMAT_PCM = 1
SUPPORTED_CHANNELS = 1
SUPPORTED_BLOCK_ALIGN = 2
SUPPORTED_BITS = 16

BYTES_PER_SAMPLE = 2

Buffer = Union[bytes, bytearray, memoryview]


@dataclass(frozen=True)
class FormatDescriptor:
    """Decoded fields of a ``fmt `` chunk."""

    format_code: int
    channels: int
    sample_rate: int
    byte_rate: int
    block_align: int
    bits_per_sample: int

    @classmethod
    def unpack(cls, record: Buffer) -> "FormatDescriptor":
        return cls(*FMT_RECORD.unpack_from(record, 0))

    def check_profile(self) -> None:
        """
        Raise FormatError unless this is mono 16-bit linear PCM.
        """
        if self.format_code != WAVE_FORMAT_PCM:
            raise FormatError(f"Unsupported format code {self.format_code} (only PCM is supported)")
        if self.channels != SUPPORTED_CHANNELS:
            raise FormatError(f"Unsupported channel count {self.channels} (only mono is supported)")
        if self.block_align != SUPPORTED_BLOCK_ALIGN:
            raise FormatError(f"Unsupported block alignment {self.block_align}")
        if self.bits_per_sample != SUPPORTED_BITS:
            raise FormatError(f"Unsupported bit depth {self.bits_per_sample} (only 16-bit is supported)")


class _ByteCursor:
    """
    Sequential reader over an in-memory container.
    """

    def __init__(self, data: Buffer) -> None:
        self._view = memoryview(data).cast("B")
        self.offset = 0

    def take(self, n: int, what: str) -> memoryview:
        avail = len(self._view) - self.offset
        if n > avail:
            raise ResourceError(
                f"Short read in {what}: wanted {n} bytes at offset {self.offset}, {max(0, avail)} available"
            )
        out = self._view[self.offset:self.offset + n]
        self.offset += n
        return out

    def chunk_header(self, what: str) -> Tuple[bytes, int]:
        tag, length = CHUNK_HEADER.unpack(self.take(CHUNK_HEADER.size, what))
        return bytes(tag), int(length)


def read_wav_bytes(data: Buffer) -> Tuple[FormatDescriptor, np.ndarray]:
    """
    Validate a WAV container held in memory and extract its samples.

    Parameters
    ----------
    data : bytes-like
        The whole container.

    Returns
    -------
    fmt : FormatDescriptor
        The decoded format record.
    samples : np.ndarray
        Read-only uint16 array, one entry per frame, offset so that silence
        is 0x8000. Its length is ``data_length // 2`` and always > 0.

    Raises
    ------
    FormatError
        Wrong tag, unsupported profile field, or empty data chunk.
    ResourceError
        The buffer ends before a declared field or chunk does, or the sample
        array cannot be allocated.
    """
    if len(data) < CHUNK_HEADER.size:
        raise FormatError("Container too small for a RIFF header")

    cur = _ByteCursor(data)

    tag, riff_size = cur.chunk_header("RIFF header")
    if tag != RIFF_TAG:
        raise FormatError(f"Bad container tag {tag!r}, expected {RIFF_TAG!r}")
    if riff_size < len(WAVE_ID):
        raise FormatError(f"RIFF size {riff_size} too small for a WAVE identifier")

    family = bytes(cur.take(len(WAVE_ID), "WAVE identifier"))
    if family != WAVE_ID:
        raise FormatError(f"Bad format family {family!r}, expected {WAVE_ID!r}")
    if riff_size < MIN_RIFF_SIZE:
        raise FormatError(f"RIFF size {riff_size} too small for a format chunk")

    tag, fmt_len = cur.chunk_header("format chunk header")
    if tag != FMT_TAG:
        raise FormatError(f"Expected {FMT_TAG!r} chunk, found {tag!r}")
    if fmt_len < FMT_RECORD.size:
        raise FormatError(f"Format chunk length {fmt_len} is below {FMT_RECORD.size}")

    # Extension bytes past the first 16 are consumed but not interpreted.
    record = cur.take(fmt_len, "format record")
    fmt = FormatDescriptor.unpack(record)
    fmt.check_profile()

    tag, data_len = cur.chunk_header("data chunk header")
    if tag != DATA_TAG:
        raise FormatError(f"Expected {DATA_TAG!r} chunk, found {tag!r}")
    if data_len == 0:
        raise FormatError("Data chunk is empty")

    payload = cur.take(data_len, "sample data")
    n_samples = data_len // BYTES_PER_SAMPLE
    if n_samples == 0:
        raise FormatError(f"Data chunk of {data_len} byte holds no complete sample")

    try:
        raw = np.frombuffer(payload, dtype="<u2", count=n_samples)
        samples = to_unsigned(raw)
    except MemoryError as exc:
        raise ResourceError(f"Cannot allocate {n_samples} samples") from exc

    samples.flags.writeable = False
    return fmt, samples


def decode_wav_bytes(data: Buffer) -> np.ndarray:
    """Return only the sample stream of ``read_wav_bytes``."""
    return read_wav_bytes(data)[1]


def load_wav(path: str) -> np.ndarray:
    """
    Read a WAV file from disk and decode it with ``decode_wav_bytes``.

    The file handle is closed before decoding starts, whether or not the
    read succeeded. I/O failures surface as ResourceError with the original
    OSError as ``__cause__``.
    """
    try:
        with open(path, "rb") as f:
            data = f.read()
    except FileNotFoundError as exc:
        raise ResourceError(f"Nonexistent file: {path}") from exc
    except MemoryError as exc:
        raise ResourceError(f"Cannot allocate buffer for {path}") from exc
    except OSError as exc:
        raise ResourceError(f"Cannot read {path}: {exc.strerror or exc}") from exc

    return decode_wav_bytes(data)


def encode_wav_bytes(samples: np.ndarray, sample_rate: int = 44100) -> bytes:
    """
    Build a mono 16-bit PCM container from signed int16 samples.

    This writes the one profile ``read_wav_bytes`` accepts, with the
    minimal 16-byte format record and no extra chunks.
    """
    pcm = np.asarray(samples, dtype=np.int16).reshape(-1)
    if pcm.size == 0:
        raise ValueError("encode_wav_bytes needs at least one sample")

    payload = pcm.astype("<i2", copy=False).tobytes()
    record = FMT_RECORD.pack(
        WAVE_FORMAT_PCM,
        SUPPORTED_CHANNELS,
        int(sample_rate),
        int(sample_rate) * SUPPORTED_BLOCK_ALIGN,
        SUPPORTED_BLOCK_ALIGN,
        SUPPORTED_BITS,
    )

    body = bytearray()
    body += WAVE_ID
    body += CHUNK_HEADER.pack(FMT_TAG, len(record))
    body += record
    body += CHUNK_HEADER.pack(DATA_TAG, len(payload))
    body += payload

    return CHUNK_HEADER.pack(RIFF_TAG, len(body)) + bytes(body)
