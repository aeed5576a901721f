"""
wavenib.slicer

Cut a sample stream into fixed-length 4-bit waveforms.

For slice i of slice_count, the window starts on the grid point
floor(n * i / slice_count) and spans samples_per_slice samples. Each of the
``resolution`` output positions j picks the sample at offset
floor(samples_per_slice * j / resolution) inside the window (nearest sample,
no interpolation), and that sample is reduced to its top four bits.

With extend_edge the last window is moved so that it ends on the last
sample of the stream; every other window stays on the grid.

The whole plan is validated before any output is produced, so a bad
SliceSpec never yields a partial result.
"""

from __future__ import annotations

import dataclasses
from dataclasses import dataclass
from typing import Iterator, List, Optional

import numpy as np

from .errors import SliceSpecError
from .levels import to_nibble


def _check_count(name: str, value: object, *, optional: bool = False) -> None:
    if optional and value is None:
        return
    if isinstance(value, bool) or not isinstance(value, (int, np.integer)):
        raise SliceSpecError(f"{name} must be an integer, got {value!r}")
    if value < 1:
        raise SliceSpecError(f"{name} must be positive, got {value}")


@dataclass(frozen=True)
class SliceSpec:
    """
    Immutable slicing configuration.

    slice_count : number of slices to extract.
    resolution : number of output levels per slice.
    samples_per_slice : window length in samples; None means
        ``len(stream) // slice_count``, filled in by ``resolve``.
    extend_edge : end the last window exactly at the final sample.
    """

    slice_count: int = 16
    resolution: int = 16
    samples_per_slice: Optional[int] = None
    extend_edge: bool = False

    def __post_init__(self) -> None:
        _check_count("slice_count", self.slice_count)
        _check_count("resolution", self.resolution)
        _check_count("samples_per_slice", self.samples_per_slice, optional=True)
        if not isinstance(self.extend_edge, (bool, np.bool_)):
            raise SliceSpecError(f"extend_edge must be a boolean, got {self.extend_edge!r}")

    def resolve(self, n_samples: int) -> "SliceSpec":
        """
        Return a copy with samples_per_slice filled in and checked against
        a stream of ``n_samples`` samples.
        """
        if n_samples < 1:
            raise SliceSpecError("Cannot slice an empty sample stream")

        per_slice = n_samples // self.slice_count
        length = self.samples_per_slice
        if length is None:
            if per_slice == 0:
                raise SliceSpecError(
                    f"Stream of {n_samples} samples is shorter than {self.slice_count} slices"
                )
            length = per_slice

        if self.extend_edge:
            if length > n_samples:
                raise SliceSpecError(
                    f"Requested audio length {length} is longer than the file ({n_samples} samples)"
                )
        elif length > per_slice:
            raise SliceSpecError(
                f"Requested audio length {length} would be longer than a slice ({per_slice} samples)"
            )

        return dataclasses.replace(self, samples_per_slice=int(length))


@dataclass(frozen=True)
class Window:
    """A (start, length) view into a sample stream."""

    start: int
    length: int

    @property
    def stop(self) -> int:
        return self.start + self.length

    def view(self, stream: np.ndarray) -> np.ndarray:
        return stream[self.start:self.stop]


def plan_windows(n_samples: int, spec: SliceSpec) -> List[Window]:
    """
    Compute every slice window for a stream of ``n_samples`` samples.

    Raises SliceSpecError if ``spec`` does not fit the stream or if any
    window would run past the end of it.
    """
    spec = spec.resolve(n_samples)
    count = spec.slice_count
    length = int(spec.samples_per_slice)

    windows: List[Window] = []
    for i in range(count):
        start = n_samples * i // count
        if spec.extend_edge and i == count - 1:
            start = n_samples - length
        if start + length > n_samples:
            raise SliceSpecError(
                f"Slice {i} window [{start}, {start + length}) runs past the end of {n_samples} samples"
            )
        windows.append(Window(start, length))
    return windows


def sample_offsets(length: int, resolution: int) -> np.ndarray:
    """
    Nearest-sample offsets inside a window: floor(length * j / resolution).
    """
    return (np.arange(int(resolution), dtype=np.int64) * int(length)) // int(resolution)


def _as_stream(stream: np.ndarray) -> np.ndarray:
    arr = np.asarray(stream)
    if arr.ndim != 1:
        raise ValueError(f"Sample stream must be one-dimensional, got shape {arr.shape}")
    return arr


def iter_slices(stream: np.ndarray, spec: SliceSpec) -> Iterator[np.ndarray]:
    """
    Yield one uint8 array of ``resolution`` levels per slice, in order.

    The plan is validated before this returns, not on first iteration.
    """
    arr = _as_stream(stream)
    windows = plan_windows(arr.size, spec)
    offsets = sample_offsets(windows[0].length, spec.resolution)

    def _gen() -> Iterator[np.ndarray]:
        for win in windows:
            yield to_nibble(win.view(arr)[offsets])

    return _gen()


def slice_stream(stream: np.ndarray, spec: SliceSpec) -> np.ndarray:
    """
    Quantize every slice of ``stream``.

    Parameters
    ----------
    stream : np.ndarray
        Unsigned 16-bit amplitudes (see wavenib.wav).
    spec : SliceSpec
        Slicing configuration.

    Returns
    -------
    np.ndarray
        uint8 array of shape (slice_count, resolution), values in [0, 15].

    Example
    -------
        slices = slice_stream(load_wav("voice.wav"), SliceSpec(slice_count=4, resolution=32))
    """
    out = np.empty((spec.slice_count, spec.resolution), dtype=np.uint8)
    for row, levels in enumerate(iter_slices(stream, spec)):
        out[row] = levels
    return out
