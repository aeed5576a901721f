"""
wavenib.render

Human-readable views of quantized slices: a console bar graph, the nibble
row, and a PNG contact sheet. All three take levels already produced by
``wavenib.levels.to_nibble`` and never requantize.
"""

from __future__ import annotations

from typing import Sequence

import numpy as np
from PIL import Image

from .levels import NIBBLE_LEVELS

FILLED_CELL = "\x1b[37;47m   \x1b[0m"
EMPTY_CELL = "   "

BAR_RGB = (255, 255, 255)
BACKGROUND_RGB = (0, 0, 0)


def _levels(levels: Sequence[int]) -> np.ndarray:
    arr = np.asarray(levels, dtype=np.int64).reshape(-1)
    if arr.size and (arr.min() < 0 or arr.max() >= NIBBLE_LEVELS):
        raise ValueError(f"Levels must lie in [0, {NIBBLE_LEVELS - 1}]")
    return arr


def format_graph(levels: Sequence[int]) -> str:
    """
    Draw one slice as 16 text rows, top row first.

    A cell in row y is filled when the level is greater than y, so level 0
    draws nothing and level 15 fills every row except the top one.
    """
    arr = _levels(levels)
    rows = []
    for y in range(NIBBLE_LEVELS - 1, -1, -1):
        rows.append("".join(FILLED_CELL if v > y else EMPTY_CELL for v in arr))
    return "\n".join(rows) + "\n"


def format_levels(levels: Sequence[int]) -> str:
    """Print levels as two-column cells separated by a space."""
    arr = _levels(levels)
    return " ".join(f"{int(v):<2d}" for v in arr) + "\n"


def render_slices_png(slices: np.ndarray, path: str, *, cell: int = 8, gap: int = 1) -> None:
    """
    Save every slice as a bar graph, stacked top to bottom, to an image file.

    Parameters
    ----------
    slices : np.ndarray
        Levels with shape (slice_count, resolution).
    path : str
        Output path; the format follows the extension (PNG recommended).
    cell : int, optional
        Pixel size of one level step and one sample column.
    gap : int, optional
        Empty cells between consecutive slices.
    """
    grid = np.asarray(slices)
    if grid.ndim != 2 or grid.size == 0:
        raise ValueError("render_slices_png expects a non-empty (slice_count, resolution) array")
    _levels(grid)
    cell = max(1, int(cell))
    gap = max(0, int(gap))

    count, resolution = grid.shape
    panel_h = NIBBLE_LEVELS * cell
    height = count * panel_h + (count - 1) * gap * cell
    width = resolution * cell

    canvas = np.empty((height, width, 3), dtype=np.uint8)
    canvas[:, :] = BACKGROUND_RGB

    for row, levels in enumerate(grid):
        top = row * (panel_h + gap * cell)
        bottom = top + panel_h
        for col, level in enumerate(levels):
            bar = int(level) * cell
            if bar == 0:
                continue
            x0 = col * cell
            canvas[bottom - bar:bottom, x0:x0 + cell] = BAR_RGB

    Image.fromarray(canvas).save(path)
