"""Module grid helpers — fill matrix to array, array to text, array to raster."""

from __future__ import annotations

from collections.abc import Iterable

import numpy as np
from numpy.typing import NDArray
from PIL import Image

from qrsvg.engine.sampler import FillMatrix, TilePosition


def fill_matrix_to_grid(steps: int, fill_matrix: Iterable[TilePosition]) -> NDArray[np.int8]:
    """Rasterize filled module positions onto a steps×steps grid.

    Returns:
        Grid array indexed ``[y, x]`` where 1 = filled, 0 = empty.
    """
    grid = np.zeros((steps, steps), dtype=np.int8)
    for x, y in fill_matrix:
        grid[y, x] = 1
    return grid


def grid_to_fill_matrix(grid: NDArray[np.int8]) -> FillMatrix:
    """Inverse of ``fill_matrix_to_grid``, in row-major order."""
    rows, cols = np.nonzero(grid)
    return [TilePosition(int(x), int(y)) for y, x in zip(rows, cols)]


def grid_to_text(
    grid: NDArray[np.int8],
    filled: str = "#",
    empty: str = ".",
) -> str:
    """Convert a grid to a text representation."""
    rows = []
    for row in grid:
        rows.append("".join(filled if cell else empty for cell in row))
    return "\n".join(rows)


def grid_fill_percentage(grid: NDArray[np.int8]) -> float:
    """Filled modules as a percentage of the whole grid (0 for an empty grid)."""
    if grid.size == 0:
        return 0.0
    return float(np.count_nonzero(grid)) * 100 / grid.size


def grid_to_image(
    grid: NDArray[np.int8],
    module_px: int,
    quiet_zone: int = 0,
) -> Image.Image:
    """Render a module grid as an 8-bit gray image (filled = black).

    ``quiet_zone`` adds that many white modules on every side.
    """
    padded = np.pad(grid, quiet_zone, mode="constant", constant_values=0)
    pixels = np.where(padded > 0, 0, 255).astype(np.uint8)
    scaled = np.kron(pixels, np.ones((module_px, module_px), dtype=np.uint8))
    return Image.fromarray(scaled)
