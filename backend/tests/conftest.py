"""Shared test fixtures — synthetic QR-like rasters built in memory."""

from __future__ import annotations

import base64
import io

import numpy as np
import pytest
from numpy.typing import NDArray
from PIL import Image

from qrsvg.raster.pillow import PillowRaster
from qrsvg.utils.grid import grid_to_image

# All valid module counts: versions 1-40.
VALID_STEPS = list(range(21, 178, 4))


MODULE_PX = 12


def finder_marker() -> NDArray[np.int8]:
    """7x7 finder: black ring, white ring, 3x3 black core."""
    marker = np.ones((7, 7), dtype=np.int8)
    marker[1:6, 1:6] = 0
    marker[2:5, 2:5] = 1
    return marker


def make_qr_modules(steps: int, seed: int = 0) -> NDArray[np.int8]:
    """Module grid with three finders, separators, timing lines and random data.

    No alignment patterns or format bits: only what the detector looks at is
    laid out like a real code.
    """
    rng = np.random.default_rng(seed)
    grid = rng.integers(0, 2, size=(steps, steps)).astype(np.int8)

    for oy, ox in ((0, 0), (0, steps - 7), (steps - 7, 0)):
        # White separator around the marker, clipped at the grid edge.
        grid[max(oy - 1, 0) : min(oy + 8, steps), max(ox - 1, 0) : min(ox + 8, steps)] = 0
        grid[oy : oy + 7, ox : ox + 7] = finder_marker()

    for i in range(8, steps - 8):
        grid[6, i] = grid[i, 6] = 1 if i % 2 == 0 else 0
    return grid


def checkerboard(steps: int) -> NDArray[np.int8]:
    yy, xx = np.indices((steps, steps))
    return ((xx + yy) % 2 == 0).astype(np.int8)


def make_qr_image(
    steps: int,
    module_px: int = MODULE_PX,
    quiet_zone: int = 0,
    seed: int = 0,
) -> tuple[Image.Image, NDArray[np.int8]]:
    grid = make_qr_modules(steps, seed)
    return grid_to_image(grid, module_px, quiet_zone), grid


def png_base64(image: Image.Image) -> str:
    buf = io.BytesIO()
    image.save(buf, format="PNG")
    return base64.b64encode(buf.getvalue()).decode("ascii")


@pytest.fixture
def qr21() -> tuple[Image.Image, NDArray[np.int8]]:
    return make_qr_image(21)


@pytest.fixture
def qr21_raster(qr21) -> PillowRaster:
    return PillowRaster(qr21[0])


@pytest.fixture
def blank_raster() -> PillowRaster:
    return PillowRaster(Image.new("L", (252, 252), 255))


def flat_marker_strip() -> Image.Image:
    """40x5 strip: a 7px black run on the top row, white elsewhere.

    The marker edge is found at column 7, which puts the timing row at
    y = 7, below the strip.
    """
    pixels = np.full((5, 40), 255, dtype=np.uint8)
    pixels[0, :7] = 0
    return Image.fromarray(pixels)
