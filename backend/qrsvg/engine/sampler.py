"""Tile grid sampling — one center pixel per module decides fill/blank."""

from __future__ import annotations

import logging
from concurrent.futures import ThreadPoolExecutor
from dataclasses import dataclass
from typing import TYPE_CHECKING, NamedTuple

from qrsvg.engine.color import ColorSample, normalize_luminance
from qrsvg.engine.resolver import validate_steps, validate_threshold

if TYPE_CHECKING:
    from qrsvg.raster.base import RasterAccess

logger = logging.getLogger(__name__)

# Below 10px per module the center pixel sits too close to antialiased
# module edges; smaller rasters are upscaled first.
MIN_PIXELS_PER_TILE = 10


class TilePosition(NamedTuple):
    """Module coordinates on the output grid."""

    x: int
    y: int


FillMatrix = list[TilePosition]


@dataclass
class TileDescriptor:
    render_at: TilePosition
    center: tuple[int, int]
    sample: ColorSample | None = None


def compute_pixels_per_tile(width: int, steps: int, minimum: int = MIN_PIXELS_PER_TILE) -> int:
    """Whole pixels per module: ``width / steps`` rounded half-to-even, floored at ``minimum``."""
    # round() on a float is half-to-even.
    return max(round(width / steps), minimum)


def fit_raster_to_grid(
    raster: RasterAccess,
    steps: int,
    minimum: int = MIN_PIXELS_PER_TILE,
) -> tuple[int, bool]:
    """Make the raster an exact ``steps * ppt`` square.

    Returns ``(pixels_per_tile, rescaled)``.
    """
    width, height = raster.dimensions()
    ppt = compute_pixels_per_tile(width, steps, minimum)
    if ppt != width / steps or height != width:
        side = steps * ppt
        raster.rescale(side, side)
        return ppt, True
    return ppt, False


def build_tile_grid(steps: int, pixels_per_tile: int) -> list[TileDescriptor]:
    """Row-major descriptors with render position and sampled center pixel."""
    half = pixels_per_tile / 2
    tiles: list[TileDescriptor] = []
    for y in range(steps):
        for x in range(steps):
            tiles.append(
                TileDescriptor(
                    render_at=TilePosition(x, y),
                    center=(int(x * pixels_per_tile + half), int(y * pixels_per_tile + half)),
                )
            )
    return tiles


def _sample_row(raster: RasterAccess, row: list[TileDescriptor]) -> None:
    for tile in row:
        tile.sample = raster.pixel_color(*tile.center)


def sample_tiles(raster: RasterAccess, tiles: list[TileDescriptor], workers: int = 1) -> None:
    """Read each tile's center color into ``tile.sample``.

    With ``workers > 1`` rows are read on a thread pool; each thread only
    writes the descriptors of its own row, so the grid order is unchanged.
    """
    if workers <= 1:
        _sample_row(raster, tiles)
        return

    if not tiles:
        return
    steps = tiles[-1].render_at.x + 1
    rows = [tiles[i : i + steps] for i in range(0, len(tiles), steps)]
    with ThreadPoolExecutor(max_workers=workers) as pool:
        # list() re-raises the first worker exception here.
        list(pool.map(lambda row: _sample_row(raster, row), rows))


def probe_tiles(tiles: list[TileDescriptor], threshold: int) -> FillMatrix:
    """Positions of sampled tiles at or below ``threshold`` luminance, in grid order."""
    filled: FillMatrix = []
    for tile in tiles:
        if tile.sample is None:
            raise ValueError(f"Tile {tile.render_at} has not been sampled")
        if normalize_luminance(tile.sample) <= threshold:
            filled.append(tile.render_at)
    return filled


def build_fill_matrix(
    raster: RasterAccess,
    steps: int,
    threshold: int,
    workers: int = 1,
    min_pixels_per_tile: int = MIN_PIXELS_PER_TILE,
) -> FillMatrix:
    """Fit the raster to the module grid, sample every tile center, threshold."""
    validate_steps(steps)
    validate_threshold(threshold)

    ppt, rescaled = fit_raster_to_grid(raster, steps, min_pixels_per_tile)
    tiles = build_tile_grid(steps, ppt)
    sample_tiles(raster, tiles, workers)
    filled = probe_tiles(tiles, threshold)

    logger.debug(
        "Sampled %d tiles at %dpx/tile%s: %d filled",
        len(tiles),
        ppt,
        " (rescaled)" if rescaled else "",
        len(filled),
    )
    return filled
