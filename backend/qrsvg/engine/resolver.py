"""Module count ("steps") resolution from raster pixels.

Finds the top-left finder marker on a thresholded copy of the image, counts
the transitions of the timing line that starts at its edge, and checks the
result against the marker's own module size.
"""

from __future__ import annotations

import logging
import math
from typing import TYPE_CHECKING

from qrsvg.engine.color import normalize_luminance
from qrsvg.engine.errors import (
    DetectionFailure,
    FailureReason,
    InvalidModuleCount,
    ThresholdOutOfRange,
)
from qrsvg.engine.scanner import (
    MARKER_MODULES,
    MAX_MODULES,
    MIN_MODULES,
    count_timing_interruptions,
    max_marker_length,
    minimal_tile_length,
    seek_border_end,
    timing_row,
)

if TYPE_CHECKING:
    from qrsvg.raster.base import RasterAccess

logger = logging.getLogger(__name__)

# Modules of the timing row covered by the two corner markers it joins.
_MARKER_SPAN_MODULES = 2 * MARKER_MODULES

# Versions grow by 4 modules per side from the 17-module base.
_VERSION_BASE = 17
_VERSION_STEP = 4


def _round_half_up(value: float) -> int:
    return int(math.floor(value + 0.5))


def validate_threshold(threshold: int) -> int:
    if not 0 <= threshold <= 255:
        raise ThresholdOutOfRange(threshold)
    return threshold


def validate_steps(steps: int) -> int:
    """Reject module counts that cannot belong to a QR code."""
    if not MIN_MODULES <= steps <= MAX_MODULES:
        raise InvalidModuleCount(
            steps, f"Steps must be between {MIN_MODULES} and {MAX_MODULES}, got {steps}"
        )
    if (steps - _VERSION_BASE) % _VERSION_STEP != 0:
        raise InvalidModuleCount(
            steps, f"Steps must be 17 + 4*version, got {steps}"
        )
    return steps


def qr_version(steps: int) -> int | None:
    """QR version for a module count, or None when it is not one."""
    version, rest = divmod(steps - _VERSION_BASE, _VERSION_STEP)
    if rest != 0 or version < 1:
        return None
    return version


def _probe_row(raster: RasterAccess, y: int, stop: int) -> list[float]:
    return [normalize_luminance(raster.pixel_color(x, y)) for x in range(stop)]


def scan_module_count(binary: RasterAccess) -> int | DetectionFailure:
    """Resolve the module count on an already thresholded, trimmed raster."""
    width, height = binary.dimensions()
    span = min(width, height)
    if span == 0:
        return DetectionFailure(FailureReason.EMPTY_IMAGE, f"{width}x{height}")

    minimal_tile = minimal_tile_length(span)
    probe_stop = min(max_marker_length(span) + 1, width)

    border = None
    y = 0
    for y in range(span):
        scan = seek_border_end(_probe_row(binary, y, probe_stop), minimal_tile)
        if scan.found:
            border = scan.column
            break

    if not border:
        return DetectionFailure(FailureReason.NO_MARKER, f"no marker edge within {span} rows")
    logger.debug("Marker edge at column %d on row %d", border, y)

    row = timing_row(y, border)
    if row >= height:
        return DetectionFailure(
            FailureReason.TIMING_OUT_OF_BOUNDS, f"timing row {row} outside height {height}"
        )

    samples = [normalize_luminance(binary.pixel_color(x, row)) for x in range(border, span)]
    interruptions = count_timing_interruptions(samples)
    candidate = interruptions + _MARKER_SPAN_MODULES
    logger.debug("Timing row %d: %d interruptions -> %d modules", row, interruptions, candidate)

    # Module size measured two independent ways must agree.
    by_grid = _round_half_up(span / candidate) if candidate > 0 else -1
    by_marker = _round_half_up(border / MARKER_MODULES)
    if by_grid != by_marker:
        return DetectionFailure(
            FailureReason.CROSS_CHECK_MISMATCH,
            f"module size {by_grid}px from grid vs {by_marker}px from marker",
        )

    return min(max(candidate, MIN_MODULES), MAX_MODULES)


def resolve_module_count(raster: RasterAccess, threshold: int) -> int | DetectionFailure:
    """Infer the module count of the QR code held by ``raster``.

    Works on a thresholded copy; ``raster`` itself is left untouched.
    """
    validate_threshold(threshold)
    return scan_module_count(raster.threshold_copy(threshold))
