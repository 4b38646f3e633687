"""Row scanners for finder-marker and timing-line detection.

Both scanners are pure functions over a sequence of luminance values taken
from a thresholded raster (0 = black, 255 = white). The resolver decides
which rows and columns to feed them.
"""

from __future__ import annotations

import math
from collections.abc import Sequence
from dataclasses import dataclass

# Largest QR grid: version 40 = 177 modules per side.
MAX_MODULES = 177
# Smallest QR grid: version 1 = 21 modules per side.
MIN_MODULES = 21
# Finder marker side, in modules.
MARKER_MODULES = 7

# The smallest code has 21 modules; dividing by 20 leaves room for
# antialiased edges when bounding the longest possible module.
_MAX_TILE_DIVISOR = 20

# Mid-gray: anything above is white, anything below has not "started".
_MID_LUMINANCE = 127
_BLACK = 0
_WHITE = 255


@dataclass(frozen=True)
class BorderScan:
    found: bool
    column: int


def minimal_tile_length(span: int) -> int:
    """Shortest plausible module length in pixels (version 40 filling ``span``)."""
    return span // MAX_MODULES


def max_marker_length(span: int) -> int:
    """Last column worth probing for the right edge of the top-left marker."""
    return math.ceil(span / _MAX_TILE_DIVISOR) * MARKER_MODULES + 1


def seek_border_end(row: Sequence[float], minimal_tile: int) -> BorderScan:
    """Find the right edge of the top-left finder marker in one pixel row.

    Counts black pixels and, once the first black pixel has been seen, white
    pixels. The first white pixel at or beyond ``minimal_tile * 7`` ends the
    scan: the edge is found there when white pixels have not outnumbered
    black ones.
    """
    started = False
    black = 0
    white = 0
    x = 0

    for x, value in enumerate(row):
        if value == _BLACK:
            started = True
            black += 1
        elif value > _MID_LUMINANCE and started:
            white += 1
            if x >= minimal_tile * MARKER_MODULES:
                return BorderScan(found=white <= black, column=x)

    return BorderScan(found=False, column=x)


def timing_row(y: int, border_column: int) -> int:
    """Row that crosses the timing line, near the far edge of the marker."""
    return abs(y - math.ceil(border_column - border_column / (MARKER_MODULES * 2)))


def count_timing_interruptions(samples: Sequence[float]) -> int:
    """Count value changes along the timing line.

    Leading samples darker than mid-gray belong to the marker border and are
    skipped; the first lighter sample is the reference. A trailing pure white
    sample means an untrimmed quiet zone, which is not a module.
    """
    interruptions = 0
    last: float | None = None

    for value in samples:
        if last is None:
            if value >= _MID_LUMINANCE:
                last = value
            continue
        if value != last:
            interruptions += 1
        last = value

    if last == _WHITE:
        interruptions -= 1
    return interruptions
