"""ConversionContext — the mutable state of one image-to-SVG run.

Created per request, threaded through the pipeline stages and dropped
afterwards. Nothing here outlives the run.
"""

from __future__ import annotations

from dataclasses import dataclass, field
from typing import TYPE_CHECKING

from qrsvg.engine.config import ConversionConfig
from qrsvg.engine.errors import DetectionFailure
from qrsvg.engine.resolver import qr_version
from qrsvg.engine.sampler import FillMatrix, TileDescriptor

if TYPE_CHECKING:
    from qrsvg.raster.base import RasterAccess


@dataclass
class ConversionContext:
    raster: RasterAccess
    config: ConversionConfig = field(default_factory=ConversionConfig)

    # --- Module count ---
    steps: int | None = None
    # True when steps came from the pixels rather than the configuration
    detected: bool = False
    detection_failure: DetectionFailure | None = None
    # Raster the tiles are read from: the thresholded working copy after a
    # successful detection, otherwise the source raster
    sampling_raster: RasterAccess | None = None

    # --- Sampling ---
    pixels_per_tile: int | None = None
    rescaled: bool = False
    tiles: list[TileDescriptor] = field(default_factory=list)
    fill_matrix: FillMatrix = field(default_factory=list)

    # --- Output ---
    svg: str = ""

    # --- Run metadata ---
    completed_stages: list[str] = field(default_factory=list)
    timings_ms: dict[str, float] = field(default_factory=dict)

    @property
    def version(self) -> int | None:
        return qr_version(self.steps) if self.steps is not None else None

    @property
    def filled_tiles(self) -> int:
        return len(self.fill_matrix)
