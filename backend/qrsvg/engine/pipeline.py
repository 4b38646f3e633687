"""Conversion pipeline — module count, grid fit, sampling, SVG emission."""

from __future__ import annotations

import logging
import time
from collections.abc import Callable
from typing import TYPE_CHECKING

from qrsvg.engine.config import ConversionConfig
from qrsvg.engine.context import ConversionContext
from qrsvg.engine.errors import (
    DetectionFailure,
    FailureReason,
    InvalidModuleCount,
    ModuleCountUnavailable,
)
from qrsvg.engine.resolver import scan_module_count, validate_steps
from qrsvg.engine.sampler import build_tile_grid, fit_raster_to_grid, probe_tiles, sample_tiles
from qrsvg.svg.serializer import render_vector

if TYPE_CHECKING:
    from qrsvg.raster.base import RasterAccess

logger = logging.getLogger(__name__)


def resolve_steps(ctx: ConversionContext) -> None:
    """Detect the module count, falling back to the configured one."""
    cfg = ctx.config

    if cfg.detect_steps:
        working = ctx.raster.threshold_copy(cfg.threshold)
        result = scan_module_count(working)
        if not isinstance(result, DetectionFailure):
            try:
                ctx.steps = validate_steps(result)
            except InvalidModuleCount as e:
                result = DetectionFailure(FailureReason.INVALID_SPACING, str(e))
            else:
                ctx.detected = True
                # The working copy is already trimmed to the code's edges.
                ctx.sampling_raster = working
                return

        ctx.detection_failure = result
        if cfg.steps is None:
            raise ModuleCountUnavailable(result)
        logger.warning("%s; falling back to %d configured steps", result, cfg.steps)
    elif cfg.steps is None:
        raise ModuleCountUnavailable(
            DetectionFailure(FailureReason.DETECTION_DISABLED, "no steps configured")
        )

    ctx.steps = cfg.steps
    if cfg.trim_border:
        ctx.raster.trim_border()
    ctx.sampling_raster = ctx.raster


def fit_grid(ctx: ConversionContext) -> None:
    ctx.pixels_per_tile, ctx.rescaled = fit_raster_to_grid(
        ctx.sampling_raster, ctx.steps, ctx.config.min_pixels_per_tile
    )


def sample(ctx: ConversionContext) -> None:
    ctx.tiles = build_tile_grid(ctx.steps, ctx.pixels_per_tile)
    sample_tiles(ctx.sampling_raster, ctx.tiles, ctx.config.workers)
    ctx.fill_matrix = probe_tiles(ctx.tiles, ctx.config.threshold)
    # Descriptors are only needed while sampling.
    ctx.tiles = []


def emit(ctx: ConversionContext) -> None:
    ctx.svg = render_vector(ctx.steps, ctx.fill_matrix)


_STAGES: list[tuple[str, Callable[[ConversionContext], None]]] = [
    ("resolve", resolve_steps),
    ("fit", fit_grid),
    ("sample", sample),
    ("emit", emit),
]


class ConversionPipeline:
    """Runs the conversion stages in order on one context.

    Stages do not catch errors: a raster failure or an unavailable module
    count ends the run and propagates to the caller.
    """

    def __init__(self, config: ConversionConfig | None = None) -> None:
        self.config = config or ConversionConfig()

    def run(self, raster: RasterAccess) -> ConversionContext:
        ctx = ConversionContext(raster=raster, config=self.config)
        start = time.perf_counter()

        for name, stage in _STAGES:
            t0 = time.perf_counter()
            stage(ctx)
            elapsed = (time.perf_counter() - t0) * 1000
            ctx.timings_ms[name] = round(elapsed, 1)
            ctx.completed_stages.append(name)
            logger.debug("  %s completed in %.1fms", name, elapsed)

        total = (time.perf_counter() - start) * 1000
        logger.info(
            "Conversion complete: %d steps (%s), %dpx/tile, %d filled tiles in %.0fms",
            ctx.steps,
            "detected" if ctx.detected else "configured",
            ctx.pixels_per_tile,
            ctx.filled_tiles,
            total,
        )
        return ctx


def create_pipeline(config: ConversionConfig | None = None) -> ConversionPipeline:
    """Factory function for creating a pipeline instance."""
    return ConversionPipeline(config=config)
