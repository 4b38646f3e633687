"""POST /api/detect and POST /api/convert — raster QR code to SVG."""

from __future__ import annotations

import base64
import binascii
import logging
import time

from fastapi import APIRouter, Depends, HTTPException
from fastapi.concurrency import run_in_threadpool

from qrsvg.config import Settings
from qrsvg.dependencies import get_settings
from qrsvg.engine.config import ConversionConfig
from qrsvg.engine.errors import DetectionFailure, QrSvgError
from qrsvg.engine.pipeline import create_pipeline
from qrsvg.engine.resolver import qr_version, resolve_module_count
from qrsvg.models.requests import ConvertRequest, DetectRequest
from qrsvg.models.responses import ConvertResponse, DetectResponse
from qrsvg.raster.pillow import PillowRaster
from qrsvg.utils.grid import fill_matrix_to_grid, grid_fill_percentage, grid_to_text

logger = logging.getLogger(__name__)

router = APIRouter()


def _load_raster(encoded: str, settings: Settings) -> PillowRaster:
    """Decode the base64 payload into a raster, or fail the request with 4xx."""
    try:
        data = base64.b64decode(encoded, validate=True)
    except (binascii.Error, ValueError) as e:
        raise HTTPException(status_code=422, detail=f"Image is not valid base64: {e}") from e
    if len(data) > settings.max_image_bytes:
        raise HTTPException(
            status_code=413,
            detail=f"Image is {len(data)} bytes, limit is {settings.max_image_bytes}",
        )
    try:
        return PillowRaster.open(data)
    except QrSvgError as e:
        raise HTTPException(status_code=422, detail=str(e)) from e


@router.post("/detect", response_model=DetectResponse)
async def detect(req: DetectRequest, settings: Settings = Depends(get_settings)) -> DetectResponse:
    raster = await run_in_threadpool(_load_raster, req.image, settings)
    threshold = req.threshold if req.threshold is not None else settings.default_threshold

    try:
        result = await run_in_threadpool(resolve_module_count, raster, threshold)
    except QrSvgError as e:
        raise HTTPException(status_code=422, detail=str(e)) from e

    if isinstance(result, DetectionFailure):
        logger.info("Detection failed: %s", result)
        return DetectResponse(error=str(result))
    return DetectResponse(steps=result, version=qr_version(result))


@router.post("/convert", response_model=ConvertResponse)
async def convert(req: ConvertRequest, settings: Settings = Depends(get_settings)) -> ConvertResponse:
    start = time.perf_counter()
    raster = await run_in_threadpool(_load_raster, req.image, settings)

    try:
        config = ConversionConfig.from_settings(
            settings,
            threshold=req.threshold,
            steps=req.steps,
            detect_steps=req.detect,
            trim_border=req.trim,
        )
        ctx = await run_in_threadpool(create_pipeline(config).run, raster)
    except QrSvgError as e:
        raise HTTPException(status_code=422, detail=str(e)) from e

    grid = fill_matrix_to_grid(ctx.steps, ctx.fill_matrix)
    preview = grid_to_text(grid) if req.preview else ""

    elapsed = (time.perf_counter() - start) * 1000
    return ConvertResponse(
        svg=ctx.svg,
        steps=ctx.steps,
        version=ctx.version,
        pixels_per_tile=ctx.pixels_per_tile,
        rescaled=ctx.rescaled,
        detected=ctx.detected,
        filled_tiles=ctx.filled_tiles,
        fill_percentage=round(grid_fill_percentage(grid), 2),
        detection_error=str(ctx.detection_failure) if ctx.detection_failure else "",
        preview=preview,
        processing_time_ms=round(elapsed, 1),
        timings_ms=ctx.timings_ms,
    )
