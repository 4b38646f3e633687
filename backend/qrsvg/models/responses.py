"""API response models."""

from __future__ import annotations

from pydantic import BaseModel, Field

from qrsvg import __version__


class HealthResponse(BaseModel):
    status: str = "ok"
    version: str = __version__


class DetectResponse(BaseModel):
    steps: int | None = None
    version: int | None = None
    error: str = ""


class ConvertResponse(BaseModel):
    svg: str
    steps: int
    version: int | None = None
    pixels_per_tile: int
    rescaled: bool = False
    detected: bool = False
    filled_tiles: int = 0
    # Share of modules filled, in percent
    fill_percentage: float = 0.0
    detection_error: str = ""
    preview: str = ""
    processing_time_ms: float = 0.0
    timings_ms: dict[str, float] = Field(default_factory=dict)
