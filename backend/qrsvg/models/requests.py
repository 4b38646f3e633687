"""API request models."""

from __future__ import annotations

from pydantic import BaseModel, Field, field_validator

from qrsvg.engine.resolver import validate_steps


class DetectRequest(BaseModel):
    image: str = Field(..., description="Base64-encoded raster image (PNG, JPEG, GIF, WEBP, ...)")
    threshold: int | None = Field(
        default=None, ge=0, le=255, description="Luminance cutoff; server default if omitted"
    )


class ConvertRequest(DetectRequest):
    steps: int | None = Field(
        default=None,
        description="Modules per side (21-177, 17 + 4*version); used when detection is off or fails",
    )
    detect: bool = Field(default=True, description="Infer the module count from the image")
    trim: bool | None = Field(
        default=None, description="Autocrop near-white margins when sampling a configured grid"
    )
    preview: bool = Field(default=False, description="Include an ASCII rendering of the grid")

    @field_validator("steps")
    @classmethod
    def _valid_steps(cls, v: int | None) -> int | None:
        return v if v is None else validate_steps(v)
