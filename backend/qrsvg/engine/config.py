"""Conversion configuration — controls detection, sampling and fallbacks."""

from __future__ import annotations

from dataclasses import dataclass
from typing import TYPE_CHECKING

from qrsvg.engine.resolver import validate_steps, validate_threshold
from qrsvg.engine.sampler import MIN_PIXELS_PER_TILE

if TYPE_CHECKING:
    from qrsvg.config import Settings

DEFAULT_THRESHOLD = 127


@dataclass
class ConversionConfig:
    """Per-run settings. Validated on construction, never mutated mid-run."""

    # Luminance cutoff: pixels at or below it are filled modules.
    threshold: int = DEFAULT_THRESHOLD
    # Module count; used as-is when detection is off, as fallback otherwise.
    steps: int | None = None
    # Infer the module count from the finder marker and timing line.
    detect_steps: bool = True
    # Autocrop near-white margins before sampling a configured grid.
    trim_border: bool = False
    min_pixels_per_tile: int = MIN_PIXELS_PER_TILE
    # Threads used to sample tile centers (1 = sequential).
    workers: int = 1

    def __post_init__(self) -> None:
        validate_threshold(self.threshold)
        if self.steps is not None:
            validate_steps(self.steps)
        if self.min_pixels_per_tile < 1:
            raise ValueError(f"min_pixels_per_tile must be positive, got {self.min_pixels_per_tile}")
        if self.workers < 1:
            raise ValueError(f"workers must be at least 1, got {self.workers}")

    @classmethod
    def from_settings(cls, settings: Settings, **overrides: object) -> ConversionConfig:
        values: dict[str, object] = {
            "threshold": settings.default_threshold,
            "steps": settings.default_steps,
            "trim_border": settings.trim_image,
            "workers": settings.sampling_workers,
        }
        values.update({k: v for k, v in overrides.items() if v is not None})
        return cls(**values)  # type: ignore[arg-type]
