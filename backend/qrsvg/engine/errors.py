"""Error taxonomy for the conversion engine.

Detection failures are ordinary outcomes and travel as values
(``DetectionFailure``). Everything else is an exception raised at the
seam where it is detected.
"""

from __future__ import annotations

import enum
from dataclasses import dataclass


class FailureReason(str, enum.Enum):
    EMPTY_IMAGE = "empty_image"
    NO_MARKER = "no_marker"
    TIMING_OUT_OF_BOUNDS = "timing_out_of_bounds"
    CROSS_CHECK_MISMATCH = "cross_check_mismatch"
    INVALID_SPACING = "invalid_spacing"
    DETECTION_DISABLED = "detection_disabled"


@dataclass(frozen=True)
class DetectionFailure:
    """Module count could not be determined from the pixels."""

    reason: FailureReason
    detail: str = ""

    def __str__(self) -> str:
        if self.detail:
            return f"could not determine module count ({self.reason.value}): {self.detail}"
        return f"could not determine module count ({self.reason.value})"


class QrSvgError(Exception):
    """Base class for engine errors."""


class InvalidModuleCount(QrSvgError, ValueError):
    def __init__(self, steps: int, message: str = "") -> None:
        self.steps = steps
        super().__init__(message or f"Invalid module count: {steps}")


class ThresholdOutOfRange(QrSvgError, ValueError):
    def __init__(self, threshold: int) -> None:
        self.threshold = threshold
        super().__init__(f"Threshold must be between 0 and 255, got {threshold}")


class RasterAccessFailure(QrSvgError):
    """The raster backend could not read dimensions or pixels."""


class ModuleCountUnavailable(QrSvgError):
    """Detection failed and no module count was configured to fall back on."""

    def __init__(self, failure: DetectionFailure) -> None:
        self.failure = failure
        super().__init__(str(failure))
