"""Color samples and their reduction to a single luminance value.

Every backend reports pixels as one of three sample types. Thresholding
only ever looks at the arithmetic mean of the RGB channels, so gray is
taken as-is and CMYK is converted to RGB first:

    channel = 255 * (1 - C/100) * (1 - K/100)
"""

from __future__ import annotations

import enum
from dataclasses import dataclass

import numpy as np
from numpy.typing import NDArray

# 8-bit channel ceiling; luminance is always reported in [0, _MAX_CHANNEL].
_MAX_CHANNEL = 255.0

# CMYK channels are percentages.
_CMYK_SCALE = 100.0

# Luminance is reported with one decimal.
_LUMINANCE_DECIMALS = 1


class ColorModel(str, enum.Enum):
    GRAY = "gray"
    RGB = "rgb"
    CMYK = "cmyk"


@dataclass(frozen=True)
class GraySample:
    value: float


@dataclass(frozen=True)
class RgbSample:
    r: float
    g: float
    b: float


@dataclass(frozen=True)
class CmykSample:
    """CMYK sample with channels in percent (0-100)."""

    c: float
    m: float
    y: float
    k: float

    def to_rgb(self) -> RgbSample:
        ink = 1 - self.k / _CMYK_SCALE
        return RgbSample(
            r=_MAX_CHANNEL * (1 - self.c / _CMYK_SCALE) * ink,
            g=_MAX_CHANNEL * (1 - self.m / _CMYK_SCALE) * ink,
            b=_MAX_CHANNEL * (1 - self.y / _CMYK_SCALE) * ink,
        )


ColorSample = GraySample | RgbSample | CmykSample


def normalize_luminance(sample: ColorSample) -> float:
    """Reduce a color sample to a luminance-like scalar in [0, 255]."""
    if isinstance(sample, GraySample):
        value = float(sample.value)
    elif isinstance(sample, RgbSample):
        value = (sample.r + sample.g + sample.b) / 3
    elif isinstance(sample, CmykSample):
        rgb = sample.to_rgb()
        value = (rgb.r + rgb.g + rgb.b) / 3
    else:
        raise TypeError(f"Unsupported color sample: {type(sample).__name__}")
    return round(min(max(value, 0.0), _MAX_CHANNEL), _LUMINANCE_DECIMALS)


def luminance_array(channels: NDArray, model: ColorModel) -> NDArray[np.float64]:
    """Vectorized ``normalize_luminance`` over an HxW(xC) pixel array.

    CMYK arrays are expected in 8-bit storage (0-255 per ink) as Pillow
    keeps them; they are rescaled to percent before conversion.
    """
    data = np.asarray(channels, dtype=np.float64)

    if model is ColorModel.GRAY:
        lum = data if data.ndim == 2 else data[..., 0]
    elif model is ColorModel.RGB:
        lum = data[..., :3].mean(axis=-1)
    elif model is ColorModel.CMYK:
        pct = data[..., :4] / _MAX_CHANNEL * _CMYK_SCALE
        ink = 1 - pct[..., 3:4] / _CMYK_SCALE
        rgb = _MAX_CHANNEL * (1 - pct[..., :3] / _CMYK_SCALE) * ink
        lum = rgb.mean(axis=-1)
    else:
        raise TypeError(f"Unsupported color model: {model!r}")

    return np.round(np.clip(lum, 0.0, _MAX_CHANNEL), _LUMINANCE_DECIMALS)
