"""Pillow-backed RasterAccess.

Images are normalized on load to one of three modes so every pixel read
maps onto a ColorSample: ``L`` -> gray, ``RGB`` -> rgb, ``CMYK`` -> cmyk.
Anything with transparency is flattened onto the configured background.
"""

from __future__ import annotations

import io
import logging
from dataclasses import dataclass
from pathlib import Path
from typing import BinaryIO

import numpy as np
from numpy.typing import NDArray
from PIL import Image, UnidentifiedImageError

from qrsvg.engine.color import (
    CmykSample,
    ColorModel,
    ColorSample,
    GraySample,
    RgbSample,
    luminance_array,
)
from qrsvg.engine.errors import RasterAccessFailure, ThresholdOutOfRange

logger = logging.getLogger(__name__)

_MODEL_BY_MODE = {
    "L": ColorModel.GRAY,
    "RGB": ColorModel.RGB,
    "CMYK": ColorModel.CMYK,
}

# Single-band modes that convert to 8-bit gray without losing meaning.
_GRAY_MODES = {"1", "I", "I;16", "I;16B", "I;16L", "F"}

_BLACK = 0
_WHITE = 255


@dataclass
class RasterOptions:
    """Backend settings, fixed for the lifetime of one raster handle."""

    resample: Image.Resampling = Image.Resampling.LANCZOS
    # Pixels at or above this luminance count as margin for trim_border():
    # the 200-255 band treats light antialiasing as background.
    trim_luminance: int = 200
    background: tuple[int, int, int] = (255, 255, 255)


def _has_alpha(image: Image.Image) -> bool:
    return "A" in image.getbands() or "transparency" in image.info


def _prepare(image: Image.Image, background: tuple[int, int, int]) -> Image.Image:
    if image.mode in _MODEL_BY_MODE:
        return image
    if _has_alpha(image):
        rgba = image.convert("RGBA")
        base = Image.new("RGBA", rgba.size, (*background, 255))
        return Image.alpha_composite(base, rgba).convert("RGB")
    if image.mode in _GRAY_MODES:
        return image.convert("L")
    return image.convert("RGB")


def _trim_uniform_border(binary: NDArray[np.uint8]) -> NDArray[np.uint8]:
    """Drop edge rows/columns that only hold the top-left corner's color.

    A uniform image trims down to nothing.
    """
    if binary.size == 0:
        return binary
    mask = binary != binary[0, 0]
    rows = np.flatnonzero(mask.any(axis=1))
    cols = np.flatnonzero(mask.any(axis=0))
    if rows.size == 0:
        return binary[:0, :0]
    return binary[rows[0] : rows[-1] + 1, cols[0] : cols[-1] + 1]


class PillowRaster:
    """Mutable image handle over a ``PIL.Image.Image``."""

    def __init__(self, image: Image.Image, options: RasterOptions | None = None) -> None:
        self.options = options or RasterOptions()
        self._image = _prepare(image, self.options.background)

    @classmethod
    def open(
        cls,
        source: str | Path | bytes | BinaryIO,
        options: RasterOptions | None = None,
    ) -> PillowRaster:
        """Decode an image from a path, raw bytes or a binary stream."""
        if isinstance(source, (bytes, bytearray)):
            source = io.BytesIO(source)
        try:
            image = Image.open(source)
            image.load()
        except (UnidentifiedImageError, Image.DecompressionBombError, OSError) as e:
            raise RasterAccessFailure(f"Failed to load image: {e}") from e
        logger.debug("Opened %s image %dx%d (%s)", image.format, *image.size, image.mode)
        return cls(image, options)

    @property
    def image(self) -> Image.Image:
        return self._image

    @property
    def color_model(self) -> ColorModel:
        return _MODEL_BY_MODE[self._image.mode]

    def dimensions(self) -> tuple[int, int]:
        return self._image.size

    def pixel_color(self, x: int, y: int) -> ColorSample:
        width, height = self._image.size
        if not (0 <= x < width and 0 <= y < height):
            raise RasterAccessFailure(f"Pixel ({x}, {y}) outside {width}x{height} raster")

        value = self._image.getpixel((x, y))
        model = self.color_model
        if model is ColorModel.GRAY:
            return GraySample(value)
        if model is ColorModel.RGB:
            return RgbSample(*value[:3])
        c, m, yel, k = (channel / 255 * 100 for channel in value[:4])
        return CmykSample(c, m, yel, k)

    def luminance(self) -> NDArray[np.float64]:
        """Per-pixel luminance, HxW."""
        return luminance_array(np.asarray(self._image), self.color_model)

    def rescale(self, width: int, height: int) -> None:
        if width <= 0 or height <= 0:
            raise RasterAccessFailure(f"Cannot rescale to {width}x{height}")
        before = self._image.size
        self._image = self._image.resize((width, height), resample=self.options.resample)
        logger.debug("Rescaled %dx%d -> %dx%d", *before, width, height)

    def threshold_copy(self, threshold: int) -> PillowRaster:
        """Binary copy (>= threshold white, else black) with its flat border trimmed."""
        if not 0 <= threshold <= 255:
            raise ThresholdOutOfRange(threshold)

        width, height = self._image.size
        if width == 0 or height == 0:
            return PillowRaster(Image.new("L", (0, 0)), self.options)

        binary = np.where(self.luminance() >= threshold, _WHITE, _BLACK).astype(np.uint8)
        trimmed = _trim_uniform_border(binary)
        if trimmed.size == 0:
            logger.debug("Thresholded image at %d is uniform, nothing left after trim", threshold)
            return PillowRaster(Image.new("L", (0, 0)), self.options)
        return PillowRaster(Image.fromarray(np.ascontiguousarray(trimmed)), self.options)

    def trim_border(self) -> tuple[int, int]:
        """Crop near-white margins; a blank image is left as-is."""
        width, height = self._image.size
        if width == 0 or height == 0:
            return width, height

        content = self.luminance() < self.options.trim_luminance
        rows = np.flatnonzero(content.any(axis=1))
        cols = np.flatnonzero(content.any(axis=0))
        if rows.size == 0:
            logger.debug("Nothing to trim: no pixel darker than %d", self.options.trim_luminance)
            return width, height

        box = (int(cols[0]), int(rows[0]), int(cols[-1]) + 1, int(rows[-1]) + 1)
        self._image = self._image.crop(box)
        logger.debug("Trimmed %dx%d -> %dx%d", width, height, *self._image.size)
        return self._image.size
