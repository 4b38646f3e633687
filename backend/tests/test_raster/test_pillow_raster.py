"""Tests for the Pillow raster backend."""

from __future__ import annotations

import io

import numpy as np
import pytest
from PIL import Image

from qrsvg.engine.color import CmykSample, ColorModel, GraySample, RgbSample
from qrsvg.engine.errors import RasterAccessFailure, ThresholdOutOfRange
from qrsvg.raster.base import RasterAccess
from qrsvg.raster.pillow import PillowRaster, RasterOptions


def _png_bytes(image: Image.Image) -> bytes:
    buf = io.BytesIO()
    image.save(buf, format="PNG")
    return buf.getvalue()


def test_modes_gray():
    raster = PillowRaster(Image.new("L", (4, 3), 90))
    assert raster.color_model is ColorModel.GRAY
    assert raster.dimensions() == (4, 3)
    assert raster.pixel_color(3, 2) == GraySample(90)


def test_modes_rgb():
    raster = PillowRaster(Image.new("RGB", (2, 2), (10, 20, 30)))
    assert raster.color_model is ColorModel.RGB
    assert raster.pixel_color(0, 0) == RgbSample(10, 20, 30)


def test_modes_cmyk_in_percent():
    raster = PillowRaster(Image.new("CMYK", (2, 2), (0, 0, 0, 255)))
    assert raster.color_model is ColorModel.CMYK
    assert raster.pixel_color(1, 1) == CmykSample(0, 0, 0, 100)


def test_modes_alpha_flattened_onto_white():
    image = Image.new("RGBA", (2, 2), (0, 0, 0, 0))
    image.putpixel((1, 1), (0, 0, 0, 255))
    raster = PillowRaster(image)
    assert raster.color_model is ColorModel.RGB
    assert raster.pixel_color(0, 0) == RgbSample(255, 255, 255)
    assert raster.pixel_color(1, 1) == RgbSample(0, 0, 0)


def test_modes_alpha_background_option():
    image = Image.new("LA", (1, 1), (0, 0))
    raster = PillowRaster(image, RasterOptions(background=(0, 0, 0)))
    assert raster.pixel_color(0, 0) == RgbSample(0, 0, 0)


def test_modes_bilevel_becomes_gray():
    raster = PillowRaster(Image.new("1", (2, 2), 1))
    assert raster.color_model is ColorModel.GRAY
    assert raster.pixel_color(0, 0) == GraySample(255)


def test_modes_palette_becomes_rgb():
    image = Image.new("RGB", (2, 2), (200, 0, 0)).convert("P", palette=Image.Palette.ADAPTIVE)
    raster = PillowRaster(image)
    assert raster.color_model is ColorModel.RGB
    assert raster.pixel_color(0, 0) == RgbSample(200, 0, 0)


def test_modes_satisfies_protocol():
    assert isinstance(PillowRaster(Image.new("L", (1, 1))), RasterAccess)


def test_open_bytes():
    raster = PillowRaster.open(_png_bytes(Image.new("L", (5, 6), 0)))
    assert raster.dimensions() == (5, 6)


def test_open_path(tmp_path):
    path = tmp_path / "code.png"
    Image.new("RGB", (3, 3), (0, 0, 0)).save(path)
    assert PillowRaster.open(path).dimensions() == (3, 3)
    assert PillowRaster.open(str(path)).color_model is ColorModel.RGB


def test_open_stream():
    stream = io.BytesIO(_png_bytes(Image.new("L", (2, 2))))
    assert PillowRaster.open(stream).dimensions() == (2, 2)


def test_open_not_an_image():
    with pytest.raises(RasterAccessFailure):
        PillowRaster.open(b"definitely not a png")


def test_open_missing_file(tmp_path):
    with pytest.raises(RasterAccessFailure):
        PillowRaster.open(tmp_path / "missing.png")


@pytest.mark.parametrize("x, y", [(-1, 0), (0, -1), (4, 0), (0, 4)])
def test_pixel_out_of_bounds(x, y):
    raster = PillowRaster(Image.new("L", (4, 4)))
    with pytest.raises(RasterAccessFailure):
        raster.pixel_color(x, y)


def test_rescale_in_place():
    raster = PillowRaster(Image.new("L", (10, 10), 0))
    raster.rescale(30, 20)
    assert raster.dimensions() == (30, 20)
    assert raster.pixel_color(15, 10) == GraySample(0)


def test_rescale_rejects_empty():
    raster = PillowRaster(Image.new("L", (10, 10)))
    with pytest.raises(RasterAccessFailure):
        raster.rescale(0, 10)


def test_threshold_copy_binary_and_trimmed():
    pixels = np.full((20, 20), 255, dtype=np.uint8)
    pixels[5:15, 4:12] = 100
    pixels[6, 6] = 127
    pixels[7, 7] = 126
    source = PillowRaster(Image.fromarray(pixels))

    copy = source.threshold_copy(127)
    assert copy is not source
    assert copy.dimensions() == (8, 10)
    assert source.dimensions() == (20, 20)
    values = np.asarray(copy.image)
    assert set(np.unique(values)) == {0, 255}
    # 127 is not below the cutoff, 126 is.
    assert values[1, 2] == 255
    assert values[2, 3] == 0


def test_threshold_copy_uniform_image_trims_to_nothing(blank_raster):
    assert blank_raster.threshold_copy(127).dimensions() == (0, 0)


def test_threshold_copy_dark_corner_trims_dark_margin():
    pixels = np.zeros((10, 10), dtype=np.uint8)
    pixels[3:6, 2:8] = 255
    copy = PillowRaster(Image.fromarray(pixels)).threshold_copy(127)
    assert copy.dimensions() == (6, 3)


def test_threshold_copy_empty_raster():
    raster = PillowRaster(Image.new("L", (0, 0)))
    assert raster.threshold_copy(127).dimensions() == (0, 0)


@pytest.mark.parametrize("threshold", [-1, 256])
def test_threshold_copy_out_of_range(blank_raster, threshold):
    with pytest.raises(ThresholdOutOfRange):
        blank_raster.threshold_copy(threshold)


def test_trim_border_crops_to_content():
    pixels = np.full((30, 40), 255, dtype=np.uint8)
    pixels[10:20, 5:25] = 0
    pixels[2, 2] = 230
    raster = PillowRaster(Image.fromarray(pixels))
    assert raster.trim_border() == (20, 10)
    assert raster.pixel_color(0, 0) == GraySample(0)


def test_trim_border_blank_left_alone(blank_raster):
    assert blank_raster.trim_border() == (252, 252)
    assert blank_raster.dimensions() == (252, 252)
