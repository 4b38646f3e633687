"""Tests for color sample normalization."""

from __future__ import annotations

import numpy as np
import pytest

from qrsvg.engine.color import (
    CmykSample,
    ColorModel,
    GraySample,
    RgbSample,
    luminance_array,
    normalize_luminance,
)


def test_gray_is_taken_as_is():
    assert normalize_luminance(GraySample(0)) == 0
    assert normalize_luminance(GraySample(200)) == 200


def test_rgb_is_channel_mean():
    assert normalize_luminance(RgbSample(30, 60, 90)) == 60
    assert normalize_luminance(RgbSample(255, 255, 255)) == 255


def test_rgb_rounds_to_one_decimal():
    assert normalize_luminance(RgbSample(1, 1, 2)) == 1.3


def test_cmyk_converts_through_rgb():
    # 50% cyan, no black: r = 127.5, g = b = 255
    assert normalize_luminance(CmykSample(50, 0, 0, 0)) == pytest.approx(212.5)
    assert normalize_luminance(CmykSample(0, 0, 0, 100)) == 0
    assert normalize_luminance(CmykSample(0, 0, 0, 0)) == 255


def test_cmyk_to_rgb():
    rgb = CmykSample(0, 100, 0, 50).to_rgb()
    assert rgb.r == pytest.approx(127.5)
    assert rgb.g == pytest.approx(0.0)
    assert rgb.b == pytest.approx(127.5)


def test_unknown_sample_rejected():
    with pytest.raises(TypeError):
        normalize_luminance((1, 2, 3))  # type: ignore[arg-type]


def test_luminance_array_gray():
    data = np.array([[0, 128], [255, 7]], dtype=np.uint8)
    np.testing.assert_array_equal(luminance_array(data, ColorModel.GRAY), data)


def test_luminance_array_rgb_matches_scalar():
    data = np.array([[[30, 60, 90], [1, 1, 2]]], dtype=np.uint8)
    lum = luminance_array(data, ColorModel.RGB)
    assert lum[0, 0] == normalize_luminance(RgbSample(30, 60, 90))
    assert lum[0, 1] == normalize_luminance(RgbSample(1, 1, 2))


def test_luminance_array_cmyk_in_8bit_storage():
    # Pillow stores ink as 0-255; 255 black ink is 100% K.
    data = np.array([[[0, 0, 0, 255], [0, 0, 0, 0]]], dtype=np.uint8)
    lum = luminance_array(data, ColorModel.CMYK)
    assert lum[0, 0] == 0
    assert lum[0, 1] == 255
