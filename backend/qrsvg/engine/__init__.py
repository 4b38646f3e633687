"""qrsvg conversion engine: module count detection, tile sampling, SVG output."""

from qrsvg.engine.color import CmykSample, ColorSample, GraySample, RgbSample, normalize_luminance
from qrsvg.engine.config import ConversionConfig
from qrsvg.engine.context import ConversionContext
from qrsvg.engine.errors import (
    DetectionFailure,
    InvalidModuleCount,
    ModuleCountUnavailable,
    QrSvgError,
    RasterAccessFailure,
    ThresholdOutOfRange,
)
from qrsvg.engine.pipeline import ConversionPipeline, create_pipeline
from qrsvg.engine.resolver import qr_version, resolve_module_count
from qrsvg.engine.sampler import FillMatrix, TilePosition, build_fill_matrix
from qrsvg.svg.serializer import render_vector

__all__ = [
    "CmykSample",
    "ColorSample",
    "GraySample",
    "RgbSample",
    "normalize_luminance",
    "ConversionConfig",
    "ConversionContext",
    "DetectionFailure",
    "InvalidModuleCount",
    "ModuleCountUnavailable",
    "QrSvgError",
    "RasterAccessFailure",
    "ThresholdOutOfRange",
    "ConversionPipeline",
    "create_pipeline",
    "qr_version",
    "resolve_module_count",
    "FillMatrix",
    "TilePosition",
    "build_fill_matrix",
    "render_vector",
]
