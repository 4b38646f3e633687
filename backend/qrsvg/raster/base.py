"""RasterAccess — the pixel capability the engine needs from an image backend."""

from __future__ import annotations

from typing import Protocol, runtime_checkable

from qrsvg.engine.color import ColorSample


@runtime_checkable
class RasterAccess(Protocol):
    """Minimal image handle consumed by the resolver and the sampler.

    ``rescale`` and ``trim_border`` mutate the handle in place and must
    finish before the next read. ``threshold_copy`` never touches the
    original.
    """

    def dimensions(self) -> tuple[int, int]: ...

    def pixel_color(self, x: int, y: int) -> ColorSample: ...

    def rescale(self, width: int, height: int) -> None: ...

    def threshold_copy(self, threshold: int) -> "RasterAccess": ...

    def trim_border(self) -> tuple[int, int]: ...
