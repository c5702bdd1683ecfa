"""RGBA raster buffer backing the mask editor."""

import math
from enum import Enum
from typing import Tuple

import numpy as np
from PIL import Image

from .errors import SurfaceUnavailableError
from .logger import log
from .models import Dimensions


class BlendMode(str, Enum):
    """How drawn coverage combines with the existing pixels."""
    PAINT = "source-over"
    ERASE = "destination-out"


def _pixel_edge(value: float) -> int:
    return int(math.floor(value + 0.5))


class RasterSurface:
    """Non-premultiplied RGBA pixel buffer of fixed size, created fully transparent."""

    def __init__(self, width: int, height: int):
        if int(width) != width or int(height) != height or width <= 0 or height <= 0:
            raise SurfaceUnavailableError(f"Cannot create a {width}x{height} drawing surface")
        self.width = int(width)
        self.height = int(height)
        try:
            self._pixels = np.zeros((self.height, self.width, 4), dtype=np.uint8)
        except MemoryError as e:
            log.error(f"Failed to allocate {self.width}x{self.height} drawing surface: {e}")
            raise SurfaceUnavailableError(f"Cannot allocate a {self.width}x{self.height} drawing surface") from e

    @property
    def dimensions(self) -> Dimensions:
        return Dimensions(self.width, self.height)

    @property
    def pixels(self) -> np.ndarray:
        """Read-only view of the live buffer."""
        view = self._pixels.view()
        view.flags.writeable = False
        return view

    @property
    def alpha(self) -> np.ndarray:
        return self.pixels[:, :, 3]

    def snapshot(self) -> np.ndarray:
        """Immutable full copy of the current pixels."""
        copy = self._pixels.copy()
        copy.flags.writeable = False
        return copy

    def restore(self, snapshot: np.ndarray) -> None:
        if snapshot.shape != self._pixels.shape:
            raise ValueError(f"Snapshot shape {snapshot.shape} does not match surface {self._pixels.shape}")
        np.copyto(self._pixels, snapshot)

    def clear(self) -> None:
        self._pixels.fill(0)

    def has_content(self) -> bool:
        """True when any pixel has a non-zero alpha."""
        return bool(np.any(self._pixels[:, :, 3]))

    def composite(
        self,
        coverage: np.ndarray,
        origin: Tuple[int, int],
        color: Tuple[int, int, int, int],
        mode: BlendMode = BlendMode.PAINT,
    ) -> None:
        """
        Blend a coverage map (0-255) into the buffer.

        Args:
            coverage: 2D uint8 coverage, 255 = fully covered
            origin: Top-left pixel of ``coverage`` on the surface
            color: RGBA paint color, ignored when erasing
            mode: PAINT composites ``color`` over the pixels, ERASE removes alpha
        """
        x0, y0 = origin
        h, w = coverage.shape
        region = self._pixels[y0:y0 + h, x0:x0 + w]
        cov = coverage[: region.shape[0], : region.shape[1]].astype(np.float32) / 255.0

        dst_a = region[:, :, 3].astype(np.float32) / 255.0

        if mode == BlendMode.ERASE:
            region[:, :, 3] = np.round(dst_a * (1.0 - cov) * 255.0).astype(np.uint8)
            return

        src_a = (color[3] / 255.0) * cov
        out_a = src_a + dst_a * (1.0 - src_a)
        src_rgb = np.array(color[:3], dtype=np.float32)
        dst_rgb = region[:, :, :3].astype(np.float32)

        weighted = src_rgb * src_a[..., None] + dst_rgb * (dst_a * (1.0 - src_a))[..., None]
        with np.errstate(divide="ignore", invalid="ignore"):
            out_rgb = np.where(out_a[..., None] > 0, weighted / out_a[..., None], dst_rgb)

        region[:, :, :3] = np.clip(np.round(out_rgb), 0, 255).astype(np.uint8)
        region[:, :, 3] = np.clip(np.round(out_a * 255.0), 0, 255).astype(np.uint8)

    def fill_rect(
        self,
        left: float,
        top: float,
        width: float,
        height: float,
        color: Tuple[int, int, int, int],
        mode: BlendMode = BlendMode.PAINT,
    ) -> None:
        """Fill pixels in [round(left), round(left + width)) x [round(top), round(top + height))."""
        x0 = min(max(_pixel_edge(left), 0), self.width)
        x1 = min(max(_pixel_edge(left + width), 0), self.width)
        y0 = min(max(_pixel_edge(top), 0), self.height)
        y1 = min(max(_pixel_edge(top + height), 0), self.height)
        if x1 <= x0 or y1 <= y0:
            return
        coverage = np.full((y1 - y0, x1 - x0), 255, dtype=np.uint8)
        self.composite(coverage, (x0, y0), color, mode)

    def to_image(self) -> Image.Image:
        return Image.fromarray(self._pixels.copy())
