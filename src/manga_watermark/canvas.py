"""2D drawing context over a Pillow RGBA image.

Keeps the subset of canvas state the compositor uses (font, styles, global
alpha and an affine transform stack). Every draw call renders its source
into a small RGBA patch, maps the patch through the current transform and
composites it source-over onto the image.
"""

import math
from typing import List, Optional, Tuple

import numpy as np
from PIL import Image, ImageDraw

from .models import Dimensions, parse_color
from .text_metrics import FontSpec, TextMetrics, font_metrics, load_font

# Pillow anchors for canvas text baselines
TEXT_ANCHORS = {
    "top": "la",
    "hanging": "la",
    "middle": "lm",
    "alphabetic": "ls",
    "ideographic": "ld",
    "bottom": "ld",
}


def _translation(x: float, y: float) -> np.ndarray:
    return np.array([[1.0, 0.0, x], [0.0, 1.0, y], [0.0, 0.0, 1.0]])


def _scaling(sx: float, sy: float) -> np.ndarray:
    return np.array([[sx, 0.0, 0.0], [0.0, sy, 0.0], [0.0, 0.0, 1.0]])


def _rotation(radians: float) -> np.ndarray:
    c, s = math.cos(radians), math.sin(radians)
    return np.array([[c, -s, 0.0], [s, c, 0.0], [0.0, 0.0, 1.0]])


class CanvasContext:
    """Drawing context bound to a copy of ``image``."""

    def __init__(self, image: Image.Image):
        self._image = image.convert("RGBA") if image.mode != "RGBA" else image.copy()
        self.font = FontSpec("DejaVuSans", 10)
        self.fill_style = "#000000"
        self.stroke_style = "#000000"
        self.line_width = 1.0
        self.line_join = "miter"
        self.text_baseline = "alphabetic"
        self._global_alpha = 1.0
        self._matrix = np.identity(3)
        self._stack: List[Tuple[np.ndarray, dict]] = []

    @property
    def size(self) -> Dimensions:
        return Dimensions(*self._image.size)

    @property
    def global_alpha(self) -> float:
        return self._global_alpha

    @global_alpha.setter
    def global_alpha(self, value: float) -> None:
        self._global_alpha = max(0.0, min(1.0, float(value)))

    @property
    def transform(self) -> np.ndarray:
        return self._matrix.copy()

    def save(self) -> None:
        state = {
            "font": self.font,
            "fill_style": self.fill_style,
            "stroke_style": self.stroke_style,
            "line_width": self.line_width,
            "line_join": self.line_join,
            "text_baseline": self.text_baseline,
            "_global_alpha": self._global_alpha,
        }
        self._stack.append((self._matrix.copy(), state))

    def restore(self) -> None:
        if not self._stack:
            return
        self._matrix, state = self._stack.pop()
        for name, value in state.items():
            setattr(self, name, value)

    def translate(self, x: float, y: float) -> None:
        self._matrix = self._matrix @ _translation(x, y)

    def rotate(self, radians: float) -> None:
        self._matrix = self._matrix @ _rotation(radians)

    def measure_text(self, text: str) -> TextMetrics:
        return font_metrics(load_font(*self.font), text)

    def fill_text(self, text: str, x: float, y: float) -> None:
        self._draw_text(text, x, y, parse_color(self.fill_style), stroke_width=0)

    def stroke_text(self, text: str, x: float, y: float) -> None:
        # Canvas strokes are centered on the glyph edge, Pillow strokes grow outward only
        stroke_width = max(1, int(round(self.line_width / 2)))
        self._draw_text(text, x, y, parse_color(self.stroke_style), stroke_width=stroke_width)

    def draw_image(
        self,
        image: Image.Image,
        x: float,
        y: float,
        width: Optional[float] = None,
        height: Optional[float] = None,
    ) -> None:
        patch = image.convert("RGBA") if image.mode != "RGBA" else image
        width = patch.width if width is None else width
        height = patch.height if height is None else height
        self._blit(patch, x, y, width, height)

    def to_image(self) -> Image.Image:
        return self._image.copy()

    def _draw_text(self, text: str, x: float, y: float, color, stroke_width: int) -> None:
        if not text:
            return
        font = load_font(*self.font)
        anchor = TEXT_ANCHORS.get(self.text_baseline, "ls")
        left, top, right, bottom = font.getbbox(text, anchor=anchor, stroke_width=stroke_width)
        pad = stroke_width + 2
        patch_w = int(math.ceil(right - left)) + 2 * pad
        patch_h = int(math.ceil(bottom - top)) + 2 * pad

        patch = Image.new("RGBA", (patch_w, patch_h), (0, 0, 0, 0))
        draw = ImageDraw.Draw(patch)
        draw.text(
            (pad - left, pad - top),
            text,
            font=font,
            anchor=anchor,
            fill=color,
            stroke_width=stroke_width,
            stroke_fill=color,
        )
        self._blit(patch, x + left - pad, y + top - pad, patch_w, patch_h)

    def _blit(self, patch: Image.Image, x: float, y: float, width: float, height: float) -> None:
        if width <= 0 or height <= 0 or self._global_alpha <= 0:
            return
        patch_w, patch_h = patch.size
        mapping = self._matrix @ _translation(x, y) @ _scaling(width / patch_w, height / patch_h)

        corners = mapping @ np.array([[0, patch_w, patch_w, 0], [0, 0, patch_h, patch_h], [1, 1, 1, 1]])
        canvas_w, canvas_h = self._image.size
        x0 = max(int(math.floor(corners[0].min())), 0)
        y0 = max(int(math.floor(corners[1].min())), 0)
        x1 = min(int(math.ceil(corners[0].max())), canvas_w)
        y1 = min(int(math.ceil(corners[1].max())), canvas_h)
        if x1 <= x0 or y1 <= y0:
            return

        source = patch.copy()
        if self._global_alpha < 1:
            alpha = source.getchannel("A").point(lambda p: int(p * self._global_alpha))
            source.putalpha(alpha)

        # Output region pixel -> patch pixel
        inverse = np.linalg.inv(mapping) @ _translation(x0, y0)
        data = tuple(inverse[0]) + tuple(inverse[1])
        layer = source.convert("RGBa").transform(
            (x1 - x0, y1 - y0),
            Image.Transform.AFFINE,
            data,
            resample=Image.Resampling.BICUBIC,
            fillcolor=(0, 0, 0, 0),
        )
        self._image.alpha_composite(layer.convert("RGBA"), dest=(x0, y0))
