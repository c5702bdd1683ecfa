"""Font resolution and text footprint measurement."""

from functools import lru_cache
from pathlib import Path
from typing import Dict, List, NamedTuple

from PIL import ImageFont

from .config import get_settings
from .logger import log
from .models import Dimensions, TextWatermarkConfig

FONT_SUFFIXES = (".ttf", ".otf", ".ttc")


class FontSpec(NamedTuple):
    family: str
    size: float
    weight: str = "normal"

    def __str__(self) -> str:
        return f"{self.weight} {self.size:g}px {self.family}"


class TextMetrics(NamedTuple):
    """Advance width plus ink extent above and below the baseline."""

    width: float
    ascent: float
    descent: float


def _candidate_names(family: str, weight: str) -> List[str]:
    compact = family.replace(" ", "")
    stems = [compact, compact.lower(), family.replace(" ", "_"), family]
    if weight == "bold":
        names = []
        for stem in stems:
            names.extend([f"{stem}bd", f"{stem}-Bold", f"{stem}Bold", f"{stem} Bold"])
        return names
    return stems + [f"{stem}-Regular" for stem in stems]


@lru_cache(maxsize=1)
def _font_index() -> Dict[str, Path]:
    """Map lower-cased font file stems to paths under the configured font directories."""
    index: Dict[str, Path] = {}
    for directory in get_settings().font_dirs:
        directory = Path(directory).expanduser()
        if not directory.is_dir():
            continue
        for path in directory.rglob("*"):
            if path.suffix.lower() in FONT_SUFFIXES:
                index.setdefault(path.stem.lower(), path)
    return index


@lru_cache(maxsize=64)
def load_font(family: str, size: float, weight: str = "normal") -> ImageFont.FreeTypeFont:
    """Resolve a font family to a FreeType font, falling back to DejaVu Sans and Pillow's default."""
    index = _font_index()
    fallback = get_settings().default_font_family
    for name in _candidate_names(family, weight) + _candidate_names(fallback, weight):
        path = index.get(name.lower())
        if path is None:
            continue
        try:
            return ImageFont.truetype(str(path), size)
        except OSError as e:
            log.warning(f"Could not load font file {path}: {e}")

    # Pillow also searches the platform font directories for bare file names
    for name in (f"{family}.ttf", "DejaVuSans-Bold.ttf" if weight == "bold" else "DejaVuSans.ttf"):
        try:
            return ImageFont.truetype(name, size)
        except OSError:
            continue

    log.warning(f"Font family '{family}' not found, using Pillow default font")
    return ImageFont.load_default(size=size)


def font_metrics(font: ImageFont.FreeTypeFont, text: str) -> TextMetrics:
    if not text:
        return TextMetrics(0.0, 0.0, 0.0)
    left, top, right, bottom = font.getbbox(text, anchor="ls")
    return TextMetrics(float(font.getlength(text)), float(max(0, -top)), float(max(0, bottom)))


def measure_text(ctx, text: str, font_family: str, font_size: float, font_weight: str) -> Dimensions:
    """Rendered footprint of ``text``; height falls back to the font size when no ink is measured."""
    ctx.save()
    ctx.font = FontSpec(font_family, font_size, font_weight)
    metrics = ctx.measure_text(text)
    ctx.restore()

    height = (metrics.ascent + metrics.descent) or font_size
    return Dimensions(metrics.width, height)


def text_watermark_dimensions(ctx, config: TextWatermarkConfig) -> Dimensions:
    return measure_text(ctx, config.text, config.font_family, config.font_size, config.font_weight)
