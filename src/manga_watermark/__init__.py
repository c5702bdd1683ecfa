"""Watermark compositing and mask drawing engine."""

__version__ = "1.0.0"
__description__ = "Watermark compositing and mask drawing engine for manga pages"

from .compositor import compose_watermark, compute_bounds, hit_test, render
from .mask_editor import MaskEditor
from .models import (
    ImageWatermarkConfig,
    MaskTool,
    TextWatermarkConfig,
    WatermarkPosition,
    WatermarkSettings,
)

__all__ = [
    "ImageWatermarkConfig",
    "MaskEditor",
    "MaskTool",
    "TextWatermarkConfig",
    "WatermarkPosition",
    "WatermarkSettings",
    "compose_watermark",
    "compute_bounds",
    "hit_test",
    "render",
]
