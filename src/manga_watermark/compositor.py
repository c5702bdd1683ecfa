"""Text and image watermark rendering"""

import math
from typing import Optional

from PIL import Image

from .canvas import CanvasContext
from .io import decode_bitmap
from .logger import log
from .models import (
    Dimensions,
    ImageWatermarkConfig,
    Point,
    TextWatermarkConfig,
    WatermarkBounds,
    WatermarkSettings,
)
from .position import resolve_final_position
from .text_metrics import FontSpec, text_watermark_dimensions
from .tiling import scaled_dimensions, tile_count


def normalize_opacity(opacity: float) -> float:
    """Convert a 0-100 opacity to a 0-1 alpha, clamping out-of-range values."""
    return max(0.0, min(100.0, opacity)) / 100


def degrees_to_radians(degrees: float) -> float:
    return degrees * math.pi / 180


def _rotate_about(ctx, center_x: float, center_y: float, rotation: float) -> None:
    # A zero rotation must leave the transform untouched, not rotate by 0
    if rotation != 0:
        ctx.translate(center_x, center_y)
        ctx.rotate(degrees_to_radians(rotation))
        ctx.translate(-center_x, -center_y)


def render_text_watermark(ctx, config: TextWatermarkConfig, position: Point, rotation: float = 0) -> None:
    """Draw ``config.text`` with its top-left glyph corner at ``position``.

    The outline, when enabled, is stroked first so the fill sits on top of it.
    Rotation pivots on the center of the measured text box.
    """
    if not config.text or not config.text.strip():
        return

    ctx.save()
    try:
        ctx.font = FontSpec(config.font_family, config.font_size, config.font_weight)
        ctx.text_baseline = "top"

        metrics = ctx.measure_text(config.text)
        text_width = metrics.width
        text_height = config.font_size

        center_x = position.x + text_width / 2
        center_y = position.y + text_height / 2
        _rotate_about(ctx, center_x, center_y, rotation)

        ctx.global_alpha = normalize_opacity(config.opacity)

        if config.outline_enabled and config.outline_width > 0:
            ctx.stroke_style = config.outline_color
            ctx.line_width = config.outline_width
            ctx.line_join = "round"
            ctx.stroke_text(config.text, position.x, position.y)

        ctx.fill_style = config.color
        ctx.fill_text(config.text, position.x, position.y)
    finally:
        ctx.restore()


def _render_single_image(ctx, image: Image.Image, position: Point, dimensions: Dimensions, rotation: float) -> None:
    center_x = position.x + dimensions.width / 2
    center_y = position.y + dimensions.height / 2
    _rotate_about(ctx, center_x, center_y, rotation)
    ctx.draw_image(image, position.x, position.y, dimensions.width, dimensions.height)


def _render_tiled_image(
    ctx,
    image: Image.Image,
    dimensions: Dimensions,
    canvas_size: Dimensions,
    spacing_x: float,
    spacing_y: float,
    rotation: float,
) -> None:
    tiles = tile_count(canvas_size, dimensions, spacing_x, spacing_y)
    effective_width = dimensions.width + spacing_x
    effective_height = dimensions.height + spacing_y

    for row in range(tiles.tiles_y):
        for col in range(tiles.tiles_x):
            x = col * effective_width
            y = row * effective_height

            # Each tile turns about its own center
            ctx.save()
            _rotate_about(ctx, x + dimensions.width / 2, y + dimensions.height / 2, rotation)
            ctx.draw_image(image, x, y, dimensions.width, dimensions.height)
            ctx.restore()


def render_image_watermark(
    ctx,
    config: ImageWatermarkConfig,
    image: Image.Image,
    position: Point,
    canvas_size: Dimensions,
    rotation: float = 0,
) -> None:
    ctx.save()
    try:
        ctx.global_alpha = normalize_opacity(config.opacity)
        dimensions = scaled_dimensions(image.width, image.height, config.scale)

        if config.tile_enabled:
            _render_tiled_image(
                ctx,
                image,
                dimensions,
                canvas_size,
                config.tile_spacing_x,
                config.tile_spacing_y,
                rotation,
            )
        else:
            _render_single_image(ctx, image, position, dimensions, rotation)
    finally:
        ctx.restore()


def watermark_dimensions(
    ctx,
    settings: WatermarkSettings,
    watermark_image: Optional[Image.Image] = None,
) -> Optional[Dimensions]:
    """Footprint used to place the watermark, or None for an image watermark without a bitmap."""
    config = settings.config
    if config.type == "text":
        return text_watermark_dimensions(ctx, config)
    if watermark_image is None:
        return None
    return scaled_dimensions(watermark_image.width, watermark_image.height, config.scale)


def compute_bounds(
    settings: WatermarkSettings,
    canvas_size: Dimensions,
    watermark_size: Dimensions,
) -> WatermarkBounds:
    """Resolved, un-rotated footprint for drag and hit testing."""
    position = resolve_final_position(settings.position, canvas_size, watermark_size)
    return WatermarkBounds(position.x, position.y, watermark_size.width, watermark_size.height)


def hit_test(x: float, y: float, bounds: WatermarkBounds) -> bool:
    return (
        bounds.x <= x <= bounds.x + bounds.width
        and bounds.y <= y <= bounds.y + bounds.height
    )


def render(
    ctx,
    settings: WatermarkSettings,
    canvas_size: Dimensions,
    watermark_image: Optional[Image.Image] = None,
) -> None:
    """Draw the configured watermark onto ``ctx``; does nothing when disabled."""
    if not settings.enabled:
        return

    config = settings.config
    rotation = settings.position.rotation

    if config.type == "text":
        dimensions = text_watermark_dimensions(ctx, config)
        position = resolve_final_position(settings.position, canvas_size, dimensions)
        log.debug(f"Rendering text watermark at ({position.x:.1f}, {position.y:.1f})")
        render_text_watermark(ctx, config, position, rotation)
    elif config.type == "image" and watermark_image is not None:
        dimensions = scaled_dimensions(watermark_image.width, watermark_image.height, config.scale)
        position = resolve_final_position(settings.position, canvas_size, dimensions)
        log.debug(f"Rendering image watermark at ({position.x:.1f}, {position.y:.1f}), tiled={config.tile_enabled}")
        render_image_watermark(ctx, config, watermark_image, position, canvas_size, rotation)


def compose_watermark(
    image: Image.Image,
    settings: WatermarkSettings,
    watermark_image: Optional[Image.Image] = None,
) -> Image.Image:
    """Return a copy of ``image`` with the watermark drawn on it.

    For an image watermark without a bitmap handle, ``config.image_data`` is
    decoded first; a decode failure raises ``BitmapDecodeError`` before
    anything is drawn.
    """
    config = settings.config
    if settings.enabled and config.type == "image" and watermark_image is None and config.image_data:
        watermark_image = decode_bitmap(config.image_data)

    ctx = CanvasContext(image)
    render(ctx, settings, ctx.size, watermark_image)
    return ctx.to_image()
