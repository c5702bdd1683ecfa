"""Watermark placement on a canvas: preset grid cells, offsets and margins.

All functions are pure. Inputs where the watermark does not fit inside the
margin-constrained area are clamped rather than rejected: the upper bound
is applied first and the lower bound wins, so the result may sit outside
the canvas on the far edge.
"""

from typing import Union

from .models import Dimensions, Margins, Point, PresetPosition, WatermarkPosition


def _preset_name(preset: Union[PresetPosition, str]) -> str:
    return preset.value if isinstance(preset, PresetPosition) else str(preset)


def resolve_preset_position(
    preset: Union[PresetPosition, str],
    canvas_size: Dimensions,
    watermark_size: Dimensions,
) -> Point:
    """Top-left corner of the watermark for a named grid cell."""
    name = _preset_name(preset)
    canvas_width, canvas_height = canvas_size
    wm_width, wm_height = watermark_size

    if "left" in name:
        x = 0
    elif "right" in name:
        x = canvas_width - wm_width
    else:
        x = (canvas_width - wm_width) / 2

    if "top" in name:
        y = 0
    elif "bottom" in name:
        y = canvas_height - wm_height
    else:
        y = (canvas_height - wm_height) / 2

    return Point(x, y)


def apply_margins(
    position: Point,
    margins: Margins,
    canvas_size: Dimensions,
    watermark_size: Dimensions,
) -> Point:
    """Clamp ``position`` so the footprint keeps the given distance from every edge."""
    canvas_width, canvas_height = canvas_size
    wm_width, wm_height = watermark_size

    min_x = margins.left
    max_x = canvas_width - wm_width - margins.right
    min_y = margins.top
    max_y = canvas_height - wm_height - margins.bottom

    return Point(
        max(min_x, min(max_x, position.x)),
        max(min_y, min(max_y, position.y)),
    )


def clamp_to_canvas(position: Point, canvas_size: Dimensions, watermark_size: Dimensions) -> Point:
    return apply_margins(position, Margins(0, 0, 0, 0), canvas_size, watermark_size)


def resolve_final_position(
    watermark_position: WatermarkPosition,
    canvas_size: Dimensions,
    watermark_size: Dimensions,
) -> Point:
    """Preset (or custom origin), then offset, then margin clamp, in that order."""
    if watermark_position.preset_position == PresetPosition.CUSTOM:
        position = Point(watermark_position.offset_x, watermark_position.offset_y)
    else:
        base = resolve_preset_position(watermark_position.preset_position, canvas_size, watermark_size)
        position = Point(base.x + watermark_position.offset_x, base.y + watermark_position.offset_y)

    return apply_margins(position, watermark_position.margins, canvas_size, watermark_size)


def is_fully_visible(position: Point, canvas_size: Dimensions, watermark_size: Dimensions) -> bool:
    canvas_width, canvas_height = canvas_size
    wm_width, wm_height = watermark_size
    return (
        position.x >= 0
        and position.y >= 0
        and position.x + wm_width <= canvas_width
        and position.y + wm_height <= canvas_height
    )


def respects_margins(
    position: Point,
    margins: Margins,
    canvas_size: Dimensions,
    watermark_size: Dimensions,
) -> bool:
    canvas_width, canvas_height = canvas_size
    wm_width, wm_height = watermark_size
    return (
        position.x >= margins.left
        and position.y >= margins.top
        and position.x + wm_width <= canvas_width - margins.right
        and position.y + wm_height <= canvas_height - margins.bottom
    )
