"""Scaling and tile-count math for image watermarks."""

import math

from .models import Dimensions, TileCount


def scaled_dimensions(original_width: float, original_height: float, scale: float) -> Dimensions:
    return Dimensions(original_width * scale, original_height * scale)


def tile_count(
    canvas_size: Dimensions,
    watermark_size: Dimensions,
    spacing_x: float,
    spacing_y: float,
) -> TileCount:
    """Number of tiles needed to cover the canvas; at least one per axis."""
    effective_width = watermark_size.width + spacing_x
    effective_height = watermark_size.height + spacing_y

    tiles_x = math.ceil(canvas_size.width / effective_width)
    tiles_y = math.ceil(canvas_size.height / effective_height)

    return TileCount(tiles_x, tiles_y, tiles_x * tiles_y)
