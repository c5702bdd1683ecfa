"""Mask export: overlay preview and the black/white mask for AI edits."""

import numpy as np
from PIL import Image

from .io import encode_image
from .surface import RasterSurface


def binary_mask_image(surface: RasterSurface) -> Image.Image:
    """Opaque white wherever the mask has any alpha, opaque black elsewhere."""
    output = np.zeros((surface.height, surface.width, 4), dtype=np.uint8)
    output[:, :, 3] = 255
    output[surface.alpha > 0] = 255
    return Image.fromarray(output)


def export_mask(surface: RasterSurface) -> bytes:
    """Encode the raw mask surface, semi-transparent paint included."""
    return encode_image(surface.to_image(), format="PNG")


def export_binary_mask(surface: RasterSurface) -> bytes:
    return encode_image(binary_mask_image(surface), format="PNG")
