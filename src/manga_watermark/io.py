"""Bitmap decode and surface encode collaborators."""

import base64
import binascii
import io
from pathlib import Path
from typing import Optional, Union

from PIL import Image, ImageOps

from .config import get_settings
from .errors import BitmapDecodeError
from .logger import log


def to_data_url(payload: bytes, mime_type: str = "image/png") -> str:
    encoded = base64.b64encode(payload).decode("ascii")
    return f"data:{mime_type};base64,{encoded}"


def from_data_url(data_url: str) -> bytes:
    """Extract the raw bytes of a base64 data URL; a bare base64 string is accepted too."""
    _, sep, encoded = data_url.partition(",")
    if not sep:
        encoded = data_url
    try:
        return base64.b64decode(encoded, validate=True)
    except (binascii.Error, ValueError) as e:
        raise BitmapDecodeError(f"Invalid base64 image payload: {e}") from e


def decode_bitmap(payload: Union[bytes, str]) -> Image.Image:
    """
    Decode an encoded image payload into an RGBA bitmap.

    Args:
        payload: Raw image bytes or a base64 data URL

    Returns:
        Fully loaded RGBA image

    Raises:
        BitmapDecodeError: If the payload is not a decodable image.
    """
    data = from_data_url(payload) if isinstance(payload, str) else payload
    if not data:
        raise BitmapDecodeError("Empty image payload")
    try:
        with Image.open(io.BytesIO(data)) as image:
            image.load()
            bitmap = image.convert("RGBA")
    except (OSError, ValueError, Image.DecompressionBombError) as e:
        log.error(f"Failed to decode watermark image: {e}")
        raise BitmapDecodeError(f"Failed to load watermark image: {e}") from e
    log.debug(f"Decoded bitmap {bitmap.width}x{bitmap.height}")
    return bitmap


def encode_image(image: Image.Image, format: Optional[str] = None) -> bytes:
    """Encode an image into a payload using the configured output format."""
    buffer = io.BytesIO()
    image.save(buffer, format=format or get_settings().output_format)
    return buffer.getvalue()


def load_image(image_path: Union[str, Path]) -> Image.Image:
    """Load an image file, honouring EXIF orientation."""
    path = Path(image_path)
    try:
        with Image.open(path) as image:
            image = ImageOps.exif_transpose(image)
            loaded = image.convert("RGBA")
    except FileNotFoundError:
        raise
    except (OSError, ValueError) as e:
        log.error(f"Failed to load image {image_path}: {e}")
        raise BitmapDecodeError(f"Failed to load image {image_path}: {e}") from e
    log.info(f"Loaded image: {path.name} ({loaded.width}x{loaded.height})")
    return loaded


def save_image(image: Image.Image, destination: Union[str, Path]) -> Path:
    path = Path(destination)
    path.parent.mkdir(parents=True, exist_ok=True)
    image.save(path, format="PNG")
    log.info(f"Saved PNG: {path.name}")
    return path
