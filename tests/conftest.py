from __future__ import annotations

import io
from typing import Generator
from unittest.mock import MagicMock

import pytest
from PIL import Image

from manga_watermark.config import get_settings
from manga_watermark.text_metrics import TextMetrics


@pytest.fixture(autouse=True)
def reset_settings() -> Generator[None, None, None]:
    get_settings.cache_clear()
    yield
    get_settings.cache_clear()


@pytest.fixture
def mock_ctx() -> MagicMock:
    """Drawing context that records calls and reports a 100px wide text box."""
    ctx = MagicMock()
    ctx.measure_text.return_value = TextMetrics(width=100, ascent=12, descent=4)
    return ctx


@pytest.fixture
def white_page() -> Image.Image:
    return Image.new("RGB", (800, 600), color=(255, 255, 255))


@pytest.fixture
def red_bitmap() -> Image.Image:
    return Image.new("RGBA", (20, 10), (255, 0, 0, 255))


def _to_png_bytes(image: Image.Image) -> bytes:
    buffer = io.BytesIO()
    image.save(buffer, format="PNG")
    return buffer.getvalue()


@pytest.fixture
def red_png_bytes(red_bitmap) -> bytes:
    return _to_png_bytes(red_bitmap)
