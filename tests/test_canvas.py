"""Tests for the Pillow-backed drawing context"""

import math

import numpy as np
import pytest
from PIL import Image

from manga_watermark.canvas import CanvasContext
from manga_watermark.text_metrics import FontSpec


@pytest.fixture
def page():
    return Image.new("RGB", (100, 100), (255, 255, 255))


class TestCanvasState:
    """Test save/restore and transform bookkeeping"""

    def test_works_on_a_copy(self, page):
        ctx = CanvasContext(page)
        ctx.draw_image(Image.new("RGBA", (10, 10), (0, 0, 0, 255)), 0, 0)

        assert page.getpixel((5, 5)) == (255, 255, 255)
        assert ctx.to_image().getpixel((5, 5)) == (0, 0, 0, 255)

    def test_restore_resets_transform_and_styles(self, page):
        ctx = CanvasContext(page)
        ctx.save()
        ctx.translate(10, 20)
        ctx.rotate(math.pi / 4)
        ctx.global_alpha = 0.25
        ctx.fill_style = "#ff0000"
        ctx.restore()

        assert np.allclose(ctx.transform, np.identity(3))
        assert ctx.global_alpha == 1.0
        assert ctx.fill_style == "#000000"

    def test_restore_without_save_is_ignored(self, page):
        ctx = CanvasContext(page)
        ctx.restore()
        assert np.allclose(ctx.transform, np.identity(3))

    @pytest.mark.parametrize("value,expected", [(-1, 0.0), (0.4, 0.4), (3, 1.0)])
    def test_global_alpha_clamped(self, page, value, expected):
        ctx = CanvasContext(page)
        ctx.global_alpha = value
        assert ctx.global_alpha == expected


class TestDrawImage:
    """Test bitmap compositing"""

    def test_places_bitmap(self, page):
        ctx = CanvasContext(page)
        ctx.draw_image(Image.new("RGBA", (20, 10), (255, 0, 0, 255)), 30, 40)
        result = ctx.to_image()

        assert result.getpixel((40, 45)) == (255, 0, 0, 255)
        assert result.getpixel((10, 10)) == (255, 255, 255, 255)
        assert result.getpixel((40, 60)) == (255, 255, 255, 255)

    def test_scales_to_requested_size(self, page):
        ctx = CanvasContext(page)
        ctx.draw_image(Image.new("RGBA", (10, 10), (0, 0, 255, 255)), 0, 0, 40, 20)
        result = ctx.to_image()

        assert result.getpixel((15, 8)) == (0, 0, 255, 255)
        assert result.getpixel((15, 30)) == (255, 255, 255, 255)

    def test_global_alpha_blends(self, page):
        ctx = CanvasContext(page)
        ctx.global_alpha = 0.5
        ctx.draw_image(Image.new("RGBA", (20, 20), (255, 0, 0, 255)), 40, 40)
        r, g, b, a = ctx.to_image().getpixel((50, 50))

        assert r == 255
        assert abs(g - 128) <= 2
        assert abs(b - 128) <= 2
        assert a == 255

    def test_rotation_about_center(self, page):
        """A horizontal bar turned 90 degrees about its center becomes vertical"""
        ctx = CanvasContext(page)
        ctx.translate(50, 50)
        ctx.rotate(math.pi / 2)
        ctx.translate(-50, -50)
        ctx.draw_image(Image.new("RGBA", (40, 10), (255, 0, 0, 255)), 30, 45)
        result = ctx.to_image()

        assert result.getpixel((50, 35)) == (255, 0, 0, 255)
        assert result.getpixel((50, 65)) == (255, 0, 0, 255)
        assert result.getpixel((35, 50)) == (255, 255, 255, 255)

    def test_off_canvas_is_ignored(self, page):
        ctx = CanvasContext(page)
        ctx.draw_image(Image.new("RGBA", (10, 10), (255, 0, 0, 255)), 500, 500)
        assert ctx.to_image().getcolors() == [(10000, (255, 255, 255, 255))]


class TestText:
    """Test text measuring and drawing"""

    def test_measure_grows_with_text(self, page):
        ctx = CanvasContext(page)
        ctx.font = FontSpec("DejaVu Sans", 20)

        short = ctx.measure_text("ab")
        long = ctx.measure_text("abcdef")

        assert 0 < short.width < long.width

    def test_fill_text_draws_ink(self, page):
        ctx = CanvasContext(page)
        ctx.font = FontSpec("DejaVu Sans", 32)
        ctx.text_baseline = "top"
        ctx.fill_style = "#000000"
        ctx.fill_text("Hi", 10, 10)

        region = ctx.to_image().crop((0, 0, 100, 60)).convert("L")
        assert region.getextrema()[0] < 100
