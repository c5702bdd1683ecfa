"""Tests for font loading and text measurement"""

from manga_watermark.models import Dimensions, TextWatermarkConfig
from manga_watermark.text_metrics import (
    FontSpec,
    TextMetrics,
    font_metrics,
    load_font,
    measure_text,
    text_watermark_dimensions,
)


def test_font_spec_str():
    assert str(FontSpec("Arial", 24)) == "normal 24px Arial"
    assert str(FontSpec("Noto Sans", 12.5, "bold")) == "bold 12.5px Noto Sans"


def test_measure_text_sets_font_and_restores(mock_ctx):
    size = measure_text(mock_ctx, "Watermark", "Arial", 24, "bold")

    assert size == Dimensions(100, 16)
    assert mock_ctx.font == FontSpec("Arial", 24, "bold")
    assert [c[0] for c in mock_ctx.method_calls] == ["save", "measure_text", "restore"]


def test_measure_text_falls_back_to_font_size(mock_ctx):
    mock_ctx.measure_text.return_value = TextMetrics(width=0, ascent=0, descent=0)
    assert measure_text(mock_ctx, "", "Arial", 30, "normal") == Dimensions(0, 30)


def test_text_watermark_dimensions(mock_ctx):
    assert text_watermark_dimensions(mock_ctx, TextWatermarkConfig(text="x")) == Dimensions(100, 16)


def test_unknown_family_still_loads():
    font = load_font("Definitely Not A Font", 20)
    metrics = font_metrics(font, "Hello")

    assert metrics.width > 0
    assert metrics.ascent > 0


def test_empty_text_metrics():
    assert font_metrics(load_font("Arial", 12), "") == TextMetrics(0.0, 0.0, 0.0)
