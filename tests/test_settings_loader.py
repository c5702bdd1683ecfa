"""Tests for watermark settings documents"""

import json

import pytest

from manga_watermark.errors import BitmapDecodeError, SettingsLoadError, WatermarkError
from manga_watermark.io import decode_bitmap
from manga_watermark.models import ImageWatermarkConfig, PresetPosition, TextWatermarkConfig
from manga_watermark.settings_loader import load_watermark_settings, parse_watermark_settings

TEXT_YAML = """
enabled: true
config:
  type: text
  text: "(c) Studio"
  fontSize: 36
  opacity: 120
position:
  presetPosition: top-left
  rotation: -45
  marginLeft: 0
"""


class TestLoadWatermarkSettings:
    """Test loading from YAML and JSON files"""

    def test_yaml(self, tmp_path):
        path = tmp_path / "watermark.yaml"
        path.write_text(TEXT_YAML)

        settings = load_watermark_settings(path)

        assert isinstance(settings.config, TextWatermarkConfig)
        assert settings.config.text == "(c) Studio"
        assert settings.config.font_size == 36
        assert settings.config.opacity == 100
        assert settings.position.preset_position == PresetPosition.TOP_LEFT
        assert settings.position.rotation == 315
        assert settings.position.margin_left == 0

    def test_json_with_image_path(self, tmp_path, red_png_bytes):
        (tmp_path / "logo.png").write_bytes(red_png_bytes)
        path = tmp_path / "watermark.json"
        path.write_text(json.dumps({"config": {"type": "image", "imagePath": "logo.png", "tileEnabled": True}}))

        settings = load_watermark_settings(path)

        assert isinstance(settings.config, ImageWatermarkConfig)
        assert settings.config.tile_enabled is True
        assert decode_bitmap(settings.config.image_data).size == (20, 10)

    def test_missing_file(self, tmp_path):
        with pytest.raises(SettingsLoadError, match="not found"):
            load_watermark_settings(tmp_path / "nope.yaml")

    def test_missing_image(self, tmp_path):
        path = tmp_path / "watermark.yaml"
        path.write_text("config:\n  type: image\n  imagePath: missing.png\n")

        with pytest.raises(SettingsLoadError):
            load_watermark_settings(path)

    def test_malformed_yaml(self, tmp_path):
        path = tmp_path / "watermark.yaml"
        path.write_text("config: [unclosed\n")

        with pytest.raises(SettingsLoadError):
            load_watermark_settings(path)

    def test_malformed_json(self, tmp_path):
        path = tmp_path / "watermark.json"
        path.write_text("{not json")

        with pytest.raises(SettingsLoadError):
            load_watermark_settings(path)

    def test_invalid_utf8(self, tmp_path):
        path = tmp_path / "watermark.yaml"
        path.write_bytes(b"config:\n  text: \xff\xfe\n")

        with pytest.raises(SettingsLoadError, match="Malformed"):
            load_watermark_settings(path)

    def test_directory_path(self, tmp_path):
        with pytest.raises(SettingsLoadError, match="Cannot read"):
            load_watermark_settings(tmp_path)

    def test_not_a_mapping(self, tmp_path):
        path = tmp_path / "watermark.yaml"
        path.write_text("- just\n- a list\n")

        with pytest.raises(SettingsLoadError, match="mapping"):
            load_watermark_settings(path)


class TestParseWatermarkSettings:
    """Test schema validation"""

    def test_schema_error(self):
        with pytest.raises(SettingsLoadError):
            parse_watermark_settings({"config": {"type": "video"}})

    def test_is_watermark_error(self):
        assert issubclass(SettingsLoadError, WatermarkError)
        assert not issubclass(SettingsLoadError, BitmapDecodeError)
