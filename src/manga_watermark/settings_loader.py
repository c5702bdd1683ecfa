"""Watermark settings document loader with validation."""

import json
from pathlib import Path
from typing import Any, Dict, Union

import yaml
from pydantic import ValidationError

from .errors import SettingsLoadError
from .io import to_data_url
from .models import WatermarkSettings


def parse_watermark_settings(data: Dict[str, Any]) -> WatermarkSettings:
    """
    Validate a settings mapping (camelCase or snake_case keys).

    Raises:
        SettingsLoadError: If the mapping does not match the schema.
    """
    try:
        return WatermarkSettings.model_validate(data)
    except ValidationError as e:
        raise SettingsLoadError(f"Invalid watermark settings: {e}") from e


def load_watermark_settings(config_path: Union[str, Path]) -> WatermarkSettings:
    """
    Load watermark settings from a YAML or JSON file.

    Args:
        config_path: Path to the settings document. ``.json`` files are parsed
            as JSON, anything else as YAML.

    Returns:
        Validated WatermarkSettings object.

    Raises:
        SettingsLoadError: If the file is missing, malformed or fails validation.
    """
    path = Path(config_path)
    try:
        with open(path, "r", encoding="utf-8") as f:
            if path.suffix.lower() == ".json":
                data = json.load(f)
            else:
                data = yaml.safe_load(f)
    except FileNotFoundError as e:
        raise SettingsLoadError(f"Watermark settings file not found: {path}") from e
    except (yaml.YAMLError, json.JSONDecodeError, UnicodeDecodeError) as e:
        raise SettingsLoadError(f"Malformed watermark settings file {path}: {e}") from e
    except OSError as e:
        raise SettingsLoadError(f"Cannot read watermark settings file {path}: {e}") from e

    if not isinstance(data, dict):
        raise SettingsLoadError(f"Watermark settings file {path} must contain a mapping")

    # Image watermarks may reference a bitmap file instead of inline data
    config = data.get("config")
    if isinstance(config, dict):
        image_path = config.pop("imagePath", None) or config.pop("image_path", None)
        if image_path:
            config["imageData"] = _inline_image(path.parent / image_path)

    return parse_watermark_settings(data)


def _inline_image(image_path: Path) -> str:
    try:
        payload = image_path.read_bytes()
    except OSError as e:
        raise SettingsLoadError(f"Watermark image not found: {image_path}") from e
    return to_data_url(payload)
