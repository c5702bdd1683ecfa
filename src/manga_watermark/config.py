"""Configuration settings for the watermark engine"""

from functools import lru_cache
from pathlib import Path
from typing import List, Optional, Tuple

from pydantic import Field
from pydantic_settings import BaseSettings, SettingsConfigDict

from .models import MASK_COLOR


class Settings(BaseSettings):
    """Engine settings loaded from the environment (``MANGA_WATERMARK_*``)."""

    # Fonts
    font_dirs: List[Path] = Field(
        default_factory=lambda: [
            Path("/usr/share/fonts"),
            Path("/usr/local/share/fonts"),
            Path("~/.fonts").expanduser(),
            Path("C:/Windows/Fonts"),
            Path("/Library/Fonts"),
            Path("/System/Library/Fonts"),
        ],
        description="Directories searched for TrueType fonts",
    )
    default_font_family: str = Field("DejaVuSans", description="Font used when a family cannot be found")

    # Mask drawing
    mask_color: Tuple[int, int, int, int] = Field(MASK_COLOR, description="RGBA paint color for masks")
    default_brush_size: int = Field(25, description="Initial brush size in pixels")

    # Output
    output_format: str = Field("PNG", description="Encoding used for surfaces and composited images")

    # Logging
    log_level: str = Field("INFO", description="Logging level")
    log_file: Optional[str] = Field(None, description="Optional log file path")

    model_config = SettingsConfigDict(
        env_file=".env",
        env_prefix="MANGA_WATERMARK_",
        case_sensitive=False,
        extra="ignore",
    )


@lru_cache(maxsize=1)
def get_settings() -> Settings:
    return Settings()
