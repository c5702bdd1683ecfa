"""Pydantic models and geometry value types for watermarks and masks."""

import math
from enum import Enum
from typing import Annotated, List, Literal, NamedTuple, Tuple, Union

from PIL import ImageColor
from pydantic import AfterValidator, BaseModel, ConfigDict, Field, field_validator
from pydantic.alias_generators import to_camel

MIN_BRUSH_SIZE = 5
MAX_BRUSH_SIZE = 100
MASK_COLOR = (255, 0, 0, 128)


class Point(NamedTuple):
    x: float
    y: float


class Dimensions(NamedTuple):
    width: float
    height: float


class Margins(NamedTuple):
    top: float = 0
    right: float = 0
    bottom: float = 0
    left: float = 0


class WatermarkBounds(NamedTuple):
    """Un-rotated watermark footprint used for pointer hit testing."""

    x: float
    y: float
    width: float
    height: float


class TileCount(NamedTuple):
    tiles_x: int
    tiles_y: int
    total_tiles: int


class PresetPosition(str, Enum):
    """Named grid cells plus ``custom`` for an explicit pixel offset."""

    TOP_LEFT = "top-left"
    TOP_CENTER = "top-center"
    TOP_RIGHT = "top-right"
    MIDDLE_LEFT = "middle-left"
    CENTER = "center"
    MIDDLE_RIGHT = "middle-right"
    BOTTOM_LEFT = "bottom-left"
    BOTTOM_CENTER = "bottom-center"
    BOTTOM_RIGHT = "bottom-right"
    CUSTOM = "custom"


PRESET_POSITIONS: List[PresetPosition] = [p for p in PresetPosition if p is not PresetPosition.CUSTOM]


class MaskToolType(str, Enum):
    BRUSH = "brush"
    RECTANGLE = "rectangle"
    LASSO = "lasso"
    ERASER = "eraser"


def parse_color(color: str) -> Tuple[int, int, int, int]:
    """Parse a CSS-style color string into an RGBA tuple."""
    return ImageColor.getcolor(color, "RGBA")


def clamp_opacity(value: float) -> float:
    return max(0.0, min(100.0, float(value)))


def normalize_rotation(value: float) -> float:
    """Fold a rotation in degrees into [0, 360]; in-range values are kept as is."""
    value = float(value)
    if 0 <= value <= 360:
        return value
    return value % 360


def clamp_brush_size(size: float) -> int:
    """Round half up and clamp into [MIN_BRUSH_SIZE, MAX_BRUSH_SIZE]."""
    return max(MIN_BRUSH_SIZE, min(MAX_BRUSH_SIZE, int(math.floor(size + 0.5))))


class _CamelModel(BaseModel):
    model_config = ConfigDict(alias_generator=to_camel, populate_by_name=True)


def _check_color(value: str) -> str:
    try:
        parse_color(value)
    except ValueError as exc:
        raise ValueError(f"Unsupported color: {value!r}") from exc
    return value


ColorStr = Annotated[str, AfterValidator(_check_color)]


class TextWatermarkConfig(_CamelModel):
    """Text watermark appearance."""

    type: Literal["text"] = "text"
    text: str = Field("Watermark", description="Watermark text")
    font_family: str = Field("Arial", description="Font family name")
    font_size: float = Field(24, gt=0, description="Font size in pixels")
    font_weight: Literal["normal", "bold"] = Field("normal", description="Font weight")
    color: ColorStr = Field("#000000", description="Fill color")
    opacity: float = Field(50, description="Opacity 0-100, clamped")
    outline_enabled: bool = Field(False, description="Stroke the glyphs under the fill")
    outline_color: ColorStr = Field("#ffffff", description="Outline color")
    outline_width: float = Field(2, ge=1, description="Outline width in pixels")

    @field_validator("opacity")
    @classmethod
    def clamp_opacity_value(cls, v):
        return clamp_opacity(v)


class ImageWatermarkConfig(_CamelModel):
    """Bitmap watermark appearance and tiling."""

    type: Literal["image"] = "image"
    image_data: str = Field("", description="Encoded bitmap, base64 data URL")
    scale: float = Field(1, gt=0, description="Scale factor applied to the bitmap")
    opacity: float = Field(50, description="Opacity 0-100, clamped")
    tile_enabled: bool = Field(False, description="Repeat the bitmap across the canvas")
    tile_spacing_x: float = Field(50, ge=0, description="Horizontal gap between tiles")
    tile_spacing_y: float = Field(50, ge=0, description="Vertical gap between tiles")

    @field_validator("opacity")
    @classmethod
    def clamp_opacity_value(cls, v):
        return clamp_opacity(v)


WatermarkConfig = Union[TextWatermarkConfig, ImageWatermarkConfig]


class WatermarkPosition(_CamelModel):
    """Placement of the watermark footprint on the canvas."""

    preset_position: PresetPosition = Field(PresetPosition.BOTTOM_RIGHT)
    offset_x: float = Field(0, description="Horizontal offset in pixels")
    offset_y: float = Field(0, description="Vertical offset in pixels")
    rotation: float = Field(0, description="Rotation in degrees, normalized to [0, 360]")
    margin_top: float = Field(10, ge=0)
    margin_right: float = Field(10, ge=0)
    margin_bottom: float = Field(10, ge=0)
    margin_left: float = Field(10, ge=0)

    @field_validator("rotation")
    @classmethod
    def fold_rotation(cls, v):
        return normalize_rotation(v)

    @property
    def margins(self) -> Margins:
        return Margins(
            top=self.margin_top,
            right=self.margin_right,
            bottom=self.margin_bottom,
            left=self.margin_left,
        )


class WatermarkSettings(_CamelModel):
    """Complete watermark description handed to the compositor."""

    config: WatermarkConfig = Field(default_factory=TextWatermarkConfig, discriminator="type")
    position: WatermarkPosition = Field(default_factory=WatermarkPosition)
    enabled: bool = True


class MaskTool(BaseModel):
    model_config = ConfigDict(frozen=True)

    type: MaskToolType = MaskToolType.BRUSH
    size: int = 25

    @field_validator("size", mode="before")
    @classmethod
    def clamp_size(cls, v):
        return clamp_brush_size(v)
