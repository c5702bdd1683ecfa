"""Stroke-based mask editor used to scope AI edits to a region of an image"""

from typing import List, Optional, Tuple

from PIL import Image

from . import exporter, rasterize
from .config import get_settings
from .errors import MaskEditorClosedError
from .history import MAX_HISTORY_SIZE, MaskHistory
from .logger import log
from .models import Dimensions, MaskTool, MaskToolType, Point, clamp_brush_size
from .surface import BlendMode, RasterSurface


class MaskEditor:
    """Draws brush, eraser, rectangle and lasso masks onto an owned surface.

    One editor is created per edited image and closed when the mask tool is
    dismissed. Drawing follows ``start_draw`` -> ``continue_draw``* ->
    ``end_draw``; rectangles are committed in a single ``draw_rectangle``
    call. Every completed edit is committed to the undo history.
    """

    def __init__(
        self,
        width: int,
        height: int,
        tool: Optional[MaskTool] = None,
        color: Optional[Tuple[int, int, int, int]] = None,
        history_size: int = MAX_HISTORY_SIZE,
    ):
        settings = get_settings()
        self._surface = RasterSurface(width, height)
        self._history = MaskHistory(self._surface, max_size=history_size)
        self._color = tuple(color or settings.mask_color)
        self._tool = tool or MaskTool(type=MaskToolType.BRUSH, size=settings.default_brush_size)
        self._closed = False

        self._drawing = False
        self._last_point: Optional[Point] = None
        self._lasso_points: List[Point] = []

        self.clear()
        self._history.commit()
        log.debug(f"Mask editor created for {width}x{height} image")

    def __enter__(self) -> "MaskEditor":
        return self

    def __exit__(self, exc_type, exc, tb) -> None:
        self.close()

    def close(self) -> None:
        """Discard history and reject any further use of the editor."""
        if self._closed:
            return
        self._history.discard()
        self._drawing = False
        self._lasso_points = []
        self._closed = True

    @property
    def closed(self) -> bool:
        return self._closed

    def _check_open(self) -> None:
        if self._closed:
            raise MaskEditorClosedError("Mask editor has been closed")

    # Tool state

    @property
    def dimensions(self) -> Dimensions:
        return self._surface.dimensions

    @property
    def tool(self) -> MaskTool:
        return self._tool

    def set_tool(self, tool: MaskTool) -> None:
        self._tool = MaskTool(type=tool.type, size=clamp_brush_size(tool.size))

    @property
    def brush_size(self) -> int:
        return self._tool.size

    def set_brush_size(self, size: float) -> None:
        self._tool = MaskTool(type=self._tool.type, size=clamp_brush_size(size))

    @property
    def is_drawing(self) -> bool:
        return self._drawing

    @property
    def lasso_points(self) -> Tuple[Point, ...]:
        """Points collected so far by an in-progress lasso, for outline preview."""
        return tuple(self._lasso_points)

    @property
    def surface(self) -> RasterSurface:
        return self._surface

    @property
    def _blend_mode(self) -> BlendMode:
        return BlendMode.ERASE if self._tool.type == MaskToolType.ERASER else BlendMode.PAINT

    def _is_stroke_tool(self) -> bool:
        return self._tool.type in (MaskToolType.BRUSH, MaskToolType.ERASER)

    # Drawing

    def start_draw(self, x: float, y: float) -> None:
        self._check_open()
        point = Point(x, y)
        self._drawing = True
        self._last_point = point

        if self._tool.type == MaskToolType.LASSO:
            self._lasso_points = [point]
        elif self._is_stroke_tool():
            self._stamp(rasterize.disc(point, self._tool.size / 2, self._surface_size()))

    def continue_draw(self, x: float, y: float) -> None:
        self._check_open()
        if not self._drawing:
            return
        point = Point(x, y)

        if self._tool.type == MaskToolType.LASSO:
            self._lasso_points.append(point)
        elif self._is_stroke_tool() and self._last_point is not None:
            # Capsule plus end disc so fast pointer moves leave no gaps
            self._stamp(rasterize.capsule(self._last_point, point, self._tool.size, self._surface_size()))
            self._stamp(rasterize.disc(point, self._tool.size / 2, self._surface_size()))

        self._last_point = point

    def end_draw(self) -> None:
        self._check_open()
        if not self._drawing:
            return

        if self._tool.type == MaskToolType.LASSO and len(self._lasso_points) > 2:
            self._stamp(rasterize.polygon(self._lasso_points, self._surface_size()), BlendMode.PAINT)

        self._drawing = False
        self._last_point = None
        self._lasso_points = []
        self._history.commit()

    def draw_rectangle(self, x1: float, y1: float, x2: float, y2: float) -> None:
        """Fill the rectangle spanned by two corners and commit it."""
        self._check_open()
        left = min(x1, x2)
        top = min(y1, y2)
        self._surface.fill_rect(left, top, abs(x2 - x1), abs(y2 - y1), self._color)
        self._history.commit()

    def _surface_size(self) -> Tuple[int, int]:
        return self._surface.width, self._surface.height

    def _stamp(self, coverage: Optional[rasterize.Coverage], mode: Optional[BlendMode] = None) -> None:
        if coverage is None:
            return
        self._surface.composite(coverage.mask, coverage.origin, self._color, mode or self._blend_mode)

    # History

    def undo(self) -> bool:
        self._check_open()
        return self._history.undo()

    def redo(self) -> bool:
        self._check_open()
        return self._history.redo()

    def can_undo(self) -> bool:
        return not self._closed and self._history.can_undo()

    def can_redo(self) -> bool:
        return not self._closed and self._history.can_redo()

    def history_info(self) -> Tuple[int, int]:
        """(cursor index, number of snapshots)"""
        return self._history.info()

    # Content

    def clear(self) -> None:
        """Wipe the mask without touching history."""
        self._check_open()
        self._surface.clear()

    def clear_with_history(self) -> None:
        self.clear()
        self._history.commit()

    def has_mask(self) -> bool:
        self._check_open()
        return self._surface.has_content()

    def to_image(self) -> Image.Image:
        self._check_open()
        return self._surface.to_image()

    def export_mask(self) -> bytes:
        self._check_open()
        return exporter.export_mask(self._surface)

    def export_binary_mask(self) -> bytes:
        self._check_open()
        return exporter.export_binary_mask(self._surface)
