"""Coverage maps for mask shapes using OpenCV anti-aliased drawing.

Each helper returns a uint8 coverage array clipped to the surface together
with its top-left origin, or None when the shape lies entirely off-surface.
Coordinates are canvas coordinates (pixel centers at +0.5).
"""

import math
from typing import NamedTuple, Optional, Sequence, Tuple

import cv2
import numpy as np

from .models import Point

SHIFT = 4
_SCALE = 1 << SHIFT


class Coverage(NamedTuple):
    mask: np.ndarray
    origin: Tuple[int, int]


def _region(xs, ys, pad: float, width: int, height: int) -> Optional[Tuple[int, int, int, int]]:
    x0 = max(int(math.floor(min(xs) - pad)), 0)
    y0 = max(int(math.floor(min(ys) - pad)), 0)
    x1 = min(int(math.ceil(max(xs) + pad)) + 1, width)
    y1 = min(int(math.ceil(max(ys) + pad)) + 1, height)
    if x1 <= x0 or y1 <= y0:
        return None
    return x0, y0, x1, y1


def _fixed(value: float, offset: int) -> int:
    return int(round((value - 0.5 - offset) * _SCALE))


def disc(center: Point, radius: float, surface_size: Tuple[int, int]) -> Optional[Coverage]:
    region = _region([center.x], [center.y], radius + 1, *surface_size)
    if region is None:
        return None
    x0, y0, x1, y1 = region
    mask = np.zeros((y1 - y0, x1 - x0), dtype=np.uint8)
    cv2.circle(
        mask,
        (_fixed(center.x, x0), _fixed(center.y, y0)),
        int(round(radius * _SCALE)),
        255,
        thickness=-1,
        lineType=cv2.LINE_AA,
        shift=SHIFT,
    )
    return Coverage(mask, (x0, y0))


def capsule(start: Point, end: Point, width: float, surface_size: Tuple[int, int]) -> Optional[Coverage]:
    """Line of the given width with round caps at both ends."""
    radius = width / 2
    region = _region([start.x, end.x], [start.y, end.y], radius + 1, *surface_size)
    if region is None:
        return None
    x0, y0, x1, y1 = region
    mask = np.zeros((y1 - y0, x1 - x0), dtype=np.uint8)
    a = (_fixed(start.x, x0), _fixed(start.y, y0))
    b = (_fixed(end.x, x0), _fixed(end.y, y0))
    cv2.line(mask, a, b, 255, thickness=max(1, int(round(width))), lineType=cv2.LINE_AA, shift=SHIFT)
    for point in (a, b):
        cv2.circle(mask, point, int(round(radius * _SCALE)), 255, thickness=-1, lineType=cv2.LINE_AA, shift=SHIFT)
    return Coverage(mask, (x0, y0))


def polygon(points: Sequence[Point], surface_size: Tuple[int, int]) -> Optional[Coverage]:
    """Filled, implicitly closed polygon."""
    if len(points) < 3:
        return None
    xs = [p.x for p in points]
    ys = [p.y for p in points]
    region = _region(xs, ys, 1, *surface_size)
    if region is None:
        return None
    x0, y0, x1, y1 = region
    mask = np.zeros((y1 - y0, x1 - x0), dtype=np.uint8)
    vertices = np.array([[_fixed(p.x, x0), _fixed(p.y, y0)] for p in points], dtype=np.int32)
    cv2.fillPoly(mask, [vertices.reshape(-1, 1, 2)], 255, lineType=cv2.LINE_AA, shift=SHIFT)
    return Coverage(mask, (x0, y0))
