"""
Evidence geometry: normalized regions -> overlay boxes and zoom focus points.

All outputs are percentages so any renderer (CSS-like or a character grid)
can place them against its own image box.
"""
import math
from dataclasses import dataclass
from typing import Any, Optional, Tuple

from .models import Region

TAMPERED_DEMO_MARKER = "scan_tempered"
TAMPERED_DEMO_REGION = Region(x=0.58, y=0.22, w=0.22, h=0.22)
DEFAULT_DEMO_REGION = Region(x=0.52, y=0.28, w=0.2, h=0.2)

DEFAULT_MAGNIFICATION = 260


@dataclass(frozen=True)
class RectBox:
    left: float
    top: float
    width: float
    height: float


@dataclass(frozen=True)
class ZoomFocus:
    x: float
    y: float
    magnification: float


@dataclass(frozen=True)
class Annotation:
    rect_box: RectBox
    zoom_focus: ZoomFocus
    image_ref: Optional[Any] = None


def clamp01(value: float) -> float:
    return min(1.0, max(0.0, value))


def clamp_region(region: Region) -> Region:
    return Region(
        x=clamp01(region.x),
        y=clamp01(region.y),
        w=clamp01(region.w),
        h=clamp01(region.h),
    )


def demo_region(file_name: Optional[str]) -> Region:
    if TAMPERED_DEMO_MARKER in (file_name or "").lower():
        return TAMPERED_DEMO_REGION
    return DEFAULT_DEMO_REGION


def annotate(region: Region, image_ref: Any = None, magnification: float = DEFAULT_MAGNIFICATION) -> Annotation:
    r = clamp_region(region)
    rect = RectBox(left=r.x * 100, top=r.y * 100, width=r.w * 100, height=r.h * 100)
    cx = clamp01(r.x + r.w / 2)
    cy = clamp01(r.y + r.h / 2)
    focus = ZoomFocus(x=cx * 100, y=cy * 100, magnification=magnification)
    return Annotation(rect_box=rect, zoom_focus=focus, image_ref=image_ref)


def _cell(percent: float, cells: int) -> int:
    # 0.58 * 100 is 57.99999999999999
    return math.floor(round(percent / 100 * cells, 6))


def rasterize(annotation: Annotation, cols: int, rows: int) -> Tuple[int, int, int, int]:
    """
    Map the percentage box onto a cols x rows character grid.
    Returns inclusive (col0, row0, col1, row1); the box is at least one cell.
    """
    if cols <= 0 or rows <= 0:
        raise ValueError("grid must have at least one cell")
    box = annotation.rect_box
    col0 = min(cols - 1, _cell(box.left, cols))
    row0 = min(rows - 1, _cell(box.top, rows))
    col1 = min(cols - 1, max(col0, int(round((box.left + box.width) / 100 * cols)) - 1))
    row1 = min(rows - 1, max(row0, int(round((box.top + box.height) / 100 * rows)) - 1))
    return col0, row0, col1, row1
