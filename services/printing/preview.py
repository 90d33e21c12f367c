"""
On-screen preview geometry for the print page: zoom-to-fit and ruler ticks.

Rulers are a pure rendering of the zoom factor. Nothing here is cached; the
editor recomputes them on every zoom change.
"""
from dataclasses import dataclass
from typing import List, Optional

import config
from constants import PAGE_WIDTH_IN, PAGE_HEIGHT_IN, PAGE_WIDTH_UNITS, UNITS_PER_INCH


@dataclass(frozen=True)
class RulerTick:
    index: int
    offset_px: float
    length_px: float
    label: str

    def as_dict(self):
        return {
            "index": self.index,
            "offset": self.offset_px,
            "length": self.length_px,
            "label": self.label,
        }


@dataclass(frozen=True)
class Rulers:
    zoom: float
    bottom: List[RulerTick]
    right: List[RulerTick]

    def as_dict(self):
        return {
            "zoom": self.zoom,
            "bottom": [t.as_dict() for t in self.bottom],
            "right": [t.as_dict() for t in self.right],
        }


def clamp_zoom(zoom: float, zoom_min: Optional[float] = None, zoom_max: Optional[float] = None) -> float:
    lo = config.PREVIEW_ZOOM_MIN if zoom_min is None else zoom_min
    hi = config.PREVIEW_ZOOM_MAX if zoom_max is None else zoom_max
    return max(lo, min(hi, zoom))


def zoom_to_fit(available_width: float) -> float:
    """
    Initial zoom for a viewport `available_width` pixels wide.
    1200px -> 1200 / 3500 ~= 0.343.
    """
    return clamp_zoom(available_width / PAGE_WIDTH_UNITS)


def step_zoom(zoom: float, steps: int = 1) -> float:
    """Additive zoom step (negative `steps` zooms out), clamped to the bounds."""
    return clamp_zoom(round(zoom + steps * config.PREVIEW_ZOOM_STEP, 6))


def _ticks(count: int, zoom: float) -> List[RulerTick]:
    size = UNITS_PER_INCH * zoom
    return [
        RulerTick(index=i, offset_px=i * size, length_px=size, label=str(i + 1))
        for i in range(count)
    ]


def ruler_ticks(zoom: float) -> Rulers:
    """One tick per inch: bottom ruler spans the page width, right ruler the height."""
    return Rulers(
        zoom=zoom,
        bottom=_ticks(PAGE_WIDTH_IN, zoom),
        right=_ticks(PAGE_HEIGHT_IN, zoom),
    )
