"""
Print Page Layout for rendered calendars.

Takes the SVG produced by the calendar renderer (any viewBox) and wraps it in
a fixed 35" x 23" page:
1. Uniform scale-to-fit inside the margin box (aspect ratio never distorted).
2. Horizontal centering within the margin box.
3. Top alignment; vertical slack collects at the bottom of the page so
   multi-page batches line up at the top edge.

Everything here is pure: no I/O, same input gives the same bytes out.
"""
import logging
import re
from dataclasses import dataclass
from typing import Optional, Tuple

from reportlab.lib.units import inch

from constants import (
    PAGE_WIDTH_IN,
    PAGE_HEIGHT_IN,
    PAGE_WIDTH_UNITS,
    PAGE_HEIGHT_UNITS,
    MARGIN_UNITS,
    PRINTABLE_WIDTH_UNITS,
    PRINTABLE_HEIGHT_UNITS,
)

logger = logging.getLogger(__name__)

_NUMBER = r"[-+]?(?:\d+\.?\d*|\.\d+)(?:[eE][-+]?\d+)?"
_VIEWBOX_RE = re.compile(
    r"""viewBox\s*=\s*["']\s*({n})[\s,]+({n})[\s,]+({n})[\s,]+({n})\s*["']""".format(n=_NUMBER)
)
_XML_PROLOG_RE = re.compile(r"<\?xml[^?]*\?>\s*")
_OPEN_SVG_RE = re.compile(r"<svg\b[^>]*>")
_CLOSE_SVG_RE = re.compile(r"</svg>\s*$")


@dataclass(frozen=True)
class ViewBox:
    x: float
    y: float
    width: float
    height: float


@dataclass(frozen=True)
class PrintGeometry:
    """Placement of the source content on the print page, in layout units."""
    viewbox: ViewBox
    scale: float
    scaled_width: float
    scaled_height: float
    offset_x: float
    offset_y: float

    def as_dict(self):
        return {
            "viewBox": [self.viewbox.x, self.viewbox.y, self.viewbox.width, self.viewbox.height],
            "scale": self.scale,
            "scaledWidth": self.scaled_width,
            "scaledHeight": self.scaled_height,
            "offsetX": self.offset_x,
            "offsetY": self.offset_y,
            "pageWidth": PAGE_WIDTH_UNITS,
            "pageHeight": PAGE_HEIGHT_UNITS,
        }


def parse_viewbox(svg: str) -> Optional[ViewBox]:
    """
    Find the first viewBox in the document.
    Returns None when there is none, or when width/height are not positive.
    """
    if not svg:
        return None
    match = _VIEWBOX_RE.search(svg)
    if not match:
        return None
    x, y, w, h = (float(v) for v in match.groups())
    if w <= 0 or h <= 0:
        return None
    return ViewBox(x, y, w, h)


def compute_print_geometry(viewbox: ViewBox) -> PrintGeometry:
    scale = min(PRINTABLE_WIDTH_UNITS / viewbox.width, PRINTABLE_HEIGHT_UNITS / viewbox.height)

    scaled_width = viewbox.width * scale
    scaled_height = viewbox.height * scale

    offset_x = MARGIN_UNITS + (PRINTABLE_WIDTH_UNITS - scaled_width) / 2
    offset_y = MARGIN_UNITS  # top-aligned

    return PrintGeometry(
        viewbox=viewbox,
        scale=scale,
        scaled_width=scaled_width,
        scaled_height=scaled_height,
        offset_x=offset_x,
        offset_y=offset_y,
    )


def page_size_points() -> Tuple[float, float]:
    """Physical page size in PDF points, for whatever converts the page to PDF."""
    return (PAGE_WIDTH_IN * inch, PAGE_HEIGHT_IN * inch)


def extract_inner_content(svg: str) -> str:
    """Strip the XML prolog and the outermost <svg> wrapper, keeping everything inside."""
    cleaned = _XML_PROLOG_RE.sub("", svg, count=1)
    cleaned = _OPEN_SVG_RE.sub("", cleaned, count=1)
    return _CLOSE_SVG_RE.sub("", cleaned, count=1)


def _fmt(value: float) -> str:
    text = f"{value:.2f}".rstrip("0").rstrip(".")
    return "0" if text == "-0" else text


def _group_transform(geometry: PrintGeometry) -> str:
    transform = f"translate({geometry.offset_x:.2f}, {geometry.offset_y:.2f}) scale({geometry.scale:.6f})"
    vb = geometry.viewbox
    if vb.x != 0 or vb.y != 0:
        # Move the viewBox origin to (0, 0) before scaling
        transform += f" translate({_fmt(-vb.x)}, {_fmt(-vb.y)})"
    return transform


def wrap_svg_for_print(svg: str) -> str:
    """
    Wrap a rendered calendar SVG in a fixed-size print page.

    Returns the input unchanged (same string) when it has no usable viewBox.
    """
    viewbox = parse_viewbox(svg)
    if viewbox is None:
        logger.warning("[PrintLayout] No usable viewBox in SVG; returning it without margins")
        return svg

    geometry = compute_print_geometry(viewbox)
    inner = extract_inner_content(svg)

    return (
        '<?xml version="1.0" encoding="UTF-8"?>\n'
        '<svg xmlns="http://www.w3.org/2000/svg" xmlns:xlink="http://www.w3.org/1999/xlink" '
        f'width="{PAGE_WIDTH_UNITS:.0f}" height="{PAGE_HEIGHT_UNITS:.0f}" '
        f'viewBox="0 0 {PAGE_WIDTH_UNITS:.0f} {PAGE_HEIGHT_UNITS:.0f}">\n'
        f'  <rect width="{PAGE_WIDTH_UNITS:.0f}" height="{PAGE_HEIGHT_UNITS:.0f}" fill="white"/>\n'
        f'  <g transform="{_group_transform(geometry)}">\n'
        f"{inner}"
        "\n  </g>\n"
        "</svg>"
    )
