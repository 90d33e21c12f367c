from flask import Blueprint, request, jsonify, current_app, Response

from config import PRINT_LAYOUT_RATE_LIMIT
from extensions import limiter
from services.printing.print_layout import (
    compute_print_geometry,
    page_size_points,
    parse_viewbox,
    wrap_svg_for_print,
)
from services.printing.preview import clamp_zoom, ruler_ticks, zoom_to_fit
from utils.print_preflight import validate_print_geometry

print_layout_bp = Blueprint('print_layout', __name__, url_prefix='/api/print-layout')


def _svg_body():
    """Raw SVG from the request body, or None when the body is empty/undecodable."""
    raw = request.get_data(cache=False)
    if not raw:
        return None
    try:
        return raw.decode("utf-8")
    except UnicodeDecodeError:
        return None


@print_layout_bp.route("", methods=["POST"])
@limiter.limit(PRINT_LAYOUT_RATE_LIMIT)
def render_print_page():
    """
    Wrap a rendered calendar SVG in the fixed-size print page.

    Body: raw SVG (image/svg+xml)
    Returns: print-page SVG. X-Print-Layout is 'applied', or 'passthrough'
    when the source had no usable viewBox and was returned unchanged.
    """
    svg = _svg_body()
    if svg is None:
        return jsonify({"error": "Request body must be a UTF-8 SVG document"}), 400

    viewbox = parse_viewbox(svg)
    page = wrap_svg_for_print(svg)

    resp = Response(page, mimetype="image/svg+xml")
    if viewbox is None:
        resp.headers["X-Print-Layout"] = "passthrough"
        return resp

    geometry = compute_print_geometry(viewbox)
    resp.headers["X-Print-Layout"] = "applied"
    resp.headers["X-Print-Scale"] = f"{geometry.scale:.6f}"
    resp.headers["X-Print-Offset"] = f"{geometry.offset_x:.2f},{geometry.offset_y:.2f}"
    return resp


@print_layout_bp.route("/geometry", methods=["POST"])
@limiter.limit(PRINT_LAYOUT_RATE_LIMIT)
def print_geometry():
    """
    Placement numbers and preflight for a rendered calendar SVG, without the page itself.
    """
    svg = _svg_body()
    if svg is None:
        return jsonify({"error": "Request body must be a UTF-8 SVG document"}), 400

    viewbox = parse_viewbox(svg)
    if viewbox is None:
        return jsonify({"error": "SVG has no usable viewBox", "layout": "passthrough"}), 422

    geometry = compute_print_geometry(viewbox)
    preflight = validate_print_geometry(geometry)
    if not preflight.ok:
        current_app.logger.warning(f"[PrintLayout] Preflight failed: {preflight.errors}")

    width_pt, height_pt = page_size_points()
    return jsonify({
        "geometry": geometry.as_dict(),
        "preflight": preflight.as_dict(),
        "pageSizePoints": [width_pt, height_pt],
    })


@print_layout_bp.route("/preview", methods=["GET"])
@limiter.limit(PRINT_LAYOUT_RATE_LIMIT)
def preview_geometry():
    """
    On-screen zoom and ruler ticks.

    Query Params:
      available_width (float): viewport width in px; computes zoom-to-fit
      zoom (float): explicit zoom, clamped to the configured bounds

    One of the two is required; zoom wins when both are given.
    """
    zoom = request.args.get('zoom', type=float)
    available_width = request.args.get('available_width', type=float)

    if zoom is not None:
        zoom = clamp_zoom(zoom)
    elif available_width is not None and available_width > 0:
        zoom = zoom_to_fit(available_width)
    else:
        return jsonify({"error": "Provide a positive available_width or a zoom"}), 400

    return jsonify({
        "zoom": zoom,
        "rulers": ruler_ticks(zoom).as_dict(),
    })
