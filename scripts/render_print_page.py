#!/usr/bin/env python3
"""
Convert a rendered calendar SVG into a print-ready page.

Usage:
    python scripts/render_print_page.py calendar.svg
    python scripts/render_print_page.py calendar.svg -o calendar_print.svg --geometry
"""
import os
import sys
import json
import argparse
import logging
from pathlib import Path
from typing import List, Optional

# Add parent directory to path for imports
sys.path.insert(0, os.path.dirname(os.path.dirname(os.path.abspath(__file__))))

from services.printing.print_layout import compute_print_geometry, parse_viewbox, wrap_svg_for_print
from utils.logger import configure_logging
from utils.print_preflight import validate_print_geometry

logger = logging.getLogger("scripts.render_print_page")


def default_output_path(source: Path) -> Path:
    return source.with_name(f"{source.stem}_print{source.suffix or '.svg'}")


def parse_args(argv: Optional[List[str]] = None) -> argparse.Namespace:
    p = argparse.ArgumentParser(description="Wrap a rendered calendar SVG in the 35x23in print page")
    p.add_argument("source", type=Path, help="Rendered calendar SVG")
    p.add_argument("-o", "--output", type=Path, help="Output path (default: <source>_print.svg)")
    p.add_argument("--geometry", action="store_true", help="Print placement and preflight as JSON")
    return p.parse_args(argv)


def main(argv: Optional[List[str]] = None) -> int:
    # stdout carries --geometry JSON
    configure_logging(stream=sys.stderr)
    args = parse_args(argv)

    if not args.source.is_file():
        logger.error(f"[PrintPage] Source not found: {args.source}")
        return 2

    svg = args.source.read_text(encoding="utf-8")
    output = args.output or default_output_path(args.source)
    output.write_text(wrap_svg_for_print(svg), encoding="utf-8")
    logger.info(f"[PrintPage] Wrote {output}")

    if args.geometry:
        viewbox = parse_viewbox(svg)
        if viewbox is None:
            sys.stdout.write(json.dumps({"layout": "passthrough"}) + "\n")
            return 0
        geometry = compute_print_geometry(viewbox)
        preflight = validate_print_geometry(geometry)
        sys.stdout.write(json.dumps({
            "geometry": geometry.as_dict(),
            "preflight": preflight.as_dict(),
        }, indent=2) + "\n")
        if not preflight.ok:
            return 1

    return 0


if __name__ == "__main__":
    sys.exit(main())
