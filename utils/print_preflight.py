"""
Print Preflight Validation.
Checks a computed print-page placement against production requirements.
"""
from dataclasses import dataclass
from typing import List, Dict

from constants import (
    UNITS_PER_INCH,
    MARGIN_UNITS,
    PAGE_WIDTH_UNITS,
    PAGE_HEIGHT_UNITS,
    PRINTABLE_WIDTH_UNITS,
    MIN_SAFE_MARGIN_IN,
    MIN_WIDTH_FILL_RATIO,
)

# Float slack for edge comparisons, in layout units (0.001")
_EPSILON = 0.1


@dataclass
class PreflightResult:
    ok: bool
    errors: List[str]
    warnings: List[str]
    metrics: Dict[str, float]

    def as_dict(self):
        return {
            "ok": self.ok,
            "errors": list(self.errors),
            "warnings": list(self.warnings),
            "metrics": dict(self.metrics),
        }


class PreflightError(Exception):
    """Raised when critical preflight checks fail."""
    def __init__(self, result: PreflightResult):
        self.result = result
        super().__init__(f"Preflight failed: {'; '.join(result.errors)}")


def validate_print_geometry(geometry, margin_units: float = MARGIN_UNITS) -> PreflightResult:
    """
    Validate a PrintGeometry placement.

    Args:
        geometry: PrintGeometry from services.printing.print_layout
        margin_units: Page margin the placement was computed with

    Returns:
        PreflightResult: Validation status and messages
    """
    errors = []
    warnings = []
    metrics = {}

    # 1. Safe Margin (Critical)
    min_margin_units = MIN_SAFE_MARGIN_IN * UNITS_PER_INCH
    if margin_units < min_margin_units - _EPSILON:
        errors.append(
            f"Safe margin too small: {margin_units / UNITS_PER_INCH:.3f}\" (min {MIN_SAFE_MARGIN_IN:.3f}\")"
        )
    metrics['margin_in'] = margin_units / UNITS_PER_INCH

    # 2. Content inside the printable box (Critical)
    right_edge = geometry.offset_x + geometry.scaled_width
    bottom_edge = geometry.offset_y + geometry.scaled_height
    if geometry.offset_x < margin_units - _EPSILON or right_edge > PAGE_WIDTH_UNITS - margin_units + _EPSILON:
        errors.append(
            f"Content exceeds horizontal margins: {geometry.offset_x:.2f}..{right_edge:.2f}"
        )
    if geometry.offset_y < margin_units - _EPSILON or bottom_edge > PAGE_HEIGHT_UNITS - margin_units + _EPSILON:
        errors.append(
            f"Content exceeds vertical margins: {geometry.offset_y:.2f}..{bottom_edge:.2f}"
        )

    # 3. Width fill (Warning only)
    fill = geometry.scaled_width / PRINTABLE_WIDTH_UNITS
    if fill < MIN_WIDTH_FILL_RATIO:
        warnings.append(
            f"Content fills only {fill:.0%} of the printable width (tall source artwork?)"
        )
    metrics['width_fill'] = fill
    metrics['scale'] = geometry.scale
    metrics['content_width_in'] = geometry.scaled_width / UNITS_PER_INCH
    metrics['content_height_in'] = geometry.scaled_height / UNITS_PER_INCH

    return PreflightResult(
        ok=len(errors) == 0,
        errors=errors,
        warnings=warnings,
        metrics=metrics
    )
