"""
Design constants for the handle calculator.

This module centralizes the parameter defaults, editing constraints and
smart-default factors used by the calculator and validation modules.
Geometry-kernel constants (sample counts, fillet zone factors, reference
thickness) live beside the code that uses them and are re-exported here so
all tunables can be found in one place.

MODIFICATION GUIDELINES:
- Always include units in constant names (_MM, _DEG, _PERCENT)
- Constraints mirror the editor's slider ranges; keep them in sync with
  saved browser projects, which were clamped to the same ranges
"""

from dataclasses import dataclass
from typing import Dict

from ..core.cross_section import MIN_CORNER_SEGMENTS
from ..core.fillet import FILLET_EPSILON_MM, FILLET_ZONE_LENGTH_FACTOR, MAX_FILLET_ZONE_FRACTION
from ..core.handle import EXPORT_PROFILE_SEGMENTS, PREVIEW_PROFILE_SEGMENTS
from ..core.path import (
    CORNER_RADIUS_LIMIT_FACTOR,
    DEFAULT_VESSEL_BOTTOM_RADIUS_MM,
    DEFAULT_VESSEL_HEIGHT_MM,
    DEFAULT_VESSEL_TOP_RADIUS_MM,
    MAX_MATCHED_ARM_ANGLE_DEG,
)
from ..core.sweep import EXPORT_PATH_SEGMENTS, PREVIEW_PATH_SEGMENTS, REFERENCE_THICKNESS_MM

# =============================================================================
# Parameter constraints (editor slider ranges)
# =============================================================================


@dataclass(frozen=True)
class ParamConstraint:
    """Allowed range and step for one handle parameter."""
    min: float
    max: float
    step: float
    unit: str = "mm"


# Keyed by HandleParams field name
PARAM_CONSTRAINTS: Dict[str, ParamConstraint] = {
    "protrusion_mm": ParamConstraint(20, 80, 1),
    "handle_width_mm": ParamConstraint(15, 50, 1),
    "cross_section_width_mm": ParamConstraint(8, 30, 0.5),
    "cross_section_height_mm": ParamConstraint(8, 25, 0.5),
    "cross_section_corner_radius_mm": ParamConstraint(0, 10, 0.5),
    "top_attachment_height_mm": ParamConstraint(30, 120, 1),
    "bottom_attachment_height_mm": ParamConstraint(5, 80, 1),
    "fillet_radius_mm": ParamConstraint(0, 20, 0.1),
    "upper_corner_radius_mm": ParamConstraint(5, 40, 1),
    "lower_corner_radius_mm": ParamConstraint(5, 40, 1),
    "vertical_arm_angle_deg": ParamConstraint(-30, 30, 1, unit="°"),
}

# =============================================================================
# Smart defaults (handle proportions derived from the vessel)
# =============================================================================

# Protrusion as a fraction of the vessel top diameter
SMART_PROTRUSION_FACTOR: float = 0.4

# Attachment heights as fractions of the vessel height
SMART_TOP_ATTACHMENT_FACTOR: float = 0.9
SMART_BOTTOM_ATTACHMENT_FACTOR: float = 0.15

# =============================================================================
# Reference vessel wall used by the editor before a mug is imported
# =============================================================================

DEFAULT_VESSEL_WALL_THICKNESS_MM: float = 2.5
DEFAULT_VESSEL_WALL_ANGLE_DEG: float = 15.0

__all__ = [
    "ParamConstraint",
    "PARAM_CONSTRAINTS",
    "SMART_PROTRUSION_FACTOR",
    "SMART_TOP_ATTACHMENT_FACTOR",
    "SMART_BOTTOM_ATTACHMENT_FACTOR",
    "DEFAULT_VESSEL_WALL_THICKNESS_MM",
    "DEFAULT_VESSEL_WALL_ANGLE_DEG",
    # Kernel constants
    "MIN_CORNER_SEGMENTS",
    "FILLET_EPSILON_MM",
    "FILLET_ZONE_LENGTH_FACTOR",
    "MAX_FILLET_ZONE_FRACTION",
    "EXPORT_PROFILE_SEGMENTS",
    "PREVIEW_PROFILE_SEGMENTS",
    "EXPORT_PATH_SEGMENTS",
    "PREVIEW_PATH_SEGMENTS",
    "REFERENCE_THICKNESS_MM",
    "CORNER_RADIUS_LIMIT_FACTOR",
    "DEFAULT_VESSEL_TOP_RADIUS_MM",
    "DEFAULT_VESSEL_BOTTOM_RADIUS_MM",
    "DEFAULT_VESSEL_HEIGHT_MM",
    "MAX_MATCHED_ARM_ANGLE_DEG",
]
