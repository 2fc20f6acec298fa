"""
Handle Calculator - Core Calculations

Derives handle parameters from a reference vessel: smart defaults for a
freshly imported mug, back-arm tilt matched to the wall taper, and the
derived values shown alongside the parameters.

All dimensions in millimetres, angles in degrees.
"""

from dataclasses import dataclass
from typing import Optional

from ..core.path import (
    DEFAULT_VESSEL_BOTTOM_RADIUS_MM,
    DEFAULT_VESSEL_HEIGHT_MM,
    DEFAULT_VESSEL_TOP_RADIUS_MM,
    matched_arm_angle_deg,
    radius_at_height,
    vessel_wall_angle_deg,
)
from ..io.loaders import HandleParams, VesselReference
from ..io.vessel_import import round_half_up
from .constants import (
    DEFAULT_VESSEL_WALL_THICKNESS_MM,
    PARAM_CONSTRAINTS,
    SMART_BOTTOM_ATTACHMENT_FACTOR,
    SMART_PROTRUSION_FACTOR,
    SMART_TOP_ATTACHMENT_FACTOR,
)
from .validation import clamp_value


def default_vessel() -> VesselReference:
    """The reference vessel used before a mug is imported (80/60 x 95 mm)."""
    return VesselReference(
        height_mm=DEFAULT_VESSEL_HEIGHT_MM,
        top_diameter_mm=DEFAULT_VESSEL_TOP_RADIUS_MM * 2,
        bottom_diameter_mm=DEFAULT_VESSEL_BOTTOM_RADIUS_MM * 2,
        wall_thickness_mm=DEFAULT_VESSEL_WALL_THICKNESS_MM,
    )


def apply_smart_defaults(params: HandleParams, vessel: VesselReference) -> HandleParams:
    """
    Proportion the handle to a vessel.

    protrusion = 0.4 x top diameter, top attachment = 0.9 x height,
    bottom attachment = 0.15 x height; each rounded to whole mm and clamped
    to its editing range. All other parameters are kept.

    Args:
        params: Current handle parameters
        vessel: Reference vessel

    Returns:
        New HandleParams
    """
    suggested = {
        "protrusion_mm": round_half_up(vessel.top_diameter_mm * SMART_PROTRUSION_FACTOR),
        "top_attachment_height_mm": round_half_up(vessel.height_mm * SMART_TOP_ATTACHMENT_FACTOR),
        "bottom_attachment_height_mm": round_half_up(vessel.height_mm * SMART_BOTTOM_ATTACHMENT_FACTOR),
    }
    update = {}
    for name, value in suggested.items():
        c = PARAM_CONSTRAINTS[name]
        update[name] = float(clamp_value(value, c.min, c.max))
    return params.model_copy(update=update)


def match_wall_angle(params: HandleParams, vessel: Optional[VesselReference] = None) -> HandleParams:
    """
    Set the back-arm tilt to the vessel wall angle.

    The angle is rounded to whole degrees and limited to ±30°.
    """
    return params.model_copy(update={"vertical_arm_angle_deg": matched_arm_angle_deg(vessel)})


@dataclass
class ComputedHandleValues:
    """Derived values displayed with the parameters."""
    handle_height_mm: float
    center_height_mm: float
    top_wall_radius_mm: float
    bottom_wall_radius_mm: float
    wall_angle_deg: float


def computed_handle_values(
    params: HandleParams,
    vessel: Optional[VesselReference] = None,
) -> ComputedHandleValues:
    """Handle height, centre height and wall geometry at the attachments."""
    return ComputedHandleValues(
        handle_height_mm=params.span_mm,
        center_height_mm=(params.top_attachment_height_mm + params.bottom_attachment_height_mm) / 2,
        top_wall_radius_mm=radius_at_height(params.top_attachment_height_mm, vessel),
        bottom_wall_radius_mm=radius_at_height(params.bottom_attachment_height_mm, vessel),
        wall_angle_deg=vessel_wall_angle_deg(vessel),
    )
