"""
Handle Calculator - Validation Rules

Checks a handle design before it is built:
- Attachment layout against the vessel
- Corner radii against the room the fillet leaves them
- Radii and fillet zones the geometry kernel will silently clamp
- Parameters outside the editor's ranges
- Whether the centerline can be built at all

The kernel always produces a shape when it can; this module is where the
clamping and capping it does quietly is reported to the user.
"""

import math
from dataclasses import dataclass, field
from enum import Enum
from typing import List, Optional, Union, TYPE_CHECKING

from ..core.errors import InvalidGeometry
from ..core.fillet import FILLET_EPSILON_MM, FILLET_ZONE_LENGTH_FACTOR, MAX_FILLET_ZONE_FRACTION
from ..core.path import CORNER_RADIUS_LIMIT_FACTOR, build_path, matched_arm_angle_deg
from .constants import PARAM_CONSTRAINTS, ParamConstraint

# Import for type checking only (avoids circular imports at runtime)
if TYPE_CHECKING:
    from ..io.loaders import HandleParams, VesselReference


class Severity(Enum):
    """Validation message severity"""
    INFO = "info"
    WARNING = "warning"
    ERROR = "error"


@dataclass
class ValidationMessage:
    """A single validation finding"""
    severity: Severity
    code: str
    message: str
    suggestion: Optional[str] = None
    param: Optional[str] = None  # HandleParams field the finding is about


@dataclass
class ValidationResult:
    """Complete validation result"""
    valid: bool  # True if no errors
    messages: List[ValidationMessage] = field(default_factory=list)

    @property
    def errors(self) -> List[ValidationMessage]:
        return [m for m in self.messages if m.severity == Severity.ERROR]

    @property
    def warnings(self) -> List[ValidationMessage]:
        return [m for m in self.messages if m.severity == Severity.WARNING]

    @property
    def infos(self) -> List[ValidationMessage]:
        return [m for m in self.messages if m.severity == Severity.INFO]

    def codes(self) -> List[str]:
        return [m.code for m in self.messages]


def clamp_value(value: float, min_value: float, max_value: float) -> float:
    """Limit value to [min_value, max_value]."""
    return min(max(value, min_value), max_value)


def round_to_step(value: float, step: float) -> float:
    """Round to the nearest multiple of step (halves round up)."""
    if step <= 0:
        return value
    return round(math.floor(value / step + 0.5) * step, 10)


def validate_parameter_value(
    name: str,
    value: Union[float, int],
    constraint: Optional[ParamConstraint] = None,
) -> List[str]:
    """
    Check one parameter value against its editing range.

    Args:
        name: HandleParams field name (used to look up the constraint)
        value: Value to check
        constraint: Explicit constraint; defaults to PARAM_CONSTRAINTS[name]

    Returns:
        List of error strings, empty when the value is acceptable
    """
    if constraint is None:
        constraint = PARAM_CONSTRAINTS.get(name)
    try:
        value = float(value)
    except (TypeError, ValueError):
        return ["Value must be a number"]
    if math.isnan(value):
        return ["Value must be a number"]
    if constraint is None:
        return []

    errors = []
    if value < constraint.min:
        errors.append(f"Value must be at least {constraint.min:g}{constraint.unit}")
    if value > constraint.max:
        errors.append(f"Value must be at most {constraint.max:g}{constraint.unit}")
    return errors


def validate_handle(
    params: "HandleParams",
    vessel: Optional["VesselReference"] = None,
) -> ValidationResult:
    """
    Validate handle parameters against layout and geometry rules.

    Args:
        params: Handle parameters
        vessel: Reference vessel, or None for the default vessel

    Returns:
        ValidationResult with all findings
    """
    if params.match_vessel_wall_angle and vessel is not None:
        params = params.model_copy(update={"vertical_arm_angle_deg": matched_arm_angle_deg(vessel)})

    messages: List[ValidationMessage] = []
    messages.extend(_validate_attachments(params, vessel))
    messages.extend(_validate_corner_radii(params))
    messages.extend(_validate_ranges(params))
    messages.extend(_validate_path(params, vessel))

    has_errors = any(m.severity == Severity.ERROR for m in messages)
    return ValidationResult(valid=not has_errors, messages=messages)


def _validate_attachments(params: "HandleParams", vessel: Optional["VesselReference"]) -> List[ValidationMessage]:
    """Attachment order and position on the vessel"""
    messages = []
    top = params.top_attachment_height_mm
    bottom = params.bottom_attachment_height_mm

    if vessel is not None and top > vessel.height_mm:
        messages.append(ValidationMessage(
            severity=Severity.WARNING,
            code="TOP_ABOVE_VESSEL",
            message=f"Top attachment ({top:g}mm) exceeds vessel height ({vessel.height_mm:g}mm)",
            suggestion="Lower the top attachment below the rim",
            param="top_attachment_height_mm",
        ))

    if bottom >= top:
        messages.append(ValidationMessage(
            severity=Severity.ERROR,
            code="ATTACHMENT_OVERLAP",
            message="Bottom attachment must be below top attachment",
            suggestion="Raise the top attachment or lower the bottom attachment",
            param="bottom_attachment_height_mm",
        ))

    return messages


def _validate_corner_radii(params: "HandleParams") -> List[ValidationMessage]:
    """Corner radii against the protrusion, span and fillet"""
    messages = []
    span = params.span_mm
    if span <= 0:
        return messages

    room = min(params.protrusion_mm, span / 2)
    max_corner = room - params.fillet_radius_mm
    kernel_limit = max(0.0, CORNER_RADIUS_LIMIT_FACTOR * room)

    for label, name in (("Upper", "upper_corner_radius_mm"), ("Lower", "lower_corner_radius_mm")):
        radius = getattr(params, name)
        key = label.upper()

        if radius > max_corner:
            messages.append(ValidationMessage(
                severity=Severity.WARNING,
                code=f"{key}_CORNER_TOO_LARGE",
                message=f"{label} corner radius may be too large for handle dimensions",
                suggestion=f"Keep the {label.lower()} corner radius below {max(max_corner, 0.0):.1f}mm",
                param=name,
            ))

        if radius > kernel_limit:
            messages.append(ValidationMessage(
                severity=Severity.INFO,
                code=f"{key}_CORNER_CLAMPED",
                message=f"{label} corner radius {radius:g}mm will be reduced to {kernel_limit:.1f}mm",
                param=name,
            ))

    return messages


def _validate_ranges(params: "HandleParams") -> List[ValidationMessage]:
    """Parameters outside the editor's ranges"""
    messages = []
    for name, constraint in PARAM_CONSTRAINTS.items():
        value = getattr(params, name)
        for error in validate_parameter_value(name, value, constraint):
            messages.append(ValidationMessage(
                severity=Severity.WARNING,
                code="PARAM_OUT_OF_RANGE",
                message=f"{name} = {value:g}: {error}",
                suggestion=f"Use a value between {constraint.min:g} and {constraint.max:g}{constraint.unit}",
                param=name,
            ))
    return messages


def _validate_path(params: "HandleParams", vessel: Optional["VesselReference"]) -> List[ValidationMessage]:
    """Centerline constructibility and fillet zone capping"""
    messages = []
    if params.span_mm <= 0:
        # Already reported as ATTACHMENT_OVERLAP
        return messages

    try:
        path = build_path(params, vessel)
    except InvalidGeometry as e:
        messages.append(ValidationMessage(
            severity=Severity.ERROR,
            code="ARM_GEOMETRY_INVALID",
            message=f"Handle path cannot be built: {e}",
            suggestion="Reduce the corner radii or the arm tilt, or increase the attachment span",
        ))
        return messages

    fillet = params.fillet_radius_mm
    if fillet > FILLET_EPSILON_MM and path.length > 0:
        fraction = fillet * FILLET_ZONE_LENGTH_FACTOR / path.length
        if fraction > MAX_FILLET_ZONE_FRACTION:
            messages.append(ValidationMessage(
                severity=Severity.INFO,
                code="FILLET_ZONE_CAPPED",
                message=(
                    f"Fillet blend limited to {MAX_FILLET_ZONE_FRACTION:.0%} of the "
                    f"{path.length:.1f}mm handle at each end"
                ),
                param="fillet_radius_mm",
            ))

    return messages
