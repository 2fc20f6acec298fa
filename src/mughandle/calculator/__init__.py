"""
Handle Calculator - parameter derivation and design validation.

Example:
    >>> from mughandle.calculator import apply_smart_defaults, validate_handle
    >>> from mughandle.io import HandleParams, VesselReference
    >>>
    >>> vessel = VesselReference(height_mm=100, top_diameter_mm=85, bottom_diameter_mm=70)
    >>> params = apply_smart_defaults(HandleParams(), vessel)
    >>> result = validate_handle(params, vessel)
    >>> result.valid
    True
"""

from .core import (
    default_vessel,
    apply_smart_defaults,
    match_wall_angle,
    computed_handle_values,
    ComputedHandleValues,
)

from .validation import (
    validate_handle,
    validate_parameter_value,
    clamp_value,
    round_to_step,
    Severity,
    ValidationMessage,
    ValidationResult,
)

from .output import to_json, to_markdown, to_summary

from .constants import PARAM_CONSTRAINTS, ParamConstraint

from ..core.path import vessel_wall_angle_deg

__all__ = [
    # Derivation
    "default_vessel",
    "apply_smart_defaults",
    "match_wall_angle",
    "computed_handle_values",
    "ComputedHandleValues",
    "vessel_wall_angle_deg",

    # Validation
    "validate_handle",
    "validate_parameter_value",
    "clamp_value",
    "round_to_step",
    "Severity",
    "ValidationMessage",
    "ValidationResult",

    # Output
    "to_json",
    "to_markdown",
    "to_summary",

    # Constants
    "PARAM_CONSTRAINTS",
    "ParamConstraint",
]
