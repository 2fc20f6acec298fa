"""
Derive a reference vessel from a dinnerware project.

Dinnerware projects describe the mug indirectly: base dimensions scaled by
percentage multipliers, plus a wall angle that sets the taper. Two project
layouts exist:

- State layout: ``state.baseDimensions.mug``, ``state.itemMultipliers.mug``
  and wall settings in ``state.itemOverrides.mug`` or
  ``state.globalParameters``
- Legacy layout: only ``globalParameters`` with global width/height scale
  percentages applied to a 90 x 100 mm mug
"""

import json
import logging
import math
from pathlib import Path
from typing import Any, Dict, Optional, Union

from .loaders import VesselReference

logger = logging.getLogger(__name__)

# Mug assumed by dinnerware projects before scaling
BASE_MUG_DIAMETER_MM = 90.0
BASE_MUG_HEIGHT_MM = 100.0

DEFAULT_WALL_ANGLE_DEG = 5.0
DEFAULT_WALL_THICKNESS_MM = 2.5

# The bottom diameter never drops below this fraction of the top
MIN_BOTTOM_DIAMETER_FRACTION = 0.5


def round_half_up(value: float) -> int:
    """Round to the nearest integer with halves going up (2.5 -> 3, -2.5 -> -2)."""
    return int(math.floor(value + 0.5))


def has_mug_data(project: Dict[str, Any]) -> bool:
    """True if a dinnerware project can provide mug dimensions."""
    state = project.get('state')
    if isinstance(state, dict) and state.get('globalParameters'):
        return True
    items = project.get('items')
    if isinstance(items, dict) and items.get('mug'):
        return True
    return bool(project.get('globalParameters'))


def _tapered_dimensions(height: float, top_diameter: float, wall_angle: float,
                        wall_thickness: float) -> Dict[str, float]:
    bottom_diameter = top_diameter - 2 * height * math.tan(math.radians(wall_angle))
    bottom_diameter = max(bottom_diameter, top_diameter * MIN_BOTTOM_DIAMETER_FRACTION)
    return {
        'height': round_half_up(height),
        'topDiameter': round_half_up(top_diameter),
        'bottomDiameter': round_half_up(bottom_diameter),
        'wallThickness': wall_thickness,
        'wallAngle': wall_angle,
    }


def _first_set(*values, default):
    for v in values:
        if v is not None:
            return v
    return default


def extract_from_state(state: Dict[str, Any]) -> Dict[str, float]:
    """Mug dimensions from the state layout."""
    global_params = state.get('globalParameters') or {}
    base = (state.get('baseDimensions') or {}).get('mug') or {
        'diameter': BASE_MUG_DIAMETER_MM, 'height': BASE_MUG_HEIGHT_MM,
    }
    multipliers = (state.get('itemMultipliers') or {}).get('mug') or {'width': 100, 'height': 100}
    overrides = (state.get('itemOverrides') or {}).get('mug') or {}

    diameter = base['diameter'] * (multipliers.get('width', 100) / 100)
    height = base['height'] * (multipliers.get('height', 100) / 100)

    wall_angle = _first_set(
        overrides.get('wallAngle'), global_params.get('wallAngle'), default=DEFAULT_WALL_ANGLE_DEG
    )
    wall_thickness = _first_set(
        overrides.get('wallThickness'), global_params.get('wallThickness'),
        default=DEFAULT_WALL_THICKNESS_MM,
    )
    return _tapered_dimensions(height, diameter, wall_angle, wall_thickness)


def extract_from_legacy(project: Dict[str, Any]) -> Dict[str, float]:
    """Mug dimensions from the legacy global-parameter layout."""
    params = project.get('globalParameters') or {}

    height_scale = (params.get('globalHeightScale') or 100) / 100
    width_scale = (params.get('globalWidthScale') or 100) / 100

    # Falsy values fall back to the defaults here, matching old project files
    wall_angle = params.get('wallAngle') or DEFAULT_WALL_ANGLE_DEG
    wall_thickness = params.get('wallThickness') or DEFAULT_WALL_THICKNESS_MM
    return _tapered_dimensions(
        BASE_MUG_HEIGHT_MM * height_scale,
        BASE_MUG_DIAMETER_MM * width_scale,
        wall_angle,
        wall_thickness,
    )


def extract_mug_dimensions(project: Dict[str, Any]) -> Optional[Dict[str, float]]:
    """Mug dimensions (browser ``mugData`` keys) or None if the project has none."""
    if isinstance(project.get('state'), dict):
        return extract_from_state(project['state'])
    if project.get('globalParameters'):
        return extract_from_legacy(project)
    return None


def vessel_from_project(project: Dict[str, Any]) -> VesselReference:
    """
    Build a VesselReference from a dinnerware or handle project document.

    A handle project's embedded ``mugData`` is used as-is.

    Raises:
        ValueError: If the document carries no mug information
    """
    mug_data = project.get('mugData')
    if isinstance(mug_data, dict) and mug_data.get('loaded', True):
        return VesselReference.model_validate(mug_data)

    dimensions = extract_mug_dimensions(project) if has_mug_data(project) else None
    if dimensions is None:
        raise ValueError("Invalid file format - not a dinnerware project")

    name = project.get('projectName') or project.get('name') or 'Imported Project'
    logger.info(
        f"Imported vessel '{name}': {dimensions['height']}mm tall, "
        f"top {dimensions['topDiameter']}mm, bottom {dimensions['bottomDiameter']}mm"
    )
    return VesselReference.model_validate({**dimensions, 'projectName': name})


def load_vessel_json(filepath: Union[str, Path]) -> VesselReference:
    """
    Load a reference vessel from a dinnerware or handle project JSON file.

    Raises:
        FileNotFoundError: If file doesn't exist
        ValueError: If the file carries no mug information
    """
    filepath = Path(filepath)
    if not filepath.exists():
        raise FileNotFoundError(f"Project file not found: {filepath}")

    with open(filepath, 'r') as f:
        data = json.load(f)
    return vessel_from_project(data)
