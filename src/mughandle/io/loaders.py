"""
JSON input/output for handle designs.

Loads and saves handle design documents (schema v1.0). Project files
saved by the browser handle generator are accepted too, both the plain
project layout (``handleParams`` / ``mugData``) and the wrapped
``playground-ceramics-project`` layout.

Uses Pydantic for validation, camelCase aliases and enum coercion.
"""

import json
from pathlib import Path
from typing import Any, Dict, Optional, Union

from pydantic import AliasChoices, BaseModel, ConfigDict, Field, field_validator

from ..core.cross_section import coerce_family
from ..core.path import radius_at_height
from ..enums import CrossSectionType

SCHEMA_VERSION = "1.0"

# Wrapper used by the browser apps' "enhanced" project files
PROJECT_FILE_TYPE = "playground-ceramics-project"
PROJECT_APP_TYPE = "handle"

DEFAULT_DESIGN_NAME = "Untitled Handle"


def _alias(*names: str) -> AliasChoices:
    return AliasChoices(*names)


class HandleParams(BaseModel):
    """Handle shape parameters (all lengths in mm)."""
    model_config = ConfigDict(extra='ignore', frozen=True)

    protrusion_mm: float = Field(35.0, ge=0, validation_alias=_alias('protrusion_mm', 'handleProtrusion'))
    top_attachment_height_mm: float = Field(
        85.0, ge=0, validation_alias=_alias('top_attachment_height_mm', 'topAttachmentHeight')
    )
    bottom_attachment_height_mm: float = Field(
        15.0, ge=0, validation_alias=_alias('bottom_attachment_height_mm', 'bottomAttachmentHeight')
    )
    upper_corner_radius_mm: float = Field(
        15.0, ge=0, validation_alias=_alias('upper_corner_radius_mm', 'upperCornerRadius')
    )
    lower_corner_radius_mm: float = Field(
        15.0, ge=0, validation_alias=_alias('lower_corner_radius_mm', 'lowerCornerRadius')
    )
    vertical_arm_angle_deg: float = Field(
        0.0, gt=-90, lt=90, validation_alias=_alias('vertical_arm_angle_deg', 'verticalArmAngle')
    )  # positive tilts the top outward

    cross_section_width_mm: float = Field(
        10.0, gt=0, validation_alias=_alias('cross_section_width_mm', 'crossSectionWidth')
    )
    cross_section_height_mm: float = Field(
        20.0, gt=0, validation_alias=_alias('cross_section_height_mm', 'crossSectionHeight')
    )
    cross_section_type: CrossSectionType = Field(
        CrossSectionType.OVAL, validation_alias=_alias('cross_section_type', 'crossSectionType')
    )
    cross_section_corner_radius_mm: float = Field(
        3.0, ge=0, validation_alias=_alias('cross_section_corner_radius_mm', 'crossSectionCornerRadius')
    )

    handle_width_mm: float = Field(25.0, gt=0, validation_alias=_alias('handle_width_mm', 'handleWidth'))
    fillet_radius_mm: float = Field(
        8.0, ge=0, validation_alias=_alias('fillet_radius_mm', 'attachmentRadius')
    )  # 0 disables the blend
    match_vessel_wall_angle: bool = Field(
        False, validation_alias=_alias('match_vessel_wall_angle', 'matchMugWallAngle')
    )

    @field_validator('cross_section_type', mode='before')
    @classmethod
    def coerce_cross_section_type(cls, v):
        if isinstance(v, str):
            return coerce_family(v)
        return v

    @property
    def span_mm(self) -> float:
        """Vertical distance between the attachments."""
        return self.top_attachment_height_mm - self.bottom_attachment_height_mm


class VesselReference(BaseModel):
    """Tapered cylindrical vessel the handle attaches to."""
    model_config = ConfigDict(extra='ignore', frozen=True)

    height_mm: float = Field(95.0, gt=0, validation_alias=_alias('height_mm', 'height'))
    top_diameter_mm: float = Field(80.0, gt=0, validation_alias=_alias('top_diameter_mm', 'topDiameter'))
    bottom_diameter_mm: float = Field(
        60.0, gt=0, validation_alias=_alias('bottom_diameter_mm', 'bottomDiameter')
    )
    wall_thickness_mm: Optional[float] = Field(
        None, ge=0, validation_alias=_alias('wall_thickness_mm', 'wallThickness')
    )
    name: Optional[str] = Field(None, validation_alias=_alias('name', 'projectName'))

    @property
    def top_radius_mm(self) -> float:
        return self.top_diameter_mm / 2

    @property
    def bottom_radius_mm(self) -> float:
        return self.bottom_diameter_mm / 2

    def radius_at_height(self, height: float) -> float:
        """Wall radius at a height above the base (clamped to the vessel)."""
        return radius_at_height(height, self)


class HandleDesign(BaseModel):
    """Complete handle design document."""
    model_config = ConfigDict(extra='ignore')

    schema_version: str = SCHEMA_VERSION
    name: str = DEFAULT_DESIGN_NAME
    handle: HandleParams = Field(default_factory=HandleParams)
    vessel: Optional[VesselReference] = None


def _from_browser_project(data: Dict[str, Any]) -> HandleDesign:
    """Convert a browser handle-generator project into a HandleDesign."""
    project = data.get('project') or {}
    mug_data = data.get('mugData') or {}

    vessel = None
    if mug_data.get('loaded'):
        vessel = VesselReference.model_validate(mug_data)

    return HandleDesign(
        name=project.get('name') or DEFAULT_DESIGN_NAME,
        handle=HandleParams.model_validate(data.get('handleParams') or {}),
        vessel=vessel,
    )


def design_from_dict(data: Dict[str, Any]) -> HandleDesign:
    """
    Build a HandleDesign from parsed JSON.

    Accepts the native schema, the browser project layout and the wrapped
    project-file layout.

    Raises:
        ValueError: If the document is not a handle design
        ValidationError: If a parameter is invalid
    """
    if 'design' in data:
        data = data['design']

    file_format = data.get('fileFormat')
    if isinstance(file_format, dict) and file_format.get('type') == PROJECT_FILE_TYPE:
        app_type = file_format.get('appType')
        if app_type != PROJECT_APP_TYPE:
            raise ValueError(f"Not a handle project file (appType={app_type!r})")
        state = dict(data.get('state') or {})
        state.setdefault('project', data.get('project') or {})
        return _from_browser_project(state)

    if 'handle' in data:
        return HandleDesign.model_validate(data)

    if 'handleParams' in data:
        return _from_browser_project(data)

    raise ValueError(
        "Invalid design JSON - must contain a 'handle' or 'handleParams' section"
    )


def load_design_json(filepath: Union[str, Path]) -> HandleDesign:
    """
    Load a handle design from a JSON file.

    Args:
        filepath: Path to design or browser project JSON

    Returns:
        HandleDesign

    Raises:
        FileNotFoundError: If file doesn't exist
        ValueError: If the document has no handle section
        ValidationError: If a parameter is invalid
    """
    filepath = Path(filepath)

    if not filepath.exists():
        raise FileNotFoundError(f"Design file not found: {filepath}")

    with open(filepath, 'r') as f:
        data = json.load(f)

    return design_from_dict(data)


def design_to_dict(design: HandleDesign) -> Dict[str, Any]:
    """JSON-ready dict in schema v1.0 layout."""
    data = design.model_dump(mode='json')
    data['schema_version'] = SCHEMA_VERSION
    return data


def save_design_json(design: HandleDesign, filepath: Union[str, Path]) -> None:
    """
    Save a handle design to a JSON file using schema v1.0 format.

    Args:
        design: Handle design
        filepath: Path to save JSON file
    """
    filepath = Path(filepath)
    with open(filepath, 'w') as f:
        json.dump(design_to_dict(design), f, indent=2)
