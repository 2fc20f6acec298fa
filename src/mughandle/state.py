"""
Editor state for the handle designer.

An explicit, caller-owned state object: current parameters, the reference
vessel, project metadata and the latest validation findings, with a list of
observers notified after every change. Each editor session creates its own
instance; there is no module-level store.
"""

import logging
from dataclasses import dataclass, field
from datetime import datetime, timezone
from typing import Any, Callable, Dict, List, Optional

from .calculator.core import apply_smart_defaults
from .calculator.validation import Severity, ValidationMessage, validate_handle
from .enums import CrossSectionType
from .io.loaders import DEFAULT_DESIGN_NAME, HandleDesign, HandleParams, VesselReference, design_from_dict

logger = logging.getLogger(__name__)

Listener = Callable[["HandleEditorState", List[str]], None]

PROJECT_FORMAT_VERSION = "1.0"
PROJECT_APP_TYPE = "handle-generator"

# HandleParams field -> browser project key
BROWSER_PARAM_NAMES: Dict[str, str] = {
    "protrusion_mm": "handleProtrusion",
    "handle_width_mm": "handleWidth",
    "cross_section_type": "crossSectionType",
    "cross_section_width_mm": "crossSectionWidth",
    "cross_section_height_mm": "crossSectionHeight",
    "cross_section_corner_radius_mm": "crossSectionCornerRadius",
    "top_attachment_height_mm": "topAttachmentHeight",
    "bottom_attachment_height_mm": "bottomAttachmentHeight",
    "fillet_radius_mm": "attachmentRadius",
    "upper_corner_radius_mm": "upperCornerRadius",
    "lower_corner_radius_mm": "lowerCornerRadius",
    "vertical_arm_angle_deg": "verticalArmAngle",
    "match_vessel_wall_angle": "matchMugWallAngle",
}

# Browser projects name the rounded rectangle "rectangular"
_BROWSER_CROSS_SECTION = {
    CrossSectionType.OVAL: "oval",
    CrossSectionType.ROUNDED_RECTANGLE: "rectangular",
}


def _now() -> str:
    return datetime.now(timezone.utc).isoformat()


@dataclass
class ProjectInfo:
    """Project metadata"""
    id: Optional[str] = None
    name: str = DEFAULT_DESIGN_NAME
    created_at: Optional[str] = None
    modified_at: Optional[str] = None
    linked_vessel_project_id: Optional[str] = None


@dataclass
class HandleEditorState:
    """
    Mutable editor session state.

    Every mutator re-validates where parameters or the vessel changed and
    then calls each listener with ``(state, changed_paths)``.
    """
    params: HandleParams = field(default_factory=HandleParams)
    vessel: Optional[VesselReference] = None
    project: ProjectInfo = field(default_factory=ProjectInfo)
    has_unsaved_changes: bool = False
    messages: List[ValidationMessage] = field(default_factory=list)
    _listeners: List[Listener] = field(default_factory=list, repr=False)

    def __post_init__(self):
        self.validate()

    # --- Observers ---

    def subscribe(self, listener: Listener) -> Callable[[], None]:
        """Register a listener; returns a function that unregisters it."""
        self._listeners.append(listener)

        def unsubscribe():
            if listener in self._listeners:
                self._listeners.remove(listener)

        return unsubscribe

    def notify(self, changed_paths: List[str]) -> None:
        for listener in list(self._listeners):
            listener(self, changed_paths)

    # --- Mutators ---

    def set_handle_param(self, name: str, value: Any) -> None:
        """
        Set one handle parameter.

        Raises:
            KeyError: If name is not a HandleParams field
            ValidationError: If the value is invalid
        """
        if name not in HandleParams.model_fields:
            raise KeyError(f"Unknown handle parameter: {name}")
        self._replace_params({name: value})
        self.notify(["params", name])

    def set_handle_params(self, **updates: Any) -> None:
        """Set several handle parameters at once."""
        unknown = set(updates) - set(HandleParams.model_fields)
        if unknown:
            raise KeyError(f"Unknown handle parameters: {', '.join(sorted(unknown))}")
        self._replace_params(updates)
        self.notify(["params"])

    def _replace_params(self, updates: Dict[str, Any]) -> None:
        data = self.params.model_dump()
        data.update(updates)
        self.params = HandleParams.model_validate(data)
        self.has_unsaved_changes = True
        self.validate()

    def set_vessel(self, vessel: VesselReference, smart_defaults: bool = True) -> None:
        """Load a reference vessel, proportioning the handle to it unless disabled."""
        self.vessel = vessel
        if smart_defaults:
            self.params = apply_smart_defaults(self.params, vessel)
        self.has_unsaved_changes = True
        self.validate()
        logger.debug(f"Vessel set: {vessel.height_mm}mm tall, top {vessel.top_diameter_mm}mm")
        self.notify(["vessel"])

    def set_project(self, **info: Any) -> None:
        for key, value in info.items():
            if not hasattr(self.project, key):
                raise KeyError(f"Unknown project field: {key}")
            setattr(self.project, key, value)
        self.notify(["project"])

    def mark_saved(self) -> None:
        self.project.modified_at = _now()
        if self.project.created_at is None:
            self.project.created_at = self.project.modified_at
        self.has_unsaved_changes = False
        self.notify(["project", "ui"])

    def reset(self) -> None:
        """Start a new project; listeners stay registered."""
        self.params = HandleParams()
        self.vessel = None
        self.project = ProjectInfo()
        self.has_unsaved_changes = False
        self.validate()
        self.notify(["all"])

    # --- Validation ---

    def validate(self) -> List[ValidationMessage]:
        self.messages = validate_handle(self.params, self.vessel).messages
        return self.messages

    @property
    def errors(self) -> List[ValidationMessage]:
        return [m for m in self.messages if m.severity == Severity.ERROR]

    @property
    def warnings(self) -> List[ValidationMessage]:
        return [m for m in self.messages if m.severity == Severity.WARNING]

    # --- Project documents ---

    def to_design(self) -> HandleDesign:
        return HandleDesign(name=self.project.name, handle=self.params, vessel=self.vessel)

    def load_design(self, design: HandleDesign) -> None:
        self.params = design.handle
        self.vessel = design.vessel
        self.project = ProjectInfo(name=design.name)
        self.has_unsaved_changes = False
        self.validate()
        self.notify(["all"])

    def load_project(self, data: Dict[str, Any]) -> None:
        """Load a browser project or native design document."""
        design = design_from_dict(data)
        self.load_design(design)
        project = data.get("project") or {}
        self.project.id = project.get("id")
        self.project.created_at = project.get("createdAt")
        self.project.modified_at = project.get("modifiedAt")
        self.project.linked_vessel_project_id = project.get("linkedMugProjectId")

    def project_data(self) -> Dict[str, Any]:
        """Serializable project in the browser handle generator's layout."""
        params = self.params.model_dump()
        handle_params = {BROWSER_PARAM_NAMES[k]: v for k, v in params.items()}
        handle_params["crossSectionType"] = _BROWSER_CROSS_SECTION[self.params.cross_section_type]

        if self.vessel is None:
            mug_data: Dict[str, Any] = {"loaded": False}
        else:
            mug_data = {
                "loaded": True,
                "projectName": self.vessel.name,
                "height": self.vessel.height_mm,
                "topDiameter": self.vessel.top_diameter_mm,
                "bottomDiameter": self.vessel.bottom_diameter_mm,
                "wallThickness": self.vessel.wall_thickness_mm,
            }

        return {
            "version": PROJECT_FORMAT_VERSION,
            "appType": PROJECT_APP_TYPE,
            "project": {
                "id": self.project.id,
                "name": self.project.name,
                "createdAt": self.project.created_at,
                "modifiedAt": self.project.modified_at,
                "linkedMugProjectId": self.project.linked_vessel_project_id,
            },
            "mugData": mug_data,
            "handleParams": handle_params,
        }
