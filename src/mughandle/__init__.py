"""
Mughandle - Parametric ceramic mug handle designer.

Handle parameters in, swept STL shell out: centerline, fillet
blends into the vessel wall, cross-section sweep and mesh export.

Example:
    >>> from mughandle.io import HandleParams, VesselReference
    >>> from mughandle.calculator import apply_smart_defaults, validate_handle
    >>> from mughandle.core import HandleGeometry
    >>>
    >>> # Proportion the handle to the mug
    >>> vessel = VesselReference(height_mm=100, top_diameter_mm=85, bottom_diameter_mm=70)
    >>> params = apply_smart_defaults(HandleParams(), vessel)
    >>> validate_handle(params, vessel).valid
    True
    >>>
    >>> # Sweep and export
    >>> handle = HandleGeometry(params, vessel)
    >>> handle.export_stl("handle.stl")

Note: All imports are lazy-loaded for fast startup. The calculator and the
design models can be used without building any geometry.
"""

__version__ = "1.0.0"

# Define which names come from which submodule
# All imports are lazy to minimize startup time

_ENUMS = {"CrossSectionType", "ExportOrientation"}

_CALCULATOR = {
    "apply_smart_defaults",
    "match_wall_angle",
    "computed_handle_values",
    "validate_handle",
    "Severity",
    "ValidationResult",
    "PARAM_CONSTRAINTS",
}

_IO = {
    "load_design_json",
    "save_design_json",
    "HandleParams",
    "VesselReference",
    "HandleDesign",
    "load_vessel_json",
    "write_stl",
    "generate_package",
}

_CORE = {
    "HandleGeometry",
    "VesselPreviewGeometry",
    "HandleGeometryError",
    "InvalidGeometry",
    "DegenerateProfile",
    "DegenerateMesh",
    "Mesh",
    "build_path",
    "sample_path",
    "compute_fillet_zones",
    "build_profile",
    "sweep",
    "generate_handle_mesh",
    "generate_preview_mesh",
}

_STATE = {"HandleEditorState"}

# Cache for lazy-loaded modules
_modules = {}


def __getattr__(name):
    """Lazy load submodules when their attributes are accessed."""
    global _modules

    if name in _ENUMS:
        if "enums" not in _modules:
            from . import enums
            _modules["enums"] = enums
        return getattr(_modules["enums"], name)

    if name in _CALCULATOR:
        if "calculator" not in _modules:
            from . import calculator
            _modules["calculator"] = calculator
        return getattr(_modules["calculator"], name)

    if name in _IO:
        if "io" not in _modules:
            from . import io
            _modules["io"] = io
        return getattr(_modules["io"], name)

    if name in _CORE:
        if "core" not in _modules:
            from . import core
            _modules["core"] = core
        return getattr(_modules["core"], name)

    if name in _STATE:
        if "state" not in _modules:
            from . import state
            _modules["state"] = state
        return getattr(_modules["state"], name)

    raise AttributeError(f"module 'mughandle' has no attribute {name!r}")


__all__ = [
    # Version
    "__version__",

    # Geometry (lazy loaded from core)
    "HandleGeometry",
    "VesselPreviewGeometry",
    "Mesh",
    "build_path",
    "sample_path",
    "compute_fillet_zones",
    "build_profile",
    "sweep",
    "generate_handle_mesh",
    "generate_preview_mesh",

    # Errors (lazy loaded from core)
    "HandleGeometryError",
    "InvalidGeometry",
    "DegenerateProfile",
    "DegenerateMesh",

    # Enums (lazy loaded from enums)
    "CrossSectionType",
    "ExportOrientation",

    # Calculator (lazy loaded from calculator)
    "apply_smart_defaults",
    "match_wall_angle",
    "computed_handle_values",
    "validate_handle",
    "Severity",
    "ValidationResult",
    "PARAM_CONSTRAINTS",

    # IO (lazy loaded from io)
    "load_design_json",
    "save_design_json",
    "HandleParams",
    "VesselReference",
    "HandleDesign",
    "load_vessel_json",
    "write_stl",
    "generate_package",

    # Editor state
    "HandleEditorState",
]
