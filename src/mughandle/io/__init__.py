"""
Mughandle IO - design files, vessel import and exporters.

This module handles JSON serialization/deserialization, STL encoding and
export packages.

Example:
    >>> from mughandle.io import HandleDesign, load_design_json, save_design_json
    >>>
    >>> design = HandleDesign(name="Espresso")
    >>> save_design_json(design, "design.json")
    >>>
    >>> loaded = load_design_json("design.json")
"""

from .loaders import (
    SCHEMA_VERSION,
    HandleParams,
    VesselReference,
    HandleDesign,
    design_from_dict,
    design_to_dict,
    load_design_json,
    save_design_json,
)

from .stl import (
    DEFAULT_HEADER,
    to_binary,
    to_ascii,
    read_binary,
    write_stl,
    face_normals,
)

from .vessel_import import (
    extract_mug_dimensions,
    vessel_from_project,
    load_vessel_json,
)

from .package import (
    PackageFiles,
    generate_package,
    package_basename,
    save_package_to_dir,
    create_package_zip,
)

__all__ = [
    # Design files
    "SCHEMA_VERSION",
    "HandleParams",
    "VesselReference",
    "HandleDesign",
    "design_from_dict",
    "design_to_dict",
    "load_design_json",
    "save_design_json",

    # STL
    "DEFAULT_HEADER",
    "to_binary",
    "to_ascii",
    "read_binary",
    "write_stl",
    "face_normals",

    # Vessel import
    "extract_mug_dimensions",
    "vessel_from_project",
    "load_vessel_json",

    # Packaging
    "PackageFiles",
    "generate_package",
    "package_basename",
    "save_package_to_dir",
    "create_package_zip",
]
