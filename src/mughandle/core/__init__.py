"""
Mughandle Core - Pure handle geometry kernel.

Turns handle parameters into a swept triangle mesh: centerline, fillet
zones, cross-section and sweep. No file formats or JSON here; pure Python
API on top of numpy.

Example:
    >>> from mughandle.core import HandleGeometry
    >>> from mughandle.io import HandleParams
    >>>
    >>> params = HandleParams(protrusion_mm=30, top_attachment_height_mm=80)
    >>> handle = HandleGeometry(params)
    >>> mesh = handle.build()
    >>> handle.export_stl("handle.stl")
"""

from .errors import HandleGeometryError, InvalidGeometry, DegenerateProfile, DegenerateMesh
from .path import (
    HandlePath,
    LineSegment,
    CornerSegment,
    PathSample,
    build_path,
    sample_path,
    radius_at_height,
    vessel_wall_angle_deg,
    matched_arm_angle_deg,
)
from .fillet import FilletZones, compute_fillet_zones, fillet_scale
from .cross_section import CrossSectionProfile, build_profile, cross_section_area, profile_mean_radius
from .mesh import Mesh
from .sweep import sweep, EXPORT_PATH_SEGMENTS, PREVIEW_PATH_SEGMENTS, REFERENCE_THICKNESS_MM
from .handle import (
    HandleGeometry,
    VesselPreviewGeometry,
    AttachmentZone,
    attachment_zones,
    attachment_outline,
    generate_handle_mesh,
    generate_preview_mesh,
    generate_vessel_preview_mesh,
    suggested_filename,
    EXPORT_PROFILE_SEGMENTS,
    PREVIEW_PROFILE_SEGMENTS,
)

__all__ = [
    # Errors
    "HandleGeometryError",
    "InvalidGeometry",
    "DegenerateProfile",
    "DegenerateMesh",

    # Path
    "HandlePath",
    "LineSegment",
    "CornerSegment",
    "PathSample",
    "build_path",
    "sample_path",
    "radius_at_height",
    "vessel_wall_angle_deg",
    "matched_arm_angle_deg",

    # Fillet
    "FilletZones",
    "compute_fillet_zones",
    "fillet_scale",

    # Cross-section
    "CrossSectionProfile",
    "build_profile",
    "cross_section_area",
    "profile_mean_radius",

    # Sweep
    "Mesh",
    "sweep",
    "EXPORT_PATH_SEGMENTS",
    "PREVIEW_PATH_SEGMENTS",
    "REFERENCE_THICKNESS_MM",

    # Handle pipeline
    "HandleGeometry",
    "VesselPreviewGeometry",
    "AttachmentZone",
    "attachment_zones",
    "attachment_outline",
    "generate_handle_mesh",
    "generate_preview_mesh",
    "generate_vessel_preview_mesh",
    "suggested_filename",
    "EXPORT_PROFILE_SEGMENTS",
    "PREVIEW_PROFILE_SEGMENTS",
]
