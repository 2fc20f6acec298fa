"""
Handle mesh generation.

Runs the geometry kernel end to end: centerline, fillet zones,
cross-section, sweep. Export quality uses 96 path segments and 16 profile
segments; the live preview uses 32 and 8.
"""

import logging
import math
import re
from dataclasses import dataclass
from typing import Dict, List, Optional, TYPE_CHECKING

import numpy as np

from .cross_section import CrossSectionProfile, build_profile, profile_mean_radius
from .fillet import FilletZones, compute_fillet_zones
from .geometry_base import BaseGeometry
from .mesh import Mesh
from .path import (
    HandlePath,
    build_path,
    matched_arm_angle_deg,
    radius_at_height,
    vessel_dimensions,
)
from .sweep import EXPORT_PATH_SEGMENTS, PREVIEW_PATH_SEGMENTS, sweep

if TYPE_CHECKING:
    from ..io.loaders import HandleParams, VesselReference

logger = logging.getLogger(__name__)

EXPORT_PROFILE_SEGMENTS = 16
PREVIEW_PROFILE_SEGMENTS = 8

# Radial segments of the vessel preview cylinder
VESSEL_PREVIEW_SEGMENTS = 32


class HandleGeometry(BaseGeometry):
    """
    Generates the swept handle mesh for one set of parameters.

    When ``match_vessel_wall_angle`` is set and a vessel is given, the
    back-arm tilt follows the vessel wall instead of ``vertical_arm_angle_deg``.
    """

    _part_name = "handle"

    def __init__(
        self,
        params: "HandleParams",
        vessel: Optional["VesselReference"] = None,
        preview: bool = False,
        path_segments: Optional[int] = None,
        profile_segments: Optional[int] = None,
    ):
        """
        Initialize handle geometry generator.

        Args:
            params: Handle parameters
            vessel: Reference vessel (None uses the default 80/60 x 95 mm vessel)
            preview: Use preview sampling density instead of export density
            path_segments: Override the number of path intervals
            profile_segments: Override the number of cross-section points
        """
        if params.match_vessel_wall_angle and vessel is not None:
            angle = matched_arm_angle_deg(vessel)
            logger.debug(f"Arm tilt matched to vessel wall: {angle:.0f}°")
            params = params.model_copy(update={'vertical_arm_angle_deg': angle})

        self.params = params
        self.vessel = vessel
        self.preview = preview
        if path_segments is None:
            path_segments = PREVIEW_PATH_SEGMENTS if preview else EXPORT_PATH_SEGMENTS
        if profile_segments is None:
            profile_segments = PREVIEW_PROFILE_SEGMENTS if preview else EXPORT_PROFILE_SEGMENTS
        self.path_segments = path_segments
        self.profile_segments = profile_segments

        # Cache for built geometry (avoids rebuilding on export)
        self._mesh = None
        self._path = None

    @property
    def path(self) -> HandlePath:
        if self._path is None:
            self._path = build_path(self.params, self.vessel)
        return self._path

    @property
    def fillet_zones(self) -> FilletZones:
        return compute_fillet_zones(self.path, self.params.fillet_radius_mm)

    @property
    def profile_mean_radius(self) -> float:
        return profile_mean_radius(self.params.cross_section_width_mm, self.params.cross_section_height_mm)

    def profile(self) -> CrossSectionProfile:
        p = self.params
        return build_profile(
            p.cross_section_width_mm,
            p.cross_section_height_mm,
            segment_count=self.profile_segments,
            family=p.cross_section_type,
            corner_radius=p.cross_section_corner_radius_mm,
        )

    def build(self) -> Mesh:
        """
        Build the handle mesh.

        Returns:
            Mesh in vessel coordinates (Y up, wall at x = wall radius)

        Raises:
            InvalidGeometry: If the parameters give no constructible path
        """
        if self._mesh is not None:
            return self._mesh

        quality = "preview" if self.preview else "export"
        logger.info(
            f"Building handle ({quality}): {self.path_segments} path segments, "
            f"{self.profile_segments} profile segments"
        )

        self._mesh = sweep(
            self.profile(),
            self.path,
            handle_thickness=self.params.handle_width_mm,
            fillet_zones=self.fillet_zones,
            fillet_radius=self.params.fillet_radius_mm,
            profile_mean_radius=self.profile_mean_radius,
            path_segments=self.path_segments,
        )
        logger.info(
            f"Handle built: {self._mesh.vertex_count} vertices, {self._mesh.triangle_count} triangles, "
            f"path {self.path.length:.1f}mm"
        )
        return self._mesh


class VesselPreviewGeometry(BaseGeometry):
    """Open tapered cylinder standing for the vessel, base at y = 0."""

    _part_name = "vessel"

    def __init__(self, vessel: Optional["VesselReference"] = None, segments: int = VESSEL_PREVIEW_SEGMENTS):
        self.vessel = vessel
        self.segments = segments
        self._mesh = None

    def build(self) -> Mesh:
        if self._mesh is not None:
            return self._mesh

        top_radius, bottom_radius, height = vessel_dimensions(self.vessel)
        n = self.segments
        theta = np.linspace(0.0, 2 * math.pi, n + 1)

        rows = []
        normals = []
        uvs = []
        slope = bottom_radius - top_radius
        for v, (y, radius) in enumerate(((0.0, bottom_radius), (height, top_radius))):
            rows.append(np.column_stack([radius * np.cos(theta), np.full(n + 1, y), radius * np.sin(theta)]))
            normal = np.column_stack([height * np.cos(theta), np.full(n + 1, slope), height * np.sin(theta)])
            normals.append(normal / np.linalg.norm(normal, axis=1, keepdims=True))
            uvs.append(np.column_stack([np.arange(n + 1) / n, np.full(n + 1, float(v))]))

        j = np.arange(n)
        bottom, top = j, j + n + 1
        indices = np.stack([bottom, top, bottom + 1, bottom + 1, top, top + 1], axis=-1).reshape(-1, 3)

        self._mesh = Mesh(
            positions=np.vstack(rows),
            normals=np.vstack(normals),
            uvs=np.vstack(uvs),
            indices=indices,
        )
        return self._mesh


@dataclass(frozen=True)
class AttachmentZone:
    """Where one end of the handle meets the vessel wall."""
    height_mm: float
    radius_mm: float  # vessel wall radius at height_mm
    width_mm: float  # handle width across the wall
    angle_rad: float  # angle subtended on the wall by width_mm
    blend_radius_mm: float


def attachment_zones(
    params: "HandleParams",
    vessel: Optional["VesselReference"] = None,
) -> Dict[str, AttachmentZone]:
    """
    Attachment outlines for display: ``{"top": ..., "bottom": ...}``.

    The subtended angle is ``handle_width / wall_radius`` at each height.
    """
    zones = {}
    for key, height in (
        ("top", params.top_attachment_height_mm),
        ("bottom", params.bottom_attachment_height_mm),
    ):
        radius = radius_at_height(height, vessel)
        zones[key] = AttachmentZone(
            height_mm=height,
            radius_mm=radius,
            width_mm=params.handle_width_mm,
            angle_rad=params.handle_width_mm / radius if radius > 0 else 0.0,
            blend_radius_mm=params.fillet_radius_mm,
        )
    return zones


def attachment_outline(zone: AttachmentZone, segments: int = 32) -> List[np.ndarray]:
    """Arc of ``segments + 1`` points on the wall, centred on the handle plane."""
    angles = np.linspace(-zone.angle_rad / 2, zone.angle_rad / 2, segments + 1)
    return [
        np.array([math.cos(a) * zone.radius_mm, zone.height_mm, math.sin(a) * zone.radius_mm])
        for a in angles
    ]


def generate_handle_mesh(params: "HandleParams", vessel: Optional["VesselReference"] = None) -> Mesh:
    """Export-quality handle mesh."""
    return HandleGeometry(params, vessel).build()


def generate_preview_mesh(params: "HandleParams", vessel: Optional["VesselReference"] = None) -> Mesh:
    """Preview-quality handle mesh."""
    return HandleGeometry(params, vessel, preview=True).build()


def generate_vessel_preview_mesh(vessel: Optional["VesselReference"] = None) -> Mesh:
    return VesselPreviewGeometry(vessel).build()


def suggested_filename(project_name: str) -> str:
    """STL filename for a project: unsafe characters dropped, spaces to underscores."""
    sanitized = re.sub(r"[^a-zA-Z0-9\s\-_]", "", project_name)
    sanitized = re.sub(r"\s+", "_", sanitized)
    return f"{sanitized.lower()}_handle.stl"
