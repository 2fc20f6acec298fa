"""
Sweep a cross-section along the handle path.

Places one ring of profile points at every path sample, scaled by the
fillet law near the attachments, and stitches neighbouring rings into
triangles. The end rings stay open: they sit on the vessel wall and are
welded there by a later union step.
"""

import logging
from typing import List, Optional, Sequence, Union

import numpy as np

from .cross_section import CrossSectionProfile
from .errors import DegenerateMesh
from .fillet import FilletZones, fillet_scale
from .mesh import Mesh
from .path import HandlePath, PathSample, sample_path

logger = logging.getLogger(__name__)

# Path sampling density
EXPORT_PATH_SEGMENTS = 96
PREVIEW_PATH_SEGMENTS = 32

# Handle width at which the thickness axis is not stretched
REFERENCE_THICKNESS_MM = 25.0

_NORMAL_EPSILON = 1e-12


def ring_scales(
    samples: Sequence[PathSample],
    fillet_zones: Optional[FilletZones],
    fillet_radius: float,
    profile_mean_radius: float,
) -> np.ndarray:
    """Fillet scale factor for every path sample."""
    zones = fillet_zones if fillet_zones is not None else FilletZones()
    return np.array(
        [fillet_scale(s.t, zones, fillet_radius, profile_mean_radius) for s in samples],
        dtype=np.float64,
    )


def _normalize_rows(vectors: np.ndarray, fallback: np.ndarray) -> np.ndarray:
    lengths = np.linalg.norm(vectors, axis=-1, keepdims=True)
    degenerate = lengths[..., 0] < _NORMAL_EPSILON
    out = np.where(lengths < _NORMAL_EPSILON, 1.0, lengths)
    out = vectors / out
    out[degenerate] = fallback[degenerate]
    return out


def compute_vertex_normals(positions: np.ndarray, indices: np.ndarray, fallback: np.ndarray) -> np.ndarray:
    """
    Smooth vertex normals from area-weighted face normals.

    Vertices whose accumulated normal vanishes (only degenerate faces, or
    opposing faces cancelling) keep their ``fallback`` normal.
    """
    a = positions[indices[:, 0]]
    b = positions[indices[:, 1]]
    c = positions[indices[:, 2]]
    face_normals = np.cross(b - a, c - a)

    accumulated = np.zeros_like(positions)
    for corner in range(3):
        np.add.at(accumulated, indices[:, corner], face_normals)
    return _normalize_rows(accumulated, fallback)


def sweep(
    profile: Union[CrossSectionProfile, Sequence],
    path: Union[HandlePath, List[PathSample]],
    handle_thickness: float,
    fillet_zones: Optional[FilletZones] = None,
    fillet_radius: float = 0.0,
    profile_mean_radius: float = 1.0,
    path_segments: int = EXPORT_PATH_SEGMENTS,
) -> Mesh:
    """
    Sweep a cross-section along a path into an indexed triangle mesh.

    Each profile point (x, y) lands at ``position + s*x*normal +
    s*y*binormal`` where s is the fillet scale of the sample; the
    thickness-axis coordinate is then multiplied by
    ``(handle_thickness / 25) * s``.

    Args:
        profile: Cross-section profile (or a sequence of (x, y) points)
        path: HandlePath (sampled with ``path_segments``) or pre-computed samples
        handle_thickness: Handle width along the thickness axis (mm)
        fillet_zones: Fillet zones, or None for no blend
        fillet_radius: Fillet radius (mm)
        profile_mean_radius: Mean cross-section radius (mm)
        path_segments: Number of path intervals when sampling a HandlePath

    Returns:
        Mesh with ``samples * profile_points`` vertices and
        ``(samples - 1) * profile_points * 2`` triangles

    Raises:
        DegenerateProfile: If the profile has fewer than 3 points or non-finite coordinates
        DegenerateMesh: If the path yields fewer than 2 samples
    """
    if not isinstance(profile, CrossSectionProfile):
        raw = np.asarray(profile, dtype=float).reshape(-1, 2)
        profile = CrossSectionProfile(points=tuple(map(tuple, raw.tolist())))
    points2d = profile.as_array()

    if isinstance(path, HandlePath):
        samples = sample_path(path, path_segments)
    else:
        samples = list(path)
    if len(samples) < 2:
        raise DegenerateMesh(f"Path sampling produced {len(samples)} ring(s); need at least 2")

    num_rings = len(samples)
    ring_size = len(points2d)
    logger.debug(f"Sweeping {ring_size}-point profile over {num_rings} rings")

    scales = ring_scales(samples, fillet_zones, fillet_radius, profile_mean_radius)
    centers = np.array([s.position for s in samples], dtype=np.float64)
    normals = np.array([s.normal for s in samples], dtype=np.float64)
    binormals = np.array([s.binormal for s in samples], dtype=np.float64)

    x = points2d[None, :, 0, None]
    y = points2d[None, :, 1, None]
    offsets = x * normals[:, None, :] + y * binormals[:, None, :]
    rings = centers[:, None, :] + scales[:, None, None] * offsets

    # Stretch along the thickness axis; the fillet scale applies here too
    thickness_factor = (handle_thickness / REFERENCE_THICKNESS_MM) * scales
    rings[:, :, 2] *= thickness_factor[:, None]

    positions = rings.reshape(-1, 3)

    # Outward radial approximation from the ring's path position
    radial = (rings - centers[:, None, :]).reshape(-1, 3)
    sample_normals = np.repeat(normals, ring_size, axis=0)
    radial = _normalize_rows(radial, sample_normals)

    i = np.arange(num_rings - 1)[:, None]
    j = np.arange(ring_size)[None, :]
    current = i * ring_size + j
    below_next = i * ring_size + (j + 1) % ring_size
    upper = current + ring_size
    upper_next = below_next + ring_size
    indices = np.stack(
        np.broadcast_arrays(current, upper, below_next, below_next, upper, upper_next),
        axis=-1,
    ).reshape(-1, 3)

    vertex_normals = compute_vertex_normals(positions, indices, radial)

    u = np.tile(np.arange(ring_size) / (ring_size - 1), num_rings)
    v = np.repeat(np.arange(num_rings) / (num_rings - 1), ring_size)
    uvs = np.column_stack([u, v])

    return Mesh(positions=positions, normals=vertex_normals, uvs=uvs, indices=indices)
