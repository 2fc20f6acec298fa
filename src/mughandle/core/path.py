"""
Handle centerline generation.

Builds the D-shaped handle path in the XY plane of the vessel (Y is the
vessel axis, X points radially out of the wall):

- Bottom horizontal arm from the vessel wall outward
- Lower corner (quadratic Bezier, control point at the corner)
- Straight back arm, optionally tilted
- Upper corner (quadratic Bezier)
- Top horizontal arm back to the vessel wall

The wall radius at each attachment height follows the vessel taper, so the
two arms can have different lengths. The fillet blend at the wall is not
part of the path; it is produced by scaling cross-sections in the sweep.
"""

import logging
import math
from dataclasses import dataclass, field
from functools import cached_property
from typing import List, Optional, Tuple, Union, TYPE_CHECKING

import numpy as np

from .errors import InvalidGeometry

if TYPE_CHECKING:
    from ..io.loaders import HandleParams, VesselReference

logger = logging.getLogger(__name__)

# Vessel used when no reference vessel is supplied
DEFAULT_VESSEL_TOP_RADIUS_MM = 40.0
DEFAULT_VESSEL_BOTTOM_RADIUS_MM = 30.0
DEFAULT_VESSEL_HEIGHT_MM = 95.0

# Corner radii may use at most 80% of the protrusion / half the vertical span
CORNER_RADIUS_LIMIT_FACTOR = 0.8

# Limit for a back-arm tilt copied from the vessel wall
MAX_MATCHED_ARM_ANGLE_DEG = 30.0

# Polyline divisions used to measure curved segments
ARC_LENGTH_DIVISIONS = 200

# Tangents shorter than this are treated as undefined
TANGENT_EPSILON = 1e-12

Point3 = Tuple[float, float, float]

_DEFAULT_TANGENT = np.array([0.0, 1.0, 0.0])
_BINORMAL = np.array([0.0, 0.0, 1.0])


def vessel_dimensions(vessel: Optional["VesselReference"] = None) -> Tuple[float, float, float]:
    """Return (top_radius, bottom_radius, height) in mm, falling back to defaults."""
    if vessel is None:
        return (DEFAULT_VESSEL_TOP_RADIUS_MM, DEFAULT_VESSEL_BOTTOM_RADIUS_MM, DEFAULT_VESSEL_HEIGHT_MM)
    return (vessel.top_diameter_mm / 2, vessel.bottom_diameter_mm / 2, vessel.height_mm)


def radius_at_height(height: float, vessel: Optional["VesselReference"] = None) -> float:
    """
    Vessel wall radius at a height above the base.

    Linear interpolation between bottom and top radius; the height fraction
    is clamped to [0, 1] so attachments above the rim or below the base use
    the rim/base radius.

    Args:
        height: Height above the vessel base (mm)
        vessel: Reference vessel, or None for the default vessel

    Returns:
        Wall radius in mm
    """
    top_radius, bottom_radius, vessel_height = vessel_dimensions(vessel)
    if vessel_height <= 0:
        fraction = 1.0
    else:
        fraction = max(0.0, min(1.0, height / vessel_height))
    return bottom_radius + (top_radius - bottom_radius) * fraction


def vessel_wall_angle_deg(vessel: Optional["VesselReference"] = None) -> float:
    """Wall taper from vertical in degrees; positive when the rim is wider than the base."""
    top_radius, bottom_radius, vessel_height = vessel_dimensions(vessel)
    if vessel_height <= 0:
        return 0.0
    return math.degrees(math.atan((top_radius - bottom_radius) / vessel_height))


def matched_arm_angle_deg(vessel: Optional["VesselReference"] = None) -> float:
    """Back-arm tilt that follows the wall: rounded to whole degrees, within ±30°."""
    angle = math.floor(vessel_wall_angle_deg(vessel) + 0.5)
    return float(max(-MAX_MATCHED_ARM_ANGLE_DEG, min(MAX_MATCHED_ARM_ANGLE_DEG, angle)))


class _Segment:
    """Arc-length evaluation shared by line and corner segments."""

    def point(self, t: float) -> np.ndarray:
        raise NotImplementedError

    def derivative(self, t: float) -> np.ndarray:
        raise NotImplementedError

    @cached_property
    def _arc_table(self) -> Tuple[np.ndarray, np.ndarray]:
        ts = np.linspace(0.0, 1.0, ARC_LENGTH_DIVISIONS + 1)
        points = np.array([self.point(t) for t in ts])
        steps = np.linalg.norm(np.diff(points, axis=0), axis=1)
        return ts, np.concatenate(([0.0], np.cumsum(steps)))

    @property
    def length(self) -> float:
        return float(self._arc_table[1][-1])

    def u_to_t(self, u: float) -> float:
        """Map an arc-length fraction to the curve parameter."""
        ts, lengths = self._arc_table
        if lengths[-1] <= 0:
            return u
        return float(np.interp(u * lengths[-1], lengths, ts))

    def point_at(self, u: float) -> np.ndarray:
        return self.point(self.u_to_t(u))

    def tangent_at(self, u: float) -> Optional[np.ndarray]:
        """Unit tangent at arc-length fraction u, or None if undefined."""
        d = self.derivative(self.u_to_t(u))
        norm = float(np.linalg.norm(d))
        if norm < TANGENT_EPSILON:
            return None
        return d / norm


@dataclass(frozen=True, eq=False)
class LineSegment(_Segment):
    """Straight segment between two points."""
    start: Point3
    end: Point3

    def point(self, t: float) -> np.ndarray:
        a = np.asarray(self.start, dtype=float)
        b = np.asarray(self.end, dtype=float)
        return a + (b - a) * t

    def derivative(self, t: float) -> np.ndarray:
        return np.asarray(self.end, dtype=float) - np.asarray(self.start, dtype=float)

    @property
    def length(self) -> float:
        return math.dist(self.start, self.end)

    def u_to_t(self, u: float) -> float:
        return u


@dataclass(frozen=True, eq=False)
class CornerSegment(_Segment):
    """Quadratic Bezier corner; the control point sits at the sharp corner."""
    start: Point3
    control: Point3
    end: Point3

    def point(self, t: float) -> np.ndarray:
        p0 = np.asarray(self.start, dtype=float)
        p1 = np.asarray(self.control, dtype=float)
        p2 = np.asarray(self.end, dtype=float)
        s = 1.0 - t
        return s * s * p0 + 2.0 * s * t * p1 + t * t * p2

    def derivative(self, t: float) -> np.ndarray:
        p0 = np.asarray(self.start, dtype=float)
        p1 = np.asarray(self.control, dtype=float)
        p2 = np.asarray(self.end, dtype=float)
        d = 2.0 * (1.0 - t) * (p1 - p0) + 2.0 * t * (p2 - p1)
        if float(np.linalg.norm(d)) < TANGENT_EPSILON:
            # Degenerate control polygon at an end point: use the chord
            d = p2 - p0
        return d


Segment = Union[LineSegment, CornerSegment]


@dataclass(frozen=True, eq=False)
class PathSample:
    """Point and local frame at one path parameter."""
    t: float
    position: np.ndarray = field(repr=False)
    tangent: np.ndarray = field(repr=False)
    normal: np.ndarray = field(repr=False)
    binormal: np.ndarray = field(repr=False)


@dataclass(frozen=True, eq=False)
class HandlePath:
    """
    Continuous open handle centerline from bottom to top attachment.

    Attributes:
        segments: Line and corner segments in path order
        upper_corner_radius_mm: Upper corner radius after clamping
        lower_corner_radius_mm: Lower corner radius after clamping
        arm_length_mm: Length of the straight back arm
    """
    segments: Tuple[Segment, ...]
    upper_corner_radius_mm: float = 0.0
    lower_corner_radius_mm: float = 0.0
    arm_length_mm: float = 0.0

    @cached_property
    def cumulative_lengths(self) -> np.ndarray:
        return np.cumsum([s.length for s in self.segments])

    @property
    def length(self) -> float:
        if not self.segments:
            return 0.0
        return float(self.cumulative_lengths[-1])

    @property
    def start(self) -> Point3:
        return self.segments[0].start

    @property
    def end(self) -> Point3:
        return self.segments[-1].end

    def _locate(self, u: float) -> Tuple[Segment, float]:
        """Find the segment containing arc-length fraction u and the local fraction."""
        total = self.length
        if total <= 0:
            return self.segments[0], 0.0

        distance = min(max(u, 0.0), 1.0) * total
        lengths = self.cumulative_lengths
        for i, segment in enumerate(self.segments):
            if lengths[i] >= distance:
                previous = lengths[i - 1] if i > 0 else 0.0
                seg_length = lengths[i] - previous
                if seg_length <= 0:
                    return segment, 0.0
                return segment, 1.0 - (lengths[i] - distance) / seg_length
        return self.segments[-1], 1.0

    def point_at(self, u: float) -> np.ndarray:
        """Position at arc-length fraction u in [0, 1]."""
        segment, local = self._locate(u)
        return segment.point_at(local)

    def tangent_at(self, u: float) -> Optional[np.ndarray]:
        """Unit tangent at arc-length fraction u, or None where undefined."""
        segment, local = self._locate(u)
        return segment.tangent_at(local)


def build_path(params: "HandleParams", vessel: Optional["VesselReference"] = None) -> HandlePath:
    """
    Build the handle centerline for a set of handle parameters.

    Corner radii that would overlap along the back arm are clamped to
    80% of min(protrusion, vertical span / 2). The clamp is silent so the
    designer always produces a shape; validation reports it separately.

    Args:
        params: Handle parameters
        vessel: Reference vessel, or None for the default vessel

    Returns:
        HandlePath with five segments

    Raises:
        InvalidGeometry: If the top attachment is not above the bottom one,
            the arm tilt is 90 degrees or more, or the back arm would have
            zero or negative length
    """
    bottom_y = params.bottom_attachment_height_mm
    top_y = params.top_attachment_height_mm
    span = top_y - bottom_y
    if span <= 0:
        raise InvalidGeometry(
            f"Top attachment ({top_y}mm) must be above bottom attachment ({bottom_y}mm)"
        )

    angle_rad = math.radians(params.vertical_arm_angle_deg or 0.0)
    arm_dir_x = math.sin(angle_rad)
    arm_dir_y = math.cos(angle_rad)
    if arm_dir_y <= 1e-9:
        raise InvalidGeometry(
            f"Vertical arm angle {params.vertical_arm_angle_deg}° leaves no vertical extent"
        )

    top_wall_radius = radius_at_height(top_y, vessel)
    bottom_wall_radius = radius_at_height(bottom_y, vessel)
    outer_x = max(top_wall_radius, bottom_wall_radius) + params.protrusion_mm

    max_radius = max(0.0, CORNER_RADIUS_LIMIT_FACTOR * min(params.protrusion_mm, span / 2))
    r_upper = max(0.0, min(params.upper_corner_radius_mm, max_radius))
    r_lower = max(0.0, min(params.lower_corner_radius_mm, max_radius))
    if r_upper != params.upper_corner_radius_mm or r_lower != params.lower_corner_radius_mm:
        logger.debug(
            f"Corner radii clamped to upper={r_upper:.2f}mm, lower={r_lower:.2f}mm "
            f"(limit {max_radius:.2f}mm)"
        )

    # Arm length so that rLower + arm + rUpper projects exactly onto the span
    arm_length = (span - (r_upper + r_lower) * arm_dir_y) / arm_dir_y
    if arm_length <= 0:
        raise InvalidGeometry(
            f"Corner radii leave no straight arm (arm length {arm_length:.3f}mm)"
        )

    lower_center = (outer_x, bottom_y)
    p3 = (lower_center[0] + r_lower * arm_dir_x, lower_center[1] + r_lower * arm_dir_y)
    p4 = (p3[0] + arm_length * arm_dir_x, p3[1] + arm_length * arm_dir_y)
    upper_center = (p4[0] + r_upper * arm_dir_x, p4[1] + r_upper * arm_dir_y)

    # Path runs from the wall at the bottom attachment round to the top one
    p0 = (bottom_wall_radius, bottom_y, 0.0)
    p1 = (lower_center[0] - r_lower, bottom_y, 0.0)
    lower_corner = (lower_center[0], lower_center[1], 0.0)
    p3 = (p3[0], p3[1], 0.0)
    p4 = (p4[0], p4[1], 0.0)
    upper_corner = (upper_center[0], upper_center[1], 0.0)
    p6 = (upper_center[0] - r_upper, top_y, 0.0)
    p7 = (top_wall_radius, top_y, 0.0)

    segments = (
        LineSegment(p0, p1),
        CornerSegment(p1, lower_corner, p3),
        LineSegment(p3, p4),
        CornerSegment(p4, upper_corner, p6),
        LineSegment(p6, p7),
    )
    path = HandlePath(
        segments=segments,
        upper_corner_radius_mm=r_upper,
        lower_corner_radius_mm=r_lower,
        arm_length_mm=arm_length,
    )
    logger.debug(f"Handle path built: length={path.length:.2f}mm, arm={arm_length:.2f}mm")
    return path


def sample_path(path: HandlePath, segments: int = 64) -> List[PathSample]:
    """
    Sample the path at uniformly spaced arc-length parameters.

    Produces ``segments + 1`` samples at t = i / segments. The normal lies in
    the path plane, perpendicular to the tangent; the binormal is the fixed
    thickness axis (+Z). Where the tangent is undefined the default frame
    (tangent +Y) is used.

    Args:
        path: Handle path
        segments: Number of intervals between samples

    Returns:
        List of PathSample from bottom (t=0) to top (t=1)
    """
    if segments < 0:
        return []
    if segments == 0:
        ts = [0.0]
    else:
        ts = [i / segments for i in range(segments + 1)]

    samples = []
    for t in ts:
        tangent = path.tangent_at(t)
        if tangent is None:
            tangent = _DEFAULT_TANGENT.copy()
        normal = np.array([-tangent[1], tangent[0], 0.0])
        norm = float(np.linalg.norm(normal))
        if norm < TANGENT_EPSILON:
            # Tangent along the thickness axis has no in-plane normal
            tangent = _DEFAULT_TANGENT.copy()
            normal = np.array([-1.0, 0.0, 0.0])
        else:
            normal = normal / norm
        samples.append(PathSample(
            t=t,
            position=path.point_at(t),
            tangent=tangent,
            normal=normal,
            binormal=_BINORMAL.copy(),
        ))
    return samples
