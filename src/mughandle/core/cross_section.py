"""
Handle cross-section profiles.

Generates the closed 2D outline that is swept along the handle path.
Profile X maps onto the path normal (in the handle plane) and profile Y onto
the thickness axis. Outlines run clockwise so that the sweep's triangles
face outward.
"""

import logging
import math
from dataclasses import dataclass
from typing import Callable, Dict, Sequence, Tuple, Union

import numpy as np

from ..enums import CrossSectionType
from .errors import DegenerateProfile

logger = logging.getLogger(__name__)

# Minimum number of samples per rounded corner
MIN_CORNER_SEGMENTS = 4

# Consecutive points closer than this are merged
POINT_MERGE_TOLERANCE = 1e-9

# Names used by saved browser projects
_FAMILY_ALIASES = {
    "rectangular": CrossSectionType.ROUNDED_RECTANGLE,
    "rounded_rectangle": CrossSectionType.ROUNDED_RECTANGLE,
}

Point2 = Tuple[float, float]


@dataclass(frozen=True)
class CrossSectionProfile:
    """Closed 2D outline; the first point is not repeated at the end."""
    points: Tuple[Point2, ...]

    def __post_init__(self):
        if len(self.points) < 3:
            raise DegenerateProfile(
                f"Cross-section needs at least 3 points, got {len(self.points)}"
            )
        if not all(math.isfinite(x) and math.isfinite(y) for x, y in self.points):
            raise DegenerateProfile("Cross-section contains non-finite coordinates")

    def __len__(self) -> int:
        return len(self.points)

    def as_array(self) -> np.ndarray:
        """Points as an (n, 2) float array."""
        return np.array(self.points, dtype=float)

    def signed_area(self) -> float:
        """Shoelace area; negative for clockwise outlines."""
        pts = self.as_array()
        x, y = pts[:, 0], pts[:, 1]
        return 0.5 * float(np.dot(x, np.roll(y, -1)) - np.dot(np.roll(x, -1), y))


def coerce_family(family: Union[CrossSectionType, str]) -> CrossSectionType:
    """Accept an enum member, its value, or a legacy browser name."""
    if isinstance(family, CrossSectionType):
        return family
    key = str(family).lower()
    if key in _FAMILY_ALIASES:
        return _FAMILY_ALIASES[key]
    return CrossSectionType(key)


def profile_mean_radius(width: float, height: float) -> float:
    """Average of half-width and half-height."""
    return (width + height) / 4


def _oval_points(width: float, height: float, segment_count: int, corner_radius: float) -> list:
    half_width = width / 2
    half_height = height / 2
    points = []
    for i in range(segment_count):
        angle = -2 * math.pi * i / segment_count
        points.append((math.cos(angle) * half_width, math.sin(angle) * half_height))
    return points


def _rounded_rectangle_points(width: float, height: float, segment_count: int, corner_radius: float) -> list:
    half_width = width / 2
    half_height = height / 2
    r = max(0.0, min(corner_radius, min(half_width, half_height)))
    corner_segments = max(MIN_CORNER_SEGMENTS, segment_count // 4)

    # (center x, center y, start angle) clockwise: TR, BR, BL, TL
    corners = (
        (half_width - r, half_height - r, math.pi / 2),
        (half_width - r, -half_height + r, 0.0),
        (-half_width + r, -half_height + r, -math.pi / 2),
        (-half_width + r, half_height - r, math.pi),
    )
    points = []
    for cx, cy, start in corners:
        for i in range(corner_segments + 1):
            angle = start - (math.pi / 2) * (i / corner_segments)
            points.append((cx + math.cos(angle) * r, cy + math.sin(angle) * r))

    # Start at the middle sample of the top-right arc
    mid = corner_segments // 2
    return points[mid:] + points[:mid]


_BUILDERS: Dict[CrossSectionType, Callable[[float, float, int, float], list]] = {
    CrossSectionType.OVAL: _oval_points,
    CrossSectionType.ROUNDED_RECTANGLE: _rounded_rectangle_points,
}


def _merge_coincident(points: Sequence[Point2]) -> list:
    """Drop points that coincide with their predecessor, including across the wrap."""
    merged = []
    for p in points:
        if merged and math.dist(p, merged[-1]) <= POINT_MERGE_TOLERANCE:
            continue
        merged.append(p)
    while len(merged) > 1 and math.dist(merged[-1], merged[0]) <= POINT_MERGE_TOLERANCE:
        merged.pop()
    return merged


def build_profile(
    width: float,
    height: float,
    segment_count: int = 16,
    family: Union[CrossSectionType, str] = CrossSectionType.OVAL,
    corner_radius: float = 3.0,
) -> CrossSectionProfile:
    """
    Build a cross-section outline.

    Oval: ``segment_count`` equal-angle samples of the ellipse with
    semi-axes width/2 and height/2, starting at (width/2, 0).

    Rounded rectangle: the corner radius is clamped to half the smaller
    dimension; every corner arc is sampled from its own center with
    ``max(4, segment_count // 4)`` equal-angle steps. Zero-length edges
    (radius at its limit, or radius 0) collapse into single points.

    Args:
        width: Profile extent along X (mm)
        height: Profile extent along Y (mm)
        segment_count: Number of samples around the outline
        family: CrossSectionType or its string value
        corner_radius: Corner radius for the rounded rectangle (mm)

    Returns:
        CrossSectionProfile

    Raises:
        DegenerateProfile: If fewer than 3 distinct points result
        ValueError: If the family is unknown
    """
    family = coerce_family(family)
    if not all(math.isfinite(v) for v in (width, height, corner_radius)):
        raise DegenerateProfile(
            f"Non-finite cross-section dimensions: {width} x {height}, r={corner_radius}"
        )

    points = _BUILDERS[family](width, height, segment_count, corner_radius)
    return CrossSectionProfile(points=tuple(_merge_coincident(points)))


def cross_section_area(
    width: float,
    height: float,
    family: Union[CrossSectionType, str] = CrossSectionType.OVAL,
    corner_radius: float = 3.0,
) -> float:
    """
    Approximate cross-section area in mm², for weight and material estimates.

    Args:
        width: Profile width (mm)
        height: Profile height (mm)
        family: CrossSectionType or its string value
        corner_radius: Corner radius for the rounded rectangle (mm)

    Returns:
        Area in mm²
    """
    if coerce_family(family) is CrossSectionType.ROUNDED_RECTANGLE:
        r = max(0.0, min(corner_radius, min(width / 2, height / 2)))
        return width * height - 4 * r * r + math.pi * r * r
    return math.pi * (width / 2) * (height / 2)
