"""
Fillet zones where the handle blends into the vessel wall.

The blend is not a real fillet surface. Near each attachment the
cross-section is scaled up along a circular-arc profile, which gives a
360-degree flare around the handle. This module decides where along the
path that flare happens and how large the scale is at each point.
"""

import logging
import math
from dataclasses import dataclass
from typing import Tuple, TYPE_CHECKING

if TYPE_CHECKING:
    from .path import HandlePath

logger = logging.getLogger(__name__)

# Fillet radii at or below this disable the blend
FILLET_EPSILON_MM = 0.01

# Zone length along the path per mm of fillet radius (blend margin)
FILLET_ZONE_LENGTH_FACTOR = 1.2

# Each zone may take at most this fraction of the path
MAX_FILLET_ZONE_FRACTION = 0.15


@dataclass(frozen=True)
class FilletZones:
    """
    Path-parameter ranges of the two blend zones.

    The bottom zone is [0, bottom_end] and the top zone is [top_start, 1].
    Both are empty (bottom_end=0, top_start=1) when the fillet is disabled.
    """
    bottom_end: float = 0.0
    top_start: float = 1.0
    zone_length_mm: float = 0.0
    total_length_mm: float = 0.0

    @property
    def enabled(self) -> bool:
        return self.bottom_end > 0.0 or self.top_start < 1.0

    @property
    def bottom_zone(self) -> Tuple[float, float]:
        return (0.0, self.bottom_end)

    @property
    def top_zone(self) -> Tuple[float, float]:
        return (self.top_start, 1.0)

    @staticmethod
    def max_scale_addition(fillet_radius: float, profile_mean_radius: float) -> float:
        """Scale addition at the attachment: the outer edge grows by the fillet radius."""
        if fillet_radius <= FILLET_EPSILON_MM or profile_mean_radius <= 0:
            return 0.0
        return fillet_radius / profile_mean_radius


def compute_fillet_zones(path: "HandlePath", fillet_radius: float) -> FilletZones:
    """
    Compute the fillet zones for a path.

    A quarter-circle fillet of radius R spans roughly R along the path;
    1.2 R is used for a smoother blend. Each zone is capped at 15% of the
    path so a large fillet on a short handle never swallows the arm and the
    two zones never overlap.

    Args:
        path: Handle path
        fillet_radius: Fillet radius in mm (0 disables the blend)

    Returns:
        FilletZones
    """
    total_length = path.length
    if fillet_radius <= FILLET_EPSILON_MM or total_length <= 0:
        return FilletZones(total_length_mm=total_length)

    zone_length = fillet_radius * FILLET_ZONE_LENGTH_FACTOR
    fraction = zone_length / total_length

    bottom_end = min(fraction, MAX_FILLET_ZONE_FRACTION)
    top_start = max(1.0 - fraction, 1.0 - MAX_FILLET_ZONE_FRACTION)
    if fraction > MAX_FILLET_ZONE_FRACTION:
        logger.debug(
            f"Fillet zone {zone_length:.2f}mm capped at {MAX_FILLET_ZONE_FRACTION:.0%} "
            f"of {total_length:.2f}mm path"
        )

    return FilletZones(
        bottom_end=bottom_end,
        top_start=top_start,
        zone_length_mm=zone_length,
        total_length_mm=total_length,
    )


def fillet_scale(
    t: float,
    zones: FilletZones,
    fillet_radius: float,
    profile_mean_radius: float,
) -> float:
    """
    Cross-section scale factor at path parameter t.

    Inside a zone the scale addition follows ``1 - sin(u * pi/2)`` where u
    runs from 0 at the attachment to 1 at the inner zone edge, so the scale
    is exactly ``1 + R/r`` at t=0 and t=1 and exactly 1 at the zone edges.

    Args:
        t: Path parameter in [0, 1]
        zones: Fillet zones for the path
        fillet_radius: Fillet radius R (mm)
        profile_mean_radius: Mean cross-section radius r (mm)

    Returns:
        Scale factor >= 1
    """
    max_addition = FilletZones.max_scale_addition(fillet_radius, profile_mean_radius)
    if max_addition == 0.0:
        return 1.0

    if zones.bottom_end > 0.0 and t <= zones.bottom_end:
        u = t / zones.bottom_end
        return 1.0 + max_addition * (1.0 - math.sin(u * math.pi / 2))

    if zones.top_start < 1.0 and t >= zones.top_start:
        u = (t - zones.top_start) / (1.0 - zones.top_start)
        return 1.0 + max_addition * (1.0 - math.sin((1.0 - u) * math.pi / 2))

    return 1.0
