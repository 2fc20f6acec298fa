"""
Exceptions raised by the handle geometry kernel.

All kernel failures are ValueError subclasses so callers that already
guard parameter errors with ``except ValueError`` keep working.
"""


class HandleGeometryError(ValueError):
    """Base class for handle geometry failures."""


class InvalidGeometry(HandleGeometryError):
    """Attachment heights, tilt or corner radii give a non-constructible path."""


class DegenerateProfile(HandleGeometryError):
    """Cross-section has fewer than 3 points or non-finite coordinates."""


class DegenerateMesh(HandleGeometryError):
    """Path sampling yields fewer than 2 rings."""
