"""Type-safe enums for the handle designer."""

from enum import Enum


class CrossSectionType(Enum):
    """Cross-section family of the swept handle profile"""
    OVAL = "oval"  # Ellipse with semi-axes width/2, height/2
    ROUNDED_RECTANGLE = "rounded-rectangle"  # Rectangle with quarter-circle corners


class ExportOrientation(Enum):
    """Placement of the handle mesh in an exported file"""
    MUG_RELATIVE = "mug-relative"  # Keep vessel coordinates (wall at x = radius)
    CENTERED = "centered"  # Bounding box centred on the origin
