"""
Pytest configuration and shared fixtures for mughandle tests.
"""

import json
import pytest
from pathlib import Path

from mughandle.enums import CrossSectionType
from mughandle.io.loaders import HandleDesign, HandleParams, VesselReference


# ─── Handle parameters ────────────────────────────────────────────────────


@pytest.fixture
def default_params():
    """Handle parameters with every default."""
    return HandleParams()


@pytest.fixture
def scenario_params():
    """Compact oval handle used for end-to-end checks."""
    return _scenario_params()


@pytest.fixture
def rectangular_params():
    """Rounded-rectangle handle with a tilted back arm."""
    return HandleParams(
        protrusion_mm=30,
        top_attachment_height_mm=80,
        bottom_attachment_height_mm=20,
        upper_corner_radius_mm=12,
        lower_corner_radius_mm=10,
        vertical_arm_angle_deg=8,
        cross_section_type=CrossSectionType.ROUNDED_RECTANGLE,
        cross_section_width_mm=14,
        cross_section_height_mm=10,
        cross_section_corner_radius_mm=3,
        fillet_radius_mm=5,
    )


# ─── Vessels ──────────────────────────────────────────────────────────────


@pytest.fixture
def tall_vessel():
    """110mm mug, 85mm rim, 70mm base."""
    return VesselReference(height_mm=110, top_diameter_mm=85, bottom_diameter_mm=70, name="Tall Mug")


@pytest.fixture
def straight_vessel():
    """Straight-walled 80mm cylinder."""
    return VesselReference(height_mm=100, top_diameter_mm=80, bottom_diameter_mm=80)


# ─── Module-scoped built geometry ────────────────────────────────────────


@pytest.fixture(scope="module")
def scenario_mesh():
    """Export-quality mesh of the scenario handle on the default vessel."""
    from mughandle.core import HandleGeometry
    return HandleGeometry(_scenario_params()).build()


@pytest.fixture(scope="module")
def scenario_preview_mesh():
    """Preview-quality mesh of the scenario handle."""
    from mughandle.core import HandleGeometry
    return HandleGeometry(_scenario_params(), preview=True).build()


# ─── Design documents ────────────────────────────────────────────────────


@pytest.fixture
def sample_design(tall_vessel):
    """Design document with a vessel."""
    return HandleDesign(name="Tall Mug Handle", handle=_scenario_params(), vessel=tall_vessel)


@pytest.fixture
def sample_design_dict():
    """Native schema v1.0 design dict."""
    return {
        "schema_version": "1.0",
        "name": "Espresso Cup",
        "handle": {
            "protrusion_mm": 22,
            "top_attachment_height_mm": 55,
            "bottom_attachment_height_mm": 15,
            "upper_corner_radius_mm": 8,
            "lower_corner_radius_mm": 8,
            "vertical_arm_angle_deg": 0,
            "cross_section_width_mm": 8,
            "cross_section_height_mm": 12,
            "cross_section_type": "oval",
            "handle_width_mm": 18,
            "fillet_radius_mm": 4,
        },
        "vessel": {
            "height_mm": 65,
            "top_diameter_mm": 62,
            "bottom_diameter_mm": 50,
        },
    }


@pytest.fixture
def browser_project_dict():
    """Project file saved by the browser handle generator."""
    return {
        "version": "1.0",
        "appType": "handle-generator",
        "project": {
            "id": "handle_1700000000000",
            "name": "Morning Mug",
            "createdAt": "2024-01-10T09:00:00.000Z",
            "modifiedAt": "2024-01-11T10:30:00.000Z",
            "linkedMugProjectId": "dinnerware_42",
        },
        "mugData": {
            "loaded": True,
            "projectName": "Morning Set",
            "height": 100,
            "topDiameter": 90,
            "bottomDiameter": 72,
            "wallThickness": 2.5,
        },
        "handleParams": {
            "handleProtrusion": 36,
            "handleWidth": 24,
            "crossSectionType": "rectangular",
            "crossSectionWidth": 12,
            "crossSectionHeight": 18,
            "crossSectionCornerRadius": 4,
            "topAttachmentHeight": 90,
            "bottomAttachmentHeight": 15,
            "attachmentRadius": 6,
            "upperCornerRadius": 14,
            "lowerCornerRadius": 12,
            "verticalArmAngle": 0,
            "matchMugWallAngle": False,
        },
    }


@pytest.fixture
def temp_json_file(tmp_path, sample_design_dict):
    """Create a temporary JSON file with the sample design."""
    json_file = tmp_path / "test_design.json"
    with open(json_file, 'w') as f:
        json.dump(sample_design_dict, f)
    return json_file


@pytest.fixture
def examples_dir():
    """Path to examples directory."""
    return Path(__file__).parent.parent / "examples"


# ─── Helper functions (no pytest dependency) ──────────────────────────────


def _scenario_params():
    """protrusion 20, attachments 10-90, corner radii 8, oval 10 x 6, fillet 8."""
    return HandleParams(
        protrusion_mm=20,
        top_attachment_height_mm=90,
        bottom_attachment_height_mm=10,
        upper_corner_radius_mm=8,
        lower_corner_radius_mm=8,
        vertical_arm_angle_deg=0,
        cross_section_type=CrossSectionType.OVAL,
        cross_section_width_mm=10,
        cross_section_height_mm=6,
        fillet_radius_mm=8,
    )
