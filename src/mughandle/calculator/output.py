"""Output formatters for handle designs.

Converts typed HandleDesign models to JSON, Markdown and a short text
summary. All functions expect HandleDesign.

Uses Pydantic's model_dump(mode='json') so enums serialize to their
string values.
"""

import json
from typing import Dict, Optional, TYPE_CHECKING

from ..core.cross_section import cross_section_area
from ..io.loaders import SCHEMA_VERSION, HandleDesign
from .core import computed_handle_values

if TYPE_CHECKING:
    from .validation import ValidationMessage, ValidationResult


def _model_to_dict(model) -> dict:
    """Convert Pydantic model to dict with JSON-compatible types."""
    return model.model_dump(mode='json')


def _message_dict(msg: "ValidationMessage") -> dict:
    return {
        'severity': msg.severity.value,
        'code': msg.code,
        'message': msg.message,
        'suggestion': msg.suggestion,
    }


def to_json(
    design: HandleDesign,
    validation: Optional["ValidationResult"] = None,
    mesh_stats: Optional[Dict[str, int]] = None,
    indent: int = 2,
) -> str:
    """Convert HandleDesign to JSON string.

    Args:
        design: Handle design
        validation: Optional validation results to include in output
        mesh_stats: Optional vertex/triangle counts of the exported mesh
        indent: JSON indentation level (default: 2)

    Returns:
        JSON string with schema version, design parameters, and optional extras
    """
    design_dict = _model_to_dict(design)

    if 'schema_version' not in design_dict:
        design_dict['schema_version'] = SCHEMA_VERSION

    if mesh_stats:
        design_dict['mesh'] = dict(mesh_stats)

    if validation:
        design_dict['validation'] = {
            'valid': validation.valid,
            'errors': [_message_dict(m) for m in validation.errors],
            'warnings': [_message_dict(m) for m in validation.warnings],
            'infos': [_message_dict(m) for m in validation.infos],
        }

    return json.dumps(design_dict, indent=indent)


def to_markdown(
    design: HandleDesign,
    validation: Optional["ValidationResult"] = None,
    mesh_stats: Optional[Dict[str, int]] = None,
) -> str:
    """Convert HandleDesign to a markdown specification.

    Args:
        design: Handle design
        validation: Optional validation results to include
        mesh_stats: Optional vertex/triangle counts of the exported mesh

    Returns:
        Markdown specification string
    """
    design_dict = _model_to_dict(design)
    handle = design_dict['handle']
    vessel = design_dict.get('vessel')
    computed = computed_handle_values(design.handle, design.vessel)

    md = f"# Handle Design: {design.name}\n\n"

    md += "## Handle\n\n"
    md += "| Parameter | Value |\n"
    md += "|-----------|-------|\n"
    md += f"| Protrusion | {handle['protrusion_mm']:.1f} mm |\n"
    md += f"| Top Attachment | {handle['top_attachment_height_mm']:.1f} mm |\n"
    md += f"| Bottom Attachment | {handle['bottom_attachment_height_mm']:.1f} mm |\n"
    md += f"| Handle Height | {computed.handle_height_mm:.1f} mm |\n"
    md += f"| Upper Corner Radius | {handle['upper_corner_radius_mm']:.1f} mm |\n"
    md += f"| Lower Corner Radius | {handle['lower_corner_radius_mm']:.1f} mm |\n"
    md += f"| Arm Angle | {handle['vertical_arm_angle_deg']:.1f}° |\n"
    if handle['match_vessel_wall_angle']:
        md += "| Arm Angle Source | Matched to vessel wall |\n"
    md += f"| Handle Width | {handle['handle_width_mm']:.1f} mm |\n"
    md += f"| Fillet Radius | {handle['fillet_radius_mm']:.1f} mm |\n\n"

    md += "## Cross-Section\n\n"
    md += "| Parameter | Value |\n"
    md += "|-----------|-------|\n"
    md += f"| Shape | {handle['cross_section_type']} |\n"
    md += f"| Width | {handle['cross_section_width_mm']:.1f} mm |\n"
    md += f"| Height | {handle['cross_section_height_mm']:.1f} mm |\n"
    if handle['cross_section_type'] != 'oval':
        md += f"| Corner Radius | {handle['cross_section_corner_radius_mm']:.1f} mm |\n"
    area = cross_section_area(
        design.handle.cross_section_width_mm,
        design.handle.cross_section_height_mm,
        design.handle.cross_section_type,
        design.handle.cross_section_corner_radius_mm,
    )
    md += f"| Area | {area:.1f} mm² |\n\n"

    md += "## Vessel\n\n"
    if vessel:
        md += "| Dimension | Value |\n"
        md += "|-----------|-------|\n"
        if vessel.get('name'):
            md += f"| Source | {vessel['name']} |\n"
        md += f"| Height | {vessel['height_mm']:.1f} mm |\n"
        md += f"| Top Diameter | {vessel['top_diameter_mm']:.1f} mm |\n"
        md += f"| Bottom Diameter | {vessel['bottom_diameter_mm']:.1f} mm |\n"
        if vessel.get('wall_thickness_mm') is not None:
            md += f"| Wall Thickness | {vessel['wall_thickness_mm']:.1f} mm |\n"
    else:
        md += "Default vessel (80 mm top, 60 mm bottom, 95 mm tall).\n\n"
        md += "| Dimension | Value |\n"
        md += "|-----------|-------|\n"
    md += f"| Wall Angle | {computed.wall_angle_deg:.1f}° |\n"
    md += f"| Wall Radius at Top Attachment | {computed.top_wall_radius_mm:.1f} mm |\n"
    md += f"| Wall Radius at Bottom Attachment | {computed.bottom_wall_radius_mm:.1f} mm |\n\n"

    if mesh_stats:
        md += "## Mesh\n\n"
        md += f"- Vertices: {mesh_stats.get('vertices', 0)}\n"
        md += f"- Triangles: {mesh_stats.get('triangles', 0)}\n\n"

    if validation:
        md += "## Validation\n\n"

        if validation.valid:
            md += "**Status:** ✅ Design is valid\n\n"
        else:
            md += "**Status:** ❌ Design has errors\n\n"

        if validation.errors:
            md += "### Errors\n\n"
            for msg in validation.errors:
                md += f"- **{msg.code}**: {msg.message}\n"
                if msg.suggestion:
                    md += f"  - *Suggestion*: {msg.suggestion}\n"
            md += "\n"

        if validation.warnings:
            md += "### Warnings\n\n"
            for msg in validation.warnings:
                md += f"- **{msg.code}**: {msg.message}\n"
                if msg.suggestion:
                    md += f"  - *Suggestion*: {msg.suggestion}\n"
            md += "\n"

        if validation.infos:
            md += "### Information\n\n"
            for msg in validation.infos:
                md += f"- {msg.message}\n"
            md += "\n"

    md += "## Notes\n\n"
    md += "- All dimensions in millimeters unless otherwise noted\n"
    md += "- The handle is an open shell; its ends sit on the vessel wall and are joined when the parts are united\n"
    md += "- The fillet is approximated by enlarging the cross-section near each attachment\n\n"

    md += "---\n"
    md += "*Generated by Mughandle*\n"

    return md


def to_summary(
    design: HandleDesign,
    validation: Optional["ValidationResult"] = None,
) -> str:
    """Convert HandleDesign to formatted text summary.

    Args:
        design: Handle design
        validation: Optional validation results; counts are appended

    Returns:
        Multi-line formatted summary string
    """
    h = design.handle
    computed = computed_handle_values(h, design.vessel)

    lines = [
        f"═══ Handle: {design.name} ═══",
        f"Attachments:   {h.bottom_attachment_height_mm:.0f} – {h.top_attachment_height_mm:.0f} mm "
        f"(height {computed.handle_height_mm:.0f} mm)",
        f"Protrusion:    {h.protrusion_mm:.1f} mm",
        f"Corners:       upper {h.upper_corner_radius_mm:.1f} mm, lower {h.lower_corner_radius_mm:.1f} mm",
        f"Arm angle:     {h.vertical_arm_angle_deg:.1f}°",
        f"Cross-section: {h.cross_section_type.value} "
        f"{h.cross_section_width_mm:.1f} x {h.cross_section_height_mm:.1f} mm",
        f"Handle width:  {h.handle_width_mm:.1f} mm",
        f"Fillet:        {h.fillet_radius_mm:.1f} mm",
    ]

    if design.vessel is not None:
        v = design.vessel
        lines.extend([
            "",
            "Vessel:",
            f"  Height:          {v.height_mm:.1f} mm",
            f"  Top diameter:    {v.top_diameter_mm:.1f} mm",
            f"  Bottom diameter: {v.bottom_diameter_mm:.1f} mm",
            f"  Wall angle:      {computed.wall_angle_deg:.1f}°",
        ])

    if validation is not None:
        lines.extend([
            "",
            f"Validation: {'valid' if validation.valid else 'INVALID'} "
            f"({len(validation.errors)} errors, {len(validation.warnings)} warnings)",
        ])

    return "\n".join(lines)
