"""
Fit one handle design to several mugs.

Applies smart defaults and the matched wall angle for each vessel, prints
the validation findings and writes a preview STL per mug.
"""

import sys
import os
sys.path.insert(0, os.path.join(os.path.dirname(__file__), '..', 'src'))

from mughandle.calculator import apply_smart_defaults, match_wall_angle, validate_handle
from mughandle.core import HandleGeometry, suggested_filename
from mughandle.io import HandleParams, VesselReference

print("="*70)
print("HANDLE FIT ACROSS VESSELS")
print("="*70)
print()

base = HandleParams(
    cross_section_type="oval",
    cross_section_width_mm=10,
    cross_section_height_mm=16,
    upper_corner_radius_mm=12,
    lower_corner_radius_mm=10,
    fillet_radius_mm=6,
)

vessels = [
    VesselReference(name="Espresso", height_mm=65, top_diameter_mm=62, bottom_diameter_mm=50),
    VesselReference(name="Everyday", height_mm=95, top_diameter_mm=80, bottom_diameter_mm=60),
    VesselReference(name="Tall", height_mm=110, top_diameter_mm=85, bottom_diameter_mm=70),
    VesselReference(name="Tankard", height_mm=130, top_diameter_mm=95, bottom_diameter_mm=95),
]

output_dir = os.path.join(os.path.dirname(__file__), 'output')
os.makedirs(output_dir, exist_ok=True)

for vessel in vessels:
    params = match_wall_angle(apply_smart_defaults(base, vessel), vessel)
    print(f"{vessel.name}: {vessel.height_mm:.0f}mm tall, "
          f"{vessel.bottom_diameter_mm:.0f} -> {vessel.top_diameter_mm:.0f}mm")
    print(f"  Protrusion:  {params.protrusion_mm:.0f}mm")
    print(f"  Attachments: {params.bottom_attachment_height_mm:.0f} - {params.top_attachment_height_mm:.0f}mm")
    print(f"  Arm angle:   {params.vertical_arm_angle_deg:.0f}°")

    result = validate_handle(params, vessel)
    for msg in result.messages:
        print(f"  [{msg.severity.value}] {msg.code}: {msg.message}")
    if not result.valid:
        print("  Skipped: design has errors")
        print()
        continue

    handle = HandleGeometry(params, vessel, preview=True)
    path = handle.export_stl(os.path.join(output_dir, suggested_filename(vessel.name)))
    stats = handle.stats()
    print(f"  Mesh: {stats['vertices']} vertices, {stats['triangles']} triangles -> {path}")
    print()

print("="*70)
print("Done")
print("="*70)
