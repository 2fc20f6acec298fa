"""
Command-line interface for mug handle generation.
"""

import argparse
import logging
import sys
from pathlib import Path

from ..calculator.core import apply_smart_defaults, default_vessel
from ..calculator.output import to_summary
from ..calculator.validation import Severity, validate_handle
from ..core.errors import HandleGeometryError
from ..core.handle import HandleGeometry, suggested_filename
from ..enums import ExportOrientation
from ..io.loaders import VesselReference, load_design_json, save_design_json
from ..io.package import create_package_zip, generate_package, package_basename, save_package_to_dir
from ..io.vessel_import import load_vessel_json
from ..logging_config import setup_logging

_SEVERITY_MARKS = {
    Severity.ERROR: "❌",
    Severity.WARNING: "⚠️ ",
    Severity.INFO: "ℹ️ ",
}


def _resolve_vessel(args, design):
    """Vessel from the design, replaced or adjusted by command-line options."""
    vessel = design.vessel
    if args.vessel_json:
        vessel = load_vessel_json(args.vessel_json)
        print(f"  Vessel imported from {args.vessel_json}")

    overrides = {
        'height_mm': args.vessel_height,
        'top_diameter_mm': args.vessel_top_diameter,
        'bottom_diameter_mm': args.vessel_bottom_diameter,
    }
    overrides = {k: v for k, v in overrides.items() if v is not None}
    if overrides:
        base = vessel if vessel is not None else default_vessel()
        vessel = VesselReference.model_validate({**base.model_dump(), **overrides})
    return vessel


def main():
    """Main CLI entry point."""
    parser = argparse.ArgumentParser(
        description="Generate STL meshes for ceramic mug handles",
        formatter_class=argparse.RawDescriptionHelpFormatter,
        epilog="""
Examples:
  # Export-quality binary STL next to the design
  mughandle design.json

  # ASCII STL centred on the origin
  mughandle design.json --ascii --centered

  # Fit the handle to a 110mm mug and follow its wall taper
  mughandle design.json --vessel-height 110 --vessel-top-diameter 85 \\
      --vessel-bottom-diameter 70 --smart-defaults --match-wall-angle

  # Use the mug from a dinnerware project
  mughandle design.json --vessel-json my_dinnerware.json --smart-defaults

  # Full package (STL + design.json + design.md) as a ZIP
  mughandle design.json --package out/ --zip
        """
    )

    parser.add_argument(
        'design_file',
        type=str,
        help='Handle design JSON (or a browser handle project file)'
    )

    parser.add_argument(
        '-o', '--output-dir',
        type=str,
        default='.',
        help='Output directory for the STL file (default: current directory)'
    )

    parser.add_argument(
        '--ascii',
        action='store_true',
        help='Write ASCII STL instead of binary'
    )

    parser.add_argument(
        '--preview',
        action='store_true',
        help='Use preview sampling (32 path x 8 profile segments) instead of export quality'
    )

    parser.add_argument(
        '--centered',
        action='store_true',
        help='Centre the mesh on the origin instead of keeping vessel coordinates'
    )

    parser.add_argument(
        '--name',
        type=str,
        default=None,
        help='Project name (sets the output filename)'
    )

    parser.add_argument(
        '--package',
        type=str,
        default=None,
        metavar='DIR',
        help='Write STL, design.json and design.md into DIR'
    )

    parser.add_argument(
        '--zip',
        action='store_true',
        help='With --package: write a single ZIP archive instead of separate files'
    )

    parser.add_argument(
        '--save-json',
        type=str,
        default=None,
        help='Save the resolved design (after vessel options) to this JSON file'
    )

    parser.add_argument(
        '--summary',
        action='store_true',
        help='Print a design summary'
    )

    parser.add_argument(
        '--vessel-json',
        type=str,
        default=None,
        help='Take the vessel from a dinnerware or handle project file'
    )

    parser.add_argument(
        '--vessel-height',
        type=float,
        default=None,
        help='Vessel height in mm'
    )

    parser.add_argument(
        '--vessel-top-diameter',
        type=float,
        default=None,
        help='Vessel diameter at the rim in mm'
    )

    parser.add_argument(
        '--vessel-bottom-diameter',
        type=float,
        default=None,
        help='Vessel diameter at the base in mm'
    )

    parser.add_argument(
        '--match-wall-angle',
        action='store_true',
        help='Tilt the back arm to follow the vessel wall'
    )

    parser.add_argument(
        '--smart-defaults',
        action='store_true',
        help='Set protrusion and attachment heights from the vessel size'
    )

    parser.add_argument(
        '-v', '--verbose',
        action='store_true',
        help='Show debug logging'
    )

    args = parser.parse_args()
    setup_logging(logging.DEBUG if args.verbose else logging.WARNING)

    # Load design
    try:
        print(f"Loading design from {args.design_file}...")
        design = load_design_json(args.design_file)
        vessel = _resolve_vessel(args, design)
    except (OSError, ValueError) as e:
        print(f"Error loading design: {e}", file=sys.stderr)
        return 1

    params = design.handle
    if args.smart_defaults:
        if vessel is None:
            print("Error: --smart-defaults needs a vessel (design, --vessel-json or --vessel-* options)",
                  file=sys.stderr)
            return 1
        params = apply_smart_defaults(params, vessel)
    if args.match_wall_angle:
        params = params.model_copy(update={'match_vessel_wall_angle': True})

    design = design.model_copy(update={
        'name': args.name or design.name,
        'handle': params,
        'vessel': vessel,
    })

    # Validate
    validation = validate_handle(design.handle, design.vessel)
    if validation.messages:
        print("\nValidation:")
        for msg in validation.messages:
            print(f"  {_SEVERITY_MARKS[msg.severity]} {msg.code}: {msg.message}")
            if msg.suggestion and msg.severity != Severity.INFO:
                print(f"      {msg.suggestion}")
    if not validation.valid:
        print("\nError: design has errors, no geometry generated", file=sys.stderr)
        return 1

    if args.summary:
        print()
        print(to_summary(design, validation))

    orientation = ExportOrientation.CENTERED if args.centered else ExportOrientation.MUG_RELATIVE
    binary = not args.ascii

    try:
        if args.package:
            print(f"\nGenerating package for '{design.name}'...")
            files = generate_package(
                design,
                binary=binary,
                orientation=orientation,
                preview=args.preview,
                validation=validation,
                log=print,
            )
            package_dir = Path(args.package)
            if args.zip:
                package_dir.mkdir(parents=True, exist_ok=True)
                zip_path = package_dir / f"{package_basename(design)}.zip"
                zip_path.write_bytes(create_package_zip(files))
                print(f"  Saved: {zip_path}")
            else:
                for path in save_package_to_dir(files, package_dir):
                    print(f"  Saved: {path}")
        else:
            quality = "preview" if args.preview else "export"
            print(f"\nGenerating handle ({quality} quality)...")
            handle = HandleGeometry(design.handle, design.vessel, preview=args.preview)
            stats = handle.stats()
            print(f"  {stats['vertices']} vertices, {stats['triangles']} triangles")

            output_dir = Path(args.output_dir)
            output_dir.mkdir(parents=True, exist_ok=True)
            output_file = output_dir / suggested_filename(design.name)
            handle.export_stl(output_file, binary=binary, orientation=orientation)
            print(f"  Saved: {output_file}")
    except HandleGeometryError as e:
        print(f"Error generating handle: {e}", file=sys.stderr)
        return 1

    if args.save_json:
        save_design_json(design, args.save_json)
        print(f"\nSaved design JSON: {args.save_json}")

    return 0


if __name__ == '__main__':
    sys.exit(main())
