"""
Shared export and packaging logic for handle designs.

Used by the CLI (generate.py) and by library callers to produce identical
output packages: handle STL, design.json and design.md.

Packages can be written to a directory or bundled into a ZIP.
"""

import io
import logging
import zipfile
from dataclasses import dataclass
from pathlib import Path
from typing import Callable, Dict, List, Optional, Union

from ..enums import ExportOrientation
from .loaders import HandleDesign

logger = logging.getLogger(__name__)


@dataclass
class PackageFiles:
    """Container for all output files from handle generation."""

    handle_stl: Optional[bytes] = None
    stl_filename: str = "handle.stl"
    design_json: Optional[str] = None
    design_md: Optional[str] = None
    mesh_stats: Optional[Dict[str, int]] = None

    def file_map(self) -> Dict[str, Union[bytes, str]]:
        """Archive name -> content for every file present."""
        files: Dict[str, Union[bytes, str]] = {}
        if self.handle_stl is not None:
            files[self.stl_filename] = self.handle_stl
        if self.design_json is not None:
            files["design.json"] = self.design_json
        if self.design_md is not None:
            files["design.md"] = self.design_md
        return files


def generate_package(
    design: HandleDesign,
    binary: bool = True,
    orientation: Union[ExportOrientation, str] = ExportOrientation.MUG_RELATIVE,
    preview: bool = False,
    validation=None,
    log: Optional[Callable[[str], None]] = None,
) -> PackageFiles:
    """Generate all output files for a handle design.

    Args:
        design: HandleDesign with all parameters.
        binary: Binary STL if True (default), ASCII otherwise.
        orientation: Mesh placement in the STL.
        preview: Use preview sampling density for the mesh.
        validation: Optional ValidationResult for design.json/md output.
        log: Optional logging callback (e.g. print).

    Returns:
        PackageFiles with all generated file data.

    Raises:
        InvalidGeometry: If the handle path cannot be built.
    """
    # Lazy imports keep io importable without the calculator
    from ..core.handle import HandleGeometry, suggested_filename
    from ..calculator.output import to_json, to_markdown

    files = PackageFiles(stl_filename=suggested_filename(design.name))

    def _log(msg: str):
        if log:
            log(msg)

    _log("Building handle mesh...")
    handle = HandleGeometry(design.handle, design.vessel, preview=preview)
    files.mesh_stats = handle.stats()
    _log(f"  {files.mesh_stats['vertices']} vertices, {files.mesh_stats['triangles']} triangles")

    _log("Exporting handle STL...")
    files.handle_stl = handle.to_stl_bytes(binary=binary, orientation=orientation)
    _log(f"  STL: {len(files.handle_stl) / 1024:.1f} KB")

    _log("Generating design.json and design.md...")
    files.design_json = to_json(design, validation=validation, mesh_stats=files.mesh_stats)
    files.design_md = to_markdown(design, validation=validation, mesh_stats=files.mesh_stats)

    return files


def package_basename(design: HandleDesign) -> str:
    """Base filename for a package: the STL name without its extension."""
    from ..core.handle import suggested_filename

    return suggested_filename(design.name)[: -len(".stl")]


def save_package_to_dir(files: PackageFiles, output_dir: Union[str, Path]) -> List[Path]:
    """Write all PackageFiles to a directory.

    Args:
        files: PackageFiles from generate_package().
        output_dir: Directory to write files into (created if needed).

    Returns:
        List of Paths written.
    """
    output_dir = Path(output_dir)
    output_dir.mkdir(parents=True, exist_ok=True)
    written: List[Path] = []

    for name, data in files.file_map().items():
        path = output_dir / name
        if isinstance(data, bytes):
            path.write_bytes(data)
        else:
            path.write_text(data, encoding="utf-8")
        written.append(path)

    logger.info(f"Wrote {len(written)} files to {output_dir}")
    return written


def create_package_zip(files: PackageFiles) -> bytes:
    """Create ZIP archive from PackageFiles.

    Args:
        files: PackageFiles from generate_package().

    Returns:
        ZIP file contents as bytes.
    """
    buf = io.BytesIO()

    with zipfile.ZipFile(buf, "w", zipfile.ZIP_DEFLATED) as zf:
        for name, data in files.file_map().items():
            zf.writestr(name, data)

    return buf.getvalue()
