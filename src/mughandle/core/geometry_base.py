"""
Base class for handle geometry classes.

Provides shared orientation and export methods used by HandleGeometry and
VesselPreviewGeometry.
"""

import logging
from pathlib import Path
from typing import Union

from ..enums import ExportOrientation
from .mesh import Mesh

logger = logging.getLogger(__name__)


class BaseGeometry:
    """Base class providing shared export methods for geometry classes.

    Subclasses must:
    - Set self._mesh = None in __init__
    - Implement build() -> Mesh (caching the result in self._mesh)
    - Set _part_name class attribute for log messages
    """

    _part_name: str = "part"

    def build(self) -> Mesh:
        raise NotImplementedError

    @property
    def mesh(self) -> Mesh:
        """Built mesh (builds on first access)."""
        if self._mesh is None:
            self.build()
        return self._mesh

    def oriented(self, orientation: Union[ExportOrientation, str] = ExportOrientation.MUG_RELATIVE) -> Mesh:
        """Mesh placed for export: vessel coordinates or centred on the origin."""
        orientation = ExportOrientation(orientation)
        if orientation is ExportOrientation.CENTERED:
            return self.mesh.centered()
        return self.mesh

    def stats(self) -> dict:
        """Vertex and triangle counts of the built mesh."""
        return self.mesh.stats()

    def to_stl_bytes(
        self,
        binary: bool = True,
        orientation: Union[ExportOrientation, str] = ExportOrientation.MUG_RELATIVE,
    ) -> bytes:
        """STL file contents (builds if not already built)."""
        from ..io.stl import to_ascii, to_binary

        mesh = self.oriented(orientation)
        if binary:
            return to_binary(mesh)
        return to_ascii(mesh, name=self._part_name).encode("ascii")

    def export_stl(
        self,
        filepath: Union[str, Path],
        binary: bool = True,
        orientation: Union[ExportOrientation, str] = ExportOrientation.MUG_RELATIVE,
    ) -> Path:
        """Export to STL file (builds if not already built).

        Args:
            filepath: Output path
            binary: If True, export binary STL (default), else ASCII
            orientation: 'mug-relative' keeps vessel coordinates, 'centered'
                moves the bounding box centre to the origin
        """
        from ..io.stl import write_stl

        mesh = self.oriented(orientation)
        logger.info(f"Exporting {self._part_name}: {mesh.triangle_count} triangles")
        path = write_stl(mesh, filepath, binary=binary, name=self._part_name)
        logger.info(f"Exported {self._part_name} to {path}")
        return path
