"""
Indexed triangle mesh value type.

Buffers are numpy arrays: positions/normals (n, 3) float32, uvs (n, 2)
float32 and indices (m, 3) uint32. ``ravel()`` on any of them gives the
flat renderer-style buffer. Arrays are made read-only on construction.
"""

from dataclasses import dataclass
from typing import Dict, Tuple

import numpy as np


def _frozen(array, dtype, width: int) -> np.ndarray:
    out = np.array(array, dtype=dtype).reshape(-1, width)
    out.setflags(write=False)
    return out


@dataclass(frozen=True, eq=False)
class Mesh:
    """
    Immutable indexed triangle mesh.

    Attributes:
        positions: Vertex positions, (n, 3) float32
        normals: Per-vertex normals, same count and order as positions
        uvs: Per-vertex texture coordinates, (n, 2) float32
        indices: Triangle vertex indices, (m, 3) uint32
    """
    positions: np.ndarray
    normals: np.ndarray
    uvs: np.ndarray
    indices: np.ndarray

    def __post_init__(self):
        indices = np.asarray(self.indices)
        if indices.size % 3 != 0:
            raise ValueError(f"Index buffer length {indices.size} is not a multiple of 3")

        object.__setattr__(self, "positions", _frozen(self.positions, np.float32, 3))
        object.__setattr__(self, "normals", _frozen(self.normals, np.float32, 3))
        object.__setattr__(self, "uvs", _frozen(self.uvs, np.float32, 2))
        object.__setattr__(self, "indices", _frozen(indices, np.uint32, 3))

        n = len(self.positions)
        if len(self.normals) != n or len(self.uvs) != n:
            raise ValueError(
                f"Attribute counts differ: {n} positions, {len(self.normals)} normals, {len(self.uvs)} uvs"
            )
        if self.indices.size and int(self.indices.max()) >= n:
            raise ValueError(f"Index {int(self.indices.max())} out of range for {n} vertices")

    @property
    def vertex_count(self) -> int:
        return len(self.positions)

    @property
    def triangle_count(self) -> int:
        return len(self.indices)

    def bounding_box(self) -> Tuple[np.ndarray, np.ndarray]:
        """(min corner, max corner) of the vertex positions."""
        if self.vertex_count == 0:
            zero = np.zeros(3, dtype=np.float32)
            return zero, zero
        return self.positions.min(axis=0), self.positions.max(axis=0)

    def translated(self, offset) -> "Mesh":
        """Copy of the mesh moved by ``offset``."""
        offset = np.asarray(offset, dtype=np.float64).reshape(3)
        return Mesh(
            positions=self.positions.astype(np.float64) + offset,
            normals=self.normals,
            uvs=self.uvs,
            indices=self.indices,
        )

    def centered(self) -> "Mesh":
        """Copy of the mesh with its bounding box centred on the origin."""
        low, high = self.bounding_box()
        center = (low.astype(np.float64) + high.astype(np.float64)) / 2
        return self.translated(-center)

    def stats(self) -> Dict[str, int]:
        return {"vertices": self.vertex_count, "triangles": self.triangle_count}
