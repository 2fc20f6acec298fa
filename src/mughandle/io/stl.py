"""
STL serialization for handle meshes.

Binary layout (little-endian): 80-byte header, uint32 triangle count,
then per triangle 12 float32 (face normal + 3 vertices) and a uint16
attribute count that is always 0.

Face normals are recomputed from each triangle's vertices rather than taken
from the mesh's smooth vertex normals; degenerate triangles get a zero
normal.
"""

import logging
from pathlib import Path
from typing import Tuple, Union

import numpy as np

from ..core.mesh import Mesh

logger = logging.getLogger(__name__)

DEFAULT_HEADER = "Playground Ceramics Handle Generator - STL Export"
DEFAULT_SOLID_NAME = "handle"

HEADER_BYTES = 80

STL_TRIANGLE_DTYPE = np.dtype([
    ("normal", "<f4", (3,)),
    ("vertices", "<f4", (3, 3)),
    ("attr", "<u2"),
])


def triangles(mesh: Mesh) -> np.ndarray:
    """Vertex coordinates per triangle, shape (m, 3, 3)."""
    return mesh.positions[mesh.indices]


def face_normals(tris: np.ndarray) -> np.ndarray:
    """Unit face normals for (m, 3, 3) triangles; zero vector where degenerate."""
    tris = np.asarray(tris, dtype=np.float64)
    cross = np.cross(tris[:, 1] - tris[:, 0], tris[:, 2] - tris[:, 0])
    lengths = np.linalg.norm(cross, axis=1, keepdims=True)
    safe = np.where(lengths > 0, lengths, 1.0)
    return np.where(lengths > 0, cross / safe, 0.0)


def _header_bytes(header: Union[str, bytes]) -> bytes:
    raw = header.encode("ascii", errors="replace") if isinstance(header, str) else bytes(header)
    return raw[:HEADER_BYTES].ljust(HEADER_BYTES, b"\0")


def to_binary(mesh: Mesh, header: Union[str, bytes] = DEFAULT_HEADER) -> bytes:
    """
    Encode a mesh as binary STL.

    Args:
        mesh: Indexed triangle mesh
        header: Header text, truncated or zero-padded to 80 bytes

    Returns:
        ``84 + 50 * triangle_count`` bytes
    """
    tris = triangles(mesh)
    records = np.zeros(len(tris), dtype=STL_TRIANGLE_DTYPE)
    records["normal"] = face_normals(tris)
    records["vertices"] = tris

    count = np.array([len(tris)], dtype="<u4").tobytes()
    logger.debug(f"Binary STL: {len(tris)} triangles")
    return _header_bytes(header) + count + records.tobytes()


def to_ascii(mesh: Mesh, name: str = DEFAULT_SOLID_NAME) -> str:
    """Encode a mesh as ASCII STL with one facet block per triangle."""
    tris = triangles(mesh).astype(np.float64)
    normals = face_normals(tris)

    lines = [f"solid {name}"]
    for normal, (v0, v1, v2) in zip(normals, tris):
        lines.append(f"  facet normal {normal[0]:e} {normal[1]:e} {normal[2]:e}")
        lines.append("    outer loop")
        for v in (v0, v1, v2):
            lines.append(f"      vertex {v[0]:e} {v[1]:e} {v[2]:e}")
        lines.append("    endloop")
        lines.append("  endfacet")
    lines.append(f"endsolid {name}")
    return "\n".join(lines) + "\n"


def read_binary(data: bytes) -> Tuple[np.ndarray, np.ndarray]:
    """
    Parse binary STL bytes.

    Args:
        data: Complete binary STL file content

    Returns:
        (normals (m, 3), triangles (m, 3, 3)) as float32 arrays

    Raises:
        ValueError: If the data is shorter than its header or declared count
    """
    if len(data) < HEADER_BYTES + 4:
        raise ValueError(f"Binary STL too short: {len(data)} bytes")

    count = int(np.frombuffer(data, dtype="<u4", count=1, offset=HEADER_BYTES)[0])
    expected = HEADER_BYTES + 4 + count * STL_TRIANGLE_DTYPE.itemsize
    if len(data) < expected:
        raise ValueError(
            f"Binary STL declares {count} triangles ({expected} bytes) but has {len(data)} bytes"
        )

    records = np.frombuffer(data, dtype=STL_TRIANGLE_DTYPE, count=count, offset=HEADER_BYTES + 4)
    return records["normal"].copy(), records["vertices"].copy()


def write_stl(
    mesh: Mesh,
    filepath: Union[str, Path],
    binary: bool = True,
    header: Union[str, bytes] = DEFAULT_HEADER,
    name: str = DEFAULT_SOLID_NAME,
) -> Path:
    """
    Write a mesh to an STL file.

    Args:
        mesh: Mesh to write
        filepath: Output path
        binary: Binary STL if True, ASCII otherwise
        header: Binary header text
        name: ASCII solid name

    Returns:
        Path of the written file
    """
    filepath = Path(filepath)
    if binary:
        filepath.write_bytes(to_binary(mesh, header=header))
    else:
        filepath.write_text(to_ascii(mesh, name=name))
    logger.info(f"Wrote {mesh.triangle_count} triangles to {filepath}")
    return filepath
