"""
Triangle accumulation and STL serialization (binary and ASCII).

Binary layout: 80-byte header holding the model name, little-endian uint32
triangle count, then 50 bytes per triangle (float32 normal, three float32
vertices, uint16 attribute = 0).
"""

from __future__ import annotations

import logging
import struct
from typing import BinaryIO, Dict, List, Optional, Tuple

import numpy as np
import trimesh

logger = logging.getLogger(__name__)

HEADER_SIZE = 80

STL_TRIANGLE_DTYPE = np.dtype([
    ("normal", "<f4", (3,)),
    ("vertices", "<f4", (3, 3)),
    ("attr", "<u2"),
])


class TriangleMesh:
    """Named, insertion-ordered collection of triangles.

    Triangles are added in (M, 3, 3) float64 batches and only joined when
    the whole mesh is requested.
    """

    def __init__(self, name: str):
        self.name = name
        self._batches: List[np.ndarray] = []
        self._count = 0
        self._normals: Optional[np.ndarray] = None

    def __len__(self) -> int:
        return self._count

    def add(self, triangles: np.ndarray) -> None:
        triangles = np.asarray(triangles, dtype=np.float64)
        if triangles.ndim != 3 or triangles.shape[1:] != (3, 3):
            raise ValueError(f"Expected (M, 3, 3) triangles, got {triangles.shape}")
        self._batches.append(triangles)
        self._count += len(triangles)
        self._normals = None

    @property
    def triangles(self) -> np.ndarray:
        if not self._batches:
            return np.zeros((0, 3, 3), dtype=np.float64)
        if len(self._batches) > 1:
            self._batches = [np.concatenate(self._batches, axis=0)]
        return self._batches[0]

    @property
    def normals(self) -> np.ndarray:
        """Per-triangle unit normals, computed once until more triangles are added."""
        if self._normals is None:
            self._normals = compute_normals(self.triangles)
        return self._normals

    def degenerate_count(self) -> int:
        """Number of zero-area triangles (their normals are NaN)."""
        return int(np.count_nonzero(np.isnan(self.normals).any(axis=1)))

    def to_trimesh(self) -> trimesh.Trimesh:
        tris = self.triangles
        return trimesh.Trimesh(
            vertices=tris.reshape(-1, 3),
            faces=np.arange(len(tris) * 3).reshape(-1, 3),
            process=True,
        )


def compute_normals(triangles: np.ndarray) -> np.ndarray:
    """Unit normals of (v1 - v0) x (v2 - v0); zero-area triangles give NaN."""
    triangles = np.asarray(triangles, dtype=np.float64)
    cross = np.cross(
        triangles[:, 1] - triangles[:, 0],
        triangles[:, 2] - triangles[:, 0],
    )
    length = np.linalg.norm(cross, axis=1)
    with np.errstate(invalid="ignore", divide="ignore"):
        return cross / length[:, None]


def encode_header(name: str) -> bytes:
    """Name as ASCII, truncated and space padded to 80 bytes."""
    raw = name.encode("ascii", errors="replace")[:HEADER_SIZE]
    return raw.ljust(HEADER_SIZE, b" ")


def write_binary_stl(mesh: TriangleMesh, stream: BinaryIO) -> int:
    """Write *mesh* as binary STL; returns the number of bytes written."""
    tris = mesh.triangles
    data = np.empty((len(tris),), dtype=STL_TRIANGLE_DTYPE)
    data["normal"] = mesh.normals
    data["vertices"] = tris
    data["attr"] = 0

    stream.write(encode_header(mesh.name))
    stream.write(struct.pack("<I", len(tris)))
    stream.write(data.tobytes())
    stream.flush()
    return HEADER_SIZE + 4 + data.nbytes


def write_ascii_stl(mesh: TriangleMesh, stream: BinaryIO) -> None:
    """Write *mesh* as ASCII STL to a binary stream."""
    name = mesh.name.encode("ascii", errors="replace").decode("ascii")
    tris = mesh.triangles.astype(np.float32)
    normals = mesh.normals.astype(np.float32)

    stream.write(f"solid {name}\n".encode("ascii"))
    for normal, (a, b, c) in zip(normals, tris):
        lines = [
            f"  facet normal {normal[0]:.6e} {normal[1]:.6e} {normal[2]:.6e}",
            "    outer loop",
            f"      vertex {a[0]:.6e} {a[1]:.6e} {a[2]:.6e}",
            f"      vertex {b[0]:.6e} {b[1]:.6e} {b[2]:.6e}",
            f"      vertex {c[0]:.6e} {c[1]:.6e} {c[2]:.6e}",
            "    endloop",
            "  endfacet",
        ]
        stream.write(("\n".join(lines) + "\n").encode("ascii"))
    stream.write(f"endsolid {name}\n".encode("ascii"))
    stream.flush()


def read_binary_stl(stream: BinaryIO) -> Tuple[str, np.ndarray, np.ndarray]:
    """Parse a binary STL.

    Returns:
        (name, normals (M, 3) float32, triangles (M, 3, 3) float32)
    """
    header = stream.read(HEADER_SIZE)
    count_bytes = stream.read(4)
    if len(header) != HEADER_SIZE or len(count_bytes) != 4:
        raise ValueError("Truncated STL header")
    (count,) = struct.unpack("<I", count_bytes)
    body = stream.read(count * STL_TRIANGLE_DTYPE.itemsize)
    if len(body) != count * STL_TRIANGLE_DTYPE.itemsize:
        raise ValueError(
            f"Truncated STL body: expected {count} triangles, "
            f"got {len(body) // STL_TRIANGLE_DTYPE.itemsize}"
        )
    data = np.frombuffer(body, dtype=STL_TRIANGLE_DTYPE)
    name = header.decode("ascii", errors="replace").rstrip(" ")
    return name, data["normal"].copy(), data["vertices"].copy()


def mesh_report(mesh: TriangleMesh) -> Dict[str, object]:
    """Topology/volume summary computed with trimesh (vertices merged)."""
    tm = mesh.to_trimesh()
    bounds = tm.bounds if len(tm.vertices) else np.zeros((2, 3))
    report = {
        "triangles": len(mesh),
        "degenerate_triangles": mesh.degenerate_count(),
        "vertices": int(len(tm.vertices)),
        "watertight": bool(tm.is_watertight),
        "winding_consistent": bool(tm.is_winding_consistent),
        "volume_mm3": float(tm.volume),
        "bounds_min": [float(v) for v in bounds[0]],
        "bounds_max": [float(v) for v in bounds[1]],
    }
    logger.debug("Mesh report: %s", report)
    return report
