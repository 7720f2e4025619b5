"""
Mesh builder - Vertex and index buffers for trail walls.

Provides:
- Per-segment buffers (8 vertices, 30 indices, no bottom face)
- Concatenation of segment buffers into one trail mesh
- An index-keyed cache for finalized segments
"""

from dataclasses import dataclass, field
from typing import Dict, Iterable, List, Optional
import numpy as np

from lightcycle.trail.segment import EdgePoints


VERTICES_PER_SEGMENT = 8
INDICES_PER_SEGMENT = 30

# Two long sides, two short ends, then the top.
SEGMENT_INDEX_PATTERN = np.array(
    [
        0, 1, 2,
        3, 2, 1,
        6, 5, 4,
        5, 6, 7,
        0, 4, 5,
        5, 1, 0,
        7, 6, 2,
        2, 3, 7,
        5, 3, 1,
        3, 5, 7,
    ],
    dtype=np.uint32,
)


def generate_vertices(
    edge_points: EdgePoints,
    y_offset: float,
    height: float,
) -> np.ndarray:
    """Extrude the four corners into eight vertices.

    Order is a_low, a_high, b_low, b_high, c_low, c_high, d_low, d_high.
    The corner y coordinates are ignored; the floor sits at `y_offset`.

    Returns:
        (8, 3) float32 array
    """
    low = float(y_offset)
    high = low + float(height)

    vertices = np.empty((VERTICES_PER_SEGMENT, 3), dtype=np.float32)
    for i, corner in enumerate((edge_points.a, edge_points.b, edge_points.c, edge_points.d)):
        vertices[2 * i] = (corner[0], low, corner[2])
        vertices[2 * i + 1] = (corner[0], high, corner[2])
    return vertices


def generate_indices(segment_index: int) -> np.ndarray:
    """Triangle indices for the segment at `segment_index` in a trail mesh.

    Returns:
        (30,) uint32 array
    """
    if segment_index < 0:
        raise ValueError(f"Segment index must be non-negative, got {segment_index}")
    # i * 8 since every segment owns its own block of 8 vertices
    return SEGMENT_INDEX_PATTERN + np.uint32(segment_index * VERTICES_PER_SEGMENT)


@dataclass
class SegmentMesh:
    """Render buffers for one wall segment."""
    index: int
    edge_points: EdgePoints
    y_offset: float
    height: float
    vertices: np.ndarray
    indices: np.ndarray
    active: bool = False

    @classmethod
    def build(
        cls,
        index: int,
        edge_points: EdgePoints,
        y_offset: float,
        height: float,
        active: bool = False,
    ) -> "SegmentMesh":
        """Generate vertices and indices for a segment.

        The buffers are read-only; cached segments are shared between callers.
        """
        vertices = generate_vertices(edge_points, y_offset, height)
        indices = generate_indices(index)
        vertices.setflags(write=False)
        indices.setflags(write=False)
        return cls(
            index=index,
            edge_points=edge_points,
            y_offset=y_offset,
            height=height,
            vertices=vertices,
            indices=indices,
            active=active,
        )

    @property
    def normals(self) -> np.ndarray:
        """Flat up-facing normals, one per vertex."""
        return np.tile(np.array([0.0, 1.0, 0.0], dtype=np.float32), (VERTICES_PER_SEGMENT, 1))

    @property
    def uvs(self) -> np.ndarray:
        """Zero texture coordinates, one per vertex."""
        return np.zeros((VERTICES_PER_SEGMENT, 2), dtype=np.float32)


@dataclass
class TrailMesh:
    """Concatenated render buffers for a run of segments."""
    vertices: np.ndarray = field(
        default_factory=lambda: np.zeros((0, 3), dtype=np.float32)
    )
    indices: np.ndarray = field(
        default_factory=lambda: np.zeros(0, dtype=np.uint32)
    )

    @property
    def vertex_count(self) -> int:
        return len(self.vertices)

    @property
    def index_count(self) -> int:
        return len(self.indices)

    @property
    def triangle_count(self) -> int:
        return len(self.indices) // 3

    @property
    def segment_count(self) -> int:
        return len(self.vertices) // VERTICES_PER_SEGMENT

    @property
    def normals(self) -> np.ndarray:
        return np.tile(np.array([0.0, 1.0, 0.0], dtype=np.float32), (self.vertex_count, 1))

    @property
    def uvs(self) -> np.ndarray:
        return np.zeros((self.vertex_count, 2), dtype=np.float32)

    @property
    def triangles(self) -> np.ndarray:
        """Indices grouped as (n, 3)."""
        return self.indices.reshape(-1, 3)

    @property
    def is_empty(self) -> bool:
        return self.vertex_count == 0


def concatenate_meshes(meshes: Iterable[SegmentMesh]) -> TrailMesh:
    """Append segment buffers in order.

    Each segment's indices are regenerated from its position in the sequence,
    so the result is valid even if the inputs were built with other indices.
    Vertices shared between neighbours are not merged.
    """
    meshes = list(meshes)
    if not meshes:
        return TrailMesh()

    vertices = np.concatenate([m.vertices for m in meshes]).astype(np.float32, copy=False)
    indices = np.concatenate([
        SEGMENT_INDEX_PATTERN + np.uint32(i * VERTICES_PER_SEGMENT)
        for i in range(len(meshes))
    ])
    return TrailMesh(vertices=vertices, indices=indices)


class SegmentMeshCache:
    """Finalized segment meshes keyed by segment index.

    Finalized segments never change, so entries are only dropped by
    `clear()` when the wall dimensions themselves change.
    """

    def __init__(self):
        self._meshes: Dict[int, SegmentMesh] = {}
        self._hits: int = 0
        self._misses: int = 0

    def __len__(self) -> int:
        return len(self._meshes)

    def __contains__(self, index: int) -> bool:
        return index in self._meshes

    def get(self, index: int) -> Optional[SegmentMesh]:
        mesh = self._meshes.get(index)
        if mesh is None:
            self._misses += 1
        else:
            self._hits += 1
        return mesh

    def put(self, mesh: SegmentMesh) -> None:
        if mesh.active:
            raise ValueError("Active segment meshes are rebuilt every tick and not cached")
        self._meshes[mesh.index] = mesh

    def ordered(self) -> List[SegmentMesh]:
        """Cached meshes in segment order."""
        return [self._meshes[i] for i in sorted(self._meshes)]

    def clear(self) -> None:
        self._meshes.clear()

    def get_state(self) -> dict:
        return {
            "cached_segments": len(self._meshes),
            "hits": self._hits,
            "misses": self._misses,
        }
