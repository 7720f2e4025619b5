"""
Trail module - Turn ledger, wall geometry, meshes and hit testing.

This module contains:
- Direction / TurnConvexity: Axis-aligned facings and the turn law
- TurnLedger: Append-only record of turns
- calculate_edge_points: Corner offsets with gap filling
- SegmentMesh / TrailMesh: Vertex and index buffers
- HitTester: Position vs. wall footprint test
- Trail: Owner of a ledger and its cached segment meshes
"""

from lightcycle.trail.direction import Direction, TurnConvexity, turn_left, turn_right
from lightcycle.trail.ledger import TurnRecord, TurnLedger
from lightcycle.trail.segment import EdgePoints, calculate_edge_points, active_turn_record
from lightcycle.trail.mesh import (
    SegmentMesh,
    TrailMesh,
    SegmentMeshCache,
    generate_vertices,
    generate_indices,
    concatenate_meshes,
)
from lightcycle.trail.collision import HitTester, point_hits_segment, segment_bounds
from lightcycle.trail.trail import Trail, TrailConfig

__all__ = [
    "Direction",
    "TurnConvexity",
    "turn_left",
    "turn_right",
    "TurnRecord",
    "TurnLedger",
    "EdgePoints",
    "calculate_edge_points",
    "active_turn_record",
    "SegmentMesh",
    "TrailMesh",
    "SegmentMeshCache",
    "generate_vertices",
    "generate_indices",
    "concatenate_meshes",
    "HitTester",
    "point_hits_segment",
    "segment_bounds",
    "Trail",
    "TrailConfig",
]
