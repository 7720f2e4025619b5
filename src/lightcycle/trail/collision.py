"""
Hit tester - Does a position touch a laid wall segment?

Tests the position against the ground-plane bounding rectangle of a segment's
corners, grown by a small tolerance. Height is not checked. Segments are
always axis-aligned rectangles, so the bounding rectangle is their exact
footprint.
"""

from typing import Iterable, Optional, Sequence, Tuple
import numpy as np

from lightcycle.trail.segment import EdgePoints


DEFAULT_TOLERANCE = 0.05


def segment_bounds(edge_points: EdgePoints) -> Tuple[float, float, float, float]:
    """Ground-plane bounds of a segment.

    Returns:
        Tuple of (min_x, max_x, min_z, max_z)
    """
    corners = edge_points.as_array()
    xs = corners[:, 0]
    zs = corners[:, 2]
    return (float(xs.min()), float(xs.max()), float(zs.min()), float(zs.max()))


def is_axis_aligned(edge_points: EdgePoints, eps: float = 1e-9) -> bool:
    """Check the four corners form an axis-aligned rectangle on the ground.

    Every corner must sit on the bounding rectangle's outline at one of its
    corners (degenerate zero-length walls are allowed).
    """
    min_x, max_x, min_z, max_z = segment_bounds(edge_points)
    for corner in edge_points.as_array():
        on_x = abs(corner[0] - min_x) <= eps or abs(corner[0] - max_x) <= eps
        on_z = abs(corner[2] - min_z) <= eps or abs(corner[2] - max_z) <= eps
        if not (on_x and on_z):
            return False
    return True


def point_hits_segment(
    position: Sequence[float],
    edge_points: EdgePoints,
    tolerance: float = DEFAULT_TOLERANCE,
) -> bool:
    """Check if a position lies inside a segment's footprint.

    Args:
        position: (x, y, z) position; y is ignored
        edge_points: Segment corners
        tolerance: Distance the footprint is grown by on every side

    Returns:
        True if the position is within the grown rectangle (inclusive)
    """
    min_x, max_x, min_z, max_z = segment_bounds(edge_points)
    x = position[0]
    z = position[2]
    return (
        min_x - tolerance <= x <= max_x + tolerance
        and min_z - tolerance <= z <= max_z + tolerance
    )


class HitTester:
    """Tests positions against finalized wall segments.

    Usage:
        tester = HitTester()
        index = tester.first_hit(cycle.position, trail.iter_edge_points())
        if index is not None:
            ...
    """

    def __init__(
        self,
        tolerance: float = DEFAULT_TOLERANCE,
        check_axis_aligned: bool = False,
    ):
        """Initialize hit tester.

        Args:
            tolerance: Distance each footprint is grown by
            check_axis_aligned: Raise if a segment is not an axis-aligned
                rectangle (the bounding test would be inexact)
        """
        if tolerance < 0 or not np.isfinite(tolerance):
            raise ValueError(f"Tolerance must be finite and >= 0, got {tolerance}")
        self.tolerance = tolerance
        self.check_axis_aligned = check_axis_aligned
        self._tests_run: int = 0

    @property
    def tests_run(self) -> int:
        """Number of segment tests performed."""
        return self._tests_run

    def hits(self, position: Sequence[float], edge_points: EdgePoints) -> bool:
        """Test one segment."""
        if self.check_axis_aligned and not is_axis_aligned(edge_points):
            raise ValueError(
                f"Segment footprint is not an axis-aligned rectangle: {edge_points.get_state()}"
            )
        self._tests_run += 1
        return point_hits_segment(position, edge_points, self.tolerance)

    def first_hit(
        self,
        position: Sequence[float],
        segments: Iterable[EdgePoints],
    ) -> Optional[int]:
        """Index of the first segment the position touches.

        Returns:
            Position of the hit segment in `segments`, or None
        """
        for i, edge_points in enumerate(segments):
            if self.hits(position, edge_points):
                return i
        return None

    def any_hit(
        self,
        position: Sequence[float],
        segments: Iterable[EdgePoints],
    ) -> bool:
        """Check if the position touches any of the segments."""
        return self.first_hit(position, segments) is not None
