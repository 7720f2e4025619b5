"""
Segment geometry - Corner points of a wall slab between two turns.

Defines:
- EdgePoints: the four ground-plane corners of a wall segment
- calculate_edge_points: corner offsets with gap filling at left-turn corners
- active_turn_record: provisional end record for the segment still being laid
"""

from dataclasses import dataclass
from typing import Sequence
import numpy as np

from lightcycle.trail.direction import Direction, TurnConvexity
from lightcycle.trail.ledger import TurnRecord


# Offset of c/d along the axis of b's facing, as (axis, sign), keyed by
# b's convexity then b's facing.
_SIDE_OFFSETS = {
    TurnConvexity.RIGHT: {
        Direction.LEFT: (0, -1.0),
        Direction.RIGHT: (0, 1.0),
        Direction.FORWARD: (2, -1.0),
        Direction.BACKWARD: (2, 1.0),
    },
    TurnConvexity.LEFT: {
        Direction.LEFT: (0, 1.0),
        Direction.RIGHT: (0, -1.0),
        Direction.FORWARD: (2, 1.0),
        Direction.BACKWARD: (2, -1.0),
    },
}

# Nudge applied to a/c when the segment starts at a left-turn corner.
_GAP_FILL_OFFSETS = {
    TurnConvexity.RIGHT: {
        Direction.LEFT: (2, -1.0),
        Direction.RIGHT: (2, 1.0),
        Direction.FORWARD: (0, 1.0),
        Direction.BACKWARD: (0, -1.0),
    },
    TurnConvexity.LEFT: {
        Direction.LEFT: (2, 1.0),
        Direction.RIGHT: (2, -1.0),
        Direction.FORWARD: (0, -1.0),
        Direction.BACKWARD: (0, 1.0),
    },
}


@dataclass(frozen=True, eq=False)
class EdgePoints:
    """Corners of one wall segment.

    `a` and `b` lie on the cycle's path (a possibly pulled back to close a
    corner); `c` and `d` are the same points shifted sideways by the wall
    width.
    """
    a: np.ndarray
    b: np.ndarray
    c: np.ndarray
    d: np.ndarray

    def as_array(self) -> np.ndarray:
        """Corners stacked in (a, b, c, d) order as a (4, 3) array."""
        return np.stack([self.a, self.b, self.c, self.d])

    def get_state(self) -> dict:
        return {
            "a": self.a.tolist(),
            "b": self.b.tolist(),
            "c": self.c.tolist(),
            "d": self.d.tolist(),
        }


def calculate_edge_points(
    a_turn: TurnRecord,
    b_turn: TurnRecord,
    half_width: float,
) -> EdgePoints:
    """Calculate the four corners of the wall between two turns.

    The side the wall is offset to depends on b's facing and convexity, which
    always lands it on the right-hand side of the direction travelled from a
    to b. When a was a left turn the start of the wall is pulled back by the
    wall width so it meets the previous segment without a gap. b and d are
    never moved.

    Args:
        a_turn: Turn record at the segment start
        b_turn: Turn record at the segment end
        half_width: Wall width

    Returns:
        EdgePoints for the segment
    """
    w = float(half_width)

    a = np.array(a_turn.position, dtype=np.float64)
    b = np.array(b_turn.position, dtype=np.float64)
    c = a.copy()
    d = b.copy()

    axis, sign = _SIDE_OFFSETS[b_turn.convexity][b_turn.facing]
    c[axis] += sign * w
    d[axis] += sign * w

    # fill gaps
    if a_turn.convexity is TurnConvexity.LEFT:
        axis, sign = _GAP_FILL_OFFSETS[b_turn.convexity][b_turn.facing]
        a[axis] += sign * w
        c[axis] += sign * w

    for corner in (a, b, c, d):
        corner.setflags(write=False)
    return EdgePoints(a=a, b=b, c=c, d=d)


def active_turn_record(position: Sequence[float], facing: Direction) -> TurnRecord:
    """Provisional end record for the segment from the last turn to `position`.

    Uses a right turn out of the current facing, which puts the wall on the
    same side as the finalized segment it becomes once the next turn is made.
    """
    return TurnRecord(tuple(position), facing.turn_right(), TurnConvexity.RIGHT)
