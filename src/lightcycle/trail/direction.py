"""
Direction - Axis-aligned facing and turn convexity.

Defines:
- Direction: the four ground-plane facings and their 90 degree rotation law
- TurnConvexity: which way a steering command turned
"""

from enum import Enum
import numpy as np


class TurnConvexity(Enum):
    """Which way a steering command turned."""
    LEFT = "left"
    RIGHT = "right"


class Direction(Enum):
    """Axis-aligned facing on the ground plane.

    Forward points down -Z, Right points down +X.
    """
    LEFT = "left"
    RIGHT = "right"
    FORWARD = "forward"
    BACKWARD = "backward"

    @classmethod
    def default(cls) -> "Direction":
        return cls.FORWARD

    @property
    def vector(self) -> np.ndarray:
        """Unit vector (x, y, z) for this facing."""
        return np.array(_VECTORS[self], dtype=np.float64)

    @property
    def yaw(self) -> float:
        """Rotation about +Y in radians for a model facing +X at rest."""
        return _YAWS[self]

    def turn_left(self) -> "Direction":
        return _LEFT_OF[self]

    def turn_right(self) -> "Direction":
        return _RIGHT_OF[self]

    def turn(self, convexity: TurnConvexity) -> "Direction":
        """Facing after a steering command of the given convexity."""
        if convexity is TurnConvexity.LEFT:
            return self.turn_left()
        return self.turn_right()


_VECTORS = {
    Direction.LEFT: (-1.0, 0.0, 0.0),
    Direction.RIGHT: (1.0, 0.0, 0.0),
    Direction.FORWARD: (0.0, 0.0, -1.0),
    Direction.BACKWARD: (0.0, 0.0, 1.0),
}

_YAWS = {
    Direction.RIGHT: 0.0,
    Direction.FORWARD: np.pi / 2,
    Direction.LEFT: np.pi,
    Direction.BACKWARD: np.pi * 3 / 2,
}

_LEFT_OF = {
    Direction.LEFT: Direction.BACKWARD,
    Direction.RIGHT: Direction.FORWARD,
    Direction.FORWARD: Direction.LEFT,
    Direction.BACKWARD: Direction.RIGHT,
}

_RIGHT_OF = {
    Direction.LEFT: Direction.FORWARD,
    Direction.RIGHT: Direction.BACKWARD,
    Direction.FORWARD: Direction.RIGHT,
    Direction.BACKWARD: Direction.LEFT,
}


def turn_left(direction: Direction) -> Direction:
    """Rotate a facing 90 degrees to the left."""
    return direction.turn_left()


def turn_right(direction: Direction) -> Direction:
    """Rotate a facing 90 degrees to the right."""
    return direction.turn_right()
