"""
Light cycle - A vehicle that drives on axis-aligned headings and lays a trail.

Integrates:
- Discrete left/right turn commands
- Boost
- Position integration along the current facing
- The trail of walls behind it
"""

from dataclasses import dataclass, field
from typing import Any, Dict, Optional, Tuple
import logging
import math
import numpy as np

from lightcycle.trail.direction import Direction, TurnConvexity
from lightcycle.trail.ledger import TurnRecord, as_point
from lightcycle.trail.mesh import SegmentMesh
from lightcycle.trail.trail import Trail, TrailConfig


logger = logging.getLogger(__name__)


@dataclass
class CycleConfig:
    """Light cycle configuration.

    Defaults match the arena the trail core was first built for.
    """
    speed: float = 2.0                 # World units per second
    boost_multiplier: float = 2.0      # Speed factor while boosting
    start_position: Tuple[float, float, float] = (1000.0, 0.5, 1000.0)
    start_facing: Direction = Direction.FORWARD
    trail: TrailConfig | None = None

    def __post_init__(self):
        if not math.isfinite(self.speed) or self.speed < 0:
            raise ValueError(f"speed must be finite and >= 0, got {self.speed}")
        if not math.isfinite(self.boost_multiplier) or self.boost_multiplier < 0:
            raise ValueError(
                f"boost_multiplier must be finite and >= 0, got {self.boost_multiplier}"
            )
        self.start_position = as_point(self.start_position)


@dataclass
class CycleInputs:
    """Rider commands for one tick."""
    turn: TurnConvexity | None = None  # At most one turn per tick
    boost: bool = False


@dataclass
class CycleState:
    """Current cycle state."""
    position: np.ndarray = field(default_factory=lambda: np.zeros(3))
    facing: Direction = Direction.FORWARD
    boost: bool = False
    destroyed: bool = False
    distance: float = 0.0              # Total distance driven


class LightCycle:
    """A light cycle and the trail it lays.

    Usage:
        cycle = LightCycle()
        cycle.step(CycleInputs(turn=TurnConvexity.LEFT), dt=1 / 60)
        mesh = cycle.trail.build_mesh()
    """

    def __init__(
        self,
        config: CycleConfig | None = None,
        cycle_id: int = 0,
    ):
        """Initialize cycle at its configured start.

        Args:
            config: Cycle configuration. Uses defaults if None.
            cycle_id: Unique identifier for this cycle instance
        """
        self.config = config or CycleConfig()
        self.cycle_id = cycle_id

        self.state = CycleState()
        self.trail = Trail(
            self.config.trail,
            self.config.start_position,
            self.config.start_facing,
        )

        self.reset()

    def reset(
        self,
        position: Tuple[float, float, float] | None = None,
        facing: Direction | None = None,
    ) -> None:
        """Reset cycle and trail to a start position.

        Args:
            position: Starting position (config start if None)
            facing: Starting facing (config start if None)
        """
        position = as_point(position if position is not None else self.config.start_position)
        facing = facing or self.config.start_facing

        self.state = CycleState(position=np.array(position, dtype=np.float64), facing=facing)
        self.trail.reset(position, facing)

    @property
    def position(self) -> np.ndarray:
        """Current (x, y, z) position."""
        return self.state.position.copy()

    @property
    def facing(self) -> Direction:
        return self.state.facing

    @property
    def yaw(self) -> float:
        """Model rotation about +Y for the current facing."""
        return self.state.facing.yaw

    @property
    def is_destroyed(self) -> bool:
        return self.state.destroyed

    @property
    def current_speed(self) -> float:
        """Speed including boost."""
        if self.state.boost:
            return self.config.speed * self.config.boost_multiplier
        return self.config.speed

    def boost(self) -> None:
        self.state.boost = True

    def stop_boost(self) -> None:
        self.state.boost = False

    def turn(self, convexity: TurnConvexity) -> Optional[TurnRecord]:
        """Turn 90 degrees and record the corner at the current position.

        Returns:
            The new turn record, or None if the cycle is destroyed
        """
        if self.state.destroyed:
            return None
        self.state.facing = self.state.facing.turn(convexity)
        return self.trail.record_turn(self.state.position, self.state.facing, convexity)

    def turn_left(self) -> Optional[TurnRecord]:
        return self.turn(TurnConvexity.LEFT)

    def turn_right(self) -> Optional[TurnRecord]:
        return self.turn(TurnConvexity.RIGHT)

    def drive(self, dt: float) -> None:
        """Advance along the current facing.

        Args:
            dt: Time step in seconds
        """
        if not math.isfinite(dt) or dt < 0:
            raise ValueError(f"dt must be finite and >= 0, got {dt}")
        if self.state.destroyed:
            return

        step = self.current_speed * dt
        self.state.position = self.state.position + self.state.facing.vector * step
        self.state.distance += step

    def step(self, inputs: CycleInputs, dt: float) -> None:
        """Apply one tick of inputs: turn (if any), then drive.

        Args:
            inputs: Commands for this tick
            dt: Time step in seconds
        """
        if self.state.destroyed:
            return

        self.state.boost = inputs.boost
        if inputs.turn is not None:
            self.turn(inputs.turn)
        self.drive(dt)

    def active_segment(self) -> SegmentMesh:
        """Wall from the last turn to the current position."""
        return self.trail.active_segment(self.state.position, self.state.facing)

    def destroy(self) -> None:
        """Mark the cycle as destroyed; it stops moving and turning."""
        if not self.state.destroyed:
            logger.info("Cycle %d destroyed at %s", self.cycle_id, self.state.position.tolist())
        self.state.destroyed = True

    def get_observation(self) -> np.ndarray:
        """Flat observation vector.

        Returns:
            Array of [x, y, z, one-hot facing (4), boost, destroyed]
        """
        facing = np.zeros(len(Direction))
        facing[list(Direction).index(self.state.facing)] = 1.0
        return np.concatenate([
            self.state.position,
            facing,
            [float(self.state.boost), float(self.state.destroyed)],
        ])

    def get_state(self) -> Dict[str, Any]:
        """Get cycle state for serialization.

        Returns:
            Dictionary containing cycle data
        """
        return {
            "cycle_id": self.cycle_id,
            "position": self.state.position.tolist(),
            "facing": self.state.facing.value,
            "yaw": self.yaw,
            "speed": self.current_speed,
            "boost": self.state.boost,
            "destroyed": self.state.destroyed,
            "distance": self.state.distance,
            "num_turns": self.trail.ledger.num_turns,
        }
