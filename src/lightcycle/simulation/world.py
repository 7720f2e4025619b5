"""
World - World state management for a match.

Manages:
- The cycles taking part
- Global time and frame count
- Crash history
"""

from dataclasses import dataclass
from typing import Dict, List, Optional, Tuple

from lightcycle.cycle.cycle import LightCycle, CycleConfig
from lightcycle.trail.direction import Direction


@dataclass(frozen=True)
class CrashEvent:
    """A cycle running into a wall."""
    cycle_id: int
    time: float
    frame: int
    position: Tuple[float, float, float]
    wall_owner_id: int                 # Cycle whose trail was hit
    segment_index: int

    @property
    def self_inflicted(self) -> bool:
        return self.cycle_id == self.wall_owner_id

    def get_state(self) -> dict:
        return {
            "cycle_id": self.cycle_id,
            "time": self.time,
            "frame": self.frame,
            "position": self.position,
            "wall_owner_id": self.wall_owner_id,
            "segment_index": self.segment_index,
        }


class World:
    """World state container for a match.

    Holds the cycles and the clock; the simulator drives it.
    """

    def __init__(self):
        """Initialize an empty world."""
        self._cycles: Dict[int, LightCycle] = {}
        self._next_cycle_id: int = 0

        self._crashes: List[CrashEvent] = []

        # Timing
        self._time: float = 0.0
        self._frame: int = 0

    @property
    def time(self) -> float:
        """Current match time in seconds."""
        return self._time

    @property
    def frame(self) -> int:
        """Current frame number."""
        return self._frame

    @property
    def cycles(self) -> List[LightCycle]:
        """List of all cycles."""
        return list(self._cycles.values())

    @property
    def cycle_count(self) -> int:
        return len(self._cycles)

    @property
    def alive_cycles(self) -> List[LightCycle]:
        """Cycles that have not crashed."""
        return [c for c in self._cycles.values() if not c.is_destroyed]

    @property
    def crashes(self) -> List[CrashEvent]:
        return list(self._crashes)

    def add_cycle(self, cycle: LightCycle, cycle_id: int | None = None) -> int:
        """Add a cycle to the world.

        Args:
            cycle: Cycle to add
            cycle_id: Keep this ID instead of assigning the next free one

        Returns:
            Cycle ID
        """
        if cycle_id is None:
            cycle_id = self._next_cycle_id
        elif cycle_id in self._cycles:
            raise ValueError(f"Cycle ID {cycle_id} already in use")
        self._next_cycle_id = max(self._next_cycle_id, cycle_id + 1)

        cycle.cycle_id = cycle_id
        self._cycles[cycle_id] = cycle
        return cycle_id

    def spawn_cycle(
        self,
        position: Tuple[float, float, float],
        facing: Direction = Direction.FORWARD,
        config: CycleConfig | None = None,
    ) -> int:
        """Create a cycle at a start position.

        Returns:
            Cycle ID
        """
        cycle = LightCycle(config)
        cycle.reset(position, facing)
        return self.add_cycle(cycle)

    def remove_cycle(self, cycle_id: int) -> bool:
        """Remove a cycle from the world.

        Returns:
            True if the cycle was removed
        """
        if cycle_id not in self._cycles:
            return False
        del self._cycles[cycle_id]
        return True

    def get_cycle(self, cycle_id: int) -> Optional[LightCycle]:
        return self._cycles.get(cycle_id)

    def record_crash(self, event: CrashEvent) -> None:
        self._crashes.append(event)

    def advance_time(self, dt: float) -> None:
        """Advance match time.

        Args:
            dt: Time step in seconds
        """
        self._time += dt
        self._frame += 1

    def reset(self) -> None:
        """Reset world state."""
        self._cycles.clear()
        self._crashes.clear()
        self._next_cycle_id = 0
        self._time = 0.0
        self._frame = 0

    def get_state(self) -> dict:
        """Get world state for serialization."""
        return {
            "time": self._time,
            "frame": self._frame,
            "cycle_count": self.cycle_count,
            "alive": [c.cycle_id for c in self.alive_cycles],
            "crashes": [event.get_state() for event in self._crashes],
        }
