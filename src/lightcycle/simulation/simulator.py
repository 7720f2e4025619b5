"""
Simulator - Tick loop and crash detection for a match.

Provides:
- Fixed time stepping
- Per-tick turn / drive / active-wall / hit-test ordering
- Crash callbacks for the game-state layer
"""

from dataclasses import dataclass
from pathlib import Path
from typing import Any, Callable, Dict, List, Optional
import logging
import sys
import numpy as np

from lightcycle.cycle.cycle import LightCycle, CycleConfig, CycleInputs
from lightcycle.trail.direction import Direction
from lightcycle.trail.mesh import SegmentMesh
from lightcycle.simulation.world import World, CrashEvent


logger = logging.getLogger(__name__)

LOG_FORMAT = "%(asctime)s [%(levelname)s] %(message)s"


def configure_logging(level: str = "INFO", log_file: Path | str | None = None) -> None:
    """Configure root logging to stdout and an optional file."""
    handlers: List[logging.Handler] = [logging.StreamHandler(sys.stdout)]
    if log_file:
        handlers.append(logging.FileHandler(log_file))

    logging.basicConfig(
        level=getattr(logging, level.upper()),
        format=LOG_FORMAT,
        handlers=handlers,
    )


@dataclass
class SimulatorConfig:
    """Simulator configuration."""
    # Time stepping
    fixed_dt: float = 1.0 / 60.0      # 60 ticks per second

    # Limits
    max_time: float = 600.0           # Maximum match time (10 min default)

    # Collision
    recent_segment_grace: int = 1     # Newest own segments skipped (cycle sits on their end)
    cross_trail_collision: bool = False  # Also test against other cycles' walls
    stop_on_crash: bool = True        # End the round once it is decided

    # Logging
    log_level: Optional[str] = None   # Configure logging when set
    log_file: Optional[Path] = None

    def __post_init__(self):
        if self.fixed_dt <= 0:
            raise ValueError(f"fixed_dt must be positive, got {self.fixed_dt}")
        if self.recent_segment_grace < 0:
            raise ValueError(
                f"recent_segment_grace must be >= 0, got {self.recent_segment_grace}"
            )
        if self.log_file and isinstance(self.log_file, str):
            self.log_file = Path(self.log_file)


class Simulator:
    """Light cycle match simulator.

    Each tick, for every cycle still alive:
    1. apply at most one turn command
    2. drive along the current facing
    3. rebuild the active wall segment
    4. hit-test the position against finalized walls

    Usage:
        sim = Simulator()
        cycle_id = sim.spawn_cycle((0.0, 0.0, 0.0))
        sim.start()

        while sim.is_running:
            observations = sim.step({cycle_id: CycleInputs()})
    """

    def __init__(self, config: SimulatorConfig | None = None):
        """Initialize simulator.

        Args:
            config: Simulator configuration. Uses defaults if None.
        """
        self.config = config or SimulatorConfig()
        if self.config.log_level:
            configure_logging(self.config.log_level, self.config.log_file)

        self.world = World()

        # State
        self._running: bool = False

        # Active wall per cycle, rebuilt every tick
        self._active_segments: Dict[int, SegmentMesh] = {}

        # Callbacks
        self._pre_step_callbacks: List[Callable] = []
        self._post_step_callbacks: List[Callable] = []
        self._crash_callbacks: List[Callable[["Simulator", CrashEvent], None]] = []

    @property
    def is_running(self) -> bool:
        return self._running

    @property
    def time(self) -> float:
        """Current match time."""
        return self.world.time

    @property
    def cycles(self) -> List[LightCycle]:
        return self.world.cycles

    @property
    def crashes(self) -> List[CrashEvent]:
        return self.world.crashes

    def spawn_cycle(
        self,
        position: tuple,
        facing: Direction = Direction.FORWARD,
        config: CycleConfig | None = None,
    ) -> int:
        """Spawn a cycle at a start position.

        Returns:
            Cycle ID
        """
        cycle_id = self.world.spawn_cycle(position, facing, config)
        logger.debug("Spawned cycle %d at %s facing %s", cycle_id, position, facing.value)
        return cycle_id

    def add_cycle(self, cycle: LightCycle) -> int:
        return self.world.add_cycle(cycle)

    def get_cycle(self, cycle_id: int) -> Optional[LightCycle]:
        return self.world.get_cycle(cycle_id)

    def get_active_segment(self, cycle_id: int) -> Optional[SegmentMesh]:
        """Active wall built for a cycle on the last tick."""
        return self._active_segments.get(cycle_id)

    def add_pre_step_callback(self, callback: Callable) -> None:
        """Add callback called before each step.

        Args:
            callback: Function taking (simulator, dt) arguments
        """
        self._pre_step_callbacks.append(callback)

    def add_post_step_callback(self, callback: Callable) -> None:
        """Add callback called after each step.

        Args:
            callback: Function taking (simulator, dt) arguments
        """
        self._post_step_callbacks.append(callback)

    def add_crash_callback(self, callback: Callable[["Simulator", CrashEvent], None]) -> None:
        """Add callback called when a cycle hits a wall.

        Args:
            callback: Function taking (simulator, crash_event) arguments
        """
        self._crash_callbacks.append(callback)

    def start(self) -> None:
        """Start the match."""
        if self.world.cycle_count == 0:
            raise RuntimeError("No cycles spawned")

        self._running = True
        logger.info("Match started with %d cycle(s)", self.world.cycle_count)

    def stop(self) -> None:
        """Stop the match."""
        if self._running:
            logger.info("Match stopped at t=%.2fs (frame %d)", self.world.time, self.world.frame)
        self._running = False

    def step(
        self,
        actions: Dict[int, CycleInputs] | None = None,
        dt: float | None = None,
    ) -> Dict[int, np.ndarray]:
        """Advance the match by one tick.

        Args:
            actions: Dictionary mapping cycle_id to CycleInputs
            dt: Time step (uses fixed_dt if None)

        Returns:
            Dictionary mapping cycle_id to observation arrays
        """
        if not self._running:
            return {}

        if dt is None:
            dt = self.config.fixed_dt

        for callback in self._pre_step_callbacks:
            callback(self, dt)

        if actions is None:
            actions = {}

        cycles = self.world.alive_cycles

        # Move everyone first so a tick's result does not depend on cycle order
        for cycle in cycles:
            cycle.step(actions.get(cycle.cycle_id, CycleInputs()), dt)
            self._active_segments[cycle.cycle_id] = cycle.active_segment()

        for cycle in cycles:
            event = self._check_collision(cycle)
            if event is not None:
                self._handle_crash(cycle, event)

        self.world.advance_time(dt)

        if self.config.stop_on_crash and self._round_decided():
            self.stop()
        if self.world.time >= self.config.max_time:
            self.stop()

        for callback in self._post_step_callbacks:
            callback(self, dt)

        return {cycle.cycle_id: cycle.get_observation() for cycle in self.world.cycles}

    def step_until(
        self,
        condition: Callable[["Simulator"], bool],
        action_provider: Callable[[Dict[int, np.ndarray]], Dict[int, CycleInputs]] | None = None,
        max_steps: int = 100000,
    ) -> int:
        """Step the match until condition is met.

        Args:
            condition: Function returning True when should stop
            action_provider: Function providing actions from observations
            max_steps: Maximum steps to take

        Returns:
            Number of steps taken
        """
        steps = 0
        observations = {c.cycle_id: c.get_observation() for c in self.cycles}

        while self._running and steps < max_steps:
            if condition(self):
                break

            actions = action_provider(observations) if action_provider else {}
            observations = self.step(actions)
            steps += 1

        return steps

    def _check_collision(self, cycle: LightCycle) -> Optional[CrashEvent]:
        """Hit-test a cycle against the walls it can run into."""
        position = cycle.position

        segment_index = cycle.trail.hits(position, skip_recent=self.config.recent_segment_grace)
        if segment_index is not None:
            return self._crash_event(cycle, cycle.cycle_id, segment_index)

        if self.config.cross_trail_collision:
            for other in self.world.cycles:
                if other.cycle_id == cycle.cycle_id:
                    continue
                segment_index = other.trail.hits(position)
                if segment_index is not None:
                    return self._crash_event(cycle, other.cycle_id, segment_index)

        return None

    def _crash_event(self, cycle: LightCycle, owner_id: int, segment_index: int) -> CrashEvent:
        x, y, z = (float(v) for v in cycle.position)
        return CrashEvent(
            cycle_id=cycle.cycle_id,
            time=self.world.time,
            frame=self.world.frame,
            position=(x, y, z),
            wall_owner_id=owner_id,
            segment_index=segment_index,
        )

    def _handle_crash(self, cycle: LightCycle, event: CrashEvent) -> None:
        cycle.destroy()
        self.world.record_crash(event)
        logger.info(
            "Cycle %d hit segment %d of cycle %d at t=%.2fs",
            event.cycle_id, event.segment_index, event.wall_owner_id, event.time,
        )
        for callback in self._crash_callbacks:
            callback(self, event)

    def _round_decided(self) -> bool:
        if not self.world.crashes:
            return False
        alive = len(self.world.alive_cycles)
        if self.world.cycle_count == 1:
            return alive == 0
        return alive <= 1

    def get_all_observations(self) -> Dict[int, np.ndarray]:
        return {c.cycle_id: c.get_observation() for c in self.cycles}

    def reset(self, keep_cycles: bool = False) -> None:
        """Reset the match.

        Args:
            keep_cycles: Keep current cycles, returning them to their start
                with an empty trail
        """
        if keep_cycles:
            for cycle in self.cycles:
                first = cycle.trail.ledger.first
                cycle.reset(first.position, first.facing)
            cycles = self.cycles
            self.world.reset()
            for cycle in cycles:
                self.world.add_cycle(cycle, cycle_id=cycle.cycle_id)
        else:
            self.world.reset()

        self._active_segments.clear()
        self._running = False

    def get_state(self) -> Dict[str, Any]:
        """Get complete match state.

        Returns:
            Dictionary containing match state
        """
        return {
            "config": {
                "fixed_dt": self.config.fixed_dt,
                "max_time": self.config.max_time,
                "recent_segment_grace": self.config.recent_segment_grace,
                "cross_trail_collision": self.config.cross_trail_collision,
            },
            "running": self._running,
            "world": self.world.get_state(),
            "cycles": {c.cycle_id: c.get_state() for c in self.cycles},
        }
