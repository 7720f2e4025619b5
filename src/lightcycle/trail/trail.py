"""
Trail - The wall a light cycle leaves behind.

Contains:
- The turn ledger
- Cached meshes of finalized segments
- The active segment from the last turn to the live position
- Self-collision queries
"""

from dataclasses import dataclass
from typing import Iterator, List, Optional, Sequence
import logging
import numpy as np

from lightcycle.trail.direction import Direction, TurnConvexity
from lightcycle.trail.ledger import TurnLedger, TurnRecord
from lightcycle.trail.segment import EdgePoints, calculate_edge_points, active_turn_record
from lightcycle.trail.mesh import SegmentMesh, SegmentMeshCache, TrailMesh, concatenate_meshes
from lightcycle.trail.collision import HitTester, DEFAULT_TOLERANCE


logger = logging.getLogger(__name__)


@dataclass
class TrailConfig:
    """Wall dimensions and hit-test settings."""
    half_width: float = 0.2            # Wall thickness beside the path
    height: float = 1.0                # Extrusion height
    y_offset: float = 0.0              # Floor height of the wall
    hit_tolerance: float = DEFAULT_TOLERANCE
    check_axis_aligned: bool = False   # Validate footprints during hit tests

    def __post_init__(self):
        for name in ("half_width", "height", "y_offset", "hit_tolerance"):
            value = float(getattr(self, name))
            if not np.isfinite(value):
                raise ValueError(f"{name} must be finite, got {value}")
            setattr(self, name, value)
        if self.half_width <= 0:
            raise ValueError(f"half_width must be positive, got {self.half_width}")
        if self.height < 0:
            raise ValueError(f"height must be non-negative, got {self.height}")


class Trail:
    """Wall laid by a single cycle.

    Finalized segments are built once, when the turn that closes them is
    recorded, and cached by segment index. Only the active segment is rebuilt
    on every tick.

    Usage:
        trail = Trail(start_position=(0.0, 0.0, 0.0))
        trail.record_turn((0.0, 0.0, -4.0), Direction.LEFT, TurnConvexity.LEFT)
        mesh = trail.build_mesh()
        active = trail.active_segment(position, facing)
    """

    def __init__(
        self,
        config: TrailConfig | None = None,
        start_position: Sequence[float] = (0.0, 0.0, 0.0),
        start_facing: Direction = Direction.FORWARD,
    ):
        """Initialize trail with an empty wall.

        Args:
            config: Trail configuration. Uses defaults if None.
            start_position: Where the cycle starts
            start_facing: Facing at the start
        """
        self.config = config or TrailConfig()
        self._ledger = TurnLedger(start_position, start_facing)
        self._cache = SegmentMeshCache()
        self.hit_tester = HitTester(
            tolerance=self.config.hit_tolerance,
            check_axis_aligned=self.config.check_axis_aligned,
        )

    @property
    def ledger(self) -> TurnLedger:
        """The turn ledger."""
        return self._ledger

    @property
    def num_segments(self) -> int:
        """Number of finalized segments."""
        return self._ledger.num_segments

    @property
    def last_turn(self) -> TurnRecord:
        return self._ledger.last

    def record_turn(
        self,
        position: Sequence[float],
        facing: Direction,
        convexity: TurnConvexity,
    ) -> TurnRecord:
        """Append a turn and build the segment it closes.

        Args:
            position: Where the turn happened
            facing: Facing after the turn
            convexity: Steering command that produced the turn

        Returns:
            The new turn record
        """
        record = self._ledger.record_turn(position, facing, convexity)
        mesh = self.segment_mesh(self.num_segments - 1)
        logger.debug(
            "Segment %d closed at %s, facing %s (%s turn)",
            mesh.index, record.position, facing.value, convexity.value,
        )
        return record

    def _check_segment_index(self, index: int) -> None:
        if len(self._ledger) < 2:
            raise ValueError("Trail has no finalized segments; record a turn first")
        if not 0 <= index < self.num_segments:
            raise IndexError(
                f"Segment index {index} out of range [0, {self.num_segments})"
            )

    def edge_points(self, index: int) -> EdgePoints:
        """Corners of finalized segment `index`."""
        return self.segment_mesh(index).edge_points

    def segment_mesh(self, index: int) -> SegmentMesh:
        """Buffers of finalized segment `index`, built on first request."""
        self._check_segment_index(index)
        mesh = self._cache.get(index)
        if mesh is None:
            a = self._ledger[index]
            b = self._ledger[index + 1]
            mesh = SegmentMesh.build(
                index,
                calculate_edge_points(a, b, self.config.half_width),
                self.config.y_offset,
                self.config.height,
            )
            self._cache.put(mesh)
        return mesh

    def segment_meshes(self) -> List[SegmentMesh]:
        """Buffers of every finalized segment in ledger order."""
        return [self.segment_mesh(i) for i in range(self.num_segments)]

    def iter_edge_points(self, stop: Optional[int] = None) -> Iterator[EdgePoints]:
        """Corners of finalized segments [0, stop) in ledger order.

        Args:
            stop: Exclusive end index (all finalized segments if None)
        """
        end = self.num_segments if stop is None else min(max(stop, 0), self.num_segments)
        for i in range(end):
            yield self.edge_points(i)

    def active_segment(
        self,
        position: Sequence[float],
        facing: Direction,
    ) -> SegmentMesh:
        """Provisional segment from the last turn to the live position.

        Rebuilt on every call and never cached. Its indices follow the
        finalized segments so it can be appended to `build_mesh()` output.
        """
        edge_points = calculate_edge_points(
            self._ledger.last,
            active_turn_record(position, facing),
            self.config.half_width,
        )
        return SegmentMesh.build(
            self.num_segments,
            edge_points,
            self.config.y_offset,
            self.config.height,
            active=True,
        )

    def build_mesh(
        self,
        position: Sequence[float] | None = None,
        facing: Direction | None = None,
    ) -> TrailMesh:
        """Concatenated buffers of all finalized segments.

        If `position` and `facing` are given the active segment is appended
        as the last block.
        """
        meshes = self.segment_meshes()
        if position is not None and facing is not None:
            meshes.append(self.active_segment(position, facing))
        return concatenate_meshes(meshes)

    def hits(
        self,
        position: Sequence[float],
        skip_recent: int = 0,
    ) -> Optional[int]:
        """Test a position against the finalized wall.

        Args:
            position: Position to test
            skip_recent: Number of most recent segments to leave out

        Returns:
            Index of the first segment hit, or None
        """
        stop = self.num_segments - max(skip_recent, 0)
        return self.hit_tester.first_hit(position, self.iter_edge_points(stop))

    def set_dimensions(
        self,
        half_width: float | None = None,
        height: float | None = None,
        y_offset: float | None = None,
    ) -> None:
        """Change wall dimensions and drop every cached segment."""
        self.config = TrailConfig(
            half_width=self.config.half_width if half_width is None else half_width,
            height=self.config.height if height is None else height,
            y_offset=self.config.y_offset if y_offset is None else y_offset,
            hit_tolerance=self.config.hit_tolerance,
            check_axis_aligned=self.config.check_axis_aligned,
        )
        self._cache.clear()

    def reset(
        self,
        start_position: Sequence[float],
        start_facing: Direction = Direction.FORWARD,
    ) -> None:
        """Start a fresh trail."""
        self._ledger = TurnLedger(start_position, start_facing)
        self._cache.clear()

    def get_state(self) -> dict:
        """Get trail state for serialization.

        Returns:
            Dictionary containing trail data
        """
        return {
            "num_segments": self.num_segments,
            "half_width": self.config.half_width,
            "height": self.config.height,
            "y_offset": self.config.y_offset,
            "ledger": self._ledger.get_state(),
            "cache": self._cache.get_state(),
        }
