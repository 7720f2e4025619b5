"""
Turn ledger - Append-only record of the turns that shape a trail.

Defines:
- TurnRecord: position, facing after the turn, and turn convexity
- TurnLedger: ordered, grow-only sequence of turn records
"""

from dataclasses import dataclass
from typing import Iterator, Sequence, Tuple
import math

from lightcycle.trail.direction import Direction, TurnConvexity


Point3 = Tuple[float, float, float]


def as_point(position: Sequence[float]) -> Point3:
    """Convert any 3-element sequence into a finite (x, y, z) tuple.

    Raises:
        ValueError: If the sequence is not 3 long or holds NaN/inf
    """
    if len(position) != 3:
        raise ValueError(f"Expected a 3D point, got {len(position)} components")
    x, y, z = (float(v) for v in position)
    if not (math.isfinite(x) and math.isfinite(y) and math.isfinite(z)):
        raise ValueError(f"Non-finite position: ({x}, {y}, {z})")
    return (x, y, z)


@dataclass(frozen=True)
class TurnRecord:
    """A single turn of the cycle.

    `facing` is the direction after the turn. `convexity` is the steering
    command that produced it.
    """
    position: Point3
    facing: Direction
    convexity: TurnConvexity

    def __post_init__(self):
        object.__setattr__(self, "position", as_point(self.position))

    def get_state(self) -> dict:
        return {
            "position": self.position,
            "facing": self.facing.value,
            "convexity": self.convexity.value,
        }


class TurnLedger:
    """Ordered sequence of turn records describing a cycle's path.

    The ledger starts with one synthetic record at the start position whose
    convexity is LEFT, so the origin is treated as a filled corner. It only
    ever grows by appending; earlier records are never replaced.

    Usage:
        ledger = TurnLedger((0.0, 0.0, 0.0))
        ledger.record_turn((0.0, 0.0, -4.0), Direction.LEFT, TurnConvexity.LEFT)
        for i, a, b in ledger.pairs():
            ...
    """

    def __init__(
        self,
        start_position: Sequence[float] = (0.0, 0.0, 0.0),
        start_facing: Direction = Direction.FORWARD,
    ):
        """Initialize ledger with its synthetic start record.

        Args:
            start_position: Where the cycle starts
            start_facing: Facing at the start
        """
        self._records: list[TurnRecord] = [
            TurnRecord(as_point(start_position), start_facing, TurnConvexity.LEFT)
        ]

    def __len__(self) -> int:
        return len(self._records)

    def __iter__(self) -> Iterator[TurnRecord]:
        return iter(tuple(self._records))

    def __getitem__(self, index):
        if isinstance(index, slice):
            return tuple(self._records[index])
        return self._records[index]

    @property
    def first(self) -> TurnRecord:
        """The synthetic start record."""
        return self._records[0]

    @property
    def last(self) -> TurnRecord:
        """Most recent turn record."""
        return self._records[-1]

    @property
    def num_turns(self) -> int:
        """Turn commands recorded since the start."""
        return len(self._records) - 1

    @property
    def num_segments(self) -> int:
        """Number of finalized segments (adjacent record pairs)."""
        return len(self._records) - 1

    def append(self, record: TurnRecord) -> int:
        """Append a turn record.

        Args:
            record: Record to append

        Returns:
            Index of the appended record
        """
        if not isinstance(record, TurnRecord):
            raise TypeError(f"Expected TurnRecord, got {type(record).__name__}")
        self._records.append(record)
        return len(self._records) - 1

    def record_turn(
        self,
        position: Sequence[float],
        facing: Direction,
        convexity: TurnConvexity,
    ) -> TurnRecord:
        """Create and append a turn record.

        Returns:
            The new record
        """
        record = TurnRecord(as_point(position), facing, convexity)
        self.append(record)
        return record

    def pairs(self, start: int = 0) -> Iterator[Tuple[int, TurnRecord, TurnRecord]]:
        """Yield (segment_index, a, b) for every finalized segment from `start`.

        Iterates over a snapshot of the current length, so appends made while
        iterating are not visited.
        """
        end = len(self._records) - 1
        for i in range(max(start, 0), end):
            yield i, self._records[i], self._records[i + 1]

    def get_state(self) -> dict:
        """Get ledger state for serialization."""
        return {
            "num_turns": self.num_turns,
            "records": [record.get_state() for record in self._records],
        }
