"""Tests for the LightCycle cycle module."""

import pytest
import numpy as np

from lightcycle.cycle.cycle import LightCycle, CycleConfig, CycleInputs
from lightcycle.trail.direction import Direction, TurnConvexity
from lightcycle.trail.collision import point_hits_segment
from lightcycle.trail.trail import TrailConfig


def origin_cycle(**kwargs) -> LightCycle:
    return LightCycle(CycleConfig(start_position=(0.0, 0.0, 0.0), **kwargs))


class TestLightCycle:
    """Test light cycle movement and turning."""

    def test_default_start(self):
        """Test cycle starts at the configured position facing forward."""
        cycle = LightCycle()

        assert np.allclose(cycle.position, [1000.0, 0.5, 1000.0])
        assert cycle.facing is Direction.FORWARD
        assert len(cycle.trail.ledger) == 1

    def test_drive(self):
        """Test position advances along the facing."""
        cycle = origin_cycle()
        cycle.drive(0.5)

        assert np.allclose(cycle.position, [0.0, 0.0, -1.0])
        assert cycle.state.distance == pytest.approx(1.0)

    def test_boost_doubles_speed(self):
        """Test boost doubles distance per tick."""
        cycle = origin_cycle()
        cycle.boost()
        cycle.drive(0.5)
        assert np.allclose(cycle.position, [0.0, 0.0, -2.0])

        cycle.stop_boost()
        cycle.drive(0.5)
        assert np.allclose(cycle.position, [0.0, 0.0, -3.0])

    def test_turns_record_ledger(self):
        """Test each turn adds one record at the current position."""
        cycle = origin_cycle()
        cycle.drive(1.0)
        rec = cycle.turn_left()

        assert cycle.facing is Direction.LEFT
        assert rec.position == pytest.approx((0.0, 0.0, -2.0))
        assert rec.convexity is TurnConvexity.LEFT
        assert cycle.trail.num_segments == 1

        cycle.turn_right()
        assert cycle.facing is Direction.FORWARD
        assert len(cycle.trail.ledger) == 3

    def test_step_turns_before_driving(self):
        """Test a tick applies the turn and then moves."""
        cycle = origin_cycle()
        cycle.step(CycleInputs(turn=TurnConvexity.RIGHT), dt=0.5)

        assert cycle.trail.ledger.last.position == (0.0, 0.0, 0.0)
        assert np.allclose(cycle.position, [1.0, 0.0, 0.0])

    def test_step_boost(self):
        """Test boost comes from the tick inputs."""
        cycle = origin_cycle()
        cycle.step(CycleInputs(boost=True), dt=0.25)
        assert np.allclose(cycle.position, [0.0, 0.0, -1.0])

    def test_non_finite_dt_rejected(self):
        """Test NaN time steps are refused."""
        cycle = origin_cycle()
        with pytest.raises(ValueError):
            cycle.drive(float("nan"))

    def test_destroyed_cycle_is_frozen(self):
        """Test a destroyed cycle neither moves nor turns."""
        cycle = origin_cycle()
        cycle.destroy()
        cycle.step(CycleInputs(turn=TurnConvexity.LEFT), dt=1.0)

        assert np.allclose(cycle.position, [0.0, 0.0, 0.0])
        assert len(cycle.trail.ledger) == 1

    def test_destroyed_cycle_ignores_direct_turns(self):
        """Test turn commands on a destroyed cycle change nothing."""
        cycle = origin_cycle()
        cycle.destroy()

        assert cycle.turn_left() is None
        assert cycle.turn_right() is None
        assert cycle.facing is Direction.FORWARD
        assert len(cycle.trail.ledger) == 1

    def test_reset(self):
        """Test reset clears the trail."""
        cycle = origin_cycle()
        cycle.drive(1.0)
        cycle.turn_left()
        cycle.reset((5.0, 0.0, 5.0), Direction.RIGHT)

        assert np.allclose(cycle.position, [5.0, 0.0, 5.0])
        assert cycle.facing is Direction.RIGHT
        assert len(cycle.trail.ledger) == 1

    def test_observation(self):
        """Test observation layout."""
        cycle = origin_cycle()
        obs = cycle.get_observation()

        assert obs.shape == (9,)
        assert obs[3:7].sum() == 1.0

    def test_invalid_config(self):
        """Test negative speed is refused."""
        with pytest.raises(ValueError):
            CycleConfig(speed=-1.0)


class TestEndToEnd:
    """Drive a short path and inspect the resulting wall."""

    def test_two_segment_path(self):
        """Test a left then right turn gives two walls hit at the origin."""
        cycle = origin_cycle(trail=TrailConfig(half_width=0.2))

        cycle.turn_left()
        assert cycle.facing is Direction.LEFT

        cycle.drive(1.0)
        assert np.allclose(cycle.position, [-2.0, 0.0, 0.0])

        cycle.turn_right()
        assert cycle.facing is Direction.FORWARD

        mesh = cycle.trail.build_mesh()
        assert mesh.vertex_count == 16
        assert mesh.index_count == 60
        assert int(mesh.indices.max()) < 16

        assert point_hits_segment((0.0, 0.0, 0.0), cycle.trail.edge_points(0))
        assert cycle.trail.hits((0.0, 0.0, 0.0)) == 0

        # The second wall starts where the first one ends
        first = cycle.trail.edge_points(0)
        second = cycle.trail.edge_points(1)
        assert np.allclose(second.a, first.d)
