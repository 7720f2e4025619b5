"""Tests for the LightCycle simulation module."""

import logging

import pytest
import numpy as np

from lightcycle.simulation.simulator import Simulator, SimulatorConfig
from lightcycle.simulation.world import World, CrashEvent
from lightcycle.cycle.cycle import CycleInputs, LightCycle
from lightcycle.trail.direction import Direction, TurnConvexity


def square_actions(cycle_id, step, side_ticks=40):
    turn = TurnConvexity.RIGHT if step > 0 and step % side_ticks == 0 else None
    return {cycle_id: CycleInputs(turn=turn)}


class TestWorld:
    """Test world state management."""

    def test_world_creation(self):
        """Test world initializes empty."""
        world = World()

        assert world.cycle_count == 0
        assert world.time == 0.0

    def test_world_time_advance(self):
        """Test time advances correctly."""
        world = World()

        world.advance_time(0.1)
        assert world.time == 0.1
        assert world.frame == 1

    def test_spawn_and_remove(self):
        """Test cycles get sequential IDs."""
        world = World()
        first = world.spawn_cycle((0.0, 0.0, 0.0))
        second = world.spawn_cycle((5.0, 0.0, 0.0), Direction.LEFT)

        assert (first, second) == (0, 1)
        assert world.get_cycle(second).facing is Direction.LEFT
        assert world.remove_cycle(first)
        assert not world.remove_cycle(first)
        assert world.cycle_count == 1

    def test_add_cycle_keeps_given_id(self):
        """Test an explicit ID is kept and later IDs follow it."""
        world = World()
        cycle = LightCycle()

        assert world.add_cycle(cycle, cycle_id=5) == 5
        assert cycle.cycle_id == 5
        assert world.spawn_cycle((0.0, 0.0, 0.0)) == 6
        with pytest.raises(ValueError):
            world.add_cycle(LightCycle(), cycle_id=5)


class TestSimulator:
    """Test simulator tick loop."""

    def test_start_requires_cycles(self):
        """Test starting an empty match fails."""
        with pytest.raises(RuntimeError):
            Simulator().start()

    def test_step_before_start(self):
        """Test stepping a stopped match does nothing."""
        sim = Simulator()
        sim.spawn_cycle((0.0, 0.0, 0.0))

        assert sim.step({}) == {}
        assert sim.time == 0.0

    def test_straight_line_survives(self):
        """Test driving straight never crashes."""
        sim = Simulator(SimulatorConfig(fixed_dt=0.05))
        cycle_id = sim.spawn_cycle((0.0, 0.0, 0.0))
        sim.start()

        for _ in range(100):
            observations = sim.step({})

        assert sim.is_running
        assert cycle_id in observations
        assert not sim.get_cycle(cycle_id).is_destroyed

    def test_active_segment_rebuilt(self):
        """Test each tick leaves a fresh active wall."""
        sim = Simulator(SimulatorConfig(fixed_dt=0.05))
        cycle_id = sim.spawn_cycle((0.0, 0.0, 0.0))
        sim.start()

        sim.step({})
        first = sim.get_active_segment(cycle_id)
        sim.step({})
        second = sim.get_active_segment(cycle_id)

        assert first is not second
        assert second.active
        assert np.allclose(second.edge_points.b, [0.0, 0.0, -0.2])

    def test_turn_does_not_hit_newest_wall(self):
        """Test the cycle is not killed by the wall it is standing on."""
        sim = Simulator(SimulatorConfig(fixed_dt=0.05))
        cycle_id = sim.spawn_cycle((0.0, 0.0, 0.0))
        sim.start()

        for step in range(60):
            turn = TurnConvexity.RIGHT if step == 20 else None
            sim.step({cycle_id: CycleInputs(turn=turn)})

        assert not sim.get_cycle(cycle_id).is_destroyed
        assert sim.crashes == []

    def test_closing_a_square_crashes(self):
        """Test driving back into the first wall ends the round."""
        sim = Simulator(SimulatorConfig(fixed_dt=0.05))
        cycle_id = sim.spawn_cycle((0.0, 0.0, 0.0))
        crashes = []
        sim.add_crash_callback(lambda s, event: crashes.append(event))
        sim.start()

        step = 0
        while sim.is_running and step < 400:
            sim.step(square_actions(cycle_id, step))
            step += 1

        assert not sim.is_running
        assert len(crashes) == 1
        event = crashes[0]
        assert isinstance(event, CrashEvent)
        assert event.self_inflicted
        assert event.segment_index == 0
        assert 120 < step <= 160
        assert sim.get_cycle(cycle_id).is_destroyed

    def test_crash_logged(self, caplog):
        """Test crashes are logged."""
        sim = Simulator(SimulatorConfig(fixed_dt=0.05))
        cycle_id = sim.spawn_cycle((0.0, 0.0, 0.0))
        sim.start()

        with caplog.at_level(logging.INFO, logger="lightcycle"):
            for step in range(200):
                sim.step(square_actions(cycle_id, step))

        assert any("hit segment 0" in message for message in caplog.messages)

    def test_cross_trail_collision(self):
        """Test a cycle crossing another cycle's wall crashes."""
        sim = Simulator(SimulatorConfig(fixed_dt=0.05, cross_trail_collision=True))
        a_id = sim.spawn_cycle((0.0, 0.0, 0.0), Direction.FORWARD)
        b_id = sim.spawn_cycle((-3.0, 0.0, -2.0), Direction.RIGHT)

        a = sim.get_cycle(a_id)
        a.drive(2.0)
        a.turn_left()

        sim.start()
        for _ in range(40):
            sim.step({})

        assert sim.get_cycle(b_id).is_destroyed
        assert not sim.get_cycle(a_id).is_destroyed
        event = sim.crashes[0]
        assert event.wall_owner_id == a_id
        assert not event.self_inflicted
        assert not sim.is_running

    def test_other_trails_ignored_by_default(self):
        """Test other cycles' walls are not solid unless enabled."""
        sim = Simulator(SimulatorConfig(fixed_dt=0.05, max_time=2.0))
        a_id = sim.spawn_cycle((0.0, 0.0, 0.0), Direction.FORWARD)
        b_id = sim.spawn_cycle((-3.0, 0.0, -2.0), Direction.RIGHT)
        a = sim.get_cycle(a_id)
        a.drive(2.0)
        a.turn_left()

        sim.start()
        for _ in range(40):
            sim.step({})

        assert not sim.get_cycle(b_id).is_destroyed
        assert sim.crashes == []

    def test_max_time(self):
        """Test the match stops at the time limit."""
        sim = Simulator(SimulatorConfig(fixed_dt=0.1, max_time=1.0))
        sim.spawn_cycle((0.0, 0.0, 0.0))
        sim.start()

        steps = sim.step_until(lambda s: False, max_steps=100)

        assert not sim.is_running
        assert steps <= 11

    def test_reset_keep_cycles(self):
        """Test reset returns cycles to their start with fresh trails."""
        sim = Simulator(SimulatorConfig(fixed_dt=0.05))
        cycle_id = sim.spawn_cycle((0.0, 0.0, 0.0))
        sim.start()
        for step in range(50):
            sim.step(square_actions(cycle_id, step))

        sim.reset(keep_cycles=True)

        cycle = sim.get_cycle(cycle_id)
        assert sim.time == 0.0
        assert np.allclose(cycle.position, [0.0, 0.0, 0.0])
        assert len(cycle.trail.ledger) == 1
        assert not sim.is_running

    def test_state(self):
        """Test state dictionary."""
        sim = Simulator()
        sim.spawn_cycle((0.0, 0.0, 0.0))
        state = sim.get_state()

        assert "world" in state
        assert 0 in state["cycles"]

    def test_zero_dt_step(self):
        """Test an explicit zero time step does not move cycles."""
        sim = Simulator(SimulatorConfig(fixed_dt=0.05))
        cycle_id = sim.spawn_cycle((0.0, 0.0, 0.0))
        sim.start()

        sim.step({}, dt=0.0)

        assert np.allclose(sim.get_cycle(cycle_id).position, [0.0, 0.0, 0.0])
        assert sim.time == 0.0
        assert sim.world.frame == 1

    def test_reset_keeps_cycle_ids(self):
        """Test reset with kept cycles preserves their IDs."""
        sim = Simulator(SimulatorConfig(fixed_dt=0.05))
        first = sim.spawn_cycle((0.0, 0.0, 0.0))
        second = sim.spawn_cycle((10.0, 0.0, 0.0))
        third = sim.spawn_cycle((20.0, 0.0, 0.0))
        sim.world.remove_cycle(first)
        sim.start()
        sim.step({})

        sim.reset(keep_cycles=True)

        assert sorted(c.cycle_id for c in sim.cycles) == [second, third]
        assert np.allclose(sim.get_cycle(third).position, [20.0, 0.0, 0.0])
        assert sim.spawn_cycle((30.0, 0.0, 0.0)) == third + 1
