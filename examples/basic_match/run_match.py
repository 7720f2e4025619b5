#!/usr/bin/env python3
"""
Basic Match Example

This example demonstrates how to:
1. Spawn a light cycle
2. Drive it with scripted turn commands
3. Inspect the trail mesh being built
4. Detect the cycle running into its own wall

Run with: python run_match.py
"""

from lightcycle import Simulator
from lightcycle.simulation import SimulatorConfig
from lightcycle.cycle import CycleInputs
from lightcycle.trail import Direction, TurnConvexity


def main():
    print("=" * 60)
    print("LightCycle Basic Match Example")
    print("=" * 60)

    # Step 1: Set up the match
    print("\n1. Setting up match...")
    sim = Simulator(SimulatorConfig(fixed_dt=0.05, log_level="INFO"))
    cycle_id = sim.spawn_cycle((0.0, 0.0, 0.0), Direction.FORWARD)
    sim.add_crash_callback(
        lambda s, event: print(f"   Crash! segment {event.segment_index} at {event.position}")
    )
    print(f"   Spawned cycle with ID: {cycle_id}")

    # Step 2: Drive a square and close it on itself
    print("\n2. Driving a square (right turns every 40 ticks)...")
    sim.start()

    step = 0
    while sim.is_running and step < 400:
        turn = TurnConvexity.RIGHT if step > 0 and step % 40 == 0 else None
        sim.step({cycle_id: CycleInputs(turn=turn, boost=step >= 200)})
        step += 1

        if step % 40 == 0:
            cycle = sim.get_cycle(cycle_id)
            mesh = cycle.trail.build_mesh()
            print(f"   Step {step}: facing = {cycle.facing.value}, "
                  f"segments = {cycle.trail.num_segments}, "
                  f"vertices = {mesh.vertex_count}, indices = {mesh.index_count}")

    # Step 3: Summary
    print("\n3. Match summary:")
    cycle = sim.get_cycle(cycle_id)
    print(f"   Match time: {sim.time:.2f} seconds")
    print(f"   Distance driven: {cycle.state.distance:.2f}")
    print(f"   Turns: {cycle.trail.ledger.num_turns}")
    print(f"   Destroyed: {cycle.is_destroyed}")

    sim.stop()
    print("\n" + "=" * 60)
    print("Match complete!")
    print("=" * 60)


if __name__ == "__main__":
    main()
