"""
Simulation module - Match loop and world state.

This module contains:
- Simulator: Tick loop, crash detection and callbacks
- World: Cycles, clock and crash history
"""

from lightcycle.simulation.simulator import Simulator, SimulatorConfig, configure_logging
from lightcycle.simulation.world import World, CrashEvent

__all__ = [
    "Simulator",
    "SimulatorConfig",
    "configure_logging",
    "World",
    "CrashEvent",
]
