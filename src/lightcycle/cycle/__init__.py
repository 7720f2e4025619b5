"""
Cycle module - The light cycle vehicle.

This module contains:
- LightCycle: Turn commands, boost, position integration and the trail
- CycleConfig / CycleInputs / CycleState: Configuration, per-tick commands, state
"""

from lightcycle.cycle.cycle import LightCycle, CycleConfig, CycleInputs, CycleState

__all__ = [
    "LightCycle",
    "CycleConfig",
    "CycleInputs",
    "CycleState",
]
