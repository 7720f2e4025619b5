"""
LightCycle - Trail geometry and collision core for a light-cycle game.

This package provides:
- Axis-aligned cycle movement with discrete 90 degree turns
- An append-only turn ledger describing each cycle's path
- Wall segment geometry with gap-filled corners
- Vertex/index buffers ready for a renderer
- Hit testing of cycles against laid walls
- A tick-driven match simulator
"""

__version__ = "0.1.0"

from lightcycle.simulation.simulator import Simulator
from lightcycle.cycle.cycle import LightCycle
from lightcycle.trail.trail import Trail

__all__ = ["Simulator", "LightCycle", "Trail", "__version__"]
