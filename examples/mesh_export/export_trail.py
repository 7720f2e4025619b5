#!/usr/bin/env python3
"""
Trail Export Example

Drives a cycle through a zig-zag and writes its trail mesh as OBJ, JSON
and NPZ files for inspection in a 3D viewer.

Run with: python export_trail.py [output_dir]
"""

import sys

from lightcycle.cycle import LightCycle, CycleConfig
from lightcycle.export import MeshExporter, ExporterConfig
from lightcycle.trail import TrailConfig


def main():
    output_dir = sys.argv[1] if len(sys.argv) > 1 else "./trail_meshes"

    cycle = LightCycle(CycleConfig(
        start_position=(0.0, 0.0, 0.0),
        trail=TrailConfig(half_width=0.2, height=1.5),
    ))

    for i in range(8):
        for _ in range(30):
            cycle.drive(1 / 30)
        if i % 2 == 0:
            cycle.turn_left()
        else:
            cycle.turn_right()

    exporter = MeshExporter(ExporterConfig(output_dir=output_dir))
    for path in exporter.export_all(cycle):
        print(f"Wrote {path}")


if __name__ == "__main__":
    main()
