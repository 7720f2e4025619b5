"""
Mesh exporter - Write trail meshes to files a renderer can load.

Provides:
- Wavefront OBJ export
- JSON export
- NumPy compressed export
"""

from dataclasses import dataclass
from typing import Optional
from pathlib import Path
import json
import logging
import numpy as np

from lightcycle.cycle.cycle import LightCycle
from lightcycle.trail.mesh import TrailMesh


logger = logging.getLogger(__name__)


class NumpyEncoder(json.JSONEncoder):
    """JSON encoder that handles numpy types."""

    def default(self, obj):
        if isinstance(obj, np.integer):
            return int(obj)
        if isinstance(obj, np.floating):
            return float(obj)
        if isinstance(obj, np.ndarray):
            return obj.tolist()
        return super().default(obj)


@dataclass
class ExporterConfig:
    """Exporter configuration."""
    output_dir: str = "./trail_meshes"
    include_active: bool = True        # Append the wall still being laid
    include_metadata: bool = True


class MeshExporter:
    """Export a cycle's trail mesh to files.

    Exported buffers use the same layout the core produces: 8 vertices and
    30 indices per segment, finalized segments first.
    """

    def __init__(self, config: ExporterConfig | None = None):
        """Initialize exporter.

        Args:
            config: Exporter configuration
        """
        self.config = config or ExporterConfig()

        self._output_path = Path(self.config.output_dir)
        self._output_path.mkdir(parents=True, exist_ok=True)

    def _mesh(self, cycle: LightCycle) -> TrailMesh:
        if self.config.include_active:
            return cycle.trail.build_mesh(cycle.position, cycle.facing)
        return cycle.trail.build_mesh()

    def export_obj(
        self,
        cycle: LightCycle,
        filename: str = "trail.obj",
    ) -> Path:
        """Export trail mesh to a Wavefront OBJ file.

        Args:
            cycle: Cycle whose trail to export
            filename: Output filename

        Returns:
            Path to exported file
        """
        output_file = self._output_path / filename
        mesh = self._mesh(cycle)

        with open(output_file, 'w') as f:
            f.write(f"# lightcycle trail, cycle {cycle.cycle_id}\n")
            f.write(f"o trail_{cycle.cycle_id}\n")
            for x, y, z in mesh.vertices:
                f.write(f"v {x:.6f} {y:.6f} {z:.6f}\n")
            f.write("vn 0.000000 1.000000 0.000000\n")
            # OBJ indices are 1-based
            for i0, i1, i2 in mesh.triangles:
                f.write(f"f {i0 + 1}//1 {i1 + 1}//1 {i2 + 1}//1\n")

        logger.info("Exported %d triangles to %s", mesh.triangle_count, output_file)
        return output_file

    def export_json(
        self,
        cycle: LightCycle,
        filename: str = "trail.json",
    ) -> Path:
        """Export trail mesh and turn ledger to a JSON file.

        Args:
            cycle: Cycle whose trail to export
            filename: Output filename

        Returns:
            Path to exported file
        """
        output_file = self._output_path / filename
        mesh = self._mesh(cycle)

        data = {
            "metadata": cycle.get_state() if self.config.include_metadata else {},
            "turns": cycle.trail.ledger.get_state()["records"],
            "vertices": mesh.vertices,
            "indices": mesh.indices,
            "normals": mesh.normals,
            "uvs": mesh.uvs,
        }

        with open(output_file, 'w') as f:
            json.dump(data, f, indent=2, cls=NumpyEncoder)

        logger.info("Exported %d vertices to %s", mesh.vertex_count, output_file)
        return output_file

    def export_numpy(
        self,
        cycle: LightCycle,
        filename: str = "trail.npz",
    ) -> Path:
        """Export trail buffers to a NumPy compressed file.

        Args:
            cycle: Cycle whose trail to export
            filename: Output filename

        Returns:
            Path to exported file
        """
        output_file = self._output_path / filename
        mesh = self._mesh(cycle)

        np.savez_compressed(
            output_file,
            vertices=mesh.vertices,
            indices=mesh.indices,
            normals=mesh.normals,
            uvs=mesh.uvs,
        )

        logger.info("Exported %d segments to %s", mesh.segment_count, output_file)
        return output_file

    def export_all(
        self,
        cycle: LightCycle,
        prefix: Optional[str] = None,
    ) -> list[Path]:
        """Export in every supported format.

        Args:
            cycle: Cycle whose trail to export
            prefix: Filename prefix (defaults to trail_<cycle_id>)

        Returns:
            List of exported file paths
        """
        prefix = prefix or f"trail_{cycle.cycle_id}"
        return [
            self.export_obj(cycle, f"{prefix}.obj"),
            self.export_json(cycle, f"{prefix}.json"),
            self.export_numpy(cycle, f"{prefix}.npz"),
        ]
