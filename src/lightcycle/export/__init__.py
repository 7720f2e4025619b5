"""
Export module - Trail mesh files for rendering tools.

This module contains:
- MeshExporter: OBJ, JSON and NumPy export of trail meshes
"""

from lightcycle.export.exporter import MeshExporter, ExporterConfig

__all__ = ["MeshExporter", "ExporterConfig"]
