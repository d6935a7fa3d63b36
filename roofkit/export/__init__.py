"""
Export module for roofkit.
Contains mesh conversion and file export for roof solids.
"""

from .mesh_exporter import (
    RoofMeshExporter,
    roof_to_trimesh,
    roof_to_open3d,
    export_roof,
    solid_to_dict
)

__all__ = [
    'RoofMeshExporter',
    'roof_to_trimesh',
    'roof_to_open3d',
    'export_roof',
    'solid_to_dict'
]
