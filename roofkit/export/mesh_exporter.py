"""
Mesh exporter for roof solids.
Converts roof planes to triangle meshes and writes them through trimesh.
"""

import logging
from pathlib import Path
from typing import Any, Dict, List, Optional, Tuple

import numpy as np
import trimesh

from ..solid import RoofSolid
from ..utils.error_handling import ErrorCategory, ErrorContext, ErrorHandler, ErrorSeverity

logger = logging.getLogger(__name__)

SUPPORTED_FORMATS = ('glb', 'gltf', 'obj', 'stl', 'ply')


def _surfaces(solid: RoofSolid, include_fascias: bool):
    return solid.all_surfaces() if include_fascias else solid.planes


def _mesh_arrays(solid: RoofSolid, include_fascias: bool = True) -> Tuple[np.ndarray, np.ndarray]:
    """Stack the fan triangulations of every plane into vertex and face arrays."""
    vertices: List[np.ndarray] = []
    faces: List[np.ndarray] = []
    offset = 0
    for plane in _surfaces(solid, include_fascias):
        triangles = plane.triangles()
        if not triangles:
            continue
        vertices.append(plane.vertices_array())
        faces.append(np.asarray(triangles, dtype=np.int64) + offset)
        offset += len(plane.polygon)
    if not vertices:
        return np.zeros((0, 3)), np.zeros((0, 3), dtype=np.int64)
    return np.vstack(vertices), np.vstack(faces)


class RoofMeshExporter:
    """Exports roof solids to mesh files."""

    def __init__(self, include_fascias: bool = True,
                 error_handler: Optional[ErrorHandler] = None):
        """
        Initialize the exporter.

        Args:
            include_fascias: Whether vertical gable walls are part of the mesh
            error_handler: Collects reports for failed writes
        """
        self.include_fascias = include_fascias
        self.error_handler = error_handler or ErrorHandler()

    def to_trimesh(self, solid: RoofSolid) -> trimesh.Trimesh:
        vertices, faces = _mesh_arrays(solid, self.include_fascias)
        # Planes keep their own vertices so each keeps a flat normal
        return trimesh.Trimesh(vertices=vertices, faces=faces, process=False)

    def to_open3d(self, solid: RoofSolid):
        """Open3D TriangleMesh with vertex normals; requires the open3d extra."""
        import open3d as o3d

        vertices, faces = _mesh_arrays(solid, self.include_fascias)
        mesh = o3d.geometry.TriangleMesh()
        mesh.vertices = o3d.utility.Vector3dVector(vertices)
        mesh.triangles = o3d.utility.Vector3iVector(faces.astype(np.int32))
        mesh.compute_vertex_normals()
        return mesh

    def export_roof(self, solid: RoofSolid, output_path: str,
                    file_type: Optional[str] = None) -> Dict[str, Any]:
        """
        Export a roof solid to a mesh file.

        Args:
            solid: Roof solid to export
            output_path: Output file path
            file_type: Format override; taken from the file suffix when omitted

        Returns:
            Export results dictionary
        """
        output_path = Path(output_path)
        file_type = (file_type or output_path.suffix.lstrip('.')).lower()
        if file_type not in SUPPORTED_FORMATS:
            logger.error(f"Unsupported export format: {file_type!r}")
            return {'success': False, 'error': f"unsupported format {file_type!r}",
                    'output_path': str(output_path)}

        mesh = self.to_trimesh(solid)
        if len(mesh.faces) == 0:
            logger.warning(f"Roof {solid.roof_id} has no planes to export")
            return {'success': False, 'error': 'empty roof', 'output_path': str(output_path)}

        try:
            output_path.parent.mkdir(parents=True, exist_ok=True)
            mesh.export(str(output_path), file_type=file_type)
        except (OSError, ValueError) as e:
            report = self.error_handler.handle_error(
                e,
                ErrorContext(operation=f"Export of roof {solid.roof_id}",
                             metadata={'output_path': str(output_path), 'file_type': file_type}),
                ErrorSeverity.HIGH,
                ErrorCategory.EXPORT_ERROR,
            )
            return {'success': False, 'error': report.message,
                    'error_category': report.category.value, 'output_path': str(output_path)}

        return {
            'success': True,
            'output_path': str(output_path),
            'file_type': file_type,
            'total_vertices': int(len(mesh.vertices)),
            'total_faces': int(len(mesh.faces)),
            'file_size': output_path.stat().st_size if output_path.exists() else 0
        }


def roof_to_trimesh(solid: RoofSolid, include_fascias: bool = True) -> trimesh.Trimesh:
    return RoofMeshExporter(include_fascias).to_trimesh(solid)


def roof_to_open3d(solid: RoofSolid, include_fascias: bool = True):
    return RoofMeshExporter(include_fascias).to_open3d(solid)


def export_roof(solid: RoofSolid, output_path: str, file_type: Optional[str] = None,
                **kwargs) -> Dict[str, Any]:
    """
    Convenience function to export a roof solid.

    Args:
        solid: Roof solid
        output_path: Output file path
        file_type: Optional format override
        **kwargs: Additional arguments for RoofMeshExporter

    Returns:
        Export results
    """
    exporter = RoofMeshExporter(**kwargs)
    return exporter.export_roof(solid, output_path, file_type)


def solid_to_dict(solid: RoofSolid) -> Dict[str, Any]:
    """JSON-ready summary of a roof solid."""
    return {
        'roof_id': solid.roof_id,
        'face_id': solid.face_id,
        'roof_type': solid.roof_type.value,
        'ridge_height': solid.ridge_height,
        'total_area': solid.total_area,
        'planes': [p.to_dict() for p in solid.planes],
        'fascias': [p.to_dict() for p in solid.fascias],
    }
