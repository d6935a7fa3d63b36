"""
3D roof plane geometry.
Planar polygons with Newell normals, areas and slope angles.
"""

import math
from dataclasses import dataclass
from typing import List, Sequence, Tuple

import numpy as np

Point3 = Tuple[float, float, float]

# Consecutive points closer than this are merged when building a plane
DUPLICATE_TOLERANCE = 1e-9


def newell_vector(points: Sequence[Sequence[float]]) -> np.ndarray:
    """Unnormalised Newell normal; its length is twice the polygon area."""
    pts = np.asarray(points, dtype=float)
    if len(pts) < 3:
        return np.zeros(3)
    nxt = np.roll(pts, -1, axis=0)
    return np.array([
        np.sum((pts[:, 1] - nxt[:, 1]) * (pts[:, 2] + nxt[:, 2])),
        np.sum((pts[:, 2] - nxt[:, 2]) * (pts[:, 0] + nxt[:, 0])),
        np.sum((pts[:, 0] - nxt[:, 0]) * (pts[:, 1] + nxt[:, 1])),
    ])


def newell_normal(points: Sequence[Sequence[float]]) -> Point3:
    vector = newell_vector(points)
    norm = np.linalg.norm(vector)
    if norm < 1e-12:
        return (0.0, 0.0, 1.0)
    unit = vector / norm
    return (float(unit[0]), float(unit[1]), float(unit[2]))


def polygon_area_3d(points: Sequence[Sequence[float]]) -> float:
    return float(np.linalg.norm(newell_vector(points)) / 2.0)


def slope_angle_deg(normal: Sequence[float]) -> float:
    """Angle between a unit normal and vertical: 0 for flat, 90 for a wall."""
    nz = min(1.0, abs(float(normal[2])))
    return math.degrees(math.acos(nz))


def dedupe_points(points: Sequence[Sequence[float]],
                  tolerance: float = DUPLICATE_TOLERANCE) -> List[Point3]:
    """Drop consecutive duplicates, including a closing duplicate of the first point."""
    result: List[Point3] = []
    for p in points:
        point = (float(p[0]), float(p[1]), float(p[2]))
        if result and max(abs(a - b) for a, b in zip(point, result[-1])) <= tolerance:
            continue
        result.append(point)
    while len(result) > 1 and max(abs(a - b) for a, b in zip(result[0], result[-1])) <= tolerance:
        result.pop()
    return result


@dataclass(frozen=True)
class RoofPlaneGeometry:
    """One planar roof surface (or vertical fascia) ready for rendering."""
    plane_id: str
    roof_id: str
    label: str
    polygon: Tuple[Point3, ...]
    area: float
    slope_angle_deg: float
    normal: Point3
    base_edge_sides: Tuple[str, ...] = ()

    def triangles(self) -> List[Tuple[int, int, int]]:
        """Fan triangulation over the polygon vertices."""
        return [(0, i, i + 1) for i in range(1, len(self.polygon) - 1)]

    def vertices_array(self) -> np.ndarray:
        return np.asarray(self.polygon, dtype=float).reshape(-1, 3)

    def to_dict(self) -> dict:
        return {
            'plane_id': self.plane_id,
            'roof_id': self.roof_id,
            'label': self.label,
            'polygon': [list(p) for p in self.polygon],
            'area': self.area,
            'slope_angle_deg': self.slope_angle_deg,
            'normal': list(self.normal),
            'base_edge_sides': [str(getattr(s, 'value', s)) for s in self.base_edge_sides],
        }


def build_plane(plane_id: str, roof_id: str, label: str,
                points: Sequence[Sequence[float]],
                base_edge_sides: Sequence[str] = (),
                slope_override: float = None) -> RoofPlaneGeometry:
    """
    Build a plane from its outline.

    Args:
        plane_id: Stable plane identifier
        roof_id: Owning roof
        label: Human-readable label
        points: 3D outline in order
        base_edge_sides: Footprint sides whose eaves bound this plane
        slope_override: Fixed slope angle (used for vertical fascias)

    Returns:
        RoofPlaneGeometry with area and normal computed via Newell's method
    """
    polygon = dedupe_points(points)
    normal = newell_normal(polygon)
    slope = slope_angle_deg(normal) if slope_override is None else float(slope_override)
    return RoofPlaneGeometry(
        plane_id=plane_id,
        roof_id=roof_id,
        label=label,
        polygon=tuple(polygon),
        area=polygon_area_3d(polygon),
        slope_angle_deg=slope,
        normal=normal,
        base_edge_sides=tuple(base_edge_sides),
    )


def planes_for_roof(planes: Sequence[RoofPlaneGeometry], roof_id: str) -> List[RoofPlaneGeometry]:
    """Planes owned by roof_id, matched on the roof_id field."""
    return [p for p in planes if p.roof_id == roof_id]
