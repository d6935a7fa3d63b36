"""
Shared types and helpers for the roof builders.
Covers build parameters, results, footprint bounding boxes and the local
ridge frame the box-based builders work in.
"""

import math
from dataclasses import dataclass, field
from typing import Any, Dict, List, Optional, Sequence, Tuple

import numpy as np

from ..geometry.plane import Point3, RoofPlaneGeometry, build_plane
from ..geometry.polygon import is_degenerate_polygon
from ..topology.types import ALL_SIDES, EdgeOverhangs, RoofSide, RoofType


@dataclass(frozen=True)
class RoofBuildParams:
    """Inputs shared by every roof builder."""
    roof_id: str
    polygon: Sequence[Sequence[float]]
    base_z: float = 0.0
    pitch_deg: float = 30.0
    lower_pitch_deg: float = 60.0
    edge_overhangs: EdgeOverhangs = field(default_factory=EdgeOverhangs)
    ridge_offset: float = 0.0


@dataclass(frozen=True)
class RoofBuildResult:
    """Planes produced by a builder; fascias hold the vertical gable and side walls."""
    planes: Tuple[RoofPlaneGeometry, ...] = ()
    fascias: Tuple[RoofPlaneGeometry, ...] = ()
    ridge_height: float = 0.0
    metadata: Dict[str, Any] = field(default_factory=dict)

    @property
    def total_area(self) -> float:
        return float(sum(p.area for p in self.planes))


@dataclass(frozen=True)
class AABB:
    """Axis-aligned bounding box of a footprint in plan."""
    min_x: float
    min_y: float
    max_x: float
    max_y: float

    @property
    def span_x(self) -> float:
        return self.max_x - self.min_x

    @property
    def span_y(self) -> float:
        return self.max_y - self.min_y

    @property
    def ridge_along_x(self) -> bool:
        return self.span_x >= self.span_y

    def expanded(self, overhangs: EdgeOverhangs) -> 'AABB':
        return AABB(self.min_x - overhangs.left, self.min_y - overhangs.front,
                    self.max_x + overhangs.right, self.max_y + overhangs.back)


def compute_aabb(polygon: Sequence[Sequence[float]]) -> Optional[AABB]:
    """
    Bounding box of a footprint.

    Returns:
        AABB, or None for a degenerate footprint
    """
    if is_degenerate_polygon(polygon):
        return None
    pts = np.asarray([[p[0], p[1]] for p in polygon], dtype=float)
    mins = pts.min(axis=0)
    maxs = pts.max(axis=0)
    box = AABB(float(mins[0]), float(mins[1]), float(maxs[0]), float(maxs[1]))
    if box.span_x <= 0 or box.span_y <= 0:
        return None
    return box


@dataclass(frozen=True)
class RoofFrame:
    """
    Local frame for box-based roofs: u runs along the ridge, v across it.

    For a ridge along Y the mapping to plan is a mirror, so outlines are
    reversed to keep roof normals pointing up.
    """
    u_min: float
    u_max: float
    v_min: float
    v_max: float
    along_x: bool

    @classmethod
    def for_footprint(cls, footprint: AABB, overhangs: EdgeOverhangs) -> 'RoofFrame':
        box = footprint.expanded(overhangs)
        if footprint.ridge_along_x:
            return cls(box.min_x, box.max_x, box.min_y, box.max_y, True)
        return cls(box.min_y, box.max_y, box.min_x, box.max_x, False)

    @property
    def half_span(self) -> float:
        return (self.v_max - self.v_min) / 2.0

    @property
    def v_mid(self) -> float:
        return (self.v_min + self.v_max) / 2.0

    @property
    def u_mid(self) -> float:
        return (self.u_min + self.u_max) / 2.0

    @property
    def v_low_side(self) -> RoofSide:
        return RoofSide.FRONT if self.along_x else RoofSide.LEFT

    @property
    def v_high_side(self) -> RoofSide:
        return RoofSide.BACK if self.along_x else RoofSide.RIGHT

    @property
    def u_low_side(self) -> RoofSide:
        return RoofSide.LEFT if self.along_x else RoofSide.FRONT

    @property
    def u_high_side(self) -> RoofSide:
        return RoofSide.RIGHT if self.along_x else RoofSide.BACK

    def clamp_v(self, v: float) -> float:
        return max(self.v_min, min(v, self.v_max))

    def outline(self, local_points: Sequence[Tuple[float, float, float]]) -> List[Point3]:
        """Map (u, v, z) points to plan coordinates, preserving orientation."""
        if self.along_x:
            return [(u, v, z) for u, v, z in local_points]
        return [(v, u, z) for u, v, z in reversed(local_points)]


def side_label(side: RoofSide, suffix: str) -> str:
    return f"{side.value.title()} {suffix}"


def frame_plane(frame: RoofFrame, roof_id: str, name: str, label: str,
                local_points: Sequence[Tuple[float, float, float]],
                sides: Sequence[RoofSide] = (),
                vertical: bool = False) -> RoofPlaneGeometry:
    return build_plane(f"{roof_id}_{name}", roof_id, label, frame.outline(local_points),
                       sides, slope_override=90.0 if vertical else None)


def rise_for(run: float, pitch_deg: float) -> float:
    return run * math.tan(math.radians(pitch_deg))


def build_metadata(roof_type: RoofType, params: RoofBuildParams,
                   planes: Sequence[RoofPlaneGeometry], ridge_height: float) -> Dict[str, Any]:
    return {
        'roof_type': RoofType(roof_type).value,
        'pitch_deg': params.pitch_deg,
        'edge_overhangs': params.edge_overhangs.to_dict(),
        'ridge_height': ridge_height,
        'plane_count': len(planes),
        'total_area': float(sum(p.area for p in planes)),
    }


def create_empty_result(roof_type: RoofType) -> RoofBuildResult:
    """Result returned when a footprint cannot carry a roof."""
    return RoofBuildResult(metadata={
        'roof_type': RoofType(roof_type).value,
        'pitch_deg': 0,
        'ridge_height': 0,
        'plane_count': 0,
        'total_area': 0.0,
    })


__all__ = [
    'ALL_SIDES', 'AABB', 'EdgeOverhangs', 'RoofBuildParams', 'RoofBuildResult',
    'RoofFrame', 'RoofSide', 'RoofType', 'build_metadata', 'build_plane',
    'compute_aabb', 'create_empty_result', 'frame_plane', 'rise_for', 'side_label'
]
