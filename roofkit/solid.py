"""
Roof solid generation.
Dispatches a footprint and roof parameters to the matching builder and
collects the resulting planes.
"""

import logging
from dataclasses import dataclass
from typing import Optional, Sequence, Tuple

from .config import DEFAULT_CONFIG, RoofSystemConfig
from .geometry.plane import RoofPlaneGeometry
from .geometry.polygon import dedupe_polygon, is_degenerate_polygon
from .roof_builder import (
    FlatRoofBuilder,
    GableRoofBuilder,
    GambrelRoofBuilder,
    HipRoofBuilder,
    MansardRoofBuilder,
    RoofBuildParams,
    RoofBuildResult,
    ShedRoofBuilder,
    build_from_topology,
)
from .topology.types import EdgeOverhangs, RoofTopology, RoofType

logger = logging.getLogger(__name__)


@dataclass(frozen=True)
class RoofSolid:
    """Generated roof surfaces for one roof record."""
    roof_id: str
    face_id: str
    roof_type: RoofType
    planes: Tuple[RoofPlaneGeometry, ...] = ()
    fascias: Tuple[RoofPlaneGeometry, ...] = ()
    ridge_height: float = 0.0

    @property
    def total_area(self) -> float:
        """Sum of the sloped plane areas; fascias are not roof covering."""
        return float(sum(p.area for p in self.planes))

    @property
    def is_empty(self) -> bool:
        return not self.planes

    def all_surfaces(self) -> Tuple[RoofPlaneGeometry, ...]:
        return self.planes + self.fascias

    def plane(self, plane_id: str) -> Optional[RoofPlaneGeometry]:
        for candidate in self.all_surfaces():
            if candidate.plane_id == plane_id:
                return candidate
        return None


def _build(roof_type: RoofType, params: RoofBuildParams, config: RoofSystemConfig) -> RoofBuildResult:
    if roof_type == RoofType.FLAT:
        return FlatRoofBuilder(config).build_flat_roof(params)
    if roof_type == RoofType.GABLE:
        return GableRoofBuilder(config).build_gable_roof(params)
    if roof_type == RoofType.HIP:
        return HipRoofBuilder(config).build_hip_roof(params)
    if roof_type == RoofType.SHED:
        return ShedRoofBuilder(config).build_shed_roof(params)
    if roof_type == RoofType.GAMBREL:
        return GambrelRoofBuilder(config).build_gambrel_roof(params)
    return MansardRoofBuilder(config).build_mansard_roof(params)


def generate_roof_solid(roof_id: str,
                        face_id: str,
                        polygon: Sequence[Sequence[float]],
                        roof_type: RoofType,
                        base_z: float,
                        pitch_deg: float,
                        overhang: float = 0.0,
                        lower_pitch_deg: Optional[float] = None,
                        edge_overhangs: Optional[EdgeOverhangs] = None,
                        ridge_offset: float = 0.0,
                        topology: Optional[RoofTopology] = None,
                        config: Optional[RoofSystemConfig] = None) -> RoofSolid:
    """
    Generate the roof planes for a footprint.

    Args:
        roof_id: Roof identifier stamped on every plane
        face_id: Footprint face the roof sits on
        polygon: Footprint polygon in plan
        roof_type: Roof shape
        base_z: Height of the wall tops
        pitch_deg: Roof pitch in degrees
        overhang: Uniform eave overhang, used when edge_overhangs is omitted
        lower_pitch_deg: Lower course pitch for gambrel and mansard roofs
        edge_overhangs: Per-side overhangs
        ridge_offset: Perpendicular ridge shift from the centre
        topology: User-edited topology; takes precedence over the presets
        config: Parameter defaults and ranges

    Returns:
        RoofSolid; without planes for a degenerate footprint
    """
    config = config or DEFAULT_CONFIG
    roof_type = RoofType(roof_type)

    polygon = dedupe_polygon(polygon)
    if is_degenerate_polygon(polygon):
        logger.warning(f"Roof {roof_id}: degenerate footprint, no planes generated")
        return RoofSolid(roof_id=roof_id, face_id=face_id, roof_type=roof_type)

    overhangs = edge_overhangs if edge_overhangs is not None else EdgeOverhangs.uniform(overhang)
    params = RoofBuildParams(
        roof_id=roof_id,
        polygon=[(p.x, p.y) for p in polygon],
        base_z=float(base_z),
        pitch_deg=config.clamp_pitch(pitch_deg),
        lower_pitch_deg=config.clamp_lower_pitch(
            config.default_lower_pitch_deg if lower_pitch_deg is None else lower_pitch_deg),
        edge_overhangs=config.clamp_overhangs(overhangs),
        ridge_offset=config.clamp_ridge_offset(ridge_offset),
    )

    if topology is not None:
        if topology.is_empty:
            logger.warning(f"Roof {roof_id}: custom topology is empty, no planes generated")
            return RoofSolid(roof_id=roof_id, face_id=face_id, roof_type=roof_type)
        result = build_from_topology(topology, params, roof_type, config)
    else:
        result = _build(roof_type, params, config)

    logger.debug(f"Roof {roof_id}: {len(result.planes)} planes, {len(result.fascias)} fascias")
    return RoofSolid(
        roof_id=roof_id,
        face_id=face_id,
        roof_type=roof_type,
        planes=tuple(result.planes),
        fascias=tuple(result.fascias),
        ridge_height=result.ridge_height,
    )


def generate_solid_for_roof(roof, polygon: Sequence[Sequence[float]],
                            config: Optional[RoofSystemConfig] = None) -> RoofSolid:
    """Generate the solid for a Roof record; its topology is used only when custom."""
    return generate_roof_solid(
        roof_id=roof.id,
        face_id=roof.face_id,
        polygon=polygon,
        roof_type=roof.roof_type,
        base_z=roof.base_z,
        pitch_deg=roof.pitch_deg,
        lower_pitch_deg=roof.lower_pitch_deg,
        edge_overhangs=roof.edge_overhangs,
        ridge_offset=roof.ridge_offset,
        topology=roof.topology if roof.use_custom_topology else None,
        config=config,
    )
