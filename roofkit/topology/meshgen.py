"""
Roof plane assembly from a topology.
Traces faces, resolves heights, extends eaves by their overhang and emits
one plane per face plus vertical fascias under gable edges.

Planes are named after the footprint side of their longest eave
("{roof}_front"), or after their anchor edge when they have no eave
("{roof}_e6"). Preset and user-edited topologies share this scheme, so a
panel keeps its id across the first edit of a roof.
"""

import logging
from dataclasses import dataclass, field
from typing import Dict, List, Tuple

from ..geometry.plane import RoofPlaneGeometry, build_plane
from ..geometry.polygon import offset_polygon
from ..geometry.vec2 import (
    Vec2,
    distance,
    dot,
    normalize,
    perp_cw,
    sub,
)
from .faces import Face, Segment, planarize, trace_faces
from .solver import SolverParams, eave_level, resolve_heights
from .types import (
    EdgeOverhangs,
    EdgeRole,
    RoofSide,
    RoofTopology,
    natural_key,
    side_for_normal,
)

logger = logging.getLogger(__name__)


@dataclass(frozen=True)
class MeshParams:
    """Inputs for plane assembly."""
    base_z: float
    pitch_deg: float
    overhangs: EdgeOverhangs = field(default_factory=EdgeOverhangs)
    miter_limit: float = 4.0
    height_tolerance: float = 1e-6


@dataclass(frozen=True)
class TopologyMeshResult:
    """Planes, fascias and the intermediate data they were built from."""
    planes: Tuple[RoofPlaneGeometry, ...] = ()
    fascias: Tuple[RoofPlaneGeometry, ...] = ()
    heights: Dict[str, float] = field(default_factory=dict)
    faces: Tuple[Face, ...] = ()
    ridge_height: float = 0.0


Corner = Tuple[Vec2, float]


def _segment_side(topology: RoofTopology, segment: Segment) -> RoofSide:
    a = topology.vertices[segment.start_id].position
    b = topology.vertices[segment.end_id].position
    return side_for_normal(perp_cw(normalize(sub(b, a))))


def extend_face(topology: RoofTopology, face: Face, heights: Dict[str, float],
                params: MeshParams) -> List[Corner]:
    """
    Face corners after pushing eave segments outward by their overhang.

    Corners next to a shifted eave move to the mitred offset corner from
    offset_polygon, with the configured miter limit. Unpinned moved corners
    drop to the eave level.
    """
    positions = [topology.vertices[v].position for v in face.vertex_ids]
    overhangs = []
    levels = []
    for segment in face.segments:
        if segment.role == EdgeRole.EAVE:
            overhangs.append(params.overhangs.for_side(_segment_side(topology, segment)))
            levels.append(eave_level(topology, segment, params.base_z))
        else:
            overhangs.append(0.0)
            levels.append(None)
    offsets = offset_polygon(positions, overhangs, params.miter_limit)

    corners = []
    for i, vertex_id in enumerate(face.vertex_ids):
        z = heights[vertex_id]
        shifted = [j for j in (i - 1, i) if overhangs[j] > 0]
        if not shifted:
            corners.append((positions[i], z))
            continue
        if not topology.vertices[vertex_id].is_pinned:
            z = sum(levels[j] for j in shifted) / len(shifted)
        corners.append((offsets[i], z))
    return corners


def _eave_sides(topology: RoofTopology, face: Face) -> List[Tuple[RoofSide, float]]:
    """(side, plan length) for each eave segment of the face, in face order."""
    result = []
    for segment in face.segments:
        if segment.role != EdgeRole.EAVE:
            continue
        a = topology.vertices[segment.start_id].position
        b = topology.vertices[segment.end_id].position
        result.append((_segment_side(topology, segment), distance(a, b)))
    return result


def face_label(face: Face) -> str:
    """Label derived from the roles bounding a face without an eave."""
    roles = face.roles()
    if EdgeRole.VALLEY in roles:
        return "Valley Slope"
    if EdgeRole.RIDGE in roles:
        return "Ridge Slope"
    if EdgeRole.HIP in roles:
        return "Hip Face"
    return "Roof Face"


def anchor_suffix(face: Face) -> str:
    """
    Stable suffix for a face.

    The anchor is the smallest eave edge id bounding the face, then the
    smallest other boundary edge id, then the smallest interior edge id.
    Subdivided edges get the 1-based piece number appended.
    """
    eaves = [s for s in face.segments if s.role == EdgeRole.EAVE]
    boundary = [s for s in face.segments if s.role.is_boundary]
    pool = eaves or boundary or list(face.segments)
    anchor = min(pool, key=lambda s: (natural_key(s.edge_id), s.index))
    if anchor.count > 1:
        return f"{anchor.edge_id}_{anchor.index + 1}"
    return anchor.edge_id


def _unique(name: str, used: set) -> str:
    candidate = name
    k = 2
    while candidate in used:
        candidate = f"{name}_{k}"
        k += 1
    used.add(candidate)
    return candidate


def face_name(topology: RoofTopology, face: Face, single: bool) -> Tuple[str, str]:
    """(suffix, label) for a face; single marks a roof with one face and no interior edges."""
    if single:
        return "flat", "Flat Roof"
    sides = _eave_sides(topology, face)
    if not sides:
        return anchor_suffix(face), face_label(face)
    side = max(sides, key=lambda item: item[1])[0]
    roles = face.roles()
    kind = "Hip" if EdgeRole.HIP in roles and EdgeRole.RIDGE not in roles else "Slope"
    return side.value, f"{side.value.title()} {kind}"


def _build_fascias(topology: RoofTopology, roof_id: str, faces: List[Face],
                   corners_by_face: List[List[Corner]], params: MeshParams) -> List[RoofPlaneGeometry]:
    profiles: Dict[str, List[Corner]] = {}
    sides: Dict[str, RoofSide] = {}
    for face, corners in zip(faces, corners_by_face):
        n = len(face.vertex_ids)
        for i, segment in enumerate(face.segments):
            if segment.role != EdgeRole.GABLE:
                continue
            profiles.setdefault(segment.edge_id, []).extend([corners[i], corners[(i + 1) % n]])
            sides[segment.edge_id] = _segment_side(topology, segment)
    fascias = []
    used = set()
    for edge_id in sorted(profiles, key=natural_key):
        edge = topology.edges[edge_id]
        origin = topology.vertices[edge.start_id].position
        direction = normalize(sub(topology.vertices[edge.end_id].position, origin))

        ordered = sorted(profiles[edge_id], key=lambda c: dot(sub(c[0], origin), direction))
        profile: List[Corner] = []
        for corner in ordered:
            if profile and distance(profile[-1][0], corner[0]) <= 1e-9 * max(1.0, abs(corner[0].x) + abs(corner[0].y)):
                continue
            profile.append(corner)
        if len(profile) < 3:
            continue

        end_z = max(profile[0][1], profile[-1][1])
        apex = max(z for _, z in profile)
        tolerance = params.height_tolerance * max(1.0, abs(apex))
        if apex <= end_z + tolerance:
            continue

        name = _unique(f"{roof_id}_gable_{sides[edge_id].value}", used)
        points = [(p.x, p.y, z) for p, z in profile]
        fascias.append(build_plane(name, roof_id, "Gable Wall", points,
                                   (sides[edge_id],), slope_override=90.0))
    return fascias


def planes_from_topology(topology: RoofTopology, roof_id: str,
                         params: MeshParams) -> TopologyMeshResult:
    """
    Build roof planes for a topology.

    Args:
        topology: Roof topology (preset or user edited)
        roof_id: Owning roof id, stamped on every plane
        params: Heights, pitch and overhangs

    Returns:
        TopologyMeshResult; empty when the topology has no bounded faces
    """
    if topology.is_empty:
        return TopologyMeshResult()

    segments: List[Segment] = planarize(topology)
    faces = trace_faces(topology, segments)
    if not faces:
        logger.warning(f"Roof {roof_id}: topology has no bounded faces")
        return TopologyMeshResult()

    heights = resolve_heights(
        topology, faces,
        SolverParams(params.base_z, params.pitch_deg, params.overhangs, params.height_tolerance))

    # Stable ordering keeps collision suffixes independent of the walk order
    faces = sorted(faces, key=lambda f: natural_key(anchor_suffix(f)))
    corners_by_face = [extend_face(topology, face, heights, params) for face in faces]
    single = len(faces) == 1 and not topology.interior_edges()

    planes = []
    used = set()
    for face, corners in zip(faces, corners_by_face):
        suffix, label = face_name(topology, face, single)
        plane_id = _unique(f"{roof_id}_{suffix}", used)
        points = [(p.x, p.y, z) for p, z in corners]
        sides = []
        for side, _ in _eave_sides(topology, face):
            if side not in sides:
                sides.append(side)
        planes.append(build_plane(plane_id, roof_id, label, points, sides))

    fascias = _build_fascias(topology, roof_id, faces, corners_by_face, params)
    top = max(heights.values()) if heights else params.base_z
    return TopologyMeshResult(
        planes=tuple(planes),
        fascias=tuple(fascias),
        heights=heights,
        faces=tuple(faces),
        ridge_height=max(0.0, top - params.base_z),
    )
