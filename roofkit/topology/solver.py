"""
Height resolution for roof topology vertices.
Pinned heights are kept; the rest follow from the roof pitch measured
inward from the (overhang-extended) eave lines.
"""

import heapq
import logging
import math
from dataclasses import dataclass, field
from typing import Dict, List, Optional

from ..geometry.vec2 import distance, normalize, perp_cw, sub
from .faces import Face, Segment, inward_distance
from .types import EdgeOverhangs, EdgeRole, RoofTopology, side_for_normal

logger = logging.getLogger(__name__)


@dataclass(frozen=True)
class SolverParams:
    """Inputs for height resolution."""
    base_z: float
    pitch_deg: float
    eave_overhangs: EdgeOverhangs = field(default_factory=EdgeOverhangs)
    tolerance: float = 1e-6


def eave_level(topology: RoofTopology, segment: Segment, base_z: float) -> float:
    """Mean pinned height of the parent eave's endpoints, base_z when neither is pinned."""
    edge = topology.edges.get(segment.edge_id)
    ids = (edge.start_id, edge.end_id) if edge is not None else (segment.start_id, segment.end_id)
    pinned = [topology.vertices[v].pinned_z for v in ids if topology.vertices[v].is_pinned]
    if not pinned:
        return base_z
    return sum(pinned) / len(pinned)


def segment_overhang(topology: RoofTopology, segment: Segment, overhangs: EdgeOverhangs) -> float:
    """Overhang of a face segment traversed counter-clockwise around its face."""
    start = topology.vertices[segment.start_id].position
    end = topology.vertices[segment.end_id].position
    outward = perp_cw(normalize(sub(end, start)))
    return overhangs.for_side(side_for_normal(outward))


def _face_candidate(topology: RoofTopology, face: Face, vertex_id: str,
                    params: SolverParams, slope: float) -> Optional[float]:
    """Height of vertex_id implied by the eave lines of one face."""
    point = topology.vertices[vertex_id].position
    values = []
    for segment in face.segments:
        if segment.role != EdgeRole.EAVE:
            continue
        start = topology.vertices[segment.start_id].position
        end = topology.vertices[segment.end_id].position
        run = inward_distance(point, start, end) + segment_overhang(topology, segment, params.eave_overhangs)
        values.append(eave_level(topology, segment, params.base_z) + run * slope)
    if not values:
        return None
    return sum(values) / len(values)


def _within_tolerance(values: List[float], tolerance: float) -> bool:
    scale = max(1.0, max(abs(v) for v in values))
    return max(values) - min(values) <= tolerance * scale


def resolve_heights(topology: RoofTopology, faces: List[Face],
                    params: SolverParams) -> Dict[str, float]:
    """
    Resolve a height for every vertex in the topology.

    Args:
        topology: Source topology
        faces: Faces traced from the topology
        params: Base height, pitch, overhangs and tolerance

    Returns:
        Mapping of vertex id to height
    """
    slope = math.tan(math.radians(params.pitch_deg))
    heights: Dict[str, float] = {}
    for vertex in topology.vertices.values():
        if vertex.is_pinned:
            heights[vertex.id] = vertex.pinned_z

    faces_by_vertex: Dict[str, List[Face]] = {}
    for face in faces:
        for vertex_id in face.vertex_ids:
            faces_by_vertex.setdefault(vertex_id, []).append(face)

    for vertex_id, vertex_faces in faces_by_vertex.items():
        if vertex_id in heights:
            continue
        candidates = [c for c in (_face_candidate(topology, f, vertex_id, params, slope)
                                  for f in vertex_faces) if c is not None]
        if not candidates:
            continue
        average = sum(candidates) / len(candidates)
        if not _within_tolerance(candidates, params.tolerance):
            logger.debug(f"Overdetermined height at {vertex_id}: candidates {candidates}, using {average:.3f}")
        heights[vertex_id] = average

    _propagate(topology, heights, slope)

    for vertex_id in topology.vertices:
        if vertex_id not in heights:
            heights[vertex_id] = params.base_z
    return heights


def _propagate(topology: RoofTopology, heights: Dict[str, float], slope: float):
    """Fill unresolved connected vertices by shortest path from resolved ones."""
    adjacency: Dict[str, List[tuple]] = {}
    for edge in topology.edges.values():
        a = topology.vertices[edge.start_id].position
        b = topology.vertices[edge.end_id].position
        cost = 0.0 if edge.role == EdgeRole.RIDGE else distance(a, b) * slope
        adjacency.setdefault(edge.start_id, []).append((edge.end_id, cost))
        adjacency.setdefault(edge.end_id, []).append((edge.start_id, cost))

    unresolved = [v for v in adjacency if v not in heights]
    if not unresolved:
        return

    best: Dict[str, float] = {}
    queue = []
    for vertex_id in adjacency:
        if vertex_id in heights:
            heapq.heappush(queue, (0.0, vertex_id, heights[vertex_id]))

    while queue:
        cost, vertex_id, source_z = heapq.heappop(queue)
        if vertex_id in best:
            continue
        best[vertex_id] = source_z + cost
        for neighbor_id, step in adjacency[vertex_id]:
            if neighbor_id not in best and neighbor_id not in heights:
                heapq.heappush(queue, (cost + step, neighbor_id, source_z))

    for vertex_id in unresolved:
        if vertex_id in best:
            heights[vertex_id] = best[vertex_id]
