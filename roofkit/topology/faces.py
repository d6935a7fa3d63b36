"""
Face tracing over the roof topology.
Edges are first split where other vertices lie on them, then bounded faces
are found with a half-edge walk.
"""

import logging
import math
from dataclasses import dataclass
from typing import Dict, FrozenSet, List, Optional, Tuple

from ..geometry.polygon import signed_area
from ..geometry.vec2 import Vec2, closest_point_on_segment, distance, dot, sub
from .types import EdgeRole, RoofTopology

logger = logging.getLogger(__name__)

# Higher wins when two pieces overlap
ROLE_PRIORITY = {
    EdgeRole.EAVE: 6,
    EdgeRole.GABLE: 5,
    EdgeRole.RAKE: 4,
    EdgeRole.RIDGE: 3,
    EdgeRole.HIP: 2,
    EdgeRole.VALLEY: 1,
}

ON_EDGE_TOLERANCE = 1e-7


@dataclass(frozen=True)
class Segment:
    """Piece of a topology edge between two consecutive vertices on it."""
    start_id: str
    end_id: str
    role: EdgeRole
    edge_id: str
    index: int = 0
    count: int = 1

    @property
    def key(self) -> FrozenSet[str]:
        return frozenset((self.start_id, self.end_id))

    def reversed(self) -> 'Segment':
        return Segment(self.end_id, self.start_id, self.role, self.edge_id, self.index, self.count)


@dataclass(frozen=True)
class Face:
    """Bounded face in counter-clockwise order; segments[i] runs from vertex i to i + 1."""
    vertex_ids: Tuple[str, ...]
    segments: Tuple[Segment, ...]
    area: float

    def roles(self) -> FrozenSet[EdgeRole]:
        return frozenset(s.role for s in self.segments)


def _connected_vertex_ids(topology: RoofTopology) -> List[str]:
    connected = set()
    for edge in topology.edges.values():
        connected.add(edge.start_id)
        connected.add(edge.end_id)
    return [v for v in topology.vertices if v in connected]


def _split_edge_pieces(topology: RoofTopology, edge, candidates: List[str]) -> List[Segment]:
    a = topology.vertices[edge.start_id].position
    b = topology.vertices[edge.end_id].position
    edge_length = distance(a, b)
    tolerance = ON_EDGE_TOLERANCE * max(1.0, edge_length)

    on_edge = []
    for vertex_id in candidates:
        if vertex_id in (edge.start_id, edge.end_id):
            continue
        point = topology.vertices[vertex_id].position
        closest, t = closest_point_on_segment(point, a, b)
        if 0.0 < t < 1.0 and distance(point, closest) <= tolerance:
            on_edge.append((t, vertex_id))
    on_edge.sort()

    chain = [edge.start_id] + [v for _, v in on_edge] + [edge.end_id]
    count = len(chain) - 1
    return [Segment(chain[i], chain[i + 1], edge.role, edge.id, i, count) for i in range(count)]


def planarize(topology: RoofTopology) -> List[Segment]:
    """
    Split edges at the vertices lying on them and drop dangling spurs.

    Args:
        topology: Source topology

    Returns:
        Segments of the planar graph, one per vertex pair
    """
    candidates = _connected_vertex_ids(topology)
    by_pair: Dict[FrozenSet[str], Segment] = {}
    for edge in topology.edges.values():
        if edge.start_id not in topology.vertices or edge.end_id not in topology.vertices:
            continue
        for piece in _split_edge_pieces(topology, edge, candidates):
            start = topology.vertices[piece.start_id].position
            end = topology.vertices[piece.end_id].position
            if distance(start, end) <= ON_EDGE_TOLERANCE:
                continue
            current = by_pair.get(piece.key)
            if current is None or ROLE_PRIORITY[piece.role] > ROLE_PRIORITY[current.role]:
                by_pair[piece.key] = piece

    segments = list(by_pair.values())
    while True:
        degree: Dict[str, int] = {}
        for segment in segments:
            degree[segment.start_id] = degree.get(segment.start_id, 0) + 1
            degree[segment.end_id] = degree.get(segment.end_id, 0) + 1
        kept = [s for s in segments if degree[s.start_id] > 1 and degree[s.end_id] > 1]
        if len(kept) == len(segments):
            return kept
        segments = kept


def _sorted_neighbors(topology: RoofTopology,
                      segments: List[Segment]) -> Dict[str, List[str]]:
    neighbors: Dict[str, List[str]] = {}
    for segment in segments:
        neighbors.setdefault(segment.start_id, []).append(segment.end_id)
        neighbors.setdefault(segment.end_id, []).append(segment.start_id)

    for vertex_id, ids in neighbors.items():
        origin = topology.vertices[vertex_id].position

        def angle_of(other_id, origin=origin):
            d = sub(topology.vertices[other_id].position, origin)
            return math.atan2(d.y, d.x)

        ids.sort(key=angle_of)
    return neighbors


def trace_faces(topology: RoofTopology, segments: Optional[List[Segment]] = None) -> List[Face]:
    """
    Find the bounded faces of the topology.

    Args:
        topology: Source topology
        segments: Pre-computed planar segments; derived when omitted

    Returns:
        Faces with positive area, counter-clockwise
    """
    if segments is None:
        segments = planarize(topology)
    if not segments:
        return []

    lookup: Dict[Tuple[str, str], Segment] = {}
    for segment in segments:
        lookup[(segment.start_id, segment.end_id)] = segment
        lookup[(segment.end_id, segment.start_id)] = segment.reversed()

    neighbors = _sorted_neighbors(topology, segments)
    visited = set()
    faces = []
    for half_edge in sorted(lookup):
        if half_edge in visited:
            continue
        cycle = []
        current = half_edge
        while current not in visited:
            visited.add(current)
            cycle.append(lookup[current])
            prev_id, vertex_id = current
            around = neighbors[vertex_id]
            next_id = around[(around.index(prev_id) - 1) % len(around)]
            current = (vertex_id, next_id)

        if current != half_edge:
            logger.debug(f"Half-edge walk from {half_edge} did not close cleanly")
            continue

        vertex_ids = tuple(s.start_id for s in cycle)
        area = signed_area([topology.vertices[v].position for v in vertex_ids])
        if area > 0:
            faces.append(Face(vertex_ids=vertex_ids, segments=tuple(cycle), area=area))
    return faces


def inward_distance(point: Vec2, start: Vec2, end: Vec2) -> float:
    """Signed distance of point from the line start->end, positive to its left."""
    direction = sub(end, start)
    length = math.hypot(direction.x, direction.y)
    if length == 0:
        return 0.0
    left = Vec2(-direction.y / length, direction.x / length)
    return dot(sub(point, start), left)
