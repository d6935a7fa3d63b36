"""
Roof topology graph types.
Vertices and edges are immutable; every edit produces a new RoofTopology.
"""

import re
from dataclasses import dataclass, field, replace
from enum import Enum
from typing import Any, Dict, FrozenSet, List, NamedTuple, Optional, Tuple

from ..geometry.vec2 import Vec2, as_vec2


class EdgeRole(str, Enum):
    """Structural role of a roof edge."""
    EAVE = "eave"
    RIDGE = "ridge"
    HIP = "hip"
    VALLEY = "valley"
    GABLE = "gable"
    RAKE = "rake"

    @property
    def is_boundary(self) -> bool:
        return self in BOUNDARY_ROLES


BOUNDARY_ROLES = frozenset({EdgeRole.EAVE, EdgeRole.GABLE, EdgeRole.RAKE})
INTERIOR_ROLES = frozenset({EdgeRole.RIDGE, EdgeRole.HIP, EdgeRole.VALLEY})


class RoofType(str, Enum):
    """Supported roof shapes."""
    FLAT = "flat"
    GABLE = "gable"
    HIP = "hip"
    SHED = "shed"
    GAMBREL = "gambrel"
    MANSARD = "mansard"


class RoofSide(str, Enum):
    """Footprint side in plan: front = min Y, back = max Y, left = min X, right = max X."""
    FRONT = "front"
    BACK = "back"
    LEFT = "left"
    RIGHT = "right"


ALL_SIDES = (RoofSide.FRONT, RoofSide.BACK, RoofSide.LEFT, RoofSide.RIGHT)


@dataclass(frozen=True)
class EdgeOverhangs:
    """Per-side eave overhang distances."""
    front: float = 0.0
    back: float = 0.0
    left: float = 0.0
    right: float = 0.0

    @classmethod
    def uniform(cls, value: float) -> 'EdgeOverhangs':
        return cls(value, value, value, value)

    def for_side(self, side: RoofSide) -> float:
        return getattr(self, RoofSide(side).value)

    def clamped(self, low: float, high: float) -> 'EdgeOverhangs':
        return EdgeOverhangs(*(max(low, min(high, getattr(self, s.value))) for s in ALL_SIDES))

    def to_dict(self) -> Dict[str, float]:
        return {s.value: getattr(self, s.value) for s in ALL_SIDES}


def side_for_normal(normal: Vec2) -> RoofSide:
    """Classify an outward normal into the footprint side it faces."""
    if abs(normal.y) >= abs(normal.x):
        return RoofSide.FRONT if normal.y < 0 else RoofSide.BACK
    return RoofSide.LEFT if normal.x < 0 else RoofSide.RIGHT


@dataclass(frozen=True)
class Vertex:
    """Topology vertex; boundary vertices come from the footprint polygon."""
    id: str
    position: Vec2
    pinned_z: Optional[float] = None
    is_interior: bool = False

    @property
    def is_pinned(self) -> bool:
        return self.pinned_z is not None


@dataclass(frozen=True)
class Edge:
    """Undirected edge between two vertex ids."""
    id: str
    start_id: str
    end_id: str
    role: EdgeRole

    def touches(self, vertex_id: str) -> bool:
        return vertex_id == self.start_id or vertex_id == self.end_id

    def other(self, vertex_id: str) -> str:
        return self.end_id if vertex_id == self.start_id else self.start_id

    @property
    def key(self) -> FrozenSet[str]:
        return frozenset((self.start_id, self.end_id))


class MutationResult(NamedTuple):
    """Return value of creating mutators; new_id is None on rejection."""
    topology: 'RoofTopology'
    new_id: Optional[str]


_NATURAL_SPLIT = re.compile(r'(\d+)')


def natural_key(value: str) -> Tuple:
    """Sort key that orders "e2" before "e10"."""
    return tuple(int(part) if part.isdigit() else part
                 for part in _NATURAL_SPLIT.split(value))


@dataclass(frozen=True)
class RoofTopology:
    """
    Planar graph describing a roof in plan.

    The mappings are never mutated after construction; mutators build new
    instances. serial drives deterministic id generation and retired holds
    ids deleted during this editing session so they are never handed out
    again.
    """
    vertices: Dict[str, Vertex] = field(default_factory=dict)
    edges: Dict[str, Edge] = field(default_factory=dict)
    serial: int = 0
    retired: FrozenSet[str] = frozenset()

    __hash__ = None

    @property
    def is_empty(self) -> bool:
        return not self.vertices and not self.edges

    def is_id_taken(self, item_id: str) -> bool:
        return item_id in self.vertices or item_id in self.edges or item_id in self.retired

    def allocate_id(self, prefix: str) -> Tuple[str, int]:
        """
        Next free id for the given prefix.

        Returns:
            Tuple of (id, serial to store on the new topology)
        """
        serial = self.serial
        candidate = f"{prefix}{serial}"
        while self.is_id_taken(candidate):
            serial += 1
            candidate = f"{prefix}{serial}"
        return candidate, serial + 1

    def incident_edges(self, vertex_id: str) -> List[Edge]:
        return [e for e in self.edges.values() if e.touches(vertex_id)]

    def neighbors(self, vertex_id: str) -> List[str]:
        return [e.other(vertex_id) for e in self.incident_edges(vertex_id)]

    def find_edge(self, v1_id: str, v2_id: str) -> Optional[Edge]:
        key = frozenset((v1_id, v2_id))
        for edge in self.edges.values():
            if edge.key == key:
                return edge
        return None

    def boundary_edges(self) -> List[Edge]:
        return [e for e in self.edges.values() if e.role.is_boundary]

    def interior_edges(self) -> List[Edge]:
        return [e for e in self.edges.values() if not e.role.is_boundary]

    def boundary_cycle(self) -> Optional[List[str]]:
        """
        Ordered vertex ids of the boundary cycle.

        Returns:
            Vertex ids in cycle order, or None when the boundary edges do not
            form exactly one closed loop
        """
        boundary = self.boundary_edges()
        if len(boundary) < 3:
            return None

        adjacency: Dict[str, List[Edge]] = {}
        for edge in boundary:
            adjacency.setdefault(edge.start_id, []).append(edge)
            adjacency.setdefault(edge.end_id, []).append(edge)
        if any(len(edges) != 2 for edges in adjacency.values()):
            return None

        first = boundary[0]
        cycle = [first.start_id]
        current = first.end_id
        previous_edge = first
        while current != first.start_id:
            cycle.append(current)
            options = [e for e in adjacency[current] if e.id != previous_edge.id]
            previous_edge = options[0]
            current = previous_edge.other(current)
            if len(cycle) > len(boundary):
                return None

        if len(cycle) != len(boundary):
            return None
        return cycle

    def boundary_polygon(self) -> List[Vec2]:
        cycle = self.boundary_cycle()
        if cycle is None:
            return []
        return [self.vertices[v].position for v in cycle]

    def with_changes(self, **changes) -> 'RoofTopology':
        return replace(self, **changes)

    def to_dict(self) -> Dict[str, Any]:
        """JSON-ready representation."""
        return {
            'vertices': [
                {
                    'id': v.id,
                    'position': [v.position.x, v.position.y],
                    'pinned_z': v.pinned_z,
                    'is_interior': v.is_interior,
                }
                for v in self.vertices.values()
            ],
            'edges': [
                {'id': e.id, 'start_id': e.start_id, 'end_id': e.end_id, 'role': e.role.value}
                for e in self.edges.values()
            ],
            'serial': self.serial,
            'retired': sorted(self.retired, key=natural_key),
        }

    @classmethod
    def from_dict(cls, data: Dict[str, Any]) -> 'RoofTopology':
        vertices = {}
        for item in data.get('vertices', []):
            vertices[item['id']] = Vertex(
                id=item['id'],
                position=as_vec2(item['position']),
                pinned_z=item.get('pinned_z'),
                is_interior=bool(item.get('is_interior', False)),
            )
        edges = {}
        for item in data.get('edges', []):
            edges[item['id']] = Edge(
                id=item['id'],
                start_id=item['start_id'],
                end_id=item['end_id'],
                role=EdgeRole(item['role']),
            )
        return cls(
            vertices=vertices,
            edges=edges,
            serial=int(data.get('serial', 0)),
            retired=frozenset(data.get('retired', [])),
        )


def empty_topology() -> RoofTopology:
    return RoofTopology()


def validate_topology(topology: RoofTopology) -> List[str]:
    """
    Check the structural invariants of a topology.

    Args:
        topology: Topology to check

    Returns:
        Human-readable violations; empty when the topology is valid
    """
    problems = []
    if topology.is_empty:
        return problems

    for vertex_id, vertex in topology.vertices.items():
        if vertex.id != vertex_id:
            problems.append(f"vertex key {vertex_id} does not match id {vertex.id}")

    seen_pairs: Dict[FrozenSet[str], str] = {}
    for edge_id, edge in topology.edges.items():
        if edge.id != edge_id:
            problems.append(f"edge key {edge_id} does not match id {edge.id}")
        for endpoint in (edge.start_id, edge.end_id):
            if endpoint not in topology.vertices:
                problems.append(f"edge {edge.id} references missing vertex {endpoint}")
        if edge.start_id == edge.end_id:
            problems.append(f"edge {edge.id} is a self loop")
            continue
        if edge.key in seen_pairs:
            problems.append(f"edges {seen_pairs[edge.key]} and {edge.id} join the same vertices")
        else:
            seen_pairs[edge.key] = edge.id
        if edge.role.is_boundary:
            for endpoint in (edge.start_id, edge.end_id):
                vertex = topology.vertices.get(endpoint)
                if vertex is not None and vertex.is_interior:
                    problems.append(f"boundary edge {edge.id} touches interior vertex {endpoint}")

    shared = set(topology.vertices) & set(topology.edges)
    for item_id in sorted(shared, key=natural_key):
        problems.append(f"id {item_id} is used by both a vertex and an edge")

    boundary_vertices = [v for v in topology.vertices.values() if not v.is_interior]
    if len(boundary_vertices) < 3:
        problems.append("boundary has fewer than 3 vertices")
    cycle = topology.boundary_cycle()
    if cycle is None:
        problems.append("boundary edges do not form a single closed cycle")
    elif set(cycle) != {v.id for v in boundary_vertices}:
        problems.append("boundary cycle does not cover every boundary vertex")

    return problems
