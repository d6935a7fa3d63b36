"""
Pure topology mutators.
Each function returns a new RoofTopology; rejected edits return the input
object unchanged.
"""

import logging
from typing import Optional, Sequence

from ..geometry.vec2 import EPSILON, Vec2, as_vec2, distance, equals, lerp, midpoint
from ..utils.error_handling import (
    InvalidGeometryError,
    InvalidReferenceError,
    InvariantViolationError,
    mutator,
)
from .types import Edge, EdgeRole, MutationResult, RoofTopology, Vertex

logger = logging.getLogger(__name__)


def _require_vertex(topology: RoofTopology, vertex_id: str) -> Vertex:
    vertex = topology.vertices.get(vertex_id)
    if vertex is None:
        raise InvalidReferenceError(f"unknown vertex {vertex_id}")
    return vertex


def _require_edge(topology: RoofTopology, edge_id: str) -> Edge:
    edge = topology.edges.get(edge_id)
    if edge is None:
        raise InvalidReferenceError(f"unknown edge {edge_id}")
    return edge


def _claim_id(topology: RoofTopology, prefix: str, requested: Optional[str], serial: int):
    """Resolve the id for a new element; returns (id, serial)."""
    if requested is not None:
        if topology.is_id_taken(requested):
            raise InvalidReferenceError(f"id {requested} is already in use or retired")
        return requested, serial
    staged = topology.with_changes(serial=serial)
    return staged.allocate_id(prefix)


def _check_role_change(edge: Edge, role: EdgeRole):
    if edge.role.is_boundary != role.is_boundary:
        raise InvariantViolationError(
            f"edge {edge.id} cannot change from {edge.role.value} to {role.value}")


@mutator()
def set_edge_role(topology: RoofTopology, edge_id: str, role: EdgeRole) -> RoofTopology:
    """
    Re-tag an edge.

    Moving an edge between the boundary roles (eave/gable/rake) and the
    interior roles (ridge/hip/valley) is rejected.
    """
    edge = _require_edge(topology, edge_id)
    role = EdgeRole(role)
    if edge.role == role:
        return topology
    _check_role_change(edge, role)
    edges = dict(topology.edges)
    edges[edge_id] = Edge(edge.id, edge.start_id, edge.end_id, role)
    return topology.with_changes(edges=edges)


@mutator()
def pin_vertex(topology: RoofTopology, vertex_id: str, z: float) -> RoofTopology:
    vertex = _require_vertex(topology, vertex_id)
    if vertex.pinned_z == z:
        return topology
    vertices = dict(topology.vertices)
    vertices[vertex_id] = Vertex(vertex.id, vertex.position, float(z), vertex.is_interior)
    return topology.with_changes(vertices=vertices)


@mutator()
def unpin_vertex(topology: RoofTopology, vertex_id: str) -> RoofTopology:
    vertex = _require_vertex(topology, vertex_id)
    if vertex.pinned_z is None:
        return topology
    vertices = dict(topology.vertices)
    vertices[vertex_id] = Vertex(vertex.id, vertex.position, None, vertex.is_interior)
    return topology.with_changes(vertices=vertices)


@mutator(creates=True)
def add_interior_vertex(topology: RoofTopology, position: Sequence[float],
                        z: Optional[float] = None,
                        vertex_id: Optional[str] = None) -> MutationResult:
    """
    Add an unconnected interior vertex.

    Args:
        topology: Source topology
        position: Plan position
        z: Optional pinned height
        vertex_id: Optional explicit id; must be unused

    Returns:
        MutationResult with the new vertex id
    """
    new_id, serial = _claim_id(topology, 'v', vertex_id, topology.serial)
    vertices = dict(topology.vertices)
    vertices[new_id] = Vertex(new_id, as_vec2(position),
                              None if z is None else float(z), True)
    return MutationResult(topology.with_changes(vertices=vertices, serial=serial), new_id)


@mutator(creates=True)
def add_edge(topology: RoofTopology, start_id: str, end_id: str, role: EdgeRole,
             edge_id: Optional[str] = None) -> MutationResult:
    """
    Connect two existing vertices.

    If an edge already joins the pair it is re-tagged instead and its id is
    returned. New boundary-role edges are rejected since the boundary cycle
    is fixed by the footprint.

    Args:
        topology: Source topology
        start_id: First endpoint
        end_id: Second endpoint
        role: Edge role
        edge_id: Optional explicit id for a new edge

    Returns:
        MutationResult with the edge id
    """
    role = EdgeRole(role)
    start = _require_vertex(topology, start_id)
    end = _require_vertex(topology, end_id)
    if start_id == end_id:
        raise InvariantViolationError("edge endpoints must differ")

    existing = topology.find_edge(start_id, end_id)
    if existing is not None:
        if existing.role == role:
            return MutationResult(topology, existing.id)
        _check_role_change(existing, role)
        edges = dict(topology.edges)
        edges[existing.id] = Edge(existing.id, existing.start_id, existing.end_id, role)
        return MutationResult(topology.with_changes(edges=edges), existing.id)

    if role.is_boundary:
        raise InvariantViolationError(f"cannot add a new {role.value} edge to a fixed boundary")
    if equals(start.position, end.position, EPSILON):
        raise InvalidGeometryError("edge endpoints coincide in plan")

    new_id, serial = _claim_id(topology, 'e', edge_id, topology.serial)
    edges = dict(topology.edges)
    edges[new_id] = Edge(new_id, start_id, end_id, role)
    return MutationResult(topology.with_changes(edges=edges, serial=serial), new_id)


@mutator()
def remove_edge(topology: RoofTopology, edge_id: str) -> RoofTopology:
    """Remove an interior edge and any interior endpoint it leaves isolated."""
    edge = _require_edge(topology, edge_id)
    if edge.role.is_boundary:
        raise InvariantViolationError(f"boundary edge {edge_id} cannot be removed")

    edges = {k: e for k, e in topology.edges.items() if k != edge_id}
    vertices = dict(topology.vertices)
    retired = {edge_id}
    for endpoint in (edge.start_id, edge.end_id):
        vertex = vertices.get(endpoint)
        if vertex is None or not vertex.is_interior:
            continue
        if not any(e.touches(endpoint) for e in edges.values()):
            del vertices[endpoint]
            retired.add(endpoint)

    return topology.with_changes(vertices=vertices, edges=edges,
                                 retired=topology.retired | retired)


@mutator(creates=True)
def split_edge(topology: RoofTopology, edge_id: str, t: float = 0.5,
               vertex_id: Optional[str] = None) -> MutationResult:
    """
    Insert a vertex on an edge.

    The edge is replaced by two edges of the same role and its id retired.
    The new vertex is on the boundary when the edge is a boundary edge; its
    height is interpolated when both endpoints are pinned.

    Args:
        topology: Source topology
        edge_id: Edge to split
        t: Split parameter, strictly between 0 and 1
        vertex_id: Optional explicit id for the new vertex

    Returns:
        MutationResult with the new vertex id
    """
    edge = _require_edge(topology, edge_id)
    if not 0.0 < t < 1.0:
        raise InvalidGeometryError(f"split parameter {t} outside (0, 1)")
    start = _require_vertex(topology, edge.start_id)
    end = _require_vertex(topology, edge.end_id)

    new_vertex_id, serial = _claim_id(topology, 'v', vertex_id, topology.serial)
    staged = topology.with_changes(serial=serial, retired=topology.retired | {new_vertex_id})
    first_id, serial = staged.allocate_id('e')
    staged = staged.with_changes(serial=serial, retired=staged.retired | {first_id})
    second_id, serial = staged.allocate_id('e')

    pinned_z = None
    if start.is_pinned and end.is_pinned:
        pinned_z = start.pinned_z + (end.pinned_z - start.pinned_z) * t

    vertices = dict(topology.vertices)
    vertices[new_vertex_id] = Vertex(new_vertex_id, lerp(start.position, end.position, t),
                                     pinned_z, not edge.role.is_boundary)

    edges = {}
    for key, existing in topology.edges.items():
        if key == edge_id:
            edges[first_id] = Edge(first_id, edge.start_id, new_vertex_id, edge.role)
            edges[second_id] = Edge(second_id, new_vertex_id, edge.end_id, edge.role)
        else:
            edges[key] = existing

    result = topology.with_changes(vertices=vertices, edges=edges, serial=serial,
                                   retired=topology.retired | {edge_id})
    return MutationResult(result, new_vertex_id)


@mutator()
def add_ridge_between_edges(topology: RoofTopology, eave1_id: str, eave2_id: str,
                            ridge_z: float) -> RoofTopology:
    """
    Add a ridge joining the midpoints of two eaves.

    Two interior vertices pinned at ridge_z are placed at the eave midpoints
    and connected with a ridge edge.
    """
    first = _require_edge(topology, eave1_id)
    second = _require_edge(topology, eave2_id)
    if eave1_id == eave2_id:
        raise InvariantViolationError("ridge needs two different eaves")
    if first.role != EdgeRole.EAVE or second.role != EdgeRole.EAVE:
        raise InvariantViolationError("ridge endpoints must sit on eave edges")

    points = []
    for edge in (first, second):
        points.append(midpoint(topology.vertices[edge.start_id].position,
                               topology.vertices[edge.end_id].position))
    if distance(points[0], points[1]) < EPSILON:
        raise InvalidGeometryError("eave midpoints coincide")

    result, start_id = add_interior_vertex(topology, points[0], ridge_z)
    result, end_id = add_interior_vertex(result, points[1], ridge_z)
    result, ridge_id = add_edge(result, start_id, end_id, EdgeRole.RIDGE)
    if ridge_id is None:
        raise InvariantViolationError("ridge edge could not be created")
    return result


@mutator()
def add_hip_edge(topology: RoofTopology, boundary_vertex_id: str,
                 interior_vertex_id: str) -> RoofTopology:
    """Hip from a boundary vertex to another vertex."""
    if _require_vertex(topology, boundary_vertex_id).is_interior:
        raise InvariantViolationError(f"hip must start on a boundary vertex, got {boundary_vertex_id}")
    _require_vertex(topology, interior_vertex_id)
    result, new_id = add_edge(topology, boundary_vertex_id, interior_vertex_id, EdgeRole.HIP)
    if new_id is None:
        raise InvariantViolationError("hip edge could not be created")
    return result


@mutator()
def add_valley_edge(topology: RoofTopology, v1_id: str, v2_id: str) -> RoofTopology:
    result, new_id = add_edge(topology, v1_id, v2_id, EdgeRole.VALLEY)
    if new_id is None:
        raise InvariantViolationError("valley edge could not be created")
    return result


@mutator()
def mark_gable(topology: RoofTopology, edge_id: str) -> RoofTopology:
    """Turn a boundary edge into a gable."""
    edge = _require_edge(topology, edge_id)
    if not edge.role.is_boundary:
        raise InvariantViolationError(f"only boundary edges can be gables, {edge_id} is {edge.role.value}")
    return set_edge_role(topology, edge_id, EdgeRole.GABLE)


@mutator()
def move_vertex(topology: RoofTopology, vertex_id: str,
                new_position: Sequence[float]) -> RoofTopology:
    vertex = _require_vertex(topology, vertex_id)
    position: Vec2 = as_vec2(new_position)
    if position == vertex.position:
        return topology
    vertices = dict(topology.vertices)
    vertices[vertex_id] = Vertex(vertex.id, position, vertex.pinned_z, vertex.is_interior)
    return topology.with_changes(vertices=vertices)
