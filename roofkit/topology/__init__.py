"""
Roof topology module for roofkit.
Contains the topology graph, preset initializer, mutators, face tracing,
height solver and plane assembly.
"""

from .types import (
    EdgeRole,
    RoofType,
    RoofSide,
    EdgeOverhangs,
    Vertex,
    Edge,
    RoofTopology,
    MutationResult,
    empty_topology,
    validate_topology,
    side_for_normal
)
from .initialize import initialize_from_polygon
from .mutations import (
    set_edge_role,
    pin_vertex,
    unpin_vertex,
    add_interior_vertex,
    add_edge,
    remove_edge,
    split_edge,
    add_ridge_between_edges,
    add_hip_edge,
    add_valley_edge,
    mark_gable,
    move_vertex
)
from .faces import Segment, Face, planarize, trace_faces
from .solver import SolverParams, resolve_heights
from .meshgen import MeshParams, TopologyMeshResult, planes_from_topology

__all__ = [
    'EdgeRole',
    'RoofType',
    'RoofSide',
    'EdgeOverhangs',
    'Vertex',
    'Edge',
    'RoofTopology',
    'MutationResult',
    'empty_topology',
    'validate_topology',
    'side_for_normal',
    'initialize_from_polygon',
    'set_edge_role',
    'pin_vertex',
    'unpin_vertex',
    'add_interior_vertex',
    'add_edge',
    'remove_edge',
    'split_edge',
    'add_ridge_between_edges',
    'add_hip_edge',
    'add_valley_edge',
    'mark_gable',
    'move_vertex',
    'Segment',
    'Face',
    'planarize',
    'trace_faces',
    'SolverParams',
    'resolve_heights',
    'MeshParams',
    'TopologyMeshResult',
    'planes_from_topology'
]
