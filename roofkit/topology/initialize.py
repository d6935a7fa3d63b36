"""
Topology initializer.
Builds the preset roof topology for a footprint polygon.
"""

import logging
from typing import List, Optional, Sequence, Tuple

from ..geometry.polygon import dedupe_polygon, is_degenerate_polygon
from ..geometry.vec2 import Vec2, distance, dot, lerp, normalize, perp_ccw, sub
from .types import Edge, EdgeRole, RoofTopology, RoofType, Vertex, empty_topology

logger = logging.getLogger(__name__)

# Relative tolerance used to decide whether the ridge midline hits a polygon vertex
MIDLINE_TOLERANCE = 1e-9


def initialize_from_polygon(polygon: Sequence,
                            base_z: float,
                            roof_type: RoofType = RoofType.FLAT,
                            ridge_offset: float = 0.0) -> RoofTopology:
    """
    Build the preset topology for a footprint.

    Args:
        polygon: Footprint vertices in plan, in either winding; repeated
            points and a closing copy of the first point are dropped
        base_z: Height the boundary vertices are pinned at
        roof_type: Preset to apply; types without a preset get the flat one
        ridge_offset: Perpendicular shift of the gable ridge from the centre

    Returns:
        New topology; empty for a degenerate polygon
    """
    points = dedupe_polygon(polygon)
    if is_degenerate_polygon(points):
        logger.warning("Degenerate footprint polygon, returning empty topology")
        return empty_topology()

    topology = _boundary_topology(points, base_z)

    if RoofType(roof_type) == RoofType.GABLE:
        gabled = _apply_gable_preset(topology, points, ridge_offset)
        if gabled is None:
            logger.warning("Could not place a gable ridge on the footprint, using the flat preset")
            return topology
        return gabled
    return topology


def _boundary_topology(points: List[Vec2], base_z: float) -> RoofTopology:
    """Boundary vertices v0..vn-1 pinned at base_z, eave edges e0..en-1."""
    n = len(points)
    vertices = {}
    for i, point in enumerate(points):
        vertex_id = f"v{i}"
        vertices[vertex_id] = Vertex(id=vertex_id, position=point,
                                     pinned_z=float(base_z), is_interior=False)
    edges = {}
    for i in range(n):
        edge_id = f"e{i}"
        edges[edge_id] = Edge(id=edge_id, start_id=f"v{i}", end_id=f"v{(i + 1) % n}",
                              role=EdgeRole.EAVE)
    return RoofTopology(vertices=vertices, edges=edges, serial=n)


def _principal_axis(points: List[Vec2]) -> Vec2:
    """Direction of the longest footprint edge."""
    n = len(points)
    longest = max(range(n), key=lambda i: distance(points[i], points[(i + 1) % n]))
    return normalize(sub(points[(longest + 1) % n], points[longest]))


def _midline_crossings(points: List[Vec2], axis: Vec2,
                       ridge_offset: float) -> Optional[List[Tuple[int, Vec2]]]:
    """
    Boundary edges crossed by the ridge midline.

    Returns:
        (edge index, crossing point) pairs, or None when the midline passes
        through a polygon vertex
    """
    across = perp_ccw(axis)
    offsets = [dot(p, across) for p in points]
    low, high = min(offsets), max(offsets)
    level = (low + high) / 2.0 + ridge_offset
    tolerance = MIDLINE_TOLERANCE * max(1.0, high - low)

    if any(abs(o - level) <= tolerance for o in offsets):
        return None

    crossings = []
    n = len(points)
    for i in range(n):
        da = offsets[i] - level
        db = offsets[(i + 1) % n] - level
        if (da < 0) != (db < 0):
            t = da / (da - db)
            crossings.append((i, lerp(points[i], points[(i + 1) % n], t)))
    return crossings


def _apply_gable_preset(topology: RoofTopology, points: List[Vec2],
                        ridge_offset: float) -> Optional[RoofTopology]:
    axis = _principal_axis(points)
    crossings = _midline_crossings(points, axis, ridge_offset)
    # A midline crossing more than two edges would leave the footprint between crossings
    if crossings is None or len(crossings) != 2:
        return None

    crossings.sort(key=lambda item: dot(item[1], axis))
    edges = dict(topology.edges)
    vertices = dict(topology.vertices)
    for index, _ in crossings:
        edge_id = f"e{index}"
        edges[edge_id] = Edge(id=edge_id, start_id=edges[edge_id].start_id,
                              end_id=edges[edge_id].end_id, role=EdgeRole.GABLE)

    serial = topology.serial
    ridge_ids = []
    for _, point in crossings:
        vertex_id = f"v{serial}"
        serial += 1
        vertices[vertex_id] = Vertex(id=vertex_id, position=point, pinned_z=None, is_interior=True)
        ridge_ids.append(vertex_id)

    ridge_id = f"e{serial}"
    serial += 1
    edges[ridge_id] = Edge(id=ridge_id, start_id=ridge_ids[0], end_id=ridge_ids[1], role=EdgeRole.RIDGE)
    return RoofTopology(vertices=vertices, edges=edges, serial=serial)
