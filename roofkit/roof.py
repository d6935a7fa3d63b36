"""
Roof records and their topology lifecycle.
A roof keeps its preset topology in sync with the footprint until the user
edits it; from then on the custom topology is preserved.
"""

import logging
from dataclasses import dataclass, field, replace
from typing import Any, Callable, Optional, Sequence, Tuple

from .config import DEFAULT_CONFIG, RoofSystemConfig
from .topology.initialize import initialize_from_polygon
from .topology.types import EdgeOverhangs, MutationResult, RoofTopology, RoofType

logger = logging.getLogger(__name__)

UPDATABLE_FIELDS = frozenset({
    'roof_type', 'pitch_deg', 'lower_pitch_deg', 'edge_overhangs',
    'overhang', 'ridge_offset', 'base_z',
})


@dataclass(frozen=True)
class Roof:
    """Roof parameters for one footprint face."""
    id: str
    face_id: str
    roof_type: RoofType = RoofType.GABLE
    pitch_deg: float = 30.0
    lower_pitch_deg: float = 60.0
    edge_overhangs: EdgeOverhangs = field(default_factory=EdgeOverhangs)
    ridge_offset: float = 0.0
    base_z: float = 0.0
    use_custom_topology: bool = False
    topology: RoofTopology = field(default_factory=RoofTopology)

    __hash__ = None


def _preset(roof: Roof, polygon: Sequence[Sequence[float]]) -> RoofTopology:
    return initialize_from_polygon(polygon, roof.base_z, roof.roof_type, roof.ridge_offset)


def create_roof(roof_id: str, face_id: str, polygon: Sequence[Sequence[float]], base_z: float,
                config: Optional[RoofSystemConfig] = None, **overrides) -> Roof:
    """
    Create a roof record when a footprint face is first synced.

    Args:
        roof_id: New roof id
        face_id: Footprint face id
        polygon: Footprint polygon
        base_z: Wall top height
        config: Source of the default parameters
        **overrides: Any of roof_type, pitch_deg, lower_pitch_deg,
            edge_overhangs, overhang, ridge_offset

    Returns:
        Roof with its preset topology
    """
    config = config or DEFAULT_CONFIG
    unknown = set(overrides) - UPDATABLE_FIELDS
    if unknown:
        raise ValueError(f"Unknown roof parameters: {sorted(unknown)}")

    overhang = overrides.pop('overhang', config.default_overhang)
    roof = Roof(
        id=roof_id,
        face_id=face_id,
        roof_type=RoofType(overrides.get('roof_type', config.default_roof_type)),
        pitch_deg=float(overrides.get('pitch_deg', config.default_pitch_deg)),
        lower_pitch_deg=float(overrides.get('lower_pitch_deg', config.default_lower_pitch_deg)),
        edge_overhangs=overrides.get('edge_overhangs', EdgeOverhangs.uniform(float(overhang))),
        ridge_offset=float(overrides.get('ridge_offset', 0.0)),
        base_z=float(base_z),
    )
    return replace(roof, topology=_preset(roof, polygon))


def sync_topology(roof: Roof, polygon: Sequence[Sequence[float]]) -> Roof:
    """Regenerate the preset topology after a footprint change, unless it is custom."""
    if roof.use_custom_topology:
        return roof
    topology = _preset(roof, polygon)
    if topology == roof.topology:
        return roof
    return replace(roof, topology=topology)


def update_roof(roof: Roof, polygon: Sequence[Sequence[float]], **changes) -> Roof:
    """
    Apply parameter changes to a roof.

    A roof type change replaces the topology with the new preset and drops
    any custom edits. Other changes regenerate the preset only when the
    topology is not custom.

    Raises:
        ValueError: For unknown parameter names
    """
    unknown = set(changes) - UPDATABLE_FIELDS
    if unknown:
        raise ValueError(f"Unknown roof parameters: {sorted(unknown)}")

    if 'overhang' in changes:
        changes['edge_overhangs'] = EdgeOverhangs.uniform(float(changes.pop('overhang')))
    if 'roof_type' in changes:
        changes['roof_type'] = RoofType(changes['roof_type'])

    updated = replace(roof, **changes)
    if updated.roof_type != roof.roof_type:
        logger.info(f"Roof {roof.id}: type changed to {updated.roof_type.value}, topology reset")
        return replace(updated, topology=_preset(updated, polygon), use_custom_topology=False)
    return sync_topology(updated, polygon)


def apply_mutation(roof: Roof, mutator: Callable, *args: Any,
                   **kwargs: Any) -> Tuple[Roof, Optional[str]]:
    """
    Run a topology mutator on a roof.

    Args:
        roof: Roof to edit
        mutator: One of the roofkit.topology mutators
        *args: Mutator arguments after the topology
        **kwargs: Mutator keyword arguments

    Returns:
        Tuple of (roof, new id); the roof is marked custom when the topology
        changed, and the id is None for non-creating or rejected edits
    """
    result = mutator(roof.topology, *args, **kwargs)
    new_id = None
    if isinstance(result, MutationResult):
        result, new_id = result
    if result is roof.topology:
        return roof, new_id
    return replace(roof, topology=result, use_custom_topology=True), new_id


def reset_topology(roof: Roof, polygon: Sequence[Sequence[float]]) -> Roof:
    """Discard custom edits and return to the preset topology."""
    return replace(roof, topology=_preset(roof, polygon), use_custom_topology=False)
