"""
roofkit: parametric roof geometry for building footprints.
"""

from .config import RoofSystemConfig, DEFAULT_CONFIG, load_config
from .topology import (
    EdgeRole,
    RoofType,
    RoofSide,
    EdgeOverhangs,
    RoofTopology,
    initialize_from_polygon,
    validate_topology
)
from .geometry.plane import RoofPlaneGeometry, planes_for_roof
from .solid import RoofSolid, generate_roof_solid, generate_solid_for_roof
from .roof import (
    Roof,
    create_roof,
    sync_topology,
    update_roof,
    apply_mutation,
    reset_topology
)

__version__ = "0.1.0"

__all__ = [
    'RoofSystemConfig',
    'DEFAULT_CONFIG',
    'load_config',
    'EdgeRole',
    'RoofType',
    'RoofSide',
    'EdgeOverhangs',
    'RoofTopology',
    'initialize_from_polygon',
    'validate_topology',
    'RoofPlaneGeometry',
    'planes_for_roof',
    'RoofSolid',
    'generate_roof_solid',
    'generate_solid_for_roof',
    'Roof',
    'create_roof',
    'sync_topology',
    'update_roof',
    'apply_mutation',
    'reset_topology'
]
