"""
Roof builder module for roofkit.
Contains different roof type builders.
"""

from .common import (
    AABB,
    EdgeOverhangs,
    RoofBuildParams,
    RoofBuildResult,
    RoofSide,
    RoofType,
    build_plane,
    compute_aabb
)
from .gable import GableRoofBuilder, build_gable_roof, build_from_topology
from .hip import HipRoofBuilder, build_hip_roof
from .shed import ShedRoofBuilder, build_shed_roof
from .flat import FlatRoofBuilder, build_flat_roof
from .gambrel import GambrelRoofBuilder, build_gambrel_roof
from .mansard import MansardRoofBuilder, build_mansard_roof

__all__ = [
    'AABB',
    'EdgeOverhangs',
    'RoofBuildParams',
    'RoofBuildResult',
    'RoofSide',
    'RoofType',
    'build_plane',
    'compute_aabb',
    'GableRoofBuilder',
    'build_gable_roof',
    'build_from_topology',
    'HipRoofBuilder',
    'build_hip_roof',
    'ShedRoofBuilder',
    'build_shed_roof',
    'FlatRoofBuilder',
    'build_flat_roof',
    'GambrelRoofBuilder',
    'build_gambrel_roof',
    'MansardRoofBuilder',
    'build_mansard_roof'
]
