"""
Gable roof builder.
Places a ridge along the footprint's principal axis through the topology
preset and assembles the planes from it.
"""

import logging
from dataclasses import replace
from typing import Optional

from ..config import DEFAULT_CONFIG, RoofSystemConfig
from ..geometry.polygon import is_degenerate_polygon
from ..topology.initialize import initialize_from_polygon
from ..topology.meshgen import MeshParams, planes_from_topology
from ..topology.types import RoofTopology
from .common import (
    RoofBuildParams,
    RoofBuildResult,
    RoofType,
    build_metadata,
    create_empty_result,
)

logger = logging.getLogger(__name__)


def build_from_topology(topology: RoofTopology, params: RoofBuildParams, roof_type: RoofType,
                        config: RoofSystemConfig) -> RoofBuildResult:
    """
    Assemble planes for a topology and wrap them as a build result.

    Args:
        topology: Preset or custom topology
        params: Build parameters (pitch already clamped)
        roof_type: Roof type recorded in the metadata
        config: Source of the miter limit and height tolerance

    Returns:
        RoofBuildResult with the planes and gable fascias
    """
    mesh = planes_from_topology(topology, params.roof_id, MeshParams(
        base_z=params.base_z,
        pitch_deg=params.pitch_deg,
        overhangs=params.edge_overhangs,
        miter_limit=config.miter_limit,
        height_tolerance=config.height_tolerance,
    ))
    return RoofBuildResult(
        planes=mesh.planes,
        fascias=mesh.fascias,
        ridge_height=mesh.ridge_height,
        metadata=build_metadata(roof_type, params, mesh.planes, mesh.ridge_height),
    )


class GableRoofBuilder:
    """Builds gable roofs from the gable topology preset."""

    def __init__(self, config: RoofSystemConfig = DEFAULT_CONFIG):
        """
        Initialize the gable roof builder.

        Args:
            config: Parameter ranges used to clamp the build parameters
        """
        self.config = config

    def build_gable_roof(self, params: RoofBuildParams,
                         topology: Optional[RoofTopology] = None) -> RoofBuildResult:
        """
        Build gable roof from build parameters.

        Args:
            params: Roof build parameters
            topology: Pre-built preset topology; derived from the polygon when omitted

        Returns:
            RoofBuildResult with two slopes and the gable fascias
        """
        if is_degenerate_polygon(params.polygon):
            logger.warning("Invalid footprint polygon for roof building")
            return create_empty_result(RoofType.GABLE)

        clamped = replace(
            params,
            pitch_deg=self.config.clamp_pitch(params.pitch_deg),
            edge_overhangs=self.config.clamp_overhangs(params.edge_overhangs),
            ridge_offset=self.config.clamp_ridge_offset(params.ridge_offset),
        )
        if topology is None:
            topology = initialize_from_polygon(clamped.polygon, clamped.base_z,
                                               RoofType.GABLE, clamped.ridge_offset)
        return build_from_topology(topology, clamped, RoofType.GABLE, self.config)


def build_gable_roof(params: RoofBuildParams, **kwargs) -> RoofBuildResult:
    """
    Convenience function to build gable roof.

    Args:
        params: Roof build parameters
        **kwargs: Additional arguments for GableRoofBuilder

    Returns:
        Gable roof building results
    """
    builder = GableRoofBuilder(**kwargs)
    return builder.build_gable_roof(params)
