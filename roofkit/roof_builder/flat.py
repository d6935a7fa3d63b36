"""
Flat roof builder.
One horizontal plane over the footprint, widened by the eave overhangs.
"""

import logging
from dataclasses import replace
from typing import Optional

from ..config import DEFAULT_CONFIG, RoofSystemConfig
from ..geometry.polygon import is_degenerate_polygon
from ..topology.initialize import initialize_from_polygon
from ..topology.types import RoofTopology
from .common import RoofBuildParams, RoofBuildResult, RoofType, create_empty_result
from .gable import build_from_topology

logger = logging.getLogger(__name__)


class FlatRoofBuilder:
    """Builds flat roofs from the flat topology preset."""

    def __init__(self, config: RoofSystemConfig = DEFAULT_CONFIG):
        self.config = config

    def build_flat_roof(self, params: RoofBuildParams,
                        topology: Optional[RoofTopology] = None) -> RoofBuildResult:
        """
        Build flat roof from build parameters.

        Args:
            params: Roof build parameters; pitch is ignored since every
                boundary vertex is pinned at base_z
            topology: Pre-built preset topology; derived from the polygon when omitted

        Returns:
            RoofBuildResult with a single plane
        """
        if is_degenerate_polygon(params.polygon):
            logger.warning("Invalid footprint polygon for roof building")
            return create_empty_result(RoofType.FLAT)

        clamped = replace(params,
                          pitch_deg=self.config.clamp_pitch(params.pitch_deg),
                          edge_overhangs=self.config.clamp_overhangs(params.edge_overhangs))
        if topology is None:
            topology = initialize_from_polygon(clamped.polygon, clamped.base_z, RoofType.FLAT)
        return build_from_topology(topology, clamped, RoofType.FLAT, self.config)


def build_flat_roof(params: RoofBuildParams, **kwargs) -> RoofBuildResult:
    """
    Convenience function to build flat roof.

    Args:
        params: Roof build parameters
        **kwargs: Additional arguments for FlatRoofBuilder

    Returns:
        Flat roof building results
    """
    builder = FlatRoofBuilder(**kwargs)
    return builder.build_flat_roof(params)
