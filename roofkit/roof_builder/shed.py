"""
Shed roof builder for mono-pitch roofs.
A single slope rises across the full span; the side walls are fascias.
"""

import logging
from dataclasses import replace

from ..config import DEFAULT_CONFIG, RoofSystemConfig
from .common import (
    RoofBuildParams,
    RoofBuildResult,
    RoofFrame,
    RoofType,
    build_metadata,
    compute_aabb,
    create_empty_result,
    frame_plane,
    rise_for,
)

logger = logging.getLogger(__name__)


class ShedRoofBuilder:
    """Builds shed roofs; the front (or left) side is the high edge."""

    def __init__(self, config: RoofSystemConfig = DEFAULT_CONFIG):
        self.config = config

    def build_shed_roof(self, params: RoofBuildParams) -> RoofBuildResult:
        """
        Build a shed roof.

        Args:
            params: Roof build parameters; ridge_offset has no effect

        Returns:
            RoofBuildResult with one slope and two side fascias
        """
        footprint = compute_aabb(params.polygon)
        if footprint is None:
            logger.warning("Invalid footprint polygon for roof building")
            return create_empty_result(RoofType.SHED)

        pitch_deg = self.config.clamp_pitch(params.pitch_deg)
        frame = RoofFrame.for_footprint(footprint, self.config.clamp_overhangs(params.edge_overhangs))

        # Rise over the full span, not the half span
        rise = rise_for(frame.v_max - frame.v_min, pitch_deg)
        low = params.base_z
        high = low + rise
        u0, u1, v0, v1 = frame.u_min, frame.u_max, frame.v_min, frame.v_max

        planes = [
            frame_plane(frame, params.roof_id, "slope", "Slope",
                        [(u0, v0, high), (u1, v0, high), (u1, v1, low), (u0, v1, low)],
                        [frame.v_low_side, frame.v_high_side]),
        ]

        fascias = []
        if rise > 0:
            fascias = [
                frame_plane(frame, params.roof_id, f"side_{frame.u_low_side.value}",
                            f"{frame.u_low_side.value.title()} Side",
                            [(u0, v1, low), (u0, v0, low), (u0, v0, high)],
                            [frame.u_low_side], vertical=True),
                frame_plane(frame, params.roof_id, f"side_{frame.u_high_side.value}",
                            f"{frame.u_high_side.value.title()} Side",
                            [(u1, v0, low), (u1, v1, low), (u1, v0, high)],
                            [frame.u_high_side], vertical=True),
            ]

        return RoofBuildResult(
            planes=tuple(planes),
            fascias=tuple(fascias),
            ridge_height=rise,
            metadata=build_metadata(RoofType.SHED, replace(params, pitch_deg=pitch_deg), planes, rise),
        )


def build_shed_roof(params: RoofBuildParams, **kwargs) -> RoofBuildResult:
    """
    Convenience function to build shed roof.

    Args:
        params: Roof build parameters
        **kwargs: Additional arguments for ShedRoofBuilder

    Returns:
        Shed roof building results
    """
    builder = ShedRoofBuilder(**kwargs)
    return builder.build_shed_roof(params)
