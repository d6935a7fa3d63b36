"""
Hip roof builder.
Four slopes meeting at a ridge shortened by 45-degree hips.
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
    side_label,
)

logger = logging.getLogger(__name__)


class HipRoofBuilder:
    """Builds hip roofs over the footprint bounding box."""

    def __init__(self, config: RoofSystemConfig = DEFAULT_CONFIG):
        """
        Initialize the hip roof builder.

        Args:
            config: Parameter ranges used to clamp the build parameters
        """
        self.config = config

    def build_hip_roof(self, params: RoofBuildParams) -> RoofBuildResult:
        """
        Build a hip roof.

        Args:
            params: Roof build parameters

        Returns:
            RoofBuildResult with four sloped planes
        """
        footprint = compute_aabb(params.polygon)
        if footprint is None:
            logger.warning("Invalid footprint polygon for roof building")
            return create_empty_result(RoofType.HIP)

        pitch_deg = self.config.clamp_pitch(params.pitch_deg)
        frame = RoofFrame.for_footprint(footprint, self.config.clamp_overhangs(params.edge_overhangs))

        half = frame.half_span
        rise = rise_for(half, pitch_deg)
        bz = params.base_z
        top = bz + rise

        # Hip inset of half the span gives 45-degree hips in plan
        rv = frame.clamp_v(frame.v_mid + self.config.clamp_ridge_offset(params.ridge_offset))
        ru0 = min(frame.u_min + half, frame.u_mid)
        ru1 = max(frame.u_max - half, frame.u_mid)
        u0, u1, v0, v1 = frame.u_min, frame.u_max, frame.v_min, frame.v_max

        planes = [
            frame_plane(frame, params.roof_id, frame.v_low_side.value,
                        side_label(frame.v_low_side, "Slope"),
                        [(u0, v0, bz), (u1, v0, bz), (ru1, rv, top), (ru0, rv, top)],
                        [frame.v_low_side]),
            frame_plane(frame, params.roof_id, frame.v_high_side.value,
                        side_label(frame.v_high_side, "Slope"),
                        [(u1, v1, bz), (u0, v1, bz), (ru0, rv, top), (ru1, rv, top)],
                        [frame.v_high_side]),
            frame_plane(frame, params.roof_id, frame.u_low_side.value,
                        side_label(frame.u_low_side, "Hip"),
                        [(u0, v1, bz), (u0, v0, bz), (ru0, rv, top)],
                        [frame.u_low_side]),
            frame_plane(frame, params.roof_id, frame.u_high_side.value,
                        side_label(frame.u_high_side, "Hip"),
                        [(u1, v0, bz), (u1, v1, bz), (ru1, rv, top)],
                        [frame.u_high_side]),
        ]

        used_params = replace(params, pitch_deg=pitch_deg)
        return RoofBuildResult(
            planes=tuple(planes),
            ridge_height=rise,
            metadata=build_metadata(RoofType.HIP, used_params, planes, rise),
        )


def build_hip_roof(params: RoofBuildParams, **kwargs) -> RoofBuildResult:
    """
    Convenience function to build hip roof.

    Args:
        params: Roof build parameters
        **kwargs: Additional arguments for HipRoofBuilder

    Returns:
        Hip roof building results
    """
    builder = HipRoofBuilder(**kwargs)
    return builder.build_hip_roof(params)
