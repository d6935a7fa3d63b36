"""
Gambrel roof builder.
Two-slope gable: a steep lower course over half of each half span and a
shallow upper course up to the ridge.
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

# Share of the half span covered by the lower course
LOWER_RUN_RATIO = 0.5


class GambrelRoofBuilder:
    """Builds gambrel roofs with pentagonal gable fascias."""

    def __init__(self, config: RoofSystemConfig = DEFAULT_CONFIG):
        self.config = config

    def build_gambrel_roof(self, params: RoofBuildParams) -> RoofBuildResult:
        """
        Build a gambrel roof.

        Args:
            params: Roof build parameters; lower_pitch_deg sets the lower course

        Returns:
            RoofBuildResult with four sloped planes and two gable fascias
        """
        footprint = compute_aabb(params.polygon)
        if footprint is None:
            logger.warning("Invalid footprint polygon for roof building")
            return create_empty_result(RoofType.GAMBREL)

        pitch_deg = self.config.clamp_pitch(params.pitch_deg)
        lower_pitch_deg = self.config.clamp_lower_pitch(params.lower_pitch_deg)
        frame = RoofFrame.for_footprint(footprint, self.config.clamp_overhangs(params.edge_overhangs))

        half = frame.half_span
        lower_run = half * LOWER_RUN_RATIO
        lower_rise = rise_for(lower_run, lower_pitch_deg)
        upper_rise = rise_for(half - lower_run, pitch_deg)
        total_rise = lower_rise + upper_rise

        bz = params.base_z
        kz = bz + lower_rise
        rz = bz + total_rise
        mv = frame.clamp_v(frame.v_mid + self.config.clamp_ridge_offset(params.ridge_offset))
        u0, u1, v0, v1 = frame.u_min, frame.u_max, frame.v_min, frame.v_max
        kv0 = v0 + lower_run
        kv1 = v1 - lower_run

        low_side, high_side = frame.v_low_side, frame.v_high_side
        rid = params.roof_id
        planes = [
            frame_plane(frame, rid, f"{low_side.value}_lower", side_label(low_side, "Lower"),
                        [(u0, v0, bz), (u1, v0, bz), (u1, kv0, kz), (u0, kv0, kz)], [low_side]),
            frame_plane(frame, rid, f"{low_side.value}_upper", side_label(low_side, "Upper"),
                        [(u0, kv0, kz), (u1, kv0, kz), (u1, mv, rz), (u0, mv, rz)]),
            frame_plane(frame, rid, f"{high_side.value}_lower", side_label(high_side, "Lower"),
                        [(u1, v1, bz), (u0, v1, bz), (u0, kv1, kz), (u1, kv1, kz)], [high_side]),
            frame_plane(frame, rid, f"{high_side.value}_upper", side_label(high_side, "Upper"),
                        [(u1, kv1, kz), (u0, kv1, kz), (u0, mv, rz), (u1, mv, rz)]),
        ]
        fascias = [
            frame_plane(frame, rid, f"gable_{frame.u_low_side.value}", "Gable Wall",
                        [(u0, v1, bz), (u0, v0, bz), (u0, kv0, kz), (u0, mv, rz), (u0, kv1, kz)],
                        [frame.u_low_side], vertical=True),
            frame_plane(frame, rid, f"gable_{frame.u_high_side.value}", "Gable Wall",
                        [(u1, v0, bz), (u1, v1, bz), (u1, kv1, kz), (u1, mv, rz), (u1, kv0, kz)],
                        [frame.u_high_side], vertical=True),
        ]

        used = replace(params, pitch_deg=pitch_deg, lower_pitch_deg=lower_pitch_deg)
        metadata = build_metadata(RoofType.GAMBREL, used, planes, total_rise)
        metadata['lower_pitch_deg'] = lower_pitch_deg
        return RoofBuildResult(planes=tuple(planes), fascias=tuple(fascias),
                               ridge_height=total_rise, metadata=metadata)


def build_gambrel_roof(params: RoofBuildParams, **kwargs) -> RoofBuildResult:
    """
    Convenience function to build gambrel roof.

    Args:
        params: Roof build parameters
        **kwargs: Additional arguments for GambrelRoofBuilder

    Returns:
        Gambrel roof building results
    """
    builder = GambrelRoofBuilder(**kwargs)
    return builder.build_gambrel_roof(params)
