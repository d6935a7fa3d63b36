"""
Mansard roof builder.
Steep lower course on all four sides with a hip-style shallow upper course.
"""

import logging
from dataclasses import replace

from ..config import DEFAULT_CONFIG, RoofSystemConfig
from .common import (
    AABB,
    RoofBuildParams,
    RoofBuildResult,
    RoofSide,
    RoofType,
    build_metadata,
    build_plane,
    compute_aabb,
    create_empty_result,
    rise_for,
)

logger = logging.getLogger(__name__)

# Share of the shorter half span covered by the lower course
LOWER_RUN_RATIO = 0.45


class MansardRoofBuilder:
    """Builds mansard roofs over the footprint bounding box."""

    def __init__(self, config: RoofSystemConfig = DEFAULT_CONFIG):
        self.config = config

    def build_mansard_roof(self, params: RoofBuildParams) -> RoofBuildResult:
        """
        Build a mansard roof.

        Args:
            params: Roof build parameters; lower_pitch_deg sets the lower course

        Returns:
            RoofBuildResult with four lower and four upper planes
        """
        footprint = compute_aabb(params.polygon)
        if footprint is None:
            logger.warning("Invalid footprint polygon for roof building")
            return create_empty_result(RoofType.MANSARD)

        pitch_deg = self.config.clamp_pitch(params.pitch_deg)
        lower_pitch_deg = self.config.clamp_lower_pitch(params.lower_pitch_deg)
        box: AABB = footprint.expanded(self.config.clamp_overhangs(params.edge_overhangs))

        half = min(box.span_x, box.span_y) / 2.0
        lower_run = half * LOWER_RUN_RATIO
        upper_run = half - lower_run
        lower_rise = rise_for(lower_run, lower_pitch_deg)
        total_rise = lower_rise + rise_for(upper_run, pitch_deg)

        bz = params.base_z
        kz = bz + lower_rise
        rz = bz + total_rise

        # Break line: the expanded box inset by the lower run
        k_min_x, k_max_x = box.min_x + lower_run, box.max_x - lower_run
        k_min_y, k_max_y = box.min_y + lower_run, box.max_y - lower_run

        inset = min(upper_run, min(k_max_x - k_min_x, k_max_y - k_min_y) / 2.0)
        offset = self.config.clamp_ridge_offset(params.ridge_offset)
        wide_x = (k_max_x - k_min_x) >= (k_max_y - k_min_y)
        if wide_x:
            mid = max(k_min_y, min((k_min_y + k_max_y) / 2.0 + offset, k_max_y))
            r_min_x, r_max_x = k_min_x + inset, k_max_x - inset
            r_min_y = r_max_y = mid
        else:
            mid = max(k_min_x, min((k_min_x + k_max_x) / 2.0 + offset, k_max_x))
            r_min_x = r_max_x = mid
            r_min_y, r_max_y = k_min_y + inset, k_max_y - inset

        x0, x1, y0, y1 = box.min_x, box.max_x, box.min_y, box.max_y
        rid = params.roof_id
        planes = [
            build_plane(f"{rid}_front_lower", rid, "Front Lower",
                        [(x0, y0, bz), (x1, y0, bz), (k_max_x, k_min_y, kz), (k_min_x, k_min_y, kz)],
                        [RoofSide.FRONT]),
            build_plane(f"{rid}_back_lower", rid, "Back Lower",
                        [(x1, y1, bz), (x0, y1, bz), (k_min_x, k_max_y, kz), (k_max_x, k_max_y, kz)],
                        [RoofSide.BACK]),
            build_plane(f"{rid}_left_lower", rid, "Left Lower",
                        [(x0, y1, bz), (x0, y0, bz), (k_min_x, k_min_y, kz), (k_min_x, k_max_y, kz)],
                        [RoofSide.LEFT]),
            build_plane(f"{rid}_right_lower", rid, "Right Lower",
                        [(x1, y0, bz), (x1, y1, bz), (k_max_x, k_max_y, kz), (k_max_x, k_min_y, kz)],
                        [RoofSide.RIGHT]),
            # Upper course; quads collapse to triangles at the hip ends
            build_plane(f"{rid}_front_upper", rid, "Front Upper",
                        [(k_min_x, k_min_y, kz), (k_max_x, k_min_y, kz), (r_max_x, r_min_y, rz), (r_min_x, r_min_y, rz)]),
            build_plane(f"{rid}_back_upper", rid, "Back Upper",
                        [(k_max_x, k_max_y, kz), (k_min_x, k_max_y, kz), (r_min_x, r_max_y, rz), (r_max_x, r_max_y, rz)]),
            build_plane(f"{rid}_left_upper", rid, "Left Upper",
                        [(k_min_x, k_max_y, kz), (k_min_x, k_min_y, kz), (r_min_x, r_min_y, rz), (r_min_x, r_max_y, rz)]),
            build_plane(f"{rid}_right_upper", rid, "Right Upper",
                        [(k_max_x, k_min_y, kz), (k_max_x, k_max_y, kz), (r_max_x, r_max_y, rz), (r_max_x, r_min_y, rz)]),
        ]

        used = replace(params, pitch_deg=pitch_deg, lower_pitch_deg=lower_pitch_deg)
        metadata = build_metadata(RoofType.MANSARD, used, planes, total_rise)
        metadata['lower_pitch_deg'] = lower_pitch_deg
        return RoofBuildResult(planes=tuple(planes), ridge_height=total_rise, metadata=metadata)


def build_mansard_roof(params: RoofBuildParams, **kwargs) -> RoofBuildResult:
    """
    Convenience function to build mansard roof.

    Args:
        params: Roof build parameters
        **kwargs: Additional arguments for MansardRoofBuilder

    Returns:
        Mansard roof building results
    """
    builder = MansardRoofBuilder(**kwargs)
    return builder.build_mansard_roof(params)
