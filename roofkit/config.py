"""
Roof system configuration.
Defaults and valid parameter ranges, loadable from YAML.
"""

import logging
from pathlib import Path
from typing import Optional, Union

import yaml
from pydantic import BaseModel, ConfigDict, Field, model_validator

from .topology.types import EdgeOverhangs, RoofType

logger = logging.getLogger(__name__)


class RoofSystemConfig(BaseModel):
    """Default roof parameters and the ranges user input is clamped to."""

    model_config = ConfigDict(frozen=True)

    default_roof_type: RoofType = Field(RoofType.GABLE, description="Roof type for new roofs")
    default_pitch_deg: float = Field(30.0, description="Pitch for new roofs (degrees)")
    default_lower_pitch_deg: float = Field(60.0, description="Lower pitch for gambrel and mansard roofs")
    default_overhang: float = Field(0.0, ge=0.0, description="Eave overhang for new roofs")

    min_pitch_deg: float = Field(0.0, ge=0.0, lt=90.0)
    max_pitch_deg: float = Field(60.0, ge=0.0, lt=90.0)
    min_lower_pitch_deg: float = Field(30.0, ge=0.0, lt=90.0)
    max_lower_pitch_deg: float = Field(85.0, ge=0.0, lt=90.0)
    min_overhang: float = Field(0.0, ge=0.0)
    max_overhang: float = Field(2000.0, ge=0.0)
    max_ridge_offset: float = Field(3000.0, ge=0.0)

    height_tolerance: float = Field(1e-6, gt=0.0, description="Relative tolerance for height agreement")
    miter_limit: float = Field(4.0, gt=1.0, description="Corner displacement cap as a multiple of the overhang")

    @model_validator(mode='after')
    def _check_ranges(self):
        for low, high in (('min_pitch_deg', 'max_pitch_deg'),
                          ('min_lower_pitch_deg', 'max_lower_pitch_deg'),
                          ('min_overhang', 'max_overhang')):
            if getattr(self, low) > getattr(self, high):
                raise ValueError(f"{low} must not exceed {high}")
        return self

    def clamp_pitch(self, pitch_deg: float) -> float:
        return max(self.min_pitch_deg, min(float(pitch_deg), self.max_pitch_deg))

    def clamp_lower_pitch(self, pitch_deg: float) -> float:
        return max(self.min_lower_pitch_deg, min(float(pitch_deg), self.max_lower_pitch_deg))

    def clamp_overhang(self, overhang: float) -> float:
        return max(self.min_overhang, min(float(overhang), self.max_overhang))

    def clamp_overhangs(self, overhangs: EdgeOverhangs) -> EdgeOverhangs:
        return overhangs.clamped(self.min_overhang, self.max_overhang)

    def clamp_ridge_offset(self, offset: float) -> float:
        return max(-self.max_ridge_offset, min(float(offset), self.max_ridge_offset))


DEFAULT_CONFIG = RoofSystemConfig()


def load_config(path: Optional[Union[str, Path]] = None) -> RoofSystemConfig:
    """
    Load configuration from a YAML file.

    Args:
        path: YAML file; a top-level "roof" section is used when present

    Returns:
        Parsed configuration, or the defaults when path is missing
    """
    if path is None:
        return DEFAULT_CONFIG
    config_path = Path(path)
    if not config_path.exists():
        logger.warning(f"Config file {config_path} not found, using defaults")
        return DEFAULT_CONFIG

    with open(config_path, 'r') as f:
        data = yaml.safe_load(f) or {}
    if isinstance(data, dict) and isinstance(data.get('roof'), dict):
        data = data['roof']
    return RoofSystemConfig(**data)
