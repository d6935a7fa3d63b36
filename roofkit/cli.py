"""
Command line entry point: footprint file in, roof summary out.
"""

import argparse
import json
import logging
import sys
from pathlib import Path
from typing import List, Optional

import yaml

from .config import load_config
from .export import export_roof, solid_to_dict
from .geometry.polygon import dedupe_polygon
from .solid import generate_roof_solid
from .topology.types import RoofType
from .utils.logger import log_config, setup_logger

logger = logging.getLogger(__name__)


def read_footprint(path: str) -> List[List[float]]:
    """
    Read a footprint polygon from JSON or YAML.

    Accepts {"polygon": [[x, y], ...]} or a bare list of points. A closed
    ring (last point repeating the first) is opened and repeated points
    are dropped.

    Raises:
        OSError: When the file cannot be read
        ValueError: When the content is not a polygon
    """
    with open(path, 'r') as f:
        text = f.read()
    if Path(path).suffix.lower() in ('.yaml', '.yml'):
        data = yaml.safe_load(text)
    else:
        data = json.loads(text)
    if isinstance(data, dict):
        data = data.get('polygon')
    if not isinstance(data, list):
        raise ValueError("footprint must be a list of [x, y] points")
    return [[p.x, p.y] for p in dedupe_polygon(data)]


def build_parser() -> argparse.ArgumentParser:
    parser = argparse.ArgumentParser(description='Generate roof planes for a building footprint')
    parser.add_argument('--footprint', required=True, help='JSON or YAML footprint file')
    parser.add_argument('--roof-type', default=None, choices=[t.value for t in RoofType],
                        help='Roof type (defaults to the configured type)')
    parser.add_argument('--pitch', type=float, default=None, help='Roof pitch in degrees')
    parser.add_argument('--lower-pitch', type=float, default=None,
                        help='Lower pitch for gambrel and mansard roofs')
    parser.add_argument('--overhang', type=float, default=None, help='Uniform eave overhang')
    parser.add_argument('--ridge-offset', type=float, default=0.0, help='Ridge shift from centre')
    parser.add_argument('--base-z', type=float, default=0.0, help='Wall top height')
    parser.add_argument('--roof-id', default='roof', help='Roof id used for plane ids')
    parser.add_argument('--config', default=None, help='YAML config path')
    parser.add_argument('--export', default=None, help='Mesh output path (.glb, .obj, .stl, .ply)')
    parser.add_argument('--log-level', default='WARNING', help='Logging level')
    return parser


def main(argv: Optional[List[str]] = None) -> int:
    args = build_parser().parse_args(argv)
    cli_logger = setup_logger('roofkit', level=args.log_level)

    config = load_config(args.config)
    log_config(config, cli_logger)

    try:
        polygon = read_footprint(args.footprint)
    except (OSError, ValueError, TypeError, IndexError, yaml.YAMLError) as e:
        logger.error(f"Could not read footprint {args.footprint}: {e}")
        return 1

    solid = generate_roof_solid(
        roof_id=args.roof_id,
        face_id=Path(args.footprint).stem,
        polygon=polygon,
        roof_type=args.roof_type or config.default_roof_type,
        base_z=args.base_z,
        pitch_deg=config.default_pitch_deg if args.pitch is None else args.pitch,
        overhang=config.default_overhang if args.overhang is None else args.overhang,
        lower_pitch_deg=args.lower_pitch,
        ridge_offset=args.ridge_offset,
        config=config,
    )

    summary = solid_to_dict(solid)
    if args.export:
        summary['export'] = export_roof(solid, args.export)
    print(json.dumps(summary, indent=2))
    return 0


if __name__ == "__main__":
    sys.exit(main())
