"""
===============================================================================
ROTMATH - COMMAND-LINE ENTRY POINT
===============================================================================
Build a rotation from an axis and an angle, optionally compose further
rotations onto it, and rotate a vector with it.

USAGE:
    rotmath --axis 0 0 1 --angle 90 --degrees --vector 1 0 0
    rotmath --axis 1 0 0 --angle 1.5708 --compose 0 0 1 1.5708
    rotmath --config config/rotmath.yaml --axis 0 1 0 --angle 45

OUTPUT:
    Quaternion: w: ..., x: ..., y: ..., z: ...
    Axis:       x: ..., y: ..., z: ...
    Angle:      ... rad|deg
    Unit:       True|False
    Rotated:    x: ..., y: ..., z: ...      (only with --vector)
===============================================================================
"""

import argparse
import dataclasses
import logging
from typing import List, Optional

from rotmath.config import load_config
from rotmath.constants import from_radians, to_radians
from rotmath.logging_config import setup_logging
from rotmath.quaternion import Quaternion
from rotmath.vector import Vector

logger = logging.getLogger(__name__)


def build_parser() -> argparse.ArgumentParser:
    """Argument parser for the rotmath front end."""
    parser = argparse.ArgumentParser(
        prog='rotmath',
        description='Compose axis-angle rotations and rotate vectors with quaternions',
        formatter_class=argparse.RawDescriptionHelpFormatter,
        epilog="""
Examples:
  rotmath --axis 0 0 1 --angle 90 --degrees --vector 1 0 0
  rotmath --axis 1 0 0 --angle 1.5708 --compose 0 0 1 1.5708 --vector 0 1 0
        """
    )

    parser.add_argument('--config', type=str, default=None,
                        help='Path to a YAML configuration file')
    parser.add_argument('--axis', type=float, nargs=3, default=[0.0, 0.0, 1.0],
                        metavar=('X', 'Y', 'Z'),
                        help='Rotation axis (default: 0 0 1)')
    parser.add_argument('--angle', type=float, default=0.0,
                        help='Rotation angle (default: 0)')
    parser.add_argument('--compose', type=float, nargs=4, action='append', default=[],
                        metavar=('X', 'Y', 'Z', 'ANGLE'),
                        help='Apply a further axis-angle rotation after the previous ones '
                             '(repeatable)')
    parser.add_argument('--vector', type=float, nargs=3, default=None,
                        metavar=('X', 'Y', 'Z'),
                        help='Vector to rotate')
    parser.add_argument('--degrees', action='store_true',
                        help='Interpret angles in degrees')
    parser.add_argument('--digits', type=int, default=None,
                        help='Decimals printed per component')
    parser.add_argument('--canonical', action='store_true',
                        help='Normalize to the w >= 0 representative')
    parser.add_argument('--verbose', action='store_true',
                        help='Enable debug logging')
    return parser


def compose_rotation(axis: List[float], angle: float, extra: List[List[float]],
                     units: str = 'rad', canonical: bool = False) -> Quaternion:
    """
    Build the rotation ``q_n * ... * q_1 * q_0``.

    q_0 comes from (axis, angle); each entry of *extra* is [x, y, z, angle]
    and is applied after the rotations before it.

    Args:
        axis: Rotation axis of the first rotation.
        angle: Angle of the first rotation, in *units*.
        extra: Further rotations, in application order.
        units: 'rad' or 'deg'.
        canonical: Normalize with sign=True.

    Returns:
        Normalized composite rotation.
    """
    q = Quaternion.from_axis_angle(Vector(*axis), to_radians(angle, units))

    for x, y, z, a in extra:
        step = Quaternion.from_axis_angle(Vector(x, y, z), to_radians(a, units))
        q = step * q
        logger.debug(f"Composed rotation: {q!r}")

    return q.normalize(sign=canonical)


def main(argv: Optional[List[str]] = None) -> int:
    """
    Main entry point. Parses command line arguments, prints the rotation
    and, if requested, the rotated vector.
    """
    parser = build_parser()
    args = parser.parse_args(argv)

    config = load_config(args.config)
    overrides = {}
    if args.degrees:
        overrides['angle_units'] = 'deg'
    if args.digits is not None:
        overrides['display_digits'] = args.digits
    if args.canonical:
        overrides['canonical_sign'] = True
    if args.verbose:
        overrides['log_level'] = 'DEBUG'

    # replace() re-runs RotmathConfig validation on the overridden values
    try:
        config = dataclasses.replace(config, **overrides)
    except ValueError as exc:
        parser.error(str(exc))

    setup_logging(config.level, config.log_file)
    logger.debug(f"Configuration: {config}")

    digits = config.display_digits
    units = config.angle_units

    q = compose_rotation(args.axis, args.angle, args.compose,
                         units=units, canonical=config.canonical_sign)
    axis, angle = q.to_axis_angle()

    print(f"Quaternion: {q.to_string(digits)}")
    print(f"Axis:       {axis.to_string(digits)}")
    print(f"Angle:      {from_radians(angle, units):.{digits}f} {units}")
    print(f"Unit:       {q.is_unit(config.unit_tolerance)}")

    if not q.valid:
        logger.warning("Rotation quaternion is not valid (NaN encountered)")

    if args.vector is not None:
        rotated = q.rotate_vector(Vector(*args.vector))
        print(f"Rotated:    {rotated.to_string(digits)}")

    return 0
