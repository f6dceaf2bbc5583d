"""
===============================================================================
ROTMATH - Numerical Constants
===============================================================================
Central place for the angle conversions, physical constants and numerical
tolerances shared by the vector and quaternion types. SI units throughout
(meters, seconds, radians).
===============================================================================
"""

import numpy as np


# =============================================================================
# MATHEMATICAL CONSTANTS
# =============================================================================
PI = np.pi
TWO_PI = 2.0 * np.pi
HALF_PI = 0.5 * np.pi
DEG2RAD = PI / 180.0
RAD2DEG = 180.0 / PI

# =============================================================================
# PHYSICAL CONSTANTS
# =============================================================================
STANDARD_GRAVITY = 9.81                # m/s^2, magnitude of GRAVITY_VECTOR

# =============================================================================
# NUMERICAL TOLERANCES
# =============================================================================
# Used only by the tolerant comparisons (is_close, is_unit, same_rotation).
# Exact equality (==) never consults these.
UNIT_TOLERANCE = 1e-8
COMPARISON_TOLERANCE = 1e-9

# Above this 4D dot product SLERP falls back to normalized linear interpolation
SLERP_LINEAR_THRESHOLD = 0.9995

# =============================================================================
# TEXT RENDERING
# =============================================================================
DEFAULT_DIGITS = 2


def to_radians(angle: float, units: str = 'rad') -> float:
    """
    Convert an angle given in *units* to radians.

    Args:
        angle: Angle value.
        units: Either 'rad' or 'deg'.

    Returns:
        Angle in radians.

    Raises:
        ValueError: If units is not recognized.
    """
    lookup = {
        'rad': 1.0,
        'deg': DEG2RAD,
    }
    if units.lower() not in lookup:
        raise ValueError(f"Unknown angle units: {units}. Valid: {list(lookup.keys())}")
    return angle * lookup[units.lower()]


def from_radians(angle: float, units: str = 'rad') -> float:
    """
    Convert an angle in radians to *units*.

    Args:
        angle: Angle in radians.
        units: Either 'rad' or 'deg'.

    Returns:
        Angle expressed in the requested units.
    """
    lookup = {
        'rad': 1.0,
        'deg': RAD2DEG,
    }
    if units.lower() not in lookup:
        raise ValueError(f"Unknown angle units: {units}. Valid: {list(lookup.keys())}")
    return angle * lookup[units.lower()]
