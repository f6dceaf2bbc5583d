"""
===============================================================================
ROTMATH - 3D Vector and Quaternion Math
===============================================================================
Value types for positions / directions (Vector) and orientations /
rotations (Quaternion), with numerically guarded normalization, axis-angle
conversion and rotation through the quaternion sandwich product.

Submodules:
    constants       -- Angle conversions, gravity, numerical tolerances
    vector          -- Vector, GRAVITY_VECTOR
    quaternion      -- Quaternion
    config          -- Command-line configuration (YAML)
    logging_config  -- Handler setup for the 'rotmath' logger
    main            -- Command-line front end
===============================================================================
"""

from rotmath.constants import DEG2RAD, PI, RAD2DEG, STANDARD_GRAVITY, TWO_PI
from rotmath.quaternion import Quaternion
from rotmath.vector import GRAVITY_VECTOR, Vector, gravity_vector

__version__ = '1.0.0'

__all__ = [
    'Vector',
    'Quaternion',
    'GRAVITY_VECTOR',
    'gravity_vector',
    'PI',
    'TWO_PI',
    'DEG2RAD',
    'RAD2DEG',
    'STANDARD_GRAVITY',
]
