"""
===============================================================================
ROTMATH - Quaternion
===============================================================================

Quaternion type for 3D orientation representation, rotation composition and
rotation application. Quaternions avoid the gimbal lock singularity of Euler
angles and need only 4 parameters (vs 9 for a DCM), at the cost of a single
normalization constraint.

Convention
----------
Scalar-first:

    q = [w, x, y, z] = w + x*i + y*j + z*k

A unit quaternion rotates a vector v through the sandwich product

    v' = q * v * q_conjugate

where v is embedded as a pure quaternion (w = 0).

Caller obligations
------------------
Construction never normalizes. Operations that interpret the quaternion as a
rotation (``rotate_vector``, ``to_axis_angle``, ``slerp``, ``angle_to``)
are only meaningful on unit input; a non-unit quaternion produces a scaled
or distorted result, not an error. Call ``normalize()`` first when in doubt.

Validity flag and degenerate inputs
-----------------------------------
``valid`` has the same meaning as on Vector: cleared when a magnitude (or a
normalization result) comes out NaN, never consulted by the arithmetic.
Zero-length degeneracies are replaced with documented values:

    from_axis_angle(zero axis)      identity (1, 0, 0, 0)
    normalize() of (0, 0, 0, 0)     stays (0, 0, 0, 0)
    inverse() of (0, 0, 0, 0)       (0, 0, 0, 0)
    to_axis_angle(), zero xyz       zero axis, angle = 2*acos(w)
    slerp(), zero end point         (0, 0, 0, 0)

Double cover
------------
q and -q represent the same rotation. ``normalize(sign=True)`` picks the
representative with w >= 0. It is opt-in; the default keeps the sign.

References
----------
    [1] Markley & Crassidis, "Fundamentals of Spacecraft Attitude
        Determination and Control", Springer, 2014.
    [2] Kuipers, "Quaternions and Rotation Sequences", Princeton, 1999.
    [3] Shoemake, "Uniform Random Rotations", Graphics Gems III, 1992.

===============================================================================
"""

import logging
from typing import Optional, Tuple, Union

import numpy as np

from rotmath.constants import (
    COMPARISON_TOLERANCE,
    DEFAULT_DIGITS,
    SLERP_LINEAR_THRESHOLD,
    UNIT_TOLERANCE,
)
from rotmath.vector import SCALAR_TYPES, Vector

logger = logging.getLogger(__name__)


def _as_vector(v: Union[Vector, np.ndarray, Tuple[float, float, float]]) -> Vector:
    """Accept a Vector or any 3-element sequence; never returns the caller's instance."""
    if isinstance(v, Vector):
        return v.copy()
    return Vector.from_array(v)


class Quaternion:
    """
    Quaternion q = [w, x, y, z] with an advisory validity flag.

    A unit quaternion parameterizes a rotation by angle theta about unit
    axis n as:

        q = [cos(theta/2), sin(theta/2) * n_x, sin(theta/2) * n_y, sin(theta/2) * n_z]

    Attributes
    ----------
    w : float
        Scalar (real) part.
    x, y, z : float
        Vector (imaginary) part.
    valid : bool
        False once a magnitude or normalization produced NaN.

    Examples
    --------
    >>> q = Quaternion.from_axis_angle(Vector(0, 0, 1), np.pi / 2)
    >>> q.rotate_vector(Vector(1, 0, 0)).to_string()
    'x: 0.00, y: 1.00, z: 0.00'
    """

    def __init__(self, w: float = 0.0, x: float = 0.0, y: float = 0.0,
                 z: float = 0.0) -> None:
        """
        Direct component assignment. No normalization is performed.

        Parameters
        ----------
        w : float
            Scalar part (cos(theta/2) for a rotation by angle theta).
        x, y, z : float
            Vector part.
        """
        self._q = np.array([w, x, y, z], dtype=np.float64)
        self.valid = True

    # =========================================================================
    # COMPONENT ACCESS
    # =========================================================================

    @property
    def w(self) -> float:
        """Scalar (real) part of the quaternion."""
        return float(self._q[0])

    @w.setter
    def w(self, value: float) -> None:
        self._q[0] = value

    @property
    def x(self) -> float:
        """First imaginary component (i-axis)."""
        return float(self._q[1])

    @x.setter
    def x(self, value: float) -> None:
        self._q[1] = value

    @property
    def y(self) -> float:
        """Second imaginary component (j-axis)."""
        return float(self._q[2])

    @y.setter
    def y(self, value: float) -> None:
        self._q[2] = value

    @property
    def z(self) -> float:
        """Third imaginary component (k-axis)."""
        return float(self._q[3])

    @z.setter
    def z(self, value: float) -> None:
        self._q[3] = value

    @property
    def norm(self) -> float:
        """Read-only alias for ``magnitude()``."""
        return self.magnitude()

    def as_array(self) -> np.ndarray:
        """Copy of the components as a float64 array [w, x, y, z]."""
        return self._q.copy()

    def to_vector(self) -> Vector:
        """
        Vector part (x, y, z), discarding w.

        Used after a sandwich product to recover the rotated point.
        """
        return Vector(self.x, self.y, self.z)

    # =========================================================================
    # FACTORY METHODS
    # =========================================================================

    @staticmethod
    def identity() -> 'Quaternion':
        """
        The identity quaternion [1, 0, 0, 0].

        Represents zero rotation and is the multiplicative identity:
        q * identity = identity * q = q.
        """
        return Quaternion(1.0, 0.0, 0.0, 0.0)

    @staticmethod
    def from_vector(v: Union[Vector, np.ndarray]) -> 'Quaternion':
        """
        Promote a 3D quantity to a pure quaternion (0, v_x, v_y, v_z).

        This is the intermediate representation of a point being rotated.
        """
        v = _as_vector(v)
        return Quaternion(0.0, v.x, v.y, v.z)

    @staticmethod
    def from_axis_angle(axis: Union[Vector, np.ndarray], angle: float) -> 'Quaternion':
        """
        Create a rotation quaternion from an axis and an angle.

            q = [cos(angle/2), sin(angle/2) * axis_hat]

        Parameters
        ----------
        axis : Vector or array-like
            Rotation axis. Need not be unit length; it is normalized on a
            private copy, so the caller's instance is not modified.
        angle : float
            Rotation angle in radians (right-hand rule about *axis*).

        Returns
        -------
        Quaternion
            Unit rotation quaternion. A zero-length axis yields the identity
            rotation (1, 0, 0, 0) rather than NaN components.
        """
        axis = _as_vector(axis)

        if axis.is_zero_vector():
            logger.debug("Zero-length rotation axis, substituting identity rotation")
            return Quaternion.identity()

        axis.normalize()

        # Half-angle encoding
        half_angle = angle / 2.0
        sin_half = np.sin(half_angle)

        return Quaternion(np.cos(half_angle),
                          axis.x * sin_half,
                          axis.y * sin_half,
                          axis.z * sin_half)

    @staticmethod
    def random(rng: Optional[np.random.Generator] = None) -> 'Quaternion':
        """
        Uniformly distributed random unit quaternion (Shoemake, 1992).

        Simply normalizing a random 4-vector does NOT produce a uniform
        rotation distribution.

        Parameters
        ----------
        rng : np.random.Generator, optional
            Source of randomness. Defaults to the global numpy state.
        """
        if rng is None:
            u1, u2, u3 = np.random.random(3)
        else:
            u1, u2, u3 = rng.random(3)

        sqrt_u1 = np.sqrt(u1)
        sqrt_1_minus_u1 = np.sqrt(1.0 - u1)

        w = sqrt_1_minus_u1 * np.sin(2.0 * np.pi * u2)
        x = sqrt_1_minus_u1 * np.cos(2.0 * np.pi * u2)
        y = sqrt_u1 * np.sin(2.0 * np.pi * u3)
        z = sqrt_u1 * np.cos(2.0 * np.pi * u3)

        return Quaternion(w, x, y, z)

    # =========================================================================
    # NORM, NORMALIZATION, CONJUGATION
    # =========================================================================

    def magnitude(self) -> float:
        """
        Euclidean norm sqrt(w^2 + x^2 + y^2 + z^2).

        A NaN result clears ``valid`` and is returned unchanged.
        """
        m = float(np.linalg.norm(self._q))
        if np.isnan(m):
            logger.debug("NaN magnitude for %r, clearing validity flag", self)
            self.valid = False
        return m

    def normalize(self, sign: bool = False) -> 'Quaternion':
        """
        Scale all four components by 1/|q| in place and return ``self``.

        During numerical propagation the norm drifts from unity through
        floating-point accumulation; call this after every integration step.

        Parameters
        ----------
        sign : bool, optional
            If True and w < 0, the whole quaternion is negated as well, so
            that w >= 0 afterwards. This picks one canonical representative
            out of the double cover {q, -q}.

        Returns
        -------
        Quaternion
            ``self``, after mutation. A zero quaternion is left as
            (0, 0, 0, 0). A NaN result clears ``valid``.
        """
        m = self.magnitude()

        if m == 0.0:
            logger.debug("Normalizing zero quaternion, keeping (0, 0, 0, 0)")
            return self

        if sign and self._q[0] < 0.0:
            m = -m

        with np.errstate(divide='ignore', invalid='ignore'):
            self._q /= m

        if not np.all(np.isfinite(self._q)):
            self.valid = False

        return self

    def normalized(self, sign: bool = False) -> 'Quaternion':
        """Normalized copy; ``self`` is left untouched. See ``normalize``."""
        return self.copy().normalize(sign=sign)

    def conjugate(self) -> 'Quaternion':
        """
        Negate the vector part in place and return ``self``.

        For q = [w, x, y, z] the conjugate is q* = [w, -x, -y, -z]. For unit
        quaternions the conjugate equals the inverse (the reverse rotation).
        Take ``copy()`` first, or use ``conjugated()``, to keep the original.
        """
        self._q[1:] = -self._q[1:]
        return self

    def conjugated(self) -> 'Quaternion':
        """Conjugate as a new quaternion; ``self`` is left untouched."""
        return self.copy().conjugate()

    def inverse(self) -> 'Quaternion':
        """
        Multiplicative inverse q^{-1} = q* / |q|^2.

        For unit quaternions this equals the conjugate. The zero quaternion
        has no inverse and yields (0, 0, 0, 0).
        """
        norm_sq = float(np.dot(self._q, self._q))

        if norm_sq == 0.0:
            logger.debug("Inverse of zero quaternion requested, returning zeros")
            return Quaternion()

        inv_q = self.conjugated()._q / norm_sq
        return Quaternion(*inv_q)

    def copy(self) -> 'Quaternion':
        """Independent copy (components and validity flag)."""
        q = Quaternion(self.w, self.x, self.y, self.z)
        q.valid = self.valid
        return q

    # =========================================================================
    # HAMILTON PRODUCT AND ROTATION
    # =========================================================================

    def multiply(self, other: 'Quaternion') -> 'Quaternion':
        """
        Hamilton product ``self * other``.

        NOT commutative. For unit quaternions the product composes
        rotations: ``a * b`` applies b first, then a.

            w' = w1w2 - x1x2 - y1y2 - z1z2
            x' = w1x2 + x1w2 + y1z2 - z1y2
            y' = w1y2 - x1z2 + y1w2 + z1x2
            z' = w1z2 + x1y2 - y1x2 + z1w2

        Parameters
        ----------
        other : Quaternion
            Right-hand operand.

        Returns
        -------
        Quaternion
            The product (not normalized).
        """
        w1, x1, y1, z1 = self._q
        w2, x2, y2, z2 = other._q

        w = w1 * w2 - x1 * x2 - y1 * y2 - z1 * z2
        x = w1 * x2 + x1 * w2 + y1 * z2 - z1 * y2
        y = w1 * y2 - x1 * z2 + y1 * w2 + z1 * x2
        z = w1 * z2 + x1 * y2 - y1 * x2 + z1 * w2

        return Quaternion(w, x, y, z)

    def rotate_vector(self, v: Union[Vector, np.ndarray]) -> Vector:
        """
        Rotate a 3D vector by this quaternion.

        Applies the sandwich product

            v' = q * v_pure * q*

        where v_pure = [0, v_x, v_y, v_z].

        Parameters
        ----------
        v : Vector or array-like
            Vector to rotate. Not modified.

        Returns
        -------
        Vector
            Rotated vector. Only a true rotation when ``self`` is a unit
            quaternion; otherwise the result is scaled by |q|^2.
        """
        v_pure = Quaternion.from_vector(v)
        return (self * v_pure * self.conjugated()).to_vector()

    # =========================================================================
    # CONVERSION METHODS
    # =========================================================================

    def to_axis_angle(self) -> Tuple[Vector, float]:
        """
        Decompose into a rotation axis and angle.

            angle = 2 * acos(w)
            axis  = normalize([x, y, z])

        ``self`` is NOT normalized first; the result is only meaningful on a
        unit quaternion. w is clamped to [-1, 1] against rounding overshoot.

        Returns
        -------
        tuple of (Vector, float)
            (axis, angle). angle is in [0, 2*pi]. For a zero vector part
            (angle 0 or 2*pi) the axis is the zero vector.
        """
        axis = self.to_vector().normalize()
        angle = 2.0 * np.arccos(np.clip(self.w, -1.0, 1.0))
        return axis, float(angle)

    # =========================================================================
    # ATTITUDE PROPAGATION
    # =========================================================================

    def derivative(self, omega: Union[Vector, np.ndarray]) -> 'Quaternion':
        """
        Quaternion time-derivative for a body-frame angular velocity.

            dq/dt = 0.5 * q * omega_pure

        Parameters
        ----------
        omega : Vector or array-like
            Angular velocity [rad/s] in the body frame.

        Returns
        -------
        Quaternion
            dq/dt (not a rotation, not normalized).
        """
        return self.multiply(Quaternion.from_vector(omega)) * 0.5

    def propagate(self, omega: Union[Vector, np.ndarray], dt: float) -> 'Quaternion':
        """
        First-order attitude update q(t + dt) = q + dq/dt * dt, renormalized.

        Adequate for dt << 1/|omega|. ``self`` is not modified.
        """
        return (self + self.derivative(omega) * dt).normalize()

    # =========================================================================
    # COMPARISON AND INTERPOLATION
    # =========================================================================

    def is_unit(self, tolerance: float = UNIT_TOLERANCE) -> bool:
        """True if |q| is within *tolerance* of 1.0."""
        return abs(self.magnitude() - 1.0) < tolerance

    def same_rotation(self, other: 'Quaternion',
                      tolerance: float = COMPARISON_TOLERANCE) -> bool:
        """
        Tolerant comparison accounting for the q / -q ambiguity.

        Unlike ``==`` (exact componentwise), two quaternions compare equal
        here if either q - other or q + other is within *tolerance*.
        """
        diff_pos = np.linalg.norm(self._q - other._q)
        diff_neg = np.linalg.norm(self._q + other._q)
        return bool(min(diff_pos, diff_neg) < tolerance)

    def angle_to(self, other: 'Quaternion') -> float:
        """
        Minimum rotation angle between two unit quaternions, in [0, pi].

            angle = 2 * arccos(|q1 . q2|)
        """
        dot = np.clip(abs(np.dot(self._q, other._q)), 0.0, 1.0)
        return float(2.0 * np.arccos(dot))

    @staticmethod
    def slerp(q1: 'Quaternion', q2: 'Quaternion', t: float) -> 'Quaternion':
        """
        Spherical linear interpolation along the short arc from q1 to q2.

            slerp(q1, q2, t) = q1 * sin((1-t)*Omega) / sin(Omega)
                             + q2 * sin(t*Omega) / sin(Omega)

        where Omega = arccos(q1 . q2). When q1 . q2 < 0 the end point is
        replaced by -q2, which is the same rotation. Close end points use
        normalized linear interpolation, so sin(Omega) is never near zero.

        Parameters
        ----------
        q1, q2 : Quaternion
            Unit end points (t = 0 and t = 1). Neither is modified.
        t : float
            Interpolation parameter, clamped to [0, 1].

        Returns
        -------
        Quaternion
            Interpolated rotation. A zero end point yields (0, 0, 0, 0).
            ``valid`` is False if either end point was invalid or the result
            is not finite.
        """
        if not np.any(q1._q) or not np.any(q2._q):
            logger.debug("SLERP with a zero end point, returning zeros")
            result = Quaternion()
            result.valid = q1.valid and q2.valid
            return result

        t = float(np.clip(t, 0.0, 1.0))
        end = q2.copy()
        cos_omega = float(np.dot(q1._q, end._q))
        if cos_omega < 0.0:
            end = -end
            cos_omega = -cos_omega

        if cos_omega > SLERP_LINEAR_THRESHOLD:
            result = (q1 + (end - q1) * t).normalize()
        else:
            omega = np.arccos(min(cos_omega, 1.0))
            sin_omega = np.sin(omega)
            result = (q1 * (np.sin((1.0 - t) * omega) / sin_omega)
                      + end * (np.sin(t * omega) / sin_omega))

        if not (q1.valid and q2.valid and np.all(np.isfinite(result._q))):
            result.valid = False
        return result

    # =========================================================================
    # OPERATOR OVERLOADS
    # =========================================================================

    def __mul__(self, other: Union['Quaternion', Vector, float]) -> 'Quaternion':
        """
        Multiplication operator.

        - Quaternion * Quaternion -> Hamilton product
        - Quaternion * Vector -> Hamilton product with the pure quaternion
        - Quaternion * scalar -> componentwise scaling
        """
        if isinstance(other, Quaternion):
            return self.multiply(other)
        if isinstance(other, Vector):
            return self.multiply(Quaternion.from_vector(other))
        if isinstance(other, SCALAR_TYPES):
            return Quaternion(*(self._q * float(other)))
        return NotImplemented

    def __rmul__(self, other: Union[Vector, float]) -> 'Quaternion':
        """scalar * Quaternion, or Vector * Quaternion (pure quaternion on the left)."""
        if isinstance(other, Vector):
            return Quaternion.from_vector(other).multiply(self)
        if isinstance(other, SCALAR_TYPES):
            return Quaternion(*(self._q * float(other)))
        return NotImplemented

    def __truediv__(self, other: float) -> 'Quaternion':
        # Division by zero follows float64 semantics (inf / NaN), no exception
        if isinstance(other, SCALAR_TYPES):
            with np.errstate(divide='ignore', invalid='ignore'):
                return Quaternion(*(self._q / np.float64(other)))
        return NotImplemented

    def __add__(self, other: 'Quaternion') -> 'Quaternion':
        """
        Componentwise addition.

        NOT a rotation operation; used by integration schemes and
        interpolation. The result is not normalized.
        """
        if isinstance(other, Quaternion):
            return Quaternion(*(self._q + other._q))
        return NotImplemented

    def __sub__(self, other: 'Quaternion') -> 'Quaternion':
        """Componentwise subtraction (not normalized)."""
        if isinstance(other, Quaternion):
            return Quaternion(*(self._q - other._q))
        return NotImplemented

    def __neg__(self) -> 'Quaternion':
        """
        Negate all components.

        -q represents the same rotation as q.
        """
        return Quaternion(*(-self._q))

    def __iadd__(self, other: 'Quaternion') -> 'Quaternion':
        if isinstance(other, Quaternion):
            self._q += other._q
            return self
        return NotImplemented

    def __isub__(self, other: 'Quaternion') -> 'Quaternion':
        if isinstance(other, Quaternion):
            self._q -= other._q
            return self
        return NotImplemented

    def __imul__(self, other: Union['Quaternion', float]) -> 'Quaternion':
        """In-place scaling, or in-place Hamilton product ``self = self * other``."""
        if isinstance(other, Quaternion):
            self._q[:] = self.multiply(other)._q
            return self
        if isinstance(other, SCALAR_TYPES):
            self._q *= float(other)
            return self
        return NotImplemented

    def __itruediv__(self, other: float) -> 'Quaternion':
        if isinstance(other, SCALAR_TYPES):
            with np.errstate(divide='ignore', invalid='ignore'):
                self._q /= np.float64(other)
            return self
        return NotImplemented

    def __eq__(self, other: object) -> bool:
        """
        Exact componentwise comparison.

        q and -q compare unequal here even though they are the same
        rotation; use ``same_rotation`` for that.
        """
        if not isinstance(other, Quaternion):
            return NotImplemented
        return bool(np.all(self._q == other._q))

    # Mutable value type
    __hash__ = None

    # =========================================================================
    # TEXT RENDERING
    # =========================================================================

    def to_string(self, digits: int = DEFAULT_DIGITS) -> str:
        """
        Fixed-format rendering ``"w: <v>, x: <v>, y: <v>, z: <v>"``.

        Parameters
        ----------
        digits : int
            Number of decimals printed for each component (default 2).
        """
        return (f"w: {self.w:.{digits}f}, x: {self.x:.{digits}f}, "
                f"y: {self.y:.{digits}f}, z: {self.z:.{digits}f}")

    def __repr__(self) -> str:
        """
        Unambiguous string representation for debugging.

        Format: Quaternion(w=..., x=..., y=..., z=...)
        """
        return (f"Quaternion(w={self.w:+.8f}, x={self.x:+.8f}, "
                f"y={self.y:+.8f}, z={self.z:+.8f})")

    def __str__(self) -> str:
        return self.to_string()
