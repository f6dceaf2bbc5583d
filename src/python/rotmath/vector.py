"""
===============================================================================
ROTMATH - 3D Vector
===============================================================================

Three-component real vector used for positions, directions and velocities,
and as the axis / point type consumed by the Quaternion class.

Validity flag
-------------
Every Vector carries a boolean ``valid`` attribute. It is cleared when a
magnitude computation returns NaN (which can only happen when a component
is NaN). The flag is advisory: no operation reads it, and arithmetic keeps
going through NaN states. Callers decide whether to propagate or abort.

Degenerate inputs
-----------------
Zero-length inputs are guarded and replaced with a documented value:

    normalize()         zero vector stays (0, 0, 0)
    angle_to(b)         either side zero-length -> 0.0
    projection_on(b)    zero-length b -> (0, 0, 0)

Mutating vs. copying
--------------------
``normalize()`` and the compound operators (+=, -=, *=, /=) mutate the
instance in place. ``normalized()`` and the binary operators return new
instances and never alias the operands.
===============================================================================
"""

import logging
from typing import Iterator, Sequence, Union

import numpy as np

from rotmath.constants import COMPARISON_TOLERANCE, DEFAULT_DIGITS, STANDARD_GRAVITY

logger = logging.getLogger(__name__)

# Operand types accepted as scalars by the arithmetic operators
SCALAR_TYPES = (int, float, np.integer, np.floating)


class Vector:
    """
    Three-component real vector with an advisory validity flag.

    Attributes
    ----------
    x, y, z : float
        Cartesian components.
    valid : bool
        False once ``magnitude()`` has produced NaN for this instance.

    Examples
    --------
    >>> v = Vector(3.0, 4.0, 0.0)
    >>> v.magnitude()
    5.0
    >>> v.normalize().to_string()
    'x: 0.60, y: 0.80, z: 0.00'
    """

    def __init__(self, x: float = 0.0, y: float = 0.0, z: float = 0.0) -> None:
        self._v = np.array([x, y, z], dtype=np.float64)
        self.valid = True

    # =========================================================================
    # ALTERNATE CONSTRUCTORS
    # =========================================================================

    @classmethod
    def filled(cls, n: float) -> 'Vector':
        """Vector with all three components set to *n*."""
        return cls(n, n, n)

    @classmethod
    def zero(cls) -> 'Vector':
        """The zero vector (0, 0, 0)."""
        return cls(0.0, 0.0, 0.0)

    @classmethod
    def from_array(cls, values: Union[Sequence[float], np.ndarray]) -> 'Vector':
        """
        Build a Vector from any 3-element sequence or array.

        Raises
        ------
        ValueError
            If *values* does not hold exactly three elements.
        """
        arr = np.asarray(values, dtype=np.float64).reshape(-1)
        if arr.shape != (3,):
            raise ValueError(f"Vector needs exactly 3 components, got shape {arr.shape}")
        return cls(arr[0], arr[1], arr[2])

    # =========================================================================
    # COMPONENT ACCESS
    # =========================================================================

    @property
    def x(self) -> float:
        return float(self._v[0])

    @x.setter
    def x(self, value: float) -> None:
        self._v[0] = value

    @property
    def y(self) -> float:
        return float(self._v[1])

    @y.setter
    def y(self, value: float) -> None:
        self._v[1] = value

    @property
    def z(self) -> float:
        return float(self._v[2])

    @z.setter
    def z(self, value: float) -> None:
        self._v[2] = value

    def as_array(self) -> np.ndarray:
        """Copy of the components as a float64 array [x, y, z]."""
        return self._v.copy()

    def __iter__(self) -> Iterator[float]:
        return iter((self.x, self.y, self.z))

    # =========================================================================
    # NORMS AND NORMALIZATION
    # =========================================================================

    def magnitude(self) -> float:
        """
        Euclidean norm sqrt(x^2 + y^2 + z^2).

        A NaN result clears ``valid``; the NaN is still returned to the
        caller rather than being replaced.
        """
        m = float(np.linalg.norm(self._v))
        if np.isnan(m):
            logger.debug("NaN magnitude for %r, clearing validity flag", self)
            self.valid = False
        return m

    def normalize(self) -> 'Vector':
        """
        Scale this vector to unit length in place and return it.

        A zero-length vector is forced to (0, 0, 0) instead of being divided
        by zero, so a zero vector normalizes to itself.

        Returns
        -------
        Vector
            ``self``, after mutation.
        """
        mag = self.magnitude()

        if mag == 0.0:
            logger.debug("Normalizing zero-length vector, keeping (0, 0, 0)")
            self._v[:] = 0.0
        else:
            with np.errstate(divide='ignore', invalid='ignore'):
                self._v /= mag

        return self

    def normalized(self) -> 'Vector':
        """Unit-length copy of this vector. ``self`` is left untouched."""
        return self.copy().normalize()

    def is_zero_vector(self) -> bool:
        """True iff the magnitude is exactly zero."""
        return self.magnitude() == 0.0

    def copy(self) -> 'Vector':
        """Independent copy (components and validity flag)."""
        v = Vector(self.x, self.y, self.z)
        v.valid = self.valid
        return v

    # =========================================================================
    # PRODUCTS
    # =========================================================================

    def dot(self, b: 'Vector') -> float:
        """Scalar product x1*x2 + y1*y2 + z1*z2."""
        return float(np.dot(self._v, b._v))

    def cross(self, b: 'Vector') -> 'Vector':
        """
        Right-handed cross product ``self x b``.

        Anti-commutative: ``a.cross(b) == -(b.cross(a))``.
        """
        x, y, z = self._v
        bx, by, bz = b._v
        return Vector(
            y * bz - z * by,
            z * bx - x * bz,
            x * by - y * bx,
        )

    def comp_wise_multi(self, b: 'Vector') -> 'Vector':
        """Componentwise (Hadamard) product (x1*x2, y1*y2, z1*z2)."""
        return Vector(self.x * b.x, self.y * b.y, self.z * b.z)

    # =========================================================================
    # GEOMETRY
    # =========================================================================

    def angle_to(self, b: 'Vector') -> float:
        """
        Angle between this vector and *b*, in radians [0, pi].

        Computed as acos(a.b / (|a||b|)). If either vector has zero length
        the angle is undefined and 0.0 is returned. The cosine is clamped to
        [-1, 1] so rounding overshoot on (anti)parallel inputs cannot turn
        into NaN.

        Like ``projection_on``, *b* is read-only: a NaN magnitude clears
        ``valid`` on ``self`` only, and the returned angle is NaN either way.
        """
        mag_a = self.magnitude()
        mag_b = b.copy().magnitude()

        if mag_a == 0.0 or mag_b == 0.0:
            logger.debug("Angle to/from zero-length vector requested, returning 0.0")
            return 0.0

        cos_angle = np.clip(self.dot(b) / (mag_a * mag_b), -1.0, 1.0)
        return float(np.arccos(cos_angle))

    def projection_on(self, b: 'Vector') -> 'Vector':
        """
        Orthogonal projection of this vector onto the direction of *b*.

        *b* is normalized on a private copy, so the caller's instance is not
        modified. A zero-length *b* yields the zero vector.
        """
        b_hat = b.normalized()
        return b_hat * self.dot(b_hat)

    def is_close(self, b: 'Vector', tolerance: float = COMPARISON_TOLERANCE) -> bool:
        """Tolerant comparison: True if |self - b| < tolerance."""
        return float(np.linalg.norm(self._v - b._v)) < tolerance

    # =========================================================================
    # OPERATOR OVERLOADS
    # =========================================================================

    def __add__(self, other: 'Vector') -> 'Vector':
        if isinstance(other, Vector):
            return Vector(*(self._v + other._v))
        return NotImplemented

    def __sub__(self, other: 'Vector') -> 'Vector':
        if isinstance(other, Vector):
            return Vector(*(self._v - other._v))
        return NotImplemented

    def __neg__(self) -> 'Vector':
        return Vector(-self.x, -self.y, -self.z)

    def __mul__(self, other: Union['Vector', float]) -> Union['Vector', float]:
        """
        Multiplication operator.

        - Vector * Vector -> dot product (float)
        - Vector * scalar -> componentwise scaling (Vector)
        """
        if isinstance(other, Vector):
            return self.dot(other)
        if isinstance(other, SCALAR_TYPES):
            return Vector(*(self._v * float(other)))
        return NotImplemented

    def __rmul__(self, other: float) -> 'Vector':
        if isinstance(other, SCALAR_TYPES):
            return Vector(*(self._v * float(other)))
        return NotImplemented

    def __truediv__(self, other: float) -> 'Vector':
        # Division by zero follows float64 semantics (inf / NaN), no exception
        if isinstance(other, SCALAR_TYPES):
            with np.errstate(divide='ignore', invalid='ignore'):
                return Vector(*(self._v / np.float64(other)))
        return NotImplemented

    def __iadd__(self, other: 'Vector') -> 'Vector':
        if isinstance(other, Vector):
            self._v += other._v
            return self
        return NotImplemented

    def __isub__(self, other: 'Vector') -> 'Vector':
        if isinstance(other, Vector):
            self._v -= other._v
            return self
        return NotImplemented

    def __imul__(self, other: float) -> 'Vector':
        if isinstance(other, SCALAR_TYPES):
            self._v *= float(other)
            return self
        return NotImplemented

    def __itruediv__(self, other: float) -> 'Vector':
        if isinstance(other, SCALAR_TYPES):
            with np.errstate(divide='ignore', invalid='ignore'):
                self._v /= np.float64(other)
            return self
        return NotImplemented

    def __eq__(self, other: object) -> bool:
        """
        Exact componentwise comparison, no tolerance.

        Use ``is_close`` when rounding noise is expected.
        """
        if not isinstance(other, Vector):
            return NotImplemented
        return bool(np.all(self._v == other._v))

    # Mutable value type
    __hash__ = None

    # =========================================================================
    # TEXT RENDERING
    # =========================================================================

    def to_string(self, digits: int = DEFAULT_DIGITS) -> str:
        """
        Fixed-format rendering ``"x: <v>, y: <v>, z: <v>"``.

        Parameters
        ----------
        digits : int
            Number of decimals printed for each component (default 2).
        """
        return f"x: {self.x:.{digits}f}, y: {self.y:.{digits}f}, z: {self.z:.{digits}f}"

    def __repr__(self) -> str:
        return f"Vector(x={self.x:+.8f}, y={self.y:+.8f}, z={self.z:+.8f})"

    def __str__(self) -> str:
        return self.to_string()


def gravity_vector() -> Vector:
    """Fresh downward gravity vector (0, 0, -9.81) m/s^2."""
    return Vector(0.0, 0.0, -STANDARD_GRAVITY)


# Shared instance; call .copy() (or gravity_vector()) before mutating it
GRAVITY_VECTOR = gravity_vector()
