"""Three-component vector type and the vector utilities built on it.

A single ``Vec3`` type is used for free vectors, points and RGB colours;
``Point3`` and ``Color`` are aliases that document intent only.

All randomized constructors take an explicit ``numpy.random.Generator`` so
sample sequences are reproducible and independent streams can be handed
to parallel workers.

Example:
    >>> import numpy as np
    >>> from src.pathtracer.core.vec3 import Vec3, random_unit_vector, reflect
    >>> rng = np.random.default_rng(7)
    >>> v = Vec3(1.0, -1.0, 0.0)
    >>> reflect(v, Vec3(0.0, 1.0, 0.0))
    Vec3(1.0, 1.0, 0.0)
    >>> random_unit_vector(rng).length()  # doctest: +SKIP
    1.0
"""

from __future__ import annotations

import math
from collections.abc import Iterator

import numpy as np

# Components below this magnitude count as zero for degenerate-direction checks
NEAR_ZERO_EPSILON = 1e-8


class Vec3:
    """A 3D vector of floats, treated as a value (no method mutates it).

    Attributes:
        x: First component (red channel when used as a colour).
        y: Second component (green channel).
        z: Third component (blue channel).
    """

    __slots__ = ("x", "y", "z")

    # numpy scalars on the left defer to __rmul__ instead of broadcasting
    __array_ufunc__ = None

    def __init__(self, x: float = 0.0, y: float = 0.0, z: float = 0.0) -> None:
        self.x = float(x)
        self.y = float(y)
        self.z = float(z)

    # -------------------------------------------------------------------------
    # Arithmetic
    # -------------------------------------------------------------------------

    def __add__(self, other: Vec3) -> Vec3:
        return Vec3(self.x + other.x, self.y + other.y, self.z + other.z)

    def __sub__(self, other: Vec3) -> Vec3:
        return Vec3(self.x - other.x, self.y - other.y, self.z - other.z)

    def __neg__(self) -> Vec3:
        return Vec3(-self.x, -self.y, -self.z)

    def __mul__(self, other: Vec3 | float) -> Vec3:
        if isinstance(other, Vec3):
            return Vec3(self.x * other.x, self.y * other.y, self.z * other.z)
        return Vec3(self.x * other, self.y * other, self.z * other)

    def __rmul__(self, other: float) -> Vec3:
        return Vec3(self.x * other, self.y * other, self.z * other)

    def __truediv__(self, t: float) -> Vec3:
        inv = 1.0 / t
        return Vec3(self.x * inv, self.y * inv, self.z * inv)

    # -------------------------------------------------------------------------
    # Container protocol and comparison
    # -------------------------------------------------------------------------

    def __iter__(self) -> Iterator[float]:
        yield self.x
        yield self.y
        yield self.z

    def __getitem__(self, index: int) -> float:
        return (self.x, self.y, self.z)[index]

    def __len__(self) -> int:
        return 3

    def __eq__(self, other: object) -> bool:
        if not isinstance(other, Vec3):
            return NotImplemented
        return self.x == other.x and self.y == other.y and self.z == other.z

    def __hash__(self) -> int:
        return hash((self.x, self.y, self.z))

    def __repr__(self) -> str:
        return f"Vec3({self.x}, {self.y}, {self.z})"

    def isclose(self, other: Vec3, tol: float = 1e-9) -> bool:
        """Check component-wise equality within an absolute tolerance."""
        return (
            abs(self.x - other.x) <= tol
            and abs(self.y - other.y) <= tol
            and abs(self.z - other.z) <= tol
        )

    def to_tuple(self) -> tuple[float, float, float]:
        """Return the components as a plain tuple."""
        return (self.x, self.y, self.z)

    # -------------------------------------------------------------------------
    # Products and norms
    # -------------------------------------------------------------------------

    def dot(self, other: Vec3) -> float:
        """Compute the dot product with another vector."""
        return self.x * other.x + self.y * other.y + self.z * other.z

    def cross(self, other: Vec3) -> Vec3:
        """Compute the cross product self x other."""
        return Vec3(
            self.y * other.z - self.z * other.y,
            self.z * other.x - self.x * other.z,
            self.x * other.y - self.y * other.x,
        )

    def length_squared(self) -> float:
        """Squared Euclidean length; avoids the square root."""
        return self.x * self.x + self.y * self.y + self.z * self.z

    def length(self) -> float:
        """Euclidean length."""
        return math.sqrt(self.length_squared())

    def unit_vector(self) -> Vec3:
        """Return this vector scaled to unit length.

        Raises:
            ValueError: If the vector has zero length.
        """
        length = self.length()
        if length == 0.0:
            raise ValueError("Cannot normalize a zero-length vector")
        return self / length

    def near_zero(self) -> bool:
        """Check whether every component is below NEAR_ZERO_EPSILON in magnitude."""
        s = NEAR_ZERO_EPSILON
        return abs(self.x) < s and abs(self.y) < s and abs(self.z) < s

    # -------------------------------------------------------------------------
    # Random constructors
    # -------------------------------------------------------------------------

    @classmethod
    def random(cls, rng: np.random.Generator) -> Vec3:
        """Vector with each component uniform in [0, 1)."""
        return cls(rng.random(), rng.random(), rng.random())

    @classmethod
    def random_range(cls, rng: np.random.Generator, low: float, high: float) -> Vec3:
        """Vector with each component uniform in [low, high)."""
        return cls(rng.uniform(low, high), rng.uniform(low, high), rng.uniform(low, high))


# Role aliases
Point3 = Vec3
Color = Vec3


def reflect(v: Vec3, n: Vec3) -> Vec3:
    """Mirror ``v`` about the unit normal ``n``: v - 2(v.n)n."""
    return v - 2.0 * v.dot(n) * n


def refract(uv: Vec3, n: Vec3, etai_over_etat: float) -> Vec3:
    """Refract the unit vector ``uv`` through a surface with unit normal ``n``.

    Splits the refracted ray into components perpendicular and parallel to
    the normal (Snell's law). The parallel radicand goes through ``abs`` so
    floating-point overshoot at grazing angles cannot produce a NaN.

    Args:
        uv: Incoming direction, unit length, pointing toward the surface.
        n: Surface normal, unit length, on the same side as the incoming ray.
        etai_over_etat: Ratio of refractive indices (incident / transmitted).

    Returns:
        The refracted direction.
    """
    cos_theta = min(-uv.dot(n), 1.0)
    r_out_perp = etai_over_etat * (uv + cos_theta * n)
    r_out_parallel = -math.sqrt(abs(1.0 - r_out_perp.length_squared())) * n
    return r_out_perp + r_out_parallel


def random_in_unit_sphere(rng: np.random.Generator) -> Vec3:
    """Uniform point strictly inside the unit sphere (rejection sampling)."""
    while True:
        p = Vec3.random_range(rng, -1.0, 1.0)
        if p.length_squared() < 1.0:
            return p


def random_in_unit_disk(rng: np.random.Generator) -> Vec3:
    """Uniform point strictly inside the unit disk in the z=0 plane."""
    while True:
        p = Vec3(rng.uniform(-1.0, 1.0), rng.uniform(-1.0, 1.0), 0.0)
        if p.length_squared() < 1.0:
            return p


def random_unit_vector(rng: np.random.Generator) -> Vec3:
    """Random direction, the normalized point from random_in_unit_sphere."""
    return random_in_unit_sphere(rng).unit_vector()


def degrees_to_radians(degrees: float) -> float:
    return degrees * math.pi / 180.0
