"""Metal (specular reflective) material implementation.

The reflection formula is:
    R = I - 2(I . N)N

where I is the unit incident direction and N is the surface normal. Rough
metals perturb R by a random point in the unit sphere scaled by ``fuzz``.
A perturbed direction that ends up at or below the surface is absorbed,
which is how fuzzy reflections darken near the horizon.
"""

from __future__ import annotations

import math
from typing import TYPE_CHECKING

import numpy as np

from src.pathtracer.core.ray import Ray
from src.pathtracer.core.vec3 import Color, random_in_unit_sphere, reflect
from src.pathtracer.materials.material import Material, ScatterResult, validate_albedo

if TYPE_CHECKING:
    from src.pathtracer.geometry.hittable import HitRecord


class Metal(Material):
    """Specular reflector with optional fuzz.

    Attributes:
        albedo: The reflective color (RGB, each component in [0, 1]).
        fuzz: Surface roughness in [0, 1]. 0 = perfect mirror.
    """

    def __init__(self, albedo: Color, fuzz: float = 0.0) -> None:
        """Create a metal material.

        Args:
            albedo: The reflective color.
            fuzz: Roughness. Values above 1 are clamped to 1.

        Raises:
            TypeError: If albedo is not a Vec3.
            ValueError: If any albedo component is outside [0, 1], or fuzz is
                negative or not finite.
        """
        if not math.isfinite(fuzz) or fuzz < 0.0:
            raise ValueError(f"Fuzz = {fuzz} must be a finite non-negative number")
        self.albedo = validate_albedo(albedo)
        self.fuzz = min(float(fuzz), 1.0)

    def scatter(
        self,
        ray_in: Ray,
        rec: HitRecord,
        rng: np.random.Generator,
    ) -> ScatterResult | None:
        """Reflect about the normal; absorb if the result points into the surface."""
        reflected = reflect(ray_in.direction.unit_vector(), rec.normal)
        direction = reflected + self.fuzz * random_in_unit_sphere(rng)
        if direction.dot(rec.normal) <= 0.0:
            return None
        return ScatterResult(self.albedo, Ray(rec.point, direction))

    def __repr__(self) -> str:
        return f"Metal(albedo={self.albedo!r}, fuzz={self.fuzz})"
