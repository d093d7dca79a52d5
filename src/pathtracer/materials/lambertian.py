"""Lambertian (ideal diffuse) material implementation.

Scatter directions are drawn as the surface normal plus a random unit
vector, which yields a cosine-weighted distribution around the normal.
With that sampling the BRDF and pdf cosine terms cancel and the
per-bounce attenuation is simply the albedo.

Example:
    >>> from src.pathtracer.core.vec3 import Color
    >>> from src.pathtracer.materials.lambertian import Lambertian
    >>> ground = Lambertian(Color(0.5, 0.5, 0.5))
"""

from __future__ import annotations

from typing import TYPE_CHECKING

import numpy as np

from src.pathtracer.core.ray import Ray
from src.pathtracer.core.vec3 import Color, random_unit_vector
from src.pathtracer.materials.material import Material, ScatterResult, validate_albedo

if TYPE_CHECKING:
    from src.pathtracer.geometry.hittable import HitRecord


class Lambertian(Material):
    """Ideal diffuse material.

    Attributes:
        albedo: The diffuse reflectance color (RGB, each component in [0, 1]).
    """

    def __init__(self, albedo: Color) -> None:
        """Create a Lambertian material.

        Raises:
            TypeError: If albedo is not a Vec3.
            ValueError: If any albedo component is outside [0, 1].
        """
        self.albedo = validate_albedo(albedo)

    def scatter(
        self,
        ray_in: Ray,
        rec: HitRecord,
        rng: np.random.Generator,
    ) -> ScatterResult:
        """Scatter diffusely around the surface normal. Never absorbs."""
        scatter_direction = rec.normal + random_unit_vector(rng)

        # The random vector can almost exactly cancel the normal
        if scatter_direction.near_zero():
            scatter_direction = rec.normal

        return ScatterResult(self.albedo, Ray(rec.point, scatter_direction))

    def __repr__(self) -> str:
        return f"Lambertian(albedo={self.albedo!r})"
