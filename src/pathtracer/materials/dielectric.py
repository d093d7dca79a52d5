"""Dielectric (glass/water) material implementation.

Key physics:
    - Snell's law for refraction: n1 * sin(theta1) = n2 * sin(theta2)
    - Schlick's approximation for Fresnel reflectance
    - Total internal reflection when ratio * sin(theta) > 1

The material randomly chooses between reflection and refraction based on
the Fresnel reflectance, which increases at grazing angles. Clear glass
does not tint, so the attenuation is always white and the material never
absorbs.

Example:
    >>> from src.pathtracer.materials.dielectric import Dielectric
    >>> glass = Dielectric(1.5)
    >>> water = Dielectric(1.33)
"""

from __future__ import annotations

import math
from typing import TYPE_CHECKING

import numpy as np

from src.pathtracer.core.ray import Ray
from src.pathtracer.core.vec3 import Color, reflect, refract
from src.pathtracer.materials.material import Material, ScatterResult

if TYPE_CHECKING:
    from src.pathtracer.geometry.hittable import HitRecord

TRANSPARENT = Color(1.0, 1.0, 1.0)


def schlick_reflectance(cosine: float, ref_idx: float) -> float:
    """Compute Fresnel reflectance using Schlick's approximation.

    Args:
        cosine: Cosine of the angle between incident direction and normal.
        ref_idx: Ratio of refractive indices.

    Returns:
        The approximate probability that the ray reflects.
    """
    r0 = (1.0 - ref_idx) / (1.0 + ref_idx)
    r0 = r0 * r0
    return r0 + (1.0 - r0) * (1.0 - cosine) ** 5


class Dielectric(Material):
    """Transparent refracting material.

    Attributes:
        ior: Index of refraction. Common values:
            - Air: 1.0
            - Water: 1.33
            - Glass: 1.5
            - Diamond: 2.4
    """

    def __init__(self, ior: float) -> None:
        """Create a dielectric material.

        Raises:
            ValueError: If ior is not a finite positive number.
        """
        if not math.isfinite(ior) or ior <= 0.0:
            raise ValueError(f"Index of refraction must be a finite positive number, got {ior}")
        self.ior = float(ior)

    def scatter(
        self,
        ray_in: Ray,
        rec: HitRecord,
        rng: np.random.Generator,
    ) -> ScatterResult:
        """Reflect or refract the incoming ray. Never absorbs."""
        # Entering the medium from outside uses 1/ior, leaving it uses ior
        refraction_ratio = 1.0 / self.ior if rec.front_face else self.ior

        unit_direction = ray_in.direction.unit_vector()
        cos_theta = min(-unit_direction.dot(rec.normal), 1.0)
        sin_theta = math.sqrt(max(0.0, 1.0 - cos_theta * cos_theta))

        cannot_refract = refraction_ratio * sin_theta > 1.0
        if cannot_refract or schlick_reflectance(cos_theta, refraction_ratio) > rng.random():
            direction = reflect(unit_direction, rec.normal)
        else:
            direction = refract(unit_direction, rec.normal, refraction_ratio)

        return ScatterResult(TRANSPARENT, Ray(rec.point, direction))

    def __repr__(self) -> str:
        return f"Dielectric(ior={self.ior})"
