"""Base material interface shared by all surface scattering models.

A material decides what happens to a ray arriving at a surface point: it
either scatters it (returning the new ray and the colour attenuation
applied to whatever light that ray gathers) or absorbs it (returning None).

Materials are immutable after construction and hold no mutable state, so a
single instance may be shared by many surfaces and read concurrently.
"""

from __future__ import annotations

from abc import ABC, abstractmethod
from typing import TYPE_CHECKING, NamedTuple

import numpy as np

from src.pathtracer.core.ray import Ray
from src.pathtracer.core.vec3 import Color

if TYPE_CHECKING:
    from src.pathtracer.geometry.hittable import HitRecord


class ScatterResult(NamedTuple):
    """Outcome of a successful scatter event.

    Attributes:
        attenuation: Per-channel multiplier applied to the light gathered
            along the scattered ray.
        scattered: The outgoing ray, starting at the hit point.
    """

    attenuation: Color
    scattered: Ray


class Material(ABC):
    """Abstract surface material."""

    @abstractmethod
    def scatter(
        self,
        ray_in: Ray,
        rec: HitRecord,
        rng: np.random.Generator,
    ) -> ScatterResult | None:
        """Scatter an incoming ray at a surface point.

        Args:
            ray_in: The incoming ray.
            rec: The hit record describing the surface point.
            rng: Source of uniform random numbers.

        Returns:
            A ScatterResult, or None if the ray is absorbed.
        """


def validate_albedo(albedo: Color) -> Color:
    """Check that every albedo component is in [0, 1].

    Args:
        albedo: The reflectance color to check.

    Returns:
        The albedo unchanged.

    Raises:
        TypeError: If albedo is not a Vec3.
        ValueError: If any component is outside [0, 1].
    """
    if not isinstance(albedo, Color):
        raise TypeError(f"Albedo must be a Vec3, got {type(albedo).__name__}")
    for i, component in enumerate(albedo):
        if not 0.0 <= component <= 1.0:
            raise ValueError(
                f"Albedo component {i} = {component} is outside [0, 1]. "
                "This would violate energy conservation."
            )
    return albedo
