"""Core rendering module.

Components:
    vec3: Vector/point/colour type, reflection, refraction and sampling
    ray: Ray data structure
    integrator: Light transport (ray_color) and the sky background
    renderer: Per-pixel sampling loop and worker-process fan-out

Note: integrator and renderer are NOT imported here to avoid circular
imports (they depend on geometry and camera, which depend on core).
Import them directly from src.pathtracer.core.integrator or
src.pathtracer.core.renderer.
"""

from .ray import Ray
from .vec3 import (
    NEAR_ZERO_EPSILON,
    Color,
    Point3,
    Vec3,
    degrees_to_radians,
    random_in_unit_disk,
    random_in_unit_sphere,
    random_unit_vector,
    reflect,
    refract,
)

__all__ = [
    "Ray",
    "Vec3",
    "Point3",
    "Color",
    "NEAR_ZERO_EPSILON",
    "reflect",
    "refract",
    "random_in_unit_sphere",
    "random_in_unit_disk",
    "random_unit_vector",
    "degrees_to_radians",
]
