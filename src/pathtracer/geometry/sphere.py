"""Sphere primitive with ray-sphere intersection.

The ray-sphere intersection is found by solving:
    |origin + t * direction - center|^2 = radius^2

Expanding gives the quadratic a*t^2 + 2*half_b*t + c = 0 with
    a = dot(direction, direction)
    half_b = dot(oc, direction)
    c = dot(oc, oc) - radius^2
    oc = origin - center

The smaller root is tried first, then the larger one, so a ray starting
inside the sphere reports the exit point.

Example:
    >>> from src.pathtracer.core.vec3 import Point3, Vec3
    >>> from src.pathtracer.geometry.sphere import Sphere
    >>> from src.pathtracer.materials import Metal
    >>> ball = Sphere(Point3(0.0, 1.0, 0.0), 1.0, Metal(Vec3(0.7, 0.6, 0.5), fuzz=0.0))
"""

from __future__ import annotations

import math

from src.pathtracer.core.ray import Ray
from src.pathtracer.core.vec3 import Point3
from src.pathtracer.geometry.hittable import HitRecord, Hittable
from src.pathtracer.materials.material import Material


class Sphere(Hittable):
    """A sphere defined by center point, radius and material.

    Attributes:
        center: The center point of the sphere.
        radius: The radius of the sphere (positive, finite).
        material: The material shared by every point on the surface.
    """

    def __init__(self, center: Point3, radius: float, material: Material) -> None:
        """Create a sphere.

        Raises:
            ValueError: If radius is not a finite positive number.
            TypeError: If material is not a Material.
        """
        if not math.isfinite(radius) or radius <= 0.0:
            raise ValueError(f"Sphere radius must be a finite positive number, got {radius}")
        if not isinstance(material, Material):
            raise TypeError(f"Sphere material must be a Material, got {type(material).__name__}")
        self.center = center
        self.radius = float(radius)
        self.material = material

    def hit(self, ray: Ray, t_min: float, t_max: float) -> HitRecord | None:
        oc = ray.origin - self.center
        a = ray.direction.length_squared()
        half_b = oc.dot(ray.direction)
        c = oc.length_squared() - self.radius * self.radius

        discriminant = half_b * half_b - a * c
        if discriminant < 0.0:
            return None
        sqrtd = math.sqrt(discriminant)

        # Nearest root in (t_min, t_max]
        root = (-half_b - sqrtd) / a
        if root <= t_min or root > t_max:
            root = (-half_b + sqrtd) / a
            if root <= t_min or root > t_max:
                return None

        point = ray.at(root)
        outward_normal = (point - self.center) / self.radius
        return HitRecord.from_outward_normal(ray, root, point, outward_normal, self.material)

    def __repr__(self) -> str:
        return f"Sphere(center={self.center!r}, radius={self.radius}, material={self.material!r})"
