"""Hit records and the abstract hittable surface interface.

Every surface that can be intersected by a ray implements ``Hittable.hit``.
Implementations return the *nearest* intersection whose ray parameter lies
in the half-open interval (t_min, t_max], or None if there is none.

Example:
    >>> import math
    >>> from src.pathtracer.core import Ray, Vec3
    >>> from src.pathtracer.geometry import Sphere
    >>> from src.pathtracer.materials import Lambertian
    >>> sphere = Sphere(Vec3(0.0, 0.0, -1.0), 0.5, Lambertian(Vec3(0.5, 0.5, 0.5)))
    >>> rec = sphere.hit(Ray(Vec3(0.0, 0.0, 0.0), Vec3(0.0, 0.0, -1.0)), 0.001, math.inf)
    >>> rec.t
    0.5
"""

from __future__ import annotations

from abc import ABC, abstractmethod
from dataclasses import dataclass
from typing import TYPE_CHECKING

from src.pathtracer.core.ray import Ray
from src.pathtracer.core.vec3 import Point3, Vec3

if TYPE_CHECKING:
    from src.pathtracer.materials.material import Material


@dataclass(slots=True)
class HitRecord:
    """Record of a ray-surface intersection.

    Attributes:
        point: The 3D point where the ray met the surface.
        normal: The unit surface normal at the point, always oriented against
            the incoming ray (normal . ray.direction <= 0).
        material: The material of the surface that was hit. Several surfaces
            may share one material instance.
        t: The ray parameter at the intersection.
        front_face: True if the ray hit the surface from its outward side.
    """

    point: Point3
    normal: Vec3
    material: Material
    t: float
    front_face: bool

    @classmethod
    def from_outward_normal(
        cls,
        ray: Ray,
        t: float,
        point: Point3,
        outward_normal: Vec3,
        material: Material,
    ) -> HitRecord:
        """Build a record, orienting the normal against the incoming ray.

        Args:
            ray: The ray that produced the hit.
            t: The ray parameter at the hit.
            point: The hit point.
            outward_normal: The unit normal pointing out of the surface.
            material: The material at the hit point.

        Returns:
            A HitRecord whose front_face is True when the ray arrives from
            outside, and whose normal is flipped when it arrives from inside.
        """
        front_face = ray.direction.dot(outward_normal) < 0.0
        normal = outward_normal if front_face else -outward_normal
        return cls(point=point, normal=normal, material=material, t=t, front_face=front_face)


class Hittable(ABC):
    """A surface (or group of surfaces) that can be intersected by a ray."""

    @abstractmethod
    def hit(self, ray: Ray, t_min: float, t_max: float) -> HitRecord | None:
        """Find the nearest intersection with t in (t_min, t_max].

        Args:
            ray: The ray to test.
            t_min: Exclusive lower bound on the ray parameter.
            t_max: Inclusive upper bound on the ray parameter.

        Returns:
            The nearest HitRecord in range, or None on a miss.
        """
