"""Ray data structure shared by the camera, geometry and materials.

Example:
    >>> from src.pathtracer.core.ray import Ray
    >>> from src.pathtracer.core.vec3 import Vec3
    >>> ray = Ray(origin=Vec3(0.0, 0.0, 0.0), direction=Vec3(0.0, 0.0, -1.0))
    >>> ray.at(5.0)  # Point 5 units along the ray
    Vec3(0.0, 0.0, -5.0)
"""

from dataclasses import dataclass

from src.pathtracer.core.vec3 import Point3, Vec3


@dataclass(frozen=True, slots=True)
class Ray:
    """A ray with an origin point and direction vector.

    Attributes:
        origin: The starting point of the ray.
        direction: The direction vector of the ray. It is not required to be
            normalized; camera rays, for instance, are not.
    """

    origin: Point3
    direction: Vec3

    def at(self, t: float) -> Point3:
        """Compute the point along the ray at parameter t.

        Args:
            t: The parameter value. Positive values are in front of the origin.

        Returns:
            The point origin + t * direction.
        """
        return self.origin + t * self.direction
