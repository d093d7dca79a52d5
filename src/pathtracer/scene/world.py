"""Scene-level nearest-hit query over a list of surfaces.

The world is an ordered collection of hittables. A query scans every child
and narrows ``t_max`` to the closest hit found so far, so only the globally
nearest surface along the ray is reported. Insertion order has no effect on
which hit is returned.

Example:
    >>> from src.pathtracer.scene.world import HittableList
    >>> world = HittableList()
    >>> world.add(Sphere(Point3(0.0, -100.5, -1.0), 100.0, ground))
    >>> world.add(Sphere(Point3(0.0, 0.0, -1.0), 0.5, center))
    >>> rec = world.hit(ray, 0.001, math.inf)
"""

from __future__ import annotations

from collections.abc import Iterable, Iterator

from src.pathtracer.core.ray import Ray
from src.pathtracer.geometry.hittable import HitRecord, Hittable


class HittableList(Hittable):
    """An ordered collection of hittables, itself hittable.

    Attributes:
        objects: The child surfaces, in insertion order.
    """

    def __init__(self, objects: Iterable[Hittable] = ()) -> None:
        self.objects: list[Hittable] = []
        self.extend(objects)

    def add(self, obj: Hittable) -> None:
        """Append a surface to the collection.

        Raises:
            TypeError: If obj is not a Hittable.
        """
        if not isinstance(obj, Hittable):
            raise TypeError(f"Expected a Hittable, got {type(obj).__name__}")
        self.objects.append(obj)

    def extend(self, objects: Iterable[Hittable]) -> None:
        """Append several surfaces."""
        for obj in objects:
            self.add(obj)

    def clear(self) -> None:
        """Remove every surface."""
        self.objects.clear()

    def __len__(self) -> int:
        return len(self.objects)

    def __iter__(self) -> Iterator[Hittable]:
        return iter(self.objects)

    def hit(self, ray: Ray, t_min: float, t_max: float) -> HitRecord | None:
        closest_so_far = t_max
        result = None
        for obj in self.objects:
            rec = obj.hit(ray, t_min, closest_so_far)
            if rec is not None:
                closest_so_far = rec.t
                result = rec
        return result
