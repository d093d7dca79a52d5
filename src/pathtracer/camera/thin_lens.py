"""Thin-lens camera model with depth of field.

The camera builds an orthonormal basis (u, v, w) from the view parameters:
- w: points from lookat toward lookfrom (opposite view direction)
- u: points right in the image plane
- v: points up in the image plane

The virtual viewport sits on the focus plane, ``focus_dist`` in front of the
lens. Rays leave from a random point on a lens disk of radius
``aperture / 2`` and pass through the viewport point for (s, t), so only
objects on the focus plane appear sharp. An aperture of 0 degenerates to a
pinhole camera.

Example:
    >>> from src.pathtracer.camera.thin_lens import ThinLensCamera
    >>> camera = ThinLensCamera(
    ...     lookfrom=Point3(13.0, 2.0, 3.0),
    ...     lookat=Point3(0.0, 0.0, 0.0),
    ...     vup=Vec3(0.0, 1.0, 0.0),
    ...     vfov=20.0,
    ...     aspect_ratio=3.0 / 2.0,
    ...     aperture=0.1,
    ...     focus_dist=10.0,
    ... )
    >>> ray = camera.get_ray(0.5, 0.5, rng)  # Ray through image center
"""

from __future__ import annotations

import math
from dataclasses import dataclass, field

import numpy as np

from src.pathtracer.core.ray import Ray
from src.pathtracer.core.vec3 import Point3, Vec3, degrees_to_radians, random_in_unit_disk


@dataclass(frozen=True)
class ThinLensCamera:
    """Immutable thin-lens camera.

    Attributes:
        lookfrom: Camera position in world space.
        lookat: Point the camera is looking at.
        vup: Up direction for camera orientation (typically (0, 1, 0)).
        vfov: Vertical field of view in degrees, in (0, 180).
        aspect_ratio: Width divided by height of the output image.
        aperture: Lens diameter. 0 disables depth of field.
        focus_dist: Distance from the lens to the plane in perfect focus.

    The remaining attributes are derived in ``__post_init__``: ``origin``,
    ``lower_left_corner``, ``horizontal``, ``vertical``, the basis vectors
    ``u``, ``v``, ``w`` and ``lens_radius``.
    """

    lookfrom: Point3
    lookat: Point3
    vup: Vec3
    vfov: float
    aspect_ratio: float
    aperture: float = 0.0
    focus_dist: float = 1.0

    origin: Point3 = field(init=False, repr=False)
    lower_left_corner: Point3 = field(init=False, repr=False)
    horizontal: Vec3 = field(init=False, repr=False)
    vertical: Vec3 = field(init=False, repr=False)
    u: Vec3 = field(init=False, repr=False)
    v: Vec3 = field(init=False, repr=False)
    w: Vec3 = field(init=False, repr=False)
    lens_radius: float = field(init=False, repr=False)

    def __post_init__(self) -> None:
        """Validate the parameters and derive the viewport geometry.

        Raises:
            ValueError: If any parameter would produce a degenerate camera.
        """
        for name in ("vfov", "aspect_ratio", "aperture", "focus_dist"):
            object.__setattr__(self, name, float(getattr(self, name)))

        if not 0.0 < self.vfov < 180.0:
            raise ValueError(f"Vertical field of view must be in (0, 180) degrees, got {self.vfov}")
        if not math.isfinite(self.aspect_ratio) or self.aspect_ratio <= 0.0:
            raise ValueError(f"Aspect ratio must be positive, got {self.aspect_ratio}")
        if not math.isfinite(self.aperture) or self.aperture < 0.0:
            raise ValueError(f"Aperture must be non-negative, got {self.aperture}")
        if not math.isfinite(self.focus_dist) or self.focus_dist <= 0.0:
            raise ValueError(f"Focus distance must be positive, got {self.focus_dist}")

        view = self.lookfrom - self.lookat
        if view.near_zero():
            raise ValueError("lookfrom and lookat must be distinct points")
        w = view.unit_vector()
        right = self.vup.cross(w)
        if right.near_zero():
            raise ValueError("vup must not be parallel to the viewing direction")
        u = right.unit_vector()
        v = w.cross(u)

        h = math.tan(degrees_to_radians(self.vfov) / 2.0)
        viewport_height = 2.0 * h
        viewport_width = self.aspect_ratio * viewport_height

        horizontal = self.focus_dist * viewport_width * u
        vertical = self.focus_dist * viewport_height * v
        lower_left = self.lookfrom - horizontal / 2.0 - vertical / 2.0 - self.focus_dist * w

        # Frozen dataclass: derived fields go through object.__setattr__
        object.__setattr__(self, "origin", self.lookfrom)
        object.__setattr__(self, "u", u)
        object.__setattr__(self, "v", v)
        object.__setattr__(self, "w", w)
        object.__setattr__(self, "horizontal", horizontal)
        object.__setattr__(self, "vertical", vertical)
        object.__setattr__(self, "lower_left_corner", lower_left)
        object.__setattr__(self, "lens_radius", self.aperture / 2.0)

    def get_ray(self, s: float, t: float, rng: np.random.Generator) -> Ray:
        """Generate a ray through normalized viewport coordinates (s, t).

        Args:
            s: Horizontal coordinate, 0 = left edge, 1 = right edge.
            t: Vertical coordinate, 0 = bottom edge, 1 = top edge.
            rng: Source for the lens sample.

        Returns:
            A ray from a random point on the lens through the focus-plane
            point for (s, t). The direction is not normalized.
        """
        rd = self.lens_radius * random_in_unit_disk(rng)
        offset = self.u * rd.x + self.v * rd.y
        origin = self.origin + offset
        direction = (
            self.lower_left_corner + s * self.horizontal + t * self.vertical - self.origin - offset
        )
        return Ray(origin, direction)
