"""Ready-made scenes and cameras.

Scenes:
    random_world: a large ground sphere covered by a grid of small random
        spheres, plus three large feature spheres (glass, diffuse, metal).
    showcase_world: the wider 60 x 60 field with nine large feature spheres
        whose diffuse and metal materials are drawn at random.
    three_spheres: a small fixed scene with one sphere of each material.

Example:
    >>> import numpy as np
    >>> from src.pathtracer.scene.presets import default_camera, random_world
    >>> world = random_world(np.random.default_rng(3))
    >>> camera = default_camera(aspect_ratio=3.0 / 2.0)
"""

from __future__ import annotations

import numpy as np

from src.pathtracer.camera.thin_lens import ThinLensCamera
from src.pathtracer.core.vec3 import Color, Point3, Vec3
from src.pathtracer.geometry.sphere import Sphere
from src.pathtracer.materials.dielectric import Dielectric
from src.pathtracer.materials.lambertian import Lambertian
from src.pathtracer.materials.metal import Metal
from src.pathtracer.scene.world import HittableList

GLASS_IOR = 1.5
SMALL_RADIUS = 0.2
FEATURE_RADIUS = 1.0

# Small spheres closer than this to the clearing point are skipped
CLEARING_POINT = Point3(4.0, 0.2, 0.0)
CLEARING_RADIUS = 0.9

# Feature sphere centers and material kinds for showcase_world.
# (-4, 1, 4) and (4, 1, -4) each hold two coincident spheres.
SHOWCASE_FEATURES = (
    (Point3(0.0, 1.0, 0.0), "glass"),
    (Point3(-4.0, 1.0, 0.0), "diffuse"),
    (Point3(4.0, 1.0, 0.0), "metal"),
    (Point3(0.0, 1.0, 4.0), "diffuse"),
    (Point3(0.0, 1.0, -4.0), "glass"),
    (Point3(4.0, 1.0, -4.0), "diffuse"),
    (Point3(-4.0, 1.0, 4.0), "metal"),
    (Point3(-4.0, 1.0, 4.0), "glass"),
    (Point3(4.0, 1.0, -4.0), "metal"),
)


def _ground_and_lattice(rng: np.random.Generator, grid: int, glass: Dielectric) -> HittableList:
    """Ground sphere plus the jittered lattice of small spheres.

    Raises:
        ValueError: If grid is negative.
    """
    if grid < 0:
        raise ValueError(f"grid must be >= 0, got {grid}")

    world = HittableList()
    world.add(Sphere(Point3(0.0, -1000.0, 0.0), 1000.0, Lambertian(Color(0.5, 0.5, 0.5))))

    for a in range(-grid, grid):
        for b in range(-grid, grid):
            choose_mat = rng.random()
            center = Point3(a + 0.9 * rng.random(), SMALL_RADIUS, b + 0.9 * rng.random())
            if (center - CLEARING_POINT).length() <= CLEARING_RADIUS:
                continue

            if choose_mat < 0.6:
                albedo = Color.random(rng) * Color.random(rng)
                material = Lambertian(albedo)
            elif choose_mat < 0.85:
                albedo = Color.random_range(rng, 0.5, 1.0)
                material = Metal(albedo, rng.uniform(0.0, 0.5))
            else:
                material = glass
            world.add(Sphere(center, SMALL_RADIUS, material))
    return world


def random_world(rng: np.random.Generator, grid: int = 11) -> HittableList:
    """Build the random sphere field.

    Small spheres are placed on a (2 * grid) x (2 * grid) lattice around the
    origin, each jittered within its cell. Material mix: 60% diffuse with
    albedo random * random, 25% metal with albedo in [0.5, 1) and fuzz in
    [0, 0.5), 15% glass. All glass spheres share one Dielectric instance.

    Args:
        rng: Random stream used for placement and material choice.
        grid: Half-extent of the lattice in world units.

    Returns:
        The populated scene.

    Raises:
        ValueError: If grid is negative.
    """
    glass = Dielectric(GLASS_IOR)
    world = _ground_and_lattice(rng, grid, glass)

    world.add(Sphere(Point3(0.0, 1.0, 0.0), FEATURE_RADIUS, glass))
    world.add(Sphere(Point3(-4.0, 1.0, 0.0), FEATURE_RADIUS, Lambertian(Color(0.4, 0.2, 0.1))))
    world.add(Sphere(Point3(4.0, 1.0, 0.0), FEATURE_RADIUS, Metal(Color(0.7, 0.6, 0.5), 0.0)))
    return world


def showcase_world(rng: np.random.Generator, grid: int = 30) -> HittableList:
    """Build the wide sphere field with nine feature spheres.

    The lattice follows random_world. The feature spheres in
    SHOWCASE_FEATURES share the lattice's glass; each diffuse one gets an
    albedo of random * random and each metal one the same albedo rule with
    fuzz in [0, 1).

    Args:
        rng: Random stream used for placement and material choice.
        grid: Half-extent of the lattice in world units.

    Returns:
        The populated scene.

    Raises:
        ValueError: If grid is negative.
    """
    glass = Dielectric(GLASS_IOR)
    world = _ground_and_lattice(rng, grid, glass)

    for center, kind in SHOWCASE_FEATURES:
        if kind == "glass":
            material = glass
        elif kind == "diffuse":
            material = Lambertian(Color.random(rng) * Color.random(rng))
        else:
            material = Metal(Color.random(rng) * Color.random(rng), rng.random())
        world.add(Sphere(center, FEATURE_RADIUS, material))
    return world


def three_spheres() -> HittableList:
    """A deterministic four-sphere scene: ground plus glass, diffuse and metal balls."""
    return HittableList(
        [
            Sphere(Point3(0.0, -100.5, -1.0), 100.0, Lambertian(Color(0.8, 0.8, 0.0))),
            Sphere(Point3(0.0, 0.0, -1.0), 0.5, Lambertian(Color(0.1, 0.2, 0.5))),
            Sphere(Point3(-1.0, 0.0, -1.0), 0.5, Dielectric(GLASS_IOR)),
            Sphere(Point3(1.0, 0.0, -1.0), 0.5, Metal(Color(0.8, 0.6, 0.2), 0.0)),
        ]
    )


def default_camera(aspect_ratio: float = 3.0 / 2.0) -> ThinLensCamera:
    """Wide establishing shot of random_world with a shallow depth of field."""
    return ThinLensCamera(
        lookfrom=Point3(13.0, 2.0, 3.0),
        lookat=Point3(0.0, 0.0, 0.0),
        vup=Vec3(0.0, 1.0, 0.0),
        vfov=20.0,
        aspect_ratio=aspect_ratio,
        aperture=0.1,
        focus_dist=10.0,
    )


def three_spheres_camera(aspect_ratio: float = 16.0 / 9.0) -> ThinLensCamera:
    """Pinhole view of three_spheres from slightly above and behind."""
    lookfrom = Point3(0.0, 0.5, 1.5)
    lookat = Point3(0.0, 0.0, -1.0)
    return ThinLensCamera(
        lookfrom=lookfrom,
        lookat=lookat,
        vup=Vec3(0.0, 1.0, 0.0),
        vfov=60.0,
        aspect_ratio=aspect_ratio,
        aperture=0.0,
        focus_dist=(lookfrom - lookat).length(),
    )


def showcase_camera(aspect_ratio: float = 5.0 / 4.0) -> ThinLensCamera:
    """Higher, steeper view of showcase_world with a shallow depth of field."""
    return ThinLensCamera(
        lookfrom=Point3(13.0, 9.0, 7.0),
        lookat=Point3(0.0, 0.0, 0.0),
        vup=Vec3(0.0, 1.0, 0.0),
        vfov=20.0,
        aspect_ratio=aspect_ratio,
        aperture=0.1,
        focus_dist=10.0,
    )
