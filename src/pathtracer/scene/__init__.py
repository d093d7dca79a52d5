"""Scene module: the surface collection and preset scenes.

Components:
    world: HittableList, the nearest-hit collection of surfaces
    presets: random_world, showcase_world, three_spheres and matching cameras
"""

from .presets import (
    default_camera,
    random_world,
    showcase_camera,
    showcase_world,
    three_spheres,
    three_spheres_camera,
)
from .world import HittableList

__all__ = [
    "HittableList",
    "random_world",
    "showcase_world",
    "three_spheres",
    "default_camera",
    "showcase_camera",
    "three_spheres_camera",
]
