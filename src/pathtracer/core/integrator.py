"""Path tracing integrator for Monte Carlo light transport.

``ray_color`` estimates the radiance arriving along a ray. It follows the
ray through the scene, letting each surface's material scatter it and
multiplying the per-bounce attenuations together, until one of:

    - the ray escapes: the sky gradient is returned, scaled by the
      accumulated attenuation (the sky is the only light source);
    - a material absorbs the ray: black;
    - the bounce budget ``depth`` runs out: black.

This is the recursive definition

    color(ray, depth) = attenuation * color(scattered, depth - 1)

unrolled into a loop over a running throughput, so large depth budgets
cannot exhaust the interpreter stack.

Example:
    >>> import numpy as np
    >>> from src.pathtracer.core.integrator import ray_color
    >>> rng = np.random.default_rng(0)
    >>> color = ray_color(camera.get_ray(0.5, 0.5, rng), world, 50, rng)
"""

from __future__ import annotations

import math

import numpy as np

from src.pathtracer.core.ray import Ray
from src.pathtracer.core.vec3 import Color
from src.pathtracer.geometry.hittable import Hittable

# =============================================================================
# Rendering Constants
# =============================================================================

# Lower bound on hit distance to avoid re-hitting the surface a ray leaves from
T_MIN = 0.001
T_MAX = math.inf

BLACK = Color(0.0, 0.0, 0.0)
WHITE = Color(1.0, 1.0, 1.0)
SKY_COLOR = Color(0.5, 0.7, 1.0)


def background(ray: Ray) -> Color:
    """Vertical white-to-blue sky gradient seen by rays that escape the scene.

    Args:
        ray: The escaping ray. Its direction must be non-zero.

    Returns:
        White for a ray pointing straight down, SKY_COLOR straight up, and
        a linear blend on the unit direction's y component in between.
    """
    unit_direction = ray.direction.unit_vector()
    t = 0.5 * (unit_direction.y + 1.0)
    return (1.0 - t) * WHITE + t * SKY_COLOR


def ray_color(
    ray: Ray,
    world: Hittable,
    depth: int,
    rng: np.random.Generator,
) -> Color:
    """Estimate the radiance carried back along a ray.

    Args:
        ray: The ray to trace.
        world: The scene to intersect.
        depth: Maximum number of surface interactions to follow. A depth of
            0 returns black immediately.
        rng: Source of randomness for material scattering.

    Returns:
        The radiance estimate (RGB, each component >= 0).
    """
    throughput = WHITE
    for _ in range(depth):
        rec = world.hit(ray, T_MIN, T_MAX)
        if rec is None:
            return throughput * background(ray)

        scatter = rec.material.scatter(ray, rec, rng)
        if scatter is None:
            # Absorbed
            return BLACK

        throughput = throughput * scatter.attenuation
        ray = scatter.scattered

    return BLACK
