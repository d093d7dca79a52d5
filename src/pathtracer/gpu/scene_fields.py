"""Taichi field storage for scene geometry and the material arena.

A Python scene graph (``HittableList`` of ``Sphere``) is flattened into
GPU-friendly fields:

    - spheres: Structure-of-Arrays layout (centers, radii, material handles)
    - materials: one arena indexed by an integer handle, holding the
      material type and the union of all material parameters

Materials shared by several spheres are uploaded once and every sphere
stores the same handle.

Note: the fields are allocated at import time, so ``ti.init`` must run
before this module is imported.

Example:
    >>> import taichi as ti
    >>> ti.init(arch=ti.cpu)
    >>> from src.pathtracer.gpu.scene_fields import upload_scene
    >>> info = upload_scene(world)
    >>> info.num_spheres, info.num_materials
"""

from __future__ import annotations

import logging
from dataclasses import dataclass, field
from enum import IntEnum

import taichi as ti

from src.pathtracer.geometry.hittable import Hittable
from src.pathtracer.geometry.sphere import Sphere
from src.pathtracer.materials.dielectric import Dielectric
from src.pathtracer.materials.lambertian import Lambertian
from src.pathtracer.materials.material import Material
from src.pathtracer.materials.metal import Metal
from src.pathtracer.scene.world import HittableList

logger = logging.getLogger(__name__)


class MaterialType(IntEnum):
    """Material tags used for dispatch inside kernels."""

    LAMBERTIAN = 0
    METAL = 1
    DIELECTRIC = 2


# Maximum number of primitives and materials supported in the scene
MAX_SPHERES = 4096
MAX_MATERIALS = 4096

# Sphere storage: Structure of Arrays layout
sphere_centers = ti.Vector.field(3, dtype=ti.f32, shape=MAX_SPHERES)
sphere_radii = ti.field(dtype=ti.f32, shape=MAX_SPHERES)
sphere_material_ids = ti.field(dtype=ti.i32, shape=MAX_SPHERES)
num_spheres = ti.field(dtype=ti.i32, shape=())

# Material arena: every material uses the fields its type needs
material_types = ti.field(dtype=ti.i32, shape=MAX_MATERIALS)
material_albedos = ti.Vector.field(3, dtype=ti.f32, shape=MAX_MATERIALS)
material_fuzz = ti.field(dtype=ti.f32, shape=MAX_MATERIALS)
material_ior = ti.field(dtype=ti.f32, shape=MAX_MATERIALS)
num_materials = ti.field(dtype=ti.i32, shape=())


@dataclass
class SceneUpload:
    """Summary of an uploaded scene.

    Attributes:
        num_spheres: Number of spheres written to the sphere fields.
        num_materials: Number of distinct materials in the arena.
        material_handles: Arena handle of every uploaded material, keyed by
            ``id(material)``.
    """

    num_spheres: int = 0
    num_materials: int = 0
    material_handles: dict[int, int] = field(default_factory=dict)


def clear_scene() -> None:
    """Reset the sphere and material counts to zero.

    Field contents are not cleared; they are overwritten by the next upload.
    """
    num_spheres[None] = 0
    num_materials[None] = 0


def _add_material(material: Material) -> int:
    """Append a material to the arena and return its handle.

    Raises:
        TypeError: If the material type has no kernel implementation.
        RuntimeError: If the arena is full.
    """
    idx = num_materials[None]
    if idx >= MAX_MATERIALS:
        raise RuntimeError(f"Maximum number of materials ({MAX_MATERIALS}) exceeded")

    albedo = (0.0, 0.0, 0.0)
    fuzz = 0.0
    ior = 1.0
    if isinstance(material, Lambertian):
        mat_type = MaterialType.LAMBERTIAN
        albedo = material.albedo.to_tuple()
    elif isinstance(material, Metal):
        mat_type = MaterialType.METAL
        albedo = material.albedo.to_tuple()
        fuzz = material.fuzz
    elif isinstance(material, Dielectric):
        mat_type = MaterialType.DIELECTRIC
        ior = material.ior
    else:
        raise TypeError(f"Material {type(material).__name__} is not supported by the GPU backend")

    material_types[idx] = int(mat_type)
    material_albedos[idx] = albedo
    material_fuzz[idx] = fuzz
    material_ior[idx] = ior
    num_materials[None] = idx + 1
    return idx


def _add_sphere(sphere: Sphere, material_id: int) -> int:
    idx = num_spheres[None]
    if idx >= MAX_SPHERES:
        raise RuntimeError(f"Maximum number of spheres ({MAX_SPHERES}) exceeded")
    sphere_centers[idx] = sphere.center.to_tuple()
    sphere_radii[idx] = sphere.radius
    sphere_material_ids[idx] = material_id
    num_spheres[None] = idx + 1
    return idx


def _flatten(hittable: Hittable, out: list[Sphere]) -> None:
    if isinstance(hittable, Sphere):
        out.append(hittable)
    elif isinstance(hittable, HittableList):
        for child in hittable:
            _flatten(child, out)
    else:
        raise TypeError(f"Hittable {type(hittable).__name__} is not supported by the GPU backend")


def upload_scene(world: Hittable) -> SceneUpload:
    """Replace the GPU scene with the contents of ``world``.

    Nested HittableLists are flattened; the nearest-hit result does not
    depend on grouping.

    Args:
        world: A Sphere or a (possibly nested) HittableList of spheres.

    Returns:
        A SceneUpload describing what was written.

    Raises:
        TypeError: If the scene contains unsupported hittables or materials.
        RuntimeError: If the scene exceeds the field capacities.
    """
    spheres: list[Sphere] = []
    _flatten(world, spheres)

    clear_scene()
    upload = SceneUpload()
    for sphere in spheres:
        key = id(sphere.material)
        handle = upload.material_handles.get(key)
        if handle is None:
            handle = _add_material(sphere.material)
            upload.material_handles[key] = handle
        _add_sphere(sphere, handle)

    upload.num_spheres = int(num_spheres[None])
    upload.num_materials = int(num_materials[None])
    logger.debug(
        "Uploaded %d spheres and %d materials", upload.num_spheres, upload.num_materials
    )
    return upload
