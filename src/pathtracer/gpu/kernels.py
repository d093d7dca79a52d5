"""Taichi kernels for data-parallel path tracing.

Mirrors the CPU integrator one path per pixel per sample:

    - thin-lens camera rays (state held in fields set by setup_camera)
    - nearest-hit scan over the uploaded spheres
    - material dispatch on the arena tag (Lambertian, Metal, Dielectric)
    - iterative trace_path with a bounce budget and the sky gradient as
      the only light source

Samples are summed into a preallocated accumulation buffer indexed
[i, j] with j = 0 at the bottom of the image.

Note: fields are allocated at import time, so ``ti.init`` must run before
this module is imported.

Example:
    >>> import taichi as ti
    >>> ti.init(arch=ti.gpu, random_seed=7)
    >>> from src.pathtracer.gpu.kernels import setup_camera, setup_render_target
    >>> setup_camera(camera)
    >>> setup_render_target(400, 225)
"""

import taichi as ti
import taichi.math as tm

from src.pathtracer.camera.thin_lens import ThinLensCamera
from src.pathtracer.gpu.scene_fields import (
    MaterialType,
    material_albedos,
    material_fuzz,
    material_ior,
    material_types,
    num_spheres,
    sphere_centers,
    sphere_material_ids,
    sphere_radii,
)

vec3 = tm.vec3

# =============================================================================
# Rendering Constants
# =============================================================================

# Lower bound on hit distance to avoid re-hitting the surface a ray leaves from
T_MIN = 0.001

# float32 stand-in for an unbounded ray
T_MAX = 1e10

NEAR_ZERO_EPSILON = 1e-8

SKY_COLOR = vec3(0.5, 0.7, 1.0)

# Rejection sampling iteration cap
MAX_REJECTION_TRIES = 100


@ti.dataclass
class HitRecord:
    """Nearest-hit result of a scene query.

    Attributes:
        hit: 1 if something was hit, 0 on a miss.
        t: Ray parameter of the hit.
        point: Hit position.
        normal: Unit normal facing against the incoming ray.
        front_face: 1 if the ray arrived from outside the surface.
        material_id: Arena handle of the surface material, -1 on a miss.
    """

    hit: ti.i32
    t: ti.f32
    point: vec3
    normal: vec3
    front_face: ti.i32
    material_id: ti.i32


# =============================================================================
# Vector Helpers and Sampling
# =============================================================================


@ti.func
def reflect(v: vec3, n: vec3) -> vec3:
    """Mirror v about the unit normal n."""
    return v - 2.0 * tm.dot(v, n) * n


@ti.func
def refract(uv: vec3, n: vec3, etai_over_etat: ti.f32) -> vec3:
    """Bend the unit direction uv through a surface with unit normal n."""
    cos_theta = tm.min(-tm.dot(uv, n), 1.0)
    r_out_perp = etai_over_etat * (uv + cos_theta * n)
    r_out_parallel = -tm.sqrt(ti.abs(1.0 - tm.dot(r_out_perp, r_out_perp))) * n
    return r_out_perp + r_out_parallel


@ti.func
def schlick(cosine: ti.f32, ref_idx: ti.f32) -> ti.f32:
    r0 = (1.0 - ref_idx) / (1.0 + ref_idx)
    r0 = r0 * r0
    return r0 + (1.0 - r0) * (1.0 - cosine) ** 5


@ti.func
def near_zero(v: vec3) -> ti.i32:
    result = 0
    if (
        ti.abs(v.x) < NEAR_ZERO_EPSILON
        and ti.abs(v.y) < NEAR_ZERO_EPSILON
        and ti.abs(v.z) < NEAR_ZERO_EPSILON
    ):
        result = 1
    return result


@ti.func
def random_in_unit_sphere() -> vec3:
    """Uniform point strictly inside the unit ball, by rejection."""
    p = vec3(0.0, 0.0, 0.0)
    found = False
    for _ in range(MAX_REJECTION_TRIES):
        if not found:
            p = vec3(
                ti.random(ti.f32) * 2.0 - 1.0,
                ti.random(ti.f32) * 2.0 - 1.0,
                ti.random(ti.f32) * 2.0 - 1.0,
            )
            if tm.dot(p, p) < 1.0:
                found = True
    return p


@ti.func
def random_unit_vector() -> vec3:
    return tm.normalize(random_in_unit_sphere())


@ti.func
def random_in_unit_disk() -> vec3:
    """Uniform point strictly inside the unit disk in the z = 0 plane."""
    p = vec3(0.0, 0.0, 0.0)
    found = False
    for _ in range(MAX_REJECTION_TRIES):
        if not found:
            p = vec3(ti.random(ti.f32) * 2.0 - 1.0, ti.random(ti.f32) * 2.0 - 1.0, 0.0)
            if tm.dot(p, p) < 1.0:
                found = True
    return p


# =============================================================================
# Camera State
# =============================================================================

_camera_origin = ti.Vector.field(3, dtype=ti.f32, shape=())
_lower_left_corner = ti.Vector.field(3, dtype=ti.f32, shape=())
_horizontal = ti.Vector.field(3, dtype=ti.f32, shape=())
_vertical = ti.Vector.field(3, dtype=ti.f32, shape=())
_camera_u = ti.Vector.field(3, dtype=ti.f32, shape=())
_camera_v = ti.Vector.field(3, dtype=ti.f32, shape=())
_lens_radius = ti.field(dtype=ti.f32, shape=())


def setup_camera(camera: ThinLensCamera) -> None:
    """Copy a camera's derived frame into the camera fields.

    Args:
        camera: A validated thin-lens camera.
    """
    _camera_origin[None] = camera.origin.to_tuple()
    _lower_left_corner[None] = camera.lower_left_corner.to_tuple()
    _horizontal[None] = camera.horizontal.to_tuple()
    _vertical[None] = camera.vertical.to_tuple()
    _camera_u[None] = camera.u.to_tuple()
    _camera_v[None] = camera.v.to_tuple()
    _lens_radius[None] = camera.lens_radius


@ti.func
def get_ray(s: ti.f32, t: ti.f32):
    """Primary ray through viewport coordinates (s, t), both in [0, 1].

    Returns:
        Tuple of (origin, direction). The origin is jittered across the
        lens disk; the direction is not normalized.
    """
    rd = _lens_radius[None] * random_in_unit_disk()
    offset = _camera_u[None] * rd.x + _camera_v[None] * rd.y
    origin = _camera_origin[None] + offset
    direction = (
        _lower_left_corner[None]
        + s * _horizontal[None]
        + t * _vertical[None]
        - _camera_origin[None]
        - offset
    )
    return origin, direction


# =============================================================================
# Intersection
# =============================================================================


@ti.func
def _make_miss_record() -> HitRecord:
    return HitRecord(
        hit=0,
        t=0.0,
        point=vec3(0.0, 0.0, 0.0),
        normal=vec3(0.0, 0.0, 0.0),
        front_face=0,
        material_id=-1,
    )


@ti.func
def hit_sphere(
    origin: vec3,
    direction: vec3,
    center: vec3,
    radius: ti.f32,
    material_id: ti.i32,
    t_min: ti.f32,
    t_max: ti.f32,
) -> HitRecord:
    """Ray-sphere test accepting roots in (t_min, t_max].

    The nearer root is preferred; the farther one is used only when the
    nearer falls outside the interval.
    """
    oc = origin - center
    a = tm.dot(direction, direction)
    half_b = tm.dot(oc, direction)
    c = tm.dot(oc, oc) - radius * radius
    discriminant = half_b * half_b - a * c

    result = _make_miss_record()

    if discriminant >= 0.0:
        sqrtd = ti.sqrt(discriminant)
        root = (-half_b - sqrtd) / a
        if root <= t_min or root > t_max:
            root = (-half_b + sqrtd) / a

        if root > t_min and root <= t_max:
            point = origin + root * direction
            outward_normal = (point - center) / radius
            normal = outward_normal
            front_face = 1
            if tm.dot(direction, outward_normal) >= 0.0:
                normal = -outward_normal
                front_face = 0
            result = HitRecord(
                hit=1,
                t=root,
                point=point,
                normal=normal,
                front_face=front_face,
                material_id=material_id,
            )

    return result


@ti.func
def intersect_scene(origin: vec3, direction: vec3, t_min: ti.f32, t_max: ti.f32) -> HitRecord:
    """Nearest hit over every uploaded sphere."""
    closest_t = t_max
    result = _make_miss_record()

    for i in range(num_spheres[None]):
        rec = hit_sphere(
            origin,
            direction,
            sphere_centers[i],
            sphere_radii[i],
            sphere_material_ids[i],
            t_min,
            closest_t,
        )
        if rec.hit == 1:
            closest_t = rec.t
            result = rec

    return result


# =============================================================================
# Material Dispatch
# =============================================================================


@ti.func
def scatter_material(direction: vec3, rec: HitRecord):
    """Scatter an incoming ray off the surface described by rec.

    Returns:
        Tuple of (scattered_direction, attenuation, did_scatter), where
        did_scatter is 0 if the ray was absorbed.
    """
    material_id = rec.material_id
    mat_type = material_types[material_id]
    normal = rec.normal

    scattered = vec3(0.0, 0.0, 0.0)
    attenuation = vec3(0.0, 0.0, 0.0)
    did_scatter = 0

    if mat_type == int(MaterialType.LAMBERTIAN):
        scattered = normal + random_unit_vector()
        if near_zero(scattered) == 1:
            scattered = normal
        attenuation = material_albedos[material_id]
        did_scatter = 1

    elif mat_type == int(MaterialType.METAL):
        reflected = reflect(tm.normalize(direction), normal)
        scattered = reflected + material_fuzz[material_id] * random_in_unit_sphere()
        attenuation = material_albedos[material_id]
        # Fuzz can push the reflection below the surface
        if tm.dot(scattered, normal) > 0.0:
            did_scatter = 1

    elif mat_type == int(MaterialType.DIELECTRIC):
        ior = material_ior[material_id]
        refraction_ratio = ior
        if rec.front_face == 1:
            refraction_ratio = 1.0 / ior

        unit_direction = tm.normalize(direction)
        cos_theta = tm.min(-tm.dot(unit_direction, normal), 1.0)
        sin_theta = tm.sqrt(tm.max(0.0, 1.0 - cos_theta * cos_theta))
        cannot_refract = refraction_ratio * sin_theta > 1.0

        if cannot_refract or schlick(cos_theta, refraction_ratio) > ti.random(ti.f32):
            scattered = reflect(unit_direction, normal)
        else:
            scattered = refract(unit_direction, normal, refraction_ratio)
        attenuation = vec3(1.0, 1.0, 1.0)
        did_scatter = 1

    return scattered, attenuation, did_scatter


# =============================================================================
# Path Tracing Core
# =============================================================================


@ti.func
def background(direction: vec3) -> vec3:
    unit_direction = tm.normalize(direction)
    t = 0.5 * (unit_direction.y + 1.0)
    return (1.0 - t) * vec3(1.0, 1.0, 1.0) + t * SKY_COLOR


@ti.func
def trace_path(origin: vec3, direction: vec3, max_depth: ti.i32) -> vec3:
    """Radiance carried back along a ray.

    Escaping rays return the sky scaled by the accumulated attenuation.
    Absorbed rays and paths that use up max_depth surface interactions
    return black.
    """
    ray_origin = origin
    ray_direction = direction
    color = vec3(0.0, 0.0, 0.0)
    throughput = vec3(1.0, 1.0, 1.0)

    # Active flag for path continuation (no break inside ti.func loops)
    active = 1

    for _ in range(max_depth):
        if active == 1:
            rec = intersect_scene(ray_origin, ray_direction, T_MIN, T_MAX)
            if rec.hit == 0:
                color = throughput * background(ray_direction)
                active = 0
            else:
                scattered, attenuation, did_scatter = scatter_material(ray_direction, rec)
                if did_scatter == 0:
                    active = 0
                else:
                    throughput *= attenuation
                    ray_origin = rec.point
                    ray_direction = scattered

    return color


# =============================================================================
# Render Target
# =============================================================================

# Preallocated to avoid kernel recompilation when the image size changes
MAX_IMAGE_WIDTH = 2048
MAX_IMAGE_HEIGHT = 2048

_image_width = ti.field(dtype=ti.i32, shape=())
_image_height = ti.field(dtype=ti.i32, shape=())

# Summed radiance per pixel, indexed [i, j] with j = 0 at the bottom
_color_sum = ti.Vector.field(3, dtype=ti.f32, shape=(MAX_IMAGE_WIDTH, MAX_IMAGE_HEIGHT))
_samples_taken = ti.field(dtype=ti.i32, shape=())


def setup_render_target(width: int, height: int) -> None:
    """Set the active image size and clear the accumulation buffer.

    Raises:
        ValueError: If the size is below 2x2 or above the preallocated maximum.
    """
    if width < 2 or height < 2:
        raise ValueError(f"Image must be at least 2x2 pixels, got {width}x{height}")
    if width > MAX_IMAGE_WIDTH or height > MAX_IMAGE_HEIGHT:
        raise ValueError(
            f"Image dimensions ({width}x{height}) exceed maximum supported "
            f"({MAX_IMAGE_WIDTH}x{MAX_IMAGE_HEIGHT})"
        )
    _image_width[None] = width
    _image_height[None] = height
    clear_render_target()


def clear_render_target() -> None:
    _color_sum.fill(0.0)
    _samples_taken[None] = 0


def get_samples_taken() -> int:
    return int(_samples_taken[None])


def get_color_sum() -> "ti.MatrixField":
    """The full preallocated accumulation buffer; slice to the active size."""
    return _color_sum


@ti.kernel
def _render_one_spp(width: ti.i32, height: ti.i32, max_depth: ti.i32):
    """Trace one jittered path through every pixel and add it to the sums."""
    for i, j in ti.ndrange(width, height):
        s = (ti.cast(i, ti.f32) + ti.random(ti.f32)) / ti.cast(width - 1, ti.f32)
        t = (ti.cast(j, ti.f32) + ti.random(ti.f32)) / ti.cast(height - 1, ti.f32)
        origin, direction = get_ray(s, t)
        _color_sum[i, j] += trace_path(origin, direction, max_depth)


@ti.kernel
def _trace_single(origin: vec3, direction: vec3, max_depth: ti.i32) -> vec3:
    return trace_path(origin, direction, max_depth)


def render_samples(num_samples: int, max_depth: int) -> None:
    """Add num_samples samples per pixel to the accumulation buffer."""
    width = int(_image_width[None])
    height = int(_image_height[None])
    for _ in range(num_samples):
        _render_one_spp(width, height, max_depth)
        _samples_taken[None] += 1


def trace_ray(
    origin: tuple[float, float, float],
    direction: tuple[float, float, float],
    max_depth: int,
) -> tuple[float, float, float]:
    """Trace a single ray from Python, for probing and tests."""
    color = _trace_single(vec3(*origin), vec3(*direction), max_depth)
    return (float(color[0]), float(color[1]), float(color[2]))
