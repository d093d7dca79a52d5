"""Materials module for surface scattering models.

Components:
    material: Base material interface and ScatterResult
    lambertian: Ideal diffuse reflection
    metal: Specular reflection with optional fuzz
    dielectric: Glass-like refraction with Schlick reflectance

Each material provides:
    - scatter(ray_in, rec, rng): ScatterResult(attenuation, scattered) or
      None when the ray is absorbed
"""

from .dielectric import Dielectric, schlick_reflectance
from .lambertian import Lambertian
from .material import Material, ScatterResult, validate_albedo
from .metal import Metal

__all__ = [
    "Material",
    "ScatterResult",
    "validate_albedo",
    "Lambertian",
    "Metal",
    "Dielectric",
    "schlick_reflectance",
]
