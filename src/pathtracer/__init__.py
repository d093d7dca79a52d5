"""Recursive Monte Carlo path tracer for sphere scenes.

This package renders images by tracing light paths through spheres with
diffuse, metal and glass materials, with support for:
- Thin-lens camera with depth of field
- Sky-gradient lighting
- Reproducible multi-process CPU rendering
- A data-parallel Taichi backend running the same algorithm

Subpackages:
    core: Vectors, rays, the integrator and the CPU rendering loop
    geometry: Hit records and the sphere primitive
    materials: Lambertian, metal and dielectric scattering
    scene: Scene collection and ready-made scenes
    camera: Thin-lens camera
    preview: Pixel encoding and image export
    gpu: Taichi kernels (import only after ``ti.init``)
"""

__version__ = "0.1.0"
