"""Progressive taichi renderer for the sphere scenes.

GpuRenderer wraps the kernels in ``src.pathtracer.gpu.kernels``: it uploads
a scene and camera, accumulates samples in batches, and hands back the
summed radiance in the same layout as the CPU ``Renderer`` so the same
encoder can be used for both.

Randomness comes from taichi's generator; pass ``random_seed`` to
``ti.init`` for repeatable renders.

Example:
    >>> import taichi as ti
    >>> ti.init(arch=ti.gpu, random_seed=1)
    >>> from src.pathtracer.gpu.renderer import GpuRenderer
    >>> renderer = GpuRenderer(400, 225, max_depth=50)
    >>> renderer.load(world, camera)
    >>> renderer.render(100, batch_size=10)
    >>> summed = renderer.summed_image()  # shape (225, 400, 3)
"""

import logging
import time
from collections.abc import Callable, Generator

import numpy as np
import numpy.typing as npt

from src.pathtracer.camera.thin_lens import ThinLensCamera
from src.pathtracer.core.vec3 import Color, Vec3
from src.pathtracer.geometry.hittable import Hittable
from src.pathtracer.gpu.kernels import (
    clear_render_target,
    get_color_sum,
    get_samples_taken,
    render_samples,
    setup_camera,
    setup_render_target,
    trace_ray,
)
from src.pathtracer.gpu.scene_fields import upload_scene

logger = logging.getLogger(__name__)

# Callback receives (current_samples, total_target_samples)
ProgressCallback = Callable[[int, int], None]


class GpuRenderer:
    """Accumulates path-traced samples on the taichi backend.

    Attributes:
        max_depth: Bounce budget for every path.
    """

    def __init__(self, width: int, height: int, max_depth: int = 50) -> None:
        """Initialize the render target.

        Args:
            width: Image width in pixels (2 to 2048).
            height: Image height in pixels (2 to 2048).
            max_depth: Bounce budget for every path.

        Raises:
            ValueError: If the size or depth is out of range.
        """
        if max_depth < 1:
            raise ValueError(f"max_depth must be >= 1, got {max_depth}")
        setup_render_target(width, height)
        self._width = width
        self._height = height
        self.max_depth = max_depth
        self._loaded = False

    @property
    def width(self) -> int:
        return self._width

    @property
    def height(self) -> int:
        return self._height

    @property
    def sample_count(self) -> int:
        """Number of samples accumulated per pixel since the last reset."""
        return get_samples_taken()

    def load(self, world: Hittable, camera: ThinLensCamera) -> None:
        """Upload a scene and camera and clear the accumulated samples.

        Raises:
            TypeError: If the scene contains objects the kernels cannot trace.
            RuntimeError: If the scene exceeds the field capacities.
        """
        upload = upload_scene(world)
        setup_camera(camera)
        self.reset()
        self._loaded = True
        logger.info(
            "Loaded %d spheres and %d materials", upload.num_spheres, upload.num_materials
        )

    def reset(self) -> None:
        """Discard accumulated samples, keeping scene and image size."""
        clear_render_target()

    def _check_loaded(self) -> None:
        if not self._loaded:
            raise RuntimeError("No scene loaded. Call load() first.")

    def render(
        self,
        num_samples: int = 1,
        batch_size: int = 1,
        callback: ProgressCallback | None = None,
    ) -> None:
        """Add samples to the accumulated image.

        Args:
            num_samples: Samples per pixel to add.
            batch_size: Samples rendered between callbacks.
            callback: Optional function receiving (current_samples,
                target_samples) after each batch.

        Raises:
            RuntimeError: If no scene has been loaded.
        """
        for current, target in self.render_progressive(num_samples, batch_size):
            if callback is not None:
                callback(current, target)

    def render_progressive(
        self,
        num_samples: int = 1,
        batch_size: int = 1,
    ) -> Generator[tuple[int, int], None, None]:
        """Add samples in batches, yielding progress after each batch.

        Yields:
            Tuple of (current_samples, target_samples).

        Raises:
            RuntimeError: If no scene has been loaded.
            ValueError: If batch_size is not positive.
        """
        self._check_loaded()
        if batch_size < 1:
            raise ValueError(f"batch_size must be >= 1, got {batch_size}")
        if num_samples <= 0:
            return

        target_samples = self.sample_count + num_samples
        start_time = time.perf_counter()
        logger.info(
            "Rendering %dx%d on taichi, %d samples per pixel, max depth %d",
            self._width,
            self._height,
            num_samples,
            self.max_depth,
        )

        remaining = num_samples
        while remaining > 0:
            batch = min(batch_size, remaining)
            render_samples(batch, self.max_depth)
            remaining -= batch
            logger.debug("Samples: %d/%d", self.sample_count, target_samples)
            yield (self.sample_count, target_samples)

        logger.info("Render finished in %.2fs", time.perf_counter() - start_time)

    def summed_image(self) -> npt.NDArray[np.float64]:
        """Summed radiance per pixel.

        Returns:
            Array of shape (height, width, 3), top row first, holding the sum
            of sample_count radiance estimates per pixel.
        """
        sums = get_color_sum().to_numpy()[: self._width, : self._height]
        # Buffer is [i, j] with j = 0 at the bottom
        return np.ascontiguousarray(sums.transpose(1, 0, 2)[::-1], dtype=np.float64)

    def trace_single(self, origin: Vec3, direction: Vec3) -> Color:
        """Trace one ray through the loaded scene and return its radiance.

        Raises:
            RuntimeError: If no scene has been loaded.
        """
        self._check_loaded()
        return Color(*trace_ray(origin.to_tuple(), direction.to_tuple(), self.max_depth))

    def __repr__(self) -> str:
        return (
            f"GpuRenderer(width={self._width}, height={self._height}, "
            f"samples={self.sample_count})"
        )
