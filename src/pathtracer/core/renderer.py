"""CPU rendering loop: per pixel, per sample evaluation of the integrator.

The renderer produces the *summed* radiance of every pixel; dividing by the
sample count, gamma correction and quantization are left to the encoder in
``src.pathtracer.preview.export``.

Each scanline draws its random numbers from its own generator, spawned from
``numpy.random.SeedSequence(seed)``. The image is therefore identical
whether scanlines are rendered serially or spread over worker processes,
and a fixed seed reproduces a render exactly.

Example:
    >>> from src.pathtracer.core.renderer import Renderer, RenderSettings
    >>> settings = RenderSettings(image_width=200, aspect_ratio=16 / 9,
    ...                           samples_per_pixel=20, max_depth=20, seed=1)
    >>> renderer = Renderer(world, camera, settings)
    >>> summed = renderer.render()  # shape (112, 200, 3)
"""

from __future__ import annotations

import logging
import os
import time
from collections.abc import Callable
from concurrent.futures import ProcessPoolExecutor, as_completed
from dataclasses import dataclass

import numpy as np
import numpy.typing as npt

from src.pathtracer.camera.thin_lens import ThinLensCamera
from src.pathtracer.core.integrator import ray_color
from src.pathtracer.geometry.hittable import Hittable

logger = logging.getLogger(__name__)

# Callback receives (scanlines_done, scanlines_total)
ProgressCallback = Callable[[int, int], None]


@dataclass
class RenderSettings:
    """Configuration for a CPU render.

    Attributes:
        image_width: Image width in pixels (at least 2).
        aspect_ratio: Width divided by height; the height is derived from it.
        samples_per_pixel: Number of jittered camera rays per pixel.
        max_depth: Bounce budget handed to the integrator.
        seed: Seed for the random streams. None draws fresh OS entropy.
        workers: Number of worker processes. 1 renders in-process; 0 uses
            one worker per CPU.
    """

    image_width: int = 400
    aspect_ratio: float = 16.0 / 9.0
    samples_per_pixel: int = 10
    max_depth: int = 50
    seed: int | None = None
    workers: int = 1

    @property
    def image_height(self) -> int:
        """Image height in pixels, int(image_width / aspect_ratio)."""
        return int(self.image_width / self.aspect_ratio)

    def validate(self) -> None:
        """Check that the settings describe a renderable image.

        Raises:
            ValueError: If any setting is out of range.
        """
        if self.aspect_ratio <= 0.0:
            raise ValueError(f"Aspect ratio must be positive, got {self.aspect_ratio}")
        if self.image_width < 2 or self.image_height < 2:
            raise ValueError(
                f"Image must be at least 2x2 pixels, got {self.image_width}x{self.image_height}"
            )
        if self.samples_per_pixel < 1:
            raise ValueError(f"samples_per_pixel must be >= 1, got {self.samples_per_pixel}")
        if self.max_depth < 1:
            raise ValueError(f"max_depth must be >= 1, got {self.max_depth}")
        if self.workers < 0:
            raise ValueError(f"workers must be >= 0, got {self.workers}")

    def resolved_workers(self) -> int:
        """Number of processes to use, resolving 0 to the CPU count."""
        if self.workers == 0:
            return os.cpu_count() or 1
        return self.workers


def render_scanline(
    world: Hittable,
    camera: ThinLensCamera,
    settings: RenderSettings,
    j: int,
    rng: np.random.Generator,
) -> npt.NDArray[np.float64]:
    """Render one row of the image.

    Args:
        world: The scene.
        camera: The camera generating primary rays.
        settings: Image size, sample count and depth budget.
        j: Row index, 0 = bottom row of the image.
        rng: Random stream for this row.

    Returns:
        Array of shape (width, 3) holding the summed radiance of each pixel.
    """
    width = settings.image_width
    height = settings.image_height
    row = np.zeros((width, 3), dtype=np.float64)
    for i in range(width):
        r = g = b = 0.0
        for _ in range(settings.samples_per_pixel):
            s = (i + rng.random()) / (width - 1)
            t = (j + rng.random()) / (height - 1)
            color = ray_color(camera.get_ray(s, t, rng), world, settings.max_depth, rng)
            r += color.x
            g += color.y
            b += color.z
        row[i] = (r, g, b)
    return row


# =============================================================================
# Worker process state
# =============================================================================

_worker_scene: tuple[Hittable, ThinLensCamera, RenderSettings] | None = None


def _init_worker(world: Hittable, camera: ThinLensCamera, settings: RenderSettings) -> None:
    """Receive the read-only scene once per worker process."""
    global _worker_scene
    _worker_scene = (world, camera, settings)


def _render_scanline_in_worker(
    j: int, seed_seq: np.random.SeedSequence
) -> tuple[int, npt.NDArray[np.float64]]:
    if _worker_scene is None:
        raise RuntimeError("Worker process was not initialized with a scene")
    world, camera, settings = _worker_scene
    return j, render_scanline(world, camera, settings, j, np.random.default_rng(seed_seq))


class Renderer:
    """Renders a scene through a camera into a summed-radiance buffer.

    Attributes:
        world: The scene, read-only during rendering.
        camera: The camera.
        settings: The render configuration.
    """

    def __init__(
        self,
        world: Hittable,
        camera: ThinLensCamera,
        settings: RenderSettings,
    ) -> None:
        """Create a renderer.

        Raises:
            ValueError: If the settings are invalid.
        """
        settings.validate()
        self.world = world
        self.camera = camera
        self.settings = settings

    @property
    def width(self) -> int:
        return self.settings.image_width

    @property
    def height(self) -> int:
        return self.settings.image_height

    def _scanline_seeds(self) -> list[np.random.SeedSequence]:
        """One independent seed sequence per row, indexed by row number j."""
        return np.random.SeedSequence(self.settings.seed).spawn(self.height)

    def render(self, callback: ProgressCallback | None = None) -> npt.NDArray[np.float64]:
        """Render every pixel.

        Args:
            callback: Optional function called after each finished scanline
                with (scanlines_done, scanlines_total).

        Returns:
            Array of shape (height, width, 3), top row first, holding the sum
            of samples_per_pixel radiance estimates per pixel.
        """
        width, height = self.width, self.height
        workers = self.settings.resolved_workers()
        logger.info(
            "Rendering %dx%d, %d samples per pixel, max depth %d, %d worker(s)",
            width,
            height,
            self.settings.samples_per_pixel,
            self.settings.max_depth,
            workers,
        )

        image = np.zeros((height, width, 3), dtype=np.float64)
        seeds = self._scanline_seeds()
        start_time = time.perf_counter()
        done = 0

        def store(j: int, row: npt.NDArray[np.float64]) -> None:
            nonlocal done
            # Row j counts from the bottom; the image is stored top row first
            image[height - 1 - j] = row
            done += 1
            logger.debug("Scanlines remaining: %d", height - done)
            if callback is not None:
                callback(done, height)

        if workers <= 1:
            for j in range(height - 1, -1, -1):
                rng = np.random.default_rng(seeds[j])
                store(j, render_scanline(self.world, self.camera, self.settings, j, rng))
        else:
            with ProcessPoolExecutor(
                max_workers=workers,
                initializer=_init_worker,
                initargs=(self.world, self.camera, self.settings),
            ) as executor:
                futures = [
                    executor.submit(_render_scanline_in_worker, j, seeds[j])
                    for j in range(height - 1, -1, -1)
                ]
                for future in as_completed(futures):
                    store(*future.result())

        logger.info("Render finished in %.2fs", time.perf_counter() - start_time)
        return image

    def __repr__(self) -> str:
        return (
            f"Renderer(width={self.width}, height={self.height}, "
            f"samples={self.settings.samples_per_pixel})"
        )
