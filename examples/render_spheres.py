#!/usr/bin/env python3
"""Render a sphere scene with the path tracer.

Builds one of the preset scenes, renders it on the CPU (optionally across
worker processes) or on the taichi backend, encodes the summed radiance and
saves the image. The output format follows the file extension: ``.ppm``
is written as plain-text P3, anything else through Pillow.

Usage:
    python -m examples.render_spheres [options]

Options:
    --width WIDTH             Image width in pixels (default: 400)
    --aspect-ratio RATIO      Width / height (default: 1.5)
    --samples SAMPLES         Samples per pixel (default: 10)
    --max-depth DEPTH         Bounce budget per path (default: 50)
    --seed SEED               Seed for repeatable renders
    --workers N               CPU worker processes, 0 = one per core (default: 1)
    --scene {random,showcase,three}
                              Scene preset (default: random)
    --backend {cpu,taichi}    Rendering backend (default: cpu)
    --output OUTPUT           Output file path (default: spheres.ppm)
    --verbose / --quiet       More or less log output

Example:
    python -m examples.render_spheres --width 300 --samples 20 --workers 0
"""

from __future__ import annotations

import argparse
import logging
import sys
import time
from pathlib import Path

import numpy as np
import numpy.typing as npt

logger = logging.getLogger("render_spheres")


def parse_args(argv: list[str] | None = None) -> argparse.Namespace:
    """Parse command-line arguments."""
    parser = argparse.ArgumentParser(
        description="Render a sphere scene with the path tracer.",
        formatter_class=argparse.RawDescriptionHelpFormatter,
    )
    parser.add_argument(
        "--width",
        type=int,
        default=400,
        help="Image width in pixels (default: 400)",
    )
    parser.add_argument(
        "--aspect-ratio",
        type=float,
        default=3.0 / 2.0,
        help="Image width divided by height (default: 1.5)",
    )
    parser.add_argument(
        "--samples",
        type=int,
        default=10,
        help="Number of samples per pixel (default: 10)",
    )
    parser.add_argument(
        "--max-depth",
        type=int,
        default=50,
        help="Maximum number of bounces per path (default: 50)",
    )
    parser.add_argument(
        "--seed",
        type=int,
        default=None,
        help="Random seed; omit for a different image every run",
    )
    parser.add_argument(
        "--workers",
        type=int,
        default=1,
        help="CPU worker processes, 0 for one per core (default: 1)",
    )
    parser.add_argument(
        "--scene",
        choices=("random", "showcase", "three"),
        default="random",
        help="Scene preset (default: random)",
    )
    parser.add_argument(
        "--backend",
        choices=("cpu", "taichi"),
        default="cpu",
        help="Rendering backend (default: cpu)",
    )
    parser.add_argument(
        "--output",
        type=str,
        default="spheres.ppm",
        help="Output file path (default: spheres.ppm)",
    )
    verbosity = parser.add_mutually_exclusive_group()
    verbosity.add_argument(
        "--verbose",
        action="store_true",
        help="Log per-scanline and per-batch progress",
    )
    verbosity.add_argument(
        "--quiet",
        action="store_true",
        help="Only log warnings and errors",
    )
    return parser.parse_args(argv)


def configure_logging(verbose: bool = False, quiet: bool = False) -> None:
    level = logging.INFO
    if verbose:
        level = logging.DEBUG
    elif quiet:
        level = logging.WARNING
    logging.basicConfig(
        level=level,
        format="%(asctime)s %(levelname)s %(name)s: %(message)s",
        stream=sys.stderr,
    )


def build_scene(name: str, aspect_ratio: float, seed: int | None):
    """Create the (world, camera) pair for a preset."""
    from src.pathtracer.scene.presets import (
        default_camera,
        random_world,
        showcase_camera,
        showcase_world,
        three_spheres,
        three_spheres_camera,
    )

    if name == "three":
        return three_spheres(), three_spheres_camera(aspect_ratio)
    # Layout stream, separate from the per-scanline render streams
    rng = np.random.default_rng(seed)
    if name == "showcase":
        return showcase_world(rng), showcase_camera(aspect_ratio)
    return random_world(rng), default_camera(aspect_ratio)


def render_cpu(args: argparse.Namespace) -> npt.NDArray[np.uint8]:
    from src.pathtracer.core.renderer import Renderer, RenderSettings
    from src.pathtracer.preview.export import encode_image

    settings = RenderSettings(
        image_width=args.width,
        aspect_ratio=args.aspect_ratio,
        samples_per_pixel=args.samples,
        max_depth=args.max_depth,
        seed=args.seed,
        workers=args.workers,
    )
    world, camera = build_scene(args.scene, args.aspect_ratio, args.seed)
    renderer = Renderer(world, camera, settings)
    summed = renderer.render()
    return encode_image(summed, settings.samples_per_pixel)


def render_taichi(args: argparse.Namespace) -> npt.NDArray[np.uint8]:
    import taichi as ti

    seed = args.seed if args.seed is not None else int(time.time())
    ti.init(arch=ti.gpu, random_seed=seed)

    # Lazy imports: the gpu modules allocate fields and need ti.init first
    from src.pathtracer.gpu.renderer import GpuRenderer
    from src.pathtracer.preview.export import encode_image

    height = int(args.width / args.aspect_ratio)
    world, camera = build_scene(args.scene, args.aspect_ratio, args.seed)
    renderer = GpuRenderer(args.width, height, max_depth=args.max_depth)
    renderer.load(world, camera)
    renderer.render(num_samples=args.samples, batch_size=max(1, args.samples // 10))
    return encode_image(renderer.summed_image(), renderer.sample_count)


def main(argv: list[str] | None = None) -> int:
    """Main entry point."""
    args = parse_args(argv)
    configure_logging(verbose=args.verbose, quiet=args.quiet)

    from src.pathtracer.preview.export import save_image

    start_time = time.perf_counter()
    try:
        if args.backend == "taichi":
            image = render_taichi(args)
        else:
            image = render_cpu(args)
        output_file = save_image(image, Path(args.output))
    except (ValueError, TypeError, RuntimeError, OSError) as e:
        logger.error("Render failed: %s", e)
        return 1

    logger.info("Saved to: %s", output_file.absolute())
    logger.info("Total time: %.2fs", time.perf_counter() - start_time)
    return 0


if __name__ == "__main__":
    sys.exit(main())
