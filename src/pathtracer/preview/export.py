"""Pixel encoding and image export for rendered images.

The renderers hand over *summed* radiance per pixel. Encoding:

    1. scale by 1 / samples_per_pixel (average the samples),
    2. gamma 2.0 correction (square root),
    3. clamp to [0, 0.999],
    4. map to an 8-bit channel with int(256 * c).

Supported formats:
    - PPM (plain-text P3, written directly)
    - PNG and anything else Pillow can write

Example:
    >>> from src.pathtracer.preview.export import encode_image, save_image
    >>> summed = renderer.render()
    >>> save_image(encode_image(summed, settings.samples_per_pixel), "spheres.png")
"""

from __future__ import annotations

from pathlib import Path
from typing import TextIO

import numpy as np
import numpy.typing as npt
from PIL import Image as PILImage

from src.pathtracer.core.vec3 import Color

# Upper clamp before quantization, keeps 256 * c below 256
MAX_INTENSITY = 0.999


def encode_image(
    summed: npt.NDArray[np.floating],
    samples_per_pixel: int,
) -> npt.NDArray[np.uint8]:
    """Convert summed radiance into a displayable 8-bit image.

    Args:
        summed: Array of shape (H, W, 3) with the sum of all samples.
        samples_per_pixel: Number of samples that went into each sum.

    Returns:
        Array of shape (H, W, 3) with dtype uint8.

    Raises:
        ValueError: If samples_per_pixel is not positive or the array does
            not have three channels.
    """
    if samples_per_pixel < 1:
        raise ValueError(f"samples_per_pixel must be >= 1, got {samples_per_pixel}")
    if summed.ndim != 3 or summed.shape[2] != 3:
        raise ValueError(f"Expected an (H, W, 3) array, got shape {summed.shape}")

    averaged = np.maximum(summed.astype(np.float64) / samples_per_pixel, 0.0)
    corrected = np.sqrt(averaged)
    clamped = np.clip(corrected, 0.0, MAX_INTENSITY)
    return (256.0 * clamped).astype(np.uint8)


def encode_color(color: Color, samples_per_pixel: int = 1) -> tuple[int, int, int]:
    """Encode one summed colour with the same rules as encode_image."""
    pixel = np.array([[color.to_tuple()]], dtype=np.float64)
    r, g, b = encode_image(pixel, samples_per_pixel)[0, 0]
    return int(r), int(g), int(b)


def write_ppm(image: npt.NDArray[np.uint8], stream: TextIO) -> None:
    """Write an 8-bit image as plain-text PPM (P3), top row first.

    Args:
        image: Array of shape (H, W, 3) with dtype uint8.
        stream: Text stream to write to.
    """
    height, width, _ = image.shape
    stream.write(f"P3\n{width} {height}\n255\n")
    for row in image:
        for r, g, b in row:
            stream.write(f"{r} {g} {b}\n")


def save_image(image: npt.NDArray[np.uint8], filepath: str | Path) -> Path:
    """Save an 8-bit image, choosing the format from the file extension.

    ``.ppm`` files are written as plain-text P3; every other extension is
    handed to Pillow.

    Args:
        image: Array of shape (H, W, 3) with dtype uint8.
        filepath: Output path.

    Returns:
        The path written.
    """
    path = Path(filepath)
    if path.suffix.lower() == ".ppm":
        with path.open("w", encoding="ascii") as stream:
            write_ppm(image, stream)
    else:
        PILImage.fromarray(np.ascontiguousarray(image)).save(path)
    return path
