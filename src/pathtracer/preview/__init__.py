"""Preview module for pixel encoding and image output.

Components:
    export: gamma-2 8-bit encoding, plain-text PPM writer, Pillow export
"""

from src.pathtracer.preview.export import (
    encode_color,
    encode_image,
    save_image,
    write_ppm,
)

__all__ = [
    "encode_image",
    "encode_color",
    "write_ppm",
    "save_image",
]
