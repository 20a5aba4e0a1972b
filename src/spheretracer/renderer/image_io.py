# renderer/image_io.py
import math
from pathlib import Path
from typing import TextIO, Tuple, Union

import numpy as np
from PIL import Image

from spheretracer.core.vector import Vector3
from spheretracer.exceptions import OutputError

PPM_SUFFIXES = {".ppm", ".pnm"}

def clamp(x: float, lo: float, hi: float) -> float:
    return lo if x < lo else hi if x > hi else x

def write_color(pixel_color: Vector3, samples_per_pixel: int) -> Tuple[int, int, int]:
    """
    Averages a summed sample color and quantizes it to 8 bits per channel.
    """
    scale = 1.0 / samples_per_pixel
    return (
        int(math.floor(256 * clamp(pixel_color.x * scale, 0.0, 0.999))),
        int(math.floor(256 * clamp(pixel_color.y * scale, 0.0, 0.999))),
        int(math.floor(256 * clamp(pixel_color.z * scale, 0.0, 0.999))),
    )

def quantize(accumulated: np.ndarray, samples_per_pixel: int) -> np.ndarray:
    """
    Array version of write_color for a (..., 3) buffer of summed colors.
    """
    averaged = np.clip(accumulated * (1.0 / samples_per_pixel), 0.0, 0.999)
    return np.floor(256 * averaged).astype(np.uint8)

def encode_ppm(pixels: np.ndarray) -> str:
    """
    Plain-text PPM (P3) for a (height, width, 3) uint8 image whose first
    row is the top scanline.
    """
    height, width = pixels.shape[:2]
    lines = [f"P3\n{width} {height}\n255"]
    for r, g, b in pixels.reshape(-1, 3):
        lines.append(f"{r} {g} {b}")
    return "\n".join(lines) + "\n"

def write_ppm(pixels: np.ndarray, stream: TextIO) -> None:
    stream.write(encode_ppm(pixels))

def save_image(pixels: np.ndarray, path: Union[str, Path]) -> Path:
    """
    Writes a PPM for .ppm/.pnm paths and lets Pillow pick the encoder otherwise.
    """
    path = Path(path)
    if path.suffix.lower() in PPM_SUFFIXES:
        with open(path, "w", encoding="ascii", newline="\n") as fh:
            write_ppm(pixels, fh)
    else:
        image = Image.fromarray(np.ascontiguousarray(pixels, dtype=np.uint8))
        try:
            image.save(path)
        except (KeyError, ValueError) as e:
            raise OutputError(f"cannot encode {path}: {e}") from e
    return path

def gradient_test_pattern(width: int, height: int) -> np.ndarray:
    """
    The red/green test image: red grows left to right, green bottom to top,
    blue fixed at 0.25.
    """
    image = np.empty((height, width, 3), dtype=np.uint8)
    for row, j in enumerate(range(height - 1, -1, -1)):
        for i in range(width):
            r = i / max(width - 1, 1)
            g = j / max(height - 1, 1)
            b = 0.25
            image[row, i] = (int(255.999 * r), int(255.999 * g), int(255.999 * b))
    return image
