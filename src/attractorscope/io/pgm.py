"""
Grayscale image serialization.

Binary PGM (P5) is written directly: a text header (magic number, comment
line, width, height, max value 255) followed by one byte per pixel in
row-major order. Other formats are handed to Pillow.
"""

from pathlib import Path
from typing import Union

import numpy as np
from PIL import Image

PGM_SUFFIXES = (".pgm", ".ppm", ".pnm")
MAXVAL = 255


def _as_image_buffer(image: np.ndarray) -> np.ndarray:
    if image.ndim != 2:
        raise ValueError(f"Expected a 2D grayscale image, got shape {image.shape}")
    return np.ascontiguousarray(image, dtype=np.uint8)


def write_pgm(path: Union[str, Path], image: np.ndarray, comment: str = "") -> Path:
    """
    Write a binary PGM file.

    Args:
        path: Output file path.
        image: uint8 array of shape (ny, nx).
        comment: Text for the header comment line.

    Returns:
        Path to written file.
    """
    path = Path(path)
    buf = _as_image_buffer(image)
    ny, nx = buf.shape
    comment = " ".join(comment.splitlines())

    header = f"P5\n# {comment}\n{nx} {ny}\n{MAXVAL}\n".encode("ascii", errors="replace")
    with open(path, "wb") as f:
        f.write(header)
        f.write(buf.tobytes(order="C"))
    return path


def read_pgm(path: Union[str, Path]) -> np.ndarray:
    """Read an 8-bit grayscale image into a uint8 array of shape (ny, nx)."""
    with Image.open(path) as img:
        if img.mode != "L":
            raise ValueError(f"Expected an 8-bit grayscale image, got mode {img.mode!r}")
        return np.array(img)


def save_image(path: Union[str, Path], image: np.ndarray, comment: str = "") -> Path:
    """Write PGM for .pgm/.ppm/.pnm paths, anything else through Pillow."""
    path = Path(path)
    if path.suffix.lower() in PGM_SUFFIXES:
        return write_pgm(path, image, comment=comment)

    Image.fromarray(_as_image_buffer(image)).save(path)
    return path
