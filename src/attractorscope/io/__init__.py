"""Image serialization."""

from attractorscope.io.pgm import read_pgm, save_image, write_pgm

__all__ = ["read_pgm", "save_image", "write_pgm"]
