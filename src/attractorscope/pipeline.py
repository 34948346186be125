"""
Main rendering pipeline.

Orchestrates the complete flow from a validated config to a grayscale image:
density accumulation, tone mapping and (optionally) writing the file.
"""

import time
from pathlib import Path
from typing import Any, Callable, Optional, Union

import numpy as np

from attractorscope.config import RenderConfig
from attractorscope.core.accumulator import DEFAULT_CHUNK_SIZE, accumulate_density
from attractorscope.core.tonemap import tone_map
from attractorscope.io.pgm import save_image


class AttractorPipeline:
    """
    Complete config-to-image processing pipeline.

    The config is never mutated; each ``process`` call allocates a fresh
    density grid and discards it after tone mapping.
    """

    def __init__(self, backend: str = "numba", chunk_size: int = DEFAULT_CHUNK_SIZE):
        """
        Initialize the pipeline.

        Args:
            backend: Accumulation backend, "numba" or "python".
            chunk_size: Iterations between progress reports.
        """
        self.backend = backend
        self.chunk_size = chunk_size

    def accumulate(
        self,
        cfg: RenderConfig,
        progress_callback: Optional[Callable[[int, int], None]] = None,
    ) -> np.ndarray:
        """
        Phase A: iterate the attractor into a density grid.

        Args:
            cfg: Validated render configuration.
            progress_callback: Optional ``callback(done, total)``.

        Returns:
            int64 visit counts of shape (Ny, Nx).
        """
        return accumulate_density(
            cfg.method,
            cfg.params,
            cfg.viewport,
            cfg.n_iter,
            backend=self.backend,
            chunk_size=self.chunk_size,
            progress_callback=progress_callback,
        )

    def tone_map(self, cfg: RenderConfig, grid: np.ndarray) -> np.ndarray:
        """Phase B: convert visit counts to 8-bit grayscale."""
        return tone_map(grid, cut=cfg.cut, expo=cfg.expo)

    def describe(self, cfg: RenderConfig) -> str:
        """One-line summary used as the image header comment."""
        p = cfg.params
        return (
            f"{cfg.method.value} a={p.a:g} b={p.b:g} c={p.c:g} d={p.d:g} "
            f"npts={cfg.n_iter} cut={cfg.cut:g} exp={cfg.expo:g}"
        )

    def process(
        self,
        cfg: RenderConfig,
        output_path: Union[str, Path, None] = None,
        progress_callback: Optional[Callable[[int, int], None]] = None,
    ) -> dict[str, Any]:
        """
        Run the complete pipeline.

        Args:
            cfg: Validated render configuration.
            output_path: Where to write the image. None skips writing.
            progress_callback: Forwarded to the accumulation phase.

        Returns:
            Dictionary with grid, image, max_count, n_iter, elapsed and,
            if written, output_path.
        """
        t0 = time.time()
        grid = self.accumulate(cfg, progress_callback=progress_callback)
        image = self.tone_map(cfg, grid)

        result: dict[str, Any] = {
            "grid": grid,
            "image": image,
            "max_count": int(grid.max()),
            "n_iter": cfg.n_iter,
            "elapsed": time.time() - t0,
        }

        if output_path is not None:
            result["output_path"] = save_image(output_path, image, comment=self.describe(cfg))

        return result
