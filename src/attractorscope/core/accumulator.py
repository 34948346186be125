"""
Density accumulation for 2D strange attractors.

A single trajectory is iterated from a fixed seed, a short burn-in is
discarded, and every following point increments one cell of an (ny, nx)
visit-count histogram. Points outside the viewport land on the nearest edge
cell instead of being dropped, so the grid always sums to the iteration count.

The hot loop runs in a Numba kernel; a plain-Python backend built on the
closures from ``select_map`` is kept as the reference implementation.
"""

import math
from dataclasses import dataclass
from typing import Callable, Iterable, Optional, Tuple

import numba
import numpy as np

from attractorscope.core.maps import AttractorKind, AttractorParams, select_map

SEED: Tuple[float, float] = (0.1, 0.1)
BURN_IN: int = 50
DEFAULT_CHUNK_SIZE: int = 1_000_000
BACKENDS = ("numba", "python")

ProgressCallback = Callable[[int, int], None]


@dataclass(frozen=True)
class Viewport:
    """Rectangular plane region mapped onto an (ny, nx) pixel grid."""
    center_x: float
    center_y: float
    width: float
    nx: int
    ny: int

    @property
    def height(self) -> float:
        # Keeps physical and pixel aspect ratios equal.
        return self.width * self.ny / self.nx

    @property
    def xmin(self) -> float:
        return self.center_x - self.width / 2

    @property
    def xmax(self) -> float:
        return self.center_x + self.width / 2

    @property
    def ymin(self) -> float:
        return self.center_y - self.height / 2

    @property
    def ymax(self) -> float:
        return self.center_y + self.height / 2

    @property
    def dx(self) -> float:
        return self.width / self.nx

    @property
    def dy(self) -> float:
        return self.height / self.ny

    @property
    def shape(self) -> Tuple[int, int]:
        return (self.ny, self.nx)


def cell_index(value: float, vmin: float, delta: float, n: int) -> int:
    """Truncated cell index of ``value``, clamped into [0, n-1]."""
    f = (value - vmin) / delta
    if f >= n:
        return n - 1
    if f >= 0.0:
        return int(f)
    return 0


# ---------------------------------------------------------------------------
# Numba kernels (compiled on first call)
# ---------------------------------------------------------------------------

@numba.njit(cache=True)
def _step_kernel(kind, a, b, c, d, x, y):
    if kind == 1:
        return math.sin(a * y) - math.cos(b * x), math.sin(c * x) - math.cos(d * y)
    if kind == 2:
        return d * math.sin(a * x) - math.sin(b * y), c * math.cos(a * x) + math.cos(b * y)
    return math.sin(a * y) + c * math.cos(a * x), math.sin(b * x) + d * math.cos(b * y)


@numba.njit(cache=True)
def _cell_kernel(value, vmin, delta, n):
    f = (value - vmin) / delta
    if f >= n:
        return n - 1
    if f >= 0.0:
        return int(f)
    return 0


@numba.njit(cache=True)
def _burn_in_kernel(kind, a, b, c, d, x, y, steps):
    for _ in range(steps):
        x, y = _step_kernel(kind, a, b, c, d, x, y)
    return x, y


@numba.njit(cache=True)
def _accumulate_kernel(grid, kind, a, b, c, d, x, y, xmin, ymin, dx, dy, steps):
    """Advance the orbit ``steps`` times, counting visits in-place."""
    ny, nx = grid.shape
    for _ in range(steps):
        x, y = _step_kernel(kind, a, b, c, d, x, y)
        i = _cell_kernel(x, xmin, dx, nx)
        j = _cell_kernel(y, ymin, dy, ny)
        grid[j, i] += 1
    return x, y


def _chunks(total: int, chunk_size: int):
    done = 0
    while done < total:
        todo = min(chunk_size, total - done)
        yield todo
        done += todo


def accumulate_density(
    kind: AttractorKind,
    params: AttractorParams,
    viewport: Viewport,
    n_iter: int,
    *,
    seed: Tuple[float, float] = SEED,
    burn_in: int = BURN_IN,
    backend: str = "numba",
    chunk_size: int = DEFAULT_CHUNK_SIZE,
    progress_callback: Optional[ProgressCallback] = None,
) -> np.ndarray:
    """
    Iterate the attractor and build its visit-count histogram.

    Args:
        kind: Recurrence family.
        params: Coefficients a, b, c, d.
        viewport: Plane region and grid size.
        n_iter: Number of counted iterations (after burn-in).
        seed: Starting point of the orbit.
        burn_in: Leading iterations that are discarded.
        backend: "numba" (compiled kernel) or "python" (reference loop).
        chunk_size: Iterations per kernel call between progress reports.
        progress_callback: Called as ``callback(done, n_iter)`` after each chunk.

    Returns:
        C-contiguous int64 array of shape (ny, nx) summing to ``n_iter``.
    """
    if backend not in BACKENDS:
        raise ValueError(f"Unknown backend {backend!r}, expected one of {BACKENDS}")
    if n_iter < 0:
        raise ValueError(f"Iteration count must be non-negative, got {n_iter}")
    chunk_size = max(1, int(chunk_size))

    grid = np.zeros(viewport.shape, dtype=np.int64)
    xmin, ymin = viewport.xmin, viewport.ymin
    dx, dy = viewport.dx, viewport.dy
    x, y = float(seed[0]), float(seed[1])

    if backend == "numba":
        code = kind.code
        a, b, c, d = float(params.a), float(params.b), float(params.c), float(params.d)
        x, y = _burn_in_kernel(code, a, b, c, d, x, y, burn_in)
        done = 0
        for todo in _chunks(n_iter, chunk_size):
            x, y = _accumulate_kernel(grid, code, a, b, c, d, x, y, xmin, ymin, dx, dy, todo)
            done += todo
            if progress_callback is not None:
                progress_callback(done, n_iter)
        return grid

    xnew, ynew = select_map(kind, params)
    nx, ny = viewport.nx, viewport.ny
    for _ in range(burn_in):
        x, y = xnew(x, y), ynew(x, y)

    done = 0
    for todo in _chunks(n_iter, chunk_size):
        for _ in range(todo):
            x, y = xnew(x, y), ynew(x, y)
            grid[cell_index(y, ymin, dy, ny), cell_index(x, xmin, dx, nx)] += 1
        done += todo
        if progress_callback is not None:
            progress_callback(done, n_iter)
    return grid


def accumulate_ensemble(
    kind: AttractorKind,
    params: AttractorParams,
    viewport: Viewport,
    n_iter: int,
    seeds: Iterable[Tuple[float, float]],
    **kwargs,
) -> np.ndarray:
    """
    Sum the histograms of independent trajectories, one per seed.

    Each trajectory runs ``n_iter`` counted iterations. Cell increments
    commute, so the merged grid does not depend on the order of the seeds.
    """
    grid = np.zeros(viewport.shape, dtype=np.int64)
    for seed in seeds:
        grid += accumulate_density(kind, params, viewport, n_iter, seed=seed, **kwargs)
    return grid
