"""
Tone mapping from visit counts to 8-bit grayscale.

Counts are normalized by the grid peak and amplified by ``cut``, clamped to
[0, 1], bent by a power curve, then inverted so dense regions come out dark.
"""

import numpy as np

DEFAULT_CUT = 10.0
DEFAULT_EXPO = 0.5


def tone_map(
    grid: np.ndarray,
    cut: float = DEFAULT_CUT,
    expo: float = DEFAULT_EXPO,
) -> np.ndarray:
    """
    Map a density grid to grayscale intensities.

    Args:
        grid: Non-negative visit counts, shape (ny, nx).
        cut: Contrast multiplier applied after normalizing by the peak.
        expo: Exponent of the power curve (0.5 is a square root).

    Returns:
        uint8 array with the grid's shape; 0 is densest, 255 is empty.
    """
    peak = int(grid.max()) if grid.size else 0
    if peak <= 0:
        raise ValueError("Cannot tone map an empty density grid (peak count is 0)")

    val = cut * grid.astype(np.float64) / peak
    val = np.clip(val, 0.0, 1.0)
    val = np.power(val, expo)

    # astype truncates toward zero, which is the intended rounding.
    return np.ascontiguousarray((255.0 * (1.0 - val)).astype(np.uint8))
