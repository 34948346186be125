"""Pytest configuration and shared fixtures."""

import pytest

from attractorscope.core.accumulator import Viewport
from attractorscope.core.maps import AttractorParams

PAR_TEXT = """\
# small test render
<image>
file = out.pgm
Nx   = 4
Ny   = 4
npts = 1000      # points after burn-in

<fractal>
method   = clifford
center_x = 0.0
center_y = 0.0
Lx       = 4.0
a = 2.0
b = 2.0
c = 2.0
d = 2.0
"""


@pytest.fixture
def params() -> AttractorParams:
    """Coefficients a=b=c=d=2."""
    return AttractorParams(a=2.0, b=2.0, c=2.0, d=2.0)


@pytest.fixture
def small_viewport() -> Viewport:
    """4x4 grid over [-2, 2] x [-2, 2], one unit per cell."""
    return Viewport(center_x=0.0, center_y=0.0, width=4.0, nx=4, ny=4)


@pytest.fixture
def wide_viewport() -> Viewport:
    """64x48 grid covering the whole clifford attractor."""
    return Viewport(center_x=0.0, center_y=0.0, width=8.0, nx=64, ny=48)


@pytest.fixture
def par_text() -> str:
    return PAR_TEXT


@pytest.fixture
def par_file(tmp_path, par_text):
    """Write the test parameter file to disk."""
    path = tmp_path / "input.frac"
    path.write_text(par_text, encoding="utf-8")
    return path
