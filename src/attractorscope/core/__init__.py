"""Core attractor modules: recurrence maps, density accumulation, tone mapping."""

from attractorscope.core.accumulator import Viewport, accumulate_density, accumulate_ensemble
from attractorscope.core.maps import AttractorKind, AttractorParams, select_map
from attractorscope.core.tonemap import tone_map

__all__ = [
    "AttractorKind",
    "AttractorParams",
    "Viewport",
    "accumulate_density",
    "accumulate_ensemble",
    "select_map",
    "tone_map",
]
