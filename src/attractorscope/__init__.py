"""Strange attractor density renderer."""

from attractorscope.config import ConfigError, RenderConfig, load_config
from attractorscope.core.accumulator import Viewport, accumulate_density
from attractorscope.core.maps import AttractorKind, AttractorParams, select_map
from attractorscope.core.tonemap import tone_map
from attractorscope.io.pgm import save_image, write_pgm
from attractorscope.pipeline import AttractorPipeline

__version__ = "0.1.0"
__all__ = [
    "AttractorKind",
    "AttractorParams",
    "AttractorPipeline",
    "ConfigError",
    "RenderConfig",
    "Viewport",
    "accumulate_density",
    "load_config",
    "save_image",
    "select_map",
    "tone_map",
    "write_pgm",
]
