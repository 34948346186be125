"""
Render configuration.

Settings come from a block-structured parameter file::

    <image>
    Nx   = 800          # grid columns
    Ny   = 800
    npts = 1e7

    <fractal>
    method = clifford
    Lx     = 5.0
    ...

Command-line overrides of the form ``block/key=value`` are layered on top of
the file before any value is read. The result is a single immutable
``RenderConfig`` that is validated once and then passed around explicitly.
"""

import math
from dataclasses import dataclass
from pathlib import Path
from typing import Dict, Iterable, Optional, Union

from attractorscope.core.accumulator import Viewport
from attractorscope.core.maps import AttractorKind, AttractorParams
from attractorscope.core.tonemap import DEFAULT_CUT, DEFAULT_EXPO

DEFAULT_INPUT = "input.frac"
DEFAULT_FILENAME = "attractor.pgm"
DEFAULT_METHOD = AttractorKind.CLIFFORD.value


class ConfigError(ValueError):
    """Raised for missing, malformed or out-of-range settings."""


class ParameterFile:
    """
    Parsed ``<block>`` / ``key = value`` settings.

    Values are kept as strings and converted by the typed accessors, so a
    command-line override and a file entry behave identically.
    """

    def __init__(self, blocks: Optional[Dict[str, Dict[str, str]]] = None, source: str = "<memory>"):
        self.blocks: Dict[str, Dict[str, str]] = {
            name: dict(entries) for name, entries in (blocks or {}).items()
        }
        self.source = source

    @classmethod
    def parse(cls, text: str, source: str = "<string>") -> "ParameterFile":
        """
        Parse parameter-file text.

        ``#`` starts a comment that runs to the end of the line. Every
        ``key = value`` line must follow a ``<block>`` header.
        """
        par = cls(source=source)
        block: Optional[str] = None

        for lineno, raw in enumerate(text.splitlines(), start=1):
            line = raw.split("#", 1)[0].strip()
            if not line:
                continue

            if line.startswith("<"):
                if not line.endswith(">") or len(line) < 3:
                    raise ConfigError(f"{source}:{lineno}: malformed block header {raw.strip()!r}")
                block = line[1:-1].strip()
                par.blocks.setdefault(block, {})
                continue

            if "=" not in line:
                raise ConfigError(f"{source}:{lineno}: expected 'key = value', got {raw.strip()!r}")
            if block is None:
                raise ConfigError(f"{source}:{lineno}: setting outside of any <block>")

            key, value = (part.strip() for part in line.split("=", 1))
            if not key:
                raise ConfigError(f"{source}:{lineno}: missing key")
            par.blocks[block][key] = value

        return par

    @classmethod
    def read(cls, path: Union[str, Path]) -> "ParameterFile":
        path = Path(path)
        if not path.exists():
            raise FileNotFoundError(f"Input file not found: {path}")
        return cls.parse(path.read_text(encoding="utf-8"), source=str(path))

    def set(self, block: str, key: str, value: str):
        self.blocks.setdefault(block, {})[key] = value

    def apply_overrides(self, overrides: Iterable[str]):
        """Apply ``block/key=value`` overrides in order; later ones win."""
        for item in overrides:
            target, sep, value = item.partition("=")
            block, slash, key = target.partition("/")
            if not sep or not slash or not block.strip() or not key.strip():
                raise ConfigError(f"Bad override {item!r}, expected block/key=value")
            self.set(block.strip(), key.strip(), value.strip())

    def has(self, block: str, key: str) -> bool:
        return key in self.blocks.get(block, {})

    def _raw(self, block: str, key: str) -> str:
        try:
            return self.blocks[block][key]
        except KeyError:
            raise ConfigError(f"Missing required setting {block}/{key} in {self.source}") from None

    def get_str(self, block: str, key: str) -> str:
        return self._raw(block, key)

    def get_int(self, block: str, key: str) -> int:
        value = self._raw(block, key)
        try:
            return int(value)
        except ValueError:
            raise ConfigError(f"{block}/{key} must be an integer, got {value!r}") from None

    def get_float(self, block: str, key: str) -> float:
        value = self._raw(block, key)
        try:
            return float(value)
        except ValueError:
            raise ConfigError(f"{block}/{key} must be a number, got {value!r}") from None

    def get_str_default(self, block: str, key: str, default: str) -> str:
        return self.get_str(block, key) if self.has(block, key) else default

    def get_int_default(self, block: str, key: str, default: int) -> int:
        return self.get_int(block, key) if self.has(block, key) else default

    def get_float_default(self, block: str, key: str, default: float) -> float:
        return self.get_float(block, key) if self.has(block, key) else default


@dataclass(frozen=True)
class RenderConfig:
    """Everything one render pass needs, constructed once at startup."""
    method: AttractorKind
    params: AttractorParams
    viewport: Viewport
    n_iter: int
    cut: float = DEFAULT_CUT
    expo: float = DEFAULT_EXPO
    filename: str = DEFAULT_FILENAME

    @classmethod
    def from_parameters(cls, par: ParameterFile) -> "RenderConfig":
        """Read all settings through the typed accessors."""
        filename = par.get_str_default("image", "file", DEFAULT_FILENAME)
        nx = par.get_int("image", "Nx")
        ny = par.get_int("image", "Ny")

        # npts may be written as 1e7
        npts = par.get_float("image", "npts")
        if not math.isfinite(npts):
            raise ConfigError(f"image/npts must be finite, got {npts}")

        viewport = Viewport(
            center_x=par.get_float("fractal", "center_x"),
            center_y=par.get_float("fractal", "center_y"),
            width=par.get_float("fractal", "Lx"),
            nx=nx,
            ny=ny,
        )
        params = AttractorParams(
            a=par.get_float("fractal", "a"),
            b=par.get_float("fractal", "b"),
            c=par.get_float("fractal", "c"),
            d=par.get_float("fractal", "d"),
        )

        return cls(
            method=AttractorKind.from_name(par.get_str_default("fractal", "method", DEFAULT_METHOD)),
            params=params,
            viewport=viewport,
            n_iter=int(npts),
            cut=par.get_float_default("image", "cut", DEFAULT_CUT),
            expo=par.get_float_default("image", "exp", DEFAULT_EXPO),
            filename=filename,
        )


def validate_config(cfg: RenderConfig) -> RenderConfig:
    """
    Reject inputs the numerical core cannot handle.

    Raises:
        ConfigError: With a message naming the offending setting.
    """
    vp = cfg.viewport
    if vp.nx <= 0 or vp.ny <= 0:
        raise ConfigError(f"Grid dimensions must be positive, got Nx={vp.nx}, Ny={vp.ny}")

    finite = {
        "fractal/center_x": vp.center_x,
        "fractal/center_y": vp.center_y,
        "fractal/Lx": vp.width,
        "fractal/a": cfg.params.a,
        "fractal/b": cfg.params.b,
        "fractal/c": cfg.params.c,
        "fractal/d": cfg.params.d,
        "image/cut": cfg.cut,
        "image/exp": cfg.expo,
    }
    for name, value in finite.items():
        if not math.isfinite(value):
            raise ConfigError(f"{name} must be finite, got {value}")

    if vp.width <= 0:
        raise ConfigError(f"Viewport width fractal/Lx must be positive, got {vp.width}")
    if cfg.expo < 0:
        raise ConfigError(f"Tone curve exponent image/exp must be non-negative, got {cfg.expo}")
    if cfg.n_iter < 0:
        raise ConfigError(f"Iteration count image/npts must be non-negative, got {cfg.n_iter}")
    if cfg.n_iter == 0:
        raise ConfigError("Iteration count image/npts is 0: nothing would be plotted")
    return cfg


def load_config(
    path: Union[str, Path] = DEFAULT_INPUT,
    overrides: Iterable[str] = (),
) -> RenderConfig:
    """Read a parameter file, apply overrides, build and validate the config."""
    par = ParameterFile.read(path)
    par.apply_overrides(overrides)
    return validate_config(RenderConfig.from_parameters(par))
