"""
Attractor recurrence families.

Each family maps a point (x, y) to (x', y') using four coefficients a, b, c, d:

  clifford   x' = sin(a*y) + c*cos(a*x)      y' = sin(b*x) + d*cos(b*y)
  peter      x' = sin(a*y) - cos(b*x)        y' = sin(c*x) - cos(d*y)
  svensson   x' = d*sin(a*x) - sin(b*y)      y' = c*cos(a*x) + cos(b*y)
"""

import enum
import math
from dataclasses import dataclass
from typing import Callable, Optional, Tuple, Union

UpdateFn = Callable[[float, float], float]


@dataclass(frozen=True)
class AttractorParams:
    """Coefficients shared by every recurrence family."""
    a: float
    b: float
    c: float
    d: float


class AttractorKind(enum.Enum):
    CLIFFORD = "clifford"
    PETER = "peter"
    SVENSSON = "svensson"

    @classmethod
    def from_name(cls, name: Optional[str]) -> "AttractorKind":
        """Exact, case-sensitive lookup. Anything unknown is clifford."""
        for kind in cls:
            if kind.value == name:
                return kind
        return cls.CLIFFORD

    @property
    def code(self) -> int:
        """Integer tag used by the compiled kernel."""
        return _KIND_CODES[self]

    def step(self, params: AttractorParams, x: float, y: float) -> Tuple[float, float]:
        xnew, ynew = select_map(self, params)
        return xnew(x, y), ynew(x, y)


_KIND_CODES = {
    AttractorKind.CLIFFORD: 0,
    AttractorKind.PETER: 1,
    AttractorKind.SVENSSON: 2,
}


def select_map(
    method: Union[str, AttractorKind, None],
    params: AttractorParams,
) -> Tuple[UpdateFn, UpdateFn]:
    """
    Resolve a method to its pair of update functions.

    Args:
        method: Method name or kind. Unrecognized names fall back to clifford.
        params: Coefficients captured by the returned closures.

    Returns:
        Tuple of (xnew, ynew), each a pure function of (x, y).
    """
    if not isinstance(method, AttractorKind):
        method = AttractorKind.from_name(method)

    a, b, c, d = params.a, params.b, params.c, params.d

    if method is AttractorKind.PETER:
        def xnew(x, y):
            return math.sin(a * y) - math.cos(b * x)

        def ynew(x, y):
            return math.sin(c * x) - math.cos(d * y)

    elif method is AttractorKind.SVENSSON:
        def xnew(x, y):
            return d * math.sin(a * x) - math.sin(b * y)

        def ynew(x, y):
            return c * math.cos(a * x) + math.cos(b * y)

    else:
        def xnew(x, y):
            return math.sin(a * y) + c * math.cos(a * x)

        def ynew(x, y):
            return math.sin(b * x) + d * math.cos(b * y)

    return xnew, ynew
