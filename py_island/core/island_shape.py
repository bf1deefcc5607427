"""
Island shape predicates.

Each shape decides whether a normalized point (x and y in [-1, +1]) is on the
island or in the water (lake or ocean). Shapes are a closed set of variants,
each carrying the parameters drawn from its own seed.
"""

import math
from dataclasses import dataclass, field
from enum import Enum
from typing import Dict, Tuple

from opensimplex import OpenSimplex

from .errors import MapConfigurationError
from .pm_prng import PMPRNG

# 1.0 means no small islands; 2.0 leads to a lot
ISLAND_FACTOR = 1.07


class IslandShapeType(str, Enum):
    """Available island shapes."""

    RADIAL = "radial"
    PERLIN = "perlin"
    SQUARE = "square"
    BLOB = "blob"


class IslandShape:
    """Base class: subclasses implement ``is_land``."""

    def is_land(self, x: float, y: float) -> bool:
        raise NotImplementedError

    def __call__(self, x: float, y: float) -> bool:
        return self.is_land(x, y)


@dataclass(frozen=True)
class RadialIsland(IslandShape):
    """Island radius built from overlapping sine waves, with one dip (bay)."""

    bumps: int
    start_angle: float
    dip_angle: float
    dip_width: float

    @classmethod
    def from_seed(cls, seed: int) -> "RadialIsland":
        prng = PMPRNG(seed)
        bumps = prng.next_int_range(1, 6)
        start_angle = prng.next_double_range(0, 2 * math.pi)
        dip_angle = prng.next_double_range(0, 2 * math.pi)
        dip_width = prng.next_double_range(0.2, 0.7)
        return cls(bumps, start_angle, dip_angle, dip_width)

    def is_land(self, x: float, y: float) -> bool:
        angle = math.atan2(y, x)
        length = 0.5 * (max(abs(x), abs(y)) + math.hypot(x, y))

        r1 = 0.5 + 0.40 * math.sin(
            self.start_angle + self.bumps * angle + math.cos((self.bumps + 3) * angle)
        )
        r2 = 0.7 - 0.20 * math.sin(
            self.start_angle + self.bumps * angle - math.sin((self.bumps + 2) * angle)
        )
        if (
            abs(angle - self.dip_angle) < self.dip_width
            or abs(angle - self.dip_angle + 2 * math.pi) < self.dip_width
            or abs(angle - self.dip_angle - 2 * math.pi) < self.dip_width
        ):
            r1 = r2 = 0.2
        return length < r1 or (r1 * ISLAND_FACTOR < length < r2)


@dataclass
class PerlinIsland(IslandShape):
    """Fractal noise thresholded by distance from the map center.

    The noise is read from a virtual ``field_size`` pixel square, like a
    noise texture, so nearby points that fall into the same pixel agree.
    """

    seed: int
    octaves: int = 8
    period: float = 64.0
    field_size: int = 256
    _noise: OpenSimplex = field(init=False, repr=False, compare=False)
    _cache: Dict[Tuple[int, int], float] = field(
        init=False, repr=False, compare=False, default_factory=dict
    )

    def __post_init__(self):
        self._noise = OpenSimplex(seed=self.seed)

    def _pixel(self, px: int, py: int) -> float:
        """Noise value of one pixel, in [0, 1]."""
        key = (px, py)
        if key not in self._cache:
            total = 0.0
            amplitude = 1.0
            frequency = 1.0 / self.period
            max_amplitude = 0.0
            for _ in range(self.octaves):
                total += amplitude * self._noise.noise2(px * frequency, py * frequency)
                max_amplitude += amplitude
                amplitude *= 0.5
                frequency *= 2.0
            self._cache[key] = (total / max_amplitude + 1.0) / 2.0
        return self._cache[key]

    def is_land(self, x: float, y: float) -> bool:
        half = self.field_size / 2
        px = min(max(int((x + 1) * half), 0), self.field_size - 1)
        py = min(max(int((y + 1) * half), 0), self.field_size - 1)
        c = self._pixel(px, py)
        return c > (0.3 + 0.3 * (x * x + y * y))


@dataclass(frozen=True)
class SquareIsland(IslandShape):
    """Fills the entire space with land."""

    def is_land(self, x: float, y: float) -> bool:
        return True


@dataclass(frozen=True)
class BlobIsland(IslandShape):
    """A round body with a wavy outline and two small lakes for eyes."""

    def is_land(self, x: float, y: float) -> bool:
        eye1 = math.hypot(x - 0.2, y / 2 + 0.2) < 0.05
        eye2 = math.hypot(x + 0.2, y / 2 + 0.2) < 0.05
        body = math.hypot(x, y) < 0.8 - 0.18 * math.sin(5 * math.atan2(y, x))
        return body and not eye1 and not eye2


def make_island_shape(shape_type, seed: int) -> IslandShape:
    """
    Build the island shape of the given type.

    Args:
        shape_type: IslandShapeType or its string value
        seed: Seed for the shape's own parameters

    Returns:
        IslandShape predicate
    """
    try:
        shape_type = IslandShapeType(shape_type)
    except ValueError:
        valid = ", ".join(t.value for t in IslandShapeType)
        raise MapConfigurationError(
            f"Unknown island shape '{shape_type}' (expected one of: {valid})"
        ) from None

    if shape_type is IslandShapeType.RADIAL:
        return RadialIsland.from_seed(seed)
    if shape_type is IslandShapeType.PERLIN:
        return PerlinIsland(seed)
    if shape_type is IslandShapeType.SQUARE:
        return SquareIsland()
    return BlobIsland()
