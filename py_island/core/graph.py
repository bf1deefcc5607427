"""Graph model for the island map.

The map is an arena: ``MapGraph`` owns flat lists of centers, corners and
edges, and every relation between them is an integer index into those lists.
Dropping the ``MapGraph`` discards a whole generation run.
"""

from dataclasses import dataclass, field
from typing import List, Optional, Tuple

Point = Tuple[float, float]


@dataclass
class Center:
    """Voronoi polygon / Delaunay site."""

    index: int
    point: Point
    water: bool = False  # lake or ocean
    ocean: bool = False
    coast: bool = False  # land polygon touching an ocean
    border: bool = False  # at the edge of the map
    biome: Optional[int] = None  # BiomeType
    elevation: float = 0.0  # 0.0-1.0
    moisture: float = 0.0  # 0.0-1.0

    neighbors: List[int] = field(default_factory=list)
    borders: List[int] = field(default_factory=list)
    corners: List[int] = field(default_factory=list)


@dataclass
class Corner:
    """Voronoi vertex, shared by up to three polygons."""

    index: int
    point: Point
    ocean: bool = False
    water: bool = False  # lake or ocean
    coast: bool = False  # touches ocean and land polygons
    border: bool = False  # at the edge of the map
    shape_water: bool = False  # island-shape verdict, input to classification
    elevation: float = 0.0
    moisture: float = 0.0

    touches: List[int] = field(default_factory=list)
    protrudes: List[int] = field(default_factory=list)
    adjacent: List[int] = field(default_factory=list)

    river: int = 0  # 0 if no river, or volume of water in river
    downslope: Optional[int] = None  # adjacent corner most downhill
    watershed: Optional[int] = None  # coastal corner, or self
    watershed_size: int = 0


@dataclass
class Edge:
    """Dual pair of a Delaunay segment (d0, d1) and a Voronoi segment (v0, v1)."""

    index: int
    d0: Optional[int] = None
    d1: Optional[int] = None
    v0: Optional[int] = None
    v1: Optional[int] = None
    midpoint: Optional[Point] = None  # halfway between v0, v1
    river: int = 0  # volume of water, or 0


@dataclass
class MapGraph:
    """Centers, corners and edges of one generated map."""

    size: float
    centers: List[Center] = field(default_factory=list)
    corners: List[Corner] = field(default_factory=list)
    edges: List[Edge] = field(default_factory=list)

    # Names of the pipeline steps that have written onto this graph
    completed: List[str] = field(default_factory=list)

    def mark(self, step: str):
        if step not in self.completed:
            self.completed.append(step)

    def has(self, step: str) -> bool:
        return step in self.completed

    def require(self, step: str, needed_by: str):
        """Raise if ``step`` has not run yet."""
        if step not in self.completed:
            raise ValueError(f"{step} must run before {needed_by}")

    def lookup_edge_from_center(self, p: int, r: int) -> Optional[Edge]:
        """Find the edge separating two adjacent polygons."""
        for edge_id in self.centers[p].borders:
            edge = self.edges[edge_id]
            if edge.d0 == r or edge.d1 == r:
                return edge
        return None

    def lookup_edge_from_corner(self, q: int, s: int) -> Optional[Edge]:
        """Find the edge joining two adjacent corners."""
        for edge_id in self.corners[q].protrudes:
            edge = self.edges[edge_id]
            if edge.v0 == s or edge.v1 == s:
                return edge
        return None

    def land_corners(self) -> List[Corner]:
        """Corners that are neither ocean nor coast (land and lakes)."""
        return [q for q in self.corners if not q.ocean and not q.coast]

    def recompute_midpoints(self):
        for edge in self.edges:
            if edge.v0 is not None and edge.v1 is not None:
                a = self.corners[edge.v0].point
                b = self.corners[edge.v1].point
                edge.midpoint = ((a[0] + b[0]) / 2.0, (a[1] + b[1]) / 2.0)
