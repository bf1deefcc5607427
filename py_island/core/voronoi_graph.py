"""Voronoi graph construction for the island map.

This module turns a set of generator points into the center/corner/edge graph:

- random point placement and Lloyd relaxation
- an adapter over scipy's Voronoi that clips every cell to the map square
- the graph builder that canonicalizes duplicate Voronoi vertices
- corner improvement (moving corners to the average of their polygons)
"""

from collections import defaultdict
from typing import Dict, List, NamedTuple, Optional, Tuple

import numpy as np
import structlog
from scipy.spatial import Voronoi

from .errors import MapConfigurationError
from .graph import Center, Corner, Edge, MapGraph, Point
from .pm_prng import PMPRNG

logger = structlog.get_logger()

# Fewer generator points than this cannot produce a meaningful diagram
MIN_POINTS = 4

# Squared distance under which two Voronoi vertices are the same corner
CORNER_EPSILON = 1e-6


class DiagramEdge(NamedTuple):
    """One edge of the diagram: its Delaunay sites and Voronoi vertices.

    Sites are generator point indices. Any element may be None at the map
    border.
    """

    site0: Optional[int]
    site1: Optional[int]
    vertex0: Optional[Point]
    vertex1: Optional[Point]


class VoronoiDiagram:
    """
    Voronoi diagram of a point set clipped to the square [0, size]².

    The points are mirrored across the four sides of the square before
    handing them to scipy, which makes every original cell finite and
    exactly clipped to the square. Ridges between a point and one of the
    mirrors lie on the map border and have an undefined second site.
    """

    def __init__(self, points: np.ndarray, size: float):
        points = np.asarray(points, dtype=np.float64)
        if points.ndim != 2 or len(points) < MIN_POINTS:
            raise MapConfigurationError(
                f"At least {MIN_POINTS} points are needed to build a Voronoi diagram, "
                f"got {len(points)}"
            )

        self.points = points
        self.size = float(size)
        self.n_points = len(points)

        all_points = np.vstack([points, mirror_points(points, self.size)])
        self._voronoi = Voronoi(all_points)
        self.vertices = snap_to_bounds(self._voronoi.vertices, self.size)

    def _vertex(self, vertex_id: int) -> Optional[Point]:
        if vertex_id < 0:
            return None
        x, y = self.vertices[vertex_id]
        return (float(x), float(y))

    def region(self, site: int) -> np.ndarray:
        """Boundary vertices of the cell around generator ``site``."""
        region = self._voronoi.regions[self._voronoi.point_region[site]]
        return self.vertices[[v for v in region if v >= 0]]

    def edges(self) -> List[DiagramEdge]:
        """All edges touching at least one generator cell."""
        result = []
        for (p1, p2), (r1, r2) in zip(self._voronoi.ridge_points, self._voronoi.ridge_vertices):
            site0 = int(p1) if p1 < self.n_points else None
            site1 = int(p2) if p2 < self.n_points else None
            if site0 is None and site1 is None:
                continue
            result.append(DiagramEdge(site0, site1, self._vertex(r1), self._vertex(r2)))
        return result


def mirror_points(points: np.ndarray, size: float) -> np.ndarray:
    """Reflect points across the left, right, bottom and top map sides."""
    x = points[:, 0]
    y = points[:, 1]
    return np.vstack([
        np.column_stack([-x, y]),
        np.column_stack([2 * size - x, y]),
        np.column_stack([x, -y]),
        np.column_stack([x, 2 * size - y]),
    ])


def snap_to_bounds(vertices: np.ndarray, size: float) -> np.ndarray:
    """Move vertices lying within round-off of a map side exactly onto it."""
    tolerance = 1e-7 * max(size, 1.0)
    snapped = np.array(vertices, dtype=np.float64, copy=True)
    snapped[np.abs(snapped) < tolerance] = 0.0
    snapped[np.abs(snapped - size) < tolerance] = size
    return snapped


def build_diagram(points: np.ndarray, size: float) -> List[DiagramEdge]:
    """Edge list of the clipped diagram of ``points``."""
    return VoronoiDiagram(points, size).edges()


def generate_random_points(prng: PMPRNG, num_points: int, size: float) -> np.ndarray:
    """
    Place points uniformly at random, keeping 10 units away from the edges.

    Some of the points will end up on the island, others in the water;
    which is which is decided later by the island shape.

    Args:
        prng: Map PRNG
        num_points: Number of points to place
        size: Map side length

    Returns:
        Array of [x, y] point coordinates
    """
    points = np.zeros((num_points, 2), dtype=np.float64)
    for i in range(num_points):
        points[i, 0] = prng.next_double_range(10, size - 10)
        points[i, 1] = prng.next_double_range(10, size - 10)
    return points


def relax_points(points: np.ndarray, size: float, n_iterations: int = 2) -> np.ndarray:
    """Apply Lloyd's relaxation to improve point distribution.

    Each point moves to the average of its cell's vertices. A few
    iterations even out polygon sizes; run for too long the points would
    settle into a grid, so this is never run to convergence.

    Args:
        points: Points to relax
        size: Map side length
        n_iterations: Number of relaxation iterations

    Returns:
        Relaxed point coordinates
    """
    logger.info("Starting Lloyd's relaxation", iterations=n_iterations)

    points = np.array(points, dtype=np.float64, copy=True)
    for iteration in range(n_iterations):
        diagram = VoronoiDiagram(points, size)
        for i in range(len(points)):
            region = diagram.region(i)
            if len(region) == 0:
                continue
            points[i] = region.mean(axis=0)
        logger.debug("Relaxation iteration complete", iteration=iteration + 1)

    return points


class _CornerIndex:
    """Canonicalizes vertex coordinates to Corner objects.

    The diagram can return the same vertex several times with small
    round-off differences. Corners are bucketed by integer x so a lookup
    only has to look at neighboring buckets.
    """

    def __init__(self, graph: MapGraph):
        self.graph = graph
        self.buckets: Dict[int, List[Corner]] = defaultdict(list)

    def corner_for(self, point: Optional[Point]) -> Optional[int]:
        if point is None:
            return None
        x, y = point
        bucket = int(x)
        for b in range(bucket - 1, bucket + 2):
            for q in self.buckets.get(b, ()):
                dx = x - q.point[0]
                dy = y - q.point[1]
                if dx * dx + dy * dy < CORNER_EPSILON:
                    return q.index

        size = self.graph.size
        q = Corner(
            index=len(self.graph.corners),
            point=(x, y),
            border=(x == 0 or x == size or y == 0 or y == size),
        )
        self.graph.corners.append(q)
        self.buckets[bucket].append(q)
        return q.index


def _add_unique(items: List[int], value: Optional[int]):
    if value is not None and value not in items:
        items.append(value)


def build_graph(points: np.ndarray, diagram_edges: List[DiagramEdge], size: float) -> MapGraph:
    """
    Build the center/corner/edge graph from the diagram's edge list.

    Each edge connects four points: the Voronoi edge v0, v1 and its dual
    Delaunay edge d0, d1. At the border the Delaunay edge has one missing
    site, and the Voronoi edge may have a missing vertex.

    Args:
        points: Generator points, one Center each
        diagram_edges: Edge list from the diagram
        size: Map side length

    Returns:
        Populated MapGraph
    """
    if len(points) < MIN_POINTS:
        raise MapConfigurationError(
            f"At least {MIN_POINTS} points are needed to build a map graph, got {len(points)}"
        )

    graph = MapGraph(size=float(size))
    for i, (x, y) in enumerate(points):
        graph.centers.append(Center(index=i, point=(float(x), float(y))))

    corner_index = _CornerIndex(graph)
    rejected = 0

    for libedge in diagram_edges:
        if (libedge.site0 is None and libedge.site1 is None
                and libedge.vertex0 is None and libedge.vertex1 is None):
            rejected += 1
            continue

        edge = Edge(index=len(graph.edges))
        edge.v0 = corner_index.corner_for(libedge.vertex0)
        edge.v1 = corner_index.corner_for(libedge.vertex1)
        edge.d0 = libedge.site0
        edge.d1 = libedge.site1
        if libedge.vertex0 is not None and libedge.vertex1 is not None:
            a = graph.corners[edge.v0].point
            b = graph.corners[edge.v1].point
            edge.midpoint = ((a[0] + b[0]) / 2.0, (a[1] + b[1]) / 2.0)
        graph.edges.append(edge)

        d0 = graph.centers[edge.d0] if edge.d0 is not None else None
        d1 = graph.centers[edge.d1] if edge.d1 is not None else None
        v0 = graph.corners[edge.v0] if edge.v0 is not None else None
        v1 = graph.corners[edge.v1] if edge.v1 is not None else None

        # Centers point to edges. Corners point to edges.
        if d0 is not None:
            d0.borders.append(edge.index)
        if d1 is not None:
            d1.borders.append(edge.index)
        if v0 is not None:
            _add_unique(v0.protrudes, edge.index)
        if v1 is not None:
            _add_unique(v1.protrudes, edge.index)

        # Centers point to centers.
        if d0 is not None and d1 is not None:
            _add_unique(d0.neighbors, d1.index)
            _add_unique(d1.neighbors, d0.index)

        # Corners point to corners; a collapsed edge never links a corner to itself.
        if v0 is not None and v1 is not None and v0 is not v1:
            _add_unique(v0.adjacent, v1.index)
            _add_unique(v1.adjacent, v0.index)

        # Centers point to corners
        for center in (d0, d1):
            if center is not None:
                _add_unique(center.corners, edge.v0)
                _add_unique(center.corners, edge.v1)

        # Corners point to centers
        for corner in (v0, v1):
            if corner is not None:
                _add_unique(corner.touches, edge.d0)
                _add_unique(corner.touches, edge.d1)

    if rejected:
        logger.warning("Rejected malformed diagram edges", count=rejected)

    graph.mark("graph")
    logger.info(
        "Graph built",
        centers=len(graph.centers),
        corners=len(graph.corners),
        edges=len(graph.edges),
    )
    return graph


def improve_corners(graph: MapGraph):
    """
    Move each non-border corner to the average of the polygons around it.

    Lloyd relaxation evens out polygon sizes but not edge lengths. Moving
    the corners lengthens short edges at the cost of the Voronoi property.
    Edge midpoints are recomputed afterwards.
    """
    new_corners: List[Tuple[float, float]] = []
    for q in graph.corners:
        if q.border or not q.touches:
            new_corners.append(q.point)
            continue
        x = sum(graph.centers[r].point[0] for r in q.touches) / len(q.touches)
        y = sum(graph.centers[r].point[1] for r in q.touches) / len(q.touches)
        new_corners.append((x, y))

    for q, point in zip(graph.corners, new_corners):
        q.point = point

    graph.recompute_midpoints()
    logger.info("Corners improved", corners=len(graph.corners))
