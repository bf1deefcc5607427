"""
Elevation assignment and redistribution.

Corner elevations grow with graph distance from the map border, much faster
over land than over water, so that every land corner has a path downhill to
the sea. The raw distances are then remapped so that low land is more common
than high land.
"""

import math
from collections import deque
from dataclasses import dataclass
from typing import List, Optional

import structlog

from .errors import GenerationError
from .graph import Corner, MapGraph, Point
from .island_shape import IslandShape

logger = structlog.get_logger()


@dataclass
class ElevationOptions:
    """Elevation calculation options."""

    water_step: float = 0.01  # Elevation gained per step over water
    land_step: float = 1.0  # Extra elevation per step between two land corners
    # Increases the mountain area. At 1.0 the maximum elevation barely
    # shows up on the map.
    scale_factor: float = 1.1


class Elevation:
    """Assigns corner and polygon elevations on a MapGraph."""

    def __init__(self, graph: MapGraph, island_shape: IslandShape,
                 options: Optional[ElevationOptions] = None):
        """
        Initialize the elevation engine.

        Args:
            graph: MapGraph built by build_graph
            island_shape: Predicate deciding land vs water
            options: Elevation options
        """
        self.graph = graph
        self.island_shape = island_shape
        self.options = options or ElevationOptions()

    def inside(self, point: Point) -> bool:
        """Whether a map point is on the island."""
        size = self.graph.size
        return self.island_shape(2 * (point[0] / size - 0.5), 2 * (point[1] / size - 0.5))

    def assign_corner_elevations(self):
        """
        Determine elevations and water at Voronoi corners.

        Border corners start at 0 and elevations propagate inward by
        breadth-first relaxation: every step costs ``water_step``, plus
        ``land_step`` when both ends are land. By construction there are no
        local minima, which the downslope and river stages rely on.
        """
        logger.info("Assigning corner elevations")
        corners = self.graph.corners
        queue = deque()

        for q in corners:
            q.shape_water = q.border or not self.inside(q.point)
            q.water = q.shape_water

        for q in corners:
            if q.border:
                q.elevation = 0.0
                queue.append(q.index)
            else:
                q.elevation = math.inf

        while queue:
            q = corners[queue.popleft()]
            for s_id in q.adjacent:
                s = corners[s_id]
                new_elevation = self.options.water_step + q.elevation
                if not q.water and not s.water:
                    new_elevation += self.options.land_step
                if new_elevation < s.elevation:
                    s.elevation = new_elevation
                    queue.append(s_id)

        unreached = [q.index for q in corners if math.isinf(q.elevation)]
        if unreached:
            raise GenerationError(
                f"{len(unreached)} corners are not connected to the map border"
            )

        self.graph.mark("corner_elevations")
        logger.info(
            "Corner elevations assigned",
            land_corners=sum(1 for q in corners if not q.water),
            max_elevation=max((q.elevation for q in corners), default=0.0),
        )

    def redistribute_elevations(self, locations: Optional[List[Corner]] = None):
        """
        Reshape land elevations so that lower elevations are more common.

        The total area at elevation <= x should be y(x) = 1 - (1-x)^2.
        Corners are ranked by elevation and the i-th gets the x solving
        y = 2x - x^2 for y = i/(n-1), scaled by ``scale_factor`` and
        capped at 1.0.

        Args:
            locations: Corners to redistribute, land corners by default
        """
        self.graph.require("classification", "elevation redistribution")
        if locations is None:
            locations = self.graph.land_corners()

        scale = self.options.scale_factor
        ranked = sorted(locations, key=lambda q: q.elevation)
        last = len(ranked) - 1
        for i, q in enumerate(ranked):
            y = i / last if last > 0 else 0.0
            x = math.sqrt(scale) - math.sqrt(scale * (1 - y))
            q.elevation = min(x, 1.0)

        logger.info("Elevations redistributed", corners=len(ranked))

    def flatten_water(self):
        """Ocean and coast corners sit at elevation 0."""
        for q in self.graph.corners:
            if q.ocean or q.coast:
                q.elevation = 0.0

    def assign_polygon_elevations(self):
        """Polygon elevations are the average of their corners."""
        for p in self.graph.centers:
            if p.corners:
                p.elevation = sum(self.graph.corners[q].elevation for q in p.corners) / len(p.corners)
            else:
                p.elevation = 0.0
        self.graph.mark("elevations")
