"""
Moisture: fresh water spreading inland from rivers and lakes.

Fresh water sources (rivers and lakes, not oceans) spread moisture to their
neighbors, losing a fraction each step. Salt water is wet but does not
spread moisture; it is set after propagation.
"""

from collections import deque
from dataclasses import dataclass
from typing import List, Optional

import structlog

from .graph import Corner, MapGraph

logger = structlog.get_logger()


@dataclass
class MoistureOptions:
    """Moisture calculation options."""

    decay: float = 0.9  # Fraction of moisture kept per step away from the source
    river_moisture: float = 0.2  # Moisture per unit of river volume
    max_river_moisture: float = 3.0


class Moisture:
    """Assigns corner and polygon moisture on a MapGraph."""

    def __init__(self, graph: MapGraph, options: Optional[MoistureOptions] = None):
        self.graph = graph
        self.options = options or MoistureOptions()

    def assign_corner_moisture(self):
        """Spread moisture from rivers and lakes by breadth-first relaxation."""
        self.graph.require("rivers", "moisture assignment")
        corners = self.graph.corners
        queue = deque()

        for q in corners:
            if (q.water or q.river > 0) and not q.ocean:
                if q.river > 0:
                    q.moisture = min(self.options.max_river_moisture,
                                     self.options.river_moisture * q.river)
                else:
                    q.moisture = 1.0
                queue.append(q.index)
            else:
                q.moisture = 0.0

        while queue:
            q = corners[queue.popleft()]
            for r_id in q.adjacent:
                r = corners[r_id]
                new_moisture = q.moisture * self.options.decay
                if new_moisture > r.moisture:
                    r.moisture = new_moisture
                    queue.append(r_id)

        # Salt water
        for q in corners:
            if q.ocean or q.coast:
                q.moisture = 1.0

        self.graph.mark("corner_moisture")

    def redistribute_moisture(self, locations: Optional[List[Corner]] = None):
        """Rank land corners by moisture and spread them evenly over [0, 1]."""
        self.graph.require("corner_moisture", "moisture redistribution")
        if locations is None:
            locations = self.graph.land_corners()

        ranked = sorted(locations, key=lambda q: q.moisture)
        last = len(ranked) - 1
        for i, q in enumerate(ranked):
            q.moisture = i / last if last > 0 else 0.0

    def assign_polygon_moisture(self):
        """Polygon moisture is the average of the moisture at corners."""
        corners = self.graph.corners
        for p in self.graph.centers:
            total = 0.0
            for q_id in p.corners:
                q = corners[q_id]
                if q.moisture > 1.0:
                    q.moisture = 1.0
                total += q.moisture
            p.moisture = total / len(p.corners) if p.corners else 0.0
        self.graph.mark("moisture")
        logger.info(
            "Moisture assigned",
            wet_polygons=sum(1 for p in self.graph.centers if p.moisture > 0.5),
        )
