"""
Ocean, coast, lake and land classification.

Polygons connected to the map border through water are ocean; water polygons
that cannot reach the border are lakes. Coasts are where ocean meets land.
"""

from collections import deque
from dataclasses import dataclass
from typing import Optional

import structlog

from .graph import MapGraph

logger = structlog.get_logger()


@dataclass
class FeatureOptions:
    """Classification options."""

    lake_threshold: float = 0.3  # 0 to 1, fraction of water corners for water polygon


class Features:
    """Marks ocean/water/coast flags on polygons and corners."""

    def __init__(self, graph: MapGraph, options: Optional[FeatureOptions] = None):
        self.graph = graph
        self.options = options or FeatureOptions()

    def assign_ocean_coast_and_land(self):
        """
        Determine polygon and corner types: ocean, coast, land.

        Polygon water comes from the fraction of water corners left by the
        island shape. Border polygons are ocean, and a flood fill over water
        polygons spreads ocean inward; the water polygons it never reaches
        are lakes. Corner flags are then derived from the polygons they
        touch.
        """
        self.graph.require("corner_elevations", "ocean/coast/land classification")
        centers = self.graph.centers
        corners = self.graph.corners

        for p in centers:
            p.ocean = p.coast = p.border = False

        queue = deque()
        for p in centers:
            num_water = 0
            for q_id in p.corners:
                q = corners[q_id]
                if q.border:
                    p.border = True
                    p.ocean = True
                    q.shape_water = True
                if q.shape_water:
                    num_water += 1
            if p.ocean:
                queue.append(p.index)
            p.water = p.ocean or num_water >= len(p.corners) * self.options.lake_threshold

        while queue:
            p = centers[queue.popleft()]
            for r_id in p.neighbors:
                r = centers[r_id]
                if r.water and not r.ocean:
                    r.ocean = True
                    queue.append(r_id)

        # A coastal polygon has at least one ocean and one land neighbor.
        for p in centers:
            num_ocean = 0
            num_land = 0
            for r_id in p.neighbors:
                r = centers[r_id]
                num_ocean += int(r.ocean)
                num_land += int(not r.water)
            p.coast = num_ocean > 0 and num_land > 0

        # All touching polygons ocean: ocean; all land: land; otherwise coast.
        for q in corners:
            num_ocean = 0
            num_land = 0
            for p_id in q.touches:
                p = centers[p_id]
                num_ocean += int(p.ocean)
                num_land += int(not p.water)
            q.ocean = num_ocean == len(q.touches)
            q.coast = num_ocean > 0 and num_land > 0
            q.water = q.border or (num_land != len(q.touches) and not q.coast)

        self.graph.mark("classification")
        logger.info(
            "Ocean, coast and land assigned",
            ocean=sum(1 for p in centers if p.ocean),
            lakes=sum(1 for p in centers if p.water and not p.ocean),
            coast=sum(1 for p in centers if p.coast),
            land=sum(1 for p in centers if not p.water),
        )
