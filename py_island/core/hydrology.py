"""
Hydrology: downslope flow, watersheds and rivers.

Water at every corner flows to its lowest neighbor. Following those pointers
from a land corner leads to the coast; the coastal corner reached is the
corner's watershed. Rivers are traced along the same pointers from random
upland sources.
"""

from collections import deque
from dataclasses import dataclass
from typing import Optional

import structlog

from .errors import GenerationError
from .graph import MapGraph
from .pm_prng import PMPRNG

logger = structlog.get_logger()


@dataclass
class HydrologyOptions:
    """Hydrology calculation options."""

    max_watershed_iterations: int = 100  # Rounds of watershed pointer chasing
    river_min_elevation: float = 0.3  # Lowest elevation a river may start at
    river_max_elevation: float = 0.9  # Highest elevation a river may start at


class Hydrology:
    """Handles downslope directions, watershed attribution and rivers."""

    def __init__(self, graph: MapGraph, prng: PMPRNG, options: Optional[HydrologyOptions] = None):
        """
        Initialize hydrology system.

        Args:
            graph: MapGraph with redistributed elevations
            prng: Map PRNG, used to pick river sources
            options: Hydrology calculation options
        """
        self.graph = graph
        self.prng = prng
        self.options = options or HydrologyOptions()

    def calculate_downslopes(self):
        """
        Point every corner at its lowest neighbor, or at itself.

        Only a strictly lower neighbor replaces the current choice, so the
        first of several equally low neighbors wins. Land corners left on a
        flat (the lowest land corner beside a sea-level coast, or the summit
        plateau capped at 1.0) are then pointed across the flat towards the
        nearest corner that already drains, so every land corner reaches
        the coast.
        """
        self.graph.require("elevations", "downslope calculation")
        corners = self.graph.corners
        for q in corners:
            r = q
            for s_id in q.adjacent:
                s = corners[s_id]
                if s.elevation < r.elevation:
                    r = s
            q.downslope = r.index

        flats = self._resolve_flats()
        self.graph.mark("downslopes")
        if flats:
            logger.debug("Flat corners resolved", corners=flats)

    def _resolve_flats(self) -> int:
        """Breadth-first over equal-elevation land corners from draining ones."""
        corners = self.graph.corners

        def is_land(q):
            return not q.ocean and not q.coast

        queue = deque(
            q.index for q in corners
            if not is_land(q) or q.downslope != q.index
        )
        resolved = 0
        while queue:
            s = corners[queue.popleft()]
            for q_id in s.adjacent:
                q = corners[q_id]
                if is_land(q) and q.downslope == q.index and q.elevation == s.elevation:
                    q.downslope = s.index
                    queue.append(q_id)
                    resolved += 1
        return resolved

    def calculate_watersheds(self) -> int:
        """
        Find the coastal corner every land corner drains to.

        Watershed pointers start one step downslope and repeatedly jump to
        the watershed of their downslope neighbor, for at most
        ``max_watershed_iterations`` rounds. Stopping at the cap is not an
        error: a few corners far from the coast are simply left pointing
        at an inland corner.

        Returns:
            Number of rounds run
        """
        self.graph.require("downslopes", "watershed calculation")
        corners = self.graph.corners

        for q in corners:
            q.watershed = q.index
            q.watershed_size = 0
            if not q.ocean and not q.coast:
                q.watershed = q.downslope

        rounds = 0
        converged = False
        for _ in range(self.options.max_watershed_iterations):
            rounds += 1
            changed = False
            for q in corners:
                if not q.ocean and not q.coast and not corners[q.watershed].coast:
                    r = corners[corners[q.downslope].watershed]
                    if not r.ocean and r.index != q.watershed:
                        q.watershed = r.index
                        changed = True
            if not changed:
                converged = True
                break

        if not converged:
            logger.info("Watersheds stopped at iteration cap", rounds=rounds)

        # How big is each watershed?
        for q in corners:
            if q.ocean or q.coast:
                continue
            outlet = corners[q.watershed]
            if outlet.coast:
                outlet.watershed_size += 1

        self.graph.mark("watersheds")
        logger.info(
            "Watersheds calculated",
            rounds=rounds,
            outlets=sum(1 for q in corners if q.watershed_size > 0),
        )
        return rounds

    def create_rivers(self):
        """
        Create rivers along edges.

        Pick a random corner, then walk downslope to the coast, marking
        edges and corners as river. Each walk adds 1 to every edge it
        follows and to every corner it visits; walks may share edges.
        """
        self.graph.require("downslopes", "river creation")
        corners = self.graph.corners
        n_attempts = int(self.graph.size // 2)
        n_rivers = 0

        for q in corners:
            q.river = 0
        for edge in self.graph.edges:
            edge.river = 0

        for _ in range(n_attempts):
            q = self.prng.choice(corners)
            if (q.ocean or q.elevation < self.options.river_min_elevation
                    or q.elevation > self.options.river_max_elevation):
                continue
            n_rivers += 1
            source = q
            while not q.coast:
                if q.downslope == q.index:
                    break
                edge = self.graph.lookup_edge_from_corner(q.index, q.downslope)
                if edge is None:
                    raise GenerationError(
                        f"No edge between corner {q.index} and its downslope {q.downslope}"
                    )
                edge.river += 1
                if q is source:
                    q.river += 1
                down = corners[q.downslope]
                down.river += 1
                q = down

        self.graph.mark("rivers")
        logger.info(
            "Rivers created",
            attempts=n_attempts,
            rivers=n_rivers,
            river_edges=sum(1 for e in self.graph.edges if e.river > 0),
        )

    def run_full_simulation(self):
        """Run downslope, watershed and river calculations in order."""
        self.calculate_downslopes()
        self.calculate_watersheds()
        self.create_rivers()
