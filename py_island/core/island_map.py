"""
Island map generation pipeline.

Runs the generation stages in order over one MapGraph:

0. Place points
1. Improve points (Lloyd relaxation)
2. Build graph (Voronoi diagram, graph builder, corner improvement)
3. Assign elevations (elevation, ocean/coast/land, redistribution)
4. Assign moisture (downslopes, watersheds, rivers, moisture)
5. Decorate map (biomes)
"""

import time
from typing import Callable, List, NamedTuple, Optional

import numpy as np
import structlog

from ..config.config import MapConfig
from .biomes import BiomeClassifier
from .elevation import Elevation, ElevationOptions
from .features import FeatureOptions, Features
from .graph import MapGraph
from .hydrology import Hydrology, HydrologyOptions
from .island_shape import IslandShape, make_island_shape
from .moisture import Moisture
from .pm_prng import PMPRNG
from .voronoi_graph import (
    VoronoiDiagram,
    build_graph,
    generate_random_points,
    improve_corners,
    relax_points,
)

logger = structlog.get_logger()


class Stage(NamedTuple):
    name: str
    run: Callable[[], None]


class IslandMap:
    """
    Generates an island map as a graph of polygons, corners and edges.

    The island shape comes from ``island_shape``/``island_seed``; points and
    rivers come from the map PRNG seeded with ``map_seed``. The same config
    always produces the same graph.
    """

    def __init__(self, config: Optional[MapConfig] = None,
                 island_shape: Optional[IslandShape] = None):
        """
        Initialize the map generator.

        Args:
            config: Generation parameters
            island_shape: Shape predicate overriding the configured shape
        """
        self.config = config or MapConfig()
        self.island_shape = island_shape or make_island_shape(
            self.config.island_shape, self.config.island_seed
        )
        self.map_random = PMPRNG(self.config.map_seed)

        self.points: Optional[np.ndarray] = None  # Only useful during map construction
        self.graph: Optional[MapGraph] = None

        self.stages: List[Stage] = [
            Stage("Place points", self._place_points),
            Stage("Improve points", self._improve_points),
            Stage("Build graph", self._build_graph),
            Stage("Assign elevations", self._assign_elevations),
            Stage("Assign moisture", self._assign_moisture),
            Stage("Decorate map", self._decorate_map),
        ]

    def reset(self):
        """Drop the current graph and points."""
        self.points = None
        self.graph = None
        self.map_random = PMPRNG(self.config.map_seed)

    def generate(self, first: int = 0, last: Optional[int] = None) -> MapGraph:
        """
        Run stages ``first`` up to, not including, ``last``.

        Args:
            first: Index of the first stage to run
            last: Index after the last stage to run, all stages by default

        Returns:
            The generated MapGraph (None if the graph stage has not run)
        """
        if last is None:
            last = len(self.stages)
        if not 0 <= first <= last <= len(self.stages):
            raise ValueError(
                f"Invalid stage range [{first}, {last}) for {len(self.stages)} stages"
            )

        for stage in self.stages[first:last]:
            start = time.perf_counter()
            stage.run()
            logger.info(
                "Stage complete",
                stage=stage.name,
                elapsed_ms=round((time.perf_counter() - start) * 1000, 1),
            )
        return self.graph

    def _place_points(self):
        self.reset()
        self.points = generate_random_points(
            self.map_random, self.config.num_points, self.config.size
        )

    def _improve_points(self):
        if self.points is None:
            raise ValueError("Points must be placed before they can be improved")
        self.points = relax_points(
            self.points, self.config.size, self.config.num_lloyd_iterations
        )

    def _build_graph(self):
        if self.points is None:
            raise ValueError("Points must be placed before the graph is built")
        diagram = VoronoiDiagram(self.points, self.config.size)
        self.graph = build_graph(self.points, diagram.edges(), self.config.size)
        if self.config.improve_corners:
            improve_corners(self.graph)
        self.points = None

    def _require_graph(self) -> MapGraph:
        if self.graph is None:
            raise ValueError("The graph must be built before this stage")
        return self.graph

    def _assign_elevations(self):
        graph = self._require_graph()
        elevation = Elevation(
            graph,
            self.island_shape,
            ElevationOptions(scale_factor=self.config.elevation_scale_factor),
        )
        features = Features(graph, FeatureOptions(lake_threshold=self.config.lake_threshold))

        # Determine the elevations and water at Voronoi corners.
        elevation.assign_corner_elevations()

        # Determine polygon and corner type: ocean, coast, land.
        features.assign_ocean_coast_and_land()

        # Rescale land elevations so that lower elevations are more common,
        # then put ocean and coast at sea level.
        elevation.redistribute_elevations()
        elevation.flatten_water()

        elevation.assign_polygon_elevations()

    def _assign_moisture(self):
        graph = self._require_graph()
        hydrology = Hydrology(
            graph,
            self.map_random,
            HydrologyOptions(max_watershed_iterations=self.config.watershed_iterations),
        )
        hydrology.run_full_simulation()

        moisture = Moisture(graph)
        moisture.assign_corner_moisture()
        moisture.redistribute_moisture()
        moisture.assign_polygon_moisture()

    def _decorate_map(self):
        BiomeClassifier(self._require_graph()).assign_biomes()


def generate_island(config: Optional[MapConfig] = None) -> MapGraph:
    """Generate a complete island map."""
    return IslandMap(config).generate()
