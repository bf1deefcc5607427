"""
Core island generation functionality.
"""

from .graph import Center, Corner, Edge, MapGraph
from .pm_prng import PMPRNG
from .island_shape import IslandShapeType, make_island_shape
from .voronoi_graph import VoronoiDiagram, DiagramEdge, build_diagram, build_graph
from .elevation import Elevation, ElevationOptions
from .features import Features, FeatureOptions
from .hydrology import Hydrology, HydrologyOptions
from .moisture import Moisture, MoistureOptions
from .biomes import BiomeClassifier, BiomeType, classify_biome

__all__ = ['Center', 'Corner', 'Edge', 'MapGraph', 'PMPRNG',
           'IslandShapeType', 'make_island_shape',
           'VoronoiDiagram', 'DiagramEdge', 'build_diagram', 'build_graph',
           'Elevation', 'ElevationOptions', 'Features', 'FeatureOptions',
           'Hydrology', 'HydrologyOptions', 'Moisture', 'MoistureOptions',
           'BiomeClassifier', 'BiomeType', 'classify_biome']
