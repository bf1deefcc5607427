"""
Biome classification.

Polygons with ocean, lake or coast flags get those biomes directly; every
other polygon is placed by elevation band and moisture, roughly following the
Whittaker diagram.
"""

from collections import Counter
from enum import IntEnum
from typing import Dict

import structlog

from .graph import Center, MapGraph

logger = structlog.get_logger()


class BiomeType(IntEnum):
    """Biome types."""

    OCEAN = 0
    MARSH = 1
    ICE = 2
    LAKE = 3
    BEACH = 4
    SNOW = 5
    TUNDRA = 6
    BARE = 7
    SCORCHED = 8
    TAIGA = 9
    SHRUBLAND = 10
    TEMPERATE_DESERT = 11
    TEMPERATE_RAIN_FOREST = 12
    TEMPERATE_DECIDUOUS_FOREST = 13
    GRASSLAND = 14
    TROPICAL_RAIN_FOREST = 15
    TROPICAL_SEASONAL_FOREST = 16
    SUBTROPICAL_DESERT = 17


# Biome names for display
BIOME_NAMES = {
    BiomeType.OCEAN: "Ocean",
    BiomeType.MARSH: "Marsh",
    BiomeType.ICE: "Ice",
    BiomeType.LAKE: "Lake",
    BiomeType.BEACH: "Beach",
    BiomeType.SNOW: "Snow",
    BiomeType.TUNDRA: "Tundra",
    BiomeType.BARE: "Bare",
    BiomeType.SCORCHED: "Scorched",
    BiomeType.TAIGA: "Taiga",
    BiomeType.SHRUBLAND: "Shrubland",
    BiomeType.TEMPERATE_DESERT: "Temperate Desert",
    BiomeType.TEMPERATE_RAIN_FOREST: "Temperate Rain Forest",
    BiomeType.TEMPERATE_DECIDUOUS_FOREST: "Temperate Deciduous Forest",
    BiomeType.GRASSLAND: "Grassland",
    BiomeType.TROPICAL_RAIN_FOREST: "Tropical Rain Forest",
    BiomeType.TROPICAL_SEASONAL_FOREST: "Tropical Seasonal Forest",
    BiomeType.SUBTROPICAL_DESERT: "Subtropical Desert",
}


def classify_biome(ocean: bool, water: bool, coast: bool,
                   elevation: float, moisture: float) -> BiomeType:
    """Biome for one polygon's flags, elevation and moisture."""
    if ocean:
        return BiomeType.OCEAN
    elif water:
        if elevation < 0.1:
            return BiomeType.MARSH
        if elevation > 0.8:
            return BiomeType.ICE
        return BiomeType.LAKE
    elif coast:
        return BiomeType.BEACH
    elif elevation > 0.8:
        if moisture > 0.50:
            return BiomeType.SNOW
        elif moisture > 0.33:
            return BiomeType.TUNDRA
        elif moisture > 0.16:
            return BiomeType.BARE
        else:
            return BiomeType.SCORCHED
    elif elevation > 0.6:
        if moisture > 0.66:
            return BiomeType.TAIGA
        elif moisture > 0.33:
            return BiomeType.SHRUBLAND
        else:
            return BiomeType.TEMPERATE_DESERT
    elif elevation > 0.3:
        if moisture > 0.83:
            return BiomeType.TEMPERATE_RAIN_FOREST
        elif moisture > 0.50:
            return BiomeType.TEMPERATE_DECIDUOUS_FOREST
        elif moisture > 0.16:
            return BiomeType.GRASSLAND
        else:
            return BiomeType.TEMPERATE_DESERT
    else:
        if moisture > 0.66:
            return BiomeType.TROPICAL_RAIN_FOREST
        elif moisture > 0.33:
            return BiomeType.TROPICAL_SEASONAL_FOREST
        elif moisture > 0.16:
            return BiomeType.GRASSLAND
        else:
            return BiomeType.SUBTROPICAL_DESERT


def get_biome(p: Center) -> BiomeType:
    return classify_biome(p.ocean, p.water, p.coast, p.elevation, p.moisture)


class BiomeClassifier:
    """Assigns a biome to every polygon of a MapGraph."""

    def __init__(self, graph: MapGraph):
        self.graph = graph

    def assign_biomes(self):
        self.graph.require("moisture", "biome classification")
        for p in self.graph.centers:
            p.biome = get_biome(p)
        self.graph.mark("biomes")
        logger.info("Biomes assigned", biomes=len(self.get_biome_statistics()))

    def get_biome_statistics(self) -> Dict[BiomeType, int]:
        """Number of polygons per assigned biome."""
        return dict(Counter(p.biome for p in self.graph.centers if p.biome is not None))
