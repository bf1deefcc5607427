"""
Command line entry point.

Usage:
    py-island [--seed N] [--variant N] [--shape radial|perlin|square|blob] ...
"""

import argparse
import sys
from typing import List, Optional

import structlog
from pydantic import ValidationError

from .config import configure_logging, settings
from .core.biomes import BIOME_NAMES, BiomeClassifier
from .core.errors import GenerationError, MapConfigurationError
from .core.island_map import IslandMap
from .core.island_shape import IslandShapeType

logger = structlog.get_logger()


def build_parser() -> argparse.ArgumentParser:
    parser = argparse.ArgumentParser(description="Generate a procedural island map")
    parser.add_argument("--seed", type=int, dest="island_seed", help="Island shape seed")
    parser.add_argument("--variant", type=int, dest="map_seed", help="Map seed for points and rivers")
    parser.add_argument(
        "--shape", dest="island_shape",
        choices=[t.value for t in IslandShapeType], help="Island shape",
    )
    parser.add_argument("--size", type=float, help="Map side length")
    parser.add_argument("--points", type=int, dest="num_points", help="Number of polygons")
    parser.add_argument("--lloyd", type=int, dest="num_lloyd_iterations", help="Lloyd relaxation rounds")
    parser.add_argument(
        "--no-improve-corners", action="store_false", dest="improve_corners", default=None,
        help="Keep exact Voronoi corners",
    )
    parser.add_argument("--log-level", default=settings.log_level, help="Log level")
    parser.add_argument(
        "--log-format", default=settings.log_format, choices=["console", "json"],
        help="Log output format",
    )
    return parser


def main(argv: Optional[List[str]] = None) -> int:
    args = build_parser().parse_args(argv)
    configure_logging(args.log_level, args.log_format)

    try:
        config = settings.map_config(
            size=args.size,
            num_points=args.num_points,
            num_lloyd_iterations=args.num_lloyd_iterations,
            improve_corners=args.improve_corners,
            island_shape=args.island_shape,
            island_seed=args.island_seed,
            map_seed=args.map_seed,
        )
        island = IslandMap(config)
        graph = island.generate()
    except (ValidationError, MapConfigurationError, GenerationError) as e:
        logger.error("Map generation failed", error=str(e))
        return 1

    centers = graph.centers
    logger.info(
        "Map generated",
        shape=config.island_shape.value,
        polygons=len(centers),
        corners=len(graph.corners),
        edges=len(graph.edges),
        ocean=sum(1 for p in centers if p.ocean),
        lakes=sum(1 for p in centers if p.water and not p.ocean),
        coast=sum(1 for p in centers if p.coast and not p.water),
        river_edges=sum(1 for e in graph.edges if e.river > 0),
    )
    stats = BiomeClassifier(graph).get_biome_statistics()
    for biome, count in sorted(stats.items(), key=lambda item: -item[1]):
        logger.info("Biome", biome=BIOME_NAMES[biome], polygons=count)
    return 0


if __name__ == "__main__":
    sys.exit(main())
