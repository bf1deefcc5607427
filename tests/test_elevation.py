"""Tests for elevation assignment and redistribution."""

import math

import pytest

from py_island.core.elevation import Elevation, ElevationOptions
from py_island.core.features import Features
from py_island.core.island_shape import RadialIsland, SquareIsland


class TestCornerElevations:
    """Test the breadth-first elevation assignment."""

    @pytest.fixture
    def elevation(self, map_factory):
        island = map_factory(last=3, size=300.0, num_points=500)
        engine = Elevation(island.graph, RadialIsland.from_seed(85882))
        engine.assign_corner_elevations()
        return engine

    def test_finite_and_non_negative(self, elevation):
        for q in elevation.graph.corners:
            assert math.isfinite(q.elevation)
            assert q.elevation >= 0.0

    def test_border_corners(self, elevation):
        border = [q for q in elevation.graph.corners if q.border]
        assert border
        for q in border:
            assert q.elevation == 0.0
            assert q.water

    def test_only_border_corners_at_zero(self, elevation):
        for q in elevation.graph.corners:
            if not q.border:
                assert q.elevation > 0.0

    def test_no_local_minima(self, elevation):
        corners = elevation.graph.corners
        for q in corners:
            if q.border:
                continue
            assert any(corners[s].elevation < q.elevation for s in q.adjacent)

    def test_fixed_point(self, elevation):
        """No relaxation step can lower any corner any further."""
        corners = elevation.graph.corners
        options = elevation.options
        for q in corners:
            for s_id in q.adjacent:
                s = corners[s_id]
                step = options.water_step
                if not q.water and not s.water:
                    step += options.land_step
                assert q.elevation + step >= s.elevation - 1e-9

    def test_rerun_is_identical(self, elevation):
        before = [q.elevation for q in elevation.graph.corners]
        elevation.assign_corner_elevations()
        assert [q.elevation for q in elevation.graph.corners] == before

    def test_land_is_higher_than_water(self, elevation):
        corners = elevation.graph.corners
        land = [q.elevation for q in corners if not q.water]
        water = [q.elevation for q in corners if q.water]
        assert land and water
        assert sum(land) / len(land) > sum(water) / len(water)

    def test_inside_uses_normalized_coordinates(self, map_factory):
        graph = map_factory(last=3).graph
        seen = []

        def shape(x, y):
            seen.append((x, y))
            return True

        Elevation(graph, shape).assign_corner_elevations()
        # Border corners are water without asking the shape
        assert len(seen) == sum(1 for q in graph.corners if not q.border)
        for x, y in seen:
            assert -1.0 <= x <= 1.0
            assert -1.0 <= y <= 1.0


class TestRedistribution:
    """Test elevation redistribution."""

    @pytest.fixture
    def classified(self, map_factory):
        island = map_factory(last=3, size=300.0, num_points=500)
        graph = island.graph
        engine = Elevation(graph, RadialIsland.from_seed(85882))
        engine.assign_corner_elevations()
        Features(graph).assign_ocean_coast_and_land()
        return engine

    def test_requires_classification(self, map_factory):
        graph = map_factory(last=3).graph
        engine = Elevation(graph, SquareIsland())
        engine.assign_corner_elevations()
        with pytest.raises(ValueError):
            engine.redistribute_elevations()

    def test_rank_order_preserved(self, classified):
        land = classified.graph.land_corners()
        before = {q.index: q.elevation for q in land}
        classified.redistribute_elevations()

        ranked = sorted(land, key=lambda q: (before[q.index], q.index))
        after = [q.elevation for q in ranked]
        assert after == sorted(after)

    def test_range(self, classified):
        land = classified.graph.land_corners()
        assert len(land) > 2
        classified.redistribute_elevations()
        values = [q.elevation for q in land]
        assert min(values) == 0.0
        assert max(values) == 1.0
        assert all(0.0 <= v <= 1.0 for v in values)

    def test_low_elevations_more_common(self, classified):
        land = classified.graph.land_corners()
        classified.redistribute_elevations()
        low = sum(1 for q in land if q.elevation < 0.5)
        assert low > len(land) / 2

    def test_target_distribution(self, classified):
        land = classified.graph.land_corners()
        classified.redistribute_elevations()
        ranked = sorted(q.elevation for q in land)
        n = len(ranked)
        for i in (0, n // 4, n // 2, (3 * n) // 4):
            y = i / (n - 1)
            expected = min(1.0, math.sqrt(1.1) - math.sqrt(1.1 * (1 - y)))
            assert ranked[i] == pytest.approx(expected)

    def test_scale_factor_option(self, map_factory):
        graph = map_factory(last=3, size=300.0, num_points=500).graph
        engine = Elevation(graph, RadialIsland.from_seed(85882), ElevationOptions(scale_factor=1.0))
        engine.assign_corner_elevations()
        Features(graph).assign_ocean_coast_and_land()
        engine.redistribute_elevations()
        values = sorted(q.elevation for q in graph.land_corners())
        # Without the extra mountain area only the top corner reaches 1.0
        assert values[-1] == pytest.approx(1.0)
        assert values[-2] < 1.0

    def test_single_corner(self, classified):
        q = classified.graph.land_corners()[0]
        classified.redistribute_elevations([q])
        assert q.elevation == 0.0

    def test_water_flattened_and_polygons_averaged(self, classified):
        classified.redistribute_elevations()
        classified.flatten_water()
        classified.assign_polygon_elevations()
        graph = classified.graph
        for q in graph.corners:
            if q.ocean or q.coast:
                assert q.elevation == 0.0
        for p in graph.centers:
            expected = sum(graph.corners[q].elevation for q in p.corners) / len(p.corners)
            assert p.elevation == pytest.approx(expected)
