"""Tests for moisture assignment."""

import pytest

from py_island.core.moisture import Moisture, MoistureOptions


class TestMoisture:
    """Test moisture on complete maps."""

    def test_range(self, radial_map):
        for q in radial_map.corners:
            assert 0.0 <= q.moisture <= 1.0
        for p in radial_map.centers:
            assert 0.0 <= p.moisture <= 1.0

    def test_salt_water_is_wet(self, radial_map):
        for q in radial_map.corners:
            if q.ocean or q.coast:
                assert q.moisture == 1.0

    def test_land_moisture_is_evenly_spread(self, radial_map):
        values = sorted(q.moisture for q in radial_map.land_corners())
        n = len(values)
        assert n > 1
        assert values == pytest.approx([i / (n - 1) for i in range(n)])

    def test_polygon_moisture_is_corner_average(self, radial_map):
        corners = radial_map.corners
        for p in radial_map.centers:
            expected = sum(corners[q].moisture for q in p.corners) / len(p.corners)
            assert p.moisture == pytest.approx(expected)

    def test_requires_rivers(self, map_factory):
        graph = map_factory(last=4).graph
        with pytest.raises(ValueError):
            Moisture(graph).assign_corner_moisture()


class TestCornerMoisture:
    """Test moisture spreading from a single river corner."""

    @pytest.fixture
    def source(self, square_map):
        corners = square_map.corners
        for q in corners:
            q.river = 0
        inland = [
            q for q in square_map.land_corners()
            if not any(corners[s].ocean or corners[s].coast for s in q.adjacent)
        ]
        q = inland[len(inland) // 2]
        q.river = 20
        return q

    def test_river_moisture_is_capped(self, square_map, source):
        Moisture(square_map).assign_corner_moisture()
        assert source.moisture == 3.0
        for s in source.adjacent:
            assert square_map.corners[s].moisture >= pytest.approx(2.7)

    def test_moisture_decays_with_distance(self, square_map, source):
        Moisture(square_map).assign_corner_moisture()
        values = [q.moisture for q in square_map.land_corners() if q is not source]
        assert max(values) == pytest.approx(3.0 * 0.9)
        assert min(values) > 0.0

    def test_options(self, square_map, source):
        options = MoistureOptions(decay=0.5, river_moisture=0.1, max_river_moisture=1.5)
        Moisture(square_map, options).assign_corner_moisture()
        assert source.moisture == pytest.approx(1.5)
        for s in source.adjacent:
            if not square_map.corners[s].coast:
                assert square_map.corners[s].moisture == pytest.approx(0.75)

    def test_single_location_redistribution(self, square_map, source):
        moisture = Moisture(square_map)
        moisture.assign_corner_moisture()
        moisture.redistribute_moisture([source])
        assert source.moisture == 0.0

    def test_lake_corner_seeds_moisture(self, square_map):
        corners = square_map.corners
        for q in corners:
            q.river = 0
        lake = next(
            q for q in square_map.land_corners()
            if not any(corners[s].ocean or corners[s].coast for s in q.adjacent)
        )
        lake.water = True
        Moisture(square_map).assign_corner_moisture()
        assert lake.moisture == 1.0
        for s in lake.adjacent:
            assert corners[s].moisture == pytest.approx(0.9)

    def test_dry_map(self, square_map):
        for q in square_map.corners:
            q.river = 0
        Moisture(square_map).assign_corner_moisture()
        for q in square_map.corners:
            if q.ocean or q.coast:
                assert q.moisture == 1.0
            else:
                assert q.moisture == 0.0
