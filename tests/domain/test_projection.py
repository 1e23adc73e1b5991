# tests/domain/test_projection.py
import math

import numpy as np
import pytest

from osm_scene.domain.entities.geography import GeoPoint, PlanarPoint
from osm_scene.domain.geometry.geometry_projection import (
    EquirectangularProjection,
    bbox_around,
    bounds_of,
    overpass_bbox,
    project,
    unproject,
)

EIXAMPLE = GeoPoint(lon=2.15665, lat=41.39112)


def test_project_at_equator_matches_meters_per_degree():
    p = project(GeoPoint(lon=0.01, lat=0.0), GeoPoint(lon=0.0, lat=0.0))
    assert abs(p.x - 1110.0) < 1e-6
    assert p.y == 0.0
    assert p.z == 0.0


def test_center_projects_to_origin():
    p = project(EIXAMPLE, EIXAMPLE)
    assert p == PlanarPoint(0.0, 0.0)


def test_longitude_is_compressed_by_center_latitude():
    p = project(GeoPoint(lon=EIXAMPLE.lon + 0.001, lat=EIXAMPLE.lat + 0.001), EIXAMPLE)
    assert abs(p.y - 111.0) < 1e-6
    assert abs(p.x - 111.0 * math.cos(EIXAMPLE.lat * math.pi / 180)) < 1e-6


def test_round_trip_within_operating_range():
    rng = np.random.default_rng(7)
    for dlon, dlat in rng.uniform(-0.1, 0.1, size=(200, 2)):
        g = GeoPoint(lon=EIXAMPLE.lon + dlon, lat=EIXAMPLE.lat + dlat)
        back = unproject(project(g, EIXAMPLE), EIXAMPLE)
        assert abs(back.lon - g.lon) < 1e-9
        assert abs(back.lat - g.lat) < 1e-9


def test_nan_and_inf_propagate():
    p = project(GeoPoint(lon=math.nan, lat=math.inf), EIXAMPLE)
    assert math.isnan(p.x)
    assert math.isinf(p.y)

    q = project(GeoPoint(lon=1.0, lat=1.0), GeoPoint(lon=0.0, lat=math.inf))
    assert math.isnan(q.x)


def test_project_nodes_matches_scalar_projection():
    proj = EquirectangularProjection(EIXAMPLE)
    coords = {
        1: GeoPoint(lon=2.150, lat=41.390),
        2: GeoPoint(lon=2.160, lat=41.395),
        3: GeoPoint(lon=2.170, lat=41.380),
    }
    planar = proj.project_nodes(coords)
    assert set(planar) == {1, 2, 3}
    for nid, g in coords.items():
        p = proj.project(g)
        assert abs(planar[nid].x - p.x) < 1e-9
        assert abs(planar[nid].y - p.y) < 1e-9


def test_project_nodes_empty():
    assert EquirectangularProjection(EIXAMPLE).project_nodes({}) == {}


# ---------- Bounding boxes


def test_bbox_around_is_symmetric():
    s, w, n, e = bbox_around(EIXAMPLE, 0.4)
    assert abs((n - EIXAMPLE.lat) - 0.4 / 111) < 1e-12
    assert abs((EIXAMPLE.lat - s) - 0.4 / 111) < 1e-12
    assert abs((e - EIXAMPLE.lon) - (EIXAMPLE.lon - w)) < 1e-12
    assert e - EIXAMPLE.lon > n - EIXAMPLE.lat  # longitude degrees are shorter


def test_bounds_of_and_overpass_string():
    pts = [GeoPoint(lon=2.14, lat=41.39), GeoPoint(lon=2.17, lat=41.40), GeoPoint(lon=2.15, lat=41.37)]
    assert bounds_of(pts) == (41.37, 2.14, 41.40, 2.17)
    assert overpass_bbox(bounds_of(pts)) == "41.37,2.14,41.4,2.17"


def test_bounds_of_rejects_empty():
    with pytest.raises(ValueError):
        bounds_of([])
