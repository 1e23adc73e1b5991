# tests/domain/test_buildings_trees.py
import pytest

from osm_scene.domain.entities.geography import GeoPoint, PlanarPoint, Polygon
from osm_scene.domain.geometry.geometry_polygon import contains
from osm_scene.domain.geometry.geometry_projection import EquirectangularProjection
from osm_scene.domain.osm.osm_buildings import assemble_buildings, building_height, parse_number
from osm_scene.domain.osm.osm_elements import parse_elements
from osm_scene.domain.osm.osm_trees import assemble_trees, scatter_count
from osm_scene.runtime.rng import RNGRegistry

ORIGIN = EquirectangularProjection(GeoPoint(lon=0.0, lat=0.0))
D = 0.0001  # ~11 m at the equator


def square_block(first_id, lon0, lat0, size=D):
    corners = [(lon0, lat0), (lon0 + size, lat0), (lon0 + size, lat0 + size), (lon0, lat0 + size)]
    nodes = [
        {"type": "node", "id": first_id + i, "lon": lon, "lat": lat}
        for i, (lon, lat) in enumerate(corners)
    ]
    return nodes, [first_id + i for i in range(4)] + [first_id]


def graph_and_planar(elements):
    graph, _ = parse_elements(elements)
    return graph, ORIGIN.project_nodes(graph.coords())


@pytest.fixture
def reg() -> RNGRegistry:
    return RNGRegistry(7, scene="test")


# ---------- Height parsing


def test_parse_number_prefix():
    assert parse_number("12.5 m") == 12.5
    assert parse_number("7") == 7.0
    assert parse_number("tall") is None
    assert parse_number(None) is None


def test_height_precedence(reg):
    rng = reg.stream("h")
    assert building_height({"height": "21", "building:levels": "3"}, rng) == (21.0, 3)
    assert building_height({"building:levels": "4"}, rng) == (14.0, 4)
    h, levels = building_height({}, rng)
    assert 18.0 <= h < 25.0
    assert levels is None


# ---------- Buildings


def test_buildings_footprint_centroid_and_height(reg):
    nodes, ring = square_block(1, 0.0, 0.0)
    graph, planar = graph_and_planar(
        nodes + [{"type": "way", "id": 50, "nodes": ring, "tags": {"building": "house", "building:levels": "2"}}]
    )
    out, report = assemble_buildings(graph, planar, reg)
    assert len(out) == 1
    b = out[0]
    assert len(b.footprint) == 5  # closed ring keeps the repeated first node
    assert b.category == "house"
    assert b.height == pytest.approx(7.0)
    assert b.levels == 2
    assert b.way_id == 50
    assert report.produced == 1


def test_buildings_outside_perimeter_are_dropped(reg):
    a_nodes, a_ring = square_block(1, 0.0, 0.0)
    b_nodes, b_ring = square_block(10, 0.01, 0.01)
    graph, planar = graph_and_planar(
        a_nodes
        + b_nodes
        + [
            {"type": "way", "id": 1, "nodes": a_ring, "tags": {"building": "yes"}},
            {"type": "way", "id": 2, "nodes": b_ring, "tags": {"building": "yes"}},
        ]
    )
    perimeter = Polygon((PlanarPoint(-50, -50), PlanarPoint(50, -50), PlanarPoint(50, 50), PlanarPoint(-50, 50)))
    out, report = assemble_buildings(graph, planar, reg, perimeter=perimeter)
    assert [b.way_id for b in out] == [1]
    assert report.skipped["outside"] == 1


def test_degenerate_footprint_skipped(reg):
    graph, planar = graph_and_planar(
        [
            {"type": "node", "id": 1, "lon": 0, "lat": 0},
            {"type": "node", "id": 2, "lon": D, "lat": 0},
            {"type": "way", "id": 3, "nodes": [1, 2, 99], "tags": {"building": "yes"}},
        ]
    )
    out, report = assemble_buildings(graph, planar, reg)
    assert out == []
    assert report.skipped["degenerate"] == 1


def test_default_heights_are_deterministic_per_way(reg):
    a_nodes, a_ring = square_block(1, 0.0, 0.0)
    b_nodes, b_ring = square_block(10, D * 3, 0.0)
    wa = {"type": "way", "id": 100, "nodes": a_ring, "tags": {"building": "yes"}}
    wb = {"type": "way", "id": 200, "nodes": b_ring, "tags": {"building": "yes"}}

    g1, p1 = graph_and_planar(a_nodes + b_nodes + [wa, wb])
    g2, p2 = graph_and_planar(a_nodes + b_nodes + [wb, wa])
    h1 = {b.way_id: b.height for b in assemble_buildings(g1, p1, reg)[0]}
    h2 = {b.way_id: b.height for b in assemble_buildings(g2, p2, RNGRegistry(7, scene="test"))[0]}
    assert h1 == h2
    assert all(18.0 <= h < 25.0 for h in h1.values())


# ---------- Trees


def test_mapped_trees_with_species(reg):
    graph, planar = graph_and_planar(
        [
            {"type": "node", "id": 1, "lon": 0, "lat": 0, "tags": {"natural": "tree", "species": "Platanus"}},
            {"type": "node", "id": 2, "lon": D, "lat": 0, "tags": {"natural": "tree", "genus": "Celtis"}},
            {"type": "node", "id": 3, "lon": 0, "lat": D, "tags": {"natural": "tree"}},
            {"type": "node", "id": 4, "lon": D, "lat": D},
        ]
    )
    trees, report = assemble_trees(graph, planar, reg)
    assert sorted(t.kind for t in trees) == ["Celtis", "Platanus", "unknown"]
    assert report.produced == 3


def test_park_scatter_stays_inside_park(reg):
    nodes, ring = square_block(1, 0.0, 0.0, size=0.01)  # 1e-4 deg^2 -> 100 candidates, capped
    graph, planar = graph_and_planar(
        nodes + [{"type": "way", "id": 77, "nodes": ring, "tags": {"leisure": "park"}}]
    )
    trees, _ = assemble_trees(graph, planar, reg, max_per_area=20)
    assert 0 < len(trees) <= 20
    park = Polygon(tuple(planar[i] for i in ring[:-1]))
    for t in trees:
        assert t.kind == "park"
        assert contains(t.position, park)


def test_tiny_park_gets_no_scatter(reg):
    nodes, ring = square_block(1, 0.0, 0.0, size=D)  # 1e-8 deg^2 -> 0 candidates
    graph, planar = graph_and_planar(
        nodes + [{"type": "way", "id": 5, "nodes": ring, "tags": {"landuse": "forest"}}]
    )
    trees, report = assemble_trees(graph, planar, reg)
    assert trees == []
    assert report.seen == 1


def test_trees_outside_perimeter_dropped(reg):
    graph, planar = graph_and_planar(
        [
            {"type": "node", "id": 1, "lon": 0, "lat": 0, "tags": {"natural": "tree"}},
            {"type": "node", "id": 2, "lon": 0.01, "lat": 0.01, "tags": {"natural": "tree"}},
        ]
    )
    perimeter = Polygon((PlanarPoint(-50, -50), PlanarPoint(50, -50), PlanarPoint(50, 50), PlanarPoint(-50, 50)))
    trees, report = assemble_trees(graph, planar, reg, perimeter=perimeter)
    assert len(trees) == 1
    assert report.skipped["outside"] == 1


def test_park_with_infinite_coordinate_is_skipped(reg):
    nodes, ring = square_block(1, 0.0, 0.0, size=0.01)
    nodes[1]["lon"] = float("inf")
    graph, planar = graph_and_planar(
        nodes
        + [
            {"type": "node", "id": 9, "lon": 0.001, "lat": 0.001, "tags": {"natural": "tree"}},
            {"type": "way", "id": 77, "nodes": ring, "tags": {"leisure": "park"}},
        ]
    )
    trees, report = assemble_trees(graph, planar, reg)
    assert [t.kind for t in trees] == ["unknown"]
    assert report.skipped["degenerate"] == 1


def test_scatter_count_is_zero_for_non_finite_extent():
    nodes, ring = square_block(1, 0.0, 0.0, size=0.01)
    nodes[2]["lat"] = float("inf")
    graph, _ = parse_elements(
        nodes + [{"type": "way", "id": 5, "nodes": ring, "tags": {"landuse": "forest"}}]
    )
    assert scatter_count(graph, graph.ways[0], 1e6, 20) == 0
