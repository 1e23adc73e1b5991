import math
from collections.abc import Mapping

from osm_scene.domain.entities.geography import PlanarPoint, Polygon, Tree
from osm_scene.domain.entities.osm import OsmGraph, StageReport, Way
from osm_scene.domain.geometry.geometry_polygon import bounding_box, contains
from osm_scene.domain.osm.osm_roads import resolve
from osm_scene.runtime.hooks import NoopHooks, PipelineHooks
from osm_scene.runtime.rng import RNGRegistry

DEFAULT_SCATTER_TAGS: dict[str, tuple[str, ...]] = {"landuse": ("forest",), "leisure": ("park",)}


def tree_kind(tags: Mapping[str, str]) -> str:
    return tags.get("species") or tags.get("genus") or "unknown"


def is_scatter_area(way: Way, scatter_tags: Mapping[str, tuple[str, ...]]) -> bool:
    return any(way.tags.get(k) in vals for k, vals in scatter_tags.items())


def scatter_count(graph: OsmGraph, way: Way, density: float, cap: int) -> int:
    """Candidate count from the geodetic bbox area (deg^2 * density), capped."""
    coords = [graph.nodes[nid].coord for nid in way.node_ids if nid in graph.nodes]
    if not coords:
        return 0
    span_lon = max(c.lon for c in coords) - min(c.lon for c in coords)
    span_lat = max(c.lat for c in coords) - min(c.lat for c in coords)
    area = span_lon * span_lat * density
    if not math.isfinite(area):
        return 0
    return min(math.floor(area), cap)


def assemble_trees(
    graph: OsmGraph,
    planar: Mapping[int, PlanarPoint],
    rng_registry: RNGRegistry,
    *,
    perimeter: Polygon | None = None,
    scatter_tags: Mapping[str, tuple[str, ...]] = DEFAULT_SCATTER_TAGS,
    density: float = 1e6,
    max_per_area: int = 20,
    hooks: PipelineHooks | None = None,
) -> tuple[list[Tree], StageReport]:
    hooks = hooks or NoopHooks()
    report = StageReport("trees")
    trees: list[Tree] = []

    def keep(t: Tree) -> None:
        if perimeter is not None and not contains(t.position, perimeter):
            report.skip("outside")
            return
        trees.append(t)
        report.produced += 1

    # individually mapped trees
    for node in graph.nodes.values():
        if node.tags.get("natural") != "tree":
            continue
        report.seen += 1
        keep(Tree(planar[node.id], tree_kind(node.tags)))

    # parks and forests get a handful of scattered trees
    for idx, way in enumerate(graph.ways):
        if not is_scatter_area(way, scatter_tags):
            continue
        report.seen += 1
        ring, _ = resolve(way, planar)
        if len(ring) < 3 or not all(math.isfinite(p.x) and math.isfinite(p.y) for p in ring):
            report.skip("degenerate")
            hooks.skipped("trees", "degenerate", way_id=way.id, points=len(ring))
            continue

        n = scatter_count(graph, way, density, max_per_area)
        if n <= 0:
            continue
        area = Polygon(tuple(ring))
        x0, y0, x1, y1 = bounding_box(ring)
        rng = rng_registry.substream("tree_scatter", way.id if way.id is not None else idx)
        xs, ys = rng.uniform(x0, x1, n), rng.uniform(y0, y1, n)
        for x, y in zip(xs, ys):
            p = PlanarPoint(float(x), float(y))
            if not contains(p, area):
                report.skip("outside_area")
                continue
            keep(Tree(p, "park"))

    return trees, report
