from collections.abc import Mapping

from osm_scene.domain.classify import RoadClassifier
from osm_scene.domain.entities.geography import Path, PlanarPoint
from osm_scene.domain.entities.osm import OsmGraph, StageReport, Way
from osm_scene.runtime.hooks import NoopHooks, PipelineHooks


def resolve(way: Way, planar: Mapping[int, PlanarPoint]) -> tuple[list[PlanarPoint], int]:
    """Look up a way's node refs; unknown ids are dropped. Returns (points, n_missing)."""
    pts = [planar[nid] for nid in way.node_ids if nid in planar]
    return pts, len(way.node_ids) - len(pts)


def assemble_paths(
    graph: OsmGraph,
    planar: Mapping[int, PlanarPoint],
    classifier: RoadClassifier,
    *,
    category_key: str = "highway",
    hooks: PipelineHooks | None = None,
) -> tuple[list[Path], StageReport]:
    hooks = hooks or NoopHooks()
    report = StageReport("roads")
    paths: list[Path] = []

    for way in graph.ways:
        category = way.tags.get(category_key)
        if category is None:
            # not a road at all (buildings, parks, ... share the document)
            continue
        report.seen += 1
        if not classifier.accepts(category):
            report.skip("unknown_category")
            hooks.skipped("roads", "unknown_category", way_id=way.id, category=category)
            continue

        pts, missing = resolve(way, planar)
        if missing:
            report.skip("missing_refs", missing)
        if len(pts) < 2:
            report.skip("degenerate")
            hooks.skipped("roads", "degenerate", way_id=way.id, points=len(pts))
            continue

        paths.append(Path(tuple(pts), category, classifier.weight(category), way.id))
        report.produced += 1

    return paths, report
