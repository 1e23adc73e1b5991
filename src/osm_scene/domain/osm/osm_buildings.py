import re
from collections.abc import Mapping

from osm_scene.domain.entities.geography import Building, PlanarPoint, Polygon
from osm_scene.domain.entities.osm import OsmGraph, StageReport
from osm_scene.domain.geometry.geometry_polygon import centroid, contains
from osm_scene.domain.osm.osm_roads import resolve
from osm_scene.runtime.hooks import NoopHooks, PipelineHooks
from osm_scene.runtime.rng import RNGRegistry

_LEADING_NUMBER = re.compile(r"^\s*([-+]?(?:\d+\.?\d*|\.\d+))")


def parse_number(raw: str | None) -> float | None:
    """Numeric prefix of an OSM tag value ('12.5 m' -> 12.5); None when absent."""
    if not raw:
        return None
    m = _LEADING_NUMBER.match(raw)
    return float(m.group(1)) if m else None


def building_height(
    tags: Mapping[str, str],
    rng,
    *,
    level_height_m: float = 3.5,
    default_range_m: tuple[float, float] = (18.0, 25.0),
) -> tuple[float, int | None]:
    """(height_m, levels) from tags; draws a default height when both tags are unusable."""
    levels_raw = parse_number(tags.get("building:levels"))
    levels = int(levels_raw) if levels_raw else None

    height = parse_number(tags.get("height")) or 0.0
    if not height and levels_raw:
        height = levels_raw * level_height_m
    if not height:
        lo, hi = default_range_m
        height = float(rng.uniform(lo, hi))
    return height, levels


def assemble_buildings(
    graph: OsmGraph,
    planar: Mapping[int, PlanarPoint],
    rng_registry: RNGRegistry,
    *,
    perimeter: Polygon | None = None,
    tag_key: str = "building",
    level_height_m: float = 3.5,
    default_range_m: tuple[float, float] = (18.0, 25.0),
    hooks: PipelineHooks | None = None,
) -> tuple[list[Building], StageReport]:
    hooks = hooks or NoopHooks()
    report = StageReport("buildings")
    out: list[Building] = []

    for idx, way in enumerate(graph.ways):
        category = way.tags.get(tag_key)
        if not category:
            continue
        report.seen += 1

        footprint, _ = resolve(way, planar)
        if len(footprint) < 3:
            report.skip("degenerate")
            hooks.skipped("buildings", "degenerate", way_id=way.id, points=len(footprint))
            continue

        c = centroid(footprint)
        if perimeter is not None and not contains(c, perimeter):
            report.skip("outside")
            continue

        # per-building stream so defaults do not depend on document order
        rng = rng_registry.substream("building_height", way.id if way.id is not None else idx)
        height, levels = building_height(
            way.tags, rng, level_height_m=level_height_m, default_range_m=default_range_m
        )
        out.append(
            Building(
                footprint=tuple(PlanarPoint(p.x, p.y) for p in footprint),
                centroid=c,
                height=height,
                levels=levels if levels is not None else round(height / level_height_m),
                category=category,
                way_id=way.id,
            )
        )
        report.produced += 1

    return out, report
