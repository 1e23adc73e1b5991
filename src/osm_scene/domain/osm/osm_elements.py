from collections.abc import Iterable

from pydantic import ValidationError

from osm_scene.domain.entities.geography import GeoPoint
from osm_scene.domain.entities.osm import Node, OsmGraph, StageReport, Way
from osm_scene.io.osm_models import ELEMENT_MODELS, NodeElement
from osm_scene.runtime.hooks import NoopHooks, PipelineHooks


def parse_elements(
    elements: Iterable, *, hooks: PipelineHooks | None = None
) -> tuple[OsmGraph, StageReport]:
    """
    Split a flat Overpass element list into a node index and way list.
    Malformed elements are skipped and counted; a duplicate node id
    overwrites the earlier entry.
    """
    hooks = hooks or NoopHooks()
    graph, report = OsmGraph(), StageReport("parse")

    for idx, el in enumerate(elements):
        report.seen += 1
        kind = el.get("type") if isinstance(el, dict) else None
        model = ELEMENT_MODELS.get(kind) if isinstance(kind, str) else None
        if model is None:
            reason = "ignored" if isinstance(kind, str) else "malformed"
            report.skip(reason)
            hooks.skipped("parse", reason, index=idx, kind=kind)
            continue
        try:
            rec = model.model_validate(el)
        except ValidationError as exc:
            report.skip("malformed")
            hooks.skipped("parse", "malformed", index=idx, kind=kind, errors=exc.error_count())
            continue

        if isinstance(rec, NodeElement):
            graph.nodes[rec.id] = Node(rec.id, GeoPoint(lon=rec.lon, lat=rec.lat), rec.tags)
        else:
            graph.ways.append(Way(tuple(rec.nodes), rec.tags, rec.id))
        report.produced += 1

    return graph, report
