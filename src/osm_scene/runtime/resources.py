# runtime/resources.py
import json
from collections.abc import Mapping
from functools import lru_cache

from pydantic import TypeAdapter

from osm_scene.config.models import GeoPointModel
from osm_scene.domain.entities.geography import GeoPoint

_boundary_adapter = TypeAdapter(list[GeoPointModel])


def read_document(file: str) -> dict:
    """Load an already-downloaded Overpass JSON document."""
    with open(file, encoding="utf-8") as f:
        return json.load(f)


def elements_of(doc: Mapping) -> list:
    if not isinstance(doc, Mapping):
        raise ValueError(f"Expected an Overpass document object, got {type(doc).__name__}")
    elements = doc.get("elements")
    if not isinstance(elements, list):
        raise ValueError("Overpass document has no 'elements' list")
    return elements


def parse_boundary(raw) -> tuple[GeoPoint, ...]:
    pts = _boundary_adapter.validate_python(raw)
    if len(pts) < 3:
        raise ValueError(f"boundary needs at least 3 points, got {len(pts)}")
    return tuple(p.to_geo() for p in pts)


@lru_cache(maxsize=8)
def load_boundary_from_path(file: str) -> tuple[GeoPoint, ...]:
    with open(file, encoding="utf-8") as f:
        return parse_boundary(json.load(f))
