# runtime/registries.py
from collections.abc import Callable
from typing import Any

from osm_scene.app.perimeter import GeodeticPerimeter, RadialPerimeter
from osm_scene.app.protocols import Perimeter
from osm_scene.config.models import (
    PerimeterFileModel,
    PerimeterPolygonModel,
    PerimeterRadiusModel,
    PerimeterUnion,
    RoadsModel,
)
from osm_scene.domain.classify import RoadClassifier
from osm_scene.runtime.resources import load_boundary_from_path

PerimeterFactory = Callable[[PerimeterUnion, dict], Perimeter]

_perimeter_registry: dict[str, PerimeterFactory] = {}


# ------------------- Perimeters ---------------------------


def register_perimeter(kind: str):
    def deco(fn: PerimeterFactory):
        _perimeter_registry[kind] = fn
        return fn

    return deco


def make_perimeter(cfg: PerimeterUnion | None, *, deps: dict[str, Any]) -> Perimeter | None:
    """
    deps:
      - 'projection': EquirectangularProjection for the scene center
    """
    if cfg is None:
        return None
    try:
        factory = _perimeter_registry[cfg.kind]
    except KeyError:
        raise ValueError(f"Unknown perimeter kind {cfg.kind!r}")
    return factory(cfg, deps)


@register_perimeter("polygon")
def _make_polygon(cfg: PerimeterPolygonModel, deps):
    return GeodeticPerimeter([p.to_geo() for p in cfg.points], deps["projection"])


@register_perimeter("file")
def _make_file(cfg: PerimeterFileModel, deps):
    return GeodeticPerimeter(load_boundary_from_path(cfg.file), deps["projection"])


@register_perimeter("radius")
def _make_radius(cfg: PerimeterRadiusModel, deps):
    return RadialPerimeter(cfg.radius_m, cfg.segments)


# ------------------- Classification ---------------------------


def make_classifier(cfg: RoadsModel) -> RoadClassifier:
    return RoadClassifier(
        widths=dict(cfg.widths),
        default_width=cfg.default_width,
        categories=None if cfg.categories is None else frozenset(cfg.categories),
        sidewalk_types=frozenset(cfg.sidewalk_types),
    )
