from collections.abc import Mapping
from typing import Protocol, runtime_checkable

from osm_scene.domain.entities.geography import GeoPoint, PlanarPoint, Polygon


@runtime_checkable
class Projection(Protocol):
    """
    Responsibilities:
      • Map lon/lat to meters around a fixed center, and back.
      • Batch-project a node index once per run.
    """

    center: GeoPoint

    def project(self, point: GeoPoint, z: float = 0.0) -> PlanarPoint: ...
    def unproject(self, point: PlanarPoint) -> GeoPoint: ...
    def project_nodes(self, coords: Mapping[int, GeoPoint]) -> dict[int, PlanarPoint]: ...


@runtime_checkable
class Perimeter(Protocol):
    """Area of interest; `polygon` is computed once and then reused."""

    @property
    def polygon(self) -> Polygon: ...


@runtime_checkable
class Classifier(Protocol):
    def accepts(self, category: str | None) -> bool: ...
    def weight(self, category: str) -> float: ...
    def is_sidewalk(self, category: str) -> bool: ...
