from collections.abc import Sequence
from functools import cached_property

from osm_scene.domain.entities.geography import GeoPoint, Polygon
from osm_scene.domain.geometry.geometry_polygon import regular_polygon
from osm_scene.domain.geometry.geometry_projection import EquirectangularProjection


class GeodeticPerimeter:
    """
    A lat/lon boundary whose projected polygon is computed on first use and
    then reused for the life of the owning pipeline.
    Concurrent first access may project twice; the result is identical.
    """

    def __init__(self, boundary: Sequence[GeoPoint], projection: EquirectangularProjection):
        self.boundary, self.projection = tuple(boundary), projection

    @cached_property
    def polygon(self) -> Polygon:
        return Polygon(tuple(self.projection.project(p) for p in self.boundary))


class RadialPerimeter:
    """Circle of radius_m around the scene center, as a regular polygon."""

    def __init__(self, radius_m: float, segments: int = 64):
        self.radius_m, self.segments = radius_m, segments

    @cached_property
    def polygon(self) -> Polygon:
        return regular_polygon(self.radius_m, self.segments)
