import math
from collections.abc import Iterable, Mapping
from dataclasses import dataclass

import numpy as np

from osm_scene.domain.entities.geography import GeoPoint, PlanarPoint

# Meters per degree of latitude; also the equatorial meters per degree of longitude.
METERS_PER_DEGREE = 111_000.0


def _lon_scale(center: GeoPoint) -> float:
    lat_rad = center.lat * math.pi / 180
    if not math.isfinite(lat_rad):
        return math.nan
    return METERS_PER_DEGREE * math.cos(lat_rad)


def project(point: GeoPoint, center: GeoPoint, z: float = 0.0) -> PlanarPoint:
    """
    Equirectangular projection to meters from `center`.
    The longitude correction uses the center's latitude, so results are only
    meaningful within a few kilometers of the center.
    """
    return PlanarPoint(
        (point.lon - center.lon) * _lon_scale(center),
        (point.lat - center.lat) * METERS_PER_DEGREE,
        z,
    )


def unproject(point: PlanarPoint, center: GeoPoint) -> GeoPoint:
    return GeoPoint(
        lon=point.x / _lon_scale(center) + center.lon,
        lat=point.y / METERS_PER_DEGREE + center.lat,
    )


@dataclass(frozen=True)
class EquirectangularProjection:
    center: GeoPoint

    def project(self, point: GeoPoint, z: float = 0.0) -> PlanarPoint:
        return project(point, self.center, z)

    def unproject(self, point: PlanarPoint) -> GeoPoint:
        return unproject(point, self.center)

    def project_array(self, lonlat: np.ndarray) -> np.ndarray:
        """(n, 2) array of lon/lat -> (n, 2) array of x/y meters."""
        arr = np.asarray(lonlat, dtype=np.float64).reshape(-1, 2)
        out = np.empty_like(arr)
        out[:, 0] = (arr[:, 0] - self.center.lon) * _lon_scale(self.center)
        out[:, 1] = (arr[:, 1] - self.center.lat) * METERS_PER_DEGREE
        return out

    def project_nodes(self, coords: Mapping[int, GeoPoint]) -> dict[int, PlanarPoint]:
        if not coords:
            return {}
        ids = list(coords)
        xy = self.project_array([(coords[i].lon, coords[i].lat) for i in ids])
        return {nid: PlanarPoint(float(x), float(y)) for nid, (x, y) in zip(ids, xy)}


# ---------------- Bounding boxes ------------------------


def bbox_around(center: GeoPoint, half_size_km: float) -> tuple[float, float, float, float]:
    """(south, west, north, east) of a square of side 2 * half_size_km around center."""
    lat_offset = half_size_km / 111
    lon_offset = half_size_km / (111 * math.cos(center.lat * math.pi / 180))
    return (
        center.lat - lat_offset,
        center.lon - lon_offset,
        center.lat + lat_offset,
        center.lon + lon_offset,
    )


def bounds_of(points: Iterable[GeoPoint]) -> tuple[float, float, float, float]:
    pts = list(points)
    if not pts:
        raise ValueError("bounds_of() needs at least one point")
    lats = [p.lat for p in pts]
    lons = [p.lon for p in pts]
    return min(lats), min(lons), max(lats), max(lons)


def overpass_bbox(bbox: tuple[float, float, float, float]) -> str:
    """Overpass QL bbox filter body: 'south,west,north,east'."""
    return ",".join(repr(float(v)) for v in bbox)
