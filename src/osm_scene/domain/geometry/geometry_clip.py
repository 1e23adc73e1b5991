from collections.abc import Callable, Iterable
from typing import Literal

from osm_scene.domain.entities.geography import ClippedSegment, Path, PlanarPoint, Polygon
from osm_scene.domain.geometry.geometry_polygon import boundary_crossing, contains, lerp

ZMode = Literal["copy", "interpolate"]
FallbackFn = Callable[[PlanarPoint, PlanarPoint], None]


class PolygonClipper:
    """
    Splits paths into the sub-paths lying inside a polygon, inserting the exact
    boundary crossing at every entry and exit.

    z_mode:
      • "copy": a crossing point takes the z of the path point being processed
        (the inside point on entry, the outside point on exit).
      • "interpolate": z is interpolated along the crossed path segment.
    """

    def __init__(
        self,
        polygon: Polygon,
        *,
        z_mode: ZMode = "copy",
        on_fallback: FallbackFn | None = None,
    ):
        if z_mode not in ("copy", "interpolate"):
            raise ValueError(f"Unknown z_mode {z_mode!r}")
        self.polygon, self.z_mode, self.on_fallback = polygon, z_mode, on_fallback

    def _crossing(self, inside: PlanarPoint, outside: PlanarPoint, current: PlanarPoint):
        t = boundary_crossing(inside, outside, self.polygon)
        if t is None:
            if self.on_fallback is not None:
                self.on_fallback(inside, outside)
            return inside
        return lerp(inside, outside, t, z=None if self.z_mode == "interpolate" else current.z)

    def clip_points(self, points: Iterable[PlanarPoint]) -> list[list[PlanarPoint]]:
        if self.polygon.is_degenerate:
            return []

        runs: list[list[PlanarPoint]] = []
        current: list[PlanarPoint] = []
        prev: PlanarPoint | None = None
        prev_inside = False

        for pt in points:
            inside = contains(pt, self.polygon)
            if inside:
                if not current and prev is not None and not prev_inside:
                    # entering
                    current.append(self._crossing(pt, prev, pt))
                current.append(pt)
            elif current:
                # leaving
                current.append(self._crossing(current[-1], pt, pt))
                if len(current) >= 2:
                    runs.append(current)
                current = []
            prev, prev_inside = pt, inside

        if len(current) >= 2:
            runs.append(current)
        return runs

    def clip(self, path: Path) -> list[ClippedSegment]:
        return [ClippedSegment.from_path(path, run) for run in self.clip_points(path.points)]

    def clip_all(self, paths: Iterable[Path]) -> list[ClippedSegment]:
        out: list[ClippedSegment] = []
        for p in paths:
            out.extend(self.clip(p))
        return out


def clip_path_to_polygon(
    path: Path, polygon: Polygon, *, z_mode: ZMode = "copy"
) -> list[ClippedSegment]:
    return PolygonClipper(polygon, z_mode=z_mode).clip(path)
