import math
from collections.abc import Sequence

from osm_scene.domain.entities.geography import PlanarPoint, Polygon

PARALLEL_EPS = 1e-10


def contains(point: PlanarPoint, polygon: Polygon) -> bool:
    """
    Even-odd ray casting against a horizontal ray from `point`.
    Points exactly on an edge may classify either way.
    """
    verts = polygon.vertices
    x, y = point.x, point.y
    inside = False
    j = len(verts) - 1
    for i, vi in enumerate(verts):
        vj = verts[j]
        if (vi.y > y) != (vj.y > y) and x < (vj.x - vi.x) * (y - vi.y) / (vj.y - vi.y) + vi.x:
            inside = not inside
        j = i
    return inside


def crossing_parameter(
    p1: PlanarPoint, p2: PlanarPoint, p3: PlanarPoint, p4: PlanarPoint
) -> float | None:
    """Parameter t along p1->p2 where it meets segment p3->p4, or None."""
    x1, y1, x2, y2 = p1.x, p1.y, p2.x, p2.y
    x3, y3, x4, y4 = p3.x, p3.y, p4.x, p4.y

    denom = (x1 - x2) * (y3 - y4) - (y1 - y2) * (x3 - x4)
    if abs(denom) < PARALLEL_EPS:
        return None

    t = ((x1 - x3) * (y3 - y4) - (y1 - y3) * (x3 - x4)) / denom
    u = -((x1 - x2) * (y1 - y3) - (y1 - y2) * (x1 - x3)) / denom
    if 0 <= t <= 1 and 0 <= u <= 1:
        return t
    return None


def lerp(a: PlanarPoint, b: PlanarPoint, t: float, z: float | None = None) -> PlanarPoint:
    return PlanarPoint(
        a.x + t * (b.x - a.x),
        a.y + t * (b.y - a.y),
        a.z + t * (b.z - a.z) if z is None else z,
    )


def intersect(
    p1: PlanarPoint, p2: PlanarPoint, p3: PlanarPoint, p4: PlanarPoint
) -> PlanarPoint | None:
    t = crossing_parameter(p1, p2, p3, p4)
    if t is None:
        return None
    return lerp(p1, p2, t, z=p1.z)


def boundary_crossing(inside: PlanarPoint, outside: PlanarPoint, polygon: Polygon) -> float | None:
    """t along inside->outside at the first polygon edge (in vertex order) it crosses."""
    for a, b in polygon.edges():
        t = crossing_parameter(inside, outside, a, b)
        if t is not None:
            return t
    return None


def find_boundary_intersection(
    inside: PlanarPoint, outside: PlanarPoint, polygon: Polygon
) -> PlanarPoint:
    """Falls back to `inside` when no edge is crossed (non-simple polygon, bad pair)."""
    t = boundary_crossing(inside, outside, polygon)
    if t is None:
        return inside
    return lerp(inside, outside, t, z=inside.z)


# -------------------- Shape helpers -----------------------


def centroid(points: Sequence[PlanarPoint]) -> PlanarPoint:
    """Vertex mean, which is what footprint placement needs; not the area centroid."""
    n = len(points)
    if n == 0:
        raise ValueError("centroid() of an empty point list")
    return PlanarPoint(sum(p.x for p in points) / n, sum(p.y for p in points) / n, 0.0)


def regular_polygon(
    radius_m: float, segments: int = 64, center: PlanarPoint | None = None
) -> Polygon:
    c = center or PlanarPoint(0.0, 0.0)
    step = 2 * math.pi / segments
    return Polygon(
        tuple(
            PlanarPoint(c.x + radius_m * math.cos(k * step), c.y + radius_m * math.sin(k * step))
            for k in range(segments)
        )
    )


def bounding_box(points: Sequence[PlanarPoint]) -> tuple[float, float, float, float]:
    xs = [p.x for p in points]
    ys = [p.y for p in points]
    return min(xs), min(ys), max(xs), max(ys)
