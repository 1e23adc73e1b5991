import math
from collections.abc import Sequence

from osm_scene.domain.entities.geography import PlanarPoint


def snap_to_rotated_grid(point: PlanarPoint, grid_size: float, angle_rad: float) -> PlanarPoint:
    """Round `point` to the nearest node of a square grid rotated by `angle_rad`."""
    cos, sin = math.cos(-angle_rad), math.sin(-angle_rad)
    rx = point.x * cos - point.y * sin
    ry = point.x * sin + point.y * cos

    sx = round(rx / grid_size) * grid_size
    sy = round(ry / grid_size) * grid_size

    return PlanarPoint(sx * cos + sy * sin, -sx * sin + sy * cos, point.z)


def snap_path(
    points: Sequence[PlanarPoint],
    grid_size: float,
    angle_rad: float,
    *,
    min_step_frac: float = 0.1,
) -> list[PlanarPoint]:
    if len(points) < 2:
        return list(points)

    out: list[PlanarPoint] = []
    for p in points:
        s = snap_to_rotated_grid(p, grid_size, angle_rad)
        # collapse repeats produced by snapping neighbours to the same node
        if out and math.hypot(s.x - out[-1].x, s.y - out[-1].y) < grid_size * min_step_frac:
            continue
        out.append(s)
    return out
