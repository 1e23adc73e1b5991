from dataclasses import dataclass


# Core geometry types used by every stage
@dataclass(frozen=True)
class GeoPoint:
    lon: float
    lat: float


@dataclass(frozen=True)
class PlanarPoint:
    x: float  # meters east of the scene center
    y: float  # meters north of the scene center
    z: float = 0.0


@dataclass(frozen=True)
class Polygon:
    """Clipping boundary; the last vertex connects back to the first."""

    vertices: tuple[PlanarPoint, ...]

    @property
    def is_degenerate(self) -> bool:
        return len(self.vertices) < 3

    def edges(self):
        n = len(self.vertices)
        for i in range(n):
            yield self.vertices[i], self.vertices[(i + 1) % n]


@dataclass(frozen=True)
class Path:
    points: tuple[PlanarPoint, ...]
    category: str
    weight: float
    way_id: int | None = None


@dataclass(frozen=True)
class ClippedSegment:
    points: tuple[PlanarPoint, ...]
    category: str
    weight: float
    way_id: int | None = None

    @classmethod
    def from_path(cls, path: Path, points=None) -> "ClippedSegment":
        return cls(
            points=tuple(path.points if points is None else points),
            category=path.category,
            weight=path.weight,
            way_id=path.way_id,
        )


@dataclass(frozen=True)
class Building:
    footprint: tuple[PlanarPoint, ...]
    centroid: PlanarPoint
    height: float
    levels: int | None = None
    category: str = "yes"
    way_id: int | None = None


@dataclass(frozen=True)
class Tree:
    position: PlanarPoint
    kind: str = "unknown"

