from collections.abc import Iterable, Mapping
from dataclasses import dataclass, field

from osm_scene.domain.entities.geography import ClippedSegment

# highway values the city extracts are fetched with
ROAD_TYPES: tuple[str, ...] = (
    "primary",
    "secondary",
    "tertiary",
    "residential",
    "living_street",
    "pedestrian",
    "service",
    "footway",
    "path",
    "cycleway",
)

# rendered width in meters
DEFAULT_WIDTHS: dict[str, float] = {
    "primary": 12.0,
    "secondary": 10.0,
    "tertiary": 8.0,
    "residential": 6.0,
    "living_street": 5.0,
    "pedestrian": 4.0,
    "service": 4.0,
    "footway": 2.0,
}
DEFAULT_WIDTH = 5.0

SIDEWALK_TYPES: frozenset[str] = frozenset({"footway", "path", "pedestrian", "cycleway", "steps"})


def weight_for(category: str, table: Mapping[str, float], default: float) -> float:
    return float(table.get(category, default))


def is_sidewalk_type(category: str, sidewalk_types: Iterable[str] = SIDEWALK_TYPES) -> bool:
    return category in sidewalk_types


@dataclass(frozen=True)
class RoadClassifier:
    widths: Mapping[str, float] = field(default_factory=lambda: dict(DEFAULT_WIDTHS))
    default_width: float = DEFAULT_WIDTH
    categories: frozenset[str] | None = frozenset(ROAD_TYPES)  # None => accept any value
    sidewalk_types: frozenset[str] = SIDEWALK_TYPES

    def accepts(self, category: str | None) -> bool:
        if not category:
            return False
        return self.categories is None or category in self.categories

    def weight(self, category: str) -> float:
        return weight_for(category, self.widths, self.default_width)

    def is_sidewalk(self, category: str) -> bool:
        return is_sidewalk_type(category, self.sidewalk_types)

    def group_by_style(
        self, segments: Iterable[ClippedSegment]
    ) -> dict[str, list[ClippedSegment]]:
        groups: dict[str, list[ClippedSegment]] = {"road": [], "sidewalk": []}
        for s in segments:
            groups["sidewalk" if self.is_sidewalk(s.category) else "road"].append(s)
        return groups
