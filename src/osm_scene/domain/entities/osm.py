from collections import Counter
from dataclasses import dataclass, field

from osm_scene.domain.entities.geography import GeoPoint


@dataclass(frozen=True)
class Node:
    id: int
    coord: GeoPoint
    tags: dict[str, str] = field(default_factory=dict, compare=False)


@dataclass(frozen=True)
class Way:
    node_ids: tuple[int, ...]
    tags: dict[str, str] = field(default_factory=dict, compare=False)
    id: int | None = None


@dataclass
class OsmGraph:
    nodes: dict[int, Node] = field(default_factory=dict)
    ways: list[Way] = field(default_factory=list)

    def coords(self) -> dict[int, GeoPoint]:
        return {nid: n.coord for nid, n in self.nodes.items()}


@dataclass
class StageReport:
    """Per-stage bookkeeping: how much came out and why the rest was dropped."""

    stage: str
    seen: int = 0
    produced: int = 0
    skipped: Counter = field(default_factory=Counter)

    def skip(self, reason: str, n: int = 1) -> None:
        self.skipped[reason] += n

    @property
    def skipped_total(self) -> int:
        return sum(self.skipped.values())
