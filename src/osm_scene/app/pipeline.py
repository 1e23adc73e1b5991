import math
import time
from collections.abc import Mapping
from dataclasses import dataclass, field

from osm_scene.app.protocols import Classifier, Perimeter, Projection
from osm_scene.config.models import BuildingsModel, GridModel, RoadsModel, TreesModel
from osm_scene.domain.entities.geography import Building, ClippedSegment, Path, Polygon, Tree
from osm_scene.domain.entities.osm import OsmGraph, StageReport
from osm_scene.domain.geometry.geometry_clip import PolygonClipper, ZMode
from osm_scene.domain.geometry.geometry_grid import snap_path
from osm_scene.domain.osm.osm_buildings import assemble_buildings
from osm_scene.domain.osm.osm_elements import parse_elements
from osm_scene.domain.osm.osm_roads import assemble_paths
from osm_scene.domain.osm.osm_trees import assemble_trees
from osm_scene.runtime.hooks import NoopHooks, PipelineHooks
from osm_scene.runtime.resources import elements_of
from osm_scene.runtime.rng import RNGRegistry


@dataclass
class SceneLayers:
    roads: list[ClippedSegment] = field(default_factory=list)
    buildings: list[Building] = field(default_factory=list)
    trees: list[Tree] = field(default_factory=list)
    reports: dict[str, StageReport] = field(default_factory=dict)


@dataclass
class Pipeline:
    """
    OSM document -> projected, classified, perimeter-clipped scene layers.
    Holds no per-run state apart from the perimeter's memoized polygon.
    """

    projection: Projection
    classifier: Classifier
    rng: RNGRegistry
    perimeter: Perimeter | None = None
    z_mode: ZMode = "copy"
    roads_cfg: RoadsModel = field(default_factory=RoadsModel)
    buildings_cfg: BuildingsModel = field(default_factory=BuildingsModel)
    trees_cfg: TreesModel = field(default_factory=TreesModel)
    hooks: PipelineHooks = field(default_factory=NoopHooks)

    # --------------- Helpers -----------------------------

    @property
    def polygon(self) -> Polygon | None:
        return self.perimeter.polygon if self.perimeter is not None else None

    def _finish(self, report: StageReport, t0: float, produced: list) -> None:
        for obj in produced:
            self.hooks.emit(obj)
        self.hooks.run_end(
            stage=report.stage,
            seen=report.seen,
            produced=report.produced,
            skipped=dict(report.skipped),
            wall_ms=(time.perf_counter() - t0) * 1000.0,
        )

    def _graph(self, source: Mapping | OsmGraph) -> OsmGraph:
        return source if isinstance(source, OsmGraph) else self.parse(source)

    def _snap(self, paths: list[Path], grid: GridModel, report: StageReport) -> list[Path]:
        angle = math.radians(grid.angle_deg)
        out = []
        for p in paths:
            pts = snap_path(p.points, grid.size_m, angle, min_step_frac=grid.min_step_frac)
            if len(pts) < 2:
                report.skip("collapsed_by_grid")
                continue
            out.append(Path(tuple(pts), p.category, p.weight, p.way_id))
        return out

    # --------------- Stages -----------------------------

    def parse(self, doc: Mapping) -> OsmGraph:
        return self._parse(doc)[0]

    def _parse(self, doc: Mapping) -> tuple[OsmGraph, StageReport]:
        elements = elements_of(doc)
        t0 = time.perf_counter()
        self.hooks.run_start(stage="parse", elements=len(elements))
        graph, report = parse_elements(elements, hooks=self.hooks)
        self._finish(report, t0, [])
        return graph, report

    def paths(self, source: Mapping | OsmGraph) -> list[Path]:
        """Unclipped road paths."""
        graph = self._graph(source)
        paths, _ = assemble_paths(
            graph,
            self.projection.project_nodes(graph.coords()),
            self.classifier,
            category_key=self.roads_cfg.category_key,
            hooks=self.hooks,
        )
        return paths

    def roads(self, source: Mapping | OsmGraph) -> list[ClippedSegment]:
        return self._roads(self._graph(source))[0]

    def _roads(self, graph: OsmGraph, planar=None) -> tuple[list[ClippedSegment], StageReport]:
        t0 = time.perf_counter()
        self.hooks.run_start(stage="roads", elements=len(graph.ways))
        planar = planar if planar is not None else self.projection.project_nodes(graph.coords())
        paths, report = assemble_paths(
            graph,
            planar,
            self.classifier,
            category_key=self.roads_cfg.category_key,
            hooks=self.hooks,
        )
        if self.roads_cfg.grid is not None:
            paths = self._snap(paths, self.roads_cfg.grid, report)

        polygon = self.polygon
        if polygon is None:
            segments = [ClippedSegment.from_path(p) for p in paths]
        else:
            clipper = PolygonClipper(
                polygon, z_mode=self.z_mode, on_fallback=self.hooks.boundary_fallback
            )
            segments = clipper.clip_all(paths)
        report.produced = len(segments)
        self._finish(report, t0, segments)
        return segments, report

    def buildings(self, source: Mapping | OsmGraph) -> list[Building]:
        return self._buildings(self._graph(source))[0]

    def _buildings(self, graph: OsmGraph, planar=None) -> tuple[list[Building], StageReport]:
        t0 = time.perf_counter()
        self.hooks.run_start(stage="buildings", elements=len(graph.ways))
        planar = planar if planar is not None else self.projection.project_nodes(graph.coords())
        cfg = self.buildings_cfg
        out, report = assemble_buildings(
            graph,
            planar,
            self.rng,
            perimeter=self.polygon,
            tag_key=cfg.tag_key,
            level_height_m=cfg.level_height_m,
            default_range_m=cfg.default_height_m,
            hooks=self.hooks,
        )
        self._finish(report, t0, out)
        return out, report

    def trees(self, source: Mapping | OsmGraph) -> list[Tree]:
        return self._trees(self._graph(source))[0]

    def _trees(self, graph: OsmGraph, planar=None) -> tuple[list[Tree], StageReport]:
        t0 = time.perf_counter()
        self.hooks.run_start(stage="trees", elements=len(graph.nodes) + len(graph.ways))
        planar = planar if planar is not None else self.projection.project_nodes(graph.coords())
        cfg = self.trees_cfg
        out, report = assemble_trees(
            graph,
            planar,
            self.rng,
            perimeter=self.polygon,
            scatter_tags={k: tuple(v) for k, v in cfg.scatter_tags.items()},
            density=cfg.density_per_deg2,
            max_per_area=cfg.max_per_area,
            hooks=self.hooks,
        )
        self._finish(report, t0, out)
        return out, report

    def run(self, doc: Mapping) -> SceneLayers:
        """All enabled layers from one document; nodes are projected once."""
        graph, parse_report = self._parse(doc)
        planar = self.projection.project_nodes(graph.coords())
        layers = SceneLayers(reports={"parse": parse_report})
        if self.roads_cfg.enabled:
            layers.roads, layers.reports["roads"] = self._roads(graph, planar)
        if self.buildings_cfg.enabled:
            layers.buildings, layers.reports["buildings"] = self._buildings(graph, planar)
        if self.trees_cfg.enabled:
            layers.trees, layers.reports["trees"] = self._trees(graph, planar)
        return layers
