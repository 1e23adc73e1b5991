import os
from typing import Annotated, Literal

from pydantic import BaseModel, ConfigDict, Field, field_validator, model_validator

from osm_scene.domain.classify import DEFAULT_WIDTH, DEFAULT_WIDTHS, ROAD_TYPES, SIDEWALK_TYPES
from osm_scene.domain.entities.geography import GeoPoint


class LogModel(BaseModel):
    model_config = ConfigDict(extra="forbid")
    level: Literal["DEBUG", "INFO", "WARNING", "ERROR"] = "INFO"
    debug: bool = False
    sample_every: int = Field(default=1, ge=1)


class GeoPointModel(BaseModel):
    # boundary JSON carries extra keys from drawing tools (ids, labels)
    model_config = ConfigDict(extra="ignore")
    lat: float = Field(ge=-90, le=90)
    lon: float = Field(ge=-180, le=180)

    def to_geo(self) -> GeoPoint:
        return GeoPoint(lon=self.lon, lat=self.lat)


# ----------------- PERIMETERS ---------------------


class PerimeterPolygonModel(BaseModel):
    model_config = ConfigDict(extra="forbid")
    kind: Literal["polygon"] = "polygon"
    points: list[GeoPointModel] = Field(min_length=3)


class PerimeterFileModel(BaseModel):
    model_config = ConfigDict(extra="forbid")
    kind: Literal["file"] = "file"
    file: str

    @field_validator("file")
    @classmethod
    def _expand(cls, v: str) -> str:
        return os.path.expandvars(os.path.expanduser(v))


class PerimeterRadiusModel(BaseModel):
    model_config = ConfigDict(extra="forbid")
    kind: Literal["radius"] = "radius"
    radius_m: float = Field(gt=0)
    segments: int = Field(default=64, ge=3)


PerimeterUnion = Annotated[
    PerimeterPolygonModel | PerimeterFileModel | PerimeterRadiusModel,
    Field(discriminator="kind"),
]

# ----------------- LAYERS ---------------------


class ClipModel(BaseModel):
    model_config = ConfigDict(extra="forbid")
    z_mode: Literal["copy", "interpolate"] = "copy"


class GridModel(BaseModel):
    model_config = ConfigDict(extra="forbid")
    size_m: float = Field(gt=0)
    angle_deg: float = 45.0
    min_step_frac: float = Field(default=0.1, ge=0)


class RoadsModel(BaseModel):
    model_config = ConfigDict(extra="forbid")
    enabled: bool = True
    category_key: str = "highway"
    # None => any value of category_key is a road
    categories: list[str] | None = Field(default_factory=lambda: list(ROAD_TYPES))
    widths: dict[str, float] = Field(default_factory=lambda: dict(DEFAULT_WIDTHS))
    default_width: float = DEFAULT_WIDTH
    sidewalk_types: list[str] = Field(default_factory=lambda: sorted(SIDEWALK_TYPES))
    grid: GridModel | None = None

    @field_validator("widths")
    @classmethod
    def _positive(cls, v: dict[str, float]) -> dict[str, float]:
        bad = [k for k, w in v.items() if w <= 0]
        if bad:
            raise ValueError(f"widths must be > 0, got non-positive for {bad}")
        return v


class BuildingsModel(BaseModel):
    model_config = ConfigDict(extra="forbid")
    enabled: bool = True
    tag_key: str = "building"
    level_height_m: float = Field(default=3.5, gt=0)
    default_height_m: tuple[float, float] = (18.0, 25.0)

    @model_validator(mode="after")
    def _check_range(self):
        lo, hi = self.default_height_m
        if not 0 < lo <= hi:
            raise ValueError(f"default_height_m must satisfy 0 < lo <= hi, got {(lo, hi)}")
        return self


class TreesModel(BaseModel):
    model_config = ConfigDict(extra="forbid")
    enabled: bool = True
    scatter_tags: dict[str, list[str]] = Field(
        default_factory=lambda: {"landuse": ["forest"], "leisure": ["park"]}
    )
    density_per_deg2: float = Field(default=1e6, ge=0)
    max_per_area: int = Field(default=20, ge=0)


# ------------------------------------------------------------------


class SceneModel(BaseModel):
    model_config = ConfigDict(extra="forbid")
    name: str
    center: GeoPointModel
    seed: int = 0
    log: LogModel = LogModel()
    perimeter: PerimeterUnion | None = None
    clip: ClipModel = ClipModel()
    roads: RoadsModel = RoadsModel()
    buildings: BuildingsModel = BuildingsModel()
    trees: TreesModel = TreesModel()
