# io/osm_models.py
from typing import Literal

from pydantic import BaseModel, ConfigDict, Field

# Overpass elements carry extra keys (version, timestamp, ...) we never read.


class NodeElement(BaseModel):
    model_config = ConfigDict(extra="ignore", coerce_numbers_to_str=True)
    type: Literal["node"] = "node"
    id: int
    lon: float
    lat: float
    tags: dict[str, str] = Field(default_factory=dict)


class WayElement(BaseModel):
    model_config = ConfigDict(extra="ignore", coerce_numbers_to_str=True)
    type: Literal["way"] = "way"
    id: int | None = None
    nodes: list[int] = Field(min_length=1)
    tags: dict[str, str] = Field(default_factory=dict)


ELEMENT_MODELS: dict[str, type[BaseModel]] = {"node": NodeElement, "way": WayElement}
