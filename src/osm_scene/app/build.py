# osm_scene/app/build.py
from collections.abc import Mapping

from osm_scene.app.pipeline import Pipeline
from osm_scene.config.models import SceneModel
from osm_scene.domain.geometry.geometry_projection import EquirectangularProjection
from osm_scene.io.pipeline_logging import PipelineLogging  # JSON logs
from osm_scene.io.recorder import Recorder
from osm_scene.runtime.hooks import NoopHooks
from osm_scene.runtime.registries import make_classifier, make_perimeter
from osm_scene.runtime.rng import RNGRegistry


def build(
    cfg: SceneModel | Mapping, *, use_logging: bool = True, recorder: Recorder | None = None
) -> Pipeline:
    # 0) Validate config
    model = cfg if isinstance(cfg, SceneModel) else SceneModel.model_validate(cfg)

    # 1) Projection & RNG
    projection = EquirectangularProjection(model.center.to_geo())
    rng_registry = RNGRegistry(model.seed, scene=model.name)

    # 2) Hooks (logging, optional output recorder)
    if use_logging:
        hooks = PipelineLogging(
            scene=model.name,
            level=model.log.level,
            debug=model.log.debug,
            sample_every=model.log.sample_every,
            recorder=recorder,
        )
    else:
        hooks = NoopHooks()

    # 3) Perimeter & classification
    perimeter = make_perimeter(model.perimeter, deps={"projection": projection})
    classifier = make_classifier(model.roads)

    return Pipeline(
        projection=projection,
        classifier=classifier,
        rng=rng_registry,
        perimeter=perimeter,
        z_mode=model.clip.z_mode,
        roads_cfg=model.roads,
        buildings_cfg=model.buildings,
        trees_cfg=model.trees,
        hooks=hooks,
    )
