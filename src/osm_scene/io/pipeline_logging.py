# io/pipeline_logging.py
import json
import logging
import sys
from dataclasses import asdict, is_dataclass

from osm_scene.io.recorder import Recorder
from osm_scene.runtime.hooks import NoopHooks


class _JsonFormatter(logging.Formatter):
    def format(self, record: logging.LogRecord) -> str:
        payload = {
            "level": record.levelname,
            "msg": record.getMessage(),
            "logger": record.name,
        }
        extra = getattr(record, "extra", None)
        if isinstance(extra, dict):
            payload.update(extra)
        return json.dumps(payload, default=_jsonable)


def _jsonable(obj):
    if is_dataclass(obj):
        return asdict(obj)
    return repr(obj)


def _default_json_logger(name="osm_scene", level="INFO"):
    logger = logging.getLogger(name)
    if not logger.handlers:
        h = logging.StreamHandler(sys.stdout)
        h.setFormatter(_JsonFormatter())
        logger.addHandler(h)
    logger.setLevel(level)
    return logger


class PipelineLogging(NoopHooks):
    """
    One place to shape and emit structured logs for every pipeline stage.
    Skips are aggregated into run_end; individual skips only appear in debug mode.
    """

    def __init__(
        self,
        scene: str = "local",
        level: str = "INFO",
        debug: bool = False,
        sample_every: int = 1,
        logger: logging.Logger | None = None,
        recorder: Recorder | None = None,
    ):
        self.scene, self.debug, self.sample_every = scene, debug, max(1, sample_every)
        self.recorder = recorder
        self.log = logger or _default_json_logger(level=level)
        self._skips = 0
        self.fallbacks = 0

    # --------------- Helpers -----------------------------

    def _emit(self, level: str, msg: str, **extra):
        payload = {"scene": self.scene}
        self.log.log(getattr(logging, level), msg, extra={"extra": {**payload, **extra}})

    # --------------------------------------------------------

    def run_start(self, *, stage: str, elements: int):
        self._emit("INFO", "stage_start", stage=stage, elements=elements)

    def run_end(self, *, stage: str, seen: int, produced: int, skipped: dict, wall_ms: float):
        self._emit(
            "INFO",
            "stage_end",
            stage=stage,
            seen=seen,
            produced=produced,
            skipped=dict(skipped),
            wall_ms=round(wall_ms, 3),
        )

    def skipped(self, stage: str, reason: str, **kw):
        self._skips += 1
        if self.debug and (self._skips % self.sample_every) == 0:
            self._emit("DEBUG", "element_skipped", stage=stage, reason=reason, **kw)

    def boundary_fallback(self, inside, outside):
        # a claimed inside/outside pair with no edge between them: bad polygon
        self.fallbacks += 1
        self._emit(
            "WARNING",
            "boundary_fallback",
            inside=[inside.x, inside.y],
            outside=[outside.x, outside.y],
        )

    # ------------- Output records --------------------------

    def emit(self, obj):
        if self.recorder:
            self.recorder.emit(obj)
