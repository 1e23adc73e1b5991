# io/recorder.py
import json
import logging
import sys
from dataclasses import asdict
from typing import Protocol

log = logging.getLogger("osm_scene.recorder")


class Sink(Protocol):
    def write(self, obj) -> None: ...


class JsonlSink:
    """One JSON object per produced segment/building/tree, tagged with its type."""

    def __init__(self, fp=None):
        self.fp = fp or sys.stdout

    def write(self, obj) -> None:
        self.fp.write(json.dumps({"type": type(obj).__name__, **asdict(obj)}) + "\n")


class MemorySink:
    def __init__(self):
        self.items: list = []

    def write(self, obj) -> None:
        self.items.append(obj)


class Recorder:
    def __init__(self, *sinks: Sink):
        self.sinks = sinks or (JsonlSink(),)

    def emit(self, obj):
        for s in self.sinks:
            try:
                s.write(obj)
            except Exception:
                # a broken sink must not abort the run
                log.exception("sink %s failed", type(s).__name__)
