# runtime/hooks.py
from typing import Protocol


class PipelineHooks(Protocol):
    def run_start(self, *, stage: str, elements: int): ...
    def run_end(self, *, stage: str, seen: int, produced: int, skipped: dict, wall_ms: float): ...
    def skipped(self, stage: str, reason: str, **kw): ...
    def boundary_fallback(self, inside, outside): ...
    def emit(self, obj): ...


class NoopHooks:
    def run_start(self, **_):
        pass

    def run_end(self, **_):
        pass

    def skipped(self, *_, **__):
        pass

    def boundary_fallback(self, *_, **__):
        pass

    def emit(self, *_, **__):
        pass
