# runtime/rng.py
from __future__ import annotations

from dataclasses import dataclass
from zlib import crc32

import numpy as np


def _u32(x: int) -> int:
    return int(x & 0xFFFFFFFF)


def _crc32_u32(s: str) -> int:
    return _u32(crc32(s.encode("utf-8")))


@dataclass(frozen=True)
class RNGKey:
    """Hierarchical key: stream name + optional ints/strings (e.g. an OSM way id)."""

    stream: str
    parts: tuple[int, ...]  # already normalized to u32

    @classmethod
    def from_parts(cls, stream: str, *parts: object) -> RNGKey:
        norm: list[int] = [_crc32_u32(stream)]
        for p in parts:
            if isinstance(p, (int, np.integer)):
                # OSM ids exceed 32 bits; keep both halves
                v = int(p)
                norm.extend((_u32(v), _u32(v >> 32)))
            elif isinstance(p, str):
                norm.append(_crc32_u32(p))
            else:
                norm.append(_crc32_u32(repr(p)))
        return cls(stream=stream, parts=tuple(norm))


class RNGRegistry:
    """
    Deterministic registry of numpy.random.Generator streams.
    Derivation path: [seed, scene, *key.parts]
    Only synthetic defaults (building heights, park trees) draw from it, so a
    scene rebuilt with the same seed is identical.
    """

    def __init__(self, seed: int, *, scene: str | int = 0):
        self.seed = _u32(seed)
        self.scene_tag = _crc32_u32(str(scene))

    def generator(self, key: RNGKey) -> np.random.Generator:
        # not memoized: every call restarts the stream, so repeated runs reproduce
        ss = np.random.SeedSequence(entropy=[self.seed, self.scene_tag, *key.parts])
        return np.random.Generator(np.random.PCG64(ss))

    def stream(self, name: str) -> np.random.Generator:
        return self.generator(RNGKey.from_parts(name))

    def substream(self, name: str, *parts: object) -> np.random.Generator:
        return self.generator(RNGKey.from_parts(name, *parts))
