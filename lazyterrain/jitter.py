"""Deterministic per-cell jitter and the neighbour blending formula."""

from __future__ import annotations

from dataclasses import dataclass
from typing import Callable, Sequence

import numpy as np

from lazyterrain.seed import U16_MAX, U64_MASK, clock_seed, normalize_seed, u16_to_unit

RoughnessHook = Callable[[int, int, float], float]
PostHook = Callable[[int, int, float], float]
RandHook = Callable[[int, int, int], int]

_MIX_ROUNDS = 80
_MIX_SCALE = 1520972.0


def _residue_sum(x: int, y: int) -> int:
    return x % 7 + x % 13 + x % 1301081 + y % 8461 + y % 105467 + y % 105943


def jitter_seed(x: int, y: int, seed: int) -> int:
    """Mix a cell coordinate with `seed` into a 64-bit PRNG seed."""

    seed = normalize_seed(seed)
    x &= U64_MASK
    y &= U64_MASK
    total = _residue_sum(x, y)
    for _ in range(_MIX_ROUNDS):
        y = (x + seed) & U64_MASK
        x = (x + total) & U64_MASK
        total = _residue_sum(x, y)

    bits = int(np.array(total / _MIX_SCALE, dtype=np.float64).view(np.uint64))
    return bits ^ seed


def sample_u16(prng_seed: int) -> int:
    """Draw one 16-bit sample from a PCG64 stream seeded with `prng_seed`."""

    rng = np.random.Generator(np.random.PCG64(normalize_seed(prng_seed)))
    return int(rng.integers(0, U16_MAX, dtype=np.uint16, endpoint=True))


def jitter(x: int, y: int, seed: int) -> float:
    """Deterministic pseudorandom value in [0, 1] for cell (x, y)."""

    return u16_to_unit(sample_u16(jitter_seed(x, y, seed)))


def identity_hook(x: int, y: int, value: float) -> float:
    return value


@dataclass
class Blender:
    """Blends four neighbour heights with per-cell jitter.

    `rand_hook` supplies the PRNG seed for each cell and defaults to
    `jitter_seed`. With `use_clock_seed` the PRNG is seeded from
    `seed_source` instead, which makes output non-reproducible.
    """

    seed: int
    roughness: float
    roughness_hook: RoughnessHook = identity_hook
    post_hook: PostHook = identity_hook
    rand_hook: RandHook = jitter_seed
    use_clock_seed: bool = False
    seed_source: Callable[[], int] = clock_seed

    def jitter(self, x: int, y: int) -> float:
        if self.use_clock_seed:
            prng_seed = self.seed_source()
        else:
            prng_seed = self.rand_hook(x, y, self.seed)
        return u16_to_unit(sample_u16(prng_seed))

    def blend(self, x: int, y: int, heights: Sequence[float]) -> float:
        h0, h1, h2, h3 = heights
        average = (h0 + h1 + h2 + h3) / 4.0
        r = self.roughness_hook(x, y, self.roughness)
        raw = r * self.jitter(x, y) + (1.0 - r) * average
        return self.post_hook(x, y, raw)
