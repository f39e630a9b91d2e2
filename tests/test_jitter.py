from __future__ import annotations

import numpy as np
import pytest

from lazyterrain.jitter import Blender, jitter, jitter_seed, sample_u16
from lazyterrain.seed import u16_to_unit

SEED = 0x9E3779B97F4A7C15


def test_jitter_seed_at_origin_with_zero_seed() -> None:
    assert jitter_seed(0, 0, 0) == 0


def test_jitter_seed_encodes_residue_ratio() -> None:
    for x, y in [(1, 0), (7, 3), (1023, 512), (3, 1024)]:
        bits = jitter_seed(x, y, SEED) ^ SEED
        ratio = float(np.array(bits, dtype=np.uint64).view(np.float64))

        assert 0.0 <= ratio < 1.0
        assert ratio * 1520972.0 == pytest.approx(round(ratio * 1520972.0), abs=1e-6)


def test_jitter_is_deterministic_and_in_unit_range() -> None:
    values = [jitter(x, y, SEED) for x in range(9) for y in range(9)]

    assert values == [jitter(x, y, SEED) for x in range(9) for y in range(9)]
    assert all(0.0 <= v <= 1.0 for v in values)
    assert len(set(values)) > 1


def test_sample_u16_is_deterministic() -> None:
    assert sample_u16(12345) == sample_u16(12345)
    assert 0 <= sample_u16(12345) <= 0xFFFF


def test_blend_without_roughness_is_plain_average() -> None:
    blender = Blender(seed=SEED, roughness=0.0)

    assert blender.blend(3, 5, [0.1, 0.2, 0.3, 0.4]) == (0.1 + 0.2 + 0.3 + 0.4) / 4.0


def test_blend_with_full_roughness_is_pure_jitter() -> None:
    blender = Blender(seed=SEED, roughness=1.0)

    assert blender.blend(3, 5, [0.1, 0.2, 0.3, 0.4]) == jitter(3, 5, SEED)


def test_blend_hooks_are_applied_without_clamping() -> None:
    calls = []

    def roughness_hook(x: int, y: int, r: float) -> float:
        calls.append((x, y, r))
        return 0.0

    blender = Blender(
        seed=SEED,
        roughness=0.25,
        roughness_hook=roughness_hook,
        post_hook=lambda x, y, h: h * 10.0,
    )

    assert blender.blend(2, 6, [0.5, 0.5, 0.5, 0.5]) == 5.0
    assert calls == [(2, 6, 0.25)]


def test_rand_hook_and_clock_seed_replace_prng_seed() -> None:
    hooked = Blender(seed=SEED, roughness=1.0, rand_hook=lambda x, y, seed: x * 1000 + y)
    clocked = Blender(seed=SEED, roughness=1.0, use_clock_seed=True, seed_source=lambda: 77)

    assert hooked.jitter(4, 2) == u16_to_unit(sample_u16(4002))
    assert clocked.jitter(4, 2) == u16_to_unit(sample_u16(77))
    assert clocked.jitter(1, 1) == clocked.jitter(4, 2)
