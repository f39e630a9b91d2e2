"""Seed parsing, clock seeding, and salted hashing utilities."""

from __future__ import annotations

import hashlib
import struct
import time
from typing import Callable

import numpy as np

U64_MASK = (1 << 64) - 1
U16_MAX = 0xFFFF


def normalize_seed(seed: int) -> int:
    return int(seed) & U64_MASK


def seed_hash64(seed: str) -> int:
    """Hash a seed string to a deterministic unsigned 64-bit integer."""

    digest = hashlib.blake2b(
        seed.encode("utf-8"),
        digest_size=8,
        person=b"lazyterrain-s64",
    ).digest()
    return int.from_bytes(digest, byteorder="big", signed=False)


def resolve_seed(seed: str | int | None, seed_source: Callable[[], int]) -> int:
    """Turn a caller seed option into the 64-bit seed used by a field.

    Strings are hashed, integers are masked to 64 bits, and `None` defers to
    `seed_source`, a zero-argument callable returning an integer.
    """

    if seed is None:
        return normalize_seed(seed_source())
    if isinstance(seed, str):
        return seed_hash64(seed)
    return normalize_seed(seed)


def clock_seed() -> int:
    """Draw a 64-bit seed from the wall clock."""

    rng = np.random.Generator(np.random.PCG64(time.time_ns()))
    return int(rng.integers(0, U64_MASK, dtype=np.uint64, endpoint=True))


def seed_salts(seed: int) -> tuple[int, int, int, int]:
    """Split a 64-bit seed into four 16-bit salts, lowest bits first."""

    seed = normalize_seed(seed)
    return (
        seed & U16_MAX,
        (seed >> 16) & U16_MAX,
        (seed >> 32) & U16_MAX,
        (seed >> 48) & U16_MAX,
    )


def salted_hash16(key: str, seed: int) -> int:
    """Hash `key` salted by the four 16-bit fields of `seed` to a 16-bit value."""

    salt = struct.pack(">4H", *seed_salts(seed))
    digest = hashlib.blake2b(
        key.encode("utf-8"),
        digest_size=8,
        salt=salt,
        person=b"lazyterrain-h16",
    ).digest()
    return int.from_bytes(digest, byteorder="big", signed=False) & U16_MAX


def u16_to_unit(sample: int) -> float:
    """Rescale a 16-bit sample from [0, 65535] to [0, 1]."""

    return int(sample) / float(U16_MAX)
