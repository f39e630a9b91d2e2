"""Lazily generated diamond-square heightfield on a toroidal grid."""

from __future__ import annotations

import logging
from typing import Callable

import numpy as np

from lazyterrain.config import DEFAULT_INIT_LEVEL, InitBy, normalize_roughness
from lazyterrain.eager import initialize
from lazyterrain.grid import CellGrid
from lazyterrain.jitter import Blender, PostHook, RandHook, RoughnessHook, identity_hook, jitter_seed
from lazyterrain.resolver import resolve
from lazyterrain.seed import clock_seed, resolve_seed

logger = logging.getLogger(__name__)

Cell = tuple[int, int, "float | None"]


class HeightField:
    """Square toroidal heightfield whose cells are generated on first request.

    `size` is rounded to the nearest `2^k + 1` and `roughness` is clamped to
    [0, 1]. The field is pre-filled by `init_by` up to `init_level`; every
    other cell stays unset until `gen`, `regen` or `set` touches it.
    Coordinates outside the grid wrap around both axes.

    A `HeightField` is not thread-safe. Callers sharing one across threads must
    serialize every call.
    """

    def __init__(
        self,
        size: int,
        roughness: float,
        *,
        seed: str | int | None = None,
        init_level: int = DEFAULT_INIT_LEVEL,
        init_by: InitBy | str = InitBy.DIAMOND_SQUARE,
        roughness_hook: RoughnessHook | None = None,
        post_hook: PostHook | None = None,
        rand_hook: RandHook | None = None,
        use_clock_seed: bool = False,
        seed_source: Callable[[], int] | None = None,
    ) -> None:
        source = seed_source or clock_seed
        self._grid = CellGrid(size)
        self._blender = Blender(
            seed=resolve_seed(seed, source),
            roughness=normalize_roughness(roughness),
            roughness_hook=roughness_hook or identity_hook,
            post_hook=post_hook or identity_hook,
            rand_hook=rand_hook or jitter_seed,
            use_clock_seed=bool(use_clock_seed),
            seed_source=source,
        )
        self._init_by = InitBy.parse(init_by)
        self._init_level = initialize(self._grid, self._blender, init_level, self._init_by)
        logger.debug(
            "created heightfield size=%d roughness=%.4f seed=%#018x",
            self.size,
            self.roughness,
            self.seed,
        )

    @property
    def size(self) -> int:
        return self._grid.size

    @property
    def max_coord(self) -> int:
        """Largest in-range coordinate; larger ones wrap back onto the grid."""

        return self._grid.max_coord

    @property
    def roughness(self) -> float:
        return self._blender.roughness

    @property
    def seed(self) -> int:
        return self._blender.seed

    @property
    def use_clock_seed(self) -> bool:
        return self._blender.use_clock_seed

    @property
    def init_by(self) -> InitBy:
        return self._init_by

    @property
    def init_level(self) -> int:
        return self._init_level

    def get(self, x: int, y: int) -> float | None:
        """Return the stored height at (x, y), or `None` if it is unset."""

        return self._grid.read(x, y)

    def set(self, x: int, y: int, height: float | None) -> float | None:
        """Store `height` at (x, y) and return the height that was there before."""

        return self._grid.write(x, y, height)

    def gen(self, x: int, y: int) -> tuple[float | None, bool]:
        """Return the height at (x, y), generating it first if it is unset.

        The flag is True only when a new height was computed. Corners are never
        generated, so an unset corner yields `(None, False)`.
        """

        stored = self._grid.read(x, y)
        if stored is not None or self._grid.is_corner(x, y):
            return stored, False
        return resolve(self._grid, self._blender, x, y), True

    def regen(self, x: int, y: int) -> tuple[float | None, float | None]:
        """Recompute the height at (x, y) and return `(previous, new)`.

        Stored dependency heights are reused. Corners are left untouched.
        """

        previous = self._grid.read(x, y)
        return previous, resolve(self._grid, self._blender, x, y)

    def get_area(self, top_left: tuple[int, int], bottom_right: tuple[int, int]) -> list[Cell]:
        return [(x, y, self.get(x, y)) for x, y in _area(top_left, bottom_right)]

    def set_area(
        self,
        height: float | None,
        top_left: tuple[int, int],
        bottom_right: tuple[int, int],
    ) -> list[Cell]:
        """Store `height` over the area and return the previous heights."""

        return [(x, y, self.set(x, y, height)) for x, y in _area(top_left, bottom_right)]

    def gen_area(
        self,
        top_left: tuple[int, int],
        bottom_right: tuple[int, int],
    ) -> list[tuple[int, int, float | None, bool]]:
        return [(x, y, *self.gen(x, y)) for x, y in _area(top_left, bottom_right)]

    def get_all(self) -> list[Cell]:
        return self.get_area((0, 0), (self.size, self.size))

    def set_all(self, height: float | None) -> list[Cell]:
        return self.set_area(height, (0, 0), (self.size, self.size))

    def gen_all(self) -> list[tuple[int, int, float | None, bool]]:
        return self.gen_area((0, 0), (self.size, self.size))

    def resolved_count(self) -> int:
        return self._grid.resolved_count()

    def to_array(self) -> np.ndarray:
        """Copy of the grid as a `(size, size)` array indexed `[y, x]`, NaN where unset."""

        return self._grid.to_array()

    def __repr__(self) -> str:
        return (
            f"{type(self).__name__}(size={self.size}, roughness={self.roughness}, "
            f"seed={self.seed:#018x}, init_by={self._init_by.value}, "
            f"init_level={self._init_level}, resolved={self.resolved_count()})"
        )


def _area(top_left: tuple[int, int], bottom_right: tuple[int, int]):
    x0, y0 = top_left
    x1, y1 = bottom_right
    for y in range(y0, y1):
        for x in range(x0, x1):
            yield x, y
