"""Eager pre-fill strategies run when a heightfield is constructed."""

from __future__ import annotations

import logging

from lazyterrain.config import InitBy, clamp_init_level
from lazyterrain.grid import CellGrid
from lazyterrain.jitter import Blender
from lazyterrain.seed import salted_hash16, u16_to_unit

logger = logging.getLogger(__name__)


def corner_height(x: int, y: int, seed: int) -> float:
    return u16_to_unit(salted_hash16(f"{x}_{y}", seed))


def init_diamond_square(grid: CellGrid, blender: Blender, level: int) -> None:
    """Seed the corners and run `level` full diamond-square passes."""

    size = grid.size
    for x, y in grid.corners():
        grid.write(x, y, corner_height(x, y, blender.seed))

    step = grid.max_coord
    shift = step >> 1
    for _ in range(level):
        for y in range(shift, size, step):
            for x in range(shift, size, step):
                heights = (
                    grid.read(x + shift, y - shift),
                    grid.read(x + shift, y + shift),
                    grid.read(x - shift, y + shift),
                    grid.read(x - shift, y - shift),
                )
                grid.write(x, y, blender.blend(x, y, heights))

        step >>= 1
        for y in range(0, size, step):
            for x in range(0, size, step):
                if grid.read(x, y) is not None:
                    continue
                heights = (
                    grid.read_nudged(x, y - shift),
                    grid.read_nudged(x + shift, y),
                    grid.read_nudged(x, y + shift),
                    grid.read_nudged(x - shift, y),
                )
                grid.write(x, y, blender.blend(x, y, heights))
        shift >>= 1


def init_seed(grid: CellGrid, seed: int, level: int) -> None:
    """Fill a uniform sub-lattice with hashes of each point's visit order."""

    step = grid.max_coord >> (level - 1) if level > 1 else 1
    visit = 0
    for y in range(0, grid.size, step):
        for x in range(0, grid.size, step):
            grid.write(x, y, u16_to_unit(salted_hash16(str(visit), seed)))
            visit += 1


def initialize(grid: CellGrid, blender: Blender, level: int, init_by: InitBy | str) -> int:
    """Apply the `init_by` strategy and return the clamped level actually used."""

    strategy = InitBy.parse(init_by)
    level = clamp_init_level(level, grid.size)

    if strategy is InitBy.DIAMOND_SQUARE:
        init_diamond_square(grid, blender, level)
    elif strategy is InitBy.SEED:
        init_seed(grid, blender.seed, level)

    logger.debug(
        "initialized %dx%d grid by %s to level %d (%d cells set)",
        grid.size,
        grid.size,
        strategy.value,
        level,
        grid.resolved_count(),
    )
    return level
