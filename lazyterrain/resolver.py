"""Iterative on-demand resolution of diamond-square heights.

A cell's height depends on four neighbours at distance `step`, where `step` is
the lowest set bit across its coordinates. Diamond cells (both coordinates have
that bit) read their diagonal neighbours; square cells read their orthogonal
neighbours. Unresolved neighbours are resolved first by pushing a frame on an
explicit stack, so the depth of the dependency chain never touches the Python
call stack. Every frame that completes writes its height back to the grid.
"""

from __future__ import annotations

from dataclasses import dataclass, field
import logging
import math

from lazyterrain.grid import CellGrid
from lazyterrain.jitter import Blender

logger = logging.getLogger(__name__)

# Dependency offsets in slot order: NE, SE, SW, NW and N, E, S, W.
_DIAMOND_OFFSETS = ((1, -1), (1, 1), (-1, 1), (-1, -1))
_SQUARE_OFFSETS = ((0, -1), (1, 0), (0, 1), (-1, 0))


class ResolutionError(RuntimeError):
    """Raised when a cell's dependency chain cannot be resolved."""


class UnsetCornerError(ResolutionError):
    """Raised when a dependency chain reaches a corner that holds no height."""

    def __init__(self, x: int, y: int) -> None:
        super().__init__(
            f"corner ({x}, {y}) has no height; set all four corners before generating "
            "cells of a field initialized with InitBy.NONE"
        )
        self.x = x
        self.y = y


class DependencyCycleError(ResolutionError):
    """Raised when a cell depends on a cell that is still awaiting resolution."""


def calc_step(x: int, y: int) -> int:
    """Smallest power of two set in either `x` or `y`.

    Both coordinates must not be zero; callers exclude corners first.
    """

    step = 1
    while not (x & step) and not (y & step):
        step <<= 1
    return step


def is_diamond(x: int, y: int, step: int) -> bool:
    return bool(x & step) and bool(y & step)


@dataclass
class Frame:
    """A cell waiting for its four dependency heights."""

    x: int
    y: int
    step: int
    diamond: bool
    heights: list[float] = field(default_factory=lambda: [0.0, 0.0, 0.0, 0.0])
    index: int = 0

    @classmethod
    def at(cls, x: int, y: int) -> "Frame":
        step = calc_step(x, y)
        return cls(x, y, step, is_diamond(x, y, step))

    def dependency(self, grid: CellGrid) -> tuple[int, int]:
        offsets = _DIAMOND_OFFSETS if self.diamond else _SQUARE_OFFSETS
        dx, dy = offsets[self.index]
        nx = self.x + dx * self.step
        ny = self.y + dy * self.step
        if self.diamond:
            return grid.wrap(nx, ny)
        return grid.wrap_nudged(nx, ny)

    def record(self, height: float) -> bool:
        """Store the next dependency height; True once all four are known."""

        self.heights[self.index] = height
        self.index += 1
        return self.index == len(self.heights)


def resolve(grid: CellGrid, blender: Blender, x: int, y: int) -> float | None:
    """Compute the height of (x, y) from its dependencies and store it.

    Any stored height at (x, y) itself is ignored, while stored heights of its
    dependencies are reused. Corners are never computed: their stored value,
    possibly `None`, is returned as is.
    """

    x, y = grid.wrap(x, y)
    if grid.is_corner(x, y):
        return grid.read(x, y)

    stack = [Frame.at(x, y)]
    pending = {(x, y)}
    height = None

    while stack:
        frame = stack[-1]
        nx, ny = frame.dependency(grid)
        neighbour = grid.read(nx, ny)

        if neighbour is None:
            if grid.is_corner(nx, ny):
                logger.debug("resolution of (%d, %d) stopped at unset corner (%d, %d)", x, y, nx, ny)
                raise UnsetCornerError(nx, ny)
            if (nx, ny) in pending:
                raise DependencyCycleError(
                    f"cell ({nx}, {ny}) depends on itself while resolving ({x}, {y})"
                )
            stack.append(Frame.at(nx, ny))
            pending.add((nx, ny))
            continue

        if not frame.record(neighbour):
            continue

        height = blender.blend(frame.x, frame.y, frame.heights)
        if math.isnan(height):
            raise ResolutionError(f"height computed for ({frame.x}, {frame.y}) is NaN")
        grid.write(frame.x, frame.y, height)
        stack.pop()
        pending.discard((frame.x, frame.y))

    return height
