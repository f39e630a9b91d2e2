"""Toroidal addressing and cell storage for heightfields."""

from __future__ import annotations

import numpy as np

from lazyterrain.config import normalize_size


def wrap(value: int, size: int) -> int:
    """Map one axis coordinate onto [0, size) treating the axis as a ring."""

    return value % size


def wrap_nudged(value: int, size: int) -> int:
    """Wrap one axis coordinate after pushing off-grid values one unit outward.

    The odd-sized lattice repeats with period `size - 1` across the seam, so a
    square-step neighbour that falls just outside `[0, size - 1]` lands on the
    matching cell of the opposite ring only after this extra unit.
    """

    if value < 0:
        value -= 1
    elif value > size - 1:
        value += 1
    return value % size


class CellGrid:
    """Row-major square grid of optional float heights.

    Unset cells hold NaN internally and read back as `None`.
    """

    def __init__(self, size: int) -> None:
        self.size = normalize_size(size)
        self._cells = np.full((self.size, self.size), np.nan, dtype=np.float64)

    @property
    def max_coord(self) -> int:
        return self.size - 1

    def wrap(self, x: int, y: int) -> tuple[int, int]:
        return wrap(x, self.size), wrap(y, self.size)

    def wrap_nudged(self, x: int, y: int) -> tuple[int, int]:
        return wrap_nudged(x, self.size), wrap_nudged(y, self.size)

    def is_corner(self, x: int, y: int) -> bool:
        x, y = self.wrap(x, y)
        return x in (0, self.max_coord) and y in (0, self.max_coord)

    def corners(self) -> tuple[tuple[int, int], ...]:
        m = self.max_coord
        return ((0, 0), (m, 0), (0, m), (m, m))

    def read(self, x: int, y: int) -> float | None:
        x, y = self.wrap(x, y)
        value = self._cells[y, x]
        if np.isnan(value):
            return None
        return float(value)

    def read_nudged(self, x: int, y: int) -> float | None:
        return self.read(*self.wrap_nudged(x, y))

    def write(self, x: int, y: int, height: float | None) -> float | None:
        """Store `height` (or clear the cell with `None`) and return the old value."""

        x, y = self.wrap(x, y)
        previous = self.read(x, y)
        self._cells[y, x] = np.nan if height is None else float(height)
        return previous

    def resolved_count(self) -> int:
        return int(np.count_nonzero(~np.isnan(self._cells)))

    def to_array(self) -> np.ndarray:
        return self._cells.copy()

    def __len__(self) -> int:
        return int(self._cells.size)
