from __future__ import annotations

import numpy as np

from lazyterrain.grid import CellGrid, wrap, wrap_nudged


def test_wrap_treats_axis_as_ring() -> None:
    assert wrap(-1, 9) == 8
    assert wrap(9, 9) == 0
    assert wrap(-19, 9) == 8
    assert wrap(4, 9) == 4


def test_wrap_nudged_only_moves_off_grid_values() -> None:
    assert wrap_nudged(5, 9) == 5
    assert wrap_nudged(8, 9) == 8
    assert wrap_nudged(-1, 9) == 7
    assert wrap_nudged(9, 9) == 1
    assert wrap_nudged(-4, 9) == 4
    assert wrap_nudged(12, 9) == 4


def test_cell_grid_starts_empty() -> None:
    grid = CellGrid(9)

    assert len(grid) == 81
    assert grid.resolved_count() == 0
    assert grid.read(3, 3) is None
    assert np.isnan(grid.to_array()).all()


def test_cell_grid_write_returns_previous_and_wraps() -> None:
    grid = CellGrid(9)

    assert grid.write(-1, 10, 0.25) is None
    assert grid.read(8, 1) == 0.25
    assert grid.write(8, 1, 0.5) == 0.25
    assert grid.write(8, 1, None) == 0.5
    assert grid.read(8, 1) is None


def test_cell_grid_corners_and_array_copy() -> None:
    grid = CellGrid(9)

    assert grid.corners() == ((0, 0), (8, 0), (0, 8), (8, 8))
    assert grid.is_corner(9, 0)
    assert grid.is_corner(-1, -1)
    assert not grid.is_corner(4, 0)

    grid.write(2, 3, 0.75)
    array = grid.to_array()
    array[3, 2] = 0.0
    assert grid.read(2, 3) == 0.75
    assert grid.resolved_count() == 1
