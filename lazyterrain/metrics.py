"""Summary statistics over the resolved cells of a heightfield."""

from __future__ import annotations

from dataclasses import dataclass
from typing import TYPE_CHECKING

import numpy as np

if TYPE_CHECKING:
    from lazyterrain.heightfield import HeightField


@dataclass(frozen=True)
class FieldMetrics:
    """Coverage and height range of a heightfield's set cells."""

    total_cells: int
    resolved_cells: int
    coverage: float
    min_height: float | None
    max_height: float | None
    mean_height: float | None


def field_metrics(field: "HeightField") -> FieldMetrics:
    heights = field.to_array()
    resolved = heights[~np.isnan(heights)]
    total = int(heights.size)

    if resolved.size == 0:
        return FieldMetrics(total, 0, 0.0, None, None, None)

    return FieldMetrics(
        total_cells=total,
        resolved_cells=int(resolved.size),
        coverage=float(resolved.size / total),
        min_height=float(np.min(resolved)),
        max_height=float(np.max(resolved)),
        mean_height=float(np.mean(resolved)),
    )
