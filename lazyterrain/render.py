"""Preview rasters built from per-cell heightfield reads."""

from __future__ import annotations

from typing import TYPE_CHECKING

from matplotlib import colormaps
import numpy as np

if TYPE_CHECKING:
    from lazyterrain.heightfield import HeightField

UNSET_LA = (0, 0)
UNSET_RGB = (0, 0, 0)


def sample_area(
    field: "HeightField",
    top_left: tuple[int, int] | None = None,
    bottom_right: tuple[int, int] | None = None,
) -> np.ndarray:
    """Read the area `[x0, x1) x [y0, y1)` cell by cell into a NaN-padded array."""

    x0, y0 = top_left or (0, 0)
    x1, y1 = bottom_right or (field.size, field.size)
    if x1 < x0 or y1 < y0:
        raise ValueError("bottom_right must not precede top_left")

    out = np.full((y1 - y0, x1 - x0), np.nan, dtype=np.float64)
    for x, y, height in field.get_area((x0, y0), (x1, y1)):
        if height is not None:
            out[y - y0, x - x0] = height
    return out


def heights_to_u8(heights: np.ndarray) -> np.ndarray:
    """Scale heights by 255, saturate to [0, 255] and truncate; NaN maps to 0."""

    scaled = np.nan_to_num(heights * 255.0, nan=0.0, posinf=255.0, neginf=0.0)
    return np.clip(scaled, 0.0, 255.0).astype(np.uint8)


def height_preview_la(
    field: "HeightField",
    top_left: tuple[int, int] | None = None,
    bottom_right: tuple[int, int] | None = None,
) -> np.ndarray:
    """Grayscale+alpha preview; lighter is higher and unset cells are transparent."""

    heights = sample_area(field, top_left, bottom_right)
    resolved = ~np.isnan(heights)
    out = np.empty(heights.shape + (2,), dtype=np.uint8)
    out[..., 0] = np.where(resolved, heights_to_u8(heights), UNSET_LA[0])
    out[..., 1] = np.where(resolved, 255, UNSET_LA[1])
    return out


def height_preview_rgb(
    field: "HeightField",
    top_left: tuple[int, int] | None = None,
    bottom_right: tuple[int, int] | None = None,
    *,
    cmap: str = "terrain",
) -> np.ndarray:
    """Colormapped RGB preview of heights in [0, 1]; unset cells are black."""

    try:
        colormap = colormaps[cmap]
    except KeyError:
        raise ValueError(f"unknown colormap: {cmap}") from None

    heights = sample_area(field, top_left, bottom_right)
    resolved = ~np.isnan(heights)
    rgba = colormap(np.clip(np.nan_to_num(heights, nan=0.0), 0.0, 1.0))
    rgb = np.round(rgba[..., :3] * 255.0).astype(np.uint8)
    rgb[~resolved] = UNSET_RGB
    return rgb
