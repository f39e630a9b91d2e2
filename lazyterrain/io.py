"""Output serialization for generated heightfields."""

from __future__ import annotations

import json
from pathlib import Path
import shutil
from typing import Any

import numpy as np
from PIL import Image


def resolve_output_dir(
    out_root: str | Path,
    seed: int,
    size: int,
    *,
    overwrite: bool,
) -> Path:
    """Create and return `<out_root>/<seed-hex>/<size>` for one generation run."""

    target = Path(out_root) / f"{seed:016x}" / str(size)
    if target.exists() and any(target.iterdir()) and not overwrite:
        raise FileExistsError(
            f"Output directory already exists and is not empty: {target}. Use --overwrite to replace files."
        )
    target.mkdir(parents=True, exist_ok=True)
    return target


def safe_clean_output_dir(target: Path, *, out_root: Path) -> None:
    """Delete all children of `target`, which must live under `out_root`."""

    target_r = target.resolve()
    target_r.relative_to(out_root.resolve())

    if not target_r.exists():
        target_r.mkdir(parents=True, exist_ok=True)
        return

    for child in target_r.iterdir():
        if child.is_symlink() or child.is_file():
            child.unlink()
        elif child.is_dir():
            shutil.rmtree(child)


def move_tree_contents(src_dir: Path, dst_dir: Path) -> None:
    for child in src_dir.iterdir():
        shutil.move(str(child), str(dst_dir / child.name))


def write_height_npy(path: str | Path, heights: np.ndarray) -> None:
    """Save heights as float64; unset cells stay NaN."""

    np.save(Path(path), heights.astype(np.float64), allow_pickle=False)


def write_png(path: str | Path, raster_u8: np.ndarray) -> None:
    """Save an 8-bit raster; the channel count (L, LA, RGB, RGBA) follows its shape."""

    image = Image.fromarray(np.ascontiguousarray(raster_u8, dtype=np.uint8))
    image.save(Path(path))


def write_json(path: str | Path, payload: dict[str, Any]) -> None:
    text = json.dumps(payload, indent=2, sort_keys=True)
    Path(path).write_text(text + "\n", encoding="utf-8")
