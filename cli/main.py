"""CLI entry point for lazy heightfield generation."""

from __future__ import annotations

import argparse
from datetime import datetime, timezone
import logging
from pathlib import Path
import platform
import shutil
import tempfile
import time

from matplotlib import colormaps
import numpy as np
from lazyterrain.config import DEFAULT_INIT_LEVEL, DEFAULT_ROUGHNESS, DEFAULT_SIZE, HeightFieldConfig, InitBy
from lazyterrain.io import (
    move_tree_contents,
    resolve_output_dir,
    safe_clean_output_dir,
    write_height_npy,
    write_json,
    write_png,
)
from lazyterrain.metrics import field_metrics
from lazyterrain.render import height_preview_la, height_preview_rgb
from lazyterrain.resolver import ResolutionError


def build_parser() -> argparse.ArgumentParser:
    parser = argparse.ArgumentParser(description="Lazy diamond-square heightfield generator")
    parser.add_argument("--size", type=int, default=DEFAULT_SIZE, help="Grid side length, rounded to 2^k+1")
    parser.add_argument("--roughness", type=float, default=DEFAULT_ROUGHNESS, help="Jitter weight in [0, 1]")
    parser.add_argument("--seed", default=None, help="Seed text; a clock seed is drawn when omitted")
    parser.add_argument("--init-level", type=int, default=DEFAULT_INIT_LEVEL, help="Eager pre-fill depth")
    parser.add_argument(
        "--init-by",
        choices=[member.value for member in InitBy],
        default=InitBy.DIAMOND_SQUARE.value,
        help="Eager pre-fill strategy",
    )
    parser.add_argument(
        "--area",
        type=int,
        nargs=4,
        metavar=("X0", "Y0", "X1", "Y1"),
        default=None,
        help="Generate only the half-open area [X0, X1) x [Y0, Y1); defaults to the whole grid",
    )
    parser.add_argument("--cmap", default=None, help="Also write a colormapped preview (e.g. terrain)")
    parser.add_argument("--out", default="out", help="Output root directory")
    parser.add_argument("--overwrite", action="store_true", help="Overwrite files in existing output directory")
    parser.add_argument(
        "--json",
        action=argparse.BooleanOptionalAction,
        default=True,
        help="Write metadata JSON files",
    )
    parser.add_argument("-v", "--verbose", action="store_true", help="Enable debug logging")
    return parser


def main(argv: list[str] | None = None) -> int:
    parser = build_parser()
    args = parser.parse_args(argv)

    logging.basicConfig(
        level=logging.DEBUG if args.verbose else logging.INFO,
        format="%(levelname)s %(name)s: %(message)s",
    )

    if args.cmap is not None and args.cmap not in colormaps:
        parser.error(f"unknown colormap: {args.cmap}")

    config = HeightFieldConfig(
        size=args.size,
        roughness=args.roughness,
        seed=args.seed,
        init_level=args.init_level,
        init_by=InitBy.parse(args.init_by),
    )
    field = config.build()

    if args.area is None:
        top_left, bottom_right = (0, 0), (field.size, field.size)
    else:
        x0, y0, x1, y1 = args.area
        if x1 < x0 or y1 < y0:
            parser.error("--area must satisfy X0 <= X1 and Y0 <= Y1")
        top_left, bottom_right = (x0, y0), (x1, y1)

    generation_start = time.perf_counter()
    try:
        generated = field.gen_area(top_left, bottom_right)
    except ResolutionError as exc:
        parser.error(str(exc))
    generation_seconds = time.perf_counter() - generation_start
    new_cells = sum(1 for *_, was_generated in generated if was_generated)

    preview_la = height_preview_la(field)
    preview_rgb = height_preview_rgb(field, cmap=args.cmap) if args.cmap else None
    metrics = field_metrics(field)

    out_dir = resolve_output_dir(args.out, field.seed, field.size, overwrite=args.overwrite)
    stage_dir = Path(tempfile.mkdtemp(prefix=".staging-", dir=str(out_dir.parent)))
    try:
        write_height_npy(stage_dir / "height.npy", field.to_array())
        write_png(stage_dir / "height.png", preview_la)
        if preview_rgb is not None:
            write_png(stage_dir / f"height_{args.cmap}.png", preview_rgb)
        if args.json:
            deterministic_meta = {
                "size": field.size,
                "max_coord": field.max_coord,
                "roughness": field.roughness,
                "seed": field.seed,
                "init_by": field.init_by.value,
                "init_level": field.init_level,
                "area": {"top_left": list(top_left), "bottom_right": list(bottom_right)},
                "config": config.to_dict(),
                "metrics": {
                    "total_cells": metrics.total_cells,
                    "resolved_cells": metrics.resolved_cells,
                    "coverage": metrics.coverage,
                    "min_height": metrics.min_height,
                    "max_height": metrics.max_height,
                    "mean_height": metrics.mean_height,
                },
            }
            meta = {
                **deterministic_meta,
                "generated_at_utc": datetime.now(timezone.utc).isoformat(),
                "generation_seconds": generation_seconds,
                "generated_cells": new_cells,
                "python_version": platform.python_version(),
                "numpy_version": np.__version__,
            }
            write_json(stage_dir / "deterministic_meta.json", deterministic_meta)
            write_json(stage_dir / "meta.json", meta)

        safe_clean_output_dir(out_dir, out_root=Path(args.out))
        move_tree_contents(stage_dir, out_dir)
    finally:
        shutil.rmtree(stage_dir, ignore_errors=True)

    print(f"Generated heightfield: {out_dir}")
    print(f"Size {field.size} (max coord {field.max_coord}); roughness {field.roughness:.3f}; seed {field.seed:#018x}")
    print(
        "Coverage: "
        f"{metrics.resolved_cells}/{metrics.total_cells} cells "
        f"({metrics.coverage * 100.0:.2f}%), {new_cells} generated on demand"
    )
    if metrics.resolved_cells:
        print(
            "Heights: "
            f"min={metrics.min_height:.4f}, "
            f"max={metrics.max_height:.4f}, "
            f"mean={metrics.mean_height:.4f}"
        )
    print(f"Generation time: {generation_seconds:.3f} s")
    return 0


if __name__ == "__main__":
    raise SystemExit(main())
