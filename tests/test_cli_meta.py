from __future__ import annotations

import json

import numpy as np
import pytest

from cli.main import main
from lazyterrain.seed import seed_hash64


def _base(out_dir, seed: str, size: int):
    return out_dir / f"{seed_hash64(seed):016x}" / str(size)


def test_runtime_fields_only_in_meta_json(tmp_path, monkeypatch) -> None:
    monkeypatch.chdir(tmp_path)
    out_dir = tmp_path / "out"
    code = main(
        [
            "--seed",
            "qwerty",
            "--size",
            "17",
            "--roughness",
            "0.15",
            "--out",
            str(out_dir),
            "--cmap",
            "terrain",
            "--overwrite",
        ]
    )
    assert code == 0

    base = _base(out_dir, "qwerty", 17)
    meta = json.loads((base / "meta.json").read_text(encoding="utf-8"))
    deterministic_meta = json.loads((base / "deterministic_meta.json").read_text(encoding="utf-8"))

    assert meta["generation_seconds"] >= 0.0
    assert "generated_at_utc" in meta
    assert "generated_cells" in meta

    for key in ("generation_seconds", "generated_at_utc", "generated_cells", "python_version"):
        assert key not in deterministic_meta

    assert deterministic_meta["size"] == 17
    assert deterministic_meta["seed"] == seed_hash64("qwerty")
    assert deterministic_meta["init_by"] == "diamond-square"
    assert deterministic_meta["config"]["seed"] == "qwerty"
    assert deterministic_meta["metrics"]["coverage"] == 1.0

    for name in ("height.npy", "height.png", "height_terrain.png"):
        assert (base / name).exists(), name

    heights = np.load(base / "height.npy")
    assert heights.shape == (17, 17)
    assert not np.isnan(heights).any()


def test_area_generates_only_requested_cells(tmp_path, monkeypatch) -> None:
    monkeypatch.chdir(tmp_path)
    out_dir = tmp_path / "out"
    code = main(
        ["--seed", "qwerty", "--size", "33", "--area", "0", "0", "4", "4", "--out", str(out_dir), "--no-json"]
    )
    assert code == 0

    base = _base(out_dir, "qwerty", 33)
    heights = np.load(base / "height.npy")
    assert not np.isnan(heights[:4, :4]).any()
    assert np.isnan(heights).any()
    assert not (base / "meta.json").exists()


def test_overwrite_cleans_stale_outputs(tmp_path, monkeypatch) -> None:
    monkeypatch.chdir(tmp_path)
    out_dir = tmp_path / "out"
    args = ["--seed", "qwerty", "--size", "9", "--out", str(out_dir), "--overwrite"]

    assert main(args + ["--cmap", "viridis"]) == 0
    base = _base(out_dir, "qwerty", 9)
    assert (base / "height_viridis.png").exists()

    assert main(args) == 0
    assert not (base / "height_viridis.png").exists()


def test_unresolvable_field_is_a_usage_error(tmp_path, monkeypatch) -> None:
    monkeypatch.chdir(tmp_path)
    with pytest.raises(SystemExit):
        main(["--seed", "qwerty", "--size", "9", "--init-by", "none", "--out", str(tmp_path / "out")])


def test_unknown_colormap_is_a_usage_error(tmp_path, monkeypatch) -> None:
    monkeypatch.chdir(tmp_path)
    with pytest.raises(SystemExit):
        main(["--seed", "qwerty", "--cmap", "nope", "--out", str(tmp_path / "out")])
