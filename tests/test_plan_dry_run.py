from __future__ import annotations

"""Dry-run planning parity tests.

The plan computed without writing must describe the file that a real build
produces, byte for byte.
"""

from pathlib import Path

from archive_helper import read_directory
from imgbuilder.api import BuildOptions, build_archive, plan_dry_run
from snapshot_helper import assert_matches_snapshot


def _two_files(tmp_path: Path) -> list[Path]:
    (tmp_path / "b").write_bytes(b"\x01" * 2049)
    (tmp_path / "a").write_bytes(b"\x02")
    return [tmp_path / "b", tmp_path / "a"]


def test_plan_matches_written(tmp_path: Path):
    inputs = _two_files(tmp_path)
    plan, plan_dict = plan_dry_run(inputs)
    out = tmp_path / "data.img"
    assert not out.exists()
    res = build_archive(BuildOptions(inputs=inputs, output_path=out))
    data = out.read_bytes()
    assert plan_dict["file_size"] == len(data) == res.bytes_written
    recs = read_directory(data)
    assert [(r.sector_offset, r.sector_count) for r in recs] == [
        (e["sector_offset"], e["sector_count"]) for e in plan_dict["entries"]
    ]


def test_plan_snapshot(tmp_path: Path):
    _, plan_dict = plan_dry_run(_two_files(tmp_path))
    assert_matches_snapshot(plan_dict, "plan_two_files.json")


def test_plan_with_list_file(tmp_path: Path):
    inputs = _two_files(tmp_path)
    (tmp_path / "inputs.yaml").write_text("files:\n  - a\n", encoding="utf-8")
    (tmp_path / "a").write_bytes(b"\x03" * 5000)
    plan, _ = plan_dry_run([inputs[0]], list_file=tmp_path / "inputs.yaml")
    assert [(e.name, e.sector_count) for e in plan.entries] == [
        ("a", 3),
        ("b", 2),
    ]


def test_plan_empty_input_list(tmp_path: Path):
    plan, plan_dict = plan_dry_run([])
    assert plan_dict["directory"]["entry_count"] == 0
    assert plan_dict["file_size"] == 2048
