import json
from pathlib import Path

import pytest

from imgbuilder.packing.errors import ImgError, E_INPUT_READ, E_LIST_FILE
from imgbuilder.sources import (
    collect_entries,
    entries_from_mapping,
    load_file_list,
)
from imgbuilder.utils.io import safe_read_file
from imgbuilder.utils.paths import leaf_name


@pytest.mark.parametrize(
    "path,expected",
    [
        ("image.png", "image.png"),
        ("dir/sub/image.png", "image.png"),
        ("C:\\test\\image.png", "image.png"),
        ("mixed\\dir/x.txd", "x.txd"),
        ("trailing/", ""),
    ],
)
def test_leaf_name(path, expected):
    assert leaf_name(path) == expected


def test_entries_sorted_by_name_bytes(tmp_path: Path):
    for name in ["b", "a", "B", "a.dff"]:
        (tmp_path / name).write_bytes(name.encode())
    paths = [tmp_path / n for n in ["b", "a", "B", "a.dff"]]
    entries = collect_entries(paths)
    # byte order: uppercase sorts before lowercase
    assert [e.name for e in entries] == [b"B", b"a", b"a.dff", b"b"]
    assert [e.content for e in entries] == [b"B", b"a", b"a.dff", b"b"]


def test_duplicate_leaf_names_last_wins(tmp_path: Path):
    (tmp_path / "dir1").mkdir()
    (tmp_path / "dir2").mkdir()
    (tmp_path / "dir1" / "x").write_bytes(b"first")
    (tmp_path / "dir2" / "x").write_bytes(b"second")
    entries = collect_entries([tmp_path / "dir1" / "x", tmp_path / "dir2" / "x"])
    assert len(entries) == 1
    assert entries[0].name == b"x"
    assert entries[0].content == b"second"


def test_missing_input_reports_path(tmp_path: Path):
    missing = tmp_path / "nope.bin"
    with pytest.raises(ImgError) as exc:
        collect_entries([missing])
    assert exc.value.code == E_INPUT_READ
    assert exc.value.message == f"{missing}: failed to read from file"


def test_directory_input_is_read_error(tmp_path: Path):
    with pytest.raises(ImgError) as exc:
        collect_entries([tmp_path])
    assert exc.value.code == E_INPUT_READ


def test_entries_from_pairs_last_wins():
    entries = entries_from_mapping([("k", b"1"), ("j", b"2"), ("k", b"3")])
    assert [(e.name, e.content) for e in entries] == [(b"j", b"2"), (b"k", b"3")]


def test_load_json_list(tmp_path: Path):
    (tmp_path / "a.txt").write_bytes(b"A")
    lst = tmp_path / "inputs.json"
    lst.write_text(json.dumps({"files": ["a.txt"]}), encoding="utf-8")
    assert load_file_list(lst) == [(tmp_path / "a.txt").resolve()]


def test_load_yaml_bare_list(tmp_path: Path):
    (tmp_path / "models").mkdir()
    lst = tmp_path / "inputs.yaml"
    lst.write_text("- models/a.dff\n- b.txd\n", encoding="utf-8")
    assert load_file_list(lst) == [
        (tmp_path / "models" / "a.dff").resolve(),
        (tmp_path / "b.txd").resolve(),
    ]


def test_list_entry_may_not_escape(tmp_path: Path):
    lst = tmp_path / "inputs.json"
    lst.write_text(json.dumps(["../outside.bin"]), encoding="utf-8")
    with pytest.raises(ImgError) as exc:
        load_file_list(lst)
    assert exc.value.code == E_LIST_FILE


def test_malformed_list_rejected(tmp_path: Path):
    lst = tmp_path / "inputs.json"
    lst.write_text(json.dumps({"files": [1, 2]}), encoding="utf-8")
    with pytest.raises(ImgError) as exc:
        load_file_list(lst)
    assert exc.value.code == E_LIST_FILE


def test_input_over_size_cap_rejected(tmp_path: Path):
    big = tmp_path / "big.img"
    big.write_bytes(b"\x00" * 4097)
    with pytest.raises(ImgError) as exc:
        safe_read_file(big, max_size=4096)
    assert exc.value.code == E_INPUT_READ
    assert "file too large" in exc.value.message
    assert exc.value.context["limit"] == 4096
    assert safe_read_file(big, max_size=4097) == b"\x00" * 4097
