import io
from pathlib import Path

import pytest

from archive_helper import payload, read_directory, read_header
from imgbuilder.packing.errors import ImgError, E_NAME_TOO_LONG
from imgbuilder.packing.planner import ArchiveEntry, compute_archive_plan
from imgbuilder.packing.writer import write_archive, write_archive_file
from imgbuilder.sources import entries_from_mapping


def _write(entries) -> bytes:
    buf = io.BytesIO()
    written = write_archive(buf, entries)
    data = buf.getvalue()
    assert written == len(data)
    return data


def test_single_empty_file():
    data = _write([ArchiveEntry(b"a.bin", b"")])
    assert len(data) == 2048
    assert data[:8] == bytes.fromhex("5645523201000000")
    (rec,) = read_directory(data)
    assert rec.sector_offset == 1
    assert rec.sector_count == 0
    assert rec.reserved == 0
    assert rec.name_field == b"a.bin" + b"\x00" * 19
    assert data[40:] == b"\x00" * (2048 - 40)


def test_single_one_byte_file():
    data = _write([ArchiveEntry(b"x", b"\xaa")])
    assert len(data) == 4096
    (rec,) = read_directory(data)
    assert (rec.sector_offset, rec.sector_count) == (1, 1)
    assert data[2048] == 0xAA
    assert data[2049:4096] == b"\x00" * 2047


def test_two_files_sorted_by_name():
    entries = entries_from_mapping({"b": b"\x01" * 2049, "a": b"\x02"})
    data = _write(entries)
    assert len(data) == 8192
    recs = read_directory(data)
    assert [r.name for r in recs] == [b"a", b"b"]
    assert (recs[0].sector_offset, recs[0].sector_count) == (1, 1)
    assert (recs[1].sector_offset, recs[1].sector_count) == (2, 2)
    assert data[2048] == 0x02
    assert data[4096:6145] == b"\x01" * 2049
    assert data[6145:] == b"\x00" * (8192 - 6145)


def test_name_of_24_bytes_fills_field():
    name = b"n" * 24
    data = _write([ArchiveEntry(name, b"z")])
    (rec,) = read_directory(data)
    assert rec.name_field == name


def test_layout_invariants_hold():
    contents = {
        "zero": b"",
        "tiny": b"\x07",
        "edge": b"\x05" * 2048,
        "over": b"\x09" * 2049,
        "big.dff": bytes(range(256)) * 40,
    }
    entries = entries_from_mapping(contents)
    data = _write(entries)

    magic, count = read_header(data)
    assert magic == b"VER2"
    assert count == len(contents)
    assert len(data) % 2048 == 0

    recs = read_directory(data)
    header_size = 8 + 32 * count
    assert data[header_size : recs[0].sector_offset * 2048] == b"\x00" * (
        recs[0].sector_offset * 2048 - header_size
    )
    for cur, nxt in zip(recs, recs[1:]):
        assert cur.sector_offset + cur.sector_count == nxt.sector_offset
    last = recs[-1]
    assert len(data) == (last.sector_offset + last.sector_count) * 2048

    for rec in recs:
        original = contents[rec.name.decode()]
        assert payload(data, rec, len(original)) == original
        tail_start = rec.sector_offset * 2048 + len(original)
        tail_end = (rec.sector_offset + rec.sector_count) * 2048
        assert data[tail_start:tail_end] == b"\x00" * (tail_end - tail_start)
        assert rec.name_field == rec.name + b"\x00" * (24 - len(rec.name))


def test_write_archive_file_truncates(tmp_path: Path):
    out = tmp_path / "data.img"
    out.write_bytes(b"\xff" * 10000)
    written = write_archive_file(out, [ArchiveEntry(b"x", b"\xaa")])
    assert written == 4096
    assert out.stat().st_size == 4096


def test_long_name_leaves_no_output(tmp_path: Path):
    out = tmp_path / "data.img"
    with pytest.raises(ImgError) as exc:
        write_archive_file(out, [ArchiveEntry(b"y" * 25, b"data")])
    assert exc.value.code == E_NAME_TOO_LONG
    assert not out.exists()


def test_plan_and_entries_must_agree():
    entries = [ArchiveEntry(b"x", b"abc")]
    plan = compute_archive_plan([ArchiveEntry(b"x", b"abcd")])
    with pytest.raises(ImgError):
        write_archive(io.BytesIO(), entries, plan)
