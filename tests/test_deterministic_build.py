import hashlib
from pathlib import Path

from imgbuilder.api import BuildOptions, build_archive


def _inputs(root: Path) -> list[Path]:
    root.mkdir()
    files = {"vehicle.txd": b"\x10" * 3000, "ped.dff": b"\x20" * 10, "e": b""}
    for name, data in files.items():
        (root / name).write_bytes(data)
    return [root / n for n in files]


def test_two_runs_identical(tmp_path: Path):
    inputs = _inputs(tmp_path / "src")
    out1 = tmp_path / "a1.img"
    out2 = tmp_path / "a2.img"
    build_archive(BuildOptions(inputs=inputs, output_path=out1))
    # Input order must not matter
    build_archive(BuildOptions(inputs=list(reversed(inputs)), output_path=out2))
    b1 = out1.read_bytes()
    b2 = out2.read_bytes()
    assert b1 == b2
    assert hashlib.sha256(b1).hexdigest() == hashlib.sha256(b2).hexdigest()
