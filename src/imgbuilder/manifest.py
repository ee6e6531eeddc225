"""Manifest generation for built archives.

The manifest is an optional JSON artifact describing a written archive:
overall size, the directory as planned, padding statistics and checksums of
the archive bytes. It is only produced when the caller asks for it.
"""

from __future__ import annotations

from pathlib import Path
import hashlib
import json
import zlib
from typing import Any

from .packing.constants import SECTOR_SIZE
from .packing.planner import ArchivePlan

__all__ = ["MANIFEST_VERSION", "manifest_dict", "build_manifest"]

MANIFEST_VERSION = 1


def manifest_dict(
    plan: ArchivePlan,
    archive_bytes: bytes | None = None,
    *,
    archive_name: str | None = None,
) -> dict[str, Any]:
    d: dict[str, Any] = {
        "version": MANIFEST_VERSION,
        "format": "VER2",
        "archive": archive_name,
        "file_size": plan.file_size,
        "sector_size": SECTOR_SIZE,
        "entry_count": plan.directory.entry_count,
        "entries": [
            {
                "name": e.name,
                "sector_offset": e.sector_offset,
                "sector_count": e.sector_count,
                "size": e.size,
            }
            for e in plan.entries
        ],
        "padding": {
            "total": plan.padding.total,
            "by_section": dict(plan.padding.by_section),
        },
        "crc32": None,
        "sha256": None,
    }
    if archive_bytes is not None:
        d["crc32"] = f"{zlib.crc32(archive_bytes) & 0xFFFFFFFF:08x}"
        d["sha256"] = hashlib.sha256(archive_bytes).hexdigest()
    return d


def build_manifest(
    plan: ArchivePlan, archive_path: Path, output_path: Path
) -> dict[str, Any]:
    output_path.parent.mkdir(parents=True, exist_ok=True)
    data = manifest_dict(
        plan, archive_path.read_bytes(), archive_name=archive_path.name
    )
    with output_path.open("w", encoding="utf-8") as f:
        json.dump(data, f, indent=2, sort_keys=True)
        f.write("\n")
    return data
