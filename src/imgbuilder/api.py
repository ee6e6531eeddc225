"""High-level API for building IMG archives."""

from __future__ import annotations

from dataclasses import dataclass, field
from pathlib import Path
from typing import List, Optional, Sequence

from .logging import get_logger
from .manifest import build_manifest
from .packing.constants import DEFAULT_OUTPUT_NAME
from .packing.planner import (
    ArchiveEntry,
    ArchivePlan,
    compute_archive_plan,
    to_plan_dict,
)
from .packing.writer import write_archive_file
from .reporting import get_reporter, task
from .sources import collect_entries, load_file_list

__all__ = [
    "BuildOptions",
    "BuildResult",
    "build_archive",
    "plan_dry_run",
    "resolve_inputs",
    "ArchivePlan",
]


@dataclass(slots=True)
class BuildOptions:
    inputs: Sequence[Path] = field(default_factory=list)
    output_path: Path = Path(DEFAULT_OUTPUT_NAME)
    # Optional path; when provided a manifest JSON is written after the archive
    manifest_path: Optional[Path] = None
    # Optional JSON/YAML list of further inputs, appended after ``inputs``
    list_file: Optional[Path] = None


@dataclass(slots=True)
class BuildResult:
    output_file: Path
    bytes_written: int
    entry_count: int
    plan: ArchivePlan


def resolve_inputs(
    inputs: Sequence[Path], list_file: Optional[Path] = None
) -> List[Path]:
    paths = [Path(p) for p in inputs]
    if list_file is not None:
        paths.extend(load_file_list(list_file))
    return paths


def _plan(entries: Sequence[ArchiveEntry]) -> ArchivePlan:
    rep = get_reporter()
    with task("plan.layout", "Compute layout plan"):
        plan = compute_archive_plan(entries)
    rep.status(
        "Plan summary: "
        + f"entries={plan.directory.entry_count} directory_sectors={plan.directory.sectors} "
        + f"total_sectors={plan.total_sectors} file_size={plan.file_size} "
        + f"data_bytes={plan.data_bytes} padding={plan.padding.total}"
    )
    return plan


def build_archive(options: BuildOptions) -> BuildResult:
    logger = get_logger()
    rep = get_reporter()
    paths = resolve_inputs(options.inputs, options.list_file)
    entries = collect_entries(paths)
    plan = _plan(entries)
    output_path = Path(options.output_path)
    bytes_written = write_archive_file(output_path, entries, plan)
    if options.manifest_path is not None:
        with task("manifest.emit", "Emit manifest"):
            manifest = build_manifest(
                plan, output_path, Path(options.manifest_path)
            )
        logger.debug(
            "Emitted manifest: %s", Path(options.manifest_path).name
        )
        rep.status(
            "Manifest summary: "
            + f"file={Path(options.manifest_path).name} crc32={manifest['crc32']} "
            + f"sha256={manifest['sha256'][:12]}"
        )
    rep.status(
        "Build summary: "
        + f"file={output_path.name} bytes={bytes_written} entries={plan.directory.entry_count}"
    )
    return BuildResult(
        output_file=output_path,
        bytes_written=bytes_written,
        entry_count=plan.directory.entry_count,
        plan=plan,
    )


def plan_dry_run(
    inputs: Sequence[Path], list_file: Optional[Path] = None
) -> tuple[ArchivePlan, dict]:
    """Compute the archive plan for ``inputs`` without writing output.

    Returns (ArchivePlan, plan_dict) where plan_dict is JSON-serialisable.
    """
    entries = collect_entries(resolve_inputs(inputs, list_file))
    plan = _plan(entries)
    return plan, to_plan_dict(plan)
