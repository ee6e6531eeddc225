"""Layout planning: compute the directory and sector offsets of an archive.

The plan is immutable and computed without touching the filesystem. The
writer consumes it as the single source of truth for every offset it emits.
"""

from __future__ import annotations
from dataclasses import dataclass
from typing import Any, Dict, List, Optional, Sequence

from ..logging import get_logger
from .constants import (
    SECTOR_SIZE,
    HEADER_SIZE,
    DIRECTORY_ENTRY_SIZE,
    MAX_ENTRY_COUNT,
    MAX_SECTOR_COUNT,
    MAX_SECTOR_OFFSET,
)
from .errors import LayoutError, E_VALUE_RANGE
from .layout import encode_name, sectors_for

__all__ = [
    "ArchiveEntry",
    "EntryPlan",
    "DirectoryPlan",
    "PaddingStats",
    "ArchivePlan",
    "compute_archive_plan",
    "to_plan_dict",
]


@dataclass(frozen=True, slots=True)
class ArchiveEntry:
    name: bytes
    content: bytes

    @property
    def size(self) -> int:
        return len(self.content)

    @property
    def display_name(self) -> str:
        return self.name.decode("utf-8", errors="replace")


@dataclass(slots=True)
class EntryPlan:
    name: str
    name_field: bytes
    sector_offset: int
    sector_count: int
    size: int
    padding_after: int

    @property
    def byte_offset(self) -> int:
        return self.sector_offset * SECTOR_SIZE


@dataclass(slots=True)
class DirectoryPlan:
    entry_count: int
    header_size: int
    sectors: int
    padding_after: int


@dataclass(slots=True)
class PaddingStats:
    total: int
    by_section: Dict[str, int]


@dataclass(slots=True)
class ArchivePlan:
    directory: DirectoryPlan
    entries: List[EntryPlan]
    padding: PaddingStats
    total_sectors: int

    @property
    def file_size(self) -> int:
        return self.total_sectors * SECTOR_SIZE

    @property
    def data_bytes(self) -> int:
        return sum(e.size for e in self.entries)


def _range_error(field: str, value: int, limit: int, name: Optional[str] = None):
    ctx: Dict[str, Any] = {"field": field, "value": value, "limit": limit}
    if name is not None:
        ctx["name"] = name
    subject = f"{name}: " if name else ""
    return LayoutError(
        code=E_VALUE_RANGE,
        message=f"{subject}{field} {value} exceeds {limit}",
        context=ctx,
    )


def compute_archive_plan(entries: Sequence[ArchiveEntry]) -> ArchivePlan:
    """Compute the sector layout for ``entries`` in the given order.

    Entry names are encoded (and validated) here so a bad name is reported
    before any output is produced.
    """
    logger = get_logger()
    entry_count = len(entries)
    if entry_count > MAX_ENTRY_COUNT:
        raise _range_error("entry_count", entry_count, MAX_ENTRY_COUNT)
    header_size = HEADER_SIZE + DIRECTORY_ENTRY_SIZE * entry_count
    dir_sectors = sectors_for(header_size)
    directory = DirectoryPlan(
        entry_count=entry_count,
        header_size=header_size,
        sectors=dir_sectors,
        padding_after=dir_sectors * SECTOR_SIZE - header_size,
    )

    planned: List[EntryPlan] = []
    cursor = dir_sectors
    payload_padding = 0
    for entry in entries:
        name_field = encode_name(entry.name)
        count = sectors_for(entry.size)
        if count > MAX_SECTOR_COUNT:
            raise _range_error(
                "sector_count", count, MAX_SECTOR_COUNT, entry.display_name
            )
        if cursor > MAX_SECTOR_OFFSET:
            raise _range_error(
                "sector_offset", cursor, MAX_SECTOR_OFFSET, entry.display_name
            )
        pad = count * SECTOR_SIZE - entry.size
        planned.append(
            EntryPlan(
                name=entry.display_name,
                name_field=name_field,
                sector_offset=cursor,
                sector_count=count,
                size=entry.size,
                padding_after=pad,
            )
        )
        logger.debug(
            "plan entry %s: sector=%d count=%d size=%d pad=%d",
            entry.display_name,
            cursor,
            count,
            entry.size,
            pad,
        )
        payload_padding += pad
        cursor += count

    padding = PaddingStats(
        total=directory.padding_after + payload_padding,
        by_section={
            "directory": directory.padding_after,
            "payloads": payload_padding,
        },
    )
    return ArchivePlan(
        directory=directory,
        entries=planned,
        padding=padding,
        total_sectors=cursor,
    )


def to_plan_dict(plan: ArchivePlan) -> Dict[str, Any]:  # lightweight serializer
    def entry(e: EntryPlan):
        return {
            "name": e.name,
            "sector_offset": e.sector_offset,
            "sector_count": e.sector_count,
            "size": e.size,
            "padding_after": e.padding_after,
        }

    return {
        "sector_size": SECTOR_SIZE,
        "file_size": plan.file_size,
        "total_sectors": plan.total_sectors,
        "directory": {
            "entry_count": plan.directory.entry_count,
            "header_size": plan.directory.header_size,
            "sectors": plan.directory.sectors,
            "padding_after": plan.directory.padding_after,
        },
        "entries": [entry(e) for e in plan.entries],
        "padding": {
            "total": plan.padding.total,
            "by_section": dict(plan.padding.by_section),
        },
        "statistics": {
            "data_bytes": plan.data_bytes,
            "empty_entries": sum(1 for e in plan.entries if e.size == 0),
        },
    }
