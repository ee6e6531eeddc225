"""Pure binary packing functions for the archive header and directory.

All functions are side-effect free and validate field ranges.
"""

from __future__ import annotations

import struct

from .constants import (
    IMG_MAGIC,
    NAME_FIELD_SIZE,
    MAX_ENTRY_COUNT,
    MAX_SECTOR_COUNT,
    MAX_SECTOR_OFFSET,
)
from .errors import LayoutError, E_VALUE_RANGE

__all__ = ["pack_header", "pack_directory_entry"]

_HEADER = struct.Struct("<II")
_DIRECTORY_ENTRY = struct.Struct(f"<IHH{NAME_FIELD_SIZE}s")


def _check_range(field: str, value: int, limit: int) -> None:
    if not 0 <= value <= limit:
        raise LayoutError(
            code=E_VALUE_RANGE,
            message=f"{field} {value} out of range (0..{limit})",
            context={"field": field, "value": value, "limit": limit},
        )


def pack_header(entry_count: int) -> bytes:
    _check_range("entry_count", entry_count, MAX_ENTRY_COUNT)
    return _HEADER.pack(IMG_MAGIC, entry_count)


def pack_directory_entry(
    sector_offset: int, sector_count: int, name_field: bytes
) -> bytes:
    _check_range("sector_offset", sector_offset, MAX_SECTOR_OFFSET)
    _check_range("sector_count", sector_count, MAX_SECTOR_COUNT)
    if len(name_field) != NAME_FIELD_SIZE:
        raise LayoutError(
            code=E_VALUE_RANGE,
            message=f"name field must be {NAME_FIELD_SIZE} bytes, got {len(name_field)}",
        )
    return _DIRECTORY_ENTRY.pack(sector_offset, sector_count, 0, name_field)
