"""Binary format constants for VER2 IMG archives."""

from __future__ import annotations

SECTOR_SIZE = 0x800

# 'VER2' when stored little-endian
IMG_MAGIC = 0x32524556

HEADER_SIZE = 8
DIRECTORY_ENTRY_SIZE = 32
NAME_FIELD_SIZE = 24

MAX_SECTOR_COUNT = 0xFFFF
MAX_SECTOR_OFFSET = 0xFFFFFFFF
MAX_ENTRY_COUNT = 0xFFFFFFFF

DEFAULT_OUTPUT_NAME = "data.img"

__all__ = [
    "SECTOR_SIZE",
    "IMG_MAGIC",
    "HEADER_SIZE",
    "DIRECTORY_ENTRY_SIZE",
    "NAME_FIELD_SIZE",
    "MAX_SECTOR_COUNT",
    "MAX_SECTOR_OFFSET",
    "MAX_ENTRY_COUNT",
    "DEFAULT_OUTPUT_NAME",
]
