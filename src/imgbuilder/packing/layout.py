"""Low-level layout helpers (sector rounding, name field packing)."""

from __future__ import annotations
import os
from typing import Union

from .constants import NAME_FIELD_SIZE, SECTOR_SIZE
from .errors import LayoutError, E_NAME_EMPTY, E_NAME_TOO_LONG

__all__ = ["sectors_for", "sector_pad", "encode_name", "name_bytes"]


def sectors_for(size: int) -> int:
    """Number of whole sectors needed to hold ``size`` bytes (0 for 0)."""
    if size < 0:
        raise ValueError(f"Negative byte count: {size}")
    return (size + SECTOR_SIZE - 1) // SECTOR_SIZE


def sector_pad(size: int) -> int:
    return sectors_for(size) * SECTOR_SIZE - size


def name_bytes(name: Union[str, bytes]) -> bytes:
    if isinstance(name, str):
        return os.fsencode(name)
    return bytes(name)


def encode_name(name: Union[str, bytes]) -> bytes:
    """Return the fixed 24-byte NUL padded name field for ``name``.

    Bytes are copied verbatim. A name of exactly 24 bytes fills the field
    with no terminator.
    """
    raw = name_bytes(name)
    display = raw.decode("utf-8", errors="replace")
    if not raw:
        raise LayoutError(
            code=E_NAME_EMPTY,
            message="Entry names must not be empty",
        )
    if len(raw) > NAME_FIELD_SIZE:
        raise LayoutError(
            code=E_NAME_TOO_LONG,
            message=f"{display} exceeds the {NAME_FIELD_SIZE}-byte limit for names",
            context={"name": display, "length": len(raw), "limit": NAME_FIELD_SIZE},
        )
    return raw + b"\x00" * (NAME_FIELD_SIZE - len(raw))
