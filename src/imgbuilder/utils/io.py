"""IO helpers for reading archive inputs."""

from __future__ import annotations
from pathlib import Path

from ..packing.constants import MAX_SECTOR_COUNT, SECTOR_SIZE
from ..packing.errors import InputError, E_INPUT_READ

__all__ = ["MAX_INPUT_SIZE", "safe_read_file"]

# Largest payload a u16 sector count can describe.
MAX_INPUT_SIZE = MAX_SECTOR_COUNT * SECTOR_SIZE


def safe_read_file(path: Path, max_size: int = MAX_INPUT_SIZE) -> bytes:
    try:
        size = path.stat().st_size
        if size > max_size:
            raise InputError(
                code=E_INPUT_READ,
                message=f"{path}: file too large ({size}>{max_size} bytes)",
                context={"path": str(path), "size": size, "limit": max_size},
            )
        return path.read_bytes()
    except OSError as e:
        raise InputError(
            code=E_INPUT_READ,
            message=f"{path}: failed to read from file",
            context={"path": str(path), "reason": e.strerror or str(e)},
        ) from e
