"""Path utilities (leaf names, safe resolution)."""

from __future__ import annotations
from pathlib import Path

__all__ = ["leaf_name", "safe_file_path"]


def leaf_name(path: str) -> str:
    """Strip everything up to the last ``/`` or ``\\`` separator.

    Both separators are honoured on every platform so Windows style paths
    given on a POSIX host still reduce to the file name.
    """
    pos = max(path.rfind("/"), path.rfind("\\"))
    return path[pos + 1 :]


def safe_file_path(base_dir: Path, file_path: str) -> Path:
    base_dir = base_dir.resolve()
    resolved = (base_dir / file_path).resolve()
    resolved.relative_to(base_dir)  # raises ValueError if escapes
    return resolved
