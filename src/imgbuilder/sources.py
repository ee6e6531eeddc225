"""Entry collection: turn input paths into the ordered entry list.

Archive order is ascending by name bytes, and when two inputs share a leaf
name the one given last replaces the earlier one. Both rules are applied
explicitly here (dedup, then sort) so output is reproducible for the same
set of inputs.
"""

from __future__ import annotations
import json
import os
from pathlib import Path
from typing import Any, Dict, Iterable, List, Mapping, Tuple, Union

import yaml

from .logging import get_logger
from .packing.errors import InputError, E_LIST_FILE
from .packing.layout import name_bytes
from .packing.planner import ArchiveEntry
from .reporting import get_reporter
from .utils.io import safe_read_file
from .utils.paths import leaf_name, safe_file_path

__all__ = [
    "read_entry_file",
    "collect_entries",
    "entries_from_mapping",
    "load_file_list",
]

PathLike = Union[str, os.PathLike]


def read_entry_file(path: PathLike) -> bytes:
    return safe_read_file(Path(path))


def _ordered(by_name: Dict[bytes, bytes]) -> List[ArchiveEntry]:
    return [ArchiveEntry(name, by_name[name]) for name in sorted(by_name)]


def entries_from_mapping(
    items: Union[Mapping[Any, bytes], Iterable[Tuple[Any, bytes]]],
) -> List[ArchiveEntry]:
    """Build the ordered entry list from in-memory ``(name, content)`` pairs."""
    pairs = items.items() if isinstance(items, Mapping) else items
    by_name: Dict[bytes, bytes] = {}
    for name, content in pairs:
        by_name[name_bytes(name)] = bytes(content)
    return _ordered(by_name)


def collect_entries(paths: Iterable[PathLike]) -> List[ArchiveEntry]:
    """Read every input and return entries sorted by leaf name.

    Inputs are read in the order given; a later path with the same leaf name
    replaces an earlier one.
    """
    logger = get_logger()
    rep = get_reporter()
    paths = [os.fspath(p) for p in paths]
    by_name: Dict[bytes, bytes] = {}
    total_bytes = 0
    rep.start_task("sources.read", "Read inputs", total=len(paths))
    for p in paths:
        name = name_bytes(leaf_name(p))
        data = read_entry_file(p)
        if name in by_name:
            rep.warning(
                f"Duplicate entry name {leaf_name(p)}: {p} replaces earlier input"
            )
            total_bytes -= len(by_name[name])
        by_name[name] = data
        total_bytes += len(data)
        logger.debug("read %s (%d bytes)", p, len(data))
        rep.advance("sources.read", current_item=leaf_name(p))
    rep.end_task("sources.read", entries=len(by_name), bytes=total_bytes)
    rep.status(
        "Sources summary: "
        + f"inputs={len(paths)} entries={len(by_name)} total_bytes={total_bytes}"
    )
    return _ordered(by_name)


def load_file_list(path: PathLike) -> List[Path]:
    """Load a JSON or YAML list of input files.

    The document is either a list of paths or a mapping with a ``files`` list.
    Relative paths resolve against the list file's directory and may not
    leave it.
    """
    p = Path(path)
    try:
        text = p.read_text(encoding="utf-8")
    except OSError as e:
        raise InputError(
            code=E_LIST_FILE,
            message=f"{p}: failed to read list file",
            context={"path": str(p)},
        ) from e
    try:
        if p.suffix.lower() in {".yaml", ".yml"}:
            data: Any = yaml.safe_load(text)
        else:
            data = json.loads(text)
    except (yaml.YAMLError, json.JSONDecodeError) as e:
        raise InputError(
            code=E_LIST_FILE,
            message=f"{p}: malformed list file ({e})",
            context={"path": str(p)},
        ) from e
    if isinstance(data, dict):
        data = data.get("files")
    if not isinstance(data, list) or not all(isinstance(f, str) for f in data):
        raise InputError(
            code=E_LIST_FILE,
            message=f"{p}: expected a list of file paths",
            context={"path": str(p)},
        )
    base_dir = p.parent
    resolved: List[Path] = []
    for entry in data:
        try:
            resolved.append(safe_file_path(base_dir, entry))
        except ValueError as e:
            raise InputError(
                code=E_LIST_FILE,
                message=f"{p}: {entry} escapes the list file directory",
                context={"path": str(p), "entry": entry},
            ) from e
    return resolved
