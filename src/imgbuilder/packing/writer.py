"""Binary writer emitting a VER2 IMG archive from an :class:`ArchivePlan`.

The writer does no layout math of its own. Every section start is checked
against the plan and any divergence raises, so the plan stays authoritative
for offsets and the dry run matches what lands on disk.
"""

from __future__ import annotations
from pathlib import Path
from typing import BinaryIO, Optional, Sequence

from ..logging import get_logger, section
from ..reporting import get_reporter
from .constants import SECTOR_SIZE
from .errors import OutputError, E_WRITE_IO, internal_error
from .packers import pack_header, pack_directory_entry
from .planner import ArchiveEntry, ArchivePlan, compute_archive_plan

__all__ = ["write_archive", "write_archive_file"]


class _PlannedSink:
    """Tracks the write position of a sink that need not support ``tell``."""

    def __init__(self, sink: BinaryIO):
        self._sink = sink
        self.position = 0

    def write(self, data: bytes) -> None:
        view = memoryview(data)
        while view:
            try:
                n = self._sink.write(view)
            except OSError as e:
                raise OutputError(
                    code=E_WRITE_IO,
                    message=f"failed to write archive: {e}",
                    context={"position": self.position},
                ) from e
            # Buffered streams return None once everything is accepted
            if n is None:
                n = len(view)
            if n <= 0:
                raise OutputError(
                    code=E_WRITE_IO,
                    message="failed to write archive: sink accepted no bytes",
                    context={"position": self.position},
                )
            self.position += n
            view = view[n:]

    def pad_to(self, target_offset: int) -> None:
        """Write zero padding until the position reaches ``target_offset``."""
        if self.position > target_offset:
            raise internal_error(
                f"Writer position {self.position} surpassed planned offset {target_offset}"
            )
        self.write(b"\x00" * (target_offset - self.position))

    def expect(self, offset: int, what: str) -> None:
        if self.position != offset:
            raise internal_error(
                f"{what} starts at {self.position}, plan expects {offset}"
            )


def _check_plan(entries: Sequence[ArchiveEntry], plan: ArchivePlan) -> None:
    if len(entries) != plan.directory.entry_count:
        raise internal_error(
            f"Entry count mismatch: plan={plan.directory.entry_count} actual={len(entries)}"
        )
    for entry, eplan in zip(entries, plan.entries):
        if entry.size != eplan.size:
            raise internal_error(
                f"Size mismatch for {eplan.name}: plan={eplan.size} actual={entry.size}"
            )


def write_archive(
    sink: BinaryIO,
    entries: Sequence[ArchiveEntry],
    plan: Optional[ArchivePlan] = None,
) -> int:
    """Write the archive for ``entries`` to ``sink`` in a single pass.

    ``entries`` must be in the order the plan was computed for. Returns the
    number of bytes written.
    """
    logger = get_logger()
    rep = get_reporter()
    if plan is None:
        plan = compute_archive_plan(entries)
    _check_plan(entries, plan)
    out = _PlannedSink(sink)

    rep.start_task(
        "write.directory", "Directory", total=plan.directory.entry_count
    )
    out.write(pack_header(plan.directory.entry_count))
    for eplan in plan.entries:
        out.write(
            pack_directory_entry(
                eplan.sector_offset, eplan.sector_count, eplan.name_field
            )
        )
        rep.advance("write.directory", current_item=eplan.name)
    out.expect(plan.directory.header_size, "Directory pad")
    out.pad_to(plan.directory.sectors * SECTOR_SIZE)
    rep.end_task(
        "write.directory",
        entries=plan.directory.entry_count,
        bytes=out.position,
    )

    rep.start_task("write.payloads", "Payloads", total=len(entries))
    for entry, eplan in zip(entries, plan.entries):
        out.expect(eplan.byte_offset, f"Payload {eplan.name}")
        out.write(entry.content)
        out.pad_to(eplan.byte_offset + eplan.sector_count * SECTOR_SIZE)
        rep.advance("write.payloads", current_item=eplan.name)
    rep.end_task(
        "write.payloads",
        entries=len(entries),
        sectors=plan.total_sectors - plan.directory.sectors,
        bytes=out.position - plan.directory.sectors * SECTOR_SIZE,
    )

    if out.position != plan.file_size:
        raise internal_error(
            f"Archive size mismatch vs plan: plan={plan.file_size} actual={out.position}"
        )
    logger.debug(
        "Wrote archive: %d entries %d sectors (%d bytes)",
        plan.directory.entry_count,
        plan.total_sectors,
        out.position,
    )
    return out.position


def write_archive_file(
    output_path: Path,
    entries: Sequence[ArchiveEntry],
    plan: Optional[ArchivePlan] = None,
) -> int:
    """Create (or truncate) ``output_path`` and write the archive into it.

    The plan is computed before the file is opened. A failure while writing
    leaves the partial file in place.
    """
    output_path = Path(output_path)
    if plan is None:
        plan = compute_archive_plan(entries)
    with section(f"Write IMG {output_path.name}"):
        try:
            f = output_path.open("wb")
        except OSError as e:
            raise OutputError(
                code=E_WRITE_IO,
                message=f"{output_path}: failed to open for writing",
                context={"path": str(output_path)},
            ) from e
        with f:
            written = write_archive(f, entries, plan)
    get_reporter().status(
        "Write summary: "
        + f"file={output_path.name} bytes={written} entries={plan.directory.entry_count} sectors={plan.total_sectors}"
    )
    return written
