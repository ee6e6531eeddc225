"""Command line interface for imgbuilder."""

from __future__ import annotations

import argparse
import json
import sys
from pathlib import Path

from .api import BuildOptions, build_archive, plan_dry_run
from .logging import configure_logging, get_logger
from .packing.constants import DEFAULT_OUTPUT_NAME
from .packing.errors import ImgError
from .reporting import (
    JsonLinesReporter,
    PlainReporter,
    RichReporter,
    SilentReporter,
    get_reporter,
    set_reporter,
    set_verbosity,
)

DESCRIPTION = (
    "Combines multiple files into a single archive. "
    "The format resembles the one found in GTA SA."
)


class _HelpFormatter(argparse.HelpFormatter):
    def add_usage(self, usage, actions, groups, prefix=None):
        if prefix is None:
            prefix = "Usage: "
        return super().add_usage(usage, actions, groups, prefix)


def build_parser() -> argparse.ArgumentParser:
    p = argparse.ArgumentParser(
        prog="imgbuilder",
        description=DESCRIPTION,
        epilog="Prefix dash-named files with --, e.g. imgbuilder -- -x.dff",
        formatter_class=_HelpFormatter,
    )
    p.add_argument("files", nargs="*", type=Path, help="Files to archive")
    p.add_argument(
        "-o",
        "--output",
        type=Path,
        default=Path(DEFAULT_OUTPUT_NAME),
        help=f"Archive to create (default: {DEFAULT_OUTPUT_NAME})",
    )
    p.add_argument(
        "--list",
        dest="list_file",
        type=Path,
        help="JSON/YAML file listing further inputs",
    )
    p.add_argument(
        "--emit-manifest",
        dest="emit_manifest",
        type=Path,
        help="Optional path to write manifest JSON (opt-in)",
    )
    p.add_argument(
        "--plan",
        action="store_true",
        help="Compute the layout only, do not write the archive",
    )
    p.add_argument(
        "--json", action="store_true", help="With --plan: emit JSON plan"
    )
    p.add_argument(
        "--strict",
        action="store_true",
        help="Exit with status 1 on failure (default exits 0)",
    )
    p.add_argument(
        "-v",
        "--verbose",
        action="count",
        default=0,
        help="Increase verbosity (repeatable)",
    )
    p.add_argument(
        "-r",
        "--reporter",
        choices=["plain", "rich", "json", "silent"],
        default="plain",
        help="Select reporter backend: plain (default), rich, json (JSONL events), silent",
    )
    return p


def _select_reporter(requested: str) -> None:
    if requested == "json":
        set_reporter(JsonLinesReporter(stream=sys.stderr))
    elif requested == "silent":
        set_reporter(SilentReporter())
    elif requested == "rich" and sys.stderr.isatty():
        set_reporter(RichReporter())
    else:  # plain, or rich without a TTY
        set_reporter(PlainReporter())


def _plan_cmd(args: argparse.Namespace) -> int:
    plan, plan_dict = plan_dry_run(args.files, args.list_file)
    get_reporter().flush()
    if args.json:
        print(json.dumps(plan_dict, indent=2, sort_keys=True))
    else:
        for e in plan.entries:
            print(
                f"{e.sector_offset:>8} {e.sector_count:>6} {e.size:>10}  {e.name}"
            )
    return 0


def _build_cmd(args: argparse.Namespace) -> int:
    build_archive(
        BuildOptions(
            inputs=args.files,
            output_path=args.output,
            manifest_path=args.emit_manifest,
            list_file=args.list_file,
        )
    )
    return 0


def main(argv: list[str] | None = None) -> int:
    argv = argv if argv is not None else sys.argv[1:]
    parser = build_parser()
    args = parser.parse_args(argv)
    if not args.files and args.list_file is None:
        parser.print_help(sys.stdout)
        return 0
    _select_reporter(args.reporter)
    set_verbosity(args.verbose)
    configure_logging(args.verbose)
    try:
        if args.plan:
            return _plan_cmd(args)
        return _build_cmd(args)
    except (ImgError, OSError) as e:
        message = e.message if isinstance(e, ImgError) else str(e)
        get_reporter().flush()
        get_logger().debug("build failed", exc_info=True)
        print(f"Failed: {message}")
        return 1 if args.strict else 0


if __name__ == "__main__":  # pragma: no cover
    raise SystemExit(main())
