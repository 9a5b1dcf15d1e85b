#!/usr/bin/env python3
import argparse
import logging
import sys

from tabulate import tabulate

from .errors import ScrubError
from .orchestrator import Orchestrator

logger = logging.getLogger(__name__)


def build_parser():
    parser = argparse.ArgumentParser(
        prog="scrubkit",
        description="View and remove potentially sensitive metadata from image files",
    )
    parser.add_argument("-v", "--verbose", action="store_true", help="Enable debug logging")
    sub = parser.add_subparsers(dest="cmd")

    p_view = sub.add_parser("view", help="View metadata for a file")
    p_view.add_argument("file_path", help="The path to the file")

    p_clean = sub.add_parser("clean", help="Remove metadata from a file or folder")
    p_clean.add_argument("path", help="File or folder path to clean")
    p_clean.add_argument("-i", "--in-place", action="store_true", help="Overwrite the file in-place")
    p_clean.add_argument("--report", action="store_true", help="Write a JSON report per cleaned file")
    p_clean.add_argument("--report-dir", help="Folder for JSON reports (default: per-user data folder)")
    return parser


def cmd_view(orch, file_path):
    metadata = orch.view_path(file_path)
    if not metadata:
        print(f"No metadata found in {file_path}.")
        return
    print(f"Metadata for {file_path}:")
    rows = [(e.category, e.key, e.value) for e in metadata]
    print(tabulate(rows, headers=["Category", "Key", "Value"], tablefmt="grid"))


def cmd_clean(orch, path, in_place, write_report):
    failed = False
    for outcome in orch.clean_tree(path, in_place=in_place, write_report=write_report):
        if not outcome.ok:
            print(f"[!] Failed processing {outcome.source}: {outcome.error}")
            failed = True
        elif not outcome.metadata_removed:
            print(f"No metadata found to remove from {outcome.source}.")
        else:
            print(f"Successfully removed {len(outcome.metadata_removed)} metadata entries.")
            print(f"Cleaned file saved to: {outcome.output_path}")
            if outcome.report_path:
                print(f"[+] Report generated: {outcome.report_path}")
    return failed


def main(argv=None):
    parser = build_parser()
    args = parser.parse_args(argv)

    logging.basicConfig(
        level=logging.DEBUG if args.verbose else logging.WARNING,
        format="%(levelname)s %(name)s: %(message)s",
    )

    if args.cmd is None:
        parser.print_help()
        return 0

    orch = Orchestrator(report_dir=getattr(args, "report_dir", None))
    try:
        if args.cmd == "view":
            cmd_view(orch, args.file_path)
            return 0
        failed = cmd_clean(orch, args.path, args.in_place, args.report)
        return 1 if failed else 0
    except ScrubError as e:
        logger.debug("Command %s failed", args.cmd, exc_info=True)
        print(f"[!] {e}")
        return 1


if __name__ == "__main__":
    sys.exit(main())
