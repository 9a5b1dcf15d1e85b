# scrubkit/orchestrator.py
"""
Orchestrator: file-level glue around the scrubbers. Reads files, picks a
scrubber, writes cleaned copies and, optionally, JSON reports of what was
removed. This is the only part of the package that touches the filesystem.
"""

from __future__ import annotations

import datetime
import logging
import os
import pathlib
import shutil
import tempfile
from dataclasses import dataclass, field
from typing import List, Optional

from .analyzer import sha256_bytes
from .detector import scrubber_for_bytes
from .errors import IoError, ScrubError, UnsupportedFileType
from .models import MetadataEntry
from .report_generator import ReportGenerator
from .utils import cleaned_path_for, default_reports_dir, is_cleaned_output

logger = logging.getLogger(__name__)


@dataclass
class CleanOutcome:
    source: pathlib.Path
    output_path: Optional[pathlib.Path] = None
    metadata_removed: List[MetadataEntry] = field(default_factory=list)
    original_sha256: str = ""
    cleaned_sha256: str = ""
    report_path: Optional[str] = None
    error: Optional[ScrubError] = None

    @property
    def ok(self) -> bool:
        return self.error is None


class Orchestrator:
    def __init__(self, report_dir: str | pathlib.Path | None = None):
        """
        report_dir is where JSON reports are written. Left as None, reports go
        to the per-user data directory.
        """
        self._report_dir = report_dir
        self._reporter: Optional[ReportGenerator] = None

    @property
    def reporter(self) -> ReportGenerator:
        if self._reporter is None:
            folder = self._report_dir if self._report_dir is not None else default_reports_dir()
            self._reporter = ReportGenerator(folder)
        return self._reporter

    def _read(self, path: pathlib.Path) -> bytes:
        try:
            with open(path, "rb") as f:
                return f.read()
        except OSError as e:
            raise IoError(f"Failed to read file: {path}: {e}") from e

    def _write(self, path: pathlib.Path, data: bytes) -> None:
        """Write through a sibling temp file so the target is never left half-written."""
        tmp_name = None
        try:
            with tempfile.NamedTemporaryFile(dir=path.parent, prefix=f".{path.name}.",
                                             suffix=".tmp", delete=False) as tmp:
                tmp_name = tmp.name
                tmp.write(data)
            if path.exists():
                shutil.copymode(path, tmp_name)
            os.replace(tmp_name, path)
        except OSError as e:
            if tmp_name is not None:
                pathlib.Path(tmp_name).unlink(missing_ok=True)
            raise IoError(f"Failed to write cleaned file to {path}: {e}") from e

    def view_path(self, path: str | pathlib.Path) -> List[MetadataEntry]:
        p = pathlib.Path(path)
        scrubber = scrubber_for_bytes(self._read(p))
        logger.debug("Viewing %s as %s", p, scrubber.format_name)
        return scrubber.view_metadata()

    def clean_path(self, path: str | pathlib.Path, in_place: bool = False,
                   write_report: bool = False) -> CleanOutcome:
        """
        Scrub one file. Nothing is written when the file carries no metadata;
        otherwise the cleaned copy goes to <stem>.clean<suffix>, or over the
        original when in_place is set.
        """
        p = pathlib.Path(path)
        original = self._read(p)
        scrubber = scrubber_for_bytes(original)
        logger.debug("Scrubbing %s as %s", p, scrubber.format_name)
        result = scrubber.scrub()

        outcome = CleanOutcome(
            source=p,
            metadata_removed=result.metadata_removed,
            original_sha256=sha256_bytes(original),
            cleaned_sha256=sha256_bytes(result.cleaned_file_bytes),
        )
        if not result.metadata_removed:
            logger.info("No metadata found in %s", p)
            return outcome

        target = p if in_place else cleaned_path_for(p)
        self._write(target, result.cleaned_file_bytes)
        outcome.output_path = target
        logger.info("Removed %d entries from %s -> %s",
                    len(result.metadata_removed), p, target)

        if write_report:
            outcome.report_path = self._report(outcome)
        return outcome

    def _report(self, outcome: CleanOutcome) -> str:
        now = datetime.datetime.now(datetime.timezone.utc)
        payload = {
            "source": outcome.source.resolve(),
            "output": outcome.output_path.resolve(),
            "metadata_removed": [e.as_dict() for e in outcome.metadata_removed],
            "original_sha256": outcome.original_sha256,
            "cleaned_sha256": outcome.cleaned_sha256,
            "timestamp": now.isoformat().replace("+00:00", "Z"),
        }
        name = f"{outcome.source.name}_{now.strftime('%Y%m%dT%H%M%S%fZ')}"
        try:
            return self.reporter.generate_json_report(name, payload)
        except OSError as e:
            raise IoError(f"Failed to write report for {outcome.source}: {e}") from e

    def clean_tree(self, path: str | pathlib.Path, in_place: bool = False,
                   write_report: bool = False) -> List[CleanOutcome]:
        """
        Scrub a file, or every file below a directory. A failure on one file
        is recorded on its outcome and does not stop the others; files of an
        unsupported type are skipped.
        """
        p = pathlib.Path(path)
        if p.is_dir():
            targets = sorted(
                child for child in p.rglob("*")
                if child.is_file() and not is_cleaned_output(child)
            )
        elif p.is_file():
            targets = [p]
        else:
            raise IoError(f"Path not found: {p}")

        outcomes: List[CleanOutcome] = []
        for f in targets:
            try:
                outcomes.append(self.clean_path(f, in_place=in_place, write_report=write_report))
            except UnsupportedFileType as e:
                if f == p:
                    outcomes.append(CleanOutcome(source=f, error=e))
                else:
                    logger.debug("Skipping %s: %s", f, e)
            except ScrubError as e:
                logger.warning("Failed processing %s: %s", f, e)
                outcomes.append(CleanOutcome(source=f, error=e))
        return outcomes
