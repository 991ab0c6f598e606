"""Per-subdirectory size reporting."""

from __future__ import annotations

import logging
import os
from concurrent.futures import ThreadPoolExecutor
from pathlib import Path
from typing import Callable

from dirsize.core.calculator import calculate_directory_size
from dirsize.core.run_log import RunLog
from dirsize.models.size_result import DirectoryReport, SizeResult
from dirsize.utils import human_readable_size

log = logging.getLogger(__name__)

ReportCallback = Callable[[DirectoryReport], None]

ERROR_MARKER = "Error"


class InvalidTargetError(Exception):
    """Raised when the target path is missing or not a directory."""


class DirectoryReporter:
    """Measures every visible subdirectory of a target directory."""

    def __init__(
        self,
        run_log: RunLog,
        *,
        jobs: int = 1,
        truncate_sizes: bool = False,
        name_width: int = 30,
        size_width: int = 10,
    ) -> None:
        self.run_log = run_log
        self.jobs = max(1, jobs)
        self.truncate_sizes = truncate_sizes
        self.name_width = name_width
        self.size_width = size_width

    def run(
        self,
        target: Path | str,
        *,
        validate: bool = True,
        on_report: ReportCallback | None = None,
    ) -> list[DirectoryReport]:
        """Measure each non-hidden subdirectory of *target*.

        Reports are returned, and passed to *on_report*, in name order.

        Args:
            target: Directory whose immediate subdirectories are measured.
            validate: Check that *target* exists and is a directory first.
            on_report: Optional callback fired once per subdirectory.

        Raises:
            InvalidTargetError: If *validate* is set and *target* is unusable.
        """
        target = Path(target)
        if validate and not target.is_dir():
            self.run_log.error(f"Invalid directory path: {target}")
            raise InvalidTargetError(f"Invalid directory path: {target}")

        subdirs = self._list_subdirectories(target)
        if not subdirs:
            return []

        if self.jobs > 1 and len(subdirs) > 1:
            return self._run_parallel(subdirs, on_report)
        return self._run_sequential(subdirs, on_report)

    def _list_subdirectories(self, target: Path) -> list[Path]:
        """Return visible subdirectories of *target*, or [] if listing fails."""
        try:
            with os.scandir(target) as it:
                entries = sorted(it, key=lambda e: e.name)
            return [
                Path(entry.path)
                for entry in entries
                if entry.is_dir() and not entry.name.startswith(".")
            ]
        except OSError as e:
            self.run_log.error(f"Filesystem error: {e}")
            return []
        except Exception as e:
            log.debug("Unexpected error while listing %s", target, exc_info=True)
            self.run_log.error(f"General exception: {e}")
            return []

    def _run_sequential(
        self,
        subdirs: list[Path],
        on_report: ReportCallback | None,
    ) -> list[DirectoryReport]:
        reports: list[DirectoryReport] = []
        for subdir in subdirs:
            self.run_log.info(f"Processing directory: {subdir}")
            report = DirectoryReport(
                name=subdir.name,
                path=subdir,
                result=calculate_directory_size(subdir, self.run_log),
            )
            reports.append(report)
            if on_report:
                on_report(report)
        return reports

    def _run_parallel(
        self,
        subdirs: list[Path],
        on_report: ReportCallback | None,
    ) -> list[DirectoryReport]:
        """Measure subdirectories on a thread pool, reporting in listing order."""
        max_workers = min(self.jobs, len(subdirs))
        log.debug("Measuring %d directories with %d workers", len(subdirs), max_workers)

        reports: list[DirectoryReport] = []
        with ThreadPoolExecutor(max_workers=max_workers) as executor:
            futures = []
            for subdir in subdirs:
                self.run_log.info(f"Processing directory: {subdir}")
                futures.append(executor.submit(calculate_directory_size, subdir, self.run_log))
            for subdir, future in zip(subdirs, futures):
                report = DirectoryReport(name=subdir.name, path=subdir, result=future.result())
                reports.append(report)
                if on_report:
                    on_report(report)
        return reports

    def format_size(self, result: SizeResult) -> str:
        """Human-readable size, or the error marker for a failed measurement."""
        if not result.ok:
            return ERROR_MARKER
        return human_readable_size(result.size_bytes, truncate=self.truncate_sizes)

    def format_line(self, report: DirectoryReport) -> str:
        """Render one report line: padded name, then padded size."""
        name = f"{report.name:<{self.name_width}}"
        size = f"{self.format_size(report.result):<{self.size_width}}"
        return f"{name} Size: {size}"

    def to_dict(self, report: DirectoryReport) -> dict:
        """JSON-friendly view of a report."""
        result = report.result
        return {
            "name": report.name,
            "path": str(report.path),
            "size_bytes": result.size_bytes,
            "human_size": self.format_size(result) if result.ok else None,
            "file_count": result.file_count,
            "error": result.error,
        }
