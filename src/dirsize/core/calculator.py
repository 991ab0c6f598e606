"""Recursive directory size calculation."""

from __future__ import annotations

import logging
import os
from pathlib import Path

from dirsize.core.run_log import RunLog
from dirsize.models.size_result import SizeResult

log = logging.getLogger(__name__)


def calculate_directory_size(dir_path: Path | str, run_log: RunLog) -> SizeResult:
    """Sum the sizes of all regular files below *dir_path*.

    Symlinks and special files are not counted and symlinked directories
    are not followed. A file that disappears before it can be stat-ed is
    skipped; any other error aborts the walk, writes one ERROR record to
    *run_log* and returns a failed result.
    """
    try:
        size, count = _walk(dir_path)
    except OSError as e:
        run_log.error(f"Filesystem error: {e} in directory: {dir_path}")
        return SizeResult.failed(str(e))
    except Exception as e:
        log.debug("Unexpected error while sizing %s", dir_path, exc_info=True)
        run_log.error(f"General exception: {e} in directory: {dir_path}")
        return SizeResult.failed(str(e))
    return SizeResult.measured(size, count)


def _walk(path: Path | str) -> tuple[int, int]:
    """Walk a directory tree with os.scandir and return (total_bytes, file_count)."""
    total = 0
    count = 0
    stack: list[Path | str] = [path]
    while stack:
        current = stack.pop()
        with os.scandir(current) as it:
            for entry in it:
                if entry.is_file(follow_symlinks=False):
                    try:
                        total += entry.stat(follow_symlinks=False).st_size
                    except FileNotFoundError:
                        log.debug("File vanished during walk: %s", entry.path)
                        continue
                    count += 1
                elif entry.is_dir(follow_symlinks=False):
                    stack.append(entry.path)
    return total, count
