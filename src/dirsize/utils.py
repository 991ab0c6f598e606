"""Shared utility functions."""

from __future__ import annotations

import os
from datetime import datetime
from pathlib import Path

KB = 1024
MB = KB * 1024
GB = MB * 1024

TIMESTAMP_FORMAT = "%Y-%m-%d %H:%M:%S"


def xdg_config_home() -> Path:
    """Return XDG_CONFIG_HOME, defaulting to ~/.config."""
    return Path(os.environ.get("XDG_CONFIG_HOME", Path.home() / ".config"))


def format_timestamp(epoch_seconds: float) -> str:
    """Format a POSIX timestamp as local time, second precision."""
    return datetime.fromtimestamp(epoch_seconds).strftime(TIMESTAMP_FORMAT)


def human_readable_size(size_bytes: int, *, truncate: bool = False) -> str:
    """Convert a byte count to a display string.

    Values at or above a unit boundary switch to that unit, so ``1024``
    becomes ``"1.00 KB"``. With ``truncate=True`` the value is integer
    divided instead (``"1 KB"``).
    """
    if size_bytes < 0:
        raise ValueError(f"size must be non-negative, got {size_bytes}")

    for divisor, unit in ((GB, "GB"), (MB, "MB"), (KB, "KB")):
        if size_bytes >= divisor:
            if truncate:
                return f"{size_bytes // divisor} {unit}"
            return f"{size_bytes / divisor:.2f} {unit}"
    return f"{size_bytes} bytes"
