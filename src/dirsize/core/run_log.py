"""Append-only run log written alongside each report."""

from __future__ import annotations

import logging
from dataclasses import dataclass
from pathlib import Path

from dirsize.utils import format_timestamp

log = logging.getLogger(__name__)

RUN_LOGGER_NAME = "dirsize.run"


class LogOpenError(Exception):
    """Raised when the log file cannot be opened for appending."""


@dataclass(frozen=True)
class LogFormat:
    """Which optional parts each log line carries."""

    timestamps: bool = True
    levels: bool = True


class RunLogFormatter(logging.Formatter):
    """Render records as ``<timestamp> - <LEVEL>: <message>``.

    The timestamp and level parts are dropped when disabled in the
    ``LogFormat``.
    """

    def __init__(self, log_format: LogFormat) -> None:
        super().__init__()
        self._format = log_format

    def format(self, record: logging.LogRecord) -> str:
        line = record.getMessage()
        if self._format.levels:
            line = f"{record.levelname}: {line}"
        if self._format.timestamps:
            line = f"{format_timestamp(record.created)} - {line}"
        return line


class RunLog:
    """Diagnostic sink for one run, backed by a file opened in append mode.

    Use as a context manager so the handler is flushed and closed on
    every exit path::

        with RunLog(path).open() as run_log:
            run_log.info("Processing directory: /srv")
    """

    def __init__(self, path: Path | str, log_format: LogFormat | None = None) -> None:
        self.path = Path(path)
        self.log_format = log_format or LogFormat()
        # Private logger kept out of the logging registry so each run log
        # only ever writes to its own file.
        self._logger = logging.Logger(RUN_LOGGER_NAME, logging.INFO)
        self._logger.propagate = False
        self._handler: logging.FileHandler | None = None

    def open(self) -> RunLog:
        """Open the log file for appending.

        Raises:
            LogOpenError: If the file cannot be opened.
        """
        try:
            handler = logging.FileHandler(self.path, mode="a", encoding="utf-8")
        except OSError as e:
            raise LogOpenError(f"Unable to open log file: {self.path} ({e.strerror or e})") from e

        handler.setFormatter(RunLogFormatter(self.log_format))
        self._logger.addHandler(handler)
        self._handler = handler
        log.debug("Opened run log %s", self.path)
        return self

    def close(self) -> None:
        """Flush and detach the file handler. Safe to call twice."""
        if self._handler is None:
            return
        self._logger.removeHandler(self._handler)
        self._handler.close()
        self._handler = None

    def info(self, message: str) -> None:
        self._logger.info(message)

    def error(self, message: str) -> None:
        self._logger.error(message)

    def __enter__(self) -> RunLog:
        if self._handler is None:
            self.open()
        return self

    def __exit__(self, *exc_info) -> None:
        self.close()
