"""Size measurement dataclasses."""

from __future__ import annotations

from dataclasses import dataclass
from pathlib import Path


@dataclass(frozen=True, slots=True)
class SizeResult:
    """Outcome of measuring one directory tree.

    Either a measured byte count or a failure carrying the error text.
    A measured ``0`` means the tree holds no file data; it never stands
    in for a failed walk.
    """

    size_bytes: int | None = None
    file_count: int = 0
    error: str = ""

    @classmethod
    def measured(cls, size_bytes: int, file_count: int = 0) -> SizeResult:
        return cls(size_bytes=size_bytes, file_count=file_count)

    @classmethod
    def failed(cls, reason: str) -> SizeResult:
        return cls(error=reason)

    @property
    def ok(self) -> bool:
        return self.size_bytes is not None


@dataclass(slots=True)
class DirectoryReport:
    """One top-level subdirectory and its measured size."""

    name: str
    path: Path
    result: SizeResult
