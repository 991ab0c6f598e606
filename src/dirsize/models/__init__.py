"""dirsize data models."""

from dirsize.models.size_result import DirectoryReport, SizeResult

__all__ = [
    "DirectoryReport",
    "SizeResult",
]
