"""dirsize: report the size of each subdirectory of a directory."""

__version__ = "1.0.0"
