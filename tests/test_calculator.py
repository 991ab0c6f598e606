"""Tests for recursive directory size calculation."""

from __future__ import annotations

import os
from contextlib import contextmanager

from dirsize.core.calculator import calculate_directory_size


class TestCalculateDirectorySize:
    def test_sums_nested_files(self, sample_tree, run_log):
        result = calculate_directory_size(sample_tree / "alpha", run_log)
        assert result.ok
        assert result.size_bytes == 600
        assert result.file_count == 3

    def test_empty_directory_is_zero_not_failure(self, sample_tree, run_log):
        result = calculate_directory_size(sample_tree / "beta", run_log)
        assert result.ok
        assert result.size_bytes == 0
        assert result.error == ""

    def test_symlinks_not_counted(self, tmp_path, run_log):
        target = tmp_path / "links"
        target.mkdir()
        (target / "real.bin").write_bytes(b"r" * 64)
        outside = tmp_path / "outside"
        outside.mkdir()
        (outside / "big.bin").write_bytes(b"x" * 5000)
        os.symlink(target / "real.bin", target / "file_link")
        os.symlink(outside, target / "dir_link")

        result = calculate_directory_size(target, run_log)
        assert result.size_bytes == 64
        assert result.file_count == 1

    def test_success_writes_nothing(self, sample_tree, run_log, read_log):
        calculate_directory_size(sample_tree / "alpha", run_log)
        assert read_log() == []

    def test_permission_error_fails_explicitly(self, sample_tree, run_log, read_log, deny_scandir):
        nested = sample_tree / "alpha" / "nested"
        deny_scandir(nested)

        result = calculate_directory_size(sample_tree / "alpha", run_log)

        assert not result.ok
        assert result.size_bytes is None
        assert "Permission denied" in result.error
        lines = read_log()
        assert len(lines) == 1
        assert " - ERROR: Filesystem error: " in lines[0]
        assert lines[0].endswith(f"in directory: {sample_tree / 'alpha'}")

    def test_missing_directory_fails(self, tmp_path, run_log, read_log):
        result = calculate_directory_size(tmp_path / "gone", run_log)
        assert not result.ok
        assert len(read_log()) == 1

    def test_unexpected_error_fails(self, sample_tree, run_log, read_log, monkeypatch):
        def broken_scandir(path="."):
            raise RuntimeError("disk on fire")

        monkeypatch.setattr(os, "scandir", broken_scandir)
        result = calculate_directory_size(sample_tree / "alpha", run_log)

        assert not result.ok
        assert result.error == "disk on fire"
        (line,) = read_log()
        assert "ERROR: General exception: disk on fire in directory:" in line

    def test_vanished_file_is_skipped(self, sample_tree, run_log, read_log, monkeypatch):
        real_scandir = os.scandir

        class VanishedEntry:
            """A file entry removed between listing and stat."""

            def __init__(self, entry):
                self.name = entry.name
                self.path = entry.path

            def is_file(self, follow_symlinks=True):
                return True

            def is_dir(self, follow_symlinks=True):
                return False

            def stat(self, follow_symlinks=True):
                raise FileNotFoundError(2, "No such file or directory", self.path)

        @contextmanager
        def racing_scandir(path="."):
            with real_scandir(path) as it:
                entries = list(it)
            yield [VanishedEntry(e) if e.name == "a.bin" else e for e in entries]

        monkeypatch.setattr(os, "scandir", racing_scandir)
        result = calculate_directory_size(sample_tree / "alpha", run_log)

        assert result.ok
        assert result.size_bytes == 500
        assert result.file_count == 2
        assert read_log() == []
