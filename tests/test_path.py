"""Tests for filesystem operations on Path values."""

from __future__ import annotations

import os
import stat
import sys
from datetime import datetime, timezone
from unittest.mock import patch

import pytest

from pathkit.config import PathkitConfig, set_config
from pathkit.errors import InvalidBufferSizeError, ShortWriteError, TransferError
from pathkit.path import Path
from pathkit.types import CopyResult

posix_only = pytest.mark.skipif(sys.platform == "win32", reason="POSIX permissions")


class TestQueries:
    """Tests for existence and metadata queries."""

    def test_is_exist_file(self, source_file: Path) -> None:
        assert source_file.is_exist() is True

    def test_is_exist_missing(self, workdir: Path) -> None:
        assert workdir.join("missing").is_exist() is False

    def test_is_exist_below_file(self, source_file: Path) -> None:
        """Test a path through a regular file does not exist."""
        assert source_file.join("child").is_exist() is False

    def test_is_exist_raises_on_permission_error(self, workdir: Path) -> None:
        """Test errors other than not-found are not reported as existence."""
        with patch("pathkit.path.os.stat", side_effect=PermissionError(13, "Permission denied")):
            with pytest.raises(PermissionError):
                workdir.join("locked").is_exist()

    def test_is_dir(self, source_file: Path, workdir: Path) -> None:
        assert workdir.is_dir() is True
        assert source_file.is_dir() is False
        assert workdir.join("missing").is_dir() is False

    def test_stat_missing_raises(self, workdir: Path) -> None:
        with pytest.raises(FileNotFoundError):
            workdir.join("missing").stat()

    def test_stat_reflects_changes(self, source_file: Path) -> None:
        """Test nothing about the filesystem is cached on the path."""
        before = source_file.stat().st_size
        source_file.truncate(3)

        assert before > 3
        assert source_file.stat().st_size == 3

    def test_read_dir_sorted(self, workdir: Path) -> None:
        for name in ("b", "c", "a"):
            workdir.join(name).write_file(b"")

        assert [entry.name for entry in workdir.read_dir()] == ["a", "b", "c"]

    def test_abs(self, workdir: Path, monkeypatch: pytest.MonkeyPatch) -> None:
        monkeypatch.chdir(str(workdir))

        assert Path("x/../y").abs() == Path(os.getcwd()).join("y")

    def test_eval_symlinks(self, source_file: Path, workdir: Path) -> None:
        link = workdir.join("link.txt")
        source_file.symlink(link)

        assert link.eval_symlinks() == source_file.eval_symlinks()
        assert link.read_link() == source_file

    def test_eval_symlinks_missing(self, workdir: Path) -> None:
        with pytest.raises(OSError):
            workdir.join("missing").eval_symlinks()

    def test_lstat_does_not_follow(self, source_file: Path, workdir: Path) -> None:
        link = workdir.join("link.txt")
        source_file.symlink(link)

        assert stat.S_ISLNK(link.lstat().st_mode)
        assert stat.S_ISREG(link.stat().st_mode)


class TestWalk:
    """Tests for tree walking."""

    def test_walk(self, source_file: Path, workdir: Path) -> None:
        visited = list(workdir.walk())

        assert visited[0] == (workdir, ["src"], [])
        assert visited[1] == (workdir.join("src"), [], ["report.txt"])

    def test_walk_missing_root_raises(self, workdir: Path) -> None:
        with pytest.raises(FileNotFoundError):
            list(workdir.join("missing").walk())

    def test_walk_on_error(self, workdir: Path) -> None:
        errors: list[OSError] = []

        assert list(workdir.join("missing").walk(on_error=errors.append)) == []
        assert len(errors) == 1

    def test_walk_dir_lexical(self, workdir: Path) -> None:
        for name in ("b/inner.txt", "a.txt", "c"):
            path = workdir.join(name)
            path.dir().mkdir_all()
            path.write_file(b"")

        assert list(workdir.walk_dir()) == [
            workdir,
            workdir.join("a.txt"),
            workdir.join("b"),
            workdir.join("b", "inner.txt"),
            workdir.join("c"),
        ]

    def test_walk_dir_file_root(self, source_file: Path) -> None:
        assert list(source_file.walk_dir()) == [source_file]


class TestMutations:
    """Tests for operations that change the filesystem."""

    def test_mkdir_and_remove(self, workdir: Path) -> None:
        directory = workdir.join("made")
        directory.mkdir()

        assert directory.is_dir()

        directory.remove()

        assert not directory.is_exist()

    def test_mkdir_existing_raises(self, workdir: Path) -> None:
        with pytest.raises(FileExistsError):
            workdir.mkdir()

    def test_mkdir_all(self, workdir: Path) -> None:
        nested = workdir.join("a", "b", "c")
        nested.mkdir_all()
        nested.mkdir_all()

        assert nested.is_dir()

    def test_mkdir_all_blocked_by_file(self, source_file: Path) -> None:
        with pytest.raises(OSError):
            source_file.join("sub").mkdir_all()

    @posix_only
    def test_mkdir_uses_configured_perm(self, workdir: Path) -> None:
        set_config(PathkitConfig(default_perm=0o700))
        old_umask = os.umask(0)
        try:
            workdir.join("private").mkdir()
        finally:
            os.umask(old_umask)

        assert stat.S_IMODE(workdir.join("private").stat().st_mode) == 0o700

    def test_remove_non_empty_directory_fails(self, source_file: Path) -> None:
        with pytest.raises(OSError):
            source_file.dir().remove()

    def test_remove_file(self, source_file: Path) -> None:
        source_file.remove()

        assert not source_file.is_exist()

    def test_remove_all(self, source_file: Path, workdir: Path) -> None:
        tree = workdir.join("src")
        tree.remove_all()

        assert not tree.is_exist()

    def test_remove_all_missing(self, workdir: Path) -> None:
        workdir.join("missing").remove_all()

    def test_rename_replaces(self, source_file: Path, workdir: Path) -> None:
        target = workdir.join("renamed.txt")
        target.write_file(b"old")
        content = source_file.read_file()

        source_file.rename(target)

        assert target.read_file() == content
        assert not source_file.is_exist()

    def test_link(self, source_file: Path, workdir: Path) -> None:
        hard = workdir.join("hard.txt")
        source_file.link(hard)

        assert hard.stat().st_ino == source_file.stat().st_ino

    @posix_only
    def test_chmod(self, source_file: Path) -> None:
        source_file.chmod(0o600)

        assert stat.S_IMODE(source_file.stat().st_mode) == 0o600

    def test_chown_delegates(self, source_file: Path) -> None:
        with patch("pathkit.path.os.chown") as chown:
            source_file.chown(1000, 100)

        chown.assert_called_once_with(str(source_file), 1000, 100)

    def test_chtimes(self, source_file: Path) -> None:
        moment = datetime(2020, 5, 17, 12, 30, tzinfo=timezone.utc)
        source_file.chtimes(moment, moment)

        assert source_file.stat().st_mtime == moment.timestamp()

    def test_truncate(self, source_file: Path) -> None:
        source_file.truncate(0)

        assert source_file.read_file() == b""

    def test_write_file_truncates(self, source_file: Path) -> None:
        source_file.write_file(b"short")

        assert source_file.read_file() == b"short"

    def test_create_truncates(self, source_file: Path) -> None:
        with source_file.create() as f:
            f.write(b"new")

        assert source_file.read_file() == b"new"

    def test_open_missing_raises(self, workdir: Path) -> None:
        with pytest.raises(FileNotFoundError):
            workdir.join("missing").open()

    def test_open_file_append(self, source_file: Path) -> None:
        with source_file.open_file(os.O_WRONLY | os.O_TRUNC) as f:
            f.write(b"a")
        with source_file.open_file(os.O_WRONLY | os.O_APPEND) as f:
            f.write(b"b")

        assert source_file.read_file() == b"ab"

    def test_mkdir_temp(self, workdir: Path) -> None:
        created = workdir.mkdir_temp("build-*-tmp")

        assert created.is_dir()
        assert created.dir() == workdir
        assert created.base().startswith("build-")
        assert created.base().endswith("-tmp")

    def test_create_temp(self, workdir: Path) -> None:
        with workdir.create_temp("data") as f:
            f.write(b"x")
            name = Path(f.name)

        assert name.dir() == workdir
        assert name.base().startswith("data")
        assert name.read_file() == b"x"

    def test_chdir(self, workdir: Path, monkeypatch: pytest.MonkeyPatch) -> None:
        monkeypatch.chdir(os.getcwd())
        workdir.chdir()

        assert Path(os.getcwd()).eval_symlinks() == workdir.eval_symlinks()


class TestCopy:
    """Tests for copy-to-file and copy-to-directory."""

    def test_copy_to_file(self, source_file: Path, workdir: Path) -> None:
        destination = workdir.join("out", "nested", "copy.txt")

        copied = source_file.copy_to_file(destination, 7)

        assert copied == source_file.stat().st_size
        assert destination.read_file() == source_file.read_file()

    def test_copy_to_file_truncates_existing(self, source_file: Path, workdir: Path) -> None:
        destination = workdir.join("copy.txt")
        destination.write_file(b"x" * 10_000)

        source_file.copy_to_file(destination, 64)

        assert destination.read_file() == source_file.read_file()

    def test_copy_to_directory(self, source_file: Path, workdir: Path) -> None:
        """Test the destination keeps the source file name."""
        result = source_file.copy_to_directory(workdir.join("dest"), buffer_size=8)

        assert result == CopyResult(destination=workdir.join("dest", "report.txt"), copied=900)
        assert result.destination.read_file() == source_file.read_file()

    @posix_only
    def test_copy_to_directory_destination_path(self) -> None:
        """Test /src/report.txt copied into /tmp/dest lands at /tmp/dest/report.txt."""
        with patch.object(Path, "copy_to_file", return_value=42) as copy:
            result = Path("/src/report.txt").copy_to_directory("/tmp/dest", 8)

        assert result == CopyResult(destination=Path("/tmp/dest/report.txt"), copied=42)
        copy.assert_called_once_with(Path("/tmp/dest/report.txt"), 8)

    def test_copy_to_directory_tmp_dest(self, workdir: Path) -> None:
        """Test copying /src/report.txt into /tmp/dest yields /tmp/dest/report.txt."""
        source = workdir.join("src", "report.txt")
        source.dir().mkdir_all()
        source.write_file(b"figures")
        destination_dir = workdir.join("tmp", "dest")

        result = source.copy_to_directory(destination_dir, 8)

        assert result.destination == destination_dir.join("report.txt")
        assert result.destination.dir() == destination_dir
        assert result.destination.read_file() == b"figures"

    def test_copy_missing_source(self, workdir: Path) -> None:
        with pytest.raises(FileNotFoundError):
            workdir.join("missing").copy_to_file(workdir.join("out.txt"), 8)

    def test_copy_zero_buffer_touches_nothing(self, source_file: Path, workdir: Path) -> None:
        """Test an invalid buffer fails before directories or files are created."""
        destination = workdir.join("new-dir", "copy.txt")

        with pytest.raises(InvalidBufferSizeError):
            source_file.copy_to_file(destination, 0)

        assert not destination.dir().is_exist()

    def test_copy_uses_configured_buffer(self, source_file: Path, workdir: Path) -> None:
        set_config(PathkitConfig(buffer_size=5))

        with patch("pathkit.path.buffered_copy", return_value=0) as copy:
            source_file.copy_to_file(workdir.join("copy.txt"))

        assert copy.call_args.args[2] == 5

    def test_copy_closes_handles_on_error(self, source_file: Path, workdir: Path) -> None:
        """Test both handles are closed when the transfer fails."""
        opened = []
        real_open = Path.open
        real_create = Path.create

        def tracking_open(self: Path):
            handle = real_open(self)
            opened.append(handle)
            return handle

        def tracking_create(self: Path):
            handle = real_create(self)
            opened.append(handle)
            return handle

        with (
            patch.object(Path, "open", tracking_open),
            patch.object(Path, "create", tracking_create),
            patch("pathkit.path.buffered_copy", side_effect=ShortWriteError(0, 8, 4)),
        ):
            with pytest.raises(ShortWriteError):
                source_file.copy_to_file(workdir.join("copy.txt"), 8)

        assert len(opened) == 2
        assert all(handle.closed for handle in opened)


class TestAppendReadWrite:
    """Tests for append, buffered read and buffered write."""

    def test_append_creates_and_appends(self, workdir: Path) -> None:
        log = workdir.join("app.log")

        assert log.append_file("first\n", 4) == 6
        assert log.append_file(b"second\n", 4) == 7
        assert log.read_file() == b"first\nsecond\n"

    def test_append_encodes_utf8(self, workdir: Path) -> None:
        log = workdir.join("unicode.log")

        assert log.append_file("hé") == 3

    @pytest.mark.parametrize("length", [0, 1, 10_000])
    def test_write_then_read_round_trip(self, workdir: Path, length: int) -> None:
        """Test buffered write then buffered read returns the same bytes."""
        payload = os.urandom(length)
        target = workdir.join("blob.bin")

        written = target.buffered_write_file(payload, 4096)
        data = target.buffered_read_file(4096)

        assert written == length
        assert data == payload

    def test_buffered_read_creates_missing_file(self, workdir: Path) -> None:
        target = workdir.join("absent.bin")

        assert target.buffered_read_file(16) == b""
        assert target.is_exist()

    def test_buffered_write_does_not_truncate(self, workdir: Path) -> None:
        """Test a shorter payload overwrites only the start of the file."""
        target = workdir.join("data.bin")
        target.write_file(b"0123456789")

        target.buffered_write_file(b"ab", 1)

        assert target.read_file() == b"ab23456789"

    @pytest.mark.parametrize("operation", ["append", "read", "write"])
    def test_files_opened_in_binary_mode(
        self, workdir: Path, operation: str, monkeypatch: pytest.MonkeyPatch
    ) -> None:
        """Test descriptors carry O_BINARY where the platform defines it."""
        binary_flag = 1 << 30
        seen_flags = []
        real_os_open = os.open

        def recording_open(path, flags, mode=0o777):
            seen_flags.append(flags)
            return real_os_open(path, flags & ~binary_flag, mode)

        monkeypatch.setattr(os, "O_BINARY", binary_flag, raising=False)
        monkeypatch.setattr(os, "open", recording_open)
        target = workdir.join("lines.bin")

        if operation == "append":
            target.append_file(b"a\n", 4)
        elif operation == "read":
            target.buffered_read_file(4)
        else:
            target.buffered_write_file(b"a\n", 4)

        assert len(seen_flags) == 1
        assert seen_flags[0] & binary_flag

    @pytest.mark.parametrize("operation", ["append", "read", "write"])
    def test_closes_handle_on_error(self, workdir: Path, operation: str) -> None:
        """Test the file handle is closed when the transfer fails."""
        opened = []
        real_open_file = Path.open_file

        def tracking_open_file(self: Path, flags: int, perm: int | None = None):
            handle = real_open_file(self, flags, perm)
            opened.append(handle)
            return handle

        target = workdir.join("partial.bin")
        with (
            patch.object(Path, "open_file", tracking_open_file),
            patch("pathkit.path.buffered_copy", side_effect=TransferError(3)),
        ):
            with pytest.raises(TransferError):
                if operation == "append":
                    target.append_file("payload", 4)
                elif operation == "read":
                    target.buffered_read_file(4)
                else:
                    target.buffered_write_file(b"payload", 4)

        assert len(opened) == 1
        assert opened[0].closed

    @pytest.mark.parametrize("operation", ["append", "read", "write"])
    def test_zero_buffer_creates_nothing(self, workdir: Path, operation: str) -> None:
        target = workdir.join("never.bin")

        with pytest.raises(InvalidBufferSizeError):
            if operation == "append":
                target.append_file("x", 0)
            elif operation == "read":
                target.buffered_read_file(0)
            else:
                target.buffered_write_file(b"x", 0)

        assert not target.is_exist()
