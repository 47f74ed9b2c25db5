"""Immutable filesystem path value.

A ``Path`` wraps a single string. Construction performs no normalization;
``clean()``, ``abs()`` and ``eval_symlinks()`` do that on request. Path
algebra methods are pure. Query and mutation methods hand the string to the
matching OS call and let its errors propagate unchanged; nothing about the
filesystem is cached on the value.
"""

from __future__ import annotations

import io
import logging
import os
import shutil
import stat as stat_module
import tempfile
from collections.abc import Callable, Iterator
from dataclasses import dataclass
from datetime import datetime
from typing import BinaryIO

from pathkit import algebra, matching
from pathkit.config import get_config
from pathkit.transfer import buffered_copy, validate_buffer_size
from pathkit.types import CopyResult

logger = logging.getLogger(__name__)

__all__ = ["Path", "split_list"]


def _raise(error: OSError) -> None:
    raise error


def _split_temp_pattern(pattern: str) -> tuple[str, str]:
    """Split a temp name pattern at its last '*' into prefix and suffix."""
    prefix, star, suffix = pattern.rpartition("*")
    if not star:
        return pattern, ""
    return prefix, suffix


def _file_mode(flags: int) -> str:
    """Derive the ``open()`` mode matching a set of ``os.open`` flags."""
    access = flags & (os.O_RDONLY | os.O_WRONLY | os.O_RDWR)
    if access == os.O_WRONLY:
        return "ab" if flags & os.O_APPEND else "wb"
    if access == os.O_RDWR:
        return "a+b" if flags & os.O_APPEND else "r+b"
    return "rb"


def _timestamp_ns(value: datetime | float) -> int:
    if isinstance(value, datetime):
        value = value.timestamp()
    return round(value * 1_000_000) * 1000


@dataclass(frozen=True, order=True)
class Path:
    """Immutable, string-backed identifier of a filesystem location."""

    value: str = ""

    def __post_init__(self) -> None:
        value = self.value
        if not isinstance(value, str):
            value = os.fspath(value)
            if not isinstance(value, str):
                raise TypeError(f"Path requires a str value, not {type(value).__name__}")
            object.__setattr__(self, "value", value)

    def __str__(self) -> str:
        return self.value

    def __repr__(self) -> str:
        return f"Path({self.value!r})"

    def __fspath__(self) -> str:
        return self.value

    def __truediv__(self, element: str | os.PathLike[str]) -> Path:
        return self.join(element)

    # ------------------------------------------------------------------
    # Path algebra

    def abs(self) -> Path:
        """Return an absolute version of the path, based on the working directory."""
        return Path(os.path.abspath(self.value))

    def base(self) -> str:
        """Return the last element of the path (file name with extension)."""
        return algebra.base(self.value)

    def clean(self) -> Path:
        """Return the shortest path equivalent to this one."""
        return Path(algebra.clean(self.value))

    def dir(self) -> Path:
        """Return the directory containing the last element."""
        return Path(algebra.dir(self.value))

    def ext(self) -> str:
        """Return the extension of the last element, including the dot."""
        return algebra.ext(self.value)

    def from_slash(self) -> Path:
        return Path(algebra.from_slash(self.value))

    def to_slash(self) -> Path:
        return Path(algebra.to_slash(self.value))

    def volume_name(self) -> Path:
        return Path(algebra.volume_name(self.value))

    def is_abs(self) -> bool:
        return algebra.is_abs(self.value)

    def join(self, *elements: str | os.PathLike[str]) -> Path:
        """Join elements onto the path and clean the result."""
        return Path(algebra.join(self.value, *(os.fspath(e) for e in elements)))

    def split(self) -> tuple[Path, str]:
        """Split the path into its directory (with trailing separator) and file name."""
        directory, filename = algebra.split(self.value)
        return Path(directory), filename

    def split_all(self) -> tuple[Path, str, str]:
        """Split the path into directory, file name without extension, and extension."""
        directory, stem, extension = algebra.split_all(self.value)
        return Path(directory), stem, extension

    def add_prefix(self, prefix: str) -> Path:
        """Return the path with prefix inserted before the file name.

        ``Path("/a/b/file.txt").add_prefix("tmp_")`` is ``/a/b/tmp_file.txt``.
        """
        directory, filename = self.split()
        return directory.join(prefix + filename)

    def add_postfix(self, postfix: str) -> Path:
        """Return the path with postfix inserted between file stem and extension.

        ``Path("/a/b/file.txt").add_postfix(".bak")`` is ``/a/b/file.bak.txt``.
        """
        directory, stem, extension = self.split_all()
        return directory.join(stem + postfix + extension)

    def rel(self, target: str | os.PathLike[str]) -> Path:
        """Return the relative path leading from this path to target.

        Raises:
            NoRelativePathError: If no such relative path exists.
        """
        return Path(algebra.rel(self.value, os.fspath(target)))

    def match(self, pattern: str | os.PathLike[str]) -> bool:
        """Check if the whole path matches a shell pattern.

        Raises:
            MalformedPatternError: If the pattern is malformed.
        """
        return matching.match(os.fspath(pattern), self.value)

    # ------------------------------------------------------------------
    # Queries

    def eval_symlinks(self) -> Path:
        """Return the path with every symbolic link resolved.

        Raises:
            OSError: If the path (or a link target) does not exist.
        """
        return Path(os.path.realpath(self.value, strict=True))

    def stat(self) -> os.stat_result:
        return os.stat(self.value)

    def lstat(self) -> os.stat_result:
        return os.lstat(self.value)

    def is_exist(self) -> bool:
        """Check if something exists at the path.

        Only a missing path (or a missing directory component) reports
        False. Any other failure, such as permission denied, is raised
        because existence cannot be decided.
        """
        try:
            os.stat(self.value)
        except (FileNotFoundError, NotADirectoryError):
            return False
        return True

    def is_dir(self) -> bool:
        """Check if the path is an existing directory.

        Raises:
            OSError: For failures other than the path not existing.
        """
        try:
            st = os.stat(self.value)
        except (FileNotFoundError, NotADirectoryError):
            return False
        return stat_module.S_ISDIR(st.st_mode)

    def read_link(self) -> Path:
        return Path(os.readlink(self.value))

    def read_dir(self) -> list[os.DirEntry[str]]:
        """Return the directory entries sorted by name."""
        with os.scandir(self.value) as entries:
            return sorted(entries, key=lambda entry: entry.name)

    def read_file(self) -> bytes:
        with open(self.value, "rb") as f:
            return f.read()

    def glob(self, *patterns: str) -> list[Path]:
        """Return the paths matching the patterns joined onto this path.

        Raises:
            MalformedPatternError: If the joined pattern is malformed.
        """
        return [Path(found) for found in matching.glob(self.join(*patterns).value)]

    def list(self) -> list[Path]:
        """Return the entries matched by ``<path>/*/**``.

        ``**`` is not recursive, so this is every entry exactly one level
        below each immediate subdirectory of the path.
        """
        return self.glob("*", "**")

    def walk(
        self, on_error: Callable[[OSError], object] | None = None
    ) -> Iterator[tuple[Path, list[str], list[str]]]:
        """Walk the tree rooted at the path, top down.

        Args:
            on_error: Called with each OSError; by default errors are raised.

        Yields:
            Tuples of (directory, subdirectory names, file names).
        """
        for dirpath, dirnames, filenames in os.walk(self.value, onerror=on_error or _raise):
            yield Path(dirpath), dirnames, filenames

    def walk_dir(self) -> Iterator[Path]:
        """Yield the path and everything below it in lexical order.

        Symbolic links to directories are reported but not followed.
        """
        st = os.lstat(self.value)
        yield self
        if stat_module.S_ISDIR(st.st_mode):
            yield from self._walk_entries()

    def _walk_entries(self) -> Iterator[Path]:
        for entry in self.read_dir():
            child = self.join(entry.name)
            yield child
            if entry.is_dir(follow_symlinks=False):
                yield from child._walk_entries()

    # ------------------------------------------------------------------
    # Mutations

    def open(self) -> BinaryIO:
        """Open the file for reading."""
        return open(self.value, "rb")

    def open_file(self, flags: int, perm: int | None = None) -> BinaryIO:
        """Open the file with ``os.open`` flags (e.g. ``os.O_WRONLY | os.O_CREAT``).

        Args:
            flags: Flags passed to ``os.open``.
            perm: Permission bits used if the file is created.

        Returns:
            Binary file object owning the descriptor.
        """
        if perm is None:
            perm = get_config().default_perm
        # descriptors default to text mode on Windows
        flags |= getattr(os, "O_BINARY", 0)
        fd = os.open(self.value, flags, perm)
        try:
            return os.fdopen(fd, _file_mode(flags))
        except BaseException:
            os.close(fd)
            raise

    def create(self) -> BinaryIO:
        """Create or truncate the file and open it for reading and writing."""
        return open(self.value, "w+b")

    def create_temp(self, pattern: str = "") -> BinaryIO:
        """Create a new temporary file in the directory.

        The last '*' in pattern is replaced by a random string; without one
        the random string is appended. The returned file is not deleted on
        close; its path is ``file.name``.
        """
        prefix, suffix = _split_temp_pattern(pattern)
        return tempfile.NamedTemporaryFile(
            mode="w+b",
            prefix=prefix,
            suffix=suffix,
            dir=self.value or None,
            delete=False,
        )

    def mkdir(self, perm: int | None = None) -> None:
        if perm is None:
            perm = get_config().default_perm
        os.mkdir(self.value, perm)

    def mkdir_all(self, perm: int | None = None) -> None:
        """Create the directory and any missing parents.

        Succeeds if the directory already exists.
        """
        if perm is None:
            perm = get_config().default_perm
        os.makedirs(self.value, perm, exist_ok=True)

    def mkdir_temp(self, pattern: str = "") -> Path:
        """Create a new temporary directory in the directory and return its path."""
        prefix, suffix = _split_temp_pattern(pattern)
        return Path(tempfile.mkdtemp(suffix=suffix, prefix=prefix, dir=self.value or None))

    def remove(self) -> None:
        """Remove the file or empty directory."""
        try:
            os.remove(self.value)
        except IsADirectoryError:
            os.rmdir(self.value)
        except PermissionError:
            # unlink() on a directory reports EPERM on some platforms
            if not os.path.isdir(self.value) or os.path.islink(self.value):
                raise
            os.rmdir(self.value)

    def remove_all(self) -> None:
        """Remove the path and everything it contains.

        Succeeds if the path does not exist.
        """
        try:
            st = os.lstat(self.value)
        except FileNotFoundError:
            return
        if stat_module.S_ISDIR(st.st_mode):
            shutil.rmtree(self.value)
        else:
            os.remove(self.value)

    def rename(self, new_path: str | os.PathLike[str]) -> None:
        """Rename the path, replacing new_path if it exists."""
        os.replace(self.value, os.fspath(new_path))

    def symlink(self, new_name: str | os.PathLike[str]) -> None:
        """Create new_name as a symbolic link to the path."""
        os.symlink(self.value, os.fspath(new_name))

    def link(self, new_name: str | os.PathLike[str]) -> None:
        """Create new_name as a hard link to the path."""
        os.link(self.value, os.fspath(new_name))

    def chdir(self) -> None:
        """Make the path the working directory.

        Snapshots taken with ``ProcessContext.capture()`` are not updated.
        """
        os.chdir(self.value)

    def chmod(self, mode: int) -> None:
        os.chmod(self.value, mode)

    def chown(self, uid: int, gid: int) -> None:
        os.chown(self.value, uid, gid)

    def lchown(self, uid: int, gid: int) -> None:
        os.lchown(self.value, uid, gid)

    def chtimes(self, atime: datetime | float, mtime: datetime | float) -> None:
        """Set the access and modification times."""
        os.utime(self.value, ns=(_timestamp_ns(atime), _timestamp_ns(mtime)))

    def truncate(self, size: int) -> None:
        os.truncate(self.value, size)

    def write_file(self, data: bytes, perm: int = 0o666) -> None:
        """Write data to the file, creating it with perm or truncating it."""
        with self.open_file(os.O_WRONLY | os.O_CREAT | os.O_TRUNC, perm) as f:
            f.write(data)

    # ------------------------------------------------------------------
    # Buffered transfers

    def copy_to_file(
        self, destination: str | os.PathLike[str], buffer_size: int | None = None
    ) -> int:
        """Copy the file's contents to destination through a fixed-size buffer.

        Missing parent directories of destination are created and an
        existing destination is truncated.

        Args:
            destination: Path of the file to write.
            buffer_size: Transfer buffer size in bytes. Defaults to the
                configured buffer size.

        Returns:
            Number of bytes copied.

        Raises:
            InvalidBufferSizeError: If buffer_size is not positive. Nothing
                is created or opened.
            TransferError: If reading or writing failed mid-copy.
            OSError: If a directory or either file could not be opened.
        """
        size = self._buffer_size(buffer_size)
        destination = Path(destination)

        destination.dir().mkdir_all()
        logger.debug("Copying %s to %s", self, destination)

        with self.open() as source, destination.create() as target:
            return buffered_copy(source, target, size)

    def copy_to_directory(
        self, directory: str | os.PathLike[str], buffer_size: int | None = None
    ) -> CopyResult:
        """Copy the file into directory, keeping its file name.

        Returns:
            CopyResult with the destination path and bytes copied.
        """
        destination = Path(directory).join(self.base())
        copied = self.copy_to_file(destination, buffer_size)
        return CopyResult(destination=destination, copied=copied)

    def append_file(self, data: str | bytes, buffer_size: int | None = None) -> int:
        """Append data to the end of the file, creating it if needed.

        Strings are encoded as UTF-8.

        Returns:
            Number of bytes appended.
        """
        size = self._buffer_size(buffer_size)
        payload = data.encode("utf-8") if isinstance(data, str) else data
        reader = io.BytesIO(payload)

        with self.open_file(os.O_WRONLY | os.O_CREAT | os.O_APPEND) as f:
            return buffered_copy(reader, f, size)

    def buffered_read_file(self, buffer_size: int | None = None) -> bytes:
        """Read the whole file through a fixed-size buffer.

        A missing file is created and reads as empty.

        Returns:
            The file contents; its length is the number of bytes read.
        """
        size = self._buffer_size(buffer_size)
        writer = io.BytesIO()

        with self.open_file(os.O_RDONLY | os.O_CREAT) as f:
            buffered_copy(f, writer, size)
        return writer.getvalue()

    def buffered_write_file(self, data: bytes, buffer_size: int | None = None) -> int:
        """Write data to the start of the file through a fixed-size buffer.

        The file is created if needed but not truncated: bytes of an
        existing file beyond ``len(data)`` are kept.

        Returns:
            Number of bytes written.
        """
        size = self._buffer_size(buffer_size)
        reader = io.BytesIO(data)

        with self.open_file(os.O_WRONLY | os.O_CREAT) as f:
            return buffered_copy(reader, f, size)

    @staticmethod
    def _buffer_size(buffer_size: int | None) -> int:
        if buffer_size is None:
            return get_config().buffer_size
        return validate_buffer_size(buffer_size)


def split_list(value: str) -> list[Path]:
    """Split a list of paths joined by ``os.pathsep`` (as in $PATH)."""
    return [Path(path) for path in algebra.split_list(value)]
