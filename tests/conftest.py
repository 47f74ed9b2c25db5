"""Shared test fixtures."""

from __future__ import annotations

import io
from collections.abc import Iterator
from pathlib import Path as FilePath

import pytest

from pathkit.config import set_config
from pathkit.path import Path


@pytest.fixture(autouse=True)
def reset_config(monkeypatch: pytest.MonkeyPatch) -> Iterator[None]:
    """Give every test the default configuration."""
    monkeypatch.delenv("PATHKIT_DEFAULT_PERM", raising=False)
    monkeypatch.delenv("PATHKIT_BUFFER_SIZE", raising=False)
    set_config(None)
    yield
    set_config(None)


@pytest.fixture
def workdir(tmp_path: FilePath) -> Path:
    """Temporary directory as a pathkit Path."""
    return Path(str(tmp_path))


@pytest.fixture
def source_file(workdir: Path) -> Path:
    """Create a small text file to copy from."""
    source = workdir.join("src", "report.txt")
    source.dir().mkdir_all()
    source.write_file(b"quarterly numbers\n" * 50)
    return source


# ============================================================================
# Stream Doubles
# ============================================================================


class RecordingWriter:
    """Writer that keeps every chunk it is given."""

    def __init__(self) -> None:
        self.chunks: list[bytes] = []
        self.flushed = 0

    def write(self, data: bytes) -> int:
        self.chunks.append(bytes(data))
        return len(data)

    def flush(self) -> None:
        self.flushed += 1

    @property
    def data(self) -> bytes:
        return b"".join(self.chunks)


class ShortWriter(RecordingWriter):
    """Writer that accepts one byte less than offered once it has seen `after` writes."""

    def __init__(self, after: int = 0) -> None:
        super().__init__()
        self.after = after

    def write(self, data: bytes) -> int:
        if len(self.chunks) < self.after:
            return super().write(data)
        self.chunks.append(bytes(data[:-1]))
        return len(data) - 1


class FailingWriter(RecordingWriter):
    """Writer that raises once it has seen `after` successful writes."""

    def __init__(self, after: int = 0, error: OSError | None = None) -> None:
        super().__init__()
        self.after = after
        self.error = error or OSError(28, "No space left on device")

    def write(self, data: bytes) -> int:
        if len(self.chunks) >= self.after:
            raise self.error
        return super().write(data)


class FailingReader:
    """Reader that yields `payload` and then raises."""

    def __init__(self, payload: bytes, error: OSError | None = None) -> None:
        self.source = io.BytesIO(payload)
        self.error = error or OSError(5, "Input/output error")

    def readinto(self, buffer: bytearray) -> int:
        n = self.source.readinto(buffer)
        if not n:
            raise self.error
        return n


@pytest.fixture
def recording_writer() -> RecordingWriter:
    return RecordingWriter()
