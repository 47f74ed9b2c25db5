"""Protocol definitions for the byte streams a transfer moves data between.

Binary file objects returned by ``open()`` and in-memory ``io.BytesIO``
buffers satisfy these protocols structurally (duck typing).
"""

from __future__ import annotations

from typing import Protocol, runtime_checkable


@runtime_checkable
class ByteReader(Protocol):
    """Protocol for a blocking source of bytes."""

    def readinto(self, buffer: bytearray | memoryview, /) -> int | None:
        """Read bytes into a pre-allocated buffer.

        Args:
            buffer: Writable buffer to fill.

        Returns:
            Number of bytes placed at the start of the buffer. Zero signals
            end of stream. ``None`` means a non-blocking stream had no data
            ready; transfers reject it rather than stopping early.

        Raises:
            OSError: If the underlying read fails.
        """
        ...


@runtime_checkable
class ByteWriter(Protocol):
    """Protocol for a blocking destination of bytes.

    Writers may also provide ``flush()``; it is called once the source is
    exhausted.
    """

    def write(self, data: bytes | memoryview, /) -> int | None:
        """Write bytes to the destination.

        Args:
            data: Bytes to write.

        Returns:
            Number of bytes the destination accepted.

        Raises:
            OSError: If the underlying write fails.
        """
        ...
