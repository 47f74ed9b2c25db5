"""Buffered transfer of bytes between two streams."""

from __future__ import annotations

import logging

from pathkit.errors import InvalidBufferSizeError, ShortWriteError, TransferError
from pathkit.protocols import ByteReader, ByteWriter

logger = logging.getLogger(__name__)

__all__ = ["buffered_copy", "validate_buffer_size"]


def validate_buffer_size(buffer_size: int) -> int:
    """Check that a buffer size is a positive integer.

    Args:
        buffer_size: Requested buffer size in bytes.

    Returns:
        The buffer size, unchanged.

    Raises:
        InvalidBufferSizeError: If the size is not an int greater than zero.
    """
    if isinstance(buffer_size, bool) or not isinstance(buffer_size, int) or buffer_size <= 0:
        raise InvalidBufferSizeError(buffer_size)
    return buffer_size


def buffered_copy(reader: ByteReader, writer: ByteWriter, buffer_size: int) -> int:
    """Move every byte from reader to writer through a fixed-size buffer.

    The buffer is allocated once and reused for every read. The loop ends
    when the reader reports end of stream, at which point the writer is
    flushed (if it has a ``flush`` method).

    Args:
        reader: Source stream.
        writer: Destination stream.
        buffer_size: Size of the transfer buffer in bytes.

    Returns:
        Total number of bytes the writer accepted.

    Raises:
        InvalidBufferSizeError: If buffer_size is not positive. Neither
            stream is touched.
        ShortWriteError: If the writer accepted fewer bytes than offered.
        TransferError: If a read, write or the final flush failed, or the
            reader returned ``None`` (a non-blocking stream with no data). The
            original exception is chained and ``copied`` holds the bytes
            written before the failure.
    """
    validate_buffer_size(buffer_size)

    buffer = bytearray(buffer_size)
    view = memoryview(buffer)
    copied = 0

    while True:
        try:
            nread = reader.readinto(buffer)
        except OSError as e:
            logger.debug("Read failed after %d bytes: %s", copied, e)
            raise TransferError(copied, "read failed") from e

        if nread is None:
            logger.debug("Reader had no data ready after %d bytes", copied)
            raise TransferError(copied, "reader is non-blocking and had no data ready")

        if nread == 0:
            flush = getattr(writer, "flush", None)
            if flush is not None:
                try:
                    flush()
                except OSError as e:
                    logger.debug("Flush failed after %d bytes: %s", copied, e)
                    raise TransferError(copied, "flush failed") from e
            break

        try:
            nwritten = writer.write(view[:nread])
        except OSError as e:
            logger.debug("Write failed after %d bytes: %s", copied, e)
            raise TransferError(copied, "write failed") from e

        if nwritten != nread:
            logger.debug(
                "Short write after %d bytes: %s of %d accepted", copied, nwritten, nread
            )
            raise ShortWriteError(copied, nread, nwritten)

        copied += nwritten

    logger.debug("Transferred %d bytes with a %d byte buffer", copied, buffer_size)
    return copied
