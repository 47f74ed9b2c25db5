"""Exception types raised by pathkit.

OS failures (missing files, permission problems) are never wrapped: they
surface as the ``OSError`` subclass raised by the operating system. The
types here cover the conditions pathkit detects itself.
"""

from __future__ import annotations

__all__ = [
    "EnvironmentLookupError",
    "InvalidBufferSizeError",
    "MalformedPatternError",
    "NoRelativePathError",
    "PathkitError",
    "ShortWriteError",
    "TransferError",
]


class PathkitError(Exception):
    """Base class for errors detected by pathkit."""

    pass


class NoRelativePathError(PathkitError, ValueError):
    """No relative path leads from a base path to a target path."""

    def __init__(self, base: str, target: str) -> None:
        self.base = base
        self.target = target
        super().__init__(f"Can't make {target!r} relative to {base!r}")


class MalformedPatternError(PathkitError, ValueError):
    """A glob pattern could not be compiled."""

    def __init__(self, pattern: str, reason: str = "syntax error in pattern") -> None:
        self.pattern = pattern
        super().__init__(f"{reason}: {pattern!r}")


class InvalidBufferSizeError(PathkitError, ValueError):
    """A transfer was requested with a buffer size that is not a positive integer."""

    def __init__(self, buffer_size: object) -> None:
        self.buffer_size = buffer_size
        super().__init__(f"Invalid buffer size: {buffer_size!r} (must be a positive integer)")


class EnvironmentLookupError(PathkitError, LookupError):
    """A per-user directory could not be derived from the environment."""

    def __init__(self, variable: str, message: str | None = None) -> None:
        self.variable = variable
        super().__init__(message or f"${variable} is not defined")


class TransferError(PathkitError, OSError):
    """A buffered transfer stopped before the source was exhausted.

    Attributes:
        copied: Bytes accepted by the destination before the failure.

    The underlying read or write failure, when there is one, is chained
    as ``__cause__``.
    """

    def __init__(self, copied: int, message: str = "transfer failed") -> None:
        self.copied = copied
        super().__init__(f"{message} after {copied} bytes")


class ShortWriteError(TransferError):
    """The destination accepted fewer bytes than it was offered."""

    def __init__(self, copied: int, requested: int = 0, written: int | None = 0) -> None:
        self.requested = requested
        self.written = written
        super().__init__(
            copied,
            f"short write ({written} of {requested} bytes accepted)",
        )
