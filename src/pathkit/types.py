"""Shared data types for pathkit."""

from __future__ import annotations

from dataclasses import dataclass
from typing import TYPE_CHECKING

if TYPE_CHECKING:
    from pathkit.path import Path

__all__ = ["CopyResult"]


@dataclass(frozen=True)
class CopyResult:
    """Result of copying a file into a directory.

    Attributes:
        destination: Path of the file that was written.
        copied: Number of bytes written to it.
    """

    destination: Path
    copied: int

    def __post_init__(self) -> None:
        """Validate invariants."""
        if self.copied < 0:
            raise ValueError("copied cannot be negative")
        if not str(self.destination):
            raise ValueError("destination cannot be empty")
