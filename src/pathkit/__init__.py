"""Immutable filesystem path values with buffered file transfers."""

__version__ = "0.1.0"

from pathkit.config import DEFAULT_PERM, PathkitConfig, get_config, set_config
from pathkit.context import (
    ProcessContext,
    current_executable_path,
    current_working_directory,
    temp_dir,
    user_cache_dir,
    user_config_dir,
    user_home_dir,
)
from pathkit.errors import (
    EnvironmentLookupError,
    InvalidBufferSizeError,
    MalformedPatternError,
    NoRelativePathError,
    PathkitError,
    ShortWriteError,
    TransferError,
)
from pathkit.path import Path, split_list
from pathkit.protocols import ByteReader, ByteWriter
from pathkit.transfer import buffered_copy
from pathkit.types import CopyResult

__all__ = [
    "__version__",
    "DEFAULT_PERM",
    "ByteReader",
    "ByteWriter",
    "CopyResult",
    "EnvironmentLookupError",
    "InvalidBufferSizeError",
    "MalformedPatternError",
    "NoRelativePathError",
    "Path",
    "PathkitConfig",
    "PathkitError",
    "ProcessContext",
    "ShortWriteError",
    "TransferError",
    "buffered_copy",
    "current_executable_path",
    "current_working_directory",
    "get_config",
    "set_config",
    "split_list",
    "temp_dir",
    "user_cache_dir",
    "user_config_dir",
    "user_home_dir",
]
