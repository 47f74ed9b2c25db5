"""Process context and environment discovery.

Nothing here is cached at import time. ``ProcessContext`` is an explicit
snapshot: it is computed when ``capture()`` is called and goes stale if the
process later changes its working directory (for example through
``Path.chdir``). Call ``refresh()`` to take a new snapshot.
"""

from __future__ import annotations

import os
import sys
import tempfile
from collections.abc import Mapping
from dataclasses import dataclass

from pathkit.errors import EnvironmentLookupError
from pathkit.path import Path

__all__ = [
    "ProcessContext",
    "current_executable_path",
    "current_working_directory",
    "temp_dir",
    "user_cache_dir",
    "user_config_dir",
    "user_home_dir",
]


def current_working_directory() -> Path:
    """Return the current working directory with symlinks resolved.

    Raises:
        OSError: If the working directory cannot be determined.
    """
    return Path(os.getcwd()).eval_symlinks()


def current_executable_path() -> Path:
    """Return the path of the running interpreter with symlinks resolved.

    Raises:
        FileNotFoundError: If the interpreter path is unknown.
    """
    if not sys.executable:
        raise FileNotFoundError("Executable path is not available")
    return Path(sys.executable).eval_symlinks()


@dataclass(frozen=True)
class ProcessContext:
    """Snapshot of process-wide locations.

    Attributes:
        working_directory: Working directory when the snapshot was taken.
        executable: Path of the running interpreter.
    """

    working_directory: Path
    executable: Path

    @classmethod
    def capture(cls) -> ProcessContext:
        """Take a snapshot of the current process.

        Returns:
            ProcessContext for the process as it is now.
        """
        return cls(
            working_directory=current_working_directory(),
            executable=current_executable_path(),
        )

    def refresh(self) -> ProcessContext:
        """Take a new snapshot; this one is left unchanged."""
        return self.capture()

    def is_stale(self) -> bool:
        """Check if the working directory changed since the snapshot."""
        return current_working_directory() != self.working_directory


def temp_dir() -> Path:
    """Return the default directory for temporary files."""
    return Path(tempfile.gettempdir())


def _lookup(environ: Mapping[str, str], variable: str) -> str:
    value = environ.get(variable, "")
    if not value:
        raise EnvironmentLookupError(variable)
    return value


def _xdg_dir(environ: Mapping[str, str], variable: str, fallback: str) -> Path:
    value = environ.get(variable, "")
    if value:
        if not os.path.isabs(value):
            raise EnvironmentLookupError(variable, f"Path in ${variable} is relative")
        return Path(value)
    return user_home_dir(environ).join(fallback)


def user_home_dir(environ: Mapping[str, str] | None = None) -> Path:
    """Return the home directory of the current user.

    Raises:
        EnvironmentLookupError: If $HOME (%USERPROFILE% on Windows) is unset.
    """
    env = os.environ if environ is None else environ
    if sys.platform == "win32":
        return Path(_lookup(env, "USERPROFILE"))
    return Path(_lookup(env, "HOME"))


def user_cache_dir(environ: Mapping[str, str] | None = None) -> Path:
    """Return the root directory for user-specific cached data.

    $XDG_CACHE_HOME or ~/.cache on Unix, ~/Library/Caches on macOS and
    %LocalAppData% on Windows.

    Raises:
        EnvironmentLookupError: If the location cannot be derived.
    """
    env = os.environ if environ is None else environ
    if sys.platform == "win32":
        return Path(_lookup(env, "LocalAppData"))
    if sys.platform == "darwin":
        return user_home_dir(env).join("Library", "Caches")
    return _xdg_dir(env, "XDG_CACHE_HOME", ".cache")


def user_config_dir(environ: Mapping[str, str] | None = None) -> Path:
    """Return the root directory for user-specific configuration data.

    $XDG_CONFIG_HOME or ~/.config on Unix, ~/Library/Application Support on
    macOS and %AppData% on Windows.

    Raises:
        EnvironmentLookupError: If the location cannot be derived.
    """
    env = os.environ if environ is None else environ
    if sys.platform == "win32":
        return Path(_lookup(env, "AppData"))
    if sys.platform == "darwin":
        return user_home_dir(env).join("Library", "Application Support")
    return _xdg_dir(env, "XDG_CONFIG_HOME", ".config")
