"""Library configuration: default permissions and transfer buffer size."""

from __future__ import annotations

import json
import os
from collections.abc import Mapping
from pathlib import Path as FilePath

from pydantic import BaseModel, ConfigDict, Field, field_validator

__all__ = [
    "DEFAULT_BUFFER_SIZE",
    "DEFAULT_PERM",
    "PathkitConfig",
    "get_config",
    "set_config",
]

# Full control for owner, read and execute for group and others
DEFAULT_PERM = 0o755

DEFAULT_BUFFER_SIZE = 64 * 1024

ENV_DEFAULT_PERM = "PATHKIT_DEFAULT_PERM"
ENV_BUFFER_SIZE = "PATHKIT_BUFFER_SIZE"


class PathkitConfig(BaseModel):
    """Defaults applied when an operation is not given explicit values."""

    model_config = ConfigDict(populate_by_name=True, frozen=True)

    default_perm: int = Field(default=DEFAULT_PERM, ge=0, le=0o7777, alias="defaultPerm")
    buffer_size: int = Field(default=DEFAULT_BUFFER_SIZE, gt=0, alias="bufferSize")

    @field_validator("default_perm", mode="before")
    @classmethod
    def _parse_octal(cls, value: object) -> object:
        """Accept permissions written as octal strings ("755", "0o755")."""
        if isinstance(value, str):
            text = value.strip().lower().removeprefix("0o")
            try:
                return int(text, 8)
            except ValueError:
                raise ValueError(f"Invalid octal permission: {value!r}") from None
        return value

    @classmethod
    def from_file(cls, path: str | os.PathLike[str]) -> PathkitConfig:
        """Load configuration from a JSON file.

        Args:
            path: Path to the JSON file.

        Returns:
            Parsed PathkitConfig.

        Raises:
            FileNotFoundError: If the file doesn't exist.
            ValueError: If the JSON or its values are invalid.
        """
        config_path = FilePath(path)
        if not config_path.exists():
            raise FileNotFoundError(f"Configuration file not found: {config_path}")

        data = json.loads(config_path.read_text())
        return cls.model_validate(data)

    @classmethod
    def from_env(cls, environ: Mapping[str, str] | None = None) -> PathkitConfig:
        """Build configuration from PATHKIT_* environment variables.

        Args:
            environ: Mapping to read instead of ``os.environ``.

        Returns:
            PathkitConfig with defaults for unset variables.
        """
        env = os.environ if environ is None else environ
        data: dict[str, str] = {}
        if env.get(ENV_DEFAULT_PERM):
            data["default_perm"] = env[ENV_DEFAULT_PERM]
        if env.get(ENV_BUFFER_SIZE):
            data["buffer_size"] = env[ENV_BUFFER_SIZE]
        return cls.model_validate(data)


_active: PathkitConfig | None = None


def get_config() -> PathkitConfig:
    """Return the active configuration, reading the environment on first use."""
    global _active
    if _active is None:
        _active = PathkitConfig.from_env()
    return _active


def set_config(config: PathkitConfig | None) -> None:
    """Replace the active configuration.

    Passing None makes the next ``get_config()`` read the environment again.
    """
    global _active
    _active = config
