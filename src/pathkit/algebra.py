"""Pure path string algebra.

These functions only manipulate strings. They never touch the filesystem
and use the separator rules of the host operating system.
"""

from __future__ import annotations

import os

from pathkit.errors import NoRelativePathError

__all__ = [
    "base",
    "clean",
    "dir",
    "ext",
    "from_slash",
    "is_abs",
    "join",
    "rel",
    "split",
    "split_all",
    "split_list",
    "to_slash",
    "volume_name",
]

SEPARATORS = os.sep + (os.altsep or "")


def _last_separator(path: str) -> int:
    return max(path.rfind(sep) for sep in SEPARATORS)


def _same(a: str, b: str) -> bool:
    return os.path.normcase(a) == os.path.normcase(b)


def volume_name(path: str) -> str:
    """Return the leading volume name (drive or UNC share), empty on POSIX."""
    return os.path.splitdrive(path)[0]


def is_abs(path: str) -> bool:
    """Check if a path is absolute."""
    return os.path.isabs(path)


def clean(path: str) -> str:
    """Return the shortest path equivalent to path.

    The empty path cleans to ".".
    """
    if not path:
        return "."
    return os.path.normpath(path)


def join(*elements: str) -> str:
    """Join the non-empty elements with the separator and clean the result.

    Unlike ``os.path.join`` a later absolute element does not discard the
    elements before it. Returns "" if every element is empty.
    """
    parts = [element for element in elements if element]
    if not parts:
        return ""
    return clean(os.sep.join(parts))


def split(path: str) -> tuple[str, str]:
    """Split path immediately after its final separator.

    The directory keeps its trailing separator so that ``dir + file == path``.
    """
    vol = volume_name(path)
    i = max(_last_separator(path), len(vol) - 1)
    return path[: i + 1], path[i + 1 :]


def split_all(path: str) -> tuple[str, str, str]:
    """Split path into directory, file stem and extension."""
    directory, filename = split(path)
    extension = ext(filename)
    return directory, filename[: len(filename) - len(extension)], extension


def dir(path: str) -> str:  # noqa: A001
    """Return all but the last element of path, cleaned.

    A path without separators gives ".".
    """
    vol = volume_name(path)
    i = _last_separator(path)
    directory = clean(path[len(vol) : i + 1]) if i >= len(vol) else "."
    if directory == "." and len(vol) > 2:
        return vol
    return vol + directory


def base(path: str) -> str:
    """Return the last element of path.

    Trailing separators are removed first. The empty path gives "." and a
    path made only of separators gives a single separator.
    """
    if not path:
        return "."
    path = path.rstrip(SEPARATORS)
    path = path[len(volume_name(path)) :]
    i = _last_separator(path)
    if i >= 0:
        path = path[i + 1 :]
    return path or os.sep


def ext(path: str) -> str:
    """Return the suffix of the last element starting at its final dot."""
    last = path[_last_separator(path) + 1 :]
    i = last.rfind(".")
    return last[i:] if i >= 0 else ""


def to_slash(path: str) -> str:
    """Replace each separator with a slash."""
    if os.sep == "/":
        return path
    return path.replace(os.sep, "/")


def from_slash(path: str) -> str:
    """Replace each slash with the separator."""
    if os.sep == "/":
        return path
    return path.replace("/", os.sep)


def split_list(value: str) -> list[str]:
    """Split a list of paths joined by ``os.pathsep``.

    The empty string gives an empty list.
    """
    if not value:
        return []
    return value.split(os.pathsep)


def rel(base_path: str, target_path: str) -> str:
    """Return a relative path that leads from base_path to target_path.

    Joining the result onto base_path yields a path equivalent to
    target_path.

    Raises:
        NoRelativePathError: If only one of the paths is rooted, if they are
            on different volumes, or if reaching the target would require
            climbing out of a ".." prefix of the base.
    """
    base_vol = volume_name(base_path)
    target_vol = volume_name(target_path)
    base_clean = clean(base_path)
    target_clean = clean(target_path)
    if _same(target_clean, base_clean):
        return "."

    base_rest = base_clean[len(base_vol) :]
    target_rest = target_clean[len(target_vol) :]
    if base_rest == ".":
        base_rest = ""
    elif not base_rest and len(base_vol) > 2:
        # UNC share root
        base_rest = os.sep

    base_rooted = base_rest.startswith(os.sep)
    target_rooted = target_rest.startswith(os.sep)
    if base_rooted != target_rooted or not _same(base_vol, target_vol):
        raise NoRelativePathError(base_path, target_path)

    base_parts = [part for part in base_rest.split(os.sep) if part and part != "."]
    target_parts = [part for part in target_rest.split(os.sep) if part and part != "."]

    common = 0
    while (
        common < len(base_parts)
        and common < len(target_parts)
        and _same(base_parts[common], target_parts[common])
    ):
        common += 1

    if common < len(base_parts) and base_parts[common] == "..":
        raise NoRelativePathError(base_path, target_path)

    parts = [".."] * (len(base_parts) - common) + target_parts[common:]
    return os.sep.join(parts) or "."
