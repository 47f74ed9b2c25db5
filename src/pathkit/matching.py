"""Shell pattern matching and filesystem globbing.

Pattern syntax:

    *        any sequence of non-separator characters
    ?        any single non-separator character
    [...]    character class; ranges as ``a-z``, negated with a leading ``^``
    \\c      the character c, literally (not on Windows, where ``\\`` is the
             path separator)

``**`` has no special meaning: it matches exactly like ``*`` and never
crosses a separator.
"""

from __future__ import annotations

import functools
import os
import re

from pathkit import algebra
from pathkit.errors import MalformedPatternError

__all__ = ["glob", "has_meta", "match", "translate"]

ESCAPES = os.sep != "\\"
META_CHARACTERS = "\\*?[" if ESCAPES else "*?["

_NOT_SEPARATOR = f"[^{re.escape(os.sep)}]"


def has_meta(path: str) -> bool:
    """Check if path contains any pattern meta characters."""
    return any(ch in path for ch in META_CHARACTERS)


def _class_character(pattern: str, i: int) -> tuple[str, int]:
    """Read one (possibly escaped) character of a character class."""
    if i >= len(pattern) or pattern[i] in "-]":
        raise MalformedPatternError(pattern)
    if pattern[i] == "\\" and ESCAPES:
        i += 1
        if i >= len(pattern):
            raise MalformedPatternError(pattern)
    i += 1
    if i >= len(pattern):
        # Every class character must be followed by more of the class.
        raise MalformedPatternError(pattern, "unterminated character class")
    return pattern[i - 1], i


def _translate_class(pattern: str, i: int) -> tuple[str, int]:
    """Translate the character class whose body starts at index i."""
    negated = False
    if i < len(pattern) and pattern[i] == "^":
        negated = True
        i += 1

    ranges: list[str] = []
    count = 0
    while True:
        if i < len(pattern) and pattern[i] == "]" and count > 0:
            i += 1
            break
        lo, i = _class_character(pattern, i)
        hi = lo
        if pattern[i] == "-":
            hi, i = _class_character(pattern, i + 1)
        count += 1
        # Reversed ranges are legal but match nothing.
        if lo == hi:
            ranges.append(re.escape(lo))
        elif lo < hi:
            ranges.append(f"{re.escape(lo)}-{re.escape(hi)}")

    if not ranges:
        return (r"[\s\S]" if negated else "(?!)"), i
    return f"[{'^' if negated else ''}{''.join(ranges)}]", i


def translate(pattern: str) -> str:
    """Translate a shell pattern into a regular expression.

    Raises:
        MalformedPatternError: If the pattern is malformed anywhere.
    """
    out: list[str] = []
    i = 0
    while i < len(pattern):
        ch = pattern[i]
        if ch == "*":
            while i < len(pattern) and pattern[i] == "*":
                i += 1
            out.append(_NOT_SEPARATOR + "*")
            continue
        if ch == "?":
            out.append(_NOT_SEPARATOR)
            i += 1
            continue
        if ch == "[":
            fragment, i = _translate_class(pattern, i + 1)
            out.append(fragment)
            continue
        if ch == "\\" and ESCAPES:
            i += 1
            if i >= len(pattern):
                raise MalformedPatternError(pattern, "trailing escape")
            ch = pattern[i]
        out.append(re.escape(ch))
        i += 1
    return "".join(out)


@functools.lru_cache(maxsize=256)
def _compile(pattern: str) -> re.Pattern[str]:
    return re.compile(translate(pattern), re.DOTALL)


def match(pattern: str, name: str) -> bool:
    """Check if name matches the shell pattern as a whole.

    Raises:
        MalformedPatternError: If the pattern is malformed, even when the
            name could already be rejected.
    """
    return _compile(pattern).fullmatch(name) is not None


def _clean_glob_dir(directory: str) -> str:
    vol = algebra.volume_name(directory)
    rest = directory[len(vol) :]
    if not rest:
        return vol or "."
    if rest in algebra.SEPARATORS:
        return directory
    # chop off the trailing separator
    return directory[:-1]


def _glob_in(directory: str, pattern: str, matches: list[str]) -> None:
    """Append the entries of directory matching pattern, in sorted order.

    Directories that cannot be read contribute nothing.
    """
    if not os.path.isdir(directory):
        return
    try:
        names = os.listdir(directory)
    except OSError:
        return
    for name in sorted(names):
        if match(pattern, name):
            matches.append(algebra.join(directory, name))


def glob(pattern: str) -> list[str]:
    """Return the paths matching pattern.

    A pattern without meta characters is returned as is when it exists.
    Unreadable directories are skipped rather than reported.

    Raises:
        MalformedPatternError: If the pattern is malformed.
    """
    _compile(pattern)

    if not has_meta(pattern):
        try:
            os.lstat(pattern)
        except OSError:
            return []
        return [pattern]

    directory, file_pattern = algebra.split(pattern)
    directory = _clean_glob_dir(directory)
    vol = algebra.volume_name(directory)

    matches: list[str] = []
    if not has_meta(directory[len(vol) :]):
        _glob_in(directory, file_pattern, matches)
        return matches

    if directory == pattern:
        raise MalformedPatternError(pattern)

    for parent in glob(directory):
        _glob_in(parent, file_pattern, matches)
    return matches
