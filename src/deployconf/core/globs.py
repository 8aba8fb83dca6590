from __future__ import annotations

import glob
import os
from typing import Iterable, Set

from deployconf.core.errors import PatternError
from deployconf.core.paths import DEFAULT_REMOTE_PREFIXES, is_remote


def _class_end(pattern: str, start: int) -> int:
    """Return the index of the ``]`` closing the class opened at *start*, or -1."""
    j = start + 1
    if j < len(pattern) and pattern[j] in "!^":
        j += 1
    if j < len(pattern) and pattern[j] == "]":
        j += 1
    while j < len(pattern) and pattern[j] != "]":
        j += 1
    return j if j < len(pattern) else -1


def validate_pattern(pattern: str) -> None:
    """Check that *pattern* is well-formed shell-style glob syntax.

    Supported: ``*``, ``?``, ``[...]`` classes (``[!...]`` or ``[^...]``
    negates, a ``]`` right after the opening bracket is literal) and ``\\``
    escapes.

    Raises:
        PatternError: On an unterminated class or a trailing backslash.
    """
    i = 0
    while i < len(pattern):
        c = pattern[i]
        if c == "\\":
            if i + 1 >= len(pattern):
                raise PatternError(f"pattern {pattern!r} is malformed: trailing backslash")
            i += 2
        elif c == "[":
            end = _class_end(pattern, i)
            if end < 0:
                raise PatternError(f"pattern {pattern!r} is malformed: unterminated '['")
            i = end + 1
        else:
            i += 1


def _translate(pattern: str) -> str:
    """Rewrite ``\\x`` escapes into the form :mod:`glob` understands.

    Expects a pattern that already passed :func:`validate_pattern`.
    """
    out = []
    i = 0
    while i < len(pattern):
        c = pattern[i]
        if c == "\\":
            out.append(glob.escape(pattern[i + 1]))
            i += 2
        elif c == "[":
            end = _class_end(pattern, i)
            body = pattern[i + 1:end]
            if body.startswith("^"):
                # fnmatch only negates with "!".
                body = "!" + body[1:]
            out.append("[" + body + "]")
            i = end + 1
        else:
            out.append(c)
            i += 1
    return "".join(out)


def expand(
    base_dir: str,
    pattern: str,
    remote_prefixes: Iterable[str] = DEFAULT_REMOTE_PREFIXES,
) -> Set[str]:
    """Return the absolute paths of the files matching *pattern*.

    Relative patterns are joined with *base_dir*, whose own characters are
    matched literally. ``**`` is not recursive, and wildcards match a
    leading dot as well. The result is a set; its iteration order is not
    meaningful.

    Raises:
        PatternError: If the pattern is malformed or points at remote storage.
    """
    if is_remote(pattern, remote_prefixes):
        raise PatternError(
            f"pattern {pattern!r} refers to remote storage, which cannot be globbed"
        )
    validate_pattern(pattern)

    if os.path.isabs(pattern):
        joined = _translate(pattern)
    else:
        joined = os.path.join(glob.escape(base_dir), _translate(pattern))
    return {
        os.path.normpath(os.path.abspath(match))
        for match in glob.glob(joined, include_hidden=True)
        if os.path.isfile(match)
    }
