from __future__ import annotations

import os
from pathlib import Path
from typing import Iterable, Optional

DEFAULT_REMOTE_PREFIXES = ("gs://",)

# Set by `bazel run` to the directory the command was launched from.
WORKING_DIRECTORY_ENV = "BUILD_WORKING_DIRECTORY"


def is_remote(path: str, prefixes: Iterable[str] = DEFAULT_REMOTE_PREFIXES) -> bool:
    """Return True if *path* is a remote storage reference such as ``gs://...``."""
    return any(path.startswith(prefix) for prefix in prefixes)


def resolve_working_dir(working_dir: Optional[Path | str] = None) -> Path:
    """Return the directory relative top-level paths are resolved against."""
    if working_dir is not None:
        return Path(working_dir).expanduser().resolve()
    env_dir = os.environ.get(WORKING_DIRECTORY_ENV)
    if env_dir:
        return Path(env_dir).resolve()
    return Path.cwd()


def resolve_path(
    raw_path: str,
    working_dir: Optional[Path | str] = None,
    remote_prefixes: Iterable[str] = DEFAULT_REMOTE_PREFIXES,
) -> str:
    """Normalize a user-supplied path into an absolute, expanded path.

    ``~`` and environment variables are expanded first. Remote references are
    returned untouched, absolute paths are normalized, and relative paths are
    joined to *working_dir* (or ``$BUILD_WORKING_DIRECTORY``, or the current
    directory).

    Raises:
        ValueError: If *raw_path* is empty or its home directory cannot be
            expanded.
    """
    if not raw_path:
        raise ValueError("path is empty")

    path = os.path.expanduser(raw_path)
    if path.startswith("~"):
        raise ValueError(f"cannot expand home directory in {raw_path!r}")
    path = os.path.expandvars(path)

    if is_remote(path, remote_prefixes):
        return path
    if os.path.isabs(path):
        return os.path.normpath(path)
    return os.path.normpath(os.path.join(resolve_working_dir(working_dir), path))


def resolve_import_path(
    import_path: str,
    declaring_file: str,
    remote_prefixes: Iterable[str] = DEFAULT_REMOTE_PREFIXES,
) -> str:
    """Resolve an import path relative to the directory of the declaring file."""
    if is_remote(import_path, remote_prefixes):
        return import_path
    if os.path.isabs(import_path):
        return os.path.normpath(import_path)
    return os.path.normpath(os.path.join(os.path.dirname(declaring_file), import_path))
