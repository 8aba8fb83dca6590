"""Recursive import resolution.

:func:`load_map` reads one file, renders it with the data its importer
supplied, parses it and folds every import into it:

1. explicit ``path`` imports, in declaration order, each rendered with the
   entry's ``data``;
2. files matched by ``pattern`` imports, sorted by path, never rendered and
   skipping the file itself and anything already imported explicitly.

Values the file sets itself win over imported values, and earlier imports
win over later ones. Lists are concatenated instead of overwritten.
"""

from __future__ import annotations

import os
from dataclasses import dataclass, field
from pathlib import Path
from typing import Any, Dict, List, Mapping, Optional, Set, Tuple

from deployconf.core.binder import Config, bind
from deployconf.core.config import LoaderSettings
from deployconf.core.errors import (
    PHASE_NORMALIZE,
    ConfigError,
    DeployConfError,
    ImportCycleError,
    MergeError,
    PatternError,
    ReadError,
)
from deployconf.core.globs import expand
from deployconf.core.imports import ImportEntry, parse_imports
from deployconf.core.logging import get_logger
from deployconf.core.merge import merge
from deployconf.core.parser import parse_document
from deployconf.core.paths import is_remote, resolve_import_path, resolve_path
from deployconf.core.template import render

logger = get_logger("loader")


@dataclass
class ImportNode:
    """One file in the import tree, as reached by :func:`load_map`."""

    path: str
    via: str = "root"
    rendered: bool = False
    children: List["ImportNode"] = field(default_factory=list)


def _read(path: str, settings: LoaderSettings) -> str:
    if is_remote(path, settings.remote_prefixes):
        raise ReadError("reading remote configuration files is not supported", path=path)
    try:
        with open(path, "r", encoding="utf-8") as f:
            return f.read()
    except (OSError, UnicodeDecodeError) as exc:
        raise ReadError(f"failed to read config file: {exc}", path=path) from exc


def pattern_paths(
    path: str,
    imports: List[ImportEntry],
    settings: Optional[LoaderSettings] = None,
) -> Set[str]:
    """Return every file matched by the pattern imports declared in *path*.

    Relative patterns are resolved against the directory of *path*. *path*
    itself is never part of the result, so ``pattern: "*.yaml"`` does not
    make a file import itself.
    """
    settings = settings or LoaderSettings()
    base_dir = os.path.dirname(path)
    matches: Set[str] = set()
    for entry in imports:
        if not entry.pattern:
            continue
        if entry.data:
            raise ConfigError("import cannot have both pattern and data set together", path=path)
        try:
            matches |= expand(base_dir, entry.pattern, settings.remote_prefixes)
        except PatternError as exc:
            if exc.path is None:
                exc.path = path
            raise
    matches.discard(path)
    return matches


def _merge_import(
    root: Dict[str, Any],
    path: str,
    import_path: str,
    data: Optional[Mapping[str, Any]],
    settings: LoaderSettings,
    ancestors: Tuple[str, ...],
    node: Optional[ImportNode],
    via: str,
) -> None:
    child = None
    if node is not None:
        child = ImportNode(path=import_path, via=via, rendered=bool(data))
        node.children.append(child)

    try:
        imported = load_map(import_path, data, settings, _ancestors=ancestors, _node=child)
    except DeployConfError as exc:
        exc.add_importer(path)
        raise

    try:
        merge(root, imported)
    except MergeError as exc:
        exc.path = path
        exc.message = f"failed to merge imported file {import_path}: {exc.message}"
        raise
    logger.debug(f"merged {import_path} into {path}")


def load_map(
    path: str,
    data: Optional[Mapping[str, Any]] = None,
    settings: Optional[LoaderSettings] = None,
    _ancestors: Tuple[str, ...] = (),
    _node: Optional[ImportNode] = None,
) -> Dict[str, Any]:
    """Load the config at *path* and merge all of its imports into it.

    Args:
        path: Absolute path of the file to load.
        data: Template data supplied by the importing entry. When empty the
            file is parsed as-is.
        settings: Loader settings; defaults apply when None.

    Returns:
        The merged generic tree. The ``imports`` key is kept; nested
        ``imports`` lists are concatenated into it like any other list.

    Raises:
        DeployConfError: Any read, render, parse, import or merge failure,
            anywhere in the import tree.
    """
    settings = settings or LoaderSettings()
    chain = _ancestors + (path,)
    if settings.detect_cycles and path in _ancestors:
        raise ImportCycleError(list(chain[chain.index(path):]))

    logger.debug(f"loading {path}" + (" with template data" if data else ""))
    raw = _read(path, settings)
    rendered = render(raw, data, path, strict=settings.strict_templates)
    root = parse_document(rendered, path)
    imports = parse_imports(root, path)

    visited = {path}
    for entry in imports:
        if not entry.path:
            continue
        import_path = resolve_import_path(entry.path, path, settings.remote_prefixes)
        visited.add(import_path)
        _merge_import(root, path, import_path, entry.data, settings, chain, _node, "path")

    matched = pattern_paths(path, imports, settings)
    ordered = sorted(matched) if settings.sort_pattern_matches else list(matched)
    for match in ordered:
        if match in visited:
            logger.debug(f"{match} already imported by {path}; skipping pattern match")
            continue
        _merge_import(root, path, match, None, settings, chain, _node, "pattern")

    return root


def _normalize(
    raw_path: str,
    working_dir: Optional[Path | str],
    settings: LoaderSettings,
) -> str:
    try:
        return resolve_path(raw_path, working_dir, settings.remote_prefixes)
    except ValueError as exc:
        raise ConfigError(
            f"failed to normalize path: {exc}", path=raw_path, phase=PHASE_NORMALIZE
        ) from exc


def load_tree(
    raw_path: str,
    working_dir: Optional[Path | str] = None,
    settings: Optional[LoaderSettings] = None,
) -> Dict[str, Any]:
    """Resolve *raw_path* and return its fully merged, unbound tree."""
    settings = settings or LoaderSettings()
    return load_map(_normalize(raw_path, working_dir, settings), None, settings)


def trace_imports(
    raw_path: str,
    working_dir: Optional[Path | str] = None,
    settings: Optional[LoaderSettings] = None,
) -> Tuple[Dict[str, Any], ImportNode]:
    """Like :func:`load_tree`, also returning which file imported which."""
    settings = settings or LoaderSettings()
    path = _normalize(raw_path, working_dir, settings)
    root_node = ImportNode(path=path)
    tree = load_map(path, None, settings, _node=root_node)
    return tree, root_node


def load(
    raw_path: str,
    working_dir: Optional[Path | str] = None,
    settings: Optional[LoaderSettings] = None,
) -> Config:
    """Load the config at *raw_path*, merge its imports and bind the result.

    The root file itself is never template-rendered.

    Raises:
        ConfigError: If the path cannot be normalized (phase ``normalize``)
            or binding fails (:class:`~deployconf.core.errors.BindError`).
        DeployConfError: Any failure while loading the import tree.
    """
    settings = settings or LoaderSettings()
    path = _normalize(raw_path, working_dir, settings)
    tree = load_map(path, None, settings)
    logger.info(f"loaded {path} with {len(tree.get('imports') or [])} import entries")
    return bind(tree, source=path)
