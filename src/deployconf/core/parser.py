from __future__ import annotations

from typing import Any, Dict

import yaml

from deployconf.core.errors import ParseError


def parse_document(text: str, path: str) -> Dict[str, Any]:
    """Parse YAML (or JSON) text into a generic mapping.

    Empty documents parse to an empty dict.

    Raises:
        ParseError: If the text is malformed or its root is not a mapping.
    """
    try:
        tree = yaml.safe_load(text)
    except yaml.YAMLError as exc:
        detail = str(exc)
        mark = getattr(exc, "problem_mark", None)
        if mark is not None:
            problem = getattr(exc, "problem", None) or "invalid syntax"
            detail = f"{problem} at line {mark.line + 1}, column {mark.column + 1}"
        raise ParseError(detail, path=path) from exc

    if tree is None:
        return {}
    if not isinstance(tree, dict):
        raise ParseError(
            f"document root must be a mapping, got {type(tree).__name__}", path=path
        )
    return tree
