from __future__ import annotations

from copy import deepcopy
from typing import Any

from deployconf.core.errors import MergeError


def _merge_mapping(destination: dict, source: dict) -> None:
    for key, value in source.items():
        if key not in destination or destination[key] is None:
            destination[key] = deepcopy(value)
            continue
        current = destination[key]
        if isinstance(current, dict) and isinstance(value, dict):
            _merge_mapping(current, value)
        elif isinstance(current, list) and isinstance(value, list):
            current.extend(deepcopy(value))
        # Scalars and mismatched shapes: the destination keeps its value.


def merge(destination: Any, source: Any) -> Any:
    """Merge *source* into *destination* in place and return *destination*.

    Keys missing from (or null in) the destination are copied from the
    source. Nested mappings are merged recursively, lists are concatenated
    (destination items first) and any other value already set in the
    destination wins. *source* is never mutated.

    Raises:
        MergeError: If the two roots are not both mappings or both lists.
    """
    if isinstance(destination, dict) and isinstance(source, dict):
        _merge_mapping(destination, source)
        return destination
    if isinstance(destination, list) and isinstance(source, list):
        destination.extend(deepcopy(source))
        return destination
    raise MergeError(
        f"cannot merge {type(source).__name__} into {type(destination).__name__}"
    )
