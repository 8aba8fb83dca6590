from __future__ import annotations

from dataclasses import dataclass, field
from typing import Any, Dict, List

from deployconf.core.errors import ConfigError
from deployconf.core.logging import get_logger

logger = get_logger("imports")

IMPORT_KEYS = ("path", "data", "pattern")


@dataclass(frozen=True)
class ImportEntry:
    """One entry of a file's ``imports`` list."""

    path: str = ""
    data: Dict[str, Any] = field(default_factory=dict)
    pattern: str = ""

    @classmethod
    def from_mapping(cls, raw: Any, declared_in: str, index: int = 0) -> "ImportEntry":
        """Build an entry from its parsed form, validating every field.

        Raises:
            ConfigError: If the entry is not a mapping, has badly typed
                fields, or sets both ``pattern`` and ``data``. Unknown keys
                are logged and ignored.
        """
        where = f"imports[{index}]"
        if not isinstance(raw, dict):
            raise ConfigError(
                f"{where} must be a mapping, got {type(raw).__name__}", path=declared_in
            )
        unknown = sorted(str(k) for k in raw if k not in IMPORT_KEYS)
        if unknown:
            logger.warning(f"{declared_in}: {where} ignores unknown keys: {', '.join(unknown)}")

        path = raw.get("path") or ""
        pattern = raw.get("pattern") or ""
        data = raw.get("data") or {}
        if not isinstance(path, str):
            raise ConfigError(f"{where}.path must be a string", path=declared_in)
        if not isinstance(pattern, str):
            raise ConfigError(f"{where}.pattern must be a string", path=declared_in)
        if not isinstance(data, dict):
            raise ConfigError(f"{where}.data must be a mapping", path=declared_in)
        if pattern and data:
            raise ConfigError(
                f"{where}: import cannot have both pattern and data set together",
                path=declared_in,
            )
        return cls(path=path, data=data, pattern=pattern)

    def to_dict(self) -> Dict[str, Any]:
        out: Dict[str, Any] = {}
        if self.path:
            out["path"] = self.path
        if self.data:
            out["data"] = self.data
        if self.pattern:
            out["pattern"] = self.pattern
        return out


def parse_imports(root: Dict[str, Any], path: str) -> List[ImportEntry]:
    """Return the ordered import entries declared by the document at *path*.

    A missing or null ``imports`` key means no imports.
    """
    raw = root.get("imports")
    if raw is None:
        return []
    if not isinstance(raw, list):
        raise ConfigError(
            f"'imports' must be a list, got {type(raw).__name__}", path=path
        )

    entries = []
    for i, item in enumerate(raw):
        entry = ImportEntry.from_mapping(item, path, i)
        if not entry.path and not entry.pattern:
            logger.warning(f"{path}: imports[{i}] sets neither path nor pattern; skipping")
            continue
        entries.append(entry)
    return entries
