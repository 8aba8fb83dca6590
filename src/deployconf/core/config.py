from __future__ import annotations

import importlib.resources
from dataclasses import dataclass, fields
from pathlib import Path
from typing import Any, Optional, Tuple

import yaml

from deployconf.core.errors import ConfigError


def _deep_merge(base: dict, override: dict) -> dict:
    """Recursively merge override dict into base dict. Override values win."""
    merged = base.copy()
    for key, value in override.items():
        if key in merged and isinstance(merged[key], dict) and isinstance(value, dict):
            merged[key] = _deep_merge(merged[key], value)
        else:
            merged[key] = value
    return merged


@dataclass(frozen=True)
class LoaderSettings:
    """Knobs controlling how imports are rendered, ordered and checked."""

    strict_templates: bool = True
    sort_pattern_matches: bool = True
    detect_cycles: bool = True
    remote_prefixes: Tuple[str, ...] = ("gs://",)

    @classmethod
    def from_mapping(cls, raw: dict) -> "LoaderSettings":
        known = {f.name for f in fields(cls)}
        unknown = sorted(set(raw) - known)
        if unknown:
            raise ConfigError(
                f"unknown loader settings: {', '.join(unknown)}", phase="normalize"
            )

        values: dict[str, Any] = {}
        for name in ("strict_templates", "sort_pattern_matches", "detect_cycles"):
            if name in raw:
                if not isinstance(raw[name], bool):
                    raise ConfigError(
                        f"setting {name!r} must be a boolean, got {raw[name]!r}",
                        phase="normalize",
                    )
                values[name] = raw[name]
        if "remote_prefixes" in raw:
            prefixes = raw["remote_prefixes"] or []
            if not isinstance(prefixes, list) or not all(
                isinstance(p, str) and p for p in prefixes
            ):
                raise ConfigError(
                    "setting 'remote_prefixes' must be a list of non-empty strings",
                    phase="normalize",
                )
            values["remote_prefixes"] = tuple(prefixes)
        return cls(**values)


def load_default_settings() -> dict:
    """Load the bundled default loader settings from package data."""
    ref = importlib.resources.files("deployconf.data").joinpath("default_settings.yaml")
    with importlib.resources.as_file(ref) as settings_path:
        with open(settings_path, "r") as f:
            return yaml.safe_load(f)


def load_settings(user_settings_path: Optional[Path | str] = None) -> LoaderSettings:
    """Load loader settings, optionally merging user overrides with defaults.

    Args:
        user_settings_path: Optional path to a user settings YAML file.
            If provided, its values are deep-merged on top of defaults.
            If None, only the bundled defaults are used.

    Returns:
        The resulting :class:`LoaderSettings`.

    Raises:
        FileNotFoundError: If user_settings_path is provided but does not exist.
        ConfigError: If the settings file is not valid YAML, or the merged
            settings contain unknown keys or bad values.
    """
    defaults = load_default_settings()

    if user_settings_path is None:
        return LoaderSettings.from_mapping(defaults)

    user_path = Path(user_settings_path)
    if not user_path.is_file():
        raise FileNotFoundError(
            f"User settings file not found: {user_path}"
        )

    with open(user_path, "r") as f:
        try:
            user_settings = yaml.safe_load(f) or {}
        except yaml.YAMLError as exc:
            raise ConfigError(
                f"settings file is not valid YAML: {exc}", path=str(user_path), phase="normalize"
            ) from exc
    if not isinstance(user_settings, dict):
        raise ConfigError(
            "settings file must contain a mapping", path=str(user_path), phase="normalize"
        )

    return LoaderSettings.from_mapping(_deep_merge(defaults, user_settings))
