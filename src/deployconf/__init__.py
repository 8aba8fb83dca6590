from deployconf._version import __version__
from deployconf.core.binder import Config, FlattenInfo, TemplateInfo, bind
from deployconf.core.config import LoaderSettings, load_settings
from deployconf.core.errors import (
    BindError,
    ConfigError,
    DeployConfError,
    ImportCycleError,
    MergeError,
    ParseError,
    PatternError,
    ReadError,
    TemplateError,
)
from deployconf.core.imports import ImportEntry
from deployconf.core.loader import load, load_map, load_tree
from deployconf.core.merge import merge
from deployconf.core.paths import resolve_path

__all__ = [
    "__version__",
    "load",
    "load_map",
    "load_tree",
    "bind",
    "merge",
    "resolve_path",
    "load_settings",
    "Config",
    "TemplateInfo",
    "FlattenInfo",
    "ImportEntry",
    "LoaderSettings",
    "DeployConfError",
    "ReadError",
    "TemplateError",
    "ParseError",
    "PatternError",
    "ConfigError",
    "ImportCycleError",
    "BindError",
    "MergeError",
]
