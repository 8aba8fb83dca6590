"""Binding of the merged generic tree into a typed :class:`Config`.

The tree is first round-tripped through canonical JSON so that only
JSON-compatible values reach the typed layer, then the known top-level keys
are converted field by field. Keys this module does not know about are kept
verbatim in :attr:`Config.extra` for the downstream engine.
"""

from __future__ import annotations

import json
from dataclasses import dataclass, field
from typing import Any, Dict, List, Optional

from deployconf.core.errors import BindError, ConfigError
from deployconf.core.imports import ImportEntry

KNOWN_KEYS = ("imports", "data", "templates", "schema", "version")
TEMPLATE_KEYS = (
    "name",
    "recipe_path",
    "component_path",
    "output_path",
    "output_ref",
    "data",
    "flatten",
)


@dataclass(frozen=True)
class FlattenInfo:
    """Selects ``data[key]`` (or ``data[key][index]``) as a template's data root."""

    key: str
    index: Optional[int] = None


@dataclass
class TemplateInfo:
    name: str = ""
    recipe_path: str = ""
    component_path: str = ""
    output_path: str = ""
    output_ref: str = ""
    data: Dict[str, Any] = field(default_factory=dict)
    flatten: List[FlattenInfo] = field(default_factory=list)


@dataclass
class Config:
    """Typed view of a fully merged configuration."""

    imports: List[ImportEntry] = field(default_factory=list)
    data: Dict[str, Any] = field(default_factory=dict)
    templates: List[TemplateInfo] = field(default_factory=list)
    schema: Dict[str, Any] = field(default_factory=dict)
    version: Optional[str] = None
    extra: Dict[str, Any] = field(default_factory=dict)
    source: Optional[str] = None

    def init(self) -> None:
        """Validate cross-field rules after binding.

        Raises:
            BindError: On the first violated rule.
        """
        names = set()
        for i, tmpl in enumerate(self.templates):
            where = f"templates[{i}]"
            if not tmpl.name:
                raise BindError(f"{where}.name must be set", path=self.source)
            if tmpl.name in names:
                raise BindError(f"duplicate template name {tmpl.name!r}", path=self.source)
            names.add(tmpl.name)
            if bool(tmpl.recipe_path) == bool(tmpl.component_path):
                raise BindError(
                    f"template {tmpl.name!r} must set exactly one of recipe_path or component_path",
                    path=self.source,
                )
            for j, flat in enumerate(tmpl.flatten):
                if not flat.key:
                    raise BindError(f"{where}.flatten[{j}].key must be set", path=self.source)

        for tmpl in self.templates:
            if tmpl.output_ref and tmpl.output_ref not in names:
                raise BindError(
                    f"template {tmpl.name!r} references unknown output_ref {tmpl.output_ref!r}",
                    path=self.source,
                )

        required = self.schema.get("required", [])
        if not isinstance(required, list):
            raise BindError("schema.required must be a list", path=self.source)
        missing = [key for key in required if key not in self.data]
        if missing:
            raise BindError(
                f"data is missing required keys: {', '.join(map(str, missing))}",
                path=self.source,
            )


def _key(key: Any) -> str:
    if isinstance(key, str):
        return key
    if key is None or isinstance(key, (bool, int, float)):
        # Spelled the way json.dumps writes scalar keys.
        return json.dumps(key)
    return str(key)


def _string_keys(value: Any) -> Any:
    if isinstance(value, dict):
        return {_key(k): _string_keys(v) for k, v in value.items()}
    if isinstance(value, list):
        return [_string_keys(v) for v in value]
    return value


def _canonical(tree: Dict[str, Any]) -> Dict[str, Any]:
    """Round-trip *tree* through canonical JSON.

    Keys are converted to strings before sorting, so YAML mappings mixing
    `1:` and `name:` keys bind like JSON objects.
    """
    try:
        encoded = json.dumps(_string_keys(tree), sort_keys=True, default=str)
    except (TypeError, ValueError) as exc:
        raise BindError(f"merged config is not JSON-compatible: {exc}") from exc
    return json.loads(encoded)


def _expect(value: Any, kind: type, where: str) -> Any:
    if isinstance(value, bool) and kind is not bool:
        ok = False
    else:
        ok = isinstance(value, kind)
    if not ok:
        raise BindError(f"{where}: expected {kind.__name__}, got {type(value).__name__}")
    return value


def _bind_flatten(raw: Any, where: str) -> FlattenInfo:
    _expect(raw, dict, where)
    unknown = sorted(set(raw) - {"key", "index"})
    if unknown:
        raise BindError(f"{where} has unknown keys: {', '.join(unknown)}")
    index = raw.get("index")
    if index is not None:
        _expect(index, int, f"{where}.index")
    return FlattenInfo(key=_expect(raw.get("key", ""), str, f"{where}.key"), index=index)


def _bind_template(raw: Any, where: str) -> TemplateInfo:
    _expect(raw, dict, where)
    unknown = sorted(set(raw) - set(TEMPLATE_KEYS))
    if unknown:
        raise BindError(f"{where} has unknown keys: {', '.join(unknown)}")

    values: Dict[str, Any] = {}
    for key in ("name", "recipe_path", "component_path", "output_path", "output_ref"):
        if raw.get(key) is not None:
            values[key] = _expect(raw[key], str, f"{where}.{key}")
    if raw.get("data") is not None:
        values["data"] = _expect(raw["data"], dict, f"{where}.data")
    if raw.get("flatten") is not None:
        flatten = _expect(raw["flatten"], list, f"{where}.flatten")
        values["flatten"] = [
            _bind_flatten(item, f"{where}.flatten[{i}]") for i, item in enumerate(flatten)
        ]
    return TemplateInfo(**values)


def bind(tree: Dict[str, Any], source: Optional[str] = None) -> Config:
    """Convert a merged tree into a :class:`Config` and run :meth:`Config.init`.

    Args:
        tree: The merged generic tree returned by the loader.
        source: Path of the root file, used for error attribution.

    Raises:
        BindError: If a known key has the wrong shape or validation fails.
    """
    try:
        doc = _canonical(tree)

        imports = []
        for i, item in enumerate(_expect(doc.get("imports") or [], list, "imports")):
            try:
                imports.append(ImportEntry.from_mapping(item, source or "", i))
            except ConfigError as exc:
                raise BindError(exc.message) from exc

        templates = [
            _bind_template(item, f"templates[{i}]")
            for i, item in enumerate(_expect(doc.get("templates") or [], list, "templates"))
        ]

        version = doc.get("version")
        if version is not None and not isinstance(version, str):
            # Numeric versions such as `1.0` are read as floats by YAML.
            version = str(version)

        conf = Config(
            imports=imports,
            data=_expect(doc.get("data") or {}, dict, "data"),
            templates=templates,
            schema=_expect(doc.get("schema") or {}, dict, "schema"),
            version=version,
            extra={k: v for k, v in doc.items() if k not in KNOWN_KEYS},
            source=source,
        )
    except BindError as exc:
        if exc.path is None:
            exc.path = source
        raise

    conf.init()
    return conf
