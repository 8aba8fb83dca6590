"""Template rendering for imported configuration files.

A file is rendered only when the import that reaches it supplies ``data``.
Rendering uses Jinja2 with the import's ``data`` mapping as the whole
context, so ``{{ PROJECT_ID }}`` reads ``data["PROJECT_ID"]``.

By default undefined variables are errors (:class:`jinja2.StrictUndefined`).
With ``strict=False`` they render as empty strings instead.
"""

from __future__ import annotations

from typing import Any, Mapping, Optional

import jinja2

from deployconf.core.errors import TemplateError


def _environment(strict: bool) -> jinja2.Environment:
    return jinja2.Environment(
        undefined=jinja2.StrictUndefined if strict else jinja2.Undefined,
        keep_trailing_newline=True,
        autoescape=False,
    )


def render(
    raw: str,
    data: Optional[Mapping[str, Any]],
    path: str,
    strict: bool = True,
) -> str:
    """Render *raw* against *data*, or return it unchanged when *data* is empty.

    Raises:
        TemplateError: If the template is malformed or fails to render.
    """
    if not data:
        return raw

    env = _environment(strict)
    try:
        template = env.from_string(raw)
    except jinja2.TemplateSyntaxError as exc:
        raise TemplateError(
            f"invalid template syntax at line {exc.lineno}: {exc.message}", path=path
        ) from exc

    try:
        return template.render(dict(data))
    except jinja2.UndefinedError as exc:
        raise TemplateError(f"undefined template variable: {exc.message}", path=path) from exc
    except jinja2.TemplateError as exc:
        raise TemplateError(f"failed to execute template: {exc}", path=path) from exc
