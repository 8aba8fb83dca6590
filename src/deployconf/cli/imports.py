from __future__ import annotations

import os
from pathlib import Path
from typing import Optional

import typer
from rich.console import Console
from rich.markup import escape
from rich.tree import Tree

from deployconf.cli.common import SETTINGS_HELP, WORKING_DIR_HELP

app = typer.Typer(help="Show which file imports which.")


def _label(node, parent_dir: Optional[str]) -> str:
    shown = os.path.relpath(node.path, parent_dir) if parent_dir else node.path
    tags = [node.via] if node.via != "root" else []
    if node.rendered:
        tags.append("rendered")
    return escape(shown) + (f" [dim]({', '.join(tags)})[/dim]" if tags else "")


def _add(branch: Tree, node) -> None:
    for child in node.children:
        sub = branch.add(_label(child, os.path.dirname(node.path)))
        _add(sub, child)


@app.callback(invoke_without_command=True)
def imports(
    path: str = typer.Argument(..., help="Path to the root config file."),
    working_dir: Optional[Path] = typer.Option(None, "--working-dir", help=WORKING_DIR_HELP),
    settings: Optional[Path] = typer.Option(None, "--settings", exists=True, help=SETTINGS_HELP),
) -> None:
    """Load PATH and print its import tree."""
    from deployconf.cli.common import fail, prepare
    from deployconf.core.errors import DeployConfError
    from deployconf.core.loader import trace_imports

    loader_settings = prepare(False, settings)
    try:
        _, root = trace_imports(path, working_dir=working_dir, settings=loader_settings)
    except DeployConfError as exc:
        fail(exc)

    tree = Tree(_label(root, None))
    _add(tree, root)
    Console(soft_wrap=True).print(tree)
