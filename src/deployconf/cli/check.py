from __future__ import annotations

from pathlib import Path
from typing import Optional

import typer

from deployconf.cli.common import SETTINGS_HELP, WORKING_DIR_HELP

app = typer.Typer(help="Load and validate a config without printing it.")


@app.callback(invoke_without_command=True)
def check(
    path: str = typer.Argument(..., help="Path to the root config file."),
    working_dir: Optional[Path] = typer.Option(None, "--working-dir", help=WORKING_DIR_HELP),
    settings: Optional[Path] = typer.Option(None, "--settings", exists=True, help=SETTINGS_HELP),
    verbose: bool = typer.Option(False, "--verbose", "-v", help="Log every file loaded and merged."),
) -> None:
    """Load PATH, bind it to the typed config and report a summary."""
    from deployconf.cli.common import fail, prepare
    from deployconf.core.errors import DeployConfError
    from deployconf.core.loader import load as load_config

    loader_settings = prepare(verbose, settings)
    try:
        conf = load_config(path, working_dir=working_dir, settings=loader_settings)
    except DeployConfError as exc:
        fail(exc)

    typer.echo(f"OK: {conf.source}")
    typer.echo(f"  imports:   {len(conf.imports)}")
    typer.echo(f"  templates: {len(conf.templates)}")
    typer.echo(f"  data keys: {', '.join(sorted(conf.data)) or '-'}")
