from __future__ import annotations

import json
from pathlib import Path
from typing import Optional

import typer

from deployconf.cli.common import SETTINGS_HELP, WORKING_DIR_HELP

app = typer.Typer(help="Print the merged configuration.")

FORMATS = ("yaml", "json")


@app.callback(invoke_without_command=True)
def load(
    path: str = typer.Argument(..., help="Path to the root config file."),
    output_format: str = typer.Option("yaml", "--format", "-f", help="Output format: yaml or json."),
    working_dir: Optional[Path] = typer.Option(None, "--working-dir", help=WORKING_DIR_HELP),
    settings: Optional[Path] = typer.Option(None, "--settings", exists=True, help=SETTINGS_HELP),
    verbose: bool = typer.Option(False, "--verbose", "-v", help="Log every file loaded and merged."),
    log_file: Optional[Path] = typer.Option(None, "--log-file", help="Also write a debug log to this file."),
) -> None:
    """Load PATH, merge all of its imports and print the result."""
    import yaml

    from deployconf.cli.common import fail, prepare
    from deployconf.core.errors import DeployConfError
    from deployconf.core.loader import load_tree

    if output_format not in FORMATS:
        typer.secho(
            f"Error: unknown format {output_format!r} (choose from {', '.join(FORMATS)})",
            fg=typer.colors.RED,
            err=True,
        )
        raise typer.Exit(code=2)

    loader_settings = prepare(verbose, settings, log_file)
    try:
        tree = load_tree(path, working_dir=working_dir, settings=loader_settings)
    except DeployConfError as exc:
        fail(exc)

    if output_format == "json":
        typer.echo(json.dumps(tree, indent=2, default=str))
    else:
        typer.echo(yaml.safe_dump(tree, sort_keys=False, default_flow_style=False), nl=False)
