from __future__ import annotations

import logging
from pathlib import Path
from typing import Optional

import typer

from deployconf.core.config import LoaderSettings
from deployconf.core.errors import DeployConfError

WORKING_DIR_HELP = (
    "Directory relative config paths are resolved against "
    "(default: $BUILD_WORKING_DIRECTORY or the current directory)."
)
SETTINGS_HELP = "Path to a YAML file overriding the default loader settings."


def prepare(verbose: bool, settings_path: Optional[Path], log_file: Optional[Path] = None) -> LoaderSettings:
    """Configure logging and load loader settings for a CLI command."""
    from deployconf.core.config import load_settings
    from deployconf.core.logging import setup_logging

    setup_logging(logging.DEBUG if verbose else logging.WARNING, log_file=log_file)
    try:
        return load_settings(settings_path)
    except DeployConfError as exc:
        fail(exc)


def fail(exc: Exception) -> None:
    """Print *exc* to stderr and exit with status 1."""
    typer.secho(f"Error: {exc}", fg=typer.colors.RED, err=True)
    raise typer.Exit(code=1)
