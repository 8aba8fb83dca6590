import typer

from deployconf._version import __version__
from deployconf.cli import check, imports, load

app = typer.Typer(
    name="deployconf",
    no_args_is_help=True,
    help="deployconf: resolve a tree of imported YAML configs into one merged config.",
)

app.add_typer(load.app, name="load")
app.add_typer(check.app, name="check")
app.add_typer(imports.app, name="imports")


def _version_callback(value: bool) -> None:
    if value:
        print(f"deployconf {__version__}")
        raise typer.Exit()


@app.callback()
def main(
    version: bool = typer.Option(
        False,
        "--version",
        "-V",
        help="Show the version and exit.",
        callback=_version_callback,
        is_eager=True,
    ),
) -> None:
    """deployconf: merge configuration files and their imports."""
