"""Command line interface for Tracewise."""

from typing import Optional

import typer
from typing_extensions import Annotated
from importlib.metadata import version as metadata_version

from tracewise_cli.console.console import Console
from tracewise_cli.commands.demo import app as demo_command
from tracewise_cli.commands.env import app as env_command
from tracewise_cli.commands.exporters import app as exporters_command
from tracewise_cli.commands.version import app as version_command


# Create typer app
app = typer.Typer(
    name='tracewise',
    help='Tracewise, manual Open Telemetry instrumentation by example.',
    no_args_is_help=True,
    add_completion=False,
    pretty_exceptions_enable=False,
)

# Create Flexoki-themed console
console = Console()


def version_callback(value: bool):
    if value:
        try:
            tracewise_version = metadata_version('tracewise')
        except Exception:
            tracewise_version = 'Development version'

        console.print(f'[{console.COLORS["blue"]}]▣ Tracewise[/{console.COLORS["blue"]}]. See inside every request.')
        console.newline()
        console.info(f'Version: {tracewise_version}')
        console.newline()
        console.muted('For more information on Tracewise run `tracewise version`.')
        raise typer.Exit()


@app.callback()
def callback(
    version: Annotated[
        Optional[bool],
        typer.Option(
            '--version',
            callback=version_callback,
            is_eager=True,
            help='Show Tracewise version',
        ),
    ] = None,
):
    """Define the common command options"""

    console.print(f'[{console.COLORS["blue"]}]◇ Tracewise[/{console.COLORS["blue"]}]')


app.add_typer(demo_command)
app.add_typer(env_command)
app.add_typer(exporters_command)
app.add_typer(version_command)


def main():
    """Entry point for the CLI."""
    app()
