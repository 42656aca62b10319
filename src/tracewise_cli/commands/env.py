import typer
from pathlib import Path
from typing import Annotated

from tracewise_cli.console.console import Console


app = typer.Typer()

console = Console()


@app.command()
def env(
    force: Annotated[
        bool,
        typer.Option('--force', '-f', help='Overwrite an existing .env file without asking'),
    ] = False,
):
    """Create an environment file with Tracewise configuration."""
    from importlib.resources import files

    try:
        example_content = files('tracewise_cli').joinpath('.env.example').read_text()

        env_file_path: Path = Path.cwd() / '.env'

        console.action('Create env file')

        if env_file_path.exists() and not force:
            console.highlight('.env file already exists')
            console.newline()
            overwrite = typer.confirm('Do you want to overwrite it?', default=False)
            if not overwrite:
                console.faint('Leaving your file as is.')
                return

        env_file_path.write_text(example_content)

        console.success('Created .env file with default configuration.')
        console.faint(
            'Set TRACEWISE_TRACING_ENABLE=true and the collector endpoint to export traces.'
        )
    except Exception as e:
        console.error(f'Error creating .env file: {str(e)}')
        raise typer.Exit(1)
