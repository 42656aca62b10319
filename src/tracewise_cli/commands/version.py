"""Print version information."""

import sys
import platform
from importlib.metadata import version as metadata_version
import typer

from tracewise_cli.console.console import Console


app = typer.Typer()

console = Console()


@app.command()
def version():
    """Print Tracewise version information."""
    try:
        tracewise_version = metadata_version('tracewise')
    except Exception:
        tracewise_version = 'Development version'

    try:
        otel_version = metadata_version('opentelemetry-sdk')
    except Exception:
        otel_version = 'not installed'

    console.highlight('Tracewise. See inside every request.')
    console.newline()

    console.info(f'Version: {tracewise_version}')
    console.muted(f'OpenTelemetry SDK {otel_version}')
    console.muted(
        f'Python {sys.version_info.major}.{sys.version_info.minor}.{sys.version_info.micro}'
    )
    console.muted(f'Platform: {platform.platform()}')
