import typer

from rich.table import Table

from tracewise_core.tracing import EXPORTERS, exporter_status
from tracewise_cli.console.console import Console

app = typer.Typer()

console = Console()

DESCRIPTIONS = {
    'otlp': 'OTLP over HTTP to a collector',
    'console': 'Spans printed as JSON on stdout',
    'memory': 'Spans kept in process, rendered as trees',
}


@app.command()
def exporters():
    """List supported span exporters."""

    console.action('Tracewise exporters')

    console.print(
        f'[faint]⎿ [/faint] [bold]{len(EXPORTERS)}[/bold] exporters supported.'
    )
    console.newline()

    with console.shimmer('Checking installed exporters...'):
        table = Table(
            show_header=True,
            show_lines=False,
            padding=(0, 1),
        )

        table.add_column('Exporter', no_wrap=True)
        table.add_column('Status', no_wrap=True)
        table.add_column('Description', style='faint')
        table.add_column('Details', style='faint')

        for name in EXPORTERS:
            ready, missing = exporter_status(name)
            status = '[green]✓ Ready[/green]' if ready else '[red]✗ Not installed[/red]'
            details = '' if ready else f'Missing: {missing}'

            table.add_row(name, status, DESCRIPTIONS[name], details)

    console.print(table)
    console.newline()
