"""Run the example shop and show the traces it produces."""

import json
from pathlib import Path
from typing import Annotated, List, Optional

import typer

from tracewise_core.exceptions import (
    ConfigurationException,
    InvalidOrderException,
    OutOfStockException,
    PaymentDeclinedException,
)
from tracewise_core.inspection import SpanRecord, build_trace_trees, summarize
from tracewise_core.logging import create_isolated_logger
from tracewise_core.models import TracewiseConfig
from tracewise_core.shop import OrderGenerator, build_shop
from tracewise_core.tracing import TracewiseTracer

from tracewise_cli.console.console import Console
from tracewise_cli.models import Detail, Exporter
from tracewise_cli.services import render_summary, render_trace

app = typer.Typer()

console = Console()

CHECKOUT_ERRORS = (
    InvalidOrderException,
    OutOfStockException,
    PaymentDeclinedException,
)


def demo_config(
    exporter: Exporter, detail: Optional[Detail] = None
) -> TracewiseConfig:
    """Load the configuration and force tracing on with the chosen exporter."""
    config = TracewiseConfig()

    tracing = config.tracing.model_copy(
        update={'enable': True, 'exporter': exporter.value}
    )
    shop = (
        config.shop.model_copy(update={'detail': detail.value})
        if detail is not None
        else config.shop
    )

    return config.model_copy(update={'tracing': tracing, 'shop': shop})


def write_traces(roots: List[SpanRecord], output: Path) -> None:
    output.parent.mkdir(parents=True, exist_ok=True)
    output.write_text(
        json.dumps([root.model_dump() for root in roots], indent=2, default=str)
    )


@app.command()
def demo(
    orders: Annotated[
        int,
        typer.Option('--orders', '-n', min=1, help='Number of orders to check out'),
    ] = 3,
    seed: Annotated[
        Optional[int],
        typer.Option('--seed', help='Seed for the order generator, for repeatable runs'),
    ] = None,
    detail: Annotated[
        Optional[Detail],
        typer.Option(
            '--detail',
            '-d',
            help='Instrumentation detail (default: detailed or TRACEWISE_SHOP_DETAIL)',
        ),
    ] = None,
    exporter: Annotated[
        Exporter,
        typer.Option('--exporter', '-e', help='Where spans are sent'),
    ] = Exporter.MEMORY,
    attributes: Annotated[
        bool,
        typer.Option(
            '--attributes/--no-attributes', help='Show span and event attributes'
        ),
    ] = True,
    output: Annotated[
        Optional[Path],
        typer.Option(
            '--output',
            '-o',
            help='Write the traces as JSON. Requires the memory exporter',
            dir_okay=False,
        ),
    ] = None,
):
    """Check out generated orders in the example shop and show their traces."""

    config = demo_config(exporter, detail)

    logger = create_isolated_logger(
        'tracewise.shop',
        level=config.logging_level,
        add_console_handler=False,
        add_file_handler=config.logging_file is not None,
        file_path=config.logging_file,
        trace_context=True,
    )

    try:
        tracer = TracewiseTracer().configure(config, logger=logger)
    except ConfigurationException as e:
        console.error(f'Tracing setup failed: {e}')
        raise typer.Exit(1)

    shop = build_shop(config.shop, tracer=tracer, logger=logger)
    generated = OrderGenerator(seed).generate(orders)

    console.action(
        f'Checking out {orders} order{"s" if orders > 1 else ""} '
        f'([bold]{config.shop.detail}[/bold] instrumentation, {exporter.value} exporter)'
    )

    failures = []

    with console.progress('Checking out') as progress:
        task = progress.add_task('Checking out', total=len(generated))
        for order in generated:
            try:
                shop.checkout(order)
            except CHECKOUT_ERRORS as e:
                failures.append((order.id, e))
            progress.update(task, advance=1)

    tracer.force_flush()

    try:
        if exporter is Exporter.MEMORY:
            roots = build_trace_trees(tracer.finished_spans())

            console.separator(f'Traces ({len(roots)})')
            for root in roots:
                console.print(render_trace(root, show_attributes=attributes))
                console.newline()

            console.print(render_summary(summarize(root) for root in roots))
            console.newline()

            if output is not None:
                write_traces(roots, output)
                console.info(f'Traces written to {output}')
        elif output is not None:
            console.warning('Traces can be written only with the memory exporter.')

        succeeded = len(generated) - len(failures)
        console.success(f'{succeeded} of {len(generated)} orders checked out.')

        for order_id, e in failures:
            console.warning(f'{order_id}: {str(e).splitlines()[0]}')
    finally:
        tracer.shutdown()
