"""Render span trees the way a trace viewer shows them, in the terminal."""

from typing import Any, Iterable

from rich.table import Table
from rich.text import Text
from rich.tree import Tree

from tracewise_core.inspection import SpanRecord, TraceSummary


def _format_value(value: Any) -> str:
    if isinstance(value, float):
        return f'{value:.2f}'
    if isinstance(value, list):
        return '[' + ', '.join(_format_value(item) for item in value) + ']'
    return str(value)


def _span_label(span: SpanRecord) -> Text:
    label = Text()
    if span.is_error:
        label.append('✗ ', style='span.error')
        label.append(span.name, style='span.error')
    else:
        label.append(span.name, style='span.name')
    label.append(f'  {span.duration_ms:.2f} ms', style='span.duration')
    if span.is_error and span.status_description:
        label.append(f'  {span.status_description.splitlines()[0]}', style='span.error')
    return label


def _add_span(
    node: Tree, span: SpanRecord, started_at: int, show_attributes: bool
) -> None:
    if show_attributes:
        for key in sorted(span.attributes):
            node.add(
                Text(f'{key} = {_format_value(span.attributes[key])}', style='span.attribute')
            )

    for event in span.events:
        offset_ms = (event.timestamp - started_at) / 1_000_000
        line = Text(f'◆ {event.name}', style='span.event')
        line.append(f'  +{offset_ms:.2f} ms', style='span.duration')
        if show_attributes and event.attributes and event.name != 'exception':
            details = ', '.join(
                f'{key}={_format_value(value)}' for key, value in event.attributes.items()
            )
            line.append(f'  {details}', style='span.attribute')
        node.add(line)

    for child in span.children:
        _add_span(
            node.add(_span_label(child), guide_style='tree.line'),
            child,
            started_at,
            show_attributes,
        )


def render_trace(root: SpanRecord, show_attributes: bool = True) -> Tree:
    """Build a Rich tree for a trace, with events placed relative to the trace start."""
    tree = Tree(_span_label(root), guide_style='tree.line')
    _add_span(tree, root, root.start_time, show_attributes)
    return tree


def render_summary(summaries: Iterable[TraceSummary]) -> Table:
    """Build a table with one row per trace."""
    table = Table(show_header=True, show_lines=False, padding=(0, 1))

    table.add_column('Trace', no_wrap=True, style='faint')
    table.add_column('Root', no_wrap=True)
    table.add_column('Spans', justify='right')
    table.add_column('Errors', justify='right')
    table.add_column('Duration', justify='right')

    for summary in summaries:
        table.add_row(
            summary.trace_id[:16],
            summary.root,
            str(summary.span_count),
            f'[red]{summary.error_count}[/red]' if summary.failed else '0',
            f'{summary.duration_ms:.2f} ms',
        )

    return table
