from tracewise_cli.services.trace_renderer import (
    render_summary as render_summary,
    render_trace as render_trace,
)
