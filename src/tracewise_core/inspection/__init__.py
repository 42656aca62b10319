from tracewise_core.inspection.tree import (
    EventRecord as EventRecord,
    SpanRecord as SpanRecord,
    build_trace_trees as build_trace_trees,
)
from tracewise_core.inspection.summary import (
    TraceSummary as TraceSummary,
    summarize as summarize,
)
