from pydantic import BaseModel

from tracewise_core.inspection.tree import SpanRecord


class TraceSummary(BaseModel):
    """Headline numbers for one trace tree."""

    trace_id: str
    root: str
    span_count: int
    error_count: int
    duration_ms: float

    @property
    def failed(self) -> bool:
        return self.error_count > 0


def summarize(root: SpanRecord) -> TraceSummary:
    spans = [span for _, span in root.walk()]
    return TraceSummary(
        trace_id=root.trace_id,
        root=root.name,
        span_count=len(spans),
        error_count=sum(1 for span in spans if span.is_error),
        duration_ms=root.duration_ms,
    )
