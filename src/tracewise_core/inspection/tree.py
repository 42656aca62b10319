"""Rebuild span trees from finished spans.

The SDK hands out finished spans as a flat list, in the order they ended.
Children end before their parents, so the list is rebuilt into one tree per
trace using the parent span id of each span.
"""

from typing import Any, Iterable, Iterator, List, Optional

from opentelemetry import trace
from opentelemetry.sdk.trace import ReadableSpan
from pydantic import BaseModel, Field


def _plain_attributes(attributes) -> dict[str, Any]:
    if not attributes:
        return {}
    return {
        key: list(value) if isinstance(value, tuple) else value
        for key, value in attributes.items()
    }


class EventRecord(BaseModel):
    name: str
    timestamp: int
    attributes: dict[str, Any] = Field(default_factory=dict)


class SpanRecord(BaseModel):
    """A finished span detached from the SDK, with its children attached."""

    name: str
    trace_id: str
    span_id: str
    parent_span_id: Optional[str] = None
    kind: str = 'INTERNAL'
    status: str = 'UNSET'
    status_description: Optional[str] = None
    start_time: int
    end_time: Optional[int] = None
    attributes: dict[str, Any] = Field(default_factory=dict)
    events: List[EventRecord] = Field(default_factory=list)
    children: List['SpanRecord'] = Field(default_factory=list)

    @property
    def duration_ms(self) -> float:
        if self.end_time is None:
            return 0.0
        return (self.end_time - self.start_time) / 1_000_000

    @property
    def is_error(self) -> bool:
        return self.status == 'ERROR'

    @classmethod
    def from_readable_span(cls, span: ReadableSpan) -> 'SpanRecord':
        parent = span.parent
        return cls(
            name=span.name,
            trace_id=trace.format_trace_id(span.context.trace_id),
            span_id=trace.format_span_id(span.context.span_id),
            parent_span_id=(
                trace.format_span_id(parent.span_id)
                if parent is not None and parent.is_valid
                else None
            ),
            kind=span.kind.name,
            status=span.status.status_code.name,
            status_description=span.status.description,
            start_time=span.start_time,
            end_time=span.end_time,
            attributes=_plain_attributes(span.attributes),
            events=[
                EventRecord(
                    name=event.name,
                    timestamp=event.timestamp,
                    attributes=_plain_attributes(event.attributes),
                )
                for event in span.events
            ],
        )

    def walk(self, depth: int = 0) -> Iterator[tuple[int, 'SpanRecord']]:
        """Yield `(depth, span)` for this span and its descendants, depth first."""
        yield depth, self
        for child in self.children:
            yield from child.walk(depth + 1)

    def find(self, name: str) -> Optional['SpanRecord']:
        """First span named `name` in this subtree, in walk order."""
        for _, span in self.walk():
            if span.name == name:
                return span
        return None


def build_trace_trees(spans: Iterable[ReadableSpan | SpanRecord]) -> List[SpanRecord]:
    """Group finished spans into trees, one root per trace (or orphaned subtree).

    A span whose parent is not among `spans` is treated as a root, which is
    the case for the local root of a trace continued from a remote caller.
    Roots and children are ordered by start time. `SpanRecord` inputs are
    copied, so their own `children` are left as they were.
    """
    records = [
        span.model_copy(update={'children': []})
        if isinstance(span, SpanRecord)
        else SpanRecord.from_readable_span(span)
        for span in spans
    ]
    by_id = {(record.trace_id, record.span_id): record for record in records}

    roots: List[SpanRecord] = []
    for record in records:
        parent = by_id.get((record.trace_id, record.parent_span_id))
        if record.parent_span_id is not None and parent is not None:
            parent.children.append(record)
        else:
            roots.append(record)

    for record in records:
        record.children.sort(key=lambda child: child.start_time)

    return sorted(roots, key=lambda root: root.start_time)
