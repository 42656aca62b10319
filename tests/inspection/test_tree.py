import pytest

from tracewise_core.inspection import SpanRecord, build_trace_trees, summarize


def record(name, span_id, parent=None, start=0, end=None, status='UNSET', trace_id='t1'):
    return SpanRecord(
        name=name,
        trace_id=trace_id,
        span_id=span_id,
        parent_span_id=parent,
        start_time=start,
        end_time=end,
        status=status,
    )


class TestBuildTraceTrees:
    def test_children_are_attached_in_start_order(self):
        spans = [
            record('charge_payment', 's3', parent='s1', start=30, end=40),
            record('reserve_inventory', 's2', parent='s1', start=10, end=20),
            record('checkout', 's1', start=0, end=50),
        ]

        (root,) = build_trace_trees(spans)

        assert root.name == 'checkout'
        assert [child.name for child in root.children] == [
            'reserve_inventory',
            'charge_payment',
        ]

    def test_one_root_per_trace(self):
        spans = [
            record('second', 'b1', start=20, trace_id='t2'),
            record('first', 'a1', start=10, trace_id='t1'),
        ]

        roots = build_trace_trees(spans)

        assert [root.name for root in roots] == ['first', 'second']

    def test_orphans_become_roots(self):
        spans = [record('handle_request', 's2', parent='remote', start=5)]

        (root,) = build_trace_trees(spans)

        assert root.name == 'handle_request'
        assert root.parent_span_id == 'remote'

    def test_same_span_id_in_other_trace_is_not_a_parent(self):
        spans = [
            record('root', 's1', trace_id='t1'),
            record('child', 's2', parent='s1', trace_id='t2', start=1),
        ]

        assert len(build_trace_trees(spans)) == 2

    def test_rebuilding_does_not_duplicate_children(self):
        spans = [record('root', 's1'), record('child', 's2', parent='s1', start=1)]

        build_trace_trees(spans)
        (root,) = build_trace_trees(spans)

        assert len(root.children) == 1

    def test_input_records_are_left_untouched(self):
        parent = record('root', 's1')
        child = record('child', 's2', parent='s1', start=1)
        stale = record('stale', 's9', parent='s1', start=2)
        parent.children = [stale]

        (root,) = build_trace_trees([parent, child])

        assert [span.name for span in root.children] == ['child']
        assert parent.children == [stale]
        assert child.children == []
        assert root is not parent

    def test_empty(self):
        assert build_trace_trees([]) == []

    def test_from_finished_spans(self, memory_tracer):
        with memory_tracer.span('checkout', _attributes={'items': ['a', 'b']}):
            with memory_tracer.span('validate_order'):
                memory_tracer.add_event('order.validated', {'order.items.count': 2})
            with pytest.raises(ValueError):
                with memory_tracer.span('charge_payment'):
                    raise ValueError('declined')

        (root,) = build_trace_trees(memory_tracer.finished_spans())

        assert root.name == 'checkout'
        assert root.parent_span_id is None
        assert root.kind == 'INTERNAL'
        assert root.attributes == {'items': ['a', 'b']}
        assert [child.name for child in root.children] == [
            'validate_order',
            'charge_payment',
        ]

        validate = root.find('validate_order')
        assert validate.events[0].name == 'order.validated'
        assert validate.events[0].attributes == {'order.items.count': 2}

        charge = root.find('charge_payment')
        assert charge.is_error is True
        assert charge.status_description == 'declined'
        assert charge.parent_span_id == root.span_id
        assert len(root.trace_id) == 32
        assert len(root.span_id) == 16


class TestSpanRecord:
    def test_duration(self):
        assert record('a', 's1', start=1_000_000, end=3_500_000).duration_ms == 2.5
        assert record('a', 's1', start=1_000_000).duration_ms == 0.0

    def test_walk_and_find(self):
        (root,) = build_trace_trees(
            [
                record('checkout', 's1'),
                record('charge_payment', 's2', parent='s1', start=1),
                record('call_bank', 's3', parent='s2', start=2),
            ]
        )

        assert [(depth, span.name) for depth, span in root.walk()] == [
            (0, 'checkout'),
            (1, 'charge_payment'),
            (2, 'call_bank'),
        ]
        assert root.find('call_bank').span_id == 's3'
        assert root.find('missing') is None

    def test_json_dump_keeps_children(self):
        (root,) = build_trace_trees(
            [record('checkout', 's1'), record('child', 's2', parent='s1', start=1)]
        )

        dumped = root.model_dump()

        assert dumped['children'][0]['name'] == 'child'


class TestSummarize:
    def test_counts_spans_and_errors(self):
        (root,) = build_trace_trees(
            [
                record('checkout', 's1', end=4_000_000, status='ERROR'),
                record('reserve_inventory', 's2', parent='s1', start=1),
                record('charge_payment', 's3', parent='s1', start=2, status='ERROR'),
            ]
        )

        summary = summarize(root)

        assert summary.trace_id == 't1'
        assert summary.root == 'checkout'
        assert summary.span_count == 3
        assert summary.error_count == 2
        assert summary.duration_ms == 4.0
        assert summary.failed is True

    def test_successful_trace(self):
        summary = summarize(record('checkout', 's1', end=1_000_000))

        assert summary.failed is False
        assert summary.span_count == 1
