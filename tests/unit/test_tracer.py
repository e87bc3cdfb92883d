"""
Tests for the tracer module.

These tests verify the debug tracing infrastructure used to capture
how the selector scored every candidate pair.
"""

from anchorroute.models import AnchorSide, Point, ResolvedEndpoint
from anchorroute.selector import solve_connector
from anchorroute.tracer import PairEvaluation, RouteTrace


def _evaluation(**overrides):
    values = dict(
        from_anchor=AnchorSide.RIGHT,
        to_anchor=AnchorSide.LEFT,
        from_label="a:right",
        to_label="b:left",
        obstacle_count=2,
        route_score=200.0,
        alignment_penalty=0.0,
        stability_penalty=14,
        same_object_penalty=0,
        bends=0,
    )
    values.update(overrides)
    return PairEvaluation(**values)


class TestPairEvaluation:
    """Tests for PairEvaluation dataclass."""

    def test_total(self):
        evaluation = _evaluation(alignment_penalty=35.5, same_object_penalty=300)
        assert evaluation.total == 200 + 35.5 + 14 + 300

    def test_str_selected(self):
        text = str(_evaluation(selected=True))
        assert text.startswith("*")
        assert "a:right -> b:left" in text
        assert "total=214.0" in text
        assert "obstacles=2" in text

    def test_str_not_selected(self):
        assert str(_evaluation()).startswith(" ")


class TestRouteTrace:
    """Tests for RouteTrace."""

    def test_records_every_pair(self, side_by_side_lookups, a_to_b):
        geometry, kinds = side_by_side_lookups
        trace = RouteTrace(connector_id="c1")
        solve_connector(a_to_b, geometry, kinds, [], trace=trace)

        assert len(trace.evaluations) == 16
        assert trace.skipped == []
        assert not trace.used_previous
        assert sum(1 for e in trace.evaluations if e.selected) == 1

    def test_winner_matches_result(self, side_by_side_lookups, a_to_b):
        geometry, kinds = side_by_side_lookups
        trace = RouteTrace(connector_id="c1")
        result = solve_connector(a_to_b, geometry, kinds, [], trace=trace)

        winner = trace.winner
        assert winner.from_anchor == result.from_endpoint.anchor
        assert winner.to_anchor == result.to_endpoint.anchor
        assert winner.total == min(e.total for e in trace.evaluations)

    def test_mark_selected_clears_previous_mark(self):
        trace = RouteTrace()
        free = ResolvedEndpoint(Point(0, 0))
        first = trace.add_evaluation(free, free, 0, 10, 0, 0, 0, 0)
        second = trace.add_evaluation(free, free, 0, 5, 0, 0, 0, 0)
        trace.mark_selected(first)
        trace.mark_selected(second)
        assert not first.selected
        assert trace.winner is second
        assert first.from_label == "free(0,0)"

    def test_summary(self, side_by_side_lookups, a_to_b):
        geometry, kinds = side_by_side_lookups
        trace = RouteTrace(connector_id="c1")
        solve_connector(a_to_b, geometry, kinds, [], trace=trace)

        summary = trace.summary()
        assert "ROUTE TRACE c1" in summary
        assert "Pairs evaluated: 16" in summary
        assert "Selected: a:right -> b:left" in summary

    def test_summary_previous_result(self):
        trace = RouteTrace(used_previous=True)
        assert "previous result" in trace.summary()

    def test_dump_lists_evaluations_and_skips(self):
        trace = RouteTrace()
        bound = ResolvedEndpoint(Point(0, 0), "a", AnchorSide.TOP, Point(0, -1), True)
        trace.add_evaluation(bound, bound, 0, 1, 0, 0, 0, 0)
        trace.add_skip(bound, bound)

        dump = trace.dump()
        assert "EVALUATIONS:" in dump
        assert "SKIPPED:" in dump
        assert "a:top -> a:top" in dump
