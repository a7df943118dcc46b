"""
Data flow analysis tests
Production code: services/analysis/data_flow.py
"""
import pytest

from sfn_verifier.services.analysis import analyze_data_flow


class TestAnalyzeDataFlow:

    def test_builds_edges_between_adjacent_states(self, history):
        events = (
            history.started(0)
            .entered("A", 0, {"id": 1}).exited("A", 10, {"id": 1, "ok": True})
            .entered("B", 15, {"id": 1, "ok": True}).exited("B", 20, {"id": 1})
            .entered("C", 25, {"id": 1}).exited("C", 30, {"id": 1})
            .succeeded(40)
            .build()
        )

        analysis = analyze_data_flow(events)

        assert [(e.from_state, e.to_state) for e in analysis.edges] == [("A", "B"), ("B", "C")]
        assert analysis.edges[0].transformation.output == {"id": 1, "ok": True}
        assert analysis.edges[0].transformation.input == {"id": 1, "ok": True}
        assert analysis.edges[0].timestamp == history.at(15)
        assert analysis.data_loss is False
        assert analysis.data_corruption is False

    def test_data_loss(self, history):
        events = history.exited("A", 0, {"x": 1}).entered("B", 5, {}).build()

        analysis = analyze_data_flow(events)

        assert analysis.data_loss is True
        assert analysis.data_corruption is False

    def test_disjoint_keys_are_corruption(self, history):
        events = history.exited("A", 0, {"x": 1}).entered("B", 5, {"y": 2}).build()

        analysis = analyze_data_flow(events)

        assert analysis.data_corruption is True
        assert analysis.data_loss is False

    def test_partial_overlap_is_not_corruption(self, history):
        events = history.exited("A", 0, {"x": 1}).entered("B", 5, {"x": 1, "y": 2}).build()

        analysis = analyze_data_flow(events)

        assert analysis.data_corruption is False
        assert analysis.data_loss is False

    def test_flags_are_sticky_across_later_clean_edges(self, history):
        events = (
            history.exited("A", 0, {"x": 1}).entered("B", 1, {})
            .exited("B", 2, {"y": 1}).entered("C", 3, {"z": 1})
            .exited("C", 4, {"z": 1}).entered("D", 5, {"z": 1})
            .build()
        )

        analysis = analyze_data_flow(events)

        assert analysis.data_loss is True
        assert analysis.data_corruption is True
        assert len(analysis.edges) == 3

    def test_non_adjacent_pairs_are_skipped(self, history):
        events = (
            history.exited("A", 0, {"x": 1})
            .other("TaskScheduled", 1)
            .entered("B", 2, {})
            .build()
        )

        analysis = analyze_data_flow(events)

        assert analysis.edges == []
        assert analysis.data_loss is False

    def test_missing_state_name_skips_edge(self, history):
        events = history.exited("", 0, {"x": 1}).entered("B", 1, {}).build()

        analysis = analyze_data_flow(events)

        assert analysis.edges == []
        assert analysis.data_loss is False

    @pytest.mark.parametrize("output", [None, "", "not-json"])
    def test_empty_output_never_flags(self, history, output):
        events = history.exited("A", 0, output).entered("B", 1, {"y": 1}).build()

        analysis = analyze_data_flow(events)

        assert analysis.data_loss is False
        assert analysis.data_corruption is False
        assert analysis.edges[0].transformation.output == {}

    def test_empty_history(self):
        analysis = analyze_data_flow([])

        assert analysis.edges == []
        assert analysis.data_loss is False
        assert analysis.data_corruption is False
