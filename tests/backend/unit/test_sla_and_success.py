"""
SLA verification and execution success classification tests
Production code: services/analysis/sla.py, services/analysis/success.py
"""
import pytest
from pydantic import ValidationError

from sfn_verifier.models import PerformanceSummary, SLAThresholds
from sfn_verifier.services.analysis import classify_execution, estimate_cold_start, verify_slas


def _summary(total=0, average=0.0, slowest=None):
    return PerformanceSummary(
        total_execution_time=total,
        average_state_execution_time=average,
        slowest_state=slowest,
        fastest_state=slowest,
    )


class TestVerifySlas:

    def test_total_time_violation(self):
        result = verify_slas(_summary(total=5000), SLAThresholds(max_total_execution_time=3000))

        assert result.meets_slas is False
        assert len(result.violations) == 1
        assert "5000" in result.violations[0]
        assert "3000" in result.violations[0]
        assert result.violations[0] == "Total execution time 5000ms exceeds SLA of 3000ms"

    def test_no_thresholds_means_no_checks(self):
        result = verify_slas(_summary(total=10**9, average=10**6, slowest="A"), SLAThresholds())

        assert result.meets_slas is True
        assert result.violations == []

    def test_equal_to_threshold_is_not_a_violation(self):
        result = verify_slas(_summary(total=3000), SLAThresholds(max_total_execution_time=3000))

        assert result.meets_slas is True

    def test_state_threshold_uses_average(self):
        result = verify_slas(
            _summary(total=1000, average=250.5, slowest="A"),
            SLAThresholds(max_state_execution_time=200)
        )

        assert result.violations == ["Average state execution time 250.5ms exceeds SLA of 200ms"]
        assert result.metrics.max_state_execution_time == 250.5

    def test_cold_start_is_ten_percent_of_total_when_states_ran(self):
        summary = _summary(total=5000, average=100, slowest="A")

        assert estimate_cold_start(summary) == pytest.approx(500)
        result = verify_slas(summary, SLAThresholds(max_cold_start_time=400))

        assert result.violations == ["Cold start time 500ms exceeds SLA of 400ms"]
        assert result.metrics.cold_start_time == pytest.approx(500)

    def test_cold_start_is_zero_without_states(self):
        result = verify_slas(_summary(total=5000), SLAThresholds(max_cold_start_time=0))

        assert result.meets_slas is True
        assert result.metrics.cold_start_time == 0

    def test_violations_keep_check_order(self):
        result = verify_slas(
            _summary(total=5000, average=900, slowest="A"),
            SLAThresholds(max_total_execution_time=1000, max_state_execution_time=100, max_cold_start_time=10)
        )

        assert [v.split(" ")[0] for v in result.violations] == ["Total", "Average", "Cold"]
        assert result.metrics.total_execution_time == 5000


class TestClassifyExecution:

    def test_simple_success(self, history):
        events = history.started(0).entered("A", 10).exited("A", 20).succeeded(30).build()

        result = classify_execution(events, ["A"])

        assert result.success is True
        assert result.completed_states == ["A"]
        assert result.failed_states == []
        assert result.execution_time == 30

    def test_failed_state_fails_execution(self, history):
        events = history.started(0).entered("A", 10).failed("A", 20).stopped(30, "ExecutionFailed").build()

        result = classify_execution(events)

        assert result.success is False
        assert result.failed_states == ["A"]
        assert result.execution_time == 0

    def test_state_failed_event_type_counts(self, history):
        events = history.entered("A", 0).failed("A", 5, event_type="StateFailed").build()

        assert classify_execution(events).failed_states == ["A"]

    def test_missing_expected_state(self, history):
        events = history.started(0).entered("A", 10).exited("A", 20).succeeded(30).build()

        result = classify_execution(events, ["A", "B"])

        assert result.success is False

    def test_no_expected_states_only_checks_failures(self, history):
        events = history.started(0).succeeded(5).build()

        assert classify_execution(events).success is True

    def test_entered_but_never_exited_counts_as_completed(self, history):
        # Entering a state counts as completing it; a state stuck mid-run
        # still satisfies expected_states.
        events = history.started(0).entered("A", 10).exited("A", 20).entered("Stuck", 30).build()

        result = classify_execution(events, ["A", "Stuck"])

        assert result.success is True
        assert result.completed_states == ["A", "Stuck"]
        assert result.execution_time == 0

    def test_repeated_states_are_listed_each_time(self, history):
        events = history.entered("Loop", 0).exited("Loop", 1).entered("Loop", 2).exited("Loop", 3).build()

        assert classify_execution(events).completed_states == ["Loop", "Loop"]

    def test_empty_history(self):
        result = classify_execution([], ["A"])

        assert result.success is False
        assert result.completed_states == []
        assert result.execution_time == 0


class TestSLAThresholdKeys:

    @pytest.mark.parametrize("raw", [
        {"max_total_execution_time": 3000},
        {"maxTotalExecutionTime": 3000},
    ])
    def test_snake_and_camel_case_keys(self, raw):
        thresholds = SLAThresholds.model_validate(raw)

        assert thresholds.max_total_execution_time == 3000
        assert verify_slas(_summary(total=5000), thresholds).meets_slas is False

    def test_unknown_key_is_rejected(self):
        with pytest.raises(ValidationError):
            SLAThresholds.model_validate({"maxTotalTime": 3000})
