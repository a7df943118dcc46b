"""
SLA checks over a PerformanceSummary.
"""

from typing import List, Union

from sfn_verifier.common.constants import ColdStart
from sfn_verifier.common.logging_utils import get_logger
from sfn_verifier.models.results import (
    PerformanceSummary,
    SLAMetrics,
    SLAThresholds,
    SLAVerificationResult,
)

logger = get_logger(__name__)


def _fmt(value: float) -> Union[int, float]:
    return int(value) if float(value).is_integer() else round(value, 2)


def estimate_cold_start(summary: PerformanceSummary) -> float:
    """Rough estimate: a fixed share of total time once any state has run."""
    if summary.slowest_state is None:
        return 0
    return summary.total_execution_time * ColdStart.ESTIMATE_RATIO


def verify_slas(summary: PerformanceSummary, thresholds: SLAThresholds) -> SLAVerificationResult:
    """
    Check each threshold that is set; a metric strictly above its threshold
    is a violation. max_state_execution_time is compared with the average
    state duration.
    """
    violations: List[str] = []
    cold_start = estimate_cold_start(summary)

    if (
        thresholds.max_total_execution_time is not None
        and summary.total_execution_time > thresholds.max_total_execution_time
    ):
        violations.append(
            f"Total execution time {_fmt(summary.total_execution_time)}ms "
            f"exceeds SLA of {_fmt(thresholds.max_total_execution_time)}ms"
        )

    if (
        thresholds.max_state_execution_time is not None
        and summary.average_state_execution_time > thresholds.max_state_execution_time
    ):
        violations.append(
            f"Average state execution time {_fmt(summary.average_state_execution_time)}ms "
            f"exceeds SLA of {_fmt(thresholds.max_state_execution_time)}ms"
        )

    if thresholds.max_cold_start_time is not None and cold_start > thresholds.max_cold_start_time:
        violations.append(
            f"Cold start time {_fmt(cold_start)}ms "
            f"exceeds SLA of {_fmt(thresholds.max_cold_start_time)}ms"
        )

    result = SLAVerificationResult(
        meets_slas=not violations,
        violations=violations,
        metrics=SLAMetrics(
            total_execution_time=summary.total_execution_time,
            max_state_execution_time=summary.average_state_execution_time,
            cold_start_time=cold_start,
        ),
    )

    logger.info(f"SLA verification: meetsSLAs={result.meets_slas}, violations={len(violations)}")
    return result
