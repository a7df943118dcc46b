"""
Performance metrics derived from execution history.
"""

from datetime import datetime, timezone
from typing import Dict, Optional, Sequence

from sfn_verifier.common.json_utils import elapsed_ms, to_utc_datetime
from sfn_verifier.common.logging_utils import get_logger
from sfn_verifier.models.history import ExecutionStartedEvent, ExecutionStoppedEvent, HistoryEvent
from sfn_verifier.services.analysis.pairing import pair_state_events
from sfn_verifier.models.results import PerformanceSummary

logger = get_logger(__name__)


def analyze_performance(
    events: Sequence[HistoryEvent],
    now: Optional[datetime] = None
) -> PerformanceSummary:
    """
    Summarize execution and per-state durations (milliseconds).

    total_execution_time runs from ExecutionStarted to the first terminal
    execution event; a still-running execution is measured up to ``now``
    (wall clock when not given). No ExecutionStarted event means 0.

    per_state_durations keeps the last occurrence of each name, while
    slowest/fastest/average consider every occurrence.
    """
    started_at: Optional[datetime] = None
    stopped_at: Optional[datetime] = None

    for event in events:
        if isinstance(event, ExecutionStartedEvent) and started_at is None:
            started_at = event.timestamp
        elif isinstance(event, ExecutionStoppedEvent) and stopped_at is None:
            stopped_at = event.timestamp

    total = 0
    if started_at is not None:
        end = stopped_at or (to_utc_datetime(now) if now else datetime.now(timezone.utc))
        total = elapsed_ms(started_at, end)

    intervals = pair_state_events(events)

    per_state: Dict[str, int] = {}
    for interval in intervals:
        per_state[interval.state_name] = interval.duration_ms

    slowest = fastest = None
    average = 0.0
    if intervals:
        # max/min return the first of equal durations
        slowest = max(intervals, key=lambda i: i.duration_ms).state_name
        fastest = min(intervals, key=lambda i: i.duration_ms).state_name
        average = sum(i.duration_ms for i in intervals) / len(intervals)

    summary = PerformanceSummary(
        total_execution_time=total,
        per_state_durations=per_state,
        slowest_state=slowest,
        fastest_state=fastest,
        average_state_execution_time=average,
    )

    logger.debug(
        f"Performance analysis: total={total}ms, avg={average}ms, "
        f"slowest={slowest}, fastest={fastest}"
    )
    return summary
