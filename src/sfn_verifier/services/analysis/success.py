"""
Execution success classification.
"""

from datetime import datetime
from typing import Iterable, List, Optional, Sequence

from sfn_verifier.common.json_utils import elapsed_ms
from sfn_verifier.common.logging_utils import get_logger
from sfn_verifier.models.history import (
    ExecutionStartedEvent,
    ExecutionStoppedEvent,
    HistoryEvent,
    StateEnteredEvent,
    StateFailedEvent,
)
from sfn_verifier.models.results import ExecutionResult

logger = get_logger(__name__)


def classify_execution(
    events: Sequence[HistoryEvent],
    expected_states: Iterable[str] = ()
) -> ExecutionResult:
    """
    Classify an execution from a single scan of its history.

    Entering a state counts as completing it, so a state that entered but
    never exited is still listed in completed_states.
    """
    expected = list(expected_states)
    completed_states: List[str] = []
    failed_states: List[str] = []
    started_at: Optional[datetime] = None
    succeeded_at: Optional[datetime] = None

    for event in events:
        if isinstance(event, ExecutionStartedEvent):
            started_at = event.timestamp
        elif isinstance(event, ExecutionStoppedEvent):
            if event.succeeded:
                succeeded_at = event.timestamp
        elif isinstance(event, StateEnteredEvent):
            if event.state_name:
                completed_states.append(event.state_name)
        elif isinstance(event, StateFailedEvent):
            if event.state_name:
                failed_states.append(event.state_name)

    execution_time = 0
    if started_at is not None and succeeded_at is not None:
        execution_time = elapsed_ms(started_at, succeeded_at)

    success = not failed_states and (
        not expected or all(state in completed_states for state in expected)
    )

    logger.info(
        f"Execution verification result: success={success}, completed={len(completed_states)}, "
        f"failed={len(failed_states)}, time={execution_time}ms"
    )
    return ExecutionResult(
        success=success,
        completed_states=completed_states,
        failed_states=failed_states,
        execution_time=execution_time,
    )
