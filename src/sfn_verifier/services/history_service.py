"""
Execution history source.

The analysis engine only needs ``get_history(execution_arn)`` returning events
in ascending timestamp order. StepFunctionsHistorySource implements it over
the Step Functions GetExecutionHistory API; tests and other backends can pass
any object with the same method.
"""

from typing import Any, Dict, Iterable, List, Optional, Protocol

from sfn_verifier.common.aws_clients import get_stepfunctions_client
from sfn_verifier.common.constants import EventTypes
from sfn_verifier.common.json_utils import to_utc_datetime
from sfn_verifier.common.logging_utils import get_logger, log_external_service_call
from sfn_verifier.models.history import (
    ExecutionStartedEvent,
    ExecutionStoppedEvent,
    HistoryEvent,
    OtherEvent,
    StateEnteredEvent,
    StateExitedEvent,
    StateFailedEvent,
)

logger = get_logger(__name__)


class HistorySource(Protocol):
    def get_history(self, execution_arn: str) -> List[HistoryEvent]:
        ...


def _as_int(value: Any) -> Optional[int]:
    try:
        return int(value) if value is not None else None
    except (TypeError, ValueError):
        return None


def _details(raw: Dict[str, Any], key: str) -> Dict[str, Any]:
    # Detail blocks can be missing or explicitly None
    value = raw.get(key)
    return value if isinstance(value, dict) else {}


def _as_str(value: Any) -> Optional[str]:
    return value if isinstance(value, str) else None


def parse_history_event(raw: Dict[str, Any], inherited_state_name: Optional[str] = None) -> HistoryEvent:
    """
    Translate one raw GetExecutionHistory event into a HistoryEvent.

    Never raises: unknown types and malformed detail blocks become OtherEvent
    or empty fields.
    """
    if not isinstance(raw, dict):
        raw = {}

    event_type = raw.get("type") if isinstance(raw.get("type"), str) else ""
    common = {
        "timestamp": to_utc_datetime(raw.get("timestamp")),
        "type": event_type,
        "event_id": _as_int(raw.get("id")),
        "previous_event_id": _as_int(raw.get("previousEventId")),
    }

    if event_type == EventTypes.EXECUTION_STARTED:
        details = _details(raw, "executionStartedEventDetails")
        return ExecutionStartedEvent(input_raw=_as_str(details.get("input")), **common)

    if event_type in EventTypes.EXECUTION_STOPPED:
        details = _details(raw, "executionSucceededEventDetails")
        return ExecutionStoppedEvent(output_raw=_as_str(details.get("output")), **common)

    if event_type.endswith(EventTypes.STATE_ENTERED_SUFFIX):
        details = _details(raw, "stateEnteredEventDetails")
        return StateEnteredEvent(
            state_name=_as_str(details.get("name")) or "",
            input_raw=_as_str(details.get("input")),
            **common
        )

    if event_type.endswith(EventTypes.STATE_EXITED_SUFFIX):
        details = _details(raw, "stateExitedEventDetails")
        return StateExitedEvent(
            state_name=_as_str(details.get("name")) or "",
            output_raw=_as_str(details.get("output")),
            **common
        )

    if event_type in EventTypes.STATE_FAILED:
        details = _details(raw, "taskFailedEventDetails") or _details(raw, "stateFailedEventDetails")
        return StateFailedEvent(
            state_name=_as_str(details.get("name")) or inherited_state_name,
            error=_as_str(details.get("error")),
            cause=_as_str(details.get("cause")),
            **common
        )

    return OtherEvent(**common)


def parse_history(raw_events: Iterable[Dict[str, Any]]) -> List[HistoryEvent]:
    """
    Translate a raw history, keeping its order.

    Events without a state name of their own (TaskScheduled, TaskFailed, ...)
    inherit one through their previousEventId chain.
    """
    names_by_id: Dict[int, str] = {}
    events: List[HistoryEvent] = []

    for raw in raw_events:
        raw = raw if isinstance(raw, dict) else {}
        previous_id = _as_int(raw.get("previousEventId"))
        inherited = names_by_id.get(previous_id) if previous_id is not None else None

        event = parse_history_event(raw, inherited_state_name=inherited)
        events.append(event)

        own_name = getattr(event, "state_name", None) or inherited
        if event.event_id is not None and own_name:
            names_by_id[event.event_id] = own_name

    return events


class StepFunctionsHistorySource:
    """HistorySource backed by boto3 GetExecutionHistory (ascending order)."""

    def __init__(self, sfn_client=None):
        self._client = sfn_client

    @property
    def client(self):
        if self._client is None:
            self._client = get_stepfunctions_client()
        return self._client

    @log_external_service_call("stepfunctions", "get_execution_history")
    def get_history(self, execution_arn: str) -> List[HistoryEvent]:
        paginator = self.client.get_paginator('get_execution_history')

        raw_events: List[Dict[str, Any]] = []
        for page in paginator.paginate(executionArn=execution_arn, reverseOrder=False):
            raw_events.extend(page.get('events', []))

        logger.info(
            f"Retrieved {len(raw_events)} execution history events",
            extra={"execution_arn": execution_arn}
        )
        return parse_history(raw_events)
