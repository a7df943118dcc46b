"""
State input/output extraction and expected-output verification.
"""

from typing import Any, Dict, List, Mapping, Optional, Sequence

from sfn_verifier.common.logging_utils import get_logger
from sfn_verifier.models.history import HistoryEvent, StateEnteredEvent, StateExitedEvent
from sfn_verifier.models.results import OutputVerification, StateOutputRecord

logger = get_logger(__name__)


def _first_exit_named(events: Sequence[HistoryEvent], state_name: str) -> Optional[StateExitedEvent]:
    for event in events:
        if isinstance(event, StateExitedEvent) and event.state_name == state_name:
            return event
    return None


def get_state_output(
    events: Sequence[HistoryEvent],
    state_name: Optional[str] = None
) -> List[StateOutputRecord]:
    """
    One record per StateEntered event, optionally filtered by name.

    The output is taken from the first StateExited event with the same name
    anywhere in the history, not the exit that actually closes this entry.
    A looping state therefore reports the first iteration's output for every
    occurrence. States that never exited get an empty output.
    """
    records: List[StateOutputRecord] = []

    for event in events:
        if not isinstance(event, StateEnteredEvent):
            continue
        if state_name is not None and event.state_name != state_name:
            continue

        exited = _first_exit_named(events, event.state_name)
        records.append(StateOutputRecord(
            state_name=event.state_name,
            input=event.input_payload,
            output=exited.output_payload if exited else {},
            timestamp=event.timestamp,
            event_type=event.type,
        ))

    logger.debug(f"Extracted {len(records)} state output records", extra={"state_name": state_name})
    return records


def _json_equal(actual: Any, expected: Any) -> bool:
    """Deep equality with JSON typing: booleans never equal numbers."""
    if isinstance(actual, bool) or isinstance(expected, bool):
        return type(actual) is type(expected) and actual == expected
    if isinstance(actual, dict) and isinstance(expected, dict):
        return actual.keys() == expected.keys() and all(
            _json_equal(actual[key], expected[key]) for key in expected
        )
    if isinstance(actual, list) and isinstance(expected, list):
        return len(actual) == len(expected) and all(
            _json_equal(a, e) for a, e in zip(actual, expected)
        )
    if isinstance(actual, (dict, list)) or isinstance(expected, (dict, list)):
        return False
    return actual == expected


def compare_output(actual: Mapping[str, Any], expected: Mapping[str, Any]) -> OutputVerification:
    """
    Superset comparison: every expected key must be present with an equal
    value; extra actual keys are reported but never cause a mismatch.
    """
    missing_fields = [
        key for key, value in expected.items()
        if key not in actual or not _json_equal(actual[key], value)
    ]
    extra_fields = [key for key in actual if key not in expected]

    return OutputVerification(
        matches=not missing_fields,
        actual_output=dict(actual),
        missing_fields=missing_fields,
        extra_fields=extra_fields,
    )


def verify_state_output(
    events: Sequence[HistoryEvent],
    state_name: str,
    expected: Dict[str, Any]
) -> OutputVerification:
    """Verify the output recorded for state_name against expected fields."""
    records = get_state_output(events, state_name)
    record = next((r for r in records if r.state_name == state_name), None)

    if record is None:
        logger.info(f"State output not found for state: {state_name}")
        return OutputVerification(
            matches=False,
            actual_output={},
            missing_fields=list(expected.keys()),
            extra_fields=[],
        )

    verification = compare_output(record.output, expected)
    logger.info(
        f"State output verification: matches={verification.matches}, "
        f"missing={len(verification.missing_fields)}, extra={len(verification.extra_fields)}",
        extra={"state_name": state_name}
    )
    return verification
