"""
Pairs StateEntered / StateExited events into StateInterval records.
"""

from typing import Dict, List, Sequence

from sfn_verifier.models.history import HistoryEvent, StateEnteredEvent, StateExitedEvent
from sfn_verifier.models.results import StateInterval


def pair_state_events(events: Sequence[HistoryEvent]) -> List[StateInterval]:
    """
    Single left-to-right scan producing one interval per closed occurrence.

    - An entered event opens an entry keyed by state name. Re-entering a name
      that is still open replaces the earlier entry (no concurrent tracking).
    - The next exited event with that name closes it.
    - Exits without an open entry are ignored; entries never closed are
      dropped.

    Repeated occurrences (loops, retries) each yield their own interval, in
    the order they closed.
    """
    open_entries: Dict[str, StateEnteredEvent] = {}
    intervals: List[StateInterval] = []

    for event in events:
        if isinstance(event, StateEnteredEvent):
            open_entries[event.state_name] = event

        elif isinstance(event, StateExitedEvent):
            entered = open_entries.pop(event.state_name, None)
            if entered is None:
                continue
            intervals.append(StateInterval(
                state_name=event.state_name,
                entered_at=entered.timestamp,
                exited_at=event.timestamp,
                input_payload=entered.input_payload,
                output_payload=event.output_payload,
            ))

    return intervals
