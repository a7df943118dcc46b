"""
Data flow between adjacent states.

Loss and corruption are heuristics over payload key sets, not integrity
checks:
- loss: a non-empty output followed by an empty input
- corruption: non-empty output and input sharing no key at all
Partial key overlap is a normal transformation and flags nothing.
"""

from typing import List, Sequence

from sfn_verifier.common.logging_utils import get_logger
from sfn_verifier.models.history import HistoryEvent, StateEnteredEvent, StateExitedEvent
from sfn_verifier.models.results import DataFlowAnalysis, DataFlowEdge, DataTransformation

logger = get_logger(__name__)


def analyze_data_flow(events: Sequence[HistoryEvent]) -> DataFlowAnalysis:
    """
    Build an edge for every StateExited event immediately followed by a
    StateEntered event (any names), when both names are known.

    data_loss / data_corruption are execution-wide and stay set once any
    edge trips them.
    """
    events = list(events)
    edges: List[DataFlowEdge] = []
    data_loss = False
    data_corruption = False

    for current, following in zip(events, events[1:]):
        if not (isinstance(current, StateExitedEvent) and isinstance(following, StateEnteredEvent)):
            continue
        if not current.state_name or not following.state_name:
            continue

        output = current.output_payload
        next_input = following.input_payload

        if output and not next_input:
            data_loss = True

        if output and next_input and not (output.keys() & next_input.keys()):
            data_corruption = True

        edges.append(DataFlowEdge(
            from_state=current.state_name,
            to_state=following.state_name,
            transformation=DataTransformation(output=output, input=next_input),
            timestamp=following.timestamp,
        ))

    logger.info(
        f"Data flow analysis: flows={len(edges)}, dataLoss={data_loss}, "
        f"dataCorruption={data_corruption}"
    )
    return DataFlowAnalysis(edges=edges, data_loss=data_loss, data_corruption=data_corruption)
