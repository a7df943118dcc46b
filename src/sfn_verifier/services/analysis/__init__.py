"""
Execution history analysis.
Pure functions over an already fetched, ordered list of HistoryEvent.
"""

from sfn_verifier.services.analysis.pairing import pair_state_events
from sfn_verifier.services.analysis.performance import analyze_performance
from sfn_verifier.services.analysis.state_output import (
    compare_output,
    get_state_output,
    verify_state_output,
)
from sfn_verifier.services.analysis.data_flow import analyze_data_flow
from sfn_verifier.services.analysis.sla import estimate_cold_start, verify_slas
from sfn_verifier.services.analysis.success import classify_execution

__all__ = [
    "pair_state_events",
    "analyze_performance",
    "compare_output",
    "get_state_output",
    "verify_state_output",
    "analyze_data_flow",
    "estimate_cold_start",
    "verify_slas",
    "classify_execution",
]
