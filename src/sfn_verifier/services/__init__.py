"""
Services package.
History sources, the analysis engine and the execution-ARN facade.
"""

from sfn_verifier.services.history_service import (
    HistorySource,
    StepFunctionsHistorySource,
    parse_history,
    parse_history_event,
)
from sfn_verifier.services.step_function_service import StepFunctionService

__all__ = [
    "HistorySource",
    "StepFunctionsHistorySource",
    "parse_history",
    "parse_history_event",
    "StepFunctionService",
]
