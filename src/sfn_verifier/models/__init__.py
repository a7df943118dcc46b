"""
Models package.
Pydantic models for execution history events and the facts derived from them.
"""

from sfn_verifier.models.history import (
    HistoryEvent,
    ExecutionStartedEvent,
    ExecutionStoppedEvent,
    StateEnteredEvent,
    StateExitedEvent,
    StateFailedEvent,
    OtherEvent,
)

from sfn_verifier.models.results import (
    StateInterval,
    PerformanceSummary,
    SLAThresholds,
    SLAMetrics,
    SLAVerificationResult,
    DataTransformation,
    DataFlowEdge,
    DataFlowAnalysis,
    StateOutputRecord,
    OutputVerification,
    ExecutionResult,
    ExecutionDetails,
    DefinitionValidation,
)

__all__ = [
    # History events
    "HistoryEvent",
    "ExecutionStartedEvent",
    "ExecutionStoppedEvent",
    "StateEnteredEvent",
    "StateExitedEvent",
    "StateFailedEvent",
    "OtherEvent",
    # Derived results
    "StateInterval",
    "PerformanceSummary",
    "SLAThresholds",
    "SLAMetrics",
    "SLAVerificationResult",
    "DataTransformation",
    "DataFlowEdge",
    "DataFlowAnalysis",
    "StateOutputRecord",
    "OutputVerification",
    "ExecutionResult",
    "ExecutionDetails",
    "DefinitionValidation",
]
