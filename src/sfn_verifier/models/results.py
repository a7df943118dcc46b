"""
Derived analysis results.

Every model here is recomputed per call from a freshly fetched history; none
of them is cached or persisted. Durations are in milliseconds.
"""

from datetime import datetime
from typing import Any, Dict, List, Optional

from pydantic import BaseModel, ConfigDict, Field
from pydantic.alias_generators import to_camel

from sfn_verifier.common.json_utils import elapsed_ms


class StateInterval(BaseModel):
    """One entered -> exited occurrence of a named state."""

    state_name: str
    entered_at: datetime
    exited_at: datetime
    input_payload: Dict[str, Any] = Field(default_factory=dict)
    output_payload: Dict[str, Any] = Field(default_factory=dict)

    @property
    def duration_ms(self) -> int:
        return elapsed_ms(self.entered_at, self.exited_at)


class PerformanceSummary(BaseModel):
    total_execution_time: int = 0
    per_state_durations: Dict[str, int] = Field(default_factory=dict)
    slowest_state: Optional[str] = None
    fastest_state: Optional[str] = None
    average_state_execution_time: float = 0


class SLAThresholds(BaseModel):
    """
    None means "not checked".

    Accepts snake_case or camelCase keys; unknown keys are rejected so a
    misspelled threshold cannot silently disable a check.
    """

    model_config = ConfigDict(extra="forbid", alias_generator=to_camel, populate_by_name=True)

    max_total_execution_time: Optional[float] = None
    max_state_execution_time: Optional[float] = None
    max_cold_start_time: Optional[float] = None


class SLAMetrics(BaseModel):
    total_execution_time: float = 0
    max_state_execution_time: float = 0
    cold_start_time: float = 0


class SLAVerificationResult(BaseModel):
    meets_slas: bool
    violations: List[str] = Field(default_factory=list)
    metrics: SLAMetrics = Field(default_factory=SLAMetrics)


class DataTransformation(BaseModel):
    output: Dict[str, Any] = Field(default_factory=dict)
    input: Dict[str, Any] = Field(default_factory=dict)


class DataFlowEdge(BaseModel):
    from_state: str
    to_state: str
    transformation: DataTransformation
    timestamp: datetime


class DataFlowAnalysis(BaseModel):
    edges: List[DataFlowEdge] = Field(default_factory=list)
    data_loss: bool = False
    data_corruption: bool = False


class StateOutputRecord(BaseModel):
    state_name: str
    input: Dict[str, Any] = Field(default_factory=dict)
    output: Dict[str, Any] = Field(default_factory=dict)
    timestamp: datetime
    event_type: str


class OutputVerification(BaseModel):
    matches: bool
    actual_output: Dict[str, Any] = Field(default_factory=dict)
    missing_fields: List[str] = Field(default_factory=list)
    extra_fields: List[str] = Field(default_factory=list)


class ExecutionResult(BaseModel):
    success: bool
    completed_states: List[str] = Field(default_factory=list)
    failed_states: List[str] = Field(default_factory=list)
    execution_time: int = 0


class ExecutionDetails(BaseModel):
    """One row of ListExecutions, enriched by DescribeExecution when available."""

    execution_arn: str
    state_machine_arn: str = ""
    status: str = ""
    start_date: Optional[datetime] = None
    stop_date: Optional[datetime] = None
    input: Optional[str] = None
    output: Optional[str] = None


class DefinitionValidation(BaseModel):
    is_valid: bool
    has_start_state: bool = False
    has_end_states: bool = False
    state_count: int = 0
    errors: List[str] = Field(default_factory=list)
