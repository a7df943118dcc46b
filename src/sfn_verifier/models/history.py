"""
Execution history event models.

History events are a tagged union over ``kind``. Each variant only exposes
the fields that event type guarantees; events the verifier does not interpret
collapse into OtherEvent so a malformed or unfamiliar event never breaks an
analysis.
"""

from datetime import datetime
from typing import Annotated, Any, Dict, Literal, Optional, Union

from pydantic import BaseModel, ConfigDict, Field, field_validator

from sfn_verifier.common.constants import EventTypes
from sfn_verifier.common.json_utils import parse_json_object, to_utc_datetime


class _BaseEvent(BaseModel):
    model_config = ConfigDict(frozen=True)

    timestamp: datetime
    type: str
    event_id: Optional[int] = None
    previous_event_id: Optional[int] = None

    @field_validator("timestamp")
    @classmethod
    def _as_utc(cls, value: datetime) -> datetime:
        return to_utc_datetime(value)


class ExecutionStartedEvent(_BaseEvent):
    kind: Literal["execution_started"] = "execution_started"
    type: str = EventTypes.EXECUTION_STARTED
    input_raw: Optional[str] = None


class ExecutionStoppedEvent(_BaseEvent):
    """ExecutionSucceeded / ExecutionFailed / ExecutionTimedOut / ExecutionAborted"""

    kind: Literal["execution_stopped"] = "execution_stopped"
    type: str = EventTypes.EXECUTION_SUCCEEDED
    output_raw: Optional[str] = None

    @property
    def succeeded(self) -> bool:
        return self.type == EventTypes.EXECUTION_SUCCEEDED


class StateEnteredEvent(_BaseEvent):
    kind: Literal["state_entered"] = "state_entered"
    type: str = "StateEntered"
    state_name: str = ""
    input_raw: Optional[str] = None

    @property
    def input_payload(self) -> Dict[str, Any]:
        return parse_json_object(self.input_raw)


class StateExitedEvent(_BaseEvent):
    kind: Literal["state_exited"] = "state_exited"
    type: str = "StateExited"
    state_name: str = ""
    output_raw: Optional[str] = None

    @property
    def output_payload(self) -> Dict[str, Any]:
        return parse_json_object(self.output_raw)


class StateFailedEvent(_BaseEvent):
    """TaskFailed / StateFailed"""

    kind: Literal["state_failed"] = "state_failed"
    type: str = "TaskFailed"
    state_name: Optional[str] = None
    error: Optional[str] = None
    cause: Optional[str] = None


class OtherEvent(_BaseEvent):
    kind: Literal["other"] = "other"


HistoryEvent = Annotated[
    Union[
        ExecutionStartedEvent,
        ExecutionStoppedEvent,
        StateEnteredEvent,
        StateExitedEvent,
        StateFailedEvent,
        OtherEvent,
    ],
    Field(discriminator="kind"),
]
