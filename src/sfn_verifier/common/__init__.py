"""
Common utility module
Logging, configuration, AWS clients, exceptions and polling shared by the services.
"""

from sfn_verifier.common.aws_clients import get_stepfunctions_client
from sfn_verifier.common.config import StepFunctionConfig
from sfn_verifier.common.exceptions import (
    VerifierError,
    ConditionTimeoutError,
    StepFunctionError,
    StateMachineNotFound,
    StepFunctionThrottled,
)
from sfn_verifier.common.json_utils import parse_json_object
from sfn_verifier.common.retry_utils import (
    wait_for_condition,
    wait_for_condition_sync,
    with_retry_sync,
    is_retryable,
)

__all__ = [
    "get_stepfunctions_client",
    "StepFunctionConfig",
    "VerifierError",
    "ConditionTimeoutError",
    "StepFunctionError",
    "StateMachineNotFound",
    "StepFunctionThrottled",
    "parse_json_object",
    "wait_for_condition",
    "wait_for_condition_sync",
    "with_retry_sync",
    "is_retryable",
]
