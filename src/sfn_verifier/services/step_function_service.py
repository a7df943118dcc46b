"""
Step Functions verification service.

Ties a HistorySource to the analysis functions so BDD steps can verify an
execution by ARN, and wraps the control-plane calls a scenario needs around
it (find, start, describe, list, definition checks).

Usage:
    service = StepFunctionService()
    arn = service.start_execution(service.find_state_machine("OrderPipeline"), {"id": 1})
    await service.wait_for_execution_status(arn)
    result = service.verify_execution_success(arn, ["Validate", "Persist"])
"""

import asyncio
import json
from datetime import datetime, timedelta, timezone
from typing import Any, Dict, Iterable, List, Optional, Sequence, Union

from botocore.exceptions import BotoCoreError, ClientError

from sfn_verifier.common.aws_clients import get_stepfunctions_client
from sfn_verifier.common.config import StepFunctionConfig
from sfn_verifier.common.constants import ExecutionStatus, StepFunctionDefaults
from sfn_verifier.common.error_handlers import handle_stepfunctions_error
from sfn_verifier.common.exceptions import (
    ConditionTimeoutError,
    StateMachineNotFound,
    StepFunctionError,
)
from sfn_verifier.common.json_utils import to_utc_datetime
from sfn_verifier.common.logging_utils import (
    get_logger,
    log_external_service_call,
    log_verification_event,
)
from sfn_verifier.common.retry_utils import wait_for_condition, with_retry_sync
from sfn_verifier.models.history import HistoryEvent
from sfn_verifier.models.results import (
    DataFlowAnalysis,
    DefinitionValidation,
    ExecutionDetails,
    ExecutionResult,
    OutputVerification,
    PerformanceSummary,
    SLAThresholds,
    SLAVerificationResult,
    StateOutputRecord,
)
from sfn_verifier.services import analysis
from sfn_verifier.services.history_service import HistorySource, StepFunctionsHistorySource

logger = get_logger(__name__)


class StepFunctionService:
    """Execution-ARN level verification on top of a HistorySource."""

    def __init__(
        self,
        history_source: Optional[HistorySource] = None,
        sfn_client=None,
        config: Optional[StepFunctionConfig] = None,
    ):
        self.config = config or StepFunctionConfig.from_env()
        self._client = sfn_client
        self.history_source = history_source or StepFunctionsHistorySource(sfn_client)

    @property
    def client(self):
        if self._client is None:
            self._client = get_stepfunctions_client()
        return self._client

    # =========================================================================
    # Control plane
    # =========================================================================

    @with_retry_sync(
        max_retries=lambda self: self.config.max_retry_attempts - 1,
        base_delay=StepFunctionDefaults.RETRY_BASE_DELAY_SECONDS,
    )
    def _call_with_retry(self, method_name: str, **params) -> Dict[str, Any]:
        return getattr(self.client, method_name)(**params)

    def _call(self, method_name: str, resource_arn: str = None, **params) -> Dict[str, Any]:
        try:
            return self._call_with_retry(method_name, **params)
        except (ClientError, BotoCoreError) as e:
            raise handle_stepfunctions_error(e, operation=method_name, resource_arn=resource_arn) from e

    @log_external_service_call("stepfunctions", "list_state_machines")
    def find_state_machine(self, state_machine_name: str) -> str:
        """
        Resolve a state machine name to its ARN.

        Raises:
            StateMachineNotFound: no state machine with that name exists
        """
        available: List[str] = []
        params: Dict[str, Any] = {}

        while True:
            response = self._call("list_state_machines", **params)
            for machine in response.get("stateMachines", []):
                if machine.get("name") == state_machine_name and machine.get("stateMachineArn"):
                    logger.info(f"Found state machine: {machine['stateMachineArn']}")
                    return machine["stateMachineArn"]
                available.append(machine.get("name", ""))

            next_token = response.get("nextToken")
            if not next_token:
                break
            params = {"nextToken": next_token}

        raise StateMachineNotFound(state_machine_name, available)

    @log_external_service_call("stepfunctions", "start_execution")
    def start_execution(self, state_machine_arn: str, execution_input: Dict[str, Any]) -> str:
        response = self._call(
            "start_execution",
            resource_arn=state_machine_arn,
            stateMachineArn=state_machine_arn,
            input=json.dumps(execution_input),
        )
        execution_arn = response.get("executionArn")
        if not execution_arn:
            raise StepFunctionError(
                "Failed to start execution: No execution ARN returned",
                operation="start_execution"
            )
        logger.info(f"Execution started: {execution_arn}")
        return execution_arn

    def get_execution_status(self, execution_arn: str) -> str:
        response = self._call("describe_execution", resource_arn=execution_arn, executionArn=execution_arn)
        return response.get("status", "")

    def list_executions(self, state_machine_name: str) -> List[ExecutionDetails]:
        """Most recent executions (up to max_executions_to_retrieve)."""
        state_machine_arn = self.find_state_machine(state_machine_name)
        response = self._call(
            "list_executions",
            resource_arn=state_machine_arn,
            stateMachineArn=state_machine_arn,
            maxResults=self.config.max_executions_to_retrieve,
        )
        executions = [
            ExecutionDetails(
                execution_arn=item.get("executionArn", ""),
                state_machine_arn=item.get("stateMachineArn", state_machine_arn),
                status=item.get("status", ""),
                start_date=item.get("startDate"),
                stop_date=item.get("stopDate"),
            )
            for item in response.get("executions", [])
            if item.get("executionArn")
        ]
        logger.info(f"Found {len(executions)} executions", extra={"state_machine": state_machine_name})
        return executions

    def track_executions(self, state_machine_name: str) -> List[ExecutionDetails]:
        """list_executions enriched with input/output from DescribeExecution."""
        tracked: List[ExecutionDetails] = []

        for execution in self.list_executions(state_machine_name):
            try:
                details = self._call(
                    "describe_execution",
                    resource_arn=execution.execution_arn,
                    executionArn=execution.execution_arn,
                )
            except StepFunctionError as e:
                logger.warning(f"Failed to get details for execution {execution.execution_arn}: {e}")
                tracked.append(execution)
                continue

            tracked.append(execution.model_copy(update={
                "input": details.get("input"),
                "output": details.get("output"),
            }))

        return tracked

    def _recent(self, executions: Iterable[ExecutionDetails]) -> List[ExecutionDetails]:
        cutoff = datetime.now(timezone.utc) - timedelta(milliseconds=self.config.recent_execution_window_ms)
        return [
            execution for execution in executions
            if execution.start_date is not None and to_utc_datetime(execution.start_date) > cutoff
        ]

    def check_recent_execution(self, state_machine_name: str) -> bool:
        """True if the state machine started an execution within the recent window."""
        try:
            recent = self._recent(self.list_executions(state_machine_name))
        except StepFunctionError as e:
            logger.warning(f"Error checking state machine execution: {e}")
            return False

        logger.info(f"Found {len(recent)} recent executions", extra={"state_machine": state_machine_name})
        return bool(recent)

    async def wait_for_state_machine_triggered(
        self,
        state_machine_name: str,
        timeout_ms: Optional[int] = None
    ) -> bool:
        """Poll until a recent execution shows up; False on timeout."""
        async def triggered() -> bool:
            executions = await asyncio.to_thread(self.track_executions, state_machine_name)
            return bool(self._recent(executions))

        try:
            await wait_for_condition(
                triggered,
                timeout_ms=self.config.default_timeout_ms if timeout_ms is None else timeout_ms,
                interval_ms=self.config.polling_interval_ms,
            )
        except ConditionTimeoutError:
            logger.info(f"State machine not triggered within timeout: {state_machine_name}")
            return False
        return True

    async def wait_for_execution_status(
        self,
        execution_arn: str,
        statuses: Sequence[str] = ExecutionStatus.TERMINAL,
        timeout_ms: Optional[int] = None
    ) -> str:
        """
        Poll DescribeExecution until the status is one of ``statuses``.

        Raises:
            ConditionTimeoutError: status not reached in time
        """
        observed: Dict[str, str] = {}

        async def reached() -> bool:
            observed["status"] = await asyncio.to_thread(self.get_execution_status, execution_arn)
            return observed["status"] in statuses

        await wait_for_condition(
            reached,
            timeout_ms=self.config.default_timeout_ms if timeout_ms is None else timeout_ms,
            interval_ms=self.config.polling_interval_ms,
        )
        return observed["status"]

    def verify_definition(self, state_machine_name: str) -> DefinitionValidation:
        """Structural checks on the Amazon States Language definition."""
        try:
            state_machine_arn = self.find_state_machine(state_machine_name)
            response = self._call(
                "describe_state_machine",
                resource_arn=state_machine_arn,
                stateMachineArn=state_machine_arn,
            )
            definition = json.loads(response.get("definition") or "{}")
        except (StepFunctionError, ValueError) as e:
            logger.warning(f"Error verifying state machine definition: {e}")
            return DefinitionValidation(is_valid=False, errors=[f"Error parsing definition: {e}"])

        if not isinstance(definition, dict):
            logger.warning(f"State machine definition is not a JSON object: {state_machine_name}")
            return DefinitionValidation(is_valid=False, errors=["Definition is not a JSON object"])

        errors: List[str] = []
        if not definition.get("StartAt"):
            errors.append("Missing StartAt state")

        states = definition.get("States") or {}
        if not states:
            errors.append("Missing States definition")
        elif not isinstance(states, dict):
            errors.append("States definition is not an object")
            states = {}

        has_end_states = any(
            state.get("End") is True or state.get("Type") in ("Succeed", "Fail")
            for state in states.values()
            if isinstance(state, dict)
        )

        return DefinitionValidation(
            is_valid=not errors,
            has_start_state=bool(definition.get("StartAt")),
            has_end_states=has_end_states,
            state_count=len(states),
            errors=errors,
        )

    # =========================================================================
    # History analysis
    # =========================================================================

    def get_execution_history(self, execution_arn: str) -> List[HistoryEvent]:
        return self.history_source.get_history(execution_arn)

    def verify_execution_success(
        self,
        execution_arn: str,
        expected_states: Iterable[str] = ()
    ) -> ExecutionResult:
        result = analysis.classify_execution(self.get_execution_history(execution_arn), expected_states)
        log_verification_event("execution_success_verified", execution_arn, success=result.success)
        return result

    def check_performance(self, execution_arn: str, now: Optional[datetime] = None) -> PerformanceSummary:
        return analysis.analyze_performance(self.get_execution_history(execution_arn), now=now)

    def get_state_output(self, execution_arn: str, state_name: Optional[str] = None) -> List[StateOutputRecord]:
        return analysis.get_state_output(self.get_execution_history(execution_arn), state_name)

    def verify_state_output(
        self,
        execution_arn: str,
        state_name: str,
        expected_output: Dict[str, Any]
    ) -> OutputVerification:
        verification = analysis.verify_state_output(
            self.get_execution_history(execution_arn), state_name, expected_output
        )
        log_verification_event(
            "state_output_verified", execution_arn,
            state_name=state_name, matches=verification.matches
        )
        return verification

    def get_data_flow(self, execution_arn: str) -> DataFlowAnalysis:
        return analysis.analyze_data_flow(self.get_execution_history(execution_arn))

    def verify_slas(
        self,
        execution_arn: str,
        thresholds: Union[SLAThresholds, Dict[str, Any]],
        now: Optional[datetime] = None
    ) -> SLAVerificationResult:
        if not isinstance(thresholds, SLAThresholds):
            thresholds = SLAThresholds.model_validate(thresholds)
        result = analysis.verify_slas(self.check_performance(execution_arn, now=now), thresholds)
        log_verification_event(
            "sla_verified", execution_arn,
            meets_slas=result.meets_slas, violations=len(result.violations)
        )
        return result
