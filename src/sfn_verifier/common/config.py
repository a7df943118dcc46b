"""
Step Functions service configuration.

Defaults come from constants; any field can be overridden by keyword or by
environment variable through StepFunctionConfig.from_env().
"""

import os
from typing import Any, Dict

from pydantic import BaseModel, ConfigDict, Field

from sfn_verifier.common.constants import PollingDefaults, StepFunctionDefaults


# Environment variable -> config field
ENV_OVERRIDES = {
    "SFN_VERIFIER_TIMEOUT_MS": "default_timeout_ms",
    "SFN_VERIFIER_POLL_INTERVAL_MS": "polling_interval_ms",
    "SFN_VERIFIER_MAX_EXECUTIONS": "max_executions_to_retrieve",
    "SFN_VERIFIER_RECENT_WINDOW_MS": "recent_execution_window_ms",
    "SFN_VERIFIER_MAX_RETRIES": "max_retry_attempts",
}


class StepFunctionConfig(BaseModel):
    """Configuration for StepFunctionService"""

    model_config = ConfigDict(frozen=True)

    default_timeout_ms: int = Field(default=PollingDefaults.TIMEOUT_MS, ge=0)
    polling_interval_ms: int = Field(default=PollingDefaults.INTERVAL_MS, ge=0)
    max_executions_to_retrieve: int = Field(
        default=StepFunctionDefaults.MAX_EXECUTIONS_TO_RETRIEVE, ge=1, le=1000
    )
    recent_execution_window_ms: int = Field(
        default=StepFunctionDefaults.RECENT_EXECUTION_WINDOW_MS, ge=0
    )
    max_retry_attempts: int = Field(default=StepFunctionDefaults.MAX_RETRY_ATTEMPTS, ge=1)

    @classmethod
    def from_env(cls, **overrides: Any) -> "StepFunctionConfig":
        """Build a config from SFN_VERIFIER_* env vars; keyword overrides win."""
        values: Dict[str, Any] = {}
        for env_var, field_name in ENV_OVERRIDES.items():
            raw = os.environ.get(env_var)
            if raw:
                values[field_name] = raw
        values.update(overrides)
        return cls(**values)
