"""
Common exception classes
Custom exceptions used consistently across the verifier.

Usage:
    from sfn_verifier.common.exceptions import (
        ConditionTimeoutError, StepFunctionError, StateMachineNotFound
    )
"""
from typing import List, Optional


class VerifierError(Exception):
    """Base class for every sfn_verifier exception"""

    def __init__(self, message: str = None):
        self.message = message or self.__class__.__doc__ or "An error occurred"
        super().__init__(self.message)

    def to_dict(self):
        return {
            "error": self.__class__.__name__,
            "message": self.message,
        }


# ============================================================
# Polling
# ============================================================

class ConditionTimeoutError(VerifierError):
    """Condition was not met before the timeout elapsed"""

    def __init__(self, timeout_ms: int):
        super().__init__(f"Condition not met within {timeout_ms}ms timeout")
        self.timeout_ms = timeout_ms

    def to_dict(self):
        base_dict = super().to_dict()
        base_dict["timeoutMs"] = self.timeout_ms
        return base_dict


# ============================================================
# Step Functions
# ============================================================

class StepFunctionError(VerifierError):
    """Step Functions operation failed"""

    def __init__(
        self,
        message: str = None,
        operation: str = None,
        original_error: Optional[Exception] = None
    ):
        super().__init__(message or "Step Functions operation failed")
        self.operation = operation
        self.original_error = original_error

    def to_dict(self):
        base_dict = super().to_dict()
        base_dict.update({
            "operation": self.operation,
            "originalError": str(self.original_error) if self.original_error else None
        })
        return base_dict


class StateMachineNotFound(StepFunctionError):
    """State machine could not be found"""

    def __init__(self, state_machine_name: str, available: Optional[List[str]] = None):
        available_str = ", ".join(available) if available else "none"
        super().__init__(
            f'State machine "{state_machine_name}" not found. '
            f"Available state machines: {available_str}",
            operation="find_state_machine"
        )
        self.state_machine_name = state_machine_name
        self.available = available or []


class StepFunctionThrottled(StepFunctionError):
    """Step Functions API throttled the request"""

    def __init__(self, operation: str = None, original_error: Optional[Exception] = None):
        super().__init__(
            f"Step Functions throttled {operation or 'request'}",
            operation=operation,
            original_error=original_error
        )
