"""
Constants and default settings shared across the verifier.

Usage:
    from sfn_verifier.common.constants import PollingDefaults, EventTypes
"""


class PollingDefaults:
    """Condition poller defaults (milliseconds)"""

    TIMEOUT_MS = 30000
    INTERVAL_MS = 1000


class StepFunctionDefaults:
    """Step Functions service defaults"""

    MAX_EXECUTIONS_TO_RETRIEVE = 10

    # Executions started within this window count as "recent" (5 minutes)
    RECENT_EXECUTION_WINDOW_MS = 5 * 60 * 1000

    MAX_RETRY_ATTEMPTS = 3
    RETRY_BASE_DELAY_SECONDS = 1.0


class ExecutionStatus:
    """DescribeExecution status values"""

    RUNNING = "RUNNING"
    SUCCEEDED = "SUCCEEDED"
    FAILED = "FAILED"
    TIMED_OUT = "TIMED_OUT"
    ABORTED = "ABORTED"

    TERMINAL = (SUCCEEDED, FAILED, TIMED_OUT, ABORTED)


class EventTypes:
    """Execution history event types"""

    EXECUTION_STARTED = "ExecutionStarted"
    EXECUTION_SUCCEEDED = "ExecutionSucceeded"

    EXECUTION_STOPPED = (
        "ExecutionSucceeded",
        "ExecutionFailed",
        "ExecutionTimedOut",
        "ExecutionAborted",
    )

    # Matched by suffix: TaskStateEntered, PassStateEntered, ChoiceStateEntered, ...
    STATE_ENTERED_SUFFIX = "StateEntered"
    STATE_EXITED_SUFFIX = "StateExited"

    STATE_FAILED = ("TaskFailed", "StateFailed")


class ColdStart:
    """Cold start estimate: fraction of total execution time"""

    ESTIMATE_RATIO = 0.1
