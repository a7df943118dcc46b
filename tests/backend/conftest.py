import os
import json
from datetime import datetime, timedelta, timezone

import pytest

# This file holds global configuration and history builders for all backend tests.

BASE_TIME = datetime(2024, 5, 1, 12, 0, 0, tzinfo=timezone.utc)


@pytest.fixture(scope="session", autouse=True)
def setup_global_test_environment():
    """Dummy credentials so boto3 never reaches a real account"""

    # AWS_PROFILE would make boto3 ignore the dummy credentials
    if "AWS_PROFILE" in os.environ:
        del os.environ["AWS_PROFILE"]

    os.environ["AWS_ACCESS_KEY_ID"] = "testing"
    os.environ["AWS_SECRET_ACCESS_KEY"] = "testing"
    os.environ["AWS_SECURITY_TOKEN"] = "testing"
    os.environ["AWS_SESSION_TOKEN"] = "testing"
    os.environ["AWS_DEFAULT_REGION"] = "us-east-1"
    os.environ["AWS_REGION"] = "us-east-1"

    yield


def _raw(payload):
    if payload is None or isinstance(payload, str):
        return payload
    return json.dumps(payload)


class HistoryBuilder:
    """Builds HistoryEvent lists with millisecond offsets from BASE_TIME."""

    def __init__(self):
        self.events = []

    @staticmethod
    def at(offset_ms):
        return BASE_TIME + timedelta(milliseconds=offset_ms)

    def started(self, offset_ms=0):
        from sfn_verifier.models import ExecutionStartedEvent
        self.events.append(ExecutionStartedEvent(timestamp=self.at(offset_ms)))
        return self

    def succeeded(self, offset_ms):
        from sfn_verifier.models import ExecutionStoppedEvent
        self.events.append(ExecutionStoppedEvent(timestamp=self.at(offset_ms), type="ExecutionSucceeded"))
        return self

    def stopped(self, offset_ms, event_type):
        from sfn_verifier.models import ExecutionStoppedEvent
        self.events.append(ExecutionStoppedEvent(timestamp=self.at(offset_ms), type=event_type))
        return self

    def entered(self, name, offset_ms, payload=None, event_type="TaskStateEntered"):
        from sfn_verifier.models import StateEnteredEvent
        self.events.append(StateEnteredEvent(
            timestamp=self.at(offset_ms), type=event_type, state_name=name, input_raw=_raw(payload)
        ))
        return self

    def exited(self, name, offset_ms, payload=None, event_type="TaskStateExited"):
        from sfn_verifier.models import StateExitedEvent
        self.events.append(StateExitedEvent(
            timestamp=self.at(offset_ms), type=event_type, state_name=name, output_raw=_raw(payload)
        ))
        return self

    def failed(self, name, offset_ms, event_type="TaskFailed"):
        from sfn_verifier.models import StateFailedEvent
        self.events.append(StateFailedEvent(
            timestamp=self.at(offset_ms), type=event_type, state_name=name, error="States.TaskFailed"
        ))
        return self

    def other(self, event_type, offset_ms):
        from sfn_verifier.models import OtherEvent
        self.events.append(OtherEvent(timestamp=self.at(offset_ms), type=event_type))
        return self

    def build(self):
        return list(self.events)


@pytest.fixture
def history():
    return HistoryBuilder()
