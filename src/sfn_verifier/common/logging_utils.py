"""
Structured logging utility module
JSON structured logging using AWS Lambda Powertools.

aws_lambda_powertools is imported lazily, on first logger request, so that
importing the analysis modules stays cheap.

Usage:
    from sfn_verifier.common.logging_utils import get_logger

    logger = get_logger(__name__)
    logger.info("Fetched history", extra={"execution_arn": arn})
"""

import os
import functools
from typing import Dict, Optional, TYPE_CHECKING

if TYPE_CHECKING:
    from aws_lambda_powertools import Logger


DEFAULT_SERVICE_NAME = "sfn-verifier"

_logger_instances: Dict[str, "Logger"] = {}

_powertools_loaded = False
_Logger = None


def _ensure_powertools_loaded():
    """Load AWS Lambda Powertools on first use"""
    global _powertools_loaded, _Logger

    if _powertools_loaded:
        return

    from aws_lambda_powertools import Logger

    _Logger = Logger
    _powertools_loaded = True


def get_logger(name: str = None, level: Optional[str] = None) -> "Logger":
    """
    Return a structured Logger instance.

    Args:
        name: logger name (default: this module)
        level: log level (default: LOG_LEVEL env var or INFO)

    Returns:
        Logger: AWS Lambda Powertools Logger instance
    """
    _ensure_powertools_loaded()

    if name is None:
        name = __name__

    if name in _logger_instances:
        return _logger_instances[name]

    log_level = level or os.getenv("LOG_LEVEL", "INFO")
    logger = _Logger(
        service=os.getenv("SFN_VERIFIER_SERVICE", DEFAULT_SERVICE_NAME),
        level=log_level,
    )

    _logger_instances[name] = logger
    return logger


def log_external_service_call(service_name: str, operation: str):
    """
    Decorator that logs an external service call.

    Args:
        service_name: service name (e.g. "stepfunctions")
        operation: operation name (e.g. "start_execution")

    Usage:
        @log_external_service_call("stepfunctions", "describe_execution")
        def get_execution_status(self, execution_arn):
            ...
    """
    def decorator(func):
        @functools.wraps(func)
        def wrapper(*args, **kwargs):
            logger = get_logger(func.__module__)

            logger.debug(
                f"Starting {service_name} {operation}",
                extra={
                    "service": service_name,
                    "operation": operation,
                    "function": func.__name__
                }
            )

            try:
                result = func(*args, **kwargs)
            except Exception as e:
                logger.error(
                    f"Failed {service_name} {operation}",
                    extra={
                        "service": service_name,
                        "operation": operation,
                        "status": "error",
                        "error_type": type(e).__name__,
                        "error_message": str(e)
                    }
                )
                raise

            logger.debug(
                f"Completed {service_name} {operation}",
                extra={
                    "service": service_name,
                    "operation": operation,
                    "status": "success"
                }
            )
            return result

        return wrapper
    return decorator


def log_verification_event(event_type: str, execution_arn: str = None, **context):
    """
    Log a verification outcome in structured form.

    Args:
        event_type: event type (e.g. "sla_verified", "state_output_verified")
        execution_arn: execution the verification ran against
        **context: extra context fields
    """
    logger = get_logger("verification_events")

    logger.info(
        f"Verification event: {event_type}",
        extra={
            "event_type": event_type,
            "event_category": "verification",
            "execution_arn": execution_arn,
            **context
        }
    )
