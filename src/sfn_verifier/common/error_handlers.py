"""
AWS exception translation
Converts botocore errors raised by Step Functions calls into verifier exceptions.

Usage:
    from sfn_verifier.common.error_handlers import handle_stepfunctions_error

    try:
        sfn.start_execution(...)
    except ClientError as e:
        raise handle_stepfunctions_error(e, operation="start_execution") from e
"""

from typing import Union

from botocore.exceptions import BotoCoreError, ClientError

from sfn_verifier.common.exceptions import StepFunctionError, StepFunctionThrottled
from sfn_verifier.common.logging_utils import get_logger

logger = get_logger(__name__)

THROTTLING_CODES = ("ThrottlingException", "TooManyRequestsException", "RequestLimitExceeded")


def handle_stepfunctions_error(
    error: Union[ClientError, BotoCoreError],
    operation: str,
    resource_arn: str = None
) -> Exception:
    """
    Translate a Step Functions ClientError or BotoCoreError into a StepFunctionError.

    Args:
        error: boto3 ClientError, or a BotoCoreError such as EndpointConnectionError
        operation: attempted operation (e.g. "start_execution")
        resource_arn: state machine or execution ARN, when known

    Returns:
        Exception: the matching verifier exception
    """
    if isinstance(error, ClientError):
        error_code = error.response.get('Error', {}).get('Code', 'Unknown')
        error_message = error.response.get('Error', {}).get('Message', str(error))
    else:
        error_code = type(error).__name__
        error_message = str(error)

    logger.error(
        f"Step Functions {operation} failed",
        extra={
            "service": "stepfunctions",
            "operation": operation,
            "error_code": error_code,
            "resource_arn": resource_arn
        }
    )

    if error_code in THROTTLING_CODES:
        return StepFunctionThrottled(operation=operation, original_error=error)

    target = f" ({resource_arn})" if resource_arn else ""
    return StepFunctionError(
        f"Step Functions {operation} failed{target}: {error_code}: {error_message}",
        operation=operation,
        original_error=error
    )
