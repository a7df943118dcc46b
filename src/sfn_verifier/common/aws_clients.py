"""
Shared AWS client module
Boto3 clients are created once and reused.

Usage:
    from sfn_verifier.common.aws_clients import get_stepfunctions_client
"""

import os
import logging
import boto3
from typing import Any, Optional

logger = logging.getLogger(__name__)

_stepfunctions_client: Optional[Any] = None


def get_stepfunctions_client():
    """
    Step Functions client singleton

    Region comes from AWS_REGION / AWS_DEFAULT_REGION when set.

    Returns:
        boto3.client('stepfunctions')
    """
    global _stepfunctions_client
    if _stepfunctions_client is None:
        region = os.environ.get("AWS_REGION") or os.environ.get("AWS_DEFAULT_REGION")
        _stepfunctions_client = boto3.client('stepfunctions', region_name=region)
        logger.debug("Step Functions client initialized")
    return _stepfunctions_client


def reset_clients():
    """Drop cached clients (tests re-create them inside moto contexts)."""
    global _stepfunctions_client
    _stepfunctions_client = None
