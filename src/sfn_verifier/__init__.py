"""
sfn_verifier
Verifies AWS Step Functions executions from BDD scenarios by analyzing their
execution history.
"""

__version__ = "0.1.0"
