"""
Services Package - relay business logic

This package provides the single-attempt executor, the output policy, and
the failover controller that orchestrates them for each inbound request.

Reference Documents:
- GUIDELINES pp. 211: Service layers for orchestrating foundation models
"""

from src.services.executor import (
    AttemptFailure,
    AttemptResult,
    AttemptSuccess,
    RequestExecutor,
    extract_reply,
    normalize_error,
)
from src.services.failover import FailoverController, FailoverOutcome, FailoverState
from src.services.output_policy import (
    AllowAllValidator,
    EnglishOnlyValidator,
    OutputValidator,
)

__all__ = [
    "AttemptFailure",
    "AttemptResult",
    "AttemptSuccess",
    "RequestExecutor",
    "extract_reply",
    "normalize_error",
    "FailoverController",
    "FailoverOutcome",
    "FailoverState",
    "OutputValidator",
    "EnglishOnlyValidator",
    "AllowAllValidator",
]
