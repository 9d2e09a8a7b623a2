from .unit_of_work import UnitOfWork
from .clock import Clock
from .fiscal_authority_client import FiscalAuthorityClient, SubmissionResult
from .retry_policy import RetryPolicy, is_retryable
from .retrying_submitter import RetryingSubmitter

__all__ = [
    "UnitOfWork",
    "Clock",
    "FiscalAuthorityClient",
    "SubmissionResult",
    "RetryPolicy",
    "is_retryable",
    "RetryingSubmitter",
]
