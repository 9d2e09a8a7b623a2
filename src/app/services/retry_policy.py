"""Retry Policy

Exponential backoff policy for GST authority submissions.

Delay before attempt k+1 is ``base_delay * 2 ** (k - 1)``; no delay follows
the final attempt. Total added latency is therefore bounded by
``base_delay * (2 ** (max_attempts - 1) - 1)``.
"""

from typing import Callable, List, Optional
from src.domain.errors import AuthError, InvoicingError, Rejected, TransportError


def is_retryable(error: Exception) -> bool:
    """Default predicate: transport failures and rejections marked retryable"""
    if isinstance(error, AuthError):
        return False
    if isinstance(error, TransportError):
        return True
    if isinstance(error, Rejected):
        return error.retryable
    return False


class RetryPolicy:
    """
    Retry parameters for RetryingSubmitter

    Args:
        max_attempts: Total attempts including the first (>= 1)
        base_delay: Delay in seconds after the first failed attempt
        retry_on: Predicate deciding whether a failure may be retried
    """

    def __init__(
        self,
        max_attempts: int = 3,
        base_delay: float = 5.0,
        retry_on: Optional[Callable[[InvoicingError], bool]] = None,
    ):
        if max_attempts < 1:
            raise ValueError("max_attempts must be at least 1")
        if base_delay < 0:
            raise ValueError("base_delay must be non-negative")

        self.max_attempts = max_attempts
        self.base_delay = base_delay
        self.retry_on = retry_on or is_retryable

    @classmethod
    def from_config(cls, config) -> "RetryPolicy":
        return cls(
            max_attempts=int(config.INVOICE_MAX_RETRIES),
            base_delay=int(config.INVOICE_BASE_RETRY_DELAY_MS) / 1000,
        )

    def delay_after(self, attempt: int) -> float:
        """Backoff delay after failed attempt number ``attempt`` (1-based)"""
        return self.base_delay * (2 ** (attempt - 1))

    def schedule(self) -> List[float]:
        """Every delay the policy can apply, in order"""
        return [self.delay_after(attempt) for attempt in range(1, self.max_attempts)]

    def max_total_delay(self) -> float:
        return sum(self.schedule())
