"""GST Authority Client Interface

Defines the contract for submitting invoices to the external GST authority.
"""

from abc import ABC, abstractmethod
from typing import Optional
from pydantic import BaseModel
from src.domain.invoice import Invoice


class SubmissionResult(BaseModel):
    """
    Outcome of a submission the authority answered

    Either accepted (authority confirmed receipt) or rejected with a reason.
    Transport and credential failures are raised instead of returned.
    """

    accepted: bool
    reference: Optional[str] = None
    reason: Optional[str] = None
    retryable: bool = False

    @classmethod
    def accept(cls, reference: Optional[str] = None) -> "SubmissionResult":
        return cls(accepted=True, reference=reference)

    @classmethod
    def reject(cls, reason: str, retryable: bool = False) -> "SubmissionResult":
        return cls(accepted=False, reason=reason, retryable=retryable)


class FiscalAuthorityClient(ABC):
    """
    Abstract GST authority client

    Implementations make exactly one outbound call per ``submit`` and never
    retry internally; retrying belongs to RetryingSubmitter.
    """

    @abstractmethod
    async def submit(self, invoice: Invoice, idempotency_key: str) -> SubmissionResult:
        """
        Submit an invoice to the GST authority

        Args:
            invoice: Invoice to submit
            idempotency_key: Stable key letting the authority drop duplicates

        Returns:
            SubmissionResult (accepted or rejected)

        Raises:
            TransportError: network failure, timeout, or 5xx
            AuthError: credentials rejected
        """
        pass
