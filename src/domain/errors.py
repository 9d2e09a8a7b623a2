"""Invoicing Error Taxonomy

Closed set of failures raised while turning a finished booking into a
submitted GST invoice. Every variant carries a stable ``code`` that use cases
copy into ``libs.result.Error`` and the API maps to an HTTP status.
"""

from typing import Optional


class InvoicingError(Exception):
    """Base class for all invoicing failures"""

    code = "INVOICING_ERROR"

    def __init__(self, message: str):
        super().__init__(message)
        self.message = message


class InvalidAmount(InvoicingError):
    """Booking total is missing, negative, or the tax rate is out of range"""

    code = "INVALID_AMOUNT"

    def __init__(self, message: str, amount=None):
        super().__init__(message)
        self.amount = amount


class TransportError(InvoicingError):
    """Network failure, timeout, or 5xx from the fiscal authority (retryable)"""

    code = "TRANSPORT_ERROR"

    def __init__(self, message: str, status_code: Optional[int] = None):
        super().__init__(message)
        self.status_code = status_code


class AuthError(InvoicingError):
    """Credentials rejected by the fiscal authority (fatal, never retried)"""

    code = "FISCAL_AUTH_FAILED"

    def __init__(self, message: str, status_code: Optional[int] = None):
        super().__init__(message)
        self.status_code = status_code


class Rejected(InvoicingError):
    """Fiscal authority explicitly declined the invoice"""

    code = "INVOICE_REJECTED"

    def __init__(self, reason: str, retryable: bool = False):
        super().__init__(f"Invoice rejected by GST authority: {reason}")
        self.reason = reason
        self.retryable = retryable


class ExhaustedRetries(InvoicingError):
    """Retry budget consumed without an accepted submission"""

    code = "RETRIES_EXHAUSTED"

    def __init__(self, attempts: int, last_error: InvoicingError):
        super().__init__(
            f"Max retries reached after {attempts} attempts: {last_error.message}"
        )
        self.attempts = attempts
        self.last_error = last_error


class DeadlineExceeded(InvoicingError):
    """Execution deadline hit while the submission was still in flight"""

    code = "DEADLINE_EXCEEDED"

    def __init__(self, seconds: float):
        super().__init__(f"Invoice generation exceeded deadline of {seconds}s")
        self.seconds = seconds


class ErrorRecordingFailed(InvoicingError):
    """Failure details could not be persisted for manual intervention"""

    code = "ERROR_RECORDING_FAILED"

    def __init__(self, booking_id: str, attempts: int):
        super().__init__(
            f"Could not store invoice error for booking {booking_id} "
            f"after {attempts} attempts"
        )
        self.booking_id = booking_id
        self.attempts = attempts
