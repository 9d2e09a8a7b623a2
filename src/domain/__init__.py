from .base import BaseModel
from .booking import Booking, BookingStatus
from .invoice import Invoice
from .invoice_error import InvoiceError
from .invoice_number import InvoiceNumberGenerator
from .tax import TaxBreakdown, TaxCalculator
from .errors import (
    InvoicingError,
    InvalidAmount,
    TransportError,
    AuthError,
    Rejected,
    ExhaustedRetries,
    DeadlineExceeded,
    ErrorRecordingFailed,
)

__all__ = [
    "BaseModel",
    "Booking",
    "BookingStatus",
    "Invoice",
    "InvoiceError",
    "InvoiceNumberGenerator",
    "TaxBreakdown",
    "TaxCalculator",
    "InvoicingError",
    "InvalidAmount",
    "TransportError",
    "AuthError",
    "Rejected",
    "ExhaustedRetries",
    "DeadlineExceeded",
    "ErrorRecordingFailed",
]
