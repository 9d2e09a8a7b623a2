from .booking_repository import BookingRepository
from .invoice_repository import InvoiceRepository
from .invoice_error_repository import InvoiceErrorRepository

__all__ = [
    "BookingRepository",
    "InvoiceRepository",
    "InvoiceErrorRepository",
]
