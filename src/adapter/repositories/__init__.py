from .booking_repository import SqlAlchemyBookingRepository
from .invoice_repository import SqlAlchemyInvoiceRepository
from .invoice_error_repository import SqlAlchemyInvoiceErrorRepository

__all__ = [
    "SqlAlchemyBookingRepository",
    "SqlAlchemyInvoiceRepository",
    "SqlAlchemyInvoiceErrorRepository",
]
