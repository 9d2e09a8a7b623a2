"""Invoice Error Repository Interface

Defines the contract for the append-only invoice error log.
"""

from abc import ABC, abstractmethod
from typing import List
from src.domain.invoice_error import InvoiceError


class InvoiceErrorRepository(ABC):
    """
    Repository interface for InvoiceError persistence

    Append-only: records are never updated or deleted here.
    """

    @abstractmethod
    async def create(self, error: InvoiceError) -> InvoiceError:
        """
        Append a new error record

        Args:
            error: InvoiceError entity to persist

        Returns:
            Created InvoiceError with generated ID and server timestamp
        """
        pass

    @abstractmethod
    async def get_by_booking_id(self, booking_id: str) -> List[InvoiceError]:
        """
        Retrieve error records for a booking, oldest first

        Args:
            booking_id: Booking document identifier

        Returns:
            List of error records
        """
        pass
