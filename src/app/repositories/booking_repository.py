"""Booking Repository Interface

Defines the contract for the booking operations invoicing needs.
"""

from abc import ABC, abstractmethod
from typing import Optional, List
from src.domain.booking import Booking


class BookingRepository(ABC):
    """
    Repository interface for Booking persistence

    Bookings are owned by the booking-management system; invoicing reads
    them and only advances the status of finished bookings.
    """

    @abstractmethod
    async def create(self, booking: Booking) -> Booking:
        """
        Create a new booking

        Args:
            booking: Booking entity to persist

        Returns:
            Created Booking
        """
        pass

    @abstractmethod
    async def get_by_id(self, booking_id: str) -> Optional[Booking]:
        """
        Retrieve booking by ID

        Args:
            booking_id: Booking document identifier

        Returns:
            Booking if found, None otherwise
        """
        pass

    @abstractmethod
    async def get_redrive_candidates(self, limit: int = 100) -> List[Booking]:
        """
        Retrieve finished bookings for a re-drive sweep

        Bookings never recorded as failed come first, then those whose latest
        invoice error is oldest, so persistently failing bookings cannot
        crowd out the rest of the queue.

        Args:
            limit: Maximum number of bookings to return

        Returns:
            List of finished bookings
        """
        pass

    @abstractmethod
    async def mark_invoice_generated(self, booking_id: str, invoice_number: str) -> bool:
        """
        Advance a finished booking to "invoice generated"

        The update is conditional on the booking still being "finished", so a
        concurrent duplicate run cannot overwrite an invoice number.

        Args:
            booking_id: Booking document identifier
            invoice_number: Accepted invoice number

        Returns:
            True if the booking was advanced, False if it was no longer finished
        """
        pass
