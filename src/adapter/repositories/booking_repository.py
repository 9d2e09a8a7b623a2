"""SQLAlchemy Booking Repository Implementation

Implements booking access using SQLAlchemy async session.
"""

from typing import Optional, List
from sqlalchemy import func, update
from sqlalchemy import select as sa_select
from sqlmodel import select
from sqlmodel.ext.asyncio.session import AsyncSession
from src.app.repositories.booking_repository import BookingRepository
from src.domain.base import utc_now
from src.domain.booking import Booking, BookingStatus
from src.domain.invoice_error import InvoiceError


class SqlAlchemyBookingRepository(BookingRepository):
    """
    SQLAlchemy implementation of BookingRepository

    Features:
    - Reads always reload the row, never the session's cached copy
    - Conditional status update (compare-and-set on status)
    """

    def __init__(self, session: AsyncSession):
        self.session = session

    async def create(self, booking: Booking) -> Booking:
        self.session.add(booking)
        await self.session.flush()
        await self.session.refresh(booking)
        return booking

    async def get_by_id(self, booking_id: str) -> Optional[Booking]:
        statement = (
            select(Booking)
            .where(Booking.id == booking_id)
            .execution_options(populate_existing=True)
        )
        result = await self.session.execute(statement)
        return result.scalar_one_or_none()

    async def get_redrive_candidates(self, limit: int = 100) -> List[Booking]:
        """
        Finished bookings ordered for a re-drive sweep

        Bookings with no recorded invoice error come first, then the rest by
        their most recent error, oldest first. A booking that keeps failing
        moves to the back after each attempt.
        """
        last_error = (
            sa_select(
                InvoiceError.booking_id.label("booking_id"),
                func.max(InvoiceError.timestamp).label("last_error_at"),
            )
            .group_by(InvoiceError.booking_id)
            .subquery()
        )
        statement = (
            select(Booking)
            .outerjoin(last_error, last_error.c.booking_id == Booking.id)
            .where(Booking.status == BookingStatus.FINISHED.value)
            .order_by(
                last_error.c.last_error_at.asc().nulls_first(),
                Booking.updated_at.asc(),
                Booking.id.asc(),
            )
            .limit(limit)
            .execution_options(populate_existing=True)
        )
        result = await self.session.execute(statement)
        return list(result.scalars().all())

    async def mark_invoice_generated(self, booking_id: str, invoice_number: str) -> bool:
        """
        Advance booking status only if it is still finished

        Single UPDATE ... WHERE status = 'finished', so two concurrent runs
        cannot both advance the same booking.
        """
        statement = (
            update(Booking)
            .where(Booking.id == booking_id)
            .where(Booking.status == BookingStatus.FINISHED.value)
            .values(
                status=BookingStatus.INVOICE_GENERATED.value,
                invoice_number=invoice_number,
                updated_at=utc_now(),
            )
            .execution_options(synchronize_session="fetch")
        )
        result = await self.session.execute(statement)
        return result.rowcount == 1
