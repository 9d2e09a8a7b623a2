"""SQLAlchemy Invoice Error Repository Implementation

Append-only persistence for invoice failures.
"""

from typing import List
from sqlalchemy import func
from sqlmodel import select
from sqlmodel.ext.asyncio.session import AsyncSession
from src.app.repositories.invoice_error_repository import InvoiceErrorRepository
from src.domain.invoice_error import InvoiceError


class SqlAlchemyInvoiceErrorRepository(InvoiceErrorRepository):
    def __init__(self, session: AsyncSession):
        self.session = session

    async def create(self, error: InvoiceError) -> InvoiceError:
        """
        Append an error record

        The timestamp is rendered as the database clock inside the INSERT and
        loaded back by the refresh.
        """
        error.timestamp = func.now()
        self.session.add(error)
        await self.session.flush()
        await self.session.refresh(error)
        return error

    async def get_by_booking_id(self, booking_id: str) -> List[InvoiceError]:
        statement = (
            select(InvoiceError)
            .where(InvoiceError.booking_id == booking_id)
            .order_by(InvoiceError.id.asc())
        )
        result = await self.session.execute(statement)
        return list(result.scalars().all())
