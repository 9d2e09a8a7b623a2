"""Invoice Pipeline Wiring

Builds GenerateInvoice with its adapters for one database session. The
httpx-backed GST client is created once per process and passed in.
"""

from decimal import Decimal
from typing import Optional
from sqlmodel.ext.asyncio.session import AsyncSession
from src.adapter.repositories.booking_repository import SqlAlchemyBookingRepository
from src.adapter.repositories.invoice_repository import SqlAlchemyInvoiceRepository
from src.adapter.repositories.invoice_error_repository import SqlAlchemyInvoiceErrorRepository
from src.adapter.services.clock import SystemClock
from src.adapter.services.unit_of_work import SqlAlchemyUnitOfWork
from src.app.services.fiscal_authority_client import FiscalAuthorityClient
from src.app.services.retry_policy import RetryPolicy
from src.app.services.retrying_submitter import RetryingSubmitter
from src.app.use_cases.invoicing import ErrorRecorder, GenerateInvoice
from src.domain.invoice_number import InvoiceNumberGenerator

# Shared so the monotonic guard spans every run in the process
_number_generator = InvoiceNumberGenerator()


def create_generate_invoice(
    session: AsyncSession,
    fiscal_client: FiscalAuthorityClient,
    config,
    number_generator: Optional[InvoiceNumberGenerator] = None,
) -> GenerateInvoice:
    """
    Factory function to wire the invoice pipeline

    Args:
        session: Async database session for this run
        fiscal_client: Shared GST authority client
        config: ApplicationConfig (or compatible object)
        number_generator: Override for the process-wide generator

    Returns:
        Configured GenerateInvoice use case
    """
    uow = SqlAlchemyUnitOfWork(session)
    deadline = config.INVOICE_DEADLINE_SECONDS

    return GenerateInvoice(
        uow=uow,
        booking_repo=SqlAlchemyBookingRepository(session),
        invoice_repo=SqlAlchemyInvoiceRepository(session),
        submitter=RetryingSubmitter(fiscal_client, RetryPolicy.from_config(config)),
        error_recorder=ErrorRecorder(
            uow=uow,
            error_repo=SqlAlchemyInvoiceErrorRepository(session),
            max_attempts=int(config.ERROR_RECORD_MAX_ATTEMPTS),
        ),
        clock=SystemClock(),
        number_generator=number_generator or _number_generator,
        gst_rate=Decimal(str(config.GST_RATE)),
        deadline_seconds=float(deadline) if deadline is not None else None,
    )
