"""Invoice Re-drive Background Worker

Periodically re-runs invoice generation for bookings still in "finished",
picking up runs that failed or whose trigger never arrived.
Can be run as a standalone script or integrated with a scheduler.
"""

import asyncio
import logging
from decimal import Decimal
from typing import Optional
from sqlalchemy.ext.asyncio import create_async_engine
from sqlalchemy.orm import sessionmaker
from sqlmodel.ext.asyncio.session import AsyncSession

from config import ApplicationConfig
from src.adapter.repositories.booking_repository import SqlAlchemyBookingRepository
from src.adapter.services.fiscal_authority_client import create_fiscal_authority_client
from src.adapter.services.invoice_pipeline import create_generate_invoice
from src.app.services.fiscal_authority_client import FiscalAuthorityClient
from src.app.use_cases.invoicing import RedriveFinishedBookings, RedriveResultDTO
from src.domain.base import utc_now
from src.domain.errors import InvoicingError
from src.domain.invoice import Invoice
from src.domain.tax import TaxCalculator

logger = logging.getLogger(__name__)


class InvoiceRedriveWorker:
    """
    Background worker for re-driving un-invoiced bookings

    Features:
    - Sweeps bookings left in "finished" through the invoice pipeline
    - Logs failures for investigation (each is also stored as an invoice error)
    - Can run once or continuously
    - Configurable interval and batch size

    Usage:
        # Run once
        worker = InvoiceRedriveWorker()
        result = await worker.run_once()

        # Run continuously
        worker = InvoiceRedriveWorker()
        await worker.run_forever(interval_seconds=900)
    """

    def __init__(
        self,
        db_uri: Optional[str] = None,
        fiscal_client: Optional[FiscalAuthorityClient] = None,
        batch_size: Optional[int] = None,
    ):
        """
        Initialize the worker

        Args:
            db_uri: Database URI (defaults to ApplicationConfig.DB_URI)
            fiscal_client: GST authority client (defaults to one built from config)
            batch_size: Bookings per sweep (defaults to ApplicationConfig.REDRIVE_BATCH_SIZE)
        """
        self.db_uri = db_uri or ApplicationConfig.DB_URI
        self.batch_size = int(batch_size or ApplicationConfig.REDRIVE_BATCH_SIZE)
        self.fiscal_client = fiscal_client or create_fiscal_authority_client(ApplicationConfig)

        # Create engine and session factory
        self.engine = create_async_engine(self.db_uri, echo=False, future=True)
        self.async_session_factory = sessionmaker(
            self.engine, class_=AsyncSession, expire_on_commit=False, autoflush=False
        )

        logger.info(f"InvoiceRedriveWorker initialized with batch_size={self.batch_size}")

    async def run_once(self) -> RedriveResultDTO:
        """
        Run one re-drive sweep

        Returns:
            RedriveResultDTO with sweep results
        """
        if not ApplicationConfig.REDRIVE_ENABLED:
            logger.info("Invoice re-drive is disabled, skipping")
            return RedriveResultDTO(
                total_checked=0,
                generated=0,
                skipped=0,
                failed=0,
                failures=[],
                sweep_time=utc_now(),
                execution_time_ms=0,
            )

        async with self.async_session_factory() as session:
            use_case = RedriveFinishedBookings(
                booking_repo=SqlAlchemyBookingRepository(session),
                generate_invoice=create_generate_invoice(
                    session, self.fiscal_client, ApplicationConfig
                ),
                batch_size=self.batch_size,
            )

            result = await use_case.execute()

            if result.is_err():
                logger.error(f"Re-drive failed: {result.error.message}")
                raise RuntimeError(f"Re-drive failed: {result.error.message}")

            response = result.value

            if response.failed > 0:
                logger.error(f"ALERT: {response.failed} bookings still could not be invoiced!")
                for f in response.failures:
                    logger.error(f"  - Booking {f.booking_id}: [{f.code}] {f.message}")

            return response

    async def run_forever(self, interval_seconds: int = 900):
        """
        Run re-drive sweeps continuously at specified interval

        Args:
            interval_seconds: Seconds between sweeps (default: 15 minutes)
        """
        logger.info(f"Starting continuous invoice re-drive with {interval_seconds}s interval")

        while True:
            try:
                result = await self.run_once()
                logger.info(
                    f"Re-drive cycle complete. "
                    f"Checked {result.total_checked} bookings, "
                    f"generated {result.generated}, failed {result.failed} "
                    f"in {result.execution_time_ms}ms"
                )
            except Exception as e:
                logger.error(f"Re-drive cycle failed: {e}")

            await asyncio.sleep(interval_seconds)

    async def check_api(self) -> bool:
        """
        Submit a fixed sample invoice once to verify GST API connectivity

        Returns:
            True if the authority accepted the sample invoice
        """
        sample = Invoice.build(
            invoice_number="TEST-INV-001",
            booking_id="TEST-BOOKING",
            name="Test Customer",
            total_amount=Decimal("1000"),
            items=["Test Item 1", "Test Item 2"],
            gst=TaxCalculator.compute(Decimal("1000"), Decimal(str(ApplicationConfig.GST_RATE))),
            generated_at=utc_now(),
        )

        try:
            result = await self.fiscal_client.submit(sample, "test:TEST-INV-001")
        except InvoicingError as e:
            logger.error(f"Test GST API Integration Failed: {e.message}")
            return False

        if result.accepted:
            logger.info(f"Test GST API Integration Success: reference={result.reference}")
        else:
            logger.error(f"Test GST API Integration Rejected: {result.reason}")
        return result.accepted

    async def shutdown(self):
        """Cleanup resources"""
        await self.engine.dispose()
        aclose = getattr(self.fiscal_client, "aclose", None)
        if aclose is not None:
            await aclose()
        logger.info("InvoiceRedriveWorker shutdown complete")


async def main():
    """
    Entry point for running the worker as a standalone script

    Usage:
        # Run once
        python -m src.worker.invoice_redrive --once

        # Run continuously (default: every 15 minutes)
        python -m src.worker.invoice_redrive

        # Check GST API connectivity with a sample invoice
        python -m src.worker.invoice_redrive --check-api
    """
    import argparse

    logging.basicConfig(
        level=logging.INFO,
        format="%(asctime)s - %(name)s - %(levelname)s - %(message)s",
    )

    parser = argparse.ArgumentParser(description="Invoice Re-drive Worker")
    parser.add_argument(
        "--once", action="store_true", help="Run once and exit"
    )
    parser.add_argument(
        "--check-api", action="store_true", help="Submit a sample invoice and exit"
    )
    parser.add_argument(
        "--interval", type=int, default=ApplicationConfig.REDRIVE_INTERVAL_SECONDS,
        help="Interval between sweeps in seconds (default: 900)"
    )
    args = parser.parse_args()

    worker = InvoiceRedriveWorker()

    try:
        if args.check_api:
            ok = await worker.check_api()
            print(f"GST API check {'passed' if ok else 'failed'}")
        elif args.once:
            result = await worker.run_once()
            print(f"Re-drive complete:")
            print(f"  Bookings checked: {result.total_checked}")
            print(f"  Invoices generated: {result.generated}")
            print(f"  Failed: {result.failed}")
            print(f"  Execution time: {result.execution_time_ms}ms")
        else:
            await worker.run_forever(interval_seconds=args.interval)
    except KeyboardInterrupt:
        logger.info("Received shutdown signal")
    finally:
        await worker.shutdown()


if __name__ == "__main__":
    asyncio.run(main())
