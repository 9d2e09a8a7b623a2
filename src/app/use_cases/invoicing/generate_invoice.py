"""GenerateInvoice Use Case

Turns a booking that reached "finished" into a GST invoice, submits it to
the GST authority and records the outcome.
"""

import asyncio
import logging
from decimal import Decimal
from typing import Optional
from libs.result import Result, Return, Error
from src.app.services.unit_of_work import UnitOfWork
from src.app.services.clock import Clock
from src.app.services.retrying_submitter import RetryingSubmitter
from src.app.repositories.booking_repository import BookingRepository
from src.app.repositories.invoice_repository import InvoiceRepository
from src.domain.booking import BookingStatus
from src.domain.errors import (
    AuthError,
    DeadlineExceeded,
    ExhaustedRetries,
    InvalidAmount,
    Rejected,
    TransportError,
)
from src.domain.invoice import Invoice
from src.domain.invoice_number import InvoiceNumberGenerator
from src.domain.tax import TaxCalculator
from .dtos import BookingWriteEventDTO, GstDTO, InvoiceOutcomeDTO
from .error_recorder import ErrorRecorder

logger = logging.getLogger(__name__)

OUTCOME_GENERATED = "generated"
OUTCOME_SKIPPED = "skipped"


def idempotency_key_for(booking_id: str) -> str:
    """Same key for every run of a booking, so the authority can drop duplicates"""
    return f"booking:{booking_id}"


class GenerateInvoice:
    """
    Use Case: Generate and submit the GST invoice for a finished booking

    Business Rules:
    1. Only events whose new status is "finished" are acted upon
    2. A booking no longer "finished" in the store is never invoiced again
    3. Missing or negative totals are data errors (recorded, never submitted)
    4. IGST = total GST; SGST and CGST are exact halves (odd paisa to SGST)
    5. generated_at comes from the service clock at submission time
    6. Every failure is recorded before the run reports it; the booking
       stays "finished" so a later sweep can retry it

    Flow:
    1. Check event status and current booking status
    2. Compute GST breakdown
    3. Generate invoice number and build the invoice
    4. Submit with retry (bounded by the optional deadline)
    5. Accepted: mark booking "invoice generated", store invoice, commit
    6. Otherwise: record error, return failure
    """

    def __init__(
        self,
        uow: UnitOfWork,
        booking_repo: BookingRepository,
        invoice_repo: InvoiceRepository,
        submitter: RetryingSubmitter,
        error_recorder: ErrorRecorder,
        clock: Clock,
        number_generator: InvoiceNumberGenerator,
        gst_rate: Decimal = Decimal("0.18"),
        deadline_seconds: Optional[float] = None,
    ):
        self.uow = uow
        self.booking_repo = booking_repo
        self.invoice_repo = invoice_repo
        self.submitter = submitter
        self.error_recorder = error_recorder
        self.clock = clock
        self.number_generator = number_generator
        self.gst_rate = Decimal(str(gst_rate))
        self.deadline_seconds = deadline_seconds

    async def execute(self, event: BookingWriteEventDTO) -> Result[InvoiceOutcomeDTO]:
        """
        Execute invoice generation for a booking write

        Args:
            event: BookingWriteEventDTO with booking id and snapshots

        Returns:
            Result[InvoiceOutcomeDTO]: generated/skipped outcome, or the error
            that was recorded for operator follow-up

        Raises:
            ErrorRecordingFailed: the failure could not be stored
        """
        booking_id = event.booking_id
        after = event.after

        # Step 1: Only "finished" bookings are invoiced
        if after is None or after.status != BookingStatus.FINISHED.value:
            return self._skipped(booking_id, "Booking status is not finished")

        booking = await self.booking_repo.get_by_id(booking_id)
        if booking is None:
            logger.warning(f"Booking {booking_id} not found, skipping invoice generation")
            return self._skipped(booking_id, "Booking not found")

        if not booking.is_finished:
            logger.info(
                f"Booking {booking_id} is '{booking.status}', invoice already handled"
            )
            return self._skipped(booking_id, f"Booking is already '{booking.status}'")

        # Step 2: GST breakdown
        try:
            gst = TaxCalculator.compute(after.total_booking_amount, self.gst_rate)
        except InvalidAmount as e:
            return await self._fail(booking_id, e)

        # Step 3 + 4: Build invoice and submit
        try:
            invoice = Invoice.build(
                invoice_number=self.number_generator.next(),
                booking_id=booking_id,
                name=after.name,
                total_amount=Decimal(str(after.total_booking_amount)),
                items=after.items,
                gst=gst,
                generated_at=self.clock.now(),
            )
            submission = await self._submit(invoice, idempotency_key_for(booking_id))
        except (ExhaustedRetries, AuthError, DeadlineExceeded, TransportError) as e:
            return await self._fail(booking_id, e)
        except Exception as e:
            logger.exception(f"Unexpected error generating invoice for booking {booking_id}")
            return await self._fail(booking_id, e)

        if not submission.accepted:
            logger.error(
                f"Failed to generate invoice for booking {booking_id}: {submission.reason}"
            )
            return await self._fail(
                booking_id,
                Rejected(submission.reason or "no reason given", retryable=submission.retryable),
            )

        logger.info(f"Invoice {invoice.invoice_number} generated successfully for booking {booking_id}")
        invoice.authority_reference = submission.reference

        # Step 5: Advance booking and store invoice
        try:
            advanced = await self.booking_repo.mark_invoice_generated(
                booking_id, invoice.invoice_number
            )
            if not advanced:
                await self.uow.rollback()
                logger.warning(
                    f"Booking {booking_id} was advanced by a concurrent run, "
                    f"discarding invoice {invoice.invoice_number}"
                )
                return self._skipped(booking_id, "Booking advanced by a concurrent run")

            await self.invoice_repo.create(invoice)
            await self.uow.commit()
        except Exception as e:
            await self.uow.rollback()
            logger.error(
                f"Invoice {invoice.invoice_number} accepted but booking {booking_id} "
                f"could not be updated: {e}"
            )
            await self.error_recorder.record(booking_id, e, code="BOOKING_UPDATE_FAILED")
            return Return.err(
                Error(
                    code="BOOKING_UPDATE_FAILED",
                    message=f"Invoice {invoice.invoice_number} accepted but booking update failed",
                    reason=str(e),
                )
            )

        return Return.ok(
            InvoiceOutcomeDTO(
                booking_id=booking_id,
                outcome=OUTCOME_GENERATED,
                invoice_number=invoice.invoice_number,
                total_amount=invoice.total_amount,
                gst=GstDTO(
                    total_gst=gst.total_tax,
                    igst=gst.inter_state_tax,
                    sgst=gst.state_tax,
                    cgst=gst.central_tax,
                ),
                generated_at=invoice.generated_at,
                authority_reference=invoice.authority_reference,
            )
        )

    async def _submit(self, invoice: Invoice, idempotency_key: str):
        if self.deadline_seconds is None:
            return await self.submitter.submit_with_retry(invoice, idempotency_key)

        try:
            return await asyncio.wait_for(
                self.submitter.submit_with_retry(invoice, idempotency_key),
                timeout=self.deadline_seconds,
            )
        except asyncio.TimeoutError:
            raise DeadlineExceeded(self.deadline_seconds)

    async def _fail(self, booking_id: str, error: Exception) -> Result:
        await self.error_recorder.record(booking_id, error)
        return Return.err(
            Error(
                code=getattr(error, "code", "UNEXPECTED_ERROR"),
                message=getattr(error, "message", None) or str(error) or type(error).__name__,
                reason=_reason_for(error),
            )
        )

    @staticmethod
    def _skipped(booking_id: str, reason: str) -> Result[InvoiceOutcomeDTO]:
        return Return.ok(
            InvoiceOutcomeDTO(booking_id=booking_id, outcome=OUTCOME_SKIPPED, reason=reason)
        )


def _reason_for(error: Exception) -> Optional[str]:
    if isinstance(error, ExhaustedRetries):
        return error.last_error.message
    if isinstance(error, Rejected):
        return error.reason
    return None
