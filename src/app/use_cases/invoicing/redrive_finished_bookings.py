"""RedriveFinishedBookings Use Case

Re-runs invoice generation for bookings left in "finished", either because
an earlier run failed or because its trigger was never delivered.
"""

import logging
import time
from src.domain.base import utc_now
from libs.result import Result, Return, Error
from src.app.repositories.booking_repository import BookingRepository
from src.domain.errors import ErrorRecordingFailed
from .dtos import BookingWriteEventDTO, RedriveFailureDTO, RedriveResultDTO
from .generate_invoice import GenerateInvoice, OUTCOME_GENERATED

logger = logging.getLogger(__name__)


class RedriveFinishedBookings:
    """
    Use Case: Sweep finished bookings through the invoice pipeline

    Business Rules:
    1. Only bookings currently "finished" are picked up
    2. Each booking runs through GenerateInvoice exactly as a trigger would
    3. One booking failing does not stop the sweep
    4. Bookings with no recorded failure go first, then the least recently
       failed, so permanently broken bookings do not starve the queue
    """

    def __init__(
        self,
        booking_repo: BookingRepository,
        generate_invoice: GenerateInvoice,
        batch_size: int = 100,
    ):
        self.booking_repo = booking_repo
        self.generate_invoice = generate_invoice
        self.batch_size = batch_size

    async def execute(self) -> Result[RedriveResultDTO]:
        """
        Execute one sweep

        Returns:
            Result[RedriveResultDTO]: per-outcome counts and failures
        """
        start_time = time.time()
        sweep_time = utc_now()

        try:
            bookings = await self.booking_repo.get_redrive_candidates(limit=self.batch_size)
        except Exception as e:
            return Return.err(
                Error(
                    code="REDRIVE_FAILED",
                    message="Failed to load finished bookings",
                    reason=str(e),
                )
            )

        logger.info(f"Found {len(bookings)} finished bookings to re-drive")

        generated = 0
        skipped = 0
        failures: list[RedriveFailureDTO] = []

        for booking in bookings:
            event = BookingWriteEventDTO.from_booking(booking)
            try:
                result = await self.generate_invoice.execute(event)
            except ErrorRecordingFailed as e:
                logger.critical(f"Re-drive of booking {booking.id} lost its error record: {e}")
                failures.append(
                    RedriveFailureDTO(booking_id=booking.id, code=e.code, message=e.message)
                )
                continue

            if result.is_err():
                failures.append(
                    RedriveFailureDTO(
                        booking_id=booking.id,
                        code=result.error.code,
                        message=result.error.message,
                    )
                )
            elif result.value.outcome == OUTCOME_GENERATED:
                generated += 1
            else:
                skipped += 1

        return Return.ok(
            RedriveResultDTO(
                total_checked=len(bookings),
                generated=generated,
                skipped=skipped,
                failed=len(failures),
                failures=failures,
                sweep_time=sweep_time,
                execution_time_ms=int((time.time() - start_time) * 1000),
            )
        )
