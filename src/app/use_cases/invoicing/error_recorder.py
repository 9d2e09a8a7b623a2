"""ErrorRecorder

Stores failure details for manual intervention when an invoice cannot be
generated. Losing these records would hide un-invoiced bookings, so storage
failures are retried and, if they persist, surfaced as ErrorRecordingFailed.
"""

import asyncio
import logging
import traceback
from typing import Awaitable, Callable, Optional
from src.app.services.unit_of_work import UnitOfWork
from src.app.repositories.invoice_error_repository import InvoiceErrorRepository
from src.domain.errors import ErrorRecordingFailed, ExhaustedRetries
from src.domain.invoice_error import InvoiceError

logger = logging.getLogger(__name__)


class ErrorRecorder:
    def __init__(
        self,
        uow: UnitOfWork,
        error_repo: InvoiceErrorRepository,
        max_attempts: int = 2,
        retry_delay: float = 0.5,
        sleep: Callable[[float], Awaitable[None]] = asyncio.sleep,
    ):
        self.uow = uow
        self.error_repo = error_repo
        self.max_attempts = max(1, max_attempts)
        self.retry_delay = retry_delay
        self.sleep = sleep

    async def record(
        self, booking_id: str, error: Exception, code: Optional[str] = None
    ) -> InvoiceError:
        """
        Append an error record for a booking

        Args:
            booking_id: Booking the failure belongs to
            error: Failure to describe
            code: Error code override (defaults to the error's own code)

        Returns:
            Stored InvoiceError

        Raises:
            ErrorRecordingFailed: every storage attempt failed
        """
        error_code = code or getattr(error, "code", "UNEXPECTED_ERROR")
        error_message = getattr(error, "message", None) or str(error) or type(error).__name__
        error_stack = describe_stack(error)

        last_exc: Optional[Exception] = None
        for attempt in range(1, self.max_attempts + 1):
            try:
                stored = await self.error_repo.create(
                    InvoiceError(
                        booking_id=booking_id,
                        error_code=error_code,
                        error_message=error_message,
                        error_stack=error_stack,
                    )
                )
                await self.uow.commit()
                logger.error(
                    f"Stored error details for booking {booking_id}: "
                    f"[{error_code}] {error_message}"
                )
                return stored
            except Exception as e:
                last_exc = e
                logger.warning(
                    f"Failed to store error details for booking {booking_id} "
                    f"(attempt {attempt}/{self.max_attempts}): {e}"
                )
                await self._safe_rollback()
                if attempt < self.max_attempts:
                    await self.sleep(self.retry_delay)

        logger.critical(
            f"Giving up storing error details for booking {booking_id}: "
            f"[{error_code}] {error_message}"
        )
        raise ErrorRecordingFailed(booking_id, self.max_attempts) from last_exc

    async def _safe_rollback(self):
        try:
            await self.uow.rollback()
        except Exception as e:
            logger.error(f"Rollback after failed error write also failed: {e}")


def describe_stack(error: Exception) -> str:
    """Formatted traceback of the error, following ExhaustedRetries to its cause"""
    parts = ["".join(traceback.format_exception(type(error), error, error.__traceback__))]
    if isinstance(error, ExhaustedRetries) and error.last_error is not None:
        last = error.last_error
        parts.append("Last attempt failed with:\n")
        parts.append("".join(traceback.format_exception(type(last), last, last.__traceback__)))
    return "".join(parts)
