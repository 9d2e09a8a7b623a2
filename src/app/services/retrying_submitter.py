"""Retrying GST Submission

Drives FiscalAuthorityClient under a RetryPolicy and guarantees exactly one
terminal outcome per call: accepted, rejected, or ExhaustedRetries.
"""

import asyncio
import logging
from typing import Awaitable, Callable, Optional
from src.app.services.fiscal_authority_client import FiscalAuthorityClient, SubmissionResult
from src.app.services.retry_policy import RetryPolicy
from src.domain.errors import ExhaustedRetries, InvoicingError, Rejected, TransportError, AuthError
from src.domain.invoice import Invoice

logger = logging.getLogger(__name__)


class RetryingSubmitter:
    """
    Submits invoices with exponential backoff

    Behaviour:
    - TransportError and retryable rejections are retried up to max_attempts
    - AuthError is raised on the spot without sleeping
    - A non-retryable rejection is returned as-is
    - Backoff waits through the injected ``sleep`` coroutine, never blocking
    """

    def __init__(
        self,
        client: FiscalAuthorityClient,
        policy: Optional[RetryPolicy] = None,
        sleep: Callable[[float], Awaitable[None]] = asyncio.sleep,
    ):
        self.client = client
        self.policy = policy or RetryPolicy()
        self.sleep = sleep

    async def submit_with_retry(self, invoice: Invoice, idempotency_key: str) -> SubmissionResult:
        """
        Submit an invoice, retrying per policy

        Args:
            invoice: Invoice to submit
            idempotency_key: Stable key sent with every attempt

        Returns:
            Accepted result, or a non-retryable rejected result

        Raises:
            AuthError: credentials rejected (no retry)
            ExhaustedRetries: every attempt failed with a retryable error
        """
        max_attempts = self.policy.max_attempts
        last_error: Optional[InvoicingError] = None

        for attempt in range(1, max_attempts + 1):
            try:
                result = await self.client.submit(invoice, idempotency_key)
            except AuthError as e:
                logger.error(
                    f"GST API rejected credentials for invoice {invoice.invoice_number} "
                    f"(attempt {attempt}/{max_attempts}): {e.message}"
                )
                raise
            except TransportError as e:
                if not self.policy.retry_on(e):
                    logger.error(
                        f"Non-retryable error submitting invoice {invoice.invoice_number} "
                        f"(attempt {attempt}/{max_attempts}): {e.message}"
                    )
                    raise
                last_error = e
            else:
                if result.accepted:
                    return result

                rejection = Rejected(result.reason or "no reason given", retryable=result.retryable)
                if not self.policy.retry_on(rejection):
                    return result
                last_error = rejection

            logger.error(
                f"Error generating invoice {invoice.invoice_number} "
                f"(attempt {attempt}/{max_attempts}): {last_error.message}"
            )

            if attempt < max_attempts:
                delay = self.policy.delay_after(attempt)
                logger.info(f"Retrying invoice {invoice.invoice_number} in {delay}s")
                await self.sleep(delay)

        logger.error(f"Max retries reached. Unable to submit invoice {invoice.invoice_number}")
        raise ExhaustedRetries(max_attempts, last_error)
