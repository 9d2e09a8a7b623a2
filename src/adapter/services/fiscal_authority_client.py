"""GST Authority Client Implementation

Submits invoices to the GST authority over HTTP using httpx.
"""

import logging
from typing import Optional
import httpx
from src.app.services.fiscal_authority_client import FiscalAuthorityClient, SubmissionResult
from src.domain.errors import AuthError, TransportError
from src.domain.invoice import Invoice

logger = logging.getLogger(__name__)

AUTH_FAILURE_STATUSES = (401, 403)


class HttpxFiscalAuthorityClient(FiscalAuthorityClient):
    """
    GST authority client backed by a shared httpx.AsyncClient

    Response mapping:
    - 2xx {"success": true}: accepted
    - 2xx {"success": false, "error": ..., "retryable"?: ...}: rejected
    - 401/403: AuthError
    - any other non-2xx, timeout, network failure or unreadable body: TransportError
    """

    def __init__(
        self,
        api_url: str,
        api_key: str,
        client: Optional[httpx.AsyncClient] = None,
        timeout: float = 10.0,
    ):
        """
        Initialize GST authority client

        Args:
            api_url: Invoice submission endpoint
            api_key: Bearer token for the authority
            client: Shared httpx client (created lazily if omitted)
            timeout: Per-request timeout in seconds
        """
        self.api_url = api_url
        self.api_key = api_key
        self.timeout = timeout
        self._client = client
        self._owns_client = client is None

    @property
    def client(self) -> httpx.AsyncClient:
        if self._client is None:
            self._client = httpx.AsyncClient(timeout=self.timeout)
        return self._client

    async def aclose(self):
        """Close the underlying client if this instance created it"""
        if self._owns_client and self._client is not None:
            await self._client.aclose()
            self._client = None

    async def submit(self, invoice: Invoice, idempotency_key: str) -> SubmissionResult:
        headers = {
            "Authorization": f"Bearer {self.api_key}",
            "Content-Type": "application/json",
            "Idempotency-Key": idempotency_key,
        }

        try:
            response = await self.client.post(
                self.api_url,
                json=invoice.to_payload(),
                headers=headers,
                timeout=self.timeout,
            )
        except httpx.TimeoutException as e:
            logger.error(f"Timed out sending invoice {invoice.invoice_number} to GST API: {e}")
            raise TransportError(f"GST API timed out: {e}") from e
        except httpx.InvalidURL as e:
            logger.error(f"Invalid GST API URL {self.api_url!r}: {e}")
            raise TransportError(f"GST API URL is invalid: {e}") from e
        except httpx.HTTPError as e:
            logger.error(f"Error sending invoice {invoice.invoice_number} to GST API: {e}")
            raise TransportError(f"GST API request failed: {e}") from e

        status_code = response.status_code

        if status_code in AUTH_FAILURE_STATUSES:
            logger.error(f"GST API rejected credentials (HTTP {status_code})")
            raise AuthError(f"GST API rejected credentials (HTTP {status_code})", status_code)

        if not response.is_success:
            logger.error(
                f"Error sending invoice {invoice.invoice_number} to GST API: "
                f"HTTP {status_code} {response.text[:500]}"
            )
            raise TransportError(f"GST API returned HTTP {status_code}", status_code)

        try:
            body = response.json()
        except ValueError as e:
            raise TransportError(f"GST API returned invalid JSON: {e}", status_code) from e

        if not isinstance(body, dict):
            raise TransportError("GST API returned an unexpected response body", status_code)

        if body.get("success"):
            reference = body.get("reference") or body.get("ackNumber")
            return SubmissionResult.accept(reference=str(reference) if reference else None)

        return SubmissionResult.reject(
            reason=str(body.get("error") or "GST API reported failure"),
            retryable=bool(body.get("retryable", False)),
        )


def create_fiscal_authority_client(config, client: Optional[httpx.AsyncClient] = None) -> HttpxFiscalAuthorityClient:
    """
    Factory function to create the GST authority client from configuration

    Args:
        config: ApplicationConfig (or compatible object)
        client: Optional shared httpx client

    Returns:
        Configured HttpxFiscalAuthorityClient
    """
    if not config.GST_API_KEY:
        logger.warning("GST_API_KEY is not configured; submissions will be rejected")

    return HttpxFiscalAuthorityClient(
        api_url=config.GST_API_URL,
        api_key=config.GST_API_KEY,
        client=client,
        timeout=float(config.GST_API_TIMEOUT_SECONDS),
    )
