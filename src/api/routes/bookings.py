"""Booking Events API Routes

Receives booking write notifications and runs invoice generation. Any
non-2xx response tells the delivering platform the run failed, so its own
retry/alerting policy can take over.
"""

from fastapi import APIRouter, Depends, status
from sqlmodel.ext.asyncio.session import AsyncSession

from libs.result import Error
from src.adapter.services.invoice_pipeline import create_generate_invoice
from src.api.error import ClientError
from src.api.schemas.booking_event import BookingWriteEventSchema
from src.app.services.fiscal_authority_client import FiscalAuthorityClient
from src.app.use_cases.invoicing.dtos import InvoiceOutcomeDTO
from src.depends import get_config, get_fiscal_client, get_session
from src.domain.errors import ErrorRecordingFailed

router = APIRouter(prefix="/bookings", tags=["Bookings"])

ERROR_STATUS_CODES = {
    "INVALID_AMOUNT": status.HTTP_422_UNPROCESSABLE_ENTITY,
    "INVOICE_REJECTED": status.HTTP_502_BAD_GATEWAY,
    "RETRIES_EXHAUSTED": status.HTTP_502_BAD_GATEWAY,
    "FISCAL_AUTH_FAILED": status.HTTP_502_BAD_GATEWAY,
    "TRANSPORT_ERROR": status.HTTP_502_BAD_GATEWAY,
    "DEADLINE_EXCEEDED": status.HTTP_504_GATEWAY_TIMEOUT,
}


@router.post(
    "/events",
    response_model=InvoiceOutcomeDTO,
    status_code=status.HTTP_200_OK,
    responses={
        422: {
            "description": "Booking amount missing or negative",
            "content": {
                "application/json": {
                    "example": {
                        "error": {
                            "code": "INVALID_AMOUNT",
                            "message": "totalBookingAmount is missing or not a number"
                        }
                    }
                }
            }
        },
        502: {
            "description": "GST authority rejected the invoice or could not be reached",
            "content": {
                "application/json": {
                    "example": {
                        "error": {
                            "code": "RETRIES_EXHAUSTED",
                            "message": "Max retries reached after 3 attempts: GST API returned HTTP 503"
                        }
                    }
                }
            }
        },
    }
)
async def handle_booking_event(
    request: BookingWriteEventSchema,
    session: AsyncSession = Depends(get_session),
    fiscal_client: FiscalAuthorityClient = Depends(get_fiscal_client),
    config=Depends(get_config),
):
    """
    Generate the GST invoice for a booking that reached "finished".

    Events whose new status is not "finished", or whose booking was already
    invoiced, are acknowledged with outcome "skipped".

    **Returns:**
    - 200: Invoice generated, or event skipped
    - 422: Booking amount missing or negative (error recorded)
    - 502: GST authority failure (error recorded, booking left "finished")
    - 504: Execution deadline exceeded (error recorded)
    - 500: Error record could not be stored
    """
    use_case = create_generate_invoice(session, fiscal_client, config)

    try:
        result = await use_case.execute(request.to_command())
    except ErrorRecordingFailed as e:
        raise ClientError(
            Error(code=e.code, message=e.message),
            status_code=status.HTTP_500_INTERNAL_SERVER_ERROR,
        )

    if result.is_err():
        raise ClientError(
            result.error,
            status_code=ERROR_STATUS_CODES.get(
                result.error.code, status.HTTP_500_INTERNAL_SERVER_ERROR
            ),
        )

    return result.value
