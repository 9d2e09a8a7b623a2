"""Data Transfer Objects for Invoicing Use Cases

Pydantic models for the booking write event and pipeline outcomes.
"""

from datetime import datetime
from decimal import Decimal
from typing import Any, List, Optional
from pydantic import BaseModel, ConfigDict, Field
from src.domain.booking import Booking


class BookingSnapshotDTO(BaseModel):
    """
    Booking document as seen before or after a write

    Accepts both the document store's camelCase keys and snake_case.
    """

    model_config = ConfigDict(
        populate_by_name=True,
        json_schema_extra={
            "example": {
                "status": "finished",
                "name": "Asha Rao",
                "totalBookingAmount": "1000.00",
                "items": ["Deluxe room x2"],
            }
        },
    )

    status: str = Field(
        ...,
        description="Booking status (e.g., 'finished')"
    )

    name: str = Field(
        default="",
        description="Customer name"
    )

    total_booking_amount: Optional[Decimal] = Field(
        default=None,
        alias="totalBookingAmount",
        description="Booking total before tax (missing or negative is a data error)"
    )

    items: List[Any] = Field(
        default_factory=list,
        description="Ordered line-item descriptors"
    )

    @classmethod
    def from_booking(cls, booking: Booking) -> "BookingSnapshotDTO":
        return cls(
            status=booking.status,
            name=booking.name,
            total_booking_amount=booking.total_booking_amount,
            items=list(booking.items or []),
        )


class BookingWriteEventDTO(BaseModel):
    """
    Notification of a booking document write

    Used as input to GenerateInvoice. ``before`` is None on create and
    ``after`` is None on delete.
    """

    model_config = ConfigDict(populate_by_name=True)

    booking_id: str = Field(
        ...,
        min_length=1,
        alias="bookingId",
        description="Booking document identifier"
    )

    before: Optional[BookingSnapshotDTO] = Field(
        default=None,
        description="Snapshot before the write"
    )

    after: Optional[BookingSnapshotDTO] = Field(
        default=None,
        description="Snapshot after the write"
    )

    @classmethod
    def from_booking(cls, booking: Booking) -> "BookingWriteEventDTO":
        """Synthesize an event for a stored booking (used by the re-drive sweep)"""
        return cls(
            booking_id=booking.id,
            after=BookingSnapshotDTO.from_booking(booking),
        )


class GstDTO(BaseModel):
    total_gst: Decimal
    igst: Decimal
    sgst: Decimal
    cgst: Decimal


class InvoiceOutcomeDTO(BaseModel):
    """
    Response DTO for a pipeline run

    outcome is "generated" when a new invoice was accepted, "skipped" when
    the event did not require invoicing.
    """

    booking_id: str
    outcome: str
    invoice_number: Optional[str] = None
    total_amount: Optional[Decimal] = None
    gst: Optional[GstDTO] = None
    generated_at: Optional[datetime] = None
    authority_reference: Optional[str] = None
    reason: Optional[str] = None


class RedriveFailureDTO(BaseModel):
    booking_id: str
    code: str
    message: str


class RedriveResultDTO(BaseModel):
    """Summary of one sweep over bookings left in 'finished'"""

    total_checked: int
    generated: int
    skipped: int
    failed: int
    failures: List[RedriveFailureDTO] = Field(default_factory=list)
    sweep_time: datetime
    execution_time_ms: int
