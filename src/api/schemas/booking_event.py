"""Request schemas for the Booking Events API

Pydantic models for validating booking write notifications.
"""

from typing import Optional
from pydantic import BaseModel, ConfigDict, Field, field_validator
from src.app.use_cases.invoicing.dtos import BookingSnapshotDTO, BookingWriteEventDTO


class BookingWriteEventSchema(BaseModel):
    """
    Request schema for a booking write notification

    Used for POST /bookings/events endpoint.
    """

    model_config = ConfigDict(
        populate_by_name=True,
        json_schema_extra={
            "example": {
                "bookingId": "bk_20240601_0042",
                "before": {"status": "in progress", "name": "Asha Rao", "totalBookingAmount": 1000, "items": ["A"]},
                "after": {"status": "finished", "name": "Asha Rao", "totalBookingAmount": 1000, "items": ["A"]},
            }
        },
    )

    booking_id: str = Field(
        ...,
        alias="bookingId",
        description="Booking document identifier (required, non-empty)"
    )

    before: Optional[BookingSnapshotDTO] = Field(
        default=None,
        description="Booking snapshot before the write (absent on create)"
    )

    after: Optional[BookingSnapshotDTO] = Field(
        default=None,
        description="Booking snapshot after the write (absent on delete)"
    )

    @field_validator('booking_id')
    @classmethod
    def validate_booking_id(cls, v):
        """Reject blank booking ids"""
        if not v or not v.strip():
            raise ValueError("bookingId must not be empty")
        return v.strip()

    def to_command(self) -> BookingWriteEventDTO:
        return BookingWriteEventDTO(
            booking_id=self.booking_id,
            before=self.before,
            after=self.after,
        )
