"""Invoice Error Domain Entity

Append-only record of a failed invoice generation, kept for manual
operator intervention. Never updated or deleted by the invoicing service.
"""

from datetime import datetime
from typing import Optional
from sqlmodel import Field, Column, Index
from sqlalchemy import DateTime, String, Text, func
from src.domain.base import BaseModel


class InvoiceError(BaseModel, table=True):
    """
    Invoice Error - Diagnostic context for a failed invoice attempt-sequence

    Domain Rules:
    - One record per failed pipeline run
    - timestamp is assigned by the database, not the caller
    """

    __tablename__ = "invoice_errors"
    __table_args__ = (
        Index('ix_invoice_errors_booking_id', 'booking_id'),
    )

    id: Optional[int] = Field(
        default=None,
        primary_key=True,
        description="Unique error record identifier (auto-increment)"
    )

    booking_id: str = Field(
        sa_column=Column(String(128), nullable=False),
        description="Booking the failed invoice belongs to"
    )

    error_code: str = Field(
        sa_column=Column(String(50), nullable=False),
        description="Error taxonomy code (e.g., RETRIES_EXHAUSTED)"
    )

    error_message: str = Field(
        sa_column=Column(Text, nullable=False),
        description="Human-readable failure message"
    )

    error_stack: Optional[str] = Field(
        default=None,
        sa_column=Column(Text, nullable=True),
        description="Diagnostic trace (opaque)"
    )

    timestamp: Optional[datetime] = Field(
        default=None,
        sa_column=Column(DateTime(timezone=True), nullable=False, server_default=func.now()),
        description="Server-assigned time the error was stored"
    )

    def to_payload(self) -> dict:
        return {
            "bookingId": self.booking_id,
            "errorMessage": self.error_message,
            "errorStack": self.error_stack,
            "timestamp": self.timestamp.isoformat() if self.timestamp else None,
        }
