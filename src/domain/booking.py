"""Booking Domain Entity

Booking records are owned by the booking-management system. Invoicing only
reads them and, once the GST authority accepts an invoice, advances the status
and stores the invoice number.
"""

from datetime import datetime
from decimal import Decimal
from enum import Enum
from typing import Optional
from sqlmodel import Field, Column, Index
from sqlalchemy import JSON, DateTime, Numeric, String
from src.domain.base import BaseModel, utc_now


class BookingStatus(str, Enum):
    """Booking lifecycle states relevant to invoicing"""
    IN_PROGRESS = "in progress"
    FINISHED = "finished"
    INVOICE_GENERATED = "invoice generated"


class Booking(BaseModel, table=True):
    """
    Booking - Source record for GST invoices

    Domain Rules:
    - status is free-form; only "finished" triggers invoicing
    - Invoicing sets status "finished" -> "invoice generated" and invoice_number
    - total_booking_amount may be missing on malformed records (data error)
    """

    __tablename__ = "bookings"
    __table_args__ = (
        Index('ix_bookings_status', 'status'),
    )

    id: str = Field(
        sa_column=Column(String(128), primary_key=True),
        description="Booking document identifier"
    )

    name: str = Field(
        default="",
        description="Customer name printed on the invoice"
    )

    status: str = Field(
        sa_column=Column(String(50), nullable=False),
        description="Lifecycle status (in progress, finished, invoice generated, ...)"
    )

    total_booking_amount: Optional[Decimal] = Field(
        default=None,
        sa_column=Column(Numeric(18, 2), nullable=True),
        description="Booking total before tax"
    )

    items: list = Field(
        default_factory=list,
        sa_column=Column(JSON, nullable=False),
        description="Ordered line-item descriptors"
    )

    invoice_number: Optional[str] = Field(
        default=None,
        sa_column=Column(String(50), nullable=True),
        description="Invoice number set once the invoice is accepted"
    )

    updated_at: datetime = Field(
        default_factory=utc_now,
        sa_column=Column(DateTime(timezone=True), nullable=False),
        description="Last update timestamp"
    )

    @property
    def is_finished(self) -> bool:
        return self.status == BookingStatus.FINISHED.value
