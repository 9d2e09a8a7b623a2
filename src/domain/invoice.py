"""Invoice Domain Entity

GST invoice derived from a finished booking and submitted to the GST authority.
"""

from datetime import datetime, timezone
from decimal import Decimal
from typing import Optional
from sqlmodel import Field, Column, Index
from sqlalchemy import JSON, DateTime, Numeric, String
from src.domain.base import BaseModel
from src.domain.tax import TaxBreakdown


class Invoice(BaseModel, table=True):
    """
    Invoice - GST invoice for a finished booking

    Domain Rules:
    - invoice_number must be unique
    - Immutable once submitted; stored only after the authority accepts it
    - igst == total_gst and sgst + cgst == igst
    - generated_at comes from the trusted service clock at submission time
    """

    __tablename__ = "invoices"
    __table_args__ = (
        Index('ix_invoices_booking_id', 'booking_id'),
        Index('ix_invoices_invoice_number', 'invoice_number', unique=True),
    )

    id: Optional[int] = Field(
        default=None,
        primary_key=True,
        description="Unique invoice identifier (auto-increment)"
    )

    invoice_number: str = Field(
        sa_column=Column(String(50), nullable=False, unique=True),
        description="Unique invoice number (e.g., INV-1717171717171-9f3a0c41b2de)"
    )

    booking_id: str = Field(
        sa_column=Column(String(128), nullable=False),
        description="Booking the invoice was generated for"
    )

    name: str = Field(
        default="",
        description="Customer name"
    )

    total_amount: Decimal = Field(
        sa_column=Column(Numeric(18, 2), nullable=False),
        description="Booking total before tax"
    )

    items: list = Field(
        default_factory=list,
        sa_column=Column(JSON, nullable=False),
        description="Line items copied from the booking"
    )

    total_gst: Decimal = Field(
        sa_column=Column(Numeric(18, 2), nullable=False),
        description="Total GST"
    )

    igst: Decimal = Field(
        sa_column=Column(Numeric(18, 2), nullable=False),
        description="Inter-state GST (equals total GST)"
    )

    sgst: Decimal = Field(
        sa_column=Column(Numeric(18, 2), nullable=False),
        description="State GST share"
    )

    cgst: Decimal = Field(
        sa_column=Column(Numeric(18, 2), nullable=False),
        description="Central GST share"
    )

    generated_at: datetime = Field(
        sa_column=Column(DateTime(timezone=True), nullable=False),
        description="Submission timestamp from the service clock"
    )

    authority_reference: Optional[str] = Field(
        default=None,
        sa_column=Column(String(128), nullable=True),
        description="Acknowledgement reference returned by the GST authority"
    )

    @classmethod
    def build(
        cls,
        invoice_number: str,
        booking_id: str,
        name: str,
        total_amount: Decimal,
        items: list,
        gst: TaxBreakdown,
        generated_at: datetime,
    ) -> "Invoice":
        return cls(
            invoice_number=invoice_number,
            booking_id=booking_id,
            name=name,
            total_amount=total_amount,
            items=list(items),
            total_gst=gst.total_tax,
            igst=gst.inter_state_tax,
            sgst=gst.state_tax,
            cgst=gst.central_tax,
            generated_at=generated_at,
        )

    @property
    def gst(self) -> TaxBreakdown:
        return TaxBreakdown(
            total_tax=self.total_gst,
            inter_state_tax=self.igst,
            state_tax=self.sgst,
            central_tax=self.cgst,
        )

    def to_payload(self) -> dict:
        """JSON body sent to the GST authority"""
        return {
            "invoiceNumber": self.invoice_number,
            "name": self.name,
            "totalAmount": float(self.total_amount),
            "items": list(self.items),
            "gst": self.gst.to_payload(),
            "generatedAt": _utc_isoformat(self.generated_at),
        }


def _utc_isoformat(value: datetime) -> str:
    """ISO 8601 in UTC with a trailing Z; naive values are taken as UTC"""
    if value.tzinfo is not None:
        value = value.astimezone(timezone.utc).replace(tzinfo=None)
    return value.isoformat() + "Z"
