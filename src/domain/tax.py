"""GST Calculation

Splits the GST due on a booking into its inter-state (IGST), state (SGST)
and central (CGST) components.

Domain Rules:
- IGST equals the total GST
- SGST + CGST equals IGST exactly, at currency precision (0.01)
- An odd paisa left over by the split goes to SGST
"""

from decimal import Decimal, InvalidOperation, ROUND_DOWN, ROUND_HALF_UP
from pydantic import BaseModel, ConfigDict
from src.domain.errors import InvalidAmount

CURRENCY_PRECISION = Decimal("0.01")


class TaxBreakdown(BaseModel):
    """GST components embedded in an invoice"""

    model_config = ConfigDict(frozen=True)

    total_tax: Decimal
    inter_state_tax: Decimal
    state_tax: Decimal
    central_tax: Decimal

    def to_payload(self) -> dict:
        """Wire shape expected by the GST authority"""
        return {
            "totalGST": float(self.total_tax),
            "igst": float(self.inter_state_tax),
            "sgst": float(self.state_tax),
            "cgst": float(self.central_tax),
        }


class TaxCalculator:
    """Pure GST calculator, safe to share between pipeline runs"""

    @staticmethod
    def compute(total_amount, rate) -> TaxBreakdown:
        """
        Compute the GST breakdown for a booking total

        Args:
            total_amount: Non-negative booking total
            rate: Tax rate in [0, 1] (e.g. 0.18)

        Returns:
            TaxBreakdown with IGST/SGST/CGST at currency precision

        Raises:
            InvalidAmount: amount missing/negative/non-numeric or rate out of range
        """
        amount = _to_decimal(total_amount, "totalBookingAmount")
        tax_rate = _to_decimal(rate, "gstRate")

        if amount < 0:
            raise InvalidAmount(f"Booking amount must be non-negative, got {amount}", amount)
        if tax_rate < 0 or tax_rate > 1:
            raise InvalidAmount(f"GST rate must be between 0 and 1, got {tax_rate}", amount)

        total_tax = (amount * tax_rate).quantize(CURRENCY_PRECISION, rounding=ROUND_HALF_UP)
        central_tax = (total_tax / 2).quantize(CURRENCY_PRECISION, rounding=ROUND_DOWN)
        state_tax = total_tax - central_tax

        return TaxBreakdown(
            total_tax=total_tax,
            inter_state_tax=total_tax,
            state_tax=state_tax,
            central_tax=central_tax,
        )


def _to_decimal(value, field_name: str) -> Decimal:
    if value is None or isinstance(value, bool):
        raise InvalidAmount(f"{field_name} is missing or not a number", value)
    try:
        result = Decimal(str(value))
    except (InvalidOperation, ValueError):
        raise InvalidAmount(f"{field_name} is not a valid number: {value!r}", value)
    if not result.is_finite():
        raise InvalidAmount(f"{field_name} is not a finite number: {value!r}", value)
    return result
