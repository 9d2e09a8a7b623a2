"""Unit tests for GST calculation

Tests cover:
- IGST/SGST/CGST invariants
- Odd-paisa split rule
- Invalid amount and rate handling
"""

import pytest
from decimal import Decimal

from src.domain.errors import InvalidAmount
from src.domain.tax import TaxCalculator


class TestTaxCalculatorBreakdown:
    """Test GST breakdown for valid totals"""

    def test_standard_rate_on_round_amount(self):
        """
        Given: Booking total 1000 at 18%
        When: compute is called
        Then: GST 180 split into 90 + 90
        """
        # Act
        gst = TaxCalculator.compute(Decimal("1000"), Decimal("0.18"))

        # Assert
        assert gst.total_tax == Decimal("180")
        assert gst.inter_state_tax == Decimal("180")
        assert gst.state_tax == Decimal("90")
        assert gst.central_tax == Decimal("90")

    @pytest.mark.parametrize(
        "amount",
        ["0", "0.01", "1", "99.99", "1000", "1234.56", "7777.77", "100000.05", "999999.99"],
    )
    def test_components_always_sum_to_total(self, amount):
        """SGST + CGST == IGST == total GST with no rounding drift"""
        gst = TaxCalculator.compute(Decimal(amount), Decimal("0.18"))

        assert gst.inter_state_tax == gst.total_tax
        assert gst.state_tax + gst.central_tax == gst.inter_state_tax
        assert gst.state_tax - gst.central_tax in (Decimal("0"), Decimal("0.01"))

    def test_total_tax_equals_amount_times_rate(self):
        """Test exact product when representable at currency precision"""
        gst = TaxCalculator.compute(Decimal("250.50"), Decimal("0.18"))

        assert gst.total_tax == Decimal("250.50") * Decimal("0.18")

    def test_odd_paisa_goes_to_state_share(self):
        """
        Given: GST of 0.01 (odd number of paisa)
        When: Split into state/central
        Then: State share gets the extra paisa
        """
        # 0.05 * 0.18 = 0.009 -> 0.01
        gst = TaxCalculator.compute(Decimal("0.05"), Decimal("0.18"))

        assert gst.total_tax == Decimal("0.01")
        assert gst.state_tax == Decimal("0.01")
        assert gst.central_tax == Decimal("0.00")

    def test_total_tax_rounds_half_up_to_paisa(self):
        """Test product rounding to two decimal places"""
        # 10.25 * 0.18 = 1.845 -> 1.85
        gst = TaxCalculator.compute(Decimal("10.25"), Decimal("0.18"))

        assert gst.total_tax == Decimal("1.85")
        assert gst.state_tax == Decimal("0.93")
        assert gst.central_tax == Decimal("0.92")

    def test_accepts_int_and_float_inputs(self):
        """Test document-store numbers are accepted"""
        gst = TaxCalculator.compute(1000, 0.18)

        assert gst.total_tax == Decimal("180")

    def test_zero_rate_gives_zero_tax(self):
        gst = TaxCalculator.compute(Decimal("500"), Decimal("0"))

        assert gst.total_tax == Decimal("0")
        assert gst.state_tax == Decimal("0")
        assert gst.central_tax == Decimal("0")

    def test_payload_uses_authority_field_names(self):
        """Test wire names totalGST/igst/sgst/cgst"""
        payload = TaxCalculator.compute(Decimal("1000"), Decimal("0.18")).to_payload()

        assert payload == {"totalGST": 180, "igst": 180, "sgst": 90, "cgst": 90}


class TestTaxCalculatorValidation:
    """Test InvalidAmount on malformed input"""

    def test_negative_amount_raises_invalid_amount(self):
        with pytest.raises(InvalidAmount) as exc_info:
            TaxCalculator.compute(Decimal("-1"), Decimal("0.18"))

        assert exc_info.value.code == "INVALID_AMOUNT"

    def test_missing_amount_raises_invalid_amount(self):
        with pytest.raises(InvalidAmount):
            TaxCalculator.compute(None, Decimal("0.18"))

    def test_non_numeric_amount_raises_invalid_amount(self):
        with pytest.raises(InvalidAmount):
            TaxCalculator.compute("a lot", Decimal("0.18"))

    def test_non_finite_amount_raises_invalid_amount(self):
        with pytest.raises(InvalidAmount):
            TaxCalculator.compute(float("nan"), Decimal("0.18"))

    @pytest.mark.parametrize("rate", ["-0.01", "1.01"])
    def test_rate_out_of_range_raises_invalid_amount(self, rate):
        with pytest.raises(InvalidAmount):
            TaxCalculator.compute(Decimal("100"), Decimal(rate))
