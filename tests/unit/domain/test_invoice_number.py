"""Unit tests for InvoiceNumberGenerator"""

import re
from concurrent.futures import ThreadPoolExecutor

from src.domain.invoice_number import InvoiceNumberGenerator

INVOICE_NUMBER_PATTERN = re.compile(r"^INV-\d{13}-[0-9a-f]{12}$")


class TestInvoiceNumberFormat:
    def test_number_has_time_prefix_and_random_suffix(self):
        generator = InvoiceNumberGenerator(time_source=lambda: 1717171717.171)

        number = generator.next()

        assert INVOICE_NUMBER_PATTERN.match(number)
        assert number.startswith("INV-1717171717171-")


class TestInvoiceNumberUniqueness:
    def test_concurrent_generation_yields_distinct_numbers(self):
        """
        Given: 10,000 numbers requested from 16 threads
        When: Generated concurrently
        Then: All numbers are distinct
        """
        generator = InvoiceNumberGenerator()

        with ThreadPoolExecutor(max_workers=16) as pool:
            numbers = list(pool.map(lambda _: generator.next(), range(10_000)))

        assert len(set(numbers)) == 10_000

    def test_same_millisecond_numbers_are_distinct(self):
        """Test disambiguator alone prevents collisions within one millisecond"""
        generator = InvoiceNumberGenerator(time_source=lambda: 1700000000.0)

        numbers = {generator.next() for _ in range(10_000)}

        assert len(numbers) == 10_000


class TestInvoiceNumberOrdering:
    def test_later_numbers_sort_after_earlier_ones(self):
        ticks = iter([1700000000.000, 1700000000.005, 1700000001.000])
        generator = InvoiceNumberGenerator(time_source=lambda: next(ticks))

        numbers = [generator.next() for _ in range(3)]

        assert numbers == sorted(numbers)

    def test_clock_going_backwards_does_not_reorder(self):
        """
        Given: Wall clock jumps back between calls
        When: Next number is generated
        Then: Its time component does not go backwards
        """
        ticks = iter([1700000005.0, 1700000000.0])
        generator = InvoiceNumberGenerator(time_source=lambda: next(ticks))

        first = generator.next()
        second = generator.next()

        assert first.split("-")[1] == second.split("-")[1]
