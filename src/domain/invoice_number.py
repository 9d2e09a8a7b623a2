"""Invoice Number Generation

Format: INV-<13-digit epoch millis>-<12 hex chars> (e.g. INV-1717171717171-9f3a0c41b2de)

- Time prefix keeps numbers sortable by generation time for triage
- 48 random bits make same-millisecond collisions negligible
  (10,000 numbers in one millisecond collide with probability < 2e-7)
"""

import secrets
import threading
import time
from typing import Callable, Optional

INVOICE_NUMBER_PREFIX = "INV"


class InvoiceNumberGenerator:
    """
    Generates unique, time-ordered invoice numbers

    The millisecond component never moves backwards within a process, even if
    the wall clock is adjusted, so numbers issued later never sort earlier.
    """

    def __init__(self, time_source: Optional[Callable[[], float]] = None, random_bytes: int = 6):
        self._time_source = time_source or time.time
        self._random_bytes = random_bytes
        self._last_millis = 0
        self._lock = threading.Lock()

    def next(self) -> str:
        with self._lock:
            millis = int(self._time_source() * 1000)
            if millis < self._last_millis:
                millis = self._last_millis
            self._last_millis = millis

        suffix = secrets.token_hex(self._random_bytes)
        return f"{INVOICE_NUMBER_PREFIX}-{millis:013d}-{suffix}"
