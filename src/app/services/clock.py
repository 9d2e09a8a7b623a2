"""Clock Interface

Trusted time source for invoice timestamps. Injected so invoices cannot be
backdated by callers and tests can pin time.
"""

from abc import ABC, abstractmethod
from datetime import datetime


class Clock(ABC):
    @abstractmethod
    def now(self) -> datetime:
        """Current UTC time (naive, like every timestamp in the store)"""
        pass
