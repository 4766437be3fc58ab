# billboard_billing/errors.py

from typing import Optional


class BillingError(Exception):
    """Base class for errors raised by the billing engine and its repository."""


class ValidationError(BillingError):
    """Input rejected before anything is written."""

    def __init__(self, message: str, field: Optional[str] = None):
        super().__init__(message)
        self.field = field


class NotFoundError(BillingError):
    pass


class RateNotFound(NotFoundError):
    """No rate-card entry for (size, level, category, months)."""

    def __init__(self, size: str, level: str, category: str, months: int):
        super().__init__(
            f"No rate for size={size!r} level={level!r} category={category!r} months={months}"
        )
        self.size = size
        self.level = level
        self.category = category
        self.months = months


class RecordNotFound(NotFoundError):
    def __init__(self, kind: str, key):
        super().__init__(f"{kind} {key!r} not found")
        self.kind = kind
        self.key = key


class StorageError(BillingError):
    """The record store failed; the original exception is chained."""
