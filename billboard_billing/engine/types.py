# billboard_billing/engine/types.py
"""
Normalized record shapes the engine works on.

Everything here is immutable. Rows coming from the database or from CSV
exports are mapped into these types by ``billboard_billing.db.normalize``;
the engine never sees raw records.
"""

from dataclasses import asdict, dataclass, field
from datetime import date
from decimal import Decimal
from enum import Enum
from typing import Optional, Tuple


class CustomerCategory(str, Enum):
    """Pricing tier of a customer; selects the rate-card column."""

    REGULAR = "regular"
    MUNICIPALITY = "municipality"
    MARKETER = "marketer"
    CORPORATE = "corporate"


class EntryType(str, Enum):
    INVOICE = "invoice"
    RECEIPT = "receipt"
    DEBT = "debt"
    ACCOUNT_PAYMENT = "account_payment"


class ContractStatus(str, Enum):
    UNDEFINED = "undefined"
    UPCOMING = "upcoming"
    ACTIVE = "active"
    EXPIRING_SOON = "expiring_soon"
    EXPIRED = "expired"


@dataclass(frozen=True)
class CustomerRef:
    """A customer known by id, by name, or both."""

    id: Optional[str] = None
    name: Optional[str] = None

    def __bool__(self) -> bool:
        return bool(self.id or self.name)


@dataclass(frozen=True)
class Billboard:
    id: str
    size: str
    level: str
    monthly_price: Decimal = Decimal("0")
    name: str = ""
    city: str = ""
    location: str = ""


@dataclass(frozen=True)
class RateCardEntry:
    size: str
    level: str
    category: CustomerCategory
    months: int
    price: Decimal


@dataclass(frozen=True)
class Contract:
    number: str
    customer: CustomerRef
    ad_type: str = ""
    start_date: Optional[date] = None
    end_date: Optional[date] = None
    rent_cost: Decimal = Decimal("0")
    billboard_ids: Tuple[str, ...] = ()


@dataclass(frozen=True)
class PaymentEntry:
    id: Optional[int]
    customer: CustomerRef
    amount: Decimal
    entry_type: EntryType
    contract_number: Optional[str] = None
    method: str = ""
    reference: str = ""
    notes: str = ""
    paid_at: Optional[date] = None

    @property
    def is_account_level(self) -> bool:
        return self.contract_number is None or self.entry_type is EntryType.ACCOUNT_PAYMENT


@dataclass(frozen=True)
class ContractDraft:
    customer: CustomerRef
    start_date: Optional[date]
    end_date: Optional[date]
    billboard_ids: Tuple[str, ...] = ()
    ad_type: str = ""
    rent_cost: Decimal = Decimal("0")


@dataclass(frozen=True)
class PaymentDraft:
    customer: CustomerRef
    amount: Decimal
    entry_type: EntryType
    contract_number: Optional[str] = None
    method: str = ""
    reference: str = ""
    notes: str = ""
    paid_at: Optional[date] = None


@dataclass(frozen=True)
class PaymentPatch:
    """Fields of a payment that may change after creation. ``None`` leaves a field as is."""

    amount: Optional[Decimal] = None
    method: Optional[str] = None
    reference: Optional[str] = None
    notes: Optional[str] = None
    paid_at: Optional[date] = None

    def changes(self) -> dict:
        return {k: v for k, v in asdict(self).items() if v is not None}


@dataclass(frozen=True)
class ContractBalance:
    total: Decimal
    paid: Decimal
    remaining: Decimal


@dataclass(frozen=True)
class BalanceSummary:
    total_rent: Decimal
    total_paid: Decimal
    customer_balance: Decimal
    account_balance: Decimal
    per_contract: dict = field(default_factory=dict)
