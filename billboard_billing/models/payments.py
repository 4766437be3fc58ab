# billboard_billing/models/payments.py

from datetime import date
from decimal import Decimal
from typing import Optional

from pydantic import BaseModel

from billboard_billing.engine.types import EntryType
from billboard_billing.models.customers import CustomerRefIn, CustomerRefOut


class PaymentCreate(CustomerRefIn):
    amount: Decimal
    entry_type: EntryType = EntryType.RECEIPT
    contract_number: Optional[str] = None
    method: str = ""
    reference: str = ""
    notes: str = ""
    paid_at: Optional[date] = None


class PaymentUpdate(BaseModel):
    amount: Optional[Decimal] = None
    method: Optional[str] = None
    reference: Optional[str] = None
    notes: Optional[str] = None
    paid_at: Optional[date] = None


class PaymentOut(BaseModel):
    id: int
    customer: CustomerRefOut
    contract_number: Optional[str] = None
    amount: Decimal
    method: str
    reference: str
    notes: str
    paid_at: Optional[date] = None
    entry_type: EntryType
    is_account_level: bool

    class Config:
        from_attributes = True


class ReceiptOut(BaseModel):
    payment: PaymentOut
    customer_balance: Decimal
    remaining_after_payment: Decimal
