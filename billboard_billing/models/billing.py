# billboard_billing/models/billing.py

from datetime import date
from decimal import Decimal
from typing import Dict, List, Optional

from pydantic import BaseModel, Field

from billboard_billing.models.customers import CustomerRefIn, CustomerRefOut
from billboard_billing.models.payments import PaymentOut


class ContractBalanceOut(BaseModel):
    total: Decimal
    paid: Decimal
    remaining: Decimal

    class Config:
        from_attributes = True


class BillingSummaryOut(BaseModel):
    customer: CustomerRefOut
    total_rent: Decimal
    total_paid: Decimal
    customer_balance: Decimal
    account_balance: Decimal
    per_contract: Dict[str, ContractBalanceOut]
    contract_count: int
    entry_count: int


class StatementOut(BaseModel):
    summary: BillingSummaryOut
    entries: List[PaymentOut]


class InvoiceLineIn(BaseModel):
    contract_number: str
    quantity: int = 1
    unit_price: Optional[Decimal] = None


class InvoiceRequest(CustomerRefIn):
    # Omit lines to bill every contract once at its rent
    lines: Optional[List[InvoiceLineIn]] = None
    include_account_balance: bool = False


class PrintLineIn(BaseModel):
    contract_number: str
    units: Optional[int] = None
    price_per_unit: Optional[Decimal] = None


class PrintInvoiceRequest(CustomerRefIn):
    lines: List[PrintLineIn] = Field(default_factory=list)
    reason: str = ""


class InvoiceLineOut(BaseModel):
    contract_number: str
    ad_type: str
    quantity: int
    unit_price: Decimal
    total: Decimal


class InvoiceOut(BaseModel):
    customer: CustomerRefOut
    lines: List[InvoiceLineOut]
    lines_total: Decimal
    account_balance: Decimal
    total: Decimal
    issued_on: date
    reason: Optional[str] = None
