# billboard_billing/engine/invoices.py
"""
Invoice drafts built from a customer's contracts.

Two kinds: a rent invoice with one editable line per contract, optionally
carrying the account balance, and a print/installation invoice billed per
board for the contracts running today.
"""

from dataclasses import dataclass, replace
from datetime import date
from decimal import Decimal
from typing import Iterable, List, Optional

from billboard_billing.engine.status import billing_active
from billboard_billing.engine.types import Contract
from billboard_billing.errors import ValidationError

ZERO = Decimal("0")


@dataclass(frozen=True)
class InvoiceLine:
    contract_number: str
    ad_type: str
    quantity: int
    unit_price: Decimal

    @property
    def total(self) -> Decimal:
        return self.unit_price * self.quantity


@dataclass(frozen=True)
class PrintLine:
    contract_number: str
    ad_type: str
    units: int
    price_per_unit: Decimal
    selected: bool = False

    @property
    def total(self) -> Decimal:
        return self.price_per_unit * self.units if self.selected else ZERO


@dataclass(frozen=True)
class InvoiceTotals:
    lines: tuple
    lines_total: Decimal
    account_balance: Decimal
    total: Decimal


def rent_invoice_lines(contracts: Iterable[Contract]) -> List[InvoiceLine]:
    return [
        InvoiceLine(
            contract_number=c.number,
            ad_type=c.ad_type,
            quantity=1,
            unit_price=c.rent_cost,
        )
        for c in contracts
    ]


def rent_invoice_total(
    lines: Iterable[InvoiceLine],
    account_balance: Decimal = ZERO,
    include_account_balance: bool = False,
) -> InvoiceTotals:
    billed = tuple(line for line in lines if line.quantity > 0)
    if not billed:
        raise ValidationError("select at least one invoice line", field="lines")
    lines_total = sum((line.total for line in billed), ZERO)
    carried = account_balance if include_account_balance else ZERO
    return InvoiceTotals(
        lines=billed,
        lines_total=lines_total,
        account_balance=carried,
        total=lines_total + carried,
    )


def print_invoice_lines(
    contracts: Iterable[Contract],
    today: date,
    price_per_unit: Decimal,
) -> List[PrintLine]:
    return [
        PrintLine(
            contract_number=c.number,
            ad_type=c.ad_type,
            units=len(c.billboard_ids) or 1,
            price_per_unit=price_per_unit,
        )
        for c in billing_active(contracts, today)
    ]


def select_line(line: PrintLine, units: Optional[int] = None, price_per_unit: Optional[Decimal] = None) -> PrintLine:
    changes = {"selected": True}
    if units is not None:
        changes["units"] = units
    if price_per_unit is not None:
        changes["price_per_unit"] = price_per_unit
    return replace(line, **changes)


def print_invoice_total(lines: Iterable[PrintLine], reason: str) -> InvoiceTotals:
    billed = tuple(line for line in lines if line.selected and line.units > 0)
    if not billed:
        raise ValidationError("select at least one contract and a number of units", field="lines")
    if not (reason or "").strip():
        raise ValidationError("a reason for the print job is required", field="reason")
    lines_total = sum((line.total for line in billed), ZERO)
    return InvoiceTotals(lines=billed, lines_total=lines_total, account_balance=ZERO, total=lines_total)
