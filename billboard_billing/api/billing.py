# billboard_billing/api/billing.py

from datetime import date
from typing import Optional

from fastapi import APIRouter, Depends

from billboard_billing import workflows
from billboard_billing.api.deps import customer_ref, get_repository, get_today
from billboard_billing.config import settings
from billboard_billing.db.repository import Repository
from billboard_billing.engine import invoices
from billboard_billing.errors import ValidationError
from billboard_billing.models.billing import (
    BillingSummaryOut,
    ContractBalanceOut,
    InvoiceLineOut,
    InvoiceOut,
    InvoiceRequest,
    PrintInvoiceRequest,
    StatementOut,
)
from billboard_billing.models.customers import CustomerRefOut
from billboard_billing.models.payments import PaymentOut

router = APIRouter(prefix="/billing", tags=["billing"])


def _summary(billing: workflows.CustomerBilling) -> BillingSummaryOut:
    b = billing.balances
    return BillingSummaryOut(
        customer=CustomerRefOut.model_validate(billing.customer),
        total_rent=b.total_rent,
        total_paid=b.total_paid,
        customer_balance=b.customer_balance,
        account_balance=b.account_balance,
        per_contract={
            number: ContractBalanceOut.model_validate(cb) for number, cb in b.per_contract.items()
        },
        contract_count=len(billing.contracts),
        entry_count=len(billing.payments),
    )


@router.get("/summary", response_model=BillingSummaryOut)
def billing_summary(
    customer_id: Optional[str] = None,
    customer_name: Optional[str] = None,
    repo: Repository = Depends(get_repository),
) -> BillingSummaryOut:
    """
    Totals for one customer. Looked up by id first, then by name.
    """
    billing = workflows.customer_billing(repo, customer_ref(customer_id, customer_name))
    return _summary(billing)


@router.get("/statement", response_model=StatementOut)
def statement(
    customer_id: Optional[str] = None,
    customer_name: Optional[str] = None,
    repo: Repository = Depends(get_repository),
) -> StatementOut:
    billing = workflows.customer_billing(repo, customer_ref(customer_id, customer_name))
    return StatementOut(
        summary=_summary(billing),
        entries=[PaymentOut.model_validate(p) for p in workflows.statement_rows(billing.payments)],
    )


def _lines_out(lines) -> list:
    out = []
    for line in lines:
        if isinstance(line, invoices.PrintLine):
            out.append(InvoiceLineOut(
                contract_number=line.contract_number,
                ad_type=line.ad_type,
                quantity=line.units,
                unit_price=line.price_per_unit,
                total=line.total,
            ))
        else:
            out.append(InvoiceLineOut(
                contract_number=line.contract_number,
                ad_type=line.ad_type,
                quantity=line.quantity,
                unit_price=line.unit_price,
                total=line.total,
            ))
    return out


@router.post("/invoice", response_model=InvoiceOut)
def rent_invoice(
    body: InvoiceRequest,
    repo: Repository = Depends(get_repository),
    today: date = Depends(get_today),
) -> InvoiceOut:
    billing = workflows.customer_billing(repo, customer_ref(body.customer_id, body.customer_name))
    lines = invoices.rent_invoice_lines(billing.contracts)

    if body.lines is not None:
        by_number = {line.contract_number: line for line in lines}
        edited = []
        for item in body.lines:
            base = by_number.get(item.contract_number)
            if base is None:
                raise ValidationError(
                    f"contract {item.contract_number} does not belong to this customer",
                    field="lines",
                )
            edited.append(invoices.InvoiceLine(
                contract_number=base.contract_number,
                ad_type=base.ad_type,
                quantity=item.quantity,
                unit_price=base.unit_price if item.unit_price is None else item.unit_price,
            ))
        lines = edited

    totals = invoices.rent_invoice_total(
        lines,
        account_balance=billing.balances.account_balance,
        include_account_balance=body.include_account_balance,
    )
    return InvoiceOut(
        customer=CustomerRefOut.model_validate(billing.customer),
        lines=_lines_out(totals.lines),
        lines_total=totals.lines_total,
        account_balance=totals.account_balance,
        total=totals.total,
        issued_on=today,
    )


@router.post("/print-invoice", response_model=InvoiceOut)
def print_invoice(
    body: PrintInvoiceRequest,
    repo: Repository = Depends(get_repository),
    today: date = Depends(get_today),
) -> InvoiceOut:
    """
    Print/installation invoice over the contracts running today.
    """
    billing = workflows.customer_billing(repo, customer_ref(body.customer_id, body.customer_name))
    candidates = {
        line.contract_number: line
        for line in invoices.print_invoice_lines(billing.contracts, today, settings.default_print_price)
    }

    selected = []
    for item in body.lines:
        base = candidates.get(item.contract_number)
        if base is None:
            raise ValidationError(
                f"contract {item.contract_number} is not running for this customer",
                field="lines",
            )
        selected.append(invoices.select_line(base, item.units, item.price_per_unit))

    totals = invoices.print_invoice_total(selected, body.reason)
    return InvoiceOut(
        customer=CustomerRefOut.model_validate(billing.customer),
        lines=_lines_out(totals.lines),
        lines_total=totals.lines_total,
        account_balance=totals.account_balance,
        total=totals.total,
        issued_on=today,
        reason=body.reason.strip(),
    )
