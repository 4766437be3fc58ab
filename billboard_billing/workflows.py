# billboard_billing/workflows.py
"""
Operator workflows: load records, run the engine, persist the outcome.

Validation happens here, before any write. The engine calls in between
are pure; "today" is always passed in by the caller.
"""

import logging
from dataclasses import dataclass
from datetime import date
from decimal import Decimal
from typing import List, Optional

from billboard_billing.db.repository import Repository
from billboard_billing.engine import ledger as ledger_mod
from billboard_billing.engine.balances import calculate_balances, remaining_after_payment
from billboard_billing.engine.pricing import ContractQuote, PriceResolver, as_category, validate_months
from billboard_billing.engine.renewal import RenewalPlan, plan_renewal
from billboard_billing.engine.status import filter_by_status, status_counts
from billboard_billing.engine.types import (
    BalanceSummary,
    Contract,
    ContractDraft,
    CustomerCategory,
    CustomerRef,
    EntryType,
    PaymentDraft,
    PaymentEntry,
    PaymentPatch,
)
from billboard_billing.errors import ValidationError

logger = logging.getLogger(__name__)


@dataclass(frozen=True)
class CustomerBilling:
    customer: CustomerRef
    contracts: List[Contract]
    payments: List[PaymentEntry]
    ledger: ledger_mod.Ledger
    balances: BalanceSummary


def _positive_amount(value) -> Decimal:
    try:
        amount = Decimal(str(value))
    except (ArithmeticError, ValueError, TypeError):
        raise ValidationError(f"amount {value!r} is not a number", field="amount") from None
    if not amount.is_finite() or amount <= 0:
        raise ValidationError("amount must be greater than zero", field="amount")
    return amount


# ---- Contracts ----

def quote_contract(
    repo: Repository,
    billboard_ids: List[str],
    months: int,
    category: CustomerCategory,
) -> ContractQuote:
    months = validate_months(months)
    category = as_category(category)
    billboards = repo.get_billboards(billboard_ids)
    resolver = PriceResolver(repo.load_rate_card())
    return resolver.quote(billboards, category, months)


def create_contract(
    repo: Repository,
    draft: ContractDraft,
    category: CustomerCategory,
    months: Optional[int] = None,
) -> Contract:
    """
    Validate and store a new contract.

    When ``months`` is given the rent is priced from the rate card and
    replaces ``draft.rent_cost``; otherwise the draft's cost is taken as a
    manual figure.
    """
    if not draft.customer:
        raise ValidationError("customer is required", field="customer")
    if draft.start_date is None:
        raise ValidationError("start_date is required", field="start_date")
    if draft.end_date is None:
        raise ValidationError("end_date is required", field="end_date")
    if draft.end_date < draft.start_date:
        raise ValidationError("end_date is before start_date", field="end_date")
    if not draft.billboard_ids:
        raise ValidationError("select at least one billboard", field="billboard_ids")
    if len(set(draft.billboard_ids)) != len(draft.billboard_ids):
        raise ValidationError("a billboard is listed more than once", field="billboard_ids")

    customer = repo.resolve_customer(draft.customer)
    rent_cost = draft.rent_cost
    if months is not None:
        rent_cost = quote_contract(repo, list(draft.billboard_ids), months, category).total
    else:
        repo.get_billboards(draft.billboard_ids)

    return repo.create_contract(
        ContractDraft(
            customer=customer,
            ad_type=draft.ad_type,
            start_date=draft.start_date,
            end_date=draft.end_date,
            billboard_ids=tuple(draft.billboard_ids),
            rent_cost=rent_cost,
        )
    )


def _checked_plan(plan: RenewalPlan) -> RenewalPlan:
    if plan.end_date < plan.start_date:
        raise ValidationError("end_date is before start_date", field="end_date")
    return plan


def preview_renewal(
    repo: Repository,
    contract_number: str,
    today: date,
    start_date: Optional[date] = None,
    end_date: Optional[date] = None,
    keep_cost: bool = True,
) -> RenewalPlan:
    return _checked_plan(
        plan_renewal(repo.get_contract(contract_number), today, start_date, end_date, keep_cost)
    )


def renew_contract(
    repo: Repository,
    contract_number: str,
    today: date,
    category: CustomerCategory,
    start_date: Optional[date] = None,
    end_date: Optional[date] = None,
    keep_cost: bool = True,
) -> Contract:
    source = repo.get_contract(contract_number)
    plan = _checked_plan(plan_renewal(source, today, start_date, end_date, keep_cost))

    rent_cost = None
    if plan.needs_pricing:
        rent_cost = quote_contract(repo, list(plan.billboard_ids), plan.months, category).total

    created = repo.create_contract(plan.to_draft(source, rent_cost))
    logger.info(
        "Renewed contract %s as %s (%s months, %s)",
        source.number,
        created.number,
        plan.months,
        "cost kept" if keep_cost else "re-priced",
    )
    return created


def list_contracts(
    repo: Repository,
    today: date,
    status: str = "all",
    search: str = "",
    customer: Optional[CustomerRef] = None,
) -> List[Contract]:
    contracts = filter_by_status(repo.get_contracts(customer), status, today)
    query = search.strip().lower()
    if not query:
        return contracts
    return [
        c
        for c in contracts
        if query in (c.customer.name or "").lower()
        or query in c.ad_type.lower()
        or query in c.number
    ]


def contract_stats(repo: Repository, today: date) -> dict:
    return status_counts(repo.get_contracts(), today)


# ---- Ledger entries ----

def record_payment(
    repo: Repository,
    customer: CustomerRef,
    amount,
    entry_type: EntryType,
    contract_number: Optional[str] = None,
    method: str = "",
    reference: str = "",
    notes: str = "",
    paid_at: Optional[date] = None,
    today: Optional[date] = None,
) -> PaymentEntry:
    """
    Store a receipt, a prior debt or an account payment.

    Debts and account payments are never tied to a contract. A receipt
    must name a contract that exists.
    """
    if not customer:
        raise ValidationError("customer is required", field="customer")
    amount = _positive_amount(amount)
    try:
        entry_type = EntryType(entry_type)
    except ValueError:
        raise ValidationError(f"unknown entry type {entry_type!r}", field="entry_type") from None

    if entry_type in (EntryType.DEBT, EntryType.ACCOUNT_PAYMENT):
        contract_number = None
    elif entry_type is EntryType.RECEIPT:
        if not contract_number:
            raise ValidationError("a receipt must name a contract", field="contract_number")
        repo.get_contract(contract_number)

    customer = repo.resolve_customer(customer)
    draft = PaymentDraft(
        customer=customer,
        amount=amount,
        entry_type=entry_type,
        contract_number=str(contract_number) if contract_number else None,
        method=method,
        reference=reference,
        notes=notes,
        paid_at=paid_at or today,
    )
    return repo.create_payment(draft)


def edit_payment(repo: Repository, payment_id: int, patch: PaymentPatch) -> PaymentEntry:
    if patch.amount is not None:
        patch = PaymentPatch(
            amount=_positive_amount(patch.amount),
            method=patch.method,
            reference=patch.reference,
            notes=patch.notes,
            paid_at=patch.paid_at,
        )
    return repo.update_payment(payment_id, patch)


def remove_payment(repo: Repository, payment_id: int) -> None:
    repo.delete_payment(payment_id)


# ---- Reconciliation ----

def customer_billing(repo: Repository, customer: CustomerRef) -> CustomerBilling:
    if not customer:
        raise ValidationError("customer id or name is required", field="customer")
    customer = repo.resolve_customer(customer)
    snapshot = repo.customer_snapshot(customer)
    ledger = ledger_mod.group(snapshot.payments)
    balances = calculate_balances(snapshot.contracts, ledger)
    logger.debug(
        "Billing for %s: rent=%s paid=%s balance=%s",
        customer.name or customer.id,
        balances.total_rent,
        balances.total_paid,
        balances.customer_balance,
    )
    return CustomerBilling(
        customer=customer,
        contracts=snapshot.contracts,
        payments=snapshot.payments,
        ledger=ledger,
        balances=balances,
    )


def statement_rows(payments: List[PaymentEntry]) -> List[PaymentEntry]:
    """Entries oldest first; undated entries lead."""
    return sorted(payments, key=lambda p: (p.paid_at is not None, p.paid_at or date.min))


def receipt_remaining(billing: CustomerBilling, payment: PaymentEntry) -> Decimal:
    return remaining_after_payment(billing.balances.customer_balance, payment.amount)
