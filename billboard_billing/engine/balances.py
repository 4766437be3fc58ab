# billboard_billing/engine/balances.py
"""
Customer and contract balances.

    total_rent        = sum of rent_cost over the customer's contracts
    total_paid        = sum of every ledger entry, whatever its type
    customer_balance  = max(0, total_rent - total_paid)
    account_balance   = sum of account-level entries (reported, never subtracted again)
    contract remaining = max(0, rent_cost - contract-level entries for it)

``debt`` entries are counted in total_paid and so lower the balance. That
is how existing ledgers were reconciled and is kept as is.
"""

from decimal import Decimal
from typing import Dict, Iterable

from billboard_billing.engine.ledger import Ledger, sum_amounts
from billboard_billing.engine.types import BalanceSummary, Contract, ContractBalance

ZERO = Decimal("0")


def clamp(value: Decimal) -> Decimal:
    return value if value > ZERO else ZERO


def contract_balance(contract: Contract, ledger: Ledger) -> ContractBalance:
    paid = sum_amounts(ledger.for_contract(contract.number))
    return ContractBalance(
        total=contract.rent_cost,
        paid=paid,
        remaining=clamp(contract.rent_cost - paid),
    )


def calculate_balances(contracts: Iterable[Contract], ledger: Ledger) -> BalanceSummary:
    contracts = list(contracts)
    total_rent = sum((c.rent_cost for c in contracts), ZERO)
    total_paid = sum_amounts(ledger.entries)
    account_balance = sum_amounts(ledger.account_level)

    per_contract: Dict[str, ContractBalance] = {
        c.number: contract_balance(c, ledger) for c in contracts
    }

    return BalanceSummary(
        total_rent=total_rent,
        total_paid=total_paid,
        customer_balance=clamp(total_rent - total_paid),
        account_balance=account_balance,
        per_contract=per_contract,
    )


def remaining_after_payment(balance: Decimal, amount: Decimal) -> Decimal:
    """Balance printed on a receipt: what is left once this payment is taken off."""
    return clamp(balance - amount)
