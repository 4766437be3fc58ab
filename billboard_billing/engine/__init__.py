# billboard_billing/engine/__init__.py
"""
Pricing resolution and billing reconciliation.

Pure functions and value objects only: no database, no clock. Callers
load records, pass "today" explicitly and persist whatever comes back.
"""

from .balances import calculate_balances, contract_balance, remaining_after_payment
from .ledger import Ledger, group
from .pricing import ContractQuote, LinePrice, PriceResolver
from .rate_card import RateCard
from .renewal import RenewalPlan, infer_months, plan_renewal
from .status import classify, filter_by_status, status_counts

__all__ = [
    "ContractQuote",
    "Ledger",
    "LinePrice",
    "PriceResolver",
    "RateCard",
    "RenewalPlan",
    "calculate_balances",
    "classify",
    "contract_balance",
    "filter_by_status",
    "group",
    "infer_months",
    "plan_renewal",
    "remaining_after_payment",
    "status_counts",
]
