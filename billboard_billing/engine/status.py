# billboard_billing/engine/status.py
"""
Contract lifecycle classification.

There is no stored state: a contract's status is recomputed from its date
range and "today" every time it is needed. Comparisons are made on whole
calendar days; datetimes are truncated to their date first so the time of
day never shifts a boundary.
"""

from datetime import date, datetime
from typing import Dict, Iterable, List, Optional

from billboard_billing.engine.types import Contract, ContractStatus
from billboard_billing.errors import ValidationError

EXPIRING_WINDOW_DAYS = 30

STATUS_FILTERS = ("all", "active", "expiring", "expired", "upcoming")


def _as_date(value) -> Optional[date]:
    if isinstance(value, datetime):
        return value.date()
    return value


def days_remaining(end: date, today: date) -> int:
    return (_as_date(end) - _as_date(today)).days


def classify(start: Optional[date], end: Optional[date], today: date) -> ContractStatus:
    """
    Map a date range and today to exactly one status.

    The range is inclusive at both ends. Inside it, a contract with
    1..30 days left is EXPIRING_SOON; on its last day (0 days left) it is
    still ACTIVE.
    """
    start, end, today = _as_date(start), _as_date(end), _as_date(today)
    if start is None or end is None:
        return ContractStatus.UNDEFINED
    if today < start:
        return ContractStatus.UPCOMING
    if today > end:
        return ContractStatus.EXPIRED
    remaining = days_remaining(end, today)
    if 0 < remaining <= EXPIRING_WINDOW_DAYS:
        return ContractStatus.EXPIRING_SOON
    return ContractStatus.ACTIVE


def contract_status(contract: Contract, today: date) -> ContractStatus:
    return classify(contract.start_date, contract.end_date, today)


def matches_status_filter(contract: Contract, status_filter: str, today: date) -> bool:
    """
    List filtering. ``active`` means "running today" and so also matches
    contracts that are expiring soon. Undated contracts only match ``all``.
    """
    if status_filter not in STATUS_FILTERS:
        raise ValidationError(f"unknown status filter {status_filter!r}", field="status")
    if status_filter == "all":
        return True
    status = contract_status(contract, today)
    if status_filter == "active":
        return status in (ContractStatus.ACTIVE, ContractStatus.EXPIRING_SOON)
    if status_filter == "expiring":
        return status is ContractStatus.EXPIRING_SOON
    if status_filter == "expired":
        return status is ContractStatus.EXPIRED
    return status is ContractStatus.UPCOMING


def filter_by_status(contracts: Iterable[Contract], status_filter: str, today: date) -> List[Contract]:
    return [c for c in contracts if matches_status_filter(c, status_filter, today)]


def status_counts(contracts: Iterable[Contract], today: date) -> Dict[str, int]:
    contracts = list(contracts)
    counts = {name: 0 for name in STATUS_FILTERS}
    counts["all"] = len(contracts)
    for contract in contracts:
        for name in STATUS_FILTERS[1:]:
            if matches_status_filter(contract, name, today):
                counts[name] += 1
    return counts


def billing_active(contracts: Iterable[Contract], today: date) -> List[Contract]:
    """Contracts running today, plus undated ones (they are kept on billing screens)."""
    return [
        c
        for c in contracts
        if contract_status(c, today)
        in (ContractStatus.ACTIVE, ContractStatus.EXPIRING_SOON, ContractStatus.UNDEFINED)
    ]
