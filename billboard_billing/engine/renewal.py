# billboard_billing/engine/renewal.py

import math
from dataclasses import dataclass
from datetime import date
from decimal import ROUND_HALF_UP, Decimal
from typing import Optional, Tuple

from dateutil.relativedelta import relativedelta

from billboard_billing.engine.types import Contract, ContractDraft

DAYS_PER_MONTH = 30


@dataclass(frozen=True)
class RenewalPlan:
    source_number: str
    start_date: date
    end_date: date
    months: int
    billboard_ids: Tuple[str, ...]
    rent_cost: Optional[Decimal] = None

    @property
    def needs_pricing(self) -> bool:
        return self.rent_cost is None

    def to_draft(self, source: Contract, rent_cost: Optional[Decimal] = None) -> ContractDraft:
        cost = self.rent_cost if rent_cost is None else rent_cost
        return ContractDraft(
            customer=source.customer,
            ad_type=source.ad_type,
            start_date=self.start_date,
            end_date=self.end_date,
            billboard_ids=self.billboard_ids,
            rent_cost=cost if cost is not None else Decimal("0"),
        )


def infer_months(start: Optional[date], end: Optional[date]) -> int:
    """
    Whole months spanned by a contract, at least one.

    The day span is rounded up to whole days, then divided by 30 and
    rounded half up: 90 days is 3 months, 45 days is 2.
    """
    if start is None or end is None:
        return 1
    diff_days = max(1, math.ceil(abs((end - start).days)))
    months = (Decimal(diff_days) / DAYS_PER_MONTH).quantize(Decimal("1"), rounding=ROUND_HALF_UP)
    return max(1, int(months))


def add_months(start: date, months: int) -> date:
    # Calendar months; Jan 31 + 1 month is the last day of February.
    return start + relativedelta(months=months)


def plan_renewal(
    source: Contract,
    today: date,
    start_date: Optional[date] = None,
    end_date: Optional[date] = None,
    keep_cost: bool = True,
) -> RenewalPlan:
    """
    Derive a renewal of ``source``.

    The new contract starts today unless ``start_date`` is given, runs for
    as many months as the source did (or until ``end_date``) and keeps the
    same billboards. With ``keep_cost`` the rent is copied verbatim;
    otherwise the plan leaves it unset for re-pricing.
    """
    start = start_date or today
    if end_date is None:
        months = infer_months(source.start_date, source.end_date)
        end = add_months(start, months)
    else:
        months = infer_months(start, end_date)
        end = end_date
    return RenewalPlan(
        source_number=source.number,
        start_date=start,
        end_date=end,
        months=months,
        billboard_ids=tuple(source.billboard_ids),
        rent_cost=source.rent_cost if keep_cost else None,
    )
