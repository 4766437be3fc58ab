# billboard_billing/engine/pricing.py
"""
Price resolution for billboard line items.

A line is priced from the rate card when an exact (size, level, category,
months) entry exists. Otherwise the billboard's own monthly price is
multiplied by the number of months. The decision is made per billboard,
so one contract can mix rate-card and fallback lines.
"""

import logging
from dataclasses import dataclass
from decimal import Decimal
from typing import Iterable, Tuple

from billboard_billing.engine.rate_card import RateCard
from billboard_billing.engine.types import Billboard, CustomerCategory
from billboard_billing.errors import RateNotFound, ValidationError

logger = logging.getLogger(__name__)

SOURCE_RATE_CARD = "rate_card"
SOURCE_FALLBACK = "fallback"


@dataclass(frozen=True)
class LinePrice:
    billboard_id: str
    price: Decimal
    source: str


@dataclass(frozen=True)
class ContractQuote:
    category: CustomerCategory
    months: int
    lines: Tuple[LinePrice, ...]

    @property
    def total(self) -> Decimal:
        return sum((line.price for line in self.lines), Decimal("0"))


def as_category(value) -> CustomerCategory:
    try:
        return CustomerCategory(value)
    except ValueError:
        raise ValidationError(f"unknown customer category {value!r}", field="category") from None


def validate_months(months) -> int:
    if isinstance(months, bool) or not isinstance(months, int) or months < 1:
        raise ValidationError("months must be a positive whole number", field="months")
    return months


class PriceResolver:
    def __init__(self, rate_card: RateCard):
        self.rate_card = rate_card

    def resolve(self, billboard: Billboard, category: CustomerCategory, months: int) -> LinePrice:
        months = validate_months(months)
        category = as_category(category)
        try:
            price = self.rate_card.price_for(billboard.size, billboard.level, category, months)
            return LinePrice(billboard.id, price, SOURCE_RATE_CARD)
        except RateNotFound:
            price = billboard.monthly_price * months
            logger.info(
                "No rate for billboard %s (%s/%s/%s/%s); using monthly price %s x %s",
                billboard.id,
                billboard.size,
                billboard.level,
                category.value,
                months,
                billboard.monthly_price,
                months,
            )
            return LinePrice(billboard.id, price, SOURCE_FALLBACK)

    def quote(
        self,
        billboards: Iterable[Billboard],
        category: CustomerCategory,
        months: int,
    ) -> ContractQuote:
        """Price every billboard for the same duration; the total is the proposed rent_cost."""
        months = validate_months(months)
        category = as_category(category)
        lines = tuple(self.resolve(b, category, months) for b in billboards)
        return ContractQuote(category=category, months=months, lines=lines)
