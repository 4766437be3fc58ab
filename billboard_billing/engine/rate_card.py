# billboard_billing/engine/rate_card.py

from decimal import Decimal
from typing import Dict, Iterable, List, Tuple

from billboard_billing.engine.types import CustomerCategory, RateCardEntry
from billboard_billing.errors import RateNotFound

RateKey = Tuple[str, str, CustomerCategory, int]


def _key(size: str, level: str, category, months: int) -> RateKey:
    return (size.strip(), level.strip().upper(), CustomerCategory(category), int(months))


class RateCard:
    """
    In-memory rate card keyed by (size, level, customer category, months).

    Not every combination exists; ``price_for`` raises ``RateNotFound`` for
    a missing one and leaves the fallback to the caller. Sizes match
    exactly, levels case-insensitively. When the same key appears twice the
    later entry wins.
    """

    def __init__(self, entries: Iterable[RateCardEntry] = ()):
        self._prices: Dict[RateKey, Decimal] = {}
        for entry in entries:
            self._prices[_key(entry.size, entry.level, entry.category, entry.months)] = entry.price

    def __len__(self) -> int:
        return len(self._prices)

    def __contains__(self, key) -> bool:
        return _key(*key) in self._prices

    def price_for(self, size: str, level: str, category, months: int) -> Decimal:
        key = _key(size, level, category, months)
        try:
            return self._prices[key]
        except KeyError:
            raise RateNotFound(size, level, key[2].value, months) from None

    def sizes(self) -> List[str]:
        return sorted({k[0] for k in self._prices})

    def levels(self) -> List[str]:
        return sorted({k[1] for k in self._prices})

    def durations(self) -> List[int]:
        return sorted({k[3] for k in self._prices})
