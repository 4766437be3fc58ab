from decimal import Decimal

import pytest

from billboard_billing.engine.pricing import (
    SOURCE_FALLBACK,
    SOURCE_RATE_CARD,
    PriceResolver,
    validate_months,
)
from billboard_billing.engine.rate_card import RateCard
from billboard_billing.engine.types import Billboard, CustomerCategory, RateCardEntry
from billboard_billing.errors import RateNotFound, ValidationError


@pytest.fixture
def card():
    return RateCard([
        RateCardEntry("12x4", "A", CustomerCategory.REGULAR, 3, Decimal("4500")),
        RateCardEntry("12x4", "A", CustomerCategory.CORPORATE, 3, Decimal("4000")),
    ])


class TestRateCard:
    def test_exact_key_hits(self, card):
        assert card.price_for("12x4", "A", CustomerCategory.REGULAR, 3) == Decimal("4500")

    def test_level_is_case_insensitive_and_size_is_stripped(self, card):
        assert card.price_for(" 12x4 ", "a", "regular", 3) == Decimal("4500")

    def test_missing_key_raises(self, card):
        with pytest.raises(RateNotFound) as exc:
            card.price_for("12x4", "A", CustomerCategory.MARKETER, 3)
        assert exc.value.category == "marketer"
        assert exc.value.months == 3

    def test_later_duplicate_wins(self):
        card = RateCard([
            RateCardEntry("8x3", "B", CustomerCategory.REGULAR, 1, Decimal("100")),
            RateCardEntry("8x3", "B", CustomerCategory.REGULAR, 1, Decimal("120")),
        ])
        assert len(card) == 1
        assert card.price_for("8x3", "B", CustomerCategory.REGULAR, 1) == Decimal("120")

    def test_dimensions(self, card):
        assert card.sizes() == ["12x4"]
        assert card.levels() == ["A"]
        assert card.durations() == [3]
        assert ("12x4", "A", "corporate", 3) in card


class TestPriceResolver:
    def test_rate_card_price_used_when_present(self, card):
        board = Billboard(id="B1", size="12x4", level="A", monthly_price=Decimal("900"))
        line = PriceResolver(card).resolve(board, CustomerCategory.REGULAR, 3)
        assert line.price == Decimal("4500")
        assert line.source == SOURCE_RATE_CARD

    def test_fallback_is_monthly_price_times_months(self, card):
        board = Billboard(id="B2", size="8x3", level="B", monthly_price=Decimal("800"))
        line = PriceResolver(card).resolve(board, CustomerCategory.REGULAR, 6)
        assert line.price == Decimal("4800")
        assert line.source == SOURCE_FALLBACK

    def test_fallback_with_zero_monthly_price(self, card):
        board = Billboard(id="B9", size="1x1", level="C")
        assert PriceResolver(card).resolve(board, "regular", 2).price == Decimal("0")

    def test_quote_mixes_sources_per_board(self, card):
        boards = [
            Billboard(id="B1", size="12x4", level="A", monthly_price=Decimal("900")),
            Billboard(id="B2", size="8x3", level="B", monthly_price=Decimal("800")),
        ]
        quote = PriceResolver(card).quote(boards, CustomerCategory.REGULAR, 3)
        assert [line.source for line in quote.lines] == [SOURCE_RATE_CARD, SOURCE_FALLBACK]
        assert quote.total == Decimal("6900")

    def test_empty_quote_totals_zero(self, card):
        assert PriceResolver(card).quote([], CustomerCategory.REGULAR, 1).total == Decimal("0")

    @pytest.mark.parametrize("months", [0, -1, 1.5, True, "3"])
    def test_bad_months_rejected(self, months):
        with pytest.raises(ValidationError):
            validate_months(months)

    def test_unknown_category_rejected(self, card):
        board = Billboard(id="B1", size="12x4", level="A")
        with pytest.raises(ValidationError) as exc:
            PriceResolver(card).resolve(board, "vip", 3)
        assert exc.value.field == "category"
