# billboard_billing/api/rate_card.py

from typing import List

from fastapi import APIRouter, Depends

from billboard_billing import workflows
from billboard_billing.api.deps import category_or_default, get_repository
from billboard_billing.db.repository import Repository
from billboard_billing.models.contracts import (
    QuoteLineOut,
    QuoteOut,
    QuoteRequest,
    RateCardEntryOut,
)

router = APIRouter(prefix="/rate-card", tags=["rate-card"])


@router.get("/", response_model=List[RateCardEntryOut])
def list_rates(repo: Repository = Depends(get_repository)) -> List[RateCardEntryOut]:
    return [RateCardEntryOut.model_validate(entry) for entry in repo.get_rate_card()]


@router.post("/quote", response_model=QuoteOut)
def quote(body: QuoteRequest, repo: Repository = Depends(get_repository)) -> QuoteOut:
    """
    Proposed rent for a set of billboards: rate-card price per board, or
    the board's monthly price times the months when the card has no entry.
    """
    result = workflows.quote_contract(
        repo, body.billboard_ids, body.months, category_or_default(body.category)
    )
    return QuoteOut(
        category=result.category,
        months=result.months,
        lines=[QuoteLineOut.model_validate(line) for line in result.lines],
        total=result.total,
    )
