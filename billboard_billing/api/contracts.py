# billboard_billing/api/contracts.py

from datetime import date
from typing import List, Optional

from fastapi import APIRouter, Depends, Query

from billboard_billing import workflows
from billboard_billing.api.deps import (
    category_or_default,
    customer_ref,
    get_repository,
    get_today,
)
from billboard_billing.db.repository import Repository
from billboard_billing.engine.status import contract_status, days_remaining
from billboard_billing.engine.types import Contract, ContractDraft, ContractStatus
from billboard_billing.models.contracts import (
    ContractCreate,
    ContractOut,
    ContractStatsOut,
    RenewalPlanOut,
    RenewRequest,
)
from billboard_billing.models.customers import CustomerRefOut

router = APIRouter(prefix="/contracts", tags=["contracts"])


def _contract_out(contract: Contract, today: date) -> ContractOut:
    status = contract_status(contract, today)
    remaining = None
    if status in (ContractStatus.ACTIVE, ContractStatus.EXPIRING_SOON):
        remaining = days_remaining(contract.end_date, today)
    return ContractOut(
        number=contract.number,
        customer=CustomerRefOut.model_validate(contract.customer),
        ad_type=contract.ad_type,
        start_date=contract.start_date,
        end_date=contract.end_date,
        rent_cost=contract.rent_cost,
        billboard_ids=list(contract.billboard_ids),
        status=status,
        days_remaining=remaining,
    )


@router.get("/", response_model=List[ContractOut])
def list_contracts(
    status: str = Query("all", description="all | active | expiring | expired | upcoming"),
    search: str = Query("", description="Matches customer name, ad type or contract number"),
    customer_id: Optional[str] = None,
    customer_name: Optional[str] = None,
    as_of: Optional[date] = Query(default=None, description="ISO date; defaults to today"),
    repo: Repository = Depends(get_repository),
    today: date = Depends(get_today),
) -> List[ContractOut]:
    as_of = as_of or today
    customer = customer_ref(customer_id, customer_name)
    contracts = workflows.list_contracts(
        repo, as_of, status=status, search=search, customer=customer or None
    )
    return [_contract_out(c, as_of) for c in contracts]


@router.get("/stats", response_model=ContractStatsOut)
def contract_stats(
    as_of: Optional[date] = Query(default=None),
    repo: Repository = Depends(get_repository),
    today: date = Depends(get_today),
) -> ContractStatsOut:
    as_of = as_of or today
    return ContractStatsOut(counts=workflows.contract_stats(repo, as_of), as_of=as_of)


@router.post("/", response_model=ContractOut, status_code=201)
def create_contract(
    body: ContractCreate,
    repo: Repository = Depends(get_repository),
    today: date = Depends(get_today),
) -> ContractOut:
    draft = ContractDraft(
        customer=customer_ref(body.customer_id, body.customer_name),
        ad_type=body.ad_type,
        start_date=body.start_date,
        end_date=body.end_date,
        billboard_ids=tuple(body.billboard_ids),
        rent_cost=body.rent_cost,
    )
    contract = workflows.create_contract(
        repo, draft, category_or_default(body.category), months=body.months
    )
    return _contract_out(contract, today)


@router.get("/{contract_number}", response_model=ContractOut)
def get_contract(
    contract_number: str,
    repo: Repository = Depends(get_repository),
    today: date = Depends(get_today),
) -> ContractOut:
    return _contract_out(repo.get_contract(contract_number), today)


@router.post("/{contract_number}/renewal-plan", response_model=RenewalPlanOut)
def preview_renewal(
    contract_number: str,
    body: RenewRequest,
    repo: Repository = Depends(get_repository),
    today: date = Depends(get_today),
) -> RenewalPlanOut:
    """
    Proposed dates for a renewal, without creating anything.
    """
    plan = workflows.preview_renewal(
        repo, contract_number, today, body.start_date, body.end_date, body.keep_cost
    )
    return RenewalPlanOut.model_validate(plan)


@router.post("/{contract_number}/renew", response_model=ContractOut, status_code=201)
def renew_contract(
    contract_number: str,
    body: RenewRequest,
    repo: Repository = Depends(get_repository),
    today: date = Depends(get_today),
) -> ContractOut:
    contract = workflows.renew_contract(
        repo,
        contract_number,
        today,
        category_or_default(body.category),
        start_date=body.start_date,
        end_date=body.end_date,
        keep_cost=body.keep_cost,
    )
    return _contract_out(contract, today)
