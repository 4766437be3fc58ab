# billboard_billing/api/customers.py

from typing import List

from fastapi import APIRouter, Depends, HTTPException, Query

from billboard_billing.api.deps import get_repository
from billboard_billing.db.repository import Repository
from billboard_billing.engine.types import CustomerRef
from billboard_billing.models.customers import CustomerOut, CustomerRefOut

router = APIRouter(prefix="/customers", tags=["customers"])


@router.get("/", response_model=List[CustomerOut])
def list_customers(repo: Repository = Depends(get_repository)) -> List[CustomerOut]:
    """
    Return all customers with their contact info.
    """
    return [CustomerOut(**row) for row in repo.list_customers()]


@router.get("/resolve", response_model=CustomerRefOut)
def resolve_customer(
    name: str = Query(..., description="Customer name (case-insensitive exact match)"),
    repo: Repository = Depends(get_repository),
) -> CustomerRefOut:
    """
    Find the id behind a customer name.
    """
    ref = repo.resolve_customer(CustomerRef(name=name.strip()))
    if ref.id is None:
        raise HTTPException(status_code=404, detail="Customer not found")
    return CustomerRefOut.model_validate(ref)


@router.get("/{customer_id}", response_model=CustomerOut)
def get_customer(customer_id: str, repo: Repository = Depends(get_repository)) -> CustomerOut:
    """
    Return a single customer by ID.
    """
    return CustomerOut(**repo.get_customer(customer_id))
