# billboard_billing/models/contracts.py

from datetime import date
from decimal import Decimal
from typing import Dict, List, Optional

from pydantic import BaseModel, Field

from billboard_billing.engine.types import ContractStatus, CustomerCategory
from billboard_billing.models.customers import CustomerRefIn, CustomerRefOut


class ContractOut(BaseModel):
    number: str
    customer: CustomerRefOut
    ad_type: str
    start_date: Optional[date] = None
    end_date: Optional[date] = None
    rent_cost: Decimal
    billboard_ids: List[str]
    status: ContractStatus
    days_remaining: Optional[int] = None


class ContractCreate(CustomerRefIn):
    ad_type: str = ""
    start_date: Optional[date] = None
    end_date: Optional[date] = None
    billboard_ids: List[str] = Field(default_factory=list)
    # Price from the rate card for this many months; omit to keep rent_cost as entered
    months: Optional[int] = None
    category: Optional[CustomerCategory] = None
    rent_cost: Decimal = Decimal("0")


class RenewRequest(BaseModel):
    start_date: Optional[date] = None
    end_date: Optional[date] = None
    keep_cost: bool = True
    category: Optional[CustomerCategory] = None


class RenewalPlanOut(BaseModel):
    source_number: str
    start_date: date
    end_date: date
    months: int
    billboard_ids: List[str]
    rent_cost: Optional[Decimal] = None

    class Config:
        from_attributes = True


class ContractStatsOut(BaseModel):
    counts: Dict[str, int]
    as_of: date


class QuoteRequest(BaseModel):
    billboard_ids: List[str]
    months: int
    category: Optional[CustomerCategory] = None


class QuoteLineOut(BaseModel):
    billboard_id: str
    price: Decimal
    source: str

    class Config:
        from_attributes = True


class QuoteOut(BaseModel):
    category: CustomerCategory
    months: int
    lines: List[QuoteLineOut]
    total: Decimal


class RateCardEntryOut(BaseModel):
    size: str
    level: str
    category: CustomerCategory
    months: int
    price: Decimal

    class Config:
        from_attributes = True
