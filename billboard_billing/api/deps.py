# billboard_billing/api/deps.py

from datetime import date
from typing import Optional

from billboard_billing.config import settings
from billboard_billing.db.engine import get_engine
from billboard_billing.db.repository import Repository
from billboard_billing.engine.types import CustomerCategory, CustomerRef


def get_repository() -> Repository:
    return Repository(get_engine())


def get_today() -> date:
    return date.today()


def category_or_default(category: Optional[CustomerCategory]) -> CustomerCategory:
    return category or settings.default_customer_category


def customer_ref(customer_id: Optional[str], customer_name: Optional[str]) -> CustomerRef:
    return CustomerRef(
        id=(customer_id or "").strip() or None,
        name=(customer_name or "").strip() or None,
    )
