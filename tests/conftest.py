from datetime import date
from decimal import Decimal

import pytest
from fastapi.testclient import TestClient
from sqlalchemy import create_engine
from sqlalchemy.pool import StaticPool

from billboard_billing.api.deps import get_repository, get_today
from billboard_billing.db.repository import Repository
from billboard_billing.db.schema import (
    billboards,
    contract_billboards,
    contracts,
    customers,
    metadata,
    rate_card,
)
from billboard_billing.main import app

TODAY = date(2024, 1, 15)


@pytest.fixture()
def engine():
    engine = create_engine(
        "sqlite+pysqlite:///:memory:",
        connect_args={"check_same_thread": False},
        poolclass=StaticPool,
    )
    metadata.create_all(engine)
    yield engine
    engine.dispose()


@pytest.fixture()
def repo(engine):
    return Repository(engine)


@pytest.fixture()
def seeded(engine):
    """
    Two customers, three billboards, one rate-card entry and three contracts.

    Contract 1 (Acme) runs through 2024-01-31, so it is expiring soon on
    TODAY; contract 2 (Acme) ended in 2023; contract 3 (Beta) starts in
    March.
    """
    with engine.begin() as conn:
        conn.execute(customers.insert(), [
            {"id": "C1", "name": "Acme Trading", "contact_email": "billing@acme.example"},
            {"id": "C2", "name": "Beta Foods", "contact_email": None},
        ])
        conn.execute(billboards.insert(), [
            {"id": "B1", "name": "Airport Road", "size": "12x4", "level": "A", "monthly_price": Decimal("900")},
            {"id": "B2", "name": "Harbour", "size": "8x3", "level": "B", "monthly_price": Decimal("800")},
            {"id": "B3", "name": "Old Town", "size": "12x4", "level": "A", "monthly_price": Decimal("950")},
        ])
        conn.execute(rate_card.insert(), [
            {"size": "12x4", "level": "A", "category": "regular", "months": 3, "price": Decimal("4500")},
        ])
        conn.execute(contracts.insert(), [
            {"id": 1, "customer_id": "C1", "customer_name": "Acme Trading", "ad_type": "Soft drinks",
             "start_date": date(2023, 11, 1), "end_date": date(2024, 1, 31), "rent_cost": Decimal("10000")},
            {"id": 2, "customer_id": "C1", "customer_name": "Acme Trading", "ad_type": "Banking",
             "start_date": date(2023, 1, 1), "end_date": date(2023, 6, 30), "rent_cost": Decimal("3000")},
            {"id": 3, "customer_id": "C2", "customer_name": "Beta Foods", "ad_type": "Snacks",
             "start_date": date(2024, 3, 1), "end_date": date(2024, 5, 31), "rent_cost": Decimal("6000")},
        ])
        conn.execute(contract_billboards.insert(), [
            {"contract_id": 1, "billboard_id": "B1", "position": 0},
            {"contract_id": 1, "billboard_id": "B2", "position": 1},
            {"contract_id": 2, "billboard_id": "B3", "position": 0},
            {"contract_id": 3, "billboard_id": "B3", "position": 0},
        ])
    return engine


@pytest.fixture()
def client(seeded):
    app.dependency_overrides[get_repository] = lambda: Repository(seeded)
    app.dependency_overrides[get_today] = lambda: TODAY
    with TestClient(app) as c:
        yield c
    app.dependency_overrides.clear()
