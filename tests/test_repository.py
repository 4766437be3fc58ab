from datetime import date
from decimal import Decimal

import pytest
from sqlalchemy import create_engine

from billboard_billing.db.repository import Repository
from billboard_billing.db.schema import contracts, customers, payments, rate_card
from billboard_billing.engine.types import (
    ContractDraft,
    CustomerRef,
    EntryType,
    PaymentDraft,
    PaymentPatch,
)
from billboard_billing.errors import RecordNotFound, StorageError


def _payment(repo, amount, entry_type=EntryType.RECEIPT, contract_number="1", paid_at=None):
    return repo.create_payment(PaymentDraft(
        customer=CustomerRef(id="C1", name="Acme Trading"),
        amount=Decimal(amount),
        entry_type=entry_type,
        contract_number=contract_number,
        paid_at=paid_at,
    ))


def test_list_customers_sorted_by_name(seeded, repo):
    assert [c["id"] for c in repo.list_customers()] == ["C1", "C2"]


def test_get_customer_missing(seeded, repo):
    with pytest.raises(RecordNotFound):
        repo.get_customer("nope")


def test_resolve_customer_by_name_case_insensitive(seeded, repo):
    assert repo.resolve_customer(CustomerRef(name="acme trading")).id == "C1"
    assert repo.resolve_customer(CustomerRef(id="C2")).name == "Beta Foods"
    assert repo.resolve_customer(CustomerRef(name="Nobody")).id is None


def test_contracts_by_customer_id(seeded, repo):
    contracts = repo.get_contracts(CustomerRef(id="C1"))
    assert [c.number for c in contracts] == ["1", "2"]
    assert contracts[0].billboard_ids == ("B1", "B2")
    assert contracts[0].rent_cost == Decimal("10000")


def test_name_fallback_when_id_matches_nothing(seeded, repo):
    contracts = repo.get_contracts(CustomerRef(id="UNKNOWN", name="beta"))
    assert [c.number for c in contracts] == ["3"]


def test_get_contract(seeded, repo):
    contract = repo.get_contract("1")
    assert contract.ad_type == "Soft drinks"
    assert contract.end_date == date(2024, 1, 31)
    with pytest.raises(RecordNotFound):
        repo.get_contract("99")
    with pytest.raises(RecordNotFound):
        repo.get_contract("abc")


def test_get_billboards_keeps_order_and_reports_missing(seeded, repo):
    assert [b.id for b in repo.get_billboards(["B3", "B1"])] == ["B3", "B1"]
    with pytest.raises(RecordNotFound) as exc:
        repo.get_billboards(["B1", "B404"])
    assert exc.value.key == "B404"


def test_rate_card(seeded, repo):
    card = repo.load_rate_card()
    assert len(card) == 1
    assert card.price_for("12x4", "A", "regular", 3) == Decimal("4500")


def test_create_contract(seeded, repo):
    created = repo.create_contract(ContractDraft(
        customer=CustomerRef(id="C2", name="Beta Foods"),
        ad_type="Juice",
        start_date=date(2024, 2, 1),
        end_date=date(2024, 4, 30),
        billboard_ids=("B2", "B1"),
        rent_cost=Decimal("7000"),
    ))
    assert created.number == "4"
    assert created.billboard_ids == ("B2", "B1")
    assert [c.number for c in repo.get_contracts(CustomerRef(id="C2"))] == ["3", "4"]


def test_payment_lifecycle(seeded, repo):
    entry = _payment(repo, "3000", paid_at=date(2024, 1, 10))
    assert entry.id is not None
    assert entry.contract_number == "1"

    updated = repo.update_payment(entry.id, PaymentPatch(amount=Decimal("3500"), notes="corrected"))
    assert updated.amount == Decimal("3500")
    assert updated.notes == "corrected"
    assert updated.paid_at == date(2024, 1, 10)

    repo.delete_payment(entry.id)
    with pytest.raises(RecordNotFound):
        repo.get_payment(entry.id)
    with pytest.raises(RecordNotFound):
        repo.delete_payment(entry.id)


def test_update_missing_payment(seeded, repo):
    with pytest.raises(RecordNotFound):
        repo.update_payment(404, PaymentPatch(amount=Decimal("1")))
    with pytest.raises(RecordNotFound):
        repo.update_payment(404, PaymentPatch())


def test_payments_newest_first(seeded, repo):
    _payment(repo, "100", paid_at=date(2024, 1, 1))
    _payment(repo, "200", paid_at=date(2024, 1, 5))
    amounts = [p.amount for p in repo.get_payments(CustomerRef(id="C1"))]
    assert amounts == [Decimal("200"), Decimal("100")]


def test_snapshot(seeded, repo):
    _payment(repo, "2000", EntryType.DEBT, contract_number=None)
    snapshot = repo.customer_snapshot(CustomerRef(id="C1"))
    assert len(snapshot.contracts) == 2
    assert [p.entry_type for p in snapshot.payments] == [EntryType.DEBT]


def test_storage_failures_are_wrapped(tmp_path):
    # No tables created
    repo = Repository(create_engine(f"sqlite:///{tmp_path / 'empty.sqlite'}"))
    with pytest.raises(StorageError):
        repo.list_customers()


def test_unusable_rate_card_rows_are_skipped(seeded, repo, caplog):
    with seeded.begin() as conn:
        conn.execute(rate_card.insert().values(
            size="8x3", level="B", category="vip", months=1, price=Decimal("10"),
        ))
    card = repo.load_rate_card()
    assert len(card) == 1
    assert "vip" in caplog.text


def test_unknown_stored_entry_type_reads_as_receipt(seeded, repo):
    with seeded.begin() as conn:
        result = conn.execute(payments.insert().values(
            customer_id="C1", customer_name="Acme Trading", amount=Decimal("50"), entry_type="cash",
        ))
    entry = repo.get_payment(result.inserted_primary_key[0])
    assert entry.entry_type is EntryType.RECEIPT


def test_name_fallback_matches_wildcards_literally(seeded, repo):
    with seeded.begin() as conn:
        conn.execute(customers.insert().values(id="C3", name="50%_Media"))
        conn.execute(contracts.insert().values(id=4, customer_id="C3", customer_name="50%_Media"))
    assert [c.number for c in repo.get_contracts(CustomerRef(name="50%_media"))] == ["4"]
    assert [c.number for c in repo.get_contracts(CustomerRef(name="%"))] == ["4"]
    # "e t" in "Acme Trading" would match an unescaped "e_t"
    assert repo.get_contracts(CustomerRef(name="e_t")) == []
