# billboard_billing/db/repository.py
"""
Record store for contracts, billboards, payments and the rate card.

Every row leaves this module as a normalized engine type. Any SQLAlchemy
failure is re-raised as ``StorageError``; nothing here retries.
"""

import logging
from contextlib import contextmanager
from dataclasses import dataclass
from typing import Dict, Iterator, List, Optional

from sqlalchemy import delete, func, insert, select, update
from sqlalchemy.engine import Connection, Engine
from sqlalchemy.exc import SQLAlchemyError

from billboard_billing.db.normalize import (
    normalize_billboard,
    normalize_contract,
    normalize_payment,
    normalize_rate_entry,
)
from billboard_billing.db.schema import (
    billboards,
    contract_billboards,
    contracts,
    customers,
    payments,
    rate_card,
)
from billboard_billing.engine.rate_card import RateCard
from billboard_billing.engine.types import (
    Billboard,
    Contract,
    ContractDraft,
    CustomerRef,
    PaymentDraft,
    PaymentEntry,
    PaymentPatch,
    RateCardEntry,
)
from billboard_billing.errors import RecordNotFound, StorageError, ValidationError

logger = logging.getLogger(__name__)


@dataclass(frozen=True)
class CustomerSnapshot:
    """A customer's contracts and payments read in one transaction."""

    customer: CustomerRef
    contracts: List[Contract]
    payments: List[PaymentEntry]


class Repository:
    def __init__(self, engine: Engine):
        self.engine = engine

    @contextmanager
    def _connect(self, write: bool = False) -> Iterator[Connection]:
        try:
            ctx = self.engine.begin() if write else self.engine.connect()
            with ctx as conn:
                yield conn
        except SQLAlchemyError as exc:
            logger.error("Storage failure: %s", exc)
            raise StorageError(str(exc)) from exc

    # ---- Customers ----

    def list_customers(self) -> List[dict]:
        with self._connect() as conn:
            rows = conn.execute(select(customers).order_by(customers.c.name)).mappings().all()
        return [dict(row) for row in rows]

    def get_customer(self, customer_id: str) -> dict:
        with self._connect() as conn:
            row = conn.execute(
                select(customers).where(customers.c.id == customer_id)
            ).mappings().first()
        if row is None:
            raise RecordNotFound("customer", customer_id)
        return dict(row)

    def resolve_customer(self, ref: CustomerRef) -> CustomerRef:
        """
        Fill in whichever half of the reference is missing.

        id -> name by primary key; name -> id by case-insensitive exact
        match (first one wins). An unknown customer is returned unchanged.
        """
        if ref.id and ref.name:
            return ref
        with self._connect() as conn:
            if ref.id:
                name = conn.execute(
                    select(customers.c.name).where(customers.c.id == ref.id)
                ).scalar_one_or_none()
                return CustomerRef(id=ref.id, name=name)
            if ref.name:
                customer_id = conn.execute(
                    select(customers.c.id)
                    .where(func.lower(customers.c.name) == func.lower(ref.name))
                    .order_by(customers.c.id)
                    .limit(1)
                ).scalar_one_or_none()
                return CustomerRef(id=customer_id, name=ref.name)
        return ref

    # ---- Lookups by customer ----

    @staticmethod
    def _by_customer(conn: Connection, table, customer: Optional[CustomerRef], order_by):
        """
        Rows of ``table`` belonging to ``customer``.

        The id is tried first. Only when it matches nothing does the lookup
        fall back to a case-insensitive substring match on the name, so
        namesakes are not merged when the id is known.
        """
        stmt = select(table).order_by(*order_by)
        if not customer:
            return conn.execute(stmt).mappings().all()

        rows = []
        if customer.id:
            rows = conn.execute(stmt.where(table.c.customer_id == customer.id)).mappings().all()
        if not rows and customer.name:
            rows = conn.execute(
                stmt.where(
                    func.lower(table.c.customer_name).contains(customer.name.lower(), autoescape=True)
                )
            ).mappings().all()
        return rows

    def _billboard_ids(self, conn: Connection, contract_ids: List[int]) -> Dict[int, List[str]]:
        out: Dict[int, List[str]] = {cid: [] for cid in contract_ids}
        if not contract_ids:
            return out
        rows = conn.execute(
            select(contract_billboards.c.contract_id, contract_billboards.c.billboard_id)
            .where(contract_billboards.c.contract_id.in_(contract_ids))
            .order_by(contract_billboards.c.contract_id, contract_billboards.c.position)
        ).all()
        for contract_id, billboard_id in rows:
            out[contract_id].append(billboard_id)
        return out

    def _contracts(self, conn: Connection, customer: Optional[CustomerRef]) -> List[Contract]:
        rows = self._by_customer(conn, contracts, customer, (contracts.c.id,))
        boards = self._billboard_ids(conn, [row["id"] for row in rows])
        return [normalize_contract(row, boards[row["id"]]) for row in rows]

    def _payments(self, conn: Connection, customer: Optional[CustomerRef]) -> List[PaymentEntry]:
        rows = self._by_customer(
            conn, payments, customer, (payments.c.paid_at.desc(), payments.c.id.desc())
        )
        return [normalize_payment(row, strict=False) for row in rows]

    def get_contracts(self, customer: Optional[CustomerRef] = None) -> List[Contract]:
        with self._connect() as conn:
            return self._contracts(conn, customer)

    def get_payments(self, customer: Optional[CustomerRef] = None) -> List[PaymentEntry]:
        with self._connect() as conn:
            return self._payments(conn, customer)

    def customer_snapshot(self, customer: CustomerRef) -> CustomerSnapshot:
        with self._connect() as conn:
            with conn.begin():
                return CustomerSnapshot(
                    customer=customer,
                    contracts=self._contracts(conn, customer),
                    payments=self._payments(conn, customer),
                )

    # ---- Single records ----

    def get_contract(self, number) -> Contract:
        try:
            contract_id = int(number)
        except (TypeError, ValueError):
            raise RecordNotFound("contract", number) from None
        with self._connect() as conn:
            row = conn.execute(
                select(contracts).where(contracts.c.id == contract_id)
            ).mappings().first()
            if row is None:
                raise RecordNotFound("contract", number)
            boards = self._billboard_ids(conn, [row["id"]])
        return normalize_contract(row, boards[row["id"]])

    def get_billboard(self, billboard_id: str) -> Billboard:
        with self._connect() as conn:
            row = conn.execute(
                select(billboards).where(billboards.c.id == billboard_id)
            ).mappings().first()
        if row is None:
            raise RecordNotFound("billboard", billboard_id)
        return normalize_billboard(row)

    def get_billboards(self, billboard_ids) -> List[Billboard]:
        """Billboards in the order asked for; unknown ids raise ``RecordNotFound``."""
        ids = list(billboard_ids)
        with self._connect() as conn:
            rows = conn.execute(select(billboards).where(billboards.c.id.in_(ids))).mappings().all()
        found = {row["id"]: normalize_billboard(row) for row in rows}
        missing = [i for i in ids if i not in found]
        if missing:
            raise RecordNotFound("billboard", missing[0])
        return [found[i] for i in ids]

    def get_payment(self, payment_id: int) -> PaymentEntry:
        with self._connect() as conn:
            row = conn.execute(
                select(payments).where(payments.c.id == payment_id)
            ).mappings().first()
        if row is None:
            raise RecordNotFound("payment", payment_id)
        return normalize_payment(row, strict=False)

    def get_rate_card(self) -> List[RateCardEntry]:
        with self._connect() as conn:
            rows = conn.execute(
                select(rate_card).order_by(
                    rate_card.c.size, rate_card.c.level, rate_card.c.category, rate_card.c.months
                )
            ).mappings().all()
        entries = []
        for row in rows:
            try:
                entries.append(normalize_rate_entry(row))
            except ValidationError as exc:
                logger.warning("Skipping rate card row %s: %s", row["id"], exc)
        return entries

    def load_rate_card(self) -> RateCard:
        return RateCard(self.get_rate_card())

    # ---- Writes ----

    def create_contract(self, draft: ContractDraft) -> Contract:
        with self._connect(write=True) as conn:
            result = conn.execute(
                insert(contracts).values(
                    customer_id=draft.customer.id,
                    customer_name=draft.customer.name,
                    ad_type=draft.ad_type,
                    start_date=draft.start_date,
                    end_date=draft.end_date,
                    rent_cost=draft.rent_cost,
                )
            )
            contract_id = result.inserted_primary_key[0]
            if draft.billboard_ids:
                conn.execute(
                    insert(contract_billboards),
                    [
                        {"contract_id": contract_id, "billboard_id": b, "position": i}
                        for i, b in enumerate(draft.billboard_ids)
                    ],
                )
        logger.info("Created contract %s for %s", contract_id, draft.customer.name or draft.customer.id)
        return self.get_contract(contract_id)

    def create_payment(self, draft: PaymentDraft) -> PaymentEntry:
        with self._connect(write=True) as conn:
            result = conn.execute(
                insert(payments).values(
                    customer_id=draft.customer.id,
                    customer_name=draft.customer.name,
                    contract_number=draft.contract_number,
                    amount=draft.amount,
                    method=draft.method or None,
                    reference=draft.reference or None,
                    notes=draft.notes or None,
                    paid_at=draft.paid_at,
                    entry_type=draft.entry_type.value,
                )
            )
            payment_id = result.inserted_primary_key[0]
        logger.info(
            "Recorded %s %s of %s for %s",
            draft.entry_type.value,
            payment_id,
            draft.amount,
            draft.customer.name or draft.customer.id,
        )
        return self.get_payment(payment_id)

    def update_payment(self, payment_id: int, patch: PaymentPatch) -> PaymentEntry:
        changes = patch.changes()
        with self._connect(write=True) as conn:
            if changes:
                result = conn.execute(
                    update(payments).where(payments.c.id == payment_id).values(**changes)
                )
                updated = result.rowcount
            else:
                updated = conn.execute(
                    select(func.count()).select_from(payments).where(payments.c.id == payment_id)
                ).scalar_one()
        if not updated:
            raise RecordNotFound("payment", payment_id)
        logger.info("Updated payment %s (%s)", payment_id, ", ".join(sorted(changes)) or "no changes")
        return self.get_payment(payment_id)

    def delete_payment(self, payment_id: int) -> None:
        with self._connect(write=True) as conn:
            result = conn.execute(delete(payments).where(payments.c.id == payment_id))
        if not result.rowcount:
            raise RecordNotFound("payment", payment_id)
        logger.info("Deleted payment %s", payment_id)

