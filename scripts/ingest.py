# scripts/ingest.py

import csv
import logging
import os
from datetime import date

from sqlalchemy import select
from sqlalchemy.dialects.sqlite import insert as sqlite_insert

from billboard_billing.config import configure_logging
from billboard_billing.db.engine import get_engine
from billboard_billing.db.normalize import (
    normalize_billboard,
    normalize_contract,
    normalize_customer_ref,
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
from billboard_billing.tolerant import first_present, parse_text

logger = logging.getLogger(__name__)

DATA_DIR = "data"
FILES = {
    "billboards": "billboards.csv",
    "rate_card": "rate_card.csv",
    "contracts": "contracts.csv",
    "payments": "payments.csv",
}


# ---- Row parsers ----

def _billboard_row(row: dict) -> dict:
    b = normalize_billboard(row)
    return {
        "id": b.id,
        "name": b.name,
        "size": b.size,
        "level": b.level,
        "monthly_price": b.monthly_price,
        "city": b.city,
        "location": b.location,
    }


def _rate_row(row: dict) -> dict:
    r = normalize_rate_entry(row)
    return {
        "size": r.size,
        "level": r.level,
        "category": r.category.value,
        "months": r.months,
        "price": r.price,
    }


def _split_ids(value) -> list:
    # "12; 15; 40" or "12,15,40"
    text = parse_text(value).replace(";", ",")
    return [part.strip() for part in text.split(",") if part.strip()]


def _contract_row(row: dict) -> dict:
    board_ids = _split_ids(first_present(row, "billboard_ids", "Billboards", "billboards"))
    c = normalize_contract(row, board_ids)
    return {
        "id": int(c.number),
        "customer_id": c.customer.id,
        "customer_name": c.customer.name,
        "ad_type": c.ad_type,
        "start_date": c.start_date,
        "end_date": c.end_date,
        "rent_cost": c.rent_cost,
        "billboard_ids": list(c.billboard_ids),
    }


def _payment_row(row: dict) -> dict:
    p = normalize_payment(row)
    out = {
        "customer_id": p.customer.id,
        "customer_name": p.customer.name,
        "contract_number": p.contract_number,
        "amount": p.amount,
        "method": p.method or None,
        "reference": p.reference or None,
        "notes": p.notes or None,
        "paid_at": p.paid_at,
        "entry_type": p.entry_type.value,
    }
    if p.id is not None:
        out["id"] = p.id
    return out


_PARSERS = {
    "billboards": _billboard_row,
    "rate_card": _rate_row,
    "contracts": _contract_row,
    "payments": _payment_row,
}


def parse_csv(file_path: str, kind: str):
    records = []
    n_rows = 0
    n_errors = 0
    error_examples = []
    parse_row = _PARSERS[kind]

    with open(file_path, newline="", encoding="utf-8-sig") as f:
        reader = csv.DictReader(f)

        for row in reader:
            n_rows += 1
            try:
                records.append(parse_row(row))
            except Exception as e:
                n_errors += 1
                if len(error_examples) < 5:
                    error_examples.append(
                        {
                            "row_number": n_rows,
                            "row": dict(row),
                            "error": repr(e),
                        }
                    )

    stats = {
        "n_rows": n_rows,
        "n_records": len(records),
        "n_errors": n_errors,
        "error_examples": error_examples,
    }
    return records, stats


def parse_all(data_dir: str = DATA_DIR):
    """Parse every export present in ``data_dir``; missing files are skipped."""
    parsed = {}
    for kind, name in FILES.items():
        path = os.path.join(data_dir, name)
        if not os.path.exists(path):
            logger.info("No %s export at %s; skipping", kind, path)
            continue
        parsed[kind] = parse_csv(path, kind)
    return parsed


def customers_from(records_by_kind: dict) -> list:
    """Customers named by contracts and payments, keyed by id."""
    found = {}
    for kind in ("contracts", "payments"):
        for rec in records_by_kind.get(kind, []):
            ref = normalize_customer_ref(rec)
            if ref.id and ref.id not in found:
                found[ref.id] = {"id": ref.id, "name": ref.name or ref.id}
    return list(found.values())


# ---- Loading ----

def _upsert(conn, table, row: dict, key: str) -> None:
    stmt = sqlite_insert(table).values(**row)
    stmt = stmt.on_conflict_do_update(
        index_elements=[table.c[key]],
        set_={col: stmt.excluded[col] for col in row if col != key},
    )
    conn.execute(stmt)


def load_into_db(records_by_kind: dict, engine=None) -> None:
    engine = engine or get_engine()
    with engine.begin() as conn:
        # Rate card is rebuilt from scratch (deterministic)
        if "rate_card" in records_by_kind:
            conn.execute(rate_card.delete())
            if records_by_kind["rate_card"]:
                conn.execute(rate_card.insert(), records_by_kind["rate_card"])

        for row in records_by_kind.get("billboards", []):
            _upsert(conn, billboards, row, "id")

        for row in customers_from(records_by_kind):
            existing = conn.execute(
                select(customers.c.id).where(customers.c.id == row["id"])
            ).scalar_one_or_none()
            if existing is None:
                conn.execute(customers.insert().values(**row))

        # Contracts are idempotent by contract number; their boards are replaced
        for row in records_by_kind.get("contracts", []):
            row = dict(row)
            board_ids = row.pop("billboard_ids")
            _upsert(conn, contracts, row, "id")
            conn.execute(
                contract_billboards.delete().where(contract_billboards.c.contract_id == row["id"])
            )
            if board_ids:
                conn.execute(
                    contract_billboards.insert(),
                    [
                        {"contract_id": row["id"], "billboard_id": b, "position": i}
                        for i, b in enumerate(board_ids)
                    ],
                )

        # Payments with an id are idempotent; rows without one are appended
        for row in records_by_kind.get("payments", []):
            if "id" in row:
                _upsert(conn, payments, row, "id")
            else:
                conn.execute(payments.insert().values(**row))


def log_stats(parsed: dict) -> None:
    for kind, (records, stats) in parsed.items():
        logger.info(
            "%s: %s rows read, %s parsed, %s with errors",
            kind,
            stats["n_rows"],
            stats["n_records"],
            stats["n_errors"],
        )
        for ex in stats["error_examples"]:
            logger.warning("%s row %s: %s", kind, ex["row_number"], ex["error"])


def main():
    configure_logging()
    parsed = parse_all(DATA_DIR)
    load_into_db({kind: records for kind, (records, _) in parsed.items()})
    log_stats(parsed)
    logger.info("Load finished on %s", date.today().isoformat())


if __name__ == "__main__":
    main()
