# billboard_billing/db/schema.py

from sqlalchemy import (
    MetaData, Table, Column, Integer, String,
    Numeric, Date, ForeignKey, CheckConstraint, Text, UniqueConstraint
)

metadata = MetaData()

customers = Table(
    "customers",
    metadata,
    Column("id", String, primary_key=True),
    Column("name", String, nullable=False),
    Column("contact_name", String, nullable=True),
    Column("contact_phone", String, nullable=True),
    Column("contact_email", String, nullable=True),
)

billboards = Table(
    "billboards",
    metadata,
    Column("id", String, primary_key=True),
    Column("name", Text),
    Column("size", String, nullable=False),
    Column("level", String, nullable=False),
    Column("monthly_price", Numeric(18, 2)),
    Column("city", Text),
    Column("location", Text),
)

rate_card = Table(
    "rate_card",
    metadata,
    Column("id", Integer, primary_key=True, autoincrement=True),
    Column("size", String, nullable=False),
    Column("level", String, nullable=False),
    Column("category", String, nullable=False),
    Column("months", Integer, nullable=False),
    Column("price", Numeric(18, 2), nullable=False),
    UniqueConstraint("size", "level", "category", "months", name="uq_rate_card_key"),
    CheckConstraint("months > 0", name="ck_rate_card_months_pos"),
)

# Dates and rent_cost are nullable: imported contracts are not always complete.
contracts = Table(
    "contracts",
    metadata,
    Column("id", Integer, primary_key=True, autoincrement=True),
    Column("customer_id", String, ForeignKey("customers.id"), nullable=True),
    Column("customer_name", Text),
    Column("ad_type", Text),
    Column("start_date", Date),
    Column("end_date", Date),
    Column("rent_cost", Numeric(18, 2)),
)

contract_billboards = Table(
    "contract_billboards",
    metadata,
    Column("contract_id", Integer, ForeignKey("contracts.id"), primary_key=True),
    Column("billboard_id", String, ForeignKey("billboards.id"), primary_key=True),
    Column("position", Integer, nullable=False, default=0),
)

payments = Table(
    "payments",
    metadata,
    Column("id", Integer, primary_key=True, autoincrement=True),
    Column("customer_id", String, ForeignKey("customers.id"), nullable=True),
    Column("customer_name", Text),
    Column("contract_number", String, nullable=True),
    Column("amount", Numeric(18, 2)),
    Column("method", Text),
    Column("reference", Text),
    Column("notes", Text),
    Column("paid_at", Date),
    Column("entry_type", String, nullable=False),
)
