# billboard_billing/db/normalize.py
"""
Map raw records into the engine's types.

Records reach us from our own tables and from exports of older systems,
where the same field can be spelled several ways ("size" / "Size",
"rent_cost" / "Total Rent"). Each normalizer accepts every known spelling,
so this is the only place that knows about them.
"""

import logging
from typing import Any, Iterable, Mapping, Optional

from billboard_billing.engine.types import (
    Billboard,
    Contract,
    CustomerCategory,
    CustomerRef,
    EntryType,
    PaymentEntry,
    RateCardEntry,
)
from billboard_billing.errors import ValidationError
from billboard_billing.tolerant import (
    first_present,
    parse_date,
    parse_int,
    parse_money,
    parse_optional_text,
    parse_text,
)

logger = logging.getLogger(__name__)

# Labels used by older exports for the customer categories and entry types
_CATEGORY_ALIASES = {
    "regular": CustomerCategory.REGULAR,
    "عادي": CustomerCategory.REGULAR,
    "municipality": CustomerCategory.MUNICIPALITY,
    "المدينة": CustomerCategory.MUNICIPALITY,
    "marketer": CustomerCategory.MARKETER,
    "مسوق": CustomerCategory.MARKETER,
    "corporate": CustomerCategory.CORPORATE,
    "شركات": CustomerCategory.CORPORATE,
}

_ENTRY_TYPE_ALIASES = {
    "invoice": EntryType.INVOICE,
    "receipt": EntryType.RECEIPT,
    "debt": EntryType.DEBT,
    "account_payment": EntryType.ACCOUNT_PAYMENT,
    "account payment": EntryType.ACCOUNT_PAYMENT,
}


def normalize_category(value: Any) -> CustomerCategory:
    key = parse_text(value).lower()
    try:
        return _CATEGORY_ALIASES[key]
    except KeyError:
        raise ValidationError(f"unknown customer category {value!r}", field="category") from None


def normalize_entry_type(value: Any, strict: bool = True) -> EntryType:
    """
    Map an entry type label. Blank means receipt. An unknown label raises,
    unless ``strict`` is off: stored rows are read as receipts with a warning.
    """
    key = parse_text(value).lower()
    if not key:
        # Untyped rows in old ledgers were plain receipts
        return EntryType.RECEIPT
    try:
        return _ENTRY_TYPE_ALIASES[key]
    except KeyError:
        if strict:
            raise ValidationError(f"unknown entry type {value!r}", field="entry_type") from None
        logger.warning("Unknown entry type %r; reading it as a receipt", value)
        return EntryType.RECEIPT


def normalize_customer_ref(record: Mapping[str, Any]) -> CustomerRef:
    return CustomerRef(
        id=parse_optional_text(first_present(record, "customer_id", "Customer ID")),
        name=parse_optional_text(
            first_present(record, "customer_name", "Customer Name", "customer")
        ),
    )


def normalize_billboard(record: Mapping[str, Any]) -> Billboard:
    billboard_id = parse_text(first_present(record, "id", "ID", "code"))
    if not billboard_id:
        raise ValidationError("billboard record has no id", field="id")
    return Billboard(
        id=billboard_id,
        size=parse_text(first_present(record, "size", "Size")),
        level=parse_text(first_present(record, "level", "Level")).upper(),
        monthly_price=parse_money(
            first_present(record, "monthly_price", "price", "Price", "rent", "Rent_Price"),
            field="monthly_price",
        ),
        name=parse_text(first_present(record, "name", "Billboard_Name", "code", default=billboard_id)),
        city=parse_text(first_present(record, "city", "City", "Municipality", "municipality")),
        location=parse_text(
            first_present(record, "location", "Nearest_Landmark", "nearest_landmark", "landmark")
        ),
    )


def normalize_rate_entry(record: Mapping[str, Any]) -> RateCardEntry:
    months = parse_int(first_present(record, "months", "Months", "duration"))
    if months < 1:
        raise ValidationError(f"rate card row has invalid months {months}", field="months")
    return RateCardEntry(
        size=parse_text(first_present(record, "size", "Size")),
        level=parse_text(first_present(record, "level", "Level")).upper(),
        category=normalize_category(first_present(record, "category", "customer_category", "Category")),
        months=months,
        price=parse_money(first_present(record, "price", "Price"), field="price"),
    )


def normalize_contract(record: Mapping[str, Any], billboard_ids: Iterable[Any] = ()) -> Contract:
    number = parse_text(first_present(record, "id", "Contract_Number", "contract_number"))
    if not number:
        raise ValidationError("contract record has no number", field="id")

    start = parse_date(
        first_present(record, "start_date", "Start Date", "Contract Date"), field="start_date"
    )
    end = parse_date(first_present(record, "end_date", "End Date"), field="end_date")
    if start is None or end is None:
        logger.debug("Contract %s has an incomplete date range", number)

    return Contract(
        number=number,
        customer=normalize_customer_ref(record),
        ad_type=parse_text(first_present(record, "ad_type", "Ad Type")),
        start_date=start,
        end_date=end,
        rent_cost=parse_money(first_present(record, "rent_cost", "Total Rent"), field="rent_cost"),
        billboard_ids=tuple(parse_text(b) for b in billboard_ids if parse_text(b)),
    )


def normalize_payment(record: Mapping[str, Any], strict: bool = True) -> PaymentEntry:
    raw_id = first_present(record, "id")
    contract_number: Optional[str] = parse_optional_text(
        first_present(record, "contract_number", "Contract_Number")
    )
    return PaymentEntry(
        id=int(raw_id) if raw_id is not None else None,
        customer=normalize_customer_ref(record),
        amount=parse_money(first_present(record, "amount"), field="amount"),
        entry_type=normalize_entry_type(first_present(record, "entry_type"), strict=strict),
        contract_number=contract_number,
        method=parse_text(first_present(record, "method")),
        reference=parse_text(first_present(record, "reference")),
        notes=parse_text(first_present(record, "notes")),
        paid_at=parse_date(first_present(record, "paid_at"), field="paid_at"),
    )
