# billboard_billing/tolerant.py
"""
Forgiving parsers for values read from stored records and CSV exports.

Only the ingestion boundary (``db.normalize`` and the CSV scripts) uses
these. Blank or unreadable values become zero / None and are logged; the
engine itself works on already-clean types.
"""

import logging
import re
from datetime import date, datetime
from decimal import Decimal, InvalidOperation
from typing import Any, Mapping, Optional

logger = logging.getLogger(__name__)

_DATE_FORMATS = ("%Y-%m-%d", "%m/%d/%Y", "%m/%d/%y", "%d-%m-%Y")
_NUMBER_NOISE = re.compile(r"[,\s]")


def first_present(record: Mapping[str, Any], *keys: str, default: Any = None) -> Any:
    """Value of the first key that holds something non-blank."""
    for key in keys:
        value = record.get(key)
        if value is None:
            continue
        if isinstance(value, str) and not value.strip():
            continue
        return value
    return default


def parse_money(value: Any, field: str = "amount") -> Decimal:
    if value is None:
        return Decimal("0")
    if isinstance(value, Decimal):
        return value
    if isinstance(value, bool):
        logger.warning("Unreadable %s %r; using 0", field, value)
        return Decimal("0")
    if isinstance(value, (int, float)):
        return Decimal(str(value))
    text = _NUMBER_NOISE.sub("", str(value))
    if text == "":
        return Decimal("0")
    try:
        amount = Decimal(text)
    except InvalidOperation:
        logger.warning("Unreadable %s %r; using 0", field, value)
        return Decimal("0")
    if not amount.is_finite():
        logger.warning("Unreadable %s %r; using 0", field, value)
        return Decimal("0")
    return amount


def parse_date(value: Any, field: str = "date") -> Optional[date]:
    if value is None:
        return None
    if isinstance(value, datetime):
        return value.date()
    if isinstance(value, date):
        return value
    text = str(value).strip()
    if not text:
        return None
    # ISO timestamps ("2024-01-31T00:00:00Z") and "01/31/24 10:00" keep only the date part
    text = text.split("T")[0].split()[0]
    for fmt in _DATE_FORMATS:
        try:
            return datetime.strptime(text, fmt).date()
        except ValueError:
            continue
    logger.warning("Unreadable %s %r; leaving blank", field, value)
    return None


def parse_int(value: Any, default: int = 0) -> int:
    if value is None:
        return default
    m = re.search(r"-?\d+", str(value))
    if not m:
        return default
    return int(m.group(0))


def parse_text(value: Any) -> str:
    if value is None:
        return ""
    return str(value).strip()


def parse_optional_text(value: Any) -> Optional[str]:
    text = parse_text(value)
    return text or None
