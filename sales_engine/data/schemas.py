"""
Field enums and value parsers shared by the entity types.

Every parser accepts either the raw CSV string or an already-typed value, so the
same converter serves row loading, ``create``/``update`` and index lookups.
"""
from __future__ import annotations

import datetime as dt
import re
from decimal import Decimal, InvalidOperation
from enum import Enum

import pandas as pd

CENT = Decimal("0.01")

DAY_NAMES = (
    "Sunday",
    "Monday",
    "Tuesday",
    "Wednesday",
    "Thursday",
    "Friday",
    "Saturday",
)

_CENTS_RE = re.compile(r"^[+-]?\d+$")


class InvoiceStatus(str, Enum):
    PENDING = "pending"
    SHIPPED = "shipped"
    RETURNED = "returned"


class TransactionResult(str, Enum):
    SUCCESS = "success"
    FAILED = "failed"


# ---------------------------------------------------------------------------
# Scalar parsers
# ---------------------------------------------------------------------------

def parse_int(value) -> int:
    """Integer ids and foreign keys. ``"12"`` → 12."""
    if isinstance(value, bool):
        raise ValueError(f"not an integer: {value!r}")
    if isinstance(value, int):
        return value
    return int(str(value).strip())


def parse_quantity(value) -> int:
    quantity = parse_int(value)
    if quantity < 0:
        raise ValueError(f"quantity must be >= 0, got {quantity}")
    return quantity


def parse_text(value) -> str:
    return "" if value is None else str(value)


def parse_price(value) -> Decimal:
    """Fixed-point currency.

    Integers and digit-only strings are cents (``"1200"`` → ``Decimal("12.00")``);
    strings with a decimal point, floats and Decimals are dollars.
    """
    if isinstance(value, bool):
        raise ValueError(f"not a price: {value!r}")
    if isinstance(value, Decimal):
        price = value
    elif isinstance(value, int):
        price = (Decimal(value) / 100).quantize(CENT)
    elif isinstance(value, float):
        price = Decimal(str(value))
    else:
        text = str(value).strip()
        try:
            if _CENTS_RE.match(text):
                price = (Decimal(text) / 100).quantize(CENT)
            else:
                price = Decimal(text)
        except InvalidOperation:
            raise ValueError(f"not a price: {value!r}") from None
    # NaN and Infinity parse as Decimals but are never prices
    if not price.is_finite():
        raise ValueError(f"not a price: {value!r}")
    return price


def parse_timestamp(value) -> dt.datetime:
    """Timezone-aware UTC datetime from an ISO-ish string, date or datetime."""
    if isinstance(value, dt.date) and not isinstance(value, dt.datetime):
        return dt.datetime(value.year, value.month, value.day, tzinfo=dt.timezone.utc)
    ts = pd.Timestamp(value)
    if pd.isna(ts):
        raise ValueError(f"not a timestamp: {value!r}")
    if ts.tzinfo is None:
        ts = ts.tz_localize("UTC")
    else:
        ts = ts.tz_convert("UTC")
    return ts.to_pydatetime()


def parse_date(value) -> dt.date:
    """Calendar date; time-of-day and zone are dropped after UTC normalisation."""
    if isinstance(value, dt.date) and not isinstance(value, dt.datetime):
        return value
    return parse_timestamp(value).date()


def parse_status(value) -> InvoiceStatus:
    if isinstance(value, InvoiceStatus):
        return value
    return InvoiceStatus(str(value).strip().lower())


def parse_result(value) -> TransactionResult:
    if isinstance(value, TransactionResult):
        return value
    return TransactionResult(str(value).strip().lower())


def weekday_index(moment: dt.date) -> int:
    """0 = Sunday … 6 = Saturday."""
    return moment.isoweekday() % 7


def utc_now() -> dt.datetime:
    return dt.datetime.now(dt.timezone.utc)
