"""
Statistics and join helpers used across all analytics modules.
"""
from __future__ import annotations

import datetime as dt
import math
from decimal import ROUND_HALF_UP, Decimal
from enum import Enum
from typing import Iterable, Sequence

import numpy as np
import pandas as pd

from sales_engine.data.entities import Entity, InvoiceItem, Item
from sales_engine.data.repository import ItemRepository
from sales_engine.data.schemas import CENT
from sales_engine.errors import InsufficientSampleError

Number = int | float | Decimal


# ---------------------------------------------------------------------------
# Descriptive statistics
# ---------------------------------------------------------------------------

def _is_decimal(values: Sequence[Number]) -> bool:
    return any(isinstance(v, Decimal) for v in values)


def mean(values: Iterable[Number], statistic: str = "mean") -> Number:
    """Arithmetic mean. Decimal samples stay Decimal."""
    values = list(values)
    if not values:
        raise InsufficientSampleError(statistic, 0, 1)
    if _is_decimal(values):
        return sum(values, Decimal("0")) / len(values)
    return float(np.mean(values))


def standard_deviation(values: Iterable[Number], statistic: str = "standard deviation") -> Number:
    """Sample standard deviation, sqrt(sum((x - mean)^2) / (N - 1))."""
    values = list(values)
    if len(values) < 2:
        raise InsufficientSampleError(statistic, len(values), 2)
    if _is_decimal(values):
        avg = mean(values)
        squares = sum(((v - avg) ** 2 for v in values), Decimal("0"))
        return (squares / (len(values) - 1)).sqrt()
    return float(np.std(np.asarray(values, dtype=float), ddof=1))


def upper_threshold(values: Sequence[Number], std_devs: int, statistic: str = "threshold") -> Number:
    """mean + k * std-dev."""
    return mean(values, statistic) + std_devs * standard_deviation(values, statistic)


def lower_threshold(values: Sequence[Number], std_devs: int, statistic: str = "threshold") -> Number:
    """mean - k * std-dev."""
    return mean(values, statistic) - std_devs * standard_deviation(values, statistic)


def round_to_cents(amount: Decimal) -> Decimal:
    return amount.quantize(CENT, rounding=ROUND_HALF_UP)


def pct_of_total(part: int, total: int, statistic: str = "percentage") -> float:
    """Percentage of total, rounded to 2 places."""
    if total == 0:
        raise InsufficientSampleError(statistic, 0, 1)
    return round(part / total * 100, 2)


# ---------------------------------------------------------------------------
# Join helpers
# ---------------------------------------------------------------------------

def quantities_by_item(invoice_items: Iterable[InvoiceItem]) -> dict[int, int]:
    """Sum quantities per item_id, keyed in first-seen order."""
    totals: dict[int, int] = {}
    for invoice_item in invoice_items:
        totals[invoice_item.item_id] = totals.get(invoice_item.item_id, 0) + invoice_item.quantity
    return totals


def items_with_max_total(items: ItemRepository, totals: dict[int, int]) -> list[Item]:
    """Every item whose total equals the largest one; dangling ids are skipped."""
    if not totals:
        return []
    best = max(totals.values())
    found = (items.find_by_id(item_id) for item_id, total in totals.items() if total == best)
    return [item for item in found if item is not None]


def rank_descending(pairs: Iterable[tuple[Entity, Number]]) -> list[tuple[Entity, Number]]:
    """Sort (entity, value) pairs by value, high to low; ties keep input order."""
    return sorted(pairs, key=lambda pair: pair[1], reverse=True)


# ---------------------------------------------------------------------------
# JSON
# ---------------------------------------------------------------------------

def sanitize_for_json(obj):
    """Recursively convert Decimals, dates, enums, entities and numpy types to JSON-safe values."""
    if isinstance(obj, Entity):
        return sanitize_for_json(obj.to_record())
    if isinstance(obj, dict):
        return {str(k) if not isinstance(k, str) else k: sanitize_for_json(v) for k, v in obj.items() if k is not None}
    if isinstance(obj, (list, tuple)):
        return [sanitize_for_json(v) for v in obj]
    if isinstance(obj, Decimal):
        return str(round_to_cents(obj)) if obj.is_finite() else None
    if isinstance(obj, Enum):
        return obj.value
    if isinstance(obj, (dt.datetime, dt.date)):
        return obj.isoformat()
    if isinstance(obj, np.integer):
        return int(obj)
    if isinstance(obj, np.floating):
        v = float(obj)
        return 0.0 if (math.isnan(v) or math.isinf(v)) else v
    if isinstance(obj, np.bool_):
        return bool(obj)
    if isinstance(obj, float):
        return 0.0 if (math.isnan(obj) or math.isinf(obj)) else obj
    if pd.api.types.is_scalar(obj) and pd.isna(obj):
        return None
    return obj
