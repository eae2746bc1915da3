"""
FastAPI dependencies — SalesAnalyst singleton, path parameter parsing.
"""
from __future__ import annotations

import datetime as dt

from fastapi import HTTPException

from sales_engine.analytics.analyst import SalesAnalyst
from sales_engine.data.schemas import InvoiceStatus

# ---------------------------------------------------------------------------
# Global analyst singleton (set during startup)
# ---------------------------------------------------------------------------
_analyst: SalesAnalyst | None = None


def set_analyst(analyst: SalesAnalyst | None) -> None:
    global _analyst
    _analyst = analyst


def get_analyst() -> SalesAnalyst:
    if _analyst is None:
        raise HTTPException(503, "Data not loaded yet")
    return _analyst


# ---------------------------------------------------------------------------
# Parameter parsing
# ---------------------------------------------------------------------------

def parse_status(status: str) -> InvoiceStatus:
    try:
        return InvoiceStatus(status.lower())
    except ValueError:
        raise HTTPException(400, f"Invalid status: {status}")


def parse_day(date: str) -> dt.date:
    try:
        return dt.date.fromisoformat(date)
    except ValueError:
        raise HTTPException(400, f"Invalid date (expected YYYY-MM-DD): {date}")
