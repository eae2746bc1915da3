"""
Item, invoice and revenue-by-date endpoints.
"""
from __future__ import annotations

from fastapi import APIRouter, Depends

from sales_engine.analytics.analyst import SalesAnalyst
from sales_engine.analytics.common import sanitize_for_json
from sales_engine.api.dependencies import get_analyst, parse_day, parse_status
from sales_engine.api.response_models import (
    DateRevenueResponse,
    StatusShareResponse,
    TopDaysResponse,
    entity_list_response,
)
from sales_engine.data.schemas import DAY_NAMES

router = APIRouter(prefix="/api", tags=["invoices"])


@router.get("/items/golden")
def golden_items(analyst: SalesAnalyst = Depends(get_analyst)):
    return entity_list_response(analyst.golden_items())


@router.get("/invoices/status/{status}", response_model=StatusShareResponse)
def invoice_status(status: str, analyst: SalesAnalyst = Depends(get_analyst)):
    parsed = parse_status(status)
    return StatusShareResponse(status=parsed.value, percentage=analyst.invoice_status(parsed))


@router.get("/invoices/top-days", response_model=TopDaysResponse)
def top_days(analyst: SalesAnalyst = Depends(get_analyst)):
    counts = analyst.day_count_hash()
    return TopDaysResponse(
        top_days=analyst.top_days_by_invoice_count(),
        day_counts={DAY_NAMES[day]: count for day, count in counts.items()},
    )


@router.get("/revenue/{date}", response_model=DateRevenueResponse)
def revenue_by_date(date: str, analyst: SalesAnalyst = Depends(get_analyst)):
    day = parse_day(date)
    return DateRevenueResponse(date=day.isoformat(), revenue=sanitize_for_json(analyst.total_revenue_by_date(day)))
