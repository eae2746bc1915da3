"""
Merchant endpoints — revenue, best sellers, rankings, outliers.
"""
from __future__ import annotations

from fastapi import APIRouter, Depends, HTTPException, Query
from fastapi.responses import JSONResponse

from sales_engine.analytics.analyst import SalesAnalyst
from sales_engine.analytics.common import sanitize_for_json
from sales_engine.api.dependencies import get_analyst
from sales_engine.api.response_models import RevenueResponse, entity_list_response
from sales_engine.config import TOP_N_DEFAULT

router = APIRouter(prefix="/api/merchants", tags=["merchants"])


def _require_merchant(analyst: SalesAnalyst, merchant_id: int) -> None:
    if analyst.engine.merchants.find_by_id(merchant_id) is None:
        raise HTTPException(404, f"Merchant {merchant_id} not found")


@router.get("/top-earners")
def top_earners(
    n: int = Query(TOP_N_DEFAULT, ge=0, description="Number of merchants"),
    analyst: SalesAnalyst = Depends(get_analyst),
):
    return entity_list_response(analyst.top_revenue_earners(n))


@router.get("/high-item-count")
def high_item_count(analyst: SalesAnalyst = Depends(get_analyst)):
    return entity_list_response(analyst.merchants_with_high_item_count())


@router.get("/{merchant_id}/revenue", response_model=RevenueResponse)
def revenue(merchant_id: int, analyst: SalesAnalyst = Depends(get_analyst)):
    _require_merchant(analyst, merchant_id)
    total = analyst.revenue_by_merchant(merchant_id)
    return RevenueResponse(merchant_id=merchant_id, revenue=sanitize_for_json(total))


@router.get("/{merchant_id}/best-item")
def best_item(merchant_id: int, analyst: SalesAnalyst = Depends(get_analyst)):
    _require_merchant(analyst, merchant_id)
    item = analyst.best_item_for_merchant(merchant_id)
    if item is None:
        raise HTTPException(404, f"No paid sales for merchant {merchant_id}")
    return JSONResponse(content=sanitize_for_json(item))


@router.get("/{merchant_id}/most-sold-items")
def most_sold_items(merchant_id: int, analyst: SalesAnalyst = Depends(get_analyst)):
    _require_merchant(analyst, merchant_id)
    return entity_list_response(analyst.most_sold_item_for_merchant(merchant_id))
