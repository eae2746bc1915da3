"""
Customer endpoints — one-time buyers, top buyers, per-customer purchases.
"""
from __future__ import annotations

from fastapi import APIRouter, Depends, HTTPException, Query
from fastapi.responses import JSONResponse

from sales_engine.analytics.analyst import SalesAnalyst
from sales_engine.analytics.common import sanitize_for_json
from sales_engine.api.dependencies import get_analyst
from sales_engine.api.response_models import entity_list_response
from sales_engine.config import TOP_N_DEFAULT

router = APIRouter(prefix="/api/customers", tags=["customers"])


def _require_customer(analyst: SalesAnalyst, customer_id: int) -> None:
    if analyst.engine.customers.find_by_id(customer_id) is None:
        raise HTTPException(404, f"Customer {customer_id} not found")


@router.get("/one-time-buyers")
def one_time_buyers(analyst: SalesAnalyst = Depends(get_analyst)):
    return entity_list_response(analyst.one_time_buyers())


@router.get("/top-buyers")
def top_buyers(
    n: int = Query(TOP_N_DEFAULT, ge=0, description="Number of customers"),
    analyst: SalesAnalyst = Depends(get_analyst),
):
    return entity_list_response(analyst.top_buyers(n))


@router.get("/{customer_id}/highest-volume-items")
def highest_volume_items(customer_id: int, analyst: SalesAnalyst = Depends(get_analyst)):
    _require_customer(analyst, customer_id)
    return entity_list_response(analyst.highest_volume_items(customer_id))


@router.get("/{customer_id}/top-merchant")
def top_merchant(customer_id: int, analyst: SalesAnalyst = Depends(get_analyst)):
    _require_customer(analyst, customer_id)
    merchant = analyst.top_merchant_for_customer(customer_id)
    if merchant is None:
        raise HTTPException(404, f"No merchant found for customer {customer_id}")
    return JSONResponse(content=sanitize_for_json(merchant))
