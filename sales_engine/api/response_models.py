"""
Pydantic response schemas for the API.
"""
from __future__ import annotations

from fastapi.responses import JSONResponse
from pydantic import BaseModel

from sales_engine.analytics.common import sanitize_for_json


class HealthResponse(BaseModel):
    status: str
    rows: int
    collections: dict[str, int]


class RevenueResponse(BaseModel):
    merchant_id: int
    revenue: str


class DateRevenueResponse(BaseModel):
    date: str
    revenue: str


class StatusShareResponse(BaseModel):
    status: str
    percentage: float


class TopDaysResponse(BaseModel):
    top_days: list[str]
    day_counts: dict[str, int]


class EntityListResponse(BaseModel):
    """Generic wrapper for a list of serialised entities."""
    count: int
    results: list[dict]


def entity_list_response(entities: list) -> JSONResponse:
    body = EntityListResponse(count=len(entities), results=sanitize_for_json(entities))
    return JSONResponse(content=body.model_dump())
