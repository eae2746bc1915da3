"""
Meta endpoints: health and row counts.
"""
from __future__ import annotations

from fastapi import APIRouter, Depends

from sales_engine.analytics.analyst import SalesAnalyst
from sales_engine.api.dependencies import get_analyst
from sales_engine.api.response_models import HealthResponse

router = APIRouter(prefix="/api", tags=["meta"])


@router.get("/health", response_model=HealthResponse)
def health(analyst: SalesAnalyst = Depends(get_analyst)):
    engine = analyst.engine
    return HealthResponse(status="ok", rows=engine.row_count(), collections=engine.row_counts())
