"""
Summary report endpoints — JSON + Excel.
"""
from __future__ import annotations

from fastapi import APIRouter, Depends, Query
from fastapi.responses import FileResponse, JSONResponse

from sales_engine.analytics.analyst import SalesAnalyst
from sales_engine.api.dependencies import get_analyst
from sales_engine.config import REPORTS_FOLDER, TOP_N_DEFAULT
from sales_engine.reports import summary_report

router = APIRouter(prefix="/api/reports", tags=["reports"])


@router.get("/summary")
def summary_json(
    n: int = Query(TOP_N_DEFAULT, ge=0),
    analyst: SalesAnalyst = Depends(get_analyst),
):
    return JSONResponse(content=summary_report.generate_json(analyst, n))


@router.get("/summary/excel")
def summary_excel(
    n: int = Query(TOP_N_DEFAULT, ge=0),
    analyst: SalesAnalyst = Depends(get_analyst),
):
    out_path = REPORTS_FOLDER / "Sales_Summary.xlsx"
    summary_report.generate_excel(analyst, out_path, n)
    return FileResponse(
        path=str(out_path),
        filename=out_path.name,
        media_type="application/vnd.openxmlformats-officedocument.spreadsheetml.sheet",
    )
