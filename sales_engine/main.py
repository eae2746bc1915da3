"""
Sales Engine — FastAPI app factory with startup data loading.
"""
from __future__ import annotations

from contextlib import asynccontextmanager
from pathlib import Path

from fastapi import FastAPI, Request
from fastapi.middleware.cors import CORSMiddleware
from fastapi.responses import JSONResponse

from sales_engine.analytics.analyst import SalesAnalyst
from sales_engine.api.dependencies import set_analyst
from sales_engine.api.router_customers import router as customers_router
from sales_engine.api.router_invoices import router as invoices_router
from sales_engine.api.router_merchants import router as merchants_router
from sales_engine.api.router_meta import router as meta_router
from sales_engine.api.router_reports import router as reports_router
from sales_engine.config import DATA_FOLDER
from sales_engine.data.store import SalesEngine
from sales_engine.errors import InsufficientSampleError


@asynccontextmanager
async def lifespan(app: FastAPI):
    """Load all CSVs at startup."""
    folder = app.state.data_folder
    print(f"  DATA_FOLDER = {folder} (exists = {folder.exists()})")

    engine = SalesEngine.from_folder(folder)
    set_analyst(SalesAnalyst(engine))

    if engine.row_count() > 0:
        counts = ", ".join(f"{n:,} {name}" for name, n in engine.row_counts().items())
        print(f"\nSales Engine ready — {counts}\n")
    else:
        print("\nSales Engine ready — no data yet. Drop the CSV exports into the data folder.\n")
    yield
    set_analyst(None)


async def insufficient_sample_handler(request: Request, exc: InsufficientSampleError):
    return JSONResponse(status_code=422, content={"detail": str(exc)})


def create_app(data_folder: Path = DATA_FOLDER) -> FastAPI:
    app = FastAPI(
        title="Sales Engine API",
        description="Merchant, customer and item analytics over the sales dataset",
        version="1.0.0",
        lifespan=lifespan,
    )
    app.state.data_folder = Path(data_folder)

    app.add_middleware(
        CORSMiddleware,
        allow_origins=["*"],
        allow_credentials=True,
        allow_methods=["*"],
        allow_headers=["*"],
    )
    app.add_exception_handler(InsufficientSampleError, insufficient_sample_handler)

    app.include_router(meta_router)
    app.include_router(customers_router)
    app.include_router(merchants_router)
    app.include_router(invoices_router)
    app.include_router(reports_router)
    return app


app = create_app()
