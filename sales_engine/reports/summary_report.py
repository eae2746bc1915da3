"""
Sales Summary Report — dataset KPIs, spread statistics and the headline rankings.
"""
from __future__ import annotations

from datetime import datetime
from pathlib import Path
from typing import Callable

from sales_engine.analytics.analyst import SalesAnalyst
from sales_engine.analytics.common import sanitize_for_json
from sales_engine.config import TOP_N_DEFAULT
from sales_engine.data.schemas import DAY_NAMES, InvoiceStatus
from sales_engine.errors import InsufficientSampleError
from sales_engine.excel.writer import ExcelWriter

TOP_BUYER_COLS = [
    ("rank", "number", "Rank"),
    ("customer_id", "number", "Customer ID"),
    ("name", "text", "Customer"),
    ("paid_total", "currency", "Paid Revenue"),
]

TOP_EARNER_COLS = [
    ("rank", "number", "Rank"),
    ("merchant_id", "number", "Merchant ID"),
    ("name", "text", "Merchant"),
    ("revenue", "currency", "Revenue"),
]

GOLDEN_ITEM_COLS = [
    ("item_id", "number", "Item ID"),
    ("name", "text", "Item"),
    ("merchant_id", "number", "Merchant ID"),
    ("unit_price", "currency", "Unit Price"),
]

WEEKDAY_COLS = [
    ("day", "text", "Weekday"),
    ("invoices", "number", "Invoices"),
]


def _leader(_, row: dict) -> str | None:
    return "leader" if row["rank"] == 1 else None


def _or_none(stat: Callable):
    """Evaluate a statistic, or None when the dataset is too small for it."""
    try:
        return stat()
    except InsufficientSampleError:
        return None


def build_summary(analyst: SalesAnalyst, top_n: int = TOP_N_DEFAULT) -> dict:
    """Collect every figure the report shows, with native (Decimal) values."""
    engine = analyst.engine
    paid_totals = {customer.id: total for customer, total in analyst.top_spenders()}
    top_days = analyst.find_top_days() if len(engine.invoices) else {}

    return {
        "generated_at": datetime.now().strftime("%Y-%m-%d %H:%M"),
        "counts": engine.row_counts(),
        "kpis": {
            "average_items_per_merchant": _or_none(analyst.average_items_per_merchant),
            "items_per_merchant_std_dev": _or_none(analyst.average_items_per_merchant_standard_deviation),
            "average_invoices_per_merchant": _or_none(analyst.average_invoices_per_merchant),
            "invoices_per_merchant_std_dev": _or_none(analyst.average_invoices_per_merchant_standard_deviation),
            "average_item_price": _or_none(analyst.average_item_price),
            "item_price_std_dev": _or_none(analyst.standard_deviation_of_item_price),
            "one_time_buyers": len(analyst.one_time_buyers()),
        },
        "status_share": {
            status.value: _or_none(lambda s=status: analyst.invoice_status(s))
            for status in InvoiceStatus
        },
        "top_buyers": [
            {
                "rank": rank,
                "customer_id": customer.id,
                "name": f"{customer.first_name} {customer.last_name}".strip(),
                "paid_total": paid_totals[customer.id],
            }
            for rank, customer in enumerate(analyst.top_buyers(top_n), 1)
        ],
        "top_revenue_earners": [
            {"rank": rank, "merchant_id": merchant.id, "name": merchant.name, "revenue": revenue}
            for rank, (merchant, revenue) in enumerate(analyst.merchants_ranked_by_revenue()[:top_n], 1)
        ],
        "golden_items": [
            {
                "item_id": item.id,
                "name": item.name,
                "merchant_id": item.merchant_id,
                "unit_price": item.unit_price,
            }
            for item in (_or_none(analyst.golden_items) or [])
        ],
        "weekdays": [
            {"day": DAY_NAMES[day], "invoices": count, "top_day": day in top_days}
            for day, count in analyst.day_count_hash().items()
        ],
    }


def generate_json(analyst: SalesAnalyst, top_n: int = TOP_N_DEFAULT) -> dict:
    return sanitize_for_json(build_summary(analyst, top_n))


def generate_excel(analyst: SalesAnalyst, out_path: Path, top_n: int = TOP_N_DEFAULT) -> Path:
    summary = build_summary(analyst, top_n)
    kpis = summary["kpis"]
    counts = summary["counts"]
    w = ExcelWriter()

    # --- Overview ---
    ws = w.add_sheet("Overview")
    row = w.write_title(ws, "Sales Summary", f"Generated {summary['generated_at']}")
    row = w.write_kpi_row(ws, row, [
        (counts["merchants"], "Merchants", "number"),
        (counts["items"], "Items", "number"),
        (counts["customers"], "Customers", "number"),
        (counts["invoices"], "Invoices", "number"),
    ])
    row = w.write_kpi_row(ws, row, [
        (kpis["average_items_per_merchant"], "Avg Items / Merchant", "decimal"),
        (kpis["average_invoices_per_merchant"], "Avg Invoices / Merchant", "decimal"),
        (kpis["average_item_price"], "Avg Item Price", "currency"),
        (kpis["one_time_buyers"], "One-Time Buyers", "number"),
    ])
    row = w.write_section(ws, row, "Invoice Status")
    row = w.write_kpi_row(ws, row, [
        (share, status.title(), "percent") for status, share in summary["status_share"].items()
    ])
    row = w.write_section(ws, row, "Invoices by Weekday")
    w.write_table(
        ws, row, WEEKDAY_COLS, summary["weekdays"],
        highlight_fn=lambda _, r: "top_day" if r["top_day"] else None,
        show_total=True,
    )

    # --- Rankings ---
    ws = w.add_sheet("Top Buyers")
    row = w.write_title(ws, f"Top {top_n} Buyers", "Ranked by revenue from fully paid invoices", 4)
    w.write_table(ws, row, TOP_BUYER_COLS, summary["top_buyers"], highlight_fn=_leader)

    ws = w.add_sheet("Top Merchants")
    row = w.write_title(ws, f"Top {top_n} Merchants", "Ranked by revenue from successful transactions", 4)
    w.write_table(ws, row, TOP_EARNER_COLS, summary["top_revenue_earners"], highlight_fn=_leader)

    ws = w.add_sheet("Golden Items")
    row = w.write_title(ws, "Golden Items", "Priced more than two standard deviations above the mean", 4)
    w.write_table(ws, row, GOLDEN_ITEM_COLS, summary["golden_items"])

    return w.save(out_path)
