"""
Invoice analytics — status shares, weekday distribution, revenue by date.
"""
from __future__ import annotations

import datetime as dt
from decimal import Decimal

import pandas as pd

from sales_engine.analytics.common import pct_of_total, round_to_cents, standard_deviation, upper_threshold
from sales_engine.config import TOP_DAY_STD_DEVS
from sales_engine.data.entities import Transaction
from sales_engine.data.schemas import DAY_NAMES, TransactionResult, weekday_index
from sales_engine.data.store import SalesEngine


class InvoiceStats:
    """Invoice-level ratios and calendar breakdowns."""

    def __init__(self, engine: SalesEngine) -> None:
        self.engine = engine

    # ------------------------------------------------------------------
    # Single invoice
    # ------------------------------------------------------------------

    def invoice_paid_in_full(self, invoice_id: int) -> bool:
        invoice = self.engine.invoices.find_by_id(invoice_id)
        return invoice is not None and invoice.is_paid_in_full

    def invoice_total(self, invoice_id: int) -> Decimal:
        invoice = self.engine.invoices.find_by_id(invoice_id)
        return invoice.total if invoice is not None else Decimal("0")

    # ------------------------------------------------------------------
    # Status
    # ------------------------------------------------------------------

    def invoice_status(self, status) -> float:
        """Share of invoices with ``status``, as a percentage rounded to 2 places."""
        matching = self.engine.invoices.find_all_by_status(status)
        return pct_of_total(len(matching), len(self.engine.invoices), "invoice status share")

    # ------------------------------------------------------------------
    # Weekdays
    # ------------------------------------------------------------------

    def day_count_hash(self) -> dict[int, int]:
        """Invoices per observed weekday (0 = Sunday), ascending by weekday."""
        days = pd.Series(
            [weekday_index(invoice.created_at) for invoice in self.engine.invoices.all()],
            dtype="int64",
        )
        counts = days.value_counts().sort_index()
        return {int(day): int(count) for day, count in counts.items()}

    def weekday_counts(self) -> list[int]:
        """Invoice count for each of the seven weekdays, zero when unobserved."""
        counts = self.day_count_hash()
        return [counts.get(day, 0) for day in range(len(DAY_NAMES))]

    def standard_deviation_of_invoices_by_weekday(self) -> float:
        return round(standard_deviation(self.weekday_counts(), "invoices per weekday standard deviation"), 2)

    def find_top_days(self) -> dict[int, int]:
        """Weekdays whose invoice count is more than one std-dev above the mean."""
        threshold = upper_threshold(self.weekday_counts(), TOP_DAY_STD_DEVS, "top day threshold")
        return {day: count for day, count in self.day_count_hash().items() if count > threshold}

    def top_days_by_invoice_count(self) -> list[str]:
        return [DAY_NAMES[day] for day in self.find_top_days()]

    # ------------------------------------------------------------------
    # By date
    # ------------------------------------------------------------------

    def transactions_by_date(self, date: dt.date | str) -> list[Transaction]:
        """Transactions created on ``date`` (calendar day, time ignored)."""
        return self.engine.transactions.find_all_by_created_on(date)

    def total_revenue_by_date(self, date: dt.date | str) -> Decimal:
        """Revenue of invoices with a successful transaction on ``date``."""
        invoice_ids = dict.fromkeys(
            transaction.invoice_id
            for transaction in self.transactions_by_date(date)
            if transaction.result is TransactionResult.SUCCESS
        )
        total = sum(
            (
                invoice_item.possible_revenue
                for invoice_id in invoice_ids
                for invoice_item in self.engine.invoice_items.find_all_by_invoice_id(invoice_id)
            ),
            Decimal("0"),
        )
        return round_to_cents(total)
