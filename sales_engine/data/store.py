"""
SalesEngine — the in-memory dataset: six indexed repositories plus the shared
relations resolver.

Loaded once at startup, queried on every request.
"""
from __future__ import annotations

import logging
from pathlib import Path
from typing import Iterable, Mapping

from sales_engine.config import CSV_FILES, DATA_FOLDER
from sales_engine.data.loader import discover_csvs, load_rows
from sales_engine.data.relations import Relations
from sales_engine.data.repository import (
    CustomerRepository,
    InvoiceItemRepository,
    InvoiceRepository,
    ItemRepository,
    MerchantRepository,
    Repository,
    TransactionRepository,
)

logger = logging.getLogger(__name__)

RowSource = Iterable[Mapping[str, object]]


class SalesEngine:
    """Owns one repository per collection and wires them to a ``Relations``."""

    def __init__(self, rows: Mapping[str, RowSource] | None = None) -> None:
        rows = dict(rows or {})
        unknown = set(rows) - set(CSV_FILES)
        if unknown:
            raise ValueError(f"Unknown collections: {sorted(unknown)}")

        self.relations = Relations()
        self.merchants = MerchantRepository(rows.get("merchants", ()), self.relations)
        self.items = ItemRepository(rows.get("items", ()), self.relations)
        self.customers = CustomerRepository(rows.get("customers", ()), self.relations)
        self.invoices = InvoiceRepository(rows.get("invoices", ()), self.relations)
        self.invoice_items = InvoiceItemRepository(rows.get("invoice_items", ()), self.relations)
        self.transactions = TransactionRepository(rows.get("transactions", ()), self.relations)

        for collection, repository in self.repositories().items():
            self.relations.register(collection, repository)

        logger.info("Sales engine ready: %s", self.row_counts())

    # ------------------------------------------------------------------
    # Loading
    # ------------------------------------------------------------------

    @classmethod
    def from_rows(cls, rows: Mapping[str, RowSource]) -> "SalesEngine":
        return cls(rows)

    @classmethod
    def from_csv(cls, paths: Mapping[str, str | Path]) -> "SalesEngine":
        """Load from explicit CSV paths, e.g. ``{"items": "./data/items.csv"}``."""
        return cls(load_rows(paths))

    @classmethod
    def from_folder(cls, folder: Path = DATA_FOLDER) -> "SalesEngine":
        """Load whichever of the standard CSV exports exist in ``folder``."""
        paths = discover_csvs(folder)
        missing = sorted(set(CSV_FILES) - set(paths))
        if missing:
            logger.warning("No CSV for %s in %s — loading them empty", ", ".join(missing), folder)
        return cls.from_csv(paths)

    # ------------------------------------------------------------------
    # Metadata
    # ------------------------------------------------------------------

    def repositories(self) -> dict[str, Repository]:
        return {
            "merchants": self.merchants,
            "items": self.items,
            "customers": self.customers,
            "invoices": self.invoices,
            "invoice_items": self.invoice_items,
            "transactions": self.transactions,
        }

    def row_counts(self) -> dict[str, int]:
        return {name: len(repository) for name, repository in self.repositories().items()}

    def row_count(self) -> int:
        return sum(self.row_counts().values())

    def __repr__(self) -> str:
        return f"<SalesEngine {self.row_count()} rows>"
