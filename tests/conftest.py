"""Shared test fixtures."""

from __future__ import annotations

from collections.abc import Callable, Generator
from typing import Any

import pytest
from fastapi.testclient import TestClient

from sales_engine.analytics.analyst import SalesAnalyst
from sales_engine.api.dependencies import set_analyst
from sales_engine.data.store import SalesEngine
from sales_engine.main import create_app

STAMP = "2012-03-27 14:54:09+00:00"

Rows = dict[str, list[dict[str, Any]]]


def _stamped(rows: list[dict[str, Any]]) -> list[dict[str, Any]]:
    return [{"created_at": STAMP, "updated_at": STAMP, **row} for row in rows]


def sample_rows() -> Rows:
    """A small dataset whose statistics can be worked out by hand.

    Paid invoices (a successful transaction): 1, 3, 4, 6. Unpaid: 2, 5.
    Invoice item 9 points at a missing item and transaction 8 at a missing invoice.
    """
    return {
        "merchants": _stamped([
            {"id": "1", "name": "Shopin1901"},
            {"id": "2", "name": "Candisart"},
            {"id": "3", "name": "MiniatureBikez"},
            {"id": "4", "name": "LolaMarleys"},
        ]),
        "items": _stamped([
            {"id": "1", "name": "Basic Widget", "description": "A plain widget", "unit_price": "1000", "merchant_id": "1"},
            {"id": "2", "name": "Fancy Widget", "description": "A widget with glitter", "unit_price": "2000", "merchant_id": "1"},
            {"id": "3", "name": "Glitter Pen", "description": "Writes in glitter", "unit_price": "1200", "merchant_id": "1"},
            {"id": "4", "name": "Candle", "description": "Smells like pine", "unit_price": "1500", "merchant_id": "2"},
            {"id": "5", "name": "Tall Candle", "description": "Pine, but taller", "unit_price": "2500", "merchant_id": "2"},
            {"id": "6", "name": "Bike", "description": "Two wheels", "unit_price": "3000", "merchant_id": "3"},
        ]),
        "customers": _stamped([
            {"id": "1", "first_name": "Joey", "last_name": "Ondricka"},
            {"id": "2", "first_name": "Cecelia", "last_name": "Osinski"},
            {"id": "3", "first_name": "Mariah", "last_name": "Toy"},
            {"id": "4", "first_name": "Leanne", "last_name": "Braun"},
        ]),
        "invoices": [
            # 2012-03-25 is a Sunday
            {"id": "1", "customer_id": "1", "merchant_id": "1", "status": "shipped", "created_at": "2012-03-25 09:54:09+00:00"},
            {"id": "2", "customer_id": "1", "merchant_id": "2", "status": "pending", "created_at": "2012-03-26 09:54:09+00:00"},
            {"id": "3", "customer_id": "2", "merchant_id": "1", "status": "shipped", "created_at": "2012-03-25 12:00:00+00:00"},
            {"id": "4", "customer_id": "2", "merchant_id": "3", "status": "returned", "created_at": "2012-03-27 09:54:09+00:00"},
            {"id": "5", "customer_id": "3", "merchant_id": "1", "status": "shipped", "created_at": "2012-03-25 18:30:00+00:00"},
            {"id": "6", "customer_id": "3", "merchant_id": "2", "status": "shipped", "created_at": "2012-03-28 09:54:09+00:00"},
        ],
        "invoice_items": _stamped([
            {"id": "1", "item_id": "1", "invoice_id": "1", "quantity": "5", "unit_price": "1000"},
            {"id": "2", "item_id": "2", "invoice_id": "1", "quantity": "1", "unit_price": "2000"},
            {"id": "3", "item_id": "4", "invoice_id": "2", "quantity": "7", "unit_price": "1500"},
            {"id": "4", "item_id": "3", "invoice_id": "3", "quantity": "2", "unit_price": "1200"},
            {"id": "5", "item_id": "1", "invoice_id": "3", "quantity": "1", "unit_price": "1000"},
            {"id": "6", "item_id": "6", "invoice_id": "4", "quantity": "1", "unit_price": "3000"},
            {"id": "7", "item_id": "2", "invoice_id": "5", "quantity": "4", "unit_price": "2000"},
            {"id": "8", "item_id": "5", "invoice_id": "6", "quantity": "2", "unit_price": "2500"},
            {"id": "9", "item_id": "99", "invoice_id": "6", "quantity": "1", "unit_price": "500"},
        ]),
        "transactions": [
            {"id": "1", "invoice_id": "1", "credit_card_number": "4654405418249632", "credit_card_expiration_date": "0412",
             "result": "success", "created_at": "2012-03-27 14:54:09+00:00"},
            {"id": "2", "invoice_id": "2", "credit_card_number": "4580251236515201", "credit_card_expiration_date": "",
             "result": "failed", "created_at": "2012-03-27 16:00:00+00:00"},
            {"id": "3", "invoice_id": "3", "credit_card_number": "4354495077693036", "credit_card_expiration_date": "",
             "result": "failed", "created_at": "2012-03-28 10:00:00+00:00"},
            {"id": "4", "invoice_id": "3", "credit_card_number": "4354495077693036", "credit_card_expiration_date": "",
             "result": "success", "created_at": "2012-03-28 10:05:00+00:00"},
            {"id": "5", "invoice_id": "4", "credit_card_number": "4515551623735607", "credit_card_expiration_date": "",
             "result": "success", "created_at": "2012-03-29 10:00:00+00:00"},
            {"id": "6", "invoice_id": "5", "credit_card_number": "4844518708741275", "credit_card_expiration_date": "",
             "result": "failed", "created_at": "2012-03-29 11:00:00+00:00"},
            {"id": "7", "invoice_id": "6", "credit_card_number": "4203696133194408", "credit_card_expiration_date": "",
             "result": "success", "created_at": "2012-03-27 20:00:00+00:00"},
            {"id": "8", "invoice_id": "77", "credit_card_number": "4801647818676136", "credit_card_expiration_date": "",
             "result": "success", "created_at": "2012-03-30 10:00:00+00:00"},
        ],
    }


@pytest.fixture
def rows() -> Rows:
    return sample_rows()


@pytest.fixture
def engine(rows: Rows) -> SalesEngine:
    """Sales engine over the hand-computable sample dataset."""
    return SalesEngine.from_rows(rows)


@pytest.fixture
def analyst(engine: SalesEngine) -> SalesAnalyst:
    return SalesAnalyst(engine)


@pytest.fixture
def make_engine() -> Callable[..., SalesEngine]:
    """Build an engine from partial collections, filling in timestamps."""

    def _make(**collections: list[dict[str, Any]]) -> SalesEngine:
        return SalesEngine.from_rows({name: _stamped(rows) for name, rows in collections.items()})

    return _make


@pytest.fixture
def make_merchants_with_invoices(make_engine) -> Callable[[list[int]], SalesEngine]:
    """Engine with one merchant per entry, each owning that many invoices."""

    def _make(counts: list[int]) -> SalesEngine:
        merchants = [{"id": str(i), "name": f"Merchant {i}"} for i in range(1, len(counts) + 1)]
        invoices = []
        for merchant_id, count in enumerate(counts, 1):
            for _ in range(count):
                invoices.append({
                    "id": str(len(invoices) + 1),
                    "customer_id": "1",
                    "merchant_id": str(merchant_id),
                    "status": "shipped",
                })
        return make_engine(merchants=merchants, invoices=invoices)

    return _make


@pytest.fixture
def client(analyst: SalesAnalyst) -> Generator[TestClient, None, None]:
    """API client over the sample dataset; startup loading is bypassed."""
    set_analyst(analyst)
    yield TestClient(create_app())
    set_analyst(None)
