"""
Entity records — one dataclass per collection.

Entities hold their own field values plus a shared ``Relations`` handle used
only to resolve foreign keys. Field edits go through ``Repository.update`` so
the secondary indices stay in step.
"""
from __future__ import annotations

import datetime as dt
from dataclasses import dataclass, field
from decimal import Decimal
from typing import Any, Callable, ClassVar, Mapping

from sales_engine.data.relations import Relations
from sales_engine.data.schemas import (
    InvoiceStatus,
    TransactionResult,
    parse_date,
    parse_int,
    parse_price,
    parse_quantity,
    parse_result,
    parse_status,
    parse_text,
    parse_timestamp,
)
from sales_engine.errors import RowError

Converter = Callable[[Any], Any]

_TIMESTAMPS: dict[str, Converter] = {
    "created_at": parse_timestamp,
    "updated_at": parse_timestamp,
}


def _lowered(value) -> str:
    return str(value).lower()


@dataclass(eq=False)
class Entity:
    """Base record: identity, timestamps and the relations handle."""

    collection: ClassVar[str] = ""
    converters: ClassVar[dict[str, Converter]] = {}
    # Derived (read-only) attributes that may be indexed, with their key converter
    derived: ClassVar[dict[str, Converter]] = {}
    optional_fields: ClassVar[frozenset[str]] = frozenset({"updated_at"})

    relations: Relations = field(default_factory=Relations, repr=False, kw_only=True)

    # ------------------------------------------------------------------
    # Construction
    # ------------------------------------------------------------------

    @classmethod
    def from_row(cls, row: Mapping[str, Any], relations: Relations | None = None):
        """Build an entity from a source row, converting every known field."""
        values: dict[str, Any] = {}
        for name, convert in cls.converters.items():
            raw = row.get(name)
            if name in cls.optional_fields and (raw is None or raw == ""):
                continue
            if raw is None:
                raise RowError(cls.collection, row.get("id"), f"missing field '{name}'")
            try:
                values[name] = convert(raw)
            except (TypeError, ValueError) as exc:
                raise RowError(cls.collection, row.get("id"), f"bad {name}: {exc}") from exc

        values.setdefault("updated_at", values["created_at"])
        for name in cls.optional_fields:
            if name not in values:
                values[name] = cls.converters[name]("")
        return cls(**values, relations=relations if relations is not None else Relations())

    @classmethod
    def lookup_converter(cls, attribute: str) -> Converter:
        if attribute in cls.converters:
            return cls.converters[attribute]
        return cls.derived.get(attribute, lambda value: value)

    def convert_fields(self, changes: Mapping[str, Any]) -> dict[str, Any]:
        """Convert proposed field values; unknown names are dropped."""
        converted = {}
        for name, value in changes.items():
            if name not in self.converters:
                continue
            try:
                converted[name] = self.converters[name](value)
            except (TypeError, ValueError) as exc:
                raise RowError(self.collection, self.id, f"bad {name}: {exc}") from exc
        return converted

    def to_record(self) -> dict[str, Any]:
        """Plain field values, in declaration order."""
        return {name: getattr(self, name) for name in self.converters}


# ---------------------------------------------------------------------------
# Merchants & items
# ---------------------------------------------------------------------------

@dataclass(eq=False)
class Merchant(Entity):
    collection: ClassVar[str] = "merchants"
    converters: ClassVar[dict[str, Converter]] = {
        "id": parse_int,
        "name": parse_text,
        **_TIMESTAMPS,
    }
    derived: ClassVar[dict[str, Converter]] = {"name_key": _lowered}

    id: int
    name: str
    created_at: dt.datetime
    updated_at: dt.datetime

    @property
    def name_key(self) -> str:
        return self.name.lower()

    @property
    def items(self) -> list[Item]:
        return self.relations.items_for_merchant(self.id)

    @property
    def invoices(self) -> list[Invoice]:
        return self.relations.invoices_for_merchant(self.id)

    @property
    def customers(self) -> list[Customer]:
        """Distinct customers with an invoice at this merchant."""
        customers = {}
        for invoice in self.invoices:
            customer = invoice.customer
            if customer is not None:
                customers.setdefault(customer.id, customer)
        return list(customers.values())


@dataclass(eq=False)
class Item(Entity):
    collection: ClassVar[str] = "items"
    converters: ClassVar[dict[str, Converter]] = {
        "id": parse_int,
        "name": parse_text,
        "description": parse_text,
        "unit_price": parse_price,
        "merchant_id": parse_int,
        **_TIMESTAMPS,
    }
    derived: ClassVar[dict[str, Converter]] = {"name_key": _lowered}
    optional_fields: ClassVar[frozenset[str]] = frozenset({"updated_at", "description"})

    id: int
    name: str
    description: str
    unit_price: Decimal
    merchant_id: int
    created_at: dt.datetime
    updated_at: dt.datetime

    @property
    def name_key(self) -> str:
        return self.name.lower()

    @property
    def unit_price_to_dollars(self) -> float:
        return float(self.unit_price)

    @property
    def merchant(self) -> Merchant | None:
        return self.relations.merchant(self.merchant_id)

    @property
    def invoice_items(self) -> list[InvoiceItem]:
        return self.relations.invoice_items_for_item(self.id)


# ---------------------------------------------------------------------------
# Customers
# ---------------------------------------------------------------------------

@dataclass(eq=False)
class Customer(Entity):
    collection: ClassVar[str] = "customers"
    converters: ClassVar[dict[str, Converter]] = {
        "id": parse_int,
        "first_name": parse_text,
        "last_name": parse_text,
        **_TIMESTAMPS,
    }

    id: int
    first_name: str
    last_name: str
    created_at: dt.datetime
    updated_at: dt.datetime

    @property
    def invoices(self) -> list[Invoice]:
        return self.relations.invoices_for_customer(self.id)

    @property
    def fully_paid_invoices(self) -> list[Invoice]:
        return [invoice for invoice in self.invoices if invoice.is_paid_in_full]

    @property
    def merchants(self) -> list[Merchant]:
        """Distinct merchants this customer has invoices with."""
        merchants = {}
        for invoice in self.invoices:
            merchant = invoice.merchant
            if merchant is not None:
                merchants.setdefault(merchant.id, merchant)
        return list(merchants.values())


# ---------------------------------------------------------------------------
# Invoices, line items, transactions
# ---------------------------------------------------------------------------

@dataclass(eq=False)
class Invoice(Entity):
    collection: ClassVar[str] = "invoices"
    converters: ClassVar[dict[str, Converter]] = {
        "id": parse_int,
        "customer_id": parse_int,
        "merchant_id": parse_int,
        "status": parse_status,
        **_TIMESTAMPS,
    }
    derived: ClassVar[dict[str, Converter]] = {"created_on": parse_date}

    id: int
    customer_id: int
    merchant_id: int
    status: InvoiceStatus
    created_at: dt.datetime
    updated_at: dt.datetime

    @property
    def created_on(self) -> dt.date:
        return self.created_at.date()

    @property
    def merchant(self) -> Merchant | None:
        return self.relations.merchant(self.merchant_id)

    @property
    def customer(self) -> Customer | None:
        return self.relations.customer(self.customer_id)

    @property
    def transactions(self) -> list[Transaction]:
        return self.relations.transactions_for_invoice(self.id)

    @property
    def invoice_items(self) -> list[InvoiceItem]:
        return self.relations.invoice_items_for_invoice(self.id)

    @property
    def items(self) -> list[Item]:
        items = (invoice_item.item for invoice_item in self.invoice_items)
        return [item for item in items if item is not None]

    @property
    def is_paid_in_full(self) -> bool:
        return any(
            transaction.result is TransactionResult.SUCCESS
            for transaction in self.transactions
        )

    @property
    def total(self) -> Decimal:
        return sum(
            (invoice_item.possible_revenue for invoice_item in self.invoice_items),
            Decimal("0"),
        )

    @property
    def amount_of_items(self) -> int:
        return sum(invoice_item.quantity for invoice_item in self.invoice_items)


@dataclass(eq=False)
class InvoiceItem(Entity):
    collection: ClassVar[str] = "invoice_items"
    converters: ClassVar[dict[str, Converter]] = {
        "id": parse_int,
        "item_id": parse_int,
        "invoice_id": parse_int,
        "quantity": parse_quantity,
        "unit_price": parse_price,
        **_TIMESTAMPS,
    }

    id: int
    item_id: int
    invoice_id: int
    quantity: int
    unit_price: Decimal
    created_at: dt.datetime
    updated_at: dt.datetime

    @property
    def possible_revenue(self) -> Decimal:
        return self.quantity * self.unit_price

    @property
    def item(self) -> Item | None:
        return self.relations.item(self.item_id)

    @property
    def invoice(self) -> Invoice | None:
        return self.relations.invoice(self.invoice_id)


@dataclass(eq=False)
class Transaction(Entity):
    collection: ClassVar[str] = "transactions"
    converters: ClassVar[dict[str, Converter]] = {
        "id": parse_int,
        "invoice_id": parse_int,
        "credit_card_number": lambda value: str(value).strip(),
        "credit_card_expiration_date": parse_text,
        "result": parse_result,
        **_TIMESTAMPS,
    }
    derived: ClassVar[dict[str, Converter]] = {"created_on": parse_date}
    optional_fields: ClassVar[frozenset[str]] = frozenset(
        {"updated_at", "credit_card_expiration_date"}
    )

    id: int
    invoice_id: int
    credit_card_number: str
    credit_card_expiration_date: str
    result: TransactionResult
    created_at: dt.datetime
    updated_at: dt.datetime

    @property
    def created_on(self) -> dt.date:
        return self.created_at.date()

    @property
    def invoice(self) -> Invoice | None:
        return self.relations.invoice(self.invoice_id)
