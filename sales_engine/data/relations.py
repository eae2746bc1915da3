"""
Relations — foreign-key resolution shared by every repository and entity.

The resolver only ever reads: it looks a key up in the owning repository's
index and returns what it finds. A key with no matching row resolves to
``None`` (single parent) or ``[]`` (children).
"""
from __future__ import annotations

from typing import TYPE_CHECKING, Any

if TYPE_CHECKING:
    from sales_engine.data.entities import Customer, Invoice, InvoiceItem, Item, Merchant, Transaction
    from sales_engine.data.repository import Repository


class Relations:
    """Non-owning handle onto the repositories of one ``SalesEngine``."""

    def __init__(self, repositories: dict[str, Repository] | None = None) -> None:
        self._repositories: dict[str, Repository] = dict(repositories or {})

    def register(self, collection: str, repository: Repository) -> None:
        self._repositories[collection] = repository

    def repository(self, collection: str) -> Repository | None:
        return self._repositories.get(collection)

    def __repr__(self) -> str:
        return f"<Relations {sorted(self._repositories)}>"

    # ------------------------------------------------------------------
    # Lookup primitives
    # ------------------------------------------------------------------

    def _one(self, collection: str, entity_id: Any):
        repository = self._repositories.get(collection)
        if repository is None:
            return None
        return repository.find_by_id(entity_id)

    def _many(self, collection: str, attribute: str, value: Any) -> list:
        repository = self._repositories.get(collection)
        if repository is None:
            return []
        return repository.find_all_by(attribute, value)

    # ------------------------------------------------------------------
    # Parents
    # ------------------------------------------------------------------

    def merchant(self, merchant_id: int) -> Merchant | None:
        return self._one("merchants", merchant_id)

    def customer(self, customer_id: int) -> Customer | None:
        return self._one("customers", customer_id)

    def invoice(self, invoice_id: int) -> Invoice | None:
        return self._one("invoices", invoice_id)

    def item(self, item_id: int) -> Item | None:
        return self._one("items", item_id)

    # ------------------------------------------------------------------
    # Children
    # ------------------------------------------------------------------

    def items_for_merchant(self, merchant_id: int) -> list[Item]:
        return self._many("items", "merchant_id", merchant_id)

    def invoices_for_merchant(self, merchant_id: int) -> list[Invoice]:
        return self._many("invoices", "merchant_id", merchant_id)

    def invoices_for_customer(self, customer_id: int) -> list[Invoice]:
        return self._many("invoices", "customer_id", customer_id)

    def invoice_items_for_invoice(self, invoice_id: int) -> list[InvoiceItem]:
        return self._many("invoice_items", "invoice_id", invoice_id)

    def invoice_items_for_item(self, item_id: int) -> list[InvoiceItem]:
        return self._many("invoice_items", "item_id", item_id)

    def transactions_for_invoice(self, invoice_id: int) -> list[Transaction]:
        return self._many("transactions", "invoice_id", invoice_id)
