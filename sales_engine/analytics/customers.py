"""
Customer analytics — spend rankings, one-time buyers, purchase volumes.
"""
from __future__ import annotations

from decimal import Decimal

from sales_engine.analytics.common import items_with_max_total, quantities_by_item, rank_descending
from sales_engine.config import TOP_N_DEFAULT
from sales_engine.data.entities import Customer, Invoice, Item, Merchant
from sales_engine.data.store import SalesEngine


class CustomerStats:
    """Per-customer spend and purchase patterns."""

    def __init__(self, engine: SalesEngine) -> None:
        self.engine = engine

    # ------------------------------------------------------------------
    # Spend
    # ------------------------------------------------------------------

    @staticmethod
    def paid_total(customer: Customer) -> Decimal:
        """Sum of invoice totals over the customer's fully paid invoices."""
        return sum((invoice.total for invoice in customer.fully_paid_invoices), Decimal("0"))

    def top_spenders(self) -> list[tuple[Customer, Decimal]]:
        """(customer, paid total) for every customer, in customer order."""
        return [(customer, self.paid_total(customer)) for customer in self.engine.customers.all()]

    def top_buyers(self, num_of_customers: int = TOP_N_DEFAULT) -> list[Customer]:
        """Customers ranked by paid total, highest first; ties keep customer order."""
        ranked = rank_descending(self.top_spenders())
        return [customer for customer, _ in ranked[:max(num_of_customers, 0)]]

    def one_time_buyers(self) -> list[Customer]:
        return [
            customer
            for customer in self.engine.customers.all()
            if len(customer.fully_paid_invoices) == 1
        ]

    def one_time_buyers_top_item(self) -> Item | None:
        """Item bought in the largest quantity by one-time buyers.

        Only their paid invoices count: a one-time buyer's unpaid or failed invoices
        are not purchases, so their line items are left out.
        """
        rows = [
            invoice_item
            for customer in self.one_time_buyers()
            for invoice in customer.fully_paid_invoices
            for invoice_item in invoice.invoice_items
        ]
        totals = quantities_by_item(rows)
        if not totals:
            return None
        return self.engine.items.find_by_id(max(totals, key=totals.get))

    def customers_with_unpaid_invoices(self) -> list[Customer]:
        return [
            customer
            for customer in self.engine.customers.all()
            if any(not invoice.is_paid_in_full for invoice in customer.invoices)
        ]

    # ------------------------------------------------------------------
    # Per-customer purchases
    # ------------------------------------------------------------------

    def highest_volume_items(self, customer_id: int) -> list[Item]:
        """Item(s) the customer bought in the largest total quantity."""
        rows = [
            invoice_item
            for invoice in self.engine.invoices.find_all_by_customer_id(customer_id)
            for invoice_item in invoice.invoice_items
        ]
        return items_with_max_total(self.engine.items, quantities_by_item(rows))

    def top_merchant_for_customer(self, customer_id: int) -> Merchant | None:
        """Merchant of the customer's invoice with the most items on it."""
        invoices = self.engine.invoices.find_all_by_customer_id(customer_id)
        if not invoices:
            return None
        top = max(invoices, key=lambda invoice: invoice.amount_of_items)
        return top.merchant

    def items_bought_in_year(self, customer_id: int, year: int) -> list[Item]:
        return [
            item
            for invoice in self.engine.invoices.find_all_by_customer_id(customer_id)
            if invoice.created_at.year == int(year)
            for item in invoice.items
        ]

    # ------------------------------------------------------------------
    # Invoices
    # ------------------------------------------------------------------

    def _paid_invoices(self) -> list[Invoice]:
        return [invoice for invoice in self.engine.invoices.all() if invoice.is_paid_in_full]

    def best_invoice_by_revenue(self) -> Invoice | None:
        return max(self._paid_invoices(), key=lambda invoice: invoice.total, default=None)

    def best_invoice_by_quantity(self) -> Invoice | None:
        return max(self._paid_invoices(), key=lambda invoice: invoice.amount_of_items, default=None)
