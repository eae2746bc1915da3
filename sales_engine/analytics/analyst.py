"""
SalesAnalyst — the query surface consumed by the API, CLI and reports.

The analyst owns no logic of its own: it is built from the four stats services
and forwards each query to the one responsible for it.
"""
from __future__ import annotations

import datetime as dt
from decimal import Decimal

from sales_engine.analytics.customers import CustomerStats
from sales_engine.analytics.invoices import InvoiceStats
from sales_engine.analytics.items import ItemStats
from sales_engine.analytics.merchants import MerchantStats
from sales_engine.config import TOP_N_DEFAULT
from sales_engine.data.entities import Customer, Invoice, Item, Merchant, Transaction
from sales_engine.data.store import SalesEngine


class SalesAnalyst:
    def __init__(
        self,
        engine: SalesEngine,
        item_stats: ItemStats | None = None,
        merchant_stats: MerchantStats | None = None,
        customer_stats: CustomerStats | None = None,
        invoice_stats: InvoiceStats | None = None,
    ) -> None:
        self.engine = engine
        self.item_stats = item_stats or ItemStats(engine)
        self.merchant_stats = merchant_stats or MerchantStats(engine)
        self.customer_stats = customer_stats or CustomerStats(engine)
        self.invoice_stats = invoice_stats or InvoiceStats(engine)

    # ------------------------------------------------------------------
    # Items
    # ------------------------------------------------------------------

    def average_item_price_for_merchant(self, merchant_id: int) -> Decimal:
        return self.item_stats.average_item_price_for_merchant(merchant_id)

    def average_average_price_per_merchant(self) -> Decimal:
        return self.item_stats.average_average_price_per_merchant()

    def average_item_price(self) -> Decimal:
        return self.item_stats.average_item_price()

    def standard_deviation_of_item_price(self) -> Decimal:
        return self.item_stats.standard_deviation_of_item_price()

    def find_max_price(self) -> Decimal | None:
        return self.item_stats.find_max_price()

    def golden_items(self) -> list[Item]:
        return self.item_stats.golden_items()

    # ------------------------------------------------------------------
    # Merchants
    # ------------------------------------------------------------------

    def average_items_per_merchant(self) -> float:
        return self.merchant_stats.average_items_per_merchant()

    def average_items_per_merchant_standard_deviation(self) -> float:
        return self.merchant_stats.average_items_per_merchant_standard_deviation()

    def merchants_with_high_item_count(self) -> list[Merchant]:
        return self.merchant_stats.merchants_with_high_item_count()

    def average_invoices_per_merchant(self) -> float:
        return self.merchant_stats.average_invoices_per_merchant()

    def average_invoices_per_merchant_standard_deviation(self) -> float:
        return self.merchant_stats.average_invoices_per_merchant_standard_deviation()

    def top_merchants_by_invoice_count(self) -> list[Merchant]:
        return self.merchant_stats.top_merchants_by_invoice_count()

    def bottom_merchants_by_invoice_count(self) -> list[Merchant]:
        return self.merchant_stats.bottom_merchants_by_invoice_count()

    def revenue_by_merchant(self, merchant_id: int) -> Decimal:
        return self.merchant_stats.revenue_by_merchant(merchant_id)

    def best_item_for_merchant(self, merchant_id: int) -> Item | None:
        return self.merchant_stats.best_item_for_merchant(merchant_id)

    def most_sold_item_for_merchant(self, merchant_id: int) -> list[Item]:
        return self.merchant_stats.most_sold_item_for_merchant(merchant_id)

    def merchants_ranked_by_revenue(self) -> list[tuple[Merchant, Decimal]]:
        return self.merchant_stats.merchants_ranked_by_revenue()

    def top_revenue_earners(self, number_of_earners: int = TOP_N_DEFAULT) -> list[Merchant]:
        return self.merchant_stats.top_revenue_earners(number_of_earners)

    # ------------------------------------------------------------------
    # Customers
    # ------------------------------------------------------------------

    def one_time_buyers(self) -> list[Customer]:
        return self.customer_stats.one_time_buyers()

    def one_time_buyers_top_item(self) -> Item | None:
        return self.customer_stats.one_time_buyers_top_item()

    def top_spenders(self) -> list[tuple[Customer, Decimal]]:
        return self.customer_stats.top_spenders()

    def top_buyers(self, num_of_customers: int = TOP_N_DEFAULT) -> list[Customer]:
        return self.customer_stats.top_buyers(num_of_customers)

    def top_merchant_for_customer(self, customer_id: int) -> Merchant | None:
        return self.customer_stats.top_merchant_for_customer(customer_id)

    def highest_volume_items(self, customer_id: int) -> list[Item]:
        return self.customer_stats.highest_volume_items(customer_id)

    def items_bought_in_year(self, customer_id: int, year: int) -> list[Item]:
        return self.customer_stats.items_bought_in_year(customer_id, year)

    def customers_with_unpaid_invoices(self) -> list[Customer]:
        return self.customer_stats.customers_with_unpaid_invoices()

    def best_invoice_by_revenue(self) -> Invoice | None:
        return self.customer_stats.best_invoice_by_revenue()

    def best_invoice_by_quantity(self) -> Invoice | None:
        return self.customer_stats.best_invoice_by_quantity()

    # ------------------------------------------------------------------
    # Invoices
    # ------------------------------------------------------------------

    def invoice_status(self, status) -> float:
        return self.invoice_stats.invoice_status(status)

    def invoice_paid_in_full(self, invoice_id: int) -> bool:
        return self.invoice_stats.invoice_paid_in_full(invoice_id)

    def invoice_total(self, invoice_id: int) -> Decimal:
        return self.invoice_stats.invoice_total(invoice_id)

    def day_count_hash(self) -> dict[int, int]:
        return self.invoice_stats.day_count_hash()

    def standard_deviation_of_invoices_by_weekday(self) -> float:
        return self.invoice_stats.standard_deviation_of_invoices_by_weekday()

    def find_top_days(self) -> dict[int, int]:
        return self.invoice_stats.find_top_days()

    def top_days_by_invoice_count(self) -> list[str]:
        return self.invoice_stats.top_days_by_invoice_count()

    def transactions_by_date(self, date: dt.date | str) -> list[Transaction]:
        return self.invoice_stats.transactions_by_date(date)

    def total_revenue_by_date(self, date: dt.date | str) -> Decimal:
        return self.invoice_stats.total_revenue_by_date(date)
