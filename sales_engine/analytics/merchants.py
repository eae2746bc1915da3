"""
Merchant analytics — item/invoice count outliers, revenue, best sellers.
"""
from __future__ import annotations

from decimal import Decimal

from sales_engine.analytics.common import (
    items_with_max_total,
    lower_threshold,
    mean,
    quantities_by_item,
    rank_descending,
    standard_deviation,
    upper_threshold,
)
from sales_engine.config import HIGH_ITEM_COUNT_STD_DEVS, INVOICE_COUNT_STD_DEVS, TOP_N_DEFAULT
from sales_engine.data.entities import InvoiceItem, Item, Merchant
from sales_engine.data.schemas import TransactionResult
from sales_engine.data.store import SalesEngine


class MerchantStats:
    """Per-merchant counts, revenue and rankings."""

    def __init__(self, engine: SalesEngine) -> None:
        self.engine = engine

    # ------------------------------------------------------------------
    # Item counts
    # ------------------------------------------------------------------

    def item_counts(self) -> list[int]:
        return [len(merchant.items) for merchant in self.engine.merchants.all()]

    def average_items_per_merchant(self) -> float:
        return round(mean(self.item_counts(), "average items per merchant"), 2)

    def average_items_per_merchant_standard_deviation(self) -> float:
        return round(standard_deviation(self.item_counts(), "items per merchant standard deviation"), 2)

    def merchants_with_high_item_count(self) -> list[Merchant]:
        """Merchants selling more than one std-dev above the mean item count."""
        merchants = self.engine.merchants.all()
        counts = [len(merchant.items) for merchant in merchants]
        threshold = upper_threshold(counts, HIGH_ITEM_COUNT_STD_DEVS, "high item count threshold")
        return [merchant for merchant, count in zip(merchants, counts) if count > threshold]

    # ------------------------------------------------------------------
    # Invoice counts
    # ------------------------------------------------------------------

    def invoice_counts(self) -> list[int]:
        return [len(merchant.invoices) for merchant in self.engine.merchants.all()]

    def average_invoices_per_merchant(self) -> float:
        return round(mean(self.invoice_counts(), "average invoices per merchant"), 2)

    def average_invoices_per_merchant_standard_deviation(self) -> float:
        return round(
            standard_deviation(self.invoice_counts(), "invoices per merchant standard deviation"), 2
        )

    def top_merchants_by_invoice_count(self) -> list[Merchant]:
        """Merchants more than two std-devs above the mean invoice count."""
        merchants = self.engine.merchants.all()
        counts = [len(merchant.invoices) for merchant in merchants]
        threshold = upper_threshold(counts, INVOICE_COUNT_STD_DEVS, "top invoice count threshold")
        return [merchant for merchant, count in zip(merchants, counts) if count > threshold]

    def bottom_merchants_by_invoice_count(self) -> list[Merchant]:
        """Merchants more than two std-devs below the mean invoice count."""
        merchants = self.engine.merchants.all()
        counts = [len(merchant.invoices) for merchant in merchants]
        threshold = lower_threshold(counts, INVOICE_COUNT_STD_DEVS, "bottom invoice count threshold")
        return [merchant for merchant, count in zip(merchants, counts) if count < threshold]

    # ------------------------------------------------------------------
    # Revenue
    # ------------------------------------------------------------------

    def paid_invoice_items(self, merchant_id: int) -> list[InvoiceItem]:
        """Line items on the merchant's fully paid invoices."""
        return [
            invoice_item
            for invoice in self.engine.invoices.find_all_by_merchant_id(merchant_id)
            if invoice.is_paid_in_full
            for invoice_item in invoice.invoice_items
        ]

    def revenue_by_merchant(self, merchant_id: int) -> Decimal:
        return sum(
            (invoice_item.possible_revenue for invoice_item in self.paid_invoice_items(merchant_id)),
            Decimal("0"),
        )

    def best_item_for_merchant(self, merchant_id: int) -> Item | None:
        """Item on the single paid line with the highest revenue."""
        rows = self.paid_invoice_items(merchant_id)
        if not rows:
            return None
        best = max(rows, key=lambda invoice_item: invoice_item.possible_revenue)
        return self.engine.items.find_by_id(best.item_id)

    def most_sold_item_for_merchant(self, merchant_id: int) -> list[Item]:
        """Item(s) with the largest quantity sold on paid invoices."""
        totals = quantities_by_item(self.paid_invoice_items(merchant_id))
        return items_with_max_total(self.engine.items, totals)

    def merchants_ranked_by_revenue(self) -> list[tuple[Merchant, Decimal]]:
        """(merchant, revenue) for every merchant with a successful sale, highest first."""
        successful = self.engine.transactions.find_all_by_result(TransactionResult.SUCCESS)
        invoice_ids = dict.fromkeys(transaction.invoice_id for transaction in successful)

        invoice_totals: dict[int, Decimal] = {}
        for invoice_id in invoice_ids:
            invoice_totals[invoice_id] = sum(
                (row.possible_revenue for row in self.engine.invoice_items.find_all_by_invoice_id(invoice_id)),
                Decimal("0"),
            )

        merchant_totals: dict[int, Decimal] = {}
        for invoice_id, total in invoice_totals.items():
            invoice = self.engine.invoices.find_by_id(invoice_id)
            if invoice is None:
                continue
            merchant_totals[invoice.merchant_id] = merchant_totals.get(invoice.merchant_id, Decimal("0")) + total

        pairs = [
            (merchant, merchant_totals[merchant.id])
            for merchant in self.engine.merchants.all()
            if merchant.id in merchant_totals
        ]
        return rank_descending(pairs)

    def top_revenue_earners(self, number_of_earners: int = TOP_N_DEFAULT) -> list[Merchant]:
        ranked = self.merchants_ranked_by_revenue()
        return [merchant for merchant, _ in ranked[:max(number_of_earners, 0)]]
