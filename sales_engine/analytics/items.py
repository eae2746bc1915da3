"""
Item price analytics — per-merchant averages, price spread, golden items.
"""
from __future__ import annotations

from decimal import Decimal

from sales_engine.analytics.common import mean, round_to_cents, standard_deviation, upper_threshold
from sales_engine.config import GOLDEN_ITEM_STD_DEVS
from sales_engine.data.entities import Item
from sales_engine.data.store import SalesEngine


class ItemStats:
    """Price statistics over the item repository."""

    def __init__(self, engine: SalesEngine) -> None:
        self.engine = engine

    def item_prices(self) -> list[Decimal]:
        return [item.unit_price for item in self.engine.items.all()]

    def average_item_price(self) -> Decimal:
        return mean(self.item_prices(), "average item price")

    def standard_deviation_of_item_price(self) -> Decimal:
        return standard_deviation(self.item_prices(), "item price standard deviation")

    def find_max_price(self) -> Decimal | None:
        return max(self.item_prices(), default=None)

    def average_item_price_for_merchant(self, merchant_id: int) -> Decimal:
        """Mean price of the merchant's items, rounded to cents."""
        prices = [item.unit_price for item in self.engine.items.find_all_by_merchant_id(merchant_id)]
        return round_to_cents(mean(prices, f"average item price for merchant {merchant_id}"))

    def average_average_price_per_merchant(self) -> Decimal:
        """Mean of the per-merchant averages; merchants without items are left out."""
        averages = [
            self.average_item_price_for_merchant(merchant.id)
            for merchant in self.engine.merchants.all()
            if merchant.items
        ]
        return round_to_cents(mean(averages, "average price per merchant"))

    def golden_items(self) -> list[Item]:
        """Items priced more than two std-devs above the mean price."""
        prices = self.item_prices()
        floor = upper_threshold(prices, GOLDEN_ITEM_STD_DEVS, "golden item threshold")
        ceiling = max(prices)
        return [item for item in self.engine.items.all() if floor < item.unit_price <= ceiling]
