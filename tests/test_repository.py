"""Tests for the indexed repositories."""

from __future__ import annotations

import datetime as dt
from decimal import Decimal

import pytest

from sales_engine.data.entities import Item
from sales_engine.data.repository import ItemRepository, MerchantRepository
from sales_engine.data.schemas import InvoiceStatus, TransactionResult
from sales_engine.errors import RowError

# ===========================================================================
# Reads
# ===========================================================================


class TestFindById:
    def test_every_entity_round_trips(self, engine) -> None:
        for repository in engine.repositories().values():
            for entity in repository.all():
                assert repository.find_by_id(entity.id) is entity

    def test_string_id_is_coerced(self, engine) -> None:
        assert engine.merchants.find_by_id("2").name == "Candisart"

    def test_unknown_id(self, engine) -> None:
        assert engine.merchants.find_by_id(999) is None

    def test_unparseable_id(self, engine) -> None:
        assert engine.merchants.find_by_id("abc") is None


class TestAll:
    def test_insertion_order(self, engine) -> None:
        assert [m.id for m in engine.merchants.all()] == [1, 2, 3, 4]

    def test_returns_a_copy(self, engine) -> None:
        engine.merchants.all().clear()
        assert len(engine.merchants) == 4

    def test_repr(self, engine) -> None:
        assert repr(engine.items) == "<ItemRepository 6 rows>"


class TestDynamicFinders:
    def test_find_all_by_merchant_id(self, engine) -> None:
        assert [i.id for i in engine.items.find_all_by_merchant_id(1)] == [1, 2, 3]

    def test_find_all_by_status_text(self, engine) -> None:
        shipped = engine.invoices.find_all_by_status("shipped")
        assert [i.id for i in shipped] == [1, 3, 5, 6]

    def test_find_all_by_status_enum(self, engine) -> None:
        assert len(engine.invoices.find_all_by_status(InvoiceStatus.PENDING)) == 1

    def test_find_by_returns_first(self, engine) -> None:
        assert engine.transactions.find_by_invoice_id(3).id == 3

    def test_find_all_by_result(self, engine) -> None:
        failed = engine.transactions.find_all_by_result(TransactionResult.FAILED)
        assert [t.id for t in failed] == [2, 3, 6]

    def test_find_all_by_credit_card_number(self, engine) -> None:
        matches = engine.transactions.find_all_by_credit_card_number("4354495077693036")
        assert [t.id for t in matches] == [3, 4]

    def test_find_all_by_created_on(self, engine) -> None:
        invoices = engine.invoices.find_all_by_created_on(dt.date(2012, 3, 25))
        assert [i.id for i in invoices] == [1, 3, 5]

    def test_no_match_is_empty_list(self, engine) -> None:
        assert engine.invoices.find_all_by_customer_id(42) == []

    def test_bad_value_is_empty_list(self, engine) -> None:
        assert engine.invoices.find_all_by_status("lost") == []

    def test_unindexed_attribute(self, engine) -> None:
        with pytest.raises(AttributeError):
            engine.invoices.find_all_by_quantity(3)

    def test_find_all_by_rejects_unindexed(self, engine) -> None:
        with pytest.raises(AttributeError, match="no index"):
            engine.customers.find_all_by("nickname", "Joe")


class TestNameSearch:
    def test_merchant_exact_name_case_insensitive(self, engine) -> None:
        assert engine.merchants.find_by_name("CANDISART").id == 2

    def test_merchant_name_fragment(self, engine) -> None:
        assert [m.id for m in engine.merchants.find_all_by_name("in")] == [1, 3]

    def test_item_name(self, engine) -> None:
        assert engine.items.find_by_name("glitter pen").id == 3

    def test_item_description_fragment(self, engine) -> None:
        assert [i.id for i in engine.items.find_all_with_description("GLITTER")] == [2, 3]

    def test_customer_first_name_fragment(self, engine) -> None:
        assert [c.id for c in engine.customers.find_all_by_first_name("e")] == [1, 2, 4]

    def test_customer_last_name_fragment(self, engine) -> None:
        assert [c.id for c in engine.customers.find_all_by_last_name("os")] == [2]


class TestNameSearchPairs:
    """Each ``find_by_*`` name search is the first element of its ``find_all_by_*`` twin."""

    PAIRS = [
        ("merchants", "name"),
        ("items", "name"),
        ("customers", "first_name"),
        ("customers", "last_name"),
    ]
    VALUES = ["basic widget", "Candisart", "in", "Widget", "e", "os", "TOY", "nobody"]

    @pytest.mark.parametrize("collection, attribute", PAIRS)
    def test_find_by_is_first_of_find_all_by(self, engine, collection, attribute) -> None:
        repository = getattr(engine, collection)
        find_by = getattr(repository, f"find_by_{attribute}")
        find_all_by = getattr(repository, f"find_all_by_{attribute}")
        for value in self.VALUES:
            assert find_by(value) is (find_all_by(value) or [None])[0]

    def test_item_name_any_case(self, engine) -> None:
        assert [i.id for i in engine.items.find_all_by_name("basic widget")] == [1]

    def test_exact_name_ranks_first(self, make_engine) -> None:
        engine = make_engine(merchants=[
            {"id": "1", "name": "Candisart Outlet"},
            {"id": "2", "name": "Candisart"},
        ])
        assert [m.id for m in engine.merchants.find_all_by_name("candisart")] == [2, 1]
        assert engine.merchants.find_by_name("candisart").id == 2

    def test_customer_find_by_fragment(self, engine) -> None:
        assert engine.customers.find_by_first_name("ri").id == 3
        assert engine.customers.find_by_last_name("nobody") is None


class TestPriceSearch:
    def test_exact_price_in_dollars(self, engine) -> None:
        assert [i.id for i in engine.items.find_all_by_price("15.00")] == [4]

    def test_exact_price_decimal(self, engine) -> None:
        assert [i.id for i in engine.items.find_all_by_price(Decimal("10"))] == [1]

    def test_bad_price(self, engine) -> None:
        assert engine.items.find_all_by_price("free") == []

    def test_non_finite_price(self, engine) -> None:
        assert engine.items.find_all_by_price("NaN") == []
        assert engine.items.find_all_by_price("sNaN") == []
        with pytest.raises(ValueError, match="not a price"):
            engine.items.find_all_by_price_in_range("NaN", "20.00")

    def test_range_is_inclusive(self, engine) -> None:
        items = engine.items.find_all_by_price_in_range("12.00", "20.00")
        assert [i.id for i in items] == [2, 3, 4]

    def test_empty_range(self, engine) -> None:
        assert engine.items.find_all_by_price_in_range(100, 200) == []


class TestToFrame:
    def test_columns_and_rows(self, engine) -> None:
        df = engine.items.to_frame()
        assert list(df.columns) == [
            "id", "name", "description", "unit_price", "merchant_id", "created_at", "updated_at",
        ]
        assert len(df) == 6
        assert df.loc[0, "unit_price"] == Decimal("10.00")


# ===========================================================================
# Loading
# ===========================================================================


class TestLoadRows:
    def test_duplicate_id(self) -> None:
        rows = [
            {"id": "1", "name": "A", "created_at": "2012-03-27"},
            {"id": "1", "name": "B", "created_at": "2012-03-27"},
        ]
        with pytest.raises(RowError, match="duplicate id"):
            MerchantRepository(rows)

    def test_missing_required_field(self) -> None:
        with pytest.raises(RowError, match="missing field 'unit_price'"):
            ItemRepository([{"id": "1", "name": "A", "merchant_id": "1", "created_at": "2012-03-27"}])

    def test_bad_value(self) -> None:
        with pytest.raises(RowError, match="bad unit_price") as exc_info:
            ItemRepository([{
                "id": "7", "name": "A", "unit_price": "lots", "merchant_id": "1", "created_at": "2012-03-27",
            }])
        assert exc_info.value.collection == "items"
        assert exc_info.value.row_id == "7"

    @pytest.mark.parametrize("price", ["NaN", "Infinity", "sNaN"])
    def test_non_finite_price(self, price) -> None:
        with pytest.raises(RowError, match="bad unit_price"):
            ItemRepository([{
                "id": "1", "name": "A", "unit_price": price, "merchant_id": "1", "created_at": "2012-03-27",
            }])

    def test_optional_fields_default(self) -> None:
        repository = ItemRepository([{
            "id": "1", "name": "A", "unit_price": "100", "merchant_id": "1", "created_at": "2012-03-27",
        }])
        item = repository.find_by_id(1)
        assert item.description == ""
        assert item.updated_at == item.created_at


# ===========================================================================
# Mutations
# ===========================================================================


class TestCreate:
    def test_assigns_next_id(self, engine) -> None:
        merchant = engine.merchants.create({"name": "Turing School"})
        assert merchant.id == 5
        assert len(engine.merchants) == 5
        assert engine.merchants.find_by_name("turing school") is merchant

    def test_ignores_supplied_id(self, engine) -> None:
        merchant = engine.merchants.create({"id": 1, "name": "Impostor"})
        assert merchant.id == 5
        assert engine.merchants.find_by_id(1).name == "Shopin1901"

    def test_stamps_timestamps(self, engine) -> None:
        before = dt.datetime.now(dt.timezone.utc)
        merchant = engine.merchants.create({"name": "Fresh"})
        assert merchant.created_at >= before
        assert merchant.updated_at == merchant.created_at

    def test_indexes_new_entity(self, engine) -> None:
        item = engine.items.create({
            "name": "Capita Defenders", "description": "Snowboard", "unit_price": Decimal("399.99"), "merchant_id": 3,
        })
        assert isinstance(item, Item)
        assert engine.items.find_all_by_merchant_id(3)[-1] is item
        assert engine.merchants.find_by_id(3).items[-1] is item

    def test_deleted_ids_are_not_reused(self, engine) -> None:
        engine.merchants.delete(4)
        assert engine.merchants.create({"name": "Next"}).id == 5

    def test_bad_attributes(self, engine) -> None:
        with pytest.raises(RowError):
            engine.items.create({"name": "Broken", "unit_price": "free", "merchant_id": 1})
        assert len(engine.items) == 6


class TestUpdate:
    def test_round_trip(self, engine) -> None:
        item = engine.items.find_by_id(1)
        created_at, updated_at = item.created_at, item.updated_at
        engine.items.update(1, {"name": "Deluxe Widget", "unit_price": Decimal("11.50")})

        found = engine.items.find_by_id(1)
        assert found.name == "Deluxe Widget"
        assert found.unit_price == Decimal("11.50")
        assert found.created_at == created_at
        assert found.updated_at > updated_at

    def test_reindexes(self, engine) -> None:
        engine.items.update(1, {"name": "Deluxe Widget"})
        assert engine.items.find_by_name("basic widget") is None
        assert engine.items.find_by_name("deluxe widget").id == 1

    def test_status_change_moves_invoice(self, engine) -> None:
        engine.invoices.update(2, {"status": "shipped"})
        assert engine.invoices.find_all_by_status("pending") == []
        assert 2 in [i.id for i in engine.invoices.find_all_by_status("shipped")]

    def test_id_and_created_at_are_immutable(self, engine) -> None:
        created_at = engine.customers.find_by_id(1).created_at
        engine.customers.update(1, {"id": 50, "created_at": "1999-01-01", "first_name": "Joseph"})
        customer = engine.customers.find_by_id(1)
        assert customer.first_name == "Joseph"
        assert customer.created_at == created_at
        assert engine.customers.find_by_id(50) is None

    def test_unknown_keys_are_dropped(self, engine) -> None:
        customer = engine.customers.update(1, {"nickname": "JoJo"})
        assert not hasattr(customer, "nickname")

    def test_unknown_id(self, engine) -> None:
        assert engine.customers.update(999, {"first_name": "Nobody"}) is None


class TestDelete:
    def test_removes_entity(self, engine) -> None:
        removed = engine.items.delete(6)
        assert removed.id == 6
        assert engine.items.find_by_id(6) is None
        assert len(engine.items) == 5
        assert engine.merchants.find_by_id(3).items == []

    def test_unknown_id_is_noop(self, engine) -> None:
        assert engine.items.delete(999) is None
        assert len(engine.items) == 6
