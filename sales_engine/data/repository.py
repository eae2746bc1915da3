"""
Indexed in-memory repositories.

Each repository owns the entities of one collection and keeps a secondary index
per declared attribute: ``{attribute: {value: [entities in insertion order]}}``.
Any mutation rebuilds every index from scratch; reads are plain dict lookups.

``find_all_by_<attribute>`` / ``find_by_<attribute>`` are available for every
attribute in ``indexed_attributes``.
"""
from __future__ import annotations

import functools
import logging
import threading
from decimal import Decimal, InvalidOperation
from typing import Any, Generic, Iterable, Iterator, Mapping, TypeVar

import pandas as pd

from sales_engine.data.entities import Customer, Entity, Invoice, InvoiceItem, Item, Merchant, Transaction
from sales_engine.data.relations import Relations
from sales_engine.data.schemas import utc_now
from sales_engine.errors import RowError

logger = logging.getLogger(__name__)

E = TypeVar("E", bound=Entity)

IMMUTABLE_FIELDS = frozenset({"id", "created_at"})


class Repository(Generic[E]):
    """Ordered collection of one entity type with attribute indices."""

    entity_class: type[E]
    indexed_attributes: tuple[str, ...] = ("id", "created_at", "updated_at")

    def __init__(self, rows: Iterable[Mapping[str, Any]] = (), relations: Relations | None = None) -> None:
        self._relations = relations if relations is not None else Relations()
        self._lock = threading.RLock()
        self._entities: list[E] = [self.entity_class.from_row(row, self._relations) for row in rows]
        self._indices: dict[str, dict[Any, list[E]]] = {}
        self.build_indices()

        ids = self._indices["id"]
        if len(ids) != len(self._entities):
            dupes = sorted(k for k, v in ids.items() if len(v) > 1)
            raise RowError(self.entity_class.collection, dupes[0], "duplicate id")
        self._max_id = max(ids, default=0)

    # ------------------------------------------------------------------
    # Index maintenance
    # ------------------------------------------------------------------

    def build_indices(self) -> None:
        """Regroup every entity by every indexed attribute."""
        indices: dict[str, dict[Any, list[E]]] = {attr: {} for attr in self.indexed_attributes}
        for entity in self._entities:
            for attr in self.indexed_attributes:
                indices[attr].setdefault(getattr(entity, attr), []).append(entity)
        # Single assignment: readers see the old map or the new one
        self._indices = indices
        logger.debug("Indexed %d %s", len(self._entities), self.entity_class.collection)

    # ------------------------------------------------------------------
    # Reads
    # ------------------------------------------------------------------

    def all(self) -> list[E]:
        return list(self._entities)

    def __len__(self) -> int:
        return len(self._entities)

    def __iter__(self) -> Iterator[E]:
        return iter(list(self._entities))

    def __repr__(self) -> str:
        return f"<{type(self).__name__} {len(self._entities)} rows>"

    def find_all_by(self, attribute: str, value: Any) -> list[E]:
        """Entities whose ``attribute`` equals ``value``; ``[]`` when none."""
        if attribute not in self.indexed_attributes:
            raise AttributeError(f"{type(self).__name__} has no index on {attribute!r}")
        try:
            key = self.entity_class.lookup_converter(attribute)(value)
        except (TypeError, ValueError):
            return []
        return list(self._indices[attribute].get(key, ()))

    def find_by(self, attribute: str, value: Any) -> E | None:
        """First entity (insertion order) whose ``attribute`` equals ``value``."""
        matches = self.find_all_by(attribute, value)
        return matches[0] if matches else None

    def find_by_id(self, entity_id: Any) -> E | None:
        return self.find_by("id", entity_id)

    def __getattr__(self, name: str):
        for prefix, finder in (("find_all_by_", "find_all_by"), ("find_by_", "find_by")):
            if name.startswith(prefix):
                attribute = name[len(prefix):]
                if attribute in type(self).indexed_attributes:
                    return functools.partial(getattr(self, finder), attribute)
        raise AttributeError(f"{type(self).__name__!r} object has no attribute {name!r}")

    def to_frame(self) -> pd.DataFrame:
        """Plain field values as a DataFrame, one row per entity."""
        columns = list(self.entity_class.converters)
        return pd.DataFrame([e.to_record() for e in self._entities], columns=columns)

    # ------------------------------------------------------------------
    # Mutations
    # ------------------------------------------------------------------

    def create(self, attributes: Mapping[str, Any]) -> E:
        """Append a new entity with the next id and fresh timestamps."""
        with self._lock:
            now = utc_now()
            row = dict(attributes)
            row.update(id=self._max_id + 1, created_at=now, updated_at=now)
            entity = self.entity_class.from_row(row, self._relations)
            self._entities.append(entity)
            self._max_id = entity.id
            self.build_indices()
        logger.info("Created %s %s", self.entity_class.collection, entity.id)
        return entity

    def update(self, entity_id: Any, attributes: Mapping[str, Any]) -> E | None:
        """Edit the given fields in place; ``id`` and ``created_at`` are ignored."""
        with self._lock:
            entity = self.find_by_id(entity_id)
            if entity is None:
                return None
            editable = {k: v for k, v in attributes.items() if k not in IMMUTABLE_FIELDS}
            editable.pop("updated_at", None)
            changes = entity.convert_fields(editable)
            for name, value in changes.items():
                setattr(entity, name, value)
            entity.updated_at = utc_now()
            self.build_indices()
        logger.info("Updated %s %s: %s", self.entity_class.collection, entity.id, sorted(changes))
        return entity

    def delete(self, entity_id: Any) -> E | None:
        """Remove an entity; unknown ids are a no-op."""
        with self._lock:
            entity = self.find_by_id(entity_id)
            if entity is None:
                return None
            self._entities.remove(entity)
            self.build_indices()
        logger.info("Deleted %s %s", self.entity_class.collection, entity.id)
        return entity


def _as_dollars(value: Any) -> Decimal:
    try:
        price = value if isinstance(value, Decimal) else Decimal(str(value))
    except InvalidOperation:
        raise ValueError(f"not a price: {value!r}") from None
    if not price.is_finite():
        raise ValueError(f"not a price: {value!r}")
    return price


def _contains(fragment: str):
    needle = str(fragment).lower()
    return lambda text: needle in text.lower()


def _name_search(entities: Iterable[E], field: str, fragment: Any) -> list[E]:
    """Case-insensitive substring matches; exact matches first, then the rest, each in insertion order."""
    needle = str(fragment).lower()
    exact, partial = [], []
    for entity in entities:
        text = getattr(entity, field).lower()
        if text == needle:
            exact.append(entity)
        elif needle in text:
            partial.append(entity)
    return exact + partial


def _first(matches: list[E]) -> E | None:
    return matches[0] if matches else None


# ---------------------------------------------------------------------------
# Concrete repositories
# ---------------------------------------------------------------------------

class MerchantRepository(Repository[Merchant]):
    entity_class = Merchant
    indexed_attributes = ("id", "name", "name_key", "created_at", "updated_at")

    def find_all_by_name(self, fragment: str) -> list[Merchant]:
        """Case-insensitive substring match, exact names first."""
        return _name_search(self._entities, "name", fragment)

    def find_by_name(self, name: str) -> Merchant | None:
        return _first(self.find_all_by_name(name))


class ItemRepository(Repository[Item]):
    entity_class = Item
    indexed_attributes = (
        "id", "name", "name_key", "unit_price", "merchant_id", "created_at", "updated_at",
    )

    def find_all_by_name(self, fragment: str) -> list[Item]:
        """Case-insensitive substring match, exact names first."""
        return _name_search(self._entities, "name", fragment)

    def find_by_name(self, name: str) -> Item | None:
        return _first(self.find_all_by_name(name))

    def find_all_with_description(self, fragment: str) -> list[Item]:
        matches = _contains(fragment)
        return [item for item in self._entities if matches(item.description)]

    def find_all_by_price(self, price) -> list[Item]:
        """Items priced exactly ``price`` (dollars)."""
        try:
            key = _as_dollars(price)
        except ValueError:
            return []
        return list(self._indices["unit_price"].get(key, ()))

    def find_all_by_price_in_range(self, low, high) -> list[Item]:
        """Items priced within ``[low, high]`` (dollars, inclusive)."""
        low, high = _as_dollars(low), _as_dollars(high)
        return [item for item in self._entities if low <= item.unit_price <= high]


class CustomerRepository(Repository[Customer]):
    entity_class = Customer
    indexed_attributes = ("id", "first_name", "last_name", "created_at", "updated_at")

    def find_all_by_first_name(self, fragment: str) -> list[Customer]:
        return _name_search(self._entities, "first_name", fragment)

    def find_by_first_name(self, fragment: str) -> Customer | None:
        return _first(self.find_all_by_first_name(fragment))

    def find_all_by_last_name(self, fragment: str) -> list[Customer]:
        return _name_search(self._entities, "last_name", fragment)

    def find_by_last_name(self, fragment: str) -> Customer | None:
        return _first(self.find_all_by_last_name(fragment))


class InvoiceRepository(Repository[Invoice]):
    entity_class = Invoice
    indexed_attributes = (
        "id", "customer_id", "merchant_id", "status", "created_at", "created_on", "updated_at",
    )


class InvoiceItemRepository(Repository[InvoiceItem]):
    entity_class = InvoiceItem
    indexed_attributes = ("id", "item_id", "invoice_id", "created_at", "updated_at")


class TransactionRepository(Repository[Transaction]):
    entity_class = Transaction
    indexed_attributes = (
        "id", "invoice_id", "credit_card_number", "result", "created_at", "created_on", "updated_at",
    )
