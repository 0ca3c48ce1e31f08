"""Record-source contract shared by every store implementation."""

from __future__ import annotations

from dataclasses import dataclass
from datetime import date
from typing import Any, Protocol

from rental_finance.models.rental import EntityType, FinancialConfiguration

# Primary key of each entity; pages are ordered by it.
PRIMARY_KEYS: dict[EntityType, str] = {
    EntityType.PROPERTIES: "property_id",
    EntityType.CLIENTS: "client_id",
    EntityType.CONTRACTS: "contract_id",
    EntityType.PAYMENTS: "payment_id",
    EntityType.EXPENSES: "expense_id",
}

# Date fields a range filter may target; the first one is the default.
DATE_FIELDS: dict[EntityType, tuple[str, ...]] = {
    EntityType.PROPERTIES: (),
    EntityType.CLIENTS: (),
    EntityType.CONTRACTS: ("start_date", "end_date"),
    EntityType.PAYMENTS: ("due_date", "payment_date", "reference_month"),
    EntityType.EXPENSES: ("expense_date", "payment_date"),
}

# Equality filters each entity supports besides its primary key.
EQUALITY_FIELDS: dict[EntityType, tuple[str, ...]] = {
    EntityType.PROPERTIES: (),
    EntityType.CLIENTS: (),
    EntityType.CONTRACTS: ("property_id", "status"),
    EntityType.PAYMENTS: ("contract_id", "status"),
    EntityType.EXPENSES: ("property_id", "status"),
}


@dataclass(frozen=True)
class RecordFilter:
    """Selection applied by a record source before paging.

    ``start``/``end`` bound ``date_field`` to the half-open range
    ``[start, end)``; either bound may be omitted. ``date_field`` defaults
    to the entity's primary date field.
    """

    start: date | None = None
    end: date | None = None
    date_field: str | None = None
    status: str | None = None
    property_id: str | None = None
    contract_id: str | None = None
    record_id: str | None = None

    def equality_terms(self, entity: EntityType) -> dict[str, Any]:
        """Field/value pairs to match exactly, primary key included.

        Raises
        ------
        ValueError
            If the filter names a field the entity does not have.
        """
        terms: dict[str, Any] = {}
        for name in ("status", "property_id", "contract_id"):
            value = getattr(self, name)
            if value is None:
                continue
            if name not in EQUALITY_FIELDS[entity]:
                raise ValueError(f"{entity.value} cannot be filtered by {name}")
            # str-valued enums compare equal to their value
            terms[name] = getattr(value, "value", value)
        if self.record_id is not None:
            terms[PRIMARY_KEYS[entity]] = self.record_id
        return terms

    def range_field(self, entity: EntityType) -> str | None:
        """Date field the range applies to, or None when no bound is set.

        Raises
        ------
        ValueError
            If the entity has no such date field.
        """
        if self.start is None and self.end is None:
            return None
        allowed = DATE_FIELDS[entity]
        field_name = self.date_field or (allowed[0] if allowed else None)
        if field_name is None or field_name not in allowed:
            raise ValueError(f"{entity.value} cannot be filtered by date field {field_name}")
        return field_name

    def matches(self, entity: EntityType, record: Any) -> bool:
        """Evaluate the filter against an in-memory record."""
        for name, expected in self.equality_terms(entity).items():
            actual = getattr(record, name)
            if getattr(actual, "value", actual) != expected:
                return False

        field_name = self.range_field(entity)
        if field_name is None:
            return True
        value = getattr(record, field_name)
        if value is None:
            return False
        if self.start is not None and value < self.start:
            return False
        if self.end is not None and value >= self.end:
            return False
        return True


class RecordSource(Protocol):
    """Anything the report engine can read records from."""

    def fetch_page(
        self,
        entity: EntityType,
        record_filter: RecordFilter,
        offset: int,
        limit: int,
    ) -> list[Any]:
        """Return up to ``limit`` records after ``offset``, ordered by primary key."""
        ...

    def get_financial_configuration(self) -> FinancialConfiguration | None:
        """Return the active configuration, or None when none is set."""
        ...
