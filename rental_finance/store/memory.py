"""In-memory rental record store with referential integrity."""

from dataclasses import dataclass, field
from typing import Any

from rental_finance.exceptions import EntityNotFoundError, ReferentialIntegrityError
from rental_finance.models.rental import (
    Client,
    Contract,
    EntityType,
    Expense,
    FinancialConfiguration,
    Payment,
    Property,
)
from rental_finance.store.base import PRIMARY_KEYS, RecordFilter


@dataclass
class RentalDataStore:
    """In-memory store for rental entities with relationship tracking.

    Implements the ``RecordSource`` contract, so the report engine can page
    through it exactly as it pages through PostgreSQL.
    """

    # Master data
    properties: dict[str, Property] = field(default_factory=dict)
    clients: dict[str, Client] = field(default_factory=dict)
    contracts: dict[str, Contract] = field(default_factory=dict)

    # Events
    payments: dict[str, Payment] = field(default_factory=dict)
    expenses: dict[str, Expense] = field(default_factory=dict)

    configuration: FinancialConfiguration | None = None

    # Relationship indexes
    _property_contracts: dict[str, list[str]] = field(default_factory=dict)
    _contract_payments: dict[str, list[str]] = field(default_factory=dict)

    # Records sorted by primary key, and the matches of each filter read so
    # far; both rebuilt lazily after writes
    _sorted: dict[EntityType, list[Any]] = field(default_factory=dict)
    _filtered: dict[EntityType, dict[RecordFilter, list[Any]]] = field(default_factory=dict)

    def add_property(self, prop: Property) -> None:
        """Add a property to the store."""
        self.properties[prop.property_id] = prop
        self._property_contracts.setdefault(prop.property_id, [])
        self._invalidate(EntityType.PROPERTIES)

    def add_client(self, client: Client) -> None:
        """Add a client to the store."""
        self.clients[client.client_id] = client
        self._invalidate(EntityType.CLIENTS)

    def add_contract(self, contract: Contract) -> None:
        """Add a contract to the store."""
        if contract.property_id not in self.properties:
            raise ReferentialIntegrityError(f"Property {contract.property_id} not found")
        if contract.tenant_id not in self.clients:
            raise ReferentialIntegrityError(f"Client {contract.tenant_id} not found")

        previous = self.contracts.get(contract.contract_id)
        if previous is None or previous.property_id != contract.property_id:
            if previous is not None:
                self._property_contracts[previous.property_id].remove(contract.contract_id)
            self._property_contracts[contract.property_id].append(contract.contract_id)

        self.contracts[contract.contract_id] = contract
        self._contract_payments.setdefault(contract.contract_id, [])
        self._invalidate(EntityType.CONTRACTS)

    def add_payment(self, payment: Payment) -> None:
        """Add a rent payment to the store."""
        if payment.contract_id not in self.contracts:
            raise ReferentialIntegrityError(f"Contract {payment.contract_id} not found")

        previous = self.payments.get(payment.payment_id)
        if previous is None or previous.contract_id != payment.contract_id:
            if previous is not None:
                self._contract_payments[previous.contract_id].remove(payment.payment_id)
            self._contract_payments[payment.contract_id].append(payment.payment_id)

        self.payments[payment.payment_id] = payment
        self._invalidate(EntityType.PAYMENTS)

    def add_expense(self, expense: Expense) -> None:
        """Add a property expense to the store."""
        if expense.property_id not in self.properties:
            raise ReferentialIntegrityError(f"Property {expense.property_id} not found")

        self.expenses[expense.expense_id] = expense
        self._invalidate(EntityType.EXPENSES)

    def set_configuration(self, configuration: FinancialConfiguration | None) -> None:
        """Set (or clear) the active financial configuration."""
        self.configuration = configuration

    # Query methods
    def get_property_contracts(self, property_id: str) -> list[Contract]:
        """Get all contracts for a property."""
        if property_id not in self.properties:
            raise EntityNotFoundError(f"Property {property_id} not found")
        return [self.contracts[cid] for cid in self._property_contracts[property_id]]

    def get_contract_payments(self, contract_id: str) -> list[Payment]:
        """Get all payments for a contract."""
        payment_ids = self._contract_payments.get(contract_id, [])
        return [self.payments[pid] for pid in payment_ids]

    def get_financial_configuration(self) -> FinancialConfiguration | None:
        """Return the active configuration, or None when none is set."""
        return self.configuration

    def fetch_page(
        self,
        entity: EntityType,
        record_filter: RecordFilter,
        offset: int,
        limit: int,
    ) -> list[Any]:
        """Return up to ``limit`` matching records after ``offset``.

        Records are ordered by primary key, so consecutive pages never skip
        or repeat a record while the store is not written to. The matches of
        a filter are computed on its first page and sliced afterwards, so a
        full read scans the entity once whatever the page size.

        Raises
        ------
        ValueError
            If the filter names a field the entity does not have.
        """
        cache = self._filtered.setdefault(entity, {})
        matches = cache.get(record_filter)
        if matches is None:
            record_filter.equality_terms(entity)
            record_filter.range_field(entity)
            matches = [r for r in self._ordered(entity) if record_filter.matches(entity, r)]
            cache[record_filter] = matches
        return matches[offset : offset + limit]

    def _invalidate(self, entity: EntityType) -> None:
        self._sorted.pop(entity, None)
        self._filtered.pop(entity, None)

    def _ordered(self, entity: EntityType) -> list[Any]:
        """Records of an entity sorted by primary key."""
        if entity not in self._sorted:
            collection = self._collection(entity)
            key = PRIMARY_KEYS[entity]
            self._sorted[entity] = sorted(collection.values(), key=lambda r: getattr(r, key))
        return self._sorted[entity]

    def _collection(self, entity: EntityType) -> dict[str, Any]:
        return {
            EntityType.PROPERTIES: self.properties,
            EntityType.CLIENTS: self.clients,
            EntityType.CONTRACTS: self.contracts,
            EntityType.PAYMENTS: self.payments,
            EntityType.EXPENSES: self.expenses,
        }[entity]

    def summary(self) -> dict[str, int]:
        """Return summary counts of all entities."""
        return {
            "properties": len(self.properties),
            "clients": len(self.clients),
            "contracts": len(self.contracts),
            "payments": len(self.payments),
            "expenses": len(self.expenses),
        }
