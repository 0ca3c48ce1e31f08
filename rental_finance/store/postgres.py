"""PostgreSQL record store backed by psycopg."""

from __future__ import annotations

import logging
from datetime import date
from decimal import Decimal
from typing import Any

from rental_finance.models.rental import (
    Client,
    Contract,
    ContractStatus,
    EntityType,
    Expense,
    ExpenseCategory,
    ExpenseStatus,
    FinancialConfiguration,
    Payment,
    PaymentStatus,
    Property,
    PropertyType,
)
from rental_finance.store.base import PRIMARY_KEYS, RecordFilter

logger = logging.getLogger(__name__)


class PostgresRecordStore:
    """Read rental records from PostgreSQL one page at a time.

    Rows are converted into typed, validated records as they leave the
    database, so report code never sees raw rows.
    """

    TABLES = {
        EntityType.PROPERTIES: "properties",
        EntityType.CLIENTS: "clients",
        EntityType.CONTRACTS: "contracts",
        EntityType.PAYMENTS: "payments",
        EntityType.EXPENSES: "expenses",
    }

    TABLE_COLUMNS = {
        EntityType.PROPERTIES: ["property_id", "address", "city", "property_type"],
        EntityType.CLIENTS: ["client_id", "name", "email"],
        EntityType.CONTRACTS: [
            "contract_id", "property_id", "tenant_id", "rent_amount",
            "start_date", "end_date", "status", "due_day", "owner_id",
        ],
        EntityType.PAYMENTS: [
            "payment_id", "contract_id", "reference_month", "amount_due",
            "due_date", "status", "amount_paid", "payment_date",
            "interest_amount", "penalty_amount",
        ],
        EntityType.EXPENSES: [
            "expense_id", "property_id", "category", "amount", "expense_date",
            "status", "payment_date", "description",
        ],
    }

    # Creation order respects foreign keys
    DDL = [
        """CREATE TABLE IF NOT EXISTS properties (
            property_id TEXT PRIMARY KEY,
            address TEXT NOT NULL,
            city TEXT NOT NULL,
            property_type TEXT NOT NULL
        )""",
        """CREATE TABLE IF NOT EXISTS clients (
            client_id TEXT PRIMARY KEY,
            name TEXT NOT NULL,
            email TEXT
        )""",
        """CREATE TABLE IF NOT EXISTS contracts (
            contract_id TEXT PRIMARY KEY,
            property_id TEXT NOT NULL REFERENCES properties(property_id),
            tenant_id TEXT NOT NULL REFERENCES clients(client_id),
            rent_amount NUMERIC(15, 2) NOT NULL,
            start_date DATE NOT NULL,
            end_date DATE NOT NULL,
            status TEXT NOT NULL,
            due_day INTEGER NOT NULL DEFAULT 1,
            owner_id TEXT REFERENCES clients(client_id)
        )""",
        """CREATE TABLE IF NOT EXISTS payments (
            payment_id TEXT PRIMARY KEY,
            contract_id TEXT NOT NULL REFERENCES contracts(contract_id),
            reference_month DATE NOT NULL,
            amount_due NUMERIC(15, 2) NOT NULL,
            due_date DATE NOT NULL,
            status TEXT NOT NULL,
            amount_paid NUMERIC(15, 2),
            payment_date DATE,
            interest_amount NUMERIC(15, 2) NOT NULL DEFAULT 0,
            penalty_amount NUMERIC(15, 2) NOT NULL DEFAULT 0
        )""",
        """CREATE TABLE IF NOT EXISTS expenses (
            expense_id TEXT PRIMARY KEY,
            property_id TEXT NOT NULL REFERENCES properties(property_id),
            category TEXT NOT NULL,
            amount NUMERIC(15, 2) NOT NULL,
            expense_date DATE NOT NULL,
            status TEXT NOT NULL,
            payment_date DATE,
            description TEXT NOT NULL DEFAULT ''
        )""",
        """CREATE TABLE IF NOT EXISTS financial_configurations (
            configuration_id SERIAL PRIMARY KEY,
            monthly_interest_rate NUMERIC(7, 6) NOT NULL,
            penalty_rate NUMERIC(7, 6) NOT NULL,
            grace_days INTEGER NOT NULL DEFAULT 0,
            active BOOLEAN NOT NULL DEFAULT TRUE,
            updated_at TIMESTAMP NOT NULL DEFAULT now()
        )""",
    ]

    def __init__(self, connection_string: str) -> None:
        """Initialize PostgreSQL record store.

        Parameters
        ----------
        connection_string : str
            PostgreSQL connection string.
        """
        try:
            import psycopg
        except ImportError as e:
            raise ImportError(
                "psycopg is required for the PostgreSQL record store. "
                "Install with: pip install 'psycopg[binary]'"
            ) from e

        self.conn = psycopg.connect(connection_string)
        logger.info("Connected to PostgreSQL record store")

    def create_tables(self) -> None:
        """Create the rental tables if they do not exist."""
        with self.conn.cursor() as cur:
            for statement in self.DDL:
                cur.execute(statement)
        self.conn.commit()
        logger.info("Rental tables ready")

    def fetch_page(
        self,
        entity: EntityType,
        record_filter: RecordFilter,
        offset: int,
        limit: int,
    ) -> list[Any]:
        """Return up to ``limit`` matching records after ``offset``, ordered by primary key."""
        query, params = self._build_query(entity, record_filter, offset, limit)
        with self.conn.cursor() as cur:
            cur.execute(query, params)
            rows = cur.fetchall()

        logger.debug("Fetched %d %s rows at offset %d", len(rows), entity.value, offset)
        columns = self.TABLE_COLUMNS[entity]
        return [self._to_record(entity, dict(zip(columns, row))) for row in rows]

    def get_financial_configuration(self) -> FinancialConfiguration | None:
        """Return the most recently updated active configuration, if any."""
        with self.conn.cursor() as cur:
            cur.execute(
                "SELECT monthly_interest_rate, penalty_rate, grace_days "
                "FROM financial_configurations WHERE active "
                "ORDER BY updated_at DESC LIMIT 1"
            )
            row = cur.fetchone()

        if row is None:
            return None
        return FinancialConfiguration(
            monthly_interest_rate=Decimal(str(row[0])),
            penalty_rate=Decimal(str(row[1])),
            grace_days=int(row[2]),
        )

    def close(self) -> None:
        """Close database connection."""
        self.conn.close()
        logger.info("PostgreSQL record store closed")

    def _build_query(
        self,
        entity: EntityType,
        record_filter: RecordFilter,
        offset: int,
        limit: int,
    ) -> tuple[str, list[Any]]:
        """Build a parameterised paged SELECT for a filter."""
        table = self.TABLES[entity]
        columns = self.TABLE_COLUMNS[entity]
        conditions: list[str] = []
        params: list[Any] = []

        # Column names come from the whitelists above, never from input
        for name, value in record_filter.equality_terms(entity).items():
            conditions.append(f"{name} = %s")
            params.append(value)

        date_field = record_filter.range_field(entity)
        if date_field is not None:
            if record_filter.start is not None:
                conditions.append(f"{date_field} >= %s")
                params.append(record_filter.start)
            if record_filter.end is not None:
                conditions.append(f"{date_field} < %s")
                params.append(record_filter.end)

        where = f" WHERE {' AND '.join(conditions)}" if conditions else ""
        query = (
            f"SELECT {', '.join(columns)} FROM {table}{where} "  # noqa: S608
            f"ORDER BY {PRIMARY_KEYS[entity]} LIMIT %s OFFSET %s"
        )
        params.extend([limit, offset])
        return query, params

    def _to_record(self, entity: EntityType, row: dict[str, Any]) -> Any:
        """Convert a row into its typed record."""
        if entity == EntityType.PROPERTIES:
            return Property(
                property_id=row["property_id"],
                address=row["address"],
                city=row["city"],
                property_type=PropertyType(row["property_type"]),
            )
        if entity == EntityType.CLIENTS:
            return Client(client_id=row["client_id"], name=row["name"], email=row["email"])
        if entity == EntityType.CONTRACTS:
            return Contract(
                contract_id=row["contract_id"],
                property_id=row["property_id"],
                tenant_id=row["tenant_id"],
                rent_amount=_money(row["rent_amount"]),
                start_date=_date(row["start_date"]),
                end_date=_date(row["end_date"]),
                status=ContractStatus(row["status"]),
                due_day=int(row["due_day"]),
                owner_id=row["owner_id"],
            )
        if entity == EntityType.PAYMENTS:
            return Payment(
                payment_id=row["payment_id"],
                contract_id=row["contract_id"],
                reference_month=_date(row["reference_month"]),
                amount_due=_money(row["amount_due"]),
                due_date=_date(row["due_date"]),
                status=PaymentStatus(row["status"]),
                amount_paid=_money(row["amount_paid"]) if row["amount_paid"] is not None else None,
                payment_date=_date(row["payment_date"]) if row["payment_date"] is not None else None,
                interest_amount=_money(row["interest_amount"]),
                penalty_amount=_money(row["penalty_amount"]),
            )
        return Expense(
            expense_id=row["expense_id"],
            property_id=row["property_id"],
            category=ExpenseCategory(row["category"]),
            amount=_money(row["amount"]),
            expense_date=_date(row["expense_date"]),
            status=ExpenseStatus(row["status"]),
            payment_date=_date(row["payment_date"]) if row["payment_date"] is not None else None,
            description=row["description"] or "",
        )


def _money(value: Any) -> Decimal:
    """NUMERIC columns arrive as Decimal; anything else goes through str."""
    if value is None:
        return Decimal("0")
    return value if isinstance(value, Decimal) else Decimal(str(value))


def _date(value: Any) -> date:
    """DATE columns arrive as date; ISO strings are accepted too."""
    return value if isinstance(value, date) else date.fromisoformat(str(value))
