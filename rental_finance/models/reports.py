"""Report value objects returned by the engine.

Every report holds plain numbers, strings, dates, tuples and read-only
mappings only, so it can be handed straight to a sink or to
``rental_finance.sinks.serialization``.
"""

from dataclasses import dataclass, field
from datetime import date
from decimal import Decimal
from types import MappingProxyType
from typing import Mapping

from rental_finance.models.rental.enums import PaymentStatus

ZERO = Decimal("0.00")


@dataclass(frozen=True)
class LateFee:
    """Interest and penalty owed on one late amount."""

    interest: Decimal
    penalty: Decimal
    total: Decimal


@dataclass(frozen=True)
class FeeAssessment:
    """Recommended fee fields for a payment as of an evaluation date."""

    payment_id: str
    contract_id: str
    days_late: int
    interest_amount: Decimal
    penalty_amount: Decimal
    total_due: Decimal
    status: PaymentStatus
    changed: bool  # True when any recommended field differs from the stored one


@dataclass(frozen=True)
class PeriodSummary:
    """Revenue, expense, delinquency and profitability totals for a window."""

    start: date
    end: date
    revenue: Decimal = ZERO
    expenses: Decimal = ZERO
    net_profit: Decimal = ZERO
    margin: Decimal = ZERO
    delinquency_value: Decimal = ZERO
    delinquency_rate: Decimal = ZERO
    paid_payment_count: int = 0
    overdue_contract_count: int = 0
    active_contract_count: int = 0
    expenses_by_category: Mapping[str, Decimal] = field(default_factory=dict)

    def __post_init__(self) -> None:
        object.__setattr__(self, "expenses_by_category", MappingProxyType(dict(self.expenses_by_category)))


@dataclass(frozen=True)
class PropertyProfitability:
    """Profitability of one property over a window."""

    property_id: str
    address: str
    city: str
    contract_count: int = 0
    revenue: Decimal = ZERO
    expenses: Decimal = ZERO
    profit: Decimal = ZERO
    margin: Decimal = ZERO
    occupancy: Decimal = ZERO


@dataclass(frozen=True)
class ProfitabilityReport:
    """Ranked per-property profitability plus portfolio totals."""

    start: date
    end: date
    rank_by: str
    entries: tuple[PropertyProfitability, ...] = ()
    total_revenue: Decimal = ZERO
    total_expenses: Decimal = ZERO
    total_profit: Decimal = ZERO
    average_margin: Decimal = ZERO
    average_occupancy: Decimal = ZERO


@dataclass(frozen=True)
class DelinquencyEntry:
    """Overdue position of one contract."""

    contract_id: str
    days_late: int
    amount_owed: Decimal
    payment_count: int
    oldest_due_date: date
    property_id: str | None = None
    tenant_id: str | None = None
    tenant_name: str = ""


@dataclass(frozen=True)
class AgingBucket:
    """Contracts whose days late fall in ``[min_days, max_days]``."""

    label: str
    min_days: int
    max_days: int | None  # None means unbounded
    count: int = 0
    amount_owed: Decimal = ZERO


@dataclass(frozen=True)
class DelinquencyReport:
    """Overdue contracts with aging buckets as of an evaluation date."""

    evaluation_date: date
    minimum_days_late: int
    sort_by: str
    entries: tuple[DelinquencyEntry, ...] = ()
    buckets: tuple[AgingBucket, ...] = ()
    total_contracts: int = 0
    total_owed: Decimal = ZERO
    average_days_late: Decimal = ZERO
