"""Per-property profitability ranking."""

from __future__ import annotations

from dataclasses import dataclass, field
from datetime import date
from decimal import Decimal
from typing import Callable, Iterable

from rental_finance.calculations.aggregation import percentage, rank_descending
from rental_finance.calculations.money import (
    in_window,
    month_start,
    months_in_window,
    round2,
    validate_window,
)
from rental_finance.models.rental import (
    Contract,
    Expense,
    ExpenseStatus,
    Payment,
    PaymentStatus,
    Property,
)
from rental_finance.models.reports import ProfitabilityReport, PropertyProfitability

RANK_METRICS: dict[str, Callable[[PropertyProfitability], Decimal]] = {
    "profitability": lambda entry: entry.margin,
    "revenue": lambda entry: entry.revenue,
    "profit": lambda entry: entry.profit,
    "occupancy": lambda entry: entry.occupancy,
}


@dataclass
class ProfitabilityAccumulator:
    """Running per-property totals over ``[start, end)``.

    Properties and contracts must be folded before payments, since a
    payment reaches its property through its contract. Within each entity
    the order does not matter.
    """

    start: date
    end: date
    properties: dict[str, Property] = field(default_factory=dict)
    contract_property: dict[str, str] = field(default_factory=dict)
    contract_counts: dict[str, int] = field(default_factory=dict)
    revenue: dict[str, Decimal] = field(default_factory=dict)
    expenses: dict[str, Decimal] = field(default_factory=dict)
    occupied_months: dict[str, set[date]] = field(default_factory=dict)

    def __post_init__(self) -> None:
        self._first_month = month_start(self.start)
        self._last_month = month_start(date.fromordinal(self.end.toordinal() - 1))

    def fold_property(self, prop: Property) -> ProfitabilityAccumulator:
        """Bring a property into scope."""
        if prop.property_id not in self.properties:
            self.properties[prop.property_id] = prop
            self.contract_counts[prop.property_id] = 0
            self.revenue[prop.property_id] = Decimal("0")
            self.expenses[prop.property_id] = Decimal("0")
            self.occupied_months[prop.property_id] = set()
        return self

    def fold_contract(self, contract: Contract) -> ProfitabilityAccumulator:
        """Map a contract to its in-scope property."""
        if contract.property_id not in self.properties:
            return self
        if contract.contract_id not in self.contract_property:
            self.contract_property[contract.contract_id] = contract.property_id
            if contract.overlaps(self.start, self.end):
                self.contract_counts[contract.property_id] += 1
        return self

    def fold_payment(self, payment: Payment) -> ProfitabilityAccumulator:
        """Credit a paid payment to its property."""
        property_id = self.contract_property.get(payment.contract_id)
        if property_id is None:
            return self
        if payment.status != PaymentStatus.PAID or not in_window(payment.payment_date, self.start, self.end):
            return self

        self.revenue[property_id] += payment.amount_paid or Decimal("0")
        if self._first_month <= payment.reference_month <= self._last_month:
            self.occupied_months[property_id].add(payment.reference_month)
        return self

    def fold_expense(self, expense: Expense) -> ProfitabilityAccumulator:
        """Charge a paid expense to its property."""
        if expense.property_id not in self.properties:
            return self
        if expense.status == ExpenseStatus.PAID and in_window(expense.expense_date, self.start, self.end):
            self.expenses[expense.property_id] += expense.amount
        return self

    def entries(self) -> list[PropertyProfitability]:
        """One entry per in-scope property, in the order properties were folded."""
        total_months = months_in_window(self.start, self.end)
        result = []
        for property_id, prop in self.properties.items():
            revenue = self.revenue[property_id]
            expenses = self.expenses[property_id]
            profit = revenue - expenses
            result.append(
                PropertyProfitability(
                    property_id=property_id,
                    address=prop.address,
                    city=prop.city,
                    contract_count=self.contract_counts[property_id],
                    revenue=round2(revenue),
                    expenses=round2(expenses),
                    profit=round2(profit),
                    margin=percentage(profit, revenue),
                    occupancy=percentage(len(self.occupied_months[property_id]), total_months),
                )
            )
        return result

    def result(self, rank_by: str = "profitability") -> ProfitabilityReport:
        """Rank the entries and add portfolio totals.

        Raises
        ------
        ValueError
            If ``rank_by`` is not a known ranking key.
        """
        metric = RANK_METRICS.get(rank_by)
        if metric is None:
            raise ValueError(
                f"unknown ranking key {rank_by!r}; expected one of {', '.join(RANK_METRICS)}"
            )

        ranked = rank_descending(self.entries(), metric)
        count = len(ranked)
        total_revenue = sum((e.revenue for e in ranked), Decimal("0"))
        total_expenses = sum((e.expenses for e in ranked), Decimal("0"))
        average_margin = sum((e.margin for e in ranked), Decimal("0")) / count if count else 0
        average_occupancy = sum((e.occupancy for e in ranked), Decimal("0")) / count if count else 0

        return ProfitabilityReport(
            start=self.start,
            end=self.end,
            rank_by=rank_by,
            entries=tuple(ranked),
            total_revenue=round2(total_revenue),
            total_expenses=round2(total_expenses),
            total_profit=round2(total_revenue - total_expenses),
            average_margin=round2(average_margin),
            average_occupancy=round2(average_occupancy),
        )


def rank_properties(
    start: date,
    end: date,
    properties: Iterable[Property],
    contracts: Iterable[Contract] = (),
    payments: Iterable[Payment] = (),
    expenses: Iterable[Expense] = (),
    rank_by: str = "profitability",
) -> ProfitabilityReport:
    """Build a profitability report from in-memory records.

    Raises
    ------
    InvalidDateRange
        If ``end <= start``.
    """
    validate_window(start, end)
    acc = ProfitabilityAccumulator(start=start, end=end)
    for prop in properties:
        acc.fold_property(prop)
    for contract in contracts:
        acc.fold_contract(contract)
    for payment in payments:
        acc.fold_payment(payment)
    for expense in expenses:
        acc.fold_expense(expense)
    return acc.result(rank_by)
