"""Period financial summary: revenue, expenses, delinquency and margin."""

from __future__ import annotations

from dataclasses import dataclass, field
from datetime import date
from decimal import Decimal
from typing import Iterable

from rental_finance.calculations.aggregation import group_sum, percentage
from rental_finance.calculations.money import in_window, round2, validate_window
from rental_finance.models.rental import (
    Contract,
    ContractStatus,
    Expense,
    ExpenseStatus,
    Payment,
    PaymentStatus,
)
from rental_finance.models.reports import PeriodSummary


@dataclass
class PeriodAccumulator:
    """Running totals for a ``PeriodSummary`` over ``[start, end)``.

    Each ``fold_*`` method checks its own inclusion rule, so records may be
    folded in any order and in any page size; a store filter only narrows
    how many records arrive.
    """

    start: date
    end: date
    revenue: Decimal = Decimal("0")
    expenses: Decimal = Decimal("0")
    delinquency_value: Decimal = Decimal("0")
    paid_payment_count: int = 0
    overdue_contracts: set[str] = field(default_factory=set)
    active_contracts: set[str] = field(default_factory=set)
    expenses_by_category: dict[str, Decimal] = field(default_factory=dict)

    def fold_payment(self, payment: Payment) -> PeriodAccumulator:
        """Count a paid payment as revenue or an overdue one as delinquency."""
        if payment.status == PaymentStatus.PAID and in_window(payment.payment_date, self.start, self.end):
            self.revenue += payment.amount_paid or Decimal("0")
            self.paid_payment_count += 1
        elif payment.status == PaymentStatus.OVERDUE and in_window(payment.due_date, self.start, self.end):
            # Stored fees are used as-is; they were set when the payment went overdue
            self.delinquency_value += payment.amount_owed
            self.overdue_contracts.add(payment.contract_id)
        return self

    def fold_expense(self, expense: Expense) -> PeriodAccumulator:
        """Count a paid expense dated inside the window."""
        if expense.status == ExpenseStatus.PAID and in_window(expense.expense_date, self.start, self.end):
            self.expenses += expense.amount
            group_sum(
                (expense,),
                lambda e: e.category.value,
                lambda e: e.amount,
                into=self.expenses_by_category,
            )
        return self

    def fold_contract(self, contract: Contract) -> PeriodAccumulator:
        """Count an active contract toward the delinquency-rate denominator."""
        if contract.status == ContractStatus.ACTIVE:
            self.active_contracts.add(contract.contract_id)
        return self

    def result(self) -> PeriodSummary:
        """Finalize the summary; every amount is rounded to cents."""
        net_profit = self.revenue - self.expenses
        return PeriodSummary(
            start=self.start,
            end=self.end,
            revenue=round2(self.revenue),
            expenses=round2(self.expenses),
            net_profit=round2(net_profit),
            margin=percentage(net_profit, self.revenue),
            delinquency_value=round2(self.delinquency_value),
            delinquency_rate=percentage(len(self.overdue_contracts), len(self.active_contracts)),
            paid_payment_count=self.paid_payment_count,
            overdue_contract_count=len(self.overdue_contracts),
            active_contract_count=len(self.active_contracts),
            expenses_by_category={
                category: round2(amount) for category, amount in self.expenses_by_category.items()
            },
        )


def summarize_period(
    start: date,
    end: date,
    payments: Iterable[Payment] = (),
    expenses: Iterable[Expense] = (),
    contracts: Iterable[Contract] = (),
) -> PeriodSummary:
    """Summarize in-memory records for ``[start, end)``.

    Raises
    ------
    InvalidDateRange
        If ``end <= start``.
    """
    validate_window(start, end)
    acc = PeriodAccumulator(start=start, end=end)
    for payment in payments:
        acc.fold_payment(payment)
    for expense in expenses:
        acc.fold_expense(expense)
    for contract in contracts:
        acc.fold_contract(contract)
    return acc.result()
