"""Rent payment and property expense models."""

from dataclasses import dataclass
from datetime import date
from decimal import Decimal

from rental_finance.exceptions import InvalidEntityStateError
from rental_finance.models.rental.enums import (
    ExpenseCategory,
    ExpenseStatus,
    PaymentStatus,
)


@dataclass(frozen=True)
class Payment:
    """Monthly rent payment (parcela) of a contract.

    A payment is ``paid`` exactly when ``payment_date`` is set, and an
    ``overdue`` payment never carries a payment date. The stored
    ``interest_amount`` and ``penalty_amount`` are whatever fees were last
    committed by the record store.
    """

    payment_id: str
    contract_id: str
    reference_month: date  # First day of the month being paid
    amount_due: Decimal
    due_date: date
    status: PaymentStatus
    amount_paid: Decimal | None = None
    payment_date: date | None = None
    interest_amount: Decimal = Decimal("0")
    penalty_amount: Decimal = Decimal("0")

    def __post_init__(self) -> None:
        if self.reference_month.day != 1:
            raise InvalidEntityStateError(
                f"Payment {self.payment_id} reference month must be a first-of-month date"
            )
        if self.amount_due < 0:
            raise InvalidEntityStateError(f"Payment {self.payment_id} has negative amount due")
        if self.amount_paid is not None and self.amount_paid < 0:
            raise InvalidEntityStateError(f"Payment {self.payment_id} has negative amount paid")
        if self.interest_amount < 0 or self.penalty_amount < 0:
            raise InvalidEntityStateError(f"Payment {self.payment_id} has negative fees")

        is_paid = self.status == PaymentStatus.PAID
        if is_paid != (self.payment_date is not None):
            raise InvalidEntityStateError(
                f"Payment {self.payment_id} must have a payment date if and only if it is paid"
            )

    @property
    def amount_owed(self) -> Decimal:
        """Amount due plus the stored interest and penalty."""
        return self.amount_due + self.interest_amount + self.penalty_amount


@dataclass(frozen=True)
class Expense:
    """Expense incurred on a property."""

    expense_id: str
    property_id: str
    category: ExpenseCategory
    amount: Decimal
    expense_date: date
    status: ExpenseStatus
    payment_date: date | None = None
    description: str = ""

    def __post_init__(self) -> None:
        if self.amount <= 0:
            raise InvalidEntityStateError(
                f"Expense {self.expense_id} amount must be greater than zero"
            )
