"""Pytest configuration and fixtures.

``portfolio`` is a small hand-built portfolio whose report figures are
worked out in the tests that use it:

- P1 (São Paulo): contract K1 (Zé Souza, 1000/month, 2024) and the
  terminated 2023 contract K3; January and February paid, March overdue.
- P2 (Campinas): contract K2 (Álvaro Lima, 1200/month, 2024); January
  paid, February and March overdue.
- P3 (Santos): no contract and no expense inside Q1 2024.
"""

from datetime import date
from decimal import Decimal
from typing import Callable

import pytest

from rental_finance.models.rental import (
    Client,
    Contract,
    ContractStatus,
    Expense,
    ExpenseCategory,
    ExpenseStatus,
    FinancialConfiguration,
    Payment,
    PaymentStatus,
    Property,
    PropertyType,
)
from rental_finance.store.memory import RentalDataStore


@pytest.fixture
def seed() -> int:
    """Fixed seed for reproducible tests."""
    return 42


@pytest.fixture
def configuration() -> FinancialConfiguration:
    """1% monthly interest, 2% penalty, 5 grace days."""
    return FinancialConfiguration(
        monthly_interest_rate=Decimal("0.01"),
        penalty_rate=Decimal("0.02"),
        grace_days=5,
    )


@pytest.fixture
def make_payment() -> Callable[..., Payment]:
    """Factory for payments with sensible defaults."""

    def _make(
        payment_id: str = "pay-001",
        contract_id: str = "K1",
        amount_due: str = "1000.00",
        due_date: date = date(2024, 1, 10),
        status: PaymentStatus = PaymentStatus.PENDING,
        payment_date: date | None = None,
        amount_paid: str | None = None,
        interest: str = "0",
        penalty: str = "0",
    ) -> Payment:
        return Payment(
            payment_id=payment_id,
            contract_id=contract_id,
            reference_month=due_date.replace(day=1),
            amount_due=Decimal(amount_due),
            due_date=due_date,
            status=status,
            amount_paid=Decimal(amount_paid) if amount_paid is not None else None,
            payment_date=payment_date,
            interest_amount=Decimal(interest),
            penalty_amount=Decimal(penalty),
        )

    return _make


@pytest.fixture
def make_expense() -> Callable[..., Expense]:
    """Factory for paid expenses."""

    def _make(
        expense_id: str = "exp-001",
        property_id: str = "P1",
        amount: str = "100.00",
        expense_date: date = date(2024, 1, 15),
        category: ExpenseCategory = ExpenseCategory.MAINTENANCE,
        status: ExpenseStatus = ExpenseStatus.PAID,
    ) -> Expense:
        return Expense(
            expense_id=expense_id,
            property_id=property_id,
            category=category,
            amount=Decimal(amount),
            expense_date=expense_date,
            status=status,
            payment_date=expense_date if status == ExpenseStatus.PAID else None,
        )

    return _make


@pytest.fixture
def portfolio(
    configuration: FinancialConfiguration,
    make_payment: Callable[..., Payment],
    make_expense: Callable[..., Expense],
) -> RentalDataStore:
    """Three properties, three contracts and a first quarter of 2024."""
    store = RentalDataStore()
    store.set_configuration(configuration)

    store.add_property(Property("P1", "Rua Augusta, 100", "São Paulo", PropertyType.APARTMENT))
    store.add_property(Property("P2", "Rua Barão, 20", "Campinas", PropertyType.HOUSE))
    store.add_property(Property("P3", "Av. Ana Costa, 300", "Santos", PropertyType.LAND))

    store.add_client(Client("C1", "Zé Souza", "ze@example.com"))
    store.add_client(Client("C2", "Álvaro Lima", "alvaro@example.com"))
    store.add_client(Client("C3", "alice Costa"))

    store.add_contract(
        Contract(
            "K1", "P1", "C1", Decimal("1000.00"),
            date(2024, 1, 1), date(2024, 12, 31), ContractStatus.ACTIVE, due_day=10,
        )
    )
    store.add_contract(
        Contract(
            "K2", "P2", "C2", Decimal("1200.00"),
            date(2024, 1, 1), date(2024, 12, 31), ContractStatus.ACTIVE, due_day=5,
        )
    )
    store.add_contract(
        Contract(
            "K3", "P1", "C3", Decimal("800.00"),
            date(2023, 1, 1), date(2023, 12, 31), ContractStatus.TERMINATED,
        )
    )

    paid = PaymentStatus.PAID
    overdue = PaymentStatus.OVERDUE
    for payment in [
        make_payment("K1-2024-01", "K1", "1000.00", date(2024, 1, 10), paid, date(2024, 1, 10), "1000.00"),
        make_payment("K1-2024-02", "K1", "1000.00", date(2024, 2, 10), paid, date(2024, 2, 12), "1000.00"),
        make_payment("K1-2024-03", "K1", "1000.00", date(2024, 3, 10), overdue, interest="5.00", penalty="20.00"),
        make_payment("K1-2024-04", "K1", "1000.00", date(2024, 4, 10)),
        make_payment("K2-2024-01", "K2", "1200.00", date(2024, 1, 5), paid, date(2024, 1, 5), "1200.00"),
        make_payment("K2-2024-02", "K2", "1200.00", date(2024, 2, 5), overdue, interest="12.00", penalty="24.00"),
        make_payment("K2-2024-03", "K2", "1200.00", date(2024, 3, 5), overdue),
        make_payment("K3-2023-12", "K3", "800.00", date(2023, 12, 1), paid, date(2023, 12, 1), "800.00"),
    ]:
        store.add_payment(payment)

    for expense in [
        make_expense("E1", "P1", "200.00", date(2024, 1, 15)),
        make_expense("E2", "P1", "150.00", date(2024, 2, 20), ExpenseCategory.TAXES),
        make_expense("E3", "P2", "300.00", date(2024, 3, 1)),
        make_expense("E4", "P2", "99.00", date(2024, 2, 1), ExpenseCategory.INSURANCE, ExpenseStatus.PENDING),
        make_expense("E5", "P3", "50.00", date(2024, 4, 1), ExpenseCategory.OTHER),
    ]:
        store.add_expense(expense)

    return store


@pytest.fixture
def q1_2024() -> tuple[date, date]:
    """First quarter of 2024 as a half-open window."""
    return date(2024, 1, 1), date(2024, 4, 1)
