"""Tests for the monthly payment schedule."""

from datetime import date
from decimal import Decimal

import pytest

from rental_finance.calculations.schedule import due_date_for, monthly_payments
from rental_finance.exceptions import InvalidFinancialInput
from rental_finance.models.rental import Contract, ContractStatus, PaymentStatus


def make_contract(**overrides: object) -> Contract:
    values = {
        "contract_id": "K1",
        "property_id": "P1",
        "tenant_id": "C1",
        "rent_amount": Decimal("1500.00"),
        "start_date": date(2024, 1, 15),
        "end_date": date(2024, 6, 14),
        "status": ContractStatus.ACTIVE,
        "due_day": 10,
    }
    values.update(overrides)
    return Contract(**values)


class TestDueDate:
    """Tests for due_date_for."""

    def test_due_day_inside_month(self) -> None:
        assert due_date_for(date(2024, 3, 1), 10) == date(2024, 3, 10)

    def test_due_day_clamped_to_short_month(self) -> None:
        assert due_date_for(date(2024, 2, 1), 31) == date(2024, 2, 29)
        assert due_date_for(date(2023, 2, 1), 30) == date(2023, 2, 28)


class TestMonthlyPayments:
    """Tests for monthly_payments."""

    def test_one_payment_per_month(self) -> None:
        payments = list(monthly_payments(make_contract()))

        assert [p.reference_month for p in payments] == [
            date(2024, m, 1) for m in range(1, 7)
        ]
        assert [p.payment_id for p in payments][:2] == ["K1-2024-01", "K1-2024-02"]

    def test_payments_are_pending_with_rent(self) -> None:
        for payment in monthly_payments(make_contract()):
            assert payment.status == PaymentStatus.PENDING
            assert payment.amount_due == Decimal("1500.00")
            assert payment.payment_date is None
            assert payment.amount_owed == Decimal("1500.00")
            assert payment.due_date.day == 10

    def test_crosses_year(self) -> None:
        contract = make_contract(start_date=date(2023, 11, 1), end_date=date(2024, 2, 28))
        ids = [p.payment_id for p in monthly_payments(contract)]
        assert ids == ["K1-2023-11", "K1-2023-12", "K1-2024-01", "K1-2024-02"]

    def test_zero_rent_rejected(self) -> None:
        with pytest.raises(InvalidFinancialInput) as exc:
            list(monthly_payments(make_contract(rent_amount=Decimal("0"))))
        assert exc.value.field == "rent_amount"
