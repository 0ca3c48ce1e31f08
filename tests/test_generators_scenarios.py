"""Tests for the rental generators and the portfolio scenario."""

import json
import tempfile
from datetime import date, timedelta
from decimal import Decimal
from pathlib import Path

import pytest

from rental_finance import ReportEngine
from rental_finance.calculations.schedule import monthly_payments
from rental_finance.generators import (
    ClientGenerator,
    ContractGenerator,
    ExpenseGenerator,
    PaymentBehavior,
    PropertyGenerator,
)
from rental_finance.models.rental import (
    Contract,
    ContractStatus,
    ExpenseStatus,
    FinancialConfiguration,
    PaymentStatus,
    Property,
    PropertyType,
)
from rental_finance.scenarios import RentalPortfolioScenario
from rental_finance.sinks import JsonFileSink

REFERENCE = date(2024, 6, 15)


@pytest.fixture
def house() -> Property:
    return Property("P1", "Rua das Palmeiras, 45", "Curitiba", PropertyType.HOUSE)


@pytest.fixture
def lease() -> Contract:
    """Twelve-month lease over 2023, due on the 10th."""
    return Contract(
        "K1", "P1", "C1", Decimal("2000.00"),
        date(2023, 1, 1), date(2023, 12, 31), ContractStatus.TERMINATED, due_day=10,
    )


class TestMasterDataGenerators:
    """Tests for property, client and contract generators."""

    def test_property_reproducible(self, seed: int) -> None:
        first = PropertyGenerator(seed=seed).generate()
        second = PropertyGenerator(seed=seed).generate()

        assert first == second
        assert isinstance(first.property_type, PropertyType)
        assert first.address
        assert first.city

    def test_client(self, seed: int) -> None:
        client = ClientGenerator(seed=seed).generate()

        assert client.name
        assert "@" in client.email

    def test_contract_dates_and_rent(self, seed: int, house: Property) -> None:
        contract = ContractGenerator(seed=seed).generate(
            house, "C1", start_date=date(2024, 2, 1), months=12, reference_date=REFERENCE
        )

        assert contract.end_date == date(2025, 1, 31)
        assert contract.status == ContractStatus.ACTIVE
        assert Decimal("1500") <= contract.rent_amount <= Decimal("9000")
        assert contract.rent_amount % 10 == 0
        assert contract.due_day in (1, 5, 10, 15, 20)

    def test_contract_ended_is_terminated(self, seed: int, house: Property) -> None:
        contract = ContractGenerator(seed=seed).generate(
            house, "C1", start_date=date(2022, 1, 1), months=12, reference_date=REFERENCE
        )
        assert contract.status == ContractStatus.TERMINATED


class TestExpenseGenerator:
    """Tests for ExpenseGenerator."""

    def test_expense_within_range(self, seed: int) -> None:
        generator = ExpenseGenerator(seed=seed)
        start, end = date(2024, 1, 1), date(2024, 3, 31)

        for _ in range(50):
            expense = generator.generate("P1", start, end)
            _, low, high, description = ExpenseGenerator.CATEGORIES[expense.category]

            assert start <= expense.expense_date <= end
            assert Decimal(low) <= expense.amount <= Decimal(high)
            assert expense.description == description
            if expense.status == ExpenseStatus.PAID:
                assert expense.payment_date >= expense.expense_date
            else:
                assert expense.payment_date is None

    def test_paid_rate(self, seed: int) -> None:
        generator = ExpenseGenerator(seed=seed)
        expenses = [generator.generate("P1", date(2024, 1, 1), date(2024, 1, 31), paid_rate=1.0) for _ in range(20)]

        assert all(e.status == ExpenseStatus.PAID for e in expenses)


class TestPaymentBehavior:
    """Tests for tenant payment behavior."""

    def test_good_tenant_pays_within_grace(
        self, seed: int, lease: Contract, configuration: FinancialConfiguration
    ) -> None:
        behavior = PaymentBehavior(configuration, seed=seed)

        payments = behavior.apply_payment_behavior(
            list(monthly_payments(lease)),
            on_time_rate=1.0,
            late_rate=0.0,
            default_rate=0.0,
            reference_date=date(2024, 1, 1),
        )

        assert len(payments) == 12
        for payment in payments:
            assert payment.status == PaymentStatus.PAID
            assert payment.payment_date - payment.due_date <= timedelta(days=3)
            assert payment.amount_paid == payment.amount_due
            assert payment.interest_amount == 0

    def test_defaulter_stops_paying(
        self, seed: int, lease: Contract, configuration: FinancialConfiguration
    ) -> None:
        behavior = PaymentBehavior(configuration, seed=seed)

        payments = behavior.apply_payment_behavior(
            list(monthly_payments(lease)),
            on_time_rate=0.0,
            late_rate=0.0,
            default_rate=1.0,
            reference_date=date(2024, 1, 1),
        )
        overdue = [p for p in payments if p.status == PaymentStatus.OVERDUE]

        assert len(overdue) >= 6
        assert payments[-1].status == PaymentStatus.OVERDUE
        for payment in overdue:
            assert payment.payment_date is None
            assert payment.penalty_amount == Decimal("40.00")
            assert payment.interest_amount > 0

    def test_paid_amount_includes_fees(
        self, seed: int, lease: Contract, configuration: FinancialConfiguration
    ) -> None:
        behavior = PaymentBehavior(configuration, seed=seed)

        payments = behavior.apply_payment_behavior(
            list(monthly_payments(lease)),
            on_time_rate=0.0,
            late_rate=1.0,
            default_rate=0.0,
            reference_date=date(2024, 6, 1),
        )

        for payment in payments:
            assert payment.status == PaymentStatus.PAID
            assert payment.amount_paid == payment.amount_owed

    def test_not_yet_due_stays_pending(
        self, seed: int, lease: Contract, configuration: FinancialConfiguration
    ) -> None:
        behavior = PaymentBehavior(configuration, seed=seed)

        payments = behavior.apply_payment_behavior(
            list(monthly_payments(lease)), reference_date=date(2023, 6, 1)
        )

        for payment in payments:
            if payment.due_date >= date(2023, 6, 1):
                assert payment.status == PaymentStatus.PENDING
                assert payment.payment_date is None


class TestRentalPortfolioScenario:
    """Tests for RentalPortfolioScenario."""

    @pytest.fixture
    def scenario(self, seed: int) -> RentalPortfolioScenario:
        scenario = RentalPortfolioScenario(num_properties=30, reference_date=REFERENCE, seed=seed)
        scenario.generate()
        return scenario

    def test_generate(self, scenario: RentalPortfolioScenario) -> None:
        counts = scenario.store.summary()

        assert counts["properties"] == 30
        assert counts["clients"] == 30 + counts["contracts"]
        assert counts["expenses"] == 30 * 6
        assert counts["payments"] > 0
        assert scenario.store.get_financial_configuration() is not None

    def test_history_start(self, scenario: RentalPortfolioScenario) -> None:
        assert scenario.history_start == date(2023, 6, 1)
        for expense in scenario.store.expenses.values():
            assert scenario.history_start <= expense.expense_date < REFERENCE

    def test_no_payment_settled_in_the_future(self, scenario: RentalPortfolioScenario) -> None:
        for payment in scenario.store.payments.values():
            if payment.status == PaymentStatus.PAID:
                assert payment.payment_date < REFERENCE
            elif payment.status == PaymentStatus.OVERDUE:
                assert payment.due_date < REFERENCE

    def test_reproducible(self, seed: int) -> None:
        first = RentalPortfolioScenario(num_properties=10, reference_date=REFERENCE, seed=seed)
        second = RentalPortfolioScenario(num_properties=10, reference_date=REFERENCE, seed=seed)
        first.generate()
        second.generate()

        assert first.get_portfolio_summary() == second.get_portfolio_summary()

    def test_portfolio_summary(self, scenario: RentalPortfolioScenario) -> None:
        summary = scenario.get_portfolio_summary()

        assert summary["total_properties"] == 30
        assert summary["leased_properties"] == summary["total_contracts"]
        assert sum(summary["payment_status_distribution"].values()) == len(scenario.store.payments)
        assert Decimal(summary["overdue_amount"]) >= 0
        overdue_contracts = {
            p.contract_id for p in scenario.store.payments.values() if p.status == PaymentStatus.OVERDUE
        }
        assert summary["delinquent_contracts"] == len(overdue_contracts)

    def test_empty_summary(self) -> None:
        assert RentalPortfolioScenario(num_properties=0, reference_date=REFERENCE).get_portfolio_summary() == {}

    def test_export(self, scenario: RentalPortfolioScenario) -> None:
        with tempfile.TemporaryDirectory() as tmpdir:
            scenario.export([JsonFileSink(tmpdir)])

            for entity, count in scenario.store.summary().items():
                data = json.loads((Path(tmpdir) / f"{entity}.json").read_text(encoding="utf-8"))
                assert len(data) == count


class TestReportsOnScenario:
    """Reports over generated data agree with the raw records."""

    @pytest.fixture
    def scenario(self, seed: int) -> RentalPortfolioScenario:
        scenario = RentalPortfolioScenario(num_properties=40, reference_date=REFERENCE, seed=seed)
        scenario.generate()
        return scenario

    def test_summary_revenue(self, scenario: RentalPortfolioScenario) -> None:
        start, end = scenario.history_start, date(2024, 6, 1)
        expected = sum(
            (
                p.amount_paid
                for p in scenario.store.payments.values()
                if p.status == PaymentStatus.PAID and start <= p.payment_date < end
            ),
            Decimal("0"),
        )

        summary = ReportEngine(scenario.store).period_summary(start, end)

        assert summary.revenue == expected.quantize(Decimal("0.01"))

    def test_profitability_totals_match_summary(self, scenario: RentalPortfolioScenario) -> None:
        engine = ReportEngine(scenario.store)
        start, end = scenario.history_start, date(2024, 6, 1)

        summary = engine.period_summary(start, end)
        report = engine.profitability(start, end)

        assert len(report.entries) == 40
        assert report.total_revenue == summary.revenue
        assert report.total_expenses == summary.expenses

    def test_delinquency_owed_matches_overdue(self, scenario: RentalPortfolioScenario) -> None:
        expected = sum(
            (p.amount_owed for p in scenario.store.payments.values() if p.status == PaymentStatus.OVERDUE),
            Decimal("0"),
        )

        report = ReportEngine(scenario.store).delinquency(REFERENCE, minimum_days_late=0)

        assert report.total_owed == expected.quantize(Decimal("0.01"))

    def test_generated_fees_are_current(self, scenario: RentalPortfolioScenario) -> None:
        assert ReportEngine(scenario.store).assess_fees(REFERENCE) == []
