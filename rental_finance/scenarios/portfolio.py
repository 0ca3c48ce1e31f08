"""Rental portfolio scenario: properties, leases, rent history and expenses."""

from __future__ import annotations

import logging
import random
from datetime import date, timedelta
from decimal import Decimal
from typing import Any

from rental_finance.calculations.money import add_months, month_start
from rental_finance.calculations.schedule import monthly_payments
from rental_finance.generators import (
    ClientGenerator,
    ContractGenerator,
    ExpenseGenerator,
    PaymentBehavior,
    PropertyGenerator,
)
from rental_finance.models.rental import FinancialConfiguration, PaymentStatus
from rental_finance.store.memory import RentalDataStore

logger = logging.getLogger(__name__)

DEFAULT_CONFIGURATION = FinancialConfiguration(
    monthly_interest_rate=Decimal("0.01"),
    penalty_rate=Decimal("0.02"),
    grace_days=5,
)


class RentalPortfolioScenario:
    """Generate a rental portfolio with realistic payment behavior.

    This scenario creates:
    - Properties, each with an owner
    - Leases on a share of the properties, started within the history window
    - Monthly rent payments settled by tenant behavior:
        - On-time payments
        - Late payments charged interest and penalty
        - Tenants who stop paying (overdue rent)
    - Property expenses spread over the history window
    """

    def __init__(
        self,
        num_properties: int = 100,
        occupancy_rate: float = 0.85,
        history_months: int = 12,
        expenses_per_property: int = 6,
        on_time_rate: float = 0.80,
        late_rate: float = 0.15,
        default_rate: float = 0.05,
        reference_date: date | None = None,
        configuration: FinancialConfiguration | None = None,
        seed: int | None = None,
    ) -> None:
        """Initialize rental portfolio scenario.

        Parameters
        ----------
        num_properties : int
            Number of properties to generate.
        occupancy_rate : float
            Share of properties with a lease (0.0 to 1.0).
        history_months : int
            Months of history before ``reference_date``.
        expenses_per_property : int
            Expenses generated per property.
        on_time_rate, late_rate, default_rate : float
            Tenant behavior weights.
        reference_date : date | None
            "Today" for the generated data (defaults to today).
        configuration : FinancialConfiguration | None
            Fee settings stored with the portfolio.
        seed : int | None
            Random seed for reproducibility.
        """
        self.num_properties = num_properties
        self.occupancy_rate = occupancy_rate
        self.history_months = history_months
        self.expenses_per_property = expenses_per_property
        self.on_time_rate = on_time_rate
        self.late_rate = late_rate
        self.default_rate = default_rate
        self.reference_date = reference_date or date.today()
        self.configuration = configuration or DEFAULT_CONFIGURATION
        self.seed = seed

        if seed is not None:
            random.seed(seed)

        self.store = RentalDataStore()
        self._property_gen = PropertyGenerator(seed=seed)
        self._client_gen = ClientGenerator(seed=seed)
        self._contract_gen = ContractGenerator(seed=seed)
        self._expense_gen = ExpenseGenerator(seed=seed)
        self._payment_behavior = PaymentBehavior(self.configuration, seed=seed)

    @property
    def history_start(self) -> date:
        """First day of the generated history."""
        return add_months(month_start(self.reference_date), -self.history_months)

    def generate(self) -> RentalDataStore:
        """Generate all data for the rental portfolio scenario.

        Returns
        -------
        RentalDataStore
            Store containing all generated data.
        """
        logger.info(
            "Starting rental portfolio scenario: %d properties, %.0f%% leased",
            self.num_properties,
            self.occupancy_rate * 100,
        )
        self.store.set_configuration(self.configuration)

        history_end = self.reference_date - timedelta(days=1)
        for _ in range(self.num_properties):
            prop = self._property_gen.generate()
            self.store.add_property(prop)

            owner = self._client_gen.generate()
            self.store.add_client(owner)

            for _ in range(self.expenses_per_property):
                expense = self._expense_gen.generate(prop.property_id, self.history_start, history_end)
                self.store.add_expense(expense)

            if random.random() >= self.occupancy_rate:
                continue

            tenant = self._client_gen.generate()
            self.store.add_client(tenant)

            start = add_months(self.history_start, random.randint(0, max(self.history_months // 4, 0)))
            contract = self._contract_gen.generate(
                prop,
                tenant.client_id,
                start_date=start,
                months=random.choice([12, 24, 30]),
                owner_id=owner.client_id,
                reference_date=self.reference_date,
            )
            self.store.add_contract(contract)

            payments = self._payment_behavior.apply_payment_behavior(
                list(monthly_payments(contract)),
                on_time_rate=self.on_time_rate,
                late_rate=self.late_rate,
                default_rate=self.default_rate,
                reference_date=self.reference_date,
            )
            for payment in payments:
                self.store.add_payment(payment)

        logger.info(
            "Generated %d properties, %d contracts, %d payments, %d expenses",
            len(self.store.properties),
            len(self.store.contracts),
            len(self.store.payments),
            len(self.store.expenses),
        )
        return self.store

    def export(self, sinks: list[Any]) -> None:
        """Export generated data to sinks.

        Parameters
        ----------
        sinks : list[Any]
            List of sink instances (ConsoleSink, JsonFileSink, KafkaSink).
        """
        for sink in sinks:
            sink.write_batch("properties", list(self.store.properties.values()))
            sink.write_batch("clients", list(self.store.clients.values()))
            sink.write_batch("contracts", list(self.store.contracts.values()))
            sink.write_batch("payments", list(self.store.payments.values()))
            sink.write_batch("expenses", list(self.store.expenses.values()))

        logger.info("Exported rental portfolio to %d sinks", len(sinks))

    def get_portfolio_summary(self) -> dict[str, Any]:
        """Get summary statistics for the rental portfolio.

        Returns
        -------
        dict[str, Any]
            Portfolio summary statistics.
        """
        contracts = list(self.store.contracts.values())
        if not self.store.properties:
            return {}

        payment_status: dict[str, int] = {}
        for payment in self.store.payments.values():
            payment_status[payment.status.value] = payment_status.get(payment.status.value, 0) + 1

        overdue = [p for p in self.store.payments.values() if p.status == PaymentStatus.OVERDUE]
        delinquent = [
            c
            for c in contracts
            if any(p.status == PaymentStatus.OVERDUE for p in self.store.get_contract_payments(c.contract_id))
        ]
        return {
            "total_properties": len(self.store.properties),
            "leased_properties": sum(
                1 for property_id in self.store.properties if self.store.get_property_contracts(property_id)
            ),
            "total_contracts": len(contracts),
            "delinquent_contracts": len(delinquent),
            "monthly_rent_roll": str(sum((c.rent_amount for c in contracts), Decimal("0"))),
            "payment_status_distribution": payment_status,
            "overdue_amount": str(sum((p.amount_owed for p in overdue), Decimal("0"))),
            "total_expenses": len(self.store.expenses),
        }
