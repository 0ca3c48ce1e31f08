"""Tenant payment behavior for realistic rent histories."""

import random
from dataclasses import replace
from datetime import date, timedelta

from rental_finance.calculations.late_fee import LateFeeCalculator
from rental_finance.models.rental import FinancialConfiguration, Payment, PaymentStatus


class PaymentBehavior:
    """Simulate how a tenant pays a contract's monthly rent.

    Late payments are charged fees with the given configuration, so paid
    amounts and stored fees agree with what the late-fee calculator would
    compute.
    """

    def __init__(
        self,
        configuration: FinancialConfiguration,
        seed: int | None = None,
    ) -> None:
        self.calculator = LateFeeCalculator(configuration)
        if seed is not None:
            random.seed(seed)

    def apply_payment_behavior(
        self,
        payments: list[Payment],
        on_time_rate: float = 0.80,
        late_rate: float = 0.15,
        default_rate: float = 0.05,
        reference_date: date | None = None,
    ) -> list[Payment]:
        """Settle the scheduled payments of one contract.

        Parameters
        ----------
        payments : list[Payment]
            Pending payments of one contract, in due-date order.
        on_time_rate : float
            Weight of tenants who pay on time (default 80%).
        late_rate : float
            Weight of tenants who pay late (default 15%).
        default_rate : float
            Weight of tenants who stop paying (default 5%).
        reference_date : date | None
            Current date; payments due later stay pending.

        Returns
        -------
        list[Payment]
            Payments with status, payment date and fees applied.
        """
        if reference_date is None:
            reference_date = date.today()

        # Determine tenant behavior type
        behavior = random.choices(
            ["good", "occasional_late", "chronic_late", "defaulter"],
            weights=[on_time_rate, late_rate * 0.7, late_rate * 0.3, default_rate],
            k=1,
        )[0]
        stops_paying_after = random.randint(2, 6)

        result = []
        for number, payment in enumerate(payments, start=1):
            if payment.due_date >= reference_date:
                # Not due yet
                result.append(payment)
                continue

            if behavior == "good":
                days_late = random.randint(0, 3)
            elif behavior == "occasional_late":
                days_late = random.randint(0, 5) if random.random() < 0.8 else random.randint(10, 30)
            elif behavior == "chronic_late":
                days_late = random.randint(5, 45)
            elif number <= stops_paying_after:
                days_late = random.randint(0, 15)
            else:
                result.append(self._overdue(payment, reference_date))
                continue

            paid_on = payment.due_date + timedelta(days=days_late)
            if paid_on >= reference_date:
                result.append(self._overdue(payment, reference_date))
            else:
                result.append(self._paid(payment, paid_on))

        return result

    def _paid(self, payment: Payment, paid_on: date) -> Payment:
        fee = self.calculator.compute(payment.amount_due, (paid_on - payment.due_date).days)
        return replace(
            payment,
            status=PaymentStatus.PAID,
            payment_date=paid_on,
            amount_paid=fee.total,
            interest_amount=fee.interest,
            penalty_amount=fee.penalty,
        )

    def _overdue(self, payment: Payment, reference_date: date) -> Payment:
        assessment = self.calculator.assess(payment, reference_date)
        return replace(
            payment,
            status=assessment.status,
            interest_amount=assessment.interest_amount,
            penalty_amount=assessment.penalty_amount,
        )
