"""Late-fee calculation: penalty plus interest prorated over a 30-day month."""

from __future__ import annotations

import logging
from datetime import date
from decimal import Decimal

from rental_finance.calculations.money import days_between, round2, to_decimal
from rental_finance.exceptions import InvalidFinancialInput, MissingConfiguration
from rental_finance.models.rental import FinancialConfiguration, Payment, PaymentStatus
from rental_finance.models.reports import FeeAssessment, LateFee

logger = logging.getLogger(__name__)

DAYS_PER_MONTH = Decimal("30")


def compute_late_fee(
    amount_due: Decimal | int | float | str,
    days_late: int,
    monthly_interest_rate: Decimal | int | float | str,
    penalty_rate: Decimal | int | float | str,
    grace_days: int = 0,
) -> LateFee:
    """Compute interest and penalty owed on a late amount.

    The penalty is a flat fraction of the amount, charged once. Interest is
    the monthly rate prorated linearly by days late past the grace period,
    over a 30-day month. Inside the grace period no fee accrues.

    Parameters
    ----------
    amount_due : Decimal | int | float | str
        Original amount owed; must be greater than zero.
    days_late : int
        Days since the due date.
    monthly_interest_rate : Decimal | int | float | str
        Interest per month as a fraction (0.01 is 1%).
    penalty_rate : Decimal | int | float | str
        Flat penalty as a fraction of the amount.
    grace_days : int
        Days after the due date with no fee.

    Returns
    -------
    LateFee
        Interest, penalty and total, each rounded to cents.

    Raises
    ------
    InvalidFinancialInput
        If any input is out of range; ``field`` names the input.
    """
    amount = to_decimal(amount_due)
    interest_rate = to_decimal(monthly_interest_rate)
    penalty_fraction = to_decimal(penalty_rate)

    if amount <= 0:
        raise InvalidFinancialInput("amount due must be greater than zero", field="amount_due")
    if days_late < 0:
        raise InvalidFinancialInput("days late cannot be negative", field="days_late")
    if interest_rate < 0:
        raise InvalidFinancialInput("rates cannot be negative", field="monthly_interest_rate")
    if penalty_fraction < 0:
        raise InvalidFinancialInput("rates cannot be negative", field="penalty_rate")
    if grace_days < 0:
        raise InvalidFinancialInput("grace days cannot be negative", field="grace_days")

    effective_days = max(0, days_late - grace_days)
    if effective_days == 0:
        return LateFee(interest=round2(0), penalty=round2(0), total=round2(amount))

    penalty = round2(amount * penalty_fraction)
    interest = round2(amount * interest_rate * Decimal(effective_days) / DAYS_PER_MONTH)
    return LateFee(
        interest=interest,
        penalty=penalty,
        total=round2(amount + interest + penalty),
    )


class LateFeeCalculator:
    """Apply one owner's financial configuration to late payments.

    Parameters
    ----------
    configuration : FinancialConfiguration | None
        Active configuration. ``None`` is rejected rather than defaulted.

    Raises
    ------
    MissingConfiguration
        If no configuration is given.
    """

    def __init__(self, configuration: FinancialConfiguration | None) -> None:
        if configuration is None:
            raise MissingConfiguration("no active financial configuration found")
        self.configuration = configuration

    def compute(self, amount_due: Decimal | int | float | str, days_late: int) -> LateFee:
        """Compute the late fee for an amount using the configured rates."""
        return compute_late_fee(
            amount_due,
            days_late,
            self.configuration.monthly_interest_rate,
            self.configuration.penalty_rate,
            self.configuration.grace_days,
        )

    def assess(self, payment: Payment, evaluation_date: date) -> FeeAssessment:
        """Recommend fee fields and status for a payment as of a date.

        Paid and cancelled payments are reported unchanged. Other payments
        become ``overdue`` once past the grace period and stay ``pending``
        otherwise.
        """
        if payment.status in (PaymentStatus.PAID, PaymentStatus.CANCELLED):
            return FeeAssessment(
                payment_id=payment.payment_id,
                contract_id=payment.contract_id,
                days_late=0,
                interest_amount=payment.interest_amount,
                penalty_amount=payment.penalty_amount,
                total_due=round2(payment.amount_owed),
                status=payment.status,
                changed=False,
            )

        days_late = max(0, days_between(payment.due_date, evaluation_date))
        if payment.amount_due > 0:
            fee = self.compute(payment.amount_due, days_late)
        else:
            fee = LateFee(interest=round2(0), penalty=round2(0), total=round2(0))

        if days_late > self.configuration.grace_days:
            status = PaymentStatus.OVERDUE
        else:
            status = PaymentStatus.PENDING

        changed = (
            fee.interest != payment.interest_amount
            or fee.penalty != payment.penalty_amount
            or status != payment.status
        )
        if changed:
            logger.debug(
                "Payment %s: %d days late, interest=%s penalty=%s status=%s",
                payment.payment_id,
                days_late,
                fee.interest,
                fee.penalty,
                status.value,
            )

        return FeeAssessment(
            payment_id=payment.payment_id,
            contract_id=payment.contract_id,
            days_late=days_late,
            interest_amount=fee.interest,
            penalty_amount=fee.penalty,
            total_due=fee.total,
            status=status,
            changed=changed,
        )
