"""Monthly rent schedule for a contract."""

import calendar
from datetime import date
from typing import Iterator

from rental_finance.calculations.money import add_months, month_start
from rental_finance.exceptions import InvalidFinancialInput
from rental_finance.models.rental import Contract, Payment, PaymentStatus


def due_date_for(reference_month: date, due_day: int) -> date:
    """Due date inside ``reference_month``, clamped to the month's last day."""
    last_day = calendar.monthrange(reference_month.year, reference_month.month)[1]
    return reference_month.replace(day=min(due_day, last_day))


def monthly_payments(contract: Contract) -> Iterator[Payment]:
    """Yield one pending payment per month the contract covers.

    The first month is the start date's month and the last is the end
    date's month. Each payment is due on the contract's due day, or on the
    last day of shorter months. Payments are recommendations; storing them
    is up to the caller.

    Parameters
    ----------
    contract : Contract
        Contract to schedule.

    Yields
    ------
    Payment
        Pending payment with no fees.

    Raises
    ------
    InvalidFinancialInput
        If the rent amount is not positive.
    """
    if contract.rent_amount <= 0:
        raise InvalidFinancialInput("rent amount must be greater than zero", field="rent_amount")

    reference = month_start(contract.start_date)
    last = month_start(contract.end_date)
    while reference <= last:
        yield Payment(
            payment_id=f"{contract.contract_id}-{reference:%Y-%m}",
            contract_id=contract.contract_id,
            reference_month=reference,
            amount_due=contract.rent_amount,
            due_date=due_date_for(reference, contract.due_day),
            status=PaymentStatus.PENDING,
        )
        reference = add_months(reference, 1)
