"""Pure financial calculations: rounding, late fees, aggregation, schedules."""

from rental_finance.calculations.aggregation import (
    collation_key,
    group_sum,
    percentage,
    rank_descending,
)
from rental_finance.calculations.late_fee import LateFeeCalculator, compute_late_fee
from rental_finance.calculations.money import (
    days_between,
    in_window,
    months_in_window,
    round2,
    validate_window,
)
from rental_finance.calculations.schedule import monthly_payments

__all__ = [
    "LateFeeCalculator",
    "collation_key",
    "compute_late_fee",
    "days_between",
    "group_sum",
    "in_window",
    "monthly_payments",
    "months_in_window",
    "percentage",
    "rank_descending",
    "round2",
    "validate_window",
]
