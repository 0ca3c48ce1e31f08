"""Monetary rounding and calendar arithmetic shared by every report."""

import calendar
from datetime import date
from decimal import ROUND_HALF_UP, Decimal

from rental_finance.exceptions import InvalidDateRange

MONEY_QUANTIZE = Decimal("0.01")


def to_decimal(value: Decimal | int | float | str) -> Decimal:
    """Convert a numeric value to ``Decimal``, passing floats through ``str``."""
    if isinstance(value, Decimal):
        return value
    if isinstance(value, float):
        return Decimal(str(value))
    return Decimal(value)


def round2(value: Decimal | int | float | str) -> Decimal:
    """Round to two decimal places, half up.

    Parameters
    ----------
    value : Decimal | int | float | str
        Amount to round.

    Returns
    -------
    Decimal
        Amount quantized to ``0.01``.
    """
    return to_decimal(value).quantize(MONEY_QUANTIZE, rounding=ROUND_HALF_UP)


def days_between(start: date, end: date) -> int:
    """Whole calendar days from ``start`` to ``end`` (negative if ``end < start``)."""
    return (end - start).days


def validate_window(start: date, end: date) -> None:
    """Reject a report window ``[start, end)`` that is empty or inverted.

    Raises
    ------
    InvalidDateRange
        If ``end <= start``.
    """
    if end <= start:
        raise InvalidDateRange(
            f"report window end {end.isoformat()} must be after start {start.isoformat()}"
        )


def in_window(value: date | None, start: date, end: date) -> bool:
    """Whether ``value`` falls in the half-open window ``[start, end)``."""
    return value is not None and start <= value < end


def month_start(value: date) -> date:
    """First day of the month containing ``value``."""
    return value.replace(day=1)


def add_months(value: date, months: int) -> date:
    """Shift ``value`` by whole months, clamping the day to the month's end."""
    index = value.year * 12 + value.month - 1 + months
    year, month = divmod(index, 12)
    month += 1
    last_day = calendar.monthrange(year, month)[1]
    return date(year, month, min(value.day, last_day))


def months_in_window(start: date, end: date) -> int:
    """Number of calendar months touched by ``[start, end)``.

    ``2024-01-01`` to ``2024-04-01`` touches January to March, so 3.
    """
    validate_window(start, end)
    last = date.fromordinal(end.toordinal() - 1)
    return (last.year - start.year) * 12 + (last.month - start.month) + 1
