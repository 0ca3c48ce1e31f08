"""Financial configuration used by the late-fee calculator."""

from dataclasses import dataclass
from decimal import Decimal

from rental_finance.exceptions import InvalidFinancialInput


@dataclass(frozen=True)
class FinancialConfiguration:
    """Interest, penalty and grace settings of one owner.

    Rates are fractions: ``Decimal("0.01")`` is 1% a month.
    """

    monthly_interest_rate: Decimal
    penalty_rate: Decimal
    grace_days: int = 0

    def __post_init__(self) -> None:
        for name in ("monthly_interest_rate", "penalty_rate"):
            rate = getattr(self, name)
            if not Decimal("0") <= rate <= Decimal("1"):
                raise InvalidFinancialInput(f"{name} must be between 0 and 1", field=name)
        if self.grace_days < 0:
            raise InvalidFinancialInput("grace days cannot be negative", field="grace_days")
