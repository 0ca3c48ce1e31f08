"""Rental contract model."""

from dataclasses import dataclass
from datetime import date
from decimal import Decimal

from rental_finance.exceptions import InvalidEntityStateError
from rental_finance.models.rental.enums import ContractStatus


@dataclass(frozen=True)
class Contract:
    """Lease binding a tenant to a property for a date range."""

    contract_id: str
    property_id: str
    tenant_id: str
    rent_amount: Decimal
    start_date: date
    end_date: date
    status: ContractStatus
    due_day: int = 1  # Day of month rent falls due
    owner_id: str | None = None

    def __post_init__(self) -> None:
        if self.rent_amount < 0:
            raise InvalidEntityStateError(
                f"Contract {self.contract_id} has negative rent amount"
            )
        if self.end_date < self.start_date:
            raise InvalidEntityStateError(
                f"Contract {self.contract_id} ends before it starts"
            )
        if not 1 <= self.due_day <= 31:
            raise InvalidEntityStateError(
                f"Contract {self.contract_id} due day must be between 1 and 31"
            )

    def overlaps(self, start: date, end: date) -> bool:
        """Whether the contract is in force at some point of ``[start, end)``."""
        return self.start_date < end and self.end_date >= start
