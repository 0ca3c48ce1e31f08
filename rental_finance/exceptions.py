"""Custom exception hierarchy for rental-finance."""


class RentalFinanceError(Exception):
    """Base exception for all rental-finance errors."""


class InvalidDateRange(RentalFinanceError):
    """Raised when a report window ends on or before its start."""


class InvalidFinancialInput(RentalFinanceError):
    """Raised when an amount, day count or rate is out of range.

    Parameters
    ----------
    message : str
        Human-readable description.
    field : str | None
        Name of the offending input.
    """

    def __init__(self, message: str, field: str | None = None) -> None:
        super().__init__(message)
        self.field = field


class ConfigurationError(RentalFinanceError):
    """Raised when configuration is invalid or missing."""


class MissingConfiguration(ConfigurationError):
    """Raised when no active financial configuration is available."""


class ReportGenerationError(RentalFinanceError):
    """Raised when the record store fails while a report is being built."""

    def __init__(self, message: str, cause: BaseException | None = None) -> None:
        super().__init__(message)
        self.cause = cause


class EntityNotFoundError(RentalFinanceError):
    """Raised when a referenced entity does not exist."""


class ReferentialIntegrityError(EntityNotFoundError):
    """Raised when a foreign key reference is violated."""


class InvalidEntityStateError(RentalFinanceError):
    """Raised when an entity is in an invalid state for the operation."""


class SinkError(RentalFinanceError):
    """Raised when a sink operation fails."""
