"""Domain models and report value objects."""

from rental_finance.models.reports import (
    AgingBucket,
    DelinquencyEntry,
    DelinquencyReport,
    FeeAssessment,
    LateFee,
    PeriodSummary,
    ProfitabilityReport,
    PropertyProfitability,
)

__all__ = [
    "AgingBucket",
    "DelinquencyEntry",
    "DelinquencyReport",
    "FeeAssessment",
    "LateFee",
    "PeriodSummary",
    "ProfitabilityReport",
    "PropertyProfitability",
]
