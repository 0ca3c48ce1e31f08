"""Report builders: each folds records into an accumulator and finalizes a value object."""

from rental_finance.reports.batch import DEFAULT_PAGE_SIZE, fold_pages, iter_pages
from rental_finance.reports.delinquency import (
    AGING_BUCKETS,
    DelinquencyAccumulator,
    analyze_delinquency,
    bucket_label,
)
from rental_finance.reports.financial import PeriodAccumulator, summarize_period
from rental_finance.reports.profitability import (
    RANK_METRICS,
    ProfitabilityAccumulator,
    rank_properties,
)

__all__ = [
    "AGING_BUCKETS",
    "DEFAULT_PAGE_SIZE",
    "RANK_METRICS",
    "DelinquencyAccumulator",
    "PeriodAccumulator",
    "ProfitabilityAccumulator",
    "analyze_delinquency",
    "bucket_label",
    "fold_pages",
    "iter_pages",
    "rank_properties",
    "summarize_period",
]
