"""Report engine: drives the paged reporters against a record source."""

from __future__ import annotations

import logging
from datetime import date, timedelta
from typing import Any, Callable, TypeVar

from rental_finance.calculations.late_fee import LateFeeCalculator
from rental_finance.calculations.money import validate_window
from rental_finance.config import ReportConfig
from rental_finance.exceptions import EntityNotFoundError
from rental_finance.models.rental import (
    ContractStatus,
    EntityType,
    ExpenseStatus,
    PaymentStatus,
)
from rental_finance.models.reports import (
    DelinquencyReport,
    FeeAssessment,
    PeriodSummary,
    ProfitabilityReport,
)
from rental_finance.reports.batch import fold_pages
from rental_finance.reports.delinquency import SORT_KEYS, DelinquencyAccumulator
from rental_finance.reports.financial import PeriodAccumulator
from rental_finance.reports.profitability import RANK_METRICS, ProfitabilityAccumulator
from rental_finance.store.base import RecordFilter, RecordSource

logger = logging.getLogger(__name__)

A = TypeVar("A")


class ReportEngine:
    """Build financial reports from a record source, one page at a time.

    Every request is validated before the first fetch. A failing fetch
    aborts the report with ``ReportGenerationError``; nothing partial is
    returned. The engine never writes to the source.

    Parameters
    ----------
    source : RecordSource
        Store to read records from.
    config : ReportConfig | None
        Defaults for page size, delinquency filter and sort orders.
    """

    def __init__(self, source: RecordSource, config: ReportConfig | None = None) -> None:
        self.source = source
        self.config = config or ReportConfig()

    def _fold(
        self,
        entity: EntityType,
        record_filter: RecordFilter,
        fold: Callable[[A, Any], A],
        accumulator: A,
    ) -> A:
        return fold_pages(
            lambda offset, limit: self.source.fetch_page(entity, record_filter, offset, limit),
            fold,
            accumulator,
            self.config.page_size,
        )

    def period_summary(self, start: date, end: date) -> PeriodSummary:
        """Revenue, expenses, delinquency and margin for ``[start, end)``.

        Raises
        ------
        InvalidDateRange
            If ``end <= start``.
        ReportGenerationError
            If the record source fails.
        """
        validate_window(start, end)
        logger.info("Building period summary for %s to %s", start, end)

        acc = PeriodAccumulator(start=start, end=end)
        paid = RecordFilter(start=start, end=end, date_field="payment_date", status=PaymentStatus.PAID)
        overdue = RecordFilter(start=start, end=end, date_field="due_date", status=PaymentStatus.OVERDUE)
        expenses = RecordFilter(start=start, end=end, date_field="expense_date", status=ExpenseStatus.PAID)
        active = RecordFilter(status=ContractStatus.ACTIVE)

        self._fold(EntityType.PAYMENTS, paid, PeriodAccumulator.fold_payment, acc)
        self._fold(EntityType.PAYMENTS, overdue, PeriodAccumulator.fold_payment, acc)
        self._fold(EntityType.EXPENSES, expenses, PeriodAccumulator.fold_expense, acc)
        self._fold(EntityType.CONTRACTS, active, PeriodAccumulator.fold_contract, acc)

        summary = acc.result()
        logger.info(
            "Period summary: revenue=%s expenses=%s margin=%s%%",
            summary.revenue,
            summary.expenses,
            summary.margin,
            extra={"extra": {"report": "period_summary", "start": start, "end": end, "revenue": summary.revenue}},
        )
        return summary

    def profitability(
        self,
        start: date,
        end: date,
        property_id: str | None = None,
        rank_by: str | None = None,
    ) -> ProfitabilityReport:
        """Per-property revenue, expenses, profit and occupancy, ranked.

        Parameters
        ----------
        start, end : date
            Report window ``[start, end)``.
        property_id : str | None
            Restrict the report to one property.
        rank_by : str | None
            ``profitability``, ``revenue``, ``profit`` or ``occupancy``;
            defaults to ``ReportConfig.profitability_rank``.

        Raises
        ------
        InvalidDateRange
            If ``end <= start``.
        ValueError
            If ``rank_by`` is unknown.
        EntityNotFoundError
            If ``property_id`` names no property.
        ReportGenerationError
            If the record source fails.
        """
        validate_window(start, end)
        rank_by = rank_by or self.config.profitability_rank
        if rank_by not in RANK_METRICS:
            raise ValueError(f"unknown ranking key {rank_by!r}; expected one of {', '.join(RANK_METRICS)}")
        logger.info("Building profitability report for %s to %s (rank by %s)", start, end, rank_by)

        acc = ProfitabilityAccumulator(start=start, end=end)
        self._fold(
            EntityType.PROPERTIES,
            RecordFilter(record_id=property_id),
            ProfitabilityAccumulator.fold_property,
            acc,
        )
        if property_id is not None and not acc.properties:
            raise EntityNotFoundError(f"Property {property_id} not found")

        self._fold(
            EntityType.CONTRACTS,
            RecordFilter(property_id=property_id),
            ProfitabilityAccumulator.fold_contract,
            acc,
        )
        self._fold(
            EntityType.PAYMENTS,
            RecordFilter(start=start, end=end, date_field="payment_date", status=PaymentStatus.PAID),
            ProfitabilityAccumulator.fold_payment,
            acc,
        )
        self._fold(
            EntityType.EXPENSES,
            RecordFilter(
                start=start,
                end=end,
                date_field="expense_date",
                status=ExpenseStatus.PAID,
                property_id=property_id,
            ),
            ProfitabilityAccumulator.fold_expense,
            acc,
        )
        report = acc.result(rank_by)
        logger.info(
            "Profitability report: %d properties, profit=%s",
            len(report.entries),
            report.total_profit,
            extra={"extra": {"report": "profitability", "start": start, "end": end, "rank_by": rank_by}},
        )
        return report

    def delinquency(
        self,
        evaluation_date: date | None = None,
        minimum_days_late: int | None = None,
        sort_by: str | None = None,
    ) -> DelinquencyReport:
        """Overdue contracts as of a date, with aging buckets.

        Parameters
        ----------
        evaluation_date : date | None
            Date days late are counted to; defaults to today.
        minimum_days_late : int | None
            Contracts less late are left out; defaults to
            ``ReportConfig.minimum_days_late``.
        sort_by : str | None
            ``days_late``, ``amount_owed`` or ``tenant``; defaults to
            ``ReportConfig.delinquency_sort``.

        Raises
        ------
        ValueError
            If ``sort_by`` is unknown or ``minimum_days_late`` is negative.
        ReportGenerationError
            If the record source fails.
        """
        evaluation_date = evaluation_date or date.today()
        if minimum_days_late is None:
            minimum_days_late = self.config.minimum_days_late
        sort_by = sort_by or self.config.delinquency_sort
        if sort_by not in SORT_KEYS:
            raise ValueError(f"unknown sort key {sort_by!r}; expected one of {', '.join(SORT_KEYS)}")
        if minimum_days_late < 0:
            raise ValueError("minimum days late cannot be negative")
        logger.info("Building delinquency report as of %s", evaluation_date)

        acc = DelinquencyAccumulator(evaluation_date=evaluation_date)
        # due_date <= evaluation_date
        overdue = RecordFilter(
            end=evaluation_date + timedelta(days=1),
            date_field="due_date",
            status=PaymentStatus.OVERDUE,
        )
        self._fold(EntityType.PAYMENTS, overdue, DelinquencyAccumulator.fold_payment, acc)
        if acc.positions:
            self._fold(EntityType.CONTRACTS, RecordFilter(), DelinquencyAccumulator.fold_contract, acc)
            self._fold(EntityType.CLIENTS, RecordFilter(), DelinquencyAccumulator.fold_client, acc)

        report = acc.result(minimum_days_late, sort_by)
        logger.info(
            "Delinquency report: %d contracts owing %s",
            report.total_contracts,
            report.total_owed,
            extra={
                "extra": {
                    "report": "delinquency",
                    "evaluation_date": evaluation_date,
                    "total_contracts": report.total_contracts,
                }
            },
        )
        return report

    def assess_fees(self, evaluation_date: date | None = None) -> list[FeeAssessment]:
        """Recommend fee updates for unpaid payments that are due.

        Only assessments that differ from the stored payment are returned.
        Applying them is up to the caller.

        Raises
        ------
        MissingConfiguration
            If the source has no active financial configuration.
        ReportGenerationError
            If the record source fails.
        """
        evaluation_date = evaluation_date or date.today()
        calculator = LateFeeCalculator(self.source.get_financial_configuration())

        changes: list[FeeAssessment] = []

        def collect(acc: list[FeeAssessment], payment: Any) -> list[FeeAssessment]:
            assessment = calculator.assess(payment, evaluation_date)
            if assessment.changed:
                acc.append(assessment)
            return acc

        for status in (PaymentStatus.PENDING, PaymentStatus.OVERDUE):
            record_filter = RecordFilter(end=evaluation_date, date_field="due_date", status=status)
            self._fold(EntityType.PAYMENTS, record_filter, collect, changes)

        logger.info(
            "Fee assessment as of %s: %d payments to update",
            evaluation_date,
            len(changes),
            extra={"extra": {"report": "fees", "evaluation_date": evaluation_date, "changes": len(changes)}},
        )
        return changes
