"""Tests for the delinquency reporter."""

from datetime import date, timedelta
from decimal import Decimal
from typing import Callable

import pytest

from rental_finance.models.rental import Payment, PaymentStatus
from rental_finance.reports.delinquency import (
    AGING_BUCKETS,
    DelinquencyAccumulator,
    analyze_delinquency,
    bucket_label,
)
from rental_finance.store.memory import RentalDataStore

AS_OF = date(2024, 4, 10)


def run(store: RentalDataStore, **kwargs: object):
    return analyze_delinquency(
        store.payments.values(),
        AS_OF,
        store.contracts.values(),
        store.clients.values(),
        **kwargs,
    )


@pytest.fixture
def overdue_days(make_payment: Callable[..., Payment]) -> Callable[[str, int], Payment]:
    """Overdue payment of 100 on its own contract, ``days`` late as of AS_OF."""

    def _make(contract_id: str, days: int) -> Payment:
        return make_payment(
            f"{contract_id}-pay",
            contract_id,
            "100.00",
            AS_OF - timedelta(days=days),
            PaymentStatus.OVERDUE,
        )

    return _make


class TestBucketLabel:
    """Tests for aging bucket boundaries."""

    @pytest.mark.parametrize(
        "days,label",
        [
            (0, "1-30"),
            (1, "1-30"),
            (30, "1-30"),
            (31, "31-60"),
            (60, "31-60"),
            (61, "61-90"),
            (90, "61-90"),
            (91, "90+"),
            (400, "90+"),
        ],
    )
    def test_boundaries(self, days: int, label: str) -> None:
        assert bucket_label(days) == label

    def test_bucket_definitions(self) -> None:
        assert [b[0] for b in AGING_BUCKETS] == ["1-30", "31-60", "61-90", "90+"]


class TestAnalyzeDelinquency:
    """Tests over the fixture portfolio as of 2024-04-10."""

    def test_entries(self, portfolio: RentalDataStore) -> None:
        report = run(portfolio)
        k2, k1 = report.entries

        assert k2.contract_id == "K2"
        assert k2.days_late == 65
        assert k2.amount_owed == Decimal("2436.00")
        assert k2.payment_count == 2
        assert k2.oldest_due_date == date(2024, 2, 5)
        assert k2.property_id == "P2"
        assert k2.tenant_id == "C2"
        assert k2.tenant_name == "Álvaro Lima"

        assert k1.contract_id == "K1"
        assert k1.days_late == 31
        assert k1.amount_owed == Decimal("1025.00")
        assert k1.payment_count == 1

    def test_buckets(self, portfolio: RentalDataStore) -> None:
        buckets = {b.label: b for b in run(portfolio).buckets}

        assert list(buckets) == ["1-30", "31-60", "61-90", "90+"]
        assert buckets["1-30"].count == 0
        assert buckets["1-30"].amount_owed == Decimal("0.00")
        assert buckets["31-60"].count == 1
        assert buckets["31-60"].amount_owed == Decimal("1025.00")
        assert buckets["61-90"].count == 1
        assert buckets["61-90"].amount_owed == Decimal("2436.00")
        assert buckets["90+"].count == 0
        assert buckets["90+"].max_days is None

    def test_totals(self, portfolio: RentalDataStore) -> None:
        report = run(portfolio)

        assert report.evaluation_date == AS_OF
        assert report.total_contracts == 2
        assert report.total_owed == Decimal("3461.00")
        assert report.average_days_late == Decimal("48.00")

    def test_sort_by_amount_owed(self, portfolio: RentalDataStore) -> None:
        report = run(portfolio, sort_by="amount_owed")
        assert [e.contract_id for e in report.entries] == ["K2", "K1"]

    def test_sort_by_tenant_is_accent_aware(self, portfolio: RentalDataStore) -> None:
        report = run(portfolio, sort_by="tenant")
        assert [e.tenant_name for e in report.entries] == ["Álvaro Lima", "Zé Souza"]

    def test_minimum_days_late(self, portfolio: RentalDataStore) -> None:
        report = run(portfolio, minimum_days_late=40)

        assert [e.contract_id for e in report.entries] == ["K2"]
        assert report.minimum_days_late == 40
        assert report.total_owed == Decimal("2436.00")

    def test_unknown_sort_key(self, portfolio: RentalDataStore) -> None:
        with pytest.raises(ValueError, match="unknown sort key"):
            run(portfolio, sort_by="name")

    def test_negative_minimum(self, portfolio: RentalDataStore) -> None:
        with pytest.raises(ValueError):
            run(portfolio, minimum_days_late=-1)

    def test_no_overdue_payments(self) -> None:
        report = analyze_delinquency([], AS_OF)

        assert report.entries == ()
        assert len(report.buckets) == 4
        assert all(b.count == 0 for b in report.buckets)
        assert report.average_days_late == Decimal("0.00")


class TestBucketBoundariesEndToEnd:
    """Contracts exactly on bucket edges."""

    def test_edges(self, overdue_days: Callable[[str, int], Payment]) -> None:
        payments = [overdue_days(f"K{days}", days) for days in (30, 31, 90, 91)]

        report = analyze_delinquency(payments, AS_OF)
        counts = {b.label: b.count for b in report.buckets}

        assert counts == {"1-30": 1, "31-60": 1, "61-90": 1, "90+": 1}

    def test_zero_days_with_zero_minimum(self, overdue_days: Callable[[str, int], Payment]) -> None:
        payment = overdue_days("K0", 0)

        assert analyze_delinquency([payment], AS_OF).total_contracts == 0
        report = analyze_delinquency([payment], AS_OF, minimum_days_late=0)

        assert report.total_contracts == 1
        assert report.buckets[0].count == 1
        assert report.buckets[0].min_days == 0
        assert report.entries[0].days_late == 0

    def test_first_bucket_bound_follows_minimum(self, overdue_days: Callable[[str, int], Payment]) -> None:
        report = analyze_delinquency([overdue_days("K5", 5)], AS_OF)

        assert report.buckets[0].min_days == 1
        assert [b.min_days for b in report.buckets[1:]] == [31, 61, 91]

    def test_due_after_evaluation_date_ignored(self, overdue_days: Callable[[str, int], Payment]) -> None:
        report = analyze_delinquency([overdue_days("K-future", -3)], AS_OF, minimum_days_late=0)
        assert report.total_contracts == 0


class TestDelinquencyAccumulator:
    """Tests for per-contract grouping."""

    def test_contract_as_late_as_oldest_payment(self, make_payment: Callable[..., Payment]) -> None:
        acc = DelinquencyAccumulator(evaluation_date=AS_OF)
        acc.fold_payment(make_payment("a", "K1", "100", date(2024, 3, 1), PaymentStatus.OVERDUE))
        acc.fold_payment(make_payment("b", "K1", "100", date(2024, 1, 1), PaymentStatus.OVERDUE, interest="3.333", penalty="2"))
        acc.fold_payment(make_payment("c", "K1", "100", date(2024, 2, 1), PaymentStatus.PAID, date(2024, 2, 1), "100"))

        (entry,) = acc.entries()

        assert entry.days_late == 100
        assert entry.payment_count == 2
        assert entry.oldest_due_date == date(2024, 1, 1)
        assert entry.amount_owed == Decimal("205.33")

    def test_entry_without_contract_details(self, make_payment: Callable[..., Payment]) -> None:
        acc = DelinquencyAccumulator(evaluation_date=AS_OF)
        acc.fold_payment(make_payment("a", "K1", "100", date(2024, 3, 1), PaymentStatus.OVERDUE))

        (entry,) = acc.entries()

        assert entry.property_id is None
        assert entry.tenant_id is None
        assert entry.tenant_name == ""

    def test_contracts_without_overdue_not_kept(self, portfolio: RentalDataStore) -> None:
        acc = DelinquencyAccumulator(evaluation_date=AS_OF)
        for contract in portfolio.contracts.values():
            acc.fold_contract(contract)
        for client in portfolio.clients.values():
            acc.fold_client(client)

        assert acc.contract_details == {}
        assert acc.tenant_names == {}
