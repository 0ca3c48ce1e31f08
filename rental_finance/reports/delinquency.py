"""Per-contract delinquency with aging buckets."""

from __future__ import annotations

from dataclasses import dataclass, field
from datetime import date
from decimal import Decimal
from typing import Iterable

from rental_finance.calculations.aggregation import collation_key, rank_descending
from rental_finance.calculations.money import days_between, round2
from rental_finance.models.rental import Client, Contract, Payment, PaymentStatus
from rental_finance.models.reports import AgingBucket, DelinquencyEntry, DelinquencyReport

# (label, min_days, max_days); a 0-day contract lands in the first bucket,
# whose reported lower bound then drops to 0
AGING_BUCKETS: tuple[tuple[str, int, int | None], ...] = (
    ("1-30", 1, 30),
    ("31-60", 31, 60),
    ("61-90", 61, 90),
    ("90+", 91, None),
)

SORT_KEYS = ("days_late", "amount_owed", "tenant")


def bucket_label(days_late: int) -> str:
    """Return the aging bucket a contract-level days-late count falls in."""
    for label, _, max_days in AGING_BUCKETS:
        if max_days is None or days_late <= max_days:
            return label
    return AGING_BUCKETS[-1][0]


@dataclass
class _ContractPosition:
    days_late: int
    amount_owed: Decimal
    payment_count: int
    oldest_due_date: date


@dataclass
class DelinquencyAccumulator:
    """Overdue payments grouped by contract as of ``evaluation_date``.

    Payments are folded first; contracts and clients folded afterwards only
    fill in the details of contracts that already have an overdue position.
    """

    evaluation_date: date
    positions: dict[str, _ContractPosition] = field(default_factory=dict)
    contract_details: dict[str, Contract] = field(default_factory=dict)
    tenant_names: dict[str, str] = field(default_factory=dict)
    tenant_ids: set[str] = field(default_factory=set)

    def fold_payment(self, payment: Payment) -> DelinquencyAccumulator:
        """Add an overdue payment that was due on or before the evaluation date."""
        if payment.status != PaymentStatus.OVERDUE or payment.due_date > self.evaluation_date:
            return self

        days_late = days_between(payment.due_date, self.evaluation_date)
        position = self.positions.get(payment.contract_id)
        if position is None:
            self.positions[payment.contract_id] = _ContractPosition(
                days_late=days_late,
                amount_owed=payment.amount_owed,
                payment_count=1,
                oldest_due_date=payment.due_date,
            )
            return self

        # A contract is as late as its longest-outstanding payment
        position.days_late = max(position.days_late, days_late)
        position.amount_owed += payment.amount_owed
        position.payment_count += 1
        position.oldest_due_date = min(position.oldest_due_date, payment.due_date)
        return self

    def fold_contract(self, contract: Contract) -> DelinquencyAccumulator:
        """Keep property and tenant of a contract with an overdue position."""
        if contract.contract_id in self.positions:
            self.contract_details[contract.contract_id] = contract
            self.tenant_ids.add(contract.tenant_id)
        return self

    def fold_client(self, client: Client) -> DelinquencyAccumulator:
        """Keep the name of a tenant of a delinquent contract."""
        if client.client_id in self.tenant_ids:
            self.tenant_names[client.client_id] = client.name
        return self

    def entries(self, minimum_days_late: int = 1) -> list[DelinquencyEntry]:
        """Contract entries at least ``minimum_days_late`` late, in first-seen order."""
        result = []
        for contract_id, position in self.positions.items():
            if position.days_late < minimum_days_late:
                continue
            contract = self.contract_details.get(contract_id)
            tenant_id = contract.tenant_id if contract else None
            result.append(
                DelinquencyEntry(
                    contract_id=contract_id,
                    days_late=position.days_late,
                    amount_owed=round2(position.amount_owed),
                    payment_count=position.payment_count,
                    oldest_due_date=position.oldest_due_date,
                    property_id=contract.property_id if contract else None,
                    tenant_id=tenant_id,
                    tenant_name=self.tenant_names.get(tenant_id, "") if tenant_id else "",
                )
            )
        return result

    def result(self, minimum_days_late: int = 1, sort_by: str = "days_late") -> DelinquencyReport:
        """Build the sorted, bucketed report.

        Parameters
        ----------
        minimum_days_late : int
            Contracts less late than this are left out.
        sort_by : str
            ``days_late`` or ``amount_owed`` (descending), or ``tenant``
            (ascending by tenant name, accent-aware).

        Returns
        -------
        DelinquencyReport
            Entries, all four aging buckets and totals.

        Raises
        ------
        ValueError
            If ``sort_by`` is unknown or ``minimum_days_late`` is negative.
        """
        if sort_by not in SORT_KEYS:
            raise ValueError(f"unknown sort key {sort_by!r}; expected one of {', '.join(SORT_KEYS)}")
        if minimum_days_late < 0:
            raise ValueError("minimum days late cannot be negative")

        entries = self.entries(minimum_days_late)
        if sort_by == "days_late":
            entries = rank_descending(entries, lambda e: e.days_late)
        elif sort_by == "amount_owed":
            entries = rank_descending(entries, lambda e: e.amount_owed)
        else:
            # sorted() is stable, so equal names keep first-seen order
            entries = sorted(entries, key=lambda e: collation_key(e.tenant_name or e.contract_id))

        counts = {label: 0 for label, _, _ in AGING_BUCKETS}
        owed = {label: Decimal("0") for label, _, _ in AGING_BUCKETS}
        for entry in entries:
            label = bucket_label(entry.days_late)
            counts[label] += 1
            owed[label] += entry.amount_owed

        first_min = min(AGING_BUCKETS[0][1], minimum_days_late)
        buckets = tuple(
            AgingBucket(
                label=label,
                min_days=first_min if label == AGING_BUCKETS[0][0] else min_days,
                max_days=max_days,
                count=counts[label],
                amount_owed=round2(owed[label]),
            )
            for label, min_days, max_days in AGING_BUCKETS
        )

        total = len(entries)
        total_owed = sum((e.amount_owed for e in entries), Decimal("0"))
        total_days = sum(e.days_late for e in entries)
        return DelinquencyReport(
            evaluation_date=self.evaluation_date,
            minimum_days_late=minimum_days_late,
            sort_by=sort_by,
            entries=tuple(entries),
            buckets=buckets,
            total_contracts=total,
            total_owed=round2(total_owed),
            average_days_late=round2(Decimal(total_days) / total) if total else round2(0),
        )


def analyze_delinquency(
    payments: Iterable[Payment],
    evaluation_date: date | None = None,
    contracts: Iterable[Contract] = (),
    clients: Iterable[Client] = (),
    minimum_days_late: int = 1,
    sort_by: str = "days_late",
) -> DelinquencyReport:
    """Build a delinquency report from in-memory records."""
    acc = DelinquencyAccumulator(evaluation_date=evaluation_date or date.today())
    for payment in payments:
        acc.fold_payment(payment)
    for contract in contracts:
        acc.fold_contract(contract)
    for client in clients:
        acc.fold_client(client)
    return acc.result(minimum_days_late, sort_by)
