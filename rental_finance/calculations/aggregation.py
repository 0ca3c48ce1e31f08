"""Aggregation helpers shared by the report builders."""

import unicodedata
from decimal import Decimal
from typing import Callable, Hashable, Iterable, TypeVar

from rental_finance.calculations.money import round2, to_decimal

T = TypeVar("T")
K = TypeVar("K", bound=Hashable)


def group_sum(
    records: Iterable[T],
    key_fn: Callable[[T], K],
    value_fn: Callable[[T], Decimal],
    into: dict[K, Decimal] | None = None,
) -> dict[K, Decimal]:
    """Sum ``value_fn(record)`` per ``key_fn(record)``.

    Keys keep the order in which they were first seen. Pass ``into`` to keep
    adding to the totals of earlier pages.
    """
    totals: dict[K, Decimal] = {} if into is None else into
    for record in records:
        key = key_fn(record)
        totals[key] = totals.get(key, Decimal("0")) + value_fn(record)
    return totals


def percentage(part: Decimal | int, whole: Decimal | int) -> Decimal:
    """Return ``100 * part / whole`` rounded to cents, or 0 when ``whole`` is 0."""
    whole_value = to_decimal(whole)
    if whole_value == 0:
        return round2(0)
    return round2(Decimal(100) * to_decimal(part) / whole_value)


def rank_descending(items: Iterable[T], metric_fn: Callable[[T], Decimal | int]) -> list[T]:
    """Sort items by ``metric_fn`` descending; ties keep their input order."""
    indexed = list(enumerate(items))
    indexed.sort(key=lambda pair: (-metric_fn(pair[1]), pair[0]))
    return [item for _, item in indexed]


def collation_key(name: str) -> tuple[str, str, str]:
    """Sort key comparing names the way a person reading them would.

    Accents and case are ignored first, then accented letters sort after
    their plain form, then lowercase before uppercase. "Álvaro" lands next
    to "Alvaro" instead of after "Zé".
    """
    decomposed = unicodedata.normalize("NFKD", name)
    base = "".join(ch for ch in decomposed if not unicodedata.combining(ch))
    return (base.casefold(), decomposed.casefold(), name.swapcase())
