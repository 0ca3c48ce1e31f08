"""Paged folding of record-source data into report accumulators.

Only one page is alive at a time: it is fetched, folded record by record
into the accumulator, and dropped before the next fetch. Peak memory is
therefore one page plus whatever the accumulator keeps.
"""

from __future__ import annotations

import logging
from typing import Any, Callable, Iterator, TypeVar

from rental_finance.exceptions import ReportGenerationError

logger = logging.getLogger(__name__)

A = TypeVar("A")

DEFAULT_PAGE_SIZE = 1000

FetchPage = Callable[[int, int], list[Any]]


def iter_pages(fetch_page: FetchPage, page_size: int = DEFAULT_PAGE_SIZE) -> Iterator[list[Any]]:
    """Yield pages until one comes back shorter than ``page_size``.

    Parameters
    ----------
    fetch_page : Callable[[int, int], list]
        ``fetch_page(offset, limit)`` returning at most ``limit`` records.
    page_size : int
        Records requested per page.

    Yields
    ------
    list
        Each non-empty page.

    Raises
    ------
    ValueError
        If ``page_size`` is less than 1.
    ReportGenerationError
        If ``fetch_page`` fails; the original exception is the cause.
    """
    if page_size < 1:
        raise ValueError(f"page size must be at least 1, got {page_size}")

    offset = 0
    while True:
        try:
            page = fetch_page(offset, page_size)
        except Exception as e:
            logger.error("Record fetch failed at offset %d: %s", offset, e)
            raise ReportGenerationError(f"failed to fetch records at offset {offset}", cause=e) from e

        if page:
            yield page
        if len(page) < page_size:
            return
        offset += page_size


def fold_pages(
    fetch_page: FetchPage,
    fold: Callable[[A, Any], A],
    accumulator: A,
    page_size: int = DEFAULT_PAGE_SIZE,
) -> A:
    """Fold every record of a paged source into an accumulator.

    Parameters
    ----------
    fetch_page : Callable[[int, int], list]
        ``fetch_page(offset, limit)`` returning at most ``limit`` records.
    fold : Callable[[A, Any], A]
        ``fold(accumulator, record)`` returning the updated accumulator.
    accumulator : A
        Initial accumulator.
    page_size : int
        Records requested per page (default 1000).

    Returns
    -------
    A
        Accumulator after every record was folded.
    """
    pages = 0
    records = 0
    for page in iter_pages(fetch_page, page_size):
        for record in page:
            accumulator = fold(accumulator, record)
        pages += 1
        records += len(page)

    logger.debug("Folded %d records in %d pages (page size %d)", records, pages, page_size)
    return accumulator
