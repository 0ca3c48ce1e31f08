#!/usr/bin/env python3
"""Benchmark report generation across page sizes.

Measures:
- Portfolio generation rate
- Report time per page size (period summary, profitability, delinquency)
- That every page size yields the same report

Usage:
    python scripts/benchmark.py
    python scripts/benchmark.py --scale 5000 --page-sizes 100 1000 10000
"""

import argparse
import logging
import sys
import time
from datetime import date
from pathlib import Path

# Add project root to path
project_root = Path(__file__).parent.parent
sys.path.insert(0, str(project_root))

from rental_finance.calculations.money import add_months, month_start
from rental_finance.config import ReportConfig
from rental_finance.engine import ReportEngine
from rental_finance.scenarios import RentalPortfolioScenario
from rental_finance.store.memory import RentalDataStore

logging.basicConfig(
    level=logging.WARNING,
    format="%(asctime)s - %(name)s - %(levelname)s - %(message)s",
)
logger = logging.getLogger(__name__)


def get_memory_mb() -> float:
    """Get peak process memory usage in MB."""
    try:
        import resource
    except ImportError:
        # resource is Unix-only
        return 0.0
    usage = resource.getrusage(resource.RUSAGE_SELF)
    if sys.platform == "darwin":
        return usage.ru_maxrss / (1024 * 1024)  # macOS reports in bytes
    return usage.ru_maxrss / 1024


def benchmark_generation(num_properties: int, seed: int, reference_date: date) -> RentalDataStore:
    """Benchmark portfolio generation speed.

    Parameters
    ----------
    num_properties : int
        Number of properties to generate.
    seed : int
        Random seed.
    reference_date : date
        "Today" for the generated data.

    Returns
    -------
    RentalDataStore
        Store with generated data (for report benchmarks).
    """
    mem_before = get_memory_mb()
    t0 = time.perf_counter()
    scenario = RentalPortfolioScenario(
        num_properties=num_properties,
        reference_date=reference_date,
        seed=seed,
    )
    store = scenario.generate()
    elapsed = time.perf_counter() - t0

    total = sum(store.summary().values())
    print(f"  Entities:      {total:>8,} in {elapsed:.2f}s  ({total / max(elapsed, 0.001):,.0f}/sec)")
    for entity, count in store.summary().items():
        print(f"    {entity:<12} {count:>8,}")
    print(f"\n  Memory: {get_memory_mb():.1f} MB (delta: +{get_memory_mb() - mem_before:.1f} MB)")
    return store


def benchmark_reports(store: RentalDataStore, page_sizes: list[int], reference_date: date) -> bool:
    """Time each report at each page size and compare the results.

    Returns
    -------
    bool
        True when every page size produced identical reports.
    """
    end = month_start(reference_date)
    start = add_months(end, -12)
    baseline = None
    consistent = True

    for page_size in page_sizes:
        engine = ReportEngine(store, ReportConfig(page_size=page_size))
        print(f"\n  page_size={page_size:,}")

        results = []
        for label, run in [
            ("period_summary", lambda: engine.period_summary(start, end)),
            ("profitability", lambda: engine.profitability(start, end)),
            ("delinquency", lambda: engine.delinquency(reference_date)),
        ]:
            t0 = time.perf_counter()
            results.append(run())
            elapsed = time.perf_counter() - t0
            print(f"    {label:<16} {elapsed:.3f}s")

        if baseline is None:
            baseline = results
        elif results != baseline:
            consistent = False
            print("    MISMATCH against first page size")

    return consistent


def main() -> None:
    """Run benchmarks."""
    parser = argparse.ArgumentParser(description="Benchmark rental-finance report generation")
    parser.add_argument("--scale", type=int, default=1000, help="Number of properties (default: 1000)")
    parser.add_argument("--seed", type=int, default=42, help="Random seed (default: 42)")
    parser.add_argument(
        "--page-sizes",
        type=int,
        nargs="+",
        default=[1, 100, 1000, 10000],
        help="Page sizes to compare (default: 1 100 1000 10000)",
    )
    parser.add_argument(
        "--as-of",
        type=date.fromisoformat,
        default=date.today(),
        help="Reference date, YYYY-MM-DD (default: today)",
    )
    args = parser.parse_args()

    print("=" * 60)
    print(f"  rental-finance Benchmark  |  scale={args.scale:,}  seed={args.seed}")
    print("=" * 60)

    print("\n[1] Portfolio Generation")
    store = benchmark_generation(args.scale, args.seed, args.as_of)

    print("\n[2] Reports")
    consistent = benchmark_reports(store, args.page_sizes, args.as_of)

    print("\n" + "=" * 60)
    print("  Benchmark complete" + ("" if consistent else " (page sizes disagree)"))
    print("=" * 60)


if __name__ == "__main__":
    main()
