#!/usr/bin/env python3
"""Run financial reports and export them to sinks.

Reports are built from a generated rental portfolio (default) or read from
PostgreSQL, and written to the console, JSON files or Kafka.

Usage:
    python scripts/generate_reports.py --report all
    python scripts/generate_reports.py --report delinquency --sort tenant
    python scripts/generate_reports.py --source postgres --sink json --output-dir out
"""

import argparse
import logging
import sys
from datetime import date
from pathlib import Path

# Add project root to path
project_root = Path(__file__).parent.parent
sys.path.insert(0, str(project_root))

from rental_finance.calculations.money import add_months, month_start
from rental_finance.config import EngineConfig
from rental_finance.engine import ReportEngine
from rental_finance.exceptions import RentalFinanceError
from rental_finance.logging import setup_logging
from rental_finance.scenarios import RentalPortfolioScenario
from rental_finance.sinks import ConsoleSink, JsonFileSink, KafkaSink
from rental_finance.sinks.kafka import ProducerConfig
from rental_finance.store import PostgresRecordStore

logger = logging.getLogger(__name__)

REPORTS = ("summary", "profitability", "delinquency", "fees")


def parse_date(value: str) -> date:
    """Parse an ISO date argument."""
    try:
        return date.fromisoformat(value)
    except ValueError as e:
        raise argparse.ArgumentTypeError(f"invalid date {value!r}: expected YYYY-MM-DD") from e


def build_parser(config: EngineConfig) -> argparse.ArgumentParser:
    """Command-line options; defaults come from the environment config."""
    parser = argparse.ArgumentParser(description="Generate rental financial reports")
    parser.add_argument(
        "--report",
        choices=(*REPORTS, "all"),
        default="all",
        help="Report to run (default: all)",
    )
    parser.add_argument("--start", type=parse_date, help="Window start (default: 12 months ago)")
    parser.add_argument("--end", type=parse_date, help="Window end, exclusive (default: this month)")
    parser.add_argument("--as-of", type=parse_date, help="Evaluation date (default: today)")
    parser.add_argument("--property", dest="property_id", help="Restrict profitability to one property")
    parser.add_argument("--rank-by", help="Profitability ranking key")
    parser.add_argument("--sort", help="Delinquency sort key")
    parser.add_argument("--min-days-late", type=int, help="Delinquency minimum days late")
    parser.add_argument(
        "--source",
        choices=("scenario", "postgres"),
        default="scenario",
        help="Record source (default: generated scenario)",
    )
    parser.add_argument("--properties", type=int, default=100, help="Scenario properties (default: 100)")
    parser.add_argument("--seed", type=int, default=config.seed, help="Random seed for the scenario")
    parser.add_argument(
        "--sink",
        choices=("console", "json", "kafka"),
        action="append",
        help="Output sink, repeatable (default: console)",
    )
    parser.add_argument(
        "--output-dir",
        type=Path,
        default=config.output.json_output_dir,
        help="Directory for the JSON sink",
    )
    parser.add_argument("--page-size", type=int, default=config.report.page_size, help="Records per page")
    parser.add_argument("--log-level", default=config.log_level, help="Logging level")
    parser.add_argument("--log-format", choices=("standard", "json"), default="standard")
    return parser


def build_sinks(names: list[str], config: EngineConfig, output_dir: Path) -> list:
    """Instantiate the requested sinks."""
    sinks = []
    for name in names:
        if name == "console":
            sinks.append(ConsoleSink(pretty=True))
        elif name == "json":
            sinks.append(JsonFileSink(output_dir, pretty=config.output.pretty_json))
        elif name == "kafka":
            sinks.append(KafkaSink(ProducerConfig.from_kafka_config(config.kafka)))
    return sinks


def run_reports(engine: ReportEngine, args: argparse.Namespace, sinks: list) -> None:
    """Run the selected reports and write each one to every sink."""
    as_of = args.as_of or date.today()
    end = args.end or month_start(as_of)
    start = args.start or add_months(end, -12)
    selected = REPORTS if args.report == "all" else (args.report,)

    for name in selected:
        if name == "summary":
            report = engine.period_summary(start, end)
        elif name == "profitability":
            report = engine.profitability(start, end, property_id=args.property_id, rank_by=args.rank_by)
        elif name == "delinquency":
            report = engine.delinquency(as_of, minimum_days_late=args.min_days_late, sort_by=args.sort)
        else:
            report = {"evaluation_date": as_of, "assessments": engine.assess_fees(as_of)}

        for sink in sinks:
            sink.write_report(name, report)


def main() -> int:
    """Run reports."""
    config = EngineConfig.from_env()
    args = build_parser(config).parse_args()
    setup_logging(level=args.log_level, format_type=args.log_format)
    config.report.page_size = args.page_size

    if args.source == "postgres":
        source = PostgresRecordStore(config.postgres.connection_string)
    else:
        scenario = RentalPortfolioScenario(
            num_properties=args.properties,
            reference_date=args.as_of,
            seed=args.seed,
        )
        source = scenario.generate()
        logger.info("Scenario summary: %s", scenario.get_portfolio_summary())

    sinks = build_sinks(args.sink or ["console"], config, args.output_dir)
    try:
        run_reports(ReportEngine(source, config.report), args, sinks)
    except RentalFinanceError as e:
        logger.error("Report failed: %s", e)
        return 1
    except ValueError as e:
        logger.error("Invalid report request: %s", e)
        return 2
    finally:
        for sink in sinks:
            sink.close()
        if isinstance(source, PostgresRecordStore):
            source.close()

    return 0


if __name__ == "__main__":
    sys.exit(main())
