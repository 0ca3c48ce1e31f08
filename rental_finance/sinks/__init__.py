"""Output sinks for exporting reports and records."""

from rental_finance.sinks.console import ConsoleSink
from rental_finance.sinks.json_file import JsonFileSink
from rental_finance.sinks.kafka import KafkaSink

__all__ = ["ConsoleSink", "JsonFileSink", "KafkaSink"]
