"""Financial computation and reporting engine for a rental back office."""

from rental_finance.engine import ReportEngine

__all__ = ["ReportEngine"]
