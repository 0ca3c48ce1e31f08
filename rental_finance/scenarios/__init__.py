"""Scenarios for generating realistic rental portfolios."""

from rental_finance.scenarios.portfolio import RentalPortfolioScenario

__all__ = ["RentalPortfolioScenario"]
