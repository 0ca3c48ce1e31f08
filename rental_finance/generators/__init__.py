"""Synthetic rental data generators."""

from rental_finance.generators.base import BaseGenerator
from rental_finance.generators.patterns import PaymentBehavior
from rental_finance.generators.rental import (
    ClientGenerator,
    ContractGenerator,
    ExpenseGenerator,
    PropertyGenerator,
)

__all__ = [
    "BaseGenerator",
    "ClientGenerator",
    "ContractGenerator",
    "ExpenseGenerator",
    "PaymentBehavior",
    "PropertyGenerator",
]
