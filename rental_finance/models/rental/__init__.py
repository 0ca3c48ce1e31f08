"""Rental domain models."""

from rental_finance.models.rental.configuration import FinancialConfiguration
from rental_finance.models.rental.contract import Contract
from rental_finance.models.rental.enums import (
    ContractStatus,
    EntityType,
    ExpenseCategory,
    ExpenseStatus,
    PaymentStatus,
    PropertyType,
)
from rental_finance.models.rental.payment import Expense, Payment
from rental_finance.models.rental.property import Client, Property

__all__ = [
    "Client",
    "Contract",
    "ContractStatus",
    "EntityType",
    "Expense",
    "ExpenseCategory",
    "ExpenseStatus",
    "FinancialConfiguration",
    "Payment",
    "PaymentStatus",
    "Property",
    "PropertyType",
]
