"""Enumeration types for rental domain entities."""

from enum import Enum


class PaymentStatus(str, Enum):
    PENDING = "pending"
    PAID = "paid"
    OVERDUE = "overdue"
    CANCELLED = "cancelled"


class ExpenseStatus(str, Enum):
    PENDING = "pending"
    PAID = "paid"
    CANCELLED = "cancelled"


class ExpenseCategory(str, Enum):
    MAINTENANCE = "maintenance"
    TAXES = "taxes"
    INSURANCE = "insurance"
    ADMINISTRATION = "administration"
    OTHER = "other"


class ContractStatus(str, Enum):
    ACTIVE = "active"
    TERMINATED = "terminated"


class PropertyType(str, Enum):
    APARTMENT = "apartment"
    HOUSE = "house"
    COMMERCIAL = "commercial"
    LAND = "land"


class EntityType(str, Enum):
    """Record collections a record source can page through."""

    PROPERTIES = "properties"
    CLIENTS = "clients"
    CONTRACTS = "contracts"
    PAYMENTS = "payments"
    EXPENSES = "expenses"
