"""Property and client models."""

from dataclasses import dataclass

from rental_finance.models.rental.enums import PropertyType


@dataclass(frozen=True)
class Property:
    """Rental property (imovel)."""

    property_id: str
    address: str
    city: str
    property_type: PropertyType


@dataclass(frozen=True)
class Client:
    """Tenant or owner registered in the back office."""

    client_id: str
    name: str
    email: str | None = None
