"""Generators for rental master data and expenses."""

import random
from datetime import date, timedelta
from decimal import Decimal

from rental_finance.calculations.money import add_months
from rental_finance.generators.base import BaseGenerator
from rental_finance.models.rental import (
    Client,
    Contract,
    ContractStatus,
    Expense,
    ExpenseCategory,
    ExpenseStatus,
    Property,
    PropertyType,
)


class PropertyGenerator(BaseGenerator):
    """Generate synthetic rental properties."""

    # Property type weights (apartments dominate urban portfolios)
    TYPE_WEIGHTS = {
        PropertyType.APARTMENT: 0.55,
        PropertyType.HOUSE: 0.30,
        PropertyType.COMMERCIAL: 0.12,
        PropertyType.LAND: 0.03,
    }

    def generate(self) -> Property:
        """Generate a property.

        Returns
        -------
        Property
            Generated property.
        """
        property_type = random.choices(
            list(self.TYPE_WEIGHTS.keys()),
            weights=list(self.TYPE_WEIGHTS.values()),
            k=1,
        )[0]
        return Property(
            property_id=self.fake.uuid4(),
            address=self.fake.street_address(),
            city=self.fake.city(),
            property_type=property_type,
        )


class ClientGenerator(BaseGenerator):
    """Generate synthetic tenants and owners."""

    def generate(self) -> Client:
        """Generate a client with a Brazilian name and e-mail."""
        return Client(
            client_id=self.fake.uuid4(),
            name=self.fake.name(),
            email=self.fake.email(),
        )


class ContractGenerator(BaseGenerator):
    """Generate synthetic lease contracts."""

    # Monthly rent ranges by property type (BRL)
    RENT_RANGES = {
        PropertyType.APARTMENT: (1200, 6000),
        PropertyType.HOUSE: (1500, 9000),
        PropertyType.COMMERCIAL: (3000, 20000),
        PropertyType.LAND: (500, 3000),
    }

    def generate(
        self,
        prop: Property,
        tenant_id: str,
        start_date: date,
        months: int = 12,
        owner_id: str | None = None,
        reference_date: date | None = None,
    ) -> Contract:
        """Generate a contract for a property.

        Parameters
        ----------
        prop : Property
            Leased property; its type sets the rent range.
        tenant_id : str
            Tenant client ID.
        start_date : date
            First day of the lease.
        months : int
            Lease length in months.
        owner_id : str | None
            Owner client ID.
        reference_date : date | None
            Contracts ending before this date are terminated.

        Returns
        -------
        Contract
            Generated contract.
        """
        if reference_date is None:
            reference_date = date.today()

        low, high = self.RENT_RANGES[prop.property_type]
        # Rents are quoted in tens of reais
        rent = Decimal(random.randint(low // 10, high // 10) * 10)
        end_date = add_months(start_date, months) - timedelta(days=1)
        status = ContractStatus.TERMINATED if end_date < reference_date else ContractStatus.ACTIVE

        return Contract(
            contract_id=self.fake.uuid4(),
            property_id=prop.property_id,
            tenant_id=tenant_id,
            rent_amount=rent,
            start_date=start_date,
            end_date=end_date,
            status=status,
            due_day=random.choice([1, 5, 10, 15, 20]),
            owner_id=owner_id,
        )


class ExpenseGenerator(BaseGenerator):
    """Generate synthetic property expenses."""

    # Category -> (weight, min amount, max amount, description)
    CATEGORIES = {
        ExpenseCategory.MAINTENANCE: (0.40, 150, 4000, "Manutenção"),
        ExpenseCategory.TAXES: (0.20, 200, 2500, "IPTU"),
        ExpenseCategory.INSURANCE: (0.15, 100, 900, "Seguro incêndio"),
        ExpenseCategory.ADMINISTRATION: (0.20, 80, 600, "Taxa de administração"),
        ExpenseCategory.OTHER: (0.05, 50, 1500, "Outras despesas"),
    }

    def generate(
        self,
        property_id: str,
        start_date: date,
        end_date: date,
        paid_rate: float = 0.85,
    ) -> Expense:
        """Generate an expense dated between ``start_date`` and ``end_date``.

        Parameters
        ----------
        property_id : str
            Property the expense belongs to.
        start_date, end_date : date
            Inclusive range for the expense date.
        paid_rate : float
            Probability the expense is already paid.

        Returns
        -------
        Expense
            Generated expense.
        """
        category = random.choices(
            list(self.CATEGORIES.keys()),
            weights=[entry[0] for entry in self.CATEGORIES.values()],
            k=1,
        )[0]
        _, low, high, description = self.CATEGORIES[category]

        span = (end_date - start_date).days
        expense_date = start_date + timedelta(days=random.randint(0, max(span, 0)))
        amount = Decimal(str(round(random.uniform(low, high), 2)))

        roll = random.random()
        if roll < paid_rate:
            status = ExpenseStatus.PAID
            payment_date = expense_date + timedelta(days=random.randint(0, 10))
        elif roll < paid_rate + (1 - paid_rate) / 2:
            status = ExpenseStatus.PENDING
            payment_date = None
        else:
            status = ExpenseStatus.CANCELLED
            payment_date = None

        return Expense(
            expense_id=self.fake.uuid4(),
            property_id=property_id,
            category=category,
            amount=amount,
            expense_date=expense_date,
            status=status,
            payment_date=payment_date,
            description=description,
        )
