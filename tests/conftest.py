"""Pytest configuration: in-memory database and a seeded property."""

from datetime import date
from decimal import Decimal
from types import SimpleNamespace

import pytest

from billing.config import Settings
from billing.models import (
    Base,
    Consumption,
    ElectricityBill,
    Property,
    Rental,
    ServiceCharges,
    User,
)
from billing.services.db import create_db_engine, create_session_factory


@pytest.fixture
def settings(tmp_path):
    """Settings for an in-memory SQLite database."""
    return Settings(database_url="sqlite://", log_file=str(tmp_path / "logs" / "server.log"))


@pytest.fixture
def engine(settings):
    engine = create_db_engine(settings)
    Base.metadata.create_all(engine)
    yield engine
    engine.dispose()


@pytest.fixture
def session_factory(engine):
    return create_session_factory(engine)


@pytest.fixture
def db_session(session_factory):
    """Create test database session."""
    session = session_factory()
    yield session
    session.close()


def seed_property(session_factory) -> SimpleNamespace:
    """
    Seed the March 2025 billing scenario.

    Bill: 1000 kWh for 500.00 (0.5 per kWh). Service charges: 30 before
    IGV and 9 after. Occupants A (300 kWh) and B (200 kWh), one
    administrator holding their own rental: headcount 3.
    """
    with session_factory() as session:
        admin = User(name="Admin", email="admin@example.com")
        alice = User(name="Alice", email="alice@example.com")
        bob = User(name="Bob", email="bob@example.com")
        session.add_all([admin, alice, bob])

        prop = Property(name="Casa Miraflores", address="Av. Larco 123")
        prop.administrators.append(admin)
        session.add(prop)
        session.flush()

        admin_rental = Rental(
            user_id=admin.id, property_id=prop.id, start_date=date(2024, 1, 1), end_date=None
        )
        alice_rental = Rental(
            user_id=alice.id, property_id=prop.id, start_date=date(2024, 6, 1), end_date=None
        )
        bob_rental = Rental(
            user_id=bob.id,
            property_id=prop.id,
            start_date=date(2024, 9, 1),
            end_date=date(2025, 12, 31),
        )
        session.add_all([admin_rental, alice_rental, bob_rental])
        session.flush()

        bill = ElectricityBill(
            property_id=prop.id,
            period_start=date(2025, 3, 1),
            period_end=date(2025, 3, 31),
            total_kwh=Decimal("1000"),
            total_cost=Decimal("500.00"),
        )
        session.add(bill)
        session.flush()
        session.add(
            ServiceCharges(
                electricity_bill_id=bill.id,
                maintenance_and_replacement=Decimal("10"),
                fixed_charge=Decimal("5"),
                compensatory_interest=Decimal("5"),
                public_lighting=Decimal("10"),
                law_contribution=Decimal("4"),
                late_fee=Decimal("2"),
                previous_month_rounding=Decimal("1"),
                current_month_rounding=Decimal("2"),
            )
        )
        session.add_all(
            [
                Consumption(
                    rental_id=alice_rental.id,
                    month=3,
                    year=2025,
                    current_reading=Decimal("1300"),
                    previous_reading=Decimal("1000"),
                ),
                Consumption(
                    rental_id=bob_rental.id,
                    month=3,
                    year=2025,
                    current_reading=Decimal("200"),
                    previous_reading=None,
                ),
            ]
        )
        session.commit()

        return SimpleNamespace(
            property_id=prop.id,
            bill_id=bill.id,
            admin_id=admin.id,
            alice_id=alice.id,
            bob_id=bob.id,
            admin_rental_id=admin_rental.id,
            alice_rental_id=alice_rental.id,
            bob_rental_id=bob_rental.id,
        )


@pytest.fixture
def seeded(session_factory):
    """Property with two occupants, one administrator and a March 2025 bill."""
    return seed_property(session_factory)


@pytest.fixture
def file_database(tmp_path):
    """Seeded SQLite file database, for code that builds its own engine."""
    url = f"sqlite:///{tmp_path / 'billing.db'}"
    engine = create_db_engine(Settings(database_url=url))
    Base.metadata.create_all(engine)
    ids = seed_property(create_session_factory(engine))
    engine.dispose()
    return SimpleNamespace(url=url, **vars(ids))


@pytest.fixture
def property_seeder():
    """The seeding function, for tests that own their session factory."""
    return seed_property
