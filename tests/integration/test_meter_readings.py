"""Integration tests for consumption resolution and meter reading entry."""

from decimal import Decimal

import pytest
from sqlalchemy import select

from billing.errors import InvalidReadingError, RentalNotFoundError
from billing.models import AuditLog, Consumption
from billing.services.consumption_service import MAX_READING, ConsumptionResolver


class TestResolveConsumption:
    def test_resolve_with_previous_reading(self, db_session, seeded):
        resolver = ConsumptionResolver(db_session)

        assert resolver.resolve(seeded.alice_rental_id, 3, 2025) == Decimal("300")

    def test_resolve_first_reading(self, db_session, seeded):
        resolver = ConsumptionResolver(db_session)

        assert resolver.resolve(seeded.bob_rental_id, 3, 2025) == Decimal("200")

    def test_resolve_missing_reading(self, db_session, seeded):
        resolver = ConsumptionResolver(db_session)

        assert resolver.resolve(seeded.admin_rental_id, 3, 2025) == Decimal("0")

    def test_resolve_many(self, db_session, seeded):
        resolver = ConsumptionResolver(db_session)

        result = resolver.resolve_many(
            [seeded.alice_rental_id, seeded.bob_rental_id, seeded.admin_rental_id], 3, 2025
        )

        assert result == {
            seeded.alice_rental_id: Decimal("300"),
            seeded.bob_rental_id: Decimal("200"),
            seeded.admin_rental_id: Decimal("0"),
        }

    def test_resolve_many_empty(self, db_session):
        assert ConsumptionResolver(db_session).resolve_many([], 3, 2025) == {}

    def test_resolve_other_period(self, db_session, seeded):
        resolver = ConsumptionResolver(db_session)

        assert resolver.resolve(seeded.alice_rental_id, 4, 2025) == Decimal("0")


class TestRecordReading:
    def test_first_reading_of_new_period(self, db_session, seeded):
        resolver = ConsumptionResolver(db_session)

        consumption = resolver.record_reading(
            seeded.alice_rental_id, 4, 2025, Decimal("1450"), actor_id=seeded.admin_id
        )
        db_session.commit()

        assert consumption.id is not None
        assert consumption.previous_reading == Decimal("1300")
        assert resolver.resolve(seeded.alice_rental_id, 4, 2025) == Decimal("150")

    def test_previous_reading_from_latest_earlier_period(self, db_session, seeded):
        resolver = ConsumptionResolver(db_session)
        resolver.record_reading(seeded.alice_rental_id, 12, 2024, Decimal("900"))
        resolver.record_reading(seeded.alice_rental_id, 1, 2025, Decimal("950"))

        previous = resolver.get_previous_consumption(seeded.alice_rental_id, 3, 2025)

        assert previous.month == 1
        assert previous.year == 2025

    def test_update_existing_reading(self, db_session, seeded):
        resolver = ConsumptionResolver(db_session)

        consumption = resolver.record_reading(seeded.bob_rental_id, 3, 2025, Decimal("250"))
        db_session.commit()

        rows = db_session.execute(
            select(Consumption).where(Consumption.rental_id == seeded.bob_rental_id)
        ).scalars().all()
        assert len(rows) == 1
        assert consumption.current_reading == Decimal("250")
        assert resolver.resolve(seeded.bob_rental_id, 3, 2025) == Decimal("250")

    def test_reading_audited(self, db_session, seeded):
        resolver = ConsumptionResolver(db_session)

        consumption = resolver.record_reading(
            seeded.alice_rental_id, 4, 2025, Decimal("1450"), actor_id=seeded.admin_id
        )
        db_session.commit()

        entry = db_session.execute(
            select(AuditLog).where(AuditLog.entity_type == "consumption")
        ).scalar_one()
        assert entry.entity_id == consumption.id
        assert entry.action == "create"
        assert entry.actor_id == seeded.admin_id
        assert entry.changes["previous_reading"] == "1300.00"

    def test_reading_update_audited(self, db_session, seeded):
        resolver = ConsumptionResolver(db_session)

        consumption = resolver.record_reading(seeded.bob_rental_id, 3, 2025, Decimal("250"))
        db_session.commit()

        entry = db_session.execute(
            select(AuditLog).where(AuditLog.entity_type == "consumption")
        ).scalar_one()
        assert entry.entity_id == consumption.id
        assert entry.action == "update"
        assert entry.actor_id is None
        assert entry.changes == {
            "rental_id": seeded.bob_rental_id,
            "period": "2025-03",
            "current_reading": "250",
            "previous_reading": None,
        }
        assert entry.invoice_ids == []

    def test_zero_reading_accepted(self, db_session, seeded):
        resolver = ConsumptionResolver(db_session)

        consumption = resolver.record_reading(seeded.admin_rental_id, 2, 2025, Decimal("0"))

        assert consumption.current_reading == Decimal("0")
        assert resolver.resolve(seeded.admin_rental_id, 2, 2025) == Decimal("0")

    def test_negative_reading_rejected(self, db_session, seeded):
        with pytest.raises(InvalidReadingError, match="must be non-negative"):
            ConsumptionResolver(db_session).record_reading(
                seeded.alice_rental_id, 4, 2025, Decimal("-10")
            )

    def test_reading_at_maximum_accepted(self, db_session, seeded):
        consumption = ConsumptionResolver(db_session).record_reading(
            seeded.alice_rental_id, 4, 2025, MAX_READING
        )

        assert consumption.current_reading == Decimal("10000000")

    def test_reading_above_maximum_rejected(self, db_session, seeded):
        with pytest.raises(InvalidReadingError, match="too high"):
            ConsumptionResolver(db_session).record_reading(
                seeded.alice_rental_id, 4, 2025, Decimal("10000000.01")
            )

    def test_reading_below_previous_rejected(self, db_session, seeded):
        with pytest.raises(InvalidReadingError, match="greater than or equal to previous reading"):
            ConsumptionResolver(db_session).record_reading(
                seeded.alice_rental_id, 4, 2025, Decimal("1299")
            )

    def test_unknown_rental(self, db_session, seeded):
        with pytest.raises(RentalNotFoundError):
            ConsumptionResolver(db_session).record_reading(999, 4, 2025, Decimal("10"))
