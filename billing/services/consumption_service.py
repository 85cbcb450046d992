"""Service for resolving and recording per-rental metered consumption."""

import logging
from decimal import Decimal

from sqlalchemy import and_, or_, select
from sqlalchemy.orm import Session

from billing.errors import InvalidReadingError, RentalNotFoundError
from billing.models.consumption import Consumption
from billing.models.rental import Rental
from billing.services.audit_service import AuditService

logger = logging.getLogger(__name__)

MAX_READING = Decimal("10000000")


class ConsumptionResolver:
    """Resolves metered kWh of rentals for a billing period.

    A rental without a Consumption row for the period has consumed 0 kWh:
    the meter reading simply has not been submitted yet.
    """

    def __init__(self, session: Session) -> None:
        """Initialize with the session of the running transaction.

        Args:
            session: SQLAlchemy session
        """
        self.session = session

    def get_consumption(self, rental_id: int, month: int, year: int) -> Consumption | None:
        stmt = select(Consumption).where(
            Consumption.rental_id == rental_id,
            Consumption.month == month,
            Consumption.year == year,
        )
        return self.session.execute(stmt).scalar_one_or_none()

    def resolve(self, rental_id: int, month: int, year: int) -> Decimal:
        """Get kWh consumed by a rental in the period (0 if no reading)."""
        consumption = self.get_consumption(rental_id, month, year)
        if consumption is None:
            return Decimal("0")
        return consumption.consumption_for_period()

    def resolve_many(self, rental_ids: list[int], month: int, year: int) -> dict[int, Decimal]:
        """Get kWh consumed in the period for several rentals in one query.

        Returns a dict mapping every requested rental_id -> kWh (0 if no reading).
        """
        if not rental_ids:
            return {}

        stmt = select(Consumption).where(
            Consumption.rental_id.in_(rental_ids),
            Consumption.month == month,
            Consumption.year == year,
        )
        rows = self.session.execute(stmt).scalars().all()

        by_rental: dict[int, Decimal] = {rental_id: Decimal("0") for rental_id in rental_ids}
        for consumption in rows:
            by_rental[consumption.rental_id] = consumption.consumption_for_period()

        found = {consumption.rental_id for consumption in rows}
        missing = [rid for rid in rental_ids if rid not in found]
        if missing:
            logger.debug(
                "No meter reading for %02d/%d, rentals billed with 0 kWh: %s", month, year, missing
            )

        return by_rental

    def get_previous_consumption(self, rental_id: int, month: int, year: int) -> Consumption | None:
        """Get the latest Consumption of the rental strictly before the period."""
        stmt = (
            select(Consumption)
            .where(
                Consumption.rental_id == rental_id,
                or_(
                    Consumption.year < year,
                    and_(Consumption.year == year, Consumption.month < month),
                ),
            )
            .order_by(Consumption.year.desc(), Consumption.month.desc())
            .limit(1)
        )
        return self.session.execute(stmt).scalar_one_or_none()

    def record_reading(
        self,
        rental_id: int,
        month: int,
        year: int,
        reading: Decimal,
        actor_id: int | None = None,
    ) -> Consumption:
        """Create or update the meter reading of a rental for a period.

        previous_reading is taken from the latest earlier period of the same
        rental. The caller owns the transaction; this method only flushes.

        Args:
            rental_id: Rental ID
            month: Billing month (1-12)
            year: Billing year
            reading: Meter value at the end of the period
            actor_id: User ID performing the action (for audit logging)

        Returns:
            The created or updated Consumption

        Raises:
            RentalNotFoundError: If the rental does not exist
            InvalidReadingError: If reading is negative, above MAX_READING or below the
                previous reading
        """
        reading = Decimal(str(reading))
        if not reading.is_finite() or reading < 0:
            raise InvalidReadingError("Reading value must be non-negative")
        if reading > MAX_READING:
            raise InvalidReadingError("Reading value too high (max 10,000,000 kWh)")

        if self.session.get(Rental, rental_id) is None:
            raise RentalNotFoundError(rental_id)

        previous = self.get_previous_consumption(rental_id, month, year)
        previous_value = Decimal(previous.current_reading) if previous else None
        if previous_value is not None and reading < previous_value:
            raise InvalidReadingError(
                f"Reading value ({reading}) must be greater than or equal to previous reading "
                f"({previous_value})"
            )

        consumption = self.get_consumption(rental_id, month, year)
        created = consumption is None
        if created:
            consumption = Consumption(rental_id=rental_id, month=month, year=year)
            self.session.add(consumption)
        consumption.current_reading = reading
        consumption.previous_reading = previous_value
        self.session.flush()

        AuditService.log_reading(self.session, consumption, created=created, actor_id=actor_id)
        logger.info(
            "Recorded reading %s for rental %d (%02d/%d, %s)",
            reading,
            rental_id,
            month,
            year,
            "create" if created else "update",
        )
        return consumption


__all__ = ["ConsumptionResolver"]
