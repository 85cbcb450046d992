"""Invoice generation for a property's billing period.

Loads the electricity bill, its service charges, the property's
administrators, the rentals active on the first day of the period and their
metered consumption; prorates the bill with CostAllocator; then writes one
invoice per billable party. All of it runs in a single SERIALIZABLE
transaction through one session, so a period is either fully invoiced or
not touched at all, and concurrent runs cannot invoice a rental twice.
"""

import logging
from datetime import date
from decimal import Decimal, InvalidOperation
from enum import Enum
from typing import NamedTuple

from sqlalchemy import or_, select
from sqlalchemy.orm import Session

from billing.errors import (
    ElectricityBillNotFoundError,
    ElectricityBillPropertyMismatchError,
    InvalidPeriodError,
    InvalidWaterCostError,
    PropertyNoAdministratorsError,
    PropertyNotFoundError,
    UserNotFoundError,
)
from billing.models.electricity_bill import ElectricityBill
from billing.models.invoice import Invoice
from billing.models.property import Property
from billing.models.rental import Rental
from billing.models.service_charges import ServiceCharges
from billing.models.user import User
from billing.services.allocation_service import CostAllocator, EnergyCost
from billing.services.audit_service import AuditService
from billing.services.consumption_service import ConsumptionResolver
from billing.services.invoice_service import InvoiceWriter
from billing.services.transaction import SERIALIZABLE, TransactionManager

logger = logging.getLogger(__name__)

MIN_YEAR = 2000
MAX_YEAR = 2100


class PartyKind(str, Enum):
    """Why a rental is billed in a generation run."""

    OCCUPANT = "occupant"
    ADMINISTRATOR = "administrator"


class BillableParty(NamedTuple):
    """A rental to invoice and the energy cost allocated to it."""

    kind: PartyKind
    user_id: int
    rental_id: int
    energy: EnergyCost


class InvoiceGenerationService:
    """Generates the invoices of every occupant and administrator of a property."""

    def __init__(
        self,
        transaction_manager: TransactionManager,
        allocator: CostAllocator | None = None,
    ):
        """Initialize with explicit collaborators.

        Args:
            transaction_manager: Runs each generation in one transaction
            allocator: Proration engine (default: CostAllocator with 18% IGV)
        """
        self.transaction_manager = transaction_manager
        self.allocator = allocator or CostAllocator()

    def generate(
        self,
        property_id: int,
        electricity_bill_id: int,
        month: int,
        year: int,
        water_cost: Decimal,
        actor_id: int | None = None,
    ) -> list[Invoice]:
        """Create the missing invoices of a property for a period.

        Re-running for an already invoiced period only fills gaps: rentals
        that have an invoice for (month, year) are skipped and are absent
        from the result.

        Args:
            property_id: Property to bill
            electricity_bill_id: Electricity bill of the property to prorate
            month: Billing month (1-12)
            year: Billing year (2000-2100)
            water_cost: Total water cost to split equally (finite, >= 0)
            actor_id: Existing user triggering the run (optional, audited)

        Returns:
            Newly created invoices, occupants first, then administrators

        Raises:
            InvalidPeriodError: If month or year is out of range
            InvalidWaterCostError: If water_cost is negative or not a finite number
            ElectricityBillNotFoundError: If the bill does not exist
            ElectricityBillPropertyMismatchError: If the bill belongs to another property
            PropertyNotFoundError: If the property does not exist
            PropertyNoAdministratorsError: If the property has no administrators
            UserNotFoundError: If actor_id does not match a user
        """
        if not 1 <= month <= 12:
            raise InvalidPeriodError(f"Month must be between 1 and 12, got {month}")
        if not MIN_YEAR <= year <= MAX_YEAR:
            raise InvalidPeriodError(f"Year must be between {MIN_YEAR} and {MAX_YEAR}, got {year}")
        try:
            water_cost = Decimal(str(water_cost))
        except InvalidOperation as e:
            raise InvalidWaterCostError(f"Water cost must be a number, got {water_cost!r}") from e
        if not water_cost.is_finite() or water_cost < 0:
            raise InvalidWaterCostError()

        logger.info(
            "Generating invoices: property=%d bill=%d period=%02d/%d water_cost=%s",
            property_id,
            electricity_bill_id,
            month,
            year,
            water_cost,
        )

        return self.transaction_manager.run(
            lambda session: self._generate_in_session(
                session, property_id, electricity_bill_id, month, year, water_cost, actor_id
            ),
            isolation_level=SERIALIZABLE,
        )

    def _generate_in_session(
        self,
        session: Session,
        property_id: int,
        electricity_bill_id: int,
        month: int,
        year: int,
        water_cost: Decimal,
        actor_id: int | None,
    ) -> list[Invoice]:
        bill = session.get(ElectricityBill, electricity_bill_id)
        if bill is None:
            raise ElectricityBillNotFoundError(electricity_bill_id)
        if bill.property_id != property_id:
            raise ElectricityBillPropertyMismatchError()

        property_obj = session.get(Property, property_id)
        if property_obj is None:
            raise PropertyNotFoundError(property_id)
        administrators = list(property_obj.administrators)
        if not administrators:
            raise PropertyNoAdministratorsError()
        if actor_id is not None and session.get(User, actor_id) is None:
            raise UserNotFoundError(actor_id)

        service_charges = session.execute(
            select(ServiceCharges).where(ServiceCharges.electricity_bill_id == bill.id)
        ).scalar_one_or_none()

        period_date = date(year, month, 1)
        active_rentals = self._find_active_rentals(session, property_id, period_date)

        admin_rentals = self._administrator_targets(administrators, active_rentals)
        target_ids = {rental.id for rental in admin_rentals.values()}
        occupant_rentals = [r for r in active_rentals if r.id not in target_ids]

        consumptions = ConsumptionResolver(session).resolve_many(
            [r.id for r in occupant_rentals], month, year
        )

        headcount = len(occupant_rentals) + len(administrators)
        allocation = self.allocator.allocate(
            bill=bill,
            service_charges=service_charges,
            occupant_consumptions=consumptions,
            headcount=headcount,
            number_of_administrators=len(administrators),
        )
        water_cost_per_person = self.allocator.split_water_cost(water_cost, headcount)

        logger.debug(
            "Allocation for bill %d: cost_per_kwh=%s headcount=%d occupant_kwh=%s "
            "self_consumption=%s per_admin=%s",
            bill.id,
            allocation.cost_per_kwh,
            headcount,
            allocation.total_occupant_consumption,
            allocation.self_consumption,
            allocation.self_consumption_per_admin,
        )

        parties = [
            BillableParty(PartyKind.OCCUPANT, r.user_id, r.id, allocation.occupant_costs[r.id])
            for r in occupant_rentals
        ]
        for admin in administrators:
            rental = admin_rentals.get(admin.id)
            if rental is None:
                logger.warning(
                    "Administrator %d has no active rental in property %d, not invoiced",
                    admin.id,
                    property_id,
                )
                continue
            parties.append(
                BillableParty(
                    PartyKind.ADMINISTRATOR, admin.id, rental.id, allocation.administrator_cost
                )
            )

        writer = InvoiceWriter(session, created_by_id=actor_id)
        created: list[Invoice] = []
        for party in parties:
            invoice = writer.write(
                rental_id=party.rental_id,
                month=month,
                year=year,
                water_cost=water_cost_per_person,
                energy_cost=party.energy.energy_cost,
            )
            if invoice is not None:
                created.append(invoice)

        skipped = len(parties) - len(created)
        if created:
            AuditService.log_invoice_run(
                session,
                bill_id=bill.id,
                property_id=property_id,
                month=month,
                year=year,
                created=created,
                skipped=skipped,
                actor_id=actor_id,
            )

        logger.info(
            "Generated %d invoices for property %d (%02d/%d), %d already invoiced",
            len(created),
            property_id,
            month,
            year,
            skipped,
        )
        return created

    @staticmethod
    def _administrator_targets(
        administrators: list[User], active_rentals: list[Rental]
    ) -> dict[int, Rental]:
        """Pick the rental each administrator's self-consumption share is invoiced on.

        That is the administrator's earliest active rental. Any further rental
        they hold is billed like an occupant's, on its own metered kWh.
        """
        admin_ids = {admin.id for admin in administrators}
        targets: dict[int, Rental] = {}
        for rental in active_rentals:
            if rental.user_id in admin_ids:
                targets.setdefault(rental.user_id, rental)
        return targets

    @staticmethod
    def _find_active_rentals(session: Session, property_id: int, on_date: date) -> list[Rental]:
        stmt = (
            select(Rental)
            .where(
                Rental.property_id == property_id,
                Rental.start_date <= on_date,
                or_(Rental.end_date.is_(None), Rental.end_date >= on_date),
            )
            .order_by(Rental.start_date.asc(), Rental.id.asc())
        )
        return list(session.execute(stmt).scalars().all())


__all__ = ["InvoiceGenerationService", "BillableParty", "PartyKind"]
