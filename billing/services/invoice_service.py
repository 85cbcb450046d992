"""Invoice persistence: idempotent writes and read access for tenants/admins."""

import logging
from decimal import Decimal

from sqlalchemy import select
from sqlalchemy.orm import Session

from billing.errors import InvoiceAccessDeniedError, InvoiceNotFoundError
from billing.models.invoice import Invoice, InvoiceStatus
from billing.models.rental import Rental

logger = logging.getLogger(__name__)


class InvoiceWriter:
    """Writes invoices inside the caller's transaction.

    An existing invoice for (rental_id, month, year) is never updated or
    duplicated: writing it again is a no-op.
    """

    def __init__(self, session: Session, created_by_id: int | None = None):
        """Initialize with the session of the running transaction.

        Args:
            session: SQLAlchemy session
            created_by_id: Administrator generating the invoices (optional)
        """
        self.session = session
        self.created_by_id = created_by_id

    def find_existing(self, rental_id: int, month: int, year: int) -> Invoice | None:
        """Get the invoice of a rental for a period, if any."""
        stmt = select(Invoice).where(
            Invoice.rental_id == rental_id,
            Invoice.month == month,
            Invoice.year == year,
        )
        return self.session.execute(stmt).scalar_one_or_none()

    def write(
        self,
        rental_id: int,
        month: int,
        year: int,
        water_cost: Decimal,
        energy_cost: Decimal,
    ) -> Invoice | None:
        """Create the invoice of a rental for a period unless one exists.

        Returns:
            The new invoice (flushed, with id), or None when the period was
            already invoiced for this rental
        """
        existing = self.find_existing(rental_id, month, year)
        if existing is not None:
            logger.debug(
                "Invoice %d already exists for rental %d (%02d/%d), skipping",
                existing.id,
                rental_id,
                month,
                year,
            )
            return None

        invoice = Invoice.issue(
            rental_id=rental_id,
            month=month,
            year=year,
            water_cost=water_cost,
            energy_cost=energy_cost,
            created_by_id=self.created_by_id,
        )
        self.session.add(invoice)
        self.session.flush()  # Ensure ID is assigned
        return invoice


class InvoiceQueryService:
    """Read access to invoices for tenants and administrators."""

    def __init__(self, session: Session):
        self.session = session

    def get_invoice(
        self,
        invoice_id: int,
        user_id: int | None = None,
        is_admin: bool = False,
    ) -> Invoice:
        """Get an invoice by ID with permission validation.

        Administrators can read any invoice; other users only the invoices of
        their own rentals.

        Raises:
            InvoiceNotFoundError: If the invoice does not exist
            InvoiceAccessDeniedError: If the user does not hold the invoice's rental
        """
        invoice = self.session.get(Invoice, invoice_id)
        if invoice is None:
            raise InvoiceNotFoundError(invoice_id)

        if not is_admin and user_id is not None and invoice.rental.user_id != user_id:
            logger.warning("User %d denied access to invoice %d", user_id, invoice_id)
            raise InvoiceAccessDeniedError()

        return invoice

    def list_user_invoices(
        self,
        user_id: int,
        status: InvoiceStatus | None = None,
    ) -> list[Invoice]:
        """List invoices of all rentals held by a user, newest period first.

        Args:
            user_id: Tenant or administrator user ID
            status: Optional status filter (e.g. UNPAID for pending invoices)
        """
        stmt = (
            select(Invoice)
            .join(Rental, Rental.id == Invoice.rental_id)
            .where(Rental.user_id == user_id)
            .order_by(Invoice.year.desc(), Invoice.month.desc(), Invoice.id.asc())
        )
        if status is not None:
            stmt = stmt.where(Invoice.status == status)
        return list(self.session.execute(stmt).scalars().all())


__all__ = ["InvoiceWriter", "InvoiceQueryService"]
