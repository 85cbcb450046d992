"""Audit trail of invoice runs and meter reading entry.

Entries are only added to the caller's session. Committing is left to the
transaction that made the change, so an entry rolls back with it.
"""

from sqlalchemy.orm import Session

from billing.models.audit_log import (
    ACTION_CREATE,
    ACTION_GENERATE_INVOICES,
    ACTION_UPDATE,
    ENTITY_CONSUMPTION,
    ENTITY_ELECTRICITY_BILL,
    AuditLog,
)
from billing.models.consumption import Consumption
from billing.models.invoice import Invoice


class AuditService:
    """Builds AuditLog entries for billing actions."""

    @staticmethod
    def log(
        db: Session,
        entity_type: str,
        entity_id: int,
        action: str,
        actor_id: int | None = None,
        changes: dict | None = None,
    ) -> AuditLog:
        """Add an audit entry to the session without flushing it.

        Args:
            db: Session of the running transaction
            entity_type: ENTITY_ELECTRICITY_BILL or ENTITY_CONSUMPTION
            entity_id: Primary key of the entity
            action: Action performed on it
            actor_id: User who performed the action (optional)
            changes: JSON snapshot of the outcome (optional)
        """
        audit = AuditLog(
            entity_type=entity_type,
            entity_id=entity_id,
            action=action,
            actor_id=actor_id,
            changes=changes,
        )
        db.add(audit)
        return audit

    @classmethod
    def log_invoice_run(
        cls,
        db: Session,
        bill_id: int,
        property_id: int,
        month: int,
        year: int,
        created: list[Invoice],
        skipped: int,
        actor_id: int | None = None,
    ) -> AuditLog:
        """Record a generation run against the electricity bill it prorated."""
        return cls.log(
            db,
            entity_type=ENTITY_ELECTRICITY_BILL,
            entity_id=bill_id,
            action=ACTION_GENERATE_INVOICES,
            actor_id=actor_id,
            changes={
                "property_id": property_id,
                "month": month,
                "year": year,
                "invoice_ids": [invoice.id for invoice in created],
                "skipped": skipped,
            },
        )

    @classmethod
    def log_reading(
        cls,
        db: Session,
        consumption: Consumption,
        created: bool,
        actor_id: int | None = None,
    ) -> AuditLog:
        """Record a meter reading; the Consumption must already be flushed."""
        previous = consumption.previous_reading
        return cls.log(
            db,
            entity_type=ENTITY_CONSUMPTION,
            entity_id=consumption.id,
            action=ACTION_CREATE if created else ACTION_UPDATE,
            actor_id=actor_id,
            changes={
                "rental_id": consumption.rental_id,
                "period": f"{consumption.year:04d}-{consumption.month:02d}",
                "current_reading": str(consumption.current_reading),
                "previous_reading": str(previous) if previous is not None else None,
            },
        )


__all__ = ["AuditService"]
