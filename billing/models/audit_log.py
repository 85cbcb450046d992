"""Audit log model for invoice runs and meter reading entry."""

from typing import Any

from sqlalchemy import JSON, ForeignKey, Index, String
from sqlalchemy.orm import Mapped, mapped_column

from billing.models import Base, BaseModel

ENTITY_ELECTRICITY_BILL = "electricity_bill"
ENTITY_CONSUMPTION = "consumption"

ACTION_GENERATE_INVOICES = "generate_invoices"
ACTION_CREATE = "create"
ACTION_UPDATE = "update"


class AuditLog(Base, BaseModel):
    """One audited billing action.

    A generation run that created invoices is recorded against its
    electricity bill; a meter reading entry against its Consumption row.
    Entries are written in the transaction of the change they describe.
    """

    __tablename__ = "audit_logs"

    entity_type: Mapped[str] = mapped_column(String(50))
    """ENTITY_ELECTRICITY_BILL or ENTITY_CONSUMPTION."""

    entity_id: Mapped[int] = mapped_column()

    action: Mapped[str] = mapped_column(String(50))
    """ACTION_GENERATE_INVOICES for runs; ACTION_CREATE or ACTION_UPDATE for readings."""

    actor_id: Mapped[int | None] = mapped_column(ForeignKey("users.id"), nullable=True)
    """User who triggered the action. None for scheduled runs."""

    changes: Mapped[dict[str, Any] | None] = mapped_column(JSON, nullable=True)
    """Outcome snapshot, e.g. {"month": 3, "year": 2025, "invoice_ids": [4, 5]}."""

    __table_args__ = (Index("idx_audit_entity", "entity_type", "entity_id"),)

    @property
    def invoice_ids(self) -> list[int]:
        """Invoices created by an audited generation run (empty for other actions)."""
        return list((self.changes or {}).get("invoice_ids", []))

    def __repr__(self) -> str:
        return (
            f"<AuditLog(id={self.id}, {self.entity_type}#{self.entity_id}, "
            f"action={self.action}, actor_id={self.actor_id})>"
        )


__all__ = [
    "AuditLog",
    "ENTITY_ELECTRICITY_BILL",
    "ENTITY_CONSUMPTION",
    "ACTION_GENERATE_INVOICES",
    "ACTION_CREATE",
    "ACTION_UPDATE",
]
