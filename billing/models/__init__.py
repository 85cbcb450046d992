"""Declarative base for the billing tables and the model exports."""

from datetime import datetime, timezone

from sqlalchemy import DateTime
from sqlalchemy.orm import Mapped, declarative_base, mapped_column

Base = declarative_base()


def utc_now() -> datetime:
    """Timezone-aware current time, used for every timestamp column."""
    return datetime.now(timezone.utc)


class BaseModel:
    """Surrogate key plus creation/modification timestamps."""

    id: Mapped[int] = mapped_column(primary_key=True, autoincrement=True)
    created_at: Mapped[datetime] = mapped_column(
        DateTime(timezone=True), default=utc_now, nullable=False
    )
    updated_at: Mapped[datetime] = mapped_column(
        DateTime(timezone=True), default=utc_now, onupdate=utc_now, nullable=False
    )


# Model modules import Base from here, so they are registered last
from billing.models.audit_log import AuditLog  # noqa: E402
from billing.models.consumption import Consumption  # noqa: E402
from billing.models.electricity_bill import ElectricityBill  # noqa: E402
from billing.models.invoice import Invoice, InvoiceStatus  # noqa: E402
from billing.models.property import Property, property_administrators  # noqa: E402
from billing.models.rental import Rental  # noqa: E402
from billing.models.service_charges import ServiceCharges  # noqa: E402
from billing.models.user import User  # noqa: E402

__all__ = [
    "Base",
    "BaseModel",
    "AuditLog",
    "Consumption",
    "ElectricityBill",
    "Invoice",
    "InvoiceStatus",
    "Property",
    "property_administrators",
    "Rental",
    "ServiceCharges",
    "User",
]
