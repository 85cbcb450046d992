"""Invoice ORM model: a rental's water and energy charges for one month."""

from datetime import datetime
from decimal import ROUND_HALF_UP, Decimal
from enum import Enum

from sqlalchemy import DateTime, ForeignKey, Index, Integer, Numeric, UniqueConstraint
from sqlalchemy import Enum as SQLEnum
from sqlalchemy.orm import Mapped, mapped_column, relationship

from billing.models import Base, BaseModel

CENT = Decimal("0.01")


class InvoiceStatus(str, Enum):
    """Payment status of an invoice."""

    UNPAID = "UNPAID"
    PAID = "PAID"


class Invoice(Base, BaseModel):
    """Model representing the utilities invoice of one rental for a period.

    (rental_id, month, year) is unique: generation for a period that is
    already invoiced skips the rental instead of creating a second row.
    Only a payment recorder flips the status to PAID.
    """

    __tablename__ = "invoices"

    rental_id: Mapped[int] = mapped_column(
        ForeignKey("rentals.id"),
        nullable=False,
        index=True,
    )
    month: Mapped[int] = mapped_column(Integer, nullable=False)
    year: Mapped[int] = mapped_column(Integer, nullable=False)
    water_cost: Mapped[Decimal] = mapped_column(Numeric(10, 2), nullable=False)
    energy_cost: Mapped[Decimal] = mapped_column(Numeric(10, 2), nullable=False)
    total_cost: Mapped[Decimal] = mapped_column(
        Numeric(10, 2),
        nullable=False,
        comment="water_cost + energy_cost",
    )
    status: Mapped[InvoiceStatus] = mapped_column(
        SQLEnum(InvoiceStatus),
        nullable=False,
        default=InvoiceStatus.UNPAID,
    )
    paid_at: Mapped[datetime | None] = mapped_column(DateTime(timezone=True), nullable=True)
    created_by_id: Mapped[int | None] = mapped_column(
        ForeignKey("users.id"),
        nullable=True,
        comment="Administrator who generated the invoice",
    )

    rental: Mapped["Rental"] = relationship(  # noqa: F821
        "Rental",
        back_populates="invoices",
    )

    __table_args__ = (
        UniqueConstraint("rental_id", "month", "year", name="uq_invoice_rental_period"),
        Index("idx_invoice_period", "year", "month"),
    )

    @classmethod
    def issue(
        cls,
        rental_id: int,
        month: int,
        year: int,
        water_cost: Decimal,
        energy_cost: Decimal,
        created_by_id: int | None = None,
    ) -> "Invoice":
        """Build a new UNPAID invoice with amounts rounded to cents.

        total_cost is the sum of the rounded parts so it always matches them.
        """
        water = Decimal(water_cost).quantize(CENT, rounding=ROUND_HALF_UP)
        energy = Decimal(energy_cost).quantize(CENT, rounding=ROUND_HALF_UP)
        return cls(
            rental_id=rental_id,
            month=month,
            year=year,
            water_cost=water,
            energy_cost=energy,
            total_cost=water + energy,
            status=InvoiceStatus.UNPAID,
            paid_at=None,
            created_by_id=created_by_id,
        )

    def is_paid(self) -> bool:
        return self.status == InvoiceStatus.PAID

    def to_dict(self) -> dict:
        """Serialize the fields exposed to callers."""
        return {
            "id": self.id,
            "rental_id": self.rental_id,
            "month": self.month,
            "year": self.year,
            "water_cost": self.water_cost,
            "energy_cost": self.energy_cost,
            "total_cost": self.total_cost,
            "status": self.status.value,
            "paid_at": self.paid_at,
        }

    def __repr__(self) -> str:
        return (
            f"<Invoice(id={self.id}, rental_id={self.rental_id}, "
            f"period={self.month:02d}/{self.year}, total_cost={self.total_cost}, "
            f"status={self.status})>"
        )


__all__ = ["Invoice", "InvoiceStatus"]
