"""Consumption ORM model: a rental's metered electricity for one month."""

from decimal import Decimal

from sqlalchemy import ForeignKey, Integer, Numeric, UniqueConstraint
from sqlalchemy.orm import Mapped, mapped_column, relationship

from billing.models import Base, BaseModel


class Consumption(Base, BaseModel):
    """
    Sub-meter reading of a rental for a (month, year) billing period.

    Attributes:
        rental_id: Rental the meter belongs to
        month: Billing month (1-12)
        year: Billing year
        current_reading: Meter value at the end of the period (kWh)
        previous_reading: Meter value at the end of the prior period, if known
    """

    __tablename__ = "consumptions"

    rental_id: Mapped[int] = mapped_column(
        ForeignKey("rentals.id", ondelete="CASCADE"),
        nullable=False,
        index=True,
    )
    month: Mapped[int] = mapped_column(Integer, nullable=False)
    year: Mapped[int] = mapped_column(Integer, nullable=False)
    current_reading: Mapped[Decimal] = mapped_column(Numeric(12, 2), nullable=False)
    previous_reading: Mapped[Decimal | None] = mapped_column(Numeric(12, 2), nullable=True)

    rental: Mapped["Rental"] = relationship(  # noqa: F821
        "Rental",
        back_populates="consumptions",
    )

    __table_args__ = (
        UniqueConstraint("rental_id", "month", "year", name="uq_consumption_rental_period"),
    )

    def consumption_for_period(self) -> Decimal:
        """kWh consumed during the period, never negative.

        Without a previous reading the current reading is the whole consumption.
        """
        current = Decimal(self.current_reading)
        if self.previous_reading is None:
            return current
        return max(current - Decimal(self.previous_reading), Decimal("0"))

    def __repr__(self) -> str:
        return (
            f"<Consumption(id={self.id}, rental_id={self.rental_id}, "
            f"period={self.month:02d}/{self.year}, current={self.current_reading}, "
            f"previous={self.previous_reading})>"
        )


__all__ = ["Consumption"]
