"""Rental ORM model: a user's occupancy of a property over a date range."""

from datetime import date

from sqlalchemy import Date, ForeignKey, Index
from sqlalchemy.orm import Mapped, mapped_column, relationship

from billing.models import Base, BaseModel


class Rental(Base, BaseModel):
    """Occupancy of a property by a user.

    A rental is active for a billing period when the first day of the period
    falls within [start_date, end_date]; an open end_date means unbounded.
    """

    __tablename__ = "rentals"

    user_id: Mapped[int] = mapped_column(ForeignKey("users.id"), nullable=False, index=True)
    property_id: Mapped[int] = mapped_column(
        ForeignKey("properties.id"), nullable=False, index=True
    )
    start_date: Mapped[date] = mapped_column(Date, nullable=False)
    end_date: Mapped[date | None] = mapped_column(Date, nullable=True)

    # Relationships
    user: Mapped["User"] = relationship(  # noqa: F821
        "User",
        back_populates="rentals",
        foreign_keys=[user_id],
    )
    property: Mapped["Property"] = relationship(  # noqa: F821
        "Property",
        back_populates="rentals",
    )
    consumptions: Mapped[list["Consumption"]] = relationship(  # noqa: F821
        "Consumption",
        back_populates="rental",
        cascade="all, delete-orphan",
    )
    invoices: Mapped[list["Invoice"]] = relationship(  # noqa: F821
        "Invoice",
        back_populates="rental",
    )

    __table_args__ = (Index("idx_rental_property_dates", "property_id", "start_date", "end_date"),)

    def is_active_on(self, on_date: date) -> bool:
        return self.start_date <= on_date and (self.end_date is None or on_date <= self.end_date)

    def __repr__(self) -> str:
        return (
            f"<Rental(id={self.id}, user_id={self.user_id}, property_id={self.property_id}, "
            f"start_date={self.start_date}, end_date={self.end_date})>"
        )


__all__ = ["Rental"]
