"""Property ORM model for shared houses billed as one electricity supply."""

from sqlalchemy import Column, ForeignKey, String, Table
from sqlalchemy.orm import Mapped, mapped_column, relationship

from billing.models import Base, BaseModel

property_administrators = Table(
    "property_administrators",
    Base.metadata,
    Column("property_id", ForeignKey("properties.id", ondelete="CASCADE"), primary_key=True),
    Column("user_id", ForeignKey("users.id", ondelete="CASCADE"), primary_key=True),
)


class Property(Base, BaseModel):
    """Model representing a shared property with its administrators.

    Every invoice generation run needs at least one administrator: the
    self-consumption remainder of the property's electricity bill is split
    across them.
    """

    __tablename__ = "properties"

    name: Mapped[str] = mapped_column(String(100), nullable=False)
    address: Mapped[str] = mapped_column(String(255), nullable=False, default="")

    # Relationships
    administrators: Mapped[list["User"]] = relationship(  # noqa: F821
        "User",
        secondary=property_administrators,
        back_populates="administered_properties",
        order_by="User.id",
    )
    rentals: Mapped[list["Rental"]] = relationship(  # noqa: F821
        "Rental",
        back_populates="property",
        cascade="all, delete-orphan",
    )
    electricity_bills: Mapped[list["ElectricityBill"]] = relationship(  # noqa: F821
        "ElectricityBill",
        back_populates="billed_property",
        cascade="all, delete-orphan",
    )

    def is_administrator(self, user_id: int) -> bool:
        """Check whether the user administers this property."""
        return any(admin.id == user_id for admin in self.administrators)

    def __repr__(self) -> str:
        return f"<Property(id={self.id}, name={self.name!r}, address={self.address!r})>"


__all__ = ["Property", "property_administrators"]
