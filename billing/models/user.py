"""User ORM model for tenants and property administrators."""

from sqlalchemy import String
from sqlalchemy.orm import Mapped, mapped_column, relationship

from billing.models import Base, BaseModel


class User(Base, BaseModel):
    """
    Any person known to the system.

    A user becomes a tenant through a Rental and an administrator through the
    property_administrators association; both roles can be held at once.
    """

    __tablename__ = "users"

    name: Mapped[str] = mapped_column(String(255), nullable=False)
    email: Mapped[str] = mapped_column(
        String(255),
        nullable=False,
        unique=True,
        index=True,
        comment="Login email - unique identifier",
    )

    # Relationships
    rentals: Mapped[list["Rental"]] = relationship(  # noqa: F821
        "Rental",
        back_populates="user",
        foreign_keys="Rental.user_id",
    )
    administered_properties: Mapped[list["Property"]] = relationship(  # noqa: F821
        "Property",
        secondary="property_administrators",
        back_populates="administrators",
    )

    def __repr__(self) -> str:
        return f"<User(id={self.id}, name={self.name!r}, email={self.email!r})>"


__all__ = ["User"]
