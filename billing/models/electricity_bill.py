"""Electricity bill ORM model: one supplier bill for a whole property."""

from datetime import date
from decimal import Decimal

from sqlalchemy import Date, ForeignKey, Index, Numeric, String
from sqlalchemy.orm import Mapped, mapped_column, relationship

from billing.errors import InvalidElectricityBillError, InvalidPeriodError
from billing.models import Base, BaseModel


class ElectricityBill(Base, BaseModel):
    """
    Property-level electricity bill resolved from the supplier's document.

    Attributes:
        property_id: Property the bill belongs to
        period_start: First day covered by the bill
        period_end: Last day covered by the bill (strictly after period_start)
        total_kwh: Metered kWh of the property's supply (> 0)
        total_cost: Energy cost of the bill (> 0)
        file_url: Optional reference to the source document

    Instances are validated on construction and never modified afterwards.
    """

    __tablename__ = "electricity_bills"

    property_id: Mapped[int] = mapped_column(
        ForeignKey("properties.id"),
        nullable=False,
        index=True,
    )
    period_start: Mapped[date] = mapped_column(Date, nullable=False)
    period_end: Mapped[date] = mapped_column(Date, nullable=False)
    total_kwh: Mapped[Decimal] = mapped_column(
        Numeric(12, 2),
        nullable=False,
        comment="Total metered consumption in kWh",
    )
    total_cost: Mapped[Decimal] = mapped_column(
        Numeric(10, 2),
        nullable=False,
        comment="Total energy cost of the bill",
    )
    file_url: Mapped[str | None] = mapped_column(
        String(500),
        nullable=True,
        comment="Reference to the uploaded bill document",
    )

    # Relationships
    billed_property: Mapped["Property"] = relationship(  # noqa: F821
        "Property",
        back_populates="electricity_bills",
    )
    service_charges: Mapped["ServiceCharges | None"] = relationship(  # noqa: F821
        "ServiceCharges",
        back_populates="electricity_bill",
        uselist=False,
        cascade="all, delete-orphan",
    )

    __table_args__ = (Index("idx_electricity_bill_property_period", "property_id", "period_start"),)

    def __init__(self, **kwargs):
        for field in ("total_kwh", "total_cost"):
            if kwargs.get(field) is not None:
                kwargs[field] = Decimal(str(kwargs[field]))

        total_kwh = kwargs.get("total_kwh")
        total_cost = kwargs.get("total_cost")
        if total_kwh is None or total_kwh <= 0:
            raise InvalidElectricityBillError("Total kWh must be greater than zero")
        if total_cost is None or total_cost <= 0:
            raise InvalidElectricityBillError("Total cost must be greater than zero")

        period_start = kwargs.get("period_start")
        period_end = kwargs.get("period_end")
        if period_start is None or period_end is None or period_start >= period_end:
            raise InvalidPeriodError()

        super().__init__(**kwargs)

    @property
    def cost_per_kwh(self) -> Decimal:
        """Cost of one kWh: total_cost / total_kwh."""
        return Decimal(self.total_cost) / Decimal(self.total_kwh)

    @property
    def month(self) -> int:
        """Billing month, taken from period_start (1-12)."""
        return self.period_start.month

    @property
    def year(self) -> int:
        return self.period_start.year

    def includes_date(self, on_date: date) -> bool:
        return self.period_start <= on_date <= self.period_end

    def overlaps_with(self, other: "ElectricityBill") -> bool:
        return self.period_start <= other.period_end and self.period_end >= other.period_start

    def __repr__(self) -> str:
        return (
            f"<ElectricityBill(id={self.id}, property_id={self.property_id}, "
            f"period={self.period_start}..{self.period_end}, "
            f"total_kwh={self.total_kwh}, total_cost={self.total_cost})>"
        )


__all__ = ["ElectricityBill"]
