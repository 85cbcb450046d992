"""Service charges ORM model: the miscellaneous lines of an electricity bill."""

from decimal import Decimal

from sqlalchemy import ForeignKey, Numeric
from sqlalchemy.orm import Mapped, mapped_column, relationship

from billing.errors import InvalidHeadcountError, InvalidServiceChargesError
from billing.models import Base, BaseModel

BEFORE_TAX_FIELDS = (
    "maintenance_and_replacement",
    "fixed_charge",
    "compensatory_interest",
    "public_lighting",
)
AFTER_TAX_FIELDS = (
    "law_contribution",
    "late_fee",
    "previous_month_rounding",
    "current_month_rounding",
)
# Roundings are the only lines a supplier bill may print as negative
NON_NEGATIVE_FIELDS = BEFORE_TAX_FIELDS + ("law_contribution", "late_fee")


def _money_column(comment: str) -> Mapped[Decimal]:
    return mapped_column(Numeric(10, 2), nullable=False, default=Decimal("0"), comment=comment)


class ServiceCharges(Base, BaseModel):
    """Service charge lines attached to one electricity bill.

    Lines split in two groups: charges subject to IGV (added to the energy
    amount before tax is applied) and charges added after tax.
    """

    __tablename__ = "service_charges"

    electricity_bill_id: Mapped[int] = mapped_column(
        ForeignKey("electricity_bills.id", ondelete="CASCADE"),
        nullable=False,
        unique=True,
    )

    # Before IGV
    maintenance_and_replacement: Mapped[Decimal] = _money_column("Maintenance and replacement")
    fixed_charge: Mapped[Decimal] = _money_column("Fixed charge")
    compensatory_interest: Mapped[Decimal] = _money_column("Compensatory interest")
    public_lighting: Mapped[Decimal] = _money_column("Public lighting")

    # After IGV
    law_contribution: Mapped[Decimal] = _money_column("Law N. 28749 contribution")
    late_fee: Mapped[Decimal] = _money_column("Late payment fee")
    previous_month_rounding: Mapped[Decimal] = _money_column("Previous month rounding")
    current_month_rounding: Mapped[Decimal] = _money_column("Current month rounding")

    electricity_bill: Mapped["ElectricityBill"] = relationship(  # noqa: F821
        "ElectricityBill",
        back_populates="service_charges",
    )

    def __init__(self, **kwargs):
        for field in BEFORE_TAX_FIELDS + AFTER_TAX_FIELDS:
            kwargs[field] = Decimal(str(kwargs.get(field) or 0))
        for field in NON_NEGATIVE_FIELDS:
            if kwargs[field] < 0:
                label = field.replace("_", " ").capitalize()
                raise InvalidServiceChargesError(f"{label} must be non-negative")
        super().__init__(**kwargs)

    def total_before_tax(self) -> Decimal:
        """Sum of the charges subject to IGV."""
        return sum((Decimal(getattr(self, f)) for f in BEFORE_TAX_FIELDS), Decimal("0"))

    def total_after_tax(self) -> Decimal:
        """Sum of the charges added after IGV. May be negative."""
        return sum((Decimal(getattr(self, f)) for f in AFTER_TAX_FIELDS), Decimal("0"))

    def total(self) -> Decimal:
        return self.total_before_tax() + self.total_after_tax()

    def total_before_tax_per_person(self, number_of_people: int) -> Decimal:
        """Before-tax total split equally.

        Raises:
            InvalidHeadcountError: If number_of_people <= 0
        """
        if number_of_people <= 0:
            raise InvalidHeadcountError(number_of_people)
        return self.total_before_tax() / number_of_people

    def total_after_tax_per_person(self, number_of_people: int) -> Decimal:
        """After-tax total split equally.

        Raises:
            InvalidHeadcountError: If number_of_people <= 0
        """
        if number_of_people <= 0:
            raise InvalidHeadcountError(number_of_people)
        return self.total_after_tax() / number_of_people

    def __repr__(self) -> str:
        return (
            f"<ServiceCharges(id={self.id}, electricity_bill_id={self.electricity_bill_id}, "
            f"before_tax={self.total_before_tax()}, after_tax={self.total_after_tax()})>"
        )


__all__ = ["ServiceCharges", "BEFORE_TAX_FIELDS", "AFTER_TAX_FIELDS"]
