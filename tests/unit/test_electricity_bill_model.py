"""Unit tests for the ElectricityBill model."""

from datetime import date
from decimal import Decimal

import pytest

from billing.errors import InvalidElectricityBillError, InvalidPeriodError
from billing.models.electricity_bill import ElectricityBill


def make_bill(**overrides) -> ElectricityBill:
    values = {
        "property_id": 1,
        "period_start": date(2025, 3, 1),
        "period_end": date(2025, 3, 31),
        "total_kwh": Decimal("1000"),
        "total_cost": Decimal("500.00"),
    }
    values.update(overrides)
    return ElectricityBill(**values)


class TestElectricityBill:
    def test_cost_per_kwh(self):
        assert make_bill().cost_per_kwh == Decimal("0.5")

    def test_amounts_coerced_to_decimal(self):
        bill = make_bill(total_kwh=250, total_cost="125.50")

        assert bill.total_kwh == Decimal("250")
        assert bill.total_cost == Decimal("125.50")

    def test_month_and_year_from_period_start(self):
        bill = make_bill()

        assert bill.month == 3
        assert bill.year == 2025

    def test_includes_date(self):
        bill = make_bill()

        assert bill.includes_date(date(2025, 3, 1))
        assert bill.includes_date(date(2025, 3, 31))
        assert not bill.includes_date(date(2025, 4, 1))

    def test_overlaps_with(self):
        march = make_bill()
        late_march = make_bill(period_start=date(2025, 3, 15), period_end=date(2025, 4, 14))
        april = make_bill(period_start=date(2025, 4, 1), period_end=date(2025, 4, 30))

        assert march.overlaps_with(late_march)
        assert not march.overlaps_with(april)


class TestElectricityBillValidation:
    @pytest.mark.parametrize("total_kwh", [Decimal("0"), Decimal("-5")])
    def test_non_positive_kwh_rejected(self, total_kwh):
        with pytest.raises(InvalidElectricityBillError, match="Total kWh must be greater than zero"):
            make_bill(total_kwh=total_kwh)

    @pytest.mark.parametrize("total_cost", [Decimal("0"), Decimal("-0.01")])
    def test_non_positive_cost_rejected(self, total_cost):
        with pytest.raises(InvalidElectricityBillError, match="Total cost must be greater than zero"):
            make_bill(total_cost=total_cost)

    def test_period_end_must_follow_start(self):
        with pytest.raises(InvalidPeriodError):
            make_bill(period_start=date(2025, 3, 31), period_end=date(2025, 3, 1))

    def test_single_day_period_rejected(self):
        with pytest.raises(InvalidPeriodError):
            make_bill(period_end=date(2025, 3, 1))
