"""Unit tests for Consumption and Rental period helpers."""

from datetime import date
from decimal import Decimal

from billing.models.consumption import Consumption
from billing.models.rental import Rental


class TestConsumptionForPeriod:
    def test_difference_of_readings(self):
        consumption = Consumption(
            rental_id=1,
            month=3,
            year=2025,
            current_reading=Decimal("1300"),
            previous_reading=Decimal("1000"),
        )

        assert consumption.consumption_for_period() == Decimal("300")

    def test_without_previous_reading(self):
        consumption = Consumption(rental_id=1, month=3, year=2025, current_reading=Decimal("200"))

        assert consumption.consumption_for_period() == Decimal("200")

    def test_meter_reset_never_negative(self):
        consumption = Consumption(
            rental_id=1,
            month=3,
            year=2025,
            current_reading=Decimal("50"),
            previous_reading=Decimal("9950"),
        )

        assert consumption.consumption_for_period() == Decimal("0")


class TestRentalIsActiveOn:
    def test_open_ended_rental(self):
        rental = Rental(user_id=1, property_id=1, start_date=date(2024, 1, 1), end_date=None)

        assert rental.is_active_on(date(2030, 1, 1))
        assert not rental.is_active_on(date(2023, 12, 31))

    def test_bounds_are_inclusive(self):
        rental = Rental(
            user_id=1, property_id=1, start_date=date(2025, 3, 1), end_date=date(2025, 3, 1)
        )

        assert rental.is_active_on(date(2025, 3, 1))
        assert not rental.is_active_on(date(2025, 3, 2))
