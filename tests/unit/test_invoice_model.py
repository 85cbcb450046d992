"""Unit tests for the Invoice model."""

from decimal import Decimal

from billing.models.invoice import Invoice, InvoiceStatus


class TestInvoiceIssue:
    def test_new_invoice_is_unpaid(self):
        invoice = Invoice.issue(
            rental_id=1, month=3, year=2025, water_cost=Decimal("100"), energy_cost=Decimal("191.8")
        )

        assert invoice.status == InvoiceStatus.UNPAID
        assert invoice.paid_at is None
        assert not invoice.is_paid()

    def test_amounts_rounded_to_cents(self):
        invoice = Invoice.issue(
            rental_id=1,
            month=3,
            year=2025,
            water_cost=Decimal("100") / 3,
            energy_cost=Decimal("10.005"),
        )

        assert invoice.water_cost == Decimal("33.33")
        assert invoice.energy_cost == Decimal("10.01")

    def test_total_is_sum_of_rounded_parts(self):
        invoice = Invoice.issue(
            rental_id=1,
            month=3,
            year=2025,
            water_cost=Decimal("100") / 3,
            energy_cost=Decimal("200") / 3,
        )

        assert invoice.total_cost == invoice.water_cost + invoice.energy_cost
        assert invoice.total_cost == Decimal("100.00")

    def test_negative_energy_cost_allowed(self):
        """Roundings credited after tax can exceed a tiny energy charge."""
        invoice = Invoice.issue(
            rental_id=1, month=3, year=2025, water_cost=Decimal("0"), energy_cost=Decimal("-1.5")
        )

        assert invoice.energy_cost == Decimal("-1.50")
        assert invoice.total_cost == Decimal("-1.50")

    def test_created_by(self):
        invoice = Invoice.issue(
            rental_id=1,
            month=3,
            year=2025,
            water_cost=Decimal("0"),
            energy_cost=Decimal("0"),
            created_by_id=7,
        )

        assert invoice.created_by_id == 7

    def test_to_dict(self):
        invoice = Invoice.issue(
            rental_id=4, month=3, year=2025, water_cost=Decimal("100"), energy_cost=Decimal("191.8")
        )

        data = invoice.to_dict()

        assert data["rental_id"] == 4
        assert data["total_cost"] == Decimal("291.80")
        assert data["status"] == "UNPAID"
