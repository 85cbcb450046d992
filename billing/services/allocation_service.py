"""Cost allocation engine for prorating a property's electricity bill.

Each billable party pays:
- Occupants: their metered kWh at the bill's cost per kWh
- Administrators: an equal share of the self-consumption remainder
  (bill kWh not covered by occupant meters) at the same cost per kWh
- Everyone: an equal share of the service charges and of the water cost

Tax order is fixed: IGV applies to energy plus pre-tax services, then the
after-tax services are added:

    energy_cost = (kwh * cost_per_kwh + services_before_tax) * (1 + IGV) + services_after_tax
"""

from decimal import Decimal
from typing import Mapping, NamedTuple

from billing.errors import InvalidHeadcountError, PropertyNoAdministratorsError
from billing.models.electricity_bill import ElectricityBill
from billing.models.service_charges import ServiceCharges

IGV_RATE = Decimal("0.18")

ZERO = Decimal("0")


class ServiceChargeShares(NamedTuple):
    """Per-person components of the bill's service charges."""

    before_tax_per_person: Decimal
    after_tax_per_person: Decimal


class EnergyCost(NamedTuple):
    """Energy charge of one billable party, with its intermediate amounts."""

    consumption_kwh: Decimal
    before_tax: Decimal
    with_tax: Decimal
    energy_cost: Decimal


class Allocation(NamedTuple):
    """Outcome of prorating one electricity bill."""

    cost_per_kwh: Decimal
    headcount: int
    total_occupant_consumption: Decimal
    self_consumption: Decimal
    self_consumption_per_admin: Decimal
    services: ServiceChargeShares
    occupant_costs: dict[int, EnergyCost]
    administrator_cost: EnergyCost


class ServiceChargeAggregator:
    """Splits service charges into per-person pre-tax and post-tax parts."""

    def split(self, service_charges: ServiceCharges | None, headcount: int) -> ServiceChargeShares:
        """Divide the bill's service charges equally.

        A bill without service charges contributes zero to both parts. The
        after-tax part keeps its sign: negative roundings are credited.

        Raises:
            InvalidHeadcountError: If headcount <= 0
        """
        if headcount <= 0:
            raise InvalidHeadcountError(headcount)
        if service_charges is None:
            return ServiceChargeShares(ZERO, ZERO)
        return ServiceChargeShares(
            before_tax_per_person=service_charges.total_before_tax_per_person(headcount),
            after_tax_per_person=service_charges.total_after_tax_per_person(headcount),
        )


class CostAllocator:
    """Prorates an electricity bill across occupants and administrators.

    Pure computation: no database access, no side effects.
    """

    def __init__(
        self,
        igv_rate: Decimal = IGV_RATE,
        aggregator: ServiceChargeAggregator | None = None,
    ):
        self.igv_rate = Decimal(str(igv_rate))
        self.aggregator = aggregator or ServiceChargeAggregator()

    def energy_cost(
        self,
        consumption_kwh: Decimal,
        cost_per_kwh: Decimal,
        services: ServiceChargeShares,
    ) -> EnergyCost:
        """Apply the fixed tax order to one party's consumption."""
        before_tax = consumption_kwh * cost_per_kwh + services.before_tax_per_person
        with_tax = before_tax * (Decimal("1") + self.igv_rate)
        return EnergyCost(
            consumption_kwh=consumption_kwh,
            before_tax=before_tax,
            with_tax=with_tax,
            energy_cost=with_tax + services.after_tax_per_person,
        )

    def allocate(
        self,
        bill: ElectricityBill,
        service_charges: ServiceCharges | None,
        occupant_consumptions: Mapping[int, Decimal],
        headcount: int,
        number_of_administrators: int,
        cost_per_kwh: Decimal | None = None,
    ) -> Allocation:
        """Compute every party's energy cost for a bill.

        Args:
            bill: Property electricity bill
            service_charges: Service charges of the bill, if any
            occupant_consumptions: rental_id -> kWh consumed in the period
            headcount: Occupants plus administrators
            number_of_administrators: Administrators sharing self-consumption
            cost_per_kwh: Override of bill.cost_per_kwh (optional)

        Returns:
            Allocation with one EnergyCost per occupant rental and the
            EnergyCost every administrator pays

        Raises:
            InvalidHeadcountError: If headcount <= 0
            PropertyNoAdministratorsError: If number_of_administrators <= 0
        """
        if headcount <= 0:
            raise InvalidHeadcountError(headcount)
        if number_of_administrators <= 0:
            raise PropertyNoAdministratorsError()

        if cost_per_kwh is None:
            cost_per_kwh = bill.cost_per_kwh

        total_occupant_consumption = sum(
            (Decimal(kwh) for kwh in occupant_consumptions.values()), ZERO
        )
        self_consumption = max(Decimal(bill.total_kwh) - total_occupant_consumption, ZERO)
        self_consumption_per_admin = self_consumption / number_of_administrators

        services = self.aggregator.split(service_charges, headcount)

        occupant_costs = {
            rental_id: self.energy_cost(Decimal(kwh), cost_per_kwh, services)
            for rental_id, kwh in occupant_consumptions.items()
        }
        administrator_cost = self.energy_cost(self_consumption_per_admin, cost_per_kwh, services)

        return Allocation(
            cost_per_kwh=cost_per_kwh,
            headcount=headcount,
            total_occupant_consumption=total_occupant_consumption,
            self_consumption=self_consumption,
            self_consumption_per_admin=self_consumption_per_admin,
            services=services,
            occupant_costs=occupant_costs,
            administrator_cost=administrator_cost,
        )

    def split_water_cost(self, water_cost: Decimal, headcount: int) -> Decimal:
        """Water is shared equally regardless of consumption.

        Raises:
            InvalidHeadcountError: If headcount <= 0
        """
        if headcount <= 0:
            raise InvalidHeadcountError(headcount)
        return Decimal(str(water_cost)) / headcount


__all__ = [
    "IGV_RATE",
    "Allocation",
    "CostAllocator",
    "EnergyCost",
    "ServiceChargeAggregator",
    "ServiceChargeShares",
]
