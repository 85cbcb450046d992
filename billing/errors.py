"""Domain exceptions for invoice generation and billing lookups.

Every error carries a stable machine-readable code and the HTTP status the
API layer answers with, so callers never need to parse messages.
"""


class BillingError(Exception):
    """Base billing error."""

    code = "billing_error"
    http_status = 400

    def __init__(self, message: str):
        self.message = message
        super().__init__(message)


class ElectricityBillNotFoundError(BillingError):
    """Electricity bill does not exist."""

    code = "ELECTRICITY_BILL_NOT_FOUND"
    http_status = 404

    def __init__(self, bill_id: int):
        super().__init__(f"Electricity bill with ID {bill_id} not found")


class ElectricityBillPropertyMismatchError(BillingError):
    """Electricity bill belongs to a different property."""

    code = "ELECTRICITY_BILL_PROPERTY_MISMATCH"

    def __init__(self, message: str = "Electricity bill does not belong to the specified property"):
        super().__init__(message)


class PropertyNotFoundError(BillingError):
    code = "PROPERTY_NOT_FOUND"
    http_status = 404

    def __init__(self, property_id: int):
        super().__init__(f"Property with ID {property_id} not found")


class PropertyNoAdministratorsError(BillingError):
    code = "PROPERTY_NO_ADMINISTRATORS"

    def __init__(self, message: str = "Property must have at least one administrator"):
        super().__init__(message)


class InvalidHeadcountError(BillingError):
    """Equal splits need at least one billable party."""

    code = "INVALID_HEADCOUNT"

    def __init__(self, headcount: int):
        self.headcount = headcount
        super().__init__(f"Number of people must be greater than zero, got {headcount}")


class InvalidElectricityBillError(BillingError):
    code = "INVALID_ELECTRICITY_BILL"


class InvalidPeriodError(BillingError):
    code = "INVALID_PERIOD"

    def __init__(self, message: str = "Period start must be before period end"):
        super().__init__(message)


class InvalidServiceChargesError(BillingError):
    code = "INVALID_SERVICE_CHARGES"


class InvalidReadingError(BillingError):
    code = "INVALID_READING"


class InvalidWaterCostError(BillingError):
    code = "INVALID_WATER_COST"

    def __init__(self, message: str = "Water cost must be non-negative"):
        super().__init__(message)


class UserNotFoundError(BillingError):
    code = "USER_NOT_FOUND"
    http_status = 404

    def __init__(self, user_id: int):
        super().__init__(f"User with ID {user_id} not found")


class RentalNotFoundError(BillingError):
    code = "RENTAL_NOT_FOUND"
    http_status = 404

    def __init__(self, rental_id: int):
        super().__init__(f"Rental with ID {rental_id} not found")


class InvoiceNotFoundError(BillingError):
    code = "INVOICE_NOT_FOUND"
    http_status = 404

    def __init__(self, invoice_id: int):
        super().__init__(f"Invoice with ID {invoice_id} not found")


class InvoiceAccessDeniedError(BillingError):
    code = "INVOICE_ACCESS_DENIED"
    http_status = 403

    def __init__(self, message: str = "You do not have permission to access this invoice"):
        super().__init__(message)


def error_response(error: BillingError) -> dict:
    """Create a standardized error response body."""
    return {
        "error": {
            "code": error.code,
            "message": error.message,
        }
    }


__all__ = [
    "BillingError",
    "ElectricityBillNotFoundError",
    "ElectricityBillPropertyMismatchError",
    "PropertyNotFoundError",
    "PropertyNoAdministratorsError",
    "InvalidHeadcountError",
    "InvalidElectricityBillError",
    "InvalidPeriodError",
    "InvalidServiceChargesError",
    "InvalidReadingError",
    "InvalidWaterCostError",
    "RentalNotFoundError",
    "UserNotFoundError",
    "InvoiceNotFoundError",
    "InvoiceAccessDeniedError",
    "error_response",
]
