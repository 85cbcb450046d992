"""Invoice API endpoints."""

import logging
from collections.abc import Generator
from datetime import datetime
from decimal import Decimal

from fastapi import APIRouter, Depends, Query, Request, status
from pydantic import BaseModel, ConfigDict, Field
from sqlalchemy.orm import Session

from billing.models.invoice import InvoiceStatus
from billing.services.invoice_generation_service import InvoiceGenerationService
from billing.services.invoice_service import InvoiceQueryService

logger = logging.getLogger(__name__)

router = APIRouter(prefix="/api", tags=["invoices"])


def get_db(request: Request) -> Generator[Session, None, None]:
    """Get a database session from the app's session factory."""
    db = request.app.state.session_factory()
    try:
        yield db
    finally:
        db.close()


def get_generation_service(request: Request) -> InvoiceGenerationService:
    return request.app.state.invoice_generation_service


class GenerateInvoicesPayload(BaseModel):
    """Request payload for POST /api/invoices/generate."""

    property_id: int = Field(..., gt=0, description="Property to bill")
    electricity_bill_id: int = Field(..., gt=0, description="Electricity bill to prorate")
    month: int = Field(..., ge=1, le=12, description="Billing month")
    year: int = Field(..., ge=2000, le=2100, description="Billing year")
    water_cost: Decimal = Field(
        ..., ge=0, allow_inf_nan=False, description="Total water cost to split equally"
    )
    actor_id: int | None = Field(None, description="Administrator triggering the run")


class InvoiceResponse(BaseModel):
    """Response schema for a single invoice."""

    id: int
    rental_id: int
    month: int
    year: int
    water_cost: Decimal
    energy_cost: Decimal
    total_cost: Decimal
    status: InvoiceStatus
    paid_at: datetime | None = None

    model_config = ConfigDict(from_attributes=True)


class InvoiceListResponse(BaseModel):
    invoices: list[InvoiceResponse]


@router.post(
    "/invoices/generate",
    response_model=InvoiceListResponse,
    status_code=status.HTTP_201_CREATED,
)
def generate_invoices(
    payload: GenerateInvoicesPayload,
    service: InvoiceGenerationService = Depends(get_generation_service),
) -> InvoiceListResponse:
    """Generate the missing invoices of a property for a period."""
    invoices = service.generate(
        property_id=payload.property_id,
        electricity_bill_id=payload.electricity_bill_id,
        month=payload.month,
        year=payload.year,
        water_cost=payload.water_cost,
        actor_id=payload.actor_id,
    )
    return InvoiceListResponse(
        invoices=[InvoiceResponse.model_validate(invoice) for invoice in invoices]
    )


@router.get("/invoices/{invoice_id}", response_model=InvoiceResponse)
def get_invoice(
    invoice_id: int,
    user_id: int | None = Query(None),
    is_admin: bool = Query(False),
    db: Session = Depends(get_db),
) -> InvoiceResponse:
    invoice = InvoiceQueryService(db).get_invoice(invoice_id, user_id=user_id, is_admin=is_admin)
    return InvoiceResponse.model_validate(invoice)


@router.get("/users/{user_id}/invoices", response_model=InvoiceListResponse)
def list_user_invoices(
    user_id: int,
    invoice_status: InvoiceStatus | None = Query(None, alias="status"),
    db: Session = Depends(get_db),
) -> InvoiceListResponse:
    """List a user's invoices, optionally only PAID or UNPAID ones."""
    invoices = InvoiceQueryService(db).list_user_invoices(user_id, status=invoice_status)
    return InvoiceListResponse(
        invoices=[InvoiceResponse.model_validate(invoice) for invoice in invoices]
    )


__all__ = ["router", "get_db", "get_generation_service"]
