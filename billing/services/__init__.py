"""Billing services and their explicit wiring.

The API app factory and the CLI call build_generation_service() once at
startup and pass the result down; no service is a module-level singleton.
"""

from sqlalchemy.orm import Session, sessionmaker

from billing.config import Settings
from billing.services.allocation_service import CostAllocator
from billing.services.invoice_generation_service import InvoiceGenerationService
from billing.services.transaction import TransactionManager


def build_generation_service(
    session_factory: sessionmaker[Session],
    settings: Settings,
) -> InvoiceGenerationService:
    """Wire the invoice generation service from settings."""
    return InvoiceGenerationService(
        transaction_manager=TransactionManager(
            session_factory, max_retries=settings.transaction_max_retries
        ),
        allocator=CostAllocator(igv_rate=settings.igv_rate),
    )


__all__ = ["build_generation_service"]
