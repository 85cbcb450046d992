"""CLI entry point for generating a property's invoices for a period.

Usage:
    python -m billing.cli.generate_invoices --property-id 1 --bill-id 7 \
        --month 3 --year 2025 --water-cost 300

Exit Codes:
    0 - Success: missing invoices created (possibly none)
    1 - Failure: nothing was written

Logging:
    LOG_LEVEL (default INFO) to both stdout and LOG_FILE (logs/server.log)
"""

import argparse
import logging
import sys
from decimal import Decimal, InvalidOperation

from dotenv import load_dotenv

from billing.config import get_settings
from billing.errors import BillingError
from billing.services import build_generation_service
from billing.services.db import create_db_engine, create_session_factory
from billing.services.logging import setup_server_logging

logger = logging.getLogger("billing.cli")


def _decimal(value: str) -> Decimal:
    try:
        amount = Decimal(value)
    except InvalidOperation as e:
        raise argparse.ArgumentTypeError(f"invalid amount: {value!r}") from e
    if not amount.is_finite():
        raise argparse.ArgumentTypeError(f"invalid amount: {value!r}")
    return amount


def build_parser() -> argparse.ArgumentParser:
    parser = argparse.ArgumentParser(
        prog="generate-invoices",
        description="Prorate an electricity bill and water cost into tenant invoices.",
    )
    parser.add_argument("--property-id", type=int, required=True)
    parser.add_argument("--bill-id", type=int, required=True, help="Electricity bill ID")
    parser.add_argument("--month", type=int, required=True, help="Billing month (1-12)")
    parser.add_argument("--year", type=int, required=True, help="Billing year")
    parser.add_argument("--water-cost", type=_decimal, required=True, help="Total water cost")
    parser.add_argument("--actor-id", type=int, default=None, help="Administrator user ID")
    return parser


def main(argv: list[str] | None = None) -> int:
    """
    Generate invoices and print one line per created invoice.

    Returns:
        Exit code: 0 for success, 1 for failure
    """
    args = build_parser().parse_args(argv)

    load_dotenv()
    settings = get_settings()
    setup_server_logging(settings.log_file, settings.log_level, sql_echo=settings.database_echo)

    engine = create_db_engine(settings)
    try:
        service = build_generation_service(create_session_factory(engine), settings)
        invoices = service.generate(
            property_id=args.property_id,
            electricity_bill_id=args.bill_id,
            month=args.month,
            year=args.year,
            water_cost=args.water_cost,
            actor_id=args.actor_id,
        )
    except BillingError as e:
        logger.error("Invoice generation rejected: %s (%s)", e.message, e.code)
        return 1
    except KeyboardInterrupt:
        logger.warning("Invoice generation interrupted by user")
        return 1
    except Exception as e:
        logger.error("Invoice generation failed: %s", e, exc_info=True)
        return 1
    finally:
        engine.dispose()

    for invoice in invoices:
        print(
            f"invoice {invoice.id}: rental={invoice.rental_id} "
            f"water={invoice.water_cost} energy={invoice.energy_cost} total={invoice.total_cost}"
        )
    logger.info("Created %d invoices", len(invoices))
    return 0


if __name__ == "__main__":
    sys.exit(main())
