"""Application factory and server entry point."""

import logging

import uvicorn
from dotenv import load_dotenv
from fastapi import FastAPI, Request
from fastapi.responses import JSONResponse

from billing.api.invoices import router as invoices_router
from billing.config import Settings, get_settings
from billing.errors import BillingError, error_response
from billing.services import build_generation_service
from billing.services.db import create_db_engine, create_session_factory
from billing.services.logging import setup_server_logging

logger = logging.getLogger(__name__)


def create_app(settings: Settings | None = None) -> FastAPI:
    """Build the FastAPI app with its engine and services.

    Everything the request handlers need is created here once and kept on
    app.state.
    """
    settings = settings or get_settings()

    app = FastAPI(title=settings.api_title, version=settings.api_version)

    engine = create_db_engine(settings)
    session_factory = create_session_factory(engine)
    app.state.settings = settings
    app.state.engine = engine
    app.state.session_factory = session_factory
    app.state.invoice_generation_service = build_generation_service(session_factory, settings)

    @app.exception_handler(BillingError)
    async def billing_error_handler(request: Request, exc: BillingError) -> JSONResponse:
        if exc.http_status >= 500:
            logger.error("%s %s failed: %s", request.method, request.url.path, exc.message)
        else:
            logger.info("%s %s rejected: %s (%s)", request.method, request.url.path, exc.message, exc.code)
        return JSONResponse(status_code=exc.http_status, content=error_response(exc))

    app.include_router(invoices_router)

    @app.get("/health")
    async def health() -> dict:
        return {"status": "ok"}

    return app


def main(host: str = "0.0.0.0", port: int = 8000) -> None:
    """Run the API server."""
    load_dotenv()
    settings = get_settings()
    setup_server_logging(settings.log_file, settings.log_level, sql_echo=settings.database_echo)
    logger.info("Starting %s %s on %s:%d", settings.api_title, settings.api_version, host, port)
    uvicorn.run(create_app(settings), host=host, port=port)


if __name__ == "__main__":
    main()
