"""
FastAPI application factory.

``create_app`` wires configuration, the database session factory, the
derivation engine and the clock onto ``app.state``; routes reach them only
through ``invoice_api.dependencies``.
"""

from __future__ import annotations

import uuid

from fastapi import FastAPI, Request
from sqlalchemy.orm import Session, sessionmaker

from invoice_api import auth_routes, invoice_routes
from invoice_api.errors import handle_unexpected, register_exception_handlers
from invoice_config import AppConfig, get_active_config
from invoice_kernel import __version__
from invoice_kernel.db.engine import get_session_factory, init_engine_from_url
from invoice_kernel.domain.clock import Clock, SystemClock
from invoice_kernel.domain.derivation import DerivationEngine
from invoice_kernel.logging_config import LogContext, configure_logging, get_logger

logger = get_logger("api.app")

TRACE_ID_HEADER = "X-Trace-Id"


def create_app(
    config: AppConfig | None = None,
    *,
    session_factory: sessionmaker[Session] | None = None,
    clock: Clock | None = None,
) -> FastAPI:
    """
    Build the application.

    Args:
        config: Application configuration.  Defaults to get_active_config().
        session_factory: Session factory to use.  When omitted the kernel
            engine is initialized from config.database_url.
        clock: Clock for timestamps and token expiry.  Defaults to SystemClock.
    """
    config = config or get_active_config()
    configure_logging(level=config.log_level)

    if session_factory is None:
        init_engine_from_url(config.database_url)
        session_factory = get_session_factory()

    app = FastAPI(
        title="Invoicing API",
        description="Accounts and invoices with derived fee, tax and total.",
        version=__version__,
    )
    app.state.config = config
    app.state.session_factory = session_factory
    app.state.clock = clock or SystemClock()
    app.state.derivation_engine = DerivationEngine(config.default_rates)

    @app.middleware("http")
    async def trace_requests(request: Request, call_next):
        trace_id = request.headers.get(TRACE_ID_HEADER) or str(uuid.uuid4())
        request.state.trace_id = trace_id
        with LogContext.bind(trace_id=trace_id, request_path=request.url.path):
            try:
                response = await call_next(request)
            except Exception as exc:
                # Unhandled errors skip the inner handlers; answer while the trace is bound
                response = await handle_unexpected(request, exc)
            logger.info(
                "request_completed",
                extra={"method": request.method, "status": response.status_code},
            )
        response.headers[TRACE_ID_HEADER] = trace_id
        return response

    register_exception_handlers(app)

    @app.get("/up")
    def health_check() -> dict[str, str]:
        return {"status": "ok"}

    app.include_router(auth_routes.router)
    app.include_router(invoice_routes.router)

    logger.info(
        "app_created",
        extra={
            "default_fee_rate": str(config.default_fee_rate),
            "default_tax_rate": str(config.default_tax_rate),
        },
    )
    return app
