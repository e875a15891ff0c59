"""Application configuration and router setup."""

import fastapi
import structlog
from fastapi.middleware import cors
from fastapi.responses import JSONResponse

from components.core import init_db
from components.core.config import get_settings
from components.core.exceptions import LedgerError
from components.core.logging import configure_logging
from components.core.schemas import ErrorResponse
from restapi.endpoints import (
    accounts,
    auth,
    bills,
    budgets,
    categories,
    goals,
    health_check,
    reports,
    transactions,
    transfers,
    user,
)

logger = structlog.get_logger(__name__)

ERROR_RESPONSES = {
    status_code: {"model": ErrorResponse} for status_code in (400, 404, 409, 500)
}


def register_exception_handlers(app: fastapi.FastAPI) -> None:
    """Translate ledger errors into JSON error responses."""

    @app.exception_handler(LedgerError)
    async def ledger_error_handler(request: fastapi.Request, exc: LedgerError) -> JSONResponse:
        log = logger.error if exc.status_code >= 500 else logger.info
        log(
            "request_failed",
            path=request.url.path,
            method=request.method,
            code=exc.code,
            detail=exc.message,
        )
        return JSONResponse(status_code=exc.status_code, content=exc.to_dict())


def create_app() -> fastapi.FastAPI:
    """Create and configure the FastAPI application."""
    configure_logging()
    settings = get_settings()

    app = fastapi.FastAPI(
        title="Finance Ledger",
        description="Personal finance tracking API",
        version=settings.API_VERSION,
        debug=settings.DEBUG,
        lifespan=init_db.lifespan,
    )

    # Initialize database
    init_db.init_db(app)
    register_exception_handlers(app)

    # Add CORS middleware
    app.add_middleware(
        cors.CORSMiddleware,
        allow_origins=["*"],
        allow_credentials=True,
        allow_methods=["*"],
        allow_headers=["*"],
    )

    # Include routers
    app.include_router(health_check.router)
    app.include_router(auth.router)
    app.include_router(user.router)
    for ledger_router in (accounts, categories, transactions, transfers, budgets, goals, bills, reports):
        app.include_router(ledger_router.router, responses=ERROR_RESPONSES)

    return app
