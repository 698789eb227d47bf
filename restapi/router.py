"""Application configuration and router setup."""

from contextlib import asynccontextmanager

import fastapi
from fastapi import Request
from fastapi.middleware import cors
from fastapi.openapi.utils import get_openapi
from fastapi.responses import JSONResponse

from components.core import init_db
from components.core.config import get_settings
from components.core.exceptions import (
    InvalidReferenceError,
    LedgerError,
    NotFoundError,
    StorageFailure,
    UnsupportedBackendError,
)
from components.core.log_config import configure_logging, get_logger
from restapi.endpoints import accounts, auth, budgets, categories, health_check, transactions

logger = get_logger(__name__)

_STATUS_BY_ERROR = (
    (NotFoundError, 404),
    (InvalidReferenceError, 422),
    (StorageFailure, 503),
    (UnsupportedBackendError, 501),
)


async def ledger_error_handler(request: Request, exc: LedgerError) -> JSONResponse:
    """Map typed ledger errors to JSON responses."""
    status_code = next((code for cls, code in _STATUS_BY_ERROR if isinstance(exc, cls)), 400)
    logger.info(
        "Request rejected",
        extra={"path": request.url.path, "code": exc.code, "status_code": status_code},
    )
    return JSONResponse(status_code=status_code, content={"detail": exc.message, "code": exc.code})


@asynccontextmanager
async def lifespan(app: fastapi.FastAPI):
    if get_settings().AUTO_CREATE_TABLES:
        await init_db.db_manager.create_tables()
    yield


def create_app() -> fastapi.FastAPI:
    """Create and configure the FastAPI application."""
    settings = get_settings()
    configure_logging(settings.LOG_LEVEL)

    app = fastapi.FastAPI(
        title="Envelope Budget",
        description="Envelope budgeting ledger with monthly rollover",
        version="1.0.0",
        lifespan=lifespan,
    )


    # Add CORS middleware
    app.add_middleware(
        cors.CORSMiddleware,
        allow_origins=["*"],
        allow_credentials=True,
        allow_methods=["*"],
        allow_headers=["*"],
    )

    app.add_exception_handler(LedgerError, ledger_error_handler)

    # Include routers
    app.include_router(health_check.router)
    app.include_router(auth.router)
    app.include_router(accounts.router)
    app.include_router(categories.router)
    app.include_router(transactions.router)
    app.include_router(budgets.router)

    def custom_openapi():
        if app.openapi_schema:
            return app.openapi_schema
        openapi_schema = get_openapi(
            title="Envelope Budget",
            version="1.0.0",
            description="Envelope budgeting ledger with monthly rollover",
            routes=app.routes,
        )
        app.openapi_schema = openapi_schema
        return app.openapi_schema

    app.openapi = custom_openapi

    return app
