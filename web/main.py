"""
FastAPI web application for the revenue dashboard.
"""
from fastapi import FastAPI, Request
from fastapi.responses import JSONResponse, ORJSONResponse

from slowapi import _rate_limit_exceeded_handler
from slowapi.errors import RateLimitExceeded

from revenue.config import ConfigurationError, config, validate_config
from revenue.exceptions import (
    ConflictError,
    DuplicateError,
    NotFoundError,
    NotFoundTable,
    RevenueStoreError,
    UnknownError,
    ValidationError,
)
from revenue.observability import get_correlation_id, get_logger, setup_logging
from revenue.store import close_store, get_store
from web.config import VERSION
from web.middleware import RequestLoggingMiddleware
from web.routes import api
from web.routes.api._deps import limiter

# Use JSON format in production (LOG_FORMAT=json), human-readable otherwise
setup_logging(level=config.logging.level, json_format=config.logging.json_format)
logger = get_logger(__name__)

# Status codes per store error class; checked in order (most specific first)
ERROR_STATUS = (
    (ValidationError, 400),
    (NotFoundError, 404),
    (DuplicateError, 409),
    (ConflictError, 409),
    (NotFoundTable, 503),
    (UnknownError, 500),
    (RevenueStoreError, 500),
)

app = FastAPI(
    title="Revenue Dashboard",
    description="Multi-region revenue totals, charts and ledger management",
    version=VERSION,
    default_response_class=ORJSONResponse,
)

app.state.limiter = limiter
app.add_exception_handler(RateLimitExceeded, _rate_limit_exceeded_handler)


async def _error_response(request: Request, exc: Exception) -> JSONResponse:
    status_code = next(code for cls, code in ERROR_STATUS if isinstance(exc, cls))
    log = logger.warning if status_code < 500 else logger.error
    log(
        f"{type(exc).__name__} on {request.method} {request.url.path}: {exc}",
        extra={"status_code": status_code},
    )
    return JSONResponse(
        status_code=status_code,
        content={
            "error": type(exc).__name__,
            "detail": str(exc),
            "correlation_id": get_correlation_id(),
        },
    )


app.add_exception_handler(ValidationError, _error_response)
app.add_exception_handler(RevenueStoreError, _error_response)

# Add request logging middleware (adds correlation IDs and timing)
app.add_middleware(RequestLoggingMiddleware)

app.include_router(api.router, prefix="/api")


@app.on_event("startup")
async def startup_event():
    logger.info("Revenue dashboard starting...")

    # Validate configuration early - fail fast with clear errors
    try:
        validate_config()
        logger.info("Configuration validated")
    except ConfigurationError as e:
        logger.critical(f"Configuration error: {e}")
        raise SystemExit(1)

    store = await get_store()
    settings = await store.get_settings()
    logger.info(
        f"Store ready: {store.db_path} (exchange rate {settings.exchange_rate}, "
        f"ALE provisioned: {store.provision_ale})"
    )


@app.on_event("shutdown")
async def shutdown_event():
    await close_store()
    logger.info("Revenue dashboard stopped")


if __name__ == "__main__":
    import uvicorn

    from web.config import WEB_HOST, WEB_PORT

    uvicorn.run("web.main:app", host=WEB_HOST, port=WEB_PORT)
