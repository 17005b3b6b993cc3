# invoice_api/main.py

import logging
from contextlib import asynccontextmanager

from fastapi import Depends, FastAPI, Request, status
from fastapi.exceptions import RequestValidationError
from fastapi.responses import JSONResponse, PlainTextResponse

from invoice_api.api.dispatch import router as resources_router
from invoice_api.api.responses import write_error
from invoice_api.config import API_PREFIX, get_settings
from invoice_api.db.engine import get_engine
from invoice_api.db.schema import metadata
from invoice_api.db.store import Store, get_store
from invoice_api.errors import (
    INTERNAL_SERVER_ERROR_MSG,
    PARSE_ERROR_MSG,
    ApiError,
    InternalError,
)

logger = logging.getLogger(__name__)


def setup_logging(level: str = "INFO") -> None:
    logging.basicConfig(
        level=getattr(logging, level.upper(), logging.INFO),
        format="%(asctime)s [%(levelname)s] %(message)s",
    )


@asynccontextmanager
async def lifespan(app: FastAPI):
    settings = get_settings()
    setup_logging(settings.log_level)
    # CREATE TABLE only for tables that are missing
    metadata.create_all(get_engine())
    logger.info("Invoice API started")
    yield
    logger.info("Invoice API shutting down")


app = FastAPI(
    title="Invoice API",
    version="0.1.0",
    lifespan=lifespan,
)


@app.get(API_PREFIX + "/health", response_class=PlainTextResponse)
def health_check(store: Store = Depends(get_store)):
    if not store.ping():
        return PlainTextResponse(
            "Database connection failed",
            status_code=status.HTTP_503_SERVICE_UNAVAILABLE,
        )
    return "OK"


app.include_router(resources_router)


@app.exception_handler(ApiError)
async def api_error_handler(request: Request, exc: ApiError):
    return write_error(exc)


@app.exception_handler(RequestValidationError)
async def request_validation_handler(request: Request, exc: RequestValidationError):
    logger.info("Unparsable request body on %s: %s", request.url.path, exc.errors())
    return JSONResponse(
        status_code=status.HTTP_400_BAD_REQUEST,
        content={"detail": PARSE_ERROR_MSG},
    )


@app.exception_handler(Exception)
async def unhandled_error_handler(request: Request, exc: Exception):
    logger.error("Unhandled exception on %s: %s", request.url.path, exc, exc_info=exc)
    return write_error(InternalError(INTERNAL_SERVER_ERROR_MSG))
