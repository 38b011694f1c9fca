import logging

from fastapi import FastAPI, Request
from fastapi.responses import JSONResponse

from .config import settings
from .errors import (
    BillingError,
    DocumentImmutableError,
    DocumentNotEditableError,
    DocumentNotFoundError,
    InvalidTransitionError,
    LineItemNotFoundError,
    RetryableError,
    ValidationError,
)
from .routes import api_router

logger = logging.getLogger(__name__)

ERROR_STATUS = (
    (ValidationError, 422),
    ((DocumentNotFoundError, LineItemNotFoundError), 404),
    ((InvalidTransitionError, DocumentNotEditableError, DocumentImmutableError), 409),
    (RetryableError, 503),
)


def configure_logging() -> None:
    logging.basicConfig(
        level=settings.log_level.upper(),
        format="%(asctime)s %(levelname)s %(name)s: %(message)s",
    )


def error_body(exc: BillingError) -> dict:
    body = {"code": exc.code, "detail": str(exc)}
    for key, value in vars(exc).items():
        body[key] = list(value) if isinstance(value, tuple) else value
    return body


configure_logging()

app = FastAPI(title="billing_web")

app.include_router(api_router)


@app.exception_handler(BillingError)
def billing_error_handler(request: Request, exc: BillingError) -> JSONResponse:
    status_code = 400
    for error_types, status in ERROR_STATUS:
        if isinstance(exc, error_types):
            status_code = status
            break
    headers = {"Retry-After": "1"} if isinstance(exc, RetryableError) else None
    if status_code >= 500:
        logger.warning("%s %s failed: %s", request.method, request.url.path, exc)
    return JSONResponse(error_body(exc), status_code=status_code, headers=headers)


@app.get("/health", tags=["health"])
def health_check() -> dict:
    return {"status": "ok"}
