from fastapi import Request
from fastapi.responses import JSONResponse
from fastapi.exceptions import RequestValidationError
from starlette import status
import logging

from app.models.constants import HTTP_CLIENT_CLOSED_REQUEST
from app.services.rates.errors import (
    ConversionCancelled,
    ConversionError,
    InvalidAmount,
    ProviderUnreachable,
    RateUnavailable,
)

logger = logging.getLogger("app.errors")


class UnsupportedCurrency(Exception):
    code = "unsupported_currency"

    def __init__(self, code: str):
        self.currency_code = code
        super().__init__(f"currency {code} is not supported")


_CONVERSION_STATUS = {
    RateUnavailable: status.HTTP_404_NOT_FOUND,
    ProviderUnreachable: status.HTTP_503_SERVICE_UNAVAILABLE,
    InvalidAmount: status.HTTP_400_BAD_REQUEST,
    ConversionCancelled: HTTP_CLIENT_CLOSED_REQUEST,
}


def _error(status_code: int, error: str, detail) -> JSONResponse:  # type: ignore[no-untyped-def]
    return JSONResponse(status_code=status_code, content={"error": error, "detail": detail})


def not_found_handler(request: Request, exc):  # type: ignore
    if exc.status_code != status.HTTP_404_NOT_FOUND:
        return _error(exc.status_code, "http_error", str(exc.detail))
    return _error(
        status.HTTP_404_NOT_FOUND,
        "not_found",
        f"No route for {request.method} {request.url.path}",
    )


def validation_error_handler(request: Request, exc: RequestValidationError):  # type: ignore
    return _error(
        status.HTTP_422_UNPROCESSABLE_ENTITY,
        "validation_error",
        # ctx may carry exception instances, which are not JSON serializable
        [{k: v for k, v in e.items() if k != "ctx"} for e in exc.errors()],
    )


def unsupported_currency_handler(request: Request, exc: UnsupportedCurrency):  # type: ignore
    return _error(status.HTTP_400_BAD_REQUEST, exc.code, str(exc))


def conversion_error_handler(request: Request, exc: ConversionError):  # type: ignore
    status_code = _CONVERSION_STATUS.get(type(exc), status.HTTP_502_BAD_GATEWAY)
    return _error(status_code, exc.code, str(exc))


def server_error_handler(request: Request, exc: Exception):  # type: ignore
    logger.exception("unhandled exception")
    return _error(
        status.HTTP_500_INTERNAL_SERVER_ERROR,
        "internal_error",
        "An unexpected error occurred.",
    )
