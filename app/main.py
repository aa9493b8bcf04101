import logging

from fastapi import FastAPI
from fastapi.exceptions import RequestValidationError
from starlette.exceptions import HTTPException as StarletteHTTPException
from .core.config import get_settings, Settings
from .core.logging import init_logging, request_context_middleware
from .core import errors
from .routers import health, currency
from .services.currency_data import JsonCurrencyDataProvider
from .services.rates.base import RateProvider
from .services.rates.conversion import ConversionService
from .services.rates.errors import ConversionError
from .services.rates.providers import make_rate_provider


def create_app(
    settings_override: Settings | None = None,
    rate_provider_override: RateProvider | None = None,
) -> FastAPI:
    """Application factory.

    settings_override: pass an already constructed Settings instance for tests
    to isolate environment. Falls back to cached get_settings().
    rate_provider_override: bypass provider selection (tests, harnesses).
    """
    settings = settings_override or get_settings()
    if settings_override is not None:
        settings.init_post_load()
    # Initialize logging early
    init_logging(debug=settings.debug)

    # Reference data is resolved once; a broken data dir is fatal
    try:
        currency_data = JsonCurrencyDataProvider(settings.currency_data_dir)
    except (OSError, ValueError):
        logging.getLogger("app").exception("failed to load currency data on startup")
        raise

    provider = rate_provider_override or make_rate_provider(settings, currency_data)

    app = FastAPI(
        title=settings.app_name, debug=settings.debug, version=settings.version
    )
    app.state.settings = settings
    app.state.currency_data = currency_data
    app.state.conversion_service = ConversionService(
        provider, timeout_seconds=settings.http_timeout_seconds
    )

    # Middleware (request id / structured logging)
    app.middleware("http")(request_context_middleware)

    # Error handlers
    app.add_exception_handler(StarletteHTTPException, errors.not_found_handler)
    app.add_exception_handler(RequestValidationError, errors.validation_error_handler)
    app.add_exception_handler(errors.UnsupportedCurrency, errors.unsupported_currency_handler)
    app.add_exception_handler(ConversionError, errors.conversion_error_handler)
    app.add_exception_handler(Exception, errors.server_error_handler)

    # Routers
    app.include_router(health.router)
    app.include_router(currency.router)

    @app.get("/")
    async def root():
        return {"message": settings.app_name, "version": settings.version}

    return app


app = create_app()
