import asyncio
from typing import Dict, List, Tuple

import pytest
from fastapi.testclient import TestClient

from app.core.config import Settings
from app.main import create_app
from app.services.currency_data import JsonCurrencyDataProvider
from app.services.rates.base import RateProvider
from app.services.rates.errors import RateUnavailable


class FakeRateProvider(RateProvider):
    """Answers from a fixed pair table and records every call."""

    name = "fake"

    def __init__(self, rates: Dict[Tuple[str, str], float], delay: float = 0.0):
        self.rates = rates
        self.delay = delay
        self.calls: List[Tuple[str, str]] = []
        self.cancelled = False

    async def lookup_rate(self, base_currency: str, target_currency: str) -> float:
        self.calls.append((base_currency, target_currency))
        if self.delay:
            try:
                await asyncio.sleep(self.delay)
            except asyncio.CancelledError:
                self.cancelled = True
                raise
        try:
            return self.rates[(base_currency, target_currency)]
        except KeyError as e:
            raise RateUnavailable(base_currency, target_currency) from e


@pytest.fixture
def settings() -> Settings:
    s = Settings(exchange_rate_provider="static", http_timeout_seconds=1.0)
    s.init_post_load()
    return s


@pytest.fixture
def currency_data(settings: Settings) -> JsonCurrencyDataProvider:
    return JsonCurrencyDataProvider(settings.currency_data_dir)


@pytest.fixture
def fake_provider() -> FakeRateProvider:
    return FakeRateProvider(
        {
            ("USD", "EUR"): 0.9,
            ("USD", "USD"): 1.0,
            ("EUR", "USD"): 2.0,
        }
    )


@pytest.fixture
def client(settings: Settings, fake_provider: FakeRateProvider) -> TestClient:
    app = create_app(settings_override=settings, rate_provider_override=fake_provider)
    return TestClient(app)


@pytest.fixture
def static_client(settings: Settings) -> TestClient:
    return TestClient(create_app(settings_override=settings))


@pytest.fixture
def provider_factory():
    return FakeRateProvider
