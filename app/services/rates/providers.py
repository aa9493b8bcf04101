from __future__ import annotations

"""Concrete rate providers and factory.

'static' answers from the bundled ECB reference table (cross rate via EUR);
'external-http' asks the live exchange rate API for every lookup. Optional
wrappers add artificial latency (test harnesses) and TTL caching.
"""
import asyncio
import logging
import math
import random
from typing import TYPE_CHECKING, Iterable, Optional, Tuple

import httpx

from app.services.currency_data import CurrencyDataProvider
from app.services.http_client import HttpError, HttpTimeout, get_json
from .base import RateProvider
from .cache_service import RateCache
from .errors import ProviderUnreachable, RateUnavailable

if TYPE_CHECKING:  # pragma: no cover
    from app.core.config import Settings

logger = logging.getLogger("app.rates")


class StaticRateProvider(RateProvider):
    name = "static"

    def __init__(self, currency_data: CurrencyDataProvider):
        self._data = currency_data

    async def lookup_rate(self, base_currency: str, target_currency: str) -> float:  # type: ignore[override]
        try:
            base = self._data.get(base_currency)
            target = self._data.get(target_currency)
        except KeyError as e:
            raise RateUnavailable(base_currency, target_currency) from e
        if base.eur_rate <= 0:
            raise RateUnavailable(base_currency, target_currency, "invalid reference rate")
        return target.eur_rate / base.eur_rate


class ExternalHTTPRateProvider(RateProvider):
    """exchangeratesapi.io style API: GET /latest?base=USD&symbols=EUR."""

    name = "external-http"

    def __init__(
        self,
        base_url: str,
        timeout: float = 5.0,
        transport: Optional[httpx.AsyncBaseTransport] = None,
    ):
        self._base_url = base_url.rstrip("/")
        self._timeout = timeout
        self._transport = transport

    async def lookup_rate(self, base_currency: str, target_currency: str) -> float:  # type: ignore[override]
        url = f"{self._base_url}/latest"
        params = {"base": base_currency, "symbols": target_currency}
        try:
            data = await get_json(
                url, params=params, timeout=self._timeout, transport=self._transport
            )
        except HttpTimeout as e:
            raise ProviderUnreachable(str(e)) from e
        except HttpError as e:
            # 4xx: the API rejected the pair (unknown base or symbol)
            if e.status_code is not None and 400 <= e.status_code < 500:
                raise RateUnavailable(
                    base_currency, target_currency, f"provider rejected pair ({e.status_code})"
                ) from e
            raise ProviderUnreachable(str(e)) from e

        rates = data.get("rates") or {}
        if not isinstance(rates, dict):
            raise ProviderUnreachable(f"malformed rates payload for {base_currency}")
        factor = rates.get(target_currency)
        if factor is None:
            raise RateUnavailable(base_currency, target_currency)
        try:
            factor = float(factor)
        except (TypeError, ValueError) as e:
            raise ProviderUnreachable(f"malformed rate {factor!r} for {target_currency}") from e
        if not math.isfinite(factor):
            raise ProviderUnreachable(f"malformed rate {factor!r} for {target_currency}")
        if factor <= 0:
            raise RateUnavailable(base_currency, target_currency, "non-positive rate")
        return factor


class DelayedRateProvider(RateProvider):
    """Injects random latency before delegating, for chosen target currencies.

    Test harness hook only; disabled unless currencies are configured.
    """

    def __init__(
        self,
        inner: RateProvider,
        currencies: Iterable[str],
        delay_ms: Tuple[int, int] = (1000, 2000),
    ):
        self._inner = inner
        self._currencies = {c.upper() for c in currencies}
        self._delay_ms = delay_ms
        self.name = inner.name

    async def lookup_rate(self, base_currency: str, target_currency: str) -> float:  # type: ignore[override]
        if target_currency.upper() in self._currencies:
            delay = random.randint(*self._delay_ms)
            logger.info("Slowing down request by %d", delay)
            await asyncio.sleep(delay / 1000)
        return await self._inner.lookup_rate(base_currency, target_currency)


class CachingRateProvider(RateProvider):
    def __init__(self, inner: RateProvider, cache: RateCache):
        self._inner = inner
        self._cache = cache
        self.name = inner.name

    async def lookup_rate(self, base_currency: str, target_currency: str) -> float:  # type: ignore[override]
        cached = self._cache.get(base_currency, target_currency)
        if cached is not None:
            return cached
        rate = await self._inner.lookup_rate(base_currency, target_currency)
        self._cache.put(base_currency, target_currency, rate)
        return rate


def make_rate_provider(
    settings: "Settings",
    currency_data: CurrencyDataProvider,
    transport: Optional[httpx.AsyncBaseTransport] = None,
) -> RateProvider:
    kind = settings.exchange_rate_provider
    provider: RateProvider
    if kind == "static":
        provider = StaticRateProvider(currency_data)
    elif kind == "external-http":
        provider = ExternalHTTPRateProvider(
            str(settings.exchange_api_base_url),
            timeout=settings.http_timeout_seconds,
            transport=transport,
        )
    else:
        raise ValueError(f"Unknown rate provider kind '{kind}'")

    if settings.artificial_latency_currencies:
        provider = DelayedRateProvider(
            provider,
            settings.artificial_latency_currencies,
            settings.artificial_latency_ms,
        )
    if settings.rates_cache_ttl_seconds > 0:
        provider = CachingRateProvider(
            provider,
            RateCache(
                ttl_seconds=settings.rates_cache_ttl_seconds,
                max_entries=settings.rates_cache_max_entries,
            ),
        )
    logger.debug("rate provider configured: %s", kind)
    return provider
