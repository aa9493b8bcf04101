from __future__ import annotations

import asyncio
import logging
from typing import Optional

from app.services.money import MoneyAmount, carry, to_decimal_string, truncate
from .base import RateProvider
from .errors import ConversionCancelled, InvalidAmount, ProviderUnreachable

"""Currency conversion (source amount -> target currency).

Responsibilities:
    - Exactly one rate lookup per call, bounded by a timeout and optionally
      raced against a caller supplied cancel signal.
    - Apply the rate to units and nanos, carry, then truncate to whole nanos.
    - Never hand back a partial or uncarried amount: failures are typed
      exceptions (see errors.py).

No caching and no retry here; wrap the provider (CachingRateProvider) or the
call site if either is wanted.
"""

logger = logging.getLogger("app.conversion")


class ConversionService:
    def __init__(self, provider: RateProvider, timeout_seconds: float = 5.0):
        if timeout_seconds <= 0:
            raise ValueError("timeout_seconds must be positive")
        self._provider = provider
        self._timeout = timeout_seconds

    @property
    def provider(self) -> RateProvider:
        return self._provider

    async def convert(
        self,
        amount: MoneyAmount,
        to_code: str,
        *,
        cancel: Optional[asyncio.Event] = None,
    ) -> MoneyAmount:
        if not amount.is_carried():
            raise InvalidAmount(
                f"amount is not normalized: units={amount.units} nanos={amount.nanos}"
            )
        if cancel is not None and cancel.is_set():
            raise ConversionCancelled("cancelled before rate lookup")

        logger.info(
            "querying rate provider %s for %s->%s",
            self._provider.name,
            amount.currency_code,
            to_code,
        )
        factor = await self._lookup(amount.currency_code, to_code, cancel)

        # Truncation can push nanos to -10**9 for negative amounts; carry again.
        result = carry(truncate(carry(amount.scaled(factor))))
        result = result.with_currency(to_code)
        logger.info(
            "conversion request successful: %s -> %s (rate %s)",
            to_decimal_string(amount),
            to_decimal_string(result),
            factor,
        )
        return result

    async def _lookup(
        self, base: str, target: str, cancel: Optional[asyncio.Event]
    ) -> float:
        lookup = asyncio.wait_for(
            self._provider.lookup_rate(base, target), timeout=self._timeout
        )
        if cancel is None:
            try:
                return await lookup
            except asyncio.TimeoutError as e:
                raise ProviderUnreachable(
                    f"rate lookup {base}->{target} timed out after {self._timeout}s"
                ) from e

        lookup_task = asyncio.ensure_future(lookup)
        cancel_task = asyncio.ensure_future(cancel.wait())
        try:
            await asyncio.wait(
                {lookup_task, cancel_task}, return_when=asyncio.FIRST_COMPLETED
            )
        finally:
            for task in (lookup_task, cancel_task):
                if not task.done():
                    task.cancel()

        if cancel.is_set():
            if lookup_task.done() and not lookup_task.cancelled():
                lookup_task.exception()  # mark retrieved; result is discarded
            raise ConversionCancelled(f"rate lookup {base}->{target} abandoned")
        try:
            return lookup_task.result()
        except asyncio.TimeoutError as e:
            raise ProviderUnreachable(
                f"rate lookup {base}->{target} timed out after {self._timeout}s"
            ) from e
