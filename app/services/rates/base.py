from __future__ import annotations

"""Rate provider abstraction.

A provider answers one question: how many units of ``target`` buy one unit
of ``base`` right now. Implementations raise ``RateUnavailable`` when the pair
is unknown and ``ProviderUnreachable`` on transport trouble.
"""
from abc import ABC, abstractmethod


class RateProvider(ABC):
    name: str = "abstract"

    @abstractmethod
    async def lookup_rate(self, base_currency: str, target_currency: str) -> float:
        """Return target units per 1 unit of base_currency."""
        raise NotImplementedError
