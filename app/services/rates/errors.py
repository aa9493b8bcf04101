from __future__ import annotations

"""Typed conversion failures.

Callers decide on retry policy: ``RateUnavailable`` is permanent for the pair
at that moment, ``ProviderUnreachable`` is transient.
"""


class ConversionError(Exception):
    code = "conversion_error"


class RateUnavailable(ConversionError):
    code = "rate_unavailable"

    def __init__(self, base: str, target: str, reason: str = "no rate for pair"):
        self.base = base
        self.target = target
        super().__init__(f"{reason}: {base}->{target}")


class ProviderUnreachable(ConversionError):
    code = "provider_unreachable"


class InvalidAmount(ConversionError):
    code = "invalid_amount"


class ConversionCancelled(ConversionError):
    code = "conversion_cancelled"
