"""Money arithmetic helpers.

Amounts travel as (units, nanos): whole units plus billionths of a unit.
Centralized so conversion and any future endpoints use identical carry and
truncation semantics.
"""

from __future__ import annotations

import math
from dataclasses import dataclass, replace
from typing import Union

NANOS_PER_UNIT = 10**9

Number = Union[int, float]


@dataclass(frozen=True)
class MoneyAmount:
    currency_code: str
    units: Number
    nanos: Number

    def is_carried(self) -> bool:
        """True when the (units, nanos) pair is in canonical form."""
        if self.units != int(self.units) or self.nanos != int(self.nanos):
            return False
        if abs(self.nanos) >= NANOS_PER_UNIT:
            return False
        return not (
            (self.units > 0 and self.nanos < 0) or (self.units < 0 and self.nanos > 0)
        )

    def scaled(self, factor: float) -> "MoneyAmount":
        # Provisional product; must go through carry() before use.
        return replace(self, units=self.units * factor, nanos=self.nanos * factor)

    def with_currency(self, currency_code: str) -> "MoneyAmount":
        return replace(self, currency_code=currency_code)


def carry(amount: MoneyAmount) -> MoneyAmount:
    """Normalize ``amount`` so nanos fits in one unit and shares the sign of units.

    A fractional part left in ``units`` (after multiplying by a non-integer
    rate) is folded into ``nanos`` rather than dropped. Python's ``%`` and
    ``math.floor`` are floor based, so negative inputs need a final borrow to
    bring nanos back to the sign of units.
    """
    units, nanos = amount.units, amount.nanos
    nanos = nanos + (units % 1) * NANOS_PER_UNIT
    units = math.floor(units) + math.floor(nanos / NANOS_PER_UNIT)
    nanos = nanos % NANOS_PER_UNIT
    if units < 0 and nanos > 0:
        units += 1
        nanos -= NANOS_PER_UNIT
    return replace(amount, units=units, nanos=nanos)


def truncate(amount: MoneyAmount) -> MoneyAmount:
    """Drop precision below one nano (floor, not round)."""
    return replace(amount, units=math.floor(amount.units), nanos=math.floor(amount.nanos))


def to_decimal_string(amount: MoneyAmount) -> str:
    sign = "-" if amount.units < 0 or amount.nanos < 0 else ""
    return f"{sign}{abs(int(amount.units))}.{abs(int(amount.nanos)):09d} {amount.currency_code}"
