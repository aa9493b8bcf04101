from __future__ import annotations

from pydantic import BaseModel, ConfigDict, Field, field_validator

from app.services.money import MoneyAmount, NANOS_PER_UNIT


def _normalize_code(v: str) -> str:
    v = v.strip().upper()
    if len(v) != 3 or not v.isalpha():
        raise ValueError("currency code must be 3 letters")
    return v


class Money(BaseModel):
    """Wire representation: currency_code, units, nanos (billionths)."""

    currency_code: str = Field(..., examples=["USD"])
    units: int = 0
    nanos: int = Field(0, gt=-NANOS_PER_UNIT, lt=NANOS_PER_UNIT)

    @field_validator("currency_code")
    @classmethod
    def valid_code(cls, v: str) -> str:
        return _normalize_code(v)

    def to_amount(self) -> MoneyAmount:
        return MoneyAmount(self.currency_code, self.units, self.nanos)

    @classmethod
    def from_amount(cls, amount: MoneyAmount) -> "Money":
        return cls(
            currency_code=amount.currency_code,
            units=int(amount.units),
            nanos=int(amount.nanos),
        )


class ConvertRequest(BaseModel):
    model_config = ConfigDict(populate_by_name=True)

    from_: Money = Field(..., alias="from")
    to: str = Field(..., examples=["EUR"])

    @field_validator("to")
    @classmethod
    def valid_target(cls, v: str) -> str:
        return _normalize_code(v)


class ErrorBody(BaseModel):
    error: str
    detail: str | list
