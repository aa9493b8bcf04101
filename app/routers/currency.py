from __future__ import annotations

import logging
from typing import List

from fastapi import APIRouter, Depends, Request

from app.core.errors import UnsupportedCurrency
from app.models.money import ConvertRequest, ErrorBody, Money
from app.services.currency_data import CurrencyDataProvider
from app.services.rates.conversion import ConversionService
from app.services.rates.errors import ConversionError

"""Currency router.

Endpoints:
    - GET  /supported -> list of supported currency codes
    - POST /convert   -> {"from": {currency_code, units, nanos}, "to": "EUR"}

Codes are checked against the supported list here; the conversion service
itself does not validate them.
"""

router = APIRouter(tags=["currency"])

logger = logging.getLogger("app.routers.currency")


def get_currency_data(request: Request) -> CurrencyDataProvider:
    return request.app.state.currency_data


def get_conversion_service(request: Request) -> ConversionService:
    return request.app.state.conversion_service


@router.get("/supported", response_model=List[str], summary="List supported currency codes")
async def supported(
    data: CurrencyDataProvider = Depends(get_currency_data),
) -> List[str]:
    return data.supported_codes()


@router.post(
    "/convert",
    response_model=Money,
    summary="Convert an amount to another currency",
    responses={
        400: {"model": ErrorBody, "description": "Unsupported currency or invalid amount"},
        404: {"model": ErrorBody, "description": "No rate for the currency pair"},
        503: {"model": ErrorBody, "description": "Rate provider unreachable or timed out"},
    },
)
async def convert(
    payload: ConvertRequest,
    data: CurrencyDataProvider = Depends(get_currency_data),
    svc: ConversionService = Depends(get_conversion_service),
) -> Money:
    logger.info("received conversion request")
    for code in (payload.from_.currency_code, payload.to):
        if not data.is_supported(code):
            raise UnsupportedCurrency(code)
    try:
        result = await svc.convert(payload.from_.to_amount(), payload.to)
    except ConversionError as e:
        logger.error("conversion request failed: %s", e)
        raise
    return Money.from_amount(result)
