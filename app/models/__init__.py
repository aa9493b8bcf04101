"""Pydantic wire models for the currency service."""

from .constants import (
    HTTP_CLIENT_CLOSED_REQUEST,
    RATE_PROVIDERS,
    REFERENCE_BASE_CURRENCY,
)  # re-export
from .money import ConvertRequest, ErrorBody, Money

__all__ = [
    "HTTP_CLIENT_CLOSED_REQUEST",
    "RATE_PROVIDERS",
    "REFERENCE_BASE_CURRENCY",
    "ConvertRequest",
    "ErrorBody",
    "Money",
]
