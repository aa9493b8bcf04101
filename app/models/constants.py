"""Domain constants shared by routers and services."""

from typing import Set

# Pseudo status for "client went away"; never reaches a connected client.
HTTP_CLIENT_CLOSED_REQUEST = 499

SUPPORTED_CURRENCIES_FILE = "supported_currencies.json"
REFERENCE_RATES_FILE = "currency_conversion.json"

# Reference rates in the bundled table are quoted per 1 EUR.
REFERENCE_BASE_CURRENCY = "EUR"

RATE_PROVIDERS: Set[str] = {"static", "external-http"}
